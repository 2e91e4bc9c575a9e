#!/usr/bin/python
#
# (C) 2018 Dan Boneh, Riad S. Wahby <rsw@cs.stanford.edu>

# NOTE a failed verification is *not* an error: Proof.verify() returns False

class VRFError(Exception):
    pass

# caller passed parameters the scheme does not support; retrying won't help
class ParameterError(VRFError, ValueError):
    pass

# a search for a qualifying prime or key was abandoned; retrying may help
class GenerationFailure(VRFError, RuntimeError):
    pass

class KeyGenerationError(GenerationFailure):
    pass

# seed cannot be mapped into Z_n^*
class EncodingError(VRFError, ValueError):
    pass

# key or proof is malformed (wrong types, bad modulus, missing fields)
class StructuralError(VRFError, ValueError):
    pass
