#!/usr/bin/python
#
# (C) 2018 Dan Boneh, Riad S. Wahby <rsw@cs.stanford.edu>

import logging
import sys

from libVRFPy.defs import Defs
from libVRFPy.errors import KeyGenerationError, ParameterError, StructuralError
import libVRFPy.primes as lprimes
import libVRFPy.util as lutil

logger = logging.getLogger(__name__)

# the public half of the RSA trapdoor permutation x -> x^e mod n
class RSAPubKey(object):
    def __init__(self, n, e=Defs.public_exponent):
        self.n = n
        self.e = e

    @property
    def nbits(self):
        return self.n.bit_length()

    @property
    def nbytes(self):
        return (self.n.bit_length() + 7) // 8

    # raises StructuralError if this cannot be a key produced by make_key
    def check(self):
        for (name, val) in (("modulus", self.n), ("public exponent", self.e)):
            if not isinstance(val, int) or isinstance(val, bool):
                raise StructuralError("%s must be an integer, got %r" % (name, type(val).__name__))
        if self.n % 2 == 0 or self.n.bit_length() < Defs.min_modulus_bits:
            raise StructuralError("modulus must be odd and at least %d bits" % Defs.min_modulus_bits)
        if self.e < 3 or self.e % 2 == 0:
            raise StructuralError("public exponent must be odd and at least 3, got %d" % self.e)

    def apply_public(self, x):
        return pow(x, self.e, self.n)

    def get_public_key(self):
        return RSAPubKey(self.n, self.e)

    def __eq__(self, other):
        if not isinstance(other, RSAPubKey):
            return NotImplemented
        return (self.n, self.e) == (other.n, other.e)

    def __ne__(self, other):
        ret = self.__eq__(other)
        return ret if ret is NotImplemented else not ret

    def __hash__(self):
        return hash((self.n, self.e))

    def __repr__(self):
        return "RSAPubKey(%d-bit n=0x%x..., e=%d)" % (self.nbits, self.n >> max(0, self.nbits - 32), self.e)

class RSAKey(RSAPubKey):
    def __init__(self, p, q, e=Defs.public_exponent, confidence=Defs.default_confidence, rng=None):
        if p == q:
            raise KeyGenerationError("p and q must be distinct")
        for r in (p, q):
            if not lprimes.is_safe_prime(r, confidence, rng):
                raise KeyGenerationError("%d-bit factor is not a safe prime" % r.bit_length())

        # d must invert e mod phi(n); without it the permutation has no trapdoor
        phi = (p - 1) * (q - 1)
        d = lutil.invert_modp(e, phi)
        if d is None:
            raise KeyGenerationError("e=%d has no inverse mod (p-1)(q-1)" % e)

        self.p = p
        self.q = q
        self.d = d
        (self.dp, self.dq, self.qinv) = (None, None, None)

        RSAPubKey.__init__(self, p * q, e)

        assert (self.d * self.e) % phi == 1

    # cache CRT parameters; apply_private returns the same values either way
    def precompute(self):
        self.dp = self.d % (self.p - 1)
        self.dq = self.d % (self.q - 1)
        self.qinv = lutil.invert_modp(self.q, self.p)
        return self

    def apply_private(self, c):
        if self.qinv is None:
            return pow(c, self.d, self.n)

        m1 = pow(c, self.dp, self.p)
        m2 = pow(c, self.dq, self.q)
        h = (self.qinv * (m1 - m2)) % self.p
        return m2 + h * self.q

    def is_safe(self, confidence=Defs.default_confidence, rng=None):
        return lprimes.is_safe_prime(self.p, confidence, rng) and lprimes.is_safe_prime(self.q, confidence, rng)

    def __repr__(self):
        return "RSAKey(%d-bit n=0x%x..., e=%d)" % (self.nbits, self.n >> max(0, self.nbits - 32), self.e)

def make_key(nbits=Defs.default_key_bits, confidence=Defs.default_confidence, rng=None, deadline=None):
    """
    Build an RSA key whose modulus is the product of two safe primes and has
    exactly nbits bits, with e = Defs.public_exponent.

    rng and deadline are passed through to primes.gen_safe_prime. A deadline
    that fires raises GenerationFailure; nothing is retained from the attempt.
    """
    if not isinstance(nbits, int) or nbits < Defs.min_modulus_bits:
        raise ParameterError("modulus must have at least %d bits, got %r" % (Defs.min_modulus_bits, nbits))
    e = Defs.public_exponent

    # gen_safe_prime sets the top two bits, so the product has exactly pbits + qbits bits
    (pbits, qbits) = ((nbits + 1) // 2, nbits // 2)
    p = lprimes.gen_safe_prime(pbits, confidence, rng, deadline)

    for _ in range(0, Defs.max_key_retries):
        q = lprimes.gen_safe_prime(qbits, confidence, rng, deadline)
        if p == q or lutil.gcd(e, (p - 1) * (q - 1)) != 1:
            logger.debug("rejected safe prime pair for %d-bit key, regenerating q", nbits)
            continue

        key = RSAKey(p, q, e, confidence, rng)
        assert key.nbits == nbits
        logger.debug("constructed %d-bit key with e=%d", nbits, e)
        return key.precompute()

    raise KeyGenerationError("could not find a usable prime pair after %d attempts" % Defs.max_key_retries)

def main(nreps):
    import libVRFPy.test_util as tu     # pylint: disable=bad-option-value,import-outside-toplevel

    fixture_key = RSAKey(*tu.fixture_primes)

    def test_fixture_key():
        "RSA fixture,modulus,inverse,safe,crt"

        phi = (fixture_key.p - 1) * (fixture_key.q - 1)
        crt_key = RSAKey(*tu.fixture_primes).precompute()
        c = lutil.rand.randrange(fixture_key.n)

        return ( fixture_key.n == tu.fixture_modulus
               , (fixture_key.e * fixture_key.d) % phi == 1
               , fixture_key.is_safe(8)
               , crt_key.apply_private(c) == fixture_key.apply_private(c) )

    def test_make_key():
        "RSA make_key,nbits,inverse,safe,permutation"

        nbits = lutil.rand.randrange(Defs.min_modulus_bits, 320)
        key = make_key(nbits, 8)
        phi = (key.p - 1) * (key.q - 1)
        m = lutil.rand.randrange(key.n)

        return ( key.nbits == nbits
               , (key.e * key.d) % phi == 1
               , key.is_safe(8)
               , key.apply_public(key.apply_private(m)) == m )

    return tu.run_all_tests(nreps, "RSA", test_fixture_key, test_make_key)

if __name__ == "__main__":
    try:
        nr = int(sys.argv[1])
    except (IndexError, ValueError):
        nr = 8
    main(nr)
