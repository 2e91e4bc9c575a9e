#!/usr/bin/python
#
# (C) 2018 Dan Boneh, Riad S. Wahby <rsw@cs.stanford.edu>

"""
RSA full-domain-hash VRF, compatible with the on-chain VRF.sol verifier.

A seed is mapped into Z_n with hash_to_domain (F below), and the prover
applies the RSA trapdoor to it:

    m     = F(seed, pk)
    value = m^d mod n

Anyone holding pk = (n, e) checks value^e mod n == F(seed, pk). Since x -> x^e
is a permutation of Z_n, at most one value in [0, n) passes for a given seed.
The VRF output is keccak256(I2OSP(value, k)).

F(seed, pk): serialize seed as one 32-byte big-endian word s (so seed < 2^256),
then chain w_1 = keccak256(s), w_{i+1} = keccak256(w_i) and concatenate
w_1 || w_2 || ... Keep the first k octets (k the octet length of n) and the low
nbits(n) bits of that. If the result is not below n, clear bit nbits(n) - 1;
the top bit of n is set, so that always lands in [0, n).

For moduli that are a multiple of 256 bits (2048 in practice) the truncation
is a no-op and F matches the on-chain seedToRingValue exactly; other sizes
are handled by the same rule but have no on-chain counterpart.
"""

from libVRFPy.defs import Defs
from libVRFPy.errors import EncodingError, StructuralError
import libVRFPy.prng as lprng
from libVRFPy.rsa import RSAKey, RSAPubKey
import libVRFPy.util as lutil

def _is_int(x):
    return isinstance(x, int) and not isinstance(x, bool)

def _is_seed(x):
    return _is_int(x) and 0 <= x and x >> Defs.seed_bits == 0

def hash_to_domain(seed, pubkey):
    if not _is_seed(seed):
        raise EncodingError("seed must be an integer in [0, 2^%d), got %r" % (Defs.seed_bits, seed))

    (nbits, k) = (pubkey.nbits, pubkey.nbytes)
    word = lutil.int_to_bytes(seed, Defs.word_bytes)
    words = []
    for _ in range(0, (k + Defs.word_bytes - 1) // Defs.word_bytes):
        word = lprng.keccak256(word)
        words.append(word)
    m = lutil.bytes_to_int(b"".join(words)[:k]) & ((1 << nbits) - 1)

    if m >= pubkey.n:
        m ^= 1 << (nbits - 1)

    if lutil.gcd(m, pubkey.n) != 1:
        raise EncodingError("seed does not map to a unit mod n")
    return m

class Proof(object):
    # seed may be reassigned after generation; verify() then returns False
    def __init__(self, pubkey, seed, value):
        self.pubkey = pubkey
        self.seed = seed
        self.value = value

    def _check_structure(self):
        if not isinstance(self.pubkey, RSAPubKey):
            raise StructuralError("proof has no RSA public key")
        self.pubkey.check()
        if not _is_seed(self.seed):
            raise StructuralError("seed must be an integer in [0, 2^%d), got %r" % (Defs.seed_bits, self.seed))
        if not _is_int(self.value) or self.value < 0:
            raise StructuralError("value must be a non-negative integer, got %r" % (self.value,))

    def verify(self):
        self._check_structure()

        # a value >= n would be a second accepted witness for this seed
        if self.value >= self.pubkey.n:
            return False

        try:
            m = hash_to_domain(self.seed, self.pubkey)
        except EncodingError:
            # generate() refuses such seeds, so no honest proof exists for them
            return False

        return self.pubkey.apply_public(self.value) == m

    # the pseudo-random output; only meaningful once verify() has returned True
    def output(self):
        self._check_structure()
        k = self.pubkey.nbytes
        if self.value >= self.pubkey.n:
            raise StructuralError("value is not reduced mod n")
        return lutil.bytes_to_int(lprng.keccak256(lutil.int_to_bytes(self.value, k)))

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return (self.pubkey, self.seed, self.value) == (other.pubkey, other.seed, other.value)

    def __ne__(self, other):
        ret = self.__eq__(other)
        return ret if ret is NotImplemented else not ret

    __hash__ = None

    def __repr__(self):
        return "Proof(pubkey=%r, seed=%r, value=%r)" % (self.pubkey, self.seed, self.value)

def generate(rsakey, seed):
    if not isinstance(rsakey, RSAKey):
        raise StructuralError("generate requires an RSA private key")
    rsakey.check()

    m = hash_to_domain(seed, rsakey)
    value = rsakey.apply_private(m)
    return Proof(rsakey.get_public_key(), seed, value)

def verify(proof):
    if not isinstance(proof, Proof):
        raise StructuralError("expected a Proof, got %r" % type(proof).__name__)
    return proof.verify()
