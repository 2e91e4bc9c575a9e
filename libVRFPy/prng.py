#!/usr/bin/python
#
# (C) 2018 Dan Boneh, Riad S. Wahby <rsw@cs.stanford.edu>

from Crypto.Hash import keccak

from libVRFPy.defs import Defs
import libVRFPy.util as lutil

# Deterministic randomness provider for seeded runs. Drop-in for util.rand
# wherever an rng argument is accepted.
# NOTE AES-CTR is almost certainly faster for most machines, but this approach sticks to the Python stdlib
class HashPRNG(object):
    def __init__(self, prng):
        self.prng = prng
        self.rnum = 0
        self.r_save = 0

    def _next_rand(self):
        self.prng.update(b"%016x" % self.rnum)
        self.rnum += 1
        return int(self.prng.hexdigest(), 16)

    def getrandbits(self, nbits):
        r = self.r_save
        b = r.bit_length()
        hashbits = self.prng.digest_size * 8
        while b < nbits:
            r <<= hashbits
            r += self._next_rand()
            b += hashbits
        self.r_save = r & ((1 << (b - nbits)) - 1)
        r >>= (b - nbits)
        return r

    def _randrange(self, maxval):
        nbits = lutil.clog2(maxval)
        ret = maxval
        while ret >= maxval:
            ret = self.getrandbits(nbits)
        return ret

    def randrange(self, start, stop=None):
        if stop is None:
            return self._randrange(start)

        if stop <= start:
            raise ValueError("require stop > start in randrange(start, stop)")

        return start + self._randrange(stop - start)

    @classmethod
    def new(cls, *seed):
        new_prng = Defs.hashfn(b"libVRFPy:")
        for s in seed:
            s = str(s).encode("utf-8")
            new_prng.update(b"%d:%s" % (len(s), s))
        return cls(new_prng)

# Keccak-256 (the pre-standard SHA-3 padding), as consumers on the EVM side compute it
def keccak256(data):
    return keccak.new(digest_bits=256, data=data).digest()
