#!/usr/bin/python
#
# (C) 2018 Dan Boneh, Riad S. Wahby <rsw@cs.stanford.edu>

import heapq
from itertools import cycle
import logging
import sys
import time

from libVRFPy.defs import Defs
from libVRFPy.errors import GenerationFailure, ParameterError
import libVRFPy.util as lutil

logger = logging.getLogger(__name__)

class PrimeDefs(object):
    wheel_incs = [2,4,2,4,6,2,6,4,2,4,6,6,2,6,4,2,6,4,6,8,4,2,4,2,4,8,6,4,6,2,4,6,2,6,6,4,2,4,6,2,6,4,2,4,2,10,2,10]
    wheel_ps = [2, 3, 5, 7]
    test_primes = ()        # gets set below (after primes() is defined)
    test_primes_set = frozenset()

# a "prime wheel" of circumference 210. Skips all multiples of 2, 3, 5, 7
def _wheel():
    incs = cycle(PrimeDefs.wheel_incs)
    nval = 11
    while True:
        ret = nval
        inc = next(incs, None)
        nval += inc
        yield ret

# A lazy Sieve of Eratosthenes based on
#     O'Neill, M. E. "The Genuine Sieve of Eratosthenes." J Functional Programming,
#     Vol 19, Iss 1, 2009, pp. 95--106.
def primes():
    w = _wheel()
    f = []

    # first, the initial primes of the wheel
    for p in PrimeDefs.wheel_ps:
        yield p

    # then, a prime heap--based iterator
    while True:
        n = next(w, None)
        prime = True
        while f:
            (nx, inc) = f[0]
            if nx > n:
                break
            if nx == n:
                prime = False
            heapq.heapreplace(f, (nx + inc, inc))
        if prime:
            heapq.heappush(f, (n * n, n))
            yield n
PrimeDefs.test_primes = [ next(p__) for p__ in (primes(),) for _ in range(0, 1000) ]
PrimeDefs.test_primes_set = frozenset(PrimeDefs.test_primes)

def is_square(n):
    isqn = lutil.isqrt(n)
    if isqn * isqn == n:
        return True
    return False

# strong Lucas probable prime test with Selfridge's parameters
def is_prime_lucas(n, nreps=1):
    half = (n + 1) // 2
    if (2 * half) % n != 1:
        return False

    (d, s) = lutil.factor_twos(n + 1)
    dbits = lutil.num_to_bits(d)
    msbit = next(dbits)
    assert msbit
    dbits = list(dbits)

    def lucas_double(u, v, Qk):
        u = (u * v) % n
        v = (v ** 2 - 2 * Qk) % n
        Qk = (Qk * Qk) % n
        return (u, v, Qk)

    def lucas_add1(u, v, Qk, D):
        (u, v) = (((u + v) * half) % n, ((D * u + v) * half) % n)
        Qk = (Qk * Q) % n
        return (u, v, Qk)

    i = 0
    ilim = 20
    for _ in range(0, nreps):
        while True:
            if i == ilim:
                if is_square(n):
                    return False
            i += 1
            D = pow(-1, i + 1) * (3 + 2 * i)
            if lutil.jacobi(D, n) == -1:
                break
        ilim = -1
        Q = (1 - D) // 4

        (u, v, Qk) = (1, 1, Q)
        for db in dbits:
            (u, v, Qk) = lucas_double(u, v, Qk)
            if db:
                (u, v, Qk) = lucas_add1(u, v, Qk, D)

        # now we have Ud and Vd
        if u % n == 0:
            continue

        # check V_{d*2^r}, 0 <= r < s
        cont = False
        for _ in range(0, s):
            if v % n == 0:
                cont = True
                break
            (u, v, Qk) = lucas_double(u, v, Qk)

        if cont:
            continue

        return False

    return True

# Rabin-Miller; a composite survives each round w.p. <= 1/4
def is_prime_rm(n, nreps, rng=None):
    if n < 7:
        if n in (2, 3, 5):
            return True
        return False
    if n % 2 == 0:
        return False
    if rng is None:
        rng = lutil.rand

    (d, r) = lutil.factor_twos(n - 1)

    for _ in range(0, nreps):
        a = rng.randrange(2, n - 1)
        x = pow(a, d, n)

        if x in (1, n-1):
            continue

        cont = False
        for _ in range(0, r - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                cont = True
                break

        if cont:
            continue

        return False

    return True

def is_prime_div(n):
    for p in PrimeDefs.test_primes:
        if n % p == 0:
            return False
    return True

# trial division, then `confidence` rounds of Rabin-Miller, then one strong Lucas test (i.e., Baillie-PSW)
def is_probable_prime(n, confidence=Defs.default_confidence, rng=None):
    if confidence < 1:
        raise ParameterError("confidence must be at least 1, got %d" % confidence)

    if n < 2:
        return False
    if n <= PrimeDefs.test_primes[-1]:
        return n in PrimeDefs.test_primes_set

    return is_prime_div(n) and is_prime_rm(n, confidence, rng) and is_prime_lucas(n)

def is_safe_prime(p, confidence=Defs.default_confidence, rng=None):
    if p < 5 or p % 2 == 0:
        return False
    return is_probable_prime((p - 1) // 2, confidence, rng) and is_probable_prime(p, confidence, rng)

# q is a candidate for (p-1)/2; reject if q or 2q+1 has a small factor
def _sieve_ok(q):
    for r in PrimeDefs.test_primes[1:]:
        rem = q % r
        if rem == 0 or rem == (r - 1) // 2:
            return False
    return True

# wall-clock deadline usable as the `deadline` hook below
class Deadline(object):
    def __init__(self, seconds):
        self.expires = time.monotonic() + seconds

    def remaining(self):
        return max(0.0, self.expires - time.monotonic())

    def __call__(self):
        return time.monotonic() >= self.expires

def gen_safe_prime(nbits, confidence=Defs.default_confidence, rng=None, deadline=None):
    """
    Rejection-sample a safe prime p with exactly nbits bits.

    Draws q with nbits-1 bits (top two bits set, odd) and sets p = 2q + 1, so
    p has its top two bits set as well. Returns p once both q and p pass
    is_probable_prime at the given confidence.

    deadline is an optional zero-argument callable, polled once per candidate;
    when it returns true the search is abandoned with GenerationFailure.
    Without a deadline the loop runs until it succeeds.
    """
    if not isinstance(nbits, int) or nbits <= Defs.min_safe_prime_bits:
        raise ParameterError("safe prime must have more than %d bits, got %r" % (Defs.min_safe_prime_bits, nbits))
    if confidence < 1:
        raise ParameterError("confidence must be at least 1, got %d" % confidence)
    if rng is None:
        rng = lutil.rand

    qbits = nbits - 1
    topbits = 3 << (qbits - 2)
    ncand = 0
    while True:
        if deadline is not None and deadline():
            raise GenerationFailure("no %d-bit safe prime found before deadline (%d candidates)" % (nbits, ncand))
        ncand += 1

        q = rng.getrandbits(qbits) | topbits | 1
        if not _sieve_ok(q):
            continue

        # one cheap round each before spending the full confidence
        p = 2 * q + 1
        if not (is_prime_rm(q, 1, rng) and is_prime_rm(p, 1, rng)):
            continue

        if is_probable_prime(q, confidence, rng) and is_probable_prime(p, confidence, rng):
            logger.debug("found %d-bit safe prime after %d candidates", nbits, ncand)
            return p

def main(nreps):
    import libVRFPy.test_util as tu     # pylint: disable=bad-option-value,import-outside-toplevel
    (p, q) = tu.fixture_primes
    # Carmichael numbers fool the Fermat test for every coprime base
    carmichael = (561, 41041, 825265, 321197185, 5394826801, 232250619601, 9746347772161)

    def test_is_prime():
        "is_probable_prime,fixture_primes,composite,carmichael,small"

        return ( is_probable_prime(p) and is_probable_prime(q)
               , not is_probable_prime(p * q)
               , not any( is_probable_prime(c) for c in carmichael )
               , [ x for x in range(0, 100) if is_probable_prime(x, 1) ] == PrimeDefs.test_primes[:25] )

    def test_safe_prime():
        "gen_safe_prime,nbits,safe"

        nbits = lutil.rand.randrange(Defs.min_safe_prime_bits + 1, 160)
        sp = gen_safe_prime(nbits, 8)

        return (sp.bit_length() == nbits, is_safe_prime(sp, 8))

    return tu.run_all_tests(nreps, "primes", test_is_prime, test_safe_prime)

if __name__ == "__main__":
    try:
        nr = int(sys.argv[1])
    except (IndexError, ValueError):
        nr = 16
    main(nr)
