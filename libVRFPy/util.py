#!/usr/bin/python
#
# (C) 2018 Riad S. Wahby <rsw@cs.stanford.edu>

from itertools import chain
import math
import random
import sys

# thread-safe; the default randomness provider everywhere an rng is optional
rand = random.SystemRandom()

# ceiling of log2
def clog2(val):
    if isinstance(val, float):
        val = int(math.ceil(val))
    return (val-1).bit_length()

# returns None when val is not invertible mod m
def invert_modp(val, m):
    val = val % m
    if val == 0:
        return None
    (inv, g) = ext_euclid_l(val, m)
    if g != 1:
        return None
    assert (inv * val - 1) % m == 0
    return inv % m

def gcd(a, b):
    return math.gcd(a, b)

def ext_euclid_l(a, b):
    (t, t_, r, r_) = (1, 0, a, b)

    while r != 0:
        ((quot, r), r_) = (divmod(r_, r), r)
        (t_, t) = (t, t_ - quot * t)

    return (t_, r_)

def num_to_bits(n, pad=None):
    bit_iter = ( b == "1" for b in bin(int(n))[2:] )
    if pad is None:
        return bit_iter
    return chain(( False for _ in range(0, pad - n.bit_length()) ), bit_iter)

# compute Jacobi symbol, n prime or composite
def jacobi(a, n):
    if n <= 0 or n % 2 == 0:
        raise ValueError("Jacobi symbol (a/n) is undefined for negative, zero, and even n")

    negate = False
    a = a % n
    while a != 0:
        while a % 2 == 0:
            a = a // 2
            if n % 8 == 3 or n % 8 == 5:
                negate = not negate

        if a % 4 == 3 and n % 4 == 3:
            negate = not negate

        (n, a) = (a, n)

        a = a % n

    if n == 1:
        return -1 if negate else 1

    return 0

# essentially https://en.wikipedia.org/wiki/Integer_square_root
def isqrt(n):
    if n < 0:
        raise ValueError("isqrt called with negative input")

    shift = max(0, 2 * ((int(n).bit_length() + 1) // 2) - 2)
    res = 0
    while shift >= 0:
        res <<= 1
        res_c = res + 1
        if (res_c * res_c) <= (n >> shift):
            res = res_c
        shift -= 2

    return res

def factor_twos(n):
    d = n
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1
    return (d, s)

# I2OSP / OS2IP from RFC 8017
def int_to_bytes(x, length=None):
    if x < 0:
        raise ValueError("cannot encode a negative integer")
    if length is None:
        length = max(1, (x.bit_length() + 7) // 8)
    if x >> (8 * length) != 0:
        raise ValueError("integer too large for %d octets" % length)
    return x.to_bytes(length, "big")

def bytes_to_int(b):
    return int.from_bytes(b, "big")

# concatenate 256-bit words written in hex and read them as one big-endian integer
def from_hex_words(words):
    for word in words:
        if len(word) != 64:
            raise ValueError("entries should be 256 bits")
    return int("".join(words), 16)

def main(nreps):
    import libVRFPy.test_util as tu     # pylint: disable=bad-option-value,import-outside-toplevel
    (p, q) = tu.fixture_primes
    n = p * q

    def test_invert_modp():
        "invert_modp,p,pq,noninvertible"

        r = rand.randrange(1, p)
        rInv = invert_modp(r, p)

        r2 = rand.randrange(1, n)
        while gcd(r2, n) != 1:
            r2 = rand.randrange(1, n)
        r2Inv = invert_modp(r2, n)

        r3 = p * rand.randrange(1, q)

        return ((r * rInv - 1) % p == 0, (r2 * r2Inv - 1) % n == 0, invert_modp(r3, n) is None)

    def test_ext_euclid():
        "ext_euclid,gcd,bezout"

        r1 = rand.getrandbits(256)
        r2 = rand.getrandbits(256) | 1
        (s, d) = ext_euclid_l(r1, r2)

        return (d == gcd(r1, r2), (s * r1 - d) % r2 == 0)

    def test_isqrt():
        "isqrt,test"

        r = rand.getrandbits(256)
        int_sqrtR = isqrt(r)
        ok = int_sqrtR ** 2 <= r < (int_sqrtR + 1) ** 2

        return (ok,)

    def test_octets():
        "octets,roundtrip,length"

        r = rand.getrandbits(2048)
        enc = int_to_bytes(r, 256)

        return (bytes_to_int(enc) == r, len(enc) == 256)

    return tu.run_all_tests(nreps, "util", test_invert_modp, test_ext_euclid, test_isqrt, test_octets)

if __name__ == "__main__":
    try:
        nr = int(sys.argv[1])
    except (IndexError, ValueError):
        nr = 32
    main(nr)
