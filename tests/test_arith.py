"""
libVRFPy Arithmetic and PRNG Tests
"""

import hashlib
import random

import pytest

import libVRFPy.prng as lprng
import libVRFPy.util as lutil


class TestEuclid:
    """Tests for gcd / extended Euclid / modular inverse."""

    def test_gcd(self):
        assert lutil.gcd(12, 18) == 6
        assert lutil.gcd(17, 5) == 1

    def test_ext_euclid(self):
        rng = random.Random(1)
        for _ in range(0, 50):
            a = rng.getrandbits(256)
            b = rng.getrandbits(256) | 1
            (s, d) = lutil.ext_euclid_l(a, b)
            assert d == lutil.gcd(a, b)
            assert (s * a - d) % b == 0

    def test_invert(self):
        assert lutil.invert_modp(3, 1012) * 3 % 1012 == 1
        assert lutil.invert_modp(3, 7) == 5

    def test_no_inverse(self):
        assert lutil.invert_modp(3, 60) is None
        assert lutil.invert_modp(0, 7) is None
        assert lutil.invert_modp(14, 7) is None


class TestNumberTheory:
    """Tests for jacobi, isqrt and factor_twos."""

    def test_jacobi(self):
        assert lutil.jacobi(2, 7) == 1
        assert lutil.jacobi(3, 7) == -1
        assert lutil.jacobi(7, 7) == 0
        assert lutil.jacobi(5, 21) == 1

    def test_jacobi_even_modulus(self):
        with pytest.raises(ValueError):
            lutil.jacobi(3, 8)

    def test_isqrt(self):
        assert lutil.isqrt(0) == 0
        assert lutil.isqrt(99) == 9
        assert lutil.isqrt(100) == 10
        r = (1 << 300) + 12345
        s = lutil.isqrt(r)
        assert s * s <= r < (s + 1) * (s + 1)

    def test_isqrt_negative(self):
        with pytest.raises(ValueError):
            lutil.isqrt(-1)

    def test_factor_twos(self):
        assert lutil.factor_twos(96) == (3, 5)
        assert lutil.factor_twos(7) == (7, 0)

    def test_clog2(self):
        assert lutil.clog2(1) == 0
        assert lutil.clog2(8) == 3
        assert lutil.clog2(9) == 4
        assert lutil.clog2(2.5) == 2


class TestOctets:
    """Tests for I2OSP / OS2IP helpers."""

    def test_int_to_bytes(self):
        assert lutil.int_to_bytes(0) == b"\x00"
        assert lutil.int_to_bytes(256) == b"\x01\x00"
        assert lutil.int_to_bytes(1, 4) == b"\x00\x00\x00\x01"

    def test_int_to_bytes_too_large(self):
        with pytest.raises(ValueError):
            lutil.int_to_bytes(256, 1)

    def test_int_to_bytes_negative(self):
        with pytest.raises(ValueError):
            lutil.int_to_bytes(-1)

    def test_bytes_to_int(self):
        assert lutil.bytes_to_int(b"\x01\x00") == 256
        assert lutil.bytes_to_int(b"") == 0

    def test_from_hex_words(self):
        words = ["00" * 31 + "01", "ff" * 32]
        assert lutil.from_hex_words(words) == (1 << 256) | ((1 << 256) - 1)

    def test_from_hex_words_bad_length(self):
        with pytest.raises(ValueError):
            lutil.from_hex_words(["abcd"])


class TestKeccak:
    """Tests for keccak256."""

    def test_empty_input(self):
        expected = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        assert lprng.keccak256(b"").hex() == expected

    def test_not_sha3(self):
        assert lprng.keccak256(b"libVRFPy") != hashlib.sha3_256(b"libVRFPy").digest()

    def test_digest_size(self):
        assert len(lprng.keccak256(b"\x00" * 100)) == 32


class TestHashPRNG:
    """Tests for the deterministic randomness provider."""

    def test_reproducible(self):
        r1 = lprng.HashPRNG.new("a", 1)
        r2 = lprng.HashPRNG.new("a", 1)
        assert [r1.getrandbits(100) for _ in range(0, 5)] == [r2.getrandbits(100) for _ in range(0, 5)]

    def test_seed_framing(self):
        r1 = lprng.HashPRNG.new("ab", "c")
        r2 = lprng.HashPRNG.new("a", "bc")
        assert r1.getrandbits(256) != r2.getrandbits(256)

    def test_getrandbits_width(self):
        r = lprng.HashPRNG.new("width")
        for nbits in (1, 7, 255, 256, 257, 1000):
            assert r.getrandbits(nbits) >> nbits == 0

    def test_randrange_bounds(self):
        r = lprng.HashPRNG.new("range")
        for _ in range(0, 200):
            x = r.randrange(2, 11)
            assert 2 <= x < 11
        for _ in range(0, 200):
            assert 0 <= r.randrange(1000) < 1000

    def test_randrange_empty(self):
        with pytest.raises(ValueError):
            lprng.HashPRNG.new("empty").randrange(5, 5)
