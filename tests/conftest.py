"""
libVRFPy Test Fixtures
"""

import pytest

import libVRFPy.prng as lprng
import libVRFPy.rsa as lrsa
import libVRFPy.test_util as tu


@pytest.fixture(scope="session")
def fixture_key():
    """2048-bit key built from two known safe primes, e = 3."""
    return lrsa.RSAKey(*tu.fixture_primes).precompute()


@pytest.fixture(scope="session")
def plain_fixture_key():
    """Same key without CRT parameters."""
    return lrsa.RSAKey(*tu.fixture_primes)


@pytest.fixture(scope="session")
def short_key():
    """Freshly made 256-bit key; short so that make_key stays fast."""
    return lrsa.make_key(256, rng=lprng.HashPRNG.new("conftest", "short_key"))


@pytest.fixture
def seeded_rng():
    """Deterministic randomness provider."""
    return lprng.HashPRNG.new("conftest", "seeded_rng")
