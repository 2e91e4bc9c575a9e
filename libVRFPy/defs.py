#!/usr/bin/python
#
# (C) 2018 Dan Boneh, Riad S. Wahby <rsw@cs.stanford.edu>

import hashlib

class Defs(object):
    # RSA permutation x -> x^e mod n uses this fixed small exponent
    public_exponent = 3

    # below 64+1 bits the candidate generator degenerates; callers must ask for more
    min_safe_prime_bits = 65
    min_modulus_bits = 2 * (min_safe_prime_bits + 1)

    default_key_bits = 2048
    default_confidence = 20     # Miller-Rabin rounds; composite survives w.p. <= 4^-20

    # how many times make_key will regenerate a prime before giving up
    max_key_retries = 64

    hashfn = hashlib.sha256

    # seeds are serialized as one EVM word; the ring value is a keccak chain of words
    word_bytes = 32
    seed_bits = 8 * word_bytes
