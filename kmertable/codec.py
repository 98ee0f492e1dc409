"""
Base encoding, reverse complement, canonical form and hashing of k-mers.

Hashes follow the sourmash "Murmur64Dna" convention: MurmurHash3 x64_128 of
the canonical k-mer's ASCII bytes with seed 42, keeping the first 64 bits as
an unsigned integer. Tables hashed this way interoperate with sourmash
signatures and with tables saved by earlier releases.
"""

from __future__ import annotations

from typing import Optional

import mmh3

from .errors import InvalidBaseError, KmerSizeError

HASH_SEED = 42

BASE_MAP = {"A": 0, "C": 1, "G": 2, "T": 3}
INT_TO_BASE = {0: "A", 1: "C", 2: "G", 3: "T"}
VALID_BASES = frozenset("ACGT")

# str.translate table; non-ACGT characters pass through unchanged
_COMPLEMENT = str.maketrans("ACGTacgt", "TGCAtgca")


def encode_base(c: str) -> int:
    """2-bit code of a single base (case-insensitive)."""
    code = BASE_MAP.get(c.upper()) if len(c) == 1 else None
    if code is None:
        raise InvalidBaseError(c)
    return code


def decode_base(code: int) -> str:
    try:
        return INT_TO_BASE[code]
    except KeyError:
        raise ValueError(f"base code must be in 0..3, got {code!r}") from None


def reverse_complement(kmer: str) -> str:
    return kmer.translate(_COMPLEMENT)[::-1]


def first_invalid(kmer: str) -> Optional[int]:
    """Index of the first non-ACGT character of an uppercase string, or None."""
    for i, c in enumerate(kmer):
        if c not in VALID_BASES:
            return i
    return None


def validate_kmer(kmer: str, ksize: Optional[int] = None) -> str:
    """Return the uppercased k-mer, checking length and alphabet."""
    if ksize is not None and len(kmer) != ksize:
        raise KmerSizeError(ksize, len(kmer))
    kmer = kmer.upper()
    bad = first_invalid(kmer)
    if bad is not None:
        raise InvalidBaseError(kmer[bad])
    return kmer


def canonical(kmer: str, ksize: Optional[int] = None) -> str:
    """
    Lexicographically smaller of the k-mer and its reverse complement.

    Raises KmerSizeError when `ksize` is given and does not match, and
    InvalidBaseError naming the first character outside A/C/G/T.
    """
    kmer = validate_kmer(kmer, ksize)
    rc = reverse_complement(kmer)
    return kmer if kmer <= rc else rc


def hash_canonical(canon: str) -> int:
    """Hash an already canonical, uppercase k-mer."""
    return mmh3.hash64(canon.encode("ascii"), seed=HASH_SEED, signed=False)[0]


def hash_kmer(kmer: str, ksize: Optional[int] = None) -> int:
    return hash_canonical(canonical(kmer, ksize))
