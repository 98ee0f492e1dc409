"""
kmertable - exact in-memory counting of canonical DNA k-mers.

Modules:
    - codec: base encoding, reverse complement, canonical form, hashing
    - store: hash -> count storage
    - ingest: sliding-window and chunked-parallel sequence ingestion
    - algebra: additive merge, set operations, similarity
    - stats: histogram, min/max, mincut/maxcut, dumps
    - persist: gzip JSON save/load and Parquet export
"""

from ._version import __version__
from .codec import canonical, encode_base, decode_base, hash_kmer, reverse_complement
from .errors import (
    KmerTableError,
    ValidationError,
    KmerSizeError,
    InvalidBaseError,
    BadKmerError,
    KsizeMismatchError,
    SortOptionError,
    LookupFailure,
    KmerNotFoundError,
    KmerStorageDisabledError,
    DeserializationError,
)
from .store import CountStore
from .table import KmerCountTable

__all__ = [
    "__version__",
    "KmerCountTable",
    "CountStore",
    "canonical",
    "encode_base",
    "decode_base",
    "hash_kmer",
    "reverse_complement",
    "KmerTableError",
    "ValidationError",
    "KmerSizeError",
    "InvalidBaseError",
    "BadKmerError",
    "KsizeMismatchError",
    "SortOptionError",
    "LookupFailure",
    "KmerNotFoundError",
    "KmerStorageDisabledError",
    "DeserializationError",
]
