"""
Exception hierarchy for kmertable.

Four families: validation (bad input, nothing was changed), lookup (a key or
a feature is missing), deserialization (a persisted table could not be read)
and plain OSError for I/O, which is never wrapped.
"""

from __future__ import annotations

from typing import Optional


class KmerTableError(Exception):
    """Base class for all kmertable errors."""
    pass


# -----------------------
# Validation
# -----------------------

class ValidationError(KmerTableError, ValueError):
    pass


class KmerSizeError(ValidationError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"kmer size does not match count table ksize (expected {expected}, got {actual})"
        )


class InvalidBaseError(ValidationError):
    """Raised when a character outside A/C/G/T is found."""
    def __init__(self, base: str, position: Optional[int] = None,
                 message: Optional[str] = None):
        self.base = base
        self.position = position
        if message is None:
            message = f"kmer contains invalid characters: '{base}'"
            if position is not None:
                message += f" at position {position}"
        super().__init__(message)


class BadKmerError(InvalidBaseError):
    """
    A window of a sequence holds an invalid base (strict ingestion).

    `position` is the 0-based start of the window, `base_position` the
    0-based index of the offending character in the whole sequence.
    """
    def __init__(self, position: int, kmer: str, base: str, base_position: int):
        super().__init__(
            base,
            position,
            message=(
                f"bad k-mer encountered at position {position}: '{kmer}' "
                f"has invalid base '{base}' at position {base_position}"
            ),
        )
        self.kmer = kmer
        self.base_position = base_position


class KsizeMismatchError(ValidationError):
    def __init__(self, ours: int, theirs: int):
        self.ours = ours
        self.theirs = theirs
        super().__init__(f"ksize mismatch: {ours} != {theirs}")


class SortOptionError(ValidationError):
    pass


# -----------------------
# Lookup
# -----------------------

class LookupFailure(KmerTableError, LookupError):
    pass


class KmerNotFoundError(LookupFailure, KeyError):
    def __init__(self, hashval: int):
        self.hashval = hashval
        super().__init__(f"hash {hashval} not found in table")

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise
        return self.args[0]


class KmerStorageDisabledError(LookupFailure):
    def __init__(self, operation: str = "unhash"):
        self.operation = operation
        super().__init__(
            f"{operation} requires a table created with store_kmers=True"
        )


# -----------------------
# Persistence
# -----------------------

class DeserializationError(KmerTableError, RuntimeError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Deserialization error: {detail}")
