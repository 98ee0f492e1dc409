"""
Hash-keyed count storage.

CountStore owns the hash -> count map and, when created with
store_kmers=True, a hash -> canonical k-mer map. Dicts keep insertion
order, which is the "natural" order used by iteration and unsorted dumps.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from . import codec
from .errors import KmerNotFoundError, KmerStorageDisabledError, ValidationError
from .utils import LOG, MAX_COUNT


def _check_count(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"count must be an int, got {type(value).__name__}")
    if value < 0 or value > MAX_COUNT:
        raise ValidationError(f"count {value} outside the range 0..{MAX_COUNT}")
    return value


class CountStore:
    def __init__(self, ksize: int, store_kmers: bool = False):
        if isinstance(ksize, bool) or not isinstance(ksize, int) or ksize <= 0:
            raise ValueError(f"ksize must be a positive integer, got {ksize!r}")
        self._ksize = ksize
        self._store_kmers = bool(store_kmers)
        self._counts: Dict[int, int] = {}
        self._kmers: Optional[Dict[int, str]] = {} if self._store_kmers else None

    @property
    def ksize(self) -> int:
        return self._ksize

    @property
    def store_kmers(self) -> bool:
        return self._store_kmers

    # -----------------------
    # Codec helpers bound to ksize
    # -----------------------

    def canon(self, kmer: str) -> str:
        return codec.canonical(kmer, self._ksize)

    def hash_kmer(self, kmer: str) -> int:
        return codec.hash_kmer(kmer, self._ksize)

    # -----------------------
    # Reads
    # -----------------------

    def get(self, kmer: str) -> int:
        return self._counts.get(self.hash_kmer(kmer), 0)

    def get_hash(self, hashval: int) -> int:
        return self._counts.get(hashval, 0)

    def get_many_hashes(self, hashes: Iterable[int]) -> List[int]:
        counts = self._counts
        return [counts.get(int(h), 0) for h in hashes]

    def unhash(self, hashval: int) -> str:
        """Canonical k-mer text recorded for `hashval`."""
        if self._kmers is None:
            raise KmerStorageDisabledError("unhash")
        try:
            return self._kmers[hashval]
        except KeyError:
            raise KmerNotFoundError(hashval) from None

    def kmer_text(self, hashval: int) -> Optional[str]:
        """Stored text for `hashval`, or None (no text, or storage disabled)."""
        if self._kmers is None:
            return None
        return self._kmers.get(hashval)

    def keys(self) -> Set[int]:
        return set(self._counts)

    @property
    def hashes(self) -> List[int]:
        return list(self._counts)

    def items(self) -> List[Tuple[int, int]]:
        return list(self._counts.items())

    def values(self) -> List[int]:
        return list(self._counts.values())

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        # iterate over a snapshot so callers may mutate while looping
        return iter(list(self._counts.items()))

    def __contains__(self, hashval) -> bool:
        return hashval in self._counts

    # -----------------------
    # Writes
    # -----------------------

    def increment_hash(self, hashval: int, by: int = 1) -> int:
        count = self._counts.get(hashval, 0) + by
        if count > MAX_COUNT:
            count = MAX_COUNT
        self._counts[hashval] = count
        return count

    def record_kmer(self, hashval: int, canon: str) -> None:
        """Remember the text for `hashval`; the first writer wins."""
        if self._kmers is not None and hashval not in self._kmers:
            self._kmers[hashval] = canon

    def increment(self, kmer: str) -> int:
        canon = self.canon(kmer)
        hashval = codec.hash_canonical(canon)
        self.record_kmer(hashval, canon)
        return self.increment_hash(hashval)

    def set(self, kmer: str, value: int) -> None:
        canon = self.canon(kmer)
        hashval = codec.hash_canonical(canon)
        self._counts[hashval] = _check_count(value)
        self.record_kmer(hashval, canon)

    def set_hash(self, hashval: int, value: int) -> None:
        self._counts[hashval] = _check_count(value)

    def remove(self, kmer: str) -> None:
        self.remove_hash(self.hash_kmer(kmer))

    def remove_hash(self, hashval: int) -> None:
        if self._counts.pop(hashval, None) is None:
            LOG.debug("Hash value %s not found in table", hashval)
            return
        if self._kmers is not None:
            self._kmers.pop(hashval, None)
        LOG.debug("Hash value %s removed from table", hashval)

    def remove_many(self, hashes: Iterable[int]) -> int:
        n = 0
        kmers = self._kmers
        for h in hashes:
            if self._counts.pop(h, None) is not None:
                n += 1
                if kmers is not None:
                    kmers.pop(h, None)
        return n
