"""
KmerCountTable: exact counts of canonical DNA k-mers.

    >>> t = KmerCountTable(ksize=4, store_kmers=True)
    >>> t.consume("ATCGG")
    2
    >>> t.get("CCGA")        # reverse complement of TCGG
    1
    >>> t.dump_kmers(sortkeys=True)
    [('ATCG', 1), ('CCGA', 1)]
"""

from __future__ import annotations

from typing import List, Optional, Set, Tuple, Union

from . import algebra, ingest, persist, stats
from ._version import __version__
from .store import CountStore


class KmerCountTable(CountStore):
    """
    Hash -> count table with ingestion, merging, pruning and persistence.

    Args:
        ksize: k-mer length, fixed for the life of the table.
        store_kmers: also keep hash -> canonical k-mer text, needed by
            unhash() and dump_kmers().
    """

    def __init__(self, ksize: int, store_kmers: bool = False):
        super().__init__(ksize, store_kmers)
        self._version = __version__
        self._consumed = 0

    def __repr__(self) -> str:
        return (f"KmerCountTable(ksize={self.ksize}, store_kmers={self.store_kmers}, "
                f"hashes={len(self):,}, consumed={self._consumed:,})")

    # -----------------------
    # Attributes
    # -----------------------

    @property
    def version(self) -> str:
        """Engine version that created (or last loaded) this table."""
        return self._version

    @property
    def consumed(self) -> int:
        """Bases fed in through count/consume/parallel_consume/add."""
        return self._consumed

    @property
    def sum_counts(self) -> int:
        return stats.sum_counts(self)

    @property
    def min(self) -> int:
        return stats.min_count(self)

    @property
    def max(self) -> int:
        return stats.max_count(self)

    # -----------------------
    # Counting
    # -----------------------

    def count(self, kmer: str) -> int:
        """Count one k-mer (either strand); return its new count."""
        count = self.increment(kmer)
        self._consumed += len(kmer)
        return count

    def count_hash(self, hashval: int) -> int:
        return self.increment_hash(hashval)

    def consume(self, seq: str, allow_bad_kmers: bool = True) -> int:
        """
        Count every valid k-mer of `seq`; return how many were counted.

        Windows with non-ACGT bases are logged and skipped, or raise
        BadKmerError when allow_bad_kmers is False (nothing is counted then).
        """
        n = ingest.consume(self, seq, allow_bad_kmers)
        self._consumed += len(seq)
        return n

    def parallel_consume(self, seq: str, chunk_size: int, allow_bad_kmers: bool = True,
                         workers: Optional[int] = None) -> int:
        """consume() split into chunks of `chunk_size` windows across threads."""
        n = ingest.parallel_consume(self, seq, chunk_size, allow_bad_kmers, workers)
        self._consumed += len(seq)
        return n

    def kmers_and_hashes(self, seq: str, allow_bad_kmers: bool = True,
                         skip_bad: bool = False) -> List[Tuple[str, int]]:
        return ingest.kmers_and_hashes(seq, self.ksize, allow_bad_kmers, skip_bad)

    # -----------------------
    # Merge & set algebra
    # -----------------------

    def add(self, other: "KmerCountTable") -> Tuple[int, int]:
        """Add `other`'s counts into this table; return (counts_added, new_keys)."""
        result = algebra.add(self, other)
        self._consumed += other.consumed
        return result

    def union(self, other: "KmerCountTable") -> Set[int]:
        return algebra.union(self, other)

    def intersection(self, other: "KmerCountTable") -> Set[int]:
        return algebra.intersection(self, other)

    def difference(self, other: "KmerCountTable") -> Set[int]:
        return algebra.difference(self, other)

    def symmetric_difference(self, other: "KmerCountTable") -> Set[int]:
        return algebra.symmetric_difference(self, other)

    def cosine(self, other: "KmerCountTable") -> float:
        return algebra.cosine(self, other)

    def jaccard(self, other: "KmerCountTable") -> float:
        return algebra.jaccard(self, other)

    __or__ = union
    __and__ = intersection
    __sub__ = difference
    __xor__ = symmetric_difference

    # -----------------------
    # Statistics & pruning
    # -----------------------

    def histo(self, zero: bool = True) -> List[Tuple[int, int]]:
        return stats.histo(self, zero)

    def mincut(self, min_count: int) -> int:
        return stats.mincut(self, min_count)

    def maxcut(self, max_count: int) -> int:
        return stats.maxcut(self, max_count)

    drop = CountStore.remove
    drop_hash = CountStore.remove_hash
    get_hash_array = CountStore.get_many_hashes

    def dump(self, file: Optional[str] = None, sortcounts: bool = False,
             sortkeys: bool = False):
        return stats.dump_hashes(self, file, sortcounts, sortkeys)

    dump_hashes = dump

    def dump_kmers(self, file: Optional[str] = None, sortcounts: bool = False,
                   sortkeys: bool = False):
        return stats.dump_kmers(self, file, sortcounts, sortkeys)

    # -----------------------
    # Indexing sugar
    # -----------------------

    # int keys are hashes, so dict(table) gives {hash: count}

    def __getitem__(self, key: Union[str, int]) -> int:
        if isinstance(key, int):
            return self.get_hash(key)
        return self.get(key)

    def __setitem__(self, key: Union[str, int], count: int) -> None:
        if isinstance(key, int):
            self.set_hash(key, count)
        else:
            self.set(key, count)

    def __delitem__(self, key: Union[str, int]) -> None:
        if isinstance(key, int):
            self.remove_hash(key)
        else:
            self.remove(key)

    # -----------------------
    # Persistence
    # -----------------------

    def serialize(self) -> dict:
        return persist.to_document(self)

    def serialize_json(self) -> str:
        return persist.dumps(self.serialize()).decode("utf-8")

    def save(self, path: str) -> None:
        persist.save(self, path)

    @classmethod
    def load(cls, path: str) -> "KmerCountTable":
        return cls.from_state(persist.load(path))

    def write_parquet(self, path: str, compression: str = "zstd") -> None:
        persist.write_parquet(self, path, compression)

    @classmethod
    def read_parquet(cls, path: str) -> "KmerCountTable":
        return cls.from_state(persist.read_parquet(path))

    @classmethod
    def from_state(cls, state: persist.TableState) -> "KmerCountTable":
        table = cls(state.ksize, store_kmers=state.kmers is not None)
        for hashval, count in state.counts.items():
            table.set_hash(hashval, count)
        if state.kmers is not None:
            for hashval, text in state.kmers.items():
                if hashval in table:
                    table.record_kmer(hashval, text)
        table._version = state.version
        table._consumed = state.consumed
        return table
