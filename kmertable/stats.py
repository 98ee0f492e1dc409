"""
Count statistics, threshold pruning and tab-separated dumps.
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

import numpy as np

from .errors import KmerStorageDisabledError, SortOptionError
from .store import CountStore
from .utils import LOG


def min_count(store: CountStore) -> int:
    vals = store.values()
    return min(vals) if vals else 0


def max_count(store: CountStore) -> int:
    vals = store.values()
    return max(vals) if vals else 0


def sum_counts(store: CountStore) -> int:
    return sum(store.values())


def histo(store: CountStore, zero: bool = True) -> List[Tuple[int, int]]:
    """
    Frequency histogram as ascending (count, number of k-mers) pairs.

    With zero=True every count from 0 to the maximum is listed, gaps
    included; an empty table gives [(0, 0)]. Otherwise only observed
    counts appear and an empty table gives [].
    """
    vals = store.values()
    if not vals:
        return [(0, 0)] if zero else []

    arr = np.fromiter(vals, dtype=np.uint64, count=len(vals))
    uniq, freq = np.unique(arr, return_counts=True)
    observed = [(int(c), int(f)) for c, f in zip(uniq, freq)]
    if not zero:
        return observed

    lookup = dict(observed)
    top = observed[-1][0]
    return [(c, lookup.get(c, 0)) for c in range(top + 1)]


def mincut(store: CountStore, min_count: int) -> int:
    """Remove every entry with count < min_count; return how many went."""
    doomed = [h for h, c in store.items() if c < min_count]
    n = store.remove_many(doomed)
    LOG.debug(f"mincut({min_count}) removed {n:,} hashes")
    return n


def maxcut(store: CountStore, max_count: int) -> int:
    """Remove every entry with count > max_count; return how many went."""
    doomed = [h for h, c in store.items() if c > max_count]
    n = store.remove_many(doomed)
    LOG.debug(f"maxcut({max_count}) removed {n:,} hashes")
    return n


# -----------------------
# Dumps
# -----------------------

Key = Union[int, str]


def _sorted_pairs(pairs: List[Tuple[Key, int]], sortcounts: bool,
                  sortkeys: bool) -> List[Tuple[Key, int]]:
    if sortcounts:
        return sorted(pairs, key=lambda kv: (kv[1], kv[0]))
    if sortkeys:
        return sorted(pairs, key=lambda kv: kv[0])
    return pairs


def _write_tsv(path: str, pairs: List[Tuple[Key, int]]) -> None:
    with open(path, "w") as f:
        for key, count in pairs:
            f.write(f"{key}\t{count}\n")


def dump_hashes(store: CountStore, file: Optional[str] = None, sortcounts: bool = False,
                sortkeys: bool = False) -> Optional[List[Tuple[int, int]]]:
    """
    (hash, count) pairs, or the same as TSV lines in `file`.

    Unsorted output follows iteration order; sortcounts orders by count then
    hash, sortkeys by hash. Returns None when a file is written.
    """
    if sortcounts and sortkeys:
        raise SortOptionError("Cannot sort by both counts and keys at the same time.")
    pairs = _sorted_pairs(store.items(), sortcounts, sortkeys)
    if file is None:
        return pairs
    _write_tsv(file, pairs)
    return None


def dump_kmers(store: CountStore, file: Optional[str] = None, sortcounts: bool = False,
               sortkeys: bool = False) -> Optional[List[Tuple[str, int]]]:
    """As dump_hashes, keyed by canonical k-mer text."""
    if sortcounts and sortkeys:
        raise SortOptionError("Cannot sort by both counts and kmers at the same time.")
    if not store.store_kmers:
        raise KmerStorageDisabledError("dump_kmers")

    pairs: List[Tuple[Key, int]] = []
    missing = 0
    for hashval, count in store.items():
        text = store.kmer_text(hashval)
        if text is None:
            missing += 1
            continue
        pairs.append((text, count))
    if missing:
        LOG.warning(f"dump_kmers: {missing:,} hashes have no stored k-mer and were omitted")

    pairs = _sorted_pairs(pairs, sortcounts, sortkeys)
    if file is None:
        return pairs
    _write_tsv(file, pairs)
    return None
