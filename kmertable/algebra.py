"""
Combining tables: additive merge, set operations over hash keys, similarity.
"""

from __future__ import annotations

from typing import Set, Tuple

import numpy as np

from .errors import KsizeMismatchError
from .store import CountStore
from .utils import LOG


def add(dest: CountStore, src: CountStore) -> Tuple[int, int]:
    """
    Add every count of `src` into `dest`.

    Returns (counts_added, new_keys). Only `dest` changes; adding a table
    to itself doubles each count.
    """
    if dest.ksize != src.ksize:
        raise KsizeMismatchError(dest.ksize, src.ksize)

    import_text = dest.store_kmers and src.store_kmers
    if dest.store_kmers and not src.store_kmers:
        LOG.warning("Incoming table does not store k-mers; "
                    "k-mer text for new hashes will not be imported")

    counts_added = 0
    new_keys = 0
    for hashval, count in src.items():
        if hashval not in dest:
            new_keys += 1
        dest.increment_hash(hashval, count)
        counts_added += count
        if import_text:
            text = src.kmer_text(hashval)
            if text is not None:
                dest.record_kmer(hashval, text)
    return counts_added, new_keys


def union(a: CountStore, b: CountStore) -> Set[int]:
    return a.keys() | b.keys()


def intersection(a: CountStore, b: CountStore) -> Set[int]:
    return a.keys() & b.keys()


def difference(a: CountStore, b: CountStore) -> Set[int]:
    return a.keys() - b.keys()


def symmetric_difference(a: CountStore, b: CountStore) -> Set[int]:
    return a.keys() ^ b.keys()


def cosine(a: CountStore, b: CountStore) -> float:
    """
    Cosine similarity of the two count vectors over the union of keys.

    0.0 when either vector is all zero or no non-zero key is shared.
    """
    keys = list(union(a, b))
    if not keys:
        return 0.0
    va = np.asarray(a.get_many_hashes(keys), dtype=np.float64)
    vb = np.asarray(b.get_many_hashes(keys), dtype=np.float64)
    dot = float(np.dot(va, vb))
    if dot == 0.0:
        return 0.0
    norm = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if norm == 0.0:
        return 0.0
    # rounding can push identical vectors a hair above 1
    return min(dot / norm, 1.0)


def jaccard(a: CountStore, b: CountStore) -> float:
    u = len(union(a, b))
    if u == 0:
        return 0.0
    return len(intersection(a, b)) / u
