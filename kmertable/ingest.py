"""
Sliding-window ingestion of raw DNA sequences.

Every window of width ksize is either valid (A/C/G/T only) and turned into
its canonical k-mer and hash, or invalid and reported. Counting goes through
a private Counter that is merged into the table once the whole range has
been scanned, so a strict-mode failure leaves the table untouched and the
parallel path reuses exactly the same per-chunk code.
"""

from __future__ import annotations

import concurrent.futures as futures
import os
from collections import Counter
from typing import Dict, Iterator, List, Optional, Tuple

from .codec import VALID_BASES, hash_canonical, reverse_complement
from .errors import BadKmerError
from .store import CountStore
from .utils import LOG

# (window start, canonical k-mer or None, hash or index of the bad base)
Window = Tuple[int, Optional[str], int]


def iter_windows(seq: str, ksize: int, start: int = 0, stop: Optional[int] = None,
                 offset: int = 0) -> Iterator[Window]:
    """
    Walk the windows starting in [start, stop) of an uppercase sequence.

    Valid windows yield (pos, canonical_kmer, hash); invalid ones yield
    (pos, None, bad_index) where bad_index is the last invalid base inside
    the window. Positions are shifted by `offset`.
    """
    n = len(seq)
    last_start = n - ksize
    if stop is None or stop > last_start + 1:
        stop = last_start + 1
    if start >= stop:
        return

    end = stop - 1 + ksize          # one past the last base we look at
    sub = seq[start:end]
    rc = reverse_complement(sub)
    m = len(sub)

    last_bad = -1
    for j, c in enumerate(sub):
        if c not in VALID_BASES:
            last_bad = j
        i = j - ksize + 1
        if i < 0:
            continue
        if last_bad >= i:
            yield (start + i + offset, None, start + last_bad + offset)
            continue
        fwd = sub[i:j + 1]
        rev = rc[m - 1 - j:m - i]
        canon = fwd if fwd <= rev else rev
        yield (start + i + offset, canon, hash_canonical(canon))


def _report_bad(seq: str, ksize: int, pos: int, bad: int, offset: int,
                allow_bad_kmers: bool) -> None:
    local = pos - offset
    window = seq[local:local + ksize]
    LOG.warning(f"bad k-mer at position {pos}: {window}")
    if not allow_bad_kmers:
        raise BadKmerError(pos, window, seq[bad - offset], bad)


def count_range(seq: str, ksize: int, start: int = 0, stop: Optional[int] = None,
                allow_bad_kmers: bool = True, store_kmers: bool = False,
                offset: int = 0) -> Tuple[Counter, Optional[Dict[int, str]], int]:
    """
    Count the valid windows starting in [start, stop) into a fresh Counter.

    Returns (counts, hash -> kmer text or None, number of valid windows).
    """
    counts: Counter = Counter()
    kmers: Optional[Dict[int, str]] = {} if store_kmers else None
    n = 0
    for pos, canon, val in iter_windows(seq, ksize, start, stop, offset):
        if canon is None:
            _report_bad(seq, ksize, pos, val, offset, allow_bad_kmers)
            continue
        counts[val] += 1
        if kmers is not None and val not in kmers:
            kmers[val] = canon
        n += 1
    return counts, kmers, n


def merge_partial(store: CountStore, counts: Counter,
                  kmers: Optional[Dict[int, str]] = None) -> None:
    for hashval, c in counts.items():
        store.increment_hash(hashval, c)
        if kmers is not None:
            store.record_kmer(hashval, kmers[hashval])


def consume(store: CountStore, seq: str, allow_bad_kmers: bool = True) -> int:
    seq = seq.upper()
    counts, kmers, n = count_range(seq, store.ksize,
                                   allow_bad_kmers=allow_bad_kmers,
                                   store_kmers=store.store_kmers)
    merge_partial(store, counts, kmers)
    return n


def kmers_and_hashes(seq: str, ksize: int, allow_bad_kmers: bool = True,
                     skip_bad: bool = False) -> List[Tuple[str, int]]:
    """
    (canonical kmer, hash) for every window of `seq`, left to right.

    Bad windows are logged and then kept as ("", 0) placeholders, or left
    out when `skip_bad` is set. With allow_bad_kmers=False the first bad
    window raises BadKmerError instead.
    """
    seq = seq.upper()
    out: List[Tuple[str, int]] = []
    for pos, canon, val in iter_windows(seq, ksize):
        if canon is None:
            _report_bad(seq, ksize, pos, val, 0, allow_bad_kmers)
            if not skip_bad:
                out.append(("", 0))
            continue
        out.append((canon, val))
    return out


def plan_chunks(n_bases: int, ksize: int, chunk_size: int) -> List[Tuple[int, int]]:
    """
    Window-start ranges [start, stop) of chunk_size windows each.

    A chunk reads chunk_size + ksize - 1 bases, so windows that straddle a
    boundary belong to exactly one chunk.
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    n_windows = n_bases - ksize + 1
    return [(s, min(s + chunk_size, n_windows)) for s in range(0, max(n_windows, 0), chunk_size)]


def _count_chunk(seq: str, ksize: int, start: int, stop: int,
                 allow_bad_kmers: bool, store_kmers: bool):
    # slice out the chunk plus its ksize - 1 lookahead; positions stay global
    piece = seq[start:stop - 1 + ksize]
    return count_range(piece, ksize, 0, stop - start, allow_bad_kmers,
                       store_kmers, offset=start)


def parallel_consume(store: CountStore, seq: str, chunk_size: int,
                     allow_bad_kmers: bool = True, workers: Optional[int] = None) -> int:
    """
    Count `seq` with a pool of worker threads, one chunk per task.

    Workers fill private Counters; the caller merges them in chunk order
    after every worker is done, which reproduces consume() exactly.
    """
    seq = seq.upper()
    ksize = store.ksize
    chunks = plan_chunks(len(seq), ksize, chunk_size)
    if not chunks:
        return 0

    max_workers = min(workers or os.cpu_count() or 1, len(chunks))
    LOG.debug(f"parallel_consume: {len(seq):,} bases in {len(chunks):,} chunks, "
              f"workers={max_workers}")

    with futures.ThreadPoolExecutor(max_workers=max_workers) as ex:
        fn = lambda c: _count_chunk(seq, ksize, c[0], c[1], allow_bad_kmers, store.store_kmers)
        # list() waits for every chunk and re-raises the earliest failure
        partials = list(ex.map(fn, chunks))

    total = 0
    for counts, kmers, n in partials:
        merge_partial(store, counts, kmers)
        total += n
    return total
