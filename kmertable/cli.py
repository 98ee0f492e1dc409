#!/usr/bin/env python3
"""
kmertable command line.

  count    count k-mers of raw sequences (one sequence per line) into a table
  histo    print the count histogram of a saved table
  dump     print or write (hash|kmer, count) pairs
  merge    add several saved tables together
  cut      prune a saved table by count thresholds
  compare  set sizes and similarity of two tables, as JSON
  export   write a saved table as Parquet
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from typing import Iterator, Optional, Sequence

from . import persist
from .errors import KmerTableError
from .table import KmerCountTable
from .utils import LOG, build_logger, load_config


def _iter_sequences(path: str) -> Iterator[str]:
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if line:
                yield line


def _pick(value, cfg: dict, key: str):
    return cfg[key] if value is None else value


# -----------------------
# Commands
# -----------------------

def cmd_count(args: argparse.Namespace, cfg: dict) -> None:
    ksize = _pick(args.ksize, cfg, "ksize")
    store_kmers = args.store_kmers or cfg["store_kmers"]
    chunk_size = _pick(args.chunk_size, cfg, "chunk_size")
    workers = _pick(args.workers, cfg, "workers")
    allow_bad = cfg["allow_bad_kmers"] and not args.strict

    if args.merge_into:
        table = KmerCountTable.load(args.merge_into)
        if table.ksize != ksize and args.ksize is not None:
            LOG.error(f"--ksize {ksize} does not match {args.merge_into} (ksize={table.ksize})")
            sys.exit(2)
        if store_kmers and not table.store_kmers:
            LOG.warning(f"{args.merge_into} does not store k-mers; --store-kmers is ignored")
    else:
        table = KmerCountTable(ksize, store_kmers=store_kmers)

    start = time.time()
    n_seqs = n_kmers = 0
    for seq in _iter_sequences(args.input):
        if workers > 1 and len(seq) > chunk_size:
            n_kmers += table.parallel_consume(seq, chunk_size, allow_bad, workers)
        else:
            n_kmers += table.consume(seq, allow_bad)
        n_seqs += 1
        if n_seqs % 10000 == 0:
            LOG.info(f"Processed {n_seqs:,} sequences / {n_kmers:,} k-mers "
                     f"in {time.time() - start:,.1f}s")

    table.save(args.out)
    LOG.info(f"DONE count: {n_seqs:,} sequences, {n_kmers:,} k-mers, "
             f"{len(table):,} distinct; wrote {args.out}")


def cmd_histo(args: argparse.Namespace, cfg: dict) -> None:
    table = KmerCountTable.load(args.table)
    for count, n in table.histo(zero=not args.no_zero):
        print(f"{count}\t{n}")


def cmd_dump(args: argparse.Namespace, cfg: dict) -> None:
    table = KmerCountTable.load(args.table)
    fn = table.dump_kmers if args.kmers else table.dump
    pairs = fn(file=args.out, sortcounts=args.sortcounts, sortkeys=args.sortkeys)
    if pairs is not None:
        for key, count in pairs:
            print(f"{key}\t{count}")
    else:
        LOG.info(f"Wrote {len(table):,} records to {args.out}")


def cmd_merge(args: argparse.Namespace, cfg: dict) -> None:
    table = KmerCountTable.load(args.tables[0])
    for path in args.tables[1:]:
        added, new_keys = table.add(KmerCountTable.load(path))
        LOG.info(f"{path}: added {added:,} counts, {new_keys:,} new hashes")
    table.save(args.out)
    LOG.info(f"Wrote merged table ({len(table):,} hashes) to {args.out}")


def cmd_cut(args: argparse.Namespace, cfg: dict) -> None:
    table = KmerCountTable.load(args.table)
    if args.min is not None:
        LOG.info(f"mincut {args.min}: removed {table.mincut(args.min):,}")
    if args.max is not None:
        LOG.info(f"maxcut {args.max}: removed {table.maxcut(args.max):,}")
    table.save(args.out)


def cmd_compare(args: argparse.Namespace, cfg: dict) -> None:
    a = KmerCountTable.load(args.lhs)
    b = KmerCountTable.load(args.rhs)
    if a.ksize != b.ksize:
        LOG.warning(f"Comparing tables with different ksize: {a.ksize} vs {b.ksize}")
    summary = {
        "lhs": {"path": args.lhs, "ksize": a.ksize, "distinct": len(a), "sum_counts": a.sum_counts},
        "rhs": {"path": args.rhs, "ksize": b.ksize, "distinct": len(b), "sum_counts": b.sum_counts},
        "union": len(a | b),
        "intersection": len(a & b),
        "lhs_not_in_rhs": len(a - b),
        "rhs_not_in_lhs": len(b - a),
        "cosine": a.cosine(b),
        "jaccard": a.jaccard(b),
    }
    print(json.dumps(summary, indent=2))


def cmd_export(args: argparse.Namespace, cfg: dict) -> None:
    if persist.pa is None:
        LOG.error("pyarrow is required for Parquet export (pip install kmertable[parquet]).")
        sys.exit(2)
    table = KmerCountTable.load(args.table)
    table.write_parquet(args.parquet, compression=args.compression)
    LOG.info(f"Wrote {len(table):,} rows to {args.parquet}")


# -----------------------
# CLI
# -----------------------

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Exact canonical k-mer counting, merging and comparison."
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    pc = sub.add_parser("count", help="Count k-mers of raw sequences, one per line.")
    pc.add_argument("--input", required=True, help="Text file, one raw DNA sequence per line.")
    pc.add_argument("--out", required=True, help="Output table (.json.gz).")
    pc.add_argument("--ksize", "-k", type=int, default=None, help="k-mer size (config default 31).")
    pc.add_argument("--store-kmers", action="store_true", help="Keep canonical k-mer text.")
    pc.add_argument("--chunk-size", type=int, default=None,
                    help="Windows per parallel chunk for long sequences.")
    pc.add_argument("--workers", "-w", type=int, default=None, help="Worker threads.")
    pc.add_argument("--strict", action="store_true", help="Fail on the first invalid base.")
    pc.add_argument("--merge-into", default=None, help="Existing table to add counts to.")
    pc.set_defaults(func=cmd_count)

    ph = sub.add_parser("histo", help="Print count histogram as TSV.")
    ph.add_argument("table")
    ph.add_argument("--no-zero", action="store_true", help="Only list observed counts.")
    ph.set_defaults(func=cmd_histo)

    pd = sub.add_parser("dump", help="Print or write (key, count) pairs.")
    pd.add_argument("table")
    pd.add_argument("--kmers", action="store_true", help="Key by k-mer text (needs --store-kmers).")
    pd.add_argument("--sortcounts", action="store_true")
    pd.add_argument("--sortkeys", action="store_true")
    pd.add_argument("--out", default=None, help="Write TSV here instead of stdout.")
    pd.set_defaults(func=cmd_dump)

    pm = sub.add_parser("merge", help="Add tables together.")
    pm.add_argument("out")
    pm.add_argument("tables", nargs="+")
    pm.set_defaults(func=cmd_merge)

    pcut = sub.add_parser("cut", help="Drop hashes below --min or above --max.")
    pcut.add_argument("table")
    pcut.add_argument("--out", required=True)
    pcut.add_argument("--min", type=int, default=None)
    pcut.add_argument("--max", type=int, default=None)
    pcut.set_defaults(func=cmd_cut)

    pcmp = sub.add_parser("compare", help="Set sizes and similarity of two tables.")
    pcmp.add_argument("lhs")
    pcmp.add_argument("rhs")
    pcmp.set_defaults(func=cmd_compare)

    pe = sub.add_parser("export", help="Write a table as Parquet.")
    pe.add_argument("table")
    pe.add_argument("--parquet", required=True)
    pe.add_argument("--compression", default="zstd")
    pe.set_defaults(func=cmd_export)

    p.add_argument("--config", "-c", default=None, help="YAML config with defaults.")
    p.add_argument("--log-level", default=None)
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"kmertable: bad config: {e}", file=sys.stderr)
        sys.exit(2)
    build_logger(cfg.get("log_path"), args.log_level or cfg["log_level"])
    try:
        args.func(args, cfg)
    except KmerTableError as e:
        LOG.error(str(e))
        sys.exit(2)


if __name__ == "__main__":
    main()
