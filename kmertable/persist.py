"""
Saving and loading count tables.

The native format is gzip-compressed JSON:

    {"ksize": 31, "version": "0.3.0", "consumed": 1234,
     "counts": {"<hash>": <count>, ...},
     "kmers":  {"<hash>": "<canonical kmer>", ...}}     # store_kmers only

JSON object keys are strings, so hashes are written in decimal and parsed
back to int. A Parquet export (hash, count[, kmer] columns, ksize and
version in the schema metadata) is provided for DuckDB/Polars consumers.
"""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np
import orjson

from ._version import __version__
from .errors import DeserializationError
from .utils import LOG, MAX_COUNT

try:
    import pyarrow as pa
    import pyarrow.parquet as pq
except Exception:
    pa = None
    pq = None


@dataclass
class TableState:
    """Validated contents of a persisted table."""
    ksize: int
    version: str
    consumed: int = 0
    counts: Dict[int, int] = field(default_factory=dict)
    kmers: Optional[Dict[int, str]] = None


# -----------------------
# JSON document
# -----------------------

def to_document(table) -> dict:
    doc = {
        "ksize": table.ksize,
        "version": table.version,
        "consumed": table.consumed,
        "counts": dict(table.items()),
    }
    if table.store_kmers:
        kmers = {}
        for h in doc["counts"]:
            text = table.kmer_text(h)
            if text is not None:
                kmers[h] = text
        doc["kmers"] = kmers
    return doc


def dumps(doc: dict) -> bytes:
    return orjson.dumps(doc, option=orjson.OPT_NON_STR_KEYS)


def _as_int(value, what: str, lo: int = 0, hi: int = MAX_COUNT) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeserializationError(f"{what} must be an integer, got {value!r}")
    if value < lo or value > hi:
        raise DeserializationError(f"{what} out of range: {value}")
    return value


def _as_hash(key) -> int:
    try:
        h = int(key)
    except (TypeError, ValueError):
        raise DeserializationError(f"hash key {key!r} is not an integer") from None
    return _as_int(h, "hash key")


def parse_document(doc) -> TableState:
    if not isinstance(doc, dict):
        raise DeserializationError(f"expected a JSON object, got {type(doc).__name__}")
    for key in ("ksize", "version", "counts"):
        if key not in doc:
            raise DeserializationError(f"missing field '{key}'")

    ksize = _as_int(doc["ksize"], "ksize", lo=1)
    version = doc["version"]
    if not isinstance(version, str):
        raise DeserializationError(f"version must be a string, got {version!r}")
    consumed = _as_int(doc.get("consumed", 0), "consumed", hi=(1 << 64) - 1)

    raw_counts = doc["counts"]
    if not isinstance(raw_counts, dict):
        raise DeserializationError("counts must be a JSON object")
    counts = {_as_hash(k): _as_int(v, f"count for hash {k}") for k, v in raw_counts.items()}

    kmers = None
    if "kmers" in doc and doc["kmers"] is not None:
        raw_kmers = doc["kmers"]
        if not isinstance(raw_kmers, dict):
            raise DeserializationError("kmers must be a JSON object")
        kmers = {}
        for k, v in raw_kmers.items():
            if not isinstance(v, str) or len(v) != ksize:
                raise DeserializationError(f"kmer for hash {k} is not a {ksize}-mer: {v!r}")
            kmers[_as_hash(k)] = v

    return TableState(ksize=ksize, version=version, consumed=consumed,
                      counts=counts, kmers=kmers)


def check_version(version: str) -> None:
    if version != __version__:
        LOG.warning(f"Version mismatch: loaded version is {version}, "
                    f"but current version is {__version__}")


def save(table, path: str) -> None:
    """Write `table` as gzip JSON. OSError propagates unchanged."""
    payload = dumps(to_document(table))
    with gzip.open(path, "wb") as f:
        f.write(payload)
    LOG.debug(f"Saved {len(table):,} hashes to {path}")


def load(path: str) -> TableState:
    # open errors (missing file, permissions) are I/O errors, not format errors
    with open(path, "rb") as fp:
        try:
            with gzip.GzipFile(fileobj=fp, mode="rb") as gz:
                raw = gz.read()
            doc = orjson.loads(raw)
        except (gzip.BadGzipFile, EOFError, zlib.error, orjson.JSONDecodeError) as e:
            raise DeserializationError(f"{path}: {e}") from e
    state = parse_document(doc)
    check_version(state.version)
    return state


# -----------------------
# Parquet
# -----------------------

def _require_arrow() -> None:
    if pa is None or pq is None:
        raise RuntimeError("pyarrow is required for Parquet import/export")


def write_parquet(table, path: str, compression: str = "zstd") -> None:
    _require_arrow()
    items = table.items()
    cols = {
        "hash": pa.array([h for h, _ in items], type=pa.uint64()),
        "count": pa.array([c for _, c in items], type=pa.uint64()),
    }
    if table.store_kmers:
        cols["kmer"] = pa.array([table.kmer_text(h) for h, _ in items], type=pa.string())
    tbl = pa.table(cols).replace_schema_metadata({
        "ksize": str(table.ksize),
        "version": table.version,
        "consumed": str(table.consumed),
    })
    pq.write_table(tbl, path, compression=compression)


def _uint64_column(tbl, name: str, path: str):
    col = tbl.column(name)
    if col.type != pa.uint64():
        raise DeserializationError(f"{path}: column '{name}' must be uint64, got {col.type}")
    if col.null_count:
        raise DeserializationError(f"{path}: column '{name}' has {col.null_count:,} nulls")
    return col.to_numpy(zero_copy_only=False)


def read_parquet(path: str) -> TableState:
    _require_arrow()
    try:
        tbl = pq.read_table(path)
    except pa.ArrowInvalid as e:
        raise DeserializationError(f"{path}: {e}") from e

    meta = {k.decode(): v.decode() for k, v in (tbl.schema.metadata or {}).items()}
    if "ksize" not in meta or "hash" not in tbl.column_names or "count" not in tbl.column_names:
        raise DeserializationError(f"{path}: not a kmertable Parquet export")
    try:
        ksize = int(meta["ksize"])
        consumed = int(meta.get("consumed", "0"))
    except ValueError as e:
        raise DeserializationError(f"{path}: bad metadata ({e})") from e
    ksize = _as_int(ksize, "ksize", lo=1)
    consumed = _as_int(consumed, "consumed")

    hash_arr = _uint64_column(tbl, "hash", path)
    count_arr = _uint64_column(tbl, "count", path)
    if np.unique(hash_arr).size != hash_arr.size:
        raise DeserializationError(f"{path}: duplicate hash rows")
    hashes = hash_arr.tolist()
    counts = count_arr.tolist()

    kmers = None
    if "kmer" in tbl.column_names:
        col = tbl.column("kmer")
        if not (pa.types.is_string(col.type) or pa.types.is_large_string(col.type)):
            raise DeserializationError(f"{path}: column 'kmer' must be string, got {col.type}")
        kmers = {}
        for h, t in zip(hashes, col.to_pylist()):
            if t is None:
                continue
            if len(t) != ksize:
                raise DeserializationError(f"{path}: kmer for hash {h} is not a {ksize}-mer: {t!r}")
            kmers[h] = t

    state = TableState(ksize=ksize,
                       version=meta.get("version", __version__),
                       consumed=consumed,
                       counts=dict(zip(hashes, counts)),
                       kmers=kmers)
    check_version(state.version)
    return state
