import logging
import os
from typing import Optional

LOG = logging.getLogger("kmertable")

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# u64 ceiling for stored counts; increments and merges saturate here
MAX_COUNT = (1 << 64) - 1

DEFAULT_CONFIG = {
    "ksize": 31,
    "store_kmers": False,
    "chunk_size": 1_000_000,
    "workers": os.cpu_count() or 1,
    "allow_bad_kmers": True,
    "log_level": "INFO",
    "log_path": None,
}


def build_logger(log_path: Optional[str] = None, level: str = "INFO") -> logging.Logger:
    """Attach stream (and optional file) handlers to the package logger."""
    LOG.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    for h in list(LOG.handlers):
        LOG.removeHandler(h)
        h.close()
    fmt = logging.Formatter(LOG_FORMAT)
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    LOG.addHandler(sh)
    if log_path:
        d = os.path.dirname(os.path.abspath(log_path))
        os.makedirs(d, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setFormatter(fmt)
        LOG.addHandler(fh)
    return LOG


def load_config(path: Optional[str] = None) -> dict:
    import yaml
    cfg = {}
    if path:
        with open(path, "r") as f:
            try:
                cfg = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Config {path} is not valid YAML: {e}") from e
        if not isinstance(cfg, dict):
            raise ValueError(f"Config {path} must be a mapping, got {type(cfg).__name__}")
    for key, value in DEFAULT_CONFIG.items():
        cfg.setdefault(key, value)

    for key in ("ksize", "chunk_size", "workers"):
        v = cfg[key]
        if not isinstance(v, int) or isinstance(v, bool) or v < 1:
            raise ValueError(f"Config key {key} must be a positive integer, got {v!r}")
    for key in ("store_kmers", "allow_bad_kmers"):
        if not isinstance(cfg[key], bool):
            raise ValueError(f"Config key {key} must be true or false, got {cfg[key]!r}")
    if cfg["log_path"]:
        cfg["log_path"] = os.path.abspath(os.path.expanduser(cfg["log_path"]))
    return cfg
