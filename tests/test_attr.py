from pathlib import Path

import pytest
import toml

import kmertable
from kmertable import KmerCountTable


def test_version_matches_pyproject():
    pyproject = toml.load(Path(__file__).resolve().parents[1] / "pyproject.toml")
    assert kmertable.__version__ == pyproject["project"]["version"]


def test_new_table_attributes():
    kct = KmerCountTable(ksize=21)
    assert kct.ksize == 21
    assert kct.version == kmertable.__version__
    assert kct.consumed == 0
    assert kct.store_kmers is False
    assert len(kct) == 0
    assert "ksize=21" in repr(kct)


def test_ksize_is_read_only():
    kct = KmerCountTable(ksize=21)
    with pytest.raises(AttributeError):
        kct.ksize = 5
    assert kct.ksize == 21
