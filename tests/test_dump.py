import pytest

from kmertable import KmerCountTable
from kmertable.errors import KmerStorageDisabledError, SortOptionError


def test_dump_conflicting_sort_options(kct4):
    with pytest.raises(SortOptionError, match="Cannot sort by both counts and keys"):
        kct4.dump(sortcounts=True, sortkeys=True)
    with pytest.raises(ValueError):
        kct4.dump_hashes(sortcounts=True, sortkeys=True)


def test_dump_kmers_conflicting_sort_options(stored4):
    with pytest.raises(ValueError, match="Cannot sort by both counts and kmers"):
        stored4.dump_kmers(sortcounts=True, sortkeys=True)


def test_dump_unsorted_matches_iteration(kct4):
    assert kct4.dump() == list(kct4)
    assert [h for h, _ in kct4.dump()] == kct4.hashes


def test_dump_sortkeys(kct4):
    result = kct4.dump(sortkeys=True)
    assert [h for h, _ in result] == sorted(kct4.hashes)


def test_dump_sortcounts(kct4):
    result = kct4.dump(sortcounts=True)
    assert [c for _, c in result] == [1, 2, 3]
    assert result[0][0] == kct4.hash_kmer("ATAT")


def test_dump_sortcounts_ties_by_hash():
    kct = KmerCountTable(ksize=4)
    kct.set_hash(5, 1)
    kct.set_hash(3, 1)
    kct.set_hash(4, 2)
    assert kct.dump(sortcounts=True) == [(3, 1), (5, 1), (4, 2)]


def test_dump_to_file(kct4, tmp_path):
    out = tmp_path / "dump.tsv"
    assert kct4.dump(file=str(out), sortkeys=True) is None
    lines = out.read_text().splitlines()
    assert lines == [f"{h}\t{c}" for h, c in kct4.dump(sortkeys=True)]


def test_dump_bad_path(kct4):
    with pytest.raises(OSError):
        kct4.dump(file="")


def test_dump_empty():
    kct = KmerCountTable(ksize=4)
    assert kct.dump() == []
    assert kct.dump(sortcounts=True) == []


def test_dump_kmers(stored4):
    assert stored4.dump_kmers(sortkeys=True) == [("AAAA", 2), ("AATT", 1), ("CCCC", 2)]
    assert stored4.dump_kmers(sortcounts=True) == [("AATT", 1), ("AAAA", 2), ("CCCC", 2)]
    assert stored4.dump_kmers() == [("AAAA", 2), ("AATT", 1), ("CCCC", 2)]


def test_dump_kmers_to_file(stored4, tmp_path):
    out = tmp_path / "kmers.tsv"
    stored4.dump_kmers(file=str(out), sortkeys=True)
    assert out.read_text() == "AAAA\t2\nAATT\t1\nCCCC\t2\n"


def test_dump_kmers_disabled(kct4):
    with pytest.raises(KmerStorageDisabledError):
        kct4.dump_kmers()
    with pytest.raises(LookupError):
        kct4.dump_kmers(sortkeys=True)


def test_dump_kmers_missing_text(stored4, warnings_log):
    stored4.set_hash(123, 5)
    assert ("AAAA", 2) in stored4.dump_kmers()
    assert len(stored4.dump_kmers()) == 3
    assert "1 hashes have no stored k-mer" in warnings_log.text
