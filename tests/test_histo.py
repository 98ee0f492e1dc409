from kmertable import KmerCountTable


def test_min_max_empty():
    kct = KmerCountTable(ksize=4)
    assert kct.min == 0
    assert kct.max == 0
    assert kct.sum_counts == 0


def test_min_max(kct4):
    assert kct4.min == 1
    assert kct4.max == 3
    assert kct4.sum_counts == 6


def test_histo_zero(kct4):
    assert kct4.histo() == [(0, 0), (1, 1), (2, 1), (3, 1)]


def test_histo_no_zero(kct4):
    assert kct4.histo(zero=False) == [(1, 1), (2, 1), (3, 1)]


def test_histo_gaps():
    kct = KmerCountTable(ksize=4)
    kct["AAAA"] = 1
    kct["CCCC"] = 4
    kct["ATAT"] = 4
    assert kct.histo() == [(0, 0), (1, 1), (2, 0), (3, 0), (4, 2)]
    assert kct.histo(zero=False) == [(1, 1), (4, 2)]


def test_histo_empty():
    kct = KmerCountTable(ksize=4)
    assert kct.histo() == [(0, 0)]
    assert kct.histo(zero=False) == []


def test_histo_zero_count_entry():
    kct = KmerCountTable(ksize=4)
    kct["AAAA"] = 0
    kct["CCCC"] = 2
    assert kct.histo() == [(0, 1), (1, 0), (2, 1)]
    assert kct.min == 0


def test_histo_large_counts():
    kct = KmerCountTable(ksize=4)
    kct.set_hash(1, 2**63 + 5)
    assert kct.histo(zero=False) == [(2**63 + 5, 1)]
