import math

from kmertable import KmerCountTable


def _expected_cosine(v1, v2):
    dot = sum(a * b for a, b in zip(v1, v2))
    n1 = math.sqrt(sum(a * a for a in v1))
    n2 = math.sqrt(sum(b * b for b in v2))
    return dot / (n1 * n2)


def _fill(table, counts):
    for kmer, n in counts.items():
        table[kmer] = n
    return table


KMERS = ["AAAA", "AATT", "GGGG", "CCAA", "ATTG"]


def test_cosine_identical_tables():
    counts = dict(zip(KMERS, [5, 3, 1, 4, 6]))
    kct1 = _fill(KmerCountTable(ksize=4), counts)
    kct2 = _fill(KmerCountTable(ksize=4), counts)
    assert math.isclose(kct1.cosine(kct2), 1.0, rel_tol=1e-9)
    assert kct1.cosine(kct2) <= 1.0


def test_cosine_different_tables():
    kct1 = _fill(KmerCountTable(ksize=4), dict(zip(KMERS, [4, 3, 1, 4, 6])))
    kct2 = _fill(KmerCountTable(ksize=4), dict(zip(KMERS, [5, 3, 1, 4, 0])))
    expected = _expected_cosine([4, 3, 1, 4, 6], [5, 3, 1, 4, 0])
    assert math.isclose(kct1.cosine(kct2), expected, rel_tol=1e-9)
    assert math.isclose(kct2.cosine(kct1), expected, rel_tol=1e-9)


def test_cosine_empty_and_disjoint():
    kct1 = _fill(KmerCountTable(ksize=4), {"AAAA": 5, "TTTG": 10})
    kct2 = KmerCountTable(ksize=4)
    assert kct1.cosine(kct2) == 0.0
    kct2["ATTG"] = 1
    assert kct1.cosine(kct2) == 0.0


def test_cosine_both_empty():
    assert KmerCountTable(ksize=4).cosine(KmerCountTable(ksize=4)) == 0.0


def test_cosine_zero_counts_only():
    kct1 = _fill(KmerCountTable(ksize=4), {"AAAA": 0})
    kct2 = _fill(KmerCountTable(ksize=4), {"AAAA": 3})
    assert kct1.cosine(kct2) == 0.0


def test_cosine_partial_overlap():
    kct1 = _fill(KmerCountTable(ksize=4),
                 {"AAAA": 0, "AATT": 3, "GGGG": 1, "CCAA": 4, "ATTG": 0, "AGAT": 0})
    kct2 = _fill(KmerCountTable(ksize=4),
                 {"AAAA": 5, "AATT": 4, "GGGG": 1, "CCAA": 4, "ATTG": 1})
    expected = _expected_cosine([0, 3, 1, 4, 0, 0], [5, 4, 1, 4, 1, 0])
    result = kct1.cosine(kct2)
    assert 0.0 < result < 1.0
    assert math.isclose(result, expected, rel_tol=1e-9)


def test_jaccard(make_table):
    table1 = make_table(3, ["AAA", "AAC"])
    table2 = make_table(3, ["AAC", "AAG"])
    assert table1.jaccard(table2) == 1 / 3
    assert KmerCountTable(3).jaccard(KmerCountTable(3)) == 0.0
    assert table1.jaccard(table1) == 1.0
