from kmertable import KmerCountTable


def test_union(make_table):
    table1 = make_table(3, ["AAA", "AAC"])
    table2 = make_table(3, ["AAC", "AAG"])
    assert table1.union(table2) == set(table1.hashes) | set(table2.hashes)
    assert len(table1.union(table2)) == 3


def test_intersection(make_table):
    table1 = make_table(3, ["AAA", "AAC"])
    table2 = make_table(3, ["AAC", "AAG"])
    assert table1.intersection(table2) == {table1.hash_kmer("AAC")}


def test_difference(make_table):
    table1 = make_table(3, ["AAA", "AAC"])
    table2 = make_table(3, ["AAC", "AAG"])
    assert table1.difference(table2) == {table1.hash_kmer("AAA")}
    assert table2.difference(table1) == {table1.hash_kmer("AAG")}


def test_symmetric_difference(make_table):
    table1 = make_table(3, ["AAA", "AAC"])
    table2 = make_table(3, ["AAC", "AAG"])
    assert table1.symmetric_difference(table2) == {
        table1.hash_kmer("AAA"), table1.hash_kmer("AAG")
    }


def test_operators(make_table):
    table1 = make_table(3, ["AAA", "AAC"])
    table2 = make_table(3, ["AAC", "AAG"])
    assert table1 | table2 == table1.union(table2)
    assert table1 & table2 == table1.intersection(table2)
    assert table1 - table2 == table1.difference(table2)
    assert table1 ^ table2 == table1.symmetric_difference(table2)


def test_setops_ignore_counts_and_ksize():
    table1 = KmerCountTable(3)
    table2 = KmerCountTable(4)
    table1.set_hash(1, 100)
    table2.set_hash(1, 1)
    table2.set_hash(2, 0)
    assert table1.union(table2) == {1, 2}
    assert table1.intersection(table2) == {1}


def test_setops_leave_tables_alone(make_table):
    table1 = make_table(3, ["AAA", "AAC"])
    table2 = make_table(3, ["AAC", "AAG"])
    before1, before2 = list(table1), list(table2)
    table1.union(table2)
    table1.symmetric_difference(table2)
    assert list(table1) == before1
    assert list(table2) == before2
