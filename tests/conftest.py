import logging

import pytest

from kmertable import KmerCountTable


def create_sample_kmer_table(ksize, kmers, store_kmers=False):
    table = KmerCountTable(ksize, store_kmers=store_kmers)
    for kmer in kmers:
        table.count(kmer)
    return table


@pytest.fixture
def kct4():
    # AAAA/TTTT = 2, ATAT = 1, CCCC/GGGG = 3
    kct = KmerCountTable(ksize=4)
    for kmer in ("AAAA", "CCCC", "ATAT", "GGGG", "TTTT", "CCCC"):
        kct.count(kmer)
    return kct


@pytest.fixture
def stored4():
    kct = KmerCountTable(ksize=4, store_kmers=True)
    for kmer in ("AAAA", "TTTT", "AATT", "GGGG", "GGGG"):
        kct.count(kmer)
    return kct


@pytest.fixture
def warnings_log(caplog):
    caplog.set_level(logging.WARNING, logger="kmertable")
    return caplog


@pytest.fixture
def make_table():
    return create_sample_kmer_table
