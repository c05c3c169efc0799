import gzip
import lzma
from decimal import Decimal

import numpy as np
import pytest

from stats import mean, standard_deviation, variance
from utils import ValueLoader, has_length, peek


def write_text(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_has_length():
    assert has_length([1, 2])
    assert has_length(np.zeros(3))
    assert not has_length(iter([1, 2]))
    assert not has_length(x for x in [1, 2])


def test_peek_keeps_first_element():
    is_empty, it = peek(x for x in [1, 2, 3])
    assert not is_empty
    assert list(it) == [1, 2, 3]


def test_peek_empty():
    is_empty, it = peek(iter([]))
    assert is_empty
    assert list(it) == []


def test_loader_reads_plain_text(tmp_path):
    path = write_text(tmp_path / "values.txt", "# header\n0 1 2\n\n3 4\n5\n6 7 8 9\n")
    loader = ValueLoader(str(path))
    assert list(loader) == [float(i) for i in range(10)]
    assert not has_length(loader)


def test_loader_reads_compressed_files_in_order(tmp_path):
    with gzip.open(tmp_path / "a.gz", "wt", encoding="utf-8") as f:
        f.write("1 10 40\n")
    with lzma.open(tmp_path / "b.xz", "wt", encoding="utf-8") as f:
        f.write("15 4\n")
    write_text(tmp_path / "c.txt", "5 22\n")
    write_text(tmp_path / "ignored.csv", "1000\n")

    loader = ValueLoader(str(tmp_path))
    assert len(loader.input_files) == 3
    assert list(loader) == [1, 10, 40, 15, 4, 5, 22]


def test_loader_feeds_aggregates(tmp_path):
    write_text(tmp_path / "values.txt", "1 10 40 15 4 5 22\n")
    loader = ValueLoader(str(tmp_path))
    assert mean(loader) == pytest.approx(97 / 7)
    assert variance(loader) == pytest.approx(184.476, rel=1e-4)
    assert variance(loader, population=True) == pytest.approx(158.122, rel=1e-4)


def test_loader_with_custom_parser(tmp_path):
    write_text(tmp_path / "values.txt", "1500 2000 3500\n4000 5000 6000\n7500 8000 9500\n")
    ints = ValueLoader(str(tmp_path / "values.txt"), parse=int)
    assert standard_deviation(ints, 0) == 2753

    decimals = ValueLoader(str(tmp_path / "values.txt"), parse=Decimal)
    assert float(mean(decimals, Decimal(0))) == pytest.approx(47000 / 9)


def test_loader_short_input_is_not_available(tmp_path):
    write_text(tmp_path / "values.txt", "1 2\n")
    assert np.isnan(variance(ValueLoader(str(tmp_path))))
    assert variance(ValueLoader(str(tmp_path), parse=int), 0) is None


def test_loader_reports_bad_token(tmp_path):
    path = write_text(tmp_path / "values.txt", "1 2\n3 oops\n")
    with pytest.raises(ValueError, match="values.txt:2"):
        list(ValueLoader(str(path)))
