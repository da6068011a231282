import random

import pytest

from kvlab.memtable import ENTRY_OVERHEAD, MemTable


def test_insert_and_search():
    table = MemTable(seed=1)
    table.insert(1, "SE")
    assert table.search(1) == "SE"
    assert table.search(2) is None


def test_update_replaces_value_and_adjusts_size():
    table = MemTable(seed=1)
    table.insert(7, "abc")
    table.insert(7, "abcdef")
    assert table.search(7) == "abcdef"
    assert len(table) == 1
    assert table.byte_size == ENTRY_OVERHEAD + len("abcdef")


def test_byte_size_matches_entries():
    rng = random.Random(3)
    table = MemTable(seed=3)
    expected = {}
    for _ in range(300):
        key = rng.randrange(1000)
        value = "s" * rng.randrange(1, 20)
        table.insert(key, value)
        expected[key] = value
    assert table.byte_size == sum(ENTRY_OVERHEAD + len(v) for v in expected.values())
    assert list(table.items()) == sorted(expected.items())
    assert len(table) == len(expected)


def test_delete():
    table = MemTable(seed=2)
    for key in range(10):
        table.insert(key, "v" * (key + 1))
    assert table.delete(4) is True
    assert table.delete(4) is False
    assert table.search(4) is None
    assert len(table) == 9
    assert [k for k, _ in table.items()] == [0, 1, 2, 3, 5, 6, 7, 8, 9]
    assert table.byte_size == sum(ENTRY_OVERHEAD + k + 1 for k in range(10) if k != 4)


def test_delete_all_then_reinsert():
    table = MemTable(seed=5)
    for key in range(50):
        table.insert(key, "x")
    for key in range(50):
        assert table.delete(key)
    assert len(table) == 0
    assert table.byte_size == 0
    table.insert(3, "y")
    assert list(table.items()) == [(3, "y")]


def test_scan_inclusive_range():
    table = MemTable(seed=4)
    for key in range(0, 20, 2):
        table.insert(key, str(key))
    assert table.scan(3, 9) == [(4, "4"), (6, "6"), (8, "8")]
    assert table.scan(4, 4) == [(4, "4")]
    assert table.scan(21, 30) == []


def test_lower_bound():
    table = MemTable(seed=4)
    for key in (10, 20, 30):
        table.insert(key, "v")
    assert table.lower_bound(15) == (20, "v")
    assert table.lower_bound(10) == (10, "v")
    assert table.lower_bound(31) is None


def test_reset():
    table = MemTable(seed=6)
    for key in range(100):
        table.insert(key, "abc")
    table.reset()
    assert len(table) == 0
    assert table.byte_size == 0
    assert table.search(5) is None
    assert list(table.items()) == []


def test_invalid_probability():
    with pytest.raises(ValueError):
        MemTable(p=1.0)


def test_invalid_key():
    table = MemTable()
    with pytest.raises(ValueError):
        table.insert(-1, "x")
    with pytest.raises(ValueError):
        table.insert(2**64, "x")