import random

import pytest

from kvlab.geo_skiplist import SkipList, average_query_distance, gen_input, main


def test_put_then_get():
    sl = SkipList(0.5, seed=1)
    for key in (5, 1, 9, 3):
        sl.put(key, bytes([key]))
    for key in (5, 1, 9, 3):
        assert sl.get(key) == bytes([key])


def test_missing_key_returns_none():
    sl = SkipList(0.5, seed=1)
    sl.put(10, b"x")
    assert sl.get(11) is None
    assert sl.get(0) is None


def test_empty_list_get_and_distance():
    sl = SkipList()
    assert sl.get(42) is None
    assert sl.query_distance(42) == 1


def test_single_key_distance():
    sl = SkipList(0.9, seed=3)
    sl.put(7, b"v")
    assert sl.query_distance(7) == 2


@pytest.mark.parametrize("p", [0.0, 0.25, 0.5, 0.9])
def test_many_keys_all_found(p):
    rng = random.Random(4)
    keys = rng.sample(range(10**9), 300)
    sl = SkipList(p, seed=2)
    for key in keys:
        sl.put(key, str(key).encode())
    for key in keys:
        assert sl.get(key) == str(key).encode()
        assert sl.query_distance(key) >= 2


def test_p_zero_gives_linear_distance():
    sl = SkipList(0.0, seed=0)
    for key in range(1, 11):
        sl.put(key, b"")
    distances = [sl.query_distance(k) for k in range(1, 11)]
    assert distances == sorted(distances)
    assert distances[-1] - distances[0] == 9


@pytest.mark.parametrize("p", [-0.1, 1.0, 1.5])
def test_invalid_probability(p):
    with pytest.raises(ValueError):
        SkipList(p)


def test_gen_input_shape_and_determinism():
    pairs = gen_input(200, 15)
    assert len(pairs) == 200
    assert all(0 <= key < 2**64 for key, _ in pairs)
    assert all(len(value) >= 1 for _, value in pairs)
    assert pairs == gen_input(200, 15)
    assert pairs != gen_input(200, 16)


def test_average_query_distance_is_deterministic():
    a = average_query_distance(100, 0.5, seed=15, queries=500)
    b = average_query_distance(100, 0.5, seed=15, queries=500)
    assert a == b
    assert a >= 2.0


def test_average_query_distance_rejects_empty():
    with pytest.raises(ValueError):
        average_query_distance(0, 0.5)


def test_main_single_run_prints_average(capsys):
    assert main(["50", "15", "0.5"]) == 0
    out = capsys.readouterr().out.strip()
    assert float(out) == pytest.approx(average_query_distance(50, 0.5, 15), abs=1e-6)


def test_main_requires_all_three_arguments():
    with pytest.raises(SystemExit):
        main(["50"])