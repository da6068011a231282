import io

import pytest

from kvlab.harness import (
    Checker,
    correctness_main,
    measure_throughput,
    persistence_check,
    persistence_main,
    persistence_prepare,
    regular_test,
    throughput_main,
)
from kvlab.kvstore import KVStore


def _checker(verbose=False):
    out = io.StringIO()
    return Checker(verbose, out), out


def test_expect_counts_passes_and_failures():
    checker, _ = _checker()
    assert checker.expect(1, 1) is True
    assert checker.expect("a", "b") is False
    assert checker.tests == 2
    assert checker.passed_tests == 1


def test_phase_pass_line_and_reset():
    checker, out = _checker()
    checker.expect(3, 3)
    checker.expect("x", "x")
    assert checker.phase() is True
    assert out.getvalue() == "  Phase 1: 2/2 [PASS]\n"
    assert checker.tests == 0 and checker.passed_tests == 0


def test_phase_fail_and_report():
    checker, out = _checker()
    checker.expect(1, 1)
    checker.phase()
    checker.expect(1, 2)
    assert checker.phase() is False
    assert "  Phase 2: 0/1 [FAIL]" in out.getvalue()
    assert checker.report() == (1, 2)
    assert out.getvalue().endswith("1/2 passed.\n")
    assert checker.phases == 0 and checker.passed_phases == 0


def test_verbose_reports_mismatch_on_stderr(capsys):
    checker, _ = _checker(verbose=True)
    checker.expect(1, 2)
    err = capsys.readouterr().err
    assert "TEST Error" in err
    assert "expected 1, got 2" in err


def test_quiet_checker_writes_nothing_on_mismatch(capsys):
    checker, _ = _checker(verbose=False)
    checker.expect(1, 2)
    assert capsys.readouterr().err == ""


def test_regular_test_passes_in_memory(tmp_path):
    checker, out = _checker()
    with KVStore(tmp_path) as store:
        passed, total = regular_test(store, checker, 64)
        assert passed == total
        assert total > 0
        assert store.scan(0, 63) == []
    assert "[FAIL]" not in out.getvalue()


def test_regular_test_passes_across_flush(tmp_path):
    checker, out = _checker()
    with KVStore(tmp_path) as store:
        passed, total = regular_test(store, checker, 2100)
        assert (tmp_path / "level-0").is_dir()
        assert passed == total
    assert "[FAIL]" not in out.getvalue()


def test_regular_test_rejects_tiny_maximum(tmp_path):
    checker, _ = _checker()
    with KVStore(tmp_path) as store:
        with pytest.raises(ValueError):
            regular_test(store, checker, 1)


def test_persistence_round_trip(tmp_path):
    checker, out = _checker()
    with KVStore(tmp_path) as store:
        passed, total = persistence_prepare(store, checker, 64, rounds=0)
        assert passed == total
    assert "Data is ready" in out.getvalue()

    checker2, _ = _checker()
    with KVStore(tmp_path) as store:
        passed, total = persistence_check(store, checker2, 64)
        assert (passed, total) == (1, 1)
        assert store.get(1) == "tt"
        assert store.get(2) == ""
        assert store.get(3) == "ssss"


def test_persistence_check_fails_on_empty_store(tmp_path):
    checker, out = _checker()
    with KVStore(tmp_path) as store:
        store.reset()
        assert persistence_check(store, checker, 16) == (0, 1)
    assert "[FAIL]" in out.getvalue()


def test_measure_throughput_leaves_store_empty(tmp_path):
    with KVStore(tmp_path) as store:
        result = measure_throughput(store, 100)
        assert result.count == 100
        assert all(store.get(i) == "" for i in range(100))
    assert min(result.put_seconds, result.get_seconds, result.delete_seconds) >= 0
    assert all(rate > 0 for rate in result.throughput)
    assert all(latency >= 0 for latency in result.latency)


def test_measure_throughput_rejects_non_positive(tmp_path):
    with KVStore(tmp_path) as store:
        with pytest.raises(ValueError):
            measure_throughput(store, 0)


def test_correctness_main_small(tmp_path, capsys):
    code = correctness_main(
        ["--dir", str(tmp_path), "--simple-max", "32", "--large-max", "64"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "KVStore Correctness Test" in out
    assert "[Simple Test]" in out and "[Large Test]" in out
    assert "[FAIL]" not in out
    assert out.count("passed.") == 2


def test_persistence_main_prepare_then_test(tmp_path, capsys):
    assert persistence_main(["--dir", str(tmp_path), "--max", "16", "--rounds", "0"]) == 0
    prepared = capsys.readouterr().out
    assert "<<Preparation Mode>>" in prepared

    assert persistence_main(["-t", "--dir", str(tmp_path), "--max", "16"]) == 0
    checked = capsys.readouterr().out
    assert "<<Test Mode>>" in checked
    assert "[PASS]" in checked
    assert "[FAIL]" not in checked


def test_persistence_main_rejects_unknown_argument():
    with pytest.raises(SystemExit):
        persistence_main(["-x"])