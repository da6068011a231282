"""Correctness, persistence and throughput checks for the key-value store."""

from __future__ import annotations

import argparse
import inspect
import itertools
import sys
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence, TextIO

from .kvstore import KVStore

NOT_FOUND = ""
SIMPLE_TEST_MAX = 512
LARGE_TEST_MAX = 1024 * 64
PERSISTENCE_TEST_MAX = 1024 * 32
THROUGHPUT_MAX = 1024 * 8
DEFAULT_DIR = "./data"


class Checker:
    """Counts expectations, groups them into phases and reports the outcome."""

    def __init__(self, verbose: bool = True, out: Optional[TextIO] = None):
        self.verbose = verbose
        self.out = out if out is not None else sys.stdout
        self.tests = 0
        self.passed_tests = 0
        self.phases = 0
        self.passed_phases = 0

    def expect(self, expected: Any, got: Any) -> bool:
        """Record one comparison; report a mismatch on stderr when verbose."""
        self.tests += 1
        if expected == got:
            self.passed_tests += 1
            return True
        if self.verbose:
            caller = inspect.currentframe().f_back
            location = f"{caller.f_code.co_filename}:{caller.f_lineno}" if caller else "?"
            print(
                f"TEST Error @{location}, expected {expected}, got {got}",
                file=sys.stderr,
            )
        return False

    def phase(self) -> bool:
        """Close the current phase, print its tally and return whether it passed."""
        passed = self.tests == self.passed_tests
        self.phases += 1
        if passed:
            self.passed_phases += 1
        verdict = "[PASS]" if passed else "[FAIL]"
        print(
            f"  Phase {self.phases}: {self.passed_tests}/{self.tests} {verdict}",
            file=self.out,
            flush=True,
        )
        self.tests = 0
        self.passed_tests = 0
        return passed

    def report(self) -> tuple[int, int]:
        """Print and return ``(passed phases, phases)``, then start counting afresh."""
        result = (self.passed_phases, self.phases)
        print(f"{result[0]}/{result[1]} passed.", file=self.out, flush=True)
        self.phases = 0
        self.passed_phases = 0
        return result


def _s(i: int, char: str = "s") -> str:
    return char * (i + 1)


def regular_test(store: KVStore, checker: Checker, maximum: int) -> tuple[int, int]:
    """Single-key, bulk insert, scan and deletion checks over keys ``0..maximum-1``."""
    if maximum < 2:
        raise ValueError(f"maximum must be at least 2, got {maximum}")

    checker.expect(NOT_FOUND, store.get(1))
    store.put(1, "SE")
    checker.expect("SE", store.get(1))
    checker.expect(True, store.delete(1))
    checker.expect(NOT_FOUND, store.get(1))
    checker.expect(False, store.delete(1))
    checker.phase()

    for i in range(maximum):
        store.put(i, _s(i))
        checker.expect(_s(i), store.get(i))
    checker.phase()

    for i in range(maximum):
        checker.expect(_s(i), store.get(i))
    checker.phase()

    half = maximum // 2
    expected = [(i, _s(i)) for i in range(half)]
    got = store.scan(0, half - 1)
    checker.expect(len(expected), len(got))
    for want, have in zip(expected, itertools.chain(got, itertools.repeat(None))):
        if have is None:
            checker.expect(want[0], -1)
            checker.expect(want[1], NOT_FOUND)
        else:
            checker.expect(want[0], have[0])
            checker.expect(want[1], have[1])
    checker.phase()

    for i in range(0, maximum, 2):
        checker.expect(True, store.delete(i))
    for i in range(maximum):
        checker.expect(_s(i) if i & 1 else NOT_FOUND, store.get(i))
    for i in range(1, maximum):
        checker.expect(bool(i & 1), store.delete(i))
    checker.phase()

    return checker.report()


def persistence_prepare(
    store: KVStore, checker: Checker, maximum: int, rounds: Optional[int] = None
) -> tuple[int, int]:
    """Write the data that ``persistence_check`` expects, then keep the store busy.

    After the checks about 10 MB of filler is written to push earlier data out
    of memory. The store is then churned ``rounds`` times, or forever when
    ``rounds`` is None, so the process can be killed at any moment.
    """
    store.reset()

    for i in range(maximum):
        store.put(i, _s(i))
        checker.expect(_s(i), store.get(i))
    checker.phase()

    for i in range(maximum):
        checker.expect(_s(i), store.get(i))
    checker.phase()

    for i in range(0, maximum, 2):
        checker.expect(True, store.delete(i))

    for i in range(maximum):
        case = i & 3
        if case == 0:
            checker.expect(NOT_FOUND, store.get(i))
            store.put(i, _s(i, "t"))
        elif case == 1:
            checker.expect(_s(i), store.get(i))
            store.put(i, _s(i, "t"))
        elif case == 2:
            checker.expect(NOT_FOUND, store.get(i))
        else:
            checker.expect(_s(i), store.get(i))
    checker.phase()

    result = checker.report()

    for i in range(10241):
        store.put(maximum + i, "x" * 1024)

    print(
        "Data is ready, please press ctrl-c/ctrl-d to terminate this program!",
        file=checker.out,
        flush=True,
    )

    cycles = itertools.count() if rounds is None else range(rounds)
    for _ in cycles:
        for i in range(1025):
            store.delete(maximum + i)
            store.put(maximum + i, "." * 1024)
            store.put(maximum + i, "x" * 512)
    return result


def persistence_check(store: KVStore, checker: Checker, maximum: int) -> tuple[int, int]:
    """Verify the data left behind by ``persistence_prepare``."""
    for i in range(maximum):
        case = i & 3
        if case in (0, 1):
            checker.expect(_s(i, "t"), store.get(i))
        elif case == 2:
            checker.expect(NOT_FOUND, store.get(i))
        else:
            checker.expect(_s(i), store.get(i))
    checker.phase()
    return checker.report()


@dataclass(frozen=True)
class Throughput:
    """CPU seconds spent on ``count`` puts, gets and deletes."""

    count: int
    put_seconds: float
    get_seconds: float
    delete_seconds: float

    def _rate(self, seconds: float) -> float:
        return self.count / seconds if seconds else float("inf")

    def _latency_ms(self, seconds: float) -> float:
        return seconds * 1000 / self.count

    @property
    def throughput(self) -> tuple[float, float, float]:
        """Operations per second for put, get and delete."""
        return (
            self._rate(self.put_seconds),
            self._rate(self.get_seconds),
            self._rate(self.delete_seconds),
        )

    @property
    def latency(self) -> tuple[float, float, float]:
        """Average milliseconds per put, get and delete."""
        return (
            self._latency_ms(self.put_seconds),
            self._latency_ms(self.get_seconds),
            self._latency_ms(self.delete_seconds),
        )


def measure_throughput(store: KVStore, maximum: int = THROUGHPUT_MAX) -> Throughput:
    """Reset ``store``, then time ``maximum`` puts, gets and deletes."""
    if maximum <= 0:
        raise ValueError(f"maximum must be positive, got {maximum}")
    store.reset()

    start = time.process_time()
    for i in range(maximum):
        store.put(i, _s(i))
    put_seconds = time.process_time() - start

    start = time.process_time()
    for i in range(maximum):
        store.get(i)
    get_seconds = time.process_time() - start

    start = time.process_time()
    for i in range(maximum):
        store.delete(i)
    delete_seconds = time.process_time() - start

    return Throughput(maximum, put_seconds, get_seconds, delete_seconds)


def correctness_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="KVStore correctness test.")
    parser.add_argument("-v", action="store_true", dest="verbose",
                        help="print extra info for failed tests")
    parser.add_argument("--dir", default=DEFAULT_DIR)
    parser.add_argument("--simple-max", type=int, default=SIMPLE_TEST_MAX)
    parser.add_argument("--large-max", type=int, default=LARGE_TEST_MAX)
    args = parser.parse_args(argv)

    print(f"Usage: {parser.prog} [-v]")
    print(f"  -v: print extra info for failed tests [currently {'ON' if args.verbose else 'OFF'}]")
    print(flush=True)

    checker = Checker(args.verbose)
    with KVStore(args.dir) as store:
        print("KVStore Correctness Test")
        store.reset()
        print("[Simple Test]")
        regular_test(store, checker, args.simple_max)
        store.reset()
        print("[Large Test]")
        regular_test(store, checker, args.large_max)
    return 0


def _persistence_usage(prog: str, verbose: str, mode: str) -> None:
    print(f"Usage: {prog} [-t] [-v]")
    print(
        "  -t: test mode for persistence test, if -t is not given, "
        f"the program only prepares data for test. [currently {mode}]"
    )
    print(f"  -v: print extra info for failed tests [currently {verbose}]")
    print()
    print(" NOTE: A normal usage is as follows:")
    print(f"    1. invoke `{prog}`;")
    print("    2. terminate (kill) the program when data is ready;")
    print(f"    3. invoke `{prog} -t ` to test.")
    print(flush=True)


def persistence_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="KVStore persistence test.")
    parser.add_argument("-t", action="store_true", dest="test_mode",
                        help="check data written by an earlier run")
    parser.add_argument("-v", action="store_true", dest="verbose",
                        help="print extra info for failed tests")
    parser.add_argument("--dir", default=DEFAULT_DIR)
    parser.add_argument("--max", type=int, default=PERSISTENCE_TEST_MAX, dest="maximum")
    parser.add_argument("--rounds", type=int, default=None,
                        help="churn rounds after preparing (default: until killed)")
    args = parser.parse_args(argv)

    mode = "Test Mode" if args.test_mode else "Preparation Mode"
    _persistence_usage(parser.prog, "ON" if args.verbose else "OFF", mode)

    checker = Checker(args.verbose)
    with KVStore(args.dir) as store:
        print("KVStore Persistence Test")
        if args.test_mode:
            print("<<Test Mode>>")
            persistence_check(store, checker, args.maximum)
        else:
            print("<<Preparation Mode>>")
            persistence_prepare(store, checker, args.maximum, args.rounds)
    return 0


def throughput_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="KVStore throughput and latency.")
    parser.add_argument("--dir", default=DEFAULT_DIR)
    parser.add_argument("--max", type=int, default=THROUGHPUT_MAX, dest="maximum")
    args = parser.parse_args(argv)

    with KVStore(args.dir) as store:
        result = measure_throughput(store, args.maximum)
    put_t, get_t, del_t = result.throughput
    put_l, get_l, del_l = result.latency
    print("throughput: ")
    print(f"put: {put_t:.8f}, get: {get_t:.8f}, del: {del_t:.8f}\n")
    print("latency: ")
    print(f"put: {put_l:.8f}, get: {get_l:.8f}, del: {del_l:.8f}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(correctness_main())