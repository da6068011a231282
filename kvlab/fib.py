"""Naive Fibonacci computed sequentially and by splitting the recursion across threads."""

from __future__ import annotations

import argparse
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence


def fib_seq(n: int) -> int:
    """Fibonacci by plain recursion, with fib(0) == fib(1) == 1."""
    if n <= 1:
        return 1
    return fib_seq(n - 1) + fib_seq(n - 2)


def _start(func: Callable[[], int]) -> Callable[[], int]:
    """Run ``func`` on a new thread; the returned callable joins and yields its result."""
    outcome: dict[str, object] = {}

    def runner() -> None:
        try:
            outcome["value"] = func()
        except BaseException as exc:
            outcome["error"] = exc

    thread = threading.Thread(target=runner)
    thread.start()

    def join() -> int:
        thread.join()
        if "error" in outcome:
            raise outcome["error"]  # type: ignore[misc]
        return outcome["value"]  # type: ignore[return-value]

    return join


def fib_parallel(n: int, max_thread: int) -> int:
    """Fibonacci where each branch hands half of its thread budget to a new thread."""
    if max_thread < 1:
        raise ValueError(f"max_thread must be at least 1, got {max_thread}")
    if max_thread == 1:
        return fib_seq(n)
    if n <= 1:
        return 1
    half = (max_thread + 1) // 2
    join = _start(lambda: fib_parallel(n - 1, half))
    f2 = fib_parallel(n - 2, max_thread - half)
    return join() + f2


@dataclass(frozen=True)
class FibComparison:
    sequential: int
    parallel: int
    sequential_time: float
    parallel_time: float

    @property
    def speedup(self) -> float:
        if self.parallel_time == 0:
            return float("inf")
        return self.sequential_time / self.parallel_time


def compare(n: int = 35, thread_num: int = 1) -> FibComparison:
    """Time the sequential and the threaded computation of fib(n)."""
    t1 = time.perf_counter()
    ans1 = fib_seq(n)
    t2 = time.perf_counter()
    ans2 = fib_parallel(n, thread_num)
    t3 = time.perf_counter()
    if ans1 != ans2:
        raise RuntimeError(f"sequential result {ans1} differs from parallel result {ans2}")
    return FibComparison(ans1, ans2, t2 - t1, t3 - t2)


def _ns(seconds: float) -> str:
    return f"{int(seconds * 1e9)}ns"


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sequential versus threaded Fibonacci.")
    parser.add_argument("thread_num", nargs="?", type=int)
    parser.add_argument("--n", type=int, default=35)
    parser.add_argument("--sweep", action="store_true", help="average speedups over thread counts")
    parser.add_argument("--max-threads", type=int, default=40)
    parser.add_argument("--repeat", type=int, default=20)
    args = parser.parse_args(argv)

    if args.sweep:
        for threads in range(1, args.max_threads + 1):
            total_seq = total_par = 0.0
            for _ in range(args.repeat):
                result = compare(args.n, threads)
                total_seq += result.sequential_time
                total_par += result.parallel_time
            ratio = total_seq / total_par if total_par else float("inf")
            print(f"{threads:2} threads, {ratio:.2g}")
        return 0

    if args.thread_num is None:
        parser.error("thread_num is required unless --sweep is given")
    result = compare(args.n, args.thread_num)
    print(f"     | sequential  | parallel ({args.thread_num})")
    print(f" ans | {result.sequential:<11} | {result.parallel}")
    print(f"time | {_ns(result.sequential_time):<11} | {_ns(result.parallel_time)}")
    print()
    print(f"{result.speedup:.2g}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())