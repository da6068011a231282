"""Order statistics: median-of-medians selection and quickselect, with timing."""

from __future__ import annotations

import argparse
import random
import time
from typing import Callable, Iterable, Optional, Sequence

Q_VALUES = (5, 6, 7, 8, 9, 10, 11)
SIZES = (100, 1000, 2000)
ROUNDS = 1000

Selector = Callable[[Sequence[int], int, int], int]


def partition(values: Iterable[int], pivot: int) -> tuple[list[int], list[int], list[int]]:
    """Split ``values`` into those below, equal to and above ``pivot``.

    Values below keep their order; values above come out in reverse order of
    appearance, as when a buffer is filled from its back.
    """
    less: list[int] = []
    equal: list[int] = []
    greater: list[int] = []
    for x in values:
        if x < pivot:
            less.append(x)
        elif x > pivot:
            greater.append(x)
        else:
            equal.append(x)
    greater.reverse()
    return less, equal, greater


def _check_nth(values: Sequence[int], nth: int) -> None:
    if not 0 <= nth < len(values):
        raise IndexError(f"nth={nth} is out of range for {len(values)} values")


def trivial_nth(values: Iterable[int], nth: int) -> int:
    """Return the ``nth`` smallest value (0-based) by sorting."""
    values = list(values)
    _check_nth(values, nth)
    return sorted(values)[nth]


def _median(group: Sequence[int]) -> int:
    return sorted(group)[len(group) // 2]


def linear_nth(values: Iterable[int], nth: int, q: int = 5) -> int:
    """Return the ``nth`` smallest value using median-of-medians with groups of ``q``."""
    if q < 2:
        raise ValueError(f"group size q must be at least 2, got {q}")
    values = list(values)
    _check_nth(values, nth)
    while len(values) > q:
        mids = [_median(values[i : i + q]) for i in range(0, len(values), q)]
        pivot = linear_nth(mids, len(mids) // 2, q)
        less, equal, greater = partition(values, pivot)
        if nth < len(less):
            values = less
        elif nth < len(less) + len(equal):
            return pivot
        else:
            nth -= len(less) + len(equal)
            values = greater
    return sorted(values)[nth]


def quick_select(values: Iterable[int], nth: int, q: int = 5) -> int:
    """Return the ``nth`` smallest value, pivoting on the first element.

    Ranges of at most ``q`` values are finished by sorting.
    """
    if q < 0:
        raise ValueError(f"cutoff q must not be negative, got {q}")
    values = list(values)
    _check_nth(values, nth)
    while len(values) > q:
        pivot = values[0]
        less, equal, greater = partition(values, pivot)
        if nth < len(less):
            values = less
        elif nth < len(less) + len(equal):
            return pivot
        else:
            nth -= len(less) + len(equal)
            values = greater
    return sorted(values)[nth]


def time_select(select: Selector, values: Sequence[int], nth: int, q: int) -> float:
    """Run ``select`` on a copy of ``values`` and return the elapsed seconds."""
    copy = list(values)
    start = time.perf_counter()
    select(copy, nth, q)
    return time.perf_counter() - start


def _p90(samples: list[float]) -> float:
    ordered = sorted(samples)
    return ordered[len(ordered) * 90 // 100]


def benchmark(
    n: int,
    q_values: Iterable[int] = Q_VALUES,
    rounds: int = ROUNDS,
    seed: Optional[int] = 0,
) -> dict[int, tuple[float, float, float, float]]:
    """Time both selectors on sorted and shuffled inputs of size ``n``.

    Returns, for every ``q``, the 90th-percentile seconds of
    (linear on sorted, linear on shuffled, quick on sorted, quick on shuffled).
    """
    if n <= 0:
        raise ValueError("n must be positive")
    if rounds <= 0:
        raise ValueError("rounds must be positive")
    rng = random.Random(seed)
    ordered = list(range(n))
    shuffled = ordered[:]
    rng.shuffle(shuffled)
    cases = (
        (linear_nth, ordered),
        (linear_nth, shuffled),
        (quick_select, ordered),
        (quick_select, shuffled),
    )
    results: dict[int, tuple[float, float, float, float]] = {}
    for q in q_values:
        timings: tuple[list[float], ...] = tuple([] for _ in cases)
        for _ in range(rounds):
            nth = rng.randrange(n)
            for bucket, (select, data) in zip(timings, cases):
                bucket.append(time_select(select, data, nth, q))
        results[q] = tuple(_p90(bucket) for bucket in timings)
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compare median-of-medians and quickselect.")
    parser.add_argument("--sizes", type=int, nargs="+", default=list(SIZES))
    parser.add_argument("--rounds", type=int, default=ROUNDS)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args(argv)

    for n in args.sizes:
        print(f"N={n}:")
        for q, times in benchmark(n, Q_VALUES, args.rounds, args.seed).items():
            print(f"{q}" + "".join(f"|{t * 1e9:.0f}ns" for t in times))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())