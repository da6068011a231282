"""False-positive rate experiments for Bloom filters built on MurmurHash3."""

from __future__ import annotations

import argparse
import math
from typing import Iterable, Optional, Sequence

from .murmur import murmur_words


def _hash_index(key: int, seed: int, m: int) -> int:
    return murmur_words(key.to_bytes(4, "little"), seed)[0] % m


def _rate(m: int, n: int, seeds: Sequence[int]) -> float:
    if m <= 0:
        raise ValueError("filter size m must be positive")
    if n <= 0:
        raise ValueError("element count n must be positive")
    bits = bytearray(m)
    for key in range(n):
        for seed in seeds:
            bits[_hash_index(key, seed, m)] = 1
    false_positives = sum(
        all(bits[_hash_index(key, seed, m)] for seed in seeds) for key in range(n, 2 * n)
    )
    return false_positives / n


def false_positive_rate(m: int, n: int, k: int) -> float:
    """Fill an ``m``-bit filter with keys 0..n-1 using ``k`` hashes and probe n..2n-1."""
    if k <= 0:
        raise ValueError("hash count k must be positive")
    return _rate(m, n, range(k))


def shared_filter_rates(
    n: int = 100, ratios: Iterable[int] = (2, 3, 4, 5), max_k: int = 5
) -> dict[tuple[int, int], float]:
    """Rates keyed by ``(k, m/n)`` for k in 1..max_k, hashes seeded from 1."""
    if max_k <= 0:
        raise ValueError("max_k must be positive")
    ratios = list(ratios)
    return {
        (k, ratio): _rate(ratio * n, n, range(1, k + 1))
        for k in range(1, max_k + 1)
        for ratio in ratios
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Bloom filter false-positive rates.")
    parser.add_argument("--n", type=int, default=None, help="number of inserted keys")
    parser.add_argument(
        "--shared", action="store_true", help="use hashes seeded from 1 and print one line per case"
    )
    args = parser.parse_args(argv)

    if args.shared:
        n = args.n if args.n is not None else 100
        for (k, ratio), rate in shared_filter_rates(n).items():
            print(f"k = {k}, m/n = {ratio}, result = {rate:.3f}")
        return 0

    n = args.n if args.n is not None else 1024
    print("m/n|opt k" + "".join(f"|k={k}" for k in range(1, 6)))
    print("--|--|--|--|--|--|--")
    for ratio in range(2, 6):
        cells = "".join(f"|{false_positive_rate(ratio * n, n, k):.4g}" for k in range(1, 6))
        print(f"{ratio}|{ratio * math.log(2):.4g}{cells}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())