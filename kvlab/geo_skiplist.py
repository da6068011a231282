"""Skip list with geometrically distributed tower heights and search-cost measurement."""

from __future__ import annotations

import argparse
import math
import random
from typing import Optional, Sequence

_KEY_MAX = 2**64 - 1
_VALUE_LEN_MIN = 1
_VALUE_LEN_MEAN = 20
QUERY_TIMES = 10000
SEED = 15


class _Node:
    __slots__ = ("right", "down", "key", "value")

    def __init__(self, right: Optional["_Node"], down: Optional["_Node"], key: int, value: bytes):
        self.right = right
        self.down = down
        self.key = key
        self.value = value


def _geometric(rng: random.Random, failure: float) -> int:
    """Number of failures (each with probability ``failure``) before the first success."""
    count = 0
    while rng.random() < failure:
        count += 1
    return count


class SkipList:
    """Skip list built from right/down linked nodes; a tower grows with probability ``p``."""

    def __init__(self, p: float = 0.5, seed: Optional[int] = None):
        if not 0 <= p < 1:
            raise ValueError(f"promotion probability must be in [0, 1), got {p}")
        self._p = p
        self._rng = random.Random(seed)
        self._top = _Node(None, None, 0, b"")

    def put(self, key: int, value: bytes) -> None:
        """Insert ``key`` with ``value`` in front of any existing equal keys."""
        path = []
        node = self._top
        while True:
            while node.right is not None and node.right.key < key:
                node = node.right
            path.append(node)
            if node.down is None:
                break
            node = node.down

        value = bytes(value)
        level = _geometric(self._rng, self._p)
        new: Optional[_Node] = None
        while level >= 0:
            left = path.pop()
            new = _Node(left.right, new, key, value)
            left.right = new
            level -= 1
            if not path:
                break
        while level >= 0:
            new = _Node(None, new, key, value)
            self._top = _Node(new, self._top, 0, b"")
            level -= 1

    def get(self, key: int) -> Optional[bytes]:
        """Return the value stored under ``key``, or None."""
        node = self._top
        while True:
            while node.right is not None and node.right.key < key:
                node = node.right
            if node.right is not None and node.right.key == key:
                return node.right.value
            if node.down is None:
                return None
            node = node.down

    def query_distance(self, key: int) -> int:
        """Count the nodes visited while searching for ``key``."""
        distance = 1
        node = self._top
        while True:
            while node.right is not None and node.right.key < key:
                node = node.right
                distance += 1
            if node.right is not None and node.right.key == key:
                return distance + 1
            if node.down is None:
                return distance
            node = node.down
            distance += 1


def _gen_input(element_count: int, rng: random.Random) -> list[tuple[int, bytes]]:
    success = 1.0 / (_VALUE_LEN_MEAN - _VALUE_LEN_MIN)
    pairs = []
    for _ in range(element_count):
        key = rng.randint(0, _KEY_MAX)
        length = _geometric(rng, 1.0 - success) + _VALUE_LEN_MIN
        pairs.append((key, bytes(rng.randrange(256) for _ in range(length))))
    return pairs


def gen_input(element_count: int, seed: int) -> list[tuple[int, bytes]]:
    """Generate ``element_count`` random 64-bit keys with random byte values."""
    return _gen_input(element_count, random.Random(seed))


def average_query_distance(
    element_count: int, p: float, seed: int = SEED, queries: int = QUERY_TIMES
) -> float:
    """Build a list from random input and average the search cost of random stored keys."""
    if element_count <= 0:
        raise ValueError("element_count must be positive")
    if queries <= 0:
        raise ValueError("queries must be positive")
    rng = random.Random(seed)
    pairs = _gen_input(element_count, rng)
    skiplist = SkipList(p, seed)
    for key, value in pairs:
        skiplist.put(key, value)
    total = sum(
        skiplist.query_distance(pairs[rng.randrange(element_count)][0]) for _ in range(queries)
    )
    return total / queries


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Measure average skip list search distance.")
    parser.add_argument("element_count", nargs="?", type=int)
    parser.add_argument("seed", nargs="?", type=int)
    parser.add_argument("p", nargs="?", type=float)
    args = parser.parse_args(argv)

    given = [args.element_count, args.seed, args.p]
    if any(v is not None for v in given):
        if any(v is None for v in given):
            parser.error("element_count, seed and p must be given together")
        print(f"{average_query_distance(args.element_count, args.p, args.seed):.6f}")
        return 0

    for element_count in (50, 100, 200, 500, 1000):
        for p in (0.5, 1 / math.e, 0.25, 0.125):
            avg = average_query_distance(element_count, p)
            print(f"element count: {element_count}, p: {p:.6f}, {avg:.6f}")
        print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())