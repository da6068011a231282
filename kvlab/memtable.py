"""In-memory skip list used as the write buffer of the key-value store."""

from __future__ import annotations

import random
from typing import Iterator, Optional

MAX_LEVEL = 18
KEY_MAX = 2**64 - 1
ENTRY_OVERHEAD = 12  # bytes an entry costs in an index: 8-byte key, 4-byte offset


def _value_size(value: str) -> int:
    return len(value.encode("utf-8", "surrogateescape"))


def _check_key(key: int) -> None:
    if not 0 <= key <= KEY_MAX:
        raise ValueError(f"key must be an unsigned 64-bit integer, got {key}")


class _Node:
    __slots__ = ("key", "value", "forward")

    def __init__(self, key: int, value: str, height: int):
        self.key = key
        self.value = value
        self.forward: list[Optional[_Node]] = [None] * height


class MemTable:
    """Ordered map from 64-bit keys to strings that tracks its serialized size.

    ``byte_size`` counts, for every entry, the index cost of 12 bytes plus the
    encoded length of its value.
    """

    def __init__(self, p: float = 0.5, seed: Optional[int] = None):
        if not 0 <= p < 1:
            raise ValueError(f"promotion probability must be in [0, 1), got {p}")
        self._p = p
        self._rng = random.Random(seed)
        self._head = _Node(0, "", MAX_LEVEL)
        self._level = 1
        self._count = 0
        self._bytes = 0

    @property
    def byte_size(self) -> int:
        return self._bytes

    def __len__(self) -> int:
        return self._count

    def _random_level(self) -> int:
        level = 1
        while level < MAX_LEVEL and self._rng.random() < self._p:
            level += 1
        return level

    def _path(self, key: int) -> list[_Node]:
        update = [self._head] * MAX_LEVEL
        node = self._head
        for level in reversed(range(self._level)):
            nxt = node.forward[level]
            while nxt is not None and nxt.key < key:
                node = nxt
                nxt = node.forward[level]
            update[level] = node
        return update

    def insert(self, key: int, value: str) -> None:
        """Insert ``key`` or replace its value."""
        _check_key(key)
        update = self._path(key)
        found = update[0].forward[0]
        if found is not None and found.key == key:
            self._bytes += _value_size(value) - _value_size(found.value)
            found.value = value
            return
        height = self._random_level()
        self._level = max(self._level, height)
        node = _Node(key, value, height)
        for level in range(height):
            node.forward[level] = update[level].forward[level]
            update[level].forward[level] = node
        self._count += 1
        self._bytes += ENTRY_OVERHEAD + _value_size(value)

    def _first_at_least(self, key: int) -> Optional[_Node]:
        return self._path(key)[0].forward[0]

    def search(self, key: int) -> Optional[str]:
        """Return the value stored under ``key``, or None."""
        _check_key(key)
        node = self._first_at_least(key)
        if node is not None and node.key == key:
            return node.value
        return None

    def delete(self, key: int) -> bool:
        """Remove ``key``; return False if it was not present."""
        _check_key(key)
        update = self._path(key)
        node = update[0].forward[0]
        if node is None or node.key != key:
            return False
        for level in range(self._level):
            if update[level].forward[level] is node:
                update[level].forward[level] = node.forward[level]
        while self._level > 1 and self._head.forward[self._level - 1] is None:
            self._level -= 1
        self._count -= 1
        self._bytes -= ENTRY_OVERHEAD + _value_size(node.value)
        return True

    def scan(self, key1: int, key2: int) -> list[tuple[int, str]]:
        """Return the ``(key, value)`` pairs with ``key1 <= key <= key2`` in key order."""
        _check_key(key1)
        _check_key(key2)
        result = []
        node = self._first_at_least(key1)
        while node is not None and node.key <= key2:
            result.append((node.key, node.value))
            node = node.forward[0]
        return result

    def lower_bound(self, key: int) -> Optional[tuple[int, str]]:
        """Return the first ``(key, value)`` whose key is not below ``key``, or None."""
        _check_key(key)
        node = self._first_at_least(key)
        return None if node is None else (node.key, node.value)

    def reset(self) -> None:
        """Remove every entry."""
        self._head.forward = [None] * MAX_LEVEL
        self._level = 1
        self._count = 0
        self._bytes = 0

    def items(self) -> Iterator[tuple[int, str]]:
        """Yield every ``(key, value)`` in key order."""
        node = self._head.forward[0]
        while node is not None:
            yield node.key, node.value
            node = node.forward[0]