"""Fixed-size Bloom filter over 64-bit keys, as stored in table files."""

from __future__ import annotations

from .murmur import murmur_words

FILTER_BYTES = 10240
FILTER_BITS = 8 * FILTER_BYTES
_KEY_MAX = 2**64 - 1


class BloomFilter:
    """A 81920-bit filter; each key sets the four MurmurHash3 words (seed 1) modulo the size."""

    def __init__(self):
        self._bits = bytearray(FILTER_BYTES)

    @staticmethod
    def _positions(key: int) -> list[int]:
        if not 0 <= key <= _KEY_MAX:
            raise ValueError(f"key must be an unsigned 64-bit integer, got {key}")
        return [word % FILTER_BITS for word in murmur_words(key.to_bytes(8, "little"), 1)]

    def insert(self, key: int) -> None:
        for p in self._positions(key):
            self.set_bit(p)

    def __contains__(self, key: int) -> bool:
        return all(self.get_bit(p) for p in self._positions(key))

    def reset(self) -> None:
        self._bits = bytearray(FILTER_BYTES)

    @staticmethod
    def _check(p: int) -> None:
        if not 0 <= p < FILTER_BITS:
            raise IndexError(f"bit {p} is out of range")

    def get_bit(self, p: int) -> bool:
        self._check(p)
        return bool(self._bits[p >> 3] >> (p & 7) & 1)

    def set_bit(self, p: int) -> None:
        self._check(p)
        self._bits[p >> 3] |= 1 << (p & 7)

    def to_bytes(self) -> bytes:
        """Serialize with bit ``p`` stored in byte ``p // 8`` at position ``p % 8``."""
        return bytes(self._bits)

    @classmethod
    def from_bytes(cls, data: bytes) -> "BloomFilter":
        if len(data) != FILTER_BYTES:
            raise ValueError(f"a filter needs {FILTER_BYTES} bytes, got {len(data)}")
        bloom = cls()
        bloom._bits = bytearray(data)
        return bloom

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BloomFilter):
            return NotImplemented
        return self._bits == other._bits