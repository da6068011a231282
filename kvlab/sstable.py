"""Sorted string tables: on-disk layout, headers kept in memory, and file helpers.

A table file holds, little-endian: time, count, min key and max key as u64;
the Bloom filter; ``count`` index entries of (u64 key, u32 end offset); and
the concatenated values.
"""

from __future__ import annotations

import os
import struct
from bisect import bisect_left
from dataclasses import dataclass
from operator import attrgetter
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .bloom import FILTER_BYTES, BloomFilter
from .memtable import MemTable

HEADER_SIZE = 32
INDEX_ENTRY_SIZE = 12
MAX_SIZE = 2 * 1024 * 1024
KEY_MAX = 2**64 - 1

_HEADER = struct.Struct("<4Q")
_ENTRY = struct.Struct("<QI")

PathLike = Union[str, os.PathLike]


def _encode(value: str) -> bytes:
    return value.encode("utf-8", "surrogateescape")


def _decode(data: bytes) -> str:
    return data.decode("utf-8", "surrogateescape")


def list_files(directory: PathLike) -> list[str]:
    """Names of the entries in ``directory`` that do not start with a dot, sorted."""
    return sorted(name for name in os.listdir(directory) if not name.startswith("."))


def _name_suffix(path: PathLike) -> int:
    _, sep, suffix = Path(path).stem.partition("-")
    return int(suffix) if sep and suffix.isdigit() else 0


@dataclass(frozen=True, order=True)
class IndexEntry:
    key: int
    offset: int


class SSTableHead:
    """Everything of a table except its values: header, filter and index."""

    def __init__(self, filename: PathLike = "", time: int = 0, name_suffix: int = 0):
        self.filename = str(filename)
        self.time = time
        self.name_suffix = name_suffix
        self.min_key = KEY_MAX
        self.max_key = 0
        self.size = HEADER_SIZE + FILTER_BYTES
        self.bloom = BloomFilter()
        self.index: list[IndexEntry] = []

    @property
    def count(self) -> int:
        return len(self.index)

    @property
    def data_start(self) -> int:
        """File offset at which the values begin."""
        return HEADER_SIZE + FILTER_BYTES + INDEX_ENTRY_SIZE * self.count

    def __lt__(self, other: "SSTableHead") -> bool:
        return (self.time, self.min_key) < (other.time, other.min_key)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(filename={self.filename!r}, time={self.time}, "
            f"count={self.count}, min_key={self.min_key}, max_key={self.max_key})"
        )

    def _read_head(self, handle: BinaryIO, path: PathLike) -> None:
        header = handle.read(HEADER_SIZE)
        if len(header) != HEADER_SIZE:
            raise ValueError(f"{path}: truncated header")
        self.time, count, self.min_key, self.max_key = _HEADER.unpack(header)
        self.bloom = BloomFilter.from_bytes(handle.read(FILTER_BYTES))
        raw = handle.read(INDEX_ENTRY_SIZE * count)
        if len(raw) != INDEX_ENTRY_SIZE * count:
            raise ValueError(f"{path}: truncated index")
        self.index = [IndexEntry(key, offset) for key, offset in _ENTRY.iter_unpack(raw)]
        self.filename = str(path)
        self.name_suffix = _name_suffix(path)
        self.size = self.data_start + (self.index[-1].offset if self.index else 0)

    @classmethod
    def load(cls, path: PathLike):
        """Read the header, filter and index of the table file at ``path``."""
        head = cls()
        with open(path, "rb") as handle:
            head._read_head(handle, path)
        return head

    def lower_bound(self, key: int) -> int:
        """Position of the first index entry whose key is not below ``key``."""
        return bisect_left(self.index, key, key=attrgetter("key"))

    def search(self, key: int) -> Optional[int]:
        """Index position of ``key``, or None if the table does not hold it."""
        if key not in self.bloom:
            return None
        p = self.lower_bound(key)
        if p < self.count and self.index[p].key == key:
            return p
        return None

    def search_offset(self, key: int) -> Optional[tuple[int, int]]:
        """``(offset, length)`` of the value of ``key`` within the data area, or None."""
        p = self.search(key)
        if p is None:
            return None
        start = self.offset_at(p - 1)
        return start, self.index[p].offset - start

    def key_at(self, p: int) -> int:
        return self.index[p].key

    def offset_at(self, p: int) -> int:
        """End offset of entry ``p``; 0 for positions before the first entry."""
        return 0 if p < 0 else self.index[p].offset


class SSTable(SSTableHead):
    """A table held wholly in memory, values included."""

    def __init__(self, time: int = 0, filename: PathLike = ""):
        super().__init__(filename, time)
        self._values: list[str] = []

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(self._values)

    @classmethod
    def from_memtable(cls, memtable: MemTable, time: int, directory: PathLike) -> "SSTable":
        """Build a table stamped ``time`` from every entry of ``memtable``."""
        table = cls(time, os.path.join(directory, f"{time}.sst"))
        for key, value in memtable.items():
            table.insert(key, value)
        return table

    def insert(self, key: int, value: str) -> None:
        """Append ``key``; keys must arrive in ascending order."""
        if self.index and key <= self.index[-1].key:
            raise ValueError(f"key {key} does not follow {self.index[-1].key}")
        length = len(_encode(value))
        self.bloom.insert(key)
        self.index.append(IndexEntry(key, self.offset_at(self.count - 1) + length))
        self._values.append(value)
        self.min_key = min(self.min_key, key)
        self.max_key = max(self.max_key, key)
        self.size += INDEX_ENTRY_SIZE + length

    def fits(self, value: str) -> bool:
        """Whether one more entry holding ``value`` keeps the file within ``MAX_SIZE``."""
        return self.size + INDEX_ENTRY_SIZE + len(_encode(value)) <= MAX_SIZE

    def write(self, path: Optional[PathLike] = None) -> None:
        """Write the table to ``path`` (default: its filename) and adopt that name."""
        target = Path(path if path is not None else self.filename)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as handle:
            handle.write(_HEADER.pack(self.time, self.count, self.min_key, self.max_key))
            handle.write(self.bloom.to_bytes())
            handle.write(b"".join(_ENTRY.pack(e.key, e.offset) for e in self.index))
            handle.write(b"".join(_encode(v) for v in self._values))
        self.filename = str(target)

    @classmethod
    def load(cls, path: PathLike) -> "SSTable":
        """Read a whole table file, values included."""
        table = cls()
        with open(path, "rb") as handle:
            table._read_head(handle, path)
            data = handle.read()
        end = table.offset_at(table.count - 1)
        if len(data) < end:
            raise ValueError(f"{path}: truncated data")
        table._values = [
            _decode(data[table.offset_at(p - 1) : table.offset_at(p)]) for p in range(table.count)
        ]
        return table

    def head(self) -> SSTableHead:
        """An independent copy of this table's header, filter and index."""
        head = SSTableHead(self.filename, self.time, self.name_suffix)
        head.min_key = self.min_key
        head.max_key = self.max_key
        head.size = self.size
        head.bloom = BloomFilter.from_bytes(self.bloom.to_bytes())
        head.index = list(self.index)
        return head