"""Key-value store built as a log-structured merge tree.

Writes go to an in-memory skip list. When it would outgrow one table file
it is written to ``level-0``. Levels are merged downwards whenever they
hold too many tables.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .bloom import FILTER_BYTES
from .memtable import ENTRY_OVERHEAD, MemTable
from .sstable import HEADER_SIZE, MAX_SIZE, SSTable, SSTableHead, list_files

DELETED = "~DELETED~"
LEVEL0_LIMIT = 2

PathLike = Union[str, os.PathLike]


def _encoded_len(value: str) -> int:
    return len(value.encode("utf-8", "surrogateescape"))


class KVStore:
    """Persistent map from unsigned 64-bit keys to strings.

    A lookup that finds nothing returns an empty string, and so does a lookup
    of a deleted key.
    """

    def __init__(self, directory: PathLike = "./data"):
        self.directory = Path(directory)
        self._memtable = MemTable(0.5)
        self._levels: list[list[SSTableHead]] = []
        self._time = 0
        while (path := self._level_dir(len(self._levels))).is_dir():
            heads = [SSTableHead.load(path / name) for name in list_files(path)]
            self._levels.append(heads)
            self._time = max([self._time, *(head.time for head in heads)])

    def _level_dir(self, level: int) -> Path:
        return self.directory / f"level-{level}"

    def _next_time(self) -> int:
        self._time += 1
        return self._time

    def put(self, key: int, value: str) -> None:
        """Insert or update ``key``."""
        current = self._memtable.search(key)
        size = self._memtable.byte_size
        if current is None:
            size += ENTRY_OVERHEAD + _encoded_len(value)
        else:
            size += _encoded_len(value) - _encoded_len(current)
        if size + HEADER_SIZE + FILTER_BYTES > MAX_SIZE and len(self._memtable):
            self._flush()
            self.compaction()
        self._memtable.insert(key, value)

    def _flush(self) -> None:
        """Write the memtable to a new level-0 table and empty it."""
        level0 = self._level_dir(0)
        level0.mkdir(parents=True, exist_ok=True)
        if not self._levels:
            self._levels.append([])
        table = SSTable.from_memtable(self._memtable, self._next_time(), level0)
        table.write()
        self._levels[0].append(table.head())
        self._memtable.reset()

    def _read_value(self, head: SSTableHead, p: int) -> str:
        start = head.offset_at(p - 1)
        return self.fetch_string(head.filename, head.data_start + start, head.offset_at(p) - start)

    def get(self, key: int) -> str:
        """Return the value of ``key``, or an empty string if it is absent."""
        value = self._memtable.search(key)
        if value is not None:
            return "" if value == DELETED else value
        found: Optional[tuple[SSTableHead, tuple[int, int]]] = None
        for level, heads in enumerate(self._levels):
            for head in heads:
                if not head.min_key <= key <= head.max_key:
                    continue
                location = head.search_offset(key)
                if location is None:
                    if level:
                        break
                    continue
                if found is None or head.time > found[0].time:
                    found = (head, location)
            if found is not None:
                break
        if found is None:
            return ""
        head, (offset, length) = found
        value = self.fetch_string(head.filename, head.data_start + offset, length)
        return "" if value == DELETED else value

    def delete(self, key: int) -> bool:
        """Delete ``key``; return False if it was not present."""
        if not self.get(key):
            return False
        self.put(key, DELETED)
        return True

    def reset(self) -> None:
        """Remove every key, in memory and on disk."""
        self._memtable.reset()
        for level in range(len(self._levels)):
            path = self._level_dir(level)
            if path.is_dir():
                shutil.rmtree(path)
        self._levels = []

    def scan(self, key1: int, key2: int) -> list[tuple[int, str]]:
        """Return the live ``(key, value)`` pairs with ``key1 <= key <= key2`` in key order."""
        winners: dict[int, Union[str, tuple[SSTableHead, int]]] = dict(
            self._memtable.scan(key1, key2)
        )
        for heads in self._levels:
            for head in sorted(heads, key=lambda h: h.time, reverse=True):
                if key1 > head.max_key or key2 < head.min_key:
                    continue
                for p in range(head.lower_bound(key1), head.lower_bound(key2 + 1)):
                    winners.setdefault(head.key_at(p), (head, p))
        result = []
        for key in sorted(winners):
            found = winners[key]
            value = found if isinstance(found, str) else self._read_value(*found)
            if value and value != DELETED:
                result.append((key, value))
        return result

    def _merge(
        self, inputs: list[SSTableHead], drop_tombstones: bool
    ) -> Iterator[tuple[int, str]]:
        entries = sorted(
            (entry.key, -head.time, i, p)
            for i, head in enumerate(inputs)
            for p, entry in enumerate(head.index)
        )
        last_key: Optional[int] = None
        for key, _, i, p in entries:
            if key == last_key:
                continue
            last_key = key
            value = self._read_value(inputs[i], p)
            if drop_tombstones and value == DELETED:
                continue
            yield key, value

    def _store_table(self, table: SSTable, directory: Path) -> SSTableHead:
        table.name_suffix += 1
        table.write(directory / f"{table.time}-{table.name_suffix}.sst")
        return table.head()

    def _write_tables(self, pairs: Iterable[tuple[int, str]], directory: Path) -> list[SSTableHead]:
        heads = []
        table: Optional[SSTable] = None
        for key, value in pairs:
            if table is None or not table.fits(value):
                if table is not None:
                    heads.append(self._store_table(table, directory))
                table = SSTable(self._next_time())
            table.insert(key, value)
        if table is not None:
            heads.append(self._store_table(table, directory))
        return heads

    def _delete_table(self, head: SSTableHead) -> None:
        for heads in self._levels:
            heads[:] = [h for h in heads if h is not head]
        os.remove(head.filename)

    def compaction(self) -> None:
        """Merge level 0 downwards once it holds more than two tables.

        Level ``n`` > 0 may hold ``2 ** (n + 1)`` tables; its oldest surplus
        tables are merged with the overlapping tables of the next level.
        """
        if not self._levels or len(self._levels[0]) <= LEVEL0_LIMIT:
            return
        limit = LEVEL0_LIMIT
        drop_tombstones = False
        level = 0
        while level < len(self._levels):
            current = self._levels[level]
            count = len(current) if level == 0 else len(current) - limit
            if count <= 0:
                break
            current.sort()
            chosen = current[:count]
            lower = min(head.min_key for head in chosen)
            upper = max(head.max_key for head in chosen)
            inputs = list(chosen)
            if level + 1 < len(self._levels):
                inputs += [
                    head
                    for head in self._levels[level + 1]
                    if max(head.min_key, lower) <= min(head.max_key, upper)
                ]
            target = self._level_dir(level + 1)
            target.mkdir(parents=True, exist_ok=True)
            written = self._write_tables(self._merge(inputs, drop_tombstones), target)
            if level + 1 == len(self._levels):
                self._levels.append([])
                drop_tombstones = True
            self._levels[level + 1].extend(written)
            for head in inputs:
                self._delete_table(head)
            limit *= 2
            level += 1

    def fetch_string(self, path: PathLike, offset: int, length: int) -> str:
        """Read up to ``length`` bytes of ``path`` starting at ``offset``."""
        with open(path, "rb") as handle:
            handle.seek(offset)
            data = handle.read(length)
        return data.decode("utf-8", "surrogateescape")

    def close(self) -> None:
        """Write any buffered entries to disk and compact."""
        if len(self._memtable):
            self._flush()
            self.compaction()

    def __enter__(self) -> "KVStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()