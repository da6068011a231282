# kvlab

The data structures a storage engine is built from, each usable on its
own, plus a small log-structured merge-tree key-value store that puts
several of them together. Pure Python, no dependencies.

## What is inside

| Module | Contents |
| --- | --- |
| `kvlab.murmur` | MurmurHash3 x64 128-bit: `murmurhash3_x64_128` (two 64-bit halves), `murmur_words` (four 32-bit words) |
| `kvlab.geo_skiplist` | `SkipList` with geometric tower heights and `query_distance`; `gen_input`, `average_query_distance` |
| `kvlab.bloom_experiment` | Bloom filter false-positive rates: `false_positive_rate`, `shared_filter_rates` |
| `kvlab.rbtree` | `RedBlackTree` with insertion, membership, `len()` and `inorder()` |
| `kvlab.selection` | `partition`, `trivial_nth`, `linear_nth` (median of medians), `quick_select`, `time_select`, `benchmark` |
| `kvlab.fib` | `fib_seq`, thread-splitting `fib_parallel`, and `compare` for timing both |
| `kvlab.turns` | `take_turns`: threads writing their characters in strict rotation |
| `kvlab.learned_index` | `DataPoint`, `load_data`, `LinearModel`, `DecisionTreeModel`, `LearnedIndex` |
| `kvlab.memtable` | `MemTable`, the skip list that buffers writes and tracks their serialized size |
| `kvlab.bloom` | `BloomFilter`, the 10240-byte filter stored in each table file |
| `kvlab.sstable` | `SSTable`, `SSTableHead`, `IndexEntry` and `list_files` |
| `kvlab.kvstore` | `KVStore`, the LSM-tree store with levelled compaction |
| `kvlab.harness` | `Checker`, `regular_test`, `persistence_prepare`, `persistence_check`, `measure_throughput` |

## Installing

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## The key-value store

`KVStore` keeps recent writes in a `MemTable`. When the next write would no
longer fit into one 2 MiB table file, the memtable is written out as an
SSTable under `<directory>/level-0/`. Once level 0 holds more than two
tables it is merged into level 1; level *n* > 0 may hold `2 ** (n + 1)`
tables, and its oldest surplus tables are merged with the overlapping
tables of the next level. A table file holds a header (time, count, min
and max key), a Bloom filter, a key/offset index and the values.

Keys are unsigned 64-bit integers, values are strings. `get` returns an
empty string for a key that is absent or deleted; `delete` writes a
tombstone and returns `False` when there was nothing to delete.

```python
from kvlab.kvstore import KVStore

with KVStore("./data") as store:
    store.put(1, "SE")
    assert store.get(1) == "SE"
    assert store.delete(1) is True
    assert store.get(1) == ""
    assert store.delete(1) is False

    for key in range(10):
        store.put(key, "s" * (key + 1))
    pairs = store.scan(2, 5)   # [(2, "sss"), (3, "ssss"), ...] in key order
```

Leaving the `with` block (or calling `close()`) writes the memtable to
disk and compacts, so a later `KVStore` over the same directory reads the
tables back. `reset()` removes everything, in memory and on disk.

### What the store does not do

It is an embedded library used from one process: there is no network
server and no locking against other processes or threads. Writes buffered
in the memtable reach disk only when it fills up or when the store is
closed; there is no write-ahead log.

## Other structures

```python
from kvlab.murmur import murmurhash3_x64_128
from kvlab.bloom import BloomFilter
from kvlab.rbtree import RedBlackTree
from kvlab.selection import linear_nth, quick_select

h1, h2 = murmurhash3_x64_128(b"hello", 1)

bloom = BloomFilter()
bloom.insert(42)
assert 42 in bloom

tree = RedBlackTree()
for value in (50, 30, 20, 10, 25, 27, 58, 54, 48):
    tree.insert(value)
assert 27 in tree and len(tree) == 9
pairs = tree.inorder()   # [(10, Color.BLACK), ...] in ascending order

values = [9, 3, 7, 1, 5]
assert linear_nth(values, 2, 5) == 5
assert quick_select(values, 2, 5) == 5
```

A learned index is trained on a file of `key,value` lines:

```python
from kvlab.learned_index import LearnedIndex

index = LearnedIndex("DecisionTree", "normal_10000.csv")   # or "Linear"
value = index[12345]                     # None when the key is absent
position = index.predicted_position(12345)
```

Any other model name raises `ValueError`.

## Commands

```
kvlab-skiplist             # average query distance for several sizes and p
kvlab-skiplist 1000 15 0.5 # one run: element count, seed, p
kvlab-bloom                # false-positive table for m/n 2..5 and k 1..5 (--n, --shared)
kvlab-rbtree               # build a sample red-black tree and print it in order
kvlab-select               # p90 timings of median of medians against quickselect (--sizes, --rounds, --seed)
kvlab-fib 4                # sequential against parallel Fibonacci with 4 threads (--n, --sweep)
kvlab-turns                # three threads printing ABCABCABC in turn (--chars, --rounds)
kvlab-correctness          # correctness check of the store (-v for details)
kvlab-persistence          # prepare data; run again with -t to check it
kvlab-throughput           # put/get/delete throughput and latency of the store
```

The store commands work in `./data` unless `--dir` says otherwise.
`kvlab-correctness`, `kvlab-throughput` and the preparation run of
`kvlab-persistence` clear that directory first. The preparation run keeps
writing until it is killed, unless `--rounds` limits it.