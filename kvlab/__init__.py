"""Storage-engine building blocks, experiments and a small LSM-tree key-value store."""

__version__ = "0.1.0"

__all__ = [
    "bloom",
    "bloom_experiment",
    "fib",
    "geo_skiplist",
    "harness",
    "kvstore",
    "learned_index",
    "memtable",
    "murmur",
    "rbtree",
    "selection",
    "sstable",
    "turns",
]