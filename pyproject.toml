[build-system]
requires = ["hatchling>=1.18"]
build-backend = "hatchling.build"

[project]
name = "kvlab"
version = "0.1.0"
description = "Storage-engine building blocks and experiments: skip lists, Bloom filters, red-black trees, selection, learned indexes and a small LSM-tree key-value store"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "lsm-tree",
    "key-value store",
    "sstable",
    "skip list",
    "bloom filter",
    "murmurhash",
    "red-black tree",
    "learned index",
    "quickselect",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest>=7.0"]

[project.scripts]
kvlab-skiplist = "kvlab.geo_skiplist:main"
kvlab-bloom = "kvlab.bloom_experiment:main"
kvlab-rbtree = "kvlab.rbtree:main"
kvlab-select = "kvlab.selection:main"
kvlab-fib = "kvlab.fib:main"
kvlab-turns = "kvlab.turns:main"
kvlab-correctness = "kvlab.harness:correctness_main"
kvlab-persistence = "kvlab.harness:persistence_main"
kvlab-throughput = "kvlab.harness:throughput_main"

[tool.hatch.build.targets.wheel]
packages = ["kvlab"]

[tool.hatch.build.targets.sdist]
include = ["kvlab", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP", "SIM"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true
