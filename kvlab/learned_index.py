"""Learned index: linear and decision-tree models predicting where a key sits."""

from __future__ import annotations

import math
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Union

EPSILON = 5
DEFAULT_MAX_LEAF_SAMPLES = 100


@dataclass(frozen=True, order=True)
class DataPoint:
    key: int
    value: int


def load_data(path: Union[str, os.PathLike]) -> list[DataPoint]:
    """Read ``key,value`` lines and return the points sorted by key, then value."""
    points = []
    with open(path, encoding="utf-8") as handle:
        for lineno, line in enumerate(handle, 1):
            if not line.strip():
                continue
            key_text, sep, value_text = line.partition(",")
            try:
                if not sep:
                    raise ValueError("missing comma")
                points.append(DataPoint(int(key_text), int(value_text)))
            except ValueError as exc:
                raise ValueError(f"{path}:{lineno}: malformed line {line.rstrip()!r}") from exc
    points.sort()
    return points


def _round_half_away(x: float) -> int:
    return math.floor(x + 0.5) if x >= 0 else -math.floor(-x + 0.5)


class Model(ABC):
    @abstractmethod
    def train(self, data: Iterable[DataPoint]) -> None:
        """Fit the model to points sorted by key."""

    @abstractmethod
    def predict(self, key: int) -> Optional[int]:
        """Return the value stored under ``key``, or None."""

    @abstractmethod
    def predict_position(self, key: int) -> int:
        """Return the position the model predicts for ``key``."""


class LinearModel(Model):
    """Least-squares line from key to position, searched within ``EPSILON`` of the guess."""

    def __init__(self):
        self.data: list[DataPoint] = []
        self.slope = 0.0
        self.intercept = 0.0
        self.base_key = 0

    def train(self, data: Iterable[DataPoint]) -> None:
        self.data = list(data)
        self.slope = 0.0
        self.intercept = 0.0
        self.base_key = 0
        if not self.data:
            return
        self.base_key = self.data[0].key
        n = len(self.data)
        sum_x = sum_y = sum_xy = sum_xx = 0.0
        for i, point in enumerate(self.data):
            x = float(point.key - self.base_key)
            sum_x += x
            sum_y += i
            sum_xy += x * i
            sum_xx += x * x
        denominator = n * sum_xx - sum_x * sum_x
        if denominator:
            self.slope = (n * sum_xy - sum_x * sum_y) / denominator
        self.intercept = (sum_y - self.slope * sum_x) / n

    def predict_position(self, key: int) -> int:
        position = _round_half_away((key - self.base_key) * self.slope + self.intercept)
        return max(position, 0)

    def predict(self, key: int) -> Optional[int]:
        position = self.predict_position(key)
        start = position - EPSILON
        # A window reaching below the first position is not searched at all.
        if start >= 0:
            for point in self.data[start : position + EPSILON + 1]:
                if point.key == key:
                    return point.value
        return next((point.value for point in self.data if point.key == key), None)


@dataclass
class _Leaf:
    model: LinearModel


@dataclass
class _Internal:
    split_key: int
    left: Union["_Internal", _Leaf]
    right: Union["_Internal", _Leaf]


class DecisionTreeModel(Model):
    """Halves the sorted keys until fewer than the leaf limit remain, then fits a line per leaf."""

    def __init__(self):
        self._root: Optional[Union[_Internal, _Leaf]] = None

    def train(self, data: Iterable[DataPoint]) -> None:
        data = list(data)
        self._root = self._build(data, 0, len(data))

    def _build(self, data: list[DataPoint], begin: int, end: int) -> Union[_Internal, _Leaf]:
        if end - begin < DEFAULT_MAX_LEAF_SAMPLES:
            model = LinearModel()
            model.train(data[begin:end])
            return _Leaf(model)
        middle = begin + (end - begin) // 2
        return _Internal(
            data[middle].key,
            self._build(data, begin, middle),
            self._build(data, middle, end),
        )

    def _leaf_model(self, key: int) -> LinearModel:
        if self._root is None:
            raise RuntimeError("model has not been trained")
        node = self._root
        while isinstance(node, _Internal):
            node = node.right if key >= node.split_key else node.left
        return node.model

    def predict(self, key: int) -> Optional[int]:
        return self._leaf_model(key).predict(key)

    def predict_position(self, key: int) -> int:
        return self._leaf_model(key).predict_position(key)


_MODELS = {"Linear": LinearModel, "DecisionTree": DecisionTreeModel}


class LearnedIndex:
    """Loads a key/value file and answers lookups through a trained model."""

    def __init__(self, model: str, data_path: Union[str, os.PathLike]):
        try:
            factory = _MODELS[model]
        except KeyError:
            raise ValueError(
                f"Unsupported model: {model}; choose one of {', '.join(_MODELS)}"
            ) from None
        self.model_name = model
        self._model: Model = factory()
        self._data = load_data(data_path)
        start = time.perf_counter()
        self._model.train(self._data)
        self.train_seconds = time.perf_counter() - start

    @property
    def data(self) -> list[DataPoint]:
        return self._data

    def __getitem__(self, key: int) -> Optional[int]:
        return self._model.predict(key)

    def predicted_position(self, key: int) -> int:
        return self._model.predict_position(key)