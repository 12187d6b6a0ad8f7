"""
Information-Gathering Functions
===============================

Leaves that collect recorded values in a fixed-size ring buffer and turn
them into one value on ``update``.

- :class:`MedianFunction`: median of the recorded values
- :class:`WeightedAverageFunction`: score-weighted mean of the recorded values

Both return ``initial_value`` until their first ``update`` with data.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple

import numpy as np

from ..configuration import ConfigurationNode
from ..constants import EPSILON
from ..controlled_object import ValueKind
from ..errors import ConfigurationError
from ..registry import ObjectFactory
from .base import Function, ScoringFunction
from .scored import SuccessScoringFunction, build_scoring_function


class RingBuffer:
    """Keeps the last ``capacity`` items, overwriting the oldest one."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ConfigurationError(f"Ring buffer capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.items: List[Any] = []
        self._next = 0

    def append(self, item: Any) -> None:
        if len(self.items) < self.capacity:
            self.items.append(item)
        else:
            self.items[self._next] = item
        self._next = (self._next + 1) % self.capacity

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def _read_initial(kind: ValueKind, node: ConfigurationNode) -> Any:
    initial = node["initial_value"]
    return kind.default() if initial.is_null() else kind.read(initial)


class MedianFunction(Function):
    """
    Median of the last ``storage_size`` recorded values.

    An even count gives the mean of the two middle values; integer kinds
    truncate that mean.

    Configuration
    -------------
    ``{"classname": "RealMedianFunction", "storage_size": 50, "initial_value": 0.5}``

    Example
    -------
    >>> for value in (3, 1, 2):
    ...     _ = median.record([value])
    >>> median.update()
    >>> median.generate()
    2.0
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.storage = RingBuffer(1)
        self.object = kind.default()

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        self.storage = RingBuffer(node["storage_size"].get_uint())
        self.object = _read_initial(self.kind, node)

    def generate(self) -> Any:
        return self.object

    def _record(self, values: Sequence[Any], parent, offspring) -> bool:
        for value in values:
            self.storage.append(self.kind.coerce(value))
        return True

    def update(self) -> None:
        if len(self.storage) == 0:
            return
        self.object = self.kind.coerce(np.median(np.asarray(self.storage.items, dtype=float)))


class WeightedAverageFunction(Function):
    """
    Score-weighted mean of recorded values.

    Each record stores ``(values[0], score(parent, offspring))``; records
    without a parent/offspring pair carry no score and are ignored. On
    ``update``::

        value = Σ(score_i · object_i) / Σ(score_i)     (0 when Σ score < EPSILON)

    Configuration
    -------------
    ::

        {"classname": "WeightedAverageFunction",
         "object_size": 50,
         "initial_value": 0.5,
         "scoring_function": {"classname": "ImprovedPercentageScoringFunction"}}

    ``scoring_function`` defaults to ``SuccessScoringFunction``.
    """

    def __init__(self) -> None:
        super().__init__(ValueKind.REAL)
        self.storage = RingBuffer(1)
        self.object = 0.0
        self.scoring_function: ScoringFunction = SuccessScoringFunction()

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        self.storage = RingBuffer(node["object_size"].get_uint())
        self.object = _read_initial(self.kind, node)
        self.scoring_function = build_scoring_function(node, factory)

    def generate(self) -> float:
        return self.object

    def _record(self, values: Sequence[Any], parent, offspring) -> bool:
        if parent is None or offspring is None:
            return True
        if len(values) == 0:
            return False
        pair: Tuple[float, float] = (
            float(values[0]),
            float(self.scoring_function.score(parent, offspring)),
        )
        self.storage.append(pair)
        return True

    def update(self) -> None:
        if len(self.storage) == 0:
            return
        objects = np.array([o for o, _ in self.storage], dtype=float)
        scores = np.array([s for _, s in self.storage], dtype=float)
        total = scores.sum()
        if total < EPSILON:
            self.object = 0.0
        else:
            self.object = float(np.sum(scores / total * objects))
