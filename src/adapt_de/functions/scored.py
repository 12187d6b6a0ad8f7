"""
Score-Driven Functions
======================

Scoring strategies rate one parent/offspring trial:

- :class:`SuccessScoringFunction`: 1 when the offspring is strictly better
  (lower fitness) than its parent, else 0
- :class:`ImprovedPercentageScoringFunction`: parent fitness minus offspring
  fitness

:class:`RouletteWheelSelectionFunction` uses them to learn which of several
candidate values (numbers, or whole Function strategies for control kinds)
produces successful offspring.

Roulette Wheel
--------------
Each candidate keeps a bounded history of trial scores and a running score.

- ``generate``: weights are the running scores floored at EPSILON; a value
  is drawn with probability proportional to its weight (uniform when the
  positive scores sum to less than EPSILON).
- ``record``: the score of the trial is appended to the history of the
  candidate equal to ``values[0]`` (identical, for Function candidates).
- ``update``: a candidate's running score becomes the mean of its history,
  which is then cleared. A candidate without new trials keeps its score.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, List, Sequence

import numpy as np

from ..configuration import ConfigurationNode
from ..constants import EPSILON
from ..controlled_object import ValueKind, create_from_config, same_object
from ..errors import ConfigurationError
from ..registry import ObjectFactory
from .base import Function, ScoringFunction


# =============================================================================
# Scoring Strategies
# =============================================================================

class SuccessScoringFunction(ScoringFunction):
    def score(self, parent, offspring) -> float:
        return 1.0 if offspring.fitness < parent.fitness else 0.0


class ImprovedPercentageScoringFunction(ScoringFunction):
    def score(self, parent, offspring) -> float:
        return float(parent.fitness - offspring.fitness)


def build_scoring_function(node: ConfigurationNode, factory: ObjectFactory) -> ScoringFunction:
    """Build ``node["scoring_function"]``, defaulting to success scoring."""
    if node["scoring_function"].is_null():
        return SuccessScoringFunction()
    return factory.build_field("scoring_function", node, ScoringFunction)


# =============================================================================
# Roulette Wheel Selection
# =============================================================================

class _Candidate:
    __slots__ = ("object", "scores", "score")

    def __init__(self, obj: Any, score_size: int) -> None:
        self.object = obj
        self.scores: Deque[float] = deque(maxlen=score_size)
        self.score = 0.0


class RouletteWheelSelectionFunction(Function):
    """
    Fitness-proportionate choice among the ``object`` array.

    Configuration
    -------------
    ::

        {"classname": "RealRouletteWheelSelectionFunction",
         "score_size": 20,
         "object": [0.5, 0.9],
         "scoring_function": {"classname": "SuccessScoringFunction"}}
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.candidates: List[_Candidate] = []
        self.scoring_function: ScoringFunction = SuccessScoringFunction()

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        score_size = node["score_size"].get_uint()
        if score_size < 1:
            raise ConfigurationError("score_size must be >= 1")
        objects = node["object"]
        if not objects.is_array() or objects.size() == 0:
            raise ConfigurationError(
                f"{type(self).__name__} requires a non-empty 'object' array at '{node.path or '<root>'}'"
            )
        self.candidates = [
            _Candidate(create_from_config(self.kind, item, factory), score_size)
            for item in objects
        ]
        self.scoring_function = build_scoring_function(node, factory)

    @property
    def objects(self) -> List[Any]:
        return [c.object for c in self.candidates]

    @property
    def scores(self) -> np.ndarray:
        return np.array([c.score for c in self.candidates], dtype=float)

    def generate(self) -> Any:
        scores = self.scores
        if float(np.maximum(scores, 0.0).sum()) < EPSILON:
            return self.candidates[self.random.choice(len(self.candidates))].object

        weights = np.maximum(scores, EPSILON)
        threshold = self.random.uniform(0.0, float(weights.sum()))
        cumulative = 0.0
        for candidate, weight in zip(self.candidates, weights):
            cumulative += weight
            if threshold < cumulative:
                return candidate.object
        return self.candidates[-1].object

    def _record(self, values: Sequence[Any], parent, offspring) -> bool:
        if parent is None or offspring is None:
            return True
        if len(values) == 0:
            return False
        for candidate in self.candidates:
            if same_object(self.kind, candidate.object, values[0]):
                candidate.scores.append(float(self.scoring_function.score(parent, offspring)))
                return True
        return False

    def update(self) -> None:
        for candidate in self.candidates:
            if candidate.scores:
                candidate.score = float(np.mean(candidate.scores))
                candidate.scores.clear()
