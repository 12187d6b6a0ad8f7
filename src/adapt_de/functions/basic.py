"""
Basic Functions
===============

Leaves holding a value directly, and the LearningPeriod pass-through.

- :class:`ConstantFunction`: fixed value, ignores feedback
- :class:`VariableFunction`: last recorded value
- :class:`RandomSelectionFunction`: uniform pick among fixed candidates
- :class:`LearningPeriodFunction`: updates its ``object`` child only every
  ``learning_period`` generations
"""

from __future__ import annotations

from typing import Any, List, Sequence

from ..configuration import ConfigurationNode
from ..constants import GENERATION, OBJECT_CHILD
from ..controlled_object import ValueKind, create_from_config, create_from_value
from ..errors import ConfigurationError
from ..registry import ObjectFactory
from .base import Function


class ConstantFunction(Function):
    """
    Fixed value.

    For control kinds the value is itself a Function built from the
    ``object`` member ("control of control" nesting).

    Configuration
    -------------
    ``{"classname": "RealConstantFunction", "object": 0.5}``
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL, value: Any = None) -> None:
        super().__init__(kind)
        self.object = kind.default() if value is None else create_from_value(kind, value)

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        if node["object"].is_null():
            raise ConfigurationError(
                f"{type(self).__name__} requires 'object' at '{node.path or '<root>'}'"
            )
        self.object = create_from_config(self.kind, node["object"], factory)

    def generate(self) -> Any:
        return self.object

    def _record(self, values, parent, offspring) -> bool:
        return True


class VariableFunction(Function):
    """
    Value replaced by every record; ``object`` is the optional start value.

    Control kinds keep a clone of the recorded Function.
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL, value: Any = None) -> None:
        super().__init__(kind)
        self.object = kind.default() if value is None else create_from_value(kind, value)

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        if not node["object"].is_null():
            self.object = create_from_config(self.kind, node["object"], factory)

    def generate(self) -> Any:
        return self.object

    def _record(self, values: Sequence[Any], parent, offspring) -> bool:
        if len(values) == 0:
            return False
        self.object = create_from_value(self.kind, values[0])
        return True


class RandomSelectionFunction(Function):
    """
    Uniform random choice among the ``object`` array.

    Configuration
    -------------
    ``{"classname": "RealRandomSelectionFunction", "object": [0.5, 0.9]}``
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.objects: List[Any] = []

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        objects = node["object"]
        if not objects.is_array() or objects.size() == 0:
            raise ConfigurationError(
                f"{type(self).__name__} requires a non-empty 'object' array at '{node.path or '<root>'}'"
            )
        self.objects = [create_from_config(self.kind, item, factory) for item in objects]

    def generate(self) -> Any:
        return self.objects[self.random.choice(len(self.objects))]

    def _record(self, values, parent, offspring) -> bool:
        return True


class LearningPeriodFunction(Function):
    """
    Pass-through that freezes its ``object`` child between learning periods.

    The built-in ``generation`` child is an integer Variable fed by
    ``GenerationControlUpdate``. On ``update`` the ``object`` child is only
    updated when ``generation % learning_period == 0``; in between, feedback
    keeps accumulating in it.

    Configuration
    -------------
    ::

        {"classname": "RealLearningPeriodFunction",
         "learning_period": 20,
         "object": {"classname": "RealMedianFunction", ...}}
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.learning_period = 1

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        self.learning_period = node["learning_period"].get_uint()
        if self.learning_period < 1:
            raise ConfigurationError("learning_period must be >= 1")
        self.build_child(node, factory, OBJECT_CHILD)
        generation = VariableFunction(ValueKind.INTEGER)
        generation.random = factory.random
        self.add_child(generation, GENERATION)

    def generate(self) -> Any:
        return self.child_value(OBJECT_CHILD)

    def update(self) -> None:
        generation = self.child(GENERATION)
        generation.update()
        if generation.generate() % self.learning_period == 0:
            self.child(OBJECT_CHILD).update()
