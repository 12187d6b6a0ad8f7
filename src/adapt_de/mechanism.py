"""
Control Mechanisms
==================

A ControlMechanism binds one Function tree, one ControlParameter cache, one
ControlRange, one ControlSelection and a list of ControlUpdates behind three
calls made by the generation loop:

``generate(context)``
    Value for ``context.target_index``. The first call of a cycle draws from
    the Function tree, redrawing while the value is out of range, and caches
    it; later calls of the same cycle return the cached value.

``select(context)``
    After evaluation: let the ControlSelection record the trial outcome.

``update(context)``
    Run every ControlUpdate, advance the Function tree and reset the cache
    slot, which closes the cycle for that index.

Per index the life cycle is::

    idle ──generate──> cached ──generate──> cached ──select──> cached ──update──> idle

Variants
--------
- :class:`ControlMechanism`: direct, the tree comes from ``ControlFunction``
- :class:`IndirectControlMechanism`: the tree is the value generated by a
  nested, Function-valued mechanism, so strategies themselves are adapted
- :class:`SadeCrControlMechanism`: feedback goes to the ``"mean"`` child
- :class:`SdeFControlMechanism`: one draw; an out-of-range value is folded
  to its fractional part

Rejection Loop
--------------
The redraw loop is unbounded unless ``max_attempts`` is configured. A
ControlRange that the Function tree can never satisfy is a configuration
error; with ``max_attempts`` it surfaces as :class:`RangeExhaustedError`.

Configuration
-------------
::

    {"classname": "RealControlMechanism",
     "ControlRange": {"classname": "RealControlRange", "lower_bound": 0.0, "upper_bound": 1.0},
     "ControlParameter": {"classname": "RealMultipleControlParameter",
                          "number_of_objects": 50, "initial_value": 0.5},
     "ControlFunction": {"classname": "SingleControlFunction",
                         "Function": {"classname": "RealConstantFunction", "object": 0.5}},
     "ControlSelection": {"classname": "NonInfoControlSelection"},
     "ControlUpdate": [{"classname": "GenerationControlUpdate"}],
     "max_attempts": 1000}
"""

from __future__ import annotations

import math
from typing import Any, List, Optional

from .configuration import ConfigurationNode
from .context import Context
from .control_function import ControlFunction
from .control_parameter import ControlParameter
from .control_range import ControlRange
from .control_selection import ControlSelection
from .control_update import ControlUpdate
from .controlled_object import ValueKind
from .errors import ConfigurationError, RangeExhaustedError, TypeMismatchError
from .functions.base import Function
from .registry import ObjectFactory, Prototype


class ControlMechanism(Prototype):
    """
    Direct control mechanism.

    Parameters
    ----------
    kind : ValueKind
        Kind of the controlled value. ``REAL`` for F and CR; the control
        kinds for the nested mechanism of an indirect one.
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        self.kind = kind
        self.range: Optional[ControlRange] = None
        self.parameter: Optional[ControlParameter] = None
        self.function: Optional[ControlFunction] = None
        self.selection: Optional[ControlSelection] = None
        self.updates: List[ControlUpdate] = []
        self.max_attempts: Optional[int] = None

    # =========================================================================
    # Configuration
    # =========================================================================

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        self._configure_parts(node, factory)
        self.function = factory.build_field("ControlFunction", node, ControlFunction)
        if self.function.kind is not self.kind:
            raise TypeMismatchError(
                f"ControlFunction at '{node.path or '<root>'}' produces "
                f"{self.function.kind.name} values, {self.kind.name} required"
            )

    def _configure_parts(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        self.range = factory.build_field("ControlRange", node, ControlRange)
        self.parameter = factory.build_field("ControlParameter", node, ControlParameter)
        for part, label in ((self.range, "ControlRange"), (self.parameter, "ControlParameter")):
            if part.kind is not self.kind:
                raise TypeMismatchError(
                    f"{label} at '{node.path or '<root>'}' holds {part.kind.name} values, "
                    f"{self.kind.name} required"
                )
        self.selection = factory.build_field("ControlSelection", node, ControlSelection)
        self.updates = factory.build_list(node["ControlUpdate"], ControlUpdate)

        attempts = node["max_attempts"]
        self.max_attempts = None if attempts.is_null() else attempts.get_uint()
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be >= 1")

    # =========================================================================
    # Hooks
    # =========================================================================

    def function_for(self, context: Context) -> Function:
        """Function tree serving ``context.target_index``."""
        return self.function.at(context.target_index)

    def receiver(self, function: Function) -> Function:
        """Node that selections and updates record into."""
        return function

    def draw(self, function: Function) -> Any:
        value = function.generate()
        attempts = 1
        while not self.range.is_valid(value):
            if self.max_attempts is not None and attempts >= self.max_attempts:
                raise RangeExhaustedError(
                    f"No value in [{self.range.lower_bound}, {self.range.upper_bound}] "
                    f"after {attempts} attempts (last: {value})"
                )
            value = function.generate()
            attempts += 1
        return value

    # =========================================================================
    # Generation Cycle
    # =========================================================================

    def generate(self, context: Context) -> Any:
        index = context.target_index
        if self.parameter.is_already_generated(index):
            return self.parameter.load(index)
        value = self.draw(self.function_for(context))
        self.parameter.save(value, index)
        return value

    def select(self, context: Context) -> None:
        function = self.function_for(context)
        self.selection.select(context, self.parameter, self.receiver(function))

    def update(self, context: Context) -> None:
        function = self.function_for(context)
        receiver = self.receiver(function)
        for strategy in self.updates:
            strategy.update(context, self.parameter, receiver)
        function.update()
        self.parameter.reset_already_generated(context.target_index)


class IndirectControlMechanism(ControlMechanism):
    """
    Mechanism whose Function tree is chosen by a nested mechanism.

    The nested ``ControlMechanism`` member controls Function objects of the
    same element kind (e.g. a ``RealControlControlMechanism`` whose roulette
    wheel picks among several F strategies). ``select`` and ``update`` are
    forwarded to it after the outer mechanism is done, so the nested one
    learns which strategy produced successful offspring.
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.mechanism: Optional[ControlMechanism] = None

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        self._configure_parts(node, factory)
        self.mechanism = factory.build_field("ControlMechanism", node, ControlMechanism)
        nested = self.mechanism.kind
        if nested.is_arithmetic or nested.element is not self.kind:
            raise TypeMismatchError(
                f"Nested ControlMechanism at '{node.path or '<root>'}' controls "
                f"{nested.name} values, Functions of {self.kind.name} values required"
            )

    def function_for(self, context: Context) -> Function:
        return self.mechanism.generate(context)

    def select(self, context: Context) -> None:
        super().select(context)
        self.mechanism.select(context)

    def update(self, context: Context) -> None:
        super().update(context)
        self.mechanism.update(context)


class SadeCrControlMechanism(ControlMechanism):
    """SaDE crossover rate: feedback is recorded into the ``"mean"`` child."""

    receiver_name = "mean"

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        for index in range(self.function.size()):
            if self.function.at(index).get_child(self.receiver_name) is None:
                raise ConfigurationError(
                    f"SadeCrControlMechanism at '{node.path or '<root>'}' needs a Function "
                    f"with a '{self.receiver_name}' child"
                )

    def receiver(self, function: Function) -> Function:
        return function.child(self.receiver_name)


class SdeFControlMechanism(ControlMechanism):
    """SDE scaling factor: a single draw, folded into ``[0, 1)`` when out of range."""

    def draw(self, function: Function) -> Any:
        value = function.generate()
        if not self.range.is_valid(value):
            value = abs(value - math.trunc(value))
        return value
