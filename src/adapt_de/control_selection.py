"""
Control Selections
==================

Feedback recorded after the offspring of a generation were evaluated.

- :class:`NonInfoControlSelection`: records nothing
- :class:`BetterOffspringControlSelection`: when the trial vector of
  ``target_index`` improved on its parent, records the parameter value that
  produced it into the ``"object"`` child, together with the parent and the
  offspring so score-driven Functions can rate the trial
"""

from __future__ import annotations

from abc import abstractmethod

from .configuration import ConfigurationNode
from .constants import OBJECT_CHILD
from .context import Context
from .control_parameter import ControlParameter
from .controlled_object import ValueKind
from .errors import FeedbackRejectedError
from .functions.base import Function
from .registry import ObjectFactory, Prototype


class ControlSelection(Prototype):
    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        pass

    @abstractmethod
    def select(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        """Record the outcome of the trial at ``context.target_index``."""


class NonInfoControlSelection(ControlSelection):
    def select(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        pass


class BetterOffspringControlSelection(ControlSelection):
    """Success-only feedback (offspring fitness strictly below the parent's)."""

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        self.kind = kind

    def select(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        index = context.target_index
        parent = context.population.at(index)
        offspring = context.offspring.at(index)
        if not offspring.fitness < parent.fitness:
            return
        if not function.record([parameter.load(index)], OBJECT_CHILD, parent, offspring):
            raise FeedbackRejectedError(
                f'No functions accept parameters "{OBJECT_CHILD}" in the "{function.name}"'
            )
