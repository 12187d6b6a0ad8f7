"""
Control Ranges
==============

Validity predicate applied to every generated value.

Number kinds check ``lower_bound <= value <= upper_bound``; reals compare
with an EPSILON tolerance on both ends, integers exactly. Control kinds
(Function-valued parameters) are always valid.
"""

from __future__ import annotations

from typing import Any

from .configuration import ConfigurationNode
from .constants import EPSILON
from .controlled_object import ValueKind
from .errors import ConfigurationError
from .registry import ObjectFactory, Prototype


def is_less_equal(a: float, b: float) -> bool:
    """``a <= b`` up to EPSILON."""
    return a < b or abs(a - b) < EPSILON


class ControlRange(Prototype):
    """
    Configuration
    -------------
    ``{"classname": "RealControlRange", "lower_bound": 0.0, "upper_bound": 1.0}``
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        self.kind = kind
        self.lower_bound = kind.default()
        self.upper_bound = kind.default()

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        if not self.kind.is_arithmetic:
            return
        self.lower_bound = self.kind.read(node["lower_bound"])
        self.upper_bound = self.kind.read(node["upper_bound"])
        if self.lower_bound > self.upper_bound:
            raise ConfigurationError(
                f"lower_bound {self.lower_bound} exceeds upper_bound {self.upper_bound} "
                f"at '{node.path or '<root>'}'"
            )

    def is_valid(self, value: Any) -> bool:
        if not self.kind.is_arithmetic:
            return True
        if self.kind is ValueKind.INTEGER:
            return self.lower_bound <= value <= self.upper_bound
        return is_less_equal(self.lower_bound, value) and is_less_equal(value, self.upper_bound)
