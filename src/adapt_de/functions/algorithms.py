"""
Algorithm-Specific Functions
============================

Closed-form adaptation rules of published self-adaptive DE variants,
expressed over named Function children. ``U`` denotes a uniform draw in
``[0, 1)`` from the shared random source.

jDE (Brest et al., 2006)
------------------------
Children ``object`` (the individual's current value) and ``tau``
(regeneration probability, default 0.1)::

    F  = 0.1 + 0.9·U   if U < tau   else object
    CR = U             if U < tau   else object

ISADE F
-------
Children ``object``, ``min``, ``average``, ``current`` (fitness values fed
by the fitness ControlUpdates) and ``tau`` (default 0.1). With r = U::

    r < tau and current < average:  0.1 + (object - 0.1)·(current - min)/(average - min)
    r < tau otherwise:              U(0.1, 1)
    else:                           object

DEPD F
------
Children ``min``, ``max`` (population fitness extremes) and
``lower_bound``::

    F = max(lower_bound, 1 - |max/min|)   if |max/min| < 1
        max(lower_bound, 1 - |min/max|)   otherwise

SDE F
-----
Child ``rand`` and ``number_of_parameters`` (odd) recorded values p::

    F = p0 + rand·Σ_{i=1,3,...} (p_i - p_{i+1})
"""

from __future__ import annotations

from typing import List, Sequence

from ..configuration import ConfigurationNode
from ..constants import EPSILON, OBJECT_CHILD
from ..controlled_object import ValueKind
from ..errors import ConfigurationError
from ..registry import ObjectFactory
from .base import Function
from .basic import ConstantFunction


DEFAULT_TAU: float = 0.1


def _build_tau(function: Function, node: ConfigurationNode, factory: ObjectFactory) -> None:
    if node.has("tau"):
        function.build_child(node, factory, "tau")
    else:
        tau = ConstantFunction(ValueKind.REAL, DEFAULT_TAU)
        tau.random = factory.random
        function.add_child(tau, "tau")


# =============================================================================
# jDE
# =============================================================================

class _JdeFunction(Function):
    """Regenerates uniformly in ``[lower, upper)`` with probability tau."""

    lower: float = 0.0
    upper: float = 1.0

    def __init__(self) -> None:
        super().__init__(ValueKind.REAL)
        self.object = 0.5
        self.tau = DEFAULT_TAU

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        self.build_child(node, factory, OBJECT_CHILD)
        _build_tau(self, node, factory)
        self._refresh()

    def _refresh(self) -> None:
        self.object = float(self.child_value(OBJECT_CHILD))
        self.tau = float(self.child_value("tau"))

    def generate(self) -> float:
        if self.random.uniform() < self.tau:
            return self.lower + self.random.uniform() * (self.upper - self.lower)
        return self.object


class JdeFFunction(_JdeFunction):
    lower = 0.1
    upper = 1.0


class JdeCrFunction(_JdeFunction):
    lower = 0.0
    upper = 1.0


# =============================================================================
# ISADE
# =============================================================================

class IsadeFFunction(Function):
    def __init__(self) -> None:
        super().__init__(ValueKind.REAL)
        self.object = 0.5
        self.min = 0.0
        self.average = 0.0
        self.current = 0.0
        self.tau = DEFAULT_TAU

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        for name in (OBJECT_CHILD, "min", "average", "current"):
            self.build_child(node, factory, name)
        _build_tau(self, node, factory)
        self._refresh()

    def _refresh(self) -> None:
        self.object = float(self.child_value(OBJECT_CHILD))
        self.min = float(self.child_value("min"))
        self.average = float(self.child_value("average"))
        self.current = float(self.child_value("current"))
        self.tau = float(self.child_value("tau"))

    def generate(self) -> float:
        r = self.random.uniform()
        if r < self.tau and self.current < self.average:
            average = self.average
            if abs(average - self.min) < EPSILON:
                average += EPSILON
            return 0.1 + (self.object - 0.1) * (self.current - self.min) / (average - self.min)
        if r < self.tau:
            return self.random.uniform(0.1, 1.0)
        return self.object


# =============================================================================
# DEPD
# =============================================================================

class DepdFFunction(Function):
    def __init__(self) -> None:
        super().__init__(ValueKind.REAL)
        self.min = 0.0
        self.max = 0.0
        self.lower_bound = 0.0

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        for name in ("min", "max", "lower_bound"):
            self.build_child(node, factory, name)
        self._refresh()

    def _refresh(self) -> None:
        self.min = float(self.child_value("min"))
        self.max = float(self.child_value("max"))
        self.lower_bound = float(self.child_value("lower_bound"))

    def generate(self) -> float:
        low = self.min if abs(self.min) >= EPSILON else EPSILON
        ratio = abs(self.max / low)
        if ratio < 1.0:
            return max(self.lower_bound, 1.0 - ratio)
        return max(self.lower_bound, 1.0 - abs(low / self.max))


# =============================================================================
# SDE
# =============================================================================

class SdeFFunction(Function):
    """
    Configuration
    -------------
    ::

        {"classname": "SdeFFunction",
         "number_of_parameters": 3,
         "rand": {"classname": "RealNormalDisFunction", ...}}
    """

    def __init__(self) -> None:
        super().__init__(ValueKind.REAL)
        self.parameters: List[float] = [0.0]

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        size = node["number_of_parameters"].get_uint()
        if size < 1 or size % 2 == 0:
            raise ConfigurationError(
                f"number_of_parameters must be an odd number >= 1, got {size}"
            )
        self.parameters = [0.0] * size
        self.build_child(node, factory, "rand")

    def number_of_parameters(self) -> int:
        return len(self.parameters)

    def generate(self) -> float:
        p = self.parameters
        spread = sum(p[i] - p[i + 1] for i in range(1, len(p), 2))
        return p[0] + float(self.child_value("rand")) * spread

    def _record(self, values: Sequence[float], parent, offspring) -> bool:
        if len(values) != len(self.parameters):
            return False
        self.parameters = [float(v) for v in values]
        return True
