"""
Distribution Functions
======================

Random draws whose parameters are themselves Function children, so the
distribution can be adapted by recording into e.g. ``"mean"``.

- ``UniformDistributionFunction``: children ``lower_bound``, ``upper_bound``
- ``NormalDistributionFunction``: children ``mean``, ``stddev``
- ``CauchyDistributionFunction``: children ``location``, ``scale``

The parameters are read from the children at configure time and after
every ``update``.
"""

from __future__ import annotations

from ..configuration import ConfigurationNode
from ..controlled_object import ValueKind
from ..registry import ObjectFactory
from .base import Function


class UniformDistributionFunction(Function):
    """
    Uniform draw between two child values.

    Integer kinds draw from ``[lower_bound, upper_bound]`` (both ends
    included), real kinds from ``[lower_bound, upper_bound)``.
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.lower_bound = kind.coerce(0)
        self.upper_bound = kind.coerce(1)

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        self.build_child(node, factory, "lower_bound")
        self.build_child(node, factory, "upper_bound")
        self._refresh()

    def _refresh(self) -> None:
        self.lower_bound = self.child_value("lower_bound")
        self.upper_bound = self.child_value("upper_bound")

    def generate(self):
        if self.kind is ValueKind.INTEGER:
            low, high = sorted((self.lower_bound, self.upper_bound))
            return self.random.integers(low, high)
        return self.random.uniform(self.lower_bound, self.upper_bound)


class NormalDistributionFunction(Function):
    """Normal draw; a negative ``stddev`` is treated as zero."""

    def __init__(self) -> None:
        super().__init__(ValueKind.REAL)
        self.mean = 0.0
        self.stddev = 1.0

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        self.build_child(node, factory, "mean")
        self.build_child(node, factory, "stddev")
        self._refresh()

    def _refresh(self) -> None:
        self.mean = float(self.child_value("mean"))
        self.stddev = max(0.0, float(self.child_value("stddev")))

    def generate(self) -> float:
        return self.random.normal(self.mean, self.stddev)


class CauchyDistributionFunction(Function):
    """Cauchy draw around ``location``."""

    def __init__(self) -> None:
        super().__init__(ValueKind.REAL)
        self.location = 0.0
        self.scale = 1.0

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        super().configure(node, factory)
        self.build_child(node, factory, "location")
        self.build_child(node, factory, "scale")
        self._refresh()

    def _refresh(self) -> None:
        self.location = float(self.child_value("location"))
        self.scale = max(0.0, float(self.child_value("scale")))

    def generate(self) -> float:
        if self.scale <= 0.0:
            return self.location
        return self.random.cauchy(self.location, self.scale)
