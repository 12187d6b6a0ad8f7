"""
Control Functions
=================

Owner of the Function tree(s) of a ControlMechanism.

- :class:`SingleControlFunction`: one tree shared by the whole population
- :class:`MultipleControlFunction`: one independent tree per population slot
  (e.g. jDE, where every individual carries its own F and CR)
"""

from __future__ import annotations

from abc import abstractmethod
from typing import List

from .configuration import ConfigurationNode
from .controlled_object import ValueKind
from .errors import ConfigurationError, ParameterIndexError
from .functions.base import Function
from .registry import ObjectFactory, Prototype


class ControlFunction(Prototype):
    """Maps a population index to the Function tree serving it."""

    @abstractmethod
    def at(self, index: int) -> Function:
        """Function tree used for slot ``index``."""

    @abstractmethod
    def size(self) -> int:
        """Number of distinct Function trees."""

    @property
    def kind(self) -> ValueKind:
        return self.at(0).kind


class SingleControlFunction(ControlFunction):
    """
    Configuration
    -------------
    ``{"classname": "SingleControlFunction", "Function": {...}}``
    """

    def __init__(self) -> None:
        self.function: Function = None

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        self.function = factory.build_field("Function", node, Function)

    def at(self, index: int) -> Function:
        return self.function

    def size(self) -> int:
        return 1


class MultipleControlFunction(ControlFunction):
    """
    ``number_of_functions`` independent copies of one configured tree.

    Configuration
    -------------
    ``{"classname": "MultipleControlFunction", "number_of_functions": 50, "Function": {...}}``
    """

    def __init__(self) -> None:
        self.functions: List[Function] = []

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        count = node["number_of_functions"].get_uint()
        if count < 1:
            raise ConfigurationError("number_of_functions must be >= 1")
        template = factory.build_field("Function", node, Function)
        self.functions = [template] + [template.clone() for _ in range(count - 1)]

    def at(self, index: int) -> Function:
        if not 0 <= index < len(self.functions):
            raise ParameterIndexError(
                f"ControlFunction index {index} out of range [0, {len(self.functions)})"
            )
        return self.functions[index]

    def size(self) -> int:
        return len(self.functions)
