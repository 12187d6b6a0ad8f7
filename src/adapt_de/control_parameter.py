"""
Control Parameters
==================

Per-slot cache of generated values.

Within one generation cycle, F (or CR) of individual ``i`` is requested by
mutation, crossover and selection. The cache guarantees that all of them
see the same value: ``generated[i]`` is true exactly between a
``save(value, i)`` and the next ``reset_already_generated(i)``.

- :class:`MultipleControlParameter`: ``number_of_objects`` independent slots
- :class:`SingleControlParameter`: one slot, the index is ignored

Initial Values
--------------
``initial_value`` (number kinds only) is either

- a number copied into every slot,
- a Function configuration, updated and then generated once per slot,
- absent, giving 0 / 0.0.

Control kinds start empty (``None``).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, List

from .configuration import ConfigurationNode
from .controlled_object import ValueKind
from .errors import ConfigurationError, ParameterIndexError, TypeMismatchError
from .functions.base import Function
from .registry import ObjectFactory, Prototype


class ControlParameter(Prototype):
    """Cache interface shared by every parameter store."""

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        self.kind = kind

    @abstractmethod
    def save(self, value: Any, index: int) -> None:
        """Store ``value`` for ``index`` and mark it generated."""

    @abstractmethod
    def load(self, index: int) -> Any:
        """Last value saved for ``index`` (the initial value before any save)."""

    @abstractmethod
    def is_already_generated(self, index: int) -> bool:
        ...

    @abstractmethod
    def reset_already_generated(self, index: int) -> None:
        ...

    @abstractmethod
    def size(self) -> int:
        ...

    def _initial_values(self, node: ConfigurationNode, factory: ObjectFactory, count: int) -> List[Any]:
        initial = node["initial_value"]
        if not self.kind.is_arithmetic or initial.is_null():
            return [self.kind.default() for _ in range(count)]
        if initial.is_number():
            value = self.kind.read(initial)
            return [value] * count
        if initial.is_object():
            function = factory.build(initial, Function)
            if function.kind is not self.kind:
                raise TypeMismatchError(
                    f"initial_value at '{initial.path}' produces {function.kind.name} values, "
                    f"{self.kind.name} required"
                )
            values = []
            for _ in range(count):
                function.update()
                values.append(self.kind.coerce(function.generate()))
            return values
        raise TypeMismatchError(
            f"expected number or Function at '{initial.path}', found {initial.kind()}"
        )


class MultipleControlParameter(ControlParameter):
    """
    Configuration
    -------------
    ``{"classname": "RealMultipleControlParameter", "number_of_objects": 50, "initial_value": 0.5}``
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.objects: List[Any] = []
        self.generated: List[bool] = []

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        count = node["number_of_objects"].get_uint()
        if count < 1:
            raise ConfigurationError("number_of_objects must be >= 1")
        self.objects = self._initial_values(node, factory, count)
        self.generated = [False] * count

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.objects):
            raise ParameterIndexError(
                f"ControlParameter index {index} out of range [0, {len(self.objects)})"
            )

    def save(self, value: Any, index: int) -> None:
        self._check(index)
        self.objects[index] = value
        self.generated[index] = True

    def load(self, index: int) -> Any:
        self._check(index)
        return self.objects[index]

    def is_already_generated(self, index: int) -> bool:
        self._check(index)
        return self.generated[index]

    def reset_already_generated(self, index: int) -> None:
        self._check(index)
        self.generated[index] = False

    def size(self) -> int:
        return len(self.objects)


class SingleControlParameter(ControlParameter):
    """One shared slot; every ``index`` argument is ignored."""

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        super().__init__(kind)
        self.object = kind.default()
        self.generated = False

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        self.object = self._initial_values(node, factory, 1)[0]
        self.generated = False

    def save(self, value: Any, index: int = 0) -> None:
        self.object = value
        self.generated = True

    def load(self, index: int = 0) -> Any:
        return self.object

    def is_already_generated(self, index: int = 0) -> bool:
        return self.generated

    def reset_already_generated(self, index: int = 0) -> None:
        self.generated = False

    def size(self) -> int:
        return 1
