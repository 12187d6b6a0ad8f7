"""
Controlled Values
=================

A controlled value is either a number (``INTEGER`` / ``REAL``) or a
Function object producing numbers (``INTEGER_CONTROL`` / ``REAL_CONTROL``).
The second form is what lets a mechanism adapt the choice *among* Function
strategies instead of a number.

Every container of controlled values (ControlParameter slots, Constant,
Variable, roulette candidates, ...) is parameterized by a :class:`ValueKind`
at construction time and goes through the helpers below, so no container
needs to know which form it holds:

==================  =====================  ===========================
Helper              number kinds           control kinds
==================  =====================  ===========================
create_from_config  read int / float       factory.build(node)
create_from_value   coerce                 clone
clone_object        copy                   clone
same_object         ``==``                 ``is``
==================  =====================  ===========================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TYPE_CHECKING

from .configuration import ConfigurationNode
from .errors import TypeMismatchError

if TYPE_CHECKING:
    from .registry import ObjectFactory


class ValueKind(Enum):
    """Kind of value held by a controlled container; the value is the classname prefix."""

    INTEGER = "Integer"
    REAL = "Real"
    INTEGER_CONTROL = "IntegerControl"
    REAL_CONTROL = "RealControl"

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def is_arithmetic(self) -> bool:
        return self in (ValueKind.INTEGER, ValueKind.REAL)

    @property
    def element(self) -> "ValueKind":
        """Number kind produced by this kind (itself for number kinds)."""
        if self is ValueKind.INTEGER_CONTROL:
            return ValueKind.INTEGER
        if self is ValueKind.REAL_CONTROL:
            return ValueKind.REAL
        return self

    def default(self) -> Any:
        if self is ValueKind.INTEGER:
            return 0
        if self is ValueKind.REAL:
            return 0.0
        return None

    def coerce(self, value: Any) -> Any:
        if self is ValueKind.INTEGER:
            return int(value)
        if self is ValueKind.REAL:
            return float(value)
        return value

    def read(self, node: ConfigurationNode) -> Any:
        """Read a number of this kind from ``node`` (number kinds only)."""
        if self is ValueKind.INTEGER:
            return node.get_int()
        if self is ValueKind.REAL:
            return node.get_double()
        raise TypeError(f"{self.name} values are not plain numbers")


def create_from_config(kind: ValueKind, node: ConfigurationNode, factory: "ObjectFactory") -> Any:
    """
    Build a controlled value from configuration.

    Raises
    ------
    TypeMismatchError
        A number kind found something other than a number, or a control kind
        found something other than a Function config.
    """
    if kind.is_arithmetic:
        return kind.read(node)
    from .functions.base import Function

    if not node.is_object():
        raise TypeMismatchError(
            f"expected Function configuration at '{node.path or '<root>'}', found {node.kind()}"
        )
    function = factory.build(node, Function)
    if function.kind is not kind.element:
        raise TypeMismatchError(
            f"Function at '{node.path}' produces {function.kind.name} values, "
            f"{kind.element.name} required"
        )
    return function


def create_from_value(kind: ValueKind, value: Any) -> Any:
    if kind.is_arithmetic:
        return kind.coerce(value)
    return value.clone() if value is not None else None


def clone_object(kind: ValueKind, value: Any) -> Any:
    if kind.is_arithmetic or value is None:
        return value
    return value.clone()


def same_object(kind: ValueKind, a: Any, b: Any) -> bool:
    """Equality for numbers, identity for Function objects."""
    if kind.is_arithmetic:
        return a == b
    return a is b
