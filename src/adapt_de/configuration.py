"""
Configuration Tree
==================

Read-only view of a hierarchical configuration document.

Every pluggable component of the package is described by a node of this
tree and materialized by :class:`adapt_de.registry.ObjectFactory`. The tree
does not assume a file format: a :class:`ConfigurationBuilder` turns text
into plain Python data (dict / list / str / int / float / bool / None) and
:class:`ConfigurationNode` wraps that data.

Node Kinds
----------
============  ==========================================
Kind          Python value
============  ==========================================
null          ``None`` (also: any missing member)
bool          ``bool``
string        ``str``
int / uint    ``int`` (``uint`` when non-negative)
double        ``float``
object        ``dict`` (insertion ordered)
array         ``list``
============  ==========================================

Missing Members
---------------
``get`` never fails. A missing member, a missing array index or ``get`` on
a scalar returns a null node, so optional settings are checked with
``node["x"].is_null()`` before they are read. The typed getters are strict
and raise :class:`TypeMismatchError` on the wrong kind.

Example
-------
>>> root = parse_config('{"classname": "Random", "seed": 7}')
>>> root["classname"].get_string()
'Random'
>>> root["missing"].is_null()
True
"""

from __future__ import annotations

import copy
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from .errors import ConfigurationError, TypeMismatchError


# =============================================================================
# Builders
# =============================================================================

class ConfigurationBuilder(ABC):
    """Turns document text into plain Python data."""

    suffix: str = ""

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse ``text`` and return the document as plain Python data."""

    def load(self, path: Union[str, Path]) -> Any:
        path = Path(path)
        if self.suffix and path.suffix.lower() != self.suffix:
            raise ConfigurationError(
                f"Configuration file must have a '{self.suffix}' suffix: {path}"
            )
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
        return self.parse(text)


class JsonConfigurationBuilder(ConfigurationBuilder):
    """JSON documents through the standard library parser."""

    suffix = ".json"

    def parse(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}"
            ) from e


DEFAULT_BUILDER: ConfigurationBuilder = JsonConfigurationBuilder()


# =============================================================================
# Node
# =============================================================================

class ConfigurationNode:
    """
    Immutable handle onto one value of a configuration document.

    Parameters
    ----------
    data : Any
        Plain Python value of this node (``None`` for a null node).
    builder : ConfigurationBuilder, optional
        Builder the document came from. Shared by every node of the tree.
    path : str
        Location of the node inside the document, used in error messages.
    """

    __slots__ = ("_data", "_builder", "_path")

    def __init__(
        self,
        data: Any = None,
        builder: Optional[ConfigurationBuilder] = None,
        path: str = "",
    ) -> None:
        self._data = data
        self._builder = builder if builder is not None else DEFAULT_BUILDER
        self._path = path

    # =========================================================================
    # Navigation
    # =========================================================================

    def get(self, key: Union[str, int]) -> "ConfigurationNode":
        """
        Return the member ``key`` (object) or element ``key`` (array).

        Never raises: anything absent yields a null node.
        """
        if isinstance(key, int) and not isinstance(key, bool):
            path = f"{self._path}[{key}]"
            if isinstance(self._data, list) and 0 <= key < len(self._data):
                return ConfigurationNode(self._data[key], self._builder, path)
            return ConfigurationNode(None, self._builder, path)

        path = f"{self._path}.{key}" if self._path else str(key)
        if isinstance(self._data, dict) and key in self._data:
            return ConfigurationNode(self._data[key], self._builder, path)
        return ConfigurationNode(None, self._builder, path)

    def __getitem__(self, key: Union[str, int]) -> "ConfigurationNode":
        return self.get(key)

    def has(self, name: str) -> bool:
        """True if this is an object holding a non-null member ``name``."""
        return not self.get(name).is_null()

    def size(self) -> int:
        """Number of elements of an array node, 0 for any other kind."""
        if isinstance(self._data, list):
            return len(self._data)
        return 0

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator["ConfigurationNode"]:
        for i in range(self.size()):
            yield self.get(i)

    def keys(self) -> List[str]:
        if isinstance(self._data, dict):
            return list(self._data.keys())
        return []

    # =========================================================================
    # Kind Predicates
    # =========================================================================

    def kind(self) -> str:
        d = self._data
        if d is None:
            return "null"
        if isinstance(d, bool):
            return "bool"
        if isinstance(d, str):
            return "string"
        if isinstance(d, int):
            return "uint" if d >= 0 else "int"
        if isinstance(d, float):
            return "double"
        if isinstance(d, dict):
            return "object"
        if isinstance(d, list):
            return "array"
        return type(d).__name__

    def is_null(self) -> bool:
        return self._data is None

    def is_bool(self) -> bool:
        return isinstance(self._data, bool)

    def is_string(self) -> bool:
        return isinstance(self._data, str)

    def is_int(self) -> bool:
        return isinstance(self._data, int) and not isinstance(self._data, bool)

    def is_uint(self) -> bool:
        return self.is_int() and self._data >= 0

    def is_double(self) -> bool:
        return isinstance(self._data, float)

    def is_number(self) -> bool:
        return self.is_int() or self.is_double()

    def is_object(self) -> bool:
        return isinstance(self._data, dict)

    def is_array(self) -> bool:
        return isinstance(self._data, list)

    # =========================================================================
    # Typed Getters
    # =========================================================================

    def _mismatch(self, expected: str) -> TypeMismatchError:
        where = self._path or "<root>"
        return TypeMismatchError(
            f"expected {expected} at '{where}', found {self.kind()}"
        )

    def get_bool(self) -> bool:
        if not self.is_bool():
            raise self._mismatch("bool")
        return self._data

    def get_string(self) -> str:
        if not self.is_string():
            raise self._mismatch("string")
        return self._data

    def get_int(self) -> int:
        if not self.is_int():
            raise self._mismatch("int")
        return int(self._data)

    def get_uint(self) -> int:
        if not self.is_uint():
            raise self._mismatch("uint")
        return int(self._data)

    def get_double(self) -> float:
        """Read a number as float. Integers are widened, bools are rejected."""
        if not self.is_number():
            raise self._mismatch("double")
        return float(self._data)

    def value(self, kind: type) -> Any:
        """
        Typed read dispatching on a Python type.

        Parameters
        ----------
        kind : type
            One of ``bool``, ``str``, ``int``, ``float``, ``dict``, ``list``.

        Raises
        ------
        TypeMismatchError
            If the node does not hold a value of ``kind``.
        """
        if kind is bool:
            return self.get_bool()
        if kind is str:
            return self.get_string()
        if kind is int:
            return self.get_int()
        if kind is float:
            return self.get_double()
        if kind is dict:
            if not self.is_object():
                raise self._mismatch("object")
            return self.to_data()
        if kind is list:
            if not self.is_array():
                raise self._mismatch("array")
            return self.to_data()
        raise TypeError(f"Unsupported configuration value type: {kind!r}")

    # =========================================================================
    # Copies
    # =========================================================================

    @property
    def path(self) -> str:
        return self._path

    @property
    def builder(self) -> ConfigurationBuilder:
        return self._builder

    def to_data(self) -> Any:
        """Deep copy of the underlying plain data."""
        return copy.deepcopy(self._data)

    def clone(self) -> "ConfigurationNode":
        """Deep-copy the subtree; the builder is shared."""
        return ConfigurationNode(copy.deepcopy(self._data), self._builder, self._path)

    def __repr__(self) -> str:
        return f"ConfigurationNode({self._path or '<root>'}: {self.kind()})"


# =============================================================================
# Entry Points
# =============================================================================

def from_data(data: Any, builder: Optional[ConfigurationBuilder] = None) -> ConfigurationNode:
    """Wrap already-parsed data (dicts, lists, numbers) as a root node."""
    return ConfigurationNode(copy.deepcopy(data), builder)


def parse_config(text: str, builder: Optional[ConfigurationBuilder] = None) -> ConfigurationNode:
    builder = builder if builder is not None else DEFAULT_BUILDER
    return ConfigurationNode(builder.parse(text), builder)


def load_config(path: Union[str, Path], builder: Optional[ConfigurationBuilder] = None) -> ConfigurationNode:
    """
    Load a configuration document from disk.

    Raises
    ------
    ConfigurationError
        If the suffix does not match the builder (``.json`` by default),
        the file cannot be read, or the text does not parse.
    """
    builder = builder if builder is not None else DEFAULT_BUILDER
    return ConfigurationNode(builder.load(path), builder)
