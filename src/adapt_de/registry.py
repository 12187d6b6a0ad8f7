"""
Prototype Registry and Object Factory
=====================================

Construct-by-name from data.

A configuration node names its type in a ``classname`` member. The
:class:`PrototypeRegistry` maps that name to a zero-argument constructor
(a class, a closure binding a value kind, or the ``clone`` of a template
instance) and the :class:`ObjectFactory` creates the object and lets it
configure itself from the node:

    node ──classname──> registry.create(name) ──> obj.configure(node, factory)

``configure`` may call back into the factory for nested components, so a
whole algorithm graph is materialized from one document. The factory also
carries the shared :class:`~adapt_de.random_source.Random` handle that every
stochastic component draws from.

Example
-------
>>> registry = default_registry()
>>> factory = ObjectFactory(registry, Random(1))
>>> constant = factory.build(from_data({"classname": "RealConstantFunction", "object": 0.5}))
>>> constant.generate()
0.5
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Type, TypeVar, TYPE_CHECKING

from .configuration import ConfigurationNode
from .constants import CLASSNAME_KEY
from .errors import ConfigurationError, TypeMismatchError, UnknownTypeError

if TYPE_CHECKING:
    from .random_source import Random


T = TypeVar("T")


# =============================================================================
# Prototype Capability
# =============================================================================

class Prototype(ABC):
    """
    Base class of every component that can be built from configuration.

    Subclasses implement :meth:`configure`. :meth:`clone` is a deep copy; the
    shared Random handle survives the copy by reference.
    """

    def clone(self: T) -> T:
        return copy.deepcopy(self)

    @abstractmethod
    def configure(self, node: ConfigurationNode, factory: "ObjectFactory") -> None:
        """Mutate ``self`` from ``node``, building nested parts with ``factory``."""


# =============================================================================
# Registry
# =============================================================================

class PrototypeRegistry:
    """Maps type names to zero-argument constructors."""

    def __init__(self) -> None:
        self._constructors: Dict[str, Callable[[], Prototype]] = {}

    def register(self, name: str, constructor: Callable[[], Prototype]) -> None:
        """Register ``constructor`` under ``name``, replacing any previous entry."""
        if not callable(constructor):
            raise TypeError(f"Constructor for '{name}' is not callable")
        self._constructors[name] = constructor

    def register_prototype(self, name: str, prototype: Prototype) -> None:
        """Register a template instance; every creation is a clone of it."""
        template = prototype.clone()
        self._constructors[name] = template.clone

    def create(self, name: str) -> Prototype:
        """
        Return a fresh, unconfigured instance of ``name``.

        Raises
        ------
        UnknownTypeError
            If ``name`` has not been registered.
        """
        try:
            constructor = self._constructors[name]
        except KeyError:
            raise UnknownTypeError(
                f"PrototypeRegistry does not find the type: {name}"
            ) from None
        return constructor()

    def names(self) -> List[str]:
        return sorted(self._constructors)

    def __contains__(self, name: object) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)


# =============================================================================
# Factory
# =============================================================================

class ObjectFactory:
    """
    Builds configured components from configuration nodes.

    Parameters
    ----------
    registry : PrototypeRegistry
        Source of constructors.
    random : Random, optional
        Shared random source handed to every stochastic component.
    """

    def __init__(self, registry: PrototypeRegistry, random: Optional["Random"] = None) -> None:
        self.registry = registry
        self.random = random

    def create(self, name: str) -> Prototype:
        """Unconfigured instance straight from the registry."""
        return self.registry.create(name)

    def build(self, node: ConfigurationNode, expected: Optional[Type[T]] = None) -> T:
        """
        Create the object named by ``node["classname"]`` and configure it.

        Parameters
        ----------
        node : ConfigurationNode
            Object node with a ``classname`` member.
        expected : type, optional
            Family the built object must belong to.

        Raises
        ------
        ConfigurationError
            If ``node`` is null.
        TypeMismatchError
            If ``classname`` is not a string, or the object is not an
            instance of ``expected``.
        UnknownTypeError
            If ``classname`` is not registered.
        """
        if node.is_null():
            raise ConfigurationError(
                f"Missing component configuration at '{node.path or '<root>'}'"
            )
        name = node[CLASSNAME_KEY].get_string()
        obj = self.registry.create(name)
        if expected is not None and not isinstance(obj, expected):
            raise TypeMismatchError(
                f"'{name}' at '{node.path or '<root>'}' is not a {expected.__name__}"
            )
        obj.configure(node, self)
        return obj

    def build_field(
        self,
        name: str,
        parent: ConfigurationNode,
        expected: Optional[Type[T]] = None,
    ) -> T:
        """Sugar for ``build(parent[name], expected)``."""
        return self.build(parent.get(name), expected)

    def build_list(self, node: ConfigurationNode, expected: Optional[Type[T]] = None) -> List[T]:
        """Build every element of an array node (an absent node gives ``[]``)."""
        if node.is_null():
            return []
        if not node.is_array():
            raise TypeMismatchError(
                f"expected array at '{node.path or '<root>'}', found {node.kind()}"
            )
        return [self.build(item, expected) for item in node]


def build(
    node: ConfigurationNode,
    registry: PrototypeRegistry,
    random: Optional["Random"] = None,
) -> Prototype:
    """One-shot :meth:`ObjectFactory.build`."""
    return ObjectFactory(registry, random).build(node)
