"""
Function Tree Node
==================

Recursive, named generator of controlled values.

Each node can

- ``generate()`` its current value (a number or, for control kinds, a
  Function object),
- ``record(values, child_name, parent, offspring)`` external feedback into
  itself or into a named descendant,
- ``update()`` its internal state for the next generation cycle.

Composite nodes hold an ordered list of named children and recombine the
children's values; leaves hold the state directly.

Record Routing
--------------
``record`` returns ``False`` instead of raising when nothing accepts the
feedback. The routing rules are:

1. A leaf, or a call with an empty ``child_name``, stores the values in the
   node itself (``_record``; composites refuse unless they override it).
2. Otherwise a direct child named ``child_name`` receives the values with an
   empty name.
3. Otherwise composite children are searched depth-first with the same
   name; the first acceptor wins. Leaf children are never guessed.

So ``GenerationControlUpdate`` recording into ``"generation"`` reaches the
built-in ``generation`` child of a LearningPeriod nested anywhere in the
tree, and a tree with no such child answers ``False``.

Update Cycle
------------
Recorded feedback only changes what ``generate`` returns after ``update``.
Composites read their children at configure time and again at the end of
every ``update``, after the children have been updated.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, List, Optional, Sequence, TYPE_CHECKING

from ..configuration import ConfigurationNode
from ..constants import ROOT_NAME
from ..controlled_object import ValueKind
from ..errors import ConfigurationError, TypeMismatchError
from ..registry import ObjectFactory, Prototype

if TYPE_CHECKING:
    from ..context import Individual
    from ..random_source import Random


class Function(Prototype):
    """
    Base class of every Function tree node.

    Parameters
    ----------
    kind : ValueKind
        Kind of value produced by :meth:`generate`.
    """

    def __init__(self, kind: ValueKind = ValueKind.REAL) -> None:
        self.kind = kind
        self.name = ROOT_NAME
        self.children: List[Function] = []
        self.random: Optional["Random"] = None

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        self.random = factory.random

    # =========================================================================
    # Tree Structure
    # =========================================================================

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add_child(self, function: "Function", name: str) -> "Function":
        function.name = name
        self.children.append(function)
        return function

    def get_child(self, name: str) -> Optional["Function"]:
        """First direct child called ``name`` (not recursive)."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def child(self, name: str) -> "Function":
        """Like :meth:`get_child` but the child must exist."""
        found = self.get_child(name)
        if found is None:
            raise KeyError(f"Function '{self.name}' has no child '{name}'")
        return found

    def build_child(
        self,
        node: ConfigurationNode,
        factory: ObjectFactory,
        name: str,
        kind: Optional[ValueKind] = None,
    ) -> "Function":
        """
        Build ``node[name]`` as a Function and attach it as child ``name``.

        Parameters
        ----------
        kind : ValueKind, optional
            Kind the child must produce. Defaults to ``self.kind``.
        """
        child_node = node[name]
        if child_node.is_null():
            raise ConfigurationError(
                f"{type(self).__name__} requires a '{name}' Function at '{node.path or '<root>'}'"
            )
        child = factory.build(child_node, Function)
        expected = kind if kind is not None else self.kind
        if child.kind is not expected:
            raise TypeMismatchError(
                f"'{name}' at '{child_node.path}' produces {child.kind.name} values, "
                f"{expected.name} required"
            )
        return self.add_child(child, name)

    def child_value(self, name: str) -> Any:
        return self.child(name).generate()

    # =========================================================================
    # Generation Cycle
    # =========================================================================

    @abstractmethod
    def generate(self) -> Any:
        """Current value of the node."""

    def record(
        self,
        values: Sequence[Any],
        child_name: str = "",
        parent: Optional["Individual"] = None,
        offspring: Optional["Individual"] = None,
    ) -> bool:
        """
        Record feedback into this node or into the descendant ``child_name``.

        Returns
        -------
        bool
            ``False`` when no node of the subtree accepted the values.
        """
        if not child_name or self.is_leaf:
            return self._record(values, parent, offspring)
        return self._record_into(child_name, values, parent, offspring)

    def _record(
        self,
        values: Sequence[Any],
        parent: Optional["Individual"],
        offspring: Optional["Individual"],
    ) -> bool:
        return False

    def _record_into(
        self,
        child_name: str,
        values: Sequence[Any],
        parent: Optional["Individual"],
        offspring: Optional["Individual"],
    ) -> bool:
        target = self.get_child(child_name)
        if target is not None:
            return target.record(values, "", parent, offspring)
        for child in self.children:
            if not child.is_leaf and child._record_into(child_name, values, parent, offspring):
                return True
        return False

    def update(self) -> None:
        for child in self.children:
            child.update()
        self._refresh()

    def _refresh(self) -> None:
        """Re-read the children after they changed."""

    def number_of_parameters(self) -> int:
        """Number of values ``record`` expects with an empty child name."""
        return 1

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, kind={self.kind.name})"


class ScoringFunction(Prototype):
    """Scores one parent/offspring trial for the score-driven Functions."""

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        pass

    @abstractmethod
    def score(self, parent: "Individual", offspring: "Individual") -> float:
        """Score of the trial; larger is better."""
