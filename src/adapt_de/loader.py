"""
Top-Level Loader
================

Materializes a whole run from one configuration document::

    {"Random": {"classname": "Random", "seed": 7},
     "DifferentialEvolution": {"classname": "DifferentialEvolution", ...}}

The ``Random`` member is built first so that every stochastic component of
the algorithm graph is built with the same handle. Construction errors are
not caught here; they propagate to the caller, which reports them and stops
(see ``run.py``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .configuration import ConfigurationNode, load_config
from .defaults import default_registry
from .evolution import DEResult, DifferentialEvolution, Objective
from .logger import RunLogger
from .random_source import Random
from .registry import ObjectFactory, PrototypeRegistry


@dataclass
class System:
    """A built run: the shared random source and the algorithm."""
    random: Random
    evolution: DifferentialEvolution
    config: ConfigurationNode

    def run(self, objective: Objective, logger: Optional[RunLogger] = None) -> DEResult:
        return self.evolution.run(objective, self.random, logger=logger)


def load_system(
    source: Union[str, Path, ConfigurationNode],
    registry: Optional[PrototypeRegistry] = None,
) -> System:
    """
    Build a :class:`System` from a JSON file path or an already loaded node.

    Raises
    ------
    ConfigurationError
        Unreadable file, wrong suffix, invalid values, or a type mismatch /
        unknown classname anywhere in the document.
    """
    root = source if isinstance(source, ConfigurationNode) else load_config(source)
    registry = registry if registry is not None else default_registry()

    if root.has("Random"):
        random = ObjectFactory(registry).build_field("Random", root, Random)
    else:
        random = Random()

    factory = ObjectFactory(registry, random)
    evolution = factory.build_field("DifferentialEvolution", root, DifferentialEvolution)
    return System(random=random, evolution=evolution, config=root)
