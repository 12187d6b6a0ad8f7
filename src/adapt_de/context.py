"""
Ambient Context and Population
==============================

The control subsystem is driven by the caller's generation loop. Every
call receives a :class:`Context` that carries:

- ``population`` / ``offspring``: the current parents and their trial
  vectors, indexable and with a scalar fitness per slot
- ``random``: the run's shared :class:`~adapt_de.random_source.Random`
- an ambient key-value store, holding at least ``target_index`` (the slot
  being processed) and ``generation`` (starting at 1)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from .constants import GENERATION, TARGET_INDEX
from .random_source import Random


# =============================================================================
# Candidates
# =============================================================================

@dataclass
class Individual:
    """One point of the search space with its fitness (minimized)."""
    position: np.ndarray
    fitness: float


class Population:
    """
    Fixed-size population stored as NumPy arrays.

    Parameters
    ----------
    positions : np.ndarray
        Shape ``(n, D)``.
    fitnesses : np.ndarray
        Shape ``(n,)``.
    """

    def __init__(self, positions: np.ndarray, fitnesses: np.ndarray) -> None:
        positions = np.atleast_2d(np.asarray(positions, dtype=float))
        fitnesses = np.asarray(fitnesses, dtype=float).reshape(-1)
        if positions.shape[0] != fitnesses.shape[0]:
            raise ValueError(
                f"positions and fitnesses disagree: {positions.shape[0]} vs {fitnesses.shape[0]}"
            )
        self.positions = positions
        self.fitnesses = fitnesses

    def size(self) -> int:
        return int(self.fitnesses.shape[0])

    def __len__(self) -> int:
        return self.size()

    def fitness(self, index: int) -> float:
        return float(self.fitnesses[index])

    def at(self, index: int) -> Individual:
        return Individual(self.positions[index].copy(), float(self.fitnesses[index]))

    def replace(self, index: int, individual: Individual) -> None:
        self.positions[index] = individual.position
        self.fitnesses[index] = individual.fitness

    def best_index(self) -> int:
        return int(np.argmin(self.fitnesses))


# =============================================================================
# Context
# =============================================================================

class Context:
    """Ambient state passed into ``generate`` / ``select`` / ``update``."""

    def __init__(
        self,
        random: Random,
        population: Optional[Population] = None,
        offspring: Optional[Population] = None,
    ) -> None:
        self.random = random
        self.population = population
        self.offspring = offspring
        self._values: Dict[str, Any] = {}

    def store(self, key: str, value: Any) -> None:
        self._values[key] = value

    def take_out(self, key: str) -> Any:
        """
        Return the stored value for ``key``.

        Raises
        ------
        KeyError
            If nothing was stored under ``key``.
        """
        try:
            return self._values[key]
        except KeyError:
            raise KeyError(f"Context does not hold '{key}'") from None

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    @property
    def target_index(self) -> int:
        return int(self.take_out(TARGET_INDEX))

    @property
    def generation(self) -> int:
        return int(self.take_out(GENERATION))
