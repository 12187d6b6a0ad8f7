"""
Seeded Random Source
====================

One :class:`Random` handle is created per run and threaded through every
component that draws random numbers: the Function tree, the ControlUpdate
strategies and the DE consumer. Nothing in the package touches the global
NumPy random state.

Sharing Semantics
-----------------
Components hold the handle by reference. ``copy.deepcopy`` (and therefore
``Prototype.clone``) returns the same handle, so a cloned Function tree keeps
drawing from the run's single stream:

    original.random is clone.random    # True

Reproducibility
---------------
Same seed → same sequence of draws → identical run, provided the callers
make the same calls in the same order.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np
from scipy import stats

from .configuration import ConfigurationNode
from .registry import ObjectFactory, Prototype


class Random(Prototype):
    """
    Shared wrapper around ``np.random.RandomState``.

    Parameters
    ----------
    seed : int, optional
        Seed of the Mersenne Twister state. ``None`` seeds from OS entropy.

    Configuration
    -------------
    ``{"classname": "Random", "seed": 7}``
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = np.random.RandomState(seed)

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        seed = node["seed"]
        self.reseed(None if seed.is_null() else seed.get_uint())

    def reseed(self, seed: Optional[int]) -> None:
        self.seed = seed
        self._rng = np.random.RandomState(seed)

    def __deepcopy__(self, memo) -> "Random":
        return self

    @property
    def state(self) -> np.random.RandomState:
        """Underlying NumPy state, for vectorized draws."""
        return self._rng

    # =========================================================================
    # Draws
    # =========================================================================

    def next(self) -> int:
        """Non-negative 31-bit integer."""
        return int(self._rng.randint(0, 2 ** 31 - 1))

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Real in ``[low, high)``."""
        return float(self._rng.uniform(low, high))

    def integers(self, low: int, high: int) -> int:
        """Integer in ``[low, high]``, both ends included."""
        return int(self._rng.randint(low, high + 1))

    def normal(self, loc: float = 0.0, scale: float = 1.0) -> float:
        return float(self._rng.normal(loc, scale))

    def cauchy(self, loc: float = 0.0, scale: float = 1.0) -> float:
        return float(stats.cauchy.rvs(loc=loc, scale=scale, random_state=self._rng))

    def choice(self, n: int, size: Optional[int] = None, replace: bool = True) -> Union[int, np.ndarray]:
        """Index (or array of indices) drawn from ``range(n)``."""
        if size is None:
            return int(self._rng.randint(0, n))
        return self._rng.choice(n, size=size, replace=replace)

    def __repr__(self) -> str:
        return f"Random(seed={self.seed})"
