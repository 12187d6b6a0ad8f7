"""
Differential Evolution Consumer
===============================

DE/rand/1/bin whose scaling factor F and crossover rate CR are produced by
two ControlMechanisms. This is the reference caller of the control
subsystem and shows the call order it expects.

Call Order per Generation
-------------------------
::

    context["generation"] = g
    for i in population:                       # variation
        context["target_index"] = i
        F.update(context);  f  = F.generate(context)
        CR.update(context); cr = CR.generate(context)
        trial_i = crossover(x_i, x_r1 + f·(x_r2 - x_r3), cr)
    repair + evaluate all trials
    for i in population:                       # feedback
        context["target_index"] = i
        F.select(context); CR.select(context)
    greedy replacement

``update`` runs before ``generate`` for each index: it injects the
observable quantities of the finished cycle, advances the Function tree and
clears the cached value so the next ``generate`` draws a fresh one.

Configuration
-------------
::

    {"classname": "DifferentialEvolution",
     "dimension": 10, "population_size": 50,
     "lower_bound": -100.0, "upper_bound": 100.0,
     "max_generation": 500,
     "max_nfes": 100000,
     "F": {"classname": "RealControlMechanism", ...},
     "CR": {"classname": "RealControlMechanism", ...}}

``max_nfes`` is optional; a generation that would exceed it is not started.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Callable, List, Optional

import numpy as np
import pandas as pd

from .configuration import ConfigurationNode
from .constants import GENERATION, TARGET_INDEX
from .context import Context, Population
from .controlled_object import ValueKind
from .errors import ConfigurationError, TypeMismatchError
from .logger import RunLogger
from .mechanism import ControlMechanism
from .random_source import Random
from .registry import ObjectFactory, Prototype


Objective = Callable[[np.ndarray], np.ndarray]


# ============================================================================
# Output Structures
# ============================================================================

@dataclass
class DEGenerationLog:
    """Per-generation diagnostics."""
    generation: int       # Generation number (1-based)
    nfes: int             # Cumulative function evaluations
    best_f: float         # Best-so-far fitness
    mean_fitness: float   # Mean fitness of the population after replacement
    mean_F: float         # Mean of the F values used this generation
    std_F: float
    mean_CR: float        # Mean of the CR values used this generation
    std_CR: float
    success_rate: float   # Fraction of trials better than their parent


@dataclass
class DEResult:
    """Final result of a DE run."""
    best_x: np.ndarray
    best_f: float
    generations: int
    nfes_used: int
    history: List[DEGenerationLog] = field(default_factory=list)

    @property
    def convergence(self) -> np.ndarray:
        return np.array([log.best_f for log in self.history])

    def history_frame(self) -> pd.DataFrame:
        """One row per generation, one column per :class:`DEGenerationLog` field."""
        columns = list(DEGenerationLog.__dataclass_fields__)
        return pd.DataFrame([asdict(log) for log in self.history], columns=columns)


# ============================================================================
# Boundary Repair
# ============================================================================

def midpoint_repair(trials: np.ndarray, parents: np.ndarray, lower: np.ndarray, upper: np.ndarray) -> None:
    """
    Move out-of-bounds coordinates halfway between the parent and the bound.

    Operates in place on ``trials``. Feasible parents guarantee feasible
    results::

        x < lower  ->  (parent + lower) / 2
        x > upper  ->  (parent + upper) / 2
    """
    low = np.broadcast_to(lower, trials.shape)
    high = np.broadcast_to(upper, trials.shape)

    below = trials < low
    if np.any(below):
        trials[below] = (parents[below] + low[below]) / 2.0

    above = trials > high
    if np.any(above):
        trials[above] = (parents[above] + high[above]) / 2.0


# ============================================================================
# Algorithm
# ============================================================================

class DifferentialEvolution(Prototype):
    """DE/rand/1/bin driven by an F and a CR control mechanism."""

    def __init__(self) -> None:
        self.dimension = 0
        self.population_size = 0
        self.lower_bound = 0.0
        self.upper_bound = 0.0
        self.max_generation = 0
        self.max_nfes: Optional[int] = None
        self.F: Optional[ControlMechanism] = None
        self.CR: Optional[ControlMechanism] = None

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        self.dimension = node["dimension"].get_uint()
        self.population_size = node["population_size"].get_uint()
        self.lower_bound = node["lower_bound"].get_double()
        self.upper_bound = node["upper_bound"].get_double()
        self.max_generation = node["max_generation"].get_uint()
        self.max_nfes = None if node["max_nfes"].is_null() else node["max_nfes"].get_uint()

        if self.dimension < 1:
            raise ConfigurationError("dimension must be positive")
        if self.population_size < 4:
            raise ConfigurationError("population_size must be at least 4 (for index selection)")
        if not self.lower_bound < self.upper_bound:
            raise ConfigurationError(
                f"lower_bound {self.lower_bound} must be below upper_bound {self.upper_bound}"
            )

        self.F = factory.build_field("F", node, ControlMechanism)
        self.CR = factory.build_field("CR", node, ControlMechanism)
        for name, mechanism in (("F", self.F), ("CR", self.CR)):
            if mechanism.kind is not ValueKind.REAL:
                raise TypeMismatchError(f"{name} must control REAL values, not {mechanism.kind.name}")

    def settings(self) -> dict:
        return {
            'dimension': self.dimension,
            'population_size': self.population_size,
            'bounds': (self.lower_bound, self.upper_bound),
            'max_generation': self.max_generation,
            'max_nfes': self.max_nfes,
        }

    def _evaluate(self, objective: Objective, X: np.ndarray) -> np.ndarray:
        y = np.asarray(objective(X), dtype=np.float64).reshape(-1)
        if y.shape[0] != X.shape[0]:
            raise ValueError(
                f"Objective returned {y.shape[0]} values for {X.shape[0]} candidates"
            )
        return y

    def run(
        self,
        objective: Objective,
        random: Random,
        logger: Optional[RunLogger] = None,
        generation_callback: Optional[Callable[[DEGenerationLog], None]] = None,
    ) -> DEResult:
        """
        Minimize ``objective``.

        Parameters
        ----------
        objective : callable
            ``f(X) -> y`` with ``X`` of shape ``(n, D)`` and ``y`` of shape ``(n,)``.
        random : Random
            The run's shared random source (the one the mechanisms were built with).
        logger : RunLogger, optional
            Console progress output.
        generation_callback : callable, optional
            Called after each generation with its :class:`DEGenerationLog`.
        """
        D = self.dimension
        NP = self.population_size
        lower = np.full(D, self.lower_bound)
        upper = np.full(D, self.upper_bound)
        rng = random.state

        if logger is not None:
            logger.print_header(self.settings())

        X = lower + rng.rand(NP, D) * (upper - lower)
        fitness = self._evaluate(objective, X)
        nfes = NP
        population = Population(X, fitness)
        context = Context(random, population)

        best_idx = population.best_index()
        best_f = population.fitness(best_idx)
        best_x = population.positions[best_idx].copy()
        history: List[DEGenerationLog] = []
        g = 0

        while g < self.max_generation:
            if self.max_nfes is not None and nfes + NP > self.max_nfes:
                break
            g += 1
            context.store(GENERATION, g)

            # Variation
            trials = np.empty_like(population.positions)
            F_used = np.empty(NP)
            CR_used = np.empty(NP)
            for i in range(NP):
                context.store(TARGET_INDEX, i)
                self.F.update(context)
                F_used[i] = self.F.generate(context)
                self.CR.update(context)
                CR_used[i] = self.CR.generate(context)

                r = rng.choice(NP - 1, size=3, replace=False)
                r1, r2, r3 = (int(k) if k < i else int(k) + 1 for k in r)
                X = population.positions
                mutant = X[r1] + F_used[i] * (X[r2] - X[r3])

                mask = rng.rand(D) < CR_used[i]
                mask[rng.randint(D)] = True
                trials[i] = np.where(mask, mutant, X[i])

            midpoint_repair(trials, population.positions, lower, upper)
            trial_fitness = self._evaluate(objective, trials)
            nfes += NP
            context.offspring = Population(trials, trial_fitness)

            # Feedback
            for i in range(NP):
                context.store(TARGET_INDEX, i)
                self.F.select(context)
                self.CR.select(context)

            # Greedy replacement
            improved = trial_fitness < population.fitnesses
            population.positions[improved] = trials[improved]
            population.fitnesses[improved] = trial_fitness[improved]

            best_idx = population.best_index()
            if population.fitness(best_idx) < best_f:
                best_f = population.fitness(best_idx)
                best_x = population.positions[best_idx].copy()

            log = DEGenerationLog(
                generation=g,
                nfes=nfes,
                best_f=best_f,
                mean_fitness=float(np.mean(population.fitnesses)),
                mean_F=float(np.mean(F_used)),
                std_F=float(np.std(F_used)),
                mean_CR=float(np.mean(CR_used)),
                std_CR=float(np.std(CR_used)),
                success_rate=float(np.mean(improved)),
            )
            history.append(log)
            if logger is not None:
                logger.log_generation(log)
            if generation_callback is not None:
                generation_callback(log)

        result = DEResult(best_x=best_x, best_f=best_f, generations=g, nfes_used=nfes, history=history)
        if logger is not None:
            logger.print_summary(result)
        return result
