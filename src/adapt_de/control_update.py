"""
Control Updates
===============

Feedback producers run by ``ControlMechanism.update`` before the Function
tree advances. Each one injects a single observable quantity into a named
child of the tree:

=============================  ==============  ===================================
Strategy                       Child           Value
=============================  ==============  ===================================
GenerationControlUpdate        generation      context ``generation``
AverageFitnessControlUpdate    average         mean population fitness (0 if empty)
MinFitnessControlUpdate        min             lowest population fitness
MaxFitnessControlUpdate        max             highest population fitness
CurrentFitnessControlUpdate    current         fitness at ``target_index``
SdeFControlUpdate              (the node)      parameter values of random slots
=============================  ==============  ===================================

A tree without a matching receiver raises :class:`FeedbackRejectedError` on
first use.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Sequence

import numpy as np

from .configuration import ConfigurationNode
from .constants import GENERATION
from .context import Context
from .control_parameter import ControlParameter
from .errors import FeedbackRejectedError
from .functions.base import Function
from .registry import ObjectFactory, Prototype


class ControlUpdate(Prototype):
    child_name: str = ""

    def configure(self, node: ConfigurationNode, factory: ObjectFactory) -> None:
        pass

    @abstractmethod
    def update(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        ...

    def _record(self, function: Function, values: Sequence[Any]) -> None:
        if not function.record(values, self.child_name):
            raise FeedbackRejectedError(
                f'No functions accept parameters "{self.child_name}" in the "{function.name}"'
            )


class GenerationControlUpdate(ControlUpdate):
    child_name = GENERATION

    def update(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        self._record(function, [context.generation])


def _fitnesses(context: Context) -> np.ndarray:
    population = context.population
    if population is None:
        return np.empty(0)
    return np.asarray([population.fitness(i) for i in range(population.size())], dtype=float)


class AverageFitnessControlUpdate(ControlUpdate):
    child_name = "average"

    def update(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        fitness = _fitnesses(context)
        self._record(function, [float(fitness.mean()) if fitness.size else 0.0])


class MinFitnessControlUpdate(ControlUpdate):
    child_name = "min"

    def update(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        fitness = _fitnesses(context)
        self._record(function, [float(fitness.min()) if fitness.size else 0.0])


class MaxFitnessControlUpdate(ControlUpdate):
    child_name = "max"

    def update(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        fitness = _fitnesses(context)
        self._record(function, [float(fitness.max()) if fitness.size else 0.0])


class CurrentFitnessControlUpdate(ControlUpdate):
    child_name = "current"

    def update(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        self._record(function, [context.population.fitness(context.target_index)])


class SdeFControlUpdate(ControlUpdate):
    """
    Feeds an SDE node with the parameter values of
    ``function.number_of_parameters()`` distinct, randomly chosen slots.
    """

    def update(self, context: Context, parameter: ControlParameter, function: Function) -> None:
        count = function.number_of_parameters()
        pop_size = context.population.size()
        if count > pop_size:
            raise ValueError(
                f"SdeFControlUpdate needs {count} distinct individuals, population has {pop_size}"
            )
        indices = context.random.choice(pop_size, size=count, replace=False)
        self._record(function, [parameter.load(int(i)) for i in indices])
