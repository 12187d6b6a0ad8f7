"""
Default Type Table
==================

Every classname understood by the configuration documents.

Families parameterized by a value kind are registered once per kind with
the kind prefix (``Integer``, ``Real``, ``IntegerControl``,
``RealControl``), e.g. ``RealConstantFunction`` or
``IntegerControlMultipleControlParameter``.

- all kinds: <K>ControlMechanism, <K>ControlRange,
  <K>SingleControlParameter, <K>MultipleControlParameter,
  <K>BetterOffspringControlSelection, <K>ConstantFunction,
  <K>VariableFunction, <K>RandomSelectionFunction,
  <K>RouletteWheelSelectionFunction, <K>LearningPeriodFunction
- Integer and Real only: <K>IndirectControlMechanism,
  <K>UniformDisFunction, <K>MedianFunction
"""

from __future__ import annotations

from functools import partial

from .control_function import MultipleControlFunction, SingleControlFunction
from .control_parameter import MultipleControlParameter, SingleControlParameter
from .control_range import ControlRange
from .control_selection import BetterOffspringControlSelection, NonInfoControlSelection
from .control_update import (
    AverageFitnessControlUpdate,
    CurrentFitnessControlUpdate,
    GenerationControlUpdate,
    MaxFitnessControlUpdate,
    MinFitnessControlUpdate,
    SdeFControlUpdate,
)
from .controlled_object import ValueKind
from .evolution import DifferentialEvolution
from .functions import (
    CauchyDistributionFunction,
    ConstantFunction,
    DepdFFunction,
    ImprovedPercentageScoringFunction,
    IsadeFFunction,
    JdeCrFunction,
    JdeFFunction,
    LearningPeriodFunction,
    MedianFunction,
    NormalDistributionFunction,
    RandomSelectionFunction,
    RouletteWheelSelectionFunction,
    SdeFFunction,
    SuccessScoringFunction,
    UniformDistributionFunction,
    VariableFunction,
    WeightedAverageFunction,
)
from .mechanism import (
    ControlMechanism,
    IndirectControlMechanism,
    SadeCrControlMechanism,
    SdeFControlMechanism,
)
from .random_source import Random
from .registry import PrototypeRegistry


_ALL_KINDS = {
    'ControlMechanism': ControlMechanism,
    'ControlRange': ControlRange,
    'SingleControlParameter': SingleControlParameter,
    'MultipleControlParameter': MultipleControlParameter,
    'BetterOffspringControlSelection': BetterOffspringControlSelection,
    'ConstantFunction': ConstantFunction,
    'VariableFunction': VariableFunction,
    'RandomSelectionFunction': RandomSelectionFunction,
    'RouletteWheelSelectionFunction': RouletteWheelSelectionFunction,
    'LearningPeriodFunction': LearningPeriodFunction,
}

_NUMBER_KINDS = {
    'IndirectControlMechanism': IndirectControlMechanism,
    'UniformDisFunction': UniformDistributionFunction,
    'MedianFunction': MedianFunction,
}

_PLAIN = {
    'Random': Random,
    'DifferentialEvolution': DifferentialEvolution,
    'SingleControlFunction': SingleControlFunction,
    'MultipleControlFunction': MultipleControlFunction,
    'NonInfoControlSelection': NonInfoControlSelection,
    'SadeCrControlMechanism': SadeCrControlMechanism,
    'SdeFControlMechanism': SdeFControlMechanism,
    'GenerationControlUpdate': GenerationControlUpdate,
    'AverageFitnessControlUpdate': AverageFitnessControlUpdate,
    'MinFitnessControlUpdate': MinFitnessControlUpdate,
    'MaxFitnessControlUpdate': MaxFitnessControlUpdate,
    'CurrentFitnessControlUpdate': CurrentFitnessControlUpdate,
    'SdeFControlUpdate': SdeFControlUpdate,
    'SuccessScoringFunction': SuccessScoringFunction,
    'ImprovedPercentageScoringFunction': ImprovedPercentageScoringFunction,
    'RealNormalDisFunction': NormalDistributionFunction,
    'RealCauchyDisFunction': CauchyDistributionFunction,
    'WeightedAverageFunction': WeightedAverageFunction,
    'JdeFFunction': JdeFFunction,
    'JdeCrFunction': JdeCrFunction,
    'IsadeFFunction': IsadeFFunction,
    'DepdFFunction': DepdFFunction,
    'SdeFFunction': SdeFFunction,
}


def register_default_types(registry: PrototypeRegistry) -> PrototypeRegistry:
    """Register every built-in classname into ``registry`` and return it."""
    for kind in ValueKind:
        for suffix, cls in _ALL_KINDS.items():
            registry.register(f"{kind.prefix}{suffix}", partial(cls, kind))
    for kind in (ValueKind.INTEGER, ValueKind.REAL):
        for suffix, cls in _NUMBER_KINDS.items():
            registry.register(f"{kind.prefix}{suffix}", partial(cls, kind))
    for name, cls in _PLAIN.items():
        registry.register(name, cls)
    return registry


def default_registry() -> PrototypeRegistry:
    """Fresh registry holding the default type table."""
    return register_default_types(PrototypeRegistry())
