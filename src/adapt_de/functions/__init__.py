"""
Function Tree
=============

Composite generators of controlled values. See :mod:`.base` for the node
contract and the record routing rules.
"""

from .base import Function, ScoringFunction
from .basic import (
    ConstantFunction,
    VariableFunction,
    RandomSelectionFunction,
    LearningPeriodFunction,
)
from .distribution import (
    UniformDistributionFunction,
    NormalDistributionFunction,
    CauchyDistributionFunction,
)
from .gather import MedianFunction, WeightedAverageFunction, RingBuffer
from .scored import (
    SuccessScoringFunction,
    ImprovedPercentageScoringFunction,
    RouletteWheelSelectionFunction,
)
from .algorithms import (
    JdeFFunction,
    JdeCrFunction,
    IsadeFFunction,
    DepdFFunction,
    SdeFFunction,
)

__all__ = [
    'Function',
    'ScoringFunction',
    'ConstantFunction',
    'VariableFunction',
    'RandomSelectionFunction',
    'LearningPeriodFunction',
    'UniformDistributionFunction',
    'NormalDistributionFunction',
    'CauchyDistributionFunction',
    'MedianFunction',
    'WeightedAverageFunction',
    'RingBuffer',
    'SuccessScoringFunction',
    'ImprovedPercentageScoringFunction',
    'RouletteWheelSelectionFunction',
    'JdeFFunction',
    'JdeCrFunction',
    'IsadeFFunction',
    'DepdFFunction',
    'SdeFFunction',
]
