"""
adapt_de: Configuration-Driven Adaptive Parameter Control for DE
================================================================

Numeric control parameters of differential evolution (the scaling factor F
and the crossover rate CR) are generated, validated, fed back with success
information and evolved generation over generation by ControlMechanisms,
which are built purely from JSON configuration through a prototype
registry.

Usage (build a mechanism):
    from adapt_de import ObjectFactory, Random, default_registry, parse_config

    factory = ObjectFactory(default_registry(), Random(seed=1))
    F = factory.build(parse_config(open('configs/jde.json').read())['DifferentialEvolution']['F'])

Usage (whole run from a document):
    from adapt_de import load_system

    system = load_system('configs/jde.json')
    result = system.run(objective)          # objective: (n, D) -> (n,)
    frame = result.history_frame()          # pandas DataFrame

Self-adaptive schemes shipped as Function compositions: jDE, SaDE-CR, ISADE,
DEPD, SDE, plus roulette-wheel / median / weighted-average building blocks.
"""

__version__ = '1.0.0'
__author__ = 'adapt_de Research Team'

from .configuration import (
    ConfigurationBuilder,
    ConfigurationNode,
    JsonConfigurationBuilder,
    from_data,
    load_config,
    parse_config,
)

from .registry import (
    ObjectFactory,
    Prototype,
    PrototypeRegistry,
    build,
)

from .errors import (
    ConfigurationError,
    FeedbackRejectedError,
    ParameterIndexError,
    RangeExhaustedError,
    TypeMismatchError,
    UnknownTypeError,
)

from .random_source import Random
from .context import Context, Individual, Population
from .controlled_object import ValueKind

from .control_function import ControlFunction, MultipleControlFunction, SingleControlFunction
from .control_parameter import ControlParameter, MultipleControlParameter, SingleControlParameter
from .control_range import ControlRange
from .control_selection import (
    BetterOffspringControlSelection,
    ControlSelection,
    NonInfoControlSelection,
)
from .control_update import (
    AverageFitnessControlUpdate,
    ControlUpdate,
    CurrentFitnessControlUpdate,
    GenerationControlUpdate,
    MaxFitnessControlUpdate,
    MinFitnessControlUpdate,
    SdeFControlUpdate,
)
from .mechanism import (
    ControlMechanism,
    IndirectControlMechanism,
    SadeCrControlMechanism,
    SdeFControlMechanism,
)

from .defaults import default_registry, register_default_types
from .evolution import DEGenerationLog, DEResult, DifferentialEvolution, midpoint_repair
from .loader import System, load_system

from .logger import (
    Colors,
    RunLogger,
    format_scientific,
    format_time,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    # Configuration
    'ConfigurationBuilder',
    'ConfigurationNode',
    'JsonConfigurationBuilder',
    'from_data',
    'load_config',
    'parse_config',
    # Construction
    'ObjectFactory',
    'Prototype',
    'PrototypeRegistry',
    'build',
    'default_registry',
    'register_default_types',
    # Errors
    'ConfigurationError',
    'FeedbackRejectedError',
    'ParameterIndexError',
    'RangeExhaustedError',
    'TypeMismatchError',
    'UnknownTypeError',
    # Runtime collaborators
    'Random',
    'Context',
    'Individual',
    'Population',
    'ValueKind',
    # Control subsystem
    'ControlFunction',
    'SingleControlFunction',
    'MultipleControlFunction',
    'ControlParameter',
    'SingleControlParameter',
    'MultipleControlParameter',
    'ControlRange',
    'ControlSelection',
    'NonInfoControlSelection',
    'BetterOffspringControlSelection',
    'ControlUpdate',
    'GenerationControlUpdate',
    'AverageFitnessControlUpdate',
    'MinFitnessControlUpdate',
    'MaxFitnessControlUpdate',
    'CurrentFitnessControlUpdate',
    'SdeFControlUpdate',
    'ControlMechanism',
    'IndirectControlMechanism',
    'SadeCrControlMechanism',
    'SdeFControlMechanism',
    # DE consumer
    'DifferentialEvolution',
    'DEGenerationLog',
    'DEResult',
    'midpoint_repair',
    'System',
    'load_system',
    # Logging
    'Colors',
    'RunLogger',
    'format_scientific',
    'format_time',
    'print_error',
    'print_info',
    'print_success',
    'print_warning',
]
