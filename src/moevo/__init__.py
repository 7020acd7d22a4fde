"""moevo: multi-objective evolutionary optimization."""

from .experiment import OptimizationResult, optimize
from .foundation.exceptions import (
    ConfigurationError,
    EvaluationError,
    InvalidOperatorError,
    MissingConfigError,
    MoevoError,
    OptimizationError,
)
from .foundation.logging import configure_moevo_logging
from .foundation.metrics import (
    crowding_distance,
    dominates,
    fast_non_dominated_sort,
    hypervolume,
    hypervolume_contributions,
    least_contributor,
    pareto_filter,
)
from .foundation.problem import (
    BinaryRepresentation,
    CustomRepresentation,
    PermutationRepresentation,
    RealRepresentation,
    Representation,
)
from .engine import Control, EvolutionConfig
from .engine.algorithm.loop import EvolutionaryLoop, LoopState
from .engine.algorithm.components import (
    HypervolumeStagnation,
    HypervolumeTarget,
    MaxEvaluations,
    MaxGenerations,
    MaxTime,
    ParetoArchive,
    TargetFitness,
    Terminator,
    init_archive,
)

__version__ = "0.1.0"

__all__ = [
    "optimize",
    "OptimizationResult",
    "Control",
    "EvolutionConfig",
    "EvolutionaryLoop",
    "LoopState",
    "ParetoArchive",
    "init_archive",
    "Representation",
    "BinaryRepresentation",
    "RealRepresentation",
    "PermutationRepresentation",
    "CustomRepresentation",
    "Terminator",
    "MaxGenerations",
    "MaxEvaluations",
    "MaxTime",
    "TargetFitness",
    "HypervolumeTarget",
    "HypervolumeStagnation",
    "dominates",
    "fast_non_dominated_sort",
    "crowding_distance",
    "pareto_filter",
    "hypervolume",
    "hypervolume_contributions",
    "least_contributor",
    "configure_moevo_logging",
    "MoevoError",
    "ConfigurationError",
    "InvalidOperatorError",
    "MissingConfigError",
    "OptimizationError",
    "EvaluationError",
]
