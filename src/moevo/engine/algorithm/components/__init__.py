"""
Building blocks of the evolutionary loop.

- archive: bounded Pareto archive (crowding or hypervolume pruning)
- logbook: per-generation statistics
- population: candidate/fitness container
- selection: mating and survival selectors
- survival: plus and comma replacement
- termination: stop conditions
"""

from moevo.engine.algorithm.components.archive import ArchiveUpdate, ParetoArchive, init_archive
from moevo.engine.algorithm.components.logbook import GenerationLog, GenerationRecord
from moevo.engine.algorithm.components.population import Population
from moevo.engine.algorithm.components.selection import (
    GreedySurvival,
    HypervolumeSurvival,
    RandomSelection,
    RankAndCrowdingSurvival,
    RouletteSelection,
    TournamentSelection,
)
from moevo.engine.algorithm.components.survival import replace_comma, replace_plus
from moevo.engine.algorithm.components.termination import (
    HypervolumeStagnation,
    HypervolumeTarget,
    MaxEvaluations,
    MaxGenerations,
    MaxTime,
    TargetFitness,
    Terminator,
)

__all__ = [
    # archive
    "ArchiveUpdate",
    "ParetoArchive",
    "init_archive",
    # logbook
    "GenerationLog",
    "GenerationRecord",
    # population
    "Population",
    # selection
    "RandomSelection",
    "TournamentSelection",
    "RouletteSelection",
    "RankAndCrowdingSurvival",
    "HypervolumeSurvival",
    "GreedySurvival",
    # survival
    "replace_plus",
    "replace_comma",
    # termination
    "Terminator",
    "MaxGenerations",
    "MaxEvaluations",
    "MaxTime",
    "TargetFitness",
    "HypervolumeTarget",
    "HypervolumeStagnation",
]
