"""
Registry for operators that can be bound to a Control slot by name.
"""

from __future__ import annotations

from moevo.foundation.registry import Registry

from .base import Operator

# Key: operator name (e.g. "sbx", "bitflip"). Value: operator class.
_operator_registry: Registry[type[Operator]] | None = None


def _get_registry() -> Registry[type[Operator]]:
    global _operator_registry
    if _operator_registry is not None:
        return _operator_registry

    reg: Registry[type[Operator]] = Registry("Operators")

    from moevo.operators.binary import BitFlipMutation, OnePointCrossover, UniformCrossover

    reg.register("bitflip", BitFlipMutation)
    reg.register("one_point", OnePointCrossover)
    reg.register("uniform_crossover", UniformCrossover)

    from moevo.operators.real import (
        GaussianMutation,
        IntermediateCrossover,
        PolynomialMutation,
        SBXCrossover,
        UniformMutation,
    )

    reg.register("gaussian", GaussianMutation)
    reg.register("pm", PolynomialMutation)
    reg.register("polynomial", PolynomialMutation)
    reg.register("uniform", UniformMutation)
    reg.register("intermediate", IntermediateCrossover)
    reg.register("sbx", SBXCrossover)

    from moevo.operators.permutation import (
        InsertionMutation,
        InversionMutation,
        OrderCrossover,
        PMXCrossover,
        ScrambleMutation,
        SwapMutation,
    )

    reg.register("swap", SwapMutation)
    reg.register("inversion", InversionMutation)
    reg.register("insertion", InsertionMutation)
    reg.register("scramble", ScrambleMutation)
    reg.register("ox", OrderCrossover)
    reg.register("order", OrderCrossover)
    reg.register("pmx", PMXCrossover)

    # Selection operators live with the loop components
    from moevo.engine.algorithm.components.selection import (
        GreedySurvival,
        HypervolumeSurvival,
        RandomSelection,
        RankAndCrowdingSurvival,
        RouletteSelection,
        TournamentSelection,
    )

    reg.register("random", RandomSelection)
    reg.register("tournament", TournamentSelection)
    reg.register("roulette", RouletteSelection)
    reg.register("rank_crowding", RankAndCrowdingSurvival)
    reg.register("nsga2", RankAndCrowdingSurvival)
    reg.register("hypervolume", HypervolumeSurvival)
    reg.register("sms", HypervolumeSurvival)
    reg.register("greedy", GreedySurvival)

    _operator_registry = reg
    return reg


def operator_registry() -> Registry[type[Operator]]:
    """The shared name -> operator class registry."""
    return _get_registry()


__all__ = ["operator_registry"]
