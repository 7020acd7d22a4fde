"""
Variation and selection operators.

Every operator is a parameterized strategy object; see ``base`` for the
call contracts of the four Control slots.
"""

from .base import MatingSelector, Mutator, Operator, Recombiner, SurvivalSelector
from .binary import BitFlipMutation, OnePointCrossover, UniformCrossover, random_binary_population
from .permutation import (
    InsertionMutation,
    InversionMutation,
    OrderCrossover,
    PMXCrossover,
    ScrambleMutation,
    SwapMutation,
    random_permutation_population,
)
from .real import (
    GaussianMutation,
    IntermediateCrossover,
    PolynomialMutation,
    SBXCrossover,
    UniformMutation,
    random_real_population,
)
from .registry import operator_registry

__all__ = [
    "Operator",
    "Mutator",
    "Recombiner",
    "MatingSelector",
    "SurvivalSelector",
    "BitFlipMutation",
    "OnePointCrossover",
    "UniformCrossover",
    "random_binary_population",
    "GaussianMutation",
    "UniformMutation",
    "PolynomialMutation",
    "IntermediateCrossover",
    "SBXCrossover",
    "random_real_population",
    "SwapMutation",
    "InversionMutation",
    "InsertionMutation",
    "ScrambleMutation",
    "OrderCrossover",
    "PMXCrossover",
    "random_permutation_population",
    "operator_registry",
]
