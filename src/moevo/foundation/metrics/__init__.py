from .avl import AVLTree
from .hypervolume import hypervolume, hypervolume_contributions, least_contributor
from .indicators import (
    additive_epsilon,
    approximate_ideal_point,
    approximate_nadir_point,
    hypervolume_ratio,
    igd,
    reference_point,
)
from .pareto import dominance_matrix, dominates, nondominated_mask, pareto_filter, unique_rows, weakly_dominates
from .ranking import compute_crowding, crowding_distance, fast_non_dominated_sort, non_dominated_sort, select_nsga2

__all__ = [
    "AVLTree",
    "hypervolume",
    "hypervolume_contributions",
    "least_contributor",
    "additive_epsilon",
    "approximate_ideal_point",
    "approximate_nadir_point",
    "hypervolume_ratio",
    "igd",
    "reference_point",
    "dominance_matrix",
    "dominates",
    "nondominated_mask",
    "pareto_filter",
    "unique_rows",
    "weakly_dominates",
    "compute_crowding",
    "crowding_distance",
    "fast_non_dominated_sort",
    "non_dominated_sort",
    "select_nsga2",
]
