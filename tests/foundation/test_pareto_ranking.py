from __future__ import annotations

import numpy as np
import pytest

from moevo.foundation.metrics.pareto import (
    dominance_matrix,
    dominates,
    nondominated_mask,
    pareto_filter,
    unique_rows,
    weakly_dominates,
)
from moevo.foundation.metrics.ranking import fast_non_dominated_sort, non_dominated_sort, select_nsga2


def test_dominates_basic_cases():
    assert dominates([1.0, 1.0], [2.0, 2.0])
    assert dominates([1.0, 2.0], [1.0, 3.0])
    assert not dominates([1.0, 1.0], [1.0, 1.0])
    assert not dominates([1.0, 3.0], [2.0, 2.0])
    assert weakly_dominates([1.0, 1.0], [1.0, 1.0])
    assert not weakly_dominates([1.0, 3.0], [2.0, 2.0])


def test_dominance_matrix_is_irreflexive_and_antisymmetric():
    rng = np.random.default_rng(0)
    F = rng.integers(0, 4, size=(30, 3)).astype(float)
    D = dominance_matrix(F)
    assert not D.diagonal().any()
    assert not np.any(D & D.T)


def test_nondominated_mask_and_filter():
    F = np.array([[1.0, 4.0], [2.0, 2.0], [3.0, 3.0], [4.0, 1.0], [2.0, 2.0]])
    mask = nondominated_mask(F)
    assert mask.tolist() == [True, True, False, True, True]
    front, idx = pareto_filter(F, return_indices=True)
    assert idx.tolist() == [0, 1, 3, 4]
    np.testing.assert_array_equal(front, F[idx])
    assert pareto_filter(None) is None


def test_unique_rows_keeps_first_occurrence_in_order():
    F = np.array([[2.0, 1.0], [1.0, 2.0], [2.0, 1.0], [0.0, 0.0], [1.0, 2.0]])
    assert unique_rows(F).tolist() == [0, 1, 3]


def test_empty_population_has_no_fronts():
    fronts, rank = fast_non_dominated_sort(np.empty((0, 2)))
    assert fronts == []
    assert rank.shape == (0,)


def test_known_fronts():
    F = np.array(
        [
            [1.0, 5.0],  # front 0
            [2.0, 6.0],  # front 1
            [3.0, 3.0],  # front 0
            [4.0, 4.0],  # front 1
            [5.0, 1.0],  # front 0
            [6.0, 6.0],  # front 2
        ]
    )
    fronts, rank = fast_non_dominated_sort(F)
    assert fronts == [[0, 2, 4], [1, 3], [5]]
    assert rank.tolist() == [0, 1, 0, 1, 0, 2]
    assert [f.tolist() for f in non_dominated_sort(F)] == fronts


def test_duplicates_share_a_front():
    F = np.array([[1.0, 1.0], [1.0, 1.0], [2.0, 2.0]])
    fronts, _ = fast_non_dominated_sort(F)
    assert fronts == [[0, 1], [2]]


@pytest.mark.parametrize("seed", range(20))
def test_ranking_properties_on_random_populations(seed):
    rng = np.random.default_rng(seed)
    F = rng.integers(0, 6, size=(40, 3)).astype(float)
    fronts, rank = fast_non_dominated_sort(F)

    # fronts partition the population, each in input order
    flat = sorted(i for front in fronts for i in front)
    assert flat == list(range(F.shape[0]))
    assert all(front == sorted(front) for front in fronts)

    # no member of a front dominates another member of the same front
    for front in fronts:
        for a in front:
            for b in front:
                assert not dominates(F[a], F[b])

    # every member of front k>0 is dominated by some member of front k-1
    for k in range(1, len(fronts)):
        for b in fronts[k]:
            assert any(dominates(F[a], F[b]) for a in fronts[k - 1])

    # a dominating row always has a strictly smaller rank
    D = dominance_matrix(F)
    ii, jj = np.nonzero(D)
    assert np.all(rank[ii] < rank[jj])


def test_select_nsga2_fills_whole_fronts_then_least_crowded():
    fronts = [[0, 1], [2, 3, 4]]
    crowding = np.array([np.inf, np.inf, 0.5, np.inf, 0.5])
    selected = select_nsga2(fronts, crowding, 4)
    assert selected.tolist() == [0, 1, 3, 2]
