from __future__ import annotations

import numpy as np
import pytest

from moevo.operators.permutation import (
    InsertionMutation,
    InversionMutation,
    OrderCrossover,
    PMXCrossover,
    ScrambleMutation,
    SwapMutation,
    _order_crossover_into,
    _pmx_into,
    random_permutation_population,
)


def _is_permutation(x, n):
    return sorted(np.asarray(x).tolist()) == list(range(n))


def test_random_permutation_population():
    pop = random_permutation_population(20, 7, np.random.default_rng(0))
    assert len(pop) == 20
    assert all(_is_permutation(p, 7) for p in pop)


@pytest.mark.parametrize("mutation", [SwapMutation(), InversionMutation(), InsertionMutation(), ScrambleMutation()])
def test_mutations_keep_permutations(mutation):
    rng = np.random.default_rng(1)
    parent = np.arange(9)
    for _ in range(50):
        child = mutation(parent, rng)
        assert _is_permutation(child, 9)
    np.testing.assert_array_equal(parent, np.arange(9))


def test_swap_changes_exactly_two_positions():
    child = SwapMutation()(np.arange(10), np.random.default_rng(2))
    assert np.count_nonzero(child != np.arange(10)) == 2


@pytest.mark.parametrize("crossover", [OrderCrossover(), PMXCrossover()], ids=["ox", "pmx"])
def test_crossovers_keep_permutations(crossover):
    rng = np.random.default_rng(3)
    for _ in range(100):
        p1 = rng.permutation(10)
        p2 = rng.permutation(10)
        c1, c2 = crossover([p1, p2], rng)
        assert _is_permutation(c1, 10)
        assert _is_permutation(c2, 10)


def test_order_crossover_known_child():
    donor = np.array([0, 1, 2, 3, 4, 5, 6, 7])
    filler = np.array([7, 6, 5, 4, 3, 2, 1, 0])
    out = np.empty_like(donor)
    _order_crossover_into(donor, filler, out, 2, 5)
    # segment 2..4 from the donor; the rest in filler order starting at position 5
    np.testing.assert_array_equal(out, [6, 5, 2, 3, 4, 1, 0, 7])


def test_pmx_known_child():
    parent_a = np.array([0, 1, 2, 3, 4, 5, 6, 7])
    parent_b = np.array([3, 7, 5, 1, 6, 0, 2, 4])
    child = _pmx_into(parent_a, parent_b, 3, 5)
    np.testing.assert_array_equal(child[3:6], [1, 6, 0])
    np.testing.assert_array_equal(child, [5, 3, 2, 1, 6, 0, 4, 7])


def test_short_permutations_are_copied():
    rng = np.random.default_rng(4)
    p = np.array([0])
    assert SwapMutation()(p, rng).tolist() == [0]
    c1, c2 = OrderCrossover()([p, p], rng)
    assert c1.tolist() == [0] and c2.tolist() == [0]
