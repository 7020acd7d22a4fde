from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from .base import Mutator, Recombiner


def random_permutation_population(
    pop_size: int,
    n_var: int,
    rng: np.random.Generator,
) -> list[np.ndarray]:
    """
    Generate a batch of random permutations of 0..n_var-1 using the random-keys method.
    """
    if pop_size <= 0 or n_var <= 0:
        raise ValueError("pop_size and n_var must be positive integers.")
    keys = rng.random((pop_size, n_var))
    return list(np.argsort(keys, axis=1).astype(np.int64, copy=False))


def _two_cut_points(n: int, rng: np.random.Generator) -> tuple[int, int]:
    """Two distinct positions, ordered (lo < hi)."""
    lo, hi = rng.choice(n, size=2, replace=False)
    return (int(lo), int(hi)) if lo < hi else (int(hi), int(lo))


class SwapMutation(Mutator):
    """Swap two distinct positions."""

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        child = np.array(candidate, copy=True)
        if child.size < 2:
            return child
        i, j = _two_cut_points(child.size, rng)
        child[i], child[j] = child[j], child[i]
        return child


class InversionMutation(Mutator):
    """Reverse the segment between two cut points (inclusive)."""

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        child = np.array(candidate, copy=True)
        if child.size < 2:
            return child
        lo, hi = _two_cut_points(child.size, rng)
        child[lo : hi + 1] = child[lo : hi + 1][::-1].copy()
        return child


class InsertionMutation(Mutator):
    """Move one element to another position, shifting the ones in between."""

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        perm = np.asarray(candidate)
        if perm.size < 2:
            return perm.copy()
        src, dst = rng.choice(perm.size, size=2, replace=False)
        gene = perm[src]
        rest = np.delete(perm, src)
        return np.insert(rest, int(dst), gene)


class ScrambleMutation(Mutator):
    """Shuffle the segment between two cut points (inclusive)."""

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        child = np.array(candidate, copy=True)
        if child.size < 2:
            return child
        lo, hi = _two_cut_points(child.size, rng)
        child[lo : hi + 1] = rng.permutation(child[lo : hi + 1])
        return child


def _order_crossover_into(donor: np.ndarray, filler: np.ndarray, out: np.ndarray, cut1: int, cut2: int) -> None:
    """
    Write the OX child into ``out``: donor segment [cut1, cut2), the remaining
    genes in filler order starting after the segment.
    """
    n = donor.size
    out[cut1:cut2] = donor[cut1:cut2]
    used = np.zeros(n, dtype=bool)
    used[donor[cut1:cut2]] = True
    fill_positions = np.concatenate([np.arange(cut2, n), np.arange(0, cut1)])
    rotated = np.concatenate([filler[cut2:], filler[:cut2]])
    out[fill_positions] = rotated[~used[rotated]]


class OrderCrossover(Recombiner):
    """Order crossover (OX) for permutations of 0..n-1."""

    def __call__(self, parents: Sequence[Any], rng: np.random.Generator) -> list[np.ndarray]:
        p1 = np.asarray(parents[0])
        p2 = np.asarray(parents[1])
        n = p1.size
        if n < 2:
            return [p1.copy(), p2.copy()]
        lo, hi = _two_cut_points(n, rng)
        hi += 1
        child1 = np.empty_like(p1)
        child2 = np.empty_like(p2)
        _order_crossover_into(p1, p2, child1, lo, hi)
        _order_crossover_into(p2, p1, child2, lo, hi)
        return [child1, child2]


def _pmx_into(parent_a: np.ndarray, parent_b: np.ndarray, cut1: int, cut2: int) -> np.ndarray:
    """Child keeps parent_b's segment [cut1, cut2] and parent_a's genes elsewhere, repaired through the segment mapping."""
    child = parent_a.copy()
    child[cut1 : cut2 + 1] = parent_b[cut1 : cut2 + 1]
    position_in_b = {int(g): i for i, g in enumerate(parent_b)}
    segment = set(int(g) for g in parent_b[cut1 : cut2 + 1])
    for i in range(parent_a.size):
        if cut1 <= i <= cut2:
            continue
        gene = int(parent_a[i])
        while gene in segment:
            gene = int(parent_a[position_in_b[gene]])
        child[i] = gene
    return child


class PMXCrossover(Recombiner):
    """Partially mapped crossover (PMX) for permutations."""

    def __call__(self, parents: Sequence[Any], rng: np.random.Generator) -> list[np.ndarray]:
        p1 = np.asarray(parents[0])
        p2 = np.asarray(parents[1])
        if p1.size < 2:
            return [p1.copy(), p2.copy()]
        lo, hi = _two_cut_points(p1.size, rng)
        return [_pmx_into(p1, p2, lo, hi), _pmx_into(p2, p1, lo, hi)]


__all__ = [
    "random_permutation_population",
    "SwapMutation",
    "InversionMutation",
    "InsertionMutation",
    "ScrambleMutation",
    "OrderCrossover",
    "PMXCrossover",
]
