"""
Mating and survival selection operators.

All selectors read a minimization-sign fitness matrix and return row indices;
the caller owns the candidates and the random generator.
"""

from __future__ import annotations

import numpy as np

from moevo.foundation.metrics.hypervolume import least_contributor
from moevo.foundation.metrics.indicators import HV_REFERENCE_OFFSET
from moevo.foundation.metrics.ranking import compute_crowding, fast_non_dominated_sort, select_nsga2
from moevo.operators.base import MatingSelector, SurvivalSelector


def _require_rows(F: np.ndarray) -> np.ndarray:
    F = np.asarray(F, dtype=float)
    if F.ndim != 2 or F.shape[0] == 0:
        raise ValueError("population is empty.")
    return F


def _require_single_objective(F: np.ndarray, name: str) -> None:
    if F.shape[1] != 1:
        raise ValueError(f"{name} needs exactly one objective; got {F.shape[1]}.")


def rank_and_crowding(F: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Front rank and crowding distance of every row."""
    fronts, rank = fast_non_dominated_sort(F)
    return rank, compute_crowding(F, fronts)


class RandomSelection(MatingSelector):
    """Uniform random parent selection with replacement."""

    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        F = _require_rows(F)
        return rng.integers(0, F.shape[0], size=n_select)


class TournamentSelection(MatingSelector):
    """
    k-way tournament: lower front rank wins, then larger crowding distance.

    With one objective the rank order is the value order, so this reduces to
    picking the best scalar fitness. Remaining ties go to the first contender drawn.
    """

    def __init__(self, k: int = 2) -> None:
        if k <= 0:
            raise ValueError("tournament size must be positive.")
        self.k = int(k)

    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        F = _require_rows(F)
        rank, crowding = rank_and_crowding(F)
        contenders = rng.integers(0, F.shape[0], size=(n_select, self.k))
        selected = np.empty(n_select, dtype=int)
        for i, row in enumerate(contenders):
            best = row[0]
            for idx in row[1:]:
                if rank[idx] < rank[best] or (rank[idx] == rank[best] and crowding[idx] > crowding[best]):
                    best = idx
            selected[i] = best
        return selected


class RouletteSelection(MatingSelector):
    """
    Fitness-proportional selection for single-objective runs.

    Weights are the distance to the worst value, so better (lower) fitness
    gets a larger slice. A flat population falls back to uniform sampling.
    """

    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        F = _require_rows(F)
        _require_single_objective(F, "RouletteSelection")
        f = F[:, 0]
        weights = f.max() - f
        total = weights.sum()
        if total <= 0.0:
            return rng.integers(0, f.shape[0], size=n_select)
        return rng.choice(f.shape[0], size=n_select, replace=True, p=weights / total)


class RankAndCrowdingSurvival(SurvivalSelector):
    """NSGA-II survival: whole fronts first, then the least crowded members of the split front."""

    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        F = np.asarray(F, dtype=float)
        if n_select >= F.shape[0]:
            return np.arange(F.shape[0])
        fronts, _ = fast_non_dominated_sort(F)
        crowding = compute_crowding(F, fronts)
        return select_nsga2(fronts, crowding, n_select)


class HypervolumeSurvival(SurvivalSelector):
    """
    SMS-EMOA style survival.

    Whole fronts are kept while they fit; the split front repeatedly drops
    its least hypervolume contributor (lowest position on ties) until the
    quota is met. Without an explicit reference point, the worst value of
    every objective over the whole input plus ``ref_offset`` is used.
    """

    def __init__(self, ref_point: np.ndarray | None = None, ref_offset: float = HV_REFERENCE_OFFSET) -> None:
        self.ref_point = None if ref_point is None else np.asarray(ref_point, dtype=float)
        self.ref_offset = float(ref_offset)

    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        F = np.asarray(F, dtype=float)
        if n_select >= F.shape[0]:
            return np.arange(F.shape[0])
        ref = self.ref_point if self.ref_point is not None else F.max(axis=0) + self.ref_offset
        fronts, _ = fast_non_dominated_sort(F)
        selected: list[int] = []
        for front in fronts:
            if len(selected) + len(front) <= n_select:
                selected.extend(front)
                if len(selected) == n_select:
                    break
                continue
            remaining = list(front)
            while len(selected) + len(remaining) > n_select:
                worst = least_contributor(F[remaining], ref)
                del remaining[worst]
            selected.extend(remaining)
            break
        return np.asarray(selected, dtype=int)


class GreedySurvival(SurvivalSelector):
    """Single-objective truncation: the ``n_select`` lowest values, earlier rows first on ties."""

    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        F = np.asarray(F, dtype=float)
        _require_single_objective(F, "GreedySurvival")
        order = np.argsort(F[:, 0], kind="stable")
        return order[:n_select]


__all__ = [
    "rank_and_crowding",
    "RandomSelection",
    "TournamentSelection",
    "RouletteSelection",
    "RankAndCrowdingSurvival",
    "HypervolumeSurvival",
    "GreedySurvival",
]
