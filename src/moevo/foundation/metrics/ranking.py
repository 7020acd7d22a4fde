"""Non-dominated sorting and crowding distance.

Performance-sensitive: keep operations vectorized and avoid Python loops where possible.
Assumes F is float64 of shape (N, M) with every objective minimized.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .pareto import dominance_matrix


def fast_non_dominated_sort(F: np.ndarray) -> tuple[list[list[int]], np.ndarray]:
    """
    Classic O(N^2 M) fast non-dominated sort.

    Args:
        F: objective matrix (N, M), float64.

    Returns:
      - fronts: list of lists with indices per front (0, 1, ...), each in input order
      - rank: array with the front rank for each solution
    """
    F = np.asarray(F, dtype=float)
    N = F.shape[0]
    if N == 0:
        return [], np.empty(0, dtype=int)

    dom_matrix = dominance_matrix(F)
    dominated_count = dom_matrix.sum(axis=0).astype(np.int64)
    rank = np.empty(N, dtype=int)
    fronts: list[list[int]] = []

    current = np.flatnonzero(dominated_count == 0)
    level = 0
    while current.size > 0:
        fronts.append(current.tolist())
        rank[current] = level
        dominated_count -= dom_matrix[current].sum(axis=0)
        dominated_count[current] = -1
        dom_matrix[current] = False
        level += 1
        current = np.flatnonzero(dominated_count == 0)

    return fronts, rank


def non_dominated_sort(F: np.ndarray) -> list[np.ndarray]:
    """Fronts F1, F2, ... as index arrays."""
    fronts, _ = fast_non_dominated_sort(F)
    return [np.asarray(front, dtype=int) for front in fronts]


def crowding_distance(F: np.ndarray) -> np.ndarray:
    """
    Crowding distance of the members of a single front, higher is better.

    Every member attaining the minimum or maximum of an objective is a
    boundary member and gets +inf. Interior members accumulate
    ``(next - prev) / (max - min)`` where next/prev are the nearest distinct
    values of that objective, so equal values get equal distances and the
    result does not depend on row order. Objectives with max == min add 0.
    """
    F = np.asarray(F, dtype=float)
    n = F.shape[0]
    if n == 0:
        return np.empty(0, dtype=float)
    if n <= 2:
        return np.full(n, np.inf)

    distance = np.zeros(n, dtype=float)
    for m in range(F.shape[1]):
        values, inverse = np.unique(F[:, m], return_inverse=True)
        inverse = inverse.reshape(-1)
        if values.size < 2:
            continue
        span = values[-1] - values[0]
        # per distinct value: gap between its neighbouring distinct values
        gaps = np.zeros(values.size, dtype=float)
        gaps[1:-1] = (values[2:] - values[:-2]) / span
        distance += gaps[inverse]
        boundary = (inverse == 0) | (inverse == values.size - 1)
        distance[boundary] = np.inf
    return distance


def compute_crowding(F: np.ndarray, fronts: Sequence[Sequence[int]]) -> np.ndarray:
    """Crowding distance of every row, computed front by front."""
    F = np.asarray(F, dtype=float)
    crowding = np.zeros(F.shape[0], dtype=float)
    for front in fronts:
        if len(front) == 0:
            continue
        front_arr = np.asarray(front, dtype=int)
        crowding[front_arr] = crowding_distance(F[front_arr])
    return crowding


def select_nsga2(fronts: Sequence[Sequence[int]], crowding: np.ndarray, n_select: int) -> np.ndarray:
    """
    NSGA-II elitist truncation based on fronts + crowding.

    Whole fronts are taken while they fit; the splitting front keeps its
    least crowded members. Equal distances keep the earlier position.
    """
    selected: list[int] = []
    for front in fronts:
        if len(selected) >= n_select:
            break
        front_arr = np.asarray(front, dtype=int)
        if front_arr.size == 0:
            continue
        if len(selected) + front_arr.size <= n_select:
            selected.extend(front_arr.tolist())
            continue
        rem = n_select - len(selected)
        order = np.argsort(-crowding[front_arr], kind="stable")
        selected.extend(front_arr[order[:rem]].tolist())
        break
    return np.asarray(selected, dtype=int)


__all__ = [
    "fast_non_dominated_sort",
    "non_dominated_sort",
    "crowding_distance",
    "compute_crowding",
    "select_nsga2",
]
