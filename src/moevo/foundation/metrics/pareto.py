from __future__ import annotations

from typing import Literal, overload

import numpy as np


def dominates(a: np.ndarray, b: np.ndarray) -> bool:
    """True when ``a`` Pareto-dominates ``b`` (minimization)."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return bool(np.all(a <= b) and np.any(a < b))


def weakly_dominates(a: np.ndarray, b: np.ndarray) -> bool:
    """True when ``a`` is no worse than ``b`` in every objective."""
    return bool(np.all(np.asarray(a, dtype=float) <= np.asarray(b, dtype=float)))


def dominance_matrix(F: np.ndarray) -> np.ndarray:
    """
    Pairwise dominance relation of the rows of F.

    Returns a boolean (n, n) matrix where ``D[i, j]`` is True iff row i
    dominates row j. Identical rows do not dominate each other.
    """
    F = np.asarray(F, dtype=float)
    n = F.shape[0]
    if n == 0:
        return np.zeros((0, 0), dtype=bool)
    less_equal = F[:, None, :] <= F[None, :, :]
    strictly_less = F[:, None, :] < F[None, :, :]
    return np.logical_and(np.all(less_equal, axis=2), np.any(strictly_less, axis=2))


def nondominated_mask(F: np.ndarray) -> np.ndarray:
    """Boolean mask of rows not dominated by any other row."""
    F = np.asarray(F, dtype=float)
    if F.ndim != 2 or F.shape[0] == 0:
        return np.zeros(F.shape[0] if F.ndim > 0 else 0, dtype=bool)
    return ~np.any(dominance_matrix(F), axis=0)


@overload
def pareto_filter(F: np.ndarray | None, *, return_indices: Literal[False] = False) -> np.ndarray | None: ...


@overload
def pareto_filter(F: np.ndarray | None, *, return_indices: Literal[True]) -> tuple[np.ndarray, np.ndarray]: ...


def pareto_filter(F: np.ndarray | None, *, return_indices: bool = False) -> np.ndarray | tuple[np.ndarray, np.ndarray] | None:
    """
    Return the non-dominated subset of points (first Pareto front).

    Args:
        F: Objective values array (n_solutions, n_objectives) or None.
        return_indices: When True, also return indices of the front in F.

    Returns:
        Front array, or (front, indices) when return_indices is True.
    """
    if F is None:
        if return_indices:
            return np.empty((0, 0)), np.array([], dtype=int)
        return None
    F = np.asarray(F, dtype=float)
    if F.size == 0 or F.ndim < 2:
        if return_indices:
            n = int(F.shape[0]) if F.ndim > 0 else 0
            return F, np.arange(n, dtype=int)
        return F
    idx = np.flatnonzero(nondominated_mask(F))
    front = F[idx]
    return (front, idx) if return_indices else front


def unique_rows(F: np.ndarray) -> np.ndarray:
    """Indices of the first occurrence of every distinct row, in input order."""
    F = np.asarray(F, dtype=float)
    n = int(F.shape[0])
    if n <= 1:
        return np.arange(n, dtype=int)
    _, first = np.unique(F, axis=0, return_index=True)
    return np.sort(first).astype(int)


__all__ = [
    "dominates",
    "weakly_dominates",
    "dominance_matrix",
    "nondominated_mask",
    "pareto_filter",
    "unique_rows",
]
