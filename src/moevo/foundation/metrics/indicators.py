"""
Reference-point helpers and secondary quality indicators.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Sequence

import numpy as np

from .hypervolume import hypervolume

HV_REFERENCE_OFFSET = 1.0


def _stack(fronts: Iterable[np.ndarray | None]) -> np.ndarray:
    collected = []
    for idx, front in enumerate(fronts):
        if front is None:
            continue
        arr = np.asarray(front, dtype=float)
        if arr.size == 0:
            continue
        if arr.ndim != 2:
            raise ValueError(f"Front {idx} must be a 2D array; got shape {arr.shape}.")
        collected.append(arr)
    if not collected:
        raise ValueError("At least one non-empty front is required.")
    n_obj = collected[0].shape[1]
    if any(arr.shape[1] != n_obj for arr in collected):
        raise ValueError("All fronts must have the same number of objectives.")
    return np.vstack(collected)


def approximate_ideal_point(*fronts: np.ndarray) -> np.ndarray:
    """Componentwise best (minimum) value over all supplied fronts."""
    return _stack(fronts).min(axis=0)


def approximate_nadir_point(*fronts: np.ndarray) -> np.ndarray:
    """Componentwise worst (maximum) value over all supplied fronts."""
    return _stack(fronts).max(axis=0)


def reference_point(*fronts: np.ndarray, margin: float | Sequence[float] = HV_REFERENCE_OFFSET) -> np.ndarray:
    """
    Hypervolume reference point: worst observed value plus ``margin``.

    The margin keeps boundary solutions strictly inside the reference box so
    extreme points still contribute volume.
    """
    nadir = approximate_nadir_point(*fronts)
    margin_arr = np.broadcast_to(np.asarray(margin, dtype=float), nadir.shape)
    if np.any(margin_arr < 0.0):
        raise ValueError("Reference point margin must be non-negative.")
    return np.asarray(nadir + margin_arr, dtype=float)


def additive_epsilon(F: np.ndarray, reference_front: np.ndarray) -> float:
    """
    Smallest epsilon such that every reference point is weakly dominated by
    some point of ``F`` shifted by -epsilon (minimization). Lower is better.
    """
    F = np.asarray(F, dtype=float)
    R = np.asarray(reference_front, dtype=float)
    if F.size == 0 or R.size == 0:
        raise ValueError("additive_epsilon() needs non-empty fronts.")
    if F.shape[1] != R.shape[1]:
        raise ValueError("Both fronts must have the same number of objectives.")
    # gap[i, j] = max_k F[i, k] - R[j, k]
    gap = np.max(F[:, None, :] - R[None, :, :], axis=2)
    return float(np.max(np.min(gap, axis=0)))


def igd(F: np.ndarray, reference_front: np.ndarray) -> float:
    """Inverted generational distance: mean distance from reference points to F."""
    F = np.asarray(F, dtype=float)
    R = np.asarray(reference_front, dtype=float)
    if F.size == 0 or R.size == 0:
        raise ValueError("igd() needs non-empty fronts.")
    if F.shape[1] != R.shape[1]:
        raise ValueError("Both fronts must have the same number of objectives.")
    dist = np.linalg.norm(R[:, None, :] - F[None, :, :], axis=2)
    return float(np.mean(np.min(dist, axis=1)))


def hypervolume_ratio(F: np.ndarray, reference_front: np.ndarray, ref_point: Sequence[float]) -> float:
    """HV(F) / HV(reference_front); 0 when the reference front has no volume."""
    hv_ref = hypervolume(reference_front, ref_point)
    if hv_ref <= 0.0:
        return 0.0
    return float(hypervolume(F, ref_point) / hv_ref)


__all__ = [
    "HV_REFERENCE_OFFSET",
    "approximate_ideal_point",
    "approximate_nadir_point",
    "reference_point",
    "additive_epsilon",
    "igd",
    "hypervolume_ratio",
]
