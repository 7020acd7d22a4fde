"""
Exact hypervolume indicator for minimization fronts.

The dominated region is measured by a dimension sweep:

- 1 objective: distance from the best value to the reference.
- 2 objectives: a single linear sweep after sorting by the first objective.
- 3 objectives: sweep the third objective while an AVL tree keyed by the
  first objective holds the 2-D staircase of the points seen so far; each
  insertion updates the staircase area incrementally, so the whole sweep
  costs O(n log n) plus the removals.
- 4+ objectives: sweep the last objective and, for every slab, measure the
  (k-1)-dimensional volume of the active set. The active set lives in an AVL
  tree keyed by the next objective to be swept, so its in-order walk is
  already sorted for the recursive call, and entries dominated by a newcomer
  are dropped from the successor range as it is inserted.

Every recursive call owns its tree; there is no module-level state, so
independent fronts can be measured concurrently.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .avl import AVLTree
from .pareto import nondominated_mask, unique_rows


def _as_front(F: np.ndarray | Sequence[Sequence[float]], ref_point: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    ref = np.asarray(ref_point, dtype=float).reshape(-1)
    F = np.asarray(F, dtype=float)
    if F.size == 0:
        return np.empty((0, ref.shape[0]), dtype=float), ref
    if F.ndim == 1:
        F = F.reshape(1, -1)
    if F.ndim != 2:
        raise ValueError(f"Front must be a 2D array (n_points, n_obj); got shape {F.shape}.")
    if F.shape[1] != ref.shape[0]:
        raise ValueError(f"Reference point has {ref.shape[0]} components but the front has {F.shape[1]} objectives.")
    if not np.isfinite(F).all() or not np.isfinite(ref).all():
        raise ValueError("Front and reference point must contain finite numbers.")
    return F, ref


def _inside_mask(F: np.ndarray, ref: np.ndarray) -> np.ndarray:
    # a point adds volume only if it is strictly better than ref everywhere
    if F.shape[0] == 0:
        return np.zeros(0, dtype=bool)
    return np.all(F < ref, axis=1)


def hypervolume(F: np.ndarray | Sequence[Sequence[float]], ref_point: Sequence[float]) -> float:
    """
    Compute the exact hypervolume dominated by ``F`` and bounded by ``ref_point``.

    Parameters
    - F: array-like (n_points, n_obj) of objective values (minimization)
    - ref_point: sequence of length n_obj with the reference (worst) point

    Returns
    - hypervolume (float, >= 0). An empty front, or one with no point
      strictly better than the reference in every objective, measures 0.
    """
    F, ref = _as_front(F, ref_point)
    pts = F[_inside_mask(F, ref)]
    if pts.shape[0] == 0:
        return 0.0
    return float(max(_hv_recursive(pts, ref, pts.shape[1]), 0.0))


def _hv_recursive(P: np.ndarray, ref: np.ndarray, n_active: int, presorted: bool = False) -> float:
    """Volume of P restricted to its first ``n_active`` objectives."""
    if P.shape[0] == 0:
        return 0.0
    if n_active == 1:
        return float(ref[0] - P[:, 0].min())
    if n_active == 2:
        return _hv2d(P, ref)
    if n_active == 3:
        return _hv3d(P, ref, presorted=presorted)
    return _hv_slicing(P, ref, n_active, presorted=presorted)


def _hv2d(P: np.ndarray, ref: np.ndarray) -> float:
    # sort by f1, then f2, and add the strip each new f2 minimum uncovers
    order = np.lexsort((P[:, 1], P[:, 0]))
    x = P[order, 0]
    y = P[order, 1]
    best_before = np.concatenate(([ref[1]], np.minimum.accumulate(y)[:-1]))
    heights = np.maximum(best_before - y, 0.0)
    return float(np.sum((ref[0] - x) * heights))


def _staircase_insert(tree: AVLTree, x: float, y: float, ref_x: float, ref_y: float) -> float:
    """
    Insert (x, y) into a 2-D non-dominated staircase keyed by x.

    Returns the area newly covered; 0 when the point is weakly dominated.
    """
    floor = tree.floor(x)
    if floor is not None and floor[1] <= y:
        return 0.0

    left = tree.lower(x)
    y_left = left[1] if left is not None else ref_y
    x_cur = x
    x_end = ref_x
    gained = 0.0
    doomed: list[float] = []
    for sx, sy in tree.successors(x):
        if sy < y:
            x_end = sx
            break
        gained += (sx - x_cur) * (y_left - y)
        y_left = sy
        x_cur = sx
        doomed.append(sx)
    gained += (x_end - x_cur) * (y_left - y)

    for key in doomed:
        tree.remove(key)
    tree.insert(x, y)
    return gained


def _hv3d(P: np.ndarray, ref: np.ndarray, presorted: bool = False) -> float:
    order = np.arange(P.shape[0]) if presorted else np.argsort(P[:, 2], kind="stable")
    tree: AVLTree[float, float] = AVLTree()
    area = 0.0
    volume = 0.0
    prev_z = float(P[order[0], 2])
    for i in order:
        x, y, z = float(P[i, 0]), float(P[i, 1]), float(P[i, 2])
        volume += area * (z - prev_z)
        prev_z = z
        area += _staircase_insert(tree, x, y, float(ref[0]), float(ref[1]))
    volume += area * (float(ref[2]) - prev_z)
    return volume


def _insert_active(tree: AVLTree, P: np.ndarray, idx: int, n_proj: int) -> None:
    """
    Add row ``idx`` to the active set of a slicing level.

    The tree is keyed by (objective n_proj-1, row) so that its in-order walk
    is sorted for the next level. Successors weakly dominated by the new row
    in the projected objectives can never contribute again and are dropped.
    """
    point = P[idx, :n_proj]
    key = (float(point[n_proj - 1]), int(idx))
    doomed = [k for k, row in tree.successors(key) if np.all(point <= P[row, :n_proj])]
    for k in doomed:
        tree.remove(k)
    tree.insert(key, idx)


def _hv_slicing(P: np.ndarray, ref: np.ndarray, n_active: int, presorted: bool = False) -> float:
    axis = n_active - 1
    order = np.arange(P.shape[0]) if presorted else np.argsort(P[:, axis], kind="stable")
    tree: AVLTree[tuple[float, int], int] = AVLTree()
    volume = 0.0
    n = order.shape[0]
    for pos in range(n):
        i = int(order[pos])
        _insert_active(tree, P, i, axis)
        upper = float(P[order[pos + 1], axis]) if pos + 1 < n else float(ref[axis])
        depth = upper - float(P[i, axis])
        if depth <= 0.0:
            continue
        rows = np.fromiter(tree.values(), dtype=int, count=len(tree))
        volume += depth * _hv_recursive(P[rows], ref, axis, presorted=True)
    return volume


def hypervolume_contributions(F: np.ndarray | Sequence[Sequence[float]], ref_point: Sequence[float]) -> np.ndarray:
    """
    Exclusive hypervolume contribution ``HV(F) - HV(F without i)`` of every row.

    Rows outside the reference box, dominated rows and repeated rows
    contribute exactly 0. Two objectives use the closed-form neighbour
    rectangles; more objectives recompute the indicator without each
    non-dominated row.
    """
    F, ref = _as_front(F, ref_point)
    n = F.shape[0]
    contrib = np.zeros(n, dtype=float)
    if n == 0:
        return contrib

    inside_idx = np.flatnonzero(_inside_mask(F, ref))
    if inside_idx.size == 0:
        return contrib
    P = F[inside_idx]

    # weak[j, q]: row j is no worse than row q everywhere (j != q)
    weak = np.all(P[:, None, :] <= P[None, :, :], axis=2)
    np.fill_diagonal(weak, False)
    covered = weak.any(axis=0)
    candidates = np.flatnonzero(~covered)
    if candidates.size == 0:
        return contrib

    # a row's own copies do not cover it: count only distinct coverers
    equal = np.all(P[:, None, :] == P[None, :, :], axis=2)
    distinct_weak = weak & ~equal
    sole_cover = np.zeros(P.shape[0], dtype=bool)
    for q in np.flatnonzero(distinct_weak.sum(axis=0) == 1):
        sole_cover[np.flatnonzero(distinct_weak[:, q])[0]] = True

    if P.shape[1] == 2:
        local = _contributions_2d(P, ref, candidates)
        recompute = candidates[sole_cover[candidates]]
    else:
        local = np.zeros(P.shape[0], dtype=float)
        recompute = candidates
    if recompute.size:
        total = _hv_recursive(P, ref, P.shape[1])
        for c in recompute:
            local[c] = total - _hv_recursive(np.delete(P, int(c), axis=0), ref, P.shape[1])

    contrib[inside_idx] = np.maximum(local, 0.0)
    return contrib


def _contributions_2d(P: np.ndarray, ref: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    local = np.zeros(P.shape[0], dtype=float)
    front_idx = np.flatnonzero(nondominated_mask(P))
    reps = front_idx[unique_rows(P[front_idx])]
    # distinct non-dominated points: x strictly increasing, y strictly decreasing
    reps = reps[np.argsort(P[reps, 0], kind="stable")]
    xs = P[reps, 0]
    ys = P[reps, 1]
    next_x = np.concatenate([xs[1:], [ref[0]]])
    prev_y = np.concatenate([[ref[1]], ys[:-1]])
    boxes = (next_x - xs) * (prev_y - ys)
    is_candidate = np.zeros(P.shape[0], dtype=bool)
    is_candidate[candidates] = True
    for rep, box in zip(reps, boxes):
        if is_candidate[rep]:
            local[rep] = box
    return local


def least_contributor(F: np.ndarray | Sequence[Sequence[float]], ref_point: Sequence[float]) -> int:
    """Index of the smallest hypervolume contribution; ties resolve to the lowest index."""
    contrib = hypervolume_contributions(F, ref_point)
    if contrib.size == 0:
        raise ValueError("least_contributor() needs at least one point.")
    return int(np.argmin(contrib))


__all__ = ["hypervolume", "hypervolume_contributions", "least_contributor"]
