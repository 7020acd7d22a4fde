"""
Bounded Pareto archive.

Update is batch-based: merge existing + incoming, non-dominated extraction,
deduplication of repeated fitness vectors, then (if needed) iterative
truncation by crowding distance or hypervolume contribution.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass
from typing import Any, Literal, Sequence

import numpy as np

from moevo.foundation.metrics.hypervolume import hypervolume, hypervolume_contributions
from moevo.foundation.metrics.indicators import HV_REFERENCE_OFFSET
from moevo.foundation.metrics.pareto import nondominated_mask, unique_rows
from moevo.foundation.metrics.ranking import crowding_distance

Pruning = Literal["crowding", "hypervolume"]
PRUNING_STRATEGIES: tuple[str, ...] = ("crowding", "hypervolume")


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _frozen(F: np.ndarray) -> np.ndarray:
    F.flags.writeable = False
    return F


@dataclass(frozen=True)
class ArchiveUpdate:
    """Bookkeeping of one ``ParetoArchive.update`` call."""

    before: int
    inserted: int
    dominated_removed: int
    duplicates_removed: int
    pruned: int
    after: int

    @property
    def changed(self) -> bool:
        return self.inserted > 0 or self.before != self.after


class ParetoArchive:
    """
    Always non-dominated store of the best candidates seen so far.

    Fitness rows are in minimization sign. Admitted candidates are deep-copied,
    so later changes to population objects never reach the archive. Each
    update builds the new contents aside and swaps them in under a lock;
    ``front()`` always returns a complete snapshot.

    Args:
        n_obj: Number of objectives.
        capacity: Maximum size, or None for an unbounded archive.
        pruning: "crowding" (default) or "hypervolume" truncation.
        ref_point: Fixed reference point for hypervolume pruning and reporting.
        ref_offset: Offset added to the worst value seen so far when no
            reference point is fixed.
    """

    def __init__(
        self,
        n_obj: int,
        capacity: int | None = None,
        pruning: Pruning = "crowding",
        ref_point: Sequence[float] | np.ndarray | None = None,
        ref_offset: float = HV_REFERENCE_OFFSET,
    ) -> None:
        if n_obj <= 0:
            raise ValueError("n_obj must be positive.")
        if capacity is not None and int(capacity) <= 0:
            raise ValueError("archive capacity must be positive (or None for unbounded).")
        if pruning not in PRUNING_STRATEGIES:
            raise ValueError(f"Unknown pruning '{pruning}'. Expected one of: {', '.join(PRUNING_STRATEGIES)}.")
        self._n_obj = int(n_obj)
        self.capacity = None if capacity is None else int(capacity)
        self.pruning = pruning
        self._ref_offset = float(ref_offset)
        self._fixed_ref: np.ndarray | None = None
        if ref_point is not None:
            ref = np.asarray(ref_point, dtype=float)
            if ref.ndim != 1 or ref.shape[0] != self._n_obj:
                raise ValueError(f"ref_point must be 1D with length {self._n_obj}, got shape {ref.shape}.")
            self._fixed_ref = ref.copy()
        self._global_worst: np.ndarray | None = None
        self._lock = threading.RLock()
        self._solutions: list[Any] = []
        self._F = _frozen(np.empty((0, self._n_obj), dtype=float))

    def __len__(self) -> int:
        return len(self._solutions)

    def __repr__(self) -> str:
        cap = "unbounded" if self.capacity is None else self.capacity
        return f"ParetoArchive(size={len(self)}, capacity={cap}, pruning={self.pruning!r})"

    @property
    def n_obj(self) -> int:
        return self._n_obj

    # ----------------------------------------------------------------- reading

    def front(self) -> np.ndarray:
        """Read-only fitness matrix of the current members (minimization sign)."""
        with self._lock:
            return self._F

    def solutions(self) -> list[Any]:
        """Copies of the current member candidates, in archive order."""
        with self._lock:
            return copy.deepcopy(self._solutions)

    def contents(self) -> tuple[list[Any], np.ndarray]:
        """Consistent (candidates, fitness) snapshot."""
        with self._lock:
            return copy.deepcopy(self._solutions), self._F.copy()

    def reference_point(self) -> np.ndarray | None:
        """Fixed reference point, or the worst value seen so far plus the offset."""
        with self._lock:
            if self._fixed_ref is not None:
                return self._fixed_ref.copy()
            if self._global_worst is None:
                return None
            return self._global_worst + self._ref_offset

    def hypervolume(self, ref: Sequence[float] | np.ndarray | None = None) -> float:
        """Hypervolume of the current front; 0.0 for an empty archive."""
        with self._lock:
            F = self._F
            ref_arr = np.asarray(ref, dtype=float) if ref is not None else self.reference_point()
        if ref_arr is None or F.shape[0] == 0:
            return 0.0
        return hypervolume(F, ref_arr)

    # ---------------------------------------------------------------- updating

    def update(self, candidates: Sequence[Any], F: np.ndarray | Sequence[Sequence[float]]) -> ArchiveUpdate:
        """
        Merge ``candidates`` with fitness rows ``F`` into the archive.

        Members dominated by any row of the union are dropped, exact fitness
        repeats keep their first occurrence (existing members before
        newcomers), and a bounded archive then drops its least valuable
        member one at a time until it fits.
        """
        cands = list(candidates)
        new_F = np.asarray(F, dtype=float)
        if new_F.size == 0 and not cands:
            new_F = np.empty((0, self._n_obj), dtype=float)
        if new_F.ndim != 2 or new_F.shape[1] != self._n_obj:
            raise ValueError(f"F must have shape (n, {self._n_obj}); got {new_F.shape}.")
        if new_F.shape[0] != len(cands):
            raise ValueError(f"{len(cands)} candidates but {new_F.shape[0]} fitness rows.")
        if np.isnan(new_F).any():
            raise ValueError("Archive fitness rows must not contain NaN.")

        with self._lock:
            before = len(self._solutions)
            if not cands:
                return ArchiveUpdate(before, 0, 0, 0, 0, before)

            F_all = np.vstack([self._F, new_F])
            origin = np.arange(F_all.shape[0])

            nd = np.flatnonzero(nondominated_mask(F_all))
            dominated_removed = F_all.shape[0] - nd.size
            keep = nd[unique_rows(F_all[nd])]
            duplicates_removed = nd.size - keep.size

            global_worst = self._global_worst
            worst_now = F_all.max(axis=0)
            global_worst = worst_now if global_worst is None else np.maximum(global_worst, worst_now)

            pruned = 0
            if self.capacity is not None and keep.size > self.capacity:
                local = self._truncate(F_all[keep], self.capacity, global_worst)
                pruned = keep.size - local.size
                keep = keep[local]
                _logger().debug("Archive pruned %d member(s) by %s.", pruned, self.pruning)

            solutions: list[Any] = []
            for idx in origin[keep]:
                if idx < before:
                    solutions.append(self._solutions[idx])
                else:
                    solutions.append(copy.deepcopy(cands[idx - before]))
            inserted = int(np.count_nonzero(keep >= before))

            # swap
            self._solutions = solutions
            self._F = _frozen(F_all[keep].copy())
            self._global_worst = global_worst

            return ArchiveUpdate(
                before=before,
                inserted=inserted,
                dominated_removed=int(dominated_removed),
                duplicates_removed=int(duplicates_removed),
                pruned=int(pruned),
                after=len(solutions),
            )

    def _snapshot(self) -> tuple[list[Any], np.ndarray, np.ndarray | None]:
        with self._lock:
            worst = None if self._global_worst is None else self._global_worst.copy()
            return list(self._solutions), self._F, worst

    def _restore(self, snapshot: tuple[list[Any], np.ndarray, np.ndarray | None]) -> None:
        """Put back a state taken with ``_snapshot`` (used to roll back a failed generation)."""
        solutions, F, worst = snapshot
        with self._lock:
            self._solutions = list(solutions)
            self._F = F
            self._global_worst = worst

    def _truncate(self, F: np.ndarray, target: int, global_worst: np.ndarray) -> np.ndarray:
        """Indices (ascending) of the members kept after iterative removal."""
        keep = np.arange(F.shape[0], dtype=int)
        if self.pruning == "hypervolume":
            ref = self._fixed_ref if self._fixed_ref is not None else global_worst + self._ref_offset
            while keep.size > target:
                contrib = hypervolume_contributions(F[keep], ref)
                keep = np.delete(keep, int(np.argmin(contrib)))
            return keep
        while keep.size > target:
            crowd = crowding_distance(F[keep])
            keep = np.delete(keep, int(np.argmin(crowd)))
        return keep


def init_archive(
    n_obj: int,
    capacity: int | None = None,
    pruning: Pruning = "crowding",
    ref_point: Sequence[float] | np.ndarray | None = None,
    ref_offset: float = HV_REFERENCE_OFFSET,
) -> ParetoArchive:
    """Create an empty archive; ``capacity=None`` means unbounded."""
    return ParetoArchive(n_obj, capacity=capacity, pruning=pruning, ref_point=ref_point, ref_offset=ref_offset)


__all__ = ["ArchiveUpdate", "ParetoArchive", "init_archive", "PRUNING_STRATEGIES"]
