"""Population container: candidates and their objective rows kept in insertion order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np


@dataclass
class Population:
    """
    Ordered (candidate, fitness) pairs.

    ``F`` is always stored in minimization sign with shape (len(candidates), n_obj).
    """

    candidates: list[Any]
    F: np.ndarray

    def __post_init__(self) -> None:
        self.candidates = list(self.candidates)
        self.F = np.asarray(self.F, dtype=float)
        if self.F.ndim != 2:
            raise ValueError(f"F must be 2D (n, n_obj); got shape {self.F.shape}.")
        if self.F.shape[0] != len(self.candidates):
            raise ValueError(f"{len(self.candidates)} candidates but {self.F.shape[0]} fitness rows.")

    def __len__(self) -> int:
        return len(self.candidates)

    @property
    def n_obj(self) -> int:
        return int(self.F.shape[1])

    @classmethod
    def empty(cls, n_obj: int) -> "Population":
        return cls([], np.empty((0, n_obj), dtype=float))

    def take(self, indices: Sequence[int] | np.ndarray) -> "Population":
        """Members at ``indices``, in that order."""
        idx = np.asarray(indices, dtype=int).reshape(-1)
        return Population([self.candidates[i] for i in idx], self.F[idx].copy())

    def concat(self, other: "Population") -> "Population":
        """Self followed by ``other``."""
        if len(self) and len(other) and self.n_obj != other.n_obj:
            raise ValueError("Cannot merge populations with different objective counts.")
        F = np.vstack([self.F, other.F]) if len(self) or len(other) else self.F.copy()
        return Population(self.candidates + other.candidates, F)


__all__ = ["Population"]
