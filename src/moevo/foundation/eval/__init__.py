from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import numpy as np


@dataclass
class EvaluationResult:
    """Raw fitness vectors in candidate order, in the sign the fitness function returned."""

    values: list[np.ndarray]

    def __len__(self) -> int:
        return len(self.values)


class EvaluationBackend(ABC):
    """Maps a fitness function over candidates and returns results in candidate order."""

    @abstractmethod
    def evaluate(self, candidates: Sequence[Any], fitness_fn: Callable[[Any], Any]) -> EvaluationResult: ...

    def close(self) -> None:  # pragma: no cover - optional for pooled backends
        """Clean up any resources (executors, pools)."""
        return None


__all__ = ["EvaluationBackend", "EvaluationResult"]
