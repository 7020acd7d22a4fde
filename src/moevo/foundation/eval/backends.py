from __future__ import annotations

import math
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed  # type: ignore[import-untyped]

from moevo.foundation.exceptions import EvaluationError
from . import EvaluationBackend, EvaluationResult


def _evaluate_one(fitness_fn: Callable[[Any], Any], candidate: Any, index: int) -> np.ndarray:
    try:
        return np.asarray(fitness_fn(candidate), dtype=float).reshape(-1)
    except EvaluationError:
        raise
    except Exception as exc:
        raise EvaluationError(
            f"Fitness function failed on candidate {index}: {type(exc).__name__}: {exc}",
            candidate=candidate,
            index=index,
        ) from exc


def _eval_chunk(fitness_fn: Callable[[Any], Any], start: int, chunk: Sequence[Any]) -> list[np.ndarray]:
    """Worker helper to evaluate a chunk; kept at module level for pickling."""
    return [_evaluate_one(fitness_fn, cand, start + offset) for offset, cand in enumerate(chunk)]


def _chunk_bounds(n: int, n_workers: int, chunk_size: Optional[int]) -> list[tuple[int, int]]:
    if chunk_size is not None and chunk_size > 0:
        size = chunk_size
    else:
        size = max(1, math.ceil(n / n_workers))
    return [(i, min(i + size, n)) for i in range(0, n, size)]


class SerialEvalBackend(EvaluationBackend):
    """Synchronous in-process evaluation (default)."""

    def evaluate(self, candidates: Sequence[Any], fitness_fn: Callable[[Any], Any]) -> EvaluationResult:
        return EvaluationResult(values=_eval_chunk(fitness_fn, 0, list(candidates)))


class MultiprocessingEvalBackend(EvaluationBackend):
    """
    Parallel evaluation using a process pool.

    Notes:
        - Requires the fitness function and candidates to be picklable.
        - Best suited for expensive evaluations; overhead dominates for cheap ones.
    """

    def __init__(self, n_workers: Optional[int] = None, chunk_size: Optional[int] = None):
        self.n_workers = max(1, n_workers or os.cpu_count() or 1)
        self.chunk_size = chunk_size

    def evaluate(self, candidates: Sequence[Any], fitness_fn: Callable[[Any], Any]) -> EvaluationResult:
        items = list(candidates)
        if self.n_workers <= 1 or len(items) <= 1:
            return SerialEvalBackend().evaluate(items, fitness_fn)

        parts: list[tuple[int, list[np.ndarray]]] = []
        with ProcessPoolExecutor(max_workers=self.n_workers) as ex:
            future_map = {
                ex.submit(_eval_chunk, fitness_fn, start, items[start:end]): start
                for start, end in _chunk_bounds(len(items), self.n_workers, self.chunk_size)
            }
            for fut in as_completed(future_map):
                parts.append((future_map[fut], fut.result()))

        # Restore original order
        values: list[np.ndarray] = []
        for _, part in sorted(parts, key=lambda p: p[0]):
            values.extend(part)
        return EvaluationResult(values=values)


class JoblibEvalBackend(EvaluationBackend):
    """Parallel evaluation through joblib; output order follows input order."""

    def __init__(self, n_jobs: int = -1, chunk_size: Optional[int] = None, prefer: Optional[str] = None):
        self.n_jobs = int(n_jobs)
        self.chunk_size = chunk_size
        self.prefer = prefer

    def evaluate(self, candidates: Sequence[Any], fitness_fn: Callable[[Any], Any]) -> EvaluationResult:
        items = list(candidates)
        if len(items) <= 1 or self.n_jobs == 1:
            return SerialEvalBackend().evaluate(items, fitness_fn)
        n_workers = self.n_jobs if self.n_jobs > 0 else (os.cpu_count() or 1)
        bounds = _chunk_bounds(len(items), n_workers, self.chunk_size)
        chunks = Parallel(n_jobs=self.n_jobs, prefer=self.prefer)(
            delayed(_eval_chunk)(fitness_fn, start, items[start:end]) for start, end in bounds
        )
        values: list[np.ndarray] = []
        for part in chunks:
            values.extend(part)
        return EvaluationResult(values=values)


def resolve_eval_backend(
    name: str | None,
    *,
    n_workers: Optional[int] = None,
    chunk_size: Optional[int] = None,
) -> EvaluationBackend:
    key = (name or "serial").lower()
    if key == "multiprocessing":
        return MultiprocessingEvalBackend(n_workers=n_workers, chunk_size=chunk_size)
    if key == "joblib":
        return JoblibEvalBackend(n_jobs=n_workers or -1, chunk_size=chunk_size)
    if key == "serial":
        return SerialEvalBackend()
    raise ValueError(f"Unknown evaluation backend '{name}'. Use 'serial', 'multiprocessing' or 'joblib'.")


__all__ = [
    "SerialEvalBackend",
    "MultiprocessingEvalBackend",
    "JoblibEvalBackend",
    "resolve_eval_backend",
]
