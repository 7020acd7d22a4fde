"""
Termination criteria checked between generations.

A terminator looks at the loop state after a completed generation. The
state exposes ``generation``, ``evaluations``, ``elapsed`` (seconds since
initialization), ``population``, ``archive`` and ``objective_signs`` (+1 for
minimized and -1 for maximized objectives).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Literal, Sequence

import numpy as np

from moevo.foundation.metrics.hypervolume import hypervolume


class Terminator(ABC):
    """Stop condition; ``message`` explains the last positive decision."""

    def __init__(self) -> None:
        self._message = ""

    @property
    def message(self) -> str:
        return self._message

    @abstractmethod
    def should_stop(self, state: Any) -> bool: ...

    def reset(self) -> None:
        """Forget per-run history; called when a loop is (re)initialized."""
        self._message = ""

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in vars(self).items() if not k.startswith("_"))
        return f"{type(self).__name__}({args})"


class MaxGenerations(Terminator):
    def __init__(self, n: int) -> None:
        super().__init__()
        if n < 0:
            raise ValueError("n must be >= 0.")
        self.n = int(n)

    def should_stop(self, state: Any) -> bool:
        if state.generation >= self.n:
            self._message = f"generation limit reached ({self.n})"
            return True
        return False


class MaxEvaluations(Terminator):
    """Stops once the evaluation count reaches ``n``; a generation in progress is never cut short."""

    def __init__(self, n: int) -> None:
        super().__init__()
        if n <= 0:
            raise ValueError("n must be positive.")
        self.n = int(n)

    def should_stop(self, state: Any) -> bool:
        if state.evaluations >= self.n:
            self._message = f"evaluation budget exhausted ({state.evaluations}/{self.n})"
            return True
        return False


class MaxTime(Terminator):
    """Wall-clock budget in seconds. An in-flight fitness call is never interrupted."""

    def __init__(self, seconds: float) -> None:
        super().__init__()
        if seconds <= 0:
            raise ValueError("seconds must be positive.")
        self.seconds = float(seconds)

    def should_stop(self, state: Any) -> bool:
        if state.elapsed >= self.seconds:
            self._message = f"time limit reached ({state.elapsed:.2f}s >= {self.seconds:.2f}s)"
            return True
        return False


def _min_sign(values: Sequence[float] | float, state: Any) -> np.ndarray:
    signs = np.asarray(state.objective_signs, dtype=float)
    return np.broadcast_to(np.asarray(values, dtype=float), signs.shape) * signs


class TargetFitness(Terminator):
    """
    Stops when an archive member is at least as good as ``target`` in every
    objective (within ``tol``). ``target`` uses the user-facing objective sign.
    """

    def __init__(self, target: Sequence[float] | float, tol: float = 0.0) -> None:
        super().__init__()
        if tol < 0.0:
            raise ValueError("tol must be >= 0.")
        self.target = np.atleast_1d(np.asarray(target, dtype=float))
        self.tol = float(tol)

    def should_stop(self, state: Any) -> bool:
        F = state.archive.front()
        if F.shape[0] == 0:
            return False
        goal = _min_sign(self.target, state) + self.tol
        hits = np.all(F <= goal, axis=1)
        if hits.any():
            self._message = f"target fitness {self.target.tolist()} reached"
            return True
        return False


def _resolve_ref(ref: np.ndarray | None, state: Any) -> np.ndarray | None:
    if ref is not None:
        return _min_sign(ref, state)
    return state.archive.reference_point()


class HypervolumeTarget(Terminator):
    """
    Stops when the archive hypervolume reaches ``target``.

    ``ref`` uses the user-facing objective sign; without it the archive's own
    reference point is used.
    """

    def __init__(self, target: float, ref: Sequence[float] | None = None) -> None:
        super().__init__()
        self.target = float(target)
        self.ref = None if ref is None else np.asarray(ref, dtype=float)
        self.last_value: float | None = None

    def should_stop(self, state: Any) -> bool:
        ref = _resolve_ref(self.ref, state)
        if ref is None:
            return False
        value = hypervolume(state.archive.front(), ref)
        self.last_value = value
        if value >= self.target:
            self._message = f"hypervolume target reached ({value:.6g} >= {self.target:.6g})"
            return True
        return False

    def reset(self) -> None:
        super().reset()
        self.last_value = None


class HypervolumeStagnation(Terminator):
    """
    Convergence measure: stops when the archive hypervolume improved by no
    more than ``epsilon`` over the last ``window`` generations.

    Without an explicit ``ref`` the archive reference point seen at the first
    check is frozen, so the measure is not inflated by a moving reference.
    ``mode="rel"`` scales ``epsilon`` by the older hypervolume value.
    """

    def __init__(
        self,
        window: int = 10,
        epsilon: float = 1e-6,
        ref: Sequence[float] | None = None,
        mode: Literal["abs", "rel"] = "abs",
    ) -> None:
        super().__init__()
        if window <= 0:
            raise ValueError("window must be > 0.")
        if epsilon < 0.0:
            raise ValueError("epsilon must be >= 0.")
        if mode not in {"abs", "rel"}:
            raise ValueError("mode must be 'abs' or 'rel'.")
        self.window = int(window)
        self.epsilon = float(epsilon)
        self.ref = None if ref is None else np.asarray(ref, dtype=float)
        self.mode = mode
        self._frozen_ref: np.ndarray | None = None
        self._history: deque[float] = deque(maxlen=self.window + 1)

    @property
    def history(self) -> list[float]:
        return list(self._history)

    def should_stop(self, state: Any) -> bool:
        if self._frozen_ref is None:
            self._frozen_ref = _resolve_ref(self.ref, state)
            if self._frozen_ref is None:
                return False
        self._history.append(hypervolume(state.archive.front(), self._frozen_ref))
        if len(self._history) <= self.window:
            return False
        oldest, newest = self._history[0], self._history[-1]
        threshold = self.epsilon * abs(oldest) if self.mode == "rel" else self.epsilon
        if newest - oldest <= threshold:
            self._message = (
                f"hypervolume stagnated over {self.window} generations (gain {newest - oldest:.3g} <= {threshold:.3g})"
            )
            return True
        return False

    def reset(self) -> None:
        super().reset()
        self._frozen_ref = None
        self._history.clear()


__all__ = [
    "Terminator",
    "MaxGenerations",
    "MaxEvaluations",
    "MaxTime",
    "TargetFitness",
    "HypervolumeTarget",
    "HypervolumeStagnation",
]
