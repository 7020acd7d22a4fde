"""Real-valued variation operators acting on one candidate vector at a time."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from .base import Mutator, Recombiner
from .utils import check_probability

ArrayLike = np.ndarray | Sequence[float]


def _ensure_bounds(lower: ArrayLike | float, upper: ArrayLike | float) -> tuple[np.ndarray, np.ndarray]:
    lo = np.atleast_1d(np.asarray(lower, dtype=float))
    hi = np.atleast_1d(np.asarray(upper, dtype=float))
    if lo.shape != hi.shape:
        lo, hi = np.broadcast_arrays(lo, hi)
        lo, hi = lo.copy(), hi.copy()
    if np.any(lo > hi):
        raise ValueError("Lower bounds must not exceed upper bounds.")
    return lo, hi


def random_real_population(
    pop_size: int,
    lower: ArrayLike,
    upper: ArrayLike,
    rng: np.random.Generator,
) -> list[np.ndarray]:
    """Uniform samples inside the box [lower, upper]."""
    if pop_size <= 0:
        raise ValueError("pop_size must be a positive integer.")
    lo, hi = _ensure_bounds(lower, upper)
    return list(rng.uniform(lo, hi, size=(pop_size, lo.shape[0])))


class _BoundedMutation(Mutator):
    def __init__(self, prob: float, lower: ArrayLike | float | None, upper: ArrayLike | float | None) -> None:
        self.prob = check_probability("prob", prob)
        if lower is None or upper is None:
            self.lower = self.upper = None
        else:
            self.lower, self.upper = _ensure_bounds(lower, upper)

    def _mask(self, n_var: int, rng: np.random.Generator) -> np.ndarray:
        return rng.random(n_var) < self.prob

    def _clip(self, x: np.ndarray) -> np.ndarray:
        if self.lower is None:
            return x
        return np.clip(x, self.lower, self.upper)


class GaussianMutation(_BoundedMutation):
    """Adds N(0, sigma) noise to each gene with probability ``prob``; clamps to the bounds when given."""

    def __init__(
        self,
        prob: float = 0.1,
        sigma: float | ArrayLike = 0.1,
        *,
        lower: ArrayLike | float | None = None,
        upper: ArrayLike | float | None = None,
    ) -> None:
        super().__init__(prob, lower, upper)
        sigma_arr = np.asarray(sigma, dtype=float)
        if sigma_arr.ndim > 1:
            raise ValueError("sigma must be scalar or 1-D array.")
        if np.any(sigma_arr < 0.0):
            raise ValueError("sigma must be non-negative.")
        self.sigma = sigma_arr

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        child = np.array(candidate, dtype=float, copy=True)
        mask = self._mask(child.shape[0], rng)
        if not np.any(mask):
            return child
        noise = rng.normal(0.0, 1.0, size=child.shape[0]) * self.sigma
        child[mask] += noise[mask]
        return self._clip(child)


class UniformMutation(_BoundedMutation):
    """Resets each gene with probability ``prob`` to a uniform value inside its bounds."""

    def __init__(self, prob: float = 0.1, *, lower: ArrayLike | float, upper: ArrayLike | float) -> None:
        super().__init__(prob, lower, upper)

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        child = np.array(candidate, dtype=float, copy=True)
        mask = self._mask(child.shape[0], rng)
        if not np.any(mask):
            return child
        fresh = rng.uniform(np.broadcast_to(self.lower, child.shape), np.broadcast_to(self.upper, child.shape))
        child[mask] = fresh[mask]
        return child


class PolynomialMutation(_BoundedMutation):
    """Standard polynomial mutation used in NSGA-II."""

    def __init__(
        self,
        prob: float = 0.1,
        eta: float = 20.0,
        *,
        lower: ArrayLike | float,
        upper: ArrayLike | float,
    ) -> None:
        super().__init__(prob, lower, upper)
        if eta < 0.0:
            raise ValueError("eta must be non-negative.")
        self.eta = float(eta)

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        child = np.array(candidate, dtype=float, copy=True)
        n_var = child.shape[0]
        mask = self._mask(n_var, rng)
        if not np.any(mask):
            return child
        lower = np.broadcast_to(self.lower, child.shape)
        upper = np.broadcast_to(self.upper, child.shape)
        cols = np.flatnonzero(mask)
        yl = lower[cols]
        yu = upper[cols]
        values = np.clip(child[cols], yl, yu)
        span = yu - yl
        span_safe = np.where(span == 0.0, 1.0, span)
        delta1 = (values - yl) / span_safe
        delta2 = (yu - values) / span_safe
        rnd = rng.random(cols.size)
        mut_pow = 1.0 / (self.eta + 1.0)
        deltaq = np.empty(cols.size, dtype=float)

        low_side = rnd <= 0.5
        xy = 1.0 - delta1[low_side]
        val = 2.0 * rnd[low_side] + (1.0 - 2.0 * rnd[low_side]) * np.power(xy, self.eta + 1.0)
        deltaq[low_side] = np.power(val, mut_pow) - 1.0
        high_side = ~low_side
        xy = 1.0 - delta2[high_side]
        val = 2.0 * (1.0 - rnd[high_side]) + 2.0 * (rnd[high_side] - 0.5) * np.power(xy, self.eta + 1.0)
        deltaq[high_side] = 1.0 - np.power(val, mut_pow)

        child[cols] = np.clip(values + deltaq * span, yl, yu)
        return child


class IntermediateCrossover(Recombiner):
    """Arithmetic mean of the parents (one child)."""

    n_children = 1

    def __init__(self, n_parents: int = 2) -> None:
        if n_parents < 2:
            raise ValueError("n_parents must be at least 2.")
        self.n_parents = int(n_parents)

    def __call__(self, parents: Sequence[Any], rng: np.random.Generator) -> list[np.ndarray]:
        stacked = np.asarray([np.asarray(p, dtype=float) for p in parents[: self.n_parents]])
        return [stacked.mean(axis=0)]


class SBXCrossover(Recombiner):
    """Simulated Binary Crossover (SBX) for one pair of real vectors."""

    def __init__(self, eta: float = 15.0, *, lower: ArrayLike | float, upper: ArrayLike | float) -> None:
        if eta < 0.0:
            raise ValueError("eta must be non-negative.")
        self.eta = float(eta)
        self.lower, self.upper = _ensure_bounds(lower, upper)

    def __call__(self, parents: Sequence[Any], rng: np.random.Generator) -> list[np.ndarray]:
        parent1 = np.asarray(parents[0], dtype=float)
        parent2 = np.asarray(parents[1], dtype=float)
        eps = 1.0e-14
        y1 = np.minimum(parent1, parent2)
        y2 = np.maximum(parent1, parent2)
        diff = y2 - y1
        if not np.any(diff > eps):
            return [parent1.copy(), parent2.copy()]

        xl = np.broadcast_to(self.lower, parent1.shape)
        xu = np.broadcast_to(self.upper, parent1.shape)
        rand = rng.random(parent1.shape)
        inv_eta = 1.0 / (self.eta + 1.0)
        safe_diff = diff.clip(min=eps)

        def _spread(distance_to_bound: np.ndarray) -> np.ndarray:
            beta = np.maximum(1.0 + 2.0 * distance_to_bound / safe_diff, eps)
            alpha = np.maximum(2.0 - np.power(beta, -(self.eta + 1.0)), eps)
            betaq = np.empty_like(parent1)
            inner = rand <= (1.0 / alpha)
            betaq[inner] = np.power(rand[inner] * alpha[inner], inv_eta)
            betaq[~inner] = np.power(1.0 / (2.0 - rand[~inner] * alpha[~inner]), inv_eta)
            return betaq

        c1 = 0.5 * ((y1 + y2) - _spread(y1 - xl) * diff)
        c2 = 0.5 * ((y1 + y2) + _spread(xu - y2) * diff)
        c1 = np.clip(c1, xl, xu)
        c2 = np.clip(c2, xl, xu)

        # genes without spread are inherited unchanged
        same = diff <= eps
        c1[same] = parent1[same]
        c2[same] = parent2[same]
        swap = rng.random(parent1.shape) <= 0.5
        child1 = np.where(swap, c2, c1)
        child2 = np.where(swap, c1, c2)
        return [child1, child2]


__all__ = [
    "random_real_population",
    "GaussianMutation",
    "UniformMutation",
    "PolynomialMutation",
    "IntermediateCrossover",
    "SBXCrossover",
]
