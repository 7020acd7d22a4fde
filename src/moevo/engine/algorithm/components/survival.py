"""Plus and comma replacement built on a survival selector."""

from __future__ import annotations

import numpy as np

from moevo.operators.base import SurvivalSelector

from .population import Population


def _survivors(pool: Population, selector: SurvivalSelector, n_select: int, rng: np.random.Generator) -> Population:
    if n_select <= 0:
        return Population.empty(pool.n_obj)
    idx = np.asarray(selector(pool.F, n_select, rng), dtype=int).reshape(-1)
    if idx.size != n_select or np.unique(idx).size != idx.size:
        raise ValueError(f"{type(selector).__name__} must return {n_select} distinct indices; got {idx.tolist()}.")
    return pool.take(idx)


def replace_plus(
    parents: Population,
    offspring: Population,
    selector: SurvivalSelector,
    mu: int,
    rng: np.random.Generator,
) -> Population:
    """(mu + lambda): survivors are chosen from parents and offspring together."""
    union = parents.concat(offspring)
    return _survivors(union, selector, min(mu, len(union)), rng)


def replace_comma(
    parents: Population,
    offspring: Population,
    selector: SurvivalSelector,
    mu: int,
    rng: np.random.Generator,
    n_elite: int = 0,
) -> Population:
    """
    (mu, lambda): survivors come from the offspring only.

    ``n_elite`` best parents (by the same selector) are carried over first and
    the rest of the slots are filled from the offspring.
    """
    if len(offspring) < mu:
        raise ValueError(f"comma replacement needs lambda >= mu; got lambda={len(offspring)}, mu={mu}.")
    if not 0 <= n_elite < mu:
        raise ValueError(f"n_elite must be in [0, mu); got {n_elite}.")
    elites = _survivors(parents, selector, min(n_elite, len(parents)), rng)
    chosen = _survivors(offspring, selector, mu - len(elites), rng)
    return elites.concat(chosen)


__all__ = ["replace_plus", "replace_comma"]
