from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from .base import Mutator, Recombiner
from .utils import check_probability


def random_binary_population(pop_size: int, n_var: int, rng: np.random.Generator) -> list[np.ndarray]:
    """
    Generate a batch of random bitstrings.
    """
    if pop_size <= 0 or n_var <= 0:
        raise ValueError("pop_size and n_var must be positive integers.")
    return list(rng.integers(0, 2, size=(pop_size, n_var), dtype=np.int8))


class BitFlipMutation(Mutator):
    """
    Per-bit mutation that flips each bit with probability ``prob``.
    """

    def __init__(self, prob: float = 0.1) -> None:
        self.prob = check_probability("prob", prob)

    def __call__(self, candidate: Any, rng: np.random.Generator) -> np.ndarray:
        child = np.array(candidate, copy=True)
        if child.size == 0 or self.prob <= 0.0:
            return child
        mask = rng.random(child.shape) < self.prob
        child[mask] = 1 - child[mask]
        return child


class OnePointCrossover(Recombiner):
    """
    Classic one-point crossover for bitstrings (and any fixed-length vector).
    """

    def __call__(self, parents: Sequence[Any], rng: np.random.Generator) -> list[np.ndarray]:
        p1 = np.asarray(parents[0])
        p2 = np.asarray(parents[1])
        D = p1.shape[0]
        if D < 2:
            return [p1.copy(), p2.copy()]
        cut = int(rng.integers(1, D))
        child1 = np.concatenate([p1[:cut], p2[cut:]])
        child2 = np.concatenate([p2[:cut], p1[cut:]])
        return [child1, child2]


class UniformCrossover(Recombiner):
    """
    Uniform crossover with independent swapping per gene.
    """

    def __init__(self, swap_prob: float = 0.5) -> None:
        self.swap_prob = check_probability("swap_prob", swap_prob)

    def __call__(self, parents: Sequence[Any], rng: np.random.Generator) -> list[np.ndarray]:
        p1 = np.asarray(parents[0])
        p2 = np.asarray(parents[1])
        mask = rng.random(p1.shape[0]) < self.swap_prob
        child1 = np.where(mask, p2, p1)
        child2 = np.where(mask, p1, p2)
        return [child1, child2]


__all__ = [
    "random_binary_population",
    "BitFlipMutation",
    "OnePointCrossover",
    "UniformCrossover",
]
