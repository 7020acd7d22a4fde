"""
Operator capabilities bound to the Control slots.

Each operator is a small strategy object whose hyperparameters are fixed when
it is constructed; the evolutionary loop calls it through its slot without
knowing the concrete class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Sequence

import numpy as np


class Operator(ABC):
    """Common base: a slot kind and the hyperparameters the instance was built with."""

    kind: ClassVar[str] = "operator"

    def params(self) -> dict[str, Any]:
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.params().items())
        return f"{type(self).__name__}({args})"


class Mutator(Operator):
    """Candidate -> new candidate. Must not modify its input."""

    kind: ClassVar[str] = "mutate"

    @abstractmethod
    def __call__(self, candidate: Any, rng: np.random.Generator) -> Any:
        raise NotImplementedError


class Recombiner(Operator):
    """``n_parents`` candidates -> list of ``n_children`` new candidates."""

    kind: ClassVar[str] = "recombine"
    n_parents: int = 2
    n_children: int = 2

    @abstractmethod
    def __call__(self, parents: Sequence[Any], rng: np.random.Generator) -> list[Any]:
        raise NotImplementedError


class MatingSelector(Operator):
    """Pick parent indices (with replacement allowed) from a population's fitness matrix."""

    kind: ClassVar[str] = "select_for_mating"

    @abstractmethod
    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        raise NotImplementedError


class SurvivalSelector(Operator):
    """Pick ``n_select`` distinct survivor indices from a fitness matrix."""

    kind: ClassVar[str] = "select_for_survival"

    @abstractmethod
    def __call__(self, F: np.ndarray, n_select: int, rng: np.random.Generator) -> np.ndarray:
        raise NotImplementedError


__all__ = ["Operator", "Mutator", "Recombiner", "MatingSelector", "SurvivalSelector"]
