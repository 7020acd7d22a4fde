"""
Candidate representations.

A representation knows how to sample fresh candidates, how to check that a
user-supplied seed has the right shape, and which operators to use when the
caller binds none. The loop never branches on the concrete variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Literal, Sequence, TypeAlias

import numpy as np

from moevo.foundation.exceptions import ConfigurationError, MissingConfigError
from moevo.operators.base import Mutator, Recombiner
from moevo.operators.binary import BitFlipMutation, OnePointCrossover, random_binary_population
from moevo.operators.permutation import OrderCrossover, SwapMutation, random_permutation_population
from moevo.operators.real import PolynomialMutation, SBXCrossover, _ensure_bounds, random_real_population

Encoding: TypeAlias = Literal["binary", "real", "permutation", "custom"]

_ALIASES: dict[str, Encoding] = {
    "binary": "binary",
    "bits": "binary",
    "real": "real",
    "continuous": "real",
    "float": "real",
    "permutation": "permutation",
    "perm": "permutation",
    "custom": "custom",
}


def normalize_encoding(value: str) -> Encoding:
    """Map user encoding strings ("perm", "float", ...) to a canonical name."""
    key = value.strip().lower()
    normalized = _ALIASES.get(key)
    if normalized is None:
        expected = ", ".join(sorted(set(_ALIASES)))
        raise ConfigurationError(f"Unknown encoding '{value}'.", f"Expected one of: {expected}")
    return normalized


class Representation(ABC):
    encoding: Encoding

    @abstractmethod
    def sample(self, n: int, rng: np.random.Generator) -> list[Any]:
        """Return ``n`` fresh candidates."""

    @abstractmethod
    def check(self, candidate: Any) -> Any:
        """Validate a candidate and return it in canonical form; raise ConfigurationError otherwise."""

    @abstractmethod
    def default_mutator(self) -> Mutator: ...

    @abstractmethod
    def default_recombiner(self) -> Recombiner: ...

    def _check_vector(self, candidate: Any, n_var: int, dtype: Any) -> np.ndarray:
        try:
            arr = np.asarray(candidate, dtype=dtype)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Candidate {candidate!r} cannot be read as a {self.encoding} vector.",
                details={"encoding": self.encoding},
            ) from exc
        if arr.ndim != 1 or arr.shape[0] != n_var:
            raise ConfigurationError(
                f"{self.encoding.capitalize()} candidate has shape {arr.shape}; expected ({n_var},).",
                "Seeds must have the same arity as the representation",
                {"encoding": self.encoding, "expected": n_var, "shape": arr.shape},
            )
        return arr


class BinaryRepresentation(Representation):
    """Fixed-length bit vectors stored as int8 arrays of 0/1."""

    encoding: Encoding = "binary"

    def __init__(self, n_bits: int) -> None:
        if n_bits <= 0:
            raise ConfigurationError("n_bits must be a positive integer.")
        self.n_bits = int(n_bits)

    def sample(self, n: int, rng: np.random.Generator) -> list[np.ndarray]:
        return random_binary_population(n, self.n_bits, rng)

    def check(self, candidate: Any) -> np.ndarray:
        arr = self._check_vector(candidate, self.n_bits, np.int8)
        if np.any((arr != 0) & (arr != 1)):
            raise ConfigurationError("Binary candidate must contain only 0 and 1.")
        return arr

    def default_mutator(self) -> Mutator:
        return BitFlipMutation(prob=1.0 / self.n_bits)

    def default_recombiner(self) -> Recombiner:
        return OnePointCrossover()

    def __repr__(self) -> str:
        return f"BinaryRepresentation(n_bits={self.n_bits})"


class RealRepresentation(Representation):
    """Real vectors inside the box [lower, upper]."""

    encoding: Encoding = "real"

    def __init__(self, lower: Sequence[float] | float, upper: Sequence[float] | float, n_var: int | None = None) -> None:
        if n_var is not None:
            lower = np.broadcast_to(np.asarray(lower, dtype=float), (int(n_var),))
            upper = np.broadcast_to(np.asarray(upper, dtype=float), (int(n_var),))
        try:
            self.lower, self.upper = _ensure_bounds(lower, upper)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    @property
    def n_var(self) -> int:
        return int(self.lower.shape[0])

    def sample(self, n: int, rng: np.random.Generator) -> list[np.ndarray]:
        return random_real_population(n, self.lower, self.upper, rng)

    def check(self, candidate: Any) -> np.ndarray:
        arr = self._check_vector(candidate, self.n_var, float)
        if np.any(arr < self.lower) or np.any(arr > self.upper):
            raise ConfigurationError(
                "Real candidate lies outside the representation bounds.",
                details={"candidate": arr.tolist()},
            )
        return arr

    def default_mutator(self) -> Mutator:
        return PolynomialMutation(prob=1.0 / self.n_var, eta=20.0, lower=self.lower, upper=self.upper)

    def default_recombiner(self) -> Recombiner:
        return SBXCrossover(eta=15.0, lower=self.lower, upper=self.upper)

    def __repr__(self) -> str:
        return f"RealRepresentation(n_var={self.n_var})"


class PermutationRepresentation(Representation):
    """Permutations of 0..n-1."""

    encoding: Encoding = "permutation"

    def __init__(self, n: int) -> None:
        if n <= 0:
            raise ConfigurationError("Permutation length must be a positive integer.")
        self.n = int(n)

    def sample(self, n: int, rng: np.random.Generator) -> list[np.ndarray]:
        return random_permutation_population(n, self.n, rng)

    def check(self, candidate: Any) -> np.ndarray:
        arr = self._check_vector(candidate, self.n, np.int64)
        if not np.array_equal(np.sort(arr), np.arange(self.n)):
            raise ConfigurationError(f"Candidate is not a permutation of 0..{self.n - 1}.")
        return arr

    def default_mutator(self) -> Mutator:
        return SwapMutation()

    def default_recombiner(self) -> Recombiner:
        return OrderCrossover()

    def __repr__(self) -> str:
        return f"PermutationRepresentation(n={self.n})"


class CustomRepresentation(Representation):
    """
    User-defined candidates.

    ``sampler(rng)`` returns one candidate; ``validator(candidate)`` returns a
    truthy value for valid seeds (anything passes when omitted). There are no
    built-in operators for opaque candidates, so mutator and recombiner must
    be given here or bound on the Control.
    """

    encoding: Encoding = "custom"

    def __init__(
        self,
        sampler: Callable[[np.random.Generator], Any],
        validator: Callable[[Any], bool] | None = None,
        *,
        mutator: Mutator | None = None,
        recombiner: Recombiner | None = None,
    ) -> None:
        if not callable(sampler):
            raise ConfigurationError("sampler must be callable.")
        self.sampler = sampler
        self.validator = validator
        self.mutator = mutator
        self.recombiner = recombiner

    def sample(self, n: int, rng: np.random.Generator) -> list[Any]:
        if n <= 0:
            raise ValueError("n must be a positive integer.")
        return [self.sampler(rng) for _ in range(n)]

    def check(self, candidate: Any) -> Any:
        if self.validator is not None and not self.validator(candidate):
            raise ConfigurationError(f"Candidate {candidate!r} rejected by the representation validator.")
        return candidate

    def default_mutator(self) -> Mutator:
        if self.mutator is None:
            raise MissingConfigError("mutate", "CustomRepresentation")
        return self.mutator

    def default_recombiner(self) -> Recombiner:
        if self.recombiner is None:
            raise MissingConfigError("recombine", "CustomRepresentation")
        return self.recombiner


def make_representation(encoding: str, **kwargs: Any) -> Representation:
    """
    Build a representation from an encoding name.

    Examples:
        make_representation("binary", n_bits=16)
        make_representation("real", lower=[0, 0], upper=[1, 1])
        make_representation("perm", n=8)
    """
    kind = normalize_encoding(encoding)
    if kind == "binary":
        return BinaryRepresentation(**kwargs)
    if kind == "real":
        return RealRepresentation(**kwargs)
    if kind == "permutation":
        return PermutationRepresentation(**kwargs)
    return CustomRepresentation(**kwargs)


__all__ = [
    "Encoding",
    "normalize_encoding",
    "Representation",
    "BinaryRepresentation",
    "RealRepresentation",
    "PermutationRepresentation",
    "CustomRepresentation",
    "make_representation",
]
