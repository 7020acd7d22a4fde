"""
Control: the explicit run configuration handed to every core operation.

Binds the fitness function, the objective count and directions, and the four
operator slots. The loop calls slots by name and never sees the concrete
operator classes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from moevo.foundation.eval import EvaluationBackend
from moevo.foundation.eval.backends import SerialEvalBackend
from moevo.foundation.exceptions import ConfigurationError, EvaluationError, InvalidOperatorError, MissingConfigError
from moevo.operators.base import Operator
from moevo.operators.registry import operator_registry

SLOTS: tuple[str, ...] = ("mutate", "recombine", "select_for_mating", "select_for_survival")

_SLOT_ALIASES: dict[str, str] = {
    "mutate": "mutate",
    "mutation": "mutate",
    "recombine": "recombine",
    "crossover": "recombine",
    "select_for_mating": "select_for_mating",
    "selectForMating": "select_for_mating",
    "mating": "select_for_mating",
    "select_for_survival": "select_for_survival",
    "selectForSurvival": "select_for_survival",
    "survival": "select_for_survival",
}


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _normalize_slot(slot: str) -> str:
    resolved = _SLOT_ALIASES.get(slot)
    if resolved is None:
        raise InvalidOperatorError("operator slot", slot, list(SLOTS))
    return resolved


def _resolve_minimize(minimize: bool | Sequence[bool] | None, n_objectives: int) -> tuple[bool, ...]:
    if minimize is None:
        return (True,) * n_objectives
    if isinstance(minimize, (bool, np.bool_)):
        return (bool(minimize),) * n_objectives
    flags = tuple(bool(m) for m in minimize)
    if len(flags) != n_objectives:
        raise ConfigurationError(
            f"minimize has {len(flags)} entries but n_objectives is {n_objectives}.",
            "Give one minimize/maximize flag per objective, or a single bool",
            {"minimize": list(flags), "n_objectives": n_objectives},
        )
    return flags


class Control:
    """
    Fitness function, objective directions and operator slots for one run.

    Args:
        fitness_fn: Candidate -> sequence of ``n_objectives`` reals.
        n_objectives: Number of objectives N.
        minimize: True/False for all objectives or one flag per objective (default: all minimized).
        objective_names: Labels used in logs and exports (default f1..fN).

    Examples:
        control = (
            Control(fitness, n_objectives=2, minimize=[True, False])
            .register("mutate", "bitflip", prob=0.05)
            .register("recombine", UniformCrossover())
        )
    """

    def __init__(
        self,
        fitness_fn: Callable[[Any], Sequence[float]],
        n_objectives: int,
        minimize: bool | Sequence[bool] | None = None,
        objective_names: Sequence[str] | None = None,
    ) -> None:
        if not callable(fitness_fn):
            raise ConfigurationError("fitness_fn must be callable.")
        if isinstance(n_objectives, bool) or int(n_objectives) != n_objectives or n_objectives <= 0:
            raise ConfigurationError(f"n_objectives must be a positive integer; got {n_objectives!r}.")
        self.fitness_fn = fitness_fn
        self.n_objectives = int(n_objectives)
        self.minimize = _resolve_minimize(minimize, self.n_objectives)
        if objective_names is None:
            self.objective_names = [f"f{i + 1}" for i in range(self.n_objectives)]
        else:
            self.objective_names = [str(name) for name in objective_names]
            if len(self.objective_names) != self.n_objectives:
                raise ConfigurationError(
                    f"objective_names has {len(self.objective_names)} entries but n_objectives is {self.n_objectives}."
                )
        self._signs = np.where(np.asarray(self.minimize), 1.0, -1.0)
        self._slots: dict[str, Operator] = {}

    def __repr__(self) -> str:
        bound = ", ".join(f"{slot}={op!r}" for slot, op in self._slots.items())
        return f"Control(n_objectives={self.n_objectives}, minimize={list(self.minimize)}, {bound})"

    @property
    def signs(self) -> np.ndarray:
        """+1 for minimized and -1 for maximized objectives."""
        return self._signs.copy()

    # ------------------------------------------------------------------ slots

    def register(self, slot: str, operator: Operator | type[Operator] | str, **params: Any) -> "Control":
        """
        Bind an operator to a slot.

        ``operator`` may be an instance, an operator class, or a registry name
        such as "bitflip" or "sbx"; ``params`` are the constructor arguments
        for the last two forms. Returns self for chaining.
        """
        slot = _normalize_slot(slot)
        if isinstance(operator, str):
            registry = operator_registry()
            if operator not in registry:
                raise InvalidOperatorError(slot, operator, registry.list())
            operator = registry.get(operator)
        if isinstance(operator, type):
            if not issubclass(operator, Operator):
                raise ConfigurationError(f"{operator.__name__} is not an operator class.")
            try:
                operator = operator(**params)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"Cannot build {operator.__name__} with {params}: {exc}",
                    details={"slot": slot, "params": params},
                ) from exc
        elif params:
            raise ConfigurationError(
                f"Parameters {sorted(params)} given for an operator instance.",
                "Pass parameters only with an operator class or registry name",
            )
        if not isinstance(operator, Operator):
            raise ConfigurationError(
                f"Slot '{slot}' needs an Operator instance; got {type(operator).__name__}.",
                "Subclass Mutator, Recombiner, MatingSelector or SurvivalSelector",
            )
        if operator.kind != slot:
            raise ConfigurationError(
                f"{type(operator).__name__} is a '{operator.kind}' operator and cannot fill slot '{slot}'.",
                details={"slot": slot, "kind": operator.kind},
            )
        self._slots[slot] = operator
        _logger().debug("Bound %s to slot '%s'.", operator, slot)
        return self

    def get(self, slot: str) -> Operator:
        slot = _normalize_slot(slot)
        if slot not in self._slots:
            raise MissingConfigError(slot, "Control.register")
        return self._slots[slot]

    def has(self, slot: str) -> bool:
        return _normalize_slot(slot) in self._slots

    def slots(self) -> Mapping[str, Operator]:
        """Bound slots, in registration order."""
        return dict(self._slots)

    # ------------------------------------------------------------- evaluation

    def evaluate_fitness(self, candidates: Sequence[Any], backend: EvaluationBackend | None = None) -> np.ndarray:
        """
        Apply the fitness function to every candidate.

        Returns an (n, N) array in minimization sign (maximized objectives
        negated), rows in candidate order. A raising fitness function, a
        vector of the wrong length or a NaN or infinite value becomes EvaluationError
        carrying the candidate index.
        """
        cands = list(candidates)
        if not cands:
            return np.empty((0, self.n_objectives), dtype=float)
        result = (backend or SerialEvalBackend()).evaluate(cands, self.fitness_fn)
        F = np.empty((len(cands), self.n_objectives), dtype=float)
        for i, values in enumerate(result.values):
            if values.shape[0] != self.n_objectives:
                raise EvaluationError(
                    f"Fitness function returned {values.shape[0]} value(s) for candidate {i}; "
                    f"expected {self.n_objectives}.",
                    candidate=cands[i],
                    index=i,
                )
            if not np.isfinite(values).all():
                raise EvaluationError(
                    f"Fitness function returned a non-finite value for candidate {i}: {values.tolist()}.",
                    candidate=cands[i],
                    index=i,
                )
            F[i] = values
        return F * self._signs

    def to_user_sign(self, F: np.ndarray) -> np.ndarray:
        """Restore the user-facing sign of a minimization-sign fitness matrix or vector."""
        return np.asarray(F, dtype=float) * self._signs

    def to_min_sign(self, F: np.ndarray | Sequence[float]) -> np.ndarray:
        return np.asarray(F, dtype=float) * self._signs


__all__ = ["Control", "SLOTS"]
