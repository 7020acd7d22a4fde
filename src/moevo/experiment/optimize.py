"""
One-call entry point: build a Control and an EvolutionConfig, run the loop.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from moevo.foundation.eval import EvaluationBackend
from moevo.foundation.eval.backends import resolve_eval_backend
from moevo.foundation.problem.representation import Representation
from moevo.engine.algorithm.components.termination import MaxGenerations, Terminator
from moevo.engine.algorithm.loop import EvolutionaryLoop
from moevo.engine.config import EvolutionConfig
from moevo.engine.control import Control
from moevo.operators.base import Operator

from .optimization_result import OptimizationResult

DEFAULT_MAX_GENERATIONS = 100

OperatorLike = Operator | type[Operator] | str


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _bind(control: Control, slot: str, operator: OperatorLike | tuple[str, Mapping[str, Any]] | None) -> None:
    if operator is None:
        return
    if isinstance(operator, tuple):
        name, params = operator
        control.register(slot, name, **dict(params))
    else:
        control.register(slot, operator)


def optimize(
    fitness_fn: Callable[[Any], Sequence[float]],
    n_objectives: int,
    representation: Representation | None,
    *,
    mu: int,
    lambda_: int | None = None,
    minimize: bool | Sequence[bool] | None = None,
    objective_names: Sequence[str] | None = None,
    mutator: OperatorLike | tuple[str, Mapping[str, Any]] | None = None,
    recombinator: OperatorLike | tuple[str, Mapping[str, Any]] | None = None,
    parent_selector: OperatorLike | tuple[str, Mapping[str, Any]] | None = None,
    survival_selector: OperatorLike | tuple[str, Mapping[str, Any]] | None = None,
    initial_solutions: Sequence[Any] | None = None,
    terminators: Sequence[Terminator] | None = None,
    survival_strategy: str = "plus",
    n_elite: int = 0,
    p_recomb: float = 0.7,
    p_mut: float = 0.1,
    archive_capacity: int | None = None,
    archive_pruning: str = "crowding",
    reference_point: Sequence[float] | None = None,
    log_pop: bool = False,
    seed: int | None = None,
    eval_backend: str | EvaluationBackend | None = None,
    n_workers: int | None = None,
) -> OptimizationResult:
    """
    Run a multi-objective evolutionary optimization.

    Operators may be given as instances, operator classes, registry names or
    ``(name, params)`` tuples; unset ones default to the representation's
    operators, uniform random mating and rank-and-crowding survival.
    Without terminators the run stops after 100 generations.

    Args:
        fitness_fn: Candidate -> sequence of ``n_objectives`` reals.
        n_objectives: Number of objectives.
        representation: Candidate sampler/checker; may be None when seeds fill
            the population and operators are bound explicitly.
        mu: Population size.
        lambda_: Offspring per generation (default: mu).
        eval_backend: "serial", "multiprocessing", "joblib" or a backend instance.

    Returns:
        OptimizationResult with the archive in user-facing objective sign.

    Examples:
        from moevo import optimize, BinaryRepresentation, MaxGenerations

        def trade_off(bits):
            ones = int(bits.sum())
            return ones, len(bits) - ones

        result = optimize(trade_off, 2, BinaryRepresentation(10), mu=20, lambda_=20,
                          terminators=[MaxGenerations(200)], seed=1)
        result.summary()
    """
    control = Control(fitness_fn, n_objectives, minimize=minimize, objective_names=objective_names)
    _bind(control, "mutate", mutator)
    _bind(control, "recombine", recombinator)
    _bind(control, "select_for_mating", parent_selector)
    _bind(control, "select_for_survival", survival_selector)

    config = EvolutionConfig(
        mu=mu,
        lambda_=mu if lambda_ is None else lambda_,
        survival_strategy=survival_strategy,
        n_elite=n_elite,
        p_recomb=p_recomb,
        p_mut=p_mut,
        archive_capacity=archive_capacity,
        archive_pruning=archive_pruning,
        reference_point=None if reference_point is None else tuple(float(v) for v in reference_point),
        terminators=tuple(terminators) if terminators else (MaxGenerations(DEFAULT_MAX_GENERATIONS),),
        log_pop=log_pop,
        seed=seed,
    )

    owns_backend = not isinstance(eval_backend, EvaluationBackend)
    backend = (
        eval_backend if isinstance(eval_backend, EvaluationBackend) else resolve_eval_backend(eval_backend, n_workers=n_workers)
    )
    loop = EvolutionaryLoop(control, config, representation=representation, backend=backend)
    _logger().info(
        "Starting run: %d objective(s), mu=%d, lambda=%d, %s survival.",
        control.n_objectives,
        config.mu,
        config.lambda_,
        config.survival_strategy,
    )
    try:
        return loop.run(initial_solutions)
    finally:
        if owns_backend:
            backend.close()


__all__ = ["optimize", "DEFAULT_MAX_GENERATIONS"]
