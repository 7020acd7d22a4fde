"""
Generational loop controller.

    INIT -> EVALUATED -> (VARIED -> MERGED -> SELECTED -> ARCHIVED)* -> TERMINATED

One ``step()`` is one generation and is atomic: if anything inside it raises
(typically an EvaluationError from the fitness function), the population,
archive, counters, random generator and logbook are put back exactly as they
were after the previous generation and the exception propagates.
Terminators are consulted only between generations.
"""

from __future__ import annotations

import copy
import logging
import math
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from moevo.foundation.eval import EvaluationBackend
from moevo.foundation.exceptions import (
    ConfigurationError,
    EvaluationError,
    MissingConfigError,
    OptimizationError,
)
from moevo.foundation.problem.representation import Representation
from moevo.engine.algorithm.components.archive import ParetoArchive, init_archive
from moevo.engine.algorithm.components.logbook import GenerationLog
from moevo.engine.algorithm.components.population import Population
from moevo.engine.algorithm.components.selection import GreedySurvival, RandomSelection, RankAndCrowdingSurvival
from moevo.engine.algorithm.components.survival import replace_comma, replace_plus
from moevo.engine.algorithm.components.termination import Terminator
from moevo.engine.config import EvolutionConfig
from moevo.engine.control import Control
from moevo.operators.base import MatingSelector, Mutator, Recombiner, SurvivalSelector

if TYPE_CHECKING:
    from moevo.experiment.optimization_result import OptimizationResult


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class LoopState(str, Enum):
    INIT = "init"
    EVALUATED = "evaluated"
    VARIED = "varied"
    MERGED = "merged"
    SELECTED = "selected"
    ARCHIVED = "archived"
    TERMINATED = "terminated"


class EvolutionaryLoop:
    """
    Drives one run: evaluate, vary, merge, select, archive, check termination.

    Unbound Control slots fall back to defaults: mutation and recombination
    from the representation, uniform random mating selection, and
    rank-and-crowding survival (plain truncation for a single objective).

    Args:
        control: Fitness function, objective directions and bound operators.
        config: Loop configuration.
        representation: Sampler and seed checker for candidates.
        backend: Evaluation backend; serial in-process evaluation by default.
    """

    def __init__(
        self,
        control: Control,
        config: EvolutionConfig,
        representation: Representation | None = None,
        backend: EvaluationBackend | None = None,
    ) -> None:
        self.control = control
        self.config = config
        self.representation = representation
        self.backend = backend
        self._check_consistency()

        self.rng = np.random.default_rng(config.seed)
        self.state = LoopState.INIT
        self.generation = 0
        self.evaluations = 0
        self.population: Population | None = None
        self.archive: ParetoArchive = self._new_archive()
        self.log = GenerationLog(list(control.objective_names))
        self.stop_reason: str | None = None
        self._t0: float | None = None

        self.mutator: Mutator | None = None
        self.recombiner: Recombiner | None = None
        self.mating_selector: MatingSelector = RandomSelection()
        self.survival_selector: SurvivalSelector = RankAndCrowdingSurvival()

    def __repr__(self) -> str:
        return (
            f"EvolutionaryLoop(state={self.state.name}, generation={self.generation}, "
            f"evaluations={self.evaluations}, archive={len(self.archive)})"
        )

    # ------------------------------------------------------------------ setup

    def _check_consistency(self) -> None:
        cfg, control = self.config, self.control
        if cfg.n_objectives is not None and cfg.n_objectives != control.n_objectives:
            raise ConfigurationError(
                f"Config declares {cfg.n_objectives} objectives but the Control has {control.n_objectives}."
            )
        if cfg.minimize is not None and tuple(cfg.minimize) != tuple(control.minimize):
            raise ConfigurationError(
                f"Config minimize {list(cfg.minimize)} differs from the Control's {list(control.minimize)}."
            )
        if cfg.reference_point is not None and len(cfg.reference_point) != control.n_objectives:
            raise ConfigurationError(
                f"reference_point has {len(cfg.reference_point)} components; expected {control.n_objectives}."
            )

    def _new_archive(self) -> ParetoArchive:
        ref = None
        if self.config.reference_point is not None:
            ref = self.control.to_min_sign(self.config.reference_point)
        return init_archive(
            self.control.n_objectives,
            capacity=self.config.archive_capacity,
            pruning=self.config.archive_pruning,  # type: ignore[arg-type]
            ref_point=ref,
        )

    def _resolve_operators(self) -> None:
        control, cfg, rep = self.control, self.config, self.representation

        if control.has("mutate"):
            self.mutator = control.get("mutate")  # type: ignore[assignment]
        elif rep is not None and cfg.p_mut > 0.0:
            self.mutator = rep.default_mutator()
        elif cfg.p_mut > 0.0:
            raise MissingConfigError("mutate", "Control.register")

        if control.has("recombine"):
            self.recombiner = control.get("recombine")  # type: ignore[assignment]
        elif rep is not None and cfg.p_recomb > 0.0:
            self.recombiner = rep.default_recombiner()
        elif cfg.p_recomb > 0.0:
            raise MissingConfigError("recombine", "Control.register")

        if control.has("select_for_mating"):
            self.mating_selector = control.get("select_for_mating")  # type: ignore[assignment]
        if control.has("select_for_survival"):
            self.survival_selector = control.get("select_for_survival")  # type: ignore[assignment]
        elif control.n_objectives == 1:
            self.survival_selector = GreedySurvival()

    # ----------------------------------------------------------------- status

    @property
    def objective_signs(self) -> np.ndarray:
        return self.control.signs

    @property
    def elapsed(self) -> float:
        return 0.0 if self._t0 is None else time.perf_counter() - self._t0

    @property
    def terminators(self) -> tuple[Terminator, ...]:
        return self.config.terminators

    def _evaluate(self, candidates: Sequence[Any], generation: int) -> np.ndarray:
        try:
            return self.control.evaluate_fitness(candidates, self.backend)
        except EvaluationError as exc:
            exc.generation = generation
            exc.details["generation"] = generation
            raise

    def _record(self, generation: int, evaluations: int, population: Population) -> None:
        if not self.config.log_stats and not self.config.log_pop:
            return
        ref = self.archive.reference_point()
        hv = self.archive.hypervolume(ref) if ref is not None else None
        snapshot = copy.deepcopy(population.candidates) if self.config.log_pop else None
        record = self.log.make_record(
            generation=generation,
            evaluations=evaluations,
            elapsed=self.elapsed,
            F_user=self.control.to_user_sign(population.F),
            archive_size=len(self.archive),
            archive_hypervolume=hv,
            population=snapshot,
        )
        self.log.append(record)

    # ------------------------------------------------------------ lifecycle

    def initialize(self, initial_solutions: Sequence[Any] | None = None) -> Population:
        """
        Build and evaluate the initial population and seed the archive.

        Seeds fill the front of the population (checked against the
        representation); the representation's sampler supplies the rest.
        """
        if self.state is not LoopState.INIT:
            raise OptimizationError("initialize() was already called on this loop.")
        mu = self.config.mu
        seeds = list(initial_solutions or [])
        if len(seeds) > mu:
            raise ConfigurationError(f"{len(seeds)} initial solutions given but mu is {mu}.")
        if self.representation is not None:
            seeds = [self.representation.check(s) for s in seeds]
        self._resolve_operators()

        rng_state = copy.deepcopy(self.rng.bit_generator.state)
        self._t0 = time.perf_counter()
        try:
            candidates = list(seeds)
            missing = mu - len(candidates)
            if missing > 0:
                if self.representation is None:
                    raise MissingConfigError("representation", "EvolutionaryLoop")
                candidates.extend(self.representation.sample(missing, self.rng))
            F = self._evaluate(candidates, 0)
            population = Population(candidates, F)
            self.archive.update(population.candidates, population.F)
        except BaseException:
            self.rng.bit_generator.state = rng_state
            self.archive = self._new_archive()
            self._t0 = None
            raise

        for term in self.terminators:
            term.reset()
        self.population = population
        self.evaluations = len(candidates)
        self.generation = 0
        self.state = LoopState.EVALUATED
        self._record(0, self.evaluations, population)
        _logger().info(
            "Initialized population of %d (%d seeded); archive holds %d.", mu, len(seeds), len(self.archive)
        )
        return population

    def _vary(self, parents: Population) -> list[Any]:
        lam = self.config.lambda_
        rec = self.recombiner
        n_parents = rec.n_parents if rec is not None else 1
        n_children = rec.n_children if rec is not None else 1
        n_groups = math.ceil(lam / n_children)
        mates = np.asarray(self.mating_selector(parents.F, n_groups * n_parents, self.rng), dtype=int)
        if mates.shape != (n_groups * n_parents,):
            raise OptimizationError(
                f"{type(self.mating_selector).__name__} returned {mates.size} indices; expected {n_groups * n_parents}."
            )

        offspring: list[Any] = []
        for g in range(n_groups):
            group = [parents.candidates[i] for i in mates[g * n_parents : (g + 1) * n_parents]]
            if rec is not None and self.rng.random() < self.config.p_recomb:
                children = list(rec(group, self.rng))
            else:
                children = [copy.deepcopy(group[j % n_parents]) for j in range(n_children)]
            offspring.extend(children)
        offspring = offspring[:lam]

        if self.mutator is not None and self.config.p_mut > 0.0:
            for i, child in enumerate(offspring):
                if self.rng.random() < self.config.p_mut:
                    offspring[i] = self.mutator(child, self.rng)
        return offspring

    def step(self) -> Population:
        """Run one complete generation and return the new population."""
        if self.state is LoopState.INIT or self.population is None:
            raise OptimizationError("Call initialize() before step().")
        if self.state is LoopState.TERMINATED:
            raise OptimizationError(f"Loop already terminated: {self.stop_reason}.")

        prev_state = self.state
        rng_state = copy.deepcopy(self.rng.bit_generator.state)
        archive_snapshot = self.archive._snapshot()
        n_records = len(self.log)
        generation = self.generation + 1
        parents = self.population
        try:
            offspring = self._vary(parents)
            self.state = LoopState.VARIED
            off_pop = Population(offspring, self._evaluate(offspring, generation))
            evaluations = self.evaluations + len(offspring)

            self.state = LoopState.MERGED
            if self.config.survival_strategy == "comma":
                survivors = replace_comma(
                    parents, off_pop, self.survival_selector, self.config.mu, self.rng, n_elite=self.config.n_elite
                )
            else:
                survivors = replace_plus(parents, off_pop, self.survival_selector, self.config.mu, self.rng)
            self.state = LoopState.SELECTED

            self.archive.update(survivors.candidates, survivors.F)
            self._record(generation, evaluations, survivors)
        except BaseException:
            self.rng.bit_generator.state = rng_state
            self.archive._restore(archive_snapshot)
            del self.log.records[n_records:]
            self.state = prev_state
            _logger().warning("Generation %d aborted; state kept at generation %d.", generation, self.generation)
            raise

        self.population = survivors
        self.generation = generation
        self.evaluations = evaluations
        self.state = LoopState.ARCHIVED
        _logger().debug(
            "Generation %d: %d evaluations, archive size %d.", generation, evaluations, len(self.archive)
        )
        return survivors

    def check_termination(self) -> bool:
        """Ask every terminator; the first one that fires sets ``stop_reason``."""
        for term in self.terminators:
            if term.should_stop(self):
                self.stop_reason = term.message or type(term).__name__
                return True
        return False

    def run(self, initial_solutions: Sequence[Any] | None = None) -> "OptimizationResult":
        """
        Initialize (if needed) and step until a terminator fires.

        Raises:
            MissingConfigError: when no terminator is configured.
            EvaluationError: when the fitness function fails; the loop keeps
                the last completed generation and ``result()`` still works.
        """
        if not self.terminators:
            raise MissingConfigError("terminators", "EvolutionConfig")
        if self.state is LoopState.INIT:
            self.initialize(initial_solutions)
        elif initial_solutions is not None:
            raise OptimizationError("initial_solutions can only be given before initialization.")

        while not self.check_termination():
            self.step()
        self.state = LoopState.TERMINATED
        _logger().info(
            "Run finished after %d generation(s), %d evaluations: %s.",
            self.generation,
            self.evaluations,
            self.stop_reason,
        )
        return self.result()

    def result(self) -> "OptimizationResult":
        """Snapshot of the last completed generation as an OptimizationResult."""
        from moevo.experiment.optimization_result import OptimizationResult

        if self.population is None:
            raise OptimizationError("No population yet; call initialize() or run() first.")
        solutions, F = self.archive.contents()
        ref = self.archive.reference_point()
        return OptimizationResult(
            pareto_set=solutions,
            pareto_front=self.control.to_user_sign(F),
            population=list(self.population.candidates),
            population_F=self.control.to_user_sign(self.population.F),
            log=self.log,
            hypervolume=self.archive.hypervolume(ref) if ref is not None else 0.0,
            meta={
                "generations": self.generation,
                "evaluations": self.evaluations,
                "stop_reason": self.stop_reason,
                "objective_names": list(self.control.objective_names),
                "minimize": list(self.control.minimize),
                "seed": self.config.seed,
                "survival": self.config.survival_strategy,
            },
        )


__all__ = ["LoopState", "EvolutionaryLoop"]
