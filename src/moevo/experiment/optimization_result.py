from __future__ import annotations

import logging
from typing import Any, Mapping

import numpy as np
from numpy.typing import NDArray

from moevo.engine.algorithm.components.logbook import GenerationLog


def _logger() -> logging.Logger:
    return logging.getLogger("moevo.experiment.optimize")


class OptimizationResult:
    """
    Container returned by optimize() and EvolutionaryLoop.run().

    Fitness values are reported in the user-facing sign: maximized
    objectives come back positive even though the engine minimizes internally.

    Attributes:
        pareto_front: Archive fitness matrix (n_solutions, n_objectives).
        pareto_set: Archive candidates, aligned with ``pareto_front``.
        population: Final population candidates.
        population_F: Final population fitness matrix.
        log: Per-generation statistics.
        hypervolume: Archive hypervolume at the end of the run.
        meta: Run information (generations, evaluations, stop_reason, seed, ...).

    Examples:
        >>> result = optimize(fitness, 2, BinaryRepresentation(8), mu=20, lambda_=20)
        >>> result.summary()
        >>> df = result.to_dataframe()
        >>> history = result.log.to_dataframe()
    """

    def __init__(
        self,
        *,
        pareto_set: list[Any],
        pareto_front: NDArray[Any],
        population: list[Any],
        population_F: NDArray[Any],
        log: GenerationLog,
        hypervolume: float,
        meta: Mapping[str, Any] | None = None,
    ) -> None:
        self.pareto_set = list(pareto_set)
        self.pareto_front = np.asarray(pareto_front, dtype=float)
        self.population = list(population)
        self.population_F = np.asarray(population_F, dtype=float)
        self.log = log
        self.hypervolume = float(hypervolume)
        self.meta: dict[str, Any] = dict(meta or {})

    def __len__(self) -> int:
        """Number of archive solutions."""
        return len(self.pareto_set)

    def __repr__(self) -> str:
        return f"OptimizationResult({len(self)} solutions, {self.n_objectives} objectives)"

    @property
    def n_objectives(self) -> int:
        return int(self.pareto_front.shape[1]) if self.pareto_front.ndim == 2 else 0

    @property
    def objective_names(self) -> list[str]:
        return list(self.meta.get("objective_names") or [f"f{i + 1}" for i in range(self.n_objectives)])

    @property
    def generations(self) -> int:
        return int(self.meta.get("generations", 0))

    @property
    def evaluations(self) -> int:
        return int(self.meta.get("evaluations", 0))

    @property
    def stop_reason(self) -> str | None:
        return self.meta.get("stop_reason")

    def summary_text(self) -> str:
        """Return a human-readable summary string (no logging side effects)."""
        seed = self.meta.get("seed")
        lines = [
            "=== Optimization Result ===",
            *([f"Seed: {seed}"] if seed is not None else []),
            f"Generations: {self.generations}",
            f"Evaluations: {self.evaluations}",
            *([f"Stopped: {self.stop_reason}"] if self.stop_reason else []),
            f"Solutions: {len(self)}",
            f"Objectives: {self.n_objectives}",
            f"Hypervolume: {self.hypervolume:.6g}",
        ]
        if len(self):
            minimize = self.meta.get("minimize") or [True] * self.n_objectives
            lines.append("Objective ranges:")
            for i, name in enumerate(self.objective_names):
                col = self.pareto_front[:, i]
                direction = "min" if minimize[i] else "max"
                lines.append(f"  {name} ({direction}): [{col.min():.6f}, {col.max():.6f}]")
        return "\n".join(lines)

    def summary(self) -> None:
        """Log a summary of the optimization result."""
        for line in self.summary_text().splitlines():
            _logger().info("%s", line)

    def best(self, method: str = "knee") -> dict[str, Any]:
        """
        Pick one archive solution.

        Args:
            method: "knee" (smallest normalized distance to the ideal point),
                "balanced" (smallest worst normalized objective) or an
                objective name to take the best value of that objective.

        Returns:
            Dictionary with 'candidate', 'F' (user sign) and 'index'.
        """
        if len(self) == 0:
            raise ValueError("No solutions available")
        minimize = np.asarray(self.meta.get("minimize") or [True] * self.n_objectives, dtype=bool)
        F_min = np.where(minimize, self.pareto_front, -self.pareto_front)
        span = np.ptp(F_min, axis=0) + 1e-12
        F_norm = (F_min - F_min.min(axis=0)) / span
        if method == "knee":
            idx = int(np.argmin(F_norm.sum(axis=1)))
        elif method == "balanced":
            idx = int(np.argmin(F_norm.max(axis=1)))
        elif method in self.objective_names:
            idx = int(np.argmin(F_min[:, self.objective_names.index(method)]))
        else:
            options = ", ".join(["knee", "balanced", *self.objective_names])
            raise ValueError(f"Unknown method '{method}'. Use: {options}")
        return {"candidate": self.pareto_set[idx], "F": self.pareto_front[idx], "index": idx}

    def to_dataframe(self) -> Any:
        """
        Archive solutions as a pandas DataFrame.

        One column per objective (user sign) plus a ``candidate`` column.
        """
        import pandas as pd

        data: dict[str, Any] = {name: self.pareto_front[:, i] for i, name in enumerate(self.objective_names)}
        if not len(self):
            return pd.DataFrame(columns=[*self.objective_names, "candidate"])
        # object column, one cell per candidate whatever its type
        candidates = np.empty(len(self), dtype=object)
        for i, cand in enumerate(self.pareto_set):
            candidates[i] = cand
        data["candidate"] = candidates
        return pd.DataFrame(data)


__all__ = ["OptimizationResult"]
