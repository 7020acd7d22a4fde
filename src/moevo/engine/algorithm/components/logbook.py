"""Per-generation statistics and optional population snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

import numpy as np


@dataclass(frozen=True)
class GenerationRecord:
    """
    Statistics of one completed generation.

    Objective statistics are reported in the user-facing sign.
    """

    generation: int
    evaluations: int
    elapsed: float
    f_min: np.ndarray
    f_mean: np.ndarray
    f_max: np.ndarray
    archive_size: int
    archive_hypervolume: float | None
    population: list[Any] | None = None
    population_F: np.ndarray | None = None

    def as_row(self, objective_names: Sequence[str]) -> dict[str, Any]:
        row: dict[str, Any] = {
            "generation": self.generation,
            "evaluations": self.evaluations,
            "elapsed": self.elapsed,
        }
        for i, name in enumerate(objective_names):
            row[f"{name}_min"] = float(self.f_min[i])
            row[f"{name}_mean"] = float(self.f_mean[i])
            row[f"{name}_max"] = float(self.f_max[i])
        row["archive_size"] = self.archive_size
        row["archive_hv"] = np.nan if self.archive_hypervolume is None else self.archive_hypervolume
        return row


@dataclass
class GenerationLog:
    """Append-only sequence of ``GenerationRecord`` with a pandas export."""

    objective_names: list[str]
    records: list[GenerationRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[GenerationRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> GenerationRecord:
        return self.records[index]

    @property
    def last(self) -> GenerationRecord | None:
        return self.records[-1] if self.records else None

    def make_record(
        self,
        *,
        generation: int,
        evaluations: int,
        elapsed: float,
        F_user: np.ndarray,
        archive_size: int,
        archive_hypervolume: float | None,
        population: list[Any] | None = None,
    ) -> GenerationRecord:
        """Build (but do not append) the record for a generation."""
        F_user = np.asarray(F_user, dtype=float)
        return GenerationRecord(
            generation=int(generation),
            evaluations=int(evaluations),
            elapsed=float(elapsed),
            f_min=F_user.min(axis=0),
            f_mean=F_user.mean(axis=0),
            f_max=F_user.max(axis=0),
            archive_size=int(archive_size),
            archive_hypervolume=archive_hypervolume,
            population=population,
            population_F=F_user.copy() if population is not None else None,
        )

    def append(self, record: GenerationRecord) -> None:
        self.records.append(record)

    def hypervolume_trace(self) -> np.ndarray:
        """Archive hypervolume per generation (NaN where it was not computed)."""
        return np.asarray(
            [np.nan if r.archive_hypervolume is None else r.archive_hypervolume for r in self.records],
            dtype=float,
        )

    def snapshots(self) -> list[tuple[int, list[Any], np.ndarray]]:
        """(generation, candidates, fitness) for every record that kept its population."""
        return [
            (r.generation, r.population, r.population_F)
            for r in self.records
            if r.population is not None and r.population_F is not None
        ]

    def to_dataframe(self) -> Any:
        """
        One row per generation.

        Columns: generation, evaluations, elapsed, ``<objective>_min/_mean/_max``,
        archive_size, archive_hv.
        """
        import pandas as pd

        rows = [record.as_row(self.objective_names) for record in self.records]
        if not rows:
            columns = ["generation", "evaluations", "elapsed"]
            for name in self.objective_names:
                columns += [f"{name}_min", f"{name}_mean", f"{name}_max"]
            return pd.DataFrame(columns=columns + ["archive_size", "archive_hv"])
        return pd.DataFrame(rows)


__all__ = ["GenerationRecord", "GenerationLog"]
