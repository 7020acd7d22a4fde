"""
Run configuration for the evolutionary loop.

``EvolutionConfig`` is frozen and validated on construction. It can be built
directly, through the fluent builder, or from a mapping that uses either
snake_case keys or the dotted option names ("survival.strategy",
"archive.capacity", ...).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from moevo.foundation.exceptions import ConfigurationError, MissingConfigError
from moevo.engine.algorithm.components.archive import PRUNING_STRATEGIES
from moevo.engine.algorithm.components.termination import Terminator

SURVIVAL_STRATEGIES: tuple[str, ...] = ("plus", "comma")

_KEY_ALIASES: dict[str, str] = {
    "mu": "mu",
    "lambda": "lambda_",
    "lambda_": "lambda_",
    "survival.strategy": "survival_strategy",
    "survival_strategy": "survival_strategy",
    "survival.n_elite": "n_elite",
    "n.elite": "n_elite",
    "n_elite": "n_elite",
    "p.recomb": "p_recomb",
    "p_recomb": "p_recomb",
    "p.mut": "p_mut",
    "p_mut": "p_mut",
    "archive.capacity": "archive_capacity",
    "archive_capacity": "archive_capacity",
    "archive.pruning": "archive_pruning",
    "archive_pruning": "archive_pruning",
    "reference.point": "reference_point",
    "reference_point": "reference_point",
    "terminators": "terminators",
    "log.pop": "log_pop",
    "log_pop": "log_pop",
    "log.stats": "log_stats",
    "log_stats": "log_stats",
    "seed": "seed",
    "n.objectives": "n_objectives",
    "n_objectives": "n_objectives",
    "minimize": "minimize",
}


def _is_auto(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in {"auto", "unbounded", "none"})


@dataclass(frozen=True)
class EvolutionConfig:
    """
    Immutable loop configuration.

    Attributes:
        mu: Population size.
        lambda_: Offspring per generation.
        survival_strategy: "plus" (parents and offspring compete) or "comma" (offspring only, needs lambda_ >= mu).
        n_elite: Parents carried over under "comma".
        p_recomb: Probability that a parent group is recombined.
        p_mut: Probability that an offspring is mutated.
        archive_capacity: Archive size limit, None for unbounded.
        archive_pruning: "crowding" or "hypervolume".
        reference_point: Hypervolume reference in user-facing sign; None derives it from the data.
        terminators: Stop conditions; any one firing ends the run.
        log_pop: Keep a population snapshot in every generation record.
        log_stats: Keep per-generation statistics.
        seed: Seed of the run's random generator.
        n_objectives: Optional cross-check against the Control.
        minimize: Optional directions, validated against ``n_objectives``.
    """

    mu: int
    lambda_: int
    survival_strategy: str = "plus"
    n_elite: int = 0
    p_recomb: float = 0.7
    p_mut: float = 0.1
    archive_capacity: Optional[int] = None
    archive_pruning: str = "crowding"
    reference_point: Optional[Tuple[float, ...]] = None
    terminators: Tuple[Terminator, ...] = ()
    log_pop: bool = False
    log_stats: bool = True
    seed: Optional[int] = None
    n_objectives: Optional[int] = None
    minimize: Optional[Tuple[bool, ...]] = None

    def __post_init__(self) -> None:
        for name in ("mu", "lambda_"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer; got {value!r}.")
        if self.survival_strategy not in SURVIVAL_STRATEGIES:
            raise ConfigurationError(
                f"Unknown survival strategy '{self.survival_strategy}'.",
                f"Use one of: {', '.join(SURVIVAL_STRATEGIES)}",
            )
        if self.survival_strategy == "comma" and self.lambda_ < self.mu:
            raise ConfigurationError(
                f"'comma' survival needs lambda >= mu; got lambda={self.lambda_}, mu={self.mu}.",
                "Increase lambda_ or use survival_strategy='plus'",
                {"mu": self.mu, "lambda_": self.lambda_},
            )
        if not 0 <= self.n_elite < self.mu:
            raise ConfigurationError(f"n_elite must be in [0, mu); got {self.n_elite}.")
        for name in ("p_recomb", "p_mut"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1]; got {value}.")
        if self.archive_capacity is not None and self.archive_capacity <= 0:
            raise ConfigurationError(
                f"archive_capacity must be positive; got {self.archive_capacity}.",
                "Use None for an unbounded archive",
            )
        if self.archive_pruning not in PRUNING_STRATEGIES:
            raise ConfigurationError(
                f"Unknown archive pruning '{self.archive_pruning}'.",
                f"Use one of: {', '.join(PRUNING_STRATEGIES)}",
            )
        for term in self.terminators:
            if not isinstance(term, Terminator):
                raise ConfigurationError(f"Terminators must be Terminator instances; got {type(term).__name__}.")
        if self.n_objectives is not None and self.n_objectives <= 0:
            raise ConfigurationError(f"n_objectives must be positive; got {self.n_objectives}.")
        if self.n_objectives is not None and self.minimize is not None and len(self.minimize) != self.n_objectives:
            raise ConfigurationError(
                f"minimize has {len(self.minimize)} entries but n_objectives is {self.n_objectives}.",
                details={"minimize": list(self.minimize), "n_objectives": self.n_objectives},
            )
        if (
            self.reference_point is not None
            and self.n_objectives is not None
            and len(self.reference_point) != self.n_objectives
        ):
            raise ConfigurationError(
                f"reference_point has {len(self.reference_point)} components but n_objectives is {self.n_objectives}."
            )

    @classmethod
    def builder(cls) -> "EvolutionConfigBuilder":
        return EvolutionConfigBuilder()

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "EvolutionConfig":
        """
        Create a configuration from a mapping.

        Keys may be snake_case field names or dotted option names, e.g.::

            EvolutionConfig.from_dict({"mu": 20, "lambda": 40, "survival.strategy": "comma",
                                       "archive.capacity": "unbounded", "reference.point": "auto"})
        """
        kwargs: Dict[str, Any] = {}
        for key, value in config.items():
            field_name = _KEY_ALIASES.get(key)
            if field_name is None:
                known = ", ".join(sorted(_KEY_ALIASES))
                raise ConfigurationError(f"Unknown configuration key '{key}'.", f"Known keys: {known}")
            if field_name in kwargs:
                raise ConfigurationError(f"Configuration key '{key}' given more than once (as '{field_name}').")
            kwargs[field_name] = value
        for required in ("mu", "lambda_"):
            if required not in kwargs:
                raise MissingConfigError(required, "EvolutionConfig")
        if "archive_capacity" in kwargs and _is_auto(kwargs["archive_capacity"]):
            kwargs["archive_capacity"] = None
        if "reference_point" in kwargs:
            ref = kwargs["reference_point"]
            kwargs["reference_point"] = None if _is_auto(ref) else tuple(float(v) for v in ref)
        if "terminators" in kwargs:
            kwargs["terminators"] = tuple(kwargs["terminators"] or ())
        if kwargs.get("minimize") is not None:
            minimize = kwargs["minimize"]
            if isinstance(minimize, bool):
                n_obj = kwargs.get("n_objectives")
                kwargs["minimize"] = None if n_obj is None else (minimize,) * int(n_obj)
            else:
                kwargs["minimize"] = tuple(bool(m) for m in minimize)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Field values keyed by snake_case name; tuples become lists, terminators stay objects."""
        out: Dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            out[f.name] = list(value) if isinstance(value, tuple) else value
        return out

    def replace(self, **changes: Any) -> "EvolutionConfig":
        """Copy with some fields changed (validated again)."""
        return dataclasses.replace(self, **changes)


class EvolutionConfigBuilder:
    """
    Fluent builder yielding an immutable EvolutionConfig.

    Examples:
        cfg = (
            EvolutionConfig.builder()
            .mu(50)
            .lambda_(100)
            .survival("comma", n_elite=2)
            .archive(capacity=100, pruning="hypervolume")
            .terminators(MaxGenerations(200))
            .fixed()
        )
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    def mu(self, value: int) -> "EvolutionConfigBuilder":
        self._cfg["mu"] = value
        return self

    def lambda_(self, value: int) -> "EvolutionConfigBuilder":
        self._cfg["lambda_"] = value
        return self

    def survival(self, strategy: str, n_elite: int = 0) -> "EvolutionConfigBuilder":
        self._cfg["survival_strategy"] = strategy
        self._cfg["n_elite"] = int(n_elite)
        return self

    def probabilities(self, *, p_recomb: float | None = None, p_mut: float | None = None) -> "EvolutionConfigBuilder":
        if p_recomb is not None:
            self._cfg["p_recomb"] = float(p_recomb)
        if p_mut is not None:
            self._cfg["p_mut"] = float(p_mut)
        return self

    def archive(self, capacity: int | None = None, pruning: str = "crowding") -> "EvolutionConfigBuilder":
        self._cfg["archive_capacity"] = capacity
        self._cfg["archive_pruning"] = pruning
        return self

    def reference_point(self, ref: Sequence[float] | None) -> "EvolutionConfigBuilder":
        self._cfg["reference_point"] = None if ref is None else tuple(float(v) for v in ref)
        return self

    def terminators(self, *terminators: Terminator) -> "EvolutionConfigBuilder":
        self._cfg["terminators"] = tuple(self._cfg.get("terminators", ())) + tuple(terminators)
        return self

    def objectives(self, n: int, minimize: bool | Sequence[bool] | None = None) -> "EvolutionConfigBuilder":
        self._cfg["n_objectives"] = int(n)
        if minimize is None:
            self._cfg["minimize"] = None
        elif isinstance(minimize, bool):
            self._cfg["minimize"] = (minimize,) * int(n)
        else:
            self._cfg["minimize"] = tuple(bool(m) for m in minimize)
        return self

    def log_pop(self, enabled: bool = True) -> "EvolutionConfigBuilder":
        self._cfg["log_pop"] = bool(enabled)
        return self

    def log_stats(self, enabled: bool = True) -> "EvolutionConfigBuilder":
        self._cfg["log_stats"] = bool(enabled)
        return self

    def seed(self, value: int | None) -> "EvolutionConfigBuilder":
        self._cfg["seed"] = value
        return self

    def fixed(self) -> EvolutionConfig:
        for required in ("mu", "lambda_"):
            if required not in self._cfg:
                raise MissingConfigError(required, "EvolutionConfig")
        return EvolutionConfig(**self._cfg)


__all__ = ["EvolutionConfig", "EvolutionConfigBuilder", "SURVIVAL_STRATEGIES"]
