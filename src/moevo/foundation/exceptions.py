"""
Errors raised by moevo.

Every error derives from MoevoError and carries a short message, an optional
hint on how to fix the problem and a ``details`` dict for programmatic use.
Two families exist: ConfigurationError for problems detected before a run
starts and OptimizationError for failures during a run.

Example:
    try:
        result = loop.run()
    except EvaluationError as e:
        print(f"Candidate {e.index} failed in generation {e.generation}")
    except MoevoError as e:
        print(e.suggestion)
"""

from __future__ import annotations

from typing import Any


class MoevoError(Exception):
    """
    Root of the moevo error hierarchy.

    Attributes:
        message: What went wrong.
        suggestion: How to fix it, when known; appended to ``str(error)``.
        details: Structured context (offending values, names, indices).
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = dict(details) if details else {}
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.suggestion:
            return self.message
        return f"{self.message}\n\nSuggestion: {self.suggestion}"


class ConfigurationError(MoevoError):
    """Invalid or inconsistent setup: config values, operator bindings, seeds."""


class InvalidOperatorError(ConfigurationError):
    """An operator name (or Control slot name) that is not registered."""

    def __init__(self, operator_type: str, operator_name: str, available: list[str] | None = None) -> None:
        super().__init__(
            f"Unknown {operator_type} '{operator_name}'.",
            f"Available: {', '.join(available)}" if available else None,
            {"operator_type": operator_type, "operator_name": operator_name},
        )


class MissingConfigError(ConfigurationError):
    """A required piece of setup was never provided (terminators, a mutator, ...)."""

    def __init__(self, field: str, config_class: str | None = None) -> None:
        where = f" (see {config_class})" if config_class else ""
        super().__init__(
            f"Missing required configuration: '{field}'.",
            f"Provide '{field}'{where}",
            {"field": field},
        )


class OptimizationError(MoevoError):
    """A run could not continue (bad loop usage, misbehaving operator output)."""


class EvaluationError(OptimizationError):
    """
    The fitness function failed or returned an unusable vector.

    ``index`` is the position of the offending candidate in the evaluated
    batch and ``generation`` the generation being built. The loop rolls the
    failed generation back before this propagates.
    """

    def __init__(
        self,
        message: str,
        candidate: Any = None,
        index: int | None = None,
        generation: int | None = None,
    ) -> None:
        super().__init__(
            message,
            "Check that the fitness function returns one finite value per objective",
            {"candidate": candidate, "index": index, "generation": generation},
        )
        self.candidate = candidate
        self.index = index
        self.generation = generation

    def __reduce__(self) -> tuple[Any, ...]:
        # raised inside worker processes
        return (type(self), (self.message, self.candidate, self.index, self.generation))


__all__ = [
    "MoevoError",
    "ConfigurationError",
    "InvalidOperatorError",
    "MissingConfigError",
    "OptimizationError",
    "EvaluationError",
]
