"""Shared validation helpers for variation operators."""

from __future__ import annotations


def check_probability(name: str, value: float) -> float:
    """Return ``value`` as a float in [0, 1]; ValueError naming ``name`` otherwise."""
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}.")
    return value


__all__ = ["check_probability"]
