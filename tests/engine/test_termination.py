from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

from moevo.engine.algorithm.components.archive import ParetoArchive
from moevo.engine.algorithm.components.termination import (
    HypervolumeStagnation,
    HypervolumeTarget,
    MaxEvaluations,
    MaxGenerations,
    MaxTime,
    TargetFitness,
)


def _state(**kwargs):
    defaults = {
        "generation": 0,
        "evaluations": 0,
        "elapsed": 0.0,
        "population": None,
        "archive": ParetoArchive(2),
        "objective_signs": np.array([1.0, 1.0]),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def test_max_generations():
    term = MaxGenerations(3)
    assert not term.should_stop(_state(generation=2))
    assert term.should_stop(_state(generation=3))
    assert "generation limit" in term.message
    assert MaxGenerations(0).should_stop(_state())
    with pytest.raises(ValueError):
        MaxGenerations(-1)


def test_max_evaluations():
    term = MaxEvaluations(100)
    assert not term.should_stop(_state(evaluations=99))
    assert term.should_stop(_state(evaluations=120))
    assert "120/100" in term.message


def test_max_time():
    term = MaxTime(1.5)
    assert not term.should_stop(_state(elapsed=1.0))
    assert term.should_stop(_state(elapsed=2.0))
    with pytest.raises(ValueError):
        MaxTime(0)


def test_target_fitness_uses_user_sign():
    archive = ParetoArchive(2)
    # second objective is maximized: stored negated
    archive.update(["a"], [[1.0, -8.0]])
    signs = np.array([1.0, -1.0])
    assert TargetFitness([1.0, 8.0]).should_stop(_state(archive=archive, objective_signs=signs))
    assert not TargetFitness([1.0, 9.0]).should_stop(_state(archive=archive, objective_signs=signs))
    assert TargetFitness([1.0, 9.0], tol=1.0).should_stop(_state(archive=archive, objective_signs=signs))


def test_target_fitness_empty_archive():
    assert not TargetFitness([0.0, 0.0]).should_stop(_state())


def test_hypervolume_target():
    archive = ParetoArchive(2)
    archive.update(["a"], [[1.0, 1.0]])
    term = HypervolumeTarget(8.0, ref=[3.0, 5.0])
    assert term.should_stop(_state(archive=archive))
    assert term.last_value == pytest.approx(8.0)
    term.reset()
    assert term.last_value is None
    assert not HypervolumeTarget(9.0, ref=[3.0, 5.0]).should_stop(_state(archive=archive))


def test_hypervolume_target_without_reference_waits():
    assert not HypervolumeTarget(1.0).should_stop(_state())


def test_stagnation_fires_after_window_without_gain():
    archive = ParetoArchive(2)
    archive.update(["a"], [[1.0, 1.0]])
    term = HypervolumeStagnation(window=3, epsilon=1e-9, ref=[2.0, 2.0])
    state = _state(archive=archive)
    assert [term.should_stop(state) for _ in range(3)] == [False, False, False]
    assert term.should_stop(state)
    assert "stagnated" in term.message
    assert len(term.history) == 4


def test_stagnation_keeps_running_while_improving():
    archive = ParetoArchive(2)
    term = HypervolumeStagnation(window=2, epsilon=1e-9, ref=[10.0, 10.0])
    state = _state(archive=archive)
    for step in range(6):
        archive.update([f"s{step}"], [[5.0 - step * 0.5, 5.0 - step * 0.5]])
        assert not term.should_stop(state)


def test_stagnation_freezes_archive_reference():
    archive = ParetoArchive(2)
    archive.update(["a"], [[1.0, 1.0]])
    term = HypervolumeStagnation(window=1, epsilon=0.0)
    state = _state(archive=archive)
    assert not term.should_stop(state)
    # a far-away dominated point moves the archive reference but not the frozen one
    archive.update(["b"], [[50.0, 50.0]])
    assert term.should_stop(state)
    term.reset()
    assert term.history == []


def test_stagnation_relative_mode():
    archive = ParetoArchive(2)
    archive.update(["a"], [[1.0, 1.0]])
    term = HypervolumeStagnation(window=1, epsilon=0.5, ref=[3.0, 3.0], mode="rel")
    state = _state(archive=archive)
    term.should_stop(state)
    archive.update(["b"], [[0.5, 0.5]])
    # 4.0 -> 6.25 is a gain of 2.25 > 0.5 * 4.0
    assert not term.should_stop(state)


@pytest.mark.parametrize("kwargs", [{"window": 0}, {"epsilon": -1.0}, {"mode": "pct"}])
def test_stagnation_invalid(kwargs):
    with pytest.raises(ValueError):
        HypervolumeStagnation(**kwargs)


def test_repr_lists_parameters():
    assert repr(MaxGenerations(5)) == "MaxGenerations(n=5)"
