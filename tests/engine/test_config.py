from __future__ import annotations

import dataclasses

import pytest

from moevo.engine.algorithm.components.termination import MaxGenerations
from moevo.engine.config import EvolutionConfig
from moevo.foundation.exceptions import ConfigurationError, MissingConfigError


def test_defaults():
    cfg = EvolutionConfig(mu=10, lambda_=20)
    assert cfg.survival_strategy == "plus"
    assert cfg.archive_capacity is None
    assert cfg.archive_pruning == "crowding"
    assert cfg.terminators == ()
    assert cfg.log_stats is True and cfg.log_pop is False


def test_config_is_frozen():
    cfg = EvolutionConfig(mu=10, lambda_=20)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.mu = 5  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"mu": 0, "lambda_": 10},
        {"mu": 10, "lambda_": -1},
        {"mu": 10.0, "lambda_": 10},
        {"mu": True, "lambda_": 10},
        {"mu": 10, "lambda_": 5, "survival_strategy": "comma"},
        {"mu": 10, "lambda_": 10, "survival_strategy": "elitist"},
        {"mu": 10, "lambda_": 10, "n_elite": 10},
        {"mu": 10, "lambda_": 10, "p_recomb": 1.5},
        {"mu": 10, "lambda_": 10, "p_mut": -0.1},
        {"mu": 10, "lambda_": 10, "archive_capacity": 0},
        {"mu": 10, "lambda_": 10, "archive_pruning": "random"},
        {"mu": 10, "lambda_": 10, "terminators": ("stop",)},
        {"mu": 10, "lambda_": 10, "n_objectives": 0},
        {"mu": 10, "lambda_": 10, "n_objectives": 2, "minimize": (True,)},
        {"mu": 10, "lambda_": 10, "n_objectives": 2, "reference_point": (1.0, 2.0, 3.0)},
    ],
)
def test_validation_errors(kwargs):
    with pytest.raises(ConfigurationError):
        EvolutionConfig(**kwargs)


def test_comma_error_has_suggestion():
    with pytest.raises(ConfigurationError) as info:
        EvolutionConfig(mu=10, lambda_=5, survival_strategy="comma")
    assert "lambda >= mu" in str(info.value)
    assert info.value.details == {"mu": 10, "lambda_": 5}


def test_from_dict_accepts_dotted_keys():
    term = MaxGenerations(5)
    cfg = EvolutionConfig.from_dict(
        {
            "mu": 20,
            "lambda": 40,
            "survival.strategy": "comma",
            "n.elite": 2,
            "p.recomb": 0.9,
            "p.mut": 0.2,
            "archive.capacity": "unbounded",
            "archive.pruning": "hypervolume",
            "reference.point": "auto",
            "n.objectives": 2,
            "minimize": True,
            "log.pop": True,
            "terminators": [term],
            "seed": 7,
        }
    )
    assert cfg.lambda_ == 40
    assert cfg.survival_strategy == "comma"
    assert cfg.n_elite == 2
    assert cfg.archive_capacity is None
    assert cfg.archive_pruning == "hypervolume"
    assert cfg.reference_point is None
    assert cfg.minimize == (True, True)
    assert cfg.terminators == (term,)
    assert cfg.log_pop is True
    assert cfg.seed == 7


def test_from_dict_reference_point_and_capacity():
    cfg = EvolutionConfig.from_dict({"mu": 4, "lambda_": 4, "reference_point": [1, 2], "archive_capacity": 50})
    assert cfg.reference_point == (1.0, 2.0)
    assert cfg.archive_capacity == 50


def test_from_dict_errors():
    with pytest.raises(ConfigurationError, match="Unknown configuration key"):
        EvolutionConfig.from_dict({"mu": 4, "lambda_": 4, "population": 4})
    with pytest.raises(ConfigurationError, match="more than once"):
        EvolutionConfig.from_dict({"mu": 4, "lambda": 4, "lambda_": 4})
    with pytest.raises(MissingConfigError):
        EvolutionConfig.from_dict({"mu": 4})


def test_to_dict_roundtrip():
    cfg = EvolutionConfig(mu=8, lambda_=16, reference_point=(3.0, 3.0), seed=1)
    data = cfg.to_dict()
    assert data["reference_point"] == [3.0, 3.0]
    assert EvolutionConfig.from_dict(data) == cfg


def test_replace_revalidates():
    cfg = EvolutionConfig(mu=8, lambda_=16)
    assert cfg.replace(mu=4).mu == 4
    with pytest.raises(ConfigurationError):
        cfg.replace(survival_strategy="comma", mu=20)


def test_builder():
    term = MaxGenerations(10)
    cfg = (
        EvolutionConfig.builder()
        .mu(20)
        .lambda_(30)
        .survival("comma", n_elite=1)
        .probabilities(p_recomb=0.5, p_mut=0.3)
        .archive(capacity=25, pruning="hypervolume")
        .reference_point([10.0, 10.0])
        .objectives(2, minimize=[True, False])
        .terminators(term)
        .log_pop()
        .seed(3)
        .fixed()
    )
    assert cfg.mu == 20 and cfg.lambda_ == 30
    assert cfg.survival_strategy == "comma" and cfg.n_elite == 1
    assert cfg.p_recomb == 0.5 and cfg.p_mut == 0.3
    assert cfg.archive_capacity == 25
    assert cfg.reference_point == (10.0, 10.0)
    assert cfg.minimize == (True, False)
    assert cfg.terminators == (term,)
    assert cfg.log_pop is True
    assert cfg.seed == 3


def test_builder_requires_population_sizes():
    with pytest.raises(MissingConfigError):
        EvolutionConfig.builder().mu(10).fixed()
