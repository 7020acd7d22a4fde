from __future__ import annotations

import numpy as np
import pytest

from moevo.foundation.exceptions import ConfigurationError, MissingConfigError
from moevo.foundation.problem import (
    BinaryRepresentation,
    CustomRepresentation,
    PermutationRepresentation,
    RealRepresentation,
    make_representation,
    normalize_encoding,
)
from moevo.operators.binary import BitFlipMutation, OnePointCrossover
from moevo.operators.permutation import OrderCrossover, SwapMutation
from moevo.operators.real import PolynomialMutation, SBXCrossover


@pytest.mark.parametrize(
    "raw,expected",
    [("bits", "binary"), ("Float", "real"), (" perm ", "permutation"), ("custom", "custom")],
)
def test_normalize_encoding(raw, expected):
    assert normalize_encoding(raw) == expected


def test_normalize_encoding_rejects_unknown():
    with pytest.raises(ConfigurationError, match="Unknown encoding"):
        normalize_encoding("tree")


def test_binary_sample_and_check():
    rep = BinaryRepresentation(12)
    rng = np.random.default_rng(0)
    pop = rep.sample(5, rng)
    assert len(pop) == 5
    assert all(x.shape == (12,) and set(np.unique(x)) <= {0, 1} for x in pop)
    np.testing.assert_array_equal(rep.check([1, 0] * 6), np.array([1, 0] * 6, dtype=np.int8))
    with pytest.raises(ConfigurationError):
        rep.check([1, 0, 1])
    with pytest.raises(ConfigurationError):
        rep.check([2] * 12)
    assert isinstance(rep.default_mutator(), BitFlipMutation)
    assert rep.default_mutator().prob == pytest.approx(1.0 / 12)
    assert isinstance(rep.default_recombiner(), OnePointCrossover)


def test_real_sample_within_bounds():
    rep = RealRepresentation([0.0, -1.0], [1.0, 1.0])
    rng = np.random.default_rng(1)
    pop = rep.sample(50, rng)
    X = np.vstack(pop)
    assert np.all(X >= rep.lower) and np.all(X <= rep.upper)
    assert rep.n_var == 2
    with pytest.raises(ConfigurationError):
        rep.check([2.0, 0.0])
    assert isinstance(rep.default_mutator(), PolynomialMutation)
    assert isinstance(rep.default_recombiner(), SBXCrossover)


def test_real_scalar_bounds_with_n_var():
    rep = RealRepresentation(0.0, 1.0, n_var=4)
    assert rep.n_var == 4


def test_real_invalid_bounds():
    with pytest.raises(ConfigurationError):
        RealRepresentation([1.0], [0.0])


def test_permutation_sample_and_check():
    rep = PermutationRepresentation(6)
    pop = rep.sample(10, np.random.default_rng(2))
    for perm in pop:
        assert sorted(perm.tolist()) == list(range(6))
    with pytest.raises(ConfigurationError, match="not a permutation"):
        rep.check([0, 0, 1, 2, 3, 4])
    assert isinstance(rep.default_mutator(), SwapMutation)
    assert isinstance(rep.default_recombiner(), OrderCrossover)


def test_custom_representation_uses_callables():
    rep = CustomRepresentation(lambda rng: {"x": float(rng.random())}, validator=lambda c: "x" in c)
    pop = rep.sample(3, np.random.default_rng(3))
    assert all("x" in c for c in pop)
    assert rep.check({"x": 1.0}) == {"x": 1.0}
    with pytest.raises(ConfigurationError):
        rep.check({"y": 1.0})
    with pytest.raises(MissingConfigError):
        rep.default_mutator()
    with pytest.raises(MissingConfigError):
        rep.default_recombiner()


def test_make_representation_by_name():
    assert isinstance(make_representation("bits", n_bits=4), BinaryRepresentation)
    assert isinstance(make_representation("real", lower=[0], upper=[1]), RealRepresentation)
    assert isinstance(make_representation("perm", n=3), PermutationRepresentation)
