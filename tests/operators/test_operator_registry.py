from __future__ import annotations

import pytest

from moevo.operators import operator_registry
from moevo.operators.base import MatingSelector, Mutator, Operator, Recombiner, SurvivalSelector


def test_registry_is_shared():
    assert operator_registry() is operator_registry()


@pytest.mark.parametrize(
    "name,base",
    [
        ("bitflip", Mutator),
        ("one_point", Recombiner),
        ("uniform_crossover", Recombiner),
        ("gaussian", Mutator),
        ("pm", Mutator),
        ("sbx", Recombiner),
        ("swap", Mutator),
        ("ox", Recombiner),
        ("pmx", Recombiner),
        ("tournament", MatingSelector),
        ("random", MatingSelector),
        ("nsga2", SurvivalSelector),
        ("hypervolume", SurvivalSelector),
        ("greedy", SurvivalSelector),
    ],
)
def test_registered_names_resolve_to_operator_classes(name, base):
    cls = operator_registry().get(name)
    assert issubclass(cls, base)
    assert issubclass(cls, Operator)


def test_operator_repr_shows_parameters():
    cls = operator_registry().get("bitflip")
    assert repr(cls(prob=0.25)) == "BitFlipMutation(prob=0.25)"
    assert cls(prob=0.25).params() == {"prob": 0.25}
