from __future__ import annotations

import numpy as np
import pytest

from moevo.foundation.metrics.indicators import (
    HV_REFERENCE_OFFSET,
    additive_epsilon,
    approximate_ideal_point,
    approximate_nadir_point,
    hypervolume_ratio,
    igd,
    reference_point,
)


def test_ideal_and_nadir_over_several_fronts():
    a = np.array([[1.0, 5.0], [3.0, 2.0]])
    b = np.array([[0.5, 6.0]])
    np.testing.assert_array_equal(approximate_ideal_point(a, b), [0.5, 2.0])
    np.testing.assert_array_equal(approximate_nadir_point(a, b), [3.0, 6.0])


def test_reference_point_adds_margin():
    F = np.array([[1.0, 5.0], [3.0, 2.0]])
    np.testing.assert_array_equal(reference_point(F), [3.0 + HV_REFERENCE_OFFSET, 5.0 + HV_REFERENCE_OFFSET])
    np.testing.assert_array_equal(reference_point(F, margin=[0.0, 2.0]), [3.0, 7.0])
    with pytest.raises(ValueError):
        reference_point(F, margin=-1.0)


def test_empty_fronts_are_rejected():
    with pytest.raises(ValueError):
        approximate_nadir_point(np.empty((0, 2)))
    with pytest.raises(ValueError):
        approximate_ideal_point(np.ones((2, 2)), np.ones((2, 3)))


def test_indicators_are_zero_on_the_reference_front():
    R = np.array([[0.0, 1.0], [0.5, 0.5], [1.0, 0.0]])
    assert igd(R, R) == pytest.approx(0.0)
    assert additive_epsilon(R, R) == pytest.approx(0.0)
    assert hypervolume_ratio(R, R, [2.0, 2.0]) == pytest.approx(1.0)


def test_shifted_front():
    R = np.array([[0.0, 1.0], [1.0, 0.0]])
    F = R + 0.25
    assert additive_epsilon(F, R) == pytest.approx(0.25)
    assert igd(F, R) == pytest.approx(np.sqrt(2 * 0.25**2))
    assert hypervolume_ratio(F, R, [2.0, 2.0]) < 1.0


def test_hypervolume_ratio_zero_reference_volume():
    R = np.array([[3.0, 3.0]])
    assert hypervolume_ratio(np.array([[1.0, 1.0]]), R, [2.0, 2.0]) == 0.0
