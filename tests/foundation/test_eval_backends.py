import numpy as np
import pytest

from moevo.foundation.eval.backends import (
    JoblibEvalBackend,
    MultiprocessingEvalBackend,
    SerialEvalBackend,
    resolve_eval_backend,
)
from moevo.foundation.exceptions import EvaluationError


def sphere_pair(x):
    x = np.asarray(x, dtype=float)
    return [float(np.sum(x * x)), float(np.sum((x - 1.0) ** 2))]


def fails_on_negative(x):
    if x[0] < 0:
        raise RuntimeError("negative input")
    return [float(x[0])]


CANDIDATES = [np.array([1.0, 2.0]), np.array([0.5, -0.5]), np.array([3.0, 0.0]), np.array([0.0, 0.0])]


def test_serial_eval_backend_matches_direct():
    res = SerialEvalBackend().evaluate(CANDIDATES, sphere_pair)
    assert len(res) == len(CANDIDATES)
    for cand, values in zip(CANDIDATES, res.values):
        np.testing.assert_allclose(values, sphere_pair(cand))


def test_multiprocessing_eval_backend_matches_serial():
    serial = SerialEvalBackend().evaluate(CANDIDATES, sphere_pair)
    mp = MultiprocessingEvalBackend(n_workers=2, chunk_size=1).evaluate(CANDIDATES, sphere_pair)
    np.testing.assert_allclose(np.vstack(mp.values), np.vstack(serial.values))


def test_joblib_eval_backend_keeps_order():
    serial = SerialEvalBackend().evaluate(CANDIDATES, sphere_pair)
    jl = JoblibEvalBackend(n_jobs=2, prefer="threads").evaluate(CANDIDATES, sphere_pair)
    np.testing.assert_allclose(np.vstack(jl.values), np.vstack(serial.values))


def test_failure_becomes_evaluation_error_with_index():
    cands = [np.array([1.0]), np.array([2.0]), np.array([-1.0])]
    with pytest.raises(EvaluationError) as info:
        SerialEvalBackend().evaluate(cands, fails_on_negative)
    assert info.value.index == 2
    assert "negative input" in str(info.value)
    assert isinstance(info.value.__cause__, RuntimeError)


def test_failure_inside_worker_keeps_index():
    cands = [np.array([1.0]), np.array([2.0]), np.array([-1.0])]
    with pytest.raises(EvaluationError) as info:
        MultiprocessingEvalBackend(n_workers=2, chunk_size=1).evaluate(cands, fails_on_negative)
    assert info.value.index == 2


@pytest.mark.parametrize(
    "name,cls",
    [(None, SerialEvalBackend), ("serial", SerialEvalBackend), ("multiprocessing", MultiprocessingEvalBackend), ("joblib", JoblibEvalBackend)],
)
def test_resolve_eval_backend(name, cls):
    assert isinstance(resolve_eval_backend(name, n_workers=2), cls)


def test_resolve_unknown_backend():
    with pytest.raises(ValueError, match="Unknown evaluation backend"):
        resolve_eval_backend("gpu")
