from __future__ import annotations

import numpy as np

from moevo.engine.algorithm.components.logbook import GenerationLog


def _log_two_generations(log: GenerationLog) -> None:
    for gen in range(2):
        record = log.make_record(
            generation=gen,
            evaluations=10 * (gen + 1),
            elapsed=0.1 * gen,
            F_user=np.array([[1.0, 4.0], [3.0, 2.0]]) - gen,
            archive_size=2,
            archive_hypervolume=None if gen == 0 else 5.0,
            population=["a", "b"] if gen == 1 else None,
        )
        log.append(record)


def test_make_record_does_not_append():
    log = GenerationLog(["cost", "value"])
    record = log.make_record(
        generation=0, evaluations=2, elapsed=0.0, F_user=np.ones((2, 2)), archive_size=1, archive_hypervolume=0.0
    )
    assert len(log) == 0
    assert record.population is None and record.population_F is None


def test_statistics_and_accessors():
    log = GenerationLog(["cost", "value"])
    _log_two_generations(log)
    assert len(log) == 2
    assert log.last is log[1]
    np.testing.assert_array_equal(log[0].f_min, [1.0, 2.0])
    np.testing.assert_array_equal(log[0].f_mean, [2.0, 3.0])
    np.testing.assert_array_equal(log[0].f_max, [3.0, 4.0])
    trace = log.hypervolume_trace()
    assert np.isnan(trace[0]) and trace[1] == 5.0
    snaps = log.snapshots()
    assert len(snaps) == 1 and snaps[0][0] == 1 and snaps[0][1] == ["a", "b"]
    assert [r.generation for r in log] == [0, 1]


def test_to_dataframe_columns():
    log = GenerationLog(["cost", "value"])
    empty = log.to_dataframe()
    assert list(empty.columns) == [
        "generation",
        "evaluations",
        "elapsed",
        "cost_min",
        "cost_mean",
        "cost_max",
        "value_min",
        "value_mean",
        "value_max",
        "archive_size",
        "archive_hv",
    ]
    _log_two_generations(log)
    df = log.to_dataframe()
    assert list(df.columns) == list(empty.columns)
    assert df["evaluations"].tolist() == [10, 20]
    assert df["cost_min"].tolist() == [1.0, 0.0]
    assert np.isnan(df["archive_hv"].iloc[0])
