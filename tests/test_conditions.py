"""Tests for the condition parameter store."""

from __future__ import annotations

import pytest

from discount_titration.core import (
    FILLER_CONDITION_ID,
    Filler,
    ProbabilityDelay,
    TemporalDelay,
    initialize_conditions,
    is_resolved,
)


def test_initialize_conditions_builds_one_condition_per_level() -> None:
    """Every delay and probability level plus the filler should get a condition."""

    conditions = initialize_conditions(1000, [0, 30, 365], [90, 25])

    assert list(conditions) == ["t1", "t2", "t3", "p1", "p2", FILLER_CONDITION_ID]
    assert conditions["t2"].kind == TemporalDelay(delay_days=30)
    assert conditions["p2"].kind == ProbabilityDelay(probability_percent=25)
    assert conditions[FILLER_CONDITION_ID].kind == Filler()
    assert conditions[FILLER_CONDITION_ID].is_filler
    assert not conditions["t1"].is_filler


def test_initialize_conditions_uses_standard_derived_defaults() -> None:
    """Brackets should start at [0, standard] with no trials and no IP."""

    conditions = initialize_conditions(1000, [2], [50])

    for condition in conditions.values():
        assert condition.tmin == 1000
        assert condition.tmax == 1000
        assert condition.bmin == 0
        assert condition.bmax == 0
        assert condition.trials_completed == 0
        assert condition.indifference_point is None
        assert not is_resolved(condition)


def test_initialize_conditions_requires_some_level() -> None:
    """A session without any titrated level should be rejected."""

    with pytest.raises(ValueError, match="at least one temporal delay or probability level"):
        initialize_conditions(1000, [], [])


def test_is_resolved_tracks_indifference_point() -> None:
    """A condition is resolved exactly when its IP is set."""

    condition = initialize_conditions(1000, [30], [])["t1"]
    condition.indifference_point = 650

    assert is_resolved(condition)


def test_snapshot_is_detached_from_condition() -> None:
    """Snapshots should not change when the condition is mutated later."""

    condition = initialize_conditions(1000, [30], [])["t1"]
    snapshot = condition.snapshot()
    condition.tmin = 400
    condition.trials_completed = 3

    assert snapshot.tmin == 1000
    assert snapshot.trials_completed == 0
    assert snapshot.to_dict() == {
        "tmin": 1000,
        "tmax": 1000,
        "bmin": 0,
        "bmax": 0,
        "indifference_point": None,
        "trials_completed": 0,
    }
