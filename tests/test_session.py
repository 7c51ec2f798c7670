"""Tests for the session orchestrator."""

from __future__ import annotations

from collections import Counter

import numpy as np
import pytest

from discount_titration.core import (
    FILLER_CONDITION_ID,
    DegenerateRangeError,
    InvalidResponseError,
    TrialKind,
)
from discount_titration.responders import FixedSequenceResponder, HyperbolicResponder
from discount_titration.runtime import SessionConfig, SessionContext, run_session
from discount_titration.runtime.session import (
    DEFAULT_CLOSING_PAGES,
    DEFAULT_INSTRUCTION_PAGES,
    filler_due,
    run_titration_trial,
)


def _always(label: str) -> FixedSequenceResponder:
    return FixedSequenceResponder([label], fallback="repeat_last", response_time_ms=420.0)


def _small_config(**overrides) -> SessionConfig:
    values = {
        "temporal_delays": (0, 30),
        "probabilities": (50,),
        "repeats_per_condition": 30,
        "distractor_start": 2,
        "post_trial_delay_ms": 250,
        "seed": 5,
    }
    values.update(overrides)
    return SessionConfig(**values)


def test_session_with_consistent_subject_recovers_indifference_points() -> None:
    """Resolved IPs should lie within one step of the simulated subject's values."""

    config = _small_config()
    subject = HyperbolicResponder(k=0.01, h=1.0)

    summary = run_session(config, subject)

    resolved = {cid: ip for cid, ip in summary.indifference_points.items() if ip is not None}
    assert summary.resolved_count == len(resolved)
    assert summary.resolved_count > 0
    expected = {
        "t1": 1000.0,
        "t2": 1000.0 / 1.3,
        "p1": 500.0,
    }
    for condition_id, ip in resolved.items():
        assert abs(ip - expected[condition_id]) <= config.step_size


def test_session_counts_match_trial_log() -> None:
    """Trial counters should agree with the titration records."""

    summary = run_session(_small_config(), _always("B"))

    titration = summary.titration_records
    assert summary.total_trial_count == len(titration)
    per_condition = Counter(record.condition_id for record in titration)
    for condition_id, count in per_condition.items():
        assert summary.conditions[condition_id].trials_completed == count
    fillers = [record for record in summary.records if record.trial_kind is TrialKind.FILLER]
    assert summary.conditions[FILLER_CONDITION_ID].trials_completed == len(fillers)


def test_resolved_conditions_are_never_titrated_again() -> None:
    """Once a record shows an IP, no later titration trial may use that condition."""

    summary = run_session(_small_config(), _always("B"))

    resolved_at: dict[str, int] = {}
    for record in summary.titration_records:
        assert record.condition_id not in resolved_at
        if record.condition_snapshot.indifference_point is not None:
            resolved_at[record.condition_id] = record.trial_index

    assert len(resolved_at) == summary.resolved_count


def test_snapshots_preserve_bracket_ordering() -> None:
    """Every logged snapshot should satisfy bmax <= bmin <= tmin <= tmax."""

    summary = run_session(_small_config(), HyperbolicResponder(k=0.05, lapse_rate=0.2, seed=3))

    for record in summary.titration_records:
        snap = record.condition_snapshot
        assert snap.bmax <= snap.bmin <= snap.tmin <= snap.tmax


def test_fillers_follow_every_second_trial_after_threshold() -> None:
    """A filler should follow titration trial n exactly when n >= start and n is even."""

    config = _small_config(distractor_start=3)
    summary = run_session(config, _always("B"))

    records = summary.records
    n_titration = 0
    for index, record in enumerate(records):
        if record.trial_kind is not TrialKind.TITRATION:
            continue
        n_titration += 1
        expected_filler = n_titration >= 3 and n_titration % 2 == 0
        following = records[index + 1] if index + 1 < len(records) else None
        has_filler = following is not None and following.trial_kind is TrialKind.FILLER
        assert has_filler == expected_filler


def test_filler_borrows_opposite_kind_wording() -> None:
    """Fillers after temporal trials should show probability wording and vice versa."""

    summary = run_session(_small_config(), _always("A"))
    records = summary.records

    fillers = [index for index, record in enumerate(records) if record.trial_kind is TrialKind.FILLER]
    assert fillers
    for index in fillers:
        filler = records[index]
        previous = records[index - 1]
        assert previous.trial_kind is TrialKind.TITRATION
        assert filler.condition_id == FILLER_CONDITION_ID
        assert filler.stimulus_condition_id[0] != previous.condition_id[0]
        assert filler.stimulus_condition_id != FILLER_CONDITION_ID


def test_filler_falls_back_to_same_kind_without_opposite_conditions() -> None:
    """With only temporal conditions, fillers should reuse temporal wording."""

    config = _small_config(probabilities=(), distractor_start=0)
    summary = run_session(config, _always("B"))

    fillers = [record for record in summary.records if record.trial_kind is TrialKind.FILLER]
    assert fillers
    assert all(record.stimulus_condition_id.startswith("t") for record in fillers)


def test_filler_trials_never_touch_brackets() -> None:
    """The filler condition should keep its initial bracket and no IP."""

    summary = run_session(_small_config(distractor_start=0), _always("A"))

    filler = summary.conditions[FILLER_CONDITION_ID]
    assert (filler.tmin, filler.tmax, filler.bmin, filler.bmax) == (1000, 1000, 0, 0)
    assert filler.indifference_point is None
    assert filler.trials_completed > 0


def test_trial_budget_caps_titration_trials() -> None:
    """max_total_trials should stop the loop once spent."""

    summary = run_session(_small_config(max_total_trials=5, distractor_start=100), _always("A"))

    assert summary.total_trial_count == 5
    assert len(summary.titration_records) == 5


def test_payoff_trial_repeats_a_logged_choice() -> None:
    """The payoff trial should re-present one titration (reward, stimulus) pair."""

    responder = _always("B")
    summary = run_session(_small_config(), responder)

    assert summary.payoff is not None
    pairs = {(record.offered_reward, record.stimulus_text) for record in summary.titration_records}
    assert (summary.payoff.offered_reward, summary.payoff.stimulus_text) in pairs
    assert summary.records[-1] == summary.payoff
    assert summary.payoff.trial_kind is TrialKind.PAYOFF

    last_prompt = responder.prompts[-1]
    assert last_prompt.trial_kind is TrialKind.PAYOFF
    assert last_prompt.stimulus_text == summary.payoff.stimulus_text
    assert last_prompt.offered_reward == summary.payoff.offered_reward


def test_session_without_titration_trials_skips_payoff() -> None:
    """No scheduled trials means no payoff, but instructions are still shown."""

    responder = _always("A")
    summary = run_session(_small_config(repeats_per_condition=0), responder)

    assert summary.payoff is None
    assert summary.total_trial_count == 0
    assert summary.records == ()
    assert responder.prompts == []
    assert responder.pages == list(DEFAULT_INSTRUCTION_PAGES + DEFAULT_CLOSING_PAGES)


def test_prompts_carry_post_trial_delay_and_labels() -> None:
    """Every prompt should request the configured pause and offer A/B."""

    responder = _always("A")
    run_session(_small_config(max_total_trials=4), responder)

    assert responder.prompts
    for prompt in responder.prompts:
        assert prompt.post_trial_delay_ms == 250
        assert prompt.option_labels == ("A", "B")
        assert prompt.standard_amount == 1000


def test_records_keep_response_times() -> None:
    """Response times reported by the presenter should be logged."""

    summary = run_session(_small_config(max_total_trials=3), _always("A"))

    assert all(record.response_time_ms == pytest.approx(420.0) for record in summary.records)


def test_session_is_deterministic_for_fixed_seed() -> None:
    """Two runs with the same seed and responder script should match."""

    first = run_session(_small_config(seed=99), _always("B"))
    second = run_session(_small_config(seed=99), _always("B"))

    assert first.records == second.records


def test_invalid_response_aborts_without_bracket_change() -> None:
    """An unknown label should raise and leave the bracket untouched."""

    context = SessionContext.start(_small_config())
    condition = context.conditions["t2"]
    before = (condition.tmin, condition.tmax, condition.bmin, condition.bmax, condition.indifference_point)

    with pytest.raises(InvalidResponseError):
        run_titration_trial(context, condition, FixedSequenceResponder(["X"]))

    after = (condition.tmin, condition.tmax, condition.bmin, condition.bmax, condition.indifference_point)
    assert after == before
    assert context.records == []


def test_invalid_response_propagates_from_run_session() -> None:
    """run_session should surface invalid labels to the caller."""

    with pytest.raises(InvalidResponseError):
        run_session(_small_config(), FixedSequenceResponder(["A", "maybe"]))


def test_corrupted_bracket_is_fatal() -> None:
    """An inverted bracket should stop the session."""

    context = SessionContext.start(_small_config())
    condition = context.conditions["t1"]
    condition.bmax = 800
    condition.tmax = 300

    with pytest.raises(DegenerateRangeError):
        run_titration_trial(context, condition, _always("A"))


def test_titration_trial_updates_last_presented_values() -> None:
    """The context should remember the last offer and stimulus text."""

    context = SessionContext.start(_small_config(), rng=np.random.default_rng(0))
    condition = context.conditions["p1"]

    record = run_titration_trial(context, condition, _always("A"))

    assert context.total_trials_run == 1
    assert condition.trials_completed == 1
    assert context.last_offered_reward == record.offered_reward
    assert context.last_stimulus_text == record.stimulus_text
    assert "50% chance" in record.stimulus_text


@pytest.mark.parametrize(
    ("total", "expected"),
    [(2, False), (3, False), (4, True), (5, False), (6, True)],
)
def test_filler_due_requires_threshold_and_even_count(total: int, expected: bool) -> None:
    """Fillers start at the threshold and then run every second trial."""

    context = SessionContext.start(_small_config(distractor_start=4))
    context.total_trials_run = total

    assert filler_due(context) is expected


def test_summary_to_dict_lists_every_condition() -> None:
    """The summary mapping should expose counts and all condition states."""

    summary = run_session(_small_config(max_total_trials=6), _always("B"))
    payload = summary.to_dict()

    assert payload["total_trial_count"] == 6
    assert payload["number_of_ips"] == summary.resolved_count
    assert set(payload["conditions"]) == {"t1", "t2", "p1", FILLER_CONDITION_ID}
    assert payload["payoff"]["trial_kind"] == "payoff"


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"step_size": 0}, "step_size must be > 0"),
        ({"standard_amount": 1010}, "multiple of step_size"),
        ({"temporal_delays": (), "probabilities": ()}, "at least one"),
        ({"probabilities": (0,)}, r"\(0, 100\]"),
        ({"temporal_delays": (-1,)}, "temporal_delays must be >= 0"),
        ({"repeats_per_condition": -1}, "repeats_per_condition must be >= 0"),
        ({"max_total_trials": -2}, "max_total_trials must be >= 0"),
    ],
)
def test_session_config_validation(overrides: dict, message: str) -> None:
    """Out-of-range constants should be rejected at construction."""

    with pytest.raises(ValueError, match=message):
        _small_config(**overrides)
