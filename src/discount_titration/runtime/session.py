"""Session orchestration for delay/probability discounting titration.

A session runs four phases in strict order:

1. instruction pages,
2. the titration loop over a repeat-free condition sequence, with filler
   trials interleaved once enough trials have run,
3. one payoff trial re-presenting a randomly drawn titration choice,
4. summary assembly.

The session owns the control loop and calls the injected
:class:`~discount_titration.core.contracts.ChoiceResponder` synchronously for
every trial.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from discount_titration.core.conditions import (
    FILLER_CONDITION_ID,
    Condition,
    ConditionKind,
    ConditionSnapshot,
    Filler,
    ProbabilityDelay,
    TemporalDelay,
    initialize_conditions,
)
from discount_titration.core.contracts import ChoiceOption, ChoicePrompt, ChoiceResponder, ChoiceResponse
from discount_titration.core.errors import InvalidResponseError
from discount_titration.core.records import TrialKind, TrialRecord
from discount_titration.titration.bracket import apply_choice
from discount_titration.titration.sampler import sample_filler_reward, sample_reward
from discount_titration.titration.sequencer import TrialSpec, build_sequence, should_run
from discount_titration.titration.stimulus import StimulusTemplates, format_stimulus

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTION_PAGES: tuple[str, ...] = (
    "You will make a series of choices between amounts of money received after "
    "some delay or with some probability. For example: receive 200 now, or 1000 "
    "in 30 days; receive 500 for sure, or 1000 with a 25% chance.",
    "When the task ends, one of your answers is drawn at random and paid out as "
    "you chose it. Immediate amounts are paid at the end of the session, delayed "
    "amounts once the delay has passed, and probabilistic amounts according to "
    "their probability.",
)
DEFAULT_CLOSING_PAGES: tuple[str, ...] = (
    "The task is complete. Thank you for participating.",
)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Constants for one titration session.

    Parameters
    ----------
    standard_amount : int, optional
        Standard reward, a positive multiple of ``step_size``.
    step_size : int, optional
        Reward grid resolution. Also the convergence threshold.
    temporal_delays : tuple[float, ...], optional
        Delay levels in days.
    probabilities : tuple[float, ...], optional
        Probability levels in percent, each in ``(0, 100]``.
    repeats_per_condition : int, optional
        Maximum number of titration trials per condition.
    distractor_start : int, optional
        Filler trials are interleaved on every second trial once this many
        titration trials have run.
    post_trial_delay_ms : int, optional
        Pause requested from the presenter after each response.
    max_total_trials : int | None, optional
        Optional cap on titration trials across all conditions.
    seed : int | None, optional
        Seed for the session random generator.
    stimuli : StimulusTemplates, optional
        Choice wording.
    instruction_pages : tuple[str, ...], optional
        Pages shown before the titration loop.
    closing_pages : tuple[str, ...], optional
        Pages shown after the payoff trial.

    Raises
    ------
    ValueError
        If any constant is out of range.
    """

    standard_amount: int = 1000
    step_size: int = 50
    temporal_delays: tuple[float, ...] = (0, 2, 30, 180, 365)
    probabilities: tuple[float, ...] = (100, 90, 75, 50, 25)
    repeats_per_condition: int = 30
    distractor_start: int = 70
    post_trial_delay_ms: int = 500
    max_total_trials: int | None = None
    seed: int | None = None
    stimuli: StimulusTemplates = field(default_factory=StimulusTemplates)
    instruction_pages: tuple[str, ...] = DEFAULT_INSTRUCTION_PAGES
    closing_pages: tuple[str, ...] = DEFAULT_CLOSING_PAGES

    def __post_init__(self) -> None:
        if self.step_size <= 0:
            raise ValueError("step_size must be > 0")
        if self.standard_amount <= 0:
            raise ValueError("standard_amount must be > 0")
        if self.standard_amount % self.step_size != 0:
            raise ValueError("standard_amount must be a multiple of step_size")
        if len(self.temporal_delays) == 0 and len(self.probabilities) == 0:
            raise ValueError("at least one temporal delay or probability level is required")
        for delay in self.temporal_delays:
            if delay < 0:
                raise ValueError("temporal_delays must be >= 0")
        for probability in self.probabilities:
            if probability <= 0 or probability > 100:
                raise ValueError("probabilities must be within (0, 100]")
        if self.repeats_per_condition < 0:
            raise ValueError("repeats_per_condition must be >= 0")
        if self.distractor_start < 0:
            raise ValueError("distractor_start must be >= 0")
        if self.post_trial_delay_ms < 0:
            raise ValueError("post_trial_delay_ms must be >= 0")
        if self.max_total_trials is not None and self.max_total_trials < 0:
            raise ValueError("max_total_trials must be >= 0")

    @property
    def threshold(self) -> int:
        """Convergence threshold on ``tmax - bmax``."""

        return self.step_size


@dataclass(slots=True)
class SessionContext:
    """Mutable state shared by every step of one session.

    Parameters
    ----------
    config : SessionConfig
        Session constants.
    conditions : dict[str, Condition]
        Condition-ID to condition mapping, filler included.
    rng : numpy.random.Generator
        Random generator for sampling, sequencing and the payoff draw.
    total_trials_run : int, optional
        Titration trials administered so far.
    last_offered_reward : int, optional
        Amount offered on the most recent trial.
    last_stimulus_text : str, optional
        Text shown on the most recent trial.
    resolved_count : int, optional
        Conditions resolved so far.
    records : list[TrialRecord], optional
        Append-only trial log.
    """

    config: SessionConfig
    conditions: dict[str, Condition]
    rng: np.random.Generator
    total_trials_run: int = 0
    last_offered_reward: int = 0
    last_stimulus_text: str = ""
    resolved_count: int = 0
    records: list[TrialRecord] = field(default_factory=list)

    @classmethod
    def start(cls, config: SessionConfig, *, rng: np.random.Generator | None = None) -> "SessionContext":
        """Create a fresh context with default-initialized conditions."""

        return cls(
            config=config,
            conditions=initialize_conditions(
                config.standard_amount,
                config.temporal_delays,
                config.probabilities,
            ),
            rng=rng if rng is not None else np.random.default_rng(config.seed),
        )

    @property
    def n_titrated_conditions(self) -> int:
        """Number of non-filler conditions."""

        return sum(1 for condition in self.conditions.values() if not condition.is_filler)

    def append_record(
        self,
        *,
        trial_kind: TrialKind,
        condition: Condition,
        stimulus_condition_id: str,
        response: ChoiceResponse,
    ) -> TrialRecord:
        """Log the most recently presented trial."""

        record = TrialRecord(
            trial_index=len(self.records),
            trial_kind=trial_kind,
            condition_id=condition.condition_id,
            stimulus_condition_id=stimulus_condition_id,
            offered_reward=self.last_offered_reward,
            stimulus_text=self.last_stimulus_text,
            chosen_label=response.chosen_label,
            response_time_ms=response.response_time_ms,
            condition_snapshot=condition.snapshot(),
        )
        self.records.append(record)
        return record


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Final result of one session.

    Parameters
    ----------
    total_trial_count : int
        Titration trials administered.
    resolved_count : int
        Conditions whose indifference point was resolved.
    conditions : dict[str, ConditionSnapshot]
        Final state of every condition, filler included.
    records : tuple[TrialRecord, ...]
        Full trial log, payoff trial last.
    payoff : TrialRecord | None
        Real-stakes trial, or ``None`` when no titration trial ran.
    """

    total_trial_count: int
    resolved_count: int
    conditions: dict[str, ConditionSnapshot]
    records: tuple[TrialRecord, ...]
    payoff: TrialRecord | None

    @property
    def titration_records(self) -> tuple[TrialRecord, ...]:
        """Records of titration trials only."""

        return tuple(record for record in self.records if record.trial_kind is TrialKind.TITRATION)

    @property
    def indifference_points(self) -> dict[str, int | None]:
        """Resolved IP per titrated condition."""

        return {
            condition_id: snapshot.indifference_point
            for condition_id, snapshot in self.conditions.items()
            if condition_id != FILLER_CONDITION_ID
        }

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready summary mapping."""

        return {
            "total_trial_count": self.total_trial_count,
            "number_of_ips": self.resolved_count,
            "conditions": {
                condition_id: snapshot.to_dict()
                for condition_id, snapshot in self.conditions.items()
            },
            "payoff": None if self.payoff is None else self.payoff.to_dict(),
        }


def run_session(
    config: SessionConfig,
    responder: ChoiceResponder,
    *,
    rng: np.random.Generator | None = None,
) -> SessionSummary:
    """Run a complete titration session.

    Parameters
    ----------
    config : SessionConfig
        Session constants.
    responder : ChoiceResponder
        Presenter that shows pages and collects choices.
    rng : numpy.random.Generator | None, optional
        Random generator. Defaults to one seeded with ``config.seed``.

    Returns
    -------
    SessionSummary
        Trial counts, final condition states, trial log and payoff trial.

    Raises
    ------
    InvalidResponseError
        If the responder returns a label other than ``"A"`` or ``"B"``.
    DegenerateRangeError
        If a condition bracket is found inverted.
    """

    context = SessionContext.start(config, rng=rng)
    sequence = build_sequence(context.conditions, config.repeats_per_condition, rng=context.rng)

    if config.instruction_pages:
        responder.present_instructions(config.instruction_pages)

    run_titration_loop(context, sequence, responder)
    payoff = run_payoff_trial(context, responder)

    if config.closing_pages:
        responder.present_instructions(config.closing_pages)

    summary = summarize(context, payoff=payoff)
    logger.info(
        "session finished: %d titration trials, %d/%d conditions resolved",
        summary.total_trial_count,
        summary.resolved_count,
        context.n_titrated_conditions,
    )
    return summary


def run_titration_loop(
    context: SessionContext,
    sequence: Sequence[TrialSpec],
    responder: ChoiceResponder,
) -> None:
    """Administer the scheduled titration trials and interleaved fillers.

    Resolved conditions are skipped without consuming a trial. The loop ends
    early once every condition is resolved or ``max_total_trials`` is spent.
    """

    config = context.config
    n_conditions = context.n_titrated_conditions
    for spec in sequence:
        if config.max_total_trials is not None and context.total_trials_run >= config.max_total_trials:
            logger.info("trial budget of %d exhausted", config.max_total_trials)
            break
        if context.resolved_count >= n_conditions:
            break
        if not should_run(spec, context.conditions):
            continue

        condition = context.conditions[spec.condition_id]
        run_titration_trial(context, condition, responder)
        if filler_due(context):
            run_filler_trial(context, responder, previous=condition)


def run_titration_trial(
    context: SessionContext,
    condition: Condition,
    responder: ChoiceResponder,
) -> TrialRecord:
    """Run one titration trial and update the condition's bracket."""

    config = context.config
    context.total_trials_run += 1
    condition.trials_completed += 1

    offer = sample_reward(condition, config.step_size, rng=context.rng)
    text = format_stimulus(condition.kind, offer, config.standard_amount, config.stimuli)
    context.last_offered_reward = offer
    context.last_stimulus_text = text

    response = _present(context, responder, trial_kind=TrialKind.TITRATION, kind=condition.kind)
    choice = _parse_choice(response, condition_id=condition.condition_id)
    if apply_choice(
        condition,
        choice,
        offer,
        standard_amount=config.standard_amount,
        threshold=config.threshold,
    ):
        context.resolved_count += 1

    return context.append_record(
        trial_kind=TrialKind.TITRATION,
        condition=condition,
        stimulus_condition_id=condition.condition_id,
        response=response,
    )


def filler_due(context: SessionContext) -> bool:
    """Return whether a filler trial follows the current titration trial.

    Fillers start at ``distractor_start`` titration trials and then run on
    every second trial.
    """

    total = context.total_trials_run
    return total >= context.config.distractor_start and total % 2 == 0


def run_filler_trial(
    context: SessionContext,
    responder: ChoiceResponder,
    *,
    previous: Condition,
) -> TrialRecord:
    """Run one filler trial worded like a condition of the opposite kind.

    The response is recorded but never updates any bracket.
    """

    config = context.config
    filler = context.conditions[FILLER_CONDITION_ID]
    displayed = pick_filler_wording(context, previous=previous)
    filler.trials_completed += 1

    offer = sample_filler_reward(config.standard_amount, config.step_size, rng=context.rng)
    text = format_stimulus(displayed.kind, offer, config.standard_amount, config.stimuli)
    context.last_offered_reward = offer
    context.last_stimulus_text = text

    response = _present(context, responder, trial_kind=TrialKind.FILLER, kind=displayed.kind)
    _parse_choice(response, condition_id=filler.condition_id)
    return context.append_record(
        trial_kind=TrialKind.FILLER,
        condition=filler,
        stimulus_condition_id=displayed.condition_id,
        response=response,
    )


def pick_filler_wording(context: SessionContext, *, previous: Condition) -> Condition:
    """Draw the condition whose wording a filler trial borrows.

    The draw is uniform over conditions of the opposite kind to ``previous``
    (temporal and probability swap), resolved ones included. When the
    configuration has no condition of the opposite kind, the draw falls back
    to conditions of the same kind as ``previous``.
    """

    target = opposite_kind(previous.kind)
    pool = [condition for condition in context.conditions.values() if isinstance(condition.kind, target)]
    if not pool:
        pool = [
            condition
            for condition in context.conditions.values()
            if isinstance(condition.kind, type(previous.kind))
        ]
    return pool[int(context.rng.integers(len(pool)))]


def opposite_kind(kind: ConditionKind) -> type:
    """Return the condition-kind class a filler trial should borrow from."""

    if isinstance(kind, TemporalDelay):
        return ProbabilityDelay
    if isinstance(kind, ProbabilityDelay):
        return TemporalDelay
    if isinstance(kind, Filler):
        return Filler
    raise TypeError(f"unsupported condition kind: {kind!r}")


def run_payoff_trial(context: SessionContext, responder: ChoiceResponder) -> TrialRecord | None:
    """Re-present one uniformly drawn titration choice for real stakes.

    Returns
    -------
    TrialRecord | None
        Payoff record, or ``None`` when no titration trial was administered.
    """

    candidates = [record for record in context.records if record.trial_kind is TrialKind.TITRATION]
    if not candidates:
        logger.warning("no titration trial completed; skipping payoff trial")
        return None

    drawn = candidates[int(context.rng.integers(len(candidates)))]
    context.last_offered_reward = drawn.offered_reward
    context.last_stimulus_text = drawn.stimulus_text

    condition = context.conditions[drawn.condition_id]
    displayed = context.conditions[drawn.stimulus_condition_id]
    response = _present(context, responder, trial_kind=TrialKind.PAYOFF, kind=displayed.kind)
    _parse_choice(response, condition_id=condition.condition_id)
    record = context.append_record(
        trial_kind=TrialKind.PAYOFF,
        condition=condition,
        stimulus_condition_id=drawn.stimulus_condition_id,
        response=response,
    )
    logger.info(
        "payoff trial drew record %d (%s, offer=%d): chose %s",
        drawn.trial_index,
        drawn.condition_id,
        drawn.offered_reward,
        record.chosen_label,
    )
    return record


def summarize(context: SessionContext, *, payoff: TrialRecord | None) -> SessionSummary:
    """Assemble the final session summary."""

    return SessionSummary(
        total_trial_count=context.total_trials_run,
        resolved_count=context.resolved_count,
        conditions={
            condition_id: condition.snapshot()
            for condition_id, condition in context.conditions.items()
        },
        records=tuple(context.records),
        payoff=payoff,
    )


def _present(
    context: SessionContext,
    responder: ChoiceResponder,
    *,
    trial_kind: TrialKind,
    kind: ConditionKind,
) -> ChoiceResponse:
    """Show the last rendered stimulus and wait for a response."""

    prompt = ChoicePrompt(
        stimulus_text=context.last_stimulus_text,
        trial_kind=trial_kind,
        condition_kind=kind,
        offered_reward=context.last_offered_reward,
        standard_amount=context.config.standard_amount,
        post_trial_delay_ms=context.config.post_trial_delay_ms,
    )
    return responder.present_choice(prompt)


def _parse_choice(response: ChoiceResponse, *, condition_id: str) -> ChoiceOption:
    """Map a response label to a choice option, logging invalid labels."""

    try:
        return ChoiceOption.from_label(response.chosen_label)
    except InvalidResponseError:
        logger.error("invalid response %r on condition %s", response.chosen_label, condition_id)
        raise


__all__ = [
    "DEFAULT_CLOSING_PAGES",
    "DEFAULT_INSTRUCTION_PAGES",
    "SessionConfig",
    "SessionContext",
    "SessionSummary",
    "filler_due",
    "opposite_kind",
    "pick_filler_wording",
    "run_filler_trial",
    "run_payoff_trial",
    "run_session",
    "run_titration_loop",
    "run_titration_trial",
    "summarize",
]
