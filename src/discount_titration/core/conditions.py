"""Condition parameter store.

Each delay or probability level is titrated independently through its own
bracket. The bracket is tracked by two nested pairs:

- ``tmin <= tmax`` bound the indifference point from above,
- ``bmax <= bmin`` bound it from below.

For every non-terminal condition ``bmax <= bmin <= tmin <= tmax`` holds.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

FILLER_CONDITION_ID = "filler"


@dataclass(frozen=True, slots=True)
class TemporalDelay:
    """Standard reward delivered after ``delay_days`` days."""

    delay_days: float


@dataclass(frozen=True, slots=True)
class ProbabilityDelay:
    """Standard reward delivered with ``probability_percent`` chance."""

    probability_percent: float


@dataclass(frozen=True, slots=True)
class Filler:
    """Distractor condition. Never titrated."""


ConditionKind = Union[TemporalDelay, ProbabilityDelay, Filler]


@dataclass(frozen=True, slots=True)
class ConditionSnapshot:
    """Immutable copy of one condition's bracket state.

    Parameters
    ----------
    tmin, tmax : int
        Upper bracket pair.
    bmin, bmax : int
        Lower bracket pair.
    indifference_point : int | None
        Resolved IP, if any.
    trials_completed : int
        Trials administered for the condition so far.
    """

    tmin: int
    tmax: int
    bmin: int
    bmax: int
    indifference_point: int | None
    trials_completed: int

    def to_dict(self) -> dict[str, int | None]:
        """Return a JSON-ready mapping."""

        return {
            "tmin": self.tmin,
            "tmax": self.tmax,
            "bmin": self.bmin,
            "bmax": self.bmax,
            "indifference_point": self.indifference_point,
            "trials_completed": self.trials_completed,
        }


@dataclass(slots=True)
class Condition:
    """Mutable titration state for one condition.

    Parameters
    ----------
    condition_id : str
        Stable identifier such as ``"t1"``, ``"p3"`` or ``"filler"``.
    kind : ConditionKind
        Temporal delay, probability delay or filler.
    tmin, tmax : int
        Upper bracket pair, both initialized to the standard amount.
    bmin, bmax : int, optional
        Lower bracket pair, both initialized to zero.
    trials_completed : int, optional
        Number of administered trials.
    indifference_point : int | None, optional
        Resolved IP. Once set the condition is terminal.

    Notes
    -----
    Only :func:`discount_titration.titration.bracket.apply_choice` mutates the
    bracket fields.
    """

    condition_id: str
    kind: ConditionKind
    tmin: int
    tmax: int
    bmin: int = 0
    bmax: int = 0
    trials_completed: int = 0
    indifference_point: int | None = None

    @property
    def is_filler(self) -> bool:
        """Whether this is the distractor condition."""

        return isinstance(self.kind, Filler)

    def snapshot(self) -> ConditionSnapshot:
        """Return an immutable copy of the current state."""

        return ConditionSnapshot(
            tmin=self.tmin,
            tmax=self.tmax,
            bmin=self.bmin,
            bmax=self.bmax,
            indifference_point=self.indifference_point,
            trials_completed=self.trials_completed,
        )


def initialize_conditions(
    standard_amount: int,
    temporal_delays: Sequence[float],
    probabilities: Sequence[float],
) -> dict[str, Condition]:
    """Build one condition per delay level plus the filler condition.

    Parameters
    ----------
    standard_amount : int
        Standard reward; initial value of ``tmin`` and ``tmax``.
    temporal_delays : Sequence[float]
        Delay levels in days. IDs are ``t1..tN`` in the given order.
    probabilities : Sequence[float]
        Probability levels in percent. IDs are ``p1..pM`` in the given order.

    Returns
    -------
    dict[str, Condition]
        Condition-ID to condition mapping.

    Raises
    ------
    ValueError
        If no delay or probability level is given.
    """

    if len(temporal_delays) == 0 and len(probabilities) == 0:
        raise ValueError("at least one temporal delay or probability level is required")

    standard = int(standard_amount)
    conditions: dict[str, Condition] = {}
    for index, delay in enumerate(temporal_delays):
        condition_id = f"t{index + 1}"
        conditions[condition_id] = Condition(
            condition_id=condition_id,
            kind=TemporalDelay(delay_days=delay),
            tmin=standard,
            tmax=standard,
        )
    for index, probability in enumerate(probabilities):
        condition_id = f"p{index + 1}"
        conditions[condition_id] = Condition(
            condition_id=condition_id,
            kind=ProbabilityDelay(probability_percent=probability),
            tmin=standard,
            tmax=standard,
        )
    conditions[FILLER_CONDITION_ID] = Condition(
        condition_id=FILLER_CONDITION_ID,
        kind=Filler(),
        tmin=standard,
        tmax=standard,
    )
    return conditions


def is_resolved(condition: Condition) -> bool:
    """Return whether the condition's indifference point is set."""

    return condition.indifference_point is not None


__all__ = [
    "FILLER_CONDITION_ID",
    "Condition",
    "ConditionKind",
    "ConditionSnapshot",
    "Filler",
    "ProbabilityDelay",
    "TemporalDelay",
    "initialize_conditions",
    "is_resolved",
]
