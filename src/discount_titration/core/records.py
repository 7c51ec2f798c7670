"""Append-only trial records emitted by a titration session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from discount_titration.core.conditions import ConditionSnapshot


class TrialKind(str, Enum):
    """Kinds of trials administered in one session."""

    TITRATION = "titration"
    FILLER = "filler"
    PAYOFF = "payoff"


@dataclass(frozen=True, slots=True)
class TrialRecord:
    """One completed trial.

    Parameters
    ----------
    trial_index : int
        Zero-based position in the session log.
    trial_kind : TrialKind
        Titration, filler or payoff.
    condition_id : str
        Condition the trial belongs to. Filler trials use the filler
        condition; the payoff trial uses the drawn record's condition.
    stimulus_condition_id : str
        Condition whose wording was displayed.
    offered_reward : int
        Variable amount offered as option ``A``.
    stimulus_text : str
        Exact text shown to the subject.
    chosen_label : str
        Selected option label.
    response_time_ms : float | None
        Response latency reported by the presenter.
    condition_snapshot : ConditionSnapshot
        State of ``condition_id`` after the trial completed.
    """

    trial_index: int
    trial_kind: TrialKind
    condition_id: str
    stimulus_condition_id: str
    offered_reward: int
    stimulus_text: str
    chosen_label: str
    response_time_ms: float | None
    condition_snapshot: ConditionSnapshot

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping."""

        return {
            "trial_index": self.trial_index,
            "trial_kind": self.trial_kind.value,
            "condition_id": self.condition_id,
            "stimulus_condition_id": self.stimulus_condition_id,
            "offered_reward": self.offered_reward,
            "stimulus_text": self.stimulus_text,
            "chosen_label": self.chosen_label,
            "response_time_ms": self.response_time_ms,
            "condition_snapshot": self.condition_snapshot.to_dict(),
        }


__all__ = ["TrialKind", "TrialRecord"]
