"""Protocol contracts between the titration session and its presenter.

The session owns the control loop. Everything that shows text to a subject
and collects a response is delegated to a :class:`ChoiceResponder`, so the
same session can run against a browser bridge, a terminal, or a simulated
subject.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from discount_titration.core.conditions import ConditionKind
from discount_titration.core.errors import InvalidResponseError
from discount_titration.core.records import TrialKind

OPTION_LABELS: tuple[str, str] = ("A", "B")


class ChoiceOption(str, Enum):
    """Binary choice options in one titration trial.

    Attributes
    ----------
    VARIABLE
        Option ``A``: the immediate/certain variable amount.
    STANDARD
        Option ``B``: the delayed/probabilistic standard amount.
    """

    VARIABLE = "A"
    STANDARD = "B"

    @classmethod
    def from_label(cls, label: str) -> "ChoiceOption":
        """Map an option label to a choice option.

        Parameters
        ----------
        label : str
            Label returned by the responder.

        Returns
        -------
        ChoiceOption
            Matching option.

        Raises
        ------
        InvalidResponseError
            If ``label`` is neither ``"A"`` nor ``"B"``.
        """

        for option in cls:
            if option.value == label:
                return option
        raise InvalidResponseError(
            f"response {label!r} is not one of the offered options {OPTION_LABELS!r}"
        )


@dataclass(frozen=True, slots=True)
class ChoicePrompt:
    """One binary choice presented to the subject.

    Parameters
    ----------
    stimulus_text : str
        Rendered choice description.
    trial_kind : TrialKind
        Titration, filler or payoff.
    condition_kind : ConditionKind
        Kind of the condition whose wording is displayed. Simulated subjects
        use it to value the standard option.
    offered_reward : int
        Variable amount offered as option ``A``.
    standard_amount : int
        Standard amount offered as option ``B``.
    option_labels : tuple[str, ...], optional
        Labels of the selectable options.
    post_trial_delay_ms : int, optional
        Pause requested after the response.
    """

    stimulus_text: str
    trial_kind: TrialKind
    condition_kind: ConditionKind
    offered_reward: int
    standard_amount: int
    option_labels: tuple[str, ...] = OPTION_LABELS
    post_trial_delay_ms: int = 0


@dataclass(frozen=True, slots=True)
class ChoiceResponse:
    """Response collected for one :class:`ChoicePrompt`.

    Parameters
    ----------
    chosen_label : str
        Selected option label.
    response_time_ms : float | None, optional
        Response latency, when the presenter measures it.
    """

    chosen_label: str
    response_time_ms: float | None = None


@runtime_checkable
class ChoiceResponder(Protocol):
    """Interface for the collaborator that presents trials.

    Notes
    -----
    Calls are synchronous and never overlap. A session either completes or
    is abandoned by the caller; there is no timeout handling in the core.
    """

    def present_instructions(self, pages: Sequence[str]) -> None:
        """Show instruction pages and return once the subject continues."""

    def present_choice(self, prompt: ChoicePrompt) -> ChoiceResponse:
        """Present one binary choice and block until a response arrives.

        Parameters
        ----------
        prompt : ChoicePrompt
            Rendered trial.

        Returns
        -------
        ChoiceResponse
            Selected label and optional response time.
        """


__all__ = [
    "OPTION_LABELS",
    "ChoiceOption",
    "ChoicePrompt",
    "ChoiceResponder",
    "ChoiceResponse",
]
