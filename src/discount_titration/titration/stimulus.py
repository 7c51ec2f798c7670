"""Render a condition and an offered amount into choice text."""

from __future__ import annotations

import string
from dataclasses import dataclass

from discount_titration.core.conditions import ConditionKind, Filler, ProbabilityDelay, TemporalDelay

DEFAULT_TEMPORAL_TEMPLATE = "(A) Receive {variable} now. (B) Receive {standard} in {delay} days."
DEFAULT_PROBABILITY_TEMPLATE = (
    "(A) Receive {variable} for sure. (B) Receive {standard} with a {probability}% chance."
)

_TEMPORAL_FIELDS = frozenset({"variable", "standard", "delay"})
_PROBABILITY_FIELDS = frozenset({"variable", "standard", "probability"})


@dataclass(frozen=True, slots=True)
class StimulusTemplates:
    """``str.format`` templates for the two titrated condition kinds.

    Parameters
    ----------
    temporal : str, optional
        Template with ``{variable}``, ``{standard}`` and ``{delay}`` fields.
    probability : str, optional
        Template with ``{variable}``, ``{standard}`` and ``{probability}``
        fields.

    Raises
    ------
    ValueError
        If a template references an unknown or positional field.
    """

    temporal: str = DEFAULT_TEMPORAL_TEMPLATE
    probability: str = DEFAULT_PROBABILITY_TEMPLATE

    def __post_init__(self) -> None:
        _validate_template(self.temporal, allowed=_TEMPORAL_FIELDS, field_name="temporal")
        _validate_template(self.probability, allowed=_PROBABILITY_FIELDS, field_name="probability")


def format_stimulus(
    kind: ConditionKind,
    offered_reward: int,
    standard_amount: int,
    templates: StimulusTemplates,
) -> str:
    """Render the choice text for one trial.

    Parameters
    ----------
    kind : ConditionKind
        Kind of the displayed condition.
    offered_reward : int
        Variable amount (option ``A``).
    standard_amount : int
        Standard amount (option ``B``).
    templates : StimulusTemplates
        Wording per condition kind.

    Returns
    -------
    str
        Stimulus text.

    Raises
    ------
    ValueError
        If ``kind`` is :class:`Filler`; filler trials borrow the wording of a
        titrated condition.
    """

    if isinstance(kind, TemporalDelay):
        return templates.temporal.format(
            variable=offered_reward,
            standard=standard_amount,
            delay=_format_number(kind.delay_days),
        )
    if isinstance(kind, ProbabilityDelay):
        return templates.probability.format(
            variable=offered_reward,
            standard=standard_amount,
            probability=_format_number(kind.probability_percent),
        )
    if isinstance(kind, Filler):
        raise ValueError("filler conditions have no stimulus wording of their own")
    raise TypeError(f"unsupported condition kind: {kind!r}")


def _format_number(value: float) -> str:
    """Render integral floats without a trailing ``.0``."""

    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


def _validate_template(template: str, *, allowed: frozenset[str], field_name: str) -> None:
    """Check that a template only uses known named fields."""

    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as exc:
        raise ValueError(f"stimuli.{field_name} is not a valid format string: {exc}") from exc

    used = {name for _, name, _, _ in parsed if name is not None}
    if "" in used or any(name.isdigit() for name in used):
        raise ValueError(f"stimuli.{field_name} must use named fields only")
    unknown = sorted(used - allowed)
    if unknown:
        raise ValueError(
            f"stimuli.{field_name} has unknown fields {unknown}; allowed: {sorted(allowed)}"
        )


__all__ = [
    "DEFAULT_PROBABILITY_TEMPLATE",
    "DEFAULT_TEMPORAL_TEMPLATE",
    "StimulusTemplates",
    "format_stimulus",
]
