"""Bracket updater: the double-staircase titration rule.

After each choice one of six branches narrows (or resets) the bracket of
the titrated condition.

Variable option (``A``) chosen:

- offer ``< bmin``: ``bmax = 0``, ``bmin = offer``
- offer ``<= tmin``: ``tmax = tmin``, ``tmin = offer``
- otherwise: ``tmax = offer``

Standard option (``B``) chosen:

- ``tmin <`` offer: ``tmax = standard``, ``tmin = offer``
- ``bmin <`` offer: ``bmax = bmin``, ``bmin = offer``
- otherwise: ``bmax = offer``

The condition resolves as soon as ``tmax - bmax <= threshold``; the offer
that triggered resolution becomes the indifference point.
"""

from __future__ import annotations

import logging

from discount_titration.core.conditions import Condition, is_resolved
from discount_titration.core.contracts import ChoiceOption
from discount_titration.core.errors import InvalidResponseError

logger = logging.getLogger(__name__)


def apply_choice(
    condition: Condition,
    choice: ChoiceOption,
    offered_reward: int,
    *,
    standard_amount: int,
    threshold: int,
) -> bool:
    """Apply one choice to a condition's bracket in place.

    Parameters
    ----------
    condition : Condition
        Titrated condition. Must not be the filler condition.
    choice : ChoiceOption
        Option selected by the subject.
    offered_reward : int
        Variable amount that was offered.
    standard_amount : int
        Standard amount; ``tmax`` is reset to it by the raising branch.
    threshold : int
        Convergence threshold on ``tmax - bmax``.

    Returns
    -------
    bool
        ``True`` when this call resolved the condition.

    Raises
    ------
    InvalidResponseError
        If ``choice`` is not a :class:`ChoiceOption`. Nothing is mutated.
    ValueError
        If ``condition`` is the filler condition.

    Notes
    -----
    Calls on an already resolved condition leave it untouched and return
    ``False``.
    """

    if not isinstance(choice, ChoiceOption):
        logger.error("rejecting response %r for condition %s", choice, condition.condition_id)
        raise InvalidResponseError(f"response {choice!r} is not a valid choice option")
    if condition.is_filler:
        raise ValueError("filler conditions are never titrated")
    if is_resolved(condition):
        logger.warning(
            "ignoring choice for resolved condition %s (ip=%s)",
            condition.condition_id,
            condition.indifference_point,
        )
        return False

    offer = int(offered_reward)
    if choice is ChoiceOption.VARIABLE:
        _apply_variable_choice(condition, offer)
    else:
        _apply_standard_choice(condition, offer, standard_amount=int(standard_amount))

    logger.debug(
        "condition %s after %s@%d: tmin=%d tmax=%d bmin=%d bmax=%d",
        condition.condition_id,
        choice.value,
        offer,
        condition.tmin,
        condition.tmax,
        condition.bmin,
        condition.bmax,
    )

    if condition.tmax - condition.bmax <= threshold:
        condition.indifference_point = offer
        logger.info("condition %s resolved with ip=%d", condition.condition_id, offer)
        return True
    return False


def _apply_variable_choice(condition: Condition, offer: int) -> None:
    """Update after the immediate/certain amount was preferred."""

    if offer < condition.bmin:
        condition.bmax = 0
        condition.bmin = offer
    elif offer <= condition.tmin:
        condition.tmax = condition.tmin
        condition.tmin = offer
    else:
        condition.tmax = offer


def _apply_standard_choice(condition: Condition, offer: int, *, standard_amount: int) -> None:
    """Update after the delayed/probabilistic standard was preferred."""

    if condition.tmin < offer:
        condition.tmax = standard_amount
        condition.tmin = offer
    elif condition.bmin < offer:
        condition.bmax = condition.bmin
        condition.bmin = offer
    else:
        condition.bmax = offer


__all__ = ["apply_choice"]
