"""Simulated subject with hyperbolic delay and probability discounting.

Model Contract
--------------
Subjective value of the standard amount ``S``
    Temporal delay ``D`` days: ``S / (1 + k * D)``.
    Probability ``p`` percent: ``S / (1 + h * theta)`` with odds against
    ``theta = (100 - p) / p``.
Decision Rule
    Choose ``A`` when the offered amount is at least the subjective value of
    the standard, otherwise ``B``. With probability ``lapse_rate`` the choice
    is uniformly random instead.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from discount_titration.core.conditions import ConditionKind, Filler, ProbabilityDelay, TemporalDelay
from discount_titration.core.contracts import OPTION_LABELS, ChoiceOption, ChoicePrompt, ChoiceResponse
from discount_titration.plugins import ComponentManifest


class HyperbolicResponder:
    """Responder simulating a hyperbolic discounter.

    Parameters
    ----------
    k : float, optional
        Delay discounting rate per day.
    h : float, optional
        Probability discounting rate on odds against.
    lapse_rate : float, optional
        Probability in ``[0, 1]`` of a uniformly random answer.
    seed : int | None, optional
        Seed for lapse sampling.

    Raises
    ------
    ValueError
        If a rate is negative or ``lapse_rate`` is outside ``[0, 1]``.
    """

    def __init__(
        self,
        *,
        k: float = 0.01,
        h: float = 1.0,
        lapse_rate: float = 0.0,
        seed: int | None = None,
    ) -> None:
        if k < 0.0:
            raise ValueError("k must be >= 0")
        if h < 0.0:
            raise ValueError("h must be >= 0")
        if lapse_rate < 0.0 or lapse_rate > 1.0:
            raise ValueError("lapse_rate must be in [0, 1]")

        self._k = float(k)
        self._h = float(h)
        self._lapse_rate = float(lapse_rate)
        self._rng = np.random.default_rng(seed)

    def subjective_value(self, kind: ConditionKind, standard_amount: float) -> float:
        """Return the discounted value of the standard amount.

        Raises
        ------
        ValueError
            If ``kind`` is :class:`Filler`.
        """

        if isinstance(kind, TemporalDelay):
            return float(standard_amount) / (1.0 + self._k * float(kind.delay_days))
        if isinstance(kind, ProbabilityDelay):
            probability = float(kind.probability_percent)
            odds_against = (100.0 - probability) / probability
            return float(standard_amount) / (1.0 + self._h * odds_against)
        if isinstance(kind, Filler):
            raise ValueError("filler conditions have no standard option to value")
        raise TypeError(f"unsupported condition kind: {kind!r}")

    def present_instructions(self, pages: Sequence[str]) -> None:
        """Simulated subjects skip instructions."""

        del pages

    def present_choice(self, prompt: ChoicePrompt) -> ChoiceResponse:
        """Answer by comparing the offer with the discounted standard."""

        if self._lapse_rate > 0.0 and self._rng.random() < self._lapse_rate:
            label = OPTION_LABELS[int(self._rng.integers(len(OPTION_LABELS)))]
            return ChoiceResponse(chosen_label=label)

        value = self.subjective_value(prompt.condition_kind, prompt.standard_amount)
        option = ChoiceOption.VARIABLE if prompt.offered_reward >= value else ChoiceOption.STANDARD
        return ChoiceResponse(chosen_label=option.value)


def create_hyperbolic_responder(
    *,
    k: float = 0.01,
    h: float = 1.0,
    lapse_rate: float = 0.0,
    seed: int | None = None,
) -> HyperbolicResponder:
    """Factory used by plugin discovery."""

    return HyperbolicResponder(k=k, h=h, lapse_rate=lapse_rate, seed=seed)


PLUGIN_MANIFESTS = [
    ComponentManifest(
        kind="responder",
        component_id="hyperbolic_responder",
        factory=create_hyperbolic_responder,
        description="Simulated subject with hyperbolic delay/probability discounting",
    )
]
