"""Uniform-random responder."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from discount_titration.core.contracts import ChoicePrompt, ChoiceResponse
from discount_titration.plugins import ComponentManifest


class RandomResponder:
    """Responder choosing uniformly among the offered labels.

    Parameters
    ----------
    seed : int | None, optional
        Seed for the responder's own random generator.
    """

    def __init__(self, *, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)

    def present_instructions(self, pages: Sequence[str]) -> None:
        """No-op."""

        del pages

    def present_choice(self, prompt: ChoicePrompt) -> ChoiceResponse:
        """Return a uniformly drawn label."""

        labels = prompt.option_labels
        return ChoiceResponse(chosen_label=labels[int(self._rng.integers(len(labels)))])


def create_random_responder(*, seed: int | None = None) -> RandomResponder:
    """Factory used by plugin discovery."""

    return RandomResponder(seed=seed)


PLUGIN_MANIFESTS = [
    ComponentManifest(
        kind="responder",
        component_id="random_responder",
        factory=create_random_responder,
        description="Uniform-random responder",
    )
]
