"""Scripted responder replaying a fixed label sequence."""

from __future__ import annotations

from collections.abc import Sequence

from discount_titration.core.contracts import ChoicePrompt, ChoiceResponse
from discount_titration.plugins import ComponentManifest


class FixedSequenceResponder:
    """Responder that answers prompts with a predefined label sequence.

    Parameters
    ----------
    labels : Sequence[str]
        Labels returned in prompt order.
    fallback : {"error", "repeat_last"}, optional
        Behavior once ``labels`` is exhausted.
    response_time_ms : float | None, optional
        Constant response time reported with every answer.

    Raises
    ------
    ValueError
        If ``labels`` is empty or ``fallback`` is unsupported.

    Notes
    -----
    Labels are returned unchecked, so scripts can include invalid labels to
    exercise error handling. Every prompt and instruction page is kept in
    :attr:`prompts` and :attr:`pages` for inspection.
    """

    def __init__(
        self,
        labels: Sequence[str],
        *,
        fallback: str = "error",
        response_time_ms: float | None = None,
    ) -> None:
        if len(labels) == 0:
            raise ValueError("labels must include at least one label")
        if fallback not in {"error", "repeat_last"}:
            raise ValueError("fallback must be 'error' or 'repeat_last'")

        self._labels = tuple(str(label) for label in labels)
        self._fallback = fallback
        self._response_time_ms = response_time_ms
        self.prompts: list[ChoicePrompt] = []
        self.pages: list[str] = []

    def present_instructions(self, pages: Sequence[str]) -> None:
        """Record instruction pages."""

        self.pages.extend(pages)

    def present_choice(self, prompt: ChoicePrompt) -> ChoiceResponse:
        """Return the next scripted label.

        Raises
        ------
        IndexError
            If the script is exhausted and ``fallback`` is ``"error"``.
        """

        index = len(self.prompts)
        self.prompts.append(prompt)
        return ChoiceResponse(chosen_label=self._resolve_label(index), response_time_ms=self._response_time_ms)

    def _resolve_label(self, index: int) -> str:
        """Return scripted label with fallback behavior."""

        if index < len(self._labels):
            return self._labels[index]
        if self._fallback == "repeat_last":
            return self._labels[-1]
        raise IndexError(f"prompt {index} out of range for script length {len(self._labels)}")


def create_fixed_sequence_responder(
    *,
    labels: Sequence[str],
    fallback: str = "error",
    response_time_ms: float | None = None,
) -> FixedSequenceResponder:
    """Factory used by plugin discovery."""

    return FixedSequenceResponder(labels, fallback=fallback, response_time_ms=response_time_ms)


PLUGIN_MANIFESTS = [
    ComponentManifest(
        kind="responder",
        component_id="fixed_sequence_responder",
        factory=create_fixed_sequence_responder,
        description="Deterministic responder replaying a fixed label sequence",
    )
]
