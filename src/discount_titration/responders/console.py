"""Interactive terminal responder."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from discount_titration.core.contracts import ChoicePrompt, ChoiceResponse
from discount_titration.plugins import ComponentManifest

CHOICE_HEADER = "Which do you choose?"


class ConsoleResponder:
    """Responder that prints prompts and reads choices from a terminal.

    Parameters
    ----------
    input_fn : Callable[[str], str], optional
        Line reader. Defaults to :func:`input`.
    output_fn : Callable[[str], None], optional
        Line writer. Defaults to :func:`print`.
    clock : Callable[[], float], optional
        Monotonic clock in seconds used for response times.
    sleep : Callable[[float], None], optional
        Sleep function used for the post-trial delay.
    """

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._input = input_fn
        self._output = output_fn
        self._clock = clock
        self._sleep = sleep

    def present_instructions(self, pages: Sequence[str]) -> None:
        """Print each page and wait for Enter."""

        for page in pages:
            self._output(page)
            self._input("[Press Enter to continue] ")

    def present_choice(self, prompt: ChoicePrompt) -> ChoiceResponse:
        """Print the stimulus and read labels until a valid one is entered."""

        self._output(CHOICE_HEADER)
        self._output(prompt.stimulus_text)
        labels = tuple(label.upper() for label in prompt.option_labels)
        request = f"[{'/'.join(prompt.option_labels)}] "

        started = self._clock()
        while True:
            answer = self._input(request).strip().upper()
            if answer in labels:
                break
            self._output(f"Please answer one of: {', '.join(prompt.option_labels)}")
        elapsed_ms = (self._clock() - started) * 1000.0

        if prompt.post_trial_delay_ms > 0:
            self._sleep(prompt.post_trial_delay_ms / 1000.0)
        return ChoiceResponse(
            chosen_label=prompt.option_labels[labels.index(answer)],
            response_time_ms=elapsed_ms,
        )


def create_console_responder() -> ConsoleResponder:
    """Factory used by plugin discovery."""

    return ConsoleResponder()


PLUGIN_MANIFESTS = [
    ComponentManifest(
        kind="responder",
        component_id="console_responder",
        factory=create_console_responder,
        description="Interactive terminal responder reading A/B from stdin",
    )
]
