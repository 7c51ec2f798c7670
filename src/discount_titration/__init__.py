"""Top-level package for ``discount_titration``.

The package estimates indifference points between an immediate/certain
variable reward and a delayed/probabilistic standard reward:

1. :func:`~discount_titration.titration.sequencer.build_sequence` schedules
   conditions without immediate repeats,
2. :func:`~discount_titration.titration.sampler.sample_reward` draws an offer
   from the condition's bracket,
3. a :class:`~discount_titration.core.contracts.ChoiceResponder` presents it,
4. :func:`~discount_titration.titration.bracket.apply_choice` narrows the
   bracket until it collapses onto the indifference point.

:func:`~discount_titration.runtime.session.run_session` drives a full
session including filler trials and the final payoff trial.
"""

from .core.conditions import Condition, initialize_conditions, is_resolved
from .core.contracts import ChoiceOption, ChoicePrompt, ChoiceResponder, ChoiceResponse
from .core.errors import DegenerateRangeError, InvalidResponseError, SequencingWarning
from .runtime.config import load_config, session_config_from_mapping
from .runtime.session import SessionConfig, SessionSummary, run_session
from .titration import apply_choice, build_sequence, format_stimulus, sample_reward

__all__ = [
    "ChoiceOption",
    "ChoicePrompt",
    "ChoiceResponder",
    "ChoiceResponse",
    "Condition",
    "DegenerateRangeError",
    "InvalidResponseError",
    "SequencingWarning",
    "SessionConfig",
    "SessionSummary",
    "apply_choice",
    "build_sequence",
    "format_stimulus",
    "initialize_conditions",
    "is_resolved",
    "load_config",
    "run_session",
    "sample_reward",
    "session_config_from_mapping",
]
