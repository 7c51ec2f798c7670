"""Data model, contracts and config helpers for titration sessions."""

from .conditions import (
    FILLER_CONDITION_ID,
    Condition,
    ConditionKind,
    ConditionSnapshot,
    Filler,
    ProbabilityDelay,
    TemporalDelay,
    initialize_conditions,
    is_resolved,
)
from .config_loading import SUPPORTED_CONFIG_SUFFIXES, load_config_mapping
from .contracts import OPTION_LABELS, ChoiceOption, ChoicePrompt, ChoiceResponder, ChoiceResponse
from .errors import DegenerateRangeError, InvalidResponseError, SequencingWarning
from .records import TrialKind, TrialRecord

__all__ = [
    "FILLER_CONDITION_ID",
    "OPTION_LABELS",
    "SUPPORTED_CONFIG_SUFFIXES",
    "ChoiceOption",
    "ChoicePrompt",
    "ChoiceResponder",
    "ChoiceResponse",
    "Condition",
    "ConditionKind",
    "ConditionSnapshot",
    "DegenerateRangeError",
    "Filler",
    "InvalidResponseError",
    "ProbabilityDelay",
    "SequencingWarning",
    "TemporalDelay",
    "TrialKind",
    "TrialRecord",
    "initialize_conditions",
    "is_resolved",
    "load_config_mapping",
]
