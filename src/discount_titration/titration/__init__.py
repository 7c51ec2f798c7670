"""Titration core: reward sampling, bracket updates, sequencing, wording."""

from .bracket import apply_choice
from .sampler import sample_filler_reward, sample_reward
from .sequencer import TrialSpec, build_sequence, has_adjacent_repeats, should_run
from .stimulus import StimulusTemplates, format_stimulus

__all__ = [
    "StimulusTemplates",
    "TrialSpec",
    "apply_choice",
    "build_sequence",
    "format_stimulus",
    "has_adjacent_repeats",
    "sample_filler_reward",
    "sample_reward",
    "should_run",
]
