"""Tests for declarative session config parsing."""

from __future__ import annotations

import json

import pytest

from discount_titration.responders import ConsoleResponder, HyperbolicResponder
from discount_titration.runtime import (
    SessionConfig,
    build_responder_from_config,
    load_config,
    responder_ref_from_mapping,
    session_config_from_mapping,
)
from discount_titration.titration import StimulusTemplates


def test_missing_session_block_uses_defaults() -> None:
    """No session block should give the default constants."""

    config = session_config_from_mapping(None)

    assert config == SessionConfig()
    assert config.standard_amount == 1000
    assert config.step_size == 50
    assert config.threshold == 50
    assert config.temporal_delays == (0, 2, 30, 180, 365)
    assert config.probabilities == (100, 90, 75, 50, 25)
    assert config.repeats_per_condition == 30
    assert config.distractor_start == 70
    assert config.post_trial_delay_ms == 500
    assert config.max_total_trials is None


def test_session_block_overrides_defaults() -> None:
    """Every documented key should be parsed into SessionConfig."""

    config = session_config_from_mapping(
        {
            "standard_amount": 2000,
            "step_size": 100,
            "temporal_delays": [1, 7],
            "probabilities": [80],
            "repeats_per_condition": 10,
            "distractor_start": 5,
            "post_trial_delay_ms": 0,
            "max_total_trials": 40,
            "seed": 3,
            "stimuli": {"temporal": "{variable} now vs {standard} in {delay}d"},
            "instruction_pages": ["Welcome."],
            "closing_pages": [],
        }
    )

    assert config.standard_amount == 2000
    assert config.step_size == 100
    assert config.temporal_delays == (1.0, 7.0)
    assert config.probabilities == (80.0,)
    assert config.repeats_per_condition == 10
    assert config.distractor_start == 5
    assert config.post_trial_delay_ms == 0
    assert config.max_total_trials == 40
    assert config.seed == 3
    assert config.stimuli == StimulusTemplates(temporal="{variable} now vs {standard} in {delay}d")
    assert config.instruction_pages == ("Welcome.",)
    assert config.closing_pages == ()


def test_seed_argument_overrides_config_seed() -> None:
    """An explicit seed should win over the config value."""

    config = session_config_from_mapping({"seed": 3}, seed=11)

    assert config.seed == 11


@pytest.mark.parametrize(
    ("block", "message"),
    [
        ({"unknown": 1}, "session has unknown keys"),
        ({"step_size": "fifty"}, "session.step_size must be an integer"),
        ({"step_size": 12.5}, "session.step_size must be an integer"),
        ({"repeats_per_condition": True}, "session.repeats_per_condition must be an integer"),
        ({"distractor_start": -1}, "session.distractor_start must be >= 0"),
        ({"temporal_delays": 30}, "session.temporal_delays must be an array"),
        ({"probabilities": [50, "half"]}, r"session.probabilities\[1\] must be a number"),
        ({"stimuli": {"payoff": "x"}}, "session.stimuli has unknown keys"),
        ({"stimuli": {"temporal": "{variable} {odds}"}}, "unknown fields"),
        ({"instruction_pages": ["", "ok"]}, r"session.instruction_pages\[0\]"),
        ({"step_size": 0}, "step_size must be > 0"),
    ],
)
def test_session_block_validation(block: dict, message: str) -> None:
    """Malformed session blocks should fail with the field path in the message."""

    with pytest.raises(ValueError, match=message):
        session_config_from_mapping(block)


def test_responder_defaults_to_console() -> None:
    """A missing responder block should select the console responder."""

    ref = responder_ref_from_mapping(None)

    assert ref.component_id == "console_responder"
    assert ref.kwargs == {}
    assert isinstance(build_responder_from_config({}), ConsoleResponder)


def test_responder_block_builds_registered_component() -> None:
    """The responder block should create the named component with kwargs."""

    responder = build_responder_from_config(
        {"responder": {"component_id": "hyperbolic_responder", "kwargs": {"k": 0.02}}}
    )

    assert isinstance(responder, HyperbolicResponder)


def test_responder_block_validation() -> None:
    """Responder blocks need a component ID and object kwargs."""

    with pytest.raises(ValueError, match="responder is missing required keys"):
        responder_ref_from_mapping({"kwargs": {}})
    with pytest.raises(ValueError, match="responder.component_id must be a non-empty string"):
        responder_ref_from_mapping({"component_id": "  "})
    with pytest.raises(ValueError, match="responder.kwargs must be an object"):
        responder_ref_from_mapping({"component_id": "random_responder", "kwargs": [1]})
    with pytest.raises(ValueError, match="responder has unknown keys"):
        responder_ref_from_mapping({"component_id": "random_responder", "seed": 1})


def test_load_config_rejects_unknown_top_level_keys(tmp_path) -> None:
    """Only session and responder blocks are allowed at the top level."""

    path = tmp_path / "config.json"
    path.write_text(json.dumps({"session": {}, "output": "x"}), encoding="utf-8")

    with pytest.raises(ValueError, match="config has unknown keys"):
        load_config(path)
