"""Tests for JSON/YAML config loading helpers."""

from __future__ import annotations

import json

import pytest

from discount_titration.core import load_config_mapping


def test_load_config_mapping_accepts_json(tmp_path) -> None:
    """Loader should parse JSON config objects."""

    path = tmp_path / "config.json"
    path.write_text(json.dumps({"session": {"step_size": 50}}), encoding="utf-8")

    assert load_config_mapping(path) == {"session": {"step_size": 50}}


def test_load_config_mapping_accepts_yaml(tmp_path) -> None:
    """Loader should parse YAML config objects."""

    path = tmp_path / "config.yml"
    path.write_text("session:\n  probabilities: [90, 50]\n", encoding="utf-8")

    assert load_config_mapping(path) == {"session": {"probabilities": [90, 50]}}


def test_load_config_mapping_rejects_unsupported_extension(tmp_path) -> None:
    """Loader should fail fast on unknown config file suffix."""

    path = tmp_path / "config.toml"
    path.write_text("a = 1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="unsupported config file extension"):
        load_config_mapping(path)


def test_load_config_mapping_requires_mapping_root(tmp_path) -> None:
    """Loader should reject non-mapping top-level config payloads."""

    path = tmp_path / "config.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(ValueError, match="config root must be a JSON/YAML object"):
        load_config_mapping(path)


def test_yaml_session_block_parses_into_session_config(tmp_path) -> None:
    """A YAML session block should flow through to validated session constants."""

    from discount_titration.runtime import load_config, session_config_from_mapping

    path = tmp_path / "session.yaml"
    path.write_text(
        "session:\n"
        "  standard_amount: 500\n"
        "  step_size: 25\n"
        "  temporal_delays: [7]\n"
        "  probabilities: []\n"
        "  stimuli:\n"
        "    temporal: \"{variable} today or {standard} after {delay} days\"\n",
        encoding="utf-8",
    )

    config = session_config_from_mapping(load_config(path)["session"])

    assert config.standard_amount == 500
    assert config.threshold == 25
    assert config.temporal_delays == (7.0,)
    assert config.probabilities == ()
    assert config.stimuli.temporal == "{variable} today or {standard} after {delay} days"
