"""Config-driven session setup.

A session config file has two optional top-level blocks::

    {
      "session": {"standard_amount": 1000, "step_size": 50, ...},
      "responder": {"component_id": "hyperbolic_responder", "kwargs": {"k": 0.02}}
    }

Missing session keys fall back to :class:`SessionConfig` defaults. A missing
responder block selects the interactive ``console_responder``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from discount_titration.core.config_loading import load_config_mapping
from discount_titration.core.config_validation import (
    coerce_float,
    coerce_int,
    coerce_non_empty_str,
    require_mapping,
    require_sequence,
    validate_allowed_keys,
    validate_required_keys,
)
from discount_titration.plugins import PluginRegistry, build_default_registry
from discount_titration.runtime.session import SessionConfig
from discount_titration.titration.stimulus import StimulusTemplates

DEFAULT_RESPONDER_ID = "console_responder"

_TOP_LEVEL_KEYS = ("session", "responder")
_SESSION_KEYS = (
    "standard_amount",
    "step_size",
    "temporal_delays",
    "probabilities",
    "repeats_per_condition",
    "distractor_start",
    "post_trial_delay_ms",
    "max_total_trials",
    "seed",
    "stimuli",
    "instruction_pages",
    "closing_pages",
)
_STIMULI_KEYS = ("temporal", "probability")
_RESPONDER_KEYS = ("component_id", "kwargs")


@dataclass(frozen=True, slots=True)
class ComponentRef:
    """Registry component reference.

    Parameters
    ----------
    component_id : str
        Component ID in the plugin registry.
    kwargs : dict[str, Any]
        Keyword arguments passed to the factory.
    """

    component_id: str
    kwargs: dict[str, Any]


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and shape-check a session config file.

    Raises
    ------
    ValueError
        If the file has unknown top-level keys.
    """

    config = load_config_mapping(path)
    validate_allowed_keys(config, field_name="config", allowed_keys=_TOP_LEVEL_KEYS)
    return config


def session_config_from_mapping(
    raw: dict[str, Any] | None,
    *,
    seed: int | None = None,
) -> SessionConfig:
    """Parse a ``session`` block into :class:`SessionConfig`.

    Parameters
    ----------
    raw : dict[str, Any] | None
        Session block. ``None`` uses all defaults.
    seed : int | None, optional
        Overrides ``raw["seed"]`` when given.

    Returns
    -------
    SessionConfig
        Validated session constants.

    Raises
    ------
    ValueError
        If keys are unknown or values are malformed/out of range.
    """

    block = require_mapping({} if raw is None else raw, field_name="session")
    validate_allowed_keys(block, field_name="session", allowed_keys=_SESSION_KEYS)

    kwargs: dict[str, Any] = {}
    for key in (
        "standard_amount",
        "step_size",
        "repeats_per_condition",
        "distractor_start",
        "post_trial_delay_ms",
    ):
        if key in block:
            kwargs[key] = coerce_int(block[key], field_name=f"session.{key}", minimum=0)

    for key in ("temporal_delays", "probabilities"):
        if key in block:
            values = require_sequence(block[key], field_name=f"session.{key}")
            kwargs[key] = tuple(
                coerce_float(value, field_name=f"session.{key}[{index}]")
                for index, value in enumerate(values)
            )

    if block.get("max_total_trials") is not None:
        kwargs["max_total_trials"] = coerce_int(
            block["max_total_trials"],
            field_name="session.max_total_trials",
            minimum=0,
        )

    if seed is not None:
        kwargs["seed"] = int(seed)
    elif block.get("seed") is not None:
        kwargs["seed"] = coerce_int(block["seed"], field_name="session.seed", minimum=0)

    if "stimuli" in block:
        kwargs["stimuli"] = _parse_stimuli(block["stimuli"])

    for key in ("instruction_pages", "closing_pages"):
        if key in block:
            pages = require_sequence(block[key], field_name=f"session.{key}")
            kwargs[key] = tuple(
                coerce_non_empty_str(page, field_name=f"session.{key}[{index}]")
                for index, page in enumerate(pages)
            )

    return SessionConfig(**kwargs)


def responder_ref_from_mapping(raw: dict[str, Any] | None) -> ComponentRef:
    """Parse a ``responder`` block, defaulting to the console responder."""

    if raw is None:
        return ComponentRef(component_id=DEFAULT_RESPONDER_ID, kwargs={})

    block = require_mapping(raw, field_name="responder")
    validate_allowed_keys(block, field_name="responder", allowed_keys=_RESPONDER_KEYS)
    validate_required_keys(block, field_name="responder", required_keys=("component_id",))
    component_id = coerce_non_empty_str(block["component_id"], field_name="responder.component_id")
    kwargs = require_mapping(block.get("kwargs", {}), field_name="responder.kwargs")
    return ComponentRef(component_id=component_id, kwargs=dict(kwargs))


def build_responder_from_config(
    config: dict[str, Any],
    *,
    registry: PluginRegistry | None = None,
) -> Any:
    """Instantiate the responder named by ``config["responder"]``.

    Parameters
    ----------
    config : dict[str, Any]
        Full config mapping.
    registry : PluginRegistry | None, optional
        Pre-built registry. Defaults to the built-in responders.

    Returns
    -------
    Any
        Responder instance.
    """

    reg = registry if registry is not None else build_default_registry()
    ref = responder_ref_from_mapping(config.get("responder"))
    return reg.create_responder(ref.component_id, **ref.kwargs)


def _parse_stimuli(raw: Any) -> StimulusTemplates:
    """Parse the ``session.stimuli`` block."""

    block = require_mapping(raw, field_name="session.stimuli")
    validate_allowed_keys(block, field_name="session.stimuli", allowed_keys=_STIMULI_KEYS)
    kwargs = {
        key: coerce_non_empty_str(block[key], field_name=f"session.stimuli.{key}")
        for key in _STIMULI_KEYS
        if key in block
    }
    return StimulusTemplates(**kwargs)


__all__ = [
    "DEFAULT_RESPONDER_ID",
    "ComponentRef",
    "build_responder_from_config",
    "load_config",
    "responder_ref_from_mapping",
    "session_config_from_mapping",
]
