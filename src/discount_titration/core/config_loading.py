"""Read session configuration files.

JSON and YAML files are accepted. The root of every file must be an object.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

SUPPORTED_CONFIG_SUFFIXES: tuple[str, ...] = (".json", ".yaml", ".yml")


def load_config_mapping(path: str | Path) -> dict[str, Any]:
    """Load one session config file.

    Parameters
    ----------
    path : str | pathlib.Path
        Config path ending in `.json`, `.yaml` or `.yml`.

    Returns
    -------
    dict[str, Any]
        Parsed mapping.

    Raises
    ------
    ValueError
        If the suffix is unsupported or the root is not a mapping.
    ImportError
        If a YAML file is given and PyYAML is missing.
    """

    config_path = Path(path)
    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        supported = ", ".join(SUPPORTED_CONFIG_SUFFIXES)
        raise ValueError(
            f"unsupported config file extension {suffix!r}; expected one of {supported}"
        )

    text = config_path.read_text(encoding="utf-8")
    raw = _parse_json(text) if suffix == ".json" else _parse_yaml(text)
    if not isinstance(raw, dict):
        raise ValueError("config root must be a JSON/YAML object")
    return raw


def _parse_json(text: str) -> Any:
    """Parse JSON config text."""

    return json.loads(text)


def _parse_yaml(text: str) -> Any:
    """Parse YAML config text with the safe loader."""

    try:
        import yaml
    except ImportError as exc:  # pragma: no cover - exercised only without pyyaml
        raise ImportError(
            "YAML config loading requires PyYAML. Install with `pip install pyyaml`."
        ) from exc
    return yaml.safe_load(text)


__all__ = ["SUPPORTED_CONFIG_SUFFIXES", "load_config_mapping"]
