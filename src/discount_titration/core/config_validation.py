"""Strict validation helpers for declarative session configs.

Every helper raises :class:`ValueError` whose message starts with the dotted
path of the offending field, e.g. ``session.step_size must be > 0``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def validate_allowed_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    allowed_keys: Iterable[str],
) -> None:
    """Reject keys outside ``allowed_keys``.

    Parameters
    ----------
    mapping : Mapping[str, Any]
        Config block to check.
    field_name : str
        Dotted path of the block, used in error messages.
    allowed_keys : Iterable[str]
        Accepted key names.

    Raises
    ------
    ValueError
        If unknown keys are present.
    """

    allowed = {str(key) for key in allowed_keys}
    unknown = sorted(str(key) for key in mapping if str(key) not in allowed)
    if unknown:
        raise ValueError(f"{field_name} has unknown keys: {unknown}")


def validate_required_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    required_keys: Iterable[str],
) -> None:
    """Reject blocks that miss any of ``required_keys``."""

    missing = sorted(str(key) for key in required_keys if key not in mapping)
    if missing:
        raise ValueError(f"{field_name} is missing required keys: {missing}")


def require_mapping(raw: Any, *, field_name: str) -> dict[str, Any]:
    """Require an object value."""

    if not isinstance(raw, dict):
        raise ValueError(f"{field_name} must be an object")
    return raw


def require_sequence(raw: Any, *, field_name: str) -> list[Any]:
    """Require an array value."""

    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"{field_name} must be an array")
    return list(raw)


def coerce_int(raw: Any, *, field_name: str, minimum: int | None = None) -> int:
    """Coerce an integer scalar, optionally bounded below.

    Booleans and non-integral floats are rejected.
    """

    if isinstance(raw, bool) or raw is None:
        raise ValueError(f"{field_name} must be an integer")
    if isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"{field_name} must be an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be an integer") from exc
    if minimum is not None and value < minimum:
        raise ValueError(f"{field_name} must be >= {minimum}")
    return value


def coerce_float(raw: Any, *, field_name: str) -> float:
    """Coerce a real-valued scalar."""

    if isinstance(raw, bool) or raw is None:
        raise ValueError(f"{field_name} must be a number")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be a number") from exc


def coerce_non_empty_str(raw: Any, *, field_name: str) -> str:
    """Coerce a non-empty string."""

    value = "" if raw is None else str(raw).strip()
    if not value:
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


__all__ = [
    "coerce_float",
    "coerce_int",
    "coerce_non_empty_str",
    "require_mapping",
    "require_sequence",
    "validate_allowed_keys",
    "validate_required_keys",
]
