"""CSV trial logs and JSON session summaries.

The CSV columns mirror :class:`~discount_titration.core.records.TrialRecord`;
the condition snapshot is stored as one JSON column.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from discount_titration.core.conditions import ConditionSnapshot
from discount_titration.core.records import TrialKind, TrialRecord
from discount_titration.runtime.session import SessionSummary

_TRIAL_COLUMNS = (
    "trial_index",
    "trial_kind",
    "condition_id",
    "stimulus_condition_id",
    "offered_reward",
    "stimulus_text",
    "chosen_label",
    "response_time_ms",
    "condition_snapshot_json",
)


def write_trial_records_csv(
    records: Sequence[TrialRecord] | Iterable[TrialRecord],
    path: str | Path,
) -> Path:
    """Write trial records to a CSV file.

    Parameters
    ----------
    records : Sequence[TrialRecord] | Iterable[TrialRecord]
        Records to write, in log order.
    path : str | pathlib.Path
        Destination CSV path. Parent directories are created.

    Returns
    -------
    pathlib.Path
        Output CSV path.

    Raises
    ------
    ValueError
        If no records are provided.
    """

    rows = list(records)
    if not rows:
        raise ValueError("records must not be empty")

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(_TRIAL_COLUMNS))
        writer.writeheader()
        for row in rows:
            writer.writerow(_record_to_csv_mapping(row))
    return output_path


def read_trial_records_csv(path: str | Path) -> tuple[TrialRecord, ...]:
    """Read trial records written by :func:`write_trial_records_csv`."""

    input_path = Path(path)
    with input_path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        _require_columns(reader.fieldnames, required=_TRIAL_COLUMNS)
        return tuple(
            _record_from_csv_mapping(raw, row_index=index)
            for index, raw in enumerate(reader)
        )


def write_summary_json(summary: SessionSummary, path: str | Path) -> Path:
    """Write the session summary (without the full trial log) as JSON."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(summary.to_dict(), indent=2, sort_keys=True), encoding="utf-8")
    return output_path


def _record_to_csv_mapping(record: TrialRecord) -> dict[str, Any]:
    """Convert one record into a CSV row mapping."""

    return {
        "trial_index": int(record.trial_index),
        "trial_kind": record.trial_kind.value,
        "condition_id": record.condition_id,
        "stimulus_condition_id": record.stimulus_condition_id,
        "offered_reward": int(record.offered_reward),
        "stimulus_text": record.stimulus_text,
        "chosen_label": record.chosen_label,
        "response_time_ms": "" if record.response_time_ms is None else float(record.response_time_ms),
        "condition_snapshot_json": json.dumps(record.condition_snapshot.to_dict(), sort_keys=True),
    }


def _record_from_csv_mapping(raw: dict[str, Any], *, row_index: int) -> TrialRecord:
    """Parse one CSV row into a record."""

    kind_raw = _coerce_non_empty_str(raw.get("trial_kind"), field_name="trial_kind", row_index=row_index)
    try:
        trial_kind = TrialKind(kind_raw)
    except ValueError as exc:
        raise ValueError(f"row {row_index}: unknown trial_kind {kind_raw!r}") from exc

    response_time_raw = str(raw.get("response_time_ms") or "").strip()
    snapshot = json.loads(
        _coerce_non_empty_str(
            raw.get("condition_snapshot_json"),
            field_name="condition_snapshot_json",
            row_index=row_index,
        )
    )
    return TrialRecord(
        trial_index=_coerce_int(raw.get("trial_index"), field_name="trial_index", row_index=row_index),
        trial_kind=trial_kind,
        condition_id=_coerce_non_empty_str(raw.get("condition_id"), field_name="condition_id", row_index=row_index),
        stimulus_condition_id=_coerce_non_empty_str(
            raw.get("stimulus_condition_id"),
            field_name="stimulus_condition_id",
            row_index=row_index,
        ),
        offered_reward=_coerce_int(raw.get("offered_reward"), field_name="offered_reward", row_index=row_index),
        stimulus_text=str(raw.get("stimulus_text") or ""),
        chosen_label=_coerce_non_empty_str(raw.get("chosen_label"), field_name="chosen_label", row_index=row_index),
        response_time_ms=float(response_time_raw) if response_time_raw else None,
        condition_snapshot=ConditionSnapshot(**snapshot),
    )


def _coerce_int(raw: Any, *, field_name: str, row_index: int) -> int:
    """Coerce one integer field with row-index context."""

    text = str(raw).strip() if raw is not None else ""
    if not text:
        raise ValueError(f"row {row_index}: {field_name} must be an integer")
    return int(text)


def _coerce_non_empty_str(raw: Any, *, field_name: str, row_index: int) -> str:
    """Coerce one non-empty string field with row-index context."""

    text = str(raw).strip() if raw is not None else ""
    if not text:
        raise ValueError(f"row {row_index}: {field_name} must be a non-empty string")
    return text


def _require_columns(fieldnames: Sequence[str] | None, *, required: tuple[str, ...]) -> None:
    """Require all expected columns in the CSV header."""

    if fieldnames is None:
        raise ValueError("CSV file must include a header row")
    missing = [name for name in required if name not in set(fieldnames)]
    if missing:
        raise ValueError(f"CSV file missing required columns: {missing}")


__all__ = [
    "read_trial_records_csv",
    "write_summary_json",
    "write_trial_records_csv",
]
