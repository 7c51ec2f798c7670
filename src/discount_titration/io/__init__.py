"""File I/O for trial logs and session summaries."""

from .tabular import read_trial_records_csv, write_summary_json, write_trial_records_csv

__all__ = [
    "read_trial_records_csv",
    "write_summary_json",
    "write_trial_records_csv",
]
