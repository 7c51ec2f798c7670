"""Command-line entry point for running one titration session."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from discount_titration.io import write_summary_json, write_trial_records_csv
from discount_titration.runtime.config import (
    build_responder_from_config,
    load_config,
    session_config_from_mapping,
)
from discount_titration.runtime.session import run_session


def run_session_cli(argv: Sequence[str] | None = None) -> int:
    """Run a session from a JSON or YAML config path.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        CLI argument list. When ``None``, process arguments are used.

    Returns
    -------
    int
        Exit code (`0` on success).
    """

    parser = argparse.ArgumentParser(
        description="Run a delay/probability discounting titration session from JSON or YAML config."
    )
    parser.add_argument("--config", required=True, help="Path to session JSON or YAML config.")
    parser.add_argument("--output-dir", default=".", help="Directory for CSV/JSON outputs.")
    parser.add_argument("--prefix", default="session", help="Output filename prefix.")
    parser.add_argument("--seed", type=int, default=None, help="Override session.seed.")
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging verbosity.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=getattr(logging, str(args.log_level)), format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.config)
    session_config = session_config_from_mapping(config.get("session"), seed=args.seed)
    responder = build_responder_from_config(config)

    summary = run_session(session_config, responder)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    prefix = str(args.prefix)
    summary_path = write_summary_json(summary, output_dir / f"{prefix}_summary.json")

    print(
        "Session complete: "
        f"total_trials={summary.total_trial_count}, resolved={summary.resolved_count}"
    )
    if summary.records:
        trials_path = write_trial_records_csv(summary.records, output_dir / f"{prefix}_trials.csv")
        print(f"Trials CSV: {trials_path}")
    print(f"Summary JSON: {summary_path}")
    return 0


def main() -> None:
    """Execute the session CLI and exit with the returned code."""

    raise SystemExit(run_session_cli())


if __name__ == "__main__":
    main()


__all__ = ["main", "run_session_cli"]
