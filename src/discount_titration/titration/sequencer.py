"""Randomized trial sequencing without immediate condition repeats.

The base sequence contains every titrated condition exactly
``repeats_per_condition`` times. Filler trials are not part of it; the
session interleaves them at run time.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np

from discount_titration.core.conditions import Condition, is_resolved
from discount_titration.core.errors import SequencingWarning


@dataclass(frozen=True, slots=True)
class TrialSpec:
    """One scheduled entry of the base sequence.

    Parameters
    ----------
    position : int
        Zero-based index in the sequence.
    condition_id : str
        Condition titrated by this entry.
    """

    position: int
    condition_id: str


def build_sequence(
    conditions: Mapping[str, Condition],
    repeats_per_condition: int,
    *,
    rng: np.random.Generator,
) -> tuple[TrialSpec, ...]:
    """Build a shuffled sequence with no two adjacent equal condition IDs.

    Parameters
    ----------
    conditions : Mapping[str, Condition]
        Session conditions. The filler condition is ignored.
    repeats_per_condition : int
        Number of entries per titrated condition.
    rng : numpy.random.Generator
        Session random generator.

    Returns
    -------
    tuple[TrialSpec, ...]
        Scheduled entries.

    Raises
    ------
    ValueError
        If ``repeats_per_condition`` is negative.

    Notes
    -----
    Entries are placed one at a time. Each slot draws among conditions that
    differ from the previous entry and still leave a repeat-free remainder,
    weighted by remaining count. When no such condition exists (e.g. one
    condition repeated twice) the most frequent remaining condition is
    placed anyway and a :class:`SequencingWarning` is emitted.
    """

    if repeats_per_condition < 0:
        raise ValueError("repeats_per_condition must be >= 0")

    condition_ids = [cid for cid, condition in conditions.items() if not condition.is_filler]
    remaining = {cid: int(repeats_per_condition) for cid in condition_ids}
    total = len(condition_ids) * int(repeats_per_condition)

    order: list[str] = []
    previous: str | None = None
    n_adjacent_repeats = 0
    for _ in range(total):
        candidates = [cid for cid in condition_ids if remaining[cid] > 0 and cid != previous]
        pool = [cid for cid in candidates if _remainder_is_feasible(remaining, picked=cid)]
        if not pool:
            # Best effort: place the most frequent condition first.
            fallback = candidates or [cid for cid in condition_ids if remaining[cid] > 0]
            top = max(remaining[cid] for cid in fallback)
            pool = [cid for cid in fallback if remaining[cid] == top]

        weights = np.asarray([remaining[cid] for cid in pool], dtype=float)
        picked = pool[int(rng.choice(len(pool), p=weights / weights.sum()))]
        if picked == previous:
            n_adjacent_repeats += 1
        remaining[picked] -= 1
        order.append(picked)
        previous = picked

    if n_adjacent_repeats:
        warnings.warn(
            (
                "cannot avoid immediate condition repeats for this configuration; "
                f"sequence contains {n_adjacent_repeats} adjacent repeat(s)"
            ),
            SequencingWarning,
            stacklevel=2,
        )

    return tuple(TrialSpec(position=index, condition_id=cid) for index, cid in enumerate(order))


def should_run(spec: TrialSpec, conditions: Mapping[str, Condition]) -> bool:
    """Return whether a scheduled entry is administered.

    Entries of resolved conditions stay in the sequence but are skipped.
    """

    return not is_resolved(conditions[spec.condition_id])


def has_adjacent_repeats(sequence: tuple[TrialSpec, ...]) -> bool:
    """Return whether two consecutive entries share a condition ID."""

    return any(
        left.condition_id == right.condition_id
        for left, right in zip(sequence, sequence[1:])
    )


def _remainder_is_feasible(remaining: Mapping[str, int], *, picked: str) -> bool:
    """Check that the counts left after ``picked`` admit a repeat-free order.

    The remainder must not start with ``picked``, so ``picked`` can occupy at
    most ``n // 2`` slots and any other condition at most ``(n + 1) // 2``.
    """

    n_left = sum(remaining.values()) - 1
    for cid, count in remaining.items():
        if cid == picked:
            if count - 1 > n_left // 2:
                return False
        elif count > (n_left + 1) // 2:
            return False
    return True


__all__ = ["TrialSpec", "build_sequence", "has_adjacent_repeats", "should_run"]
