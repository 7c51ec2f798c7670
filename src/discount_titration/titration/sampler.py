"""Reward sampling from a condition's current bracket.

Offers are drawn uniformly from ``[bmax, tmax]`` on a grid of ``step_size``.
"""

from __future__ import annotations

import math

import numpy as np

from discount_titration.core.conditions import Condition
from discount_titration.core.errors import DegenerateRangeError


def sample_reward(condition: Condition, step_size: int, *, rng: np.random.Generator) -> int:
    """Draw the next variable amount for a titrated condition.

    Parameters
    ----------
    condition : Condition
        Condition whose ``[bmax, tmax]`` range is sampled.
    step_size : int
        Reward grid resolution.
    rng : numpy.random.Generator
        Session random generator.

    Returns
    -------
    int
        Offered amount, a multiple of ``step_size``.

    Raises
    ------
    DegenerateRangeError
        If ``tmax < bmax``.
    """

    return _sample_on_grid(low=condition.bmax, high=condition.tmax, step_size=step_size, rng=rng)


def sample_filler_reward(standard_amount: int, step_size: int, *, rng: np.random.Generator) -> int:
    """Draw a dummy amount over the full ``[0, standard_amount]`` range."""

    return _sample_on_grid(low=0, high=standard_amount, step_size=step_size, rng=rng)


def _sample_on_grid(*, low: int, high: int, step_size: int, rng: np.random.Generator) -> int:
    """Quantized uniform draw with half-up rounding."""

    if step_size <= 0:
        raise ValueError("step_size must be > 0")
    if high < low:
        raise DegenerateRangeError(f"reward range is inverted: tmax={high} < bmax={low}")

    lo = low / step_size
    hi = high / step_size
    if hi == lo:
        return int(low)
    index = math.floor(float(rng.random()) * (hi - lo) + lo + 0.5)
    return int(index * step_size)


__all__ = ["sample_filler_reward", "sample_reward"]
