"""Exception and warning types raised by the titration core."""

from __future__ import annotations


class InvalidResponseError(ValueError):
    """Raised when a response is not one of the offered choice options.

    Bracket state is never mutated when this error is raised.
    """


class DegenerateRangeError(RuntimeError):
    """Raised when a reward range is inverted (``tmax < bmax``).

    Notes
    -----
    The bracket updater preserves ``bmax <= bmin <= tmin <= tmax``, so this
    error means a condition was corrupted outside the updater. It is fatal to
    the session.
    """


class SequencingWarning(UserWarning):
    """Emitted when no trial order can avoid immediate condition repeats."""


__all__ = ["DegenerateRangeError", "InvalidResponseError", "SequencingWarning"]
