"""
diagnostics.py
--------------

Summaries and text formatting for stored session results.

Estimates are informational only; nothing here is a clinical measure.
"""

from __future__ import annotations

import datetime as _dt
import math
from collections.abc import Sequence
from dataclasses import dataclass

from clearsight.data.dataset import SessionResult
from clearsight.utils.math import geometric_mean

INFORMATIONAL_NOTE = (
    "Estimate from a 3-down/1-up staircase. For informational use only; "
    "not a medical device."
)


@dataclass(frozen=True)
class HistorySummary:
    """
    Aggregate view of a session history.

    Attributes
    ----------
    n_sessions : int
    latest : SessionResult or None
        Most recent result.
    best : SessionResult or None
        Result with the smallest threshold.
    geometric_mean : float or None
        Geometric mean of all thresholds.
    """

    n_sessions: int
    latest: SessionResult | None
    best: SessionResult | None
    geometric_mean: float | None


def summarize_history(results: Sequence[SessionResult]) -> HistorySummary:
    """
    Summarize a most-recent-first list of results.

    Parameters
    ----------
    results : Sequence[SessionResult]

    Returns
    -------
    HistorySummary
    """
    if not results:
        return HistorySummary(n_sessions=0, latest=None, best=None, geometric_mean=None)
    return HistorySummary(
        n_sessions=len(results),
        latest=results[0],
        best=min(results, key=lambda r: r.threshold_norm),
        geometric_mean=geometric_mean([r.threshold_norm for r in results]),
    )


def format_session_result(result: SessionResult, tz: _dt.tzinfo | None = None) -> str:
    """
    Human-readable description of one result.

    The threshold is shown as a percentage of the screen's short side.

    >>> r = SessionResult(timestamp=0, trials=30, threshold_norm=0.0625)
    >>> print(format_session_result(r, tz=_dt.timezone.utc))
    Session of 1970-01-01 00:00
    Trials: 30
    Estimated threshold (relative): 6.25 % of the short side
    Estimate from a 3-down/1-up staircase. For informational use only; not a medical device.
    """
    when = _dt.datetime.fromtimestamp(result.timestamp / 1000, tz=tz)
    return "\n".join(
        [
            f"Session of {when:%Y-%m-%d %H:%M}",
            f"Trials: {result.trials}",
            f"Estimated threshold (relative): {result.threshold_norm * 100:.2f} % of the short side",
            INFORMATIONAL_NOTE,
        ]
    )


def reversal_midpoints(reversals: Sequence[float]) -> list[float]:
    """
    Geometric midpoints of consecutive reversal pairs.

    Parameters
    ----------
    reversals : Sequence[float]
        Reversal sizes in order.

    Returns
    -------
    list[float]
        sqrt(r[i] * r[i + 1]) for each adjacent pair; empty for fewer than
        two reversals.
    """
    return [math.sqrt(a * b) for a, b in zip(reversals[:-1], reversals[1:])]
