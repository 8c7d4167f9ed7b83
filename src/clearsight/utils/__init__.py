"""
utils
=====

Shared utility functions and helpers for clearsight.

This subpackage provides:
- diagnostics : history summaries and result formatting.
- math : clamp and log-space geometric mean.
- rng : JAX PRNG helpers and gap-direction sources.
"""

from .diagnostics import (
    HistorySummary,
    format_session_result,
    reversal_midpoints,
    summarize_history,
)
from .math import clamp, geometric_mean
from .rng import KeyDirectionSource, ScriptedDirectionSource, seed, split

__all__ = [
    # diagnostics
    "HistorySummary",
    "summarize_history",
    "format_session_result",
    "reversal_midpoints",
    # math
    "clamp",
    "geometric_mean",
    # rng
    "seed",
    "split",
    "KeyDirectionSource",
    "ScriptedDirectionSource",
]
