"""
math.py
-------

Math utilities for clearsight.

Includes:
- clamp : bound a scalar to a closed interval.
- geometric_mean : log-space geometric mean with an epsilon floor.

geometric_mean works in float64 NumPy (JAX defaults to float32, which can
round a size past its bound) and returns a plain Python float so the result
can be stored in a SessionResult and serialized directly.

Examples
--------
>>> from clearsight.utils import math
>>> round(math.geometric_mean([0.1, 0.2, 0.1, 0.2]), 4)
0.1414
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

DEFAULT_EPSILON = 1e-5


def clamp(value: float, lower: float, upper: float) -> float:
    """Return value bounded to [lower, upper]."""
    return min(max(value, lower), upper)


def geometric_mean(values: Sequence[float], epsilon: float = DEFAULT_EPSILON) -> float:
    """
    Geometric mean of positive values, computed in log space.

    Parameters
    ----------
    values : Sequence[float]
        Values to average. Non-positive or tiny entries are floored to
        `epsilon` before taking logs.
    epsilon : float, default=1e-5
        Floor applied to every value.

    Returns
    -------
    float
        (prod max(v, epsilon)) ** (1 / n)

    Raises
    ------
    ValueError
        If `values` is empty or `epsilon` is not positive.

    Notes
    -----
    The product is accumulated as a sum of logs, which stays finite for long
    sequences of small values where a direct product would underflow.
    """
    if epsilon <= 0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")
    x = np.asarray(values, dtype=np.float64)
    if x.ndim != 1 or x.shape[0] == 0:
        raise ValueError("values must be a non-empty 1-D sequence")
    x = np.maximum(x, epsilon)
    return float(np.exp(np.mean(np.log(x))))
