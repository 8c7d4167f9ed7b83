"""
threshold.py
------------

Threshold estimation for a finished staircase session.

Policy
------
- With at least `min_reversals` reversal sizes: geometric mean of all of them.
- Otherwise: geometric mean of `fallback_count` copies of the final stimulus
  size, which is the final size itself.

The >= comparison against `min_reversals` is part of the contract.
"""

from __future__ import annotations

from collections.abc import Sequence

from clearsight.utils.math import DEFAULT_EPSILON, geometric_mean


class ThresholdEstimator:
    """
    Reduce the reversal history of a session to one scalar.

    Parameters
    ----------
    min_reversals : int, default=4
        Minimum number of reversals required to average reversal sizes.
    fallback_count : int, default=10
        Length of the constant sequence used when too few reversals exist.
    epsilon : float, default=1e-5
        Floor applied to every value before averaging.

    Examples
    --------
    >>> est = ThresholdEstimator()
    >>> round(est.estimate([0.1, 0.2, 0.1, 0.2], final_size=0.15), 4)
    0.1414
    >>> round(est.estimate([0.1], final_size=0.12), 4)
    0.12
    """

    def __init__(
        self,
        min_reversals: int = 4,
        fallback_count: int = 10,
        epsilon: float = DEFAULT_EPSILON,
    ):
        if min_reversals < 1:
            raise ValueError(f"min_reversals must be >= 1, got {min_reversals}")
        if fallback_count < 1:
            raise ValueError(f"fallback_count must be >= 1, got {fallback_count}")
        self.min_reversals = min_reversals
        self.fallback_count = fallback_count
        self.epsilon = epsilon

    def uses_reversals(self, reversals: Sequence[float]) -> bool:
        """True if `reversals` is long enough to be averaged directly."""
        return len(reversals) >= self.min_reversals

    def estimate(self, reversals: Sequence[float], final_size: float) -> float:
        """
        Estimate the threshold size.

        Parameters
        ----------
        reversals : Sequence[float]
            Sizes recorded at each reversal, in order.
        final_size : float
            Stimulus size at the end of the session.

        Returns
        -------
        float
            Estimated threshold (normalized size).
        """
        if self.uses_reversals(reversals):
            values = list(reversals)
        else:
            values = [final_size] * self.fallback_count
        return geometric_mean(values, epsilon=self.epsilon)
