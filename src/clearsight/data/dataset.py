"""
dataset.py
-----------

Core data containers for clearsight.

defines:
- GapDirection: orientation of the optotype gap
- Trial: a stimulus ready to be presented
- TrialOutcome: one judged trial
- SessionResult: immutable summary of a completed session
- TrialLog: container for the outcomes of one session

Notes
-----
- Sizes are normalized: stimulus diameter as a fraction of the shorter
  screen side, independent of device resolution.
- TrialLog stores plain Python lists; use to_numpy() for analysis.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np


class GapDirection(enum.Enum):
    """Orientation of the gap in the Landolt-C ring."""

    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"


@dataclass(frozen=True)
class Trial:
    """
    A stimulus to present.

    Attributes
    ----------
    index : int
        0-based trial index within the session.
    size_norm : float
        Normalized ring diameter.
    gap : GapDirection
        Actual gap orientation.
    """

    index: int
    size_norm: float
    gap: GapDirection


@dataclass(frozen=True)
class TrialOutcome:
    """
    One judged trial.

    Attributes
    ----------
    index : int
        0-based trial index.
    size_norm : float
        Stimulus size at the time of judgment.
    judged : GapDirection
        Direction chosen by the user.
    actual : GapDirection
        Direction that was presented.
    """

    index: int
    size_norm: float
    judged: GapDirection
    actual: GapDirection

    @property
    def correct(self) -> bool:
        return self.judged == self.actual


@dataclass(frozen=True)
class SessionResult:
    """
    Summary of a completed session. Never mutated after creation.

    Attributes
    ----------
    timestamp : int
        Creation time in epoch milliseconds.
    trials : int
        Number of trials in the session.
    threshold_norm : float
        Estimated threshold size (normalized).

    Notes
    -----
    The persisted record is a flat mapping with exactly the keys
    ``timestamp``, ``trials`` and ``thresholdNorm``.
    """

    timestamp: int
    trials: int
    threshold_norm: float

    def to_record(self) -> dict[str, Any]:
        """Return the flat persisted form of this result."""
        return {
            "timestamp": int(self.timestamp),
            "trials": int(self.trials),
            "thresholdNorm": float(self.threshold_norm),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> SessionResult:
        """
        Rebuild a SessionResult from its persisted form.

        Parameters
        ----------
        record : Mapping[str, Any]
            Mapping with keys timestamp, trials, thresholdNorm.

        Returns
        -------
        SessionResult

        Raises
        ------
        TypeError
            If `record` is not a mapping or a field has the wrong type.
        ValueError
            If a field is missing.
        """
        if not isinstance(record, Mapping):
            raise TypeError(f"record must be a mapping, got {type(record).__name__}")
        missing = [k for k in ("timestamp", "trials", "thresholdNorm") if k not in record]
        if missing:
            raise ValueError(f"record is missing fields: {', '.join(missing)}")

        timestamp = record["timestamp"]
        trials = record["trials"]
        threshold = record["thresholdNorm"]
        # bool is a subclass of int; reject it explicitly
        for name, value in (("timestamp", timestamp), ("trials", trials)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise TypeError(
                f"thresholdNorm must be a number, got {type(threshold).__name__}"
            )
        return cls(timestamp=timestamp, trials=trials, threshold_norm=float(threshold))


class TrialLog:
    """
    Container for the judged trials of one session.

    Attributes
    ----------
    outcomes : list[TrialOutcome]
        Outcomes in presentation order.
    """

    def __init__(self, outcomes: list[TrialOutcome] | None = None) -> None:
        self.outcomes: list[TrialOutcome] = list(outcomes or [])

    def add(self, outcome: TrialOutcome) -> None:
        """append a single outcome."""
        self.outcomes.append(outcome)

    @property
    def sizes(self) -> list[float]:
        """Stimulus size of every trial, in order."""
        return [o.size_norm for o in self.outcomes]

    @property
    def n_correct(self) -> int:
        return sum(o.correct for o in self.outcomes)

    @property
    def accuracy(self) -> float:
        """Fraction of correct trials (0.0 for an empty log)."""
        if not self.outcomes:
            return 0.0
        return self.n_correct / len(self.outcomes)

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Return sizes and correctness as numpy arrays.

        Returns
        -------
        sizes : np.ndarray
            float array, shape (n_trials,)
        correct : np.ndarray
            bool array, shape (n_trials,)
        """
        return (
            np.array(self.sizes, dtype=float),
            np.array([o.correct for o in self.outcomes], dtype=bool),
        )

    def tail(self, n: int) -> TrialLog:
        """
        Return last n outcomes as a new TrialLog.

        Parameters
        ----------
        n : int
            Number of outcomes to keep
        """
        if n <= 0:
            return TrialLog()
        return TrialLog(self.outcomes[-n:])

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self):
        return iter(self.outcomes)
