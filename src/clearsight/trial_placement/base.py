"""
base.py
-------

Abstract base class for trial placement strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from clearsight.data.dataset import GapDirection, SessionResult, Trial


@dataclass(frozen=True)
class Continue:
    """More trials remain; `size_norm` is the size of the next trial."""

    next_index: int
    size_norm: float


@dataclass(frozen=True)
class Completed:
    """The trial budget is exhausted."""

    result: SessionResult


StepResult = Union[Continue, Completed]


class InvalidSequencing(RuntimeError):
    """
    Raised when begin_trial/record_response are called out of order.

    The placement instance cannot be used after this error; start a new
    session instead.
    """


class TrialPlacement(ABC):
    """
    Abstract interface for trial placement strategies.

    Methods
    -------
    begin_trial() -> Trial
        Prepare the next stimulus.
    record_response(judged) -> Continue | Completed
        Report the user's answer for the pending trial.

    Calls must alternate: begin_trial, record_response, begin_trial, ...
    """

    @abstractmethod
    def begin_trial(self) -> Trial:
        """
        Prepare the next trial.

        Returns
        -------
        Trial
            Stimulus size and gap direction to present.
        """
        raise NotImplementedError()

    @abstractmethod
    def record_response(self, judged: GapDirection) -> StepResult:
        """
        Record the answer for the pending trial.

        Parameters
        ----------
        judged : GapDirection
            Direction chosen by the user.

        Returns
        -------
        Continue or Completed
        """
        raise NotImplementedError()
