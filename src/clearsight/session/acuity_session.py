"""
acuity_session.py
-----------------

AcuitySession orchestrates one acuity test without any UI.

Responsibilities
----------------
1. Drive a StaircaseController through the begin_trial/record_response protocol.
2. Store judged trials in a TrialLog.
3. Append the SessionResult to a SessionHistory exactly once, on completion.
4. Leave the history untouched when a session is abandoned.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from clearsight.data.dataset import GapDirection, SessionResult, Trial, TrialLog
from clearsight.data.io import SessionHistory
from clearsight.trial_placement.base import Completed, InvalidSequencing, StepResult
from clearsight.trial_placement.staircase import StaircaseController

logger = logging.getLogger(__name__)

Responder = Callable[[Trial], GapDirection]


class AcuitySession:
    """
    High-level session driver.

    Parameters
    ----------
    controller : StaircaseController, optional
        Fresh controller for this session. Defaults to StaircaseController().
    history : SessionHistory, optional
        Where the completed result is appended. Defaults to an in-memory
        SessionHistory.

    Attributes
    ----------
    log : TrialLog
        Judged trials of this session.
    result : SessionResult or None
        Set once the session completes.
    abandoned : bool
        True after abandon().
    """

    def __init__(
        self,
        controller: StaircaseController | None = None,
        history: SessionHistory | None = None,
    ):
        if controller is None:
            controller = StaircaseController()
        elif controller.trial_index > 0 or controller.is_finished:
            raise ValueError(
                "controller has already been used; pass a fresh StaircaseController"
            )
        self.controller = controller
        self.history = history if history is not None else SessionHistory()
        self.log = TrialLog()
        self.result: SessionResult | None = None
        self.abandoned = False

    @property
    def is_finished(self) -> bool:
        return self.result is not None or self.abandoned

    def next_trial(self) -> Trial:
        """Prepare and return the next stimulus."""
        if self.abandoned:
            raise InvalidSequencing("session was abandoned")
        return self.controller.begin_trial()

    def respond(self, judged: GapDirection) -> StepResult:
        """
        Report the answer for the current trial.

        Returns
        -------
        Continue or Completed
            On Completed the result has already been appended to the history.
        """
        if self.abandoned:
            raise InvalidSequencing("session was abandoned")
        step = self.controller.record_response(judged)
        self.log.add(self.controller.outcomes[-1])
        if isinstance(step, Completed):
            self.persist()
        return step

    def persist(self) -> SessionResult | None:
        """
        Append the completed result to the history if not stored yet.

        respond() calls this on the last trial. If that write failed, call
        it again to retry.

        Returns
        -------
        SessionResult or None
            The stored result, or None while the session is incomplete.
        """
        if self.result is not None:
            return self.result
        result = self.controller.result
        if result is None:
            return None
        self.history.append(result)
        self.result = result
        logger.info(
            "session finished: threshold %.4f, accuracy %.2f",
            result.threshold_norm,
            self.log.accuracy,
        )
        return result

    def run(self, responder: Responder) -> SessionResult:
        """
        Run the remaining trials to completion.

        Parameters
        ----------
        responder : callable
            Maps each presented Trial to the judged GapDirection
            (e.g. a SimulatedObserver or an input prompt).

        Returns
        -------
        SessionResult
        """
        while True:
            trial = self.next_trial()
            step = self.respond(responder(trial))
            if isinstance(step, Completed):
                return step.result

    def abandon(self) -> None:
        """Stop the session without producing or storing a result."""
        if self.controller.result is not None:
            raise InvalidSequencing("cannot abandon a completed session")
        self.abandoned = True
        self.controller.abandon()
        logger.debug("session abandoned after %d trial(s)", len(self.log))
