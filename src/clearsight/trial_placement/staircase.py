"""
staircase.py
------------

Classical transformed staircase placement (1-up, 3-down).

- Three consecutive correct answers shrink the stimulus by a constant factor.
- One incorrect answer grows it by a constant factor.
- Sizes are clamped to [min_norm, max_norm].
- A reversal is recorded when the step direction flips; the recorded value
  is the size that was active just before the flipping step was applied.

After `total_trials` responses the reversal sizes go to a ThresholdEstimator
and the session ends with a SessionResult.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from clearsight.data.dataset import GapDirection, SessionResult, Trial, TrialOutcome
from clearsight.inference.threshold import ThresholdEstimator
from clearsight.utils.math import clamp
from clearsight.utils.rng import KeyDirectionSource, seed

from .base import Completed, Continue, InvalidSequencing, StepResult, TrialPlacement

logger = logging.getLogger(__name__)

DirectionSource = Callable[[], GapDirection]
Clock = Callable[[], int]


class StaircaseConfigError(ValueError):
    """Raised for a degenerate staircase configuration."""


class StepDirection(enum.Enum):
    """Direction of a size change: DOWN shrinks the stimulus, UP grows it."""

    DOWN = "down"
    UP = "up"


@dataclass(frozen=True)
class StaircaseConfig:
    """
    Fixed parameters of one staircase session.

    Attributes
    ----------
    total_trials : int
        Number of trials in the session.
    initial_size_norm : float
        Starting stimulus size.
    min_norm, max_norm : float
        Bounds on the stimulus size.
    step_down_factor : float
        Multiplicative shrink after a full correct streak, in (0, 1).
    step_up_factor : float
        Multiplicative growth after an incorrect answer, > 1.
    correct_streak_threshold : int
        Consecutive correct answers needed for a shrink.
    gap_angle_degrees : float
        Angular width of the gap. Only used by renderers.
    """

    total_trials: int = 30
    initial_size_norm: float = 0.18
    min_norm: float = 0.03
    max_norm: float = 0.5
    step_down_factor: float = 0.85
    step_up_factor: float = 1.2
    correct_streak_threshold: int = 3
    gap_angle_degrees: float = 40.0

    def __post_init__(self):
        """Validate configuration."""
        if self.total_trials < 1:
            raise StaircaseConfigError(
                f"total_trials must be >= 1, got {self.total_trials}"
            )
        if self.min_norm <= 0:
            raise StaircaseConfigError(f"min_norm must be positive, got {self.min_norm}")
        if self.min_norm >= self.max_norm:
            raise StaircaseConfigError(
                f"min_norm ({self.min_norm}) must be < max_norm ({self.max_norm})"
            )
        if not self.min_norm <= self.initial_size_norm <= self.max_norm:
            raise StaircaseConfigError(
                f"initial_size_norm ({self.initial_size_norm}) must lie in "
                f"[{self.min_norm}, {self.max_norm}]"
            )
        if not 0 < self.step_down_factor < 1:
            raise StaircaseConfigError(
                f"step_down_factor must be in (0, 1), got {self.step_down_factor}"
            )
        if self.step_up_factor <= 1:
            raise StaircaseConfigError(
                f"step_up_factor must be > 1, got {self.step_up_factor}"
            )
        if self.correct_streak_threshold < 1:
            raise StaircaseConfigError(
                "correct_streak_threshold must be >= 1, "
                f"got {self.correct_streak_threshold}"
            )
        if not 0 < self.gap_angle_degrees < 360:
            raise StaircaseConfigError(
                f"gap_angle_degrees must be in (0, 360), got {self.gap_angle_degrees}"
            )


@dataclass
class StaircaseState:
    """
    Mutable per-session state. Owned by a single StaircaseController.

    Attributes
    ----------
    size_norm : float
        Current stimulus size.
    correct_streak : int
        Consecutive correct answers since the last step.
    last_step : StepDirection or None
        Direction of the most recent size change, None before the first one.
    reversals : list[float]
        Sizes recorded at each reversal.
    trial_index : int
        Number of responses recorded so far.
    """

    size_norm: float
    correct_streak: int = 0
    last_step: StepDirection | None = None
    reversals: list[float] = field(default_factory=list)
    trial_index: int = 0


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class StaircaseController(TrialPlacement):
    """
    Adaptive 1-up/3-down staircase over a fixed number of trials.

    Parameters
    ----------
    config : StaircaseConfig, optional
        Session parameters. Defaults to StaircaseConfig().
    directions : callable, optional
        Zero-argument callable returning the gap direction of each trial.
        Defaults to a KeyDirectionSource seeded with `seed`.
    estimator : ThresholdEstimator, optional
        Threshold estimator used at session end.
    clock : callable, optional
        Zero-argument callable returning epoch milliseconds.
    seed : int, optional
        Seed for the default direction source. Ignored if `directions` is
        given; if both are None the seed is taken from the clock.

    Examples
    --------
    >>> ctrl = StaircaseController(seed=0)
    >>> trial = ctrl.begin_trial()
    >>> step = ctrl.record_response(trial.gap)
    """

    def __init__(
        self,
        config: StaircaseConfig | None = None,
        *,
        directions: DirectionSource | None = None,
        estimator: ThresholdEstimator | None = None,
        clock: Clock | None = None,
        seed: int | None = None,
    ):
        self._config = config if config is not None else StaircaseConfig()
        if directions is None:
            directions = _default_directions(seed)
        self._directions = directions
        self._estimator = estimator if estimator is not None else ThresholdEstimator()
        self._clock = clock if clock is not None else _epoch_millis

        self._state = StaircaseState(size_norm=self._config.initial_size_norm)
        self._pending: Trial | None = None
        self._outcomes: list[TrialOutcome] = []
        self._result: SessionResult | None = None
        self._finished = False

    # ------------------------------------------------------------------
    # READ-ONLY VIEWS
    # ------------------------------------------------------------------
    @property
    def config(self) -> StaircaseConfig:
        return self._config

    @property
    def state(self) -> StaircaseState:
        """Copy of the current state."""
        return replace(self._state, reversals=list(self._state.reversals))

    @property
    def size_norm(self) -> float:
        return self._state.size_norm

    @property
    def trial_index(self) -> int:
        return self._state.trial_index

    @property
    def reversals(self) -> tuple[float, ...]:
        return tuple(self._state.reversals)

    @property
    def outcomes(self) -> tuple[TrialOutcome, ...]:
        return tuple(self._outcomes)

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def result(self) -> SessionResult | None:
        """SessionResult once completed, None otherwise (including abandon)."""
        return self._result

    # ------------------------------------------------------------------
    # TRIAL PROTOCOL
    # ------------------------------------------------------------------
    def begin_trial(self) -> Trial:
        """
        Prepare the next trial with a freshly drawn gap direction.

        Returns
        -------
        Trial
            Current size and gap direction.

        Raises
        ------
        InvalidSequencing
            If a trial is already pending or the session has ended.
        """
        if self._finished:
            raise InvalidSequencing("session has ended; start a new controller")
        if self._pending is not None:
            raise InvalidSequencing(
                f"trial {self._pending.index} is still awaiting a response"
            )
        gap = self._directions()
        self._pending = Trial(
            index=self._state.trial_index, size_norm=self._state.size_norm, gap=gap
        )
        return self._pending

    def record_response(self, judged: GapDirection) -> StepResult:
        """
        Record the user's answer for the pending trial and adapt the size.

        Parameters
        ----------
        judged : GapDirection
            Direction chosen by the user.

        Returns
        -------
        Continue or Completed
            Completed (with the SessionResult) on the last trial.

        Raises
        ------
        InvalidSequencing
            If no trial is pending or the session has ended.
        TypeError
            If `judged` is not a GapDirection.
        """
        if self._finished:
            raise InvalidSequencing("session has ended; start a new controller")
        if self._pending is None:
            raise InvalidSequencing("record_response called without begin_trial")
        if not isinstance(judged, GapDirection):
            raise TypeError(f"judged must be a GapDirection, got {type(judged).__name__}")

        trial, self._pending = self._pending, None
        outcome = TrialOutcome(
            index=trial.index, size_norm=trial.size_norm, judged=judged, actual=trial.gap
        )
        self._outcomes.append(outcome)

        if outcome.correct:
            self._state.correct_streak += 1
            if self._state.correct_streak >= self._config.correct_streak_threshold:
                self._state.correct_streak = 0
                self._step(StepDirection.DOWN)
        else:
            self._state.correct_streak = 0
            self._step(StepDirection.UP)

        self._state.trial_index += 1
        if self._state.trial_index >= self._config.total_trials:
            return Completed(self._complete())
        return Continue(next_index=self._state.trial_index, size_norm=self._state.size_norm)

    def abandon(self) -> None:
        """End the session without producing a SessionResult."""
        if self._finished:
            return
        self._finished = True
        self._pending = None
        logger.debug("staircase abandoned after %d trial(s)", self._state.trial_index)

    # ------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------
    def _step(self, direction: StepDirection) -> None:
        cfg = self._config
        before = self._state.size_norm
        if direction is StepDirection.DOWN:
            after = clamp(before * cfg.step_down_factor, cfg.min_norm, cfg.max_norm)
        else:
            after = clamp(before * cfg.step_up_factor, cfg.min_norm, cfg.max_norm)

        last = self._state.last_step
        if last is not None and last is not direction:
            # pre-step size marks the reversal
            self._state.reversals.append(before)
            logger.debug(
                "reversal #%d at size %.4f (trial %d)",
                len(self._state.reversals),
                before,
                self._state.trial_index,
            )
        self._state.last_step = direction
        self._state.size_norm = after

    def _complete(self) -> SessionResult:
        cfg = self._config
        estimate = self._estimator.estimate(
            self._state.reversals, final_size=self._state.size_norm
        )
        # rounding in the estimate must not leave the size bounds
        threshold = clamp(estimate, cfg.min_norm, cfg.max_norm)
        self._result = SessionResult(
            timestamp=int(self._clock()),
            trials=cfg.total_trials,
            threshold_norm=threshold,
        )
        self._finished = True
        logger.info(
            "staircase completed: %d trials, %d reversals, threshold %.4f",
            self._config.total_trials,
            len(self._state.reversals),
            threshold,
        )
        return self._result


def _default_directions(seed_value: int | None) -> DirectionSource:
    if seed_value is None:
        seed_value = time.time_ns() % (2**31)
    return KeyDirectionSource(seed(seed_value))
