"""
trial_placement
===============

Adaptive stimulus-size placement.

This module provides:

- TrialPlacement: begin_trial / record_response protocol
- StaircaseController: 1-up/3-down transformed staircase with reversal tracking
- Continue / Completed: result of each recorded response

Examples
--------
>>> from clearsight.trial_placement import StaircaseController
>>> ctrl = StaircaseController(seed=0)
>>> trial = ctrl.begin_trial()
>>> step = ctrl.record_response(trial.gap)
"""

from clearsight.trial_placement.base import (
    Completed,
    Continue,
    InvalidSequencing,
    StepResult,
    TrialPlacement,
)
from clearsight.trial_placement.staircase import (
    StaircaseConfig,
    StaircaseConfigError,
    StaircaseController,
    StaircaseState,
    StepDirection,
)

__all__ = [
    "TrialPlacement",
    "Continue",
    "Completed",
    "StepResult",
    "InvalidSequencing",
    "StaircaseConfig",
    "StaircaseConfigError",
    "StaircaseController",
    "StaircaseState",
    "StepDirection",
]
