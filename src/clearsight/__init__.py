"""
clearsight
==========

Landolt-C visual-acuity self-test: adaptive staircase and threshold estimation.

A ring with a directional gap is shown at a size that adapts to the user's
answers (3 correct in a row -> smaller, 1 error -> larger). At the end of a
fixed number of trials the sizes at which the staircase reversed direction
are reduced to a single threshold estimate, stored in a session history.

This is not a medical device. Estimates are informational only.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. StaircaseController (trial_placement/staircase.py):
   - Owns the per-session StaircaseState.
   - begin_trial() -> Trial(index, size_norm, gap)
   - record_response(judged) -> Continue | Completed(SessionResult)

2. ThresholdEstimator (inference/threshold.py):
   - Geometric mean of reversal sizes when there are at least 4.
   - Otherwise the final stimulus size.

3. SessionHistory (data/io.py):
   - Most-recent-first list of SessionResult, persisted as JSON.

4. AcuitySession (session/acuity_session.py):
   - Headless driver tying a controller, a TrialLog and a SessionHistory.

Unified import style
--------------------
Top-level:
  from clearsight import StaircaseController, StaircaseConfig, ThresholdEstimator
  from clearsight import AcuitySession, SessionHistory, SessionResult, GapDirection

Subpackages:
  from clearsight.trial_placement import Continue, Completed, InvalidSequencing
  from clearsight.model import SimulatedObserver, ObserverConfig
  from clearsight.utils import ScriptedDirectionSource, summarize_history

Data flow
---------
- A driver calls begin_trial(), renders the Trial, collects the user's
  GapDirection and passes it to record_response().
- Each response may shrink or grow size_norm, clamped to [min_norm, max_norm].
- On the last trial the controller builds a SessionResult and the driver
  appends it to the SessionHistory.

----------------------------------------------------------------------
"""

# Re-export subpackages for unified import style (e.g., clearsight.data)
from . import data as data
from . import inference as inference
from . import model as model
from . import session as session
from . import trial_placement as trial_placement
from . import utils as utils

# Data
from .data.dataset import GapDirection, SessionResult, Trial, TrialLog, TrialOutcome
from .data.io import SessionHistory

# Inference
from .inference.threshold import ThresholdEstimator

# Observer models
from .model.observer import ObserverConfig, SimulatedObserver

# Session orchestration
from .session.acuity_session import AcuitySession

# Placement
from .trial_placement.base import Completed, Continue, InvalidSequencing
from .trial_placement.staircase import (
    StaircaseConfig,
    StaircaseConfigError,
    StaircaseController,
)

__version__ = "0.1.0"

__all__ = [
    # Staircase
    "StaircaseController",
    "StaircaseConfig",
    "StaircaseConfigError",
    "Continue",
    "Completed",
    "InvalidSequencing",
    # Estimation
    "ThresholdEstimator",
    # Data handling
    "GapDirection",
    "Trial",
    "TrialOutcome",
    "TrialLog",
    "SessionResult",
    "SessionHistory",
    # Observers
    "ObserverConfig",
    "SimulatedObserver",
    # Session orchestration
    "AcuitySession",
    # Subpackages
    "data",
    "inference",
    "model",
    "session",
    "trial_placement",
    "utils",
]
