"""
clearsight.data
===============

submodule for handling acuity session data.

Includes:
- dataset: GapDirection, Trial, TrialOutcome, SessionResult, TrialLog
- io: SessionHistory storage and CSV trial logs
"""

from .dataset import GapDirection, SessionResult, Trial, TrialLog, TrialOutcome
from .io import SessionHistory, load_trial_log_csv, save_trial_log_csv

__all__ = [
    "GapDirection",
    "Trial",
    "TrialOutcome",
    "SessionResult",
    "TrialLog",
    "SessionHistory",
    "save_trial_log_csv",
    "load_trial_log_csv",
]
