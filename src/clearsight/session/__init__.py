"""
session
=======

Session orchestration.

This subpackage provides:
- AcuitySession : a headless driver that runs a staircase, keeps the trial
  log, and appends the final result to the session history.
"""

from .acuity_session import AcuitySession

__all__ = ["AcuitySession"]
