"""
model
=====

Observer models used to simulate acuity sessions.

Includes:
- ObserverConfig : psychometric parameters
- SimulatedObserver : 4-alternative respondent with a logistic psychometric function
"""

from .observer import ObserverConfig, SimulatedObserver

__all__ = ["ObserverConfig", "SimulatedObserver"]
