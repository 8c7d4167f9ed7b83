"""
inference
=========

Estimation of a perceptual threshold from a finished session.

This subpackage provides:
- ThresholdEstimator : geometric mean of reversal sizes, with a
  final-size fallback when a session produced too few reversals.
"""

from .threshold import ThresholdEstimator

__all__ = ["ThresholdEstimator"]
