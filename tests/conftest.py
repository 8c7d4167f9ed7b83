"""
Central pytest configuration for this project.

This file is automatically discovered by pytest and is intended for:

- **Fixtures**: reusable objects or setup logic shared across multiple test files.

Notes
-----
- Contributors should install the package in editable mode (`pip install -e .`)
  so that imports are resolved consistently in local dev and CI environments.
- Keep this file focused on test setup. Do not add application logic here.
"""

import pytest

from clearsight.data.dataset import GapDirection
from clearsight.trial_placement.staircase import StaircaseConfig, StaircaseController
from clearsight.utils.rng import ScriptedDirectionSource

FIXED_TIMESTAMP = 1_700_000_000_000


@pytest.fixture
def make_controller():
    """
    Factory for controllers whose gap is always UP.

    Answering UP is then a correct response and DOWN an incorrect one.
    """

    def _make(config=None, **config_kwargs):
        if config is None:
            config = StaircaseConfig(**config_kwargs)
        directions = ScriptedDirectionSource([GapDirection.UP] * config.total_trials)
        return StaircaseController(
            config, directions=directions, clock=lambda: FIXED_TIMESTAMP
        )

    return _make


@pytest.fixture
def answer():
    """Run begin_trial/record_response with a correct (True) or wrong (False) answer."""

    def _answer(controller, correct):
        trial = controller.begin_trial()
        judged = trial.gap if correct else GapDirection.DOWN
        return controller.record_response(judged)

    return _answer


@pytest.fixture
def fixed_timestamp():
    """Epoch-millis value returned by the clock of make_controller."""
    return FIXED_TIMESTAMP
