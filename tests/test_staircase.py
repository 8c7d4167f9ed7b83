"""
test_staircase.py
-----------------

Tests for the 1-up/3-down StaircaseController.

Coverage:
- size adaptation (shrink after a correct streak, growth after an error)
- clamping to [min_norm, max_norm]
- reversal detection and the pre-step reversal value
- session completion and the Continue/Completed protocol
- sequencing errors and configuration validation
"""

import math

import jax.random as jr
import pytest

from clearsight.data.dataset import GapDirection
from clearsight.model.observer import ObserverConfig, SimulatedObserver
from clearsight.trial_placement import (
    Completed,
    Continue,
    InvalidSequencing,
    StaircaseConfig,
    StaircaseConfigError,
    StaircaseController,
    StepDirection,
)
from clearsight.utils.rng import KeyDirectionSource, seed

# ============================================================================
# Size adaptation
# ============================================================================


class TestSizeAdaptation:
    """Shrink and growth rules."""

    def test_two_correct_do_not_change_size(self, make_controller, answer):
        ctrl = make_controller()
        answer(ctrl, True)
        answer(ctrl, True)
        assert ctrl.size_norm == pytest.approx(0.18)
        assert ctrl.state.correct_streak == 2
        assert ctrl.state.last_step is None

    def test_three_correct_shrink_once_and_reset_streak(self, make_controller, answer):
        ctrl = make_controller()
        for _ in range(3):
            answer(ctrl, True)
        assert ctrl.size_norm == pytest.approx(0.18 * 0.85)
        assert ctrl.state.correct_streak == 0
        assert ctrl.state.last_step is StepDirection.DOWN

    def test_incorrect_grows_and_resets_streak(self, make_controller, answer):
        ctrl = make_controller()
        answer(ctrl, True)
        answer(ctrl, True)
        answer(ctrl, False)
        assert ctrl.size_norm == pytest.approx(0.18 * 1.2)
        assert ctrl.state.correct_streak == 0
        assert ctrl.state.last_step is StepDirection.UP

    def test_streak_restarts_after_error(self, make_controller, answer):
        """Two correct, one wrong, then three more correct are needed to shrink."""
        ctrl = make_controller()
        answer(ctrl, True)
        answer(ctrl, True)
        answer(ctrl, False)
        grown = ctrl.size_norm

        answer(ctrl, True)
        answer(ctrl, True)
        assert ctrl.size_norm == grown
        answer(ctrl, True)
        assert ctrl.size_norm == pytest.approx(grown * 0.85)

    def test_growth_is_clamped_to_max(self, make_controller, answer):
        ctrl = make_controller()
        for _ in range(10):
            answer(ctrl, False)
            assert ctrl.size_norm <= 0.5
        assert ctrl.size_norm == 0.5

    def test_shrink_is_clamped_to_min(self, make_controller, answer):
        ctrl = make_controller(min_norm=0.1, initial_size_norm=0.12)
        for _ in range(6):
            answer(ctrl, True)
        assert ctrl.size_norm == 0.1

    def test_trial_reports_size_before_response(self, make_controller, answer):
        ctrl = make_controller()
        for _ in range(3):
            answer(ctrl, True)
        trial = ctrl.begin_trial()
        assert trial.index == 3
        assert trial.size_norm == pytest.approx(0.18 * 0.85)

    def test_sizes_stay_in_bounds_with_simulated_observer(self):
        config = StaircaseConfig(total_trials=200)
        ctrl = StaircaseController(config, directions=KeyDirectionSource(seed(3)))
        observer = SimulatedObserver(ObserverConfig(threshold_norm=0.06), jr.PRNGKey(7))
        step = None
        while not isinstance(step, Completed):
            trial = ctrl.begin_trial()
            step = ctrl.record_response(observer.respond(trial))
            assert config.min_norm <= ctrl.size_norm <= config.max_norm


# ============================================================================
# Reversals
# ============================================================================


class TestReversals:
    """Reversal detection and recorded values."""

    def test_first_step_is_not_a_reversal(self, make_controller, answer):
        ctrl = make_controller()
        answer(ctrl, False)
        assert ctrl.reversals == ()
        assert ctrl.state.last_step is StepDirection.UP

    def test_same_direction_does_not_record(self, make_controller, answer):
        ctrl = make_controller()
        answer(ctrl, False)
        answer(ctrl, False)
        assert ctrl.reversals == ()

    def test_flip_records_pre_step_size(self, make_controller, answer):
        ctrl = make_controller()
        for _ in range(3):
            answer(ctrl, True)  # down to 0.153
        answer(ctrl, False)  # up: reversal at 0.153, size 0.1836
        assert ctrl.reversals == pytest.approx((0.153,))
        assert ctrl.size_norm == pytest.approx(0.1836)

        for _ in range(3):
            answer(ctrl, True)  # down: reversal at 0.1836
        assert ctrl.reversals == pytest.approx((0.153, 0.1836))
        assert ctrl.size_norm == pytest.approx(0.1836 * 0.85)

    def test_correct_without_full_streak_never_records(self, make_controller, answer):
        ctrl = make_controller()
        answer(ctrl, False)
        answer(ctrl, True)
        answer(ctrl, True)
        assert ctrl.reversals == ()


# ============================================================================
# Completion
# ============================================================================


class TestCompletion:
    """Session length, Continue/Completed results and threshold."""

    def test_continue_until_last_trial(self, make_controller, answer):
        ctrl = make_controller(total_trials=5)
        steps = [answer(ctrl, True) for _ in range(5)]
        assert all(isinstance(s, Continue) for s in steps[:-1])
        assert isinstance(steps[-1], Completed)
        assert [s.next_index for s in steps[:-1]] == [1, 2, 3, 4]
        assert ctrl.is_finished

    def test_result_fields(self, make_controller, answer, fixed_timestamp):
        ctrl = make_controller(total_trials=3)
        for _ in range(3):
            step = answer(ctrl, True)
        result = step.result
        assert result is ctrl.result
        assert result.timestamp == fixed_timestamp
        assert result.trials == 3
        assert result.threshold_norm == pytest.approx(ctrl.size_norm, rel=1e-6)

    def test_all_correct_default_session(self, make_controller, answer):
        """30 correct answers shrink every 3rd trial and fall back to the final size."""
        ctrl = make_controller()
        sizes = [ctrl.size_norm]
        steps = []
        for _ in range(30):
            steps.append(answer(ctrl, True))
            sizes.append(ctrl.size_norm)

        assert all(b <= a for a, b in zip(sizes, sizes[1:]))
        shrink_trials = [i + 1 for i in range(30) if sizes[i + 1] < sizes[i]]
        assert shrink_trials == list(range(3, 31, 3))
        assert ctrl.reversals == ()
        assert ctrl.size_norm == pytest.approx(0.18 * 0.85**10)

        assert sum(isinstance(s, Completed) for s in steps) == 1
        assert isinstance(steps[-1], Completed)
        assert steps[-1].result.threshold_norm == pytest.approx(ctrl.size_norm, rel=1e-6)

    def test_threshold_from_reversals(self, make_controller, answer):
        """Three (correct x3, wrong) cycles produce five reversals."""
        ctrl = make_controller(total_trials=12)
        for _ in range(3):
            for _ in range(3):
                answer(ctrl, True)
            step = answer(ctrl, False)

        expected_reversals = [0.153, 0.1836, 0.15606, 0.187272, 0.1591812]
        assert ctrl.reversals == pytest.approx(expected_reversals)
        expected = math.exp(sum(math.log(r) for r in expected_reversals) / 5)
        assert isinstance(step, Completed)
        assert step.result.threshold_norm == pytest.approx(expected, rel=1e-5)

    @pytest.mark.parametrize("max_norm", [0.3, 0.31, 0.33, 0.35, 0.49])
    def test_threshold_at_ceiling_stays_within_max(self, make_controller, answer, max_norm):
        """An all-incorrect run pinned at max_norm reports max_norm, never above."""
        ctrl = make_controller(
            total_trials=12, initial_size_norm=max_norm, max_norm=max_norm
        )
        for _ in range(12):
            step = answer(ctrl, False)
        assert ctrl.reversals == ()
        assert isinstance(step, Completed)
        assert step.result.threshold_norm <= max_norm
        assert step.result.threshold_norm == pytest.approx(max_norm)

    def test_outcomes_recorded(self, make_controller, answer):
        ctrl = make_controller(total_trials=4)
        answer(ctrl, True)
        answer(ctrl, False)
        outcomes = ctrl.outcomes
        assert [o.index for o in outcomes] == [0, 1]
        assert [o.correct for o in outcomes] == [True, False]
        assert outcomes[1].judged is GapDirection.DOWN
        assert outcomes[1].actual is GapDirection.UP


# ============================================================================
# Sequencing
# ============================================================================


class TestSequencing:
    """begin_trial/record_response must alternate."""

    def test_record_without_begin(self, make_controller):
        ctrl = make_controller()
        with pytest.raises(InvalidSequencing):
            ctrl.record_response(GapDirection.UP)

    def test_record_twice(self, make_controller):
        ctrl = make_controller()
        trial = ctrl.begin_trial()
        ctrl.record_response(trial.gap)
        with pytest.raises(InvalidSequencing):
            ctrl.record_response(trial.gap)

    def test_begin_twice(self, make_controller):
        ctrl = make_controller()
        ctrl.begin_trial()
        with pytest.raises(InvalidSequencing):
            ctrl.begin_trial()

    def test_calls_after_completion(self, make_controller, answer):
        ctrl = make_controller(total_trials=1)
        assert isinstance(answer(ctrl, True), Completed)
        with pytest.raises(InvalidSequencing):
            ctrl.begin_trial()
        with pytest.raises(InvalidSequencing):
            ctrl.record_response(GapDirection.UP)

    def test_non_direction_rejected(self, make_controller):
        ctrl = make_controller()
        ctrl.begin_trial()
        with pytest.raises(TypeError):
            ctrl.record_response("up")
        # the trial is still pending
        ctrl.record_response(GapDirection.UP)

    def test_abandon_produces_no_result(self, make_controller, answer):
        ctrl = make_controller()
        answer(ctrl, True)
        ctrl.begin_trial()
        ctrl.abandon()
        assert ctrl.result is None
        assert ctrl.is_finished
        with pytest.raises(InvalidSequencing):
            ctrl.begin_trial()

    def test_state_is_a_copy(self, make_controller, answer):
        ctrl = make_controller()
        for _ in range(3):
            answer(ctrl, True)
        answer(ctrl, False)
        state = ctrl.state
        state.reversals.append(1.0)
        state.size_norm = 0.0
        assert len(ctrl.reversals) == 1
        assert ctrl.size_norm > 0


# ============================================================================
# Configuration
# ============================================================================


class TestConfig:
    """StaircaseConfig defaults and validation."""

    def test_defaults(self):
        cfg = StaircaseConfig()
        assert cfg.total_trials == 30
        assert cfg.initial_size_norm == 0.18
        assert (cfg.min_norm, cfg.max_norm) == (0.03, 0.5)
        assert (cfg.step_down_factor, cfg.step_up_factor) == (0.85, 1.2)
        assert cfg.correct_streak_threshold == 3

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_norm": 0.5, "max_norm": 0.5},
            {"min_norm": 0.6, "max_norm": 0.5},
            {"min_norm": 0.0},
            {"initial_size_norm": 0.9},
            {"step_down_factor": 1.0},
            {"step_up_factor": 1.0},
            {"correct_streak_threshold": 0},
            {"total_trials": 0},
            {"gap_angle_degrees": 0.0},
        ],
    )
    def test_degenerate_config_rejected(self, kwargs):
        with pytest.raises(StaircaseConfigError):
            StaircaseConfig(**kwargs)

    def test_step_direction_documented(self):
        assert StepDirection.__doc__

    def test_seeded_controllers_repeat_directions(self):
        a = StaircaseController(seed=11)
        b = StaircaseController(seed=11)
        gaps_a, gaps_b = [], []
        for _ in range(10):
            ta, tb = a.begin_trial(), b.begin_trial()
            gaps_a.append(ta.gap)
            gaps_b.append(tb.gap)
            a.record_response(ta.gap)
            b.record_response(tb.gap)
        assert gaps_a == gaps_b
