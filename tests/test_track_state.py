"""Tests for the track state machine."""

import unittest

import pytest

from configs.settings import StateConfig
from exceptions import UnknownTrackStateError
from track.state import MotionEvidence, TrackState, TrackStateMachine, state_label

LOW = 0.05
HIGH = 0.5


class TestTrackStateMachine(unittest.TestCase):
    """Hysteresis transitions with the default thresholds."""

    def setUp(self):
        self.machine = TrackStateMachine()

    def test_starts_uncertain(self):
        self.assertIs(self.machine.state, TrackState.UNCERTAIN)
        self.assertEqual(self.machine.uncertain_frames, 0)

    def test_classify(self):
        self.assertIs(self.machine.classify(None), MotionEvidence.UNAVAILABLE)
        self.assertIs(self.machine.classify(LOW), MotionEvidence.STATIC)
        self.assertIs(self.machine.classify(0.20), MotionEvidence.STATIC)
        self.assertIs(self.machine.classify(HIGH), MotionEvidence.DYNAMIC)

    def test_uncertain_to_static_in_one_frame(self):
        self.assertIs(self.machine.step(LOW), TrackState.STATIC)

    def test_uncertain_to_dynamic_in_one_frame(self):
        self.assertIs(self.machine.step(HIGH), TrackState.DYNAMIC)

    def test_uncertain_stays_uncertain_without_estimates(self):
        for _ in range(10):
            self.assertIs(self.machine.step(None), TrackState.UNCERTAIN)
        self.assertEqual(self.machine.uncertain_frames, 0)

    def test_static_reverts_after_exceeding_limit(self):
        self.machine.step(LOW)
        for expected_count in (1, 2, 3):
            self.assertIs(self.machine.step(None), TrackState.STATIC)
            self.assertEqual(self.machine.uncertain_frames, expected_count)

        self.assertIs(self.machine.step(None), TrackState.UNCERTAIN)
        self.assertEqual(self.machine.uncertain_frames, 0)

    def test_static_counter_resets_on_available_estimate(self):
        self.machine.step(LOW)
        self.machine.step(None)
        self.machine.step(None)
        self.machine.step(LOW)
        self.assertEqual(self.machine.uncertain_frames, 0)
        for _ in range(3):
            self.machine.step(None)
        self.assertIs(self.machine.state, TrackState.STATIC)

    def test_static_to_dynamic_in_one_frame(self):
        self.machine.step(LOW)
        self.machine.step(None)
        self.assertIs(self.machine.step(HIGH), TrackState.DYNAMIC)
        self.assertEqual(self.machine.uncertain_frames, 0)

    def test_dynamic_reverts_after_two_missing_estimates(self):
        self.machine.step(HIGH)
        self.assertIs(self.machine.step(None), TrackState.DYNAMIC)
        self.assertIs(self.machine.step(None), TrackState.DYNAMIC)
        self.assertIs(self.machine.step(None), TrackState.UNCERTAIN)

    def test_dynamic_low_residual_resets_counter_without_demotion(self):
        self.machine.step(HIGH)
        self.machine.step(None)
        self.assertIs(self.machine.step(LOW), TrackState.DYNAMIC)
        self.assertEqual(self.machine.uncertain_frames, 0)
        self.assertEqual(self.machine.low_residual_run, 1)

    def test_dynamic_demoted_after_low_residual_run(self):
        self.machine.step(HIGH)
        self.assertIs(self.machine.step(LOW), TrackState.DYNAMIC)
        self.assertIs(self.machine.step(LOW), TrackState.DYNAMIC)
        self.assertIs(self.machine.step(LOW), TrackState.STATIC)

    def test_low_residual_run_interrupted(self):
        self.machine.step(HIGH)
        self.machine.step(LOW)
        self.machine.step(LOW)
        self.machine.step(HIGH)
        self.assertEqual(self.machine.low_residual_run, 0)
        self.machine.step(LOW)
        self.machine.step(None)
        self.assertEqual(self.machine.low_residual_run, 0)
        self.assertIs(self.machine.state, TrackState.DYNAMIC)


def test_demotion_disabled() -> None:
    machine = TrackStateMachine(StateConfig(dynamic_demotion_frames=None))
    machine.step(HIGH)
    for _ in range(20):
        machine.step(LOW)
    assert machine.state is TrackState.DYNAMIC


def test_custom_thresholds() -> None:
    machine = TrackStateMachine(
        StateConfig(translation_error_threshold=1.0, max_uncertain_frames_static=0)
    )
    assert machine.step(0.8) is TrackState.STATIC
    assert machine.step(None) is TrackState.UNCERTAIN


def test_state_labels() -> None:
    assert state_label(TrackState.STATIC) == "Static"
    assert state_label(TrackState.DYNAMIC) == "Dynamic"
    assert state_label(TrackState.UNCERTAIN) == "Uncertain"


@pytest.mark.parametrize("bogus", ["STATIC", "Static", "MOVING", 3, None, ["STATIC"]])
def test_unknown_state_label_fails(bogus) -> None:
    with pytest.raises(UnknownTrackStateError):
        state_label(bogus)
