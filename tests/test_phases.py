"""Tests for the jump phase state machine."""

from __future__ import annotations

import logging

import pytest

from jumprec.analysis.phases import JumpPhaseStateMachine
from jumprec.core.config import DetectionSettings
from jumprec.core.types import EXPECTED_PATTERN, JumpPhase


def _enter_flight(machine: JumpPhaseStateMachine) -> None:
    """Drive a machine from GROUND into FLIGHT with takeoff at 0.05 s."""
    machine.update(0.5, -0.4, 0.0)
    machine.update(1.0, 2.0, 0.05)
    machine.update(0.2, 0.0, 0.1)


class TestJumpPhaseStateMachine:
    """Tests for the JumpPhaseStateMachine class."""

    def test_initial_state_is_ground(self, detection_settings: DetectionSettings) -> None:
        """Machine should start on the ground with an empty history."""
        machine = JumpPhaseStateMachine(detection_settings)
        assert machine.phase == JumpPhase.GROUND
        assert machine.phase_history == []

    def test_stays_on_ground_without_dip(self, detection_settings: DetectionSettings) -> None:
        """Quiet samples should not leave GROUND."""
        machine = JumpPhaseStateMachine(detection_settings)

        for i in range(20):
            assert machine.update(0.05, 0.0, i * 0.01) is None

        assert machine.phase == JumpPhase.GROUND

    def test_full_cycle(self, detection_settings: DetectionSettings) -> None:
        """A textbook envelope walks through every phase in order."""
        machine = JumpPhaseStateMachine(detection_settings)

        _enter_flight(machine)
        assert machine.phase == JumpPhase.FLIGHT
        assert machine.jump_start_time == 0.05

        landing = machine.update(1.5, 1.0, 0.3)
        assert landing is not None
        assert landing.current == JumpPhase.LANDING

        ground = machine.update(0.5, 0.0, 0.35)
        assert ground is not None
        assert ground.previous == JumpPhase.LANDING
        assert ground.current == JumpPhase.GROUND
        assert ground.completed_cycle
        assert not ground.fallback
        assert machine.phase_history == list(EXPECTED_PATTERN)

    def test_push_off_without_compression_ignored(
        self, detection_settings: DetectionSettings
    ) -> None:
        """Takeoff-level readings on the ground do not skip compression."""
        machine = JumpPhaseStateMachine(detection_settings)

        assert machine.update(0.5, 2.0, 0.0) is None
        assert machine.phase == JumpPhase.GROUND

        machine.update(0.5, -0.4, 0.01)
        assert machine.phase == JumpPhase.COMPRESSION
        machine.update(0.1, 2.0, 0.02)
        assert machine.phase == JumpPhase.TAKEOFF

    def test_strong_push_off_takes_off(self, detection_settings: DetectionSettings) -> None:
        """Any vertical reading above the minimum peak threshold is push-off."""
        machine = JumpPhaseStateMachine(detection_settings)
        machine.update(0.5, -0.4, 0.0)

        transition = machine.update(1.0, 4.5, 0.05)

        assert transition is not None
        assert transition.current == JumpPhase.TAKEOFF
        assert machine.jump_start_time == 0.05

    def test_push_off_at_threshold_is_not_takeoff(
        self, detection_settings: DetectionSettings
    ) -> None:
        machine = JumpPhaseStateMachine(detection_settings)
        machine.update(0.5, -0.4, 0.0)

        assert machine.update(1.0, 1.5, 0.05) is None
        assert machine.phase == JumpPhase.COMPRESSION

    def test_short_hop_lands(self, detection_settings: DetectionSettings) -> None:
        """An impact soon after takeoff is a landing."""
        machine = JumpPhaseStateMachine(detection_settings)
        _enter_flight(machine)

        transition = machine.update(1.5, 1.0, 0.12)

        assert transition is not None
        assert transition.current == JumpPhase.LANDING
        assert machine.false_positive_count == 0

    def test_landing_needs_vertical_impact(
        self, detection_settings: DetectionSettings
    ) -> None:
        """High total acceleration alone does not end the flight."""
        machine = JumpPhaseStateMachine(detection_settings)
        _enter_flight(machine)

        assert machine.update(1.5, 0.5, 0.2) is None
        assert machine.phase == JumpPhase.FLIGHT

    def test_out_of_range_entry_is_logged(
        self, detection_settings: DetectionSettings, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Readings outside a phase's expected range are reported at debug level."""
        machine = JumpPhaseStateMachine(detection_settings)
        machine.update(0.5, -0.4, 0.0)

        with caplog.at_level(logging.DEBUG, logger="jumprec"):
            machine.update(1.0, 4.5, 0.05)

        assert "outside expected range" in caplog.text
        assert "TAKEOFF" in caplog.text

    def test_in_range_entry_is_not_flagged(
        self, detection_settings: DetectionSettings, caplog: pytest.LogCaptureFixture
    ) -> None:
        machine = JumpPhaseStateMachine(detection_settings)
        machine.update(0.5, -0.4, 0.0)

        with caplog.at_level(logging.DEBUG, logger="jumprec"):
            machine.update(1.0, 2.0, 0.05)

        assert "outside expected range" not in caplog.text

    def test_compression_timeout_returns_to_ground(
        self, detection_settings: DetectionSettings
    ) -> None:
        """Compression without push-off falls back after the timeout."""
        machine = JumpPhaseStateMachine(detection_settings)
        machine.update(0.5, -0.4, 0.0)

        assert machine.update(0.5, -0.4, 0.5) is None

        transition = machine.update(0.5, -0.4, 0.51)
        assert transition is not None
        assert transition.fallback
        assert not transition.completed_cycle
        assert machine.phase == JumpPhase.GROUND
        assert machine.phase_history == []
        assert machine.false_positive_count == 0

    def test_flight_timeout_counts_false_positive(
        self, detection_settings: DetectionSettings
    ) -> None:
        """An implausibly long flight is abandoned and counted."""
        machine = JumpPhaseStateMachine(detection_settings)
        _enter_flight(machine)

        transition = machine.update(0.2, 0.0, 0.9)

        assert transition is not None
        assert transition.fallback
        assert machine.phase == JumpPhase.GROUND
        assert machine.phase_history == []
        assert machine.false_positive_count == 1

    def test_clear_history(self, detection_settings: DetectionSettings) -> None:
        """clear_history forgets the cycle without changing the phase."""
        machine = JumpPhaseStateMachine(detection_settings)
        _enter_flight(machine)

        machine.clear_history()

        assert machine.phase_history == []
        assert machine.phase == JumpPhase.FLIGHT

    def test_reset_clears_state(self, detection_settings: DetectionSettings) -> None:
        """Reset should return machine to initial state."""
        machine = JumpPhaseStateMachine(detection_settings)
        _enter_flight(machine)
        machine.update(0.2, 0.0, 0.9)

        machine.reset()

        assert machine.phase == JumpPhase.GROUND
        assert machine.phase_history == []
        assert machine.false_positive_count == 0
