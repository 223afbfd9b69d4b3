"""Tests for jump cycle validation."""

from __future__ import annotations

import pytest

from jumprec.analysis.validator import (
    JumpValidator,
    assess_quality,
    estimate_air_time,
    estimate_jump_height,
    pattern_match_score,
)
from jumprec.core.config import DetectionSettings
from jumprec.core.types import EXPECTED_PATTERN, JumpPhase, JumpQuality


class TestPatternMatchScore:
    """Tests for right-aligned pattern matching."""

    def test_exact_pattern_scores_one(self) -> None:
        assert pattern_match_score(list(EXPECTED_PATTERN)) == 1.0

    def test_longer_history_is_right_aligned(self) -> None:
        """Only the most recent phases are compared."""
        history = [JumpPhase.GROUND, *EXPECTED_PATTERN]
        assert pattern_match_score(history) == 1.0

    def test_partial_history(self) -> None:
        """Matches are divided by the template length."""
        history = [JumpPhase.TAKEOFF, JumpPhase.FLIGHT, JumpPhase.GROUND]
        assert pattern_match_score(history) == pytest.approx(0.2)

    def test_empty_history(self) -> None:
        assert pattern_match_score([]) == 0.0


class TestJumpValidator:
    """Tests for the JumpValidator class."""

    def test_full_pattern_accepted(self, detection_settings: DetectionSettings) -> None:
        validator = JumpValidator(detection_settings)

        outcome = validator.evaluate(list(EXPECTED_PATTERN))

        assert outcome.accepted
        assert outcome.match_score == 1.0
        assert outcome.criteria_met == 4

    def test_three_of_four_criteria_suffice(self, detection_settings: DetectionSettings) -> None:
        """Takeoff and flight in a non-empty history pass despite a low score."""
        validator = JumpValidator(detection_settings)

        outcome = validator.evaluate([JumpPhase.TAKEOFF, JumpPhase.FLIGHT, JumpPhase.GROUND])

        assert outcome.accepted
        assert outcome.criteria_met == 3

    def test_history_without_flight_rejected(self, detection_settings: DetectionSettings) -> None:
        validator = JumpValidator(detection_settings)

        outcome = validator.evaluate([JumpPhase.LANDING, JumpPhase.GROUND])

        assert not outcome.accepted
        assert outcome.criteria_met == 1

    def test_empty_history_rejected(self, detection_settings: DetectionSettings) -> None:
        validator = JumpValidator(detection_settings)
        assert not validator.evaluate([]).accepted

    def test_evaluate_does_not_count(self, detection_settings: DetectionSettings) -> None:
        """Only accept() changes the valid jump count."""
        validator = JumpValidator(detection_settings)
        validator.evaluate(list(EXPECTED_PATTERN))
        assert validator.valid_jump_count == 0

    def test_accept_computes_characteristics(self, detection_settings: DetectionSettings) -> None:
        validator = JumpValidator(detection_settings)

        characteristics = validator.accept(list(EXPECTED_PATTERN), [0.1, 2.5, 0.3], 0)

        assert validator.valid_jump_count == 1
        assert characteristics.peak_acceleration == 2.5
        assert characteristics.air_time == pytest.approx(0.01)
        assert characteristics.jump_height == pytest.approx(30.625)
        assert characteristics.quality == JumpQuality.EXCELLENT

    def test_reset(self, detection_settings: DetectionSettings) -> None:
        validator = JumpValidator(detection_settings)
        validator.accept(list(EXPECTED_PATTERN), [1.0], 0)

        validator.reset()

        assert validator.valid_jump_count == 0


class TestEstimates:
    """Tests for jump characteristic estimates."""

    def test_air_time_counts_flight_entries(self) -> None:
        history = [JumpPhase.FLIGHT, JumpPhase.LANDING, JumpPhase.FLIGHT]
        assert estimate_air_time(history, 0.01) == pytest.approx(0.02)

    def test_jump_height_heuristic(self) -> None:
        assert estimate_jump_height(1.0) == pytest.approx(4.9)

    @pytest.mark.parametrize(
        ("valid", "false_positives", "expected"),
        [
            (0, 0, JumpQuality.UNKNOWN),
            (10, 0, JumpQuality.EXCELLENT),
            (8, 2, JumpQuality.GOOD),
            (6, 4, JumpQuality.FAIR),
            (1, 1, JumpQuality.POOR),
        ],
    )
    def test_quality_buckets(
        self, valid: int, false_positives: int, expected: JumpQuality
    ) -> None:
        assert assess_quality(valid, false_positives) == expected
