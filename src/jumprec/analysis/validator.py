"""Validation of completed jump cycles.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from jumprec.core.config import DetectionSettings
from jumprec.core.types import EXPECTED_PATTERN, JumpCharacteristics, JumpPhase, JumpQuality

GRAVITY = 9.8  # m/s^2
MIN_CRITERIA = 3


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Result of scoring one phase history."""

    accepted: bool
    match_score: float
    criteria_met: int


def pattern_match_score(
    actual: Sequence[JumpPhase],
    expected: Sequence[JumpPhase] = EXPECTED_PATTERN,
) -> float:
    """Right-aligned positional match between a phase history and a template.

    Args:
        actual: Observed phase history
        expected: Template phase sequence

    Returns:
        Matching positions divided by the template length [0, 1]
    """
    if not actual or not expected:
        return 0.0

    overlap = min(len(actual), len(expected))
    matches = sum(
        1
        for a, e in zip(actual[len(actual) - overlap :], expected[len(expected) - overlap :])
        if a == e
    )
    return matches / len(expected)


def estimate_air_time(history: Sequence[JumpPhase], sample_period: float = 0.01) -> float:
    """Air time from the FLIGHT entries of a phase history.

    Args:
        history: Phase history of the cycle
        sample_period: Sampling period (s)

    Returns:
        Estimated air time in seconds
    """
    return sum(1 for phase in history if phase == JumpPhase.FLIGHT) * sample_period


def estimate_jump_height(peak_acceleration: float) -> float:
    """Rough jump height from peak acceleration.

    Uses h = v² / 2g with the peak acceleration standing in for takeoff
    velocity. The result is a coarse heuristic, not a calibrated measurement.

    Args:
        peak_acceleration: Peak acceleration (g)

    Returns:
        Height estimate in centimeters
    """
    takeoff_velocity = peak_acceleration * GRAVITY * 0.1
    return (takeoff_velocity * takeoff_velocity) / (2 * GRAVITY) * 100


def assess_quality(valid_jumps: int, false_positives: int) -> JumpQuality:
    """Quality bucket from the share of valid detections.

    Args:
        valid_jumps: Accepted jump count
        false_positives: Abandoned cycle count

    Returns:
        Quality bucket
    """
    total = valid_jumps + false_positives
    if total == 0:
        return JumpQuality.UNKNOWN

    ratio = valid_jumps / total
    if ratio > 0.9:
        return JumpQuality.EXCELLENT
    if ratio > 0.7:
        return JumpQuality.GOOD
    if ratio > 0.5:
        return JumpQuality.FAIR
    return JumpQuality.POOR


class JumpValidator:
    """Scores completed phase histories and characterizes accepted jumps."""

    def __init__(
        self,
        settings: DetectionSettings | None = None,
        expected: Sequence[JumpPhase] = EXPECTED_PATTERN,
    ) -> None:
        self.settings = settings or DetectionSettings()
        self.expected = tuple(expected)
        self._valid_jump_count = 0

    @property
    def valid_jump_count(self) -> int:
        """Number of cycles accepted so far."""
        return self._valid_jump_count

    def reset(self) -> None:
        """Clear the accepted jump counter."""
        self._valid_jump_count = 0

    def evaluate(self, history: Sequence[JumpPhase]) -> ValidationOutcome:
        """Score a phase history against the expected template.

        At least three of four criteria must hold: the match score exceeds
        the pattern threshold, TAKEOFF was seen, FLIGHT was seen, and the
        history is not empty.

        Args:
            history: Phase history of one cycle

        Returns:
            ValidationOutcome (no counters are changed)
        """
        score = pattern_match_score(history, self.expected)
        criteria = [
            score > self.settings.pattern_match_threshold,
            JumpPhase.TAKEOFF in history,
            JumpPhase.FLIGHT in history,
            len(history) > 0,
        ]
        met = sum(criteria)
        return ValidationOutcome(accepted=met >= MIN_CRITERIA, match_score=score, criteria_met=met)

    def accept(
        self,
        history: Sequence[JumpPhase],
        filtered_signal: NDArray[np.floating[Any]] | Sequence[float],
        false_positives: int,
    ) -> JumpCharacteristics:
        """Count an accepted cycle and compute its characteristics.

        Args:
            history: Phase history of the accepted cycle
            filtered_signal: Filtered acceleration buffer
            false_positives: Abandoned cycle count of the session

        Returns:
            Characteristics of the jump
        """
        self._valid_jump_count += 1

        values = np.asarray(filtered_signal, dtype=np.float64)
        if len(values) == 0:
            return JumpCharacteristics()

        peak = float(values.max())
        return JumpCharacteristics(
            peak_acceleration=peak,
            air_time=estimate_air_time(history, self.settings.sample_period),
            jump_height=estimate_jump_height(peak),
            quality=assess_quality(self._valid_jump_count, false_positives),
        )
