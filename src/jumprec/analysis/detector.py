"""Jump detection strategies.

This module is pure logic with NO I/O. Each detector owns its buffers and
last-jump timestamp; use one instance per sample stream.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable

import numpy as np

from jumprec.analysis.phases import JumpPhaseStateMachine
from jumprec.analysis.validator import JumpValidator
from jumprec.core.config import DetectionSettings, FilterSettings
from jumprec.core.exceptions import ConfigurationError, JumpDetectionError
from jumprec.core.logging import get_logger
from jumprec.core.types import (
    DetectionResult,
    DetectionStrategy,
    JumpPhase,
    MotionSample,
)
from jumprec.processing.filters import SignalFilterBank

logger = get_logger(__name__)


class JumpDetectorBase(ABC):
    """Common contract: one `MotionSample` in, one `DetectionResult` out."""

    strategy: DetectionStrategy

    def __init__(self, settings: DetectionSettings | None = None) -> None:
        self.settings = settings or DetectionSettings()
        self._last_jump_timestamp: float | None = None
        self._last_sample_timestamp: float | None = None
        self._jump_count = 0

    @property
    def jump_count(self) -> int:
        """Jumps declared since the last reset."""
        return self._jump_count

    @property
    def last_jump_timestamp(self) -> float | None:
        """Timestamp of the most recently declared jump."""
        return self._last_jump_timestamp

    @property
    @abstractmethod
    def current_phase(self) -> JumpPhase:
        """Phase reported with each result."""

    def process(self, sample: MotionSample) -> DetectionResult:
        """Process one sample.

        Args:
            sample: Next motion sample of the stream

        Returns:
            DetectionResult for this tick

        Raises:
            JumpDetectionError: If timestamps are not strictly increasing
        """
        if (
            self._last_sample_timestamp is not None
            and sample.timestamp <= self._last_sample_timestamp
        ):
            raise JumpDetectionError(
                f"Sample timestamp {sample.timestamp:.4f}s is not after "
                f"{self._last_sample_timestamp:.4f}s"
            )
        self._last_sample_timestamp = sample.timestamp
        return self._process(sample)

    def reset(self) -> None:
        """Reset detector to initial state. Call when starting a new session."""
        self._last_jump_timestamp = None
        self._last_sample_timestamp = None
        self._jump_count = 0

    def _debounced(self, timestamp: float) -> bool:
        """Whether a jump at ``timestamp`` would come too soon after the last one."""
        if self._last_jump_timestamp is None:
            return False
        return timestamp - self._last_jump_timestamp <= self.settings.debounce_time

    def _register_jump(self, timestamp: float) -> None:
        self._last_jump_timestamp = timestamp
        self._jump_count += 1

    def _no_jump(self, timestamp: float, confidence: float = 0.0) -> DetectionResult:
        return DetectionResult(
            is_jump=False,
            confidence=confidence,
            phase=self.current_phase,
            timestamp=timestamp,
        )

    @abstractmethod
    def _process(self, sample: MotionSample) -> DetectionResult:
        """Strategy-specific processing of an in-order sample."""


class PhaseStateMachineDetector(JumpDetectorBase):
    """Filtered signal → five-phase state machine → pattern validation."""

    strategy = DetectionStrategy.PHASE_STATE_MACHINE

    def __init__(
        self,
        settings: DetectionSettings | None = None,
        filter_settings: FilterSettings | None = None,
    ) -> None:
        """Initialize detector.

        Args:
            settings: Detection parameters (uses defaults if None)
            filter_settings: Filter bank parameters (uses defaults if None)
        """
        super().__init__(settings)
        self._filters = SignalFilterBank(filter_settings)
        self._machine = JumpPhaseStateMachine(self.settings)
        self._validator = JumpValidator(self.settings)

    @property
    def current_phase(self) -> JumpPhase:
        return self._machine.phase

    @property
    def is_jumping(self) -> bool:
        """Check if currently inside a jump cycle (not GROUND)."""
        return self._machine.phase != JumpPhase.GROUND

    @property
    def valid_jump_count(self) -> int:
        """Cycles accepted as jumps (debounced cycles are not counted)."""
        return self._validator.valid_jump_count

    @property
    def false_positive_count(self) -> int:
        """Flights abandoned for exceeding the maximum jump duration."""
        return self._machine.false_positive_count

    def reset(self) -> None:
        super().reset()
        self._filters.reset()
        self._machine.reset()
        self._validator.reset()

    def _process(self, sample: MotionSample) -> DetectionResult:
        filtered_total = self._filters.push(sample.total_acceleration)

        transition = self._machine.update(
            filtered_total,
            sample.vertical_acceleration,
            sample.timestamp,
        )

        if transition is not None and transition.completed_cycle:
            return self._evaluate_cycle(sample.timestamp)

        return self._no_jump(sample.timestamp)

    def _evaluate_cycle(self, timestamp: float) -> DetectionResult:
        """Validate the phase history of a completed cycle."""
        history = self._machine.phase_history
        self._machine.clear_history()

        outcome = self._validator.evaluate(history)
        if not outcome.accepted:
            logger.debug(
                "Cycle rejected at %.3fs (score %.2f, %d criteria)",
                timestamp,
                outcome.match_score,
                outcome.criteria_met,
            )
            return self._no_jump(timestamp, outcome.match_score)

        if self._debounced(timestamp):
            logger.debug("Cycle at %.3fs within debounce window", timestamp)
            return self._no_jump(timestamp, outcome.match_score)

        characteristics = self._validator.accept(
            history,
            self._filters.filtered_signal,
            self._machine.false_positive_count,
        )
        self._register_jump(timestamp)

        return DetectionResult(
            is_jump=True,
            confidence=outcome.match_score,
            phase=self.current_phase,
            timestamp=timestamp,
            characteristics=characteristics,
        )


class SimpleThresholdDetector(JumpDetectorBase):
    """Peak-in-window detector usable on unfiltered magnitudes.

    A jump is declared when the window's maximum sits away from the window
    edges, exceeds ``sensitivity - noise_floor``, carries enough vertical
    acceleration, is a strict local peak, and comes more than the debounce
    time after the previous jump. The declared timestamp is that of the peak
    sample.
    """

    strategy = DetectionStrategy.SIMPLE_THRESHOLD

    def __init__(self, settings: DetectionSettings | None = None) -> None:
        super().__init__(settings)
        self._window: deque[tuple[float, float, float]] = deque(maxlen=self.settings.window_size)

    @property
    def current_phase(self) -> JumpPhase:
        return JumpPhase.GROUND

    @property
    def threshold(self) -> float:
        """Effective magnitude threshold (g)."""
        return self.settings.sensitivity - self.settings.noise_floor

    def reset(self) -> None:
        super().reset()
        self._window.clear()

    def _process(self, sample: MotionSample) -> DetectionResult:
        self._window.append(
            (sample.timestamp, sample.total_acceleration, sample.vertical_acceleration)
        )
        if len(self._window) < self.settings.window_size:
            return self._no_jump(sample.timestamp)

        timestamps, magnitudes, verticals = (np.array(column) for column in zip(*self._window))
        peak_index = int(np.argmax(magnitudes))
        peak = float(magnitudes[peak_index])
        margin = self.settings.edge_margin

        if not margin <= peak_index <= len(magnitudes) - 1 - margin:
            return self._no_jump(sample.timestamp)
        if peak <= self.threshold:
            return self._no_jump(sample.timestamp)
        if abs(verticals[peak_index]) <= self.settings.vertical_ratio * self.threshold:
            return self._no_jump(sample.timestamp)
        if not (magnitudes[peak_index - 1] < peak and magnitudes[peak_index + 1] < peak):
            return self._no_jump(sample.timestamp)

        peak_timestamp = float(timestamps[peak_index])
        if self._debounced(peak_timestamp):
            return self._no_jump(sample.timestamp)

        self._register_jump(peak_timestamp)
        return DetectionResult(
            is_jump=True,
            confidence=1.0,
            phase=self.current_phase,
            timestamp=peak_timestamp,
        )


class VerticalThresholdDetector(JumpDetectorBase):
    """Vertical acceleration threshold with debounce, for low-rate streams."""

    strategy = DetectionStrategy.VERTICAL_THRESHOLD

    @property
    def current_phase(self) -> JumpPhase:
        return JumpPhase.GROUND

    def _process(self, sample: MotionSample) -> DetectionResult:
        if self._debounced(sample.timestamp):
            return self._no_jump(sample.timestamp)

        if sample.vertical_acceleration <= self.settings.vertical_threshold:
            return self._no_jump(sample.timestamp)

        self._register_jump(sample.timestamp)
        return DetectionResult(
            is_jump=True,
            confidence=1.0,
            phase=self.current_phase,
            timestamp=sample.timestamp,
        )


def parse_strategy(value: DetectionStrategy | str) -> DetectionStrategy:
    """Convert a strategy name to a DetectionStrategy.

    Raises:
        ConfigurationError: If the name is unknown
    """
    if isinstance(value, DetectionStrategy):
        return value
    try:
        return DetectionStrategy(value.lower())
    except ValueError as e:
        choices = ", ".join(s.value for s in DetectionStrategy)
        raise ConfigurationError(f"Unknown strategy '{value}' (choose from {choices})") from e


def create_detector(
    strategy: DetectionStrategy | str = DetectionStrategy.PHASE_STATE_MACHINE,
    settings: DetectionSettings | None = None,
    filter_settings: FilterSettings | None = None,
) -> JumpDetectorBase:
    """Build a detector for the requested strategy.

    Args:
        strategy: Detection strategy or its name
        settings: Detection parameters
        filter_settings: Filter bank parameters (phase state machine only)

    Returns:
        A fresh detector instance
    """
    strategy = parse_strategy(strategy)

    if strategy == DetectionStrategy.PHASE_STATE_MACHINE:
        return PhaseStateMachineDetector(settings, filter_settings)
    if strategy == DetectionStrategy.SIMPLE_THRESHOLD:
        return SimpleThresholdDetector(settings)
    return VerticalThresholdDetector(settings)


def detect_jumps_batch(
    samples: Iterable[MotionSample],
    strategy: DetectionStrategy | str = DetectionStrategy.PHASE_STATE_MACHINE,
    settings: DetectionSettings | None = None,
    filter_settings: FilterSettings | None = None,
) -> list[DetectionResult]:
    """Process a sequence of samples and return all accepted jumps.

    Pure function for batch processing recorded data.

    Args:
        samples: Samples in timestamp order
        strategy: Detection strategy
        settings: Detection parameters
        filter_settings: Filter bank parameters

    Returns:
        Accepted jump results in order
    """
    detector = create_detector(strategy, settings, filter_settings)
    return [result for result in map(detector.process, samples) if result.is_jump]
