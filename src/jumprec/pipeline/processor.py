"""Sample processing pipeline orchestration."""

from __future__ import annotations

from collections.abc import Iterable

from jumprec.analysis.detector import JumpDetectorBase, create_detector
from jumprec.analysis.metrics import SessionMetrics, SessionSummary
from jumprec.calibration.engine import apply_profile
from jumprec.core.config import Settings, get_settings
from jumprec.core.logging import get_logger
from jumprec.core.types import (
    CalibrationProfile,
    DetectionResult,
    DetectionStrategy,
    JumpPhase,
    MotionSample,
    SessionStats,
)

logger = get_logger(__name__)


class SessionProcessor:
    """Orchestrates a detection session.

    Coordinates:
    - Detector construction for the configured strategy
    - Calibration profile application
    - Jump recording in session metrics
    """

    def __init__(
        self,
        settings: Settings | None = None,
        profile: CalibrationProfile | None = None,
        strategy: DetectionStrategy | str | None = None,
    ) -> None:
        """Initialize processor with settings.

        Args:
            settings: Application settings (uses cached settings if None)
            profile: Initial calibration profile
            strategy: Overrides the configured detection strategy
        """
        self.settings = settings or get_settings()
        self._strategy = strategy or self.settings.strategy
        self._detection = self.settings.detection
        self._profile: CalibrationProfile | None = None
        self._metrics = SessionMetrics()
        self._detector = self._build_detector()

        if profile is not None:
            self.apply_calibration(profile)

    @property
    def detector(self) -> JumpDetectorBase:
        """Active detector."""
        return self._detector

    @property
    def metrics(self) -> SessionMetrics:
        """Session metrics tracker."""
        return self._metrics

    @property
    def stats(self) -> SessionStats:
        """Get current session statistics."""
        return self._metrics.stats

    @property
    def calibration(self) -> CalibrationProfile | None:
        """Get current calibration profile."""
        return self._profile

    @property
    def current_phase(self) -> JumpPhase:
        """Get current jump phase."""
        return self._detector.current_phase

    def apply_calibration(self, profile: CalibrationProfile) -> None:
        """Seed detection settings from a calibration profile.

        The detector is rebuilt with the new settings; session statistics
        are kept.

        Args:
            profile: Calibration profile

        Raises:
            CalibrationError: If the profile yields invalid settings
        """
        self._detection = apply_profile(profile, self.settings.detection)
        self._profile = profile
        self._metrics.stats.calibration = profile
        self._detector = self._build_detector()
        logger.info(
            "Calibration applied: sensitivity %.2fg, debounce %.2fs",
            self._detection.sensitivity,
            self._detection.debounce_time,
        )

    def process_sample(self, sample: MotionSample) -> DetectionResult:
        """Process a single sample through the detector.

        Args:
            sample: Next motion sample

        Returns:
            Detection result for the sample
        """
        self._metrics.observe(sample.timestamp)
        result = self._detector.process(sample)

        if result.is_jump:
            self._metrics.add_jump(result)
            logger.info(
                "Jump %d at %.2fs (confidence %.2f)",
                self._metrics.jump_count,
                result.timestamp,
                result.confidence,
            )

        return result

    def process_samples(self, samples: Iterable[MotionSample]) -> list[DetectionResult]:
        """Process samples in order.

        Args:
            samples: Samples in timestamp order

        Returns:
            Accepted jump results
        """
        return [result for result in map(self.process_sample, samples) if result.is_jump]

    def summary(self) -> SessionSummary:
        """Get session summary statistics."""
        return self._metrics.get_summary()

    def reset_session(self) -> None:
        """Reset session statistics and detector state."""
        self._metrics.reset()
        self._detector.reset()
        logger.info("Session reset")

    def _build_detector(self) -> JumpDetectorBase:
        detector = create_detector(self._strategy, self._detection, self.settings.filter)
        logger.debug("Using %s detector", detector.strategy.value)
        return detector
