"""Core infrastructure: config, types, exceptions, and logging."""

from jumprec.core.types import (
    AccelerationSample,
    CalibrationProfile,
    CalibrationState,
    DetectionResult,
    DetectionStrategy,
    JumpCharacteristics,
    JumpPeak,
    JumpPhase,
    JumpQuality,
    MotionSample,
    SessionStats,
)
from jumprec.core.config import (
    CalibrationSettings,
    DetectionSettings,
    FilterSettings,
    PeakSettings,
    Settings,
    get_settings,
)
from jumprec.core.exceptions import (
    CalibrationError,
    ConfigurationError,
    JumpDetectionError,
    JumpRecError,
    RecordingError,
)
from jumprec.core.logging import get_logger, setup_logging

__all__ = [
    # Config
    "Settings",
    "DetectionSettings",
    "FilterSettings",
    "PeakSettings",
    "CalibrationSettings",
    "get_settings",
    # Types
    "MotionSample",
    "AccelerationSample",
    "JumpPhase",
    "JumpQuality",
    "JumpCharacteristics",
    "DetectionResult",
    "DetectionStrategy",
    "JumpPeak",
    "CalibrationProfile",
    "CalibrationState",
    "SessionStats",
    # Exceptions
    "JumpRecError",
    "ConfigurationError",
    "CalibrationError",
    "JumpDetectionError",
    "RecordingError",
    # Logging
    "setup_logging",
    "get_logger",
]
