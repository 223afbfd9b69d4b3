"""Core data types and structures."""

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any


@dataclass(frozen=True, slots=True)
class MotionSample:
    """A single device-agnostic motion reading.

    Attributes:
        user_acceleration_x: Acceleration with gravity removed (g)
        user_acceleration_y: Acceleration with gravity removed (g)
        user_acceleration_z: Acceleration with gravity removed (g)
        rotation_rate_x: Rotation rate (rad/s)
        rotation_rate_y: Rotation rate (rad/s)
        rotation_rate_z: Rotation rate (rad/s)
        timestamp: Monotonic timestamp in seconds
    """

    user_acceleration_x: float
    user_acceleration_y: float
    user_acceleration_z: float
    rotation_rate_x: float = 0.0
    rotation_rate_y: float = 0.0
    rotation_rate_z: float = 0.0
    timestamp: float = 0.0

    @property
    def total_acceleration(self) -> float:
        """Magnitude of the user acceleration vector (g)."""
        return math.sqrt(
            self.user_acceleration_x**2
            + self.user_acceleration_y**2
            + self.user_acceleration_z**2
        )

    @property
    def vertical_acceleration(self) -> float:
        """Vertical component: the device Y axis while skipping (g)."""
        return self.user_acceleration_y

    @property
    def horizontal_acceleration(self) -> float:
        """Magnitude of the X/Z acceleration components (g)."""
        return math.hypot(self.user_acceleration_x, self.user_acceleration_z)

    @property
    def rotation_magnitude(self) -> float:
        """Magnitude of the rotation rate vector (rad/s)."""
        return math.sqrt(
            self.rotation_rate_x**2 + self.rotation_rate_y**2 + self.rotation_rate_z**2
        )


@dataclass(frozen=True, slots=True)
class AccelerationSample:
    """Timestamped three-axis acceleration used during calibration."""

    timestamp: float
    x: float
    y: float
    z: float

    @property
    def magnitude(self) -> float:
        """Euclidean norm of the acceleration (g)."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    @classmethod
    def from_motion(cls, sample: MotionSample) -> AccelerationSample:
        """Build a calibration sample from a motion sample's user acceleration."""
        return cls(
            timestamp=sample.timestamp,
            x=sample.user_acceleration_x,
            y=sample.user_acceleration_y,
            z=sample.user_acceleration_z,
        )


class JumpPhase(Enum):
    """Stages of a single jump's biomechanical cycle."""

    GROUND = auto()
    COMPRESSION = auto()
    TAKEOFF = auto()
    FLIGHT = auto()
    LANDING = auto()

    @property
    def expected_acceleration(self) -> tuple[float, float]:
        """Plausible acceleration range (g) for this phase."""
        return _EXPECTED_ACCELERATION[self]


_EXPECTED_ACCELERATION: dict[JumpPhase, tuple[float, float]] = {
    JumpPhase.GROUND: (-0.2, 0.2),
    JumpPhase.COMPRESSION: (-0.5, -0.1),
    JumpPhase.TAKEOFF: (1.5, 4.0),
    JumpPhase.FLIGHT: (-0.3, 0.3),
    JumpPhase.LANDING: (1.0, 3.0),
}

# Phase sequence of one complete, well-formed jump cycle
EXPECTED_PATTERN: tuple[JumpPhase, ...] = (
    JumpPhase.COMPRESSION,
    JumpPhase.TAKEOFF,
    JumpPhase.FLIGHT,
    JumpPhase.LANDING,
    JumpPhase.GROUND,
)


class JumpQuality(Enum):
    """Quality bucket derived from the session's valid/false-positive ratio."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNKNOWN = "unknown"


class DetectionStrategy(str, Enum):
    """Available jump detection strategies."""

    PHASE_STATE_MACHINE = "phase_state_machine"
    SIMPLE_THRESHOLD = "simple_threshold"
    VERTICAL_THRESHOLD = "vertical_threshold"


class CalibrationState(Enum):
    """States of the calibration session."""

    IDLE = auto()
    COLLECTING_BASELINE = auto()
    COLLECTING_JUMPS = auto()
    ANALYZING_DATA = auto()
    COMPLETED = auto()
    FAILED = auto()

    @property
    def is_terminal(self) -> bool:
        """Whether the session has finished (successfully or not)."""
        return self in (CalibrationState.COMPLETED, CalibrationState.FAILED)


@dataclass(frozen=True, slots=True)
class JumpCharacteristics:
    """Estimated properties of an accepted jump.

    Attributes:
        peak_acceleration: Maximum of the filtered signal buffer (g)
        air_time: Estimated time in the air (s)
        jump_height: Rough height estimate (cm)
        quality: Session quality bucket at the time of the jump
    """

    peak_acceleration: float = 0.0
    air_time: float = 0.0
    jump_height: float = 0.0
    quality: JumpQuality = JumpQuality.UNKNOWN


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Outcome of processing one motion sample."""

    is_jump: bool
    confidence: float
    phase: JumpPhase
    timestamp: float = 0.0
    characteristics: JumpCharacteristics | None = None


@dataclass(frozen=True, slots=True)
class JumpPeak:
    """A peak located in a recorded acceleration stream."""

    index: int
    timestamp: float
    acceleration: float
    vertical_component: float = 0.0


@dataclass(frozen=True, slots=True)
class CalibrationProfile:
    """Per-user detection parameters fitted from a calibration session.

    Attributes:
        baseline_noise: Std dev of magnitude while standing still (g)
        average_peak_acceleration: Mean magnitude of test jump peaks (g)
        optimal_threshold: Suggested detection threshold (g)
        min_jump_interval: Shortest plausible time between jumps (s)
        max_jump_interval: Longest plausible time between jumps (s)
        jump_signature: Normalized magnitude window around the first peak
        confidence_level: Consistency of the test jumps [0, 1]
        user_height: Optional user height (cm)
        user_weight: Optional user weight (kg)
        id: Unique profile identifier
        created_at: Creation time (epoch seconds)
    """

    baseline_noise: float
    average_peak_acceleration: float
    optimal_threshold: float
    min_jump_interval: float
    max_jump_interval: float
    jump_signature: tuple[float, ...]
    confidence_level: float
    user_height: float | None = None
    user_weight: float | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: float = field(default_factory=time.time)

    def with_user_metrics(
        self,
        height: float | None = None,
        weight: float | None = None,
    ) -> CalibrationProfile:
        """Return a copy carrying the given user height/weight."""
        return replace(
            self,
            user_height=height if height is not None else self.user_height,
            user_weight=weight if weight is not None else self.user_weight,
        )

    def describe(self) -> str:
        """Human-readable summary of the profile."""
        return (
            "Calibration Profile:\n"
            f"- Threshold: {self.optimal_threshold:.2f}g\n"
            f"- Avg Peak: {self.average_peak_acceleration:.2f}g\n"
            f"- Jump Interval: {self.min_jump_interval:.2f}-{self.max_jump_interval:.2f}s\n"
            f"- Confidence: {self.confidence_level * 100:.0f}%"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        return {
            "id": self.id,
            "created_at": self.created_at,
            "baseline_noise": self.baseline_noise,
            "average_peak_acceleration": self.average_peak_acceleration,
            "optimal_threshold": self.optimal_threshold,
            "min_jump_interval": self.min_jump_interval,
            "max_jump_interval": self.max_jump_interval,
            "jump_signature": list(self.jump_signature),
            "confidence_level": self.confidence_level,
            "user_height": self.user_height,
            "user_weight": self.user_weight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CalibrationProfile:
        """Rebuild a profile from `to_dict` output."""
        return cls(
            id=str(data["id"]),
            created_at=float(data["created_at"]),
            baseline_noise=float(data["baseline_noise"]),
            average_peak_acceleration=float(data["average_peak_acceleration"]),
            optimal_threshold=float(data["optimal_threshold"]),
            min_jump_interval=float(data["min_jump_interval"]),
            max_jump_interval=float(data["max_jump_interval"]),
            jump_signature=tuple(float(v) for v in data["jump_signature"]),
            confidence_level=float(data["confidence_level"]),
            user_height=data.get("user_height"),
            user_weight=data.get("user_weight"),
        )


@dataclass(slots=True)
class SessionStats:
    """Accepted jumps of a detection session.

    Attributes:
        jumps: Accepted detection results in order
        start_time: Timestamp of the first processed sample
        calibration: Active calibration profile
    """

    jumps: list[DetectionResult] = field(default_factory=list)
    start_time: float | None = None
    calibration: CalibrationProfile | None = None

    @property
    def jump_count(self) -> int:
        """Total number of accepted jumps."""
        return len(self.jumps)

    @property
    def last_jump(self) -> DetectionResult | None:
        """Most recent accepted jump."""
        return self.jumps[-1] if self.jumps else None

    def add_jump(self, result: DetectionResult) -> None:
        """Record an accepted jump."""
        self.jumps.append(result)

    def reset(self) -> None:
        """Clear all recorded jumps."""
        self.jumps.clear()
        self.start_time = None
