"""Five-phase jump state machine.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

from jumprec.core.config import DetectionSettings
from jumprec.core.logging import get_logger
from jumprec.core.types import JumpPhase

logger = get_logger(__name__)

# Transition thresholds (g)
COMPRESSION_VERTICAL_MAX = -0.2
COMPRESSION_TOTAL_MAX = 0.8
FLIGHT_TOTAL_MAX = 0.5
LANDING_TOTAL_MIN = 1.0
LANDING_VERTICAL_MIN = 0.5
GROUND_TOTAL_MAX = 1.2


@dataclass(frozen=True, slots=True)
class PhaseTransition:
    """A single phase change.

    Attributes:
        previous: Phase before the tick
        current: Phase after the tick
        timestamp: Sample timestamp of the change
        completed_cycle: True when landing returned to ground
        fallback: True when a timeout forced the return to ground
    """

    previous: JumpPhase
    current: JumpPhase
    timestamp: float
    completed_cycle: bool = False
    fallback: bool = False


class JumpPhaseStateMachine:
    """State machine following the biomechanics of a single rope jump.

    Transitions (at most one per tick):
        GROUND → COMPRESSION: vertical dips below -0.2 g while total < 0.8 g
        COMPRESSION → TAKEOFF: vertical exceeds the minimum peak threshold
        COMPRESSION → GROUND: compression lasted longer than the timeout
        TAKEOFF → FLIGHT: total drops below 0.5 g
        FLIGHT → LANDING: total > 1.0 g and vertical > 0.5 g
        FLIGHT → GROUND: airborne longer than the maximum jump duration
        LANDING → GROUND: total settles below 1.2 g (cycle complete)

    Every transition is appended to the phase history of the current cycle.
    Timeouts discard the history; a completed cycle keeps it until the
    caller has evaluated it and calls `clear_history`.
    """

    def __init__(self, settings: DetectionSettings | None = None) -> None:
        """Initialize state machine with settings.

        Args:
            settings: Detection parameters (uses defaults if None)
        """
        self.settings = settings or DetectionSettings()
        self._phase = JumpPhase.GROUND
        self._phase_start_time = 0.0
        self._jump_start_time = 0.0
        self._history: list[JumpPhase] = []
        self._false_positive_count = 0

    @property
    def phase(self) -> JumpPhase:
        """Current phase."""
        return self._phase

    @property
    def phase_history(self) -> list[JumpPhase]:
        """Phases entered during the current cycle."""
        return list(self._history)

    @property
    def false_positive_count(self) -> int:
        """Number of flights abandoned for exceeding the maximum duration."""
        return self._false_positive_count

    @property
    def jump_start_time(self) -> float:
        """Timestamp of the most recent takeoff."""
        return self._jump_start_time

    def clear_history(self) -> None:
        """Forget the phases of the current cycle."""
        self._history.clear()

    def reset(self) -> None:
        """Reset to GROUND and clear all counters."""
        self._phase = JumpPhase.GROUND
        self._phase_start_time = 0.0
        self._jump_start_time = 0.0
        self._history.clear()
        self._false_positive_count = 0

    def update(self, total: float, vertical: float, timestamp: float) -> PhaseTransition | None:
        """Evaluate one sample.

        Args:
            total: Total (filtered) acceleration magnitude (g)
            vertical: Vertical acceleration component (g)
            timestamp: Sample timestamp (s)

        Returns:
            The transition taken, or None if the phase did not change
        """
        previous = self._phase

        if previous == JumpPhase.GROUND:
            transition = self._handle_ground(total, vertical, timestamp)
        elif previous == JumpPhase.COMPRESSION:
            transition = self._handle_compression(vertical, timestamp)
        elif previous == JumpPhase.TAKEOFF:
            transition = self._handle_takeoff(total, timestamp)
        elif previous == JumpPhase.FLIGHT:
            transition = self._handle_flight(total, vertical, timestamp)
        else:
            transition = self._handle_landing(total, timestamp)

        if transition is None:
            return None

        self._phase = transition.current
        if transition.fallback:
            self._history.clear()
        else:
            self._history.append(transition.current)
            self._check_phase_range(transition.current, vertical, timestamp)

        logger.debug(
            "Phase %s -> %s at %.3fs",
            transition.previous.name,
            transition.current.name,
            timestamp,
        )
        return transition

    def _check_phase_range(self, phase: JumpPhase, vertical: float, timestamp: float) -> None:
        """Log entry readings outside the phase's plausible range."""
        low, high = phase.expected_acceleration
        if not low <= vertical <= high:
            logger.debug(
                "Vertical %.2fg entering %s at %.3fs is outside expected range "
                "[%.1f, %.1f]",
                vertical,
                phase.name,
                timestamp,
                low,
                high,
            )

    def _handle_ground(
        self,
        total: float,
        vertical: float,
        timestamp: float,
    ) -> PhaseTransition | None:
        """Watch for the knee bend preceding a jump."""
        if vertical < COMPRESSION_VERTICAL_MAX and total < COMPRESSION_TOTAL_MAX:
            self._phase_start_time = timestamp
            return PhaseTransition(JumpPhase.GROUND, JumpPhase.COMPRESSION, timestamp)
        return None

    def _handle_compression(self, vertical: float, timestamp: float) -> PhaseTransition | None:
        """Watch for push-off, or give up after the compression timeout."""
        if vertical > self.settings.min_peak_threshold:
            self._jump_start_time = timestamp
            return PhaseTransition(JumpPhase.COMPRESSION, JumpPhase.TAKEOFF, timestamp)

        if timestamp - self._phase_start_time > self.settings.compression_timeout:
            return PhaseTransition(
                JumpPhase.COMPRESSION, JumpPhase.GROUND, timestamp, fallback=True
            )
        return None

    def _handle_takeoff(self, total: float, timestamp: float) -> PhaseTransition | None:
        """Wait for the acceleration to collapse as the feet leave the ground."""
        if total < FLIGHT_TOTAL_MAX:
            return PhaseTransition(JumpPhase.TAKEOFF, JumpPhase.FLIGHT, timestamp)
        return None

    def _handle_flight(
        self,
        total: float,
        vertical: float,
        timestamp: float,
    ) -> PhaseTransition | None:
        """Watch for the landing impact, or abandon an implausibly long flight."""
        airborne = timestamp - self._jump_start_time

        if total > LANDING_TOTAL_MIN and vertical > LANDING_VERTICAL_MIN:
            return PhaseTransition(JumpPhase.FLIGHT, JumpPhase.LANDING, timestamp)

        if airborne > self.settings.max_jump_duration:
            self._false_positive_count += 1
            return PhaseTransition(JumpPhase.FLIGHT, JumpPhase.GROUND, timestamp, fallback=True)
        return None

    def _handle_landing(self, total: float, timestamp: float) -> PhaseTransition | None:
        """Wait for the landing impact to settle."""
        if total < GROUND_TOTAL_MAX:
            return PhaseTransition(
                JumpPhase.LANDING, JumpPhase.GROUND, timestamp, completed_cycle=True
            )
        return None
