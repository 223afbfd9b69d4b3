"""Pure analysis logic: phase tracking, jump detection, validation and metrics.

This module contains NO I/O operations apart from the session export helper.
All functions operate on typed dataclasses and return results.
"""

from jumprec.analysis.detector import (
    JumpDetectorBase,
    PhaseStateMachineDetector,
    SimpleThresholdDetector,
    VerticalThresholdDetector,
    create_detector,
    detect_jumps_batch,
    parse_strategy,
)
from jumprec.analysis.metrics import (
    SessionMetrics,
    SessionSummary,
    detect_jump_rhythm,
    export_session_data,
)
from jumprec.analysis.phases import JumpPhaseStateMachine, PhaseTransition
from jumprec.analysis.validator import JumpValidator, ValidationOutcome, pattern_match_score

__all__ = [
    "JumpDetectorBase",
    "JumpPhaseStateMachine",
    "JumpValidator",
    "PhaseStateMachineDetector",
    "PhaseTransition",
    "SessionMetrics",
    "SessionSummary",
    "SimpleThresholdDetector",
    "ValidationOutcome",
    "VerticalThresholdDetector",
    "create_detector",
    "detect_jump_rhythm",
    "detect_jumps_batch",
    "export_session_data",
    "parse_strategy",
    "pattern_match_score",
]
