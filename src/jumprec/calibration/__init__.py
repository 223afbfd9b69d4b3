"""Per-user calibration: guided session, profile fitting and persistence."""

from jumprec.calibration.engine import (
    CalibrationEngine,
    analyze_baseline,
    analyze_jumps,
    apply_profile,
    confidence_from_peaks,
    create_jump_signature,
)
from jumprec.calibration.storage import load_profile, save_profile

__all__ = [
    "CalibrationEngine",
    "analyze_baseline",
    "analyze_jumps",
    "apply_profile",
    "confidence_from_peaks",
    "create_jump_signature",
    "load_profile",
    "save_profile",
]
