"""Motion sample sources: CSV recordings and synthetic streams."""

from jumprec.sensors.recording import load_recording, save_recording
from jumprec.sensors.synthetic import (
    JumpProfile,
    synthesize_baseline,
    synthesize_calibration_session,
    synthesize_jumps,
)

__all__ = [
    "JumpProfile",
    "load_recording",
    "save_recording",
    "synthesize_baseline",
    "synthesize_calibration_session",
    "synthesize_jumps",
]
