#!/usr/bin/env python3
"""Calibrate JumpRec from a recorded calibration session.

The recording must follow the guided session: stand still for the
baseline, wait through the pause, then perform the test jumps.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from jumprec.calibration.engine import CalibrationEngine
from jumprec.calibration.storage import save_profile
from jumprec.core.config import get_settings
from jumprec.core.exceptions import JumpRecError
from jumprec.core.logging import get_logger, setup_logging
from jumprec.core.types import AccelerationSample, CalibrationState
from jumprec.sensors.recording import load_recording

logger = get_logger(__name__)


def main() -> int:
    """Run calibration routine."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Calibrate JumpRec from a recording")
    parser.add_argument(
        "recording",
        type=Path,
        help="CSV recording of a calibration session",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(settings.calibration.profile_path),
        help="Output path for calibration profile",
    )
    parser.add_argument(
        "--height",
        type=float,
        help="User height in cm, stored with the profile",
    )
    parser.add_argument(
        "--weight",
        type=float,
        help="User weight in kg, stored with the profile",
    )

    args = parser.parse_args()
    setup_logging(settings.logging.level)

    engine = CalibrationEngine(
        settings.calibration,
        settings.peaks,
        on_jump_counted=lambda n: logger.info("Test jump %d counted", n),
    )

    try:
        samples, _ = load_recording(args.recording)
        engine.start()
        state = engine.process_samples(AccelerationSample.from_motion(s) for s in samples)

        if state == CalibrationState.FAILED:
            logger.error("Calibration failed: %s", engine.failure_reason)
            return 1

        if engine.profile is None:
            logger.error(
                "Recording ended during %s (%.0f%% done)",
                state.name,
                engine.progress * 100,
            )
            return 1

        profile = engine.profile.with_user_metrics(args.height, args.weight)
        save_profile(profile, args.output)
        print(profile.describe())
        return 0

    except JumpRecError as e:
        logger.error("Calibration error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
