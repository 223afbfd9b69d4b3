#!/usr/bin/env python3
"""Write a synthetic motion recording.

Produces CSV files in the recording format for replay with
`jumprec detect`, `calibrate.py` and `validate_accuracy.py`.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from jumprec.core.config import get_settings
from jumprec.core.exceptions import JumpRecError
from jumprec.core.logging import get_logger, setup_logging
from jumprec.sensors.recording import save_recording
from jumprec.sensors.synthetic import (
    DEFAULT_CADENCE,
    synthesize_calibration_session,
    synthesize_jumps,
)

logger = get_logger(__name__)


def main() -> int:
    """Run session recording."""
    parser = argparse.ArgumentParser(description="Write a synthetic jump rope recording")
    parser.add_argument(
        "output",
        type=Path,
        help="Output CSV path",
    )
    parser.add_argument(
        "--jumps",
        type=int,
        default=20,
        help="Number of jumps (default: 20)",
    )
    parser.add_argument(
        "--cadence",
        type=float,
        default=DEFAULT_CADENCE,
        help="Jumps per second (default: %(default).2f)",
    )
    parser.add_argument(
        "--noise",
        type=float,
        default=0.02,
        help="Gaussian noise std dev per axis in g (default: 0.02)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible noise",
    )
    parser.add_argument(
        "--calibration",
        action="store_true",
        help="Prefix a baseline and pause like a guided calibration session",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.logging.level)

    try:
        if args.calibration:
            samples = synthesize_calibration_session(
                args.jumps,
                baseline_duration=settings.calibration.baseline_duration,
                pause_duration=settings.calibration.pause_duration,
                cadence_hz=args.cadence,
                noise_sigma=args.noise,
                seed=args.seed,
            )
            flags = None
        else:
            samples, flags = synthesize_jumps(
                args.jumps,
                cadence_hz=args.cadence,
                noise_sigma=args.noise,
                seed=args.seed,
                lead_in=0.5,
            )
        save_recording(args.output, samples, flags)

    except ValueError as e:
        logger.error("Invalid session parameters: %s", e)
        return 1

    except JumpRecError as e:
        logger.error("Recording error: %s", e)
        return 1

    logger.info("Wrote %d samples to %s", len(samples), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
