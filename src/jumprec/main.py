"""Main entry point for the JumpRec command line."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from jumprec.analysis.detector import parse_strategy
from jumprec.analysis.metrics import SessionSummary, detect_jump_rhythm
from jumprec.calibration.storage import load_profile
from jumprec.core.config import get_settings
from jumprec.core.exceptions import (
    CalibrationError,
    ConfigurationError,
    JumpRecError,
    RecordingError,
)
from jumprec.core.logging import get_logger, setup_logging
from jumprec.core.types import DetectionStrategy
from jumprec.pipeline.processor import SessionProcessor
from jumprec.sensors.recording import load_recording

logger = get_logger(__name__)


def print_summary(summary: SessionSummary, rhythm: float | None = None) -> None:
    """Print a session summary to stdout."""
    print("\n" + "=" * 40)
    print("SESSION SUMMARY")
    print("=" * 40)
    print(f"Jumps:               {summary.total_jumps}")
    print(f"Duration:            {summary.duration_s:.1f} s")
    print(f"Jumps per minute:    {summary.jumps_per_minute:.1f}")
    if summary.mean_interval_s is not None:
        print(f"Mean interval:       {summary.mean_interval_s:.3f} s")
    if summary.std_interval_s is not None:
        print(f"Interval std dev:    {summary.std_interval_s:.3f} s")
    if summary.max_peak_acceleration is not None:
        print(f"Max peak:            {summary.max_peak_acceleration:.2f} g")
    if rhythm is not None:
        print(f"Closing rhythm:      {rhythm:.0f} jumps/min")


def run_detect(
    recording: Path,
    strategy: DetectionStrategy | str | None = None,
    profile_path: Path | None = None,
) -> int:
    """Replay a recording through the detector and print a summary.

    Args:
        recording: CSV recording path
        strategy: Detection strategy (configured strategy if None)
        profile_path: Optional calibration profile JSON

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    settings = get_settings()
    setup_logging(settings.logging.level, settings.logging.file)

    try:
        profile = load_profile(profile_path) if profile_path is not None else None
        samples, _ = load_recording(recording)
        processor = SessionProcessor(
            settings,
            profile=profile,
            strategy=parse_strategy(strategy) if strategy is not None else None,
        )

        logger.info("Replaying %d samples from %s", len(samples), recording)
        processor.process_samples(samples)

        magnitudes = [s.total_acceleration for s in samples]
        sample_rate = _estimate_sample_rate([s.timestamp for s in samples])
        rhythm = detect_jump_rhythm(magnitudes, sample_rate) if sample_rate else None

        print_summary(processor.summary(), rhythm)
        return 0

    except (ConfigurationError, RecordingError) as e:
        logger.error("Invalid input: %s", e)
        return 1

    except CalibrationError as e:
        logger.error("Calibration profile error: %s", e)
        return 1

    except JumpRecError as e:
        logger.error("Detection error: %s", e)
        return 2

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        return 3


def _estimate_sample_rate(timestamps: list[float]) -> float | None:
    if len(timestamps) < 2 or timestamps[-1] <= timestamps[0]:
        return None
    return (len(timestamps) - 1) / (timestamps[-1] - timestamps[0])


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="JumpRec - jump rope jump detection")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser("detect", help="Count jumps in a motion recording")
    detect.add_argument(
        "recording",
        type=Path,
        help="CSV recording (Timestamp,AX,AY,AZ,RX,RY,RZ,Jump)",
    )
    detect.add_argument(
        "--strategy",
        choices=[s.value for s in DetectionStrategy],
        help="Detection strategy (default: JUMPREC_STRATEGY or phase_state_machine)",
    )
    detect.add_argument(
        "--profile",
        type=Path,
        help="Calibration profile JSON",
    )
    detect.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    exit_code = run_detect(args.recording, args.strategy, args.profile)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
