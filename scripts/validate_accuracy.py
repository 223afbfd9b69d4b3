#!/usr/bin/env python3
"""Validate jump detection accuracy.

Replay labeled recordings and compare detected jumps against the
recording's Jump column.
"""

from __future__ import annotations

import argparse
import csv
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from jumprec.analysis.detector import detect_jumps_batch
from jumprec.calibration.engine import apply_profile
from jumprec.calibration.storage import load_profile
from jumprec.core.config import get_settings
from jumprec.core.exceptions import JumpRecError
from jumprec.core.logging import get_logger, setup_logging
from jumprec.core.types import DetectionResult, DetectionStrategy
from jumprec.sensors.recording import load_recording

logger = get_logger(__name__)


@dataclass
class MatchResult:
    """A labeled jump and the detection matched to it."""

    reference_time: float
    detected_time: float | None

    @property
    def latency(self) -> float | None:
        if self.detected_time is None:
            return None
        return self.detected_time - self.reference_time


@dataclass
class ValidationSummary:
    """Summary statistics for validation run."""

    total_jumps_detected: int
    total_jumps_reference: int
    matched_jumps: int
    precision: float | None
    recall: float | None
    mean_latency_s: float | None
    max_latency_s: float | None


def match_jumps_to_references(
    detections: list[DetectionResult],
    references: list[float],
    tolerance: float = 0.5,
) -> list[MatchResult]:
    """Pair labeled jumps with detections.

    Each detection is used at most once; a reference matches the closest
    unused detection within ``tolerance`` seconds.

    Args:
        detections: Accepted jump results
        references: Labeled jump timestamps
        tolerance: Maximum time difference for a match (s)

    Returns:
        One MatchResult per reference
    """
    unused = [d.timestamp for d in detections]
    results = []

    for ref in references:
        best: float | None = None
        for detected in unused:
            distance = abs(detected - ref)
            if distance <= tolerance and (best is None or distance < abs(best - ref)):
                best = detected

        if best is not None:
            unused.remove(best)
        results.append(MatchResult(reference_time=ref, detected_time=best))

    return results


def compute_summary(results: list[MatchResult], total_detected: int) -> ValidationSummary:
    """Compute summary statistics from match results.

    Args:
        results: Per-reference match results
        total_detected: Number of detected jumps

    Returns:
        ValidationSummary with statistics
    """
    latencies = [r.latency for r in results if r.latency is not None]
    matched = len(latencies)

    return ValidationSummary(
        total_jumps_detected=total_detected,
        total_jumps_reference=len(results),
        matched_jumps=matched,
        precision=matched / total_detected if total_detected else None,
        recall=matched / len(results) if results else None,
        mean_latency_s=float(np.mean(latencies)) if latencies else None,
        max_latency_s=max(latencies) if latencies else None,
    )


def print_results(summary: ValidationSummary) -> None:
    """Print validation results to console."""
    print("\n" + "=" * 60)
    print("VALIDATION RESULTS")
    print("=" * 60)
    print(f"Jumps detected:      {summary.total_jumps_detected}")
    print(f"Reference jumps:     {summary.total_jumps_reference}")
    print(f"Matched jumps:       {summary.matched_jumps}")

    if summary.precision is not None:
        print(f"Precision:           {summary.precision:.1%}")
    if summary.recall is not None:
        print(f"Recall:              {summary.recall:.1%}")
    if summary.mean_latency_s is not None and summary.max_latency_s is not None:
        print(f"Mean latency:        {summary.mean_latency_s:.3f} s")
        print(f"Max latency:         {summary.max_latency_s:.3f} s")


def main() -> int:
    """Run validation script."""
    parser = argparse.ArgumentParser(description="Validate jump detection accuracy")
    parser.add_argument(
        "recording",
        type=Path,
        help="Labeled CSV recording",
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in DetectionStrategy],
        default=DetectionStrategy.PHASE_STATE_MACHINE.value,
        help="Detection strategy (default: phase_state_machine)",
    )
    parser.add_argument(
        "--profile",
        "-p",
        type=Path,
        help="Path to calibration profile JSON",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=0.5,
        help="Matching window in seconds (default: 0.5)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output CSV for per-jump results",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.logging.level)

    try:
        detection = settings.detection
        if args.profile is not None:
            detection = apply_profile(load_profile(args.profile), detection)

        samples, flags = load_recording(args.recording)
        detections = detect_jumps_batch(samples, args.strategy, detection, settings.filter)

    except JumpRecError as e:
        logger.error("Validation error: %s", e)
        return 1

    references = [s.timestamp for s, flag in zip(samples, flags) if flag]
    if not references:
        logger.warning("Recording has no labeled jumps")

    results = match_jumps_to_references(detections, references, args.tolerance)
    summary = compute_summary(results, len(detections))
    print_results(summary)

    if args.output:
        with open(args.output, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["reference_s", "detected_s", "latency_s"])
            for r in results:
                writer.writerow(
                    [
                        f"{r.reference_time:.3f}",
                        f"{r.detected_time:.3f}" if r.detected_time is not None else "",
                        f"{r.latency:.3f}" if r.latency is not None else "",
                    ]
                )
        logger.info("Results saved to %s", args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
