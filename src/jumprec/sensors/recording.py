"""CSV motion recordings.

Recordings use the watch app's export layout, one row per sample:

    Timestamp,AX,AY,AZ,RX,RY,RZ,Jump

where A* are user acceleration components (g), R* rotation rates (rad/s)
and Jump is 1 on samples labeled as a jump.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from pathlib import Path

from jumprec.core.exceptions import RecordingError
from jumprec.core.logging import get_logger
from jumprec.core.types import MotionSample

logger = get_logger(__name__)

HEADER = ("Timestamp", "AX", "AY", "AZ", "RX", "RY", "RZ", "Jump")


def load_recording(path: Path) -> tuple[list[MotionSample], list[bool]]:
    """Load a motion recording.

    Args:
        path: CSV file path

    Returns:
        Samples in file order and the per-sample jump labels

    Raises:
        RecordingError: If the file is missing, malformed or out of order
    """
    samples: list[MotionSample] = []
    flags: list[bool] = []

    try:
        with open(path, newline="") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None or tuple(h.strip() for h in header) != HEADER:
                raise RecordingError(f"{path}: expected header {','.join(HEADER)}")

            for line_no, row in enumerate(reader, start=2):
                if not row:
                    continue
                sample, flag = _parse_row(row, path, line_no)
                if samples and sample.timestamp <= samples[-1].timestamp:
                    raise RecordingError(
                        f"{path}:{line_no}: timestamp {sample.timestamp} is not increasing"
                    )
                samples.append(sample)
                flags.append(flag)
    except OSError as e:
        raise RecordingError(f"Failed to read recording: {e}") from e

    logger.info("Loaded %d samples (%d labeled jumps) from %s", len(samples), sum(flags), path)
    return samples, flags


def save_recording(
    path: Path,
    samples: Sequence[MotionSample],
    flags: Sequence[bool] | None = None,
) -> None:
    """Write a motion recording.

    Args:
        path: Output CSV file path
        samples: Samples in timestamp order
        flags: Per-sample jump labels (all False if None)

    Raises:
        RecordingError: If labels do not match the samples or the file cannot be written
    """
    if flags is None:
        flags = [False] * len(samples)
    if len(flags) != len(samples):
        raise RecordingError(f"Got {len(flags)} jump labels for {len(samples)} samples")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)
            for sample, flag in zip(samples, flags):
                writer.writerow(
                    [
                        repr(sample.timestamp),
                        repr(sample.user_acceleration_x),
                        repr(sample.user_acceleration_y),
                        repr(sample.user_acceleration_z),
                        repr(sample.rotation_rate_x),
                        repr(sample.rotation_rate_y),
                        repr(sample.rotation_rate_z),
                        1 if flag else 0,
                    ]
                )
    except OSError as e:
        raise RecordingError(f"Failed to write recording: {e}") from e

    logger.info("Saved %d samples to %s", len(samples), path)


def _parse_row(row: list[str], path: Path, line_no: int) -> tuple[MotionSample, bool]:
    if len(row) != len(HEADER):
        raise RecordingError(f"{path}:{line_no}: expected {len(HEADER)} columns, got {len(row)}")
    try:
        timestamp, ax, ay, az, rx, ry, rz = (float(v) for v in row[:7])
        flag = int(row[7]) != 0
    except ValueError as e:
        raise RecordingError(f"{path}:{line_no}: {e}") from e

    sample = MotionSample(
        user_acceleration_x=ax,
        user_acceleration_y=ay,
        user_acceleration_z=az,
        rotation_rate_x=rx,
        rotation_rate_y=ry,
        rotation_rate_z=rz,
        timestamp=timestamp,
    )
    return sample, flag
