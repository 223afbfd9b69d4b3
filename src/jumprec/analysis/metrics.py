"""Session statistics and jump rhythm.

This module is pure logic apart from the JSON export helper.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray

from jumprec.core.types import DetectionResult, SessionStats

RHYTHM_WINDOW = 64
# Plausible skipping cadence, 30-300 jumps per minute
RHYTHM_BAND_HZ = (0.5, 5.0)


@dataclass
class SessionSummary:
    """Summary statistics for a detection session."""

    total_jumps: int
    duration_s: float
    jumps_per_minute: float
    mean_interval_s: float | None
    std_interval_s: float | None
    max_peak_acceleration: float | None
    mean_peak_acceleration: float | None


class SessionMetrics:
    """Tracks accepted jumps and derives session statistics."""

    def __init__(self, stats: SessionStats | None = None) -> None:
        """Initialize tracker with optional existing stats.

        Args:
            stats: Existing session stats to continue tracking
        """
        self.stats = stats or SessionStats()
        self._last_timestamp: float | None = None

    @property
    def jump_count(self) -> int:
        """Get total jump count."""
        return self.stats.jump_count

    @property
    def last_jump(self) -> DetectionResult | None:
        """Get most recent jump."""
        return self.stats.last_jump

    @property
    def duration(self) -> float:
        """Seconds between the first and the latest observed sample."""
        if self.stats.start_time is None or self._last_timestamp is None:
            return 0.0
        return self._last_timestamp - self.stats.start_time

    def observe(self, timestamp: float) -> None:
        """Note the timestamp of a processed sample."""
        if self.stats.start_time is None:
            self.stats.start_time = timestamp
        if self._last_timestamp is None or timestamp > self._last_timestamp:
            self._last_timestamp = timestamp

    def add_jump(self, result: DetectionResult) -> None:
        """Record an accepted jump.

        Args:
            result: Detection result with ``is_jump`` set
        """
        if not result.is_jump:
            raise ValueError("Only accepted jumps can be added to the session")
        self.observe(result.timestamp)
        self.stats.add_jump(result)

    def intervals(self) -> list[float]:
        """Times between consecutive jumps (s)."""
        times = [j.timestamp for j in self.stats.jumps]
        return [b - a for a, b in zip(times, times[1:])]

    def jumps_per_minute(self) -> float:
        """Average jump rate over the session."""
        if self.duration <= 0:
            return 0.0
        return self.jump_count / (self.duration / 60.0)

    def get_summary(self) -> SessionSummary:
        """Get session summary statistics."""
        intervals = self.intervals()
        peaks = [
            j.characteristics.peak_acceleration
            for j in self.stats.jumps
            if j.characteristics is not None
        ]

        return SessionSummary(
            total_jumps=self.jump_count,
            duration_s=self.duration,
            jumps_per_minute=self.jumps_per_minute(),
            mean_interval_s=float(np.mean(intervals)) if intervals else None,
            std_interval_s=float(np.std(intervals)) if len(intervals) > 1 else None,
            max_peak_acceleration=max(peaks) if peaks else None,
            mean_peak_acceleration=float(np.mean(peaks)) if peaks else None,
        )

    def reset(self) -> None:
        """Clear all recorded data."""
        self.stats.reset()
        self._last_timestamp = None


def detect_jump_rhythm(
    signal: Sequence[float] | NDArray[np.floating[Any]],
    sample_rate: float = 100.0,
) -> float | None:
    """Estimate skipping cadence from the dominant frequency of a signal.

    Uses the last 64 samples with the mean removed and a Hann window.

    Args:
        signal: Acceleration magnitudes
        sample_rate: Sampling rate (Hz)

    Returns:
        Dominant cadence in jumps per minute, or None if there are too few
        samples or no energy in the plausible cadence band
    """
    values = np.asarray(signal, dtype=np.float64)
    if len(values) < RHYTHM_WINDOW:
        return None

    samples = values[-RHYTHM_WINDOW:]
    samples = (samples - samples.mean()) * np.hanning(RHYTHM_WINDOW)

    spectrum = np.abs(np.fft.rfft(samples))
    frequencies = np.fft.rfftfreq(RHYTHM_WINDOW, d=1.0 / sample_rate)

    band = (frequencies >= RHYTHM_BAND_HZ[0]) & (frequencies <= RHYTHM_BAND_HZ[1])
    if not band.any() or spectrum[band].max() <= 0:
        return None

    dominant = frequencies[band][int(np.argmax(spectrum[band]))]
    return float(dominant * 60.0)


def export_session_data(stats: SessionStats, path: Path) -> None:
    """Export session data to JSON file.

    Args:
        stats: Session statistics to export
        path: Output file path
    """
    jumps_data = [
        {
            "timestamp": j.timestamp,
            "confidence": j.confidence,
            "peak_acceleration": j.characteristics.peak_acceleration
            if j.characteristics
            else None,
            "air_time": j.characteristics.air_time if j.characteristics else None,
            "jump_height": j.characteristics.jump_height if j.characteristics else None,
            "quality": j.characteristics.quality.value if j.characteristics else None,
        }
        for j in stats.jumps
    ]

    data = {
        "start_time": stats.start_time,
        "jump_count": stats.jump_count,
        "calibration_id": stats.calibration.id if stats.calibration else None,
        "jumps": jumps_data,
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
