"""Peak detection in acceleration signals.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray

from jumprec.core.types import JumpPeak


def find_peaks(
    signal: Sequence[float] | NDArray[np.floating[Any]],
    threshold: float,
    min_distance: int = 30,
) -> list[int]:
    """Find strict local maxima above a threshold.

    Args:
        signal: Input samples
        threshold: Minimum value for a peak
        min_distance: Minimum index distance between kept peaks

    Returns:
        Indices of kept peaks in ascending order
    """
    values = np.asarray(signal, dtype=np.float64)
    if len(values) <= 2:
        return []

    peaks = [
        i
        for i in range(1, len(values) - 1)
        if values[i] > values[i - 1] and values[i] > values[i + 1] and values[i] > threshold
    ]

    return filter_close_peaks(peaks, min_distance)


def filter_close_peaks(peaks: Sequence[int], min_distance: int) -> list[int]:
    """Drop peaks closer than ``min_distance`` to the previously kept peak.

    Args:
        peaks: Candidate indices in ascending order
        min_distance: Minimum index distance

    Returns:
        Filtered indices
    """
    if len(peaks) <= 1:
        return list(peaks)

    filtered = [peaks[0]]
    for index in peaks[1:]:
        if index - filtered[-1] >= min_distance:
            filtered.append(index)
    return filtered


def find_windowed_peaks(
    magnitudes: Sequence[float] | NDArray[np.floating[Any]],
    timestamps: Sequence[float] | NDArray[np.floating[Any]],
    threshold: float,
    baseline_noise: float = 0.0,
    window_size: int = 50,
    noise_sigma: float = 3.0,
    min_separation: float = 0.3,
    verticals: Sequence[float] | NDArray[np.floating[Any]] | None = None,
) -> list[JumpPeak]:
    """Find peaks that dominate a centered window and clear the noise floor.

    A sample is a peak when it is the first maximum of the window of
    ``window_size + 1`` samples centered on it and it exceeds
    ``threshold + noise_sigma * baseline_noise``. Only samples at least
    ``window_size`` away from both ends are considered.

    Args:
        magnitudes: Acceleration magnitude per sample (g)
        timestamps: Sample timestamps (s)
        threshold: Base peak threshold (g)
        baseline_noise: Noise floor standard deviation (g)
        window_size: Window length in samples
        noise_sigma: Number of noise standard deviations above threshold
        min_separation: Minimum time between kept peaks (s)
        verticals: Optional vertical component per sample

    Returns:
        Peaks sorted by timestamp
    """
    values = np.asarray(magnitudes, dtype=np.float64)
    times = np.asarray(timestamps, dtype=np.float64)
    if len(values) != len(times):
        raise ValueError("magnitudes and timestamps must have the same length")

    half = window_size // 2
    cutoff = threshold + baseline_noise * noise_sigma
    peaks: list[JumpPeak] = []

    for i in range(window_size, len(values) - window_size):
        window = values[i - half : i + half + 1]
        if int(np.argmax(window)) != half:
            continue

        if window[half] > cutoff:
            peaks.append(
                JumpPeak(
                    index=i,
                    timestamp=float(times[i]),
                    acceleration=float(window[half]),
                    vertical_component=float(verticals[i]) if verticals is not None else 0.0,
                )
            )

    return filter_nearby_peaks(peaks, min_separation)


def filter_nearby_peaks(peaks: Sequence[JumpPeak], min_separation: float = 0.3) -> list[JumpPeak]:
    """Keep a peak only if it comes more than ``min_separation`` after the last kept one.

    Args:
        peaks: Candidate peaks in any order
        min_separation: Minimum separation in seconds

    Returns:
        Filtered peaks in ascending timestamp order
    """
    filtered: list[JumpPeak] = []
    last_timestamp: float | None = None

    for peak in sorted(peaks, key=lambda p: p.timestamp):
        if last_timestamp is None or peak.timestamp - last_timestamp > min_separation:
            filtered.append(peak)
            last_timestamp = peak.timestamp

    return filtered
