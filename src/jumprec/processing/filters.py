"""Signal filtering for acceleration streams."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray

from jumprec.core.config import FilterSettings
from jumprec.core.logging import get_logger

logger = get_logger(__name__)

FloatArray = NDArray[np.floating[Any]]


def moving_average(signal: Sequence[float] | FloatArray, window_size: int = 3) -> FloatArray:
    """Centered moving average with windows clipped at the sequence edges.

    Args:
        signal: Input samples
        window_size: Odd number of samples averaged per output

    Returns:
        Smoothed signal of the same length
    """
    values = np.asarray(signal, dtype=np.float64)
    if len(values) < window_size:
        return values.copy()

    half = window_size // 2
    n = len(values)
    filtered = np.empty(n, dtype=np.float64)
    for i in range(n):
        window = values[max(0, i - half) : min(n, i + half + 1)]
        filtered[i] = window.sum() / len(window)
    return filtered


def high_pass(
    signal: Sequence[float] | FloatArray,
    cutoff_hz: float = 0.5,
    sample_period: float = 0.01,
) -> FloatArray:
    """Single-pole high-pass filter removing the slowly varying component.

    Args:
        signal: Input samples
        cutoff_hz: Cutoff frequency in Hz
        sample_period: Time between samples in seconds

    Returns:
        Filtered signal of the same length
    """
    values = np.asarray(signal, dtype=np.float64)
    if len(values) <= 1:
        return values.copy()

    rc = 1.0 / (2.0 * math.pi * cutoff_hz)
    alpha = rc / (rc + sample_period)

    filtered = np.empty(len(values), dtype=np.float64)
    filtered[0] = values[0]
    for i in range(1, len(values)):
        filtered[i] = alpha * (filtered[i - 1] + values[i] - values[i - 1])
    return filtered


def median_filter(signal: Sequence[float] | FloatArray, window_size: int = 5) -> FloatArray:
    """Centered median filter with windows clipped at the sequence edges.

    Clipped windows of even length take the upper of the two middle values.

    Args:
        signal: Input samples
        window_size: Odd number of samples per window

    Returns:
        Filtered signal of the same length
    """
    values = np.asarray(signal, dtype=np.float64)
    if len(values) < window_size:
        return values.copy()

    half = window_size // 2
    n = len(values)
    filtered = np.empty(n, dtype=np.float64)
    for i in range(n):
        window = np.sort(values[max(0, i - half) : min(n, i + half + 1)])
        filtered[i] = window[len(window) // 2]
    return filtered


class SignalFilterBank:
    """Smoothing, high-pass and median stages over a bounded sample buffer.

    Every pushed sample re-runs the whole pipeline over the retained buffer,
    so the latest filtered value always reflects the centered windows of its
    neighbours.
    """

    def __init__(self, settings: FilterSettings | None = None) -> None:
        """Initialize filter bank.

        Args:
            settings: Filter settings (uses defaults if None)
        """
        self.settings = settings or FilterSettings()
        self._buffer: deque[float] = deque(maxlen=self.settings.buffer_size)
        self._filtered: FloatArray = np.zeros(0, dtype=np.float64)

    @property
    def buffer(self) -> list[float]:
        """Raw samples currently retained (oldest first)."""
        return list(self._buffer)

    @property
    def filtered_signal(self) -> FloatArray:
        """Filtered version of the retained buffer."""
        return self._filtered

    @property
    def peak(self) -> float | None:
        """Maximum of the filtered buffer, or None when empty."""
        if len(self._filtered) == 0:
            return None
        return float(self._filtered.max())

    def reset(self) -> None:
        """Clear the buffer and filtered output."""
        self._buffer.clear()
        self._filtered = np.zeros(0, dtype=np.float64)

    def filter(self, signal: Sequence[float] | FloatArray) -> FloatArray:
        """Run the fixed filter pipeline over a signal.

        Args:
            signal: Input samples

        Returns:
            Filtered signal of the same length
        """
        values = np.asarray(signal, dtype=np.float64)
        if len(values) <= self.settings.min_filter_length:
            return values.copy()

        filtered = moving_average(values, self.settings.smoothing_window)
        filtered = high_pass(
            filtered,
            cutoff_hz=self.settings.highpass_cutoff,
            sample_period=self.settings.sample_period,
        )
        return median_filter(filtered, self.settings.median_window)

    def push(self, value: float) -> float:
        """Append a sample and return its filtered value.

        Args:
            value: New raw sample

        Returns:
            Latest value of the filtered buffer
        """
        self._buffer.append(value)
        self._filtered = self.filter(self._buffer)
        return float(self._filtered[-1])
