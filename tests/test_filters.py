"""Tests for signal filtering utilities."""

from __future__ import annotations

import numpy as np
import pytest
from pydantic import ValidationError

from jumprec.core.config import FilterSettings
from jumprec.processing.filters import (
    SignalFilterBank,
    high_pass,
    median_filter,
    moving_average,
)


class TestMovingAverage:
    """Tests for the centered moving average."""

    def test_flat_signal_unchanged(self) -> None:
        """A constant signal should stay constant, edges included."""
        signal = [1.7] * 20
        assert moving_average(signal, 3) == pytest.approx(signal)

    def test_short_signal_returned_as_is(self) -> None:
        """Signals shorter than the window are copied unchanged."""
        result = moving_average([1.0, 2.0], 3)
        assert list(result) == [1.0, 2.0]

    def test_edges_use_clipped_window(self) -> None:
        """Edge samples average only the neighbours that exist."""
        result = moving_average([0.0, 3.0, 0.0, 3.0], 3)
        assert result[0] == pytest.approx(1.5)
        assert result[1] == pytest.approx(1.0)
        assert result[3] == pytest.approx(1.5)

    def test_smooths_spike(self) -> None:
        """A single spike is spread over its neighbours."""
        result = moving_average([0.0, 0.0, 3.0, 0.0, 0.0], 3)
        assert list(result) == pytest.approx([0.0, 1.0, 1.0, 1.0, 0.0])


class TestMedianFilter:
    """Tests for the centered median filter."""

    def test_flat_signal_unchanged(self) -> None:
        """A constant signal should stay exactly constant."""
        signal = [0.42] * 15
        assert list(median_filter(signal, 5)) == signal

    def test_removes_isolated_spike(self) -> None:
        """An isolated outlier should be replaced by the local median."""
        result = median_filter([1.0, 1.0, 9.0, 1.0, 1.0, 1.0], 5)
        assert result[2] == 1.0

    def test_even_clipped_window_takes_upper_middle(self) -> None:
        """Clipped windows of even length use the upper middle value."""
        result = median_filter([1.0, 2.0, 3.0, 4.0, 5.0], 5)
        assert result[0] == 2.0
        assert result[1] == 3.0


class TestHighPass:
    """Tests for the single-pole high-pass filter."""

    def test_removes_constant_offset(self) -> None:
        """A constant offset should decay towards zero."""
        result = high_pass([1.0] * 300, cutoff_hz=0.5, sample_period=0.01)
        assert result[0] == 1.0
        assert abs(result[-1]) < 0.01

    def test_passes_step_change(self) -> None:
        """A sudden step should pass through almost unattenuated."""
        signal = [0.0] * 50 + [2.0] * 5
        result = high_pass(signal, cutoff_hz=0.5, sample_period=0.01)
        assert result[50] > 1.9

    def test_single_sample(self) -> None:
        """Single-sample input is returned as is."""
        assert list(high_pass([0.3])) == [0.3]


class TestSignalFilterBank:
    """Tests for the buffered filter pipeline."""

    def test_short_buffer_passes_through(self, filter_settings: FilterSettings) -> None:
        """Until the buffer is long enough, values pass through unfiltered."""
        bank = SignalFilterBank(filter_settings)

        for value in [0.1, 0.5, 1.2, 0.3]:
            assert bank.push(value) == value

    def test_push_returns_latest_filtered_value(self, filter_settings: FilterSettings) -> None:
        """Push should return the last element of the filtered buffer."""
        bank = SignalFilterBank(filter_settings)
        values = [0.0] * 15 + [2.0, 2.0, 0.0]

        for value in values:
            latest = bank.push(value)

        assert latest == bank.filtered_signal[-1]
        np.testing.assert_allclose(bank.filtered_signal, bank.filter(values))

    def test_buffer_is_bounded(self) -> None:
        """The buffer should keep only the most recent samples."""
        bank = SignalFilterBank(FilterSettings(buffer_size=20))

        for i in range(50):
            bank.push(float(i))

        assert len(bank.buffer) == 20
        assert bank.buffer[0] == 30.0
        assert len(bank.filtered_signal) == 20

    def test_peak_of_filtered_buffer(self, filter_settings: FilterSettings) -> None:
        """Peak should be the maximum of the filtered buffer."""
        bank = SignalFilterBank(filter_settings)
        assert bank.peak is None

        for value in [0.0] * 20 + [2.0] * 4 + [0.0] * 4:
            bank.push(value)

        assert bank.peak == pytest.approx(float(bank.filtered_signal.max()))
        assert bank.peak > 1.0

    def test_reset_clears_buffer(self, filter_settings: FilterSettings) -> None:
        """Reset should clear buffer and filtered output."""
        bank = SignalFilterBank(filter_settings)
        for value in range(12):
            bank.push(float(value))

        bank.reset()

        assert bank.buffer == []
        assert len(bank.filtered_signal) == 0

    def test_even_windows_rejected(self) -> None:
        """Filter windows must be odd."""
        with pytest.raises(ValidationError):
            FilterSettings(median_window=4)
