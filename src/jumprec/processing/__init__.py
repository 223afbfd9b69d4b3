"""Signal processing: filtering and peak detection.

This module contains NO I/O operations.
"""

from jumprec.processing.filters import (
    SignalFilterBank,
    high_pass,
    median_filter,
    moving_average,
)
from jumprec.processing.peaks import (
    filter_close_peaks,
    filter_nearby_peaks,
    find_peaks,
    find_windowed_peaks,
)

__all__ = [
    "SignalFilterBank",
    "moving_average",
    "high_pass",
    "median_filter",
    "find_peaks",
    "filter_close_peaks",
    "find_windowed_peaks",
    "filter_nearby_peaks",
]
