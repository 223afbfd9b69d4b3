"""Pytest fixtures for JumpRec tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from jumprec.core.config import (
    CalibrationSettings,
    DetectionSettings,
    FilterSettings,
    PeakSettings,
)
from jumprec.core.types import AccelerationSample, CalibrationProfile, MotionSample
from jumprec.sensors.synthetic import (
    synthesize_baseline,
    synthesize_calibration_session,
    synthesize_jumps,
)


def _create_sample(y: float, timestamp: float, x: float = 0.0, z: float = 0.0) -> MotionSample:
    """Create a motion sample from acceleration components."""
    return MotionSample(
        user_acceleration_x=x,
        user_acceleration_y=y,
        user_acceleration_z=z,
        timestamp=timestamp,
    )


@pytest.fixture
def detection_settings() -> DetectionSettings:
    """Create default detection settings for testing."""
    return DetectionSettings()


@pytest.fixture
def filter_settings() -> FilterSettings:
    """Create filter settings for testing."""
    return FilterSettings()


@pytest.fixture
def peak_settings() -> PeakSettings:
    """Create peak settings for testing."""
    return PeakSettings()


@pytest.fixture
def calibration_settings() -> CalibrationSettings:
    """Create calibration settings for testing."""
    return CalibrationSettings()


@pytest.fixture
def standing_samples() -> list[MotionSample]:
    """Two seconds of standing still (no jump)."""
    return synthesize_baseline(duration=2.0)


@pytest.fixture
def single_jump_samples() -> list[MotionSample]:
    """One scripted jump followed by half a second of standing."""
    samples, _ = synthesize_jumps(1)
    return samples


@pytest.fixture
def ten_jump_samples() -> list[MotionSample]:
    """Ten scripted jumps spaced 0.6 s apart."""
    samples, _ = synthesize_jumps(10)
    return samples


@pytest.fixture
def noisy_ten_jump_samples() -> list[MotionSample]:
    """Ten scripted jumps with Gaussian noise on every axis."""
    samples, _ = synthesize_jumps(10, noise_sigma=0.02, seed=7)
    return samples


@pytest.fixture
def calibration_session() -> list[AccelerationSample]:
    """Baseline, pause and ten test jumps as calibration samples."""
    return [AccelerationSample.from_motion(s) for s in synthesize_calibration_session()]


@pytest.fixture
def calibration_profile() -> CalibrationProfile:
    """Create a sample calibration profile."""
    return CalibrationProfile(
        baseline_noise=0.05,
        average_peak_acceleration=2.2,
        optimal_threshold=0.695,
        min_jump_interval=0.35,
        max_jump_interval=0.75,
        jump_signature=(0.2, 0.6, 1.0, 0.6, 0.2),
        confidence_level=0.85,
        id="test-profile",
        created_at=1700000000.0,
    )


@pytest.fixture
def make_sample() -> Callable[..., MotionSample]:
    """Factory for motion samples: make_sample(y, timestamp, x=0.0, z=0.0)."""
    return _create_sample
