"""Scripted synthetic motion streams for replay, demos and tests."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from jumprec.core.types import MotionSample

SAMPLE_RATE = 100.0  # Hz
DEFAULT_CADENCE = 1.0 / 0.6  # jumps per second


@dataclass(frozen=True, slots=True)
class JumpProfile:
    """Shape of one scripted jump, in samples at 100 Hz.

    Impact samples (takeoff and landing) carry ``impact_vertical`` on the
    Y axis and ``impact_lateral`` on the X axis, giving a total of about
    2 g with the defaults.
    """

    ground_samples: int = 10
    compression_samples: int = 8
    takeoff_samples: int = 6
    flight_samples: int = 20
    landing_samples: int = 8
    settle_samples: int = 8
    compression_vertical: float = -0.4
    impact_vertical: float = 1.8
    impact_lateral: float = 0.87

    @property
    def length(self) -> int:
        """Samples in one jump."""
        return (
            self.ground_samples
            + self.compression_samples
            + self.takeoff_samples
            + self.flight_samples
            + self.landing_samples
            + self.settle_samples
        )

    @property
    def takeoff_offset(self) -> int:
        """Index of the first takeoff sample within the jump."""
        return self.ground_samples + self.compression_samples

    def accelerations(self) -> NDArray[np.float64]:
        """Per-sample (x, y, z) user acceleration of one jump."""
        impact = (self.impact_lateral, self.impact_vertical, 0.0)
        rows: list[tuple[float, float, float]] = []
        rows += [(0.0, 0.0, 0.0)] * self.ground_samples
        rows += [(0.0, self.compression_vertical, 0.0)] * self.compression_samples
        rows += [impact] * self.takeoff_samples
        rows += [(0.0, 0.0, 0.0)] * self.flight_samples
        rows += [impact] * self.landing_samples
        rows += [(0.0, 0.0, 0.0)] * self.settle_samples
        return np.array(rows, dtype=np.float64).reshape(-1, 3)


def _to_samples(
    accelerations: NDArray[np.float64],
    start_time: float,
    noise_sigma: float,
    rng: np.random.Generator,
) -> list[MotionSample]:
    if noise_sigma > 0:
        accelerations = accelerations + rng.normal(0.0, noise_sigma, accelerations.shape)

    return [
        MotionSample(
            user_acceleration_x=float(x),
            user_acceleration_y=float(y),
            user_acceleration_z=float(z),
            timestamp=start_time + i / SAMPLE_RATE,
        )
        for i, (x, y, z) in enumerate(accelerations)
    ]


def synthesize_baseline(
    duration: float = 3.0,
    noise_sigma: float = 0.0,
    seed: int | None = None,
    start_time: float = 0.0,
) -> list[MotionSample]:
    """Stream of a user standing still.

    Args:
        duration: Length in seconds
        noise_sigma: Std dev of Gaussian noise per axis (g)
        seed: Random seed for reproducible noise
        start_time: Timestamp of the first sample (s)

    Returns:
        Samples at 100 Hz
    """
    count = int(round(duration * SAMPLE_RATE))
    rng = np.random.default_rng(seed)
    return _to_samples(np.zeros((count, 3)), start_time, noise_sigma, rng)


def synthesize_jumps(
    count: int,
    cadence_hz: float = DEFAULT_CADENCE,
    noise_sigma: float = 0.0,
    seed: int | None = None,
    start_time: float = 0.0,
    lead_in: float = 0.0,
    trailing: float = 0.5,
    profile: JumpProfile | None = None,
) -> tuple[list[MotionSample], list[bool]]:
    """Stream of evenly paced rope jumps.

    Each cycle is ground → compression → takeoff → flight → landing →
    ground, padded with ground samples up to the cadence period.

    Args:
        count: Number of jumps
        cadence_hz: Jumps per second
        noise_sigma: Std dev of Gaussian noise per axis (g)
        seed: Random seed for reproducible noise
        start_time: Timestamp of the first sample (s)
        lead_in: Ground time before the first jump (s)
        trailing: Ground time after the last jump (s)
        profile: Jump shape (defaults if None)

    Returns:
        Samples at 100 Hz and per-sample labels, True on the first
        takeoff sample of each jump

    Raises:
        ValueError: If the cadence is too fast for the jump shape
    """
    profile = profile or JumpProfile()
    period = int(round(SAMPLE_RATE / cadence_hz))
    if period < profile.length:
        raise ValueError(
            f"Cadence {cadence_hz:.2f} Hz leaves {period} samples per jump, "
            f"profile needs {profile.length}"
        )

    lead = int(round(lead_in * SAMPLE_RATE))
    tail = int(round(trailing * SAMPLE_RATE))

    jump = np.vstack([profile.accelerations(), np.zeros((period - profile.length, 3))])
    accelerations = np.vstack(
        [np.zeros((lead, 3))] + [jump] * count + [np.zeros((tail, 3))]
    )

    flags = [False] * len(accelerations)
    for n in range(count):
        flags[lead + n * period + profile.takeoff_offset] = True

    rng = np.random.default_rng(seed)
    return _to_samples(accelerations, start_time, noise_sigma, rng), flags


def synthesize_calibration_session(
    jumps: int = 10,
    baseline_duration: float = 3.0,
    pause_duration: float = 2.0,
    cadence_hz: float = DEFAULT_CADENCE,
    noise_sigma: float = 0.0,
    seed: int | None = None,
) -> list[MotionSample]:
    """Stream matching a guided calibration session.

    Standing still through the baseline and the pause, then ``jumps``
    jumps. Landings are kept short so the live counter sees one impact
    per jump.

    Args:
        jumps: Number of test jumps
        baseline_duration: Standing time for the noise baseline (s)
        pause_duration: Pause before jump collection (s)
        cadence_hz: Jumps per second
        noise_sigma: Std dev of Gaussian noise per axis (g)
        seed: Random seed for reproducible noise

    Returns:
        Samples at 100 Hz starting at timestamp 0
    """
    samples, _ = synthesize_jumps(
        jumps,
        cadence_hz=cadence_hz,
        noise_sigma=noise_sigma,
        seed=seed,
        lead_in=baseline_duration + pause_duration + 0.5,
        trailing=1.0,
        profile=JumpProfile(landing_samples=4),
    )
    return samples
