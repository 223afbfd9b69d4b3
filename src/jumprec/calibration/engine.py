"""Guided calibration session deriving per-user detection parameters."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray
from pydantic import ValidationError

from jumprec.core.config import CalibrationSettings, DetectionSettings, PeakSettings
from jumprec.core.exceptions import CalibrationError
from jumprec.core.logging import get_logger
from jumprec.core.types import AccelerationSample, CalibrationProfile, CalibrationState
from jumprec.processing.peaks import find_windowed_peaks

logger = get_logger(__name__)

BASELINE_PROGRESS = 0.3
JUMPS_PROGRESS = 0.5
ANALYSIS_PROGRESS = 0.8

# Plausible bounds on the time between jumps (s)
MIN_JUMP_INTERVAL = 0.2
MAX_JUMP_INTERVAL = 2.0

NO_JUMP_DATA = "No jump data collected"
NOT_ENOUGH_JUMPS = "Not enough jumps detected. Please try again."


def analyze_baseline(samples: Sequence[AccelerationSample]) -> float:
    """Noise floor of a quiescent recording.

    Args:
        samples: Samples recorded while standing still

    Returns:
        Population standard deviation of the sample magnitudes (g)

    Raises:
        CalibrationError: If no samples were recorded
    """
    if not samples:
        raise CalibrationError("No baseline data collected")

    magnitudes = np.array([s.magnitude for s in samples], dtype=np.float64)
    return float(np.std(magnitudes))


def confidence_from_peaks(accelerations: Sequence[float]) -> float:
    """Confidence from the consistency of test jump peaks.

    Args:
        accelerations: Peak magnitude of each test jump (g)

    Returns:
        0.95 / 0.85 / 0.75 / 0.65 for a coefficient of variation below
        0.1 / 0.2 / 0.3 / above, and 0.5 with fewer than two peaks
    """
    if len(accelerations) <= 1:
        return 0.5

    values = np.asarray(accelerations, dtype=np.float64)
    mean = float(values.mean())
    if mean <= 0:
        return 0.5

    cv = float(values.std()) / mean
    if cv < 0.1:
        return 0.95
    if cv < 0.2:
        return 0.85
    if cv < 0.3:
        return 0.75
    return 0.65


def create_jump_signature(
    magnitudes: Sequence[float] | NDArray[np.floating[Any]],
    peak_index: int,
    length: int = 50,
) -> tuple[float, ...]:
    """Normalized magnitude window centered on a peak.

    Args:
        magnitudes: Magnitude per sample (g)
        peak_index: Index of the peak sample
        length: Window length in samples (clipped at the recording edges)

    Returns:
        Window values divided by the window maximum
    """
    values = np.asarray(magnitudes, dtype=np.float64)
    half = length // 2
    window = values[max(0, peak_index - half) : min(len(values), peak_index + half)]
    if len(window) == 0:
        return ()

    peak = float(window.max())
    if peak > 0:
        window = window / peak
    return tuple(float(v) for v in window)


def analyze_jumps(
    samples: Sequence[AccelerationSample],
    baseline_noise: float,
    settings: CalibrationSettings | None = None,
    peak_settings: PeakSettings | None = None,
) -> CalibrationProfile:
    """Fit a calibration profile to a recording of test jumps.

    The max jump interval is never below the min; with a single
    peak it spans the full plausible range.

    Args:
        samples: Samples recorded while jumping
        baseline_noise: Noise floor from the baseline recording (g)
        settings: Calibration settings
        peak_settings: Peak detection settings

    Returns:
        A new CalibrationProfile

    Raises:
        CalibrationError: If the recording is empty or holds too few jumps
    """
    settings = settings or CalibrationSettings()
    peak_settings = peak_settings or PeakSettings()

    if not samples:
        raise CalibrationError(NO_JUMP_DATA)

    magnitudes = np.array([s.magnitude for s in samples], dtype=np.float64)
    timestamps = np.array([s.timestamp for s in samples], dtype=np.float64)
    verticals = np.array([s.y for s in samples], dtype=np.float64)

    peaks = find_windowed_peaks(
        magnitudes,
        timestamps,
        threshold=settings.test_jump_threshold,
        baseline_noise=baseline_noise,
        window_size=peak_settings.window_size,
        noise_sigma=peak_settings.noise_sigma,
        min_separation=peak_settings.min_separation,
        verticals=verticals,
    )
    logger.debug("Found %d peaks in %d jump samples", len(peaks), len(samples))

    if len(peaks) < settings.required_jumps:
        raise CalibrationError(NOT_ENOUGH_JUMPS)

    accelerations = [p.acceleration for p in peaks]
    average_peak = float(np.mean(accelerations))

    intervals = np.diff([p.timestamp for p in peaks])
    average_interval = float(intervals.mean()) if len(intervals) else 0.0

    min_interval = max(MIN_JUMP_INTERVAL, average_interval * 0.7)
    # A single peak gives no interval; keep the widest window
    max_interval = MAX_JUMP_INTERVAL
    if len(intervals):
        max_interval = max(min(MAX_JUMP_INTERVAL, average_interval * 1.5), min_interval)

    return CalibrationProfile(
        baseline_noise=baseline_noise,
        average_peak_acceleration=average_peak,
        optimal_threshold=baseline_noise + (average_peak - baseline_noise) * 0.3,
        min_jump_interval=min_interval,
        max_jump_interval=max_interval,
        jump_signature=create_jump_signature(
            magnitudes, peaks[0].index, settings.signature_length
        ),
        confidence_level=confidence_from_peaks(accelerations),
    )


def apply_profile(
    profile: CalibrationProfile,
    settings: DetectionSettings | None = None,
) -> DetectionSettings:
    """Seed detection settings from a calibration profile.

    Sensitivity takes the optimal threshold, the debounce time takes the
    minimum jump interval and the noise floor takes the baseline noise.

    Args:
        profile: Calibration profile
        settings: Settings to start from (defaults if None)

    Returns:
        New, validated DetectionSettings

    Raises:
        CalibrationError: If the profile yields inconsistent settings
    """
    base = settings or DetectionSettings()
    values = base.model_dump()
    values.update(
        sensitivity=profile.optimal_threshold,
        debounce_time=profile.min_jump_interval,
        noise_floor=profile.baseline_noise,
    )

    try:
        return DetectionSettings(**values)
    except ValidationError as e:
        raise CalibrationError(f"Profile {profile.id} yields invalid settings: {e}") from e


class CalibrationEngine:
    """Calibration session state machine.

    States:
        IDLE → COLLECTING_BASELINE: `start`
        COLLECTING_BASELINE → COLLECTING_JUMPS: baseline window elapsed
        COLLECTING_JUMPS → ANALYZING_DATA: enough test jumps counted and one
            peak window of samples after the last, or timeout
        ANALYZING_DATA → COMPLETED | FAILED(reason)

    Timing follows the sample timestamps, so recordings replay
    deterministically. `cancel` returns any non-terminal session to IDLE.
    """

    def __init__(
        self,
        settings: CalibrationSettings | None = None,
        peak_settings: PeakSettings | None = None,
        on_jump_counted: Callable[[int], None] | None = None,
    ) -> None:
        """Initialize calibration engine.

        Args:
            settings: Calibration settings (uses defaults if None)
            peak_settings: Peak detection settings (uses defaults if None)
            on_jump_counted: Called with the running count for each test jump
        """
        self.settings = settings or CalibrationSettings()
        self.peak_settings = peak_settings or PeakSettings()
        self.on_jump_counted = on_jump_counted

        self._state = CalibrationState.IDLE
        self._failure_reason: str | None = None
        self._profile: CalibrationProfile | None = None
        self._progress = 0.0
        self._instructions = ""
        self._reset_buffers()

    @property
    def state(self) -> CalibrationState:
        """Current session state."""
        return self._state

    @property
    def failure_reason(self) -> str | None:
        """Reason for the FAILED state."""
        return self._failure_reason

    @property
    def profile(self) -> CalibrationProfile | None:
        """Profile produced by a completed session."""
        return self._profile

    @property
    def progress(self) -> float:
        """Session progress [0, 1]."""
        return self._progress

    @property
    def instructions(self) -> str:
        """Instruction text for the user."""
        return self._instructions

    @property
    def test_jump_count(self) -> int:
        """Test jumps counted live during collection."""
        return self._test_jump_count

    @property
    def baseline_noise(self) -> float:
        """Noise floor measured during the baseline window."""
        return self._baseline_noise

    def start(self) -> None:
        """Start (or restart) a calibration session."""
        self._reset_buffers()
        self._profile = None
        self._failure_reason = None
        self._state = CalibrationState.COLLECTING_BASELINE
        self._progress = 0.0
        self._instructions = (
            f"Please stand still for {self.settings.baseline_duration:.0f} seconds..."
        )
        logger.info("Calibration started")

    def cancel(self) -> None:
        """Abandon a running session without producing a profile."""
        if self._state.is_terminal:
            return

        self._reset_buffers()
        self._state = CalibrationState.IDLE
        self._progress = 0.0
        self._instructions = ""
        logger.info("Calibration cancelled")

    def process_sample(self, sample: AccelerationSample) -> CalibrationState:
        """Feed one sample to the session.

        Samples are ignored while idle, during the pause before jump
        collection, and once the session has finished.

        Args:
            sample: Next acceleration sample

        Returns:
            State after processing the sample
        """
        if self._state == CalibrationState.COLLECTING_BASELINE:
            self._collect_baseline(sample)
        elif self._state == CalibrationState.COLLECTING_JUMPS:
            self._collect_jumps(sample)
        return self._state

    def process_samples(self, samples: Iterable[AccelerationSample]) -> CalibrationState:
        """Feed samples until the session finishes or the input ends."""
        for sample in samples:
            if self.process_sample(sample).is_terminal:
                break
        return self._state

    def _reset_buffers(self) -> None:
        self._baseline_data: list[AccelerationSample] = []
        self._jump_data: list[AccelerationSample] = []
        self._test_jump_count = 0
        self._last_test_jump: float | None = None
        self._baseline_noise = 0.0
        self._phase_start: float | None = None
        self._collect_after: float | None = None
        self._samples_until_analysis: int | None = None

    def _collect_baseline(self, sample: AccelerationSample) -> None:
        if self._phase_start is None:
            self._phase_start = sample.timestamp
        self._baseline_data.append(sample)

        elapsed = sample.timestamp - self._phase_start
        duration = self.settings.baseline_duration
        self._progress = min(elapsed / duration, 1.0) * BASELINE_PROGRESS

        if elapsed >= duration:
            self._finish_baseline(sample.timestamp)

    def _finish_baseline(self, timestamp: float) -> None:
        self._baseline_noise = analyze_baseline(self._baseline_data)
        logger.info("Baseline noise level: %.4f g", self._baseline_noise)

        self._state = CalibrationState.COLLECTING_JUMPS
        self._progress = BASELINE_PROGRESS
        self._instructions = (
            f"Now perform {self.settings.required_jumps} rope jumps at your normal pace"
        )
        self._phase_start = None
        self._collect_after = timestamp + self.settings.pause_duration

    def _collect_jumps(self, sample: AccelerationSample) -> None:
        if self._collect_after is not None and sample.timestamp < self._collect_after:
            return
        if self._phase_start is None:
            self._phase_start = sample.timestamp
        self._jump_data.append(sample)

        # The peak scan needs a full window after the last counted jump
        if self._samples_until_analysis is not None:
            self._samples_until_analysis -= 1
            if self._samples_until_analysis <= 0:
                self._finish_jumps()
            return

        if self._detect_test_jump(sample):
            self._test_jump_count += 1
            required = self.settings.required_jumps
            self._progress = BASELINE_PROGRESS + (self._test_jump_count / required) * JUMPS_PROGRESS
            self._instructions = f"Jump {self._test_jump_count} of {required} detected"
            if self.on_jump_counted is not None:
                self.on_jump_counted(self._test_jump_count)

            if self._test_jump_count >= required:
                self._samples_until_analysis = self.peak_settings.window_size
                self._instructions = "Done! Stand still for a moment..."
                return

        if sample.timestamp - self._phase_start >= self.settings.jump_timeout:
            logger.info("Jump collection timed out after %.1fs", self.settings.jump_timeout)
            self._finish_jumps()

    def _detect_test_jump(self, sample: AccelerationSample) -> bool:
        """Conservative fixed-threshold detector used only for live counting."""
        if sample.magnitude <= self.settings.test_jump_threshold:
            return False
        if (
            self._last_test_jump is not None
            and sample.timestamp - self._last_test_jump <= self.settings.test_jump_interval
        ):
            return False
        self._last_test_jump = sample.timestamp
        return True

    def _finish_jumps(self) -> None:
        self._state = CalibrationState.ANALYZING_DATA
        self._progress = ANALYSIS_PROGRESS
        self._instructions = "Analyzing your jump pattern..."

        try:
            profile = analyze_jumps(
                self._jump_data,
                self._baseline_noise,
                self.settings,
                self.peak_settings,
            )
        except CalibrationError as e:
            self._state = CalibrationState.FAILED
            self._failure_reason = e.message
            self._instructions = e.message
            logger.warning("Calibration failed: %s", e.message)
            return

        self._profile = profile
        self._state = CalibrationState.COMPLETED
        self._progress = 1.0
        self._instructions = "Calibration complete!"
        logger.info(
            "Calibration complete: threshold %.2fg, confidence %.0f%%",
            profile.optimal_threshold,
            profile.confidence_level * 100,
        )
