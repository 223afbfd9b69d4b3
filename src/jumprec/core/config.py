"""Application configuration via Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jumprec.core.types import DetectionStrategy


class DetectionSettings(BaseSettings):
    """Jump detection parameters shared by every detector strategy."""

    model_config = SettingsConfigDict(env_prefix="JUMP_")

    # Thresholds (g)
    min_peak_threshold: float = 1.5
    max_peak_threshold: float = 4.0
    vertical_ratio: float = Field(default=0.7, gt=0.0, le=1.0)

    # Timing (s)
    min_jump_duration: float = 0.15
    max_jump_duration: float = 0.8
    debounce_time: float = 0.3
    compression_timeout: float = Field(default=0.5, gt=0.0)
    sample_period: float = Field(default=0.01, gt=0.0)

    # Pattern recognition
    pattern_match_threshold: float = Field(default=0.75, ge=0.0, le=1.0)

    # Simple threshold mode
    sensitivity: float = 1.5
    noise_floor: float = Field(default=0.0, ge=0.0)
    window_size: int = 10
    edge_margin: int = Field(default=2, ge=1)

    # Vertical threshold mode
    vertical_threshold: float = 0.8

    @model_validator(mode="after")
    def _check_bounds(self) -> "DetectionSettings":
        if self.min_peak_threshold >= self.max_peak_threshold:
            raise ValueError(
                f"min_peak_threshold ({self.min_peak_threshold}) must be below "
                f"max_peak_threshold ({self.max_peak_threshold})"
            )
        if self.min_jump_duration >= self.max_jump_duration:
            raise ValueError(
                f"min_jump_duration ({self.min_jump_duration}) must be below "
                f"max_jump_duration ({self.max_jump_duration})"
            )
        if self.debounce_time < 0:
            raise ValueError("debounce_time must be non-negative")
        if self.window_size < 2 * self.edge_margin + 1:
            raise ValueError("window_size too small for edge_margin")
        if self.noise_floor >= self.sensitivity:
            raise ValueError("noise_floor must be below sensitivity")
        return self


class FilterSettings(BaseSettings):
    """Signal filter bank parameters."""

    model_config = SettingsConfigDict(env_prefix="FILTER_")

    smoothing_window: int = Field(default=3, ge=1)
    highpass_cutoff: float = Field(default=0.5, gt=0.0)
    median_window: int = Field(default=5, ge=1)
    sample_period: float = Field(default=0.01, gt=0.0)
    buffer_size: int = Field(default=100, ge=1)
    min_filter_length: int = Field(default=10, ge=0)

    @model_validator(mode="after")
    def _check_windows(self) -> "FilterSettings":
        if self.smoothing_window % 2 == 0 or self.median_window % 2 == 0:
            raise ValueError("filter windows must be odd")
        return self


class PeakSettings(BaseSettings):
    """Peak detection parameters."""

    model_config = SettingsConfigDict(env_prefix="PEAK_")

    min_distance: int = Field(default=30, ge=1)
    window_size: int = Field(default=50, ge=2)
    noise_sigma: float = Field(default=3.0, ge=0.0)
    min_separation: float = Field(default=0.3, ge=0.0)


class CalibrationSettings(BaseSettings):
    """Calibration session settings."""

    model_config = SettingsConfigDict(env_prefix="CALIBRATION_")

    baseline_duration: float = Field(default=3.0, gt=0.0)
    pause_duration: float = Field(default=2.0, ge=0.0)
    jump_timeout: float = Field(default=30.0, gt=0.0)
    required_jumps: int = Field(default=10, ge=1)
    test_jump_threshold: float = 1.3
    test_jump_interval: float = Field(default=0.3, ge=0.0)
    signature_length: int = Field(default=50, ge=2)
    profile_path: str = "data/calibration/profile.json"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="JUMPREC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    strategy: DetectionStrategy = DetectionStrategy.PHASE_STATE_MACHINE
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    filter: FilterSettings = Field(default_factory=FilterSettings)
    peaks: PeakSettings = Field(default_factory=PeakSettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
