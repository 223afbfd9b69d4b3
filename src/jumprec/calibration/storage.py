"""Calibration profile persistence."""

from __future__ import annotations

import json
from pathlib import Path

from jumprec.core.exceptions import CalibrationError
from jumprec.core.logging import get_logger
from jumprec.core.types import CalibrationProfile

logger = get_logger(__name__)


def save_profile(profile: CalibrationProfile, path: Path) -> None:
    """Save a calibration profile to file.

    Args:
        profile: Profile to save
        path: Output file path (JSON)

    Raises:
        CalibrationError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(profile.to_dict(), f, indent=2)
    except OSError as e:
        raise CalibrationError(f"Failed to save profile: {e}") from e

    logger.info("Saved calibration profile to %s", path)


def load_profile(path: Path) -> CalibrationProfile:
    """Load a calibration profile from file.

    Args:
        path: Input file path (JSON)

    Returns:
        Loaded CalibrationProfile

    Raises:
        CalibrationError: If file invalid or not found
    """
    try:
        with open(path) as f:
            data = json.load(f)
        profile = CalibrationProfile.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise CalibrationError(f"Failed to load profile: {e}") from e

    logger.info("Loaded calibration profile %s from %s", profile.id, path)
    return profile
