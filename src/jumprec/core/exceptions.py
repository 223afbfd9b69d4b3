"""Custom exceptions for JumpRec."""


class JumpRecError(Exception):
    """Base exception for all JumpRec errors."""

    pass


class ConfigurationError(JumpRecError):
    """Invalid or inconsistent detector configuration."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        self.message = message
        super().__init__(self.message)


class CalibrationError(JumpRecError):
    """Calibration process failed or invalid calibration data."""

    def __init__(self, message: str = "Calibration failed") -> None:
        self.message = message
        super().__init__(self.message)


class JumpDetectionError(JumpRecError):
    """Jump detection received input it cannot process."""

    def __init__(self, message: str = "Jump detection error") -> None:
        self.message = message
        super().__init__(self.message)


class RecordingError(JumpRecError):
    """Motion recording could not be read or written."""

    def __init__(self, message: str = "Recording error") -> None:
        self.message = message
        super().__init__(self.message)
