"""JumpRec: real-time jump-rope jump detection from wrist motion."""

__version__ = "0.1.0"
