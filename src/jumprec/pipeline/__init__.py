"""Sample processing pipeline orchestration."""

from jumprec.pipeline.processor import SessionProcessor

__all__ = ["SessionProcessor"]
