"""Transcode job controller.

Plans, runs, observes and cancels single-file media transcode jobs (format
conversion and time-window clipping) driven through an external FFmpeg
encoder.
"""

from transcode_controller.domain import (
    ClipWindow,
    ConversionRequest,
    JobStatus,
    Outcome,
    QualityTier,
    TargetFormat,
)
from transcode_controller.exceptions import (
    InvalidClipWindowError,
    TranscodeControllerError,
    UnsupportedConversionError,
    UnsupportedFormatError,
)
from transcode_controller.jobs import JobHandle, TranscodeController

__version__ = "0.1.0"

__all__ = [
    "ClipWindow",
    "ConversionRequest",
    "InvalidClipWindowError",
    "JobHandle",
    "JobStatus",
    "Outcome",
    "QualityTier",
    "TargetFormat",
    "TranscodeController",
    "TranscodeControllerError",
    "UnsupportedConversionError",
    "UnsupportedFormatError",
    "__version__",
]
