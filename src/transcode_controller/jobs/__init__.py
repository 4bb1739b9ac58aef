"""Job lifecycle: duration resolution, session state, outcomes and control."""

from .controller import JobHandle, TranscodeController
from .duration import resolve_duration
from .outcome import CANCELLED_DIAGNOSTIC, classify_outcome, tail_diagnostic
from .session import JobSession, ProgressCallback, ProgressNormalizer

__all__ = [
    "CANCELLED_DIAGNOSTIC",
    "JobHandle",
    "JobSession",
    "ProgressCallback",
    "ProgressNormalizer",
    "TranscodeController",
    "classify_outcome",
    "resolve_duration",
    "tail_diagnostic",
]
