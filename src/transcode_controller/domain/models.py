"""Data models for conversion requests, plans and outcomes.

Requests, plans and outcomes are frozen dataclasses: a request is immutable
once submitted, a plan is never mutated after construction, and an outcome
is terminal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from transcode_controller.exceptions import InvalidClipWindowError


class MediaKind(str, Enum):
    """Kind of media carried by a file."""

    VIDEO = "video"
    AUDIO = "audio"


class TargetFormat(str, Enum):
    """Output formats the controller can produce."""

    MP4 = "mp4"
    MOV = "mov"
    MP3 = "mp3"
    WAV = "wav"
    AAC = "aac"
    FLAC = "flac"

    @property
    def kind(self) -> MediaKind:
        """Media kind produced by this format."""
        if self in (TargetFormat.MP4, TargetFormat.MOV):
            return MediaKind.VIDEO
        return MediaKind.AUDIO

    @classmethod
    def parse(cls, value: TargetFormat | str) -> TargetFormat | None:
        """Parse a format name case-insensitively.

        Returns:
            The matching TargetFormat, or None if the name is not recognized.
        """
        if isinstance(value, TargetFormat):
            return value
        try:
            return cls(str(value).strip().casefold())
        except ValueError:
            return None


class QualityTier(str, Enum):
    """Coarse user-facing quality setting."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: QualityTier | str | None) -> QualityTier:
        """Parse a tier name case-insensitively.

        Unknown or empty values fall back to MEDIUM rather than failing.
        """
        if isinstance(value, QualityTier):
            return value
        if not value:
            return cls.MEDIUM
        try:
            return cls(str(value).strip().casefold())
        except ValueError:
            return cls.MEDIUM


class JobStatus(str, Enum):
    """Lifecycle states of a job session."""

    IDLE = "idle"
    PROBING = "probing"
    RUNNING = "running"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """True for states a session never leaves."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED)


class PlanBranch(str, Enum):
    """Planning branch selected for a request."""

    AUDIO_TO_AUDIO = "audio_to_audio"
    VIDEO_TO_AUDIO = "video_to_audio"
    VIDEO_TO_VIDEO = "video_to_video"


@dataclass(frozen=True)
class ClipWindow:
    """Time window to cut out of the input, in seconds."""

    start_seconds: float
    end_seconds: float

    def __post_init__(self) -> None:
        """Validate window bounds."""
        bounds = (self.start_seconds, self.end_seconds)
        if not all(math.isfinite(bound) for bound in bounds):
            raise InvalidClipWindowError(
                f"Clip bounds must be finite, got start={self.start_seconds} "
                f"end={self.end_seconds}"
            )
        if self.start_seconds < 0 or self.end_seconds < 0:
            raise InvalidClipWindowError(
                f"Clip bounds must be >= 0, got start={self.start_seconds} "
                f"end={self.end_seconds}"
            )
        if self.end_seconds <= self.start_seconds:
            raise InvalidClipWindowError(
                f"Clip end ({self.end_seconds}) must be greater than "
                f"start ({self.start_seconds})"
            )

    @property
    def duration_seconds(self) -> float:
        """Length of the clip in seconds."""
        return self.end_seconds - self.start_seconds

    @property
    def duration_ms(self) -> int:
        """Length of the clip in milliseconds."""
        return round(self.duration_seconds * 1000)


@dataclass(frozen=True)
class ConversionRequest:
    """A single conversion or clip request.

    ``target_format`` keeps unrecognized strings as-is so the planner can
    reject them with UnsupportedFormatError; ``quality`` always normalizes
    to a QualityTier.
    """

    input_path: Path
    output_path: Path
    target_format: TargetFormat | str
    quality: QualityTier | str = QualityTier.MEDIUM
    clip: ClipWindow | None = None

    def __post_init__(self) -> None:
        """Normalize paths, format and tier."""
        object.__setattr__(self, "input_path", Path(self.input_path))
        object.__setattr__(self, "output_path", Path(self.output_path))
        parsed = TargetFormat.parse(self.target_format)
        if parsed is not None:
            object.__setattr__(self, "target_format", parsed)
        object.__setattr__(self, "quality", QualityTier.parse(self.quality))

    @property
    def is_clip(self) -> bool:
        """True if this request cuts a window out of the input."""
        return self.clip is not None


@dataclass(frozen=True)
class QualityProfile:
    """Engine-specific encode parameters for one (format, tier) pair."""

    audio_codec: str
    video_codec: str | None = None
    video_crf: int | None = None
    audio_bitrate: str | None = None
    compression_level: int | None = None


@dataclass(frozen=True)
class EncodePlan:
    """Ordered engine argument tokens for one request.

    The tokens exclude the engine binary itself; the engine prepends it
    together with its own telemetry options.
    """

    args: tuple[str, ...]
    branch: PlanBranch
    profile: QualityProfile
    input_path: Path
    output_path: Path

    def __iter__(self):
        return iter(self.args)

    def __len__(self) -> int:
        return len(self.args)


@dataclass(frozen=True)
class Outcome:
    """Terminal result of one job."""

    succeeded: bool
    status: JobStatus
    diagnostic: str | None = None
    return_code: int | None = None
    output_path: Path | None = None
    elapsed_seconds: float | None = field(default=None, compare=False)

    @property
    def cancelled(self) -> bool:
        """True if the job ended because the caller cancelled it."""
        return self.status == JobStatus.CANCELLED
