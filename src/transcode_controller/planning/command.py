"""FFmpeg argument planning for conversion and clip requests.

The planner is pure: it never touches the file system or the engine, so
planning errors surface before any process exists.
"""

from __future__ import annotations

import logging
from pathlib import Path

from transcode_controller.domain import (
    ClipWindow,
    ConversionRequest,
    EncodePlan,
    MediaKind,
    PlanBranch,
    TargetFormat,
)
from transcode_controller.exceptions import (
    UnsupportedConversionError,
    UnsupportedFormatError,
)

from .quality import build_audio_args, build_video_args, resolve_profile

logger = logging.getLogger(__name__)

# Container extensions treated as video input; anything else is audio
VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "mkv", "avi", "webm"})

DEFAULT_VIDEO_PRESET = "ultrafast"


def classify_input(path: Path | str) -> MediaKind:
    """Classify an input file as video or audio by its extension."""
    suffix = Path(path).suffix.lstrip(".").casefold()
    if suffix in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    return MediaKind.AUDIO


def format_seconds(seconds: float) -> str:
    """Format a time offset for FFmpeg with millisecond precision."""
    return f"{seconds:.3f}"


def build_clip_args(clip: ClipWindow) -> list[str]:
    """Build seek-and-duration arguments for a clip window.

    These go after ``-i`` (output seeking): slower, but frame-accurate.
    """
    return [
        "-ss",
        format_seconds(clip.start_seconds),
        "-t",
        format_seconds(clip.duration_seconds),
    ]


def select_branch(input_kind: MediaKind, target_format: TargetFormat) -> PlanBranch:
    """Select the planning branch for an input kind and target format.

    Raises:
        UnsupportedConversionError: If an audio input targets a video format.
    """
    if target_format.kind == MediaKind.AUDIO:
        if input_kind == MediaKind.VIDEO:
            return PlanBranch.VIDEO_TO_AUDIO
        return PlanBranch.AUDIO_TO_AUDIO
    if input_kind == MediaKind.VIDEO:
        return PlanBranch.VIDEO_TO_VIDEO
    raise UnsupportedConversionError(input_kind.value, target_format.value)


def build_encode_plan(
    request: ConversionRequest,
    video_preset: str = DEFAULT_VIDEO_PRESET,
) -> EncodePlan:
    """Build the FFmpeg argument plan for a request.

    Args:
        request: The conversion or clip request.
        video_preset: x264 preset used by the video-to-video branch.

    Returns:
        EncodePlan with the ordered argument tokens.

    Raises:
        UnsupportedFormatError: If the target format is not recognized.
        UnsupportedConversionError: If the input kind cannot produce the
            target kind.
    """
    target_format = request.target_format
    if not isinstance(target_format, TargetFormat):
        raise UnsupportedFormatError(target_format)

    input_kind = classify_input(request.input_path)
    branch = select_branch(input_kind, target_format)
    profile = resolve_profile(target_format, request.quality)

    args: list[str] = ["-y", "-i", str(request.input_path)]

    if request.clip is not None:
        args.extend(build_clip_args(request.clip))

    if branch == PlanBranch.VIDEO_TO_AUDIO:
        # Drop the picture, keep only the audio stream
        args.append("-vn")
    elif branch == PlanBranch.VIDEO_TO_VIDEO:
        args.extend(build_video_args(profile, video_preset))

    args.extend(build_audio_args(profile))
    args.append(str(request.output_path))

    logger.debug(
        "Planned %s conversion: %s",
        branch.value,
        " ".join(args),
        extra={
            "input_path": str(request.input_path),
            "target_format": target_format.value,
            "quality": request.quality.value,
            "clip": request.is_clip,
        },
    )

    return EncodePlan(
        args=tuple(args),
        branch=branch,
        profile=profile,
        input_path=request.input_path,
        output_path=request.output_path,
    )
