"""Encode planning for conversion and clip requests.

Module organization:
- quality.py: Quality tier to encoder parameter mapping
- command.py: FFmpeg argument plan construction

Usage:
    from transcode_controller.planning import build_encode_plan, resolve_profile
"""

from .command import (
    VIDEO_EXTENSIONS,
    build_clip_args,
    build_encode_plan,
    classify_input,
    select_branch,
)
from .quality import (
    AUDIO_BITRATE,
    FLAC_COMPRESSION_LEVEL,
    VIDEO_CRF,
    get_audio_encoder,
    resolve_profile,
)

__all__ = [
    # Command planning
    "VIDEO_EXTENSIONS",
    "build_clip_args",
    "build_encode_plan",
    "classify_input",
    "select_branch",
    # Quality mapping
    "AUDIO_BITRATE",
    "FLAC_COMPRESSION_LEVEL",
    "VIDEO_CRF",
    "get_audio_encoder",
    "resolve_profile",
]
