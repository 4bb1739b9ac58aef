"""Quality tier to encoder parameter mapping.

Video formats use the x264 CRF scale, where a lower value means finer
compression. Lossy audio formats use a bitrate ladder. FLAC always gets the
same compression level, and WAV takes no quality parameters at all.
"""

from __future__ import annotations

from transcode_controller.domain import (
    MediaKind,
    QualityProfile,
    QualityTier,
    TargetFormat,
)

VIDEO_ENCODER = "libx264"

# CRF per tier (inverse scale: higher quality => lower CRF)
VIDEO_CRF: dict[QualityTier, int] = {
    QualityTier.LOW: 35,
    QualityTier.MEDIUM: 28,
    QualityTier.HIGH: 20,
}

AUDIO_BITRATE: dict[QualityTier, str] = {
    QualityTier.LOW: "96k",
    QualityTier.MEDIUM: "192k",
    QualityTier.HIGH: "320k",
}

FLAC_COMPRESSION_LEVEL = 5

AUDIO_ENCODERS: dict[TargetFormat, str] = {
    TargetFormat.MP3: "libmp3lame",
    TargetFormat.AAC: "aac",
    TargetFormat.FLAC: "flac",
    TargetFormat.WAV: "pcm_s16le",
    # Audio track of video containers
    TargetFormat.MP4: "aac",
    TargetFormat.MOV: "aac",
}


def get_audio_encoder(target_format: TargetFormat) -> str:
    """Get the FFmpeg audio encoder name for a target format."""
    return AUDIO_ENCODERS[target_format]


def resolve_profile(
    target_format: TargetFormat, tier: QualityTier | str | None
) -> QualityProfile:
    """Resolve the encode parameters for a format and quality tier.

    Total for every TargetFormat: tier strings are matched
    case-insensitively and anything unrecognized maps to the medium tier.

    Args:
        target_format: Output format (already validated by the planner).
        tier: Quality tier, as an enum or a free-form string.

    Returns:
        QualityProfile with the parameters for this pair.
    """
    quality = QualityTier.parse(tier)
    audio_codec = get_audio_encoder(target_format)

    if target_format.kind == MediaKind.VIDEO:
        return QualityProfile(
            audio_codec=audio_codec,
            video_codec=VIDEO_ENCODER,
            video_crf=VIDEO_CRF[quality],
            audio_bitrate=AUDIO_BITRATE[quality],
        )

    if target_format == TargetFormat.FLAC:
        return QualityProfile(
            audio_codec=audio_codec,
            compression_level=FLAC_COMPRESSION_LEVEL,
        )

    if target_format == TargetFormat.WAV:
        return QualityProfile(audio_codec=audio_codec)

    return QualityProfile(
        audio_codec=audio_codec,
        audio_bitrate=AUDIO_BITRATE[quality],
    )


def build_audio_args(profile: QualityProfile) -> list[str]:
    """Build FFmpeg audio codec arguments for a profile."""
    args = ["-c:a", profile.audio_codec]
    if profile.compression_level is not None:
        args.extend(["-compression_level", str(profile.compression_level)])
    elif profile.audio_bitrate:
        args.extend(["-b:a", profile.audio_bitrate])
    return args


def build_video_args(profile: QualityProfile, preset: str) -> list[str]:
    """Build FFmpeg video codec arguments for a profile.

    Preset only applies to the x264 encoder.
    """
    if profile.video_codec is None:
        return []
    args = ["-c:v", profile.video_codec]
    if profile.video_crf is not None:
        args.extend(["-crf", str(profile.video_crf)])
    if profile.video_codec == VIDEO_ENCODER:
        args.extend(["-preset", preset])
    return args
