"""Tests for quality tier to encoder parameter mapping."""

import pytest

from transcode_controller.domain import QualityTier, TargetFormat
from transcode_controller.planning.quality import (
    build_audio_args,
    build_video_args,
    get_audio_encoder,
    resolve_profile,
)


class TestResolveProfile:
    """Tests for resolve_profile function."""

    @pytest.mark.parametrize(
        "tier,expected_crf",
        [("low", 35), ("medium", 28), ("high", 20)],
    )
    def test_video_crf_per_tier(self, tier: str, expected_crf: int) -> None:
        profile = resolve_profile(TargetFormat.MP4, tier)
        assert profile.video_codec == "libx264"
        assert profile.video_crf == expected_crf
        assert profile.audio_codec == "aac"

    def test_video_crf_decreases_with_quality(self) -> None:
        """Higher tiers must never get a coarser CRF."""
        crfs = [
            resolve_profile(TargetFormat.MOV, tier).video_crf
            for tier in (QualityTier.LOW, QualityTier.MEDIUM, QualityTier.HIGH)
        ]
        assert crfs == sorted(crfs, reverse=True)

    @pytest.mark.parametrize(
        "tier,expected_bitrate",
        [("low", "96k"), ("medium", "192k"), ("high", "320k")],
    )
    def test_lossy_audio_bitrate_per_tier(
        self, tier: str, expected_bitrate: str
    ) -> None:
        mp3 = resolve_profile(TargetFormat.MP3, tier)
        aac = resolve_profile(TargetFormat.AAC, tier)
        assert mp3.audio_bitrate == expected_bitrate
        assert aac.audio_bitrate == expected_bitrate
        assert mp3.audio_codec == "libmp3lame"
        assert aac.audio_codec == "aac"

    def test_flac_has_fixed_compression_level(self) -> None:
        """FLAC ignores the tier."""
        profiles = {
            resolve_profile(TargetFormat.FLAC, tier)
            for tier in ("low", "medium", "high")
        }
        assert len(profiles) == 1
        profile = profiles.pop()
        assert profile.audio_codec == "flac"
        assert profile.compression_level == 5
        assert profile.audio_bitrate is None

    def test_wav_has_no_quality_parameters(self) -> None:
        profile = resolve_profile(TargetFormat.WAV, "high")
        assert profile.audio_codec == "pcm_s16le"
        assert profile.audio_bitrate is None
        assert profile.compression_level is None
        assert profile.video_codec is None

    @pytest.mark.parametrize("tier", ["HIGH", "High", " high "])
    def test_tier_is_case_insensitive(self, tier: str) -> None:
        assert resolve_profile(TargetFormat.MP3, tier).audio_bitrate == "320k"

    @pytest.mark.parametrize("tier", ["ultra", "", None, "lossless"])
    def test_unknown_tier_maps_to_medium(self, tier) -> None:
        assert resolve_profile(TargetFormat.MP4, tier).video_crf == 28
        assert resolve_profile(TargetFormat.MP3, tier).audio_bitrate == "192k"

    @pytest.mark.parametrize("target", list(TargetFormat))
    def test_total_for_every_format(self, target: TargetFormat) -> None:
        for tier in QualityTier:
            profile = resolve_profile(target, tier)
            assert profile.audio_codec == get_audio_encoder(target)


class TestBuildArgs:
    """Tests for build_audio_args and build_video_args."""

    def test_audio_args_with_bitrate(self) -> None:
        profile = resolve_profile(TargetFormat.MP3, "low")
        assert build_audio_args(profile) == ["-c:a", "libmp3lame", "-b:a", "96k"]

    def test_audio_args_with_compression_level(self) -> None:
        profile = resolve_profile(TargetFormat.FLAC, "high")
        assert build_audio_args(profile) == [
            "-c:a",
            "flac",
            "-compression_level",
            "5",
        ]

    def test_audio_args_codec_only(self) -> None:
        profile = resolve_profile(TargetFormat.WAV, "medium")
        assert build_audio_args(profile) == ["-c:a", "pcm_s16le"]

    def test_video_args(self) -> None:
        profile = resolve_profile(TargetFormat.MP4, "high")
        assert build_video_args(profile, "ultrafast") == [
            "-c:v",
            "libx264",
            "-crf",
            "20",
            "-preset",
            "ultrafast",
        ]

    def test_video_args_empty_for_audio_profile(self) -> None:
        profile = resolve_profile(TargetFormat.AAC, "high")
        assert build_video_args(profile, "ultrafast") == []
