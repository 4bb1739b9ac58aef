"""Tests for domain models."""

import math
from pathlib import Path

import pytest

from transcode_controller.domain import (
    ClipWindow,
    ConversionRequest,
    JobStatus,
    MediaKind,
    Outcome,
    QualityTier,
    TargetFormat,
)
from transcode_controller.exceptions import InvalidClipWindowError, PlanningError


class TestClipWindow:
    """Tests for ClipWindow."""

    def test_duration(self) -> None:
        clip = ClipWindow(1.25, 3.5)
        assert clip.duration_seconds == pytest.approx(2.25)
        assert clip.duration_ms == 2250

    @pytest.mark.parametrize(
        "start,end",
        [
            (-1.0, 5.0),
            (0.0, -5.0),
            (5.0, 5.0),
            (10.0, 2.0),
            (math.nan, 5.0),
            (0.0, math.nan),
            (0.0, math.inf),
            (math.inf, math.inf),
        ],
    )
    def test_invalid_windows_are_rejected(self, start: float, end: float) -> None:
        with pytest.raises(InvalidClipWindowError):
            ClipWindow(start, end)

    def test_invalid_window_is_a_planning_error_and_value_error(self) -> None:
        with pytest.raises(PlanningError):
            ClipWindow(3.0, 1.0)
        with pytest.raises(ValueError):
            ClipWindow(3.0, 1.0)

    def test_nan_bounds_cannot_reach_a_request(self) -> None:
        with pytest.raises(InvalidClipWindowError, match="finite"):
            ConversionRequest(
                input_path=Path("/in/a.mp4"),
                output_path=Path("/out/a.mp4"),
                target_format="mp4",
                clip=ClipWindow(math.nan, 5.0),
            )


class TestTargetFormat:
    """Tests for TargetFormat."""

    def test_kind(self) -> None:
        assert TargetFormat.MP4.kind == MediaKind.VIDEO
        assert TargetFormat.MOV.kind == MediaKind.VIDEO
        for fmt in (TargetFormat.MP3, TargetFormat.WAV, TargetFormat.AAC):
            assert fmt.kind == MediaKind.AUDIO

    def test_parse(self) -> None:
        assert TargetFormat.parse("MP3") == TargetFormat.MP3
        assert TargetFormat.parse(TargetFormat.FLAC) == TargetFormat.FLAC
        assert TargetFormat.parse("ogg") is None


class TestQualityTier:
    """Tests for QualityTier.parse."""

    def test_parse_known(self) -> None:
        assert QualityTier.parse("Low") == QualityTier.LOW

    @pytest.mark.parametrize("value", [None, "", "extreme"])
    def test_parse_fallback(self, value) -> None:
        assert QualityTier.parse(value) == QualityTier.MEDIUM


class TestConversionRequest:
    """Tests for ConversionRequest normalization."""

    def test_normalizes_strings(self) -> None:
        request = ConversionRequest("/in/a.mp4", "/out/a.mp3", "MP3", "HIGH")
        assert request.input_path == Path("/in/a.mp4")
        assert request.output_path == Path("/out/a.mp3")
        assert request.target_format == TargetFormat.MP3
        assert request.quality == QualityTier.HIGH
        assert request.is_clip is False

    def test_keeps_unknown_format(self) -> None:
        request = ConversionRequest("/in/a.mp4", "/out/a.ogg", "ogg")
        assert request.target_format == "ogg"

    def test_is_immutable(self) -> None:
        request = ConversionRequest("/in/a.mp4", "/out/a.mp3", "mp3")
        with pytest.raises(AttributeError):
            request.quality = QualityTier.LOW  # type: ignore[misc]

    def test_clip_request(self) -> None:
        request = ConversionRequest(
            "/in/a.mp4", "/out/a.mp4", "mp4", clip=ClipWindow(0.0, 1.0)
        )
        assert request.is_clip is True


class TestJobStatus:
    """Tests for JobStatus."""

    def test_terminal_states(self) -> None:
        terminal = {s for s in JobStatus if s.is_terminal}
        assert terminal == {
            JobStatus.COMPLETED,
            JobStatus.FAILED,
            JobStatus.CANCELLED,
        }


class TestOutcome:
    """Tests for Outcome."""

    def test_elapsed_is_not_compared(self) -> None:
        a = Outcome(True, JobStatus.COMPLETED, elapsed_seconds=1.0)
        b = Outcome(True, JobStatus.COMPLETED, elapsed_seconds=2.0)
        assert a == b

    def test_cancelled(self) -> None:
        assert Outcome(False, JobStatus.CANCELLED).cancelled is True
        assert Outcome(False, JobStatus.FAILED).cancelled is False
