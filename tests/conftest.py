"""Shared test fixtures for the transcode controller."""

import shutil
import tempfile
from pathlib import Path

import pytest

from transcode_controller.config import clear_config_cache
from transcode_controller.domain import ConversionRequest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def _reset_config_cache():
    """Make sure no test sees another test's parsed config file."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def video_to_mp3_request() -> ConversionRequest:
    return ConversionRequest(
        input_path=Path("/media/in/lecture.mp4"),
        output_path=Path("/media/out/lecture.mp3"),
        target_format="mp3",
        quality="high",
    )


@pytest.fixture
def audio_to_wav_request() -> ConversionRequest:
    return ConversionRequest(
        input_path=Path("/media/in/song.flac"),
        output_path=Path("/media/out/song.wav"),
        target_format="wav",
    )


class ProgressRecorder:
    """Collects progress values from a job callback."""

    def __init__(self) -> None:
        self.values: list[float] = []

    def __call__(self, value: float) -> None:
        self.values.append(value)


@pytest.fixture
def progress() -> ProgressRecorder:
    return ProgressRecorder()
