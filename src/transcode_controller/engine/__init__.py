"""Encoding engine adapters.

This module provides the engine collaborators used by the controller:

- EncodingEngine / EngineProcess / DurationProber: Protocols the controller
  depends on
- FFmpegEngine: Production engine running the ffmpeg binary
- FFprobeProber: Production duration prober using ffprobe
- StubEngine / StubProcess / StubProber: Scripted implementations for testing
"""

from transcode_controller.engine.ffmpeg import FFmpegEngine, FFmpegProcess
from transcode_controller.engine.ffprobe import FFprobeProber, parse_duration
from transcode_controller.engine.interface import (
    DurationProber,
    EncodingEngine,
    EngineProcess,
)
from transcode_controller.engine.progress import FFmpegProgress, parse_stderr_progress
from transcode_controller.engine.stub import StubEngine, StubProber, StubProcess
from transcode_controller.engine.tools import find_tool, require_tool

__all__ = [
    "DurationProber",
    "EncodingEngine",
    "EngineProcess",
    "FFmpegEngine",
    "FFmpegProcess",
    "FFmpegProgress",
    "FFprobeProber",
    "StubEngine",
    "StubProber",
    "StubProcess",
    "find_tool",
    "parse_duration",
    "parse_stderr_progress",
    "require_tool",
]
