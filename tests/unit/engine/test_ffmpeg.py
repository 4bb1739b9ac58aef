"""Tests for FFmpegEngine and FFmpegProcess."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from transcode_controller.domain import ConversionRequest
from transcode_controller.engine.ffmpeg import FFmpegEngine, FFmpegProcess
from transcode_controller.exceptions import EngineUnavailableError
from transcode_controller.planning import build_encode_plan

FFMPEG = Path("/usr/bin/ffmpeg")


@pytest.fixture
def plan():
    return build_encode_plan(
        ConversionRequest("/in/talk.mp4", "/out/talk.mp3", "mp3", "low")
    )


def _mock_popen_process(stderr_lines: list[str], returncode: int = 0) -> MagicMock:
    mock_process = MagicMock()
    mock_process.pid = 4242
    mock_process.stderr = iter(stderr_lines)
    mock_process.wait.return_value = returncode
    mock_process.poll.return_value = None
    return mock_process


class TestFFmpegEngineCommand:
    """Tests for FFmpegEngine.build_command."""

    def test_prepends_binary_and_telemetry_options(self, plan) -> None:
        engine = FFmpegEngine(ffmpeg_path=FFMPEG, stats_period=0.25)
        with patch(
            "transcode_controller.engine.ffmpeg.require_tool", return_value=FFMPEG
        ):
            cmd = engine.build_command(plan)

        assert cmd[:5] == [
            "/usr/bin/ffmpeg",
            "-hide_banner",
            "-nostdin",
            "-stats_period",
            "0.25",
        ]
        assert cmd[5:] == list(plan.args)

    def test_missing_binary(self, plan) -> None:
        engine = FFmpegEngine()
        with patch(
            "transcode_controller.engine.ffmpeg.require_tool",
            side_effect=EngineUnavailableError("ffmpeg is not installed"),
        ):
            with pytest.raises(EngineUnavailableError):
                engine.execute(plan)


class TestFFmpegEngineExecute:
    """Tests for FFmpegEngine.execute."""

    def test_streams_samples_and_diagnostics(self, plan) -> None:
        engine = FFmpegEngine(ffmpeg_path=FFMPEG)
        stderr_lines = [
            "Input #0, mov,mp4,m4a, from '/in/talk.mp4':\n",
            "size=     128kB time=00:00:08.00 bitrate= 131.1kbits/s speed=16x\n",
            "\n",
            "size=     256kB time=00:00:16.50 bitrate= 131.1kbits/s speed=16x\n",
        ]
        mock_process = _mock_popen_process(stderr_lines)

        with (
            patch(
                "transcode_controller.engine.ffmpeg.require_tool",
                return_value=FFMPEG,
            ),
            patch(
                "transcode_controller.engine.ffmpeg.subprocess.Popen",
                return_value=mock_process,
            ) as mock_popen,
        ):
            process = engine.execute(plan)
            samples = list(process.samples())
            returncode = process.wait()

        assert samples == [8000, 16500]
        assert returncode == 0
        assert process.diagnostic_lines() == [
            "Input #0, mov,mp4,m4a, from '/in/talk.mp4':",
            "size=     128kB time=00:00:08.00 bitrate= 131.1kbits/s speed=16x",
            "size=     256kB time=00:00:16.50 bitrate= 131.1kbits/s speed=16x",
        ]
        cmd = mock_popen.call_args[0][0]
        assert cmd[0] == "/usr/bin/ffmpeg"
        assert mock_popen.call_args[1]["stderr"] == subprocess.PIPE

    def test_spawn_failure_is_engine_unavailable(self, plan) -> None:
        engine = FFmpegEngine(ffmpeg_path=FFMPEG)
        with (
            patch(
                "transcode_controller.engine.ffmpeg.require_tool",
                return_value=FFMPEG,
            ),
            patch(
                "transcode_controller.engine.ffmpeg.subprocess.Popen",
                side_effect=PermissionError("denied"),
            ),
        ):
            with pytest.raises(EngineUnavailableError, match="denied"):
                engine.execute(plan)


class TestFFmpegProcess:
    """Tests for FFmpegProcess signal and wait handling."""

    def test_wait_timeout_returns_none(self) -> None:
        mock_process = _mock_popen_process([])
        mock_process.wait.side_effect = subprocess.TimeoutExpired("ffmpeg", 1)
        process = FFmpegProcess(mock_process, ["ffmpeg"])

        assert process.wait(timeout=1) is None

    def test_terminate_and_kill_running_process(self) -> None:
        mock_process = _mock_popen_process([])
        process = FFmpegProcess(mock_process, ["ffmpeg"])

        process.terminate()
        process.kill()

        mock_process.terminate.assert_called_once()
        mock_process.kill.assert_called_once()

    def test_signals_skipped_after_exit(self) -> None:
        mock_process = _mock_popen_process([])
        mock_process.poll.return_value = 0
        process = FFmpegProcess(mock_process, ["ffmpeg"])

        process.terminate()
        process.kill()

        mock_process.terminate.assert_not_called()
        mock_process.kill.assert_not_called()

    def test_diagnostic_buffer_is_bounded(self) -> None:
        lines = [f"line {i}\n" for i in range(10)]
        mock_process = _mock_popen_process(lines)
        process = FFmpegProcess(mock_process, ["ffmpeg"], max_diagnostic_lines=3)

        list(process.samples())

        assert process.diagnostic_lines() == ["line 7", "line 8", "line 9"]

    def test_engine_terminate_delegates(self) -> None:
        engine = FFmpegEngine(ffmpeg_path=FFMPEG)
        process = MagicMock()
        engine.terminate(process)
        process.terminate.assert_called_once()
