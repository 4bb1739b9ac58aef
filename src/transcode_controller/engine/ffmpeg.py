"""FFmpeg-backed implementation of the EncodingEngine protocol.

Each invocation runs in its own subprocess. Stderr is read on a daemon
thread so the controller can consume telemetry at its own pace; every line
lands in a bounded diagnostic buffer and progress lines are also turned into
elapsed-time samples.
"""

from __future__ import annotations

import logging
import queue
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
from collections import deque
from collections.abc import Iterator
from pathlib import Path

from transcode_controller.domain import EncodePlan
from transcode_controller.exceptions import EngineUnavailableError

from .progress import parse_stderr_progress
from .tools import require_tool

logger = logging.getLogger(__name__)

DEFAULT_STATS_PERIOD = 0.5
DEFAULT_DIAGNOSTIC_LINES = 200


class FFmpegProcess:
    """A running FFmpeg invocation."""

    STDERR_DRAIN_TIMEOUT: float = 5.0

    def __init__(
        self,
        process: subprocess.Popen,
        command: list[str],
        max_diagnostic_lines: int = DEFAULT_DIAGNOSTIC_LINES,
    ) -> None:
        self._process = process
        self.command = command
        self._diagnostics: deque[str] = deque(maxlen=max_diagnostic_lines)
        self._diagnostics_lock = threading.Lock()
        self._samples: queue.Queue[int | None] = queue.Queue()
        self._reader = threading.Thread(
            target=self._read_stderr,
            name=f"ffmpeg-stderr-{process.pid}",
            daemon=True,
        )
        self._reader.start()

    @property
    def pid(self) -> int:
        return self._process.pid

    def _read_stderr(self) -> None:
        """Read stderr lines, recording diagnostics and queueing samples."""
        try:
            assert self._process.stderr is not None
            for line in self._process.stderr:
                line = line.rstrip()
                if not line:
                    continue
                with self._diagnostics_lock:
                    self._diagnostics.append(line)
                try:
                    progress = parse_stderr_progress(line)
                except ValueError as e:
                    logger.debug("Failed to parse progress line: %s", e)
                    continue
                if progress is not None:
                    self._samples.put(progress.out_time_ms)
        except (ValueError, OSError) as e:
            # Pipe closed or process terminated
            logger.debug("Stderr reader stopped: %s", e)
        finally:
            self._samples.put(None)  # Signal end of output

    def samples(self) -> Iterator[int]:
        while True:
            sample = self._samples.get()
            if sample is None:
                return
            yield sample

    def wait(self, timeout: float | None = None) -> int | None:
        try:
            returncode = self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return None
        self._reader.join(timeout=self.STDERR_DRAIN_TIMEOUT)
        if self._reader.is_alive():
            logger.warning("Stderr reader for pid %s did not finish draining", self.pid)
        return returncode

    def terminate(self) -> None:
        if self._process.poll() is None:
            logger.debug("Sending SIGTERM to ffmpeg pid %s", self.pid)
            self._process.terminate()

    def kill(self) -> None:
        if self._process.poll() is None:
            logger.debug("Sending SIGKILL to ffmpeg pid %s", self.pid)
            self._process.kill()

    def diagnostic_lines(self) -> list[str]:
        with self._diagnostics_lock:
            return list(self._diagnostics)


class FFmpegEngine:
    """Runs encode plans through the ffmpeg binary."""

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        stats_period: float = DEFAULT_STATS_PERIOD,
        max_diagnostic_lines: int = DEFAULT_DIAGNOSTIC_LINES,
    ) -> None:
        """Initialize the engine.

        Args:
            ffmpeg_path: Explicit ffmpeg path. None resolves from PATH lazily.
            stats_period: Seconds between FFmpeg progress reports.
            max_diagnostic_lines: Number of stderr lines kept per process.
        """
        self._configured_path = ffmpeg_path
        self._tool_path: Path | None = None
        self.stats_period = stats_period
        self.max_diagnostic_lines = max_diagnostic_lines

    @property
    def tool_path(self) -> Path:
        """Get path to ffmpeg, verifying availability.

        Raises:
            EngineUnavailableError: If ffmpeg is not available.
        """
        if self._tool_path is None:
            self._tool_path = require_tool("ffmpeg", self._configured_path)
        return self._tool_path

    def build_command(self, plan: EncodePlan) -> list[str]:
        """Prepend the binary and telemetry options to a plan."""
        return [
            str(self.tool_path),
            "-hide_banner",
            "-nostdin",
            "-stats_period",
            str(self.stats_period),
            *plan.args,
        ]

    def execute(self, plan: EncodePlan) -> FFmpegProcess:
        cmd = self.build_command(plan)
        logger.info(
            "Executing FFmpeg: %s",
            " ".join(cmd),
            extra={"input_path": str(plan.input_path), "branch": plan.branch.value},
        )
        try:
            process = subprocess.Popen(  # nosec B603 - args built by the planner
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise EngineUnavailableError(f"Failed to start ffmpeg: {e}") from e

        return FFmpegProcess(process, cmd, self.max_diagnostic_lines)

    def terminate(self, process: FFmpegProcess) -> None:
        process.terminate()
