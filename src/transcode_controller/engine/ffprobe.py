"""FFprobe-based implementation of the DurationProber protocol."""

import json
import logging
import subprocess  # nosec B404 - needed for TimeoutExpired
from pathlib import Path

from transcode_controller.core.subprocess_utils import run_command
from transcode_controller.exceptions import EngineUnavailableError, ProbeError

from .tools import require_tool

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60.0


def parse_duration(data: dict) -> float | None:
    """Extract the container duration from ffprobe JSON output.

    Args:
        data: Parsed ``ffprobe -show_format -print_format json`` output.

    Returns:
        Duration in seconds, or None if the field is absent, unparsable
        or not positive.
    """
    if not isinstance(data, dict) or not isinstance(data.get("format"), dict):
        return None
    raw = data["format"].get("duration")
    if raw in (None, "", "N/A"):
        return None
    try:
        duration = float(raw)
    except (TypeError, ValueError):
        logger.debug("Unparsable duration in ffprobe output: %r", raw)
        return None
    if duration <= 0:
        return None
    return duration


class FFprobeProber:
    """Reads media durations with ffprobe."""

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize the prober.

        Args:
            ffprobe_path: Explicit ffprobe path. None resolves from PATH lazily.
            timeout: Seconds before a probe is abandoned.
        """
        self._configured_path = ffprobe_path
        self.timeout = timeout

    def probe_duration(self, path: Path) -> float | None:
        """Read the duration of a media file.

        Raises:
            ProbeError: If ffprobe is missing, fails, times out or emits
                invalid output.
        """
        try:
            ffprobe_path = require_tool("ffprobe", self._configured_path)
        except EngineUnavailableError as e:
            raise ProbeError(str(e)) from e

        try:
            result = run_command(
                [
                    ffprobe_path,
                    "-v",
                    "error",
                    "-print_format",
                    "json",
                    "-show_format",
                    path,
                ],
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except OSError as e:
            raise ProbeError(f"ffprobe could not be started: {e}") from e

        if not result.ok:
            raise ProbeError(f"ffprobe failed for {path}: {result.stderr.strip()}")

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Invalid ffprobe output for {path}: {e}") from e

        return parse_duration(data)
