"""Short-lived external tool calls.

Long-running encodes go through the engine's Popen wrapper; this helper is
for tools that finish quickly and whose whole output is needed at once
(ffprobe).
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
import time
from pathlib import Path
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class CommandResult(NamedTuple):
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    returncode: int
    elapsed_seconds: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _describe(argv: list[str]) -> str:
    """Shorten a command line for log messages."""
    head = " ".join(argv[:3])
    return head + " ..." if len(argv) > 3 else head


def run_command(
    args: list[str | Path],
    timeout: float = DEFAULT_TIMEOUT,
    errors: str = "replace",
    **kwargs: Any,
) -> CommandResult:
    """Run a command to completion and capture its text output.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Seconds before the command is killed.
        errors: Decoding error mode for stdout/stderr.
        **kwargs: Passed through to subprocess.run.

    Raises:
        subprocess.TimeoutExpired: The child has already been killed by
            subprocess.run when this propagates.
        OSError: If the executable cannot be started.
    """
    argv = [str(arg) for arg in args]
    tool = Path(argv[0]).name if argv else "unknown"

    logger.debug("Running %s", " ".join(argv), extra={"command": tool})
    started = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - argv is built by our callers
            argv,
            capture_output=True,
            text=True,
            errors=errors,
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "%s timed out after %ss: %s",
            tool,
            timeout,
            _describe(argv),
            extra={"command": tool, "timeout_seconds": timeout},
        )
        raise

    result = CommandResult(
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
        elapsed_seconds=round(time.monotonic() - started, 3),
    )
    logger.debug(
        "%s exited with %s",
        tool,
        result.returncode,
        extra={"command": tool, "elapsed_seconds": result.elapsed_seconds},
    )
    return result
