"""Encoding engine interfaces.

The controller only ever talks to the engine through these protocols: it
hands over an argument plan, reads elapsed-time samples and a terminal
status, and asks for termination. It never looks at encoder internals.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from transcode_controller.domain import EncodePlan


class EngineProcess(Protocol):
    """Handle to one running encoder invocation."""

    def samples(self) -> Iterator[int]:
        """Yield elapsed encoded time samples in milliseconds.

        Samples arrive at whatever cadence the engine reports them and may
        repeat or go backwards. The iterator ends when the engine stops
        producing telemetry, which normally means it is exiting.
        """
        ...

    def wait(self, timeout: float | None = None) -> int | None:
        """Wait for the process to exit and reap it.

        Args:
            timeout: Maximum seconds to wait. None waits indefinitely.

        Returns:
            The return code, or None if the timeout elapsed first.
        """
        ...

    def terminate(self) -> None:
        """Ask the process to stop (graceful termination signal)."""
        ...

    def kill(self) -> None:
        """Force the process to stop."""
        ...

    def diagnostic_lines(self) -> list[str]:
        """Return the captured tail of the engine's log output."""
        ...


class EncodingEngine(Protocol):
    """Protocol for encoding engine implementations."""

    def execute(self, plan: EncodePlan) -> EngineProcess:
        """Start the engine with an argument plan.

        Raises:
            EngineUnavailableError: If the engine cannot be started.
        """
        ...

    def terminate(self, process: EngineProcess) -> None:
        """Send a termination signal to a running process."""
        ...


class DurationProber(Protocol):
    """Protocol for media duration inspection."""

    def probe_duration(self, path: Path) -> float | None:
        """Read the media duration of a file.

        Returns:
            Duration in seconds, or None if the metadata has no duration.

        Raises:
            ProbeError: If the file cannot be inspected.
        """
        ...
