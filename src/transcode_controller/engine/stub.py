"""Scripted in-memory engine for development and testing.

StubEngine hands out pre-built StubProcess instances instead of spawning
FFmpeg. Each StubProcess replays a fixed list of elapsed-time samples and
then exits with a configured return code, optionally holding open until it
is released, terminated or killed.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from pathlib import Path

from transcode_controller.domain import EncodePlan
from transcode_controller.exceptions import EngineUnavailableError, ProbeError

SIGTERM_RETURN_CODE = -15
SIGKILL_RETURN_CODE = -9


class StubProcess:
    """Scripted engine process.

    Args:
        samples: Elapsed-time samples (ms) to replay, in order.
        return_code: Exit status reported after the samples are exhausted.
        diagnostics: Log lines reported by diagnostic_lines().
        hold: Block after the last sample until release(), terminate()
            or kill() is called.
        sample_interval: Seconds to pause between samples.
        terminate_return_code: Exit status after terminate(). None means
            the process ignores the signal's effect on its status and exits
            with ``return_code`` anyway.
        ignore_terminate: Simulate an engine that does not react to
            terminate() at all (only kill() stops it).
    """

    def __init__(
        self,
        samples: Iterable[int] = (),
        return_code: int = 0,
        diagnostics: Iterable[str] = (),
        hold: bool = False,
        sample_interval: float = 0.0,
        terminate_return_code: int | None = SIGTERM_RETURN_CODE,
        ignore_terminate: bool = False,
    ) -> None:
        self._samples = list(samples)
        self.return_code = return_code
        self._diagnostics = list(diagnostics)
        self.hold = hold
        self.sample_interval = sample_interval
        self.terminate_return_code = terminate_return_code
        self.ignore_terminate = ignore_terminate

        self.started = threading.Event()
        self.terminated = False
        self.killed = False
        self._stopped = threading.Event()
        self._wake = threading.Event()
        self._exited = threading.Event()
        self._returncode: int | None = None

    def samples(self) -> Iterator[int]:
        self.started.set()
        try:
            for sample in self._samples:
                if self._stopped.is_set():
                    return
                yield sample
                if self.sample_interval:
                    self._stopped.wait(self.sample_interval)
            if self.hold:
                self._wake.wait()
        finally:
            self._finish()

    def _finish(self) -> None:
        if self._exited.is_set():
            return
        if self.killed:
            self._returncode = SIGKILL_RETURN_CODE
        elif self.terminated and not self.ignore_terminate:
            if self.terminate_return_code is not None:
                self._returncode = self.terminate_return_code
            else:
                self._returncode = self.return_code
        else:
            self._returncode = self.return_code
        self._exited.set()

    def wait(self, timeout: float | None = None) -> int | None:
        if self._exited.wait(timeout):
            return self._returncode
        return None

    def release(self) -> None:
        """Let a held process run to completion."""
        self._wake.set()

    def terminate(self) -> None:
        self.terminated = True
        if not self.ignore_terminate:
            self._stopped.set()
            self._wake.set()
            if not self.started.is_set():
                self._finish()

    def kill(self) -> None:
        self.killed = True
        self._stopped.set()
        self._wake.set()
        if not self.started.is_set():
            self._finish()

    def diagnostic_lines(self) -> list[str]:
        return list(self._diagnostics)


class StubEngine:
    """Engine that returns scripted processes and records every call."""

    def __init__(
        self,
        *processes: StubProcess,
        unavailable: str | None = None,
    ) -> None:
        """Initialize the stub engine.

        Args:
            *processes: Processes handed out by successive execute() calls.
                When exhausted, a default successful process is returned.
            unavailable: If set, execute() raises EngineUnavailableError
                with this message.
        """
        self._processes = list(processes)
        self.unavailable = unavailable
        self.executed: list[EncodePlan] = []
        self.terminated: list[StubProcess] = []
        self._lock = threading.Lock()

    def execute(self, plan: EncodePlan) -> StubProcess:
        with self._lock:
            self.executed.append(plan)
            if self.unavailable is not None:
                raise EngineUnavailableError(self.unavailable)
            if self._processes:
                return self._processes.pop(0)
        return StubProcess()

    def terminate(self, process: StubProcess) -> None:
        with self._lock:
            self.terminated.append(process)
        process.terminate()


class StubProber:
    """Prober that returns a fixed duration or raises a fixed error."""

    def __init__(
        self,
        duration_seconds: float | None = None,
        error: str | None = None,
    ) -> None:
        self.duration_seconds = duration_seconds
        self.error = error
        self.probed: list[Path] = []

    def probe_duration(self, path: Path) -> float | None:
        self.probed.append(path)
        if self.error is not None:
            raise ProbeError(self.error)
        return self.duration_seconds
