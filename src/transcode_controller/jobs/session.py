"""Job session state machine and progress normalization.

A JobSession owns one job's lifecycle:

    idle -> probing -> running -> completed | failed | cancelled
                          \\-> cancelling -> cancelled

A cancel before the engine starts settles directly to cancelled. Every
transition is a compare-and-set under the session lock, so when engine
completion and a cancel request race, whichever lands first wins and the
other is discarded.

Two locks are used. ``_lock`` guards state and is never held while user
callbacks run. ``_emit_lock`` serializes progress emissions against terminal
transitions, so no progress value is delivered once the outcome is
published. Lock order is always ``_emit_lock`` then ``_lock``.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from transcode_controller.domain import JobStatus, Outcome
from transcode_controller.engine.interface import EngineProcess

from .outcome import DEFAULT_TAIL_LINES, classify_outcome

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class ProgressNormalizer:
    """Turns elapsed-time samples into a non-decreasing 0..1 ratio.

    Only values strictly greater than the last emitted one are returned.
    With no known denominator nothing is ever returned.
    """

    def __init__(self, denominator_ms: int | None = None) -> None:
        self.denominator_ms = denominator_ms
        self.last_emitted = 0.0

    @property
    def enabled(self) -> bool:
        return self.denominator_ms is not None and self.denominator_ms > 0

    def normalize(self, elapsed_ms: float) -> float | None:
        """Normalize one sample.

        Returns:
            The value to emit, or None if the sample must be suppressed.
        """
        if not self.enabled:
            return None
        try:
            value = float(elapsed_ms) / self.denominator_ms
        except (TypeError, ValueError):
            return None
        if not math.isfinite(value):
            return None
        value = min(1.0, max(0.0, value))
        if value <= self.last_emitted:
            return None
        self.last_emitted = value
        return value

    def finalize(self) -> float | None:
        """Return the forced final value for a successful job."""
        if not self.enabled:
            return None
        self.last_emitted = 1.0
        return 1.0


class JobSession:
    """Mutable, single-owner state of one job."""

    def __init__(
        self,
        job_id: str,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.job_id = job_id
        self._on_progress = on_progress
        self._status = JobStatus.IDLE
        self._process: EngineProcess | None = None
        self._cancel_requested = False
        self._normalizer = ProgressNormalizer()
        self._outcome: Outcome | None = None
        self._lock = threading.Lock()
        self._emit_lock = threading.RLock()
        self._done = threading.Event()

    @property
    def status(self) -> JobStatus:
        with self._lock:
            return self._status

    @property
    def cancel_requested(self) -> bool:
        with self._lock:
            return self._cancel_requested

    @property
    def process(self) -> EngineProcess | None:
        with self._lock:
            return self._process

    @property
    def denominator_ms(self) -> int | None:
        with self._lock:
            return self._normalizer.denominator_ms

    @property
    def last_emitted_progress(self) -> float:
        with self._lock:
            return self._normalizer.last_emitted

    @property
    def outcome(self) -> Outcome | None:
        with self._lock:
            return self._outcome

    def _compare_and_set(self, expected: Iterable[JobStatus], new: JobStatus) -> bool:
        """Transition to ``new`` if the current state is in ``expected``.

        Caller must hold ``_lock``.
        """
        if self._status not in expected:
            return False
        logger.debug(
            "Job %s: %s -> %s", self.job_id, self._status.value, new.value
        )
        self._status = new
        return True

    def begin_probe(self) -> bool:
        """idle -> probing. False if the job was cancelled before starting."""
        with self._lock:
            return self._compare_and_set((JobStatus.IDLE,), JobStatus.PROBING)

    def set_denominator(self, denominator_ms: int | None) -> None:
        with self._lock:
            self._normalizer.denominator_ms = denominator_ms

    def attach_process(self, process: EngineProcess) -> bool:
        """probing -> running, taking ownership of the process handle.

        Returns:
            False if the job left probing (cancelled) before the handle
            arrived; the caller then owns the cleanup of ``process``.
        """
        with self._lock:
            if not self._compare_and_set((JobStatus.PROBING,), JobStatus.RUNNING):
                return False
            self._process = process
            return True

    def report_progress(self, elapsed_ms: float) -> float | None:
        """Feed one telemetry sample through the normalizer.

        Returns:
            The emitted value, or None if nothing was emitted.
        """
        with self._emit_lock:
            with self._lock:
                if self._status != JobStatus.RUNNING:
                    return None
                value = self._normalizer.normalize(elapsed_ms)
            if value is None:
                return None
            self._emit(value)
            return value

    def _emit(self, value: float) -> None:
        if self._on_progress is None:
            return
        try:
            self._on_progress(value)
        except Exception as e:
            logger.warning("Progress callback error: %s", e)

    def _settle(self, expected: Iterable[JobStatus], outcome: Outcome) -> bool:
        """Publish a terminal outcome if the state is still in ``expected``."""
        with self._emit_lock:
            with self._lock:
                if not self._compare_and_set(expected, outcome.status):
                    return False
                self._outcome = outcome
        self._done.set()
        return True

    def request_cancel(self) -> EngineProcess | None:
        """Record a cancel request.

        Before the engine starts, the session settles to cancelled right
        away. While running, it moves to cancelling and the process handle
        is returned so the caller can signal it.

        Returns:
            The process to terminate, or None if there is nothing to signal
            (not started yet, already cancelling, or already terminal).
        """
        while True:
            with self._lock:
                if self._status.is_terminal or self._status == JobStatus.CANCELLING:
                    return None
                self._cancel_requested = True
                if self._compare_and_set((JobStatus.RUNNING,), JobStatus.CANCELLING):
                    return self._process

            # Retried if the engine started between the check and the settle
            if self._settle(
                (JobStatus.IDLE, JobStatus.PROBING),
                classify_outcome(None, cancel_requested=True),
            ):
                return None

    def force_cancel(self, note: str) -> EngineProcess | None:
        """cancelling -> cancelled without waiting for the engine.

        Returns:
            The process handle (still to be killed and reaped), or None if
            the session already reached a terminal state.
        """
        with self._lock:
            process = self._process
        outcome = classify_outcome(None, cancel_requested=True, cancel_note=note)
        if self._settle((JobStatus.CANCELLING,), outcome):
            return process
        return None

    def fail(self, diagnostic: str, elapsed_seconds: float | None = None) -> bool:
        """Settle as failed without an engine status (e.g. spawn failure).

        A pending cancel still wins: the outcome is then cancelled.
        """
        with self._lock:
            cancelled = self._cancel_requested
        if cancelled:
            outcome = classify_outcome(
                None, cancel_requested=True, elapsed_seconds=elapsed_seconds
            )
        else:
            outcome = Outcome(
                succeeded=False,
                status=JobStatus.FAILED,
                diagnostic=diagnostic,
                elapsed_seconds=elapsed_seconds,
            )
        return self._settle(
            (
                JobStatus.IDLE,
                JobStatus.PROBING,
                JobStatus.RUNNING,
                JobStatus.CANCELLING,
            ),
            outcome,
        )

    def complete(
        self,
        return_code: int | None,
        diagnostic_lines: Sequence[str] = (),
        *,
        output_path: Path | None = None,
        elapsed_seconds: float | None = None,
        tail_lines: int = DEFAULT_TAIL_LINES,
    ) -> bool:
        """Settle from the engine's terminal status.

        On success the final progress emission is forced to 1.0 before the
        outcome is published.

        Returns:
            False if the session was already terminal (e.g. a forced cancel
            got there first) and the engine status was discarded.
        """
        with self._emit_lock:
            with self._lock:
                if self._status not in (JobStatus.RUNNING, JobStatus.CANCELLING):
                    logger.debug(
                        "Job %s: discarding engine status %s (state=%s)",
                        self.job_id,
                        return_code,
                        self._status.value,
                    )
                    return False
                outcome = classify_outcome(
                    return_code,
                    self._cancel_requested,
                    diagnostic_lines,
                    output_path=output_path,
                    elapsed_seconds=elapsed_seconds,
                    tail_lines=tail_lines,
                )
                self._compare_and_set(
                    (JobStatus.RUNNING, JobStatus.CANCELLING), outcome.status
                )
                self._outcome = outcome
                final = self._normalizer.finalize() if outcome.succeeded else None
            if final is not None:
                self._emit(final)
        self._done.set()
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the session is terminal. False on timeout."""
        return self._done.wait(timeout)
