"""Transcode job controller.

Public surface:

    controller = TranscodeController()
    outcome = controller.convert(request, on_progress=print)

    handle = controller.submit(request, on_progress=bar.update)
    ...
    controller.cancel(handle)
    outcome = handle.result()

Planning errors are raised by submit()/convert() before any process is
spawned. Everything after that is reported through the Outcome.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid

from transcode_controller.config import ControllerConfig, JobConfig, get_config
from transcode_controller.domain import (
    ConversionRequest,
    EncodePlan,
    JobStatus,
    Outcome,
)
from transcode_controller.engine import FFmpegEngine, FFprobeProber
from transcode_controller.engine.interface import (
    DurationProber,
    EncodingEngine,
    EngineProcess,
)
from transcode_controller.exceptions import EngineUnavailableError
from transcode_controller.logging import job_context
from transcode_controller.planning import build_encode_plan

from .duration import resolve_duration
from .session import JobSession, ProgressCallback

logger = logging.getLogger(__name__)


class JobHandle:
    """Handle to one submitted job.

    The job runs on its own worker thread. The handle is the only way to
    observe or cancel it.
    """

    def __init__(
        self,
        request: ConversionRequest,
        plan: EncodePlan,
        engine: EncodingEngine,
        prober: DurationProber,
        settings: JobConfig,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.job_id = uuid.uuid4().hex
        self.request = request
        self.plan = plan
        self._engine = engine
        self._prober = prober
        self._settings = settings
        self._session = JobSession(self.job_id, on_progress)
        self._watchdog: threading.Timer | None = None
        self._process: EngineProcess | None = None
        self._thread = threading.Thread(
            target=self._run,
            name=f"transcode-job-{self.job_id[:8]}",
            daemon=True,
        )

    @property
    def status(self) -> JobStatus:
        return self._session.status

    @property
    def is_running(self) -> bool:
        """True while the job has not reached a terminal state."""
        return not self._session.status.is_terminal

    @property
    def progress(self) -> float:
        """Last emitted progress value (0.0 until the first emission)."""
        return self._session.last_emitted_progress

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        """Request cancellation.

        Sends a termination signal to the engine and returns without
        waiting. If the engine has not exited ``cancel_timeout`` seconds
        later, the job is reported cancelled anyway and the process is
        killed; the worker still reaps it.
        """
        process = self._session.request_cancel()
        if process is None:
            return

        logger.info(
            "Cancelling job %s",
            self.job_id,
            extra={"input_path": str(self.request.input_path)},
        )
        try:
            self._engine.terminate(process)
        except OSError as e:
            logger.warning("Failed to signal encoder for job %s: %s", self.job_id, e)

        watchdog = threading.Timer(
            self._settings.cancel_timeout, self._force_cancel, args=(process,)
        )
        watchdog.daemon = True
        self._watchdog = watchdog
        watchdog.start()

    def _force_cancel(self, process: EngineProcess) -> None:
        timeout = self._settings.cancel_timeout
        note = f"Cancelled; encoder did not exit within {timeout}s and was killed"
        if self._session.force_cancel(note) is None:
            return
        logger.warning(
            "Encoder for job %s did not exit within %ss of cancel, killing it",
            self.job_id,
            timeout,
        )
        try:
            process.kill()
        except OSError as e:
            logger.warning("Failed to kill encoder for job %s: %s", self.job_id, e)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the job is terminal. False on timeout."""
        return self._session.wait(timeout)

    def result(self, timeout: float | None = None) -> Outcome:
        """Block until the job is terminal and return its Outcome.

        Raises:
            TimeoutError: If the outcome is not ready within ``timeout``.
        """
        if not self._session.wait(timeout):
            raise TimeoutError(f"Job {self.job_id} did not finish within {timeout}s")
        outcome = self._session.outcome
        assert outcome is not None
        return outcome

    def _run(self) -> None:
        with job_context(self.job_id, self.request.input_path):
            start_time = time.monotonic()
            try:
                self._execute(start_time)
            except Exception as e:
                logger.exception("Transcode job failed: %s", e)
                self._session.fail(
                    f"Internal error: {e}",
                    elapsed_seconds=time.monotonic() - start_time,
                )
                if self._process is not None:
                    self._reap(self._process)
            finally:
                if self._watchdog is not None:
                    self._watchdog.cancel()

    def _execute(self, start_time: float) -> None:
        if not self._session.begin_probe():
            logger.info("Job cancelled before start")
            return

        denominator_ms = resolve_duration(self.request, self._prober)
        self._session.set_denominator(denominator_ms)

        if self._session.status.is_terminal:
            logger.info("Job cancelled before encoder start")
            return

        logger.info(
            "Starting transcode: %s",
            self.request.input_path.name,
            extra={
                "input_path": str(self.request.input_path),
                "output_path": str(self.request.output_path),
                "target_format": self.request.target_format.value,
                "branch": self.plan.branch.value,
                "duration_ms": denominator_ms,
            },
        )

        try:
            process = self._engine.execute(self.plan)
        except (EngineUnavailableError, OSError) as e:
            logger.error("Could not start encoder: %s", e)
            self._session.fail(
                f"Could not start encoder: {e}",
                elapsed_seconds=time.monotonic() - start_time,
            )
            return

        self._process = process
        if not self._session.attach_process(process):
            # Cancelled while the engine was starting
            self._reap(process)
            return

        for sample in process.samples():
            self._session.report_progress(sample)

        return_code = process.wait()
        elapsed = time.monotonic() - start_time

        settled = self._session.complete(
            return_code,
            process.diagnostic_lines(),
            output_path=self.request.output_path,
            elapsed_seconds=elapsed,
            tail_lines=self._settings.diagnostic_tail_lines,
        )
        outcome = self._session.outcome
        if settled and outcome is not None:
            if outcome.succeeded:
                logger.info(
                    "Transcode completed: %s",
                    self.request.output_path.name,
                    extra={
                        "output_path": str(self.request.output_path),
                        "elapsed_seconds": round(elapsed, 3),
                    },
                )
            elif outcome.cancelled:
                logger.info("Transcode cancelled (engine exit code %s)", return_code)
            else:
                logger.error(
                    "FFmpeg exited with code %s: %s", return_code, outcome.diagnostic
                )

    def _reap(self, process: EngineProcess) -> None:
        """Stop a process this job no longer wants and release its handle."""
        try:
            self._engine.terminate(process)
        except OSError as e:
            logger.debug("Terminate failed during cleanup: %s", e)
        if process.wait(self._settings.cancel_timeout) is None:
            process.kill()
            process.wait()


class TranscodeController:
    """Plans, runs and cancels transcode jobs.

    The controller holds no per-job state; every submitted request gets an
    independent JobHandle.
    """

    def __init__(
        self,
        engine: EncodingEngine | None = None,
        prober: DurationProber | None = None,
        config: ControllerConfig | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            engine: Encoding engine. Defaults to FFmpegEngine.
            prober: Duration prober. Defaults to FFprobeProber.
            config: Configuration. Defaults to get_config().
        """
        if config is None:
            config = get_config()
        self.config = config
        self.engine: EncodingEngine = engine or FFmpegEngine(
            ffmpeg_path=config.tools.ffmpeg,
            stats_period=config.jobs.stats_period,
        )
        self.prober: DurationProber = prober or FFprobeProber(
            ffprobe_path=config.tools.ffprobe,
            timeout=config.jobs.probe_timeout,
        )

    def plan(self, request: ConversionRequest) -> EncodePlan:
        """Build the encode plan for a request without running it.

        Raises:
            UnsupportedFormatError: If the target format is not recognized.
            UnsupportedConversionError: If the input cannot produce the target.
        """
        return build_encode_plan(request, video_preset=self.config.jobs.video_preset)

    def submit(
        self,
        request: ConversionRequest,
        on_progress: ProgressCallback | None = None,
    ) -> JobHandle:
        """Plan a request and start it in the background.

        Args:
            request: The conversion or clip request.
            on_progress: Called with non-decreasing values in 0..1.

        Returns:
            JobHandle for observing and cancelling the job.

        Raises:
            UnsupportedFormatError: If the target format is not recognized.
            UnsupportedConversionError: If the input cannot produce the target.
        """
        plan = self.plan(request)
        handle = JobHandle(
            request,
            plan,
            self.engine,
            self.prober,
            self.config.jobs,
            on_progress,
        )
        logger.debug(
            "Submitted job %s", handle.job_id, extra={"branch": plan.branch.value}
        )
        handle.start()
        return handle

    def convert(
        self,
        request: ConversionRequest,
        on_progress: ProgressCallback | None = None,
    ) -> Outcome:
        """Run a request to completion and return its Outcome.

        Raises:
            UnsupportedFormatError: If the target format is not recognized.
            UnsupportedConversionError: If the input cannot produce the target.
        """
        return self.submit(request, on_progress).result()

    def cancel(self, handle: JobHandle) -> None:
        """Best-effort cancellation of an in-flight job."""
        handle.cancel()
