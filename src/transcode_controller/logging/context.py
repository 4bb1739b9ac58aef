"""Job context for structured logging.

Provides context propagation for job worker threads using contextvars, so
every record logged while a job runs carries its job id and input path.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_input_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "input_path", default=None
)


def get_job_context() -> tuple[str | None, str | None]:
    """Get the current (job_id, input_path), either may be None."""
    return _job_id.get(), _input_path.get()


@contextmanager
def job_context(
    job_id: str,
    input_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager binding a job to log records.

    Example:
        with job_context("3f2a9c1e", "/media/in.mp4"):
            logger.info("Starting")  # record carries job_id and input_path
    """
    job_token = _job_id.set(job_id)
    path_token = _input_path.set(str(input_path) if input_path is not None else None)
    try:
        yield
    finally:
        _input_path.reset(path_token)
        _job_id.reset(job_token)


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds ``job_id`` and ``input_path`` for JSON output and a compact
    ``job_tag`` like ``[job:3f2a9c1e] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        job_id, input_path = get_job_context()
        record.job_id = job_id
        if input_path and not getattr(record, "input_path", None):
            record.input_path = input_path
        record.job_tag = f"[job:{job_id[:8]}] " if job_id else ""
        return True
