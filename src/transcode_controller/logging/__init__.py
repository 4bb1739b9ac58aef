"""Structured logging for the transcode controller.

Provides configurable logging with JSON format support and file rotation,
plus job context tagging for records logged from job worker threads.
"""

from transcode_controller.logging.config import configure_logging
from transcode_controller.logging.context import (
    JobContextFilter,
    get_job_context,
    job_context,
)
from transcode_controller.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "configure_logging",
    "get_job_context",
    "job_context",
]
