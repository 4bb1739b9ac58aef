"""JSON log formatting for job records.

One JSON object per line::

    {"timestamp": "...", "level": "INFO", "logger": "transcode_controller.jobs",
     "message": "Transcode completed: out.mp3", "job_id": "3f2a9c1e...",
     "context": {"output_path": "/media/out.mp3", "elapsed_seconds": 4.2}}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

# Set by JobContextFilter; job_id is promoted to the top level
_JOB_ATTRS = frozenset({"job_id", "job_tag"})


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS
        and key not in _JOB_ATTRS
        and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        job_id = getattr(record, "job_id", None)
        if job_id:
            entry["job_id"] = job_id

        extra = _extra_fields(record)
        if extra:
            entry["context"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, default=str)
