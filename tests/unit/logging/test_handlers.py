"""Unit tests for log formatting and logging configuration."""

import json
import logging
import sys
from pathlib import Path

import pytest

from transcode_controller.config.models import LoggingConfig
from transcode_controller.logging import (
    JobContextFilter,
    JSONFormatter,
    configure_logging,
    job_context,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields_and_context(self) -> None:
        record = logging.LogRecord(
            "transcode_controller.jobs",
            logging.WARNING,
            "",
            0,
            "slow %s",
            ("probe",),
            None,
        )
        record.input_path = "/media/in.mp4"
        with job_context("abc123"):
            JobContextFilter().filter(record)

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "WARNING"
        assert entry["message"] == "slow probe"
        assert entry["logger"] == "transcode_controller.jobs"
        assert entry["job_id"] == "abc123"
        assert entry["context"] == {"input_path": "/media/in.mp4"}
        assert "job_tag" not in entry["context"]

    def test_exception(self) -> None:
        try:
            raise RuntimeError("bad")
        except RuntimeError:
            record = logging.LogRecord(
                "x", logging.ERROR, "", 0, "failed", (), sys.exc_info()
            )
        entry = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: bad" in entry["exception"]
        assert "job_id" not in entry


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_file_output(self, temp_dir: Path, restore_root_logger) -> None:
        log_file = temp_dir / "logs" / "tctl.log"
        configure_logging(
            LoggingConfig(
                level="debug", file=log_file, format="json", include_stderr=False
            )
        )

        with job_context("feedbeef00"):
            logging.getLogger("transcode_controller.test").info("hello")
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[-1])
        assert entry["message"] == "hello"
        assert entry["job_id"] == "feedbeef00"
        assert restore_root_logger.level == logging.DEBUG

    def test_text_format_has_job_tag(self, temp_dir: Path, restore_root_logger) -> None:
        log_file = temp_dir / "tctl.log"
        configure_logging(LoggingConfig(file=log_file, include_stderr=False))

        with job_context("feedbeef00"):
            logging.getLogger("transcode_controller.test").warning("careful")
        for handler in restore_root_logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "[job:feedbeef] transcode_controller.test - WARNING - careful" in text

    def test_stderr_fallback_when_no_file(self, restore_root_logger) -> None:
        configure_logging(LoggingConfig(include_stderr=False))
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0], logging.StreamHandler)
