"""Tests for configuration data models."""

import pytest

from transcode_controller.config.env import EnvReader
from transcode_controller.config.models import (
    ControllerConfig,
    JobConfig,
    LoggingConfig,
)


class TestJobConfig:
    """Tests for JobConfig validation."""

    def test_defaults(self) -> None:
        config = JobConfig()
        assert config.cancel_timeout == 5.0
        assert config.diagnostic_tail_lines == 10
        assert config.video_preset == "ultrafast"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"cancel_timeout": 0},
            {"probe_timeout": -1},
            {"diagnostic_tail_lines": -1},
            {"stats_period": 0},
            {"video_preset": ""},
        ],
    )
    def test_invalid(self, kwargs) -> None:
        with pytest.raises(ValueError):
            JobConfig(**kwargs)


class TestLoggingConfig:
    """Tests for LoggingConfig validation."""

    def test_case_insensitive_level(self) -> None:
        assert LoggingConfig(level="DEBUG").level == "DEBUG"

    @pytest.mark.parametrize(
        "kwargs",
        [{"level": "trace"}, {"format": "xml"}, {"max_bytes": 0}, {"backup_count": -1}],
    )
    def test_invalid(self, kwargs) -> None:
        with pytest.raises(ValueError):
            LoggingConfig(**kwargs)


def test_controller_config_sections_are_independent() -> None:
    first = ControllerConfig()
    second = ControllerConfig()
    first.jobs.cancel_timeout = 1.0
    assert second.jobs.cancel_timeout == 5.0


class TestEnvReader:
    """Tests for EnvReader type conversion."""

    def test_values(self) -> None:
        reader = EnvReader(
            env={
                "A": "3",
                "B": "2.5",
                "C": "yes",
                "D": "~/bin/ffmpeg",
                "E": "",
            }
        )
        assert reader.get_int("A") == 3
        assert reader.get_float("B") == 2.5
        assert reader.get_bool("C") is True
        assert reader.get_path("D").name == "ffmpeg"
        assert "~" not in str(reader.get_path("D"))
        assert reader.get_str("E", "fallback") == "fallback"

    def test_invalid_numbers_fall_back(self) -> None:
        reader = EnvReader(env={"A": "x", "B": "y"})
        assert reader.get_int("A", 1) == 1
        assert reader.get_float("B") is None
