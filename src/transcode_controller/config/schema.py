"""Pydantic models describing the config file layout.

The TOML file is validated against these models before it is merged into
the dataclass configuration, so typos and wrong types are reported with
the offending key instead of being silently ignored.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ToolsSectionModel(BaseModel):
    """[tools] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


class JobsSectionModel(BaseModel):
    """[jobs] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cancel_timeout: float | None = Field(default=None, gt=0)
    probe_timeout: float | None = Field(default=None, gt=0)
    diagnostic_tail_lines: int | None = Field(default=None, ge=0)
    video_preset: str | None = Field(default=None, min_length=1)
    stats_period: float | None = Field(default=None, gt=0)


class LoggingSectionModel(BaseModel):
    """[logging] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: Literal["debug", "info", "warning", "error"] | None = None
    file: Path | None = None
    format: Literal["text", "json"] | None = None
    include_stderr: bool | None = None
    max_bytes: int | None = Field(default=None, gt=0)
    backup_count: int | None = Field(default=None, ge=0)


class ConfigFileModel(BaseModel):
    """Whole config file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tools: ToolsSectionModel = Field(default_factory=ToolsSectionModel)
    jobs: JobsSectionModel = Field(default_factory=JobsSectionModel)
    logging: LoggingSectionModel = Field(default_factory=LoggingSectionModel)
