"""Configuration data models.

This module defines dataclasses for transcode controller configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class JobConfig:
    """Configuration for job execution."""

    # Seconds to wait for the engine to exit after a cancel before the job
    # is reported cancelled anyway
    cancel_timeout: float = 5.0

    # Seconds before a duration probe is abandoned
    probe_timeout: float = 60.0

    # Engine log lines attached to a failed outcome
    diagnostic_tail_lines: int = 10

    # x264 preset for video targets
    video_preset: str = "ultrafast"

    # Seconds between FFmpeg progress reports
    stats_period: float = 0.5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.cancel_timeout <= 0:
            raise ValueError(
                f"cancel_timeout must be positive, got {self.cancel_timeout}"
            )
        if self.probe_timeout <= 0:
            raise ValueError(
                f"probe_timeout must be positive, got {self.probe_timeout}"
            )
        if self.diagnostic_tail_lines < 0:
            raise ValueError(
                "diagnostic_tail_lines must be >= 0, "
                f"got {self.diagnostic_tail_lines}"
            )
        if self.stats_period <= 0:
            raise ValueError(f"stats_period must be positive, got {self.stats_period}")
        if not self.video_preset:
            raise ValueError("video_preset must not be empty")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "info"
    file: Path | None = None
    format: str = "text"
    include_stderr: bool = True
    max_bytes: int = 10_485_760  # 10 MiB
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.casefold() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.casefold() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(f"backup_count must be >= 0, got {self.backup_count}")


@dataclass
class ControllerConfig:
    """Top-level transcode controller configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    jobs: JobConfig = field(default_factory=JobConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
