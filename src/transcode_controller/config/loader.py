"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. Explicit arguments to get_config()
2. Environment variables (TCTL_*)
3. Config file (~/.tctl/config.toml)
4. Default values

Environment variables:
- TCTL_CONFIG_PATH: Path to config file (overrides default location)
- TCTL_FFMPEG_PATH: Path to ffmpeg executable
- TCTL_FFPROBE_PATH: Path to ffprobe executable
- TCTL_CANCEL_TIMEOUT: Seconds to wait for the engine after a cancel
- TCTL_PROBE_TIMEOUT: Seconds before a duration probe is abandoned
- TCTL_VIDEO_PRESET: x264 preset for video targets
- TCTL_LOG_LEVEL: Log level (debug, info, warning, error)
- TCTL_LOG_FORMAT: Log format (text, json)
- TCTL_LOG_FILE: Log file path
"""

from __future__ import annotations

import logging
import threading
import tomllib
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from transcode_controller.config.env import EnvReader
from transcode_controller.config.models import (
    ControllerConfig,
    JobConfig,
    LoggingConfig,
    ToolPathsConfig,
)
from transcode_controller.config.schema import ConfigFileModel
from transcode_controller.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".tctl"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (validated model, mtime))
_config_cache: dict[Path, tuple[ConfigFileModel, float]] = {}
_config_cache_lock = threading.Lock()


def get_default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the config file path, honoring TCTL_CONFIG_PATH."""
    path = EnvReader(env).get_path("TCTL_CONFIG_PATH")
    return path if path is not None else DEFAULT_CONFIG_FILE


def clear_config_cache() -> None:
    """Forget all cached config files."""
    with _config_cache_lock:
        _config_cache.clear()


def load_config_file(path: Path) -> ConfigFileModel:
    """Load and validate a TOML config file.

    Parsed files are cached and reloaded when their mtime changes.

    Args:
        path: Path to the config file.

    Returns:
        Validated file model. An empty model if the file doesn't exist.

    Raises:
        ConfigError: If the file is not valid TOML or fails validation.
    """
    try:
        mtime = path.stat().st_mtime
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return ConfigFileModel()
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == mtime:
            return cached[0]

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        model = ConfigFileModel.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    with _config_cache_lock:
        _config_cache[path] = (model, mtime)
    return model


def _first(*values):
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def get_config(
    config_path: Path | None = None,
    *,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ControllerConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides TCTL_CONFIG_PATH).
        ffmpeg_path: Explicit override for the ffmpeg path.
        ffprobe_path: Explicit override for the ffprobe path.
        env: Environment mapping (defaults to os.environ).

    Returns:
        ControllerConfig with merged configuration.

    Raises:
        ConfigError: If the config file or a merged value is invalid.
    """
    reader = EnvReader(env)
    path = config_path if config_path is not None else get_default_config_path(env)
    file_config = load_config_file(path)

    tools = ToolPathsConfig(
        ffmpeg=_first(
            ffmpeg_path, reader.get_path("TCTL_FFMPEG_PATH"), file_config.tools.ffmpeg
        ),
        ffprobe=_first(
            ffprobe_path,
            reader.get_path("TCTL_FFPROBE_PATH"),
            file_config.tools.ffprobe,
        ),
    )

    defaults = JobConfig()
    jobs_file = file_config.jobs
    logging_defaults = LoggingConfig()
    logging_file = file_config.logging

    try:
        jobs = JobConfig(
            cancel_timeout=_first(
                reader.get_float("TCTL_CANCEL_TIMEOUT"),
                jobs_file.cancel_timeout,
                defaults.cancel_timeout,
            ),
            probe_timeout=_first(
                reader.get_float("TCTL_PROBE_TIMEOUT"),
                jobs_file.probe_timeout,
                defaults.probe_timeout,
            ),
            diagnostic_tail_lines=_first(
                jobs_file.diagnostic_tail_lines, defaults.diagnostic_tail_lines
            ),
            video_preset=_first(
                reader.get_str("TCTL_VIDEO_PRESET"),
                jobs_file.video_preset,
                defaults.video_preset,
            ),
            stats_period=_first(jobs_file.stats_period, defaults.stats_period),
        )
        logging_config = LoggingConfig(
            level=_first(
                reader.get_str("TCTL_LOG_LEVEL"),
                logging_file.level,
                logging_defaults.level,
            ),
            file=_first(reader.get_path("TCTL_LOG_FILE"), logging_file.file),
            format=_first(
                reader.get_str("TCTL_LOG_FORMAT"),
                logging_file.format,
                logging_defaults.format,
            ),
            include_stderr=_first(
                logging_file.include_stderr, logging_defaults.include_stderr
            ),
            max_bytes=_first(logging_file.max_bytes, logging_defaults.max_bytes),
            backup_count=_first(
                logging_file.backup_count, logging_defaults.backup_count
            ),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    return ControllerConfig(tools=tools, jobs=jobs, logging=logging_config)
