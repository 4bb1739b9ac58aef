"""Configuration management for the transcode controller.

Configuration is loaded with precedence handling:
1. Explicit arguments (highest priority)
2. Environment variables (TCTL_*)
3. Config file (~/.tctl/config.toml)
4. Default values (lowest priority)
"""

from transcode_controller.config.env import EnvReader
from transcode_controller.config.loader import (
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from transcode_controller.config.models import (
    ControllerConfig,
    JobConfig,
    LoggingConfig,
    ToolPathsConfig,
)
from transcode_controller.config.schema import ConfigFileModel

__all__ = [
    # Models
    "ControllerConfig",
    "JobConfig",
    "LoggingConfig",
    "ToolPathsConfig",
    "ConfigFileModel",
    # Loader
    "EnvReader",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
