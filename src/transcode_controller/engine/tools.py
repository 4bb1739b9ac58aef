"""External tool path resolution.

Tools are resolved from an explicitly configured path first, then from the
system PATH.
"""

import logging
import shutil
from pathlib import Path

from transcode_controller.exceptions import EngineUnavailableError

logger = logging.getLogger(__name__)


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Locate an external tool.

    Args:
        name: Executable name (e.g. "ffmpeg").
        configured_path: Explicit path from configuration, if any.

    Returns:
        Path to the executable, or None if it cannot be found.
    """
    if configured_path is not None:
        candidate = Path(configured_path).expanduser()
        if candidate.is_file():
            return candidate
        logger.warning(
            "Configured %s path does not exist: %s, falling back to PATH",
            name,
            candidate,
        )

    found = shutil.which(name)
    return Path(found) if found else None


def require_tool(name: str, configured_path: Path | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Raises:
        EngineUnavailableError: If the tool cannot be found.
    """
    path = find_tool(name, configured_path)
    if path is None:
        raise EngineUnavailableError(
            f"{name} is not installed or not in PATH. "
            f"You can configure a custom path via TCTL_{name.upper()}_PATH "
            "or ~/.tctl/config.toml"
        )
    return path
