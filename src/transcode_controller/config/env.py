"""Typed access to TCTL_* environment variables.

EnvReader takes an optional mapping so tests can inject values without
touching os.environ. Empty values count as unset, and values that cannot be
converted are logged and replaced by the default.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class EnvReader:
    """Reads environment variables with type conversion.

    Example:
        reader = EnvReader(env={"TCTL_CANCEL_TIMEOUT": "2.5"})
        reader.get_float("TCTL_CANCEL_TIMEOUT")  # 2.5
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def _raw(self, var: str) -> str | None:
        value = self._env.get(var)
        return value if value else None

    def _convert(
        self, var: str, convert: Callable[[str], T], default: T | None
    ) -> T | None:
        raw = self._raw(var)
        if raw is None:
            return default
        try:
            return convert(raw)
        except ValueError:
            logger.warning(
                "Ignoring %s=%r: expected %s", var, raw, convert.__name__
            )
            return default

    def get_str(self, var: str, default: str | None = None) -> str | None:
        raw = self._raw(var)
        return default if raw is None else raw

    def get_int(self, var: str, default: int | None = None) -> int | None:
        return self._convert(var, int, default)

    def get_float(self, var: str, default: float | None = None) -> float | None:
        return self._convert(var, float, default)

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """True for "1", "true", "yes" or "on" in any case."""
        raw = self._raw(var)
        if raw is None:
            return default
        return raw.strip().casefold() in _TRUE_VALUES

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Path with ``~`` expanded."""
        raw = self._raw(var)
        if raw is None:
            return default
        return Path(raw).expanduser()
