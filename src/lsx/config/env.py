"""Environment variable reader with dependency injection support."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


class EnvReader:
    """Typed access to LSX_* environment variables.

    Accepts an optional env mapping so tests can inject values without
    touching os.environ.

    Example:
        reader = EnvReader(env={"LSX_POLL_INTERVAL": "0.25"})
        reader.get_float("LSX_POLL_INTERVAL", 0.1)  # 0.25
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Return the raw value, or default if unset or empty."""
        value = self._env.get(var)
        if not value:
            return default
        return value

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Return the value parsed as a float.

        Invalid values are logged and replaced with default.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid number for %s: %s", var, value)
            return default

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Return the value as a user-expanded Path, or default if unset."""
        value = self._env.get(var)
        if not value:
            return default
        return Path(value).expanduser()
