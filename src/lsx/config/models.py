"""Configuration data models.

This module defines dataclasses for LSX configuration options.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lsx.executor.process import DEFAULT_COMMAND_TIMEOUT
from lsx.executor.wait import DEFAULT_POLL_INTERVAL


def _require(name: str, value: float, *, allow_zero: bool) -> None:
    """Reject NaN, infinities, negatives and (unless allowed) zero."""
    valid = math.isfinite(value) and (value >= 0 if allow_zero else value > 0)
    if not valid:
        qualifier = "non-negative" if allow_zero else "positive"
        raise ValueError(f"{name} must be a {qualifier} number, got {value}")


@dataclass
class ExecutorConfig:
    """Configuration for executor calls."""

    # Pause between local device polls while waiting, in seconds
    poll_interval: float = DEFAULT_POLL_INTERVAL

    # Wait timeout used when a caller gives none, in seconds
    default_timeout: float = 30.0

    # Executor binary launched by the process binding
    binary: str = "lsx"

    # Limit for a single executor command, in seconds
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT

    def __post_init__(self) -> None:
        """Validate configuration."""
        _require("poll_interval", self.poll_interval, allow_zero=False)
        _require("default_timeout", self.default_timeout, allow_zero=True)
        _require("command_timeout", self.command_timeout, allow_zero=False)
        if not self.binary:
            raise ValueError("binary must not be empty")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "warning"

    # Log file path (None = stderr)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class LSXConfig:
    """Complete LSX configuration."""

    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Per-executor option tables, e.g. [executors.vfs] root = "/srv/vfs"
    executors: dict[str, dict[str, Any]] = field(default_factory=dict)

    def executor_options(self, name: str) -> dict[str, Any]:
        """Return the option table for an executor (empty if none)."""
        return dict(self.executors.get(name, {}))
