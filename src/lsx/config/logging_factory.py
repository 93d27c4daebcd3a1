"""Logging configuration factory.

Builds LoggingConfig instances with command-line overrides applied to the
configured values.
"""

from __future__ import annotations

from pathlib import Path

from lsx.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
) -> LoggingConfig:
    """Merge command-line overrides into a base LoggingConfig.

    Args:
        base: Logging configuration from file and environment.
        level: Override log level, or None to keep base.level.
        file: Override log file path, or None to keep base.file.
        format: Override log format ("text" or "json"), or None.

    Returns:
        New LoggingConfig. Validation runs in LoggingConfig.__post_init__,
        so invalid values raise ValueError.
    """
    return LoggingConfig(
        level=level if level is not None else base.level,
        file=file if file is not None else base.file,
        format=format if format is not None else base.format,
    )
