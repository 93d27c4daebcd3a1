"""Root logger setup for the lsx command line.

Executor commands print their results on stdout, so log records go either
to the configured log file or to stderr, never to stdout.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from lsx.logging.context import OperationContextFilter
from lsx.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from lsx.config.models import LoggingConfig

# Each executor call appends to the same file; keep it bounded
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# op_tag is "[vfs:wait] " inside an operation, empty otherwise
TEXT_FORMAT = "%(asctime)s - %(op_tag)s%(name)s - %(levelname)s - %(message)s"


def _open_log_file(path: Path) -> logging.Handler | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to config.

    A log file that cannot be opened is reported once on stderr and logging
    falls back to stderr.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    if config.format.casefold() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    handler = None
    if config.file:
        handler = _open_log_file(Path(config.file).expanduser())
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(formatter)
    handler.addFilter(OperationContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
