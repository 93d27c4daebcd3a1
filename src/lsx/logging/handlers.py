"""JSON log formatting for LSX."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus the ones set by formatting and
# by OperationContextFilter. Anything else on a record came from ``extra=``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "executor", "command", "op_tag"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys: timestamp (UTC), level, message, logger, executor and command
    when inside an operation, context for ``extra=`` fields, and
    exception when exc_info is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        for key in ("executor", "command"):
            if getattr(record, key, None):
                entry[key] = getattr(record, key)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["context"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
