"""Structured logging module for LSX.

Provides configurable logging with JSON format support and file rotation,
plus executor/command context injection for log records.
"""

from lsx.logging.config import configure_logging
from lsx.logging.context import (
    OperationContextFilter,
    get_operation_context,
    operation_context,
)
from lsx.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "OperationContextFilter",
    "configure_logging",
    "get_operation_context",
    "operation_context",
]
