"""Operation context for structured logging.

Tracks which executor and command the current thread is running, using
contextvars, so every log record emitted during the command carries them.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_executor: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "executor", default=None
)
_command: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "command", default=None
)


@contextmanager
def operation_context(
    executor: str,
    command: str | None = None,
) -> Generator[None, None, None]:
    """Context manager marking the executor command being run.

    The previous context is restored on exit.

    Example:
        with operation_context("vfs", "wait"):
            logger.info("Polling")  # Logged as "[vfs:wait] Polling"
    """
    executor_token = _executor.set(executor)
    command_token = _command.set(command)
    try:
        yield
    finally:
        _command.reset(command_token)
        _executor.reset(executor_token)


def get_operation_context() -> tuple[str | None, str | None]:
    """Return the current (executor, command), either may be None."""
    return _executor.get(), _command.get()


class OperationContextFilter(logging.Filter):
    """Logging filter that injects operation context into log records.

    Adds executor and command attributes, plus an op_tag such as
    "[vfs:wait] " for the text format (empty outside an operation).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        executor, command = get_operation_context()

        record.executor = executor
        record.command = command

        if executor:
            if command:
                record.op_tag = f"[{executor}:{command}] "
            else:
                record.op_tag = f"[{executor}] "
        else:
            record.op_tag = ""

        return True  # Never filter out records
