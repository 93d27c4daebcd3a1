"""CLI error output and exit-code mapping.

Executor commands report failures through their exit code. This module is
the one place where LSX exceptions are translated into those codes.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator
from contextlib import contextmanager
from typing import NoReturn

import click

from lsx.exceptions import (
    ContextDeadlineExceededError,
    ExecutorTimeoutError,
    LSXError,
    NotSupportedError,
)
from lsx.executor.commands import ExecutorExitCode

logger = logging.getLogger(__name__)


def error_exit(message: str, code: ExecutorExitCode | int) -> NoReturn:
    """Print an error message on stderr and exit.

    Args:
        message: Error message to display.
        code: Exit code to use.

    Note:
        This function never returns; it always calls sys.exit().
    """
    click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


@contextmanager
def exit_on_executor_error() -> Generator[None, None, None]:
    """Translate LSX exceptions raised in the block into exit codes.

    - NotSupportedError: NOT_IMPLEMENTED (2)
    - ExecutorTimeoutError and ContextDeadlineExceededError: TIMED_OUT (255)
    - any other LSXError: FAILED (1)
    """
    try:
        yield
    except NotSupportedError as e:
        logger.debug("Operation not supported: %s", e)
        error_exit(str(e), ExecutorExitCode.NOT_IMPLEMENTED)
    except (ExecutorTimeoutError, ContextDeadlineExceededError) as e:
        error_exit(str(e), ExecutorExitCode.TIMED_OUT)
    except LSXError as e:
        logger.debug("Executor command failed", exc_info=True)
        error_exit(str(e), ExecutorExitCode.FAILED)
