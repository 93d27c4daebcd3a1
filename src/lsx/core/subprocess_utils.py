"""Subprocess utilities for executor invocation.

This module provides the subprocess wrapper used to launch executor
binaries with consistent timeout handling, encoding, cancellation and
logging.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required to launch executors
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from lsx.core.context import Context

logger = logging.getLogger(__name__)

# How often a running child is checked for context cancellation, in seconds
CANCEL_CHECK_INTERVAL = 0.05


class CommandResult(NamedTuple):
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    returncode: int


def run_command(
    args: list[str | Path],
    timeout: float | None = 120,
    ctx: Context | None = None,
    errors: str = "replace",
    **kwargs: Any,
) -> CommandResult:
    """Run an external command and capture its output.

    This wraps subprocess with the standard LSX patterns:
    - Captured text output with decoding error replacement
    - Configurable timeout (default 2 minutes, None for no limit)
    - Exit status returned rather than raised
    - Optional context: the child is killed as soon as the context is done

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds.
        ctx: Optional context whose cancellation or deadline stops the child.
        errors: Error handling mode for text decoding (default "replace").
        **kwargs: Additional subprocess.Popen arguments.

    Returns:
        CommandResult with stdout, stderr and returncode.

    Raises:
        subprocess.TimeoutExpired: If the command times out. The child is
            killed and reaped before this is raised.
        ContextError: If the context is done before the command finishes.
            The child is killed and reaped before this is raised.
        OSError: If the command cannot be started.

    Example:
        >>> result = run_command(["lsx", "vfs", "supported"])
        >>> if result.returncode == 0:
        ...     print(result.stdout)
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command_name": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()

    with subprocess.Popen(  # nosec B603 - caller validates args
        str_args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        errors=errors,
        **kwargs,
    ) as proc:
        while True:
            elapsed = time.monotonic() - start_time
            wait_for = None if timeout is None else max(0.0, timeout - elapsed)
            if ctx is not None:
                wait_for = (
                    CANCEL_CHECK_INTERVAL
                    if wait_for is None
                    else min(wait_for, CANCEL_CHECK_INTERVAL)
                )
            try:
                stdout, stderr = proc.communicate(timeout=wait_for)
                break
            except subprocess.TimeoutExpired:
                elapsed = time.monotonic() - start_time
                if ctx is not None and ctx.done:
                    _kill(proc)
                    logger.debug(
                        "Command stopped by context: %s",
                        command_name,
                        extra={
                            "command_name": command_name,
                            "elapsed_seconds": round(elapsed, 3),
                        },
                    )
                    ctx.raise_if_done()
                if timeout is not None and elapsed >= timeout:
                    _kill(proc)
                    logger.warning(
                        "Command timed out after %.1fs: %s",
                        timeout,
                        " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
                        extra={
                            "command_name": command_name,
                            "timeout_seconds": timeout,
                            "elapsed_seconds": round(elapsed, 3),
                        },
                    )
                    raise subprocess.TimeoutExpired(str_args, timeout) from None

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command_name": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": proc.returncode,
        },
    )

    return CommandResult(stdout or "", stderr or "", proc.returncode)


def _kill(proc: subprocess.Popen[str]) -> None:
    """Kill a child process and reap it."""
    proc.kill()
    proc.communicate()
