"""Exception hierarchy for LSX.

All LSX errors inherit from LSXError, allowing callers to catch every
executor-related failure with a single except clause if desired. A wait that
times out is not an error and has no exception type.
"""

from __future__ import annotations


class LSXError(Exception):
    """Base exception for LSX errors."""


class NotSupportedError(LSXError):
    """Raised when an operation is not implemented for the current platform.

    This is never fatal: the caller may choose a different strategy.

    Attributes:
        operation: Name of the unsupported operation.
        executor: Name of the executor, if known.
    """

    def __init__(self, operation: str, executor: str | None = None) -> None:
        self.operation = operation
        self.executor = executor
        if executor:
            message = f"{operation} is not supported by executor {executor}"
        else:
            message = f"{operation} is not supported"
        super().__init__(message)


class ExecutorTimeoutError(LSXError):
    """Raised when an executor reports that an operation timed out."""


class ExecutorError(LSXError):
    """Raised when the platform or executor fails for any other reason."""


class ExecutorFailedError(ExecutorError):
    """Raised when an executor process exits with a hard-failure code.

    Attributes:
        command: The executor command that failed.
        exit_code: Process exit code.
        stderr: Captured standard error output.
    """

    def __init__(self, command: str, exit_code: int, stderr: str = "") -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr.strip()
        message = f"executor command {command} failed with exit code {exit_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ExecutorOutputError(ExecutorError):
    """Raised when executor output cannot be parsed."""


class MountError(ExecutorError):
    """Raised when a mount or unmount operation fails."""


class ExecutorNotFoundError(LSXError):
    """Raised when no executor is registered under a name.

    Attributes:
        name: The requested executor name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"executor not found: {name}")


class ConfigError(LSXError):
    """Raised when configuration cannot be loaded or is invalid."""


class ContextError(LSXError):
    """Base exception for a context that is done."""


class ContextCancelledError(ContextError):
    """Raised when the caller's context was cancelled."""


class ContextDeadlineExceededError(ContextError):
    """Raised when the caller's context deadline passed."""
