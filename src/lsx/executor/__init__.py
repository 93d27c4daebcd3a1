"""Executor contract, bindings and registry.

- interface: capability protocols an executor may satisfy
- commands: command vocabulary and reserved exit codes
- wait: the wait_for_device polling algorithm
- cli_adapter: ExecutorCLI composite over an in-process executor
- process: ProcessExecutor binding that runs an executor binary
- registry: executor lookup by name
"""

from lsx.executor.cli_adapter import ExecutorCLI
from lsx.executor.commands import Command, ExecutorExitCode
from lsx.executor.interface import (
    ProvidesStorageExecutorCLI,
    StorageExecutor,
    StorageExecutorCLI,
    StorageExecutorFunctions,
    StorageExecutorWithMount,
    StorageExecutorWithSupported,
)
from lsx.executor.process import ProcessExecutor
from lsx.executor.registry import ExecutorRegistry, get_registry
from lsx.executor.wait import DEFAULT_POLL_INTERVAL, wait_for_device

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "Command",
    "ExecutorCLI",
    "ExecutorExitCode",
    "ExecutorRegistry",
    "ProcessExecutor",
    "ProvidesStorageExecutorCLI",
    "StorageExecutor",
    "StorageExecutorCLI",
    "StorageExecutorFunctions",
    "StorageExecutorWithMount",
    "StorageExecutorWithSupported",
    "get_registry",
    "wait_for_device",
]
