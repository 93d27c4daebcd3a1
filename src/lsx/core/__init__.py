"""Core utilities package.

Context propagation, duration parsing and subprocess invocation shared by
the executor bindings and the command line.
"""

from lsx.core.context import Context
from lsx.core.durations import format_duration, parse_duration
from lsx.core.subprocess_utils import CommandResult, run_command

__all__ = [
    "CommandResult",
    "Context",
    "format_duration",
    "parse_duration",
    "run_command",
]
