"""CLI module for LSX.

    lsx [OPTIONS] <executor> <command> [ARGS]...
    lsx [OPTIONS] executors
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from lsx.exceptions import ConfigError
from lsx.executor.commands import ExecutorExitCode

from .output import error_exit

if TYPE_CHECKING:
    from lsx.config.models import LoggingConfig

logger = logging.getLogger(__name__)


class ExecutorDispatchGroup(click.Group):
    """Group that resolves unknown subcommands as executor names.

    Built-in commands (such as ``executors``) take precedence; any other
    name is looked up in the executor registry when the command runs.
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command

        from lsx.cli.executor import executor_group

        return executor_group

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(self.commands)

    def format_epilog(
        self, ctx: click.Context, formatter: click.HelpFormatter
    ) -> None:
        from lsx.executor.registry import get_registry

        names = ", ".join(get_registry().names()) or "none"
        with formatter.section("Executors"):
            formatter.write_text(names)
        super().format_epilog(ctx, formatter)


def _configure_logging(
    config_logging: LoggingConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from configuration and CLI options."""
    from lsx.config.logging_factory import build_logging_config
    from lsx.logging import configure_logging

    configure_logging(
        build_logging_config(
            config_logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    )


@click.group(cls=ExecutorDispatchGroup)
@click.version_option(package_name="lsx")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.lsx/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: warning).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """LSX - storage executor command line.

    Discovers local block devices, identifies the host, and mounts device
    paths through pluggable per-platform executors.
    """
    from lsx.config import get_config

    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(config_path=config_path)
        except ConfigError as e:
            error_exit(str(e), ExecutorExitCode.FAILED)

    _configure_logging(ctx.obj["config"].logging, log_level, log_file, log_json)


def _register_commands() -> None:
    from lsx.cli.executors import executors_command

    main.add_command(executors_command)


_register_commands()
