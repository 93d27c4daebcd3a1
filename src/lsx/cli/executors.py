"""The ``lsx executors`` command: list registered executors."""

from __future__ import annotations

import json
import logging
from typing import Any

import click

from lsx.core.context import Context
from lsx.domain import SupportedOp
from lsx.exceptions import LSXError
from lsx.executor.registry import get_registry

logger = logging.getLogger(__name__)

_OPERATIONS = (
    "instance_id",
    "next_device",
    "local_devices",
    "wait_for_device",
    "mount",
    "umount",
)


def _describe(mask: SupportedOp) -> str:
    names = [op for op in _OPERATIONS if getattr(mask, op)]
    return ", ".join(names) if names else "not supported"


@click.command("executors")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.pass_context
def executors_command(ctx: click.Context, json_output: bool) -> None:
    """List registered executors and the operations they support here."""
    from lsx.cli.executor import build_cli

    config = ctx.obj["config"]
    registry = get_registry()
    results: list[dict[str, Any]] = []

    for name in registry.names():
        entry: dict[str, Any] = {"name": name}
        try:
            xcli = build_cli(registry.create(name), config.executor.poll_interval)
            mask = xcli.supported(Context.background(), config.executor_options(name))
            entry["supported"] = int(mask)
            entry["operations"] = [op for op in _OPERATIONS if getattr(mask, op)]
        except LSXError as e:
            logger.warning("Cannot probe executor %s: %s", name, e)
            entry["error"] = str(e)
        results.append(entry)

    if json_output:
        click.echo(json.dumps(results, indent=2))
        return

    if not results:
        click.echo("No executors registered.")
        return

    for entry in results:
        if "error" in entry:
            click.echo(f"  {entry['name']}: error: {entry['error']}")
        else:
            mask = SupportedOp(entry["supported"])
            click.echo(f"  {entry['name']}: {_describe(mask)}")
