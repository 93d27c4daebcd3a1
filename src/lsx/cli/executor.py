"""Executor commands: ``lsx <executor> <command> [args...]``.

Each command prints its result as JSON on stdout and reports failures
through the reserved exit codes (2 = not implemented, 255 = timed out).
"""

from __future__ import annotations

import json
import logging
import signal
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import click

from lsx.core.context import Context
from lsx.core.durations import parse_duration
from lsx.domain import (
    DeviceMountOpts,
    LocalDevicesOpts,
    WaitForDeviceOpts,
    parse_device_scan_type,
)
from lsx.exceptions import ExecutorNotFoundError
from lsx.executor.cli_adapter import ExecutorCLI
from lsx.executor.commands import Command, ExecutorExitCode
from lsx.executor.interface import ProvidesStorageExecutorCLI, StorageExecutorCLI
from lsx.executor.registry import get_registry
from lsx.executor.wire import dump_instance_id, dump_local_devices
from lsx.logging import operation_context

from .output import error_exit, exit_on_executor_error

logger = logging.getLogger(__name__)


class DurationParamType(click.ParamType):
    """Click parameter accepting "30", "500ms", "2m" and similar."""

    name = "duration"

    def convert(self, value: Any, param: Any, ctx: Any) -> float:
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return parse_duration(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


DURATION = DurationParamType()


def build_cli(executor: Any, poll_interval: float) -> StorageExecutorCLI:
    """Return the StorageExecutorCLI for an executor instance.

    Executors that provide their own composite through xcli() are used as
    is; any other executor is wrapped in ExecutorCLI.
    """
    if isinstance(executor, ProvidesStorageExecutorCLI):
        return executor.xcli()
    return ExecutorCLI(executor, poll_interval=poll_interval)


@contextmanager
def cancel_on_signals(ctx: Context) -> Generator[None, None, None]:
    """Cancel the context on SIGINT/SIGTERM for the duration of the block."""

    def _handler(signum: int, frame: Any) -> None:
        logger.info("Received %s, cancelling", signal.Signals(signum).name)
        ctx.cancel()

    previous = {
        sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@click.group("executor")
@click.pass_context
def executor_group(ctx: click.Context) -> None:
    """Run a command against the executor named on the command line."""
    name = ctx.info_name or ""
    config = ctx.obj["config"]

    try:
        executor = get_registry().create(name)
    except ExecutorNotFoundError as e:
        error_exit(str(e), ExecutorExitCode.FAILED)

    ctx.obj["executor_name"] = name
    ctx.obj["xcli"] = build_cli(executor, config.executor.poll_interval)
    ctx.obj["opts"] = config.executor_options(name)


def _executor_state(ctx: click.Context) -> tuple[str, StorageExecutorCLI, dict]:
    return ctx.obj["executor_name"], ctx.obj["xcli"], ctx.obj["opts"]


@executor_group.command(Command.SUPPORTED.value)
@click.pass_context
def supported_command(ctx: click.Context) -> None:
    """Print the mask of operations supported on this host."""
    name, xcli, opts = _executor_state(ctx)
    with operation_context(name, Command.SUPPORTED.value), exit_on_executor_error():
        mask = xcli.supported(Context.background(), opts)
    click.echo(int(mask))


@executor_group.command(Command.INSTANCE_ID.value)
@click.pass_context
def instance_id_command(ctx: click.Context) -> None:
    """Print the local instance ID."""
    name, xcli, opts = _executor_state(ctx)
    with operation_context(name, Command.INSTANCE_ID.value), exit_on_executor_error():
        instance = xcli.instance_id(Context.background(), opts)
    click.echo(dump_instance_id(instance))


@executor_group.command(Command.NEXT_DEVICE.value)
@click.pass_context
def next_device_command(ctx: click.Context) -> None:
    """Print the next available device name."""
    name, xcli, opts = _executor_state(ctx)
    with operation_context(name, Command.NEXT_DEVICE.value), exit_on_executor_error():
        device = xcli.next_device(Context.background(), opts)
    click.echo(json.dumps(device))


@executor_group.command(Command.LOCAL_DEVICES.value)
@click.argument("scan_type", required=False, default="quick")
@click.pass_context
def local_devices_command(ctx: click.Context, scan_type: str) -> None:
    """Print the local devices map.

    SCAN_TYPE is "quick" (default) or "deep", by name or number.
    """
    name, xcli, opts = _executor_state(ctx)
    ld_opts = LocalDevicesOpts(scan_type=parse_device_scan_type(scan_type), opts=opts)
    with operation_context(name, Command.LOCAL_DEVICES.value), exit_on_executor_error():
        devices = xcli.local_devices(Context.background(), ld_opts)
    click.echo(dump_local_devices(devices))


@executor_group.command(Command.WAIT.value)
@click.argument("scan_type")
@click.argument("attach_token")
@click.argument("timeout", type=DURATION, required=False)
@click.pass_context
def wait_command(
    ctx: click.Context,
    scan_type: str,
    attach_token: str,
    timeout: float | None,
) -> None:
    """Wait until ATTACH_TOKEN appears in the local devices map.

    Prints the last local devices map. Exits 255 if TIMEOUT elapses first.
    TIMEOUT is seconds or a duration such as 500ms, 30s or 2m, and defaults
    to the configured default_timeout.
    """
    name, xcli, opts = _executor_state(ctx)
    if timeout is None:
        timeout = ctx.obj["config"].executor.default_timeout
    wait_opts = WaitForDeviceOpts(
        scan_type=parse_device_scan_type(scan_type),
        opts=opts,
        token=attach_token,
        timeout=timeout,
    )
    lsx_ctx = Context.background().with_cancel()
    with (
        operation_context(name, Command.WAIT.value),
        exit_on_executor_error(),
        cancel_on_signals(lsx_ctx),
    ):
        found, devices = xcli.wait_for_device(lsx_ctx, wait_opts)
    click.echo(dump_local_devices(devices))
    if not found:
        ctx.exit(int(ExecutorExitCode.TIMED_OUT))


@executor_group.command(Command.MOUNT.value)
@click.option("-o", "--options", "mount_options", default="", help="Mount options.")
@click.option("-l", "--label", "mount_label", default="", help="File system label.")
@click.argument("device")
@click.argument("path")
@click.pass_context
def mount_command(
    ctx: click.Context,
    mount_options: str,
    mount_label: str,
    device: str,
    path: str,
) -> None:
    """Mount DEVICE to PATH."""
    name, xcli, opts = _executor_state(ctx)
    mount_opts = DeviceMountOpts(
        mount_options=mount_options, mount_label=mount_label, opts=opts
    )
    with operation_context(name, Command.MOUNT.value), exit_on_executor_error():
        xcli.mount(Context.background(), device, path, mount_opts)


@executor_group.command(Command.UMOUNT.value)
@click.argument("path")
@click.pass_context
def umount_command(ctx: click.Context, path: str) -> None:
    """Unmount the file system mounted at PATH."""
    name, xcli, opts = _executor_state(ctx)
    with operation_context(name, Command.UMOUNT.value), exit_on_executor_error():
        xcli.unmount(Context.background(), path, opts)
