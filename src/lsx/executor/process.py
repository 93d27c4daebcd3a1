"""Client binding that runs an executor binary per call.

ProcessExecutor implements StorageExecutorCLI by launching
``<binary> [--config FILE] <executor> <command> [args...]`` for every call
and mapping the reserved exit codes back to structured results:

- 0: success, stdout holds the JSON payload
- 2 (NOT_IMPLEMENTED): NotSupportedError
- 255 (TIMED_OUT): a normal "not found" result from ``wait`` when a
  snapshot was printed, ExecutorTimeoutError otherwise
- anything else: ExecutorFailedError

No process state is shared between calls. The per-call options Store is not
forwarded; executor options come from the executor's own configuration.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - TimeoutExpired handling
from pathlib import Path
from typing import TYPE_CHECKING

from lsx.core.context import Context
from lsx.core.durations import format_duration
from lsx.core.subprocess_utils import CommandResult, run_command
from lsx.domain import (
    DeviceMountOpts,
    InstanceID,
    LocalDevices,
    LocalDevicesOpts,
    Store,
    SupportedOp,
    WaitForDeviceOpts,
)
from lsx.exceptions import (
    ExecutorError,
    ExecutorFailedError,
    ExecutorTimeoutError,
    NotSupportedError,
)
from lsx.executor.commands import Command, ExecutorExitCode
from lsx.executor.wire import (
    load_instance_id,
    load_local_devices,
    load_next_device,
    load_supported,
)

if TYPE_CHECKING:
    from lsx.config.models import LSXConfig

logger = logging.getLogger(__name__)

# Default limit for a single executor command, in seconds
DEFAULT_COMMAND_TIMEOUT = 60.0


class ProcessExecutor:
    """StorageExecutorCLI backed by an external executor binary."""

    def __init__(
        self,
        name: str,
        binary: str | Path = "lsx",
        command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
        config_path: Path | None = None,
    ) -> None:
        """Initialize the binding.

        Args:
            name: Executor name passed as the first argument to the binary.
            binary: Path or name of the executor binary.
            command_timeout: Limit in seconds for a single command. For
                ``wait`` it is added to the wait timeout as a grace period.
            config_path: Optional config file passed to the binary.
        """
        self.name = name
        self._binary = binary
        self._command_timeout = command_timeout
        self._config_path = config_path
        self._supported: SupportedOp | None = None

    @classmethod
    def from_config(
        cls,
        name: str,
        config: LSXConfig,
        config_path: Path | None = None,
    ) -> ProcessExecutor:
        """Build a binding from the ``[executor]`` settings.

        Uses ``binary`` and ``command_timeout``. config_path is forwarded
        to the binary so it reads the same executor option tables.
        """
        return cls(
            name,
            binary=config.executor.binary,
            command_timeout=config.executor.command_timeout,
            config_path=config_path,
        )

    def xcli(self) -> ProcessExecutor:
        return self

    def instance_id(self, ctx: Context, opts: Store) -> InstanceID:
        result = self._run(ctx, Command.INSTANCE_ID)
        self._check(Command.INSTANCE_ID, result)
        return load_instance_id(result.stdout)

    def next_device(self, ctx: Context, opts: Store) -> str:
        result = self._run(ctx, Command.NEXT_DEVICE)
        self._check(Command.NEXT_DEVICE, result)
        return load_next_device(result.stdout)

    def local_devices(self, ctx: Context, opts: LocalDevicesOpts) -> LocalDevices:
        result = self._run(ctx, Command.LOCAL_DEVICES, str(opts.scan_type))
        self._check(Command.LOCAL_DEVICES, result)
        return load_local_devices(result.stdout)

    def wait_for_device(
        self,
        ctx: Context,
        opts: WaitForDeviceOpts,
    ) -> tuple[bool, LocalDevices]:
        """Wait for an attach token using the executor's ``wait`` command.

        The poll loop runs inside the executor process. A timed-out wait is
        reported as (False, last snapshot). Exit code 255 with no snapshot
        on stdout means the executor itself timed out, which raises
        ExecutorTimeoutError.
        """
        result = self._run(
            ctx,
            Command.WAIT,
            str(opts.scan_type),
            opts.token,
            format_duration(opts.timeout),
            timeout=opts.timeout + self._command_timeout,
        )
        if result.returncode == ExecutorExitCode.TIMED_OUT:
            if not result.stdout.strip():
                raise ExecutorTimeoutError(
                    f"executor {self.name} command {Command.WAIT} timed out: "
                    f"{result.stderr.strip() or 'no output'}"
                )
            logger.debug("Executor %s timed out waiting for %s", self.name, opts.token)
            return False, load_local_devices(result.stdout)
        self._check(Command.WAIT, result)
        return True, load_local_devices(result.stdout)

    def mount(
        self,
        ctx: Context,
        device_name: str,
        mount_point: str,
        opts: DeviceMountOpts,
    ) -> None:
        args: list[str] = []
        if opts.mount_options:
            args.extend(["-o", opts.mount_options])
        if opts.mount_label:
            args.extend(["-l", opts.mount_label])
        args.extend([device_name, mount_point])
        result = self._run(ctx, Command.MOUNT, *args)
        self._check(Command.MOUNT, result)

    def unmount(self, ctx: Context, mount_point: str, opts: Store) -> None:
        result = self._run(ctx, Command.UMOUNT, mount_point)
        self._check(Command.UMOUNT, result)

    def supported(self, ctx: Context, opts: Store) -> SupportedOp:
        """Return the executor's supported-operations mask.

        The mask does not change between invocations on a stable host, so
        it is cached after the first successful probe. An executor that
        does not implement the probe supports nothing.
        """
        if self._supported is not None:
            return self._supported
        result = self._run(ctx, Command.SUPPORTED)
        try:
            self._check(Command.SUPPORTED, result)
        except NotSupportedError:
            self._supported = SupportedOp.NONE
            return self._supported
        self._supported = SupportedOp(load_supported(result.stdout) & SupportedOp.ALL)
        return self._supported

    def _argv(self, command: Command, *args: str) -> list[str | Path]:
        argv: list[str | Path] = [self._binary]
        if self._config_path is not None:
            argv.extend(["--config", self._config_path])
        argv.extend([self.name, command.value, *args])
        return argv

    def _run(
        self,
        ctx: Context,
        command: Command,
        *args: str,
        timeout: float | None = None,
    ) -> CommandResult:
        ctx.raise_if_done()
        limit = self._command_timeout if timeout is None else timeout
        try:
            return run_command(self._argv(command, *args), timeout=limit, ctx=ctx)
        except subprocess.TimeoutExpired as e:
            raise ExecutorTimeoutError(
                f"executor {self.name} command {command} did not finish "
                f"within {limit:.1f}s"
            ) from e
        except OSError as e:
            raise ExecutorError(
                f"cannot launch executor binary {self._binary}: {e}"
            ) from e

    def _check(self, command: Command, result: CommandResult) -> None:
        if result.returncode == ExecutorExitCode.SUCCESS:
            return
        if result.returncode == ExecutorExitCode.NOT_IMPLEMENTED:
            raise NotSupportedError(command.value, self.name)
        if result.returncode == ExecutorExitCode.TIMED_OUT:
            raise ExecutorTimeoutError(
                f"executor {self.name} command {command} timed out"
            )
        raise ExecutorFailedError(command.value, result.returncode, result.stderr)
