"""StorageExecutorCLI built over an in-process executor.

ExecutorCLI adds wait_for_device and the supported-operations mask to any
object satisfying StorageExecutorFunctions, using runtime protocol checks to
discover which optional capabilities the wrapped executor has.
"""

from __future__ import annotations

import logging

from lsx.core.context import Context
from lsx.domain import (
    DeviceMountOpts,
    InstanceID,
    LocalDevices,
    LocalDevicesOpts,
    Store,
    SupportedOp,
    WaitForDeviceOpts,
)
from lsx.exceptions import NotSupportedError
from lsx.executor.commands import Command
from lsx.executor.interface import (
    StorageExecutorFunctions,
    StorageExecutorWithMount,
    StorageExecutorWithSupported,
)
from lsx.executor.wait import DEFAULT_POLL_INTERVAL, wait_for_device

logger = logging.getLogger(__name__)


class ExecutorCLI:
    """Composite executor exposing the full StorageExecutorCLI interface."""

    def __init__(
        self,
        executor: StorageExecutorFunctions,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the composite.

        Args:
            executor: In-process executor providing the base functions.
            poll_interval: Seconds between polls in wait_for_device.
        """
        self._executor = executor
        self._poll_interval = poll_interval

    @property
    def executor(self) -> StorageExecutorFunctions:
        """The wrapped executor."""
        return self._executor

    @property
    def name(self) -> str:
        """Name of the wrapped executor."""
        return getattr(self._executor, "name", type(self._executor).__name__)

    def xcli(self) -> ExecutorCLI:
        return self

    def instance_id(self, ctx: Context, opts: Store) -> InstanceID:
        return self._executor.instance_id(ctx, opts)

    def next_device(self, ctx: Context, opts: Store) -> str:
        return self._executor.next_device(ctx, opts)

    def local_devices(self, ctx: Context, opts: LocalDevicesOpts) -> LocalDevices:
        return self._executor.local_devices(ctx, opts)

    def wait_for_device(
        self,
        ctx: Context,
        opts: WaitForDeviceOpts,
    ) -> tuple[bool, LocalDevices]:
        return wait_for_device(
            ctx,
            self._executor.local_devices,
            opts,
            poll_interval=self._poll_interval,
        )

    def mount(
        self,
        ctx: Context,
        device_name: str,
        mount_point: str,
        opts: DeviceMountOpts,
    ) -> None:
        if not isinstance(self._executor, StorageExecutorWithMount):
            raise NotSupportedError(Command.MOUNT.value, self.name)
        self._executor.mount(ctx, device_name, mount_point, opts)

    def unmount(self, ctx: Context, mount_point: str, opts: Store) -> None:
        if not isinstance(self._executor, StorageExecutorWithMount):
            raise NotSupportedError(Command.UMOUNT.value, self.name)
        self._executor.unmount(ctx, mount_point, opts)

    def supported(self, ctx: Context, opts: Store) -> SupportedOp:
        """Return the operations the wrapped executor supports on this host.

        An executor that provides a supported() probe and reports False
        supports nothing. Otherwise every base operation is supported, and
        mount/umount only if the executor implements the mount extension.

        Args:
            ctx: Call context.
            opts: Executor options.

        Returns:
            Supported operations mask.
        """
        if isinstance(self._executor, StorageExecutorWithSupported):
            if not self._executor.supported(ctx, opts):
                logger.debug("Executor %s is not supported on this host", self.name)
                return SupportedOp.NONE
        if isinstance(self._executor, StorageExecutorWithMount):
            return SupportedOp.ALL
        return SupportedOp.ALL_NO_MOUNT
