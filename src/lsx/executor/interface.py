"""Executor capability protocols.

An executor is any object that satisfies StorageExecutorFunctions. Optional
features are separate protocols that an executor may or may not satisfy;
they are detected at runtime with isinstance(), never through inheritance.

API Version: 1.0.0
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

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


@runtime_checkable
class StorageExecutorFunctions(Protocol):
    """Functions required of every storage executor."""

    def instance_id(self, ctx: Context, opts: Store) -> InstanceID:
        """Return the local system's instance ID.

        Args:
            ctx: Call context.
            opts: Executor options.

        Returns:
            InstanceID of the local host.
        """
        ...

    def next_device(self, ctx: Context, opts: Store) -> str:
        """Return the next available device name.

        Args:
            ctx: Call context.
            opts: Executor options.

        Returns:
            Device name suitable for attaching a new volume to.

        Raises:
            NotSupportedError: If the platform has no notion of a next device.
        """
        ...

    def local_devices(self, ctx: Context, opts: LocalDevicesOpts) -> LocalDevices:
        """Return a snapshot of the system's local devices.

        Args:
            ctx: Call context.
            opts: Scan type and executor options.

        Returns:
            A fresh LocalDevices snapshot.
        """
        ...


@runtime_checkable
class StorageExecutor(StorageExecutorFunctions, Protocol):
    """A named storage executor.

    Required attributes:
        name: str - Executor (driver) name, e.g. "vfs"
    """

    name: str


@runtime_checkable
class StorageExecutorWithSupported(StorageExecutorFunctions, Protocol):
    """Executors that can report whether they apply to the current host.

    An executor binary may be built for several storage platforms; this
    probe tells the client whether the base functions can be trusted here.
    """

    def supported(self, ctx: Context, opts: Store) -> bool:
        """Return True if the executor's platform is valid for this host."""
        ...


@runtime_checkable
class StorageExecutorWithMount(Protocol):
    """Executors that take part in the mount/unmount workflow."""

    def mount(
        self,
        ctx: Context,
        device_name: str,
        mount_point: str,
        opts: DeviceMountOpts,
    ) -> None:
        """Mount a device to a file system path.

        Raises:
            MountError: If the device cannot be mounted.
        """
        ...

    def unmount(self, ctx: Context, mount_point: str, opts: Store) -> None:
        """Unmount the device mounted at a file system path.

        Raises:
            MountError: If the path cannot be unmounted.
        """
        ...


@runtime_checkable
class StorageExecutorCLI(StorageExecutorFunctions, StorageExecutorWithMount, Protocol):
    """The interface a command-line tool or client library is built against.

    Callers talking to an executor of unknown provenance must consult
    supported() before relying on mount/unmount or wait_for_device.
    """

    def wait_for_device(
        self,
        ctx: Context,
        opts: WaitForDeviceOpts,
    ) -> tuple[bool, LocalDevices]:
        """Block until the attach token appears in local devices.

        Returns:
            Tuple of (matched, snapshot) where snapshot is the result of the
            last local devices call before a match or the timeout.

        Raises:
            ContextError: If the context is cancelled or its deadline passes.
        """
        ...

    def supported(self, ctx: Context, opts: Store) -> SupportedOp:
        """Return the mask of operations supported on the current host."""
        ...


@runtime_checkable
class ProvidesStorageExecutorCLI(Protocol):
    """Objects that can provide a StorageExecutorCLI."""

    def xcli(self) -> StorageExecutorCLI:
        """Return the StorageExecutorCLI."""
        ...
