"""Directory-backed reference executor.

The vfs executor keeps its "devices" in plain files so storage clients can
be exercised without real block devices:

    <root>/instance-id      optional instance id (defaults to the host name)
    <root>/devices.json     {"<device path>": "<volume id>", ...}
    <root>/devices.d/*.json extra device maps, only read by deep scans
    <root>/mounts.json      {"<mount point>": "<device path>", ...}

The root directory comes from the ``root`` executor option and defaults to
``<data dir>/vfs``.
"""

from __future__ import annotations

import logging
import os
import socket
import string
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from lsx.core.context import Context
from lsx.domain import (
    DeviceMountOpts,
    DeviceScanType,
    InstanceID,
    LocalDevices,
    LocalDevicesOpts,
    Store,
)
from lsx.exceptions import ExecutorError, MountError

logger = logging.getLogger(__name__)

INSTANCE_ID_FILE = "instance-id"
DEVICES_FILE = "devices.json"
DEVICES_DIR = "devices.d"
MOUNTS_FILE = "mounts.json"

# Candidate names handed out by next_device, in order
DEVICE_PREFIX = "/dev/xvd"
DEVICE_LETTERS = string.ascii_lowercase[1:]

_PATH_MAP = TypeAdapter(dict[str, str])


class VFSExecutor:
    """Reference executor storing devices and mounts as JSON files."""

    name = "vfs"

    def supported(self, ctx: Context, opts: Store) -> bool:
        root = self._root(opts)
        return root.is_dir()

    def instance_id(self, ctx: Context, opts: Store) -> InstanceID:
        hostname = socket.gethostname()
        id_file = self._root(opts) / INSTANCE_ID_FILE
        try:
            instance = id_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            instance = ""
        except OSError as e:
            raise ExecutorError(f"Cannot read {id_file}: {e}") from e
        return InstanceID(
            id=instance or hostname,
            driver=self.name,
            fields={"hostname": hostname},
        )

    def next_device(self, ctx: Context, opts: Store) -> str:
        """Return the first /dev/xvd[b-z] name not present in devices.json.

        Raises:
            ExecutorError: If every candidate name is taken.
        """
        taken = self._read_map(self._root(opts) / DEVICES_FILE)
        for letter in DEVICE_LETTERS:
            candidate = f"{DEVICE_PREFIX}{letter}"
            if candidate not in taken:
                return candidate
        raise ExecutorError("No available device names")

    def local_devices(self, ctx: Context, opts: LocalDevicesOpts) -> LocalDevices:
        root = self._root(opts.opts)
        device_map = self._read_map(root / DEVICES_FILE)
        if opts.scan_type == DeviceScanType.DEEP:
            extra_dir = root / DEVICES_DIR
            if extra_dir.is_dir():
                for path in sorted(extra_dir.glob("*.json")):
                    device_map.update(self._read_map(path))
        logger.debug(
            "Found %d local device(s) with %s scan",
            len(device_map),
            opts.scan_type,
        )
        return LocalDevices(driver=self.name, device_map=device_map)

    def mount(
        self,
        ctx: Context,
        device_name: str,
        mount_point: str,
        opts: DeviceMountOpts,
    ) -> None:
        root = self._root(opts.opts)
        devices = self._read_map(root / DEVICES_FILE)
        if device_name not in devices:
            raise MountError(f"Unknown device: {device_name}")

        mounts_file = root / MOUNTS_FILE
        mounts = self._read_map(mounts_file)
        if mount_point in mounts:
            raise MountError(
                f"Mount point {mount_point} is busy (device {mounts[mount_point]})"
            )
        mounts[mount_point] = device_name
        self._write_map(mounts_file, mounts)
        logger.info("Mounted %s at %s", device_name, mount_point)

    def unmount(self, ctx: Context, mount_point: str, opts: Store) -> None:
        mounts_file = self._root(opts) / MOUNTS_FILE
        mounts = self._read_map(mounts_file)
        if mount_point not in mounts:
            raise MountError(f"Not mounted: {mount_point}")
        del mounts[mount_point]
        self._write_map(mounts_file, mounts)
        logger.info("Unmounted %s", mount_point)

    def _root(self, opts: Store) -> Path:
        root = opts.get("root")
        if root:
            return Path(root).expanduser()

        from lsx.config.loader import get_data_dir

        return get_data_dir() / "vfs"

    def _read_map(self, path: Path) -> dict[str, str]:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise ExecutorError(f"Cannot read {path}: {e}") from e
        try:
            return _PATH_MAP.validate_json(raw)
        except ValidationError as e:
            raise ExecutorError(f"Invalid device map in {path}: {e}") from e

    def _write_map(self, path: Path, values: dict[str, str]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(_PATH_MAP.dump_json(values, indent=2))
                os.replace(tmp_name, path)
            except Exception:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ExecutorError(f"Cannot write {path}: {e}") from e
