"""Domain models for LSX.

These are the data shapes passed between a storage client and a storage
executor. All of them are frozen and short-lived: they are created per call,
passed down, and discarded when the call returns. Mappings are wrapped in
read-only proxies so a snapshot can be shared with concurrent callers.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from lsx.domain.enums import DeviceScanType

# Generic per-call options bag. Keys and values are executor-defined.
Store = Mapping[str, Any]


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    """Copy a mapping into a read-only proxy."""
    return MappingProxyType(dict(mapping or {}))


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class InstanceID:
    """Identifier for the local host, produced by an executor."""

    id: str
    """Opaque instance identifier."""

    driver: str
    """Name of the executor that produced the identifier."""

    service: str = ""
    """Optional name of the storage service the instance belongs to."""

    fields: Mapping[str, str] = field(default_factory=_empty)
    """Additional executor-specific identification fields."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _freeze(self.fields))

    def __str__(self) -> str:
        return f"{self.driver}={self.id}"


@dataclass(frozen=True)
class LocalDevices:
    """Snapshot of the block devices visible to the operating system.

    A fresh snapshot is produced by every enumeration call.
    """

    driver: str
    """Name of the executor that produced the snapshot."""

    device_map: Mapping[str, str] = field(default_factory=_empty)
    """Device path -> volume identifier."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "device_map", _freeze(self.device_map))

    def __len__(self) -> int:
        return len(self.device_map)

    def matches(self, token: str) -> bool:
        """Check whether an attach token appears in this snapshot.

        Args:
            token: Attach token returned by a remote attach call.

        Returns:
            True if the token is a device path or a volume identifier.
        """
        if not token:
            return False
        return token in self.device_map or token in self.device_map.values()


@dataclass(frozen=True)
class LocalDevicesOpts:
    """Options when enumerating local devices."""

    scan_type: DeviceScanType = DeviceScanType.QUICK
    opts: Store = field(default_factory=_empty)

    def __post_init__(self) -> None:
        object.__setattr__(self, "opts", _freeze(self.opts))


@dataclass(frozen=True)
class WaitForDeviceOpts(LocalDevicesOpts):
    """Options when waiting for a specific local device to appear."""

    token: str = ""
    """Value returned by a remote attach call that is expected to show up
    in the local devices list."""

    timeout: float = 0.0
    """Maximum number of seconds to wait. Zero means a single attempt."""

    def __post_init__(self) -> None:
        super().__post_init__()
        if not (math.isfinite(self.timeout) and self.timeout >= 0):
            raise ValueError(
                f"timeout must be a non-negative number, got {self.timeout}"
            )

    @property
    def local_devices_opts(self) -> LocalDevicesOpts:
        """The enumeration options used for each poll."""
        return LocalDevicesOpts(scan_type=self.scan_type, opts=self.opts)


@dataclass(frozen=True)
class DeviceMountOpts:
    """Options when mounting a device."""

    mount_options: str = ""
    """Comma-separated mount options (e.g., "ro,noatime")."""

    mount_label: str = ""
    """Optional label of the file system to mount."""

    opts: Store = field(default_factory=_empty)

    def __post_init__(self) -> None:
        object.__setattr__(self, "opts", _freeze(self.opts))
