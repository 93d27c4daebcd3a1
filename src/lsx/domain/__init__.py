"""Domain models and enums for LSX.

This package contains the data shapes exchanged between a storage client
and a storage executor:

- Domain enums: DeviceScanType, SupportedOp
- Domain models: InstanceID, LocalDevices, LocalDevicesOpts,
  WaitForDeviceOpts, DeviceMountOpts

Usage:
    from lsx.domain import DeviceScanType, parse_device_scan_type
    from lsx.domain import LocalDevices, WaitForDeviceOpts
"""

from .enums import DeviceScanType, SupportedOp, parse_device_scan_type
from .models import (
    DeviceMountOpts,
    InstanceID,
    LocalDevices,
    LocalDevicesOpts,
    Store,
    WaitForDeviceOpts,
)

__all__ = [
    # Enums
    "DeviceScanType",
    "SupportedOp",
    "parse_device_scan_type",
    # Models
    "DeviceMountOpts",
    "InstanceID",
    "LocalDevices",
    "LocalDevicesOpts",
    "Store",
    "WaitForDeviceOpts",
]
