"""Domain enums for LSX.

This module contains the scan-depth enum used by device enumeration and the
capability bitmask an executor returns from its supported-operations probe.
"""

from __future__ import annotations

import re
from enum import IntEnum, IntFlag
from typing import Any

# Optionally signed ASCII decimal digits, no surrounding whitespace
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class DeviceScanType(IntEnum):
    """Depth of a device enumeration pass.

    The ordinal values are part of the executor command-line protocol:
    a scan type may be passed either by name or by number.
    """

    QUICK = 0  # Shallow, quick scan
    DEEP = 1  # Deep, longer scan

    def __str__(self) -> str:
        return self.name.lower()


def parse_device_scan_type(value: Any) -> DeviceScanType:
    """Parse a loosely-typed value into a DeviceScanType.

    Scan types usually arrive from untyped configuration, so this never
    raises. Any value that is not recognized yields DeviceScanType.QUICK.

    Rules:
    - str: case-insensitive "quick"/"deep", else an ASCII decimal integer
      with no surrounding whitespace
    - int: accepted only if it is a defined ordinal
    - anything else: converted with str() and parsed as text

    Args:
        value: Value to parse.

    Returns:
        The parsed scan type, QUICK on any ambiguity.
    """
    if isinstance(value, DeviceScanType):
        return value
    if isinstance(value, str):
        return _parse_text(value)
    # bool is an int subclass but is not a scan ordinal
    if isinstance(value, int) and not isinstance(value, bool):
        return _parse_ordinal(value)
    return _parse_text(str(value))


def _parse_text(text: str) -> DeviceScanType:
    lowered = text.lower()
    for scan_type in DeviceScanType:
        if lowered == str(scan_type):
            return scan_type
    if _INT_PATTERN.fullmatch(text):
        return _parse_ordinal(int(text))
    return DeviceScanType.QUICK


def _parse_ordinal(ordinal: int) -> DeviceScanType:
    if ordinal in (DeviceScanType.QUICK, DeviceScanType.DEEP):
        return DeviceScanType(ordinal)
    return DeviceScanType.QUICK


class SupportedOp(IntFlag):
    """Bitmask of the operations an executor supports on the current host.

    Returned by an executor's supported-operations probe. The integer value
    is what crosses the process boundary, so bit positions are fixed.
    """

    NONE = 0
    INSTANCE_ID = 1 << 0
    NEXT_DEVICE = 1 << 1
    LOCAL_DEVICES = 1 << 2
    WAIT_FOR_DEVICE = 1 << 3
    MOUNT = 1 << 4
    UMOUNT = 1 << 5

    ALL = (
        INSTANCE_ID | NEXT_DEVICE | LOCAL_DEVICES | WAIT_FOR_DEVICE | MOUNT | UMOUNT
    )
    # For executors running without the privileges to mount
    ALL_NO_MOUNT = ALL & ~MOUNT & ~UMOUNT

    def bit_set(self, bit: SupportedOp) -> bool:
        """Return True if every bit of ``bit`` is set in this mask."""
        return self & bit == bit

    @property
    def instance_id(self) -> bool:
        """True if the executor supports InstanceID."""
        return self.bit_set(SupportedOp.INSTANCE_ID)

    @property
    def next_device(self) -> bool:
        """True if the executor supports NextDevice."""
        return self.bit_set(SupportedOp.NEXT_DEVICE)

    @property
    def local_devices(self) -> bool:
        """True if the executor supports LocalDevices."""
        return self.bit_set(SupportedOp.LOCAL_DEVICES)

    @property
    def wait_for_device(self) -> bool:
        """True if the executor supports WaitForDevice."""
        return self.bit_set(SupportedOp.WAIT_FOR_DEVICE)

    @property
    def mount(self) -> bool:
        """True if the executor supports Mount."""
        return self.bit_set(SupportedOp.MOUNT)

    @property
    def umount(self) -> bool:
        """True if the executor supports Umount."""
        return self.bit_set(SupportedOp.UMOUNT)
