"""Pydantic models for executor command output.

Executor binaries print JSON on stdout. These models validate that output on
the client side and render it on the executor side.
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lsx.domain import InstanceID, LocalDevices
from lsx.exceptions import ExecutorOutputError


class InstanceIDModel(BaseModel):
    """Wire form of an InstanceID."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    driver: str
    service: str = ""
    fields: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, value: InstanceID) -> InstanceIDModel:
        return cls(
            id=value.id,
            driver=value.driver,
            service=value.service,
            fields=dict(value.fields),
        )

    def to_domain(self) -> InstanceID:
        return InstanceID(
            id=self.id,
            driver=self.driver,
            service=self.service,
            fields=self.fields,
        )


class LocalDevicesModel(BaseModel):
    """Wire form of a LocalDevices snapshot."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    driver: str
    devices: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, value: LocalDevices) -> LocalDevicesModel:
        return cls(driver=value.driver, devices=dict(value.device_map))

    def to_domain(self) -> LocalDevices:
        return LocalDevices(driver=self.driver, device_map=self.devices)


def dump_instance_id(value: InstanceID) -> str:
    """Render an InstanceID as a JSON line."""
    return InstanceIDModel.from_domain(value).model_dump_json()


def dump_local_devices(value: LocalDevices) -> str:
    """Render a LocalDevices snapshot as a JSON line."""
    return LocalDevicesModel.from_domain(value).model_dump_json()


def load_instance_id(text: str) -> InstanceID:
    """Parse executor output into an InstanceID.

    Raises:
        ExecutorOutputError: If the output is not a valid payload.
    """
    try:
        return InstanceIDModel.model_validate_json(text).to_domain()
    except ValidationError as e:
        raise ExecutorOutputError(f"Invalid instance ID output: {e}") from e


def load_local_devices(text: str) -> LocalDevices:
    """Parse executor output into a LocalDevices snapshot.

    Raises:
        ExecutorOutputError: If the output is not a valid payload.
    """
    try:
        return LocalDevicesModel.model_validate_json(text).to_domain()
    except ValidationError as e:
        raise ExecutorOutputError(f"Invalid local devices output: {e}") from e


def load_next_device(text: str) -> str:
    """Parse executor output into a device name.

    Raises:
        ExecutorOutputError: If the output is not a non-empty JSON string.
    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExecutorOutputError(f"Invalid next device output: {e}") from e
    if not isinstance(value, str) or not value:
        raise ExecutorOutputError(f"Invalid next device output: {text.strip()!r}")
    return value


def load_supported(text: str) -> int:
    """Parse executor output into a supported-operations integer.

    Raises:
        ExecutorOutputError: If the output is not a non-negative integer.
    """
    stripped = text.strip()
    if not (stripped.isascii() and stripped.isdigit()):
        raise ExecutorOutputError(f"Invalid supported output: {stripped!r}")
    return int(stripped)
