"""Tests for the ProcessExecutor binding (subprocess calls mocked)."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from lsx.config.models import ExecutorConfig, LSXConfig
from lsx.core.context import Context
from lsx.core.subprocess_utils import CommandResult
from lsx.domain import (
    DeviceMountOpts,
    DeviceScanType,
    LocalDevicesOpts,
    SupportedOp,
    WaitForDeviceOpts,
)
from lsx.exceptions import (
    ContextCancelledError,
    ExecutorError,
    ExecutorFailedError,
    ExecutorOutputError,
    ExecutorTimeoutError,
    NotSupportedError,
)
from lsx.executor import ProcessExecutor, StorageExecutorCLI

DEVICES_JSON = json.dumps({"driver": "vfs", "devices": {"/dev/xvdb": "vol-1"}})


@pytest.fixture
def ctx() -> Context:
    return Context.background()


@pytest.fixture
def mock_run():
    with patch("lsx.executor.process.run_command") as mock:
        yield mock


def result(stdout: str = "", returncode: int = 0, stderr: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr=stderr, returncode=returncode)


class TestArguments:
    """Tests for the command line built for each call."""

    def test_instance_id_argv(self, ctx, mock_run) -> None:
        mock_run.return_value = result('{"id": "i-1", "driver": "vfs"}')
        executor = ProcessExecutor("vfs", binary="/usr/bin/lsx")

        executor.instance_id(ctx, {})

        args = mock_run.call_args.args[0]
        assert args == ["/usr/bin/lsx", "vfs", "instanceID"]
        assert mock_run.call_args.kwargs["ctx"] is ctx

    def test_config_path_is_passed(self, ctx, mock_run) -> None:
        mock_run.return_value = result('"/dev/xvdf"')
        executor = ProcessExecutor("vfs", config_path=Path("/etc/lsx.toml"))

        executor.next_device(ctx, {})

        args = mock_run.call_args.args[0]
        assert args == ["lsx", "--config", Path("/etc/lsx.toml"), "vfs", "nextDevice"]

    def test_local_devices_passes_scan_type(self, ctx, mock_run) -> None:
        mock_run.return_value = result(DEVICES_JSON)
        executor = ProcessExecutor("vfs")

        executor.local_devices(ctx, LocalDevicesOpts(scan_type=DeviceScanType.DEEP))

        assert mock_run.call_args.args[0][-2:] == ["localDevices", "deep"]

    def test_wait_arguments_and_timeout(self, ctx, mock_run) -> None:
        mock_run.return_value = result(DEVICES_JSON)
        executor = ProcessExecutor("vfs", command_timeout=10)

        executor.wait_for_device(ctx, WaitForDeviceOpts(token="vol-1", timeout=1.5))

        assert mock_run.call_args.args[0][-4:] == ["wait", "quick", "vol-1", "1500ms"]
        assert mock_run.call_args.kwargs["timeout"] == pytest.approx(11.5)

    def test_mount_arguments(self, ctx, mock_run) -> None:
        mock_run.return_value = result()
        executor = ProcessExecutor("vfs")

        executor.mount(
            ctx,
            "/dev/xvdb",
            "/mnt/data",
            DeviceMountOpts(mount_options="ro,noatime", mount_label="data"),
        )

        assert mock_run.call_args.args[0][2:] == [
            "mount",
            "-o",
            "ro,noatime",
            "-l",
            "data",
            "/dev/xvdb",
            "/mnt/data",
        ]

    def test_mount_without_options(self, ctx, mock_run) -> None:
        mock_run.return_value = result()
        ProcessExecutor("vfs").mount(ctx, "/dev/xvdb", "/mnt/data", DeviceMountOpts())

        assert mock_run.call_args.args[0][2:] == ["mount", "/dev/xvdb", "/mnt/data"]

    def test_umount_arguments(self, ctx, mock_run) -> None:
        mock_run.return_value = result()
        ProcessExecutor("vfs").unmount(ctx, "/mnt/data", {})

        assert mock_run.call_args.args[0][2:] == ["umount", "/mnt/data"]

    def test_from_config(self, ctx, mock_run) -> None:
        mock_run.return_value = result('"/dev/xvdf"')
        config = LSXConfig(
            executor=ExecutorConfig(binary="/opt/lsx/bin/lsx", command_timeout=5)
        )
        executor = ProcessExecutor.from_config(
            "vfs", config, config_path=Path("/etc/lsx.toml")
        )

        executor.next_device(ctx, {})

        assert mock_run.call_args.args[0] == [
            "/opt/lsx/bin/lsx",
            "--config",
            Path("/etc/lsx.toml"),
            "vfs",
            "nextDevice",
        ]
        assert mock_run.call_args.kwargs["timeout"] == 5


class TestOutput:
    """Tests for parsing successful output."""

    def test_instance_id(self, ctx, mock_run) -> None:
        mock_run.return_value = result(
            '{"id": "i-1", "driver": "vfs", "fields": {"zone": "a"}}\n'
        )
        instance = ProcessExecutor("vfs").instance_id(ctx, {})

        assert instance.id == "i-1"
        assert instance.driver == "vfs"
        assert instance.fields["zone"] == "a"

    def test_next_device(self, ctx, mock_run) -> None:
        mock_run.return_value = result('"/dev/xvdf"\n')
        assert ProcessExecutor("vfs").next_device(ctx, {}) == "/dev/xvdf"

    def test_local_devices(self, ctx, mock_run) -> None:
        mock_run.return_value = result(DEVICES_JSON)
        devices = ProcessExecutor("vfs").local_devices(ctx, LocalDevicesOpts())

        assert devices.device_map == {"/dev/xvdb": "vol-1"}

    def test_malformed_output(self, ctx, mock_run) -> None:
        mock_run.return_value = result("not json")
        with pytest.raises(ExecutorOutputError):
            ProcessExecutor("vfs").local_devices(ctx, LocalDevicesOpts())


class TestExitCodes:
    """Tests for exit code mapping."""

    def test_not_implemented(self, ctx, mock_run) -> None:
        mock_run.return_value = result(returncode=2)
        with pytest.raises(NotSupportedError) as exc_info:
            ProcessExecutor("vfs").next_device(ctx, {})

        assert exc_info.value.operation == "nextDevice"
        assert exc_info.value.executor == "vfs"

    def test_timed_out(self, ctx, mock_run) -> None:
        mock_run.return_value = result(returncode=255)
        with pytest.raises(ExecutorTimeoutError):
            ProcessExecutor("vfs").instance_id(ctx, {})

    def test_other_failure(self, ctx, mock_run) -> None:
        mock_run.return_value = result(returncode=1, stderr="Error: boom\n")
        with pytest.raises(ExecutorFailedError) as exc_info:
            ProcessExecutor("vfs").unmount(ctx, "/mnt/data", {})

        assert exc_info.value.exit_code == 1
        assert "boom" in str(exc_info.value)

    def test_wait_found(self, ctx, mock_run) -> None:
        mock_run.return_value = result(DEVICES_JSON)
        found, devices = ProcessExecutor("vfs").wait_for_device(
            ctx, WaitForDeviceOpts(token="vol-1", timeout=1)
        )

        assert found is True
        assert devices.matches("vol-1")

    def test_wait_timed_out_is_not_an_error(self, ctx, mock_run) -> None:
        mock_run.return_value = result(
            json.dumps({"driver": "vfs", "devices": {}}), returncode=255
        )
        found, devices = ProcessExecutor("vfs").wait_for_device(
            ctx, WaitForDeviceOpts(token="vol-1", timeout=1)
        )

        assert found is False
        assert len(devices) == 0

    def test_wait_timed_out_without_snapshot(self, ctx, mock_run) -> None:
        mock_run.return_value = result(returncode=255, stderr="Error: deadline\n")
        with pytest.raises(ExecutorTimeoutError, match="deadline"):
            ProcessExecutor("vfs").wait_for_device(
                ctx, WaitForDeviceOpts(token="vol-1", timeout=1)
            )

    def test_wait_failure(self, ctx, mock_run) -> None:
        mock_run.return_value = result(returncode=1, stderr="scan failed")
        with pytest.raises(ExecutorFailedError):
            ProcessExecutor("vfs").wait_for_device(
                ctx, WaitForDeviceOpts(token="vol-1", timeout=1)
            )

    def test_subprocess_timeout(self, ctx, mock_run) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="lsx", timeout=60)
        with pytest.raises(ExecutorTimeoutError):
            ProcessExecutor("vfs").instance_id(ctx, {})

    def test_missing_binary(self, ctx, mock_run) -> None:
        mock_run.side_effect = FileNotFoundError("lsx")
        with pytest.raises(ExecutorError, match="cannot launch"):
            ProcessExecutor("vfs").instance_id(ctx, {})

    def test_cancelled_context_skips_launch(self, mock_run) -> None:
        ctx = Context.background().with_cancel()
        ctx.cancel()
        with pytest.raises(ContextCancelledError):
            ProcessExecutor("vfs").instance_id(ctx, {})
        mock_run.assert_not_called()


class TestSupported:
    """Tests for the supported probe."""

    def test_mask_is_parsed(self, ctx, mock_run) -> None:
        mock_run.return_value = result(f"{int(SupportedOp.ALL_NO_MOUNT)}\n")
        assert ProcessExecutor("vfs").supported(ctx, {}) == SupportedOp.ALL_NO_MOUNT

    def test_unknown_bits_are_dropped(self, ctx, mock_run) -> None:
        mock_run.return_value = result(str(int(SupportedOp.ALL) | 1024))
        assert ProcessExecutor("vfs").supported(ctx, {}) == SupportedOp.ALL

    def test_not_implemented_means_none(self, ctx, mock_run) -> None:
        mock_run.return_value = result(returncode=2)
        assert ProcessExecutor("vfs").supported(ctx, {}) == SupportedOp.NONE

    def test_result_is_cached(self, ctx, mock_run) -> None:
        mock_run.return_value = result(str(int(SupportedOp.ALL)))
        executor = ProcessExecutor("vfs")

        executor.supported(ctx, {})
        executor.supported(ctx, {})

        assert mock_run.call_count == 1

    def test_failure_is_not_cached(self, ctx, mock_run) -> None:
        mock_run.return_value = result(returncode=1)
        executor = ProcessExecutor("vfs")

        with pytest.raises(ExecutorFailedError):
            executor.supported(ctx, {})

        mock_run.return_value = result(str(int(SupportedOp.ALL)))
        assert executor.supported(ctx, {}) == SupportedOp.ALL

    def test_invalid_output(self, ctx, mock_run) -> None:
        mock_run.return_value = result("all")
        with pytest.raises(ExecutorOutputError):
            ProcessExecutor("vfs").supported(ctx, {})


def test_satisfies_cli_protocol() -> None:
    assert isinstance(ProcessExecutor("vfs"), StorageExecutorCLI)
