"""Shared test fixtures for LSX."""

import json
import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from lsx.config import LSXConfig, clear_config_cache
from lsx.executor.registry import reset_registry


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_lsx_env(temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
    """Point LSX at a temporary data directory and reset module caches."""
    for var in (
        "LSX_CONFIG_PATH",
        "LSX_POLL_INTERVAL",
        "LSX_DEFAULT_TIMEOUT",
        "LSX_EXECUTOR_BINARY",
        "LSX_COMMAND_TIMEOUT",
        "LSX_LOG_LEVEL",
        "LSX_LOG_FILE",
        "LSX_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LSX_DATA_DIR", str(temp_dir / "data"))
    clear_config_cache()
    reset_registry()
    yield
    clear_config_cache()
    reset_registry()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop handlers installed by configure_logging during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def vfs_root(temp_dir: Path) -> Path:
    """Create a vfs executor root with two attached devices."""
    root = temp_dir / "vfs"
    root.mkdir()
    (root / "devices.json").write_text(
        json.dumps({"/dev/xvdb": "vol-0001", "/dev/xvdc": "vol-0002"})
    )
    return root


@pytest.fixture
def vfs_config(vfs_root: Path) -> LSXConfig:
    """LSXConfig pointing the vfs executor at vfs_root with fast polling."""
    config = LSXConfig(executors={"vfs": {"root": str(vfs_root)}})
    config.executor.poll_interval = 0.01
    return config


@pytest.fixture
def write_devices():
    """Return a helper that writes a vfs devices.json file."""

    def _write(root: Path, devices: dict[str, str]) -> None:
        (root / "devices.json").write_text(json.dumps(devices))

    return _write
