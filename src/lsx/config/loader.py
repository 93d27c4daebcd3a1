"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (applied by the caller)
2. Environment variables (LSX_*)
3. Config file (~/.lsx/config.toml)
4. Default values

Environment variables:
- LSX_CONFIG_PATH: Path to config file (overrides default location)
- LSX_DATA_DIR: Path to LSX data directory (overrides ~/.lsx/)
- LSX_POLL_INTERVAL: Seconds between device polls while waiting
- LSX_DEFAULT_TIMEOUT: Default wait timeout in seconds
- LSX_EXECUTOR_BINARY: Executor binary used by the process binding
- LSX_COMMAND_TIMEOUT: Limit for a single executor command in seconds
- LSX_LOG_LEVEL: Log level (debug, info, warning, error)
- LSX_LOG_FILE: Log file path
- LSX_LOG_FORMAT: Log format (text, json)
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

from lsx.config.env import EnvReader
from lsx.config.models import ExecutorConfig, LoggingConfig, LSXConfig
from lsx.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".lsx"
CONFIG_FILE_NAME = "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the LSX data directory (~/.lsx/ unless LSX_DATA_DIR is set)."""
    reader = env_reader or EnvReader()
    return reader.get_path("LSX_DATA_DIR", DEFAULT_DATA_DIR) or DEFAULT_DATA_DIR


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path.

    LSX_CONFIG_PATH takes precedence over <data dir>/config.toml.
    """
    reader = env_reader or EnvReader()
    env_path = reader.get_path("LSX_CONFIG_PATH")
    if env_path is not None:
        return env_path
    return get_data_dir(reader) / CONFIG_FILE_NAME


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Results are cached and reloaded when the file's mtime changes.

    Args:
        path: Path to config file.
        strict: If True, raise ConfigError on read or parse failures.
                If False (default), log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be read or parsed.
    """
    try:
        mtime = path.stat().st_mtime
    except FileNotFoundError:
        return {}
    except OSError as e:
        return _load_failed(path, e, strict)

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == mtime:
            return cached[0]

        try:
            with path.open("rb") as f:
                result = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            return _load_failed(path, e, strict)

        _config_cache[path] = (result, mtime)
        return result


def _load_failed(path: Path, error: Exception, strict: bool) -> dict[str, Any]:
    if strict:
        raise ConfigError(f"Cannot load config file {path}: {error}") from error
    logger.warning("Ignoring unreadable config file %s: %s", path, error)
    return {}


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> LSXConfig:
    """Get LSX configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides LSX_CONFIG_PATH).
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigError on config file parse failures.

    Returns:
        LSXConfig with merged configuration.

    Raises:
        ConfigError: If the merged configuration is invalid, or the file
            cannot be parsed and strict=True.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path, strict=strict)

    executor_table = _table(file_config, "executor")
    logging_table = _table(file_config, "logging")
    executors_table = _table(file_config, "executors")

    defaults = ExecutorConfig()
    try:
        executor = ExecutorConfig(
            poll_interval=reader.get_float(
                "LSX_POLL_INTERVAL",
                float(executor_table.get("poll_interval", defaults.poll_interval)),
            ),
            default_timeout=reader.get_float(
                "LSX_DEFAULT_TIMEOUT",
                float(executor_table.get("default_timeout", defaults.default_timeout)),
            ),
            binary=reader.get_str(
                "LSX_EXECUTOR_BINARY",
                str(executor_table.get("binary", defaults.binary)),
            ),
            command_timeout=reader.get_float(
                "LSX_COMMAND_TIMEOUT",
                float(executor_table.get("command_timeout", defaults.command_timeout)),
            ),
        )

        log_defaults = LoggingConfig()
        file_log_path = logging_table.get("file")
        log_config = LoggingConfig(
            level=reader.get_str(
                "LSX_LOG_LEVEL", str(logging_table.get("level", log_defaults.level))
            ),
            file=reader.get_path(
                "LSX_LOG_FILE",
                Path(file_log_path).expanduser() if file_log_path else None,
            ),
            format=reader.get_str(
                "LSX_LOG_FORMAT", str(logging_table.get("format", log_defaults.format))
            ),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    executors = {
        name: dict(options)
        for name, options in executors_table.items()
        if isinstance(options, dict)
    }

    return LSXConfig(executor=executor, logging=log_config, executors=executors)


def _table(config: dict[str, Any], name: str) -> dict[str, Any]:
    value = config.get(name, {})
    if not isinstance(value, dict):
        logger.warning("Ignoring config section [%s]: not a table", name)
        return {}
    return value
