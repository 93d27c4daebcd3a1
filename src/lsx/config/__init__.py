"""Configuration package for LSX.

Usage:
    from lsx.config import get_config
    config = get_config()
    config.executor.poll_interval
"""

from lsx.config.env import EnvReader
from lsx.config.loader import (
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from lsx.config.models import ExecutorConfig, LoggingConfig, LSXConfig

__all__ = [
    "EnvReader",
    "ExecutorConfig",
    "LSXConfig",
    "LoggingConfig",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
]
