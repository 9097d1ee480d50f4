"""
Configuration package.

This module provides:
- load_config() for reading YAML configuration with environment overrides
- get_config()/set_config() for the process-wide configuration
- Pydantic schemas describing every setting
"""

from .config import collect_env_overrides, get_config, load_config, set_config
from .constants import CONFIG_FILE_ENV, DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES
from .schemas import LoggingConfig, PoolConfig, ProcessConfig, ShellConfig

__all__ = [
    # Loading
    "load_config",
    "get_config",
    "set_config",
    "collect_env_overrides",
    # Schemas
    "ProcessConfig",
    "PoolConfig",
    "ShellConfig",
    "LoggingConfig",
    # Constants
    "CONFIG_FILE_ENV",
    "DEFAULT_ENV_PREFIX",
    "MAX_CONFIG_SIZE_BYTES",
]
