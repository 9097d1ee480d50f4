"""
Configuration loading for procinfra.

Reads an optional YAML document, applies PROCINFRA_* environment variable
overrides and validates the result against the Pydantic schemas. The loaded
configuration is held process-wide so the shared drain pool and the command
builders agree on the same settings.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from procinfra.exceptions import ConfigError

from .constants import CONFIG_FILE_ENV, DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES
from .schemas import ProcessConfig

_lg = logging.getLogger(__name__)

_lock = threading.Lock()
_config: ProcessConfig | None = None


def _check_file_size(path: Path) -> None:
    """Check file size limit before parsing."""
    file_size = os.path.getsize(path)
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            f"Configuration file '{path}' is {file_size} bytes, "
            f"exceeding maximum size of {MAX_CONFIG_SIZE_BYTES} bytes",
            path=str(path),
        )


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from disk."""
    try:
        _check_file_size(path)
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file: {e}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path=str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping", path=str(path))
    return data


def _convert_env_value(value: str) -> bool | int | float | str | None:
    """
    Convert environment variable string to appropriate type.

    Args:
        value: Environment variable value as string

    Returns:
        Converted value with appropriate type
    """
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value


def _section_model(name: str) -> type[BaseModel] | None:
    field = ProcessConfig.model_fields.get(name)
    if field is None:
        return None
    annotation = field.annotation
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _env_key_to_path(env_key: str, env_prefix: str) -> list[str] | None:
    """
    Convert an environment variable key to a configuration path.

    The first segment selects a section when it names one; the remainder is
    the key within it, so PROCINFRA_POOL_WORKERS_PER_CPU maps to
    ['pool', 'workers_per_cpu'] and PROCINFRA_ENCODING to ['encoding'].

    Returns None for keys that name no configuration field, so unrelated
    variables sharing the prefix (PROCINFRA_HOME, say) are left alone.
    """
    parts = env_key[len(env_prefix) :].lower().split("_")
    section = _section_model(parts[0]) if len(parts) > 1 else None
    if section is not None:
        key = "_".join(parts[1:])
        return [parts[0], key] if key in section.model_fields else None
    key = "_".join(parts)
    if key in ProcessConfig.model_fields and _section_model(key) is None:
        return [key]
    return None


def _set_nested_value(data: dict, path: list[str], value: Any) -> None:
    """Set a nested value, creating intermediate mappings as needed."""
    current = data
    for part in path[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[path[-1]] = value


def collect_env_overrides(env_prefix: str = DEFAULT_ENV_PREFIX) -> dict[str, Any]:
    """
    Get all environment variable overrides that would be applied.

    Returns:
        Mapping of dotted config path to converted value
    """
    overrides = {}
    for key, value in os.environ.items():
        if not key.startswith(env_prefix) or key == CONFIG_FILE_ENV:
            continue
        path = _env_key_to_path(key, env_prefix)
        if path is None:
            _lg.debug("ignoring unknown config variable", extra={"variable": key})
            continue
        overrides[".".join(path)] = _convert_env_value(value)
    return overrides


def load_config(
    path: str | Path | None = None,
    enable_env_overrides: bool = True,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> ProcessConfig:
    """
    Load and validate configuration.

    Args:
        path: YAML file to read. When None, the file named by PROCINFRA_CONFIG
              is used if that variable is set, otherwise only defaults apply.
        enable_env_overrides: Whether to apply environment variable overrides
        env_prefix: Prefix for environment variables (default: 'PROCINFRA_')

    Returns:
        ProcessConfig: Validated configuration

    Raises:
        ConfigError: If the file cannot be read or validation fails

    Example:
        >>> cfg = load_config("etc/procinfra.yaml")
        >>> cfg.pool.workers_per_cpu
        2
    """
    if path is None and os.environ.get(CONFIG_FILE_ENV):
        path = os.environ[CONFIG_FILE_ENV]

    data: dict[str, Any] = _read_yaml(Path(path).expanduser()) if path else {}

    if enable_env_overrides:
        for dotted, value in collect_env_overrides(env_prefix).items():
            _set_nested_value(data, dotted.split("."), value)

    try:
        return ProcessConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def get_config() -> ProcessConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    with _lock:
        if _config is None:
            _config = load_config()
        return _config


def set_config(config: ProcessConfig | None) -> None:
    """Replace the process-wide configuration; None forces a reload on next use."""
    global _config
    with _lock:
        _config = config
