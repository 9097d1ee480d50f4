from importlib.metadata import PackageNotFoundError, version

from .config import ProcessConfig, get_config, load_config, set_config
from .exceptions import (
    ConfigError,
    DrainError,
    InfraError,
    PoolClosedError,
    ProcessError,
    ProcessFailedError,
    ProcessInterruptedError,
    ProcessStartError,
    UnsupportedPlatformError,
)
from .subprocess import (
    DrainPool,
    ProcessBuilder,
    ProcessResult,
    get_builder,
    get_builder_with_pipe_support,
    get_current_pid,
    get_default_pool,
    is_pid_running,
    run,
    wait_for,
    wait_for_successful_completion,
)

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("procinfra")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

# Explicit public API
__all__ = [
    # Version
    "__version__",
    # Core
    "ProcessResult",
    "wait_for",
    "wait_for_successful_completion",
    "DrainPool",
    "get_default_pool",
    # Launching
    "ProcessBuilder",
    "get_builder",
    "get_builder_with_pipe_support",
    "run",
    # Process ids
    "get_current_pid",
    "is_pid_running",
    # Config
    "ProcessConfig",
    "load_config",
    "get_config",
    "set_config",
    # Exceptions
    "InfraError",
    "ConfigError",
    "ProcessError",
    "ProcessStartError",
    "ProcessInterruptedError",
    "ProcessFailedError",
    "DrainError",
    "PoolClosedError",
    "UnsupportedPlatformError",
]
