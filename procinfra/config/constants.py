"""
Configuration-related constants and resource limits.
"""

# Maximum config file size (1MB); anything larger is not a procinfra config
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

DEFAULT_ENV_PREFIX = "PROCINFRA_"

# Names a YAML file to load when load_config() is called without a path
CONFIG_FILE_ENV = "PROCINFRA_CONFIG"
