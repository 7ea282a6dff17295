"""Constants for splitkeeper."""

# Configuration lookup
CONFIG_DIR = ".splitkeeper"
CONFIG_FILE = "config.toml"

# Run file locking
LOCK_SUFFIX = ".lock"
STALE_LOCK_SECONDS = 3600  # 1 hour without heartbeat
MAX_LOCK_RETRIES = 3
