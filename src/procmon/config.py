"""Configuration for procmon."""

import os

# Snapshot limits
MAX_PROCESSES = 1024  # Entries kept per snapshot; the rest of the listing is skipped
NAME_CAPACITY = 255
USERNAME_CAPACITY = 31
MAX_LINE = 256  # Longest record line read, terminator included

# Defaults for fields that could not be read
UNKNOWN_NAME = "unknown"
UNKNOWN_USER = "unknown"
UNKNOWN_STATE = "?"

# Process listing
PROC_ROOT = os.environ.get("PROCMON_PROC_ROOT", "/proc")

# Display settings
REFRESH_INTERVAL = float(os.environ.get("PROCMON_REFRESH_INTERVAL", "1.0"))  # seconds
TITLE = "Process Monitor | Press 'q' to quit"
COLUMN_WIDTHS = {
    "pid": 6,
    "name": 20,
    "user": 10,
    "mem": 8,
}

# Logging
LOG_LEVEL = os.environ.get("PROCMON_LOG_LEVEL", "WARNING")
LOG_FILE = os.environ.get("PROCMON_LOG_FILE")
