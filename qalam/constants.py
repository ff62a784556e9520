"""
Constants for the Qalam CLI application.
"""
from pathlib import Path
import os

# Paths
CONFIG_DIR = Path(os.path.expanduser(os.getenv("QALAM_CONFIG_DIR", "~/.config/qalam")))
CONFIG_FILE = CONFIG_DIR / "config.toml"
WORKFLOWS_FILENAME = "workflows.json"
COMMANDS_FILENAME = "commands.json"
TASKS_FILENAME = "tasks.json"

# Logging
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[name]} | {message}"
LOG_ROTATION = "10 MB"
LOG_RETENTION = "10 days"

# Workflow export format
EXPORT_FORMAT_VERSION = "1.0"
EXPORT_FILE_SUFFIX = "-workflow.json"

# Command memory
DEFAULT_LIST_LIMIT = 50
SEARCH_RESULT_LIMIT = 20

# Deferred cleanup
DEFAULT_CLEANUP_SECONDS = 3600
DURATION_MULTIPLIERS = {
    "s": 1,
    "m": 60,
    "h": 3600,
}

# Task priorities, matched against lowercase task titles
URGENT_KEYWORDS = ["urgent", "critical", "asap", "emergency", "broken", "down", "fix prod"]
IMPORTANT_KEYWORDS = ["important", "soon", "today", "review", "deploy"]
