"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_db_path() -> Path:
    """Return the document store path from CV_DB_PATH."""
    raw = os.environ.get("CV_DB_PATH", "~/.local/share/content_versioning/content.db")
    return Path(raw).expanduser()


def get_log_level() -> str:
    """Return the logging level from CV_LOG_LEVEL."""
    return os.environ.get("CV_LOG_LEVEL", "WARNING").upper()


def get_max_history_entries() -> int:
    """Return the default history page size from CV_MAX_HISTORY_ENTRIES."""
    return int(os.environ.get("CV_MAX_HISTORY_ENTRIES", "50"))


def get_default_branch() -> str:
    """Return the branch used when a caller names none, from CV_DEFAULT_BRANCH."""
    return os.environ.get("CV_DEFAULT_BRANCH", "main")
