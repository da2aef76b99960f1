"""Utility functions for smarkant runtime paths."""

import os
from pathlib import Path

DATA_DIR_NAME = ".smarkant"


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """
    Get the runtime data directory.

    Priority:
    1. `SMARKANT_DATA_DIR` env override
    2. `~/.smarkant`
    """
    env_path = str(os.environ.get("SMARKANT_DATA_DIR") or "").strip()
    if env_path:
        return ensure_dir(Path(env_path).expanduser())
    return ensure_dir(Path.home() / DATA_DIR_NAME)
