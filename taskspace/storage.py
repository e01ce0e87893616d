"""
File storage helpers for Taskspace.

Atomic JSON writes, and loading/saving of the config.json file.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from taskspace.exceptions import ConfigurationError, StorageError
from taskspace.models.files import ConfigFile


def atomic_write(file_path: Path, data: Dict[str, Any]) -> None:
    """Write data to a JSON file atomically to prevent corruption.

    The parent directory is created if needed.

    Args:
        file_path: Path to the file to write.
        data: Dictionary data to write as JSON.

    Raises:
        StorageError: If writing fails. The temp file is cleaned up.
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(
        dir=file_path.parent,
        prefix='.tmp_taskspace_',
        suffix='.json'
    )

    try:
        with os.fdopen(temp_fd, 'w') as temp_file:
            json.dump(data, temp_file, indent=2)
        os.replace(temp_path, file_path)
    except Exception as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise StorageError(f"Failed to write to {file_path}: {e}")


def load_config(file_path: Path) -> ConfigFile:
    """
    Load configuration from a config.json file.

    Args:
        file_path: Path to config.json.

    Returns:
        ConfigFile: The loaded config, or the default config if the file doesn't exist.

    Raises:
        ConfigurationError: If the file exists but is not a valid config.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return ConfigFile()
    try:
        with open(file_path, "r") as f:
            data = json.load(f)
        return ConfigFile.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Error loading config from {file_path}: {e}")


def save_config(file_path: Path, data: ConfigFile) -> None:
    """
    Save configuration to a config.json file.

    Args:
        file_path: Path to config.json.
        data: ConfigFile data to save.
    """
    atomic_write(file_path, data.model_dump())
