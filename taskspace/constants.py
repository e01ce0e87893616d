"""
Constants for the Taskspace application.

Note: These constants serve as default fallback values.
Actual values are loaded from .taskspace/config.json at runtime via ConfigManager.
"""
import json
import os
from pathlib import Path
from typing import Any, Optional

# =============================================================================
# Default Fallback Values
# These are used if config.json doesn't exist or doesn't specify a value.
# =============================================================================

DEFAULT_CONFIG_DIR = ".taskspace"
CONFIG_PATH_ENV = "TASKSPACE_CONFIG"

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
DEFAULT_SNAPSHOT_PATH = ".taskspace/workspace.json"
DEFAULT_TREE_INDENT = 2

# Entity kinds (not configurable)
KIND_SPACE = "space"
KIND_FOLDER = "folder"
KIND_LIST = "list"
KIND_TASK = "task"

# Error messages (not configurable)
ERROR_REQUEST_FAILED = "Request failed."
ERROR_NAME_REQUIRED = "Name is required."


# =============================================================================
# Config Loader
# Load values from .taskspace/config.json at runtime.
# =============================================================================

_config_manager_instance: Optional['ConfigManager'] = None


class ConfigManager:
    """
    Manages loading configuration from a config.json file with fallback to defaults.

    Usage:
        # With default path (.taskspace/config.json, or $TASKSPACE_CONFIG)
        config = ConfigManager()
        level = config.get_str('log_level', DEFAULT_LOG_LEVEL)

        # With custom path
        config = ConfigManager(config_path=Path("/custom/path/config.json"))
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Direct path to config.json file. Takes precedence over
                the TASKSPACE_CONFIG environment variable.
        """
        self._config: Optional[dict] = None

        if config_path is not None:
            self._config_path = config_path
        elif os.getenv(CONFIG_PATH_ENV):
            self._config_path = Path(os.environ[CONFIG_PATH_ENV]).expanduser()
        else:
            self._config_path = Path(DEFAULT_CONFIG_DIR) / "config.json"

    def _load_config(self) -> dict:
        """Load config from config.json file."""
        if self._config is not None:
            return self._config

        if self._config_path.exists():
            try:
                with open(self._config_path, "r") as f:
                    self._config = json.load(f)
            except (json.JSONDecodeError, IOError):
                self._config = {}
        else:
            self._config = {}

        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value with fallback to default.

        Args:
            key: Configuration key name.
            default: Default value if key not found.

        Returns:
            Config value or default.
        """
        config = self._load_config()
        return config.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        """Get an integer config value with fallback."""
        value = self.get(key, default)
        try:
            return int(value) if value is not None else default
        except (TypeError, ValueError):
            return default

    def get_str(self, key: str, default: str) -> str:
        """Get a string config value with fallback."""
        value = self.get(key, default)
        return str(value) if value is not None else default

    def reload(self) -> dict:
        """Force reload of config from disk."""
        self._config = None
        return self._load_config()

    @property
    def config_path(self) -> Path:
        """Get the config file path."""
        return self._config_path


def get_config_manager(reset: bool = False) -> ConfigManager:
    """
    Get the singleton ConfigManager instance with default path.

    Args:
        reset: If True, reset the singleton and create a new instance.

    Returns:
        ConfigManager singleton instance.
    """
    global _config_manager_instance
    if _config_manager_instance is None or reset:
        _config_manager_instance = ConfigManager()
    return _config_manager_instance


def reset_config_manager() -> None:
    """Reset the singleton ConfigManager instance (useful for testing)."""
    global _config_manager_instance
    _config_manager_instance = None


def get_log_level() -> str:
    """Get log level name from config or default."""
    return get_config_manager().get_str('log_level', DEFAULT_LOG_LEVEL).upper()


def get_snapshot_path() -> Path:
    """Get the default workspace snapshot path from config or default."""
    return Path(get_config_manager().get_str('snapshot_path', DEFAULT_SNAPSHOT_PATH))


def get_tree_indent() -> int:
    """Get tree indentation width from config or default."""
    return get_config_manager().get_int('tree_indent', DEFAULT_TREE_INDENT)
