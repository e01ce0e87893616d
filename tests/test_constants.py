"""
Tests for ConfigManager and the config helpers.
"""

import json
from pathlib import Path

from taskspace.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_SNAPSHOT_PATH,
    DEFAULT_TREE_INDENT,
    ConfigManager,
    get_config_manager,
    get_log_level,
    get_snapshot_path,
    get_tree_indent,
)


class TestConfigManager:
    """Test ConfigManager."""

    def test_defaults_without_file(self, temp_dir):
        config = ConfigManager(config_path=temp_dir / "missing.json")
        assert config.get("log_level") is None
        assert config.get_int("tree_indent", 2) == 2

    def test_reads_file(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"tree_indent": "4", "log_level": "debug"}))
        config = ConfigManager(config_path=path)
        assert config.get_int("tree_indent", 2) == 4
        assert config.get_str("log_level", "x") == "debug"

    def test_bad_int_falls_back(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"tree_indent": "wide"}))
        assert ConfigManager(config_path=path).get_int("tree_indent", 3) == 3

    def test_invalid_json_is_empty(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("{")
        assert ConfigManager(config_path=path).get("log_level", "d") == "d"

    def test_reload(self, temp_dir):
        path = temp_dir / "config.json"
        config = ConfigManager(config_path=path)
        assert config.get("log_level") is None
        path.write_text(json.dumps({"log_level": "INFO"}))
        assert config.reload()["log_level"] == "INFO"

    def test_env_path(self, temp_dir):
        """The autouse fixture points TASKSPACE_CONFIG into temp_dir."""
        assert get_config_manager().config_path == temp_dir / "config.json"

    def test_explicit_path_beats_env(self, temp_dir):
        config = ConfigManager(config_path=Path("elsewhere.json"))
        assert config.config_path == Path("elsewhere.json")


class TestConfigHelpers:
    """Test get_* helpers."""

    def test_defaults(self):
        assert get_log_level() == DEFAULT_LOG_LEVEL
        assert get_snapshot_path() == Path(DEFAULT_SNAPSHOT_PATH)
        assert get_tree_indent() == DEFAULT_TREE_INDENT

    def test_configured_values(self, temp_dir):
        (temp_dir / "config.json").write_text(json.dumps({
            "log_level": "debug",
            "snapshot_path": str(temp_dir / "ws.json"),
            "tree_indent": 4,
        }))
        get_config_manager(reset=True)
        assert get_log_level() == "DEBUG"
        assert get_snapshot_path() == temp_dir / "ws.json"
        assert get_tree_indent() == 4
