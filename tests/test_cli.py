"""
Tests for the Taskspace CLI.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from taskspace.cli import cli
from taskspace.commands.workspace import render_tree
from taskspace.managers.store import WorkspaceStore
from taskspace.models.entities import FolderEntity, SpaceEntity


@pytest.fixture(autouse=True)
def restore_logging():
    """setup_logging replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    package_level = logging.getLogger("taskspace").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("taskspace").setLevel(package_level)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def snapshot_file(temp_dir, records):
    path = temp_dir / "workspace.json"
    path.write_text(json.dumps({
        "spaces": [records.space("s1", name="Eng", children=[records.ref("LIST", "l1")])],
        "folders": [],
        "lists": [records.list("l1", "s1", "SPACE", name="Backlog", children=[records.ref("TASK", "t1")])],
        "tasks": [records.task("t1", "l1", name="Ship it")],
        "meta": {
            "priorities": [{"_id": "p-high", "name": "High"}],
            "statuses": [{"_id": "st-open", "name": "Open"}],
        },
    }))
    return path


def _invoke(runner, *args):
    return runner.invoke(cli, ["workspace", *args])


class TestShow:
    """Test 'workspace show'."""

    def test_tree(self, runner, snapshot_file):
        result = _invoke(runner, "show", "-s", str(snapshot_file))
        assert result.exit_code == 0
        assert "[space] Eng (s1)" in result.output
        assert "  [list] Backlog (l1)" in result.output
        assert "    [task] Ship it (t1) !High <Open>" in result.output

    def test_json(self, runner, snapshot_file):
        result = _invoke(runner, "show", "-s", str(snapshot_file), "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [s["_id"] for s in data["spaces"]] == ["s1"]
        assert data["tasks"][0]["priority"]["name"] == "High"
        assert data["error"] == ""

    def test_empty(self, runner, temp_dir):
        result = _invoke(runner, "show", "-s", str(temp_dir / "none.json"))
        assert result.exit_code == 0
        assert "Workspace is empty." in result.output

    def test_configured_snapshot_path(self, runner, temp_dir, snapshot_file):
        (temp_dir / "config.json").write_text(json.dumps({"snapshot_path": str(snapshot_file)}))
        result = _invoke(runner, "show")
        assert "[space] Eng (s1)" in result.output

    def test_corrupt_snapshot(self, runner, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text("nope")
        result = _invoke(runner, "show", "-s", str(path))
        assert result.exit_code != 0
        assert "Failed to load" in result.output


class TestCheck:
    """Test 'workspace check'."""

    def test_clean(self, runner, snapshot_file):
        result = _invoke(runner, "check", "-s", str(snapshot_file))
        assert result.exit_code == 0
        assert "✓ No integrity issues found." in result.output

    def test_broken(self, runner, temp_dir, records):
        path = temp_dir / "broken.json"
        path.write_text(json.dumps({
            "spaces": [records.space("s1")],
            "lists": [records.list("l1", "s1", "SPACE")],
        }))
        result = _invoke(runner, "check", "-s", str(path), "--json")
        assert result.exit_code == 1
        issues = json.loads(result.output)
        assert issues[0]["type"] == "missing-reference"
        assert issues[0]["id"] == "l1"


class TestAdd:
    """Test the add-* commands."""

    def test_add_space(self, runner, snapshot_file):
        result = _invoke(runner, "add-space", "Ops", "-s", str(snapshot_file))
        assert result.exit_code == 0
        assert "✓ Created space 'Ops'" in result.output
        saved = json.loads(snapshot_file.read_text())
        assert [s["name"] for s in saved["spaces"]] == ["Eng", "Ops"]

    def test_add_folder_then_show(self, runner, snapshot_file):
        result = _invoke(
            runner, "add-folder", "Docs", "-t", "space", "-i", "s1", "-s", str(snapshot_file)
        )
        assert result.exit_code == 0

        shown = _invoke(runner, "show", "-s", str(snapshot_file))
        assert "  [folder] Docs (" in shown.output

    def test_add_list(self, runner, snapshot_file):
        result = _invoke(
            runner, "add-list", "Sub", "-t", "LIST", "-i", "l1", "-s", str(snapshot_file)
        )
        assert result.exit_code == 0
        assert "✓ Created list 'Sub'" in result.output

    def test_add_task(self, runner, snapshot_file):
        result = _invoke(
            runner, "add-task", "Review", "-l", "l1", "-p", "p-high", "-s", str(snapshot_file)
        )
        assert result.exit_code == 0
        saved = json.loads(snapshot_file.read_text())
        assert saved["tasks"][-1]["priority"] == "p-high"

    def test_rejected(self, runner, snapshot_file):
        result = _invoke(
            runner, "add-folder", "Docs", "-t", "folder", "-i", "ghost", "-s", str(snapshot_file)
        )
        assert result.exit_code != 0
        assert "Parent FOLDER ghost not found." in result.output

    def test_invalid_parent_type(self, runner, snapshot_file):
        result = _invoke(
            runner, "add-list", "X", "-t", "task", "-i", "t1", "-s", str(snapshot_file)
        )
        assert result.exit_code == 2


class TestRenderTree:
    """Test render_tree."""

    def test_unattached(self):
        store = WorkspaceStore()
        store.spaces.append(SpaceEntity(id="s1", name="Eng"))
        store.folders.append(FolderEntity.model_validate(
            {"_id": "f1", "name": "Loose", "parent": {"parentId": "s1", "parentType": "SPACE"}}
        ))
        assert render_tree(store, indent=4) == [
            "[space] Eng (s1)",
            "Unattached:",
            "    [folder] Loose (f1)",
        ]

    def test_missing_child(self):
        store = WorkspaceStore()
        store.spaces.append(SpaceEntity.model_validate(
            {"_id": "s1", "name": "Eng", "children": [{"childType": "TASK", "id": "t9"}]}
        ))
        assert render_tree(store) == ["[space] Eng (s1)", "  [task] <missing> (t9)"]


class TestConfigCommands:
    """Test the config command group."""

    def test_show_defaults(self, runner, temp_dir):
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert str(temp_dir / "config.json") in result.output
        assert "tree_indent: 2" in result.output

    def test_set_then_get(self, runner, temp_dir):
        result = runner.invoke(cli, ["config", "set", "tree_indent", "4"])
        assert result.exit_code == 0
        assert "✓ Set tree_indent = 4" in result.output
        assert json.loads((temp_dir / "config.json").read_text())["tree_indent"] == 4

        result = runner.invoke(cli, ["config", "get", "tree_indent"])
        assert result.output.strip() == "4"

    def test_set_invalid_value(self, runner, temp_dir):
        result = runner.invoke(cli, ["config", "set", "log_level", "loud"])
        assert result.exit_code != 0
        assert "Invalid value for log_level" in result.output
        assert not (temp_dir / "config.json").exists()

    def test_unknown_key(self, runner):
        result = runner.invoke(cli, ["config", "get", "colour"])
        assert result.exit_code == 2

    def test_indent_used_by_show(self, runner, snapshot_file):
        runner.invoke(cli, ["config", "set", "tree_indent", "4"])
        result = _invoke(runner, "show", "-s", str(snapshot_file))
        assert "    [list] Backlog (l1)" in result.output

    def test_broken_config_file(self, runner, temp_dir):
        (temp_dir / "config.json").write_text(json.dumps({"tree_indent": -3}))
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code != 0
        assert "Error loading config" in result.output
