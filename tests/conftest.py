"""
Test fixtures for the Taskspace test suite.

Provides:
- Temporary directory fixtures
- Raw record builders shaped like server responses
- Store, meta, fake client and pipeline fixtures
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import pytest

from taskspace.constants import reset_config_manager
from taskspace.managers.pipeline import WorkspacePipeline
from taskspace.managers.store import WorkspaceStore
from taskspace.models.meta import WorkspaceMeta

from .fakes import FakeWorkspaceClient


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = Path(tempfile.mkdtemp(prefix="taskspace_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, temp_dir: Path) -> Generator[None, None, None]:
    """Point the config singleton at an empty temp location."""
    monkeypatch.setenv("TASKSPACE_CONFIG", str(temp_dir / "config.json"))
    reset_config_manager()
    yield
    reset_config_manager()


# =============================================================================
# Raw Record Builders
# =============================================================================


class RecordBuilder:
    """Helper class for building raw server records for testing."""

    @staticmethod
    def space(space_id: str = "s1", name: str = "Space", children: Optional[List[Dict]] = None) -> Dict[str, Any]:
        return {"_id": space_id, "name": name, "meta": {"color": "#fff"}, "children": children or []}

    @staticmethod
    def folder(
        folder_id: str = "f1",
        parent_id: str = "s1",
        parent_type: str = "SPACE",
        name: str = "Folder",
        children: Optional[List[Dict]] = None,
    ) -> Dict[str, Any]:
        return {
            "_id": folder_id,
            "name": name,
            "parent": {"parentId": parent_id, "parentType": parent_type},
            "children": children or [],
        }

    @staticmethod
    def list(
        list_id: str = "l1",
        parent_id: str = "s1",
        parent_type: str = "SPACE",
        name: str = "List",
        children: Optional[List[Dict]] = None,
    ) -> Dict[str, Any]:
        return {
            "_id": list_id,
            "name": name,
            "parent": {"parentId": parent_id, "parentType": parent_type},
            "children": children or [],
        }

    @staticmethod
    def task(
        task_id: str = "t1",
        parent_id: str = "l1",
        name: str = "Task",
        priority: Optional[str] = "p-high",
        status: Optional[str] = "st-open",
    ) -> Dict[str, Any]:
        return {
            "_id": task_id,
            "name": name,
            "parent": {"parentId": parent_id, "parentType": "LIST"},
            "priority": priority,
            "status": status,
        }

    @staticmethod
    def ref(child_type: str, child_id: str) -> Dict[str, Any]:
        return {"childType": child_type, "id": child_id}


@pytest.fixture
def records() -> RecordBuilder:
    """Raw record builder."""
    return RecordBuilder()


@pytest.fixture
def space_batch(records: RecordBuilder) -> Dict[str, Any]:
    """A full fetch result for space s1: s1 > f1 > l1 > t1."""
    return {
        "space": [records.space("s1", children=[records.ref("FOLDER", "f1")])],
        "folder": [records.folder("f1", "s1", "SPACE", children=[records.ref("LIST", "l1")])],
        "list": [records.list("l1", "f1", "FOLDER", children=[records.ref("TASK", "t1")])],
        "task": [records.task("t1", "l1")],
    }


# =============================================================================
# Store / Pipeline Fixtures
# =============================================================================


@pytest.fixture
def meta() -> WorkspaceMeta:
    """Workspace meta with one priority and one status."""
    return WorkspaceMeta.model_validate({
        "priorities": [{"_id": "p-high", "name": "High", "color": "#f00"}],
        "statuses": [{"_id": "st-open", "name": "Open", "color": "#0f0"}],
    })


@pytest.fixture
def store() -> WorkspaceStore:
    """Empty workspace store."""
    return WorkspaceStore()


@pytest.fixture
def client() -> FakeWorkspaceClient:
    """Scripted workspace client."""
    return FakeWorkspaceClient()


@pytest.fixture
def pipeline(store: WorkspaceStore, client: FakeWorkspaceClient, meta: WorkspaceMeta) -> WorkspacePipeline:
    """Pipeline wired to the empty store and the fake client."""
    return WorkspacePipeline(store, client, meta=meta)
