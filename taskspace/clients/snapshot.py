"""
Snapshot client for Taskspace.

Offline WorkspaceClient backed by a JSON snapshot file. It answers requests
the way the server does: it assigns ids, keeps parents' children lists in
step, and reports failures as ``{"success": False, "error": ...}``.
"""
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from taskspace.clients.ports import Response
from taskspace.constants import ERROR_NAME_REQUIRED
from taskspace.exceptions import StorageError
from taskspace.models.files import SnapshotFile
from taskspace.models.meta import WorkspaceMeta
from taskspace.storage import atomic_write

logger = logging.getLogger(__name__)

PARENT_COLLECTIONS = {
    "SPACE": "spaces",
    "FOLDER": "folders",
    "LIST": "lists",
}


def _failure(message: str) -> Response:
    return {"success": False, "error": message}


class SnapshotClient:
    """
    Serves workspace requests from a snapshot file.

    Creations are written back to the file atomically unless ``autosave`` is
    off, in which case they only live in memory until ``save()``.

    Usage:
        client = SnapshotClient(Path("workspace.json"))
        pipeline = WorkspacePipeline(store, client, meta=client.meta)
    """

    def __init__(self, snapshot_path: Path, autosave: bool = True) -> None:
        """
        Initialize the SnapshotClient and load the snapshot.

        Args:
            snapshot_path: Path to the snapshot JSON file. A missing file is
                treated as an empty workspace.
            autosave: Write the file after every successful creation.

        Raises:
            StorageError: If the file exists but cannot be parsed.
        """
        self.snapshot_path = Path(snapshot_path)
        self.autosave = autosave
        self.data = self.load()

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> SnapshotFile:
        """Load the snapshot file and return it as a SnapshotFile model."""
        if not self.snapshot_path.exists():
            return SnapshotFile()

        try:
            with open(self.snapshot_path, "r") as f:
                data = json.load(f)
            return SnapshotFile.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load {self.snapshot_path}: {e}")

    def save(self) -> None:
        """Write the snapshot atomically.

        Raises:
            StorageError: If writing to file fails.
        """
        atomic_write(self.snapshot_path, self.data.model_dump(mode="json", by_alias=True))

    def _commit(self, rollback: Callable[[], None]) -> None:
        """Save if autosave is on; undo the in-memory change if saving fails."""
        if not self.autosave:
            return
        try:
            self.save()
        except StorageError:
            rollback()
            raise

    @property
    def meta(self) -> WorkspaceMeta:
        """Priorities and statuses stored with the snapshot."""
        return self.data.meta

    @property
    def space_ids(self) -> List[str]:
        """Ids of all spaces, in snapshot order."""
        return [space["_id"] for space in self.data.spaces]

    # =========================================================================
    # Lookup
    # =========================================================================

    def _find(self, collection: str, entity_id: str) -> Optional[Dict[str, Any]]:
        for record in getattr(self.data, collection):
            if record.get("_id") == entity_id:
                return record
        return None

    def _descendants(self, space_id: str) -> Tuple[List[Dict], List[Dict], List[Dict]]:
        """Collect folders, lists and tasks that live under a space."""
        members: Set[Tuple[str, str]] = {("SPACE", space_id)}
        folders: List[Dict[str, Any]] = []
        lists: List[Dict[str, Any]] = []

        changed = True
        while changed:
            changed = False
            for kind, collection, out in (
                ("FOLDER", self.data.folders, folders),
                ("LIST", self.data.lists, lists),
            ):
                for record in collection:
                    key = (kind, record.get("_id"))
                    if key in members:
                        continue
                    parent = record.get("parent") or {}
                    parent_key = (str(parent.get("parentType", "")).upper(), parent.get("parentId"))
                    if parent_key in members:
                        members.add(key)
                        out.append(record)
                        changed = True

        list_ids = {record.get("_id") for record in lists}
        tasks = [
            record for record in self.data.tasks
            if (record.get("parent") or {}).get("parentId") in list_ids
        ]

        # Keep snapshot order regardless of discovery order
        folders.sort(key=self.data.folders.index)
        lists.sort(key=self.data.lists.index)
        return folders, lists, tasks

    # =========================================================================
    # WorkspaceClient
    # =========================================================================

    async def fetch_space_everything(
        self, space_id: str, workspace_id: str, user_id: str, token: str
    ) -> Response:
        space = self._find("spaces", space_id)
        if space is None:
            return _failure(f"Space {space_id} not found.")

        folders, lists, tasks = self._descendants(space_id)
        return {
            "space": [space],
            "folder": folders,
            "list": lists,
            "task": tasks,
        }

    async def create_space(
        self, name: str, workspace_id: str, user_id: str, token: str
    ) -> Response:
        if not name or not name.strip():
            return _failure(ERROR_NAME_REQUIRED)

        record = {
            "_id": uuid.uuid4().hex,
            "name": name.strip(),
            "workspaceId": workspace_id,
            "meta": {},
            "children": [],
        }
        self.data.spaces.append(record)
        self._commit(lambda: self.data.spaces.remove(record))
        logger.info("Created space %s", record["_id"])
        return {"success": True, "space": record}

    def _create_child(
        self,
        collection: str,
        child_type: str,
        name: str,
        parent_type: str,
        parent_id: str,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        """Create a child record under an existing parent.

        Returns:
            (record, None) on success, (None, error message) otherwise.
        """
        if not name or not name.strip():
            return None, ERROR_NAME_REQUIRED

        parent_type = str(parent_type).upper()
        parent_collection = PARENT_COLLECTIONS.get(parent_type)
        if parent_collection is None:
            return None, f"Invalid parent type: {parent_type}."
        parent = self._find(parent_collection, parent_id)
        if parent is None:
            return None, f"Parent {parent_type} {parent_id} not found."

        record: Dict[str, Any] = {
            "_id": uuid.uuid4().hex,
            "name": name.strip(),
            "parent": {"parentId": parent_id, "parentType": parent_type},
        }
        for key, value in (extra or {}).items():
            record.setdefault(key, value)
        records = getattr(self.data, collection)
        siblings = parent.setdefault("children", [])
        ref = {"childType": child_type, "id": record["_id"]}
        records.append(record)
        siblings.append(ref)

        def rollback() -> None:
            records.remove(record)
            siblings.remove(ref)

        self._commit(rollback)
        logger.info("Created %s %s under %s %s", child_type.lower(), record["_id"], parent_type, parent_id)
        return record, None

    async def create_folder(
        self, name: str, parent_type: str, parent_id: str, user_id: str, token: str
    ) -> Response:
        record, error = self._create_child(
            "folders", "FOLDER", name, parent_type, parent_id, {"children": []}
        )
        if record is None:
            return _failure(error)
        return {"success": True, "folder": record}

    async def create_list(
        self, name: str, parent_type: str, parent_id: str, user_id: str, token: str
    ) -> Response:
        record, error = self._create_child(
            "lists", "LIST", name, parent_type, parent_id, {"children": []}
        )
        if record is None:
            return _failure(error)
        return {"success": True, "list": record}

    async def create_task(
        self,
        name: str,
        meta: Dict[str, Any],
        parent_type: str,
        parent_id: str,
        user_id: str,
        token: str,
    ) -> Response:
        if str(parent_type).upper() != "LIST":
            return _failure("Tasks can only be created in a list.")

        extra = dict(meta or {})
        extra.setdefault("priority", None)
        extra.setdefault("status", None)
        record, error = self._create_child("tasks", "TASK", name, parent_type, parent_id, extra)
        if record is None:
            return _failure(error)
        return {"success": True, "task": record}
