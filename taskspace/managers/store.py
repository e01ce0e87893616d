"""
WorkspaceStore for Taskspace.

In-memory, normalized workspace data: flat collections per entity type
linked by id references. Mutated by the pipeline, the loader and the
attachment resolver; never persisted.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from taskspace.constants import KIND_FOLDER, KIND_LIST, KIND_SPACE, KIND_TASK
from taskspace.models.entities import (
    BaseEntity,
    FolderEntity,
    ListEntity,
    SpaceEntity,
    TaskEntity,
)
from taskspace.models.orphan import Orphan

logger = logging.getLogger(__name__)

ENTITY_MODELS = {
    KIND_SPACE: SpaceEntity,
    KIND_FOLDER: FolderEntity,
    KIND_LIST: ListEntity,
    KIND_TASK: TaskEntity,
}


def normalize_kind(kind: Union[str, Enum]) -> str:
    """Turn 'SPACE', ParentType.SPACE or 'space' into 'space'.

    Raises:
        ValueError: If the kind is not an entity kind.
    """
    value = kind.value if isinstance(kind, Enum) else kind
    value = str(value).lower()
    if value not in ENTITY_MODELS:
        raise ValueError(f"Unknown entity kind: {kind!r}")
    return value


class WorkspaceStore:
    """
    Normalized store for one active workspace session.

    Holds:
    - spaces, folders, lists, tasks: entities in insertion order
    - active_item / active_item_name: UI selection, not checked against the collections
    - error: last error message from any failed operation
    - orphans: children whose parent was missing when they were attached

    Usage:
        store = WorkspaceStore()
        pipeline = WorkspacePipeline(store, client)
        await pipeline.fetch_workspace(["s1"], "w1", "u1", token)

        store.get("space", "s1")
        store.reset()
    """

    def __init__(self) -> None:
        self.spaces: List[SpaceEntity] = []
        self.folders: List[FolderEntity] = []
        self.lists: List[ListEntity] = []
        self.tasks: List[TaskEntity] = []
        self.active_item: str = ""
        self.active_item_name: str = ""
        self.error: str = ""
        self.orphans: List[Orphan] = []

    def collection_for(self, kind: Union[str, Enum]) -> List[Any]:
        """Get the collection holding entities of the given kind.

        Args:
            kind: Entity kind; 'space', 'SPACE', ParentType.SPACE, etc.

        Returns:
            The live list backing that collection.
        """
        return {
            KIND_SPACE: self.spaces,
            KIND_FOLDER: self.folders,
            KIND_LIST: self.lists,
            KIND_TASK: self.tasks,
        }[normalize_kind(kind)]

    def get(self, kind: Union[str, Enum], entity_id: str) -> Optional[BaseEntity]:
        """Find the first entity of a kind by id.

        Args:
            kind: Entity kind.
            entity_id: Id to look for.

        Returns:
            Entity or None if not found.
        """
        for entity in self.collection_for(kind):
            if entity.id == entity_id:
                return entity
        return None

    def contains(self, kind: Union[str, Enum], entity_id: str) -> bool:
        """Check whether an entity with this id is already in the collection."""
        return self.get(kind, entity_id) is not None

    def set_active(self, item_id: str) -> None:
        """Set the selected item id. The name is left as is."""
        self.active_item = item_id

    def set_error(self, message: str) -> None:
        """Overwrite the error slot. Only the latest failure is kept."""
        self.error = message

    def reset(self) -> None:
        """Restore the store to its initial empty state."""
        self.spaces = []
        self.folders = []
        self.lists = []
        self.tasks = []
        self.active_item = ""
        self.active_item_name = ""
        self.error = ""
        self.orphans = []
        logger.debug("Workspace store reset")

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the store in the server's key format."""
        return {
            "spaces": [s.to_wire() for s in self.spaces],
            "folders": [f.to_wire() for f in self.folders],
            "lists": [l.to_wire() for l in self.lists],
            "tasks": [t.to_wire() for t in self.tasks],
            "activeItem": self.active_item,
            "activeItemName": self.active_item_name,
            "error": self.error,
            "orphans": [o.model_dump(mode="json", by_alias=True) for o in self.orphans],
        }
