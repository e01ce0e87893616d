"""
AttachmentResolver for Taskspace.

Appends newly created entities to their collection and links them into
their parent's children list.
"""
import logging
from typing import List, Optional

from taskspace.constants import KIND_LIST
from taskspace.managers.store import WorkspaceStore
from taskspace.models.entities import (
    ChildType,
    ContainerEntity,
    EntityReference,
    FolderEntity,
    ListEntity,
    ParentType,
    SpaceEntity,
    TaskEntity,
)
from taskspace.models.orphan import Orphan

logger = logging.getLogger(__name__)


class AttachmentResolver:
    """
    Links created children to their parents.

    Handles:
    - Appending new spaces, folders, lists and tasks to their collections
    - Resolving the declared parent by type and id
    - Recording children whose parent is missing as orphans
    - Re-attaching orphans on request once their parent has arrived

    A missing parent is never an error: the child stays in its collection,
    unattached, and is listed in ``store.orphans``.
    """

    def __init__(self, store: WorkspaceStore) -> None:
        """
        Initialize AttachmentResolver.

        Args:
            store: WorkspaceStore to mutate.
        """
        self.store = store

    def attach_space(self, space: SpaceEntity) -> None:
        """Append a new space. Spaces are top-level, so there is no parent."""
        self.store.spaces.append(space)

    def attach_folder(self, folder: FolderEntity) -> bool:
        """Append a folder and link it under its declared parent.

        Returns:
            True if a parent was found and linked.
        """
        self.store.folders.append(folder)
        return self._link(
            EntityReference(child_type=ChildType.FOLDER, id=folder.id),
            folder.parent.parent_type,
            folder.parent.parent_id,
        )

    def attach_list(self, list_entity: ListEntity) -> bool:
        """Append a list and link it under its declared parent.

        Returns:
            True if a parent was found and linked.
        """
        self.store.lists.append(list_entity)
        return self._link(
            EntityReference(child_type=ChildType.LIST, id=list_entity.id),
            list_entity.parent.parent_type,
            list_entity.parent.parent_id,
        )

    def attach_task(self, task: TaskEntity) -> bool:
        """Append a task and link it under its list.

        The parent is looked up among lists whatever parent type the task declares.

        Returns:
            True if the parent list was found and linked.
        """
        self.store.tasks.append(task)
        return self._link(
            EntityReference(child_type=ChildType.TASK, id=task.id),
            None,
            task.parent.parent_id,
        )

    def _find_parent(
        self, parent_type: Optional[ParentType], parent_id: str
    ) -> Optional[ContainerEntity]:
        """Find the parent entity; a None type means a task's list."""
        kind = parent_type if parent_type is not None else KIND_LIST
        parent = self.store.get(kind, parent_id)
        if isinstance(parent, ContainerEntity):
            return parent
        return None

    def _link(
        self,
        ref: EntityReference,
        parent_type: Optional[ParentType],
        parent_id: str,
    ) -> bool:
        """Append ``ref`` to the parent's children, or record an orphan."""
        if ref.child_type != ChildType.TASK and parent_type is None:
            parent = None
        else:
            parent = self._find_parent(parent_type, parent_id)

        if parent is None:
            if parent_type is not None:
                expected = parent_type.value
            else:
                expected = "LIST" if ref.child_type == ChildType.TASK else "(untyped)"
            logger.warning(
                "Parent %s %s not found for %s %s; left unattached",
                expected,
                parent_id,
                ref.child_type.value,
                ref.id,
            )
            self.store.orphans.append(
                Orphan(child=ref, parent_id=parent_id, parent_type=parent_type)
            )
            return False

        parent.add_child(ref)
        return True

    def adopt_orphans(self) -> List[EntityReference]:
        """
        Attach every orphan whose parent is now in the store.

        Never called implicitly; callers decide when a retry makes sense,
        e.g. after a bulk load. Orphans whose parent is still missing stay
        in the ledger.

        Returns:
            References that were attached.
        """
        adopted: List[EntityReference] = []
        remaining: List[Orphan] = []

        for orphan in self.store.orphans:
            parent = None
            if orphan.parent_type is not None or orphan.child.child_type == ChildType.TASK:
                parent = self._find_parent(orphan.parent_type, orphan.parent_id)
            if parent is None:
                remaining.append(orphan)
                continue
            parent.add_child(orphan.child)
            adopted.append(orphan.child)

        self.store.orphans = remaining
        if adopted:
            logger.debug("Adopted %d orphaned children", len(adopted))
        return adopted
