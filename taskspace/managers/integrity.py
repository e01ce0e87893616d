"""
Integrity checks for the Taskspace store.

Reports broken references between the flat collections without changing
anything. Useful after a bulk load, or to list what an orphan retry could fix.
"""
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from taskspace.constants import KIND_FOLDER, KIND_LIST, KIND_SPACE, KIND_TASK
from taskspace.managers.store import WorkspaceStore
from taskspace.models.entities import ChildType, ContainerEntity

CHILD_KIND = {
    ChildType.FOLDER: KIND_FOLDER,
    ChildType.LIST: KIND_LIST,
    ChildType.TASK: KIND_TASK,
}


class IssueType(str, Enum):
    """Kinds of integrity problem."""
    DUPLICATE_ID = "duplicate-id"
    MISSING_PARENT = "missing-parent"
    MISSING_REFERENCE = "missing-reference"
    DUPLICATE_REFERENCE = "duplicate-reference"
    DANGLING_REFERENCE = "dangling-reference"


@dataclass
class IntegrityIssue:
    """A single integrity problem."""
    type: IssueType
    kind: str
    entity_id: str
    message: str


def _parent_key(store: WorkspaceStore, kind: str, entity) -> Optional[Tuple[str, str]]:
    """Resolve (parent kind, parent id) for a child, or None if unresolvable."""
    if kind == KIND_TASK:
        parent_kind = KIND_LIST
    elif entity.parent.parent_type is None:
        return None
    else:
        parent_kind = entity.parent.parent_type.value.lower()
    if not store.contains(parent_kind, entity.parent.parent_id):
        return None
    return parent_kind, entity.parent.parent_id


def check_integrity(store: WorkspaceStore) -> List[IntegrityIssue]:
    """
    Check the store's collections against their referential rules.

    Rules:
    - Each collection holds at most one entity per id.
    - Each folder, list and task names a parent that exists.
    - Each parent lists exactly one reference per child naming it.
    - Each reference in a parent points at an existing child naming that parent.

    Args:
        store: WorkspaceStore to inspect.

    Returns:
        Issues found, in collection order. Empty when the store is consistent.
    """
    issues: List[IntegrityIssue] = []

    for kind in (KIND_SPACE, KIND_FOLDER, KIND_LIST, KIND_TASK):
        counts = Counter(entity.id for entity in store.collection_for(kind))
        for entity_id, count in counts.items():
            if count > 1:
                issues.append(IntegrityIssue(
                    IssueType.DUPLICATE_ID, kind, entity_id,
                    f"{kind} {entity_id} appears {count} times",
                ))

    # child (kind, id) -> resolved parent (kind, id)
    parents: Dict[Tuple[str, str], Tuple[str, str]] = {}
    for kind in (KIND_FOLDER, KIND_LIST, KIND_TASK):
        for entity in store.collection_for(kind):
            parent = _parent_key(store, kind, entity)
            if parent is None:
                issues.append(IntegrityIssue(
                    IssueType.MISSING_PARENT, kind, entity.id,
                    f"{kind} {entity.id} names missing parent {entity.parent.parent_id}",
                ))
                continue
            parents[(kind, entity.id)] = parent

            container = store.get(*parent)
            refs = sum(
                1 for ref in container.children
                if CHILD_KIND[ref.child_type] == kind and ref.id == entity.id
            )
            if refs == 0:
                issues.append(IntegrityIssue(
                    IssueType.MISSING_REFERENCE, kind, entity.id,
                    f"{parent[0]} {parent[1]} does not list {kind} {entity.id}",
                ))
            elif refs > 1:
                issues.append(IntegrityIssue(
                    IssueType.DUPLICATE_REFERENCE, kind, entity.id,
                    f"{parent[0]} {parent[1]} lists {kind} {entity.id} {refs} times",
                ))

    for kind in (KIND_SPACE, KIND_FOLDER, KIND_LIST):
        for container in store.collection_for(kind):
            if not isinstance(container, ContainerEntity):
                continue
            for ref in container.children:
                child_key = (CHILD_KIND[ref.child_type], ref.id)
                if parents.get(child_key) != (kind, container.id):
                    issues.append(IntegrityIssue(
                        IssueType.DANGLING_REFERENCE, kind, container.id,
                        f"{kind} {container.id} lists {child_key[0]} {ref.id} "
                        f"which does not name it as parent",
                    ))

    return issues
