"""
Entity models for the Taskspace store.

Flat structure with id references for parent-child relationships.
Field names follow Python conventions; the server's camelCase keys and
``_id`` are accepted and produced through aliases.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .meta import Priority, Status


class ChildType(str, Enum):
    """Kinds of entity that can appear in a parent's children."""
    FOLDER = "FOLDER"
    LIST = "LIST"
    TASK = "TASK"


class ParentType(str, Enum):
    """Kinds of entity that can own folders and lists."""
    SPACE = "SPACE"
    FOLDER = "FOLDER"
    LIST = "LIST"


def _upper(value: Any) -> Any:
    return value.upper() if isinstance(value, str) else value


class EntityReference(BaseModel):
    """Pointer from a parent's children list to a child entity."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    child_type: ChildType = Field(alias="childType")
    id: str
    # Same id as written by servers that also key children by _id
    legacy_id: Optional[str] = Field(default=None, alias="_id")

    @model_validator(mode="before")
    @classmethod
    def fill_id(cls, data: Any) -> Any:
        """Accept references keyed by ``_id`` as well as ``id``."""
        if isinstance(data, dict) and "_id" in data and "id" not in data:
            data = dict(data)
            data["id"] = data["_id"]
        return data

    @field_validator("child_type", mode="before")
    @classmethod
    def normalize_child_type(cls, v: Any) -> Any:
        return _upper(v)


class ParentReference(BaseModel):
    """Declared parent of a folder, list or task."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    parent_id: str = Field(alias="parentId")
    parent_type: Optional[ParentType] = Field(default=None, alias="parentType")

    @field_validator("parent_type", mode="before")
    @classmethod
    def normalize_parent_type(cls, v: Any) -> Any:
        return _upper(v)


class BaseEntity(BaseModel):
    """
    Base model for all workspace entities.

    Common fields:
    - id: Server-assigned identifier (``_id`` on the wire)
    - name: Display name

    Unknown keys from the server are kept and dumped back unchanged.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="_id")
    name: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        """Dump in the server's key format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ContainerEntity(BaseEntity):
    """Entity that owns an ordered children list."""
    children: List[EntityReference] = Field(default_factory=list)

    def has_child(self, child_type: ChildType, child_id: str) -> bool:
        """Check whether a reference to the child is already present."""
        return any(
            ref.child_type == child_type and ref.id == child_id for ref in self.children
        )

    def add_child(self, ref: EntityReference) -> bool:
        """Append a child reference unless the same one is already present.

        Args:
            ref: Reference to append.

        Returns:
            True if the reference was appended.
        """
        if self.has_child(ref.child_type, ref.id):
            return False
        self.children.append(ref)
        return True


class SpaceEntity(ContainerEntity):
    """Space - top-level container. Has no parent.

    ``meta`` holds colors, icons, statuses and views; the store never reads it.
    """
    meta: Optional[Dict[str, Any]] = None


class FolderEntity(ContainerEntity):
    """Folder - lives under a space, folder or list."""
    parent: ParentReference


class ListEntity(ContainerEntity):
    """List - lives under a space, folder or list. Children are tasks."""
    parent: ParentReference


class TaskEntity(BaseEntity):
    """Task - always lives under a list.

    ``priority`` and ``status`` are resolved objects, never raw ids; tasks
    pass through the sanitizer before they are built.
    """
    parent: ParentReference
    priority: Optional[Priority] = None
    status: Optional[Status] = None
