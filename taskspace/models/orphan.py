"""
Orphan model for the Taskspace store.

Orphans are created children whose declared parent was not in the store
when they were attached.
"""
from typing import Optional

from pydantic import BaseModel

from .entities import EntityReference, ParentType


class Orphan(BaseModel):
    """Orphan model - a child reference waiting for its parent.

    ``parent_type`` is None for tasks, whose parent is always a list.
    """
    child: EntityReference
    parent_id: str
    parent_type: Optional[ParentType] = None
