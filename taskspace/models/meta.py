"""
Workspace metadata models.

Priorities and statuses are defined per workspace; tasks refer to them by id
on the wire and carry the resolved objects once sanitized.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MetaItem(BaseModel):
    """Base model for priority and status definitions."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="_id")
    name: str = ""
    color: Optional[str] = None


class Priority(MetaItem):
    """Task priority definition."""
    pass


class Status(MetaItem):
    """Task status definition."""
    pass


class WorkspaceMeta(BaseModel):
    """Priorities and statuses known to the caller."""
    priorities: List[Priority] = Field(default_factory=list)
    statuses: List[Status] = Field(default_factory=list)
