"""
Operation result models for the Taskspace pipeline.
"""
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RequestPhase(str, Enum):
    """Lifecycle phase of an asynchronous operation."""
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class OperationResult(BaseModel):
    """Outcome of one pipeline operation.

    Attributes:
        op: Operation name (e.g. ``"space/createSpace"``).
        phase: FULFILLED or REJECTED once the operation settles.
        payload: Entity (or batches) applied to the store on success.
        error: Error message on rejection.
    """
    op: str
    phase: RequestPhase
    payload: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.phase == RequestPhase.FULFILLED


class SpaceBatch(BaseModel):
    """Everything fetched for a single space.

    Keys on the wire are singular (``space``, ``folder``, ``list``, ``task``).
    Items are raw records or already-built entity models.
    """
    model_config = ConfigDict(populate_by_name=True)

    spaces: List[Any] = Field(default_factory=list, alias="space")
    folders: List[Any] = Field(default_factory=list, alias="folder")
    lists: List[Any] = Field(default_factory=list, alias="list")
    tasks: List[Any] = Field(default_factory=list, alias="task")
