"""
File models for the Taskspace application.

Models representing the structure of JSON files on disk.
"""
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from taskspace.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_SNAPSHOT_PATH,
    DEFAULT_TREE_INDENT,
    LOG_LEVELS,
)
from .meta import WorkspaceMeta


class SnapshotFile(BaseModel):
    """Model for a workspace snapshot file.

    Flat lists of raw server records with id references, plus the workspace
    meta used to sanitize tasks. Tasks keep raw priority/status ids here.
    """
    spaces: List[Dict[str, Any]] = Field(default_factory=list)
    folders: List[Dict[str, Any]] = Field(default_factory=list)
    lists: List[Dict[str, Any]] = Field(default_factory=list)
    tasks: List[Dict[str, Any]] = Field(default_factory=list)
    meta: WorkspaceMeta = Field(default_factory=WorkspaceMeta)


class ConfigFile(BaseModel):
    """Model for config.json file.

    Application settings and configuration.
    """
    schema_version: str = "0.1.0"

    log_level: str = DEFAULT_LOG_LEVEL
    snapshot_path: str = DEFAULT_SNAPSHOT_PATH
    tree_indent: int = Field(default=DEFAULT_TREE_INDENT, ge=0)

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}")
        return v
