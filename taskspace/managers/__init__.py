"""
Managers for Taskspace.

This package contains the classes and functions that maintain the workspace store:
- WorkspaceStore: Normalized collections, selection and error slot
- AttachmentResolver: Links created children to their parents, tracks orphans
- merge_fetched_workspace: Bulk merge of fetched spaces, deduplicated by id
- WorkspacePipeline: Async fetch/create operations with pending/fulfilled/rejected phases
- EventBus: Lifecycle events for pipeline operations
- check_integrity: Read-only report of broken references
"""

from taskspace.managers.store import WorkspaceStore
from taskspace.managers.attachment import AttachmentResolver
from taskspace.managers.loader import merge_fetched_workspace
from taskspace.managers.pipeline import WorkspacePipeline
from taskspace.managers.events import (
    EventBus,
    Event,
    OperationEvent,
    EventType,
    EventListener,
)
from taskspace.managers.integrity import IntegrityIssue, IssueType, check_integrity

__all__ = [
    "WorkspaceStore",
    "AttachmentResolver",
    "merge_fetched_workspace",
    "WorkspacePipeline",
    "EventBus",
    "Event",
    "OperationEvent",
    "EventType",
    "EventListener",
    "IntegrityIssue",
    "IssueType",
    "check_integrity",
]
