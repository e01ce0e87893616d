"""
Workspace clients for Taskspace.

The pipeline talks to the server through the WorkspaceClient port:
- WorkspaceClient: async request interface the pipeline depends on
- SnapshotClient: offline implementation backed by a JSON snapshot file
"""

from taskspace.clients.ports import WorkspaceClient
from taskspace.clients.snapshot import SnapshotClient

__all__ = [
    "WorkspaceClient",
    "SnapshotClient",
]
