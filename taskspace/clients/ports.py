"""
Ports (interfaces) used by the pipeline.

The pipeline depends on a Protocol instead of a concrete HTTP client, so the
transport stays swappable and tests can script responses.

Every method either raises or returns the server's JSON body. Create calls
answer ``{"success": True, "<kind>": {...}}`` or
``{"success": False, "error": "..."}``.
"""
from typing import Any, Dict, Protocol

Response = Dict[str, Any]


class WorkspaceClient(Protocol):
    """Async request interface for workspace data."""

    async def fetch_space_everything(
        self, space_id: str, workspace_id: str, user_id: str, token: str
    ) -> Response:
        """Return ``{"space": [...], "folder": [...], "list": [...], "task": [...]}``."""
        ...

    async def create_space(
        self, name: str, workspace_id: str, user_id: str, token: str
    ) -> Response: ...

    async def create_folder(
        self, name: str, parent_type: str, parent_id: str, user_id: str, token: str
    ) -> Response: ...

    async def create_list(
        self, name: str, parent_type: str, parent_id: str, user_id: str, token: str
    ) -> Response: ...

    async def create_task(
        self,
        name: str,
        meta: Dict[str, Any],
        parent_type: str,
        parent_id: str,
        user_id: str,
        token: str,
    ) -> Response: ...
