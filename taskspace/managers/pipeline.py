"""
WorkspacePipeline for Taskspace.

Runs the asynchronous workspace operations: each one publishes a pending
event, awaits the client, then either applies its result to the store
(fulfilled) or records the error (rejected).
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from taskspace.clients.ports import Response, WorkspaceClient
from taskspace.constants import ERROR_REQUEST_FAILED
from taskspace.exceptions import RejectedError, ResponseError
from taskspace.managers.attachment import AttachmentResolver
from taskspace.managers.events import EventBus, EventType, OperationEvent
from taskspace.managers.loader import merge_fetched_workspace
from taskspace.managers.store import WorkspaceStore
from taskspace.models.entities import FolderEntity, ListEntity, SpaceEntity, TaskEntity
from taskspace.models.meta import WorkspaceMeta
from taskspace.models.results import OperationResult, RequestPhase, SpaceBatch
from taskspace.sanitizer import sanitize_tasks

logger = logging.getLogger(__name__)

Sanitizer = Callable[[Sequence[Dict[str, Any]], Any, Any], List[Dict[str, Any]]]


def error_message(exc: BaseException) -> str:
    """Collapse any failure to the message stored in the error slot."""
    message = str(exc)
    return message if message else ERROR_REQUEST_FAILED


def _failure_message(body: Dict[str, Any]) -> Optional[str]:
    """Return the error message if the body carries ``success: false``.

    The flag is read on the outer body first, then inside a ``data`` envelope.
    """
    inner = body.get("data") if isinstance(body.get("data"), dict) else {}
    if body.get("success") is False or inner.get("success") is False:
        return body.get("error") or inner.get("error") or ERROR_REQUEST_FAILED
    return None


def _unwrap_body(response: Any, key: str) -> Dict[str, Any]:
    """Check the failure flag, then descend into a ``data`` envelope if needed."""
    if not isinstance(response, dict):
        raise ResponseError(f"Unexpected response type: {type(response).__name__}")

    message = _failure_message(response)
    if message is not None:
        raise RejectedError(message)

    if key not in response and isinstance(response.get("data"), dict):
        return response["data"]
    return response


def unwrap_response(response: Any, key: str) -> Dict[str, Any]:
    """
    Pull the created entity out of a create response.

    Args:
        response: JSON body returned by the client. A ``{"data": {...}}``
            envelope is accepted as well.
        key: Entity key ('space', 'folder', 'list' or 'task').

    Returns:
        The raw entity record.

    Raises:
        RejectedError: If the body, or its envelope, carries ``success: false``.
        ResponseError: If the body has no record under ``key``.
    """
    record = _unwrap_body(response, key).get(key)
    if not isinstance(record, dict):
        raise ResponseError(f"Response is missing '{key}'.")
    return record


class WorkspacePipeline:
    """
    Orchestrates the five workspace operations against a client.

    Every operation returns an OperationResult and never raises: transport
    failures, ``success: false`` answers and malformed bodies all end in the
    REJECTED phase with ``store.error`` set to the message.

    Mutations happen synchronously after the single await on the client, so
    concurrent operations are applied in completion order.

    Usage:
        store = WorkspaceStore()
        pipeline = WorkspacePipeline(store, client, meta=meta)
        pipeline.events.subscribe(lambda event: print(event.type, event.phase))

        await pipeline.fetch_workspace(["s1", "s2"], "w1", "u1", token)
        result = await pipeline.create_folder("Docs", "SPACE", "s1", "u1", token)
        if not result.ok:
            print(store.error)
    """

    def __init__(
        self,
        store: WorkspaceStore,
        client: WorkspaceClient,
        meta: Optional[WorkspaceMeta] = None,
        sanitizer: Sanitizer = sanitize_tasks,
        events: Optional[EventBus] = None,
    ) -> None:
        """
        Initialize WorkspacePipeline.

        Args:
            store: WorkspaceStore to apply results to.
            client: Client performing the actual requests.
            meta: Priorities and statuses used to sanitize tasks. Read when a
                response arrives, so it may be replaced between operations.
            sanitizer: Task sanitizer; defaults to sanitize_tasks.
            events: EventBus for lifecycle events; a private bus by default.
        """
        self.store = store
        self.client = client
        self.meta = meta if meta is not None else WorkspaceMeta()
        self.sanitizer = sanitizer
        self.events = events if events is not None else EventBus()
        self.resolver = AttachmentResolver(store)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _publish(self, op: EventType, phase: RequestPhase, payload: Any = None, error: Optional[str] = None) -> None:
        self.events.publish(OperationEvent(type=op, phase=phase, payload=payload, error=error))

    async def _run(
        self,
        op: EventType,
        request: Callable[[], Awaitable[Any]],
        shape: Callable[[Any], Any],
        apply: Callable[[Any], None],
    ) -> OperationResult:
        """Run one operation through pending, then fulfilled or rejected.

        Args:
            op: Operation being run.
            request: Coroutine factory performing the client call.
            shape: Turns the response into the payload; raises to reject.
            apply: Applies the payload to the store.
        """
        logger.debug("%s pending", op.value)
        self._publish(op, RequestPhase.PENDING)

        try:
            response = await request()
            payload = shape(response)
        except Exception as e:
            message = error_message(e)
            logger.warning("%s rejected: %s", op.value, message)
            self.store.set_error(message)
            self._publish(op, RequestPhase.REJECTED, error=message)
            return OperationResult(op=op.value, phase=RequestPhase.REJECTED, error=message)

        apply(payload)
        logger.debug("%s fulfilled", op.value)
        self._publish(op, RequestPhase.FULFILLED, payload=payload)
        return OperationResult(op=op.value, phase=RequestPhase.FULFILLED, payload=payload)

    def _sanitize(self, raw_tasks: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self.sanitizer(raw_tasks, self.meta.priorities, self.meta.statuses)

    # =========================================================================
    # Bulk fetch
    # =========================================================================

    async def _fetch_all(
        self, spaces: Sequence[str], workspace_id: str, user_id: str, token: str
    ) -> List[Response]:
        """Fetch every space concurrently; fail if any single fetch fails."""
        results = await asyncio.gather(
            *(
                self.client.fetch_space_everything(space_id, workspace_id, user_id, token)
                for space_id in spaces
            ),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    def _shape_batches(self, responses: List[Response]) -> List[SpaceBatch]:
        batches = []
        for response in responses:
            raw = SpaceBatch.model_validate(_unwrap_body(response, "space"))
            batches.append(
                SpaceBatch(
                    spaces=[SpaceEntity.model_validate(r) for r in raw.spaces],
                    folders=[FolderEntity.model_validate(r) for r in raw.folders],
                    lists=[ListEntity.model_validate(r) for r in raw.lists],
                    tasks=[TaskEntity.model_validate(r) for r in self._sanitize(raw.tasks)],
                )
            )
        return batches

    async def fetch_workspace(
        self, spaces: Sequence[str], workspace_id: str, user_id: str, token: str
    ) -> OperationResult:
        """
        Fetch everything for the given spaces and merge it into the store.

        Args:
            spaces: Space ids to fetch.
            workspace_id: Workspace the spaces belong to.
            user_id: Requesting user.
            token: Auth token passed through to the client.

        Returns:
            OperationResult whose payload is the list of merged SpaceBatch.
        """
        return await self._run(
            EventType.FETCH_WORKSPACE,
            lambda: self._fetch_all(spaces, workspace_id, user_id, token),
            self._shape_batches,
            lambda batches: merge_fetched_workspace(self.store, batches),
        )

    # =========================================================================
    # Create operations
    # =========================================================================

    async def create_space(
        self, space_name: str, workspace_id: str, user_id: str, token: str
    ) -> OperationResult:
        """Create a space and append it to the store."""
        return await self._run(
            EventType.CREATE_SPACE,
            lambda: self.client.create_space(space_name, workspace_id, user_id, token),
            lambda response: SpaceEntity.model_validate(unwrap_response(response, "space")),
            self.resolver.attach_space,
        )

    async def create_folder(
        self, folder_name: str, parent_type: str, parent_id: str, user_id: str, token: str
    ) -> OperationResult:
        """Create a folder and link it under its parent space, folder or list."""
        return await self._run(
            EventType.CREATE_FOLDER,
            lambda: self.client.create_folder(folder_name, parent_type, parent_id, user_id, token),
            lambda response: FolderEntity.model_validate(unwrap_response(response, "folder")),
            self.resolver.attach_folder,
        )

    async def create_list(
        self, list_name: str, parent_type: str, parent_id: str, user_id: str, token: str
    ) -> OperationResult:
        """Create a list and link it under its parent space, folder or list."""
        return await self._run(
            EventType.CREATE_LIST,
            lambda: self.client.create_list(list_name, parent_type, parent_id, user_id, token),
            lambda response: ListEntity.model_validate(unwrap_response(response, "list")),
            self.resolver.attach_list,
        )

    def _shape_task(self, response: Any) -> TaskEntity:
        raw = unwrap_response(response, "task")
        return TaskEntity.model_validate(self._sanitize([raw])[0])

    async def create_task(
        self,
        task_name: str,
        task_meta: Dict[str, Any],
        parent_type: str,
        parent_id: str,
        user_id: str,
        token: str,
    ) -> OperationResult:
        """Create a task, sanitize it, and link it under its list."""
        return await self._run(
            EventType.CREATE_TASK,
            lambda: self.client.create_task(
                task_name, task_meta, parent_type, parent_id, user_id, token
            ),
            self._shape_task,
            self.resolver.attach_task,
        )
