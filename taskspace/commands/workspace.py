"""
Workspace command group for the Taskspace CLI.

Loads a workspace snapshot through the pipeline, then shows, checks or
extends it. Creations go through the same pipeline operations a UI would
dispatch, and are written back to the snapshot by the SnapshotClient.
"""
import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Set, Tuple

import click

from taskspace.clients.snapshot import SnapshotClient
from taskspace.constants import get_snapshot_path, get_tree_indent
from taskspace.exceptions import TaskspaceError
from taskspace.managers.integrity import CHILD_KIND, check_integrity
from taskspace.managers.pipeline import WorkspacePipeline
from taskspace.managers.store import WorkspaceStore
from taskspace.models.entities import ContainerEntity, TaskEntity
from taskspace.models.results import OperationResult

DEFAULT_ID = "local"

snapshot_option = click.option(
    "-s", "--snapshot", "snapshot_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Workspace snapshot file (defaults to the configured snapshot_path).",
)
identity_options = [
    click.option("--workspace-id", default=DEFAULT_ID, show_default=True, help="Workspace id."),
    click.option("--user-id", default=DEFAULT_ID, show_default=True, help="User id."),
    click.option("--token", default="", help="Auth token passed to the client."),
]


def with_identity(func):
    """Attach --workspace-id, --user-id and --token."""
    for option in reversed(identity_options):
        func = option(func)
    return func


@click.group()
def workspace():
    """Inspect and extend a workspace snapshot."""
    pass


def _open(snapshot_path: Optional[Path]) -> Tuple[SnapshotClient, WorkspaceStore, WorkspacePipeline]:
    """Build client, store and pipeline for a snapshot file."""
    try:
        client = SnapshotClient(snapshot_path or get_snapshot_path())
    except TaskspaceError as e:
        raise click.ClickException(str(e))
    store = WorkspaceStore()
    pipeline = WorkspacePipeline(store, client, meta=client.meta)
    return client, store, pipeline


def _run(
    pipeline: WorkspacePipeline,
    client: SnapshotClient,
    workspace_id: str,
    user_id: str,
    token: str,
    operation: Optional[Callable[[], Awaitable[OperationResult]]] = None,
) -> Optional[OperationResult]:
    """Load every space, then run ``operation`` if given.

    Raises:
        click.ClickException: If loading or the operation is rejected.
    """

    async def _go() -> Optional[OperationResult]:
        loaded = await pipeline.fetch_workspace(client.space_ids, workspace_id, user_id, token)
        if not loaded.ok:
            return loaded
        if operation is None:
            return None
        return await operation()

    try:
        result = asyncio.run(_go())
    except TaskspaceError as e:
        raise click.ClickException(f"Error: {e}")
    if result is not None and not result.ok:
        raise click.ClickException(pipeline.store.error)
    return result


def render_tree(store: WorkspaceStore, indent: int = 2) -> List[str]:
    """Render spaces and their children as indented lines.

    Children are followed through the parents' reference lists; entities not
    reachable that way are listed under "Unattached".
    """
    lines: List[str] = []
    seen: Set[Tuple[str, str]] = set()

    def _label(kind: str, entity: Any) -> str:
        label = f"[{kind}] {entity.name or '(unnamed)'} ({entity.id})"
        if isinstance(entity, TaskEntity):
            if entity.priority is not None:
                label += f" !{entity.priority.name}"
            if entity.status is not None:
                label += f" <{entity.status.name}>"
        return label

    def _walk(kind: str, entity: Any, depth: int) -> None:
        seen.add((kind, entity.id))
        lines.append(" " * (indent * depth) + _label(kind, entity))
        if not isinstance(entity, ContainerEntity):
            return
        for ref in entity.children:
            child_kind = CHILD_KIND[ref.child_type]
            child = store.get(child_kind, ref.id)
            if child is None:
                lines.append(" " * (indent * (depth + 1)) + f"[{child_kind}] <missing> ({ref.id})")
            elif (child_kind, child.id) not in seen:
                _walk(child_kind, child, depth + 1)

    for space in store.spaces:
        _walk("space", space, 0)

    unattached = [
        (kind, entity)
        for kind, collection in (("folder", store.folders), ("list", store.lists), ("task", store.tasks))
        for entity in collection
        if (kind, entity.id) not in seen
    ]
    if unattached:
        lines.append("Unattached:")
        for kind, entity in unattached:
            lines.append(" " * indent + _label(kind, entity))
    return lines


@workspace.command(name="show")
@snapshot_option
@with_identity
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def show(snapshot_path, workspace_id, user_id, token, json_output):
    """Show the workspace tree."""
    client, store, pipeline = _open(snapshot_path)
    _run(pipeline, client, workspace_id, user_id, token)

    if json_output:
        click.echo(json.dumps(store.snapshot(), indent=2))
        return

    lines = render_tree(store, get_tree_indent())
    if not lines:
        click.echo("Workspace is empty.")
        return
    for line in lines:
        click.echo(line)


@workspace.command(name="check")
@snapshot_option
@with_identity
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def check(ctx, snapshot_path, workspace_id, user_id, token, json_output):
    """Check parent/child references. Exits with 1 if any are broken."""
    client, store, pipeline = _open(snapshot_path)
    _run(pipeline, client, workspace_id, user_id, token)
    issues = check_integrity(store)

    if json_output:
        click.echo(json.dumps(
            [
                {"type": i.type.value, "kind": i.kind, "id": i.entity_id, "message": i.message}
                for i in issues
            ],
            indent=2,
        ))
    elif issues:
        for issue in issues:
            click.echo(f"✗ {issue.type.value}: {issue.message}")
    else:
        click.echo("✓ No integrity issues found.")

    if issues:
        ctx.exit(1)


@workspace.command(name="add-space")
@click.argument("name")
@snapshot_option
@with_identity
def add_space(name, snapshot_path, workspace_id, user_id, token):
    """Create a space."""
    client, _, pipeline = _open(snapshot_path)
    result = _run(
        pipeline, client, workspace_id, user_id, token,
        lambda: pipeline.create_space(name, workspace_id, user_id, token),
    )
    click.echo(f"✓ Created space '{result.payload.name}' ({result.payload.id})")


def _parent_options(func):
    func = click.option("-i", "--parent-id", required=True, help="Parent id.")(func)
    func = click.option(
        "-t", "--parent-type", required=True,
        type=click.Choice(["space", "folder", "list"], case_sensitive=False),
        help="Parent type.",
    )(func)
    return func


@workspace.command(name="add-folder")
@click.argument("name")
@_parent_options
@snapshot_option
@with_identity
def add_folder(name, parent_type, parent_id, snapshot_path, workspace_id, user_id, token):
    """Create a folder under a space, folder or list."""
    client, _, pipeline = _open(snapshot_path)
    result = _run(
        pipeline, client, workspace_id, user_id, token,
        lambda: pipeline.create_folder(name, parent_type.upper(), parent_id, user_id, token),
    )
    click.echo(f"✓ Created folder '{result.payload.name}' ({result.payload.id})")


@workspace.command(name="add-list")
@click.argument("name")
@_parent_options
@snapshot_option
@with_identity
def add_list(name, parent_type, parent_id, snapshot_path, workspace_id, user_id, token):
    """Create a list under a space, folder or list."""
    client, _, pipeline = _open(snapshot_path)
    result = _run(
        pipeline, client, workspace_id, user_id, token,
        lambda: pipeline.create_list(name, parent_type.upper(), parent_id, user_id, token),
    )
    click.echo(f"✓ Created list '{result.payload.name}' ({result.payload.id})")


@workspace.command(name="add-task")
@click.argument("name")
@click.option("-l", "--list-id", required=True, help="Parent list id.")
@click.option("-p", "--priority", help="Priority id.")
@click.option("--status", help="Status id.")
@snapshot_option
@with_identity
def add_task(name, list_id, priority, status, snapshot_path, workspace_id, user_id, token):
    """Create a task in a list."""
    client, _, pipeline = _open(snapshot_path)
    task_meta = {"priority": priority, "status": status}
    result = _run(
        pipeline, client, workspace_id, user_id, token,
        lambda: pipeline.create_task(name, task_meta, "LIST", list_id, user_id, token),
    )
    click.echo(f"✓ Created task '{result.payload.name}' ({result.payload.id})")
