"""
Task sanitization for Taskspace.

Raw task records from the server refer to priorities and statuses by id.
Before a task enters the store those ids are replaced with the full
definitions known to the caller.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from taskspace.models.meta import MetaItem

logger = logging.getLogger(__name__)


def _index(items: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
    """Map definition id to its wire form."""
    index: Dict[str, Dict[str, Any]] = {}
    for item in items:
        if isinstance(item, MetaItem):
            data = item.model_dump(mode="json", by_alias=True, exclude_none=True)
        else:
            data = dict(item)
        item_id = data.get("_id", data.get("id"))
        if item_id is not None:
            index[str(item_id)] = data
    return index


def _resolve(value: Any, index: Dict[str, Dict[str, Any]], field: str, task_id: Any) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if isinstance(value, dict):
        # Already resolved
        return value
    resolved = index.get(str(value))
    if resolved is None:
        logger.debug("Task %s has unknown %s id %r", task_id, field, value)
        return None
    return dict(resolved)


def sanitize_tasks(
    raw_tasks: Sequence[Dict[str, Any]],
    priorities: Iterable[Any],
    statuses: Iterable[Any],
) -> List[Dict[str, Any]]:
    """
    Resolve priority and status ids on raw task records.

    Pure and order-preserving: the input records are not modified, and the
    output has one record per input record, in the same order.

    Args:
        raw_tasks: Task records as returned by the server.
        priorities: Priority definitions (models or wire dicts).
        statuses: Status definitions (models or wire dicts).

    Returns:
        New task records whose ``priority``/``status`` hold the matching
        definition, or None when the id is unknown.

    Examples:
        >>> sanitize_tasks([{"_id": "t1", "priority": "p1"}], [{"_id": "p1", "name": "High"}], [])
        [{'_id': 't1', 'priority': {'_id': 'p1', 'name': 'High'}, 'status': None}]
    """
    priority_index = _index(priorities)
    status_index = _index(statuses)

    sanitized = []
    for raw in raw_tasks:
        task = dict(raw)
        task_id = task.get("_id")
        task["priority"] = _resolve(task.get("priority"), priority_index, "priority", task_id)
        task["status"] = _resolve(task.get("status"), status_index, "status", task_id)
        sanitized.append(task)
    return sanitized
