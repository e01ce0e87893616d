"""
Bulk loading of fetched workspace data into the store.
"""
import logging
from typing import Any, Dict, Iterable, Sequence, Union

from taskspace.constants import KIND_FOLDER, KIND_LIST, KIND_SPACE, KIND_TASK
from taskspace.managers.store import ENTITY_MODELS, WorkspaceStore
from taskspace.models.results import SpaceBatch

logger = logging.getLogger(__name__)


def _merge_records(
    store: WorkspaceStore, kind: str, records: Iterable[Union[Dict[str, Any], Any]]
) -> int:
    """Append records whose id is not yet in the collection.

    Returns:
        Number of entities appended.
    """
    model = ENTITY_MODELS[kind]
    collection = store.collection_for(kind)
    known = {entity.id for entity in collection}
    added = 0

    for record in records:
        entity = record if isinstance(record, model) else model.model_validate(record)
        if entity.id in known:
            continue
        collection.append(entity)
        known.add(entity.id)
        added += 1
    return added


def merge_fetched_workspace(
    store: WorkspaceStore, batches: Sequence[Union[SpaceBatch, Dict[str, Any]]]
) -> None:
    """
    Merge per-space fetch results into the store.

    Records are deduplicated by entity id against what the store already
    holds and against earlier records of the same merge, so merging the same
    batches twice leaves the store unchanged. Parent links are taken as
    fetched; nothing is re-attached here.

    Args:
        store: WorkspaceStore to mutate in place.
        batches: One result per space, in fetch order. Tasks must already
            be sanitized.
    """
    added: Dict[str, int] = {KIND_SPACE: 0, KIND_FOLDER: 0, KIND_LIST: 0, KIND_TASK: 0}

    for batch in batches:
        if not isinstance(batch, SpaceBatch):
            batch = SpaceBatch.model_validate(batch)
        added[KIND_SPACE] += _merge_records(store, KIND_SPACE, batch.spaces)
        added[KIND_FOLDER] += _merge_records(store, KIND_FOLDER, batch.folders)
        added[KIND_LIST] += _merge_records(store, KIND_LIST, batch.lists)
        added[KIND_TASK] += _merge_records(store, KIND_TASK, batch.tasks)

    logger.debug(
        "Merged %d batches: %d spaces, %d folders, %d lists, %d tasks added",
        len(batches),
        added[KIND_SPACE],
        added[KIND_FOLDER],
        added[KIND_LIST],
        added[KIND_TASK],
    )
