"""
Data models for Taskspace.

Import models explicitly from their modules to avoid circular imports:
    from taskspace.models.entities import SpaceEntity, FolderEntity, ListEntity, TaskEntity
    from taskspace.models.meta import Priority, Status, WorkspaceMeta
    from taskspace.models.orphan import Orphan
    from taskspace.models.results import OperationResult, RequestPhase, SpaceBatch
    from taskspace.models.files import SnapshotFile, ConfigFile
"""
