"""
Custom exceptions for the Taskspace application.
"""


class TaskspaceError(Exception):
    """Base exception for all Taskspace-related errors."""
    pass


class ResponseError(TaskspaceError):
    """Raised when a client response is missing the data an operation needs."""
    pass


class StorageError(TaskspaceError):
    """Raised when a workspace snapshot cannot be read or written."""
    pass


class ConfigurationError(TaskspaceError):
    """Raised when there's a configuration or setup issue."""
    pass


class RejectedError(TaskspaceError):
    """Raised when the server answers a request with an explicit failure flag."""
    pass
