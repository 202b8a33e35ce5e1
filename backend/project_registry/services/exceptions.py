"""Custom exceptions for the project reference registry."""

from __future__ import annotations


class ProjectRefError(Exception):
    """Base exception for registry failures."""


class ProjectRefValidationError(ProjectRefError):
    """Raised when a project reference lacks a field an operation requires."""

    def __init__(
        self, message: str, identifier: str | None = None, field: str | None = None
    ):
        super().__init__(message)
        self.identifier = identifier
        self.field = field


class StorageError(ProjectRefError):
    """
    Raised when the document store rejects or fails an operation.

    The driver exception is chained and kept on ``cause``. Every registry
    write is idempotent, so callers may retry the same call.
    """

    def __init__(self, message: str, operation: str, cause: BaseException | None = None):
        super().__init__(message)
        self.operation = operation
        self.cause = cause
