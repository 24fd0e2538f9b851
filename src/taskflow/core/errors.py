# src/taskflow/core/errors.py

from __future__ import annotations

"""
Error types raised by entities, repositories and storage adapters.

Controllers catch TaskflowError and turn it into an error envelope,
so callers of the controller layer never see these.
"""

from typing import Any


class TaskflowError(Exception):
    """Base class for all domain errors."""


class ValidationError(TaskflowError, ValueError):
    """A field value was rejected by an entity mutation."""


class DuplicateError(ValidationError):
    """A uniqueness rule (username/email) was violated."""

    def __init__(self, field: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class NotFoundError(TaskflowError, LookupError):
    """Raised where absence is an error rather than a None result."""


class StorageError(TaskflowError, RuntimeError):
    """The Storage Port failed to persist a snapshot."""


class AuthorizationError(TaskflowError, PermissionError):
    """The current session may not perform the requested operation."""
