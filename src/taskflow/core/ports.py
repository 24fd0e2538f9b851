# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the repositories.

Repositories depend on these Protocols instead of concrete adapters.
This keeps storage swappable and makes testing easier.
"""

from typing import Any, Protocol


class Storage(Protocol):
    """
    Key-value persistence for serialized entity lists.

    Keys in use: "tasks", "users".
    """

    def load(self, key: str, default: Any = None) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...


class UserLookup(Protocol):
    """The slice of UserRepository the task controller needs."""

    def find_by_id(self, user_id: str) -> Any | None: ...
