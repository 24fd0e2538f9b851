# src/taskflow/users/user_repository.py

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.errors import DuplicateError, StorageError
from ..core.ports import Storage
from .user_models import User

logger = logging.getLogger(__name__)

STORAGE_KEY = "users"


class UserRepository:
    """
    In-memory user index with write-through persistence to storage["users"].

    Invariant: no two users share a username or an email (case-sensitive).
    """

    def __init__(self, storage: Storage, *, storage_key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._users: dict[str, User] = {}
        self._load_from_storage()

    # ---- persistence ----

    def _load_from_storage(self) -> None:
        users: dict[str, User] = {}
        try:
            for item in self._storage.load(self._storage_key, []) or []:
                user = User.from_dict(item)
                users[user.id] = user
        except Exception:
            logger.exception("Failed to load users from storage key=%s; starting empty.", self._storage_key)
            users = {}
        self._users = users
        logger.info("UserRepository ready key=%s total=%s", self._storage_key, len(self._users))

    def _persist(self, users: Iterable[User]) -> None:
        payload = [u.to_dict() for u in users]
        try:
            self._storage.save(self._storage_key, payload)
        except Exception as e:
            logger.exception("Failed to save users to storage key=%s", self._storage_key)
            if isinstance(e, StorageError):
                raise
            raise StorageError(f"Gagal menyimpan user: {e}") from e

    def _ensure_unique(self, user: User, *, exclude_id: str | None = None) -> None:
        for other in self._users.values():
            if other.id != exclude_id and other.username == user.username:
                raise DuplicateError("username", user.username, f"Username '{user.username}' sudah digunakan")
        for other in self._users.values():
            if other.id != exclude_id and other.email == user.email:
                raise DuplicateError("email", user.email, f"Email '{user.email}' sudah digunakan")

    # ---- CRUD ----

    def create(self, data: Mapping[str, Any]) -> User:
        user = User.create(
            username=data.get("username"),  # type: ignore[arg-type]
            email=data.get("email"),  # type: ignore[arg-type]
            full_name=data.get("full_name"),
        )
        self._ensure_unique(user)
        self._persist([*self._users.values(), user])
        self._users[user.id] = user
        logger.debug("User created id=%s username=%s", user.id, user.username)
        return user

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def find_all(self) -> list[User]:
        return list(self._users.values())

    def find_active(self) -> list[User]:
        return [u for u in self._users.values() if u.is_active]

    def count(self) -> int:
        return len(self._users)

    def update(self, user_id: str, updates: Mapping[str, Any]) -> User | None:
        """
        Apply profile changes (username, email, full_name, is_active).

        Unknown keys are ignored. Nothing is committed unless every change
        validates, stays unique and is persisted.
        """
        user = self._users.get(user_id)
        if user is None:
            return None

        draft = copy.deepcopy(user)
        draft.update_profile(
            username=updates.get("username"),
            email=updates.get("email"),
            full_name=updates.get("full_name"),
        )
        if "is_active" in updates:
            if updates["is_active"]:
                draft.activate()
            else:
                draft.deactivate()
        self._ensure_unique(draft, exclude_id=user_id)

        self._commit(draft)
        logger.debug("User updated id=%s keys=%s", user_id, sorted(updates))
        return draft

    def record_login(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        draft = copy.deepcopy(user)
        draft.record_login()
        self._commit(draft)
        logger.info("User login recorded id=%s username=%s", user_id, draft.username)
        return draft

    def _commit(self, user: User) -> None:
        snapshot = dict(self._users)
        snapshot[user.id] = user
        self._persist(snapshot.values())
        self._users = snapshot

    # ---- queries ----

    def search(self, query: str) -> list[User]:
        term = (query or "").casefold()
        return [
            u
            for u in self._users.values()
            if term in u.username.casefold() or term in u.email.casefold() or term in u.full_name.casefold()
        ]
