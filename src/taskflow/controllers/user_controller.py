# src/taskflow/controllers/user_controller.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..core.errors import AuthorizationError, NotFoundError
from ..users.user_models import User
from ..users.user_repository import UserRepository
from .envelope import Response, fail, guarded, ok

logger = logging.getLogger(__name__)

MSG_USER_NOT_FOUND = "User tidak ditemukan"
MSG_USER_INACTIVE = "User tidak aktif"
MSG_USERNAME_REQUIRED = "Username wajib diisi"
MSG_EMPTY_QUERY = "Query pencarian tidak boleh kosong"


class UserController:
    """Registration, login and profile operations, shaped as response envelopes."""

    def __init__(self, user_repository: UserRepository) -> None:
        self.user_repository = user_repository

    def _require_user(self, user_id: str) -> User:
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError(MSG_USER_NOT_FOUND)
        return user

    @guarded
    def register(self, data: Mapping[str, Any]) -> Response:
        user = self.user_repository.create(data)
        return ok(user, message=f'User "{user.username}" berhasil didaftarkan')

    @guarded
    def login(self, username: str) -> Response:
        """
        Look a user up by username and stamp last_login_at.

        The returned user id is what TaskController.set_current_user expects.
        """
        if not username or not username.strip():
            return fail(MSG_USERNAME_REQUIRED)

        user = self.user_repository.find_by_username(username.strip())
        if user is None:
            raise NotFoundError(MSG_USER_NOT_FOUND)
        if not user.is_active:
            raise AuthorizationError(MSG_USER_INACTIVE)

        user = self.user_repository.record_login(user.id)
        return ok(user, message=f"Selamat datang, {user.full_name or user.username}")

    @guarded
    def get_user(self, user_id: str) -> Response:
        return ok(self._require_user(user_id))

    @guarded
    def update_profile(self, user_id: str, updates: Mapping[str, Any]) -> Response:
        self._require_user(user_id)
        user = self.user_repository.update(user_id, updates)
        return ok(user, message="Profil berhasil diupdate")

    @guarded
    def deactivate_user(self, user_id: str) -> Response:
        self._require_user(user_id)
        user = self.user_repository.update(user_id, {"is_active": False})
        return ok(user, message="User berhasil dinonaktifkan")

    @guarded
    def search_users(self, query: str) -> Response:
        if not query or not query.strip():
            return fail(MSG_EMPTY_QUERY)
        users = self.user_repository.search(query.strip())
        return ok(users, count=len(users), query=query)
