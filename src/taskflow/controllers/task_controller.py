# src/taskflow/controllers/task_controller.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..core.errors import AuthorizationError, NotFoundError
from ..core.ports import UserLookup
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_repository import DUE_SOON_DAYS, TaskRepository
from ..users.user_models import User
from .envelope import Response, fail, guarded, ok

logger = logging.getLogger(__name__)

MSG_LOGIN_REQUIRED = "User harus login terlebih dahulu"
MSG_USER_NOT_FOUND = "User tidak ditemukan"
MSG_TITLE_REQUIRED = "Judul task wajib diisi"
MSG_ASSIGNEE_NOT_FOUND = "User yang di-assign tidak ditemukan"
MSG_TASK_NOT_FOUND = "Task tidak ditemukan"
MSG_NO_ACCESS = "Anda tidak memiliki akses ke task ini"
MSG_OWNER_ONLY_UPDATE = "Hanya owner yang bisa mengubah task"
MSG_OWNER_ONLY_DELETE = "Hanya owner yang bisa menghapus task"
MSG_DELETE_FAILED = "Gagal menghapus task"
MSG_EMPTY_QUERY = "Query pencarian tidak boleh kosong"


class TaskController:
    """
    Session-scoped access to tasks for one logged-in user.

    Access rules:
    - read / toggle: owner or assignee
    - update / delete: owner only
    - get_tasks / get_task_stats: scoped to tasks the user owns
    - search / overdue / due soon: scoped to tasks the user owns or is assigned
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        user_repository: UserLookup,
        *,
        due_soon_days: int = DUE_SOON_DAYS,
    ) -> None:
        self.task_repository = task_repository
        self.user_repository = user_repository
        self.due_soon_days = due_soon_days
        self._current_user_id: str | None = None

    # ---- session ----

    def set_current_user(self, user_id: str) -> None:
        """Simulated login. Raises NotFoundError for an unknown user id."""
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            self._current_user_id = None
            raise NotFoundError(MSG_USER_NOT_FOUND)
        self._current_user_id = user.id
        logger.info("Session user set id=%s", user_id)

    @property
    def current_user(self) -> User | None:
        """The session user as the repository holds it now, not as it was at login."""
        if self._current_user_id is None:
            return None
        return self.user_repository.find_by_id(self._current_user_id)

    # ---- helpers ----

    def _require_user(self) -> User:
        user = self.current_user
        # Deactivated or removed since set_current_user: the session is gone.
        if user is None or not user.is_active:
            raise AuthorizationError(MSG_LOGIN_REQUIRED)
        return user

    def _require_task(self, task_id: str) -> Task:
        task = self.task_repository.find_by_id(task_id)
        if task is None:
            raise NotFoundError(MSG_TASK_NOT_FOUND)
        return task

    @staticmethod
    def _involves(task: Task, user: User) -> bool:
        return task.owner_id == user.id or task.assignee_id == user.id

    def _require_assignee_exists(self, assignee_id: str) -> None:
        if self.user_repository.find_by_id(assignee_id) is None:
            raise NotFoundError(MSG_ASSIGNEE_NOT_FOUND)

    # ---- operations ----

    @guarded
    def create_task(self, task_data: Mapping[str, Any]) -> Response:
        user = self._require_user()

        title = task_data.get("title")
        if not isinstance(title, str) or not title.strip():
            return fail(MSG_TITLE_REQUIRED)

        to_create = {
            **task_data,
            "owner_id": user.id,
            "assignee_id": task_data.get("assignee_id") or user.id,
        }
        if to_create["assignee_id"] != user.id:
            self._require_assignee_exists(to_create["assignee_id"])

        task = self.task_repository.create(to_create)
        return ok(task, message=f'Task "{task.title}" berhasil dibuat')

    @guarded
    def get_tasks(self, filters: Mapping[str, Any] | None = None) -> Response:
        user = self._require_user()
        filters = dict(filters or {})

        # Pinned to the caller's own tasks, whatever owner_id was passed in.
        filters["owner_id"] = user.id
        tasks = self.task_repository.filter(filters)
        tasks = self.task_repository.sort(
            tasks,
            filters.get("sort_by") or "created_at",
            filters.get("sort_order") or "desc",
        )
        return ok(tasks, count=len(tasks))

    @guarded
    def get_task(self, task_id: str) -> Response:
        user = self._require_user()
        task = self._require_task(task_id)
        if not self._involves(task, user):
            raise AuthorizationError(MSG_NO_ACCESS)
        return ok(task)

    @guarded
    def update_task(self, task_id: str, updates: Mapping[str, Any]) -> Response:
        user = self._require_user()
        task = self._require_task(task_id)
        if task.owner_id != user.id:
            raise AuthorizationError(MSG_OWNER_ONLY_UPDATE)

        if updates.get("assignee_id"):
            self._require_assignee_exists(updates["assignee_id"])

        updated = self.task_repository.update(task_id, updates)
        if updated is None:
            return fail(MSG_TASK_NOT_FOUND)
        return ok(updated, message="Task berhasil diupdate")

    @guarded
    def delete_task(self, task_id: str) -> Response:
        user = self._require_user()
        task = self._require_task(task_id)
        if task.owner_id != user.id:
            raise AuthorizationError(MSG_OWNER_ONLY_DELETE)

        if self.task_repository.delete(task_id):
            return ok(message=f'Task "{task.title}" berhasil dihapus')
        return fail(MSG_DELETE_FAILED)

    @guarded
    def toggle_task_status(self, task_id: str) -> Response:
        """Flip between completed and pending; any other status toggles to completed."""
        user = self._require_user()
        task = self._require_task(task_id)
        if not self._involves(task, user):
            raise AuthorizationError(MSG_NO_ACCESS)

        new_status = TaskStatus.PENDING if task.status is TaskStatus.COMPLETED else TaskStatus.COMPLETED
        updated = self.task_repository.update(task_id, {"status": new_status})
        label = "selesai" if new_status is TaskStatus.COMPLETED else "belum selesai"
        return ok(updated, message=f"Task {label}")

    @guarded
    def search_tasks(self, query: str) -> Response:
        user = self._require_user()
        if not query or not query.strip():
            return fail(MSG_EMPTY_QUERY)

        results = [t for t in self.task_repository.search(query) if self._involves(t, user)]
        return ok(results, count=len(results), query=query)

    @guarded
    def get_task_stats(self) -> Response:
        user = self._require_user()
        return ok(self.task_repository.get_stats(user.id))

    @guarded
    def get_overdue_tasks(self) -> Response:
        user = self._require_user()
        tasks = [t for t in self.task_repository.find_overdue() if self._involves(t, user)]
        return ok(tasks, count=len(tasks))

    @guarded
    def get_tasks_due_soon(self, days: int | None = None) -> Response:
        user = self._require_user()
        window = self.due_soon_days if days is None else days
        tasks = [t for t in self.task_repository.find_due_soon(window) if self._involves(t, user)]
        return ok(tasks, count=len(tasks))
