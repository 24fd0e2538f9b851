# src/taskflow/tasks/task_repository.py

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..core.clock import FAR_FUTURE, utcnow
from ..core.errors import StorageError
from ..core.ports import Storage
from .task_models import Task, TaskCategory, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

STORAGE_KEY = "tasks"

# Window used by filter(due_soon=True) and get_stats(), independent of find_due_soon(days).
DUE_SOON_DAYS = 3

# Order matters: update() applies these one by one.
_UPDATERS: tuple[tuple[str, Callable[[Task, Any], None]], ...] = (
    ("title", Task.update_title),
    ("description", Task.update_description),
    ("category", Task.update_category),
    ("priority", Task.update_priority),
    ("status", Task.update_status),
    ("due_date", Task.set_due_date),
    ("assignee_id", Task.assign_to),
    ("estimated_hours", Task.set_estimated_hours),
    ("add_time_spent", Task.add_time_spent),
    ("add_tag", Task.add_tag),
    ("remove_tag", Task.remove_tag),
    ("add_note", Task.add_note),
)
_UPDATE_KEYS = frozenset(key for key, _ in _UPDATERS)

_SORT_KEYS: dict[str, Callable[[Task], Any]] = {
    "title": lambda t: t.title.casefold(),
    "priority": lambda t: t.priority.rank,
    "due_date": lambda t: t.due_date or FAR_FUTURE,
    "created_at": lambda t: t.created_at,
}

_CREATE_FIELDS = (
    "description",
    "assignee_id",
    "category",
    "priority",
    "status",
    "due_date",
    "estimated_hours",
    "tags",
)


def _due_within(task: Task, days: int) -> bool:
    # A due date that passed earlier today still rounds up to 0 days.
    if task.due_date is None or task.due_date < utcnow():
        return False
    return 0 <= task.days_until_due <= days


class TaskRepository:
    """
    In-memory task index with write-through persistence.

    - The dict index is the source of truth while the process runs.
    - Every mutating call serializes the whole index to storage["tasks"]
      and only then commits the change in memory, so a failed save or a
      rejected field leaves both sides as they were.
    - Absence is reported as None/False, never as an exception.
    """

    def __init__(self, storage: Storage, *, storage_key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._tasks: dict[str, Task] = {}
        self._load_from_storage()

    # ---- persistence ----

    def _load_from_storage(self) -> None:
        tasks: dict[str, Task] = {}
        try:
            raw = self._storage.load(self._storage_key, [])
            for item in raw or []:
                task = Task.from_dict(item)
                tasks[task.id] = task
        except Exception:
            logger.exception("Failed to load tasks from storage key=%s; starting empty.", self._storage_key)
            tasks = {}
        self._tasks = tasks
        logger.info("TaskRepository ready key=%s total=%s", self._storage_key, len(self._tasks))

    def _persist(self, tasks: Iterable[Task]) -> None:
        payload = [t.to_dict() for t in tasks]
        try:
            self._storage.save(self._storage_key, payload)
        except Exception as e:
            logger.exception("Failed to save tasks to storage key=%s", self._storage_key)
            if isinstance(e, StorageError):
                raise
            raise StorageError(f"Gagal menyimpan task: {e}") from e

    def reload(self) -> None:
        """Drop the in-memory index and hydrate it again from storage."""
        self._load_from_storage()

    # ---- CRUD ----

    def create(self, data: Mapping[str, Any]) -> Task:
        kwargs = {name: data[name] for name in _CREATE_FIELDS if data.get(name) is not None}
        task = Task.create(
            title=data.get("title"),  # type: ignore[arg-type]
            owner_id=data.get("owner_id"),  # type: ignore[arg-type]
            **kwargs,
        )
        self._persist([*self._tasks.values(), task])
        self._tasks[task.id] = task
        logger.debug("Task created id=%s owner=%s assignee=%s", task.id, task.owner_id, task.assignee_id)
        return task

    def find_by_id(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def find_all(self) -> list[Task]:
        return list(self._tasks.values())

    def count(self) -> int:
        return len(self._tasks)

    def update(self, task_id: str, updates: Mapping[str, Any]) -> Task | None:
        task = self._tasks.get(task_id)
        if task is None:
            return None

        draft = copy.deepcopy(task)
        for key, apply in _UPDATERS:
            if key in updates:
                apply(draft, updates[key])

        snapshot = dict(self._tasks)
        snapshot[task_id] = draft
        self._persist(snapshot.values())
        self._tasks = snapshot
        logger.debug("Task updated id=%s keys=%s", task_id, sorted(k for k in updates if k in _UPDATE_KEYS))
        return draft

    def delete(self, task_id: str) -> bool:
        if task_id not in self._tasks:
            return False
        snapshot = {k: v for k, v in self._tasks.items() if k != task_id}
        self._persist(snapshot.values())
        self._tasks = snapshot
        logger.debug("Task deleted id=%s", task_id)
        return True

    # ---- queries ----

    def find_by_owner(self, owner_id: str) -> list[Task]:
        return [t for t in self._tasks.values() if t.owner_id == owner_id]

    def find_by_assignee(self, assignee_id: str) -> list[Task]:
        return [t for t in self._tasks.values() if t.assignee_id == assignee_id]

    def find_by_category(self, category: TaskCategory | str) -> list[Task]:
        return [t for t in self._tasks.values() if t.category == category]

    def find_by_status(self, status: TaskStatus | str) -> list[Task]:
        return [t for t in self._tasks.values() if t.status == status]

    def find_by_priority(self, priority: TaskPriority | str) -> list[Task]:
        return [t for t in self._tasks.values() if t.priority == priority]

    def find_overdue(self) -> list[Task]:
        return [t for t in self._tasks.values() if t.is_overdue]

    def find_due_soon(self, days: int = DUE_SOON_DAYS) -> list[Task]:
        return [t for t in self._tasks.values() if _due_within(t, days)]

    def find_by_tag(self, tag: str) -> list[Task]:
        return [t for t in self._tasks.values() if isinstance(t.tags, list) and tag in t.tags]

    def search(self, query: str) -> list[Task]:
        term = (query or "").casefold()
        return [
            t
            for t in self._tasks.values()
            if term in t.title.casefold()
            or term in t.description.casefold()
            or any(term in tag.casefold() for tag in t.tags)
        ]

    def filter(self, filters: Mapping[str, Any] | None = None) -> list[Task]:
        """
        Conjunctive filter. Recognized options:
          owner_id, assignee_id, category, status, priority  -> equality
          overdue=True                                        -> is_overdue
          due_soon=True                                       -> due within 3 days
          tags=[...]                                          -> has any of the tags
        Missing or falsy options impose no constraint.
        """
        filters = filters or {}
        results = self.find_all()

        for name in ("owner_id", "assignee_id", "category", "status", "priority"):
            wanted = filters.get(name)
            if wanted:
                results = [t for t in results if getattr(t, name) == wanted]

        if filters.get("overdue"):
            results = [t for t in results if t.is_overdue]
        if filters.get("due_soon"):
            results = [t for t in results if _due_within(t, DUE_SOON_DAYS)]

        tags = filters.get("tags")
        if tags:
            wanted_tags = [tags] if isinstance(tags, str) else list(tags)
            results = [t for t in results if any(tag in t.tags for tag in wanted_tags)]

        return results

    @staticmethod
    def sort(tasks: Iterable[Task], sort_by: str = "created_at", order: str = "desc") -> list[Task]:
        """
        Return a new list ordered by title / priority / due_date / created_at.

        Unknown sort_by falls back to created_at; any order other than "asc" is
        descending. Equal keys keep their input order in both directions.
        """
        key = _SORT_KEYS.get(sort_by, _SORT_KEYS["created_at"])
        return sorted(tasks, key=key, reverse=order != "asc")

    def get_stats(self, user_id: str | None = None) -> dict[str, Any]:
        tasks = self.find_by_owner(user_id) if user_id else self.find_all()
        return {
            "total": len(tasks),
            "by_status": {s.value: sum(1 for t in tasks if t.status is s) for s in TaskStatus},
            "by_priority": {p.value: sum(1 for t in tasks if t.priority is p) for p in TaskPriority},
            "by_category": {c.value: sum(1 for t in tasks if t.category is c) for c in TaskCategory},
            "overdue": sum(1 for t in tasks if t.is_overdue),
            "due_soon": sum(1 for t in tasks if _due_within(t, DUE_SOON_DAYS)),
            "completed": sum(1 for t in tasks if t.status is TaskStatus.COMPLETED),
        }
