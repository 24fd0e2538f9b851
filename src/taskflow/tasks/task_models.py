# src/taskflow/tasks/task_models.py

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any, TypeVar

from ..core.clock import new_id, parse_datetime, to_iso, utcnow
from ..core.errors import ValidationError

_E = TypeVar("_E", bound=StrEnum)


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_closed(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.CANCELLED)


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
    TaskPriority.URGENT: 4,
}


class TaskCategory(StrEnum):
    WORK = "work"
    PERSONAL = "personal"
    STUDY = "study"
    HEALTH = "health"
    FINANCE = "finance"
    OTHER = "other"


def _coerce(enum_cls: type[_E], value: Any, label: str) -> _E:
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{label} tidak valid: '{value}'") from None


def _coerce_hours(value: Any, label: str) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} tidak valid: '{value}'") from None
    if math.isnan(hours) or hours < 0:
        raise ValidationError(f"{label} tidak valid: '{value}'")
    return hours


@dataclass(slots=True)
class Task:
    """
    A unit of work owned by one user and optionally delegated to another.

    Mutations go through the named methods below; each one validates its input,
    raises ValidationError on a bad value and bumps updated_at on success.
    is_overdue / days_until_due are derived on access and never serialized.
    """

    id: str
    title: str
    description: str
    owner_id: str
    assignee_id: str
    created_at: datetime
    updated_at: datetime

    category: TaskCategory = TaskCategory.PERSONAL
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: datetime | None = None
    estimated_hours: float | None = None
    time_spent: float = 0.0
    tags: list[str] = field(default_factory=list)
    notes: list[dict[str, str]] = field(default_factory=list)
    completed_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        title: str,
        owner_id: str,
        description: str = "",
        assignee_id: str | None = None,
        category: TaskCategory | str = TaskCategory.PERSONAL,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        status: TaskStatus | str = TaskStatus.PENDING,
        due_date: datetime | date | str | None = None,
        estimated_hours: float | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        if not owner_id or not str(owner_id).strip():
            raise ValidationError("Owner task wajib diisi")

        now = utcnow()
        task = cls(
            id=new_id(),
            title="",
            description="",
            owner_id=str(owner_id),
            assignee_id=str(owner_id),
            created_at=now,
            updated_at=now,
        )
        task.update_title(title)
        task.update_description(description)
        task.update_category(category)
        task.update_priority(priority)
        task.update_status(status)
        task.set_due_date(due_date)
        if assignee_id:
            task.assign_to(assignee_id)
        if estimated_hours is not None:
            task.set_estimated_hours(estimated_hours)
        for tag in tags or []:
            task.add_tag(tag)
        # Construction is not an edit.
        task.updated_at = task.created_at
        return task

    # ---- derived ----

    @property
    def is_overdue(self) -> bool:
        if self.due_date is None or self.status.is_closed:
            return False
        return self.due_date < utcnow()

    @property
    def days_until_due(self) -> int | None:
        if self.due_date is None:
            return None
        seconds = (self.due_date - utcnow()).total_seconds()
        return math.ceil(seconds / 86400)

    # ---- mutations ----

    def _touch(self) -> None:
        self.updated_at = utcnow()

    def update_title(self, title: str) -> None:
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Judul task wajib diisi")
        self.title = title.strip()
        self._touch()

    def update_description(self, description: str | None) -> None:
        self.description = (description or "").strip()
        self._touch()

    def update_category(self, category: TaskCategory | str) -> None:
        self.category = _coerce(TaskCategory, category, "Kategori")
        self._touch()

    def update_priority(self, priority: TaskPriority | str) -> None:
        self.priority = _coerce(TaskPriority, priority, "Prioritas")
        self._touch()

    def update_status(self, status: TaskStatus | str) -> None:
        new_status = _coerce(TaskStatus, status, "Status")
        if new_status is TaskStatus.COMPLETED:
            if self.status is not TaskStatus.COMPLETED:
                self.completed_at = utcnow()
        else:
            self.completed_at = None
        self.status = new_status
        self._touch()

    def set_due_date(self, due_date: datetime | date | str | None) -> None:
        self.due_date = parse_datetime(due_date, label="tanggal deadline")
        self._touch()

    def assign_to(self, user_id: str) -> None:
        if not user_id or not str(user_id).strip():
            raise ValidationError("Assignee wajib diisi")
        self.assignee_id = str(user_id)
        self._touch()

    def set_estimated_hours(self, hours: float | None) -> None:
        self.estimated_hours = None if hours is None else _coerce_hours(hours, "Estimasi jam")
        self._touch()

    def add_time_spent(self, hours: float) -> None:
        amount = _coerce_hours(hours, "Waktu kerja")
        if amount <= 0:
            raise ValidationError(f"Waktu kerja harus lebih dari 0: '{hours}'")
        self.time_spent += amount
        self._touch()

    def add_tag(self, tag: str) -> None:
        if not isinstance(tag, str) or not tag.strip():
            raise ValidationError("Tag tidak boleh kosong")
        clean = tag.strip()
        if clean not in self.tags:
            self.tags.append(clean)
            self._touch()

    def remove_tag(self, tag: str) -> None:
        clean = tag.strip() if isinstance(tag, str) else tag
        if clean in self.tags:
            self.tags.remove(clean)
            self._touch()

    def add_note(self, text: str) -> None:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Catatan tidak boleh kosong")
        now = utcnow()
        self.notes.append({"text": text.strip(), "created_at": now.isoformat()})
        self.updated_at = now

    # ---- serialization ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "owner_id": self.owner_id,
            "assignee_id": self.assignee_id,
            "category": self.category.value,
            "priority": self.priority.value,
            "status": self.status.value,
            "due_date": to_iso(self.due_date),
            "estimated_hours": self.estimated_hours,
            "time_spent": self.time_spent,
            "tags": list(self.tags),
            "notes": [dict(n) for n in self.notes],
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
            "completed_at": to_iso(self.completed_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        if not isinstance(data, dict):
            raise ValidationError(f"Data task tidak valid: {data!r}")
        try:
            task_id = str(data["id"])
            owner_id = str(data["owner_id"])
        except KeyError as e:
            raise ValidationError(f"Data task tidak lengkap: field {e.args[0]!r} hilang") from None

        created_at = parse_datetime(data.get("created_at")) or utcnow()
        estimated = data.get("estimated_hours")
        return cls(
            id=task_id,
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            owner_id=owner_id,
            assignee_id=str(data.get("assignee_id") or owner_id),
            created_at=created_at,
            updated_at=parse_datetime(data.get("updated_at")) or created_at,
            category=_coerce(TaskCategory, data.get("category", TaskCategory.PERSONAL), "Kategori"),
            priority=_coerce(TaskPriority, data.get("priority", TaskPriority.MEDIUM), "Prioritas"),
            status=_coerce(TaskStatus, data.get("status", TaskStatus.PENDING), "Status"),
            due_date=parse_datetime(data.get("due_date")),
            estimated_hours=None if estimated is None else _coerce_hours(estimated, "Estimasi jam"),
            time_spent=_coerce_hours(data.get("time_spent") or 0.0, "Waktu kerja"),
            tags=[str(t) for t in (data.get("tags") or [])],
            notes=[
                {"text": str(n.get("text", "")), "created_at": str(n.get("created_at", ""))}
                for n in (data.get("notes") or [])
                if isinstance(n, dict)
            ],
            completed_at=parse_datetime(data.get("completed_at")),
        )
