# tests/test_task_models.py

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from taskflow.core.errors import ValidationError
from taskflow.tasks.task_models import Task, TaskCategory, TaskPriority, TaskStatus

from .fakes import days_from_now


def _task(**kwargs) -> Task:
    kwargs.setdefault("title", "Write report")
    kwargs.setdefault("owner_id", "u1")
    return Task.create(**kwargs)


def test_create_defaults() -> None:
    task = _task()
    assert task.id
    assert task.assignee_id == "u1"
    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.category is TaskCategory.PERSONAL
    assert task.due_date is None
    assert task.days_until_due is None
    assert task.is_overdue is False
    assert task.time_spent == 0.0
    assert task.tags == []


def test_create_rejects_blank_title_and_missing_owner() -> None:
    with pytest.raises(ValidationError, match="Judul task wajib diisi"):
        _task(title="   ")
    with pytest.raises(ValidationError):
        _task(owner_id="")


def test_invalid_enum_values_name_the_value() -> None:
    task = _task()
    with pytest.raises(ValidationError, match="'critical'"):
        task.update_priority("critical")
    with pytest.raises(ValidationError, match="'done'"):
        task.update_status("done")
    with pytest.raises(ValidationError, match="'hobby'"):
        task.update_category("hobby")


def test_overdue_and_days_until_due() -> None:
    late = _task(due_date=days_from_now(-2))
    assert late.is_overdue is True
    assert late.days_until_due == -2

    soon = _task(due_date=days_from_now(2))
    assert soon.is_overdue is False
    assert soon.days_until_due == 2


@pytest.mark.parametrize("status", [TaskStatus.COMPLETED, TaskStatus.CANCELLED])
def test_closed_tasks_are_never_overdue(status: TaskStatus) -> None:
    task = _task(due_date=days_from_now(-5), status=status)
    assert task.is_overdue is False


def test_due_date_accepts_date_and_iso_strings() -> None:
    task = _task(due_date=date(2030, 1, 15))
    assert task.due_date == datetime(2030, 1, 15, tzinfo=timezone.utc)

    task.set_due_date("2030-02-01T10:00:00Z")
    assert task.due_date == datetime(2030, 2, 1, 10, 0, tzinfo=timezone.utc)

    task.set_due_date(None)
    assert task.due_date is None

    with pytest.raises(ValidationError):
        task.set_due_date("next tuesday")


def test_time_spent_is_additive_and_positive() -> None:
    task = _task()
    task.add_time_spent(1.5)
    task.add_time_spent(2)
    assert task.time_spent == pytest.approx(3.5)
    with pytest.raises(ValidationError):
        task.add_time_spent(0)


def test_tags_keep_insertion_order_without_duplicates() -> None:
    task = _task(tags=["b", "a"])
    task.add_tag("c")
    task.add_tag("a")
    assert task.tags == ["b", "a", "c"]
    task.remove_tag("a")
    task.remove_tag("missing")
    assert task.tags == ["b", "c"]


def test_notes_are_appended_in_order() -> None:
    task = _task()
    task.add_note("first")
    task.add_note("second")
    assert [n["text"] for n in task.notes] == ["first", "second"]
    with pytest.raises(ValidationError):
        task.add_note(" ")


def test_completed_at_follows_status() -> None:
    task = _task()
    task.update_status("completed")
    assert task.completed_at is not None
    task.update_status("pending")
    assert task.completed_at is None


def test_dict_round_trip_recomputes_derived_fields() -> None:
    task = _task(
        description="quarterly numbers",
        priority="high",
        category="work",
        due_date=days_from_now(-1),
        estimated_hours=4,
        tags=["finance"],
    )
    task.add_note("ask Bob")

    data = task.to_dict()
    assert "is_overdue" not in data
    assert "days_until_due" not in data

    clone = Task.from_dict(data)
    assert clone.to_dict() == data
    assert clone.is_overdue is True
    assert clone.days_until_due == task.days_until_due


def test_from_dict_requires_identity() -> None:
    with pytest.raises(ValidationError):
        Task.from_dict({"title": "no id", "owner_id": "u1"})
