# tests/test_storage.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskflow.core.errors import StorageError
from taskflow.storage import JsonFileStorage, MemoryStorage, SqliteStorage
from taskflow.tasks.task_repository import TaskRepository


@pytest.fixture(params=["memory", "json", "sqlite"])
def backend(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return MemoryStorage()
    if request.param == "json":
        return JsonFileStorage(tmp_path / "data")
    return SqliteStorage(tmp_path / "taskflow.sqlite3")


def test_missing_key_returns_default(backend) -> None:
    assert backend.load("tasks", []) == []
    assert backend.load("tasks") is None


def test_save_overwrites_previous_value(backend) -> None:
    backend.save("users", [{"id": "1"}])
    backend.save("users", [{"id": "2"}, {"id": "3"}])
    assert backend.load("users", []) == [{"id": "2"}, {"id": "3"}]


def test_loaded_values_are_copies(backend) -> None:
    backend.save("tasks", [{"tags": ["a"]}])
    loaded = backend.load("tasks")
    loaded[0]["tags"].append("b")
    assert backend.load("tasks") == [{"tags": ["a"]}]


def test_unserializable_value_raises_storage_error(backend) -> None:
    with pytest.raises(StorageError):
        backend.save("tasks", [object()])


def test_repository_survives_restart(backend) -> None:
    repo = TaskRepository(backend)
    task = repo.create({"title": "Persist me", "owner_id": "u1", "tags": ["x"]})

    again = TaskRepository(backend).find_by_id(task.id)
    assert again is not None
    assert again.to_dict() == task.to_dict()


def test_json_storage_writes_one_file_per_key(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path)
    storage.save("tasks", [])
    storage.save("users", [])
    assert sorted(p.name for p in tmp_path.glob("*.json")) == ["tasks.json", "users.json"]
    assert not list(tmp_path.glob("*.tmp"))


def test_json_storage_rejects_path_like_keys(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path)
    with pytest.raises(StorageError):
        storage.save("../escape", [])


def test_corrupt_json_file_means_empty_repository(tmp_path: Path) -> None:
    (tmp_path / "tasks.json").write_text("{not json", "utf-8")
    storage = JsonFileStorage(tmp_path)

    with pytest.raises(StorageError):
        storage.load("tasks", [])
    assert TaskRepository(storage).count() == 0


def test_sqlite_storage_lists_keys(tmp_path: Path) -> None:
    storage = SqliteStorage(tmp_path / "kv.sqlite3")
    storage.save("users", [])
    storage.save("tasks", [])
    assert storage.keys() == ["tasks", "users"]


def test_memory_storage_initial_data() -> None:
    storage = MemoryStorage({"tasks": [{"id": "t"}]})
    assert storage.keys() == ["tasks"]
    assert storage.load("tasks") == [{"id": "t"}]
    storage.clear()
    assert storage.load("tasks", []) == []
