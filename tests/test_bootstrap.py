# tests/test_bootstrap.py

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import pytest

from taskflow.bootstrap import build_storage, create_app_state, init_app
from taskflow.config import Settings
from taskflow.logging_setup import _ConsoleNoiseFilter
from taskflow.storage import JsonFileStorage, MemoryStorage, SqliteStorage


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        app_name="taskflow-test",
        log_level="DEBUG",
        log_to_file=False,
        storage_backend="memory",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "taskflow.sqlite3",
        due_soon_days=3,
    )


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKFLOW_APP_NAME", "demo")
    monkeypatch.setenv("TASKFLOW_STORAGE_BACKEND", "SQLite")
    monkeypatch.setenv("TASKFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKFLOW_DUE_SOON_DAYS", "5")
    monkeypatch.setenv("TASKFLOW_LOG_TO_FILE", "no")
    monkeypatch.delenv("TASKFLOW_DB_PATH", raising=False)

    s = Settings.from_env()

    assert s.app_name == "demo"
    assert s.storage_backend == "sqlite"
    assert s.data_dir == tmp_path
    assert s.db_path == tmp_path / "taskflow.sqlite3"
    assert s.due_soon_days == 5
    assert s.log_to_file is False


def test_unknown_backend_falls_back_to_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKFLOW_STORAGE_BACKEND", "redis")
    monkeypatch.setenv("TASKFLOW_DUE_SOON_DAYS", "not-a-number")
    s = Settings.from_env()
    assert s.storage_backend == "json"
    assert s.due_soon_days == 3


def test_build_storage_picks_adapter(settings: Settings) -> None:
    assert isinstance(build_storage(settings), MemoryStorage)
    assert isinstance(build_storage(replace(settings, storage_backend="json")), JsonFileStorage)
    assert isinstance(build_storage(replace(settings, storage_backend="sqlite")), SqliteStorage)


def test_end_to_end_flow(settings: Settings) -> None:
    state = create_app_state(settings=settings)

    reg = state.user_controller.register({"username": "u1", "email": "u1@example.com"})
    user = reg["data"]
    login = state.user_controller.login("u1")
    assert login["success"] is True

    tc = state.task_controller
    tc.set_current_user(user.id)
    created = tc.create_task({"title": "Buy milk"})
    task_id = created["data"].id

    tc.toggle_task_status(task_id)
    resp = tc.toggle_task_status(task_id)
    assert resp["data"].status == "pending"

    # A second app over the same storage sees the same data.
    again = create_app_state(settings=settings, storage=state.storage)
    assert again.task_repository.find_by_id(task_id).to_dict() == resp["data"].to_dict()
    assert again.user_repository.find_by_username("u1") is not None


def test_init_app_configures_logging(settings: Settings) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        state = init_app(settings=replace(settings, log_to_file=True))
        logging.getLogger("taskflow.test").info("hello from test")

        log_file = settings.data_dir / "taskflow.log"
        assert state.task_repository.count() == 0
        assert log_file.exists()
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("taskflow", logging.DEBUG, True),
        ("taskflow.tasks.task_repository", logging.INFO, True),
        ("taskflowish", logging.WARNING, False),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_filter_keeps_only_taskflow_below_error(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    assert _ConsoleNoiseFilter().filter(record) is shown
