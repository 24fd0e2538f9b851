# src/taskflow/bootstrap.py

"""
Composition root.

- loads settings once (or takes injected ones),
- picks the Storage Port adapter,
- wires repositories and controllers into an AppState.
"""

from __future__ import annotations

import logging

from .config import Settings, get_settings
from .controllers.task_controller import TaskController
from .controllers.user_controller import UserController
from .core.ports import Storage
from .core.state import AppState
from .logging_setup import setup_logging
from .storage import JsonFileStorage, MemoryStorage, SqliteStorage
from .tasks.task_repository import TaskRepository
from .users.user_repository import UserRepository

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> Storage:
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        return SqliteStorage(settings.db_path)
    return JsonFileStorage(settings.data_dir)


def create_app_state(*, settings: Settings | None = None, storage: Storage | None = None) -> AppState:
    """
    Build a fully wired AppState.

    Keeping settings/storage injectable makes the app easy to test and avoids
    hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    if storage is None:
        storage = build_storage(settings)

    users = UserRepository(storage)
    tasks = TaskRepository(storage)

    state = AppState(
        settings=settings,
        storage=storage,
        user_repository=users,
        task_repository=tasks,
        user_controller=UserController(users),
        task_controller=TaskController(tasks, users, due_soon_days=settings.due_soon_days),
    )
    logger.info(
        "%s ready backend=%s users=%s tasks=%s",
        settings.app_name,
        settings.storage_backend,
        users.count(),
        tasks.count(),
    )
    return state


def init_app(*, settings: Settings | None = None) -> AppState:
    """Configure logging from settings, then build the AppState."""
    if settings is None:
        settings = get_settings()
    setup_logging(
        log_dir=settings.data_dir,
        console_level=settings.log_level,
        log_to_file=settings.log_to_file,
    )
    return create_app_state(settings=settings)
