# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .ports import Storage

if TYPE_CHECKING:
    from ..config import Settings
    from ..controllers.task_controller import TaskController
    from ..controllers.user_controller import UserController
    from ..tasks.task_repository import TaskRepository
    from ..users.user_repository import UserRepository


@dataclass
class AppState:
    # Settings kept on the state for easy access in other modules later.
    settings: Settings
    storage: Storage

    user_repository: UserRepository
    task_repository: TaskRepository

    user_controller: UserController
    task_controller: TaskController
