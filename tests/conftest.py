# tests/conftest.py

from __future__ import annotations

import pytest

from taskflow.controllers.task_controller import TaskController
from taskflow.controllers.user_controller import UserController
from taskflow.tasks.task_repository import TaskRepository
from taskflow.users.user_models import User
from taskflow.users.user_repository import UserRepository

from .fakes import FakeStorage


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def task_repo(storage: FakeStorage) -> TaskRepository:
    return TaskRepository(storage)


@pytest.fixture()
def user_repo(storage: FakeStorage) -> UserRepository:
    return UserRepository(storage)


@pytest.fixture()
def alice(user_repo: UserRepository) -> User:
    return user_repo.create({"username": "alice", "email": "alice@example.com", "full_name": "Alice Doe"})


@pytest.fixture()
def bob(user_repo: UserRepository) -> User:
    return user_repo.create({"username": "bob", "email": "bob@example.com", "full_name": "Bob Wilson"})


@pytest.fixture()
def carol(user_repo: UserRepository) -> User:
    return user_repo.create({"username": "carol", "email": "carol@example.com", "full_name": "Carol King"})


@pytest.fixture()
def controller(task_repo: TaskRepository, user_repo: UserRepository) -> TaskController:
    return TaskController(task_repo, user_repo)


@pytest.fixture()
def user_controller(user_repo: UserRepository) -> UserController:
    return UserController(user_repo)
