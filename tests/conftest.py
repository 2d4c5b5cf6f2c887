# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_memory.core.state import AppState
from todo_memory.tasks.todo_service import TodoService

from .fakes import FakeClock, RecordingStorage


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        storage_backend="memory",
        data_dir=tmp_path / "data",
        storage_db_path=tmp_path / "data" / "local_storage.sqlite3",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture()
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def service(storage: RecordingStorage, clock: FakeClock) -> TodoService:
    return TodoService(storage, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, storage: RecordingStorage, service: TodoService) -> AppState:
    """AppState wired with the recording store; the service is not initialized yet."""
    return AppState(settings=settings, storage=storage, todos=service)
