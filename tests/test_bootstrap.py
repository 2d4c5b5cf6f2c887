# tests/test_bootstrap.py

from __future__ import annotations

import logging

import pytest

from todo_memory.cli.bootstrap import create_initial_state
from todo_memory.logging_setup import _ConsoleNoiseFilter, setup_logging
from todo_memory.storage.local_storage import InMemoryLocalStorage, LocalStorage


@pytest.mark.asyncio
async def test_create_initial_state_memory_backend(settings) -> None:
    state = create_initial_state(settings=settings)

    assert isinstance(state.storage, InMemoryLocalStorage)
    assert settings.data_dir.is_dir()
    assert state.todos.is_initialized is False

    await state.todos.initialize()
    await state.todos.add("wired")
    assert await state.storage.get_item("todos") is not None


def test_create_initial_state_sqlite_backend(settings) -> None:
    settings.storage_backend = "sqlite"

    state = create_initial_state(settings=settings)

    assert isinstance(state.storage, LocalStorage)
    assert settings.storage_db_path.exists()


def test_setup_logging_writes_file(tmp_path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("todo_memory.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("todo_memory", logging.DEBUG, True),
        ("todo_memory.tasks.todo_service", logging.INFO, True),
        ("py.warnings", logging.WARNING, False),
        ("py.warnings", logging.ERROR, True),
        ("asyncio", logging.WARNING, False),
        ("asyncio", logging.ERROR, True),
        ("todo_memoryx", logging.INFO, False),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert _ConsoleNoiseFilter().filter(record) is shown
