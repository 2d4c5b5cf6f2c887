# src/todo_memory/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage backend and wires one shared TodoService into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.local_storage import InMemoryLocalStorage, LocalStorage
from ..tasks.todo_service import TodoService

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_storage(settings) -> KeyValueStore:
    backend = getattr(settings, "storage_backend", "sqlite")
    if backend == "memory":
        logger.info("Using in-memory storage; todos will not survive restart.")
        return InMemoryLocalStorage()
    return LocalStorage(settings.storage_db_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    The returned TodoService is not initialized yet; call `await state.todos.initialize()`.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = create_storage(settings)
    return AppState(
        settings=settings,
        storage=storage,
        todos=TodoService(storage),
    )
