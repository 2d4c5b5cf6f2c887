# src/todo_memory/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.todo_service import TodoService
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings kept on the state for easy access from commands/connectors.
    settings: object

    storage: KeyValueStore
    todos: TodoService
