"""
Task list subsystem.

Components:
- todo_models.py: data structures (TodoItem, Priority) and the JSON snapshot codec
- todo_service.py: TodoService, the in-memory task list synced to a key-value store
"""

from .todo_models import Priority, SnapshotError, TodoItem
from .todo_service import STORAGE_KEY, TodoService

__all__ = ["Priority", "SnapshotError", "TodoItem", "TodoService", "STORAGE_KEY"]
