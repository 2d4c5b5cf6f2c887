"""
Key-value storage backends.

- LocalStorage: SQLite-backed, survives restarts
- InMemoryLocalStorage: dict-backed, lives as long as the process
"""

from .local_storage import InMemoryLocalStorage, LocalStorage

__all__ = ["InMemoryLocalStorage", "LocalStorage"]
