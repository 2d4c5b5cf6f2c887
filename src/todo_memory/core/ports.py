# src/todo_memory/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

TodoService depends on a Protocol instead of a concrete store.
This keeps storage backends swappable and makes testing easier.
"""

from typing import Awaitable, Protocol


class KeyValueStore(Protocol):
    """
    Async string-keyed, string-valued store (browser-localStorage style).

    Implementations are pure pass-through: no retries, no validation of values.
    Backend failures propagate to the caller.
    """

    def set_item(self, key: str, value: str) -> Awaitable[None]: ...
    def get_item(self, key: str) -> Awaitable[str | None]: ...
    def remove_item(self, key: str) -> Awaitable[None]: ...
    def clear(self) -> Awaitable[None]: ...
