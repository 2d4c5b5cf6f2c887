# src/todo_memory/tasks/todo_service.py

from __future__ import annotations

"""
Task list manager.

Owns the authoritative in-memory task list and mirrors it to a key-value store:
- initialize() loads the snapshot once (idempotent, safe to call concurrently),
- every successful mutation re-serializes the whole list and writes it back,
- queries read memory only.

One TodoService is meant to be shared per user session. Apart from initialize(),
operations are not locked: callers must not run mutations concurrently from
several threads.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..core.ports import KeyValueStore
from .todo_models import Priority, SnapshotError, TodoItem, dump_snapshot, load_snapshot

logger = logging.getLogger(__name__)

STORAGE_KEY = "todos"

TodoId = uuid.UUID | str
Clock = Callable[[], datetime]


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _aware(ts: datetime | None) -> datetime | None:
    """Naive datetimes are taken as local time."""
    if ts is None or ts.tzinfo is not None:
        return ts
    return ts.astimezone()


def _coerce_id(todo_id: TodoId) -> uuid.UUID | None:
    if isinstance(todo_id, uuid.UUID):
        return todo_id
    try:
        return uuid.UUID(str(todo_id).strip())
    except ValueError:
        return None


def _clean_title(title: str) -> str | None:
    cleaned = (title or "").strip()
    return cleaned or None


class TodoService:
    def __init__(self, storage: KeyValueStore, *, clock: Clock | None = None) -> None:
        self._storage = storage
        self._clock: Clock = clock or _local_now
        # dict keeps insertion order, which is the order written to the snapshot
        self._todos: dict[uuid.UUID, TodoItem] = {}
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Load the persisted snapshot into memory.

        Only the first call reads the store. A missing/empty snapshot leaves the
        list empty; a corrupted one is discarded (logged, never raised).
        """
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            raw = await self._storage.get_item(STORAGE_KEY)
            if raw:
                try:
                    items = load_snapshot(raw)
                except SnapshotError as e:
                    logger.warning("Discarding corrupted todo snapshot: %s", e)
                    self._todos.clear()
                else:
                    self._todos = {t.id: t for t in items}

            self._initialized = True
            logger.info("TodoService initialized: %d todos loaded", len(self._todos))

    def _now(self) -> datetime:
        return self._clock().astimezone()

    async def _save(self) -> None:
        await self._storage.set_item(STORAGE_KEY, dump_snapshot(self._todos.values()))
        logger.debug("Saved todo snapshot (%d items)", len(self._todos))

    # ---- queries (memory only) ----

    def get_all(self) -> list[TodoItem]:
        """All todos, newest first. Returns a new list on every call."""
        return sorted(self._todos.values(), key=lambda t: t.created_at, reverse=True)

    def get_by_id(self, todo_id: TodoId) -> TodoItem | None:
        key = _coerce_id(todo_id)
        if key is None:
            return None
        return self._todos.get(key)

    def get_completed_count(self) -> int:
        return sum(1 for t in self._todos.values() if t.is_completed)

    def get_pending_count(self) -> int:
        return sum(1 for t in self._todos.values() if not t.is_completed)

    def get_overdue_count(self) -> int:
        """Pending todos whose due date (local calendar day) is before today."""
        today = self._now().date()
        return sum(
            1
            for t in self._todos.values()
            if not t.is_completed
            and t.due_date is not None
            and t.due_date.astimezone().date() < today
        )

    # ---- mutations (persist on success) ----

    async def add(
        self,
        title: str,
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> TodoItem | None:
        """Create a todo. Returns None (and writes nothing) for a blank title."""
        cleaned = _clean_title(title)
        if cleaned is None:
            logger.debug("Rejected todo with blank title")
            return None

        todo = TodoItem(
            title=cleaned,
            priority=priority,
            due_date=_aware(due_date),
            created_at=self._now(),
        )
        self._todos[todo.id] = todo
        logger.debug("Todo added id=%s priority=%s due=%s", todo.id, priority.value, due_date)
        await self._save()
        return todo

    async def update(self, todo_id: TodoId, title: str) -> bool:
        cleaned = _clean_title(title)
        if cleaned is None:
            return False
        return await self._replace(todo_id, title=cleaned)

    async def update_priority(self, todo_id: TodoId, priority: Priority) -> bool:
        return await self._replace(todo_id, priority=priority)

    async def update_due_date(self, todo_id: TodoId, due_date: datetime | None) -> bool:
        """Set or clear (due_date=None) the deadline."""
        return await self._replace(todo_id, due_date=_aware(due_date))

    async def toggle_complete(self, todo_id: TodoId) -> bool:
        todo = self.get_by_id(todo_id)
        if todo is None:
            return False
        done = not todo.is_completed
        return await self._replace(
            todo.id,
            is_completed=done,
            completed_at=self._now() if done else None,
        )

    async def delete(self, todo_id: TodoId) -> bool:
        todo = self.get_by_id(todo_id)
        if todo is None:
            return False
        del self._todos[todo.id]
        logger.debug("Todo deleted id=%s", todo.id)
        await self._save()
        return True

    async def _replace(self, todo_id: TodoId, **changes) -> bool:
        todo = self.get_by_id(todo_id)
        if todo is None:
            return False
        self._todos[todo.id] = replace(todo, **changes)
        logger.debug("Todo updated id=%s fields=%s", todo.id, ",".join(changes))
        await self._save()
        return True
