# src/todo_memory/tasks/todo_models.py

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class SnapshotError(ValueError):
    """Persisted snapshot could not be decoded into a list of TodoItem."""


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: str | None) -> Priority | None:
        """Case-insensitive lookup by token; None for unknown input."""
        if not raw:
            return None
        wanted = raw.strip().lower()
        for p in cls:
            if p.value.lower() == wanted:
                return p
        return None


def _now_local() -> datetime:
    return datetime.now().astimezone()


@dataclass(slots=True, frozen=True)
class TodoItem:
    """
    One to-do entry.

    Items are immutable: TodoService swaps in a new instance (dataclasses.replace)
    on every change, so an item handed out to a caller is a stable snapshot.

    Invariant: completed_at is not None  <=>  is_completed.
    """

    title: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    is_completed: bool = False
    priority: Priority = Priority.MEDIUM
    created_at: datetime = field(default_factory=_now_local)
    due_date: datetime | None = None
    completed_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "isCompleted": self.is_completed,
            "priority": self.priority.value,
            "createdAt": self.created_at.isoformat(),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> TodoItem:
        """Strict decoder for one snapshot record; raises SnapshotError."""
        if not isinstance(data, dict):
            raise SnapshotError(f"record must be an object, got {type(data).__name__}")

        try:
            item_id = uuid.UUID(str(data["id"]))
        except (KeyError, ValueError) as e:
            raise SnapshotError(f"invalid id: {data.get('id')!r}") from e

        title = data.get("title")
        if not isinstance(title, str):
            raise SnapshotError(f"invalid title for id={item_id}")

        is_completed = data.get("isCompleted", False)
        if not isinstance(is_completed, bool):
            raise SnapshotError(f"invalid isCompleted for id={item_id}")

        raw_priority = data.get("priority", Priority.MEDIUM.value)
        try:
            priority = Priority(raw_priority)
        except ValueError as e:
            raise SnapshotError(f"unknown priority {raw_priority!r} for id={item_id}") from e

        created_at = _parse_ts(data.get("createdAt"), "createdAt", item_id)
        if created_at is None:
            raise SnapshotError(f"missing createdAt for id={item_id}")
        completed_at = _parse_ts(data.get("completedAt"), "completedAt", item_id)
        due_date = _parse_ts(data.get("dueDate"), "dueDate", item_id)

        if (completed_at is not None) != is_completed:
            raise SnapshotError(f"completedAt does not match isCompleted for id={item_id}")

        return cls(
            id=item_id,
            title=title,
            is_completed=is_completed,
            priority=priority,
            created_at=created_at,
            due_date=due_date,
            completed_at=completed_at,
        )


def _parse_ts(raw: Any, name: str, item_id: uuid.UUID) -> datetime | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise SnapshotError(f"{name} must be an ISO-8601 string for id={item_id}")
    try:
        ts = datetime.fromisoformat(raw)
        # naive values are local time
        return ts if ts.tzinfo is not None else ts.astimezone()
    except (ValueError, OverflowError, OSError) as e:
        raise SnapshotError(f"invalid {name} {raw!r} for id={item_id}") from e


def dump_snapshot(items: Iterable[TodoItem]) -> str:
    """Serialize the whole list (in the given order) to a JSON string."""
    return json.dumps([t.to_dict() for t in items], ensure_ascii=False)


def load_snapshot(raw: str) -> list[TodoItem]:
    """
    Parse a snapshot produced by dump_snapshot.

    All-or-nothing: any malformed record rejects the whole snapshot.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"snapshot is not valid JSON: {e}") from e
    except RecursionError as e:
        raise SnapshotError("snapshot is nested too deeply") from e

    if not isinstance(data, list):
        raise SnapshotError(f"snapshot root must be a list, got {type(data).__name__}")

    items = [TodoItem.from_dict(entry) for entry in data]

    seen: set[uuid.UUID] = set()
    for t in items:
        if t.id in seen:
            raise SnapshotError(f"duplicate id in snapshot: {t.id}")
        seen.add(t.id)

    return items
