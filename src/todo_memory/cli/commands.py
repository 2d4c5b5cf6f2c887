# src/todo_memory/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..core.state import AppState
from ..tasks.todo_models import Priority, TodoItem

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

MIN_ID_PREFIX = 4


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%s", name, args)
        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting / parsing helpers ----


def _short_id(todo: TodoItem) -> str:
    return str(todo.id)[:8]


def format_todo(todo: TodoItem) -> str:
    mark = "x" if todo.is_completed else " "
    due = f" (due {todo.due_date.astimezone().date().isoformat()})" if todo.due_date else ""
    return f"[{mark}] {_short_id(todo)} {todo.priority.value:<6} {todo.title}{due}"


def parse_due_date(raw: str) -> datetime:
    """YYYY-MM-DD -> local midnight of that day. Raises ValueError on bad input."""
    day = datetime.strptime(raw.strip(), "%Y-%m-%d")
    return day.astimezone()


def resolve_todo(state: AppState, ref: str) -> TodoItem | str:
    """
    Find a todo by full id or by a unique id prefix.
    Returns the todo, or an error message for the user.
    """
    todo = state.todos.get_by_id(ref)
    if todo is not None:
        return todo

    prefix = ref.strip().lower()
    if len(prefix) < MIN_ID_PREFIX:
        return f"Id prefix too short (need at least {MIN_ID_PREFIX} chars): {ref}"

    matches = [t for t in state.todos.get_all() if str(t.id).startswith(prefix)]
    if not matches:
        return f"No todo with id {ref}."
    if len(matches) > 1:
        return f"Ambiguous id {ref}: matches {len(matches)} todos."
    return matches[0]


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list          -> all todos, newest first
    /list pending  -> only open todos
    /list done     -> only completed todos
    """
    mode = args[0].lower() if args else "all"
    todos = state.todos.get_all()

    if mode == "pending":
        todos = [t for t in todos if not t.is_completed]
    elif mode == "done":
        todos = [t for t in todos if t.is_completed]
    elif mode != "all":
        return "Usage: /list [all|pending|done]"

    if not todos:
        return "No todos."
    return "\n".join(format_todo(t) for t in todos)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add [!low|!medium|!high] [@YYYY-MM-DD] title words..."""
    priority = Priority.MEDIUM
    due_date: datetime | None = None
    words: list[str] = []

    for arg in args:
        if arg.startswith("!") and not words:
            parsed = Priority.parse(arg[1:])
            if parsed is None:
                return f"Unknown priority: {arg[1:]}. Use low, medium or high."
            priority = parsed
        elif arg.startswith("@") and not words:
            try:
                due_date = parse_due_date(arg[1:])
            except ValueError:
                return f"Invalid due date: {arg[1:]}. Use YYYY-MM-DD."
        else:
            words.append(arg)

    todo = await state.todos.add(" ".join(words), priority, due_date)
    if todo is None:
        return "Title must not be empty."
    return f"Added: {format_todo(todo)}"


async def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> <new title>"
    found = resolve_todo(state, args[0])
    if isinstance(found, str):
        return found
    if not await state.todos.update(found.id, " ".join(args[1:])):
        return "Title must not be empty."
    return f"Renamed {_short_id(found)}."


async def cmd_prio(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /prio <id> low|medium|high"
    priority = Priority.parse(args[1])
    if priority is None:
        return f"Unknown priority: {args[1]}. Use low, medium or high."
    found = resolve_todo(state, args[0])
    if isinstance(found, str):
        return found
    if not await state.todos.update_priority(found.id, priority):
        return f"No todo with id {args[0]}."
    return f"Priority of {_short_id(found)} set to {priority.value}."


async def cmd_due(state: AppState, args: list[str]) -> str:
    """
    /due <id> YYYY-MM-DD  -> set deadline
    /due <id> none        -> clear deadline
    """
    if len(args) != 2:
        return "Usage: /due <id> YYYY-MM-DD|none"
    due_date: datetime | None = None
    if args[1].lower() not in ("none", "-", "clear"):
        try:
            due_date = parse_due_date(args[1])
        except ValueError:
            return f"Invalid due date: {args[1]}. Use YYYY-MM-DD."
    found = resolve_todo(state, args[0])
    if isinstance(found, str):
        return found
    if not await state.todos.update_due_date(found.id, due_date):
        return f"No todo with id {args[0]}."
    if due_date is None:
        return f"Due date of {_short_id(found)} cleared."
    return f"Due date of {_short_id(found)} set to {due_date.date().isoformat()}."


async def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    found = resolve_todo(state, args[0])
    if isinstance(found, str):
        return found
    if not await state.todos.toggle_complete(found.id):
        return f"No todo with id {args[0]}."
    updated = state.todos.get_by_id(found.id)
    if updated is not None and updated.is_completed:
        return f"Completed: {updated.title}"
    return f"Reopened: {found.title}"


async def cmd_del(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /del <id>"
    found = resolve_todo(state, args[0])
    if isinstance(found, str):
        return found
    if not await state.todos.delete(found.id):
        return f"No todo with id {args[0]}."
    return f"Deleted: {found.title}"


async def cmd_stats(state: AppState, args: list[str]) -> str:
    todos = state.todos
    return (
        "Stats:\n"
        f"  Pending: {todos.get_pending_count()}\n"
        f"  Completed: {todos.get_completed_count()}\n"
        f"  Overdue: {todos.get_overdue_count()}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List todos: /list [all|pending|done].", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="Add a todo: /add [!low|!medium|!high] [@YYYY-MM-DD] <title>."
)
registry.register("edit", cmd_edit, help_text="Rename a todo: /edit <id> <title>.")
registry.register("prio", cmd_prio, help_text="Change priority: /prio <id> low|medium|high.")
registry.register("due", cmd_due, help_text="Set or clear due date: /due <id> YYYY-MM-DD|none.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("del", cmd_del, help_text="Delete a todo: /del <id>.", aliases=["rm"])
registry.register("stats", cmd_stats, help_text="Show pending/completed/overdue counts.")
