"""
todo_memory: a single-user task list kept in memory and mirrored to local storage.

Subpackages:
- tasks: TodoItem model, snapshot codec, TodoService (the task list manager)
- storage: key-value "local storage" backends
- cli / connectors: composition root and the interactive console
"""

__version__ = "0.1.0"
