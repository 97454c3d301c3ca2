"""Render a task forest back to todo.txt text.

Extension tokens are emitted from each task's resolved extension map,
not copied from its description, so inherited and merged values appear
explicitly on every subtask.
"""

from __future__ import annotations

import logging

from .errors import DateError, PriorityError, SerializationError, ValidationError
from .extensions import ExtensionRegistry, serialize_extensions, strip_extension_tokens
from .task import PRIORITIES, Task
from .values import format_date

logger = logging.getLogger("todotxt.serializer")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def serialize_tasks(
    tasks: list[Task],
    registry: ExtensionRegistry | None = None,
    include_subtasks: bool = True,
    preserve_indentation: bool = True,
) -> str:
    """Serialize a forest to newline-joined text (no trailing newline)."""
    if not isinstance(tasks, (list, tuple)):
        raise ValidationError("Tasks must be a list", "tasks", tasks)
    registry = registry if registry is not None else ExtensionRegistry()

    lines: list[str] = []
    for idx, task in enumerate(tasks):
        lines.extend(_serialize_tree(
            task, registry, include_subtasks, preserve_indentation, f"tasks[{idx}]",
        ))
    logger.debug("serialized %d root tasks into %d lines", len(tasks), len(lines))
    return "\n".join(lines)


def serialize_task(
    task: Task,
    registry: ExtensionRegistry | None = None,
    include_subtasks: bool = True,
    preserve_indentation: bool = True,
) -> list[str]:
    """Serialize one task (and optionally its subtasks) into lines."""
    registry = registry if registry is not None else ExtensionRegistry()
    return _serialize_tree(task, registry, include_subtasks, preserve_indentation, "task")


def validate_task(task: object) -> None:
    """Raise ValidationError if task is not a well-formed Task."""
    if not isinstance(task, Task):
        raise ValidationError("Task must be a Task instance", "task", task)
    if not isinstance(task.description, str):
        raise ValidationError("Task description must be a string", "description", task.description)
    for name in ("projects", "contexts", "subtasks"):
        if not isinstance(getattr(task, name), list):
            raise ValidationError(f"Task {name} must be a list", name, getattr(task, name))
    if not isinstance(task.extensions, dict):
        raise ValidationError("Task extensions must be a dict", "extensions", task.extensions)
    if not isinstance(task.indent_level, int) or task.indent_level < 0:
        raise ValidationError(
            "Task indent level must be a non-negative integer", "indent_level", task.indent_level,
        )
    if task.priority is not None and task.priority not in PRIORITIES:
        raise PriorityError(f"Invalid priority: {task.priority!r}", task.priority)
    if not task.completed and task.completion_date is not None:
        raise ValidationError(
            "Incomplete task cannot have a completion date", "completion_date", task.completion_date,
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _serialize_tree(
    task: Task,
    registry: ExtensionRegistry,
    include_subtasks: bool,
    preserve_indentation: bool,
    index: str,
) -> list[str]:
    validate_task(task)
    try:
        line = _serialize_line(task, registry, task.indent_level if preserve_indentation else 0)
    except DateError as exc:
        raise SerializationError(f"Failed to serialize {index}: {exc}", task, index) from exc

    lines = [line]
    if include_subtasks:
        for idx, subtask in enumerate(task.subtasks):
            lines.extend(_serialize_tree(
                subtask, registry, include_subtasks, preserve_indentation,
                f"{index}.subtasks[{idx}]",
            ))
    return lines


def _serialize_line(task: Task, registry: ExtensionRegistry, indent: int) -> str:
    parts: list[str] = []

    if task.completed:
        parts.append("x")
        if task.completion_date is not None:
            parts.append(format_date(task.completion_date))
    if task.priority is not None:
        parts.append(f"({task.priority})")
    if task.creation_date is not None:
        parts.append(format_date(task.creation_date))

    parts.append(strip_extension_tokens(task.description))
    parts.extend(serialize_extensions(task.extensions, registry))

    return (" " * indent + " ".join(p for p in parts if p)).rstrip()
