"""Task record and single-line task builder.

Line grammar::

    line        := indent (completed | incomplete)
    completed   := "x " [date " "] ["(" PRIORITY ") "] [date " "] description
    incomplete  := ["(" PRIORITY ") "] [date " "] description

The description keeps its ``+project``, ``@context`` and ``key:value``
tokens; projects and contexts are collected alongside, and extension
tokens are resolved into :attr:`Task.extensions`.
"""

from __future__ import annotations

import json
import re
import string
import weakref
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .errors import DateError
from .extensions import ExtensionRegistry, resolve_extensions
from .values import format_date, is_date_token, parse_date, render

PRIORITIES = frozenset(string.ascii_uppercase)

_PRIORITY_RE = re.compile(r"\(([A-Z])\)")
_PROJECT_RE = re.compile(r"\+(\w+)")
_CONTEXT_RE = re.compile(r"@(\w+)")


@dataclass
class Task:
    """One line of a task list, possibly with subtasks."""

    raw: str = ""
    description: str = ""
    completed: bool = False
    priority: str | None = None
    creation_date: date | None = None
    completion_date: date | None = None
    projects: list[str] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)
    extensions: dict[str, Any] = field(default_factory=dict)
    subtasks: list[Task] = field(default_factory=list)
    indent_level: int = 0
    _parent_ref: weakref.ref | None = field(default=None, init=False, repr=False, compare=False)

    @property
    def parent(self) -> Task | None:
        """The enclosing task, held weakly so the tree owns its nodes one way."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, value: Task | None) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    def add_subtask(self, task: Task) -> None:
        task.parent = self
        self.subtasks.append(task)

    def to_dict(self) -> dict:
        """Plain-data view with dates and extension values rendered as text."""
        return {
            "raw": self.raw,
            "completed": self.completed,
            "priority": self.priority,
            "creation_date": format_date(self.creation_date) if self.creation_date else None,
            "completion_date": format_date(self.completion_date) if self.completion_date else None,
            "description": self.description,
            "projects": list(self.projects),
            "contexts": list(self.contexts),
            "extensions": {k: render(v) for k, v in self.extensions.items()},
            "indent_level": self.indent_level,
            "subtasks": [t.to_dict() for t in self.subtasks],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_task(raw: str, registry: ExtensionRegistry, parent: Task | None = None) -> Task:
    """Parse one raw line into a Task.

    ``parent`` must already be fully built: its resolved extensions seed
    this task's, and its projects/contexts are copied when this task has
    none of its own. Priority is never inherited. The new task is not
    attached to ``parent``; the caller does that.
    """
    trimmed = raw.strip()
    task = Task(raw=raw, indent_level=indent_level(raw))

    if trimmed.startswith("x "):
        task.completed = True
        rest = trimmed[2:]
        task.completion_date, rest = _take_date(rest)
        task.priority, rest = _take_priority(rest)
        task.creation_date, rest = _take_date(rest)
    else:
        rest = trimmed
        task.priority, rest = _take_priority(rest)
        task.creation_date, rest = _take_date(rest)

    apply_description(task, rest, registry, parent)
    return task


def apply_description(
    task: Task,
    description: str,
    registry: ExtensionRegistry,
    parent: Task | None = None,
) -> None:
    """Set the description and re-derive projects, contexts and extensions from it."""
    task.description = description
    task.projects = _PROJECT_RE.findall(description)
    task.contexts = _CONTEXT_RE.findall(description)
    task.extensions = resolve_extensions(
        description, registry, parent.extensions if parent is not None else None,
    )

    if parent is not None:
        if not task.projects:
            task.projects = list(parent.projects)
        if not task.contexts:
            task.contexts = list(parent.contexts)


def indent_level(line: str) -> int:
    """Count of leading whitespace characters."""
    return len(line) - len(line.lstrip())


def is_priority_token(token: str) -> bool:
    return _PRIORITY_RE.fullmatch(token) is not None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _take_priority(rest: str) -> tuple[str | None, str]:
    head, _, tail = rest.partition(" ")
    m = _PRIORITY_RE.fullmatch(head)
    if m is None:
        return None, rest
    return m.group(1), tail


def _take_date(rest: str) -> tuple[date | None, str]:
    head, _, tail = rest.partition(" ")
    if not is_date_token(head):
        return None, rest
    parsed = parse_date(head)
    if parsed is None:
        raise DateError(f"Invalid calendar date '{head}'", head)
    return parsed, tail
