"""Line and file parsing; turns indented lines into a task forest.

Indentation is the only structural signal: a line becomes a subtask of the
nearest preceding open task with a strictly smaller indent level.
Parents are always built before their subtasks so that inherited
extension values resolve level by level.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .errors import ParseError, TodoTxtError, ValidationError
from .extensions import ExtensionRegistry
from .task import Task, build_task, indent_level

logger = logging.getLogger("todotxt.parser")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_line(line: str, registry: ExtensionRegistry | None = None) -> Task:
    """Parse a single line into a standalone Task (no parent)."""
    if not isinstance(line, str):
        raise ValidationError("Line must be a string", "line", line)
    registry = registry if registry is not None else ExtensionRegistry()
    try:
        return build_task(line, registry)
    except TodoTxtError as exc:
        raise ParseError(f"Failed to parse line: {exc}", line) from exc


def parse_file(
    content: str,
    registry: ExtensionRegistry | None = None,
    handle_subtasks: bool = True,
) -> list[Task]:
    """Parse a whole task list.

    Blank lines are skipped. With ``handle_subtasks`` off every line is a
    root task. The first failing line aborts the parse with a ParseError
    carrying its 1-based line number.
    """
    if not isinstance(content, str):
        raise ValidationError("Content must be a string", "content", content)
    registry = registry if registry is not None else ExtensionRegistry()

    numbered = [
        (idx + 1, line)
        for idx, line in enumerate(split_lines(content))
        if line.strip()
    ]

    if handle_subtasks:
        tasks = _build_hierarchy(numbered, registry)
    else:
        tasks = [_build_numbered(line_number, line, registry) for line_number, line in numbered]

    logger.debug("parsed %d lines into %d root tasks", len(numbered), len(tasks))
    return tasks


def build_hierarchy(lines: Iterable[str], registry: ExtensionRegistry) -> list[Task]:
    """Assemble a forest from an ordered sequence of raw lines."""
    return _build_hierarchy(list(enumerate(lines, start=1)), registry)


def split_lines(content: str) -> list[str]:
    """Split on newlines only, dropping a trailing carriage return from each line."""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def flatten_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Pre-order walk of a forest."""
    result: list[Task] = []
    for task in tasks:
        result.append(task)
        result.extend(flatten_tasks(task.subtasks))
    return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _build_hierarchy(
    numbered: list[tuple[int, str]],
    registry: ExtensionRegistry,
) -> list[Task]:
    roots: list[Task] = []
    # Open ancestors, shallowest first
    stack: list[Task] = []

    for line_number, line in numbered:
        level = indent_level(line)

        parent_idx = len(stack) - 1
        while parent_idx >= 0 and stack[parent_idx].indent_level >= level:
            parent_idx -= 1

        if parent_idx < 0:
            task = _build_numbered(line_number, line, registry)
            roots.append(task)
            stack.clear()
            stack.append(task)
            continue

        parent = stack[parent_idx]
        task = _build_numbered(line_number, line, registry, parent)
        parent.add_subtask(task)
        del stack[parent_idx + 1:]
        stack.append(task)

    return roots


def _build_numbered(
    line_number: int,
    line: str,
    registry: ExtensionRegistry,
    parent: Task | None = None,
) -> Task:
    try:
        return build_task(line, registry, parent)
    except TodoTxtError as exc:
        raise ParseError(
            f"Failed to parse line {line_number}: {exc}", line, line_number,
        ) from exc
