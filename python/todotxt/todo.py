"""List management over a parsed task forest.

Tasks are addressed by 0-based index into the pre-order flattened view
(the order the lines appear in the file); negative indices count from
the end. Structural edits (add, insert) never patch the tree in place:
the forest is serialized back to lines, the new lines are spliced in, and
the hierarchy is rebuilt from indentation.
"""

from __future__ import annotations

import functools
import logging
from datetime import date
from pathlib import Path
from typing import Iterable

from .config import TodoConfig
from .core.errors import TodoTxtError, ValidationError
from .core.extensions import ExtensionDefinition, ExtensionRegistry
from .core.parser import flatten_tasks, parse_file, split_lines
from .core.serializer import serialize_task, serialize_tasks, validate_task
from .core.task import Task, apply_description
from .filters import TaskFilter
from .sorts import TaskSorter

logger = logging.getLogger("todotxt.todo")

_UPDATABLE = frozenset({
    "description",
    "completed",
    "priority",
    "creation_date",
    "completion_date",
    "projects",
    "contexts",
    "extensions",
})


class TodoTxt:
    """A task list backed by a todo.txt file."""

    def __init__(
        self,
        config: TodoConfig | None = None,
        registry: ExtensionRegistry | None = None,
    ) -> None:
        self.config = config if config is not None else TodoConfig()
        self.registry = registry if registry is not None else self.config.build_registry()
        self.file_path = Path(self.config.file_path)
        self.auto_save = self.config.auto_save
        self.handle_subtasks = self.config.handle_subtasks
        self.tasks: list[Task] = []

    # --- Queries ---

    def list(
        self,
        task_filter: TaskFilter | None = None,
        sorter: TaskSorter | None = None,
    ) -> list[Task]:
        """Flattened tasks, optionally filtered and sorted."""
        tasks = flatten_tasks(self.tasks)
        if task_filter is not None:
            tasks = [t for t in tasks if task_filter(t)]
        if sorter is not None:
            tasks.sort(key=functools.cmp_to_key(sorter))
        return tasks

    def get(self, index: int) -> Task:
        return self._find([index])[0]

    # --- Structural edits ---

    def add(self, items: str | Task | Iterable[str | Task]) -> None:
        """Append lines (or Task objects) to the end of the list."""
        lines = self.lines()
        lines.extend(self._as_lines(items))
        self._rebuild(lines)
        self._save_if_needed()

    def insert(self, index: int, item: str | Task) -> None:
        """Insert so the new line lands at position ``index``.

        Indices past the end append; negative indices count from the end.
        """
        lines = self.lines()
        if index < 0:
            index = max(len(lines) + index, 0)
        index = min(index, len(lines))
        lines[index:index] = self._as_lines(item)
        self._rebuild(lines)
        self._save_if_needed()

    def remove(self, indices: int | list[int]) -> None:
        """Remove tasks together with their subtasks."""
        for task in self._find(_as_indices(indices)):
            parent = task.parent
            siblings = parent.subtasks if parent is not None else self.tasks
            for pos, candidate in enumerate(siblings):
                if candidate is task:
                    del siblings[pos]
                    break
        logger.debug("removed tasks %s", indices)
        self._save_if_needed()

    # --- In-place edits ---

    def mark(self, indices: int | list[int], on: date | None = None) -> None:
        """Mark tasks completed, stamping a completion date if missing."""
        for task in self._find(_as_indices(indices)):
            task.completed = True
            if task.completion_date is None:
                task.completion_date = on if on is not None else date.today()
        self._save_if_needed()

    def unmark(self, indices: int | list[int]) -> None:
        for task in self._find(_as_indices(indices)):
            task.completed = False
            task.completion_date = None
        self._save_if_needed()

    def update(self, index: int | list[tuple[int, dict]], **values) -> None:
        """Set task attributes; every task must stay well-formed.

        ``update(0, priority="A")`` edits one task. ``update([(0, {...}),
        (2, {...})])`` applies several edits in order. A new description
        re-derives projects, contexts and extensions from its tokens,
        except for those fields passed explicitly alongside it. A failing
        edit is reverted and raised; earlier edits in a batch stay.
        """
        if isinstance(index, int):
            changes = [(index, values)]
        elif values:
            raise ValidationError(
                "Pass fields as keywords or as (index, values) pairs, not both", "values", values,
            )
        else:
            changes = [(position, dict(fields)) for position, fields in index]

        for _, fields in changes:
            unknown = set(fields) - _UPDATABLE
            if unknown:
                raise ValidationError(
                    f"Cannot update field(s): {', '.join(sorted(unknown))}", "values", fields,
                )
        tasks = self._find([position for position, _ in changes])

        for task, (_, fields) in zip(tasks, changes):
            self._apply_update(task, fields)
        self._save_if_needed()

    # --- Extensions ---

    def add_extension(self, definition: ExtensionDefinition) -> None:
        """Register a definition; applies to lines parsed from now on."""
        self.registry.add_extension(definition)

    def remove_extension(self, key: str) -> ExtensionDefinition:
        return self.registry.remove_extension(key)

    # --- Persistence ---

    def loads(self, content: str) -> None:
        """Replace the list with tasks parsed from content."""
        self.tasks = parse_file(content, self.registry, self.handle_subtasks)

    def dumps(self) -> str:
        return serialize_tasks(self.tasks, self.registry)

    def lines(self) -> list[str]:
        """Serialized lines in flattened order."""
        return split_lines(self.dumps())

    def load(self, path: Path | str | None = None) -> None:
        target = Path(path) if path is not None else self.file_path
        try:
            content = target.read_text(encoding="utf-8")
        except OSError as exc:
            raise TodoTxtError(f"Failed to load file: {exc}") from exc
        self.loads(content)
        logger.info("loaded %d tasks from %s", len(flatten_tasks(self.tasks)), target)

    def save(self, path: Path | str | None = None) -> Path:
        target = Path(path) if path is not None else self.file_path
        content = self.dumps()
        if content:
            content += "\n"
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise TodoTxtError(f"Failed to save file: {exc}") from exc
        logger.info("saved %d tasks to %s", len(flatten_tasks(self.tasks)), target)
        return target

    # --- Internal ---

    def _find(self, indices: list[int]) -> list[Task]:
        flat = flatten_tasks(self.tasks)
        found: list[Task] = []
        for original in indices:
            n = original + len(flat) if original < 0 else original
            if n < 0 or n >= len(flat):
                raise TodoTxtError(
                    f"Index out of bounds: {original}. Valid range is "
                    f"0..{len(flat) - 1} or -{len(flat)}..-1"
                )
            found.append(flat[n])
        return found

    def _apply_update(self, task: Task, fields: dict) -> None:
        previous = {name: getattr(task, name) for name in _UPDATABLE}
        for name, value in fields.items():
            setattr(task, name, value)
        try:
            validate_task(task)
            if "description" in fields:
                derived = Task()
                apply_description(derived, task.description, self.registry, task.parent)
                for name in ("projects", "contexts", "extensions"):
                    if name not in fields:
                        setattr(task, name, getattr(derived, name))
        except TodoTxtError:
            for name, value in previous.items():
                setattr(task, name, value)
            raise

    def _as_lines(self, items: str | Task | Iterable[str | Task]) -> list[str]:
        if isinstance(items, (str, Task)):
            items = [items]
        lines: list[str] = []
        for item in items:
            if isinstance(item, Task):
                lines.extend(serialize_task(item, self.registry))
            elif isinstance(item, str):
                lines.extend(split_lines(item))
            else:
                raise ValidationError("Items must be strings or Task objects", "items", item)
        return lines

    def _rebuild(self, lines: list[str]) -> None:
        self.tasks = parse_file("\n".join(lines), self.registry, self.handle_subtasks)
        logger.debug("rebuilt task tree from %d lines", len(lines))

    def _save_if_needed(self) -> None:
        if self.auto_save:
            self.save()


def _as_indices(indices: int | list[int]) -> list[int]:
    if isinstance(indices, int):
        return [indices]
    return list(indices)
