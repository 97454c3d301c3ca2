"""Task comparators for :meth:`TodoTxt.list`.

Each factory returns a three-way comparator ``(a, b) -> int``. Tasks
missing the compared attribute sort after tasks that have it when
ascending. Chain comparators with :func:`composite`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from .core.task import Task
from .core.values import compare_values

TaskSorter = Callable[[Task, Task], int]


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


def by_priority(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _optional(lambda t: t.priority, direction)


def by_creation_date(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _optional(lambda t: t.creation_date, direction)


def by_completion_date(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _optional(lambda t: t.completion_date, direction)


def by_extension(key: str, direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    key = key.lower()
    return _optional(lambda t: t.extensions.get(key), direction)


def by_description(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _directed(lambda a, b: _cmp(a.description.lower(), b.description.lower()), direction)


def by_project(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _directed(
        lambda a, b: _cmp(",".join(a.projects).lower(), ",".join(b.projects).lower()),
        direction,
    )


def by_context(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _directed(
        lambda a, b: _cmp(",".join(a.contexts).lower(), ",".join(b.contexts).lower()),
        direction,
    )


def by_completion_status(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    """Incomplete before completed when ascending."""
    return _directed(lambda a, b: _cmp(a.completed, b.completed), direction)


def by_indent_level(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _directed(lambda a, b: _cmp(a.indent_level, b.indent_level), direction)


def by_subtask_count(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _directed(lambda a, b: _cmp(len(a.subtasks), len(b.subtasks)), direction)


def by_extension_count(direction: SortDirection = SortDirection.ASC) -> TaskSorter:
    return _directed(lambda a, b: _cmp(len(a.extensions), len(b.extensions)), direction)


def composite(*sorters: TaskSorter) -> TaskSorter:
    """First non-zero result wins."""
    def sorter(a: Task, b: Task) -> int:
        for s in sorters:
            result = s(a, b)
            if result != 0:
                return result
        return 0
    return sorter


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _directed(sorter: TaskSorter, direction: SortDirection) -> TaskSorter:
    if direction == SortDirection.DESC:
        return lambda a, b: sorter(b, a)
    return sorter


def _optional(getter: Callable[[Task], Any], direction: SortDirection) -> TaskSorter:
    def sorter(a: Task, b: Task) -> int:
        av, bv = getter(a), getter(b)
        if av is None and bv is None:
            return 0
        if av is None:
            return 1
        if bv is None:
            return -1
        return compare_values(av, bv)
    return _directed(sorter, direction)


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)
