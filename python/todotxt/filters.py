"""Task predicates for :meth:`TodoTxt.list`.

Every factory returns a ``Callable[[Task], bool]``; combine them with
:func:`all_of`, :func:`any_of` and :func:`negate`.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable

from .core.task import Task
from .core.values import values_equal

TaskFilter = Callable[[Task], bool]

_ANY = object()


def by_context(context: str) -> TaskFilter:
    return lambda task: context in task.contexts


def by_contexts(contexts: list[str]) -> TaskFilter:
    """Tasks with at least one of the given contexts."""
    return lambda task: any(c in task.contexts for c in contexts)


def by_project(project: str) -> TaskFilter:
    return lambda task: project in task.projects


def by_projects(projects: list[str]) -> TaskFilter:
    """Tasks with at least one of the given projects."""
    return lambda task: any(p in task.projects for p in projects)


def by_priority(priority: str) -> TaskFilter:
    return lambda task: task.priority == priority


def by_priorities(priorities: list[str]) -> TaskFilter:
    return lambda task: task.priority is not None and task.priority in priorities


def completed() -> TaskFilter:
    return lambda task: task.completed


def incomplete() -> TaskFilter:
    return lambda task: not task.completed


def has_priority() -> TaskFilter:
    return lambda task: task.priority is not None


def no_priority() -> TaskFilter:
    return lambda task: task.priority is None


def has_context() -> TaskFilter:
    return lambda task: bool(task.contexts)


def no_context() -> TaskFilter:
    return lambda task: not task.contexts


def has_project() -> TaskFilter:
    return lambda task: bool(task.projects)


def no_project() -> TaskFilter:
    return lambda task: not task.projects


def by_extension(key: str, value: Any = _ANY) -> TaskFilter:
    """Tasks whose resolved extensions contain key (and equal value, if given)."""
    key = key.lower()

    def predicate(task: Task) -> bool:
        if key not in task.extensions:
            return False
        return value is _ANY or values_equal(task.extensions[key], value)

    return predicate


def by_extensions(expected: dict[str, Any]) -> TaskFilter:
    """Tasks matching every key/value pair."""
    return all_of(*(by_extension(k, v) for k, v in expected.items()))


def created_after(day: date) -> TaskFilter:
    return lambda task: task.creation_date is not None and task.creation_date > day


def created_before(day: date) -> TaskFilter:
    return lambda task: task.creation_date is not None and task.creation_date < day


def created_on(day: date) -> TaskFilter:
    return lambda task: task.creation_date == day


def completed_after(day: date) -> TaskFilter:
    return lambda task: task.completion_date is not None and task.completion_date > day


def completed_before(day: date) -> TaskFilter:
    return lambda task: task.completion_date is not None and task.completion_date < day


def completed_on(day: date) -> TaskFilter:
    return lambda task: task.completion_date == day


def all_of(*filters: TaskFilter) -> TaskFilter:
    return lambda task: all(f(task) for f in filters)


def any_of(*filters: TaskFilter) -> TaskFilter:
    return lambda task: any(f(task) for f in filters)


def negate(task_filter: TaskFilter) -> TaskFilter:
    return lambda task: not task_filter(task)
