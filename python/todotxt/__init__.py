"""todotxt -- todo.txt task lists with subtasks and typed extensions.

The parsing engine lives in :mod:`todotxt.core`; this package adds the
list-management facade, YAML configuration, filters and sorts.
"""

from . import filters, sorts
from .config import TodoConfig, load_config, parse_config
from .core import (
    DateError,
    ExtensionDefinition,
    ExtensionError,
    ExtensionRegistry,
    ParseError,
    PriorityError,
    SerializationError,
    Task,
    TodoTxtError,
    ValidationError,
    parse_file,
    parse_line,
    serialize_tasks,
)
from .sorts import SortDirection
from .todo import TodoTxt

__all__ = [
    "TodoTxt",
    "TodoConfig",
    "load_config",
    "parse_config",
    "Task",
    "ExtensionDefinition",
    "ExtensionRegistry",
    "parse_file",
    "parse_line",
    "serialize_tasks",
    "filters",
    "sorts",
    "SortDirection",
    "TodoTxtError",
    "ParseError",
    "ExtensionError",
    "SerializationError",
    "ValidationError",
    "DateError",
    "PriorityError",
]
