"""todotxt.core -- todo.txt parsing engine.

Typed extension values, the extension registry and resolver, the
single-line task builder, the indentation-driven hierarchy builder and
the serializer.
"""

from .errors import (
    DateError,
    ExtensionError,
    ParseError,
    PriorityError,
    SerializationError,
    TodoTxtError,
    ValidationError,
)
from .extensions import (
    ExtensionDefinition,
    ExtensionRegistry,
    resolve_extensions,
    serialize_extensions,
)
from .parser import build_hierarchy, flatten_tasks, parse_file, parse_line
from .serializer import serialize_task, serialize_tasks, validate_task
from .task import Task, apply_description, build_task
from .values import TypedValue, ValueKind, coerce, compare_values, kind_of, render, values_equal

__all__ = [
    "TodoTxtError",
    "ParseError",
    "ExtensionError",
    "SerializationError",
    "ValidationError",
    "DateError",
    "PriorityError",
    "ExtensionDefinition",
    "ExtensionRegistry",
    "resolve_extensions",
    "serialize_extensions",
    "build_hierarchy",
    "flatten_tasks",
    "parse_file",
    "parse_line",
    "serialize_task",
    "serialize_tasks",
    "validate_task",
    "Task",
    "build_task",
    "apply_description",
    "TypedValue",
    "ValueKind",
    "coerce",
    "compare_values",
    "kind_of",
    "render",
    "values_equal",
]
