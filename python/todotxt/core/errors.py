"""Error taxonomy for parsing and serializing todo.txt task lists.

Every error carries a machine-readable ``code`` alongside its message.
Wrapping errors keep the original exception as ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class TodoTxtError(Exception):
    """Base class for all todo.txt errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ParseError(TodoTxtError):
    """A line failed structural parsing."""

    def __init__(
        self,
        message: str,
        line: str | None = None,
        line_number: int | None = None,
    ) -> None:
        super().__init__(message, "PARSE_ERROR")
        self.line = line
        self.line_number = line_number


class ExtensionError(TodoTxtError):
    """A custom extension function failed, or a key was misused."""

    def __init__(self, message: str, extension_key: str | None = None) -> None:
        super().__init__(message, "EXTENSION_ERROR")
        self.extension_key = extension_key


class SerializationError(TodoTxtError):
    """A task could not be rendered back to text."""

    def __init__(
        self,
        message: str,
        task: Any = None,
        index: str | None = None,
    ) -> None:
        super().__init__(message, "SERIALIZATION_ERROR")
        self.task = task
        self.index = index


class ValidationError(TodoTxtError):
    """Malformed call input: wrong type, missing field, bad key."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field
        self.value = value


class DateError(TodoTxtError):
    """An invalid date object was encountered while rendering."""

    def __init__(self, message: str, date_str: str | None = None) -> None:
        super().__init__(message, "DATE_ERROR")
        self.date_str = date_str


class PriorityError(ValidationError):
    """Priority is not a single uppercase letter A-Z."""

    def __init__(self, message: str, priority: Any = None) -> None:
        super().__init__(message, "priority", priority)
        self.code = "PRIORITY_ERROR"
        self.priority = priority
