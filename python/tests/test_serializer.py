"""Tests for todotxt.core.serializer -- canonical lines and round trips."""

from datetime import date

import pytest

from todotxt.core.errors import (
    DateError,
    ExtensionError,
    PriorityError,
    SerializationError,
    ValidationError,
)
from todotxt.core.extensions import ExtensionDefinition, ExtensionRegistry
from todotxt.core.parser import parse_file
from todotxt.core.serializer import serialize_task, serialize_tasks
from todotxt.core.task import Task


CANONICAL = (
    "(A) 2024-01-01 Plan trip +travel @home due:2024-02-01\n"
    "x 2024-01-05 (B) 2024-01-02 Book hotel est:3 done:true\n"
    "Call mom +family\n"
    "x 2024-01-03 Buy milk\n"
    "Pay rent amount:-12.5 tags:a,b"
)


def test_round_trip_canonical_text():
    assert serialize_tasks(parse_file(CANONICAL)) == CANONICAL


def test_round_trip_with_subtasks():
    content = "Parent +proj\n  Child one\n    Grandchild\n  Child two\nOther"
    assert serialize_tasks(parse_file(content)) == content


def test_extension_tokens_move_to_end():
    tasks = parse_file("Call due:2024-01-05 mom +family")
    assert serialize_tasks(tasks) == "Call mom +family due:2024-01-05"


def test_colons_inside_project_and_context_tokens_survive():
    content = "Deploy +web:prod @srv\nPing me@host:8080 @office"
    tasks = parse_file(content)
    assert tasks[0].extensions == {}
    assert tasks[1].extensions == {}
    assert serialize_tasks(tasks) == content

    reparsed = parse_file(serialize_tasks(tasks))
    assert reparsed[0].projects == ["web"]
    assert reparsed[0].contexts == ["srv"]
    assert reparsed[1].contexts == ["host", "office"]


def test_extension_values_render_canonically():
    tasks = parse_file("Task Done:yes Flag:OFF")
    assert serialize_tasks(tasks) == "Task done:true flag:false"


def test_inherited_extensions_are_emitted_on_children():
    tasks = parse_file("Parent due:2024-01-01\n  Child")
    assert serialize_tasks(tasks) == "Parent due:2024-01-01\n  Child due:2024-01-01"


def test_serialized_children_reparse_to_same_values():
    registry = ExtensionRegistry([ExtensionDefinition(key="tags", shadow=False)])
    content = "Parent tags:urgent\n  Child tags:important"
    first = parse_file(content, registry)
    again = parse_file(serialize_tasks(first, registry), registry)
    assert again[0].subtasks[0].extensions == {"tags": ["urgent", "important"]}
    assert serialize_tasks(again, registry) == serialize_tasks(first, registry)


def test_without_subtasks():
    tasks = parse_file("Parent\n  Child")
    assert serialize_tasks(tasks, include_subtasks=False) == "Parent"


def test_without_indentation():
    tasks = parse_file("Parent\n    Child")
    assert serialize_tasks(tasks, preserve_indentation=False) == "Parent\nChild"


def test_custom_serializer_used():
    registry = ExtensionRegistry([
        ExtensionDefinition(
            key="estimate",
            parser=lambda v: int(v.rstrip("h")),
            serializer=lambda hours: f"{hours}h",
        ),
    ])
    tasks = parse_file("Task estimate:2h", registry)
    assert tasks[0].extensions == {"estimate": 2}
    assert serialize_tasks(tasks, registry) == "Task estimate:2h"


def test_serialize_task_returns_lines():
    tasks = parse_file("Parent\n  Child")
    assert serialize_task(tasks[0]) == ["Parent", "  Child"]


def test_edited_task_serializes_current_state():
    task = parse_file("(A) Write report due:2024-01-01")[0]
    task.completed = True
    task.completion_date = date(2024, 1, 3)
    task.extensions["due"] = date(2024, 1, 2)
    assert serialize_tasks([task]) == "x 2024-01-03 (A) Write report due:2024-01-02"


# --- errors ---

def test_rejects_non_list():
    for bad in (None, "tasks", 123):
        with pytest.raises(ValidationError):
            serialize_tasks(bad)


def test_rejects_non_task():
    with pytest.raises(ValidationError):
        serialize_tasks([{"description": "dict"}])
    with pytest.raises(ValidationError):
        serialize_task(None)


def test_rejects_completion_date_on_incomplete_task():
    task = Task(description="Open", completion_date=date(2024, 1, 1))
    with pytest.raises(ValidationError):
        serialize_tasks([task])


def test_rejects_bad_priority():
    with pytest.raises(PriorityError) as excinfo:
        serialize_tasks([Task(description="Bad", priority="a")])
    assert excinfo.value.code == "PRIORITY_ERROR"
    assert isinstance(excinfo.value, ValidationError)


def test_invalid_date_wrapped_with_index():
    good = Task(description="valid")
    parent = Task(description="parent")
    parent.add_subtask(Task(description="bad", creation_date="2024-01-01", indent_level=2))
    with pytest.raises(SerializationError) as excinfo:
        serialize_tasks([good, parent])
    assert excinfo.value.index == "tasks[1].subtasks[0]"
    assert excinfo.value.task.description == "bad"
    assert isinstance(excinfo.value.__cause__, DateError)


def test_serializer_function_failure_propagates():
    def explode(value):
        raise TypeError("no")

    registry = ExtensionRegistry([ExtensionDefinition(key="test", serializer=explode)])
    with pytest.raises(ExtensionError):
        serialize_tasks([Task(description="x", extensions={"test": "value"})], registry)
