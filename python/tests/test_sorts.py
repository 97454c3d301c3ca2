"""Tests for todotxt.sorts."""

import functools

from todotxt import sorts
from todotxt.core.parser import parse_file
from todotxt.sorts import SortDirection


def _sorted(content, sorter):
    tasks = parse_file(content, handle_subtasks=False)
    return [t.description for t in sorted(tasks, key=functools.cmp_to_key(sorter))]


def test_by_priority_missing_last():
    content = "No priority\n(B) Second\n(A) First\nAlso none"
    assert _sorted(content, sorts.by_priority()) == ["First", "Second", "No priority", "Also none"]
    assert _sorted(content, sorts.by_priority(SortDirection.DESC))[:2] == ["No priority", "Also none"]


def test_by_creation_date():
    content = "2024-03-01 March\nUndated\n2024-01-01 January"
    assert _sorted(content, sorts.by_creation_date()) == ["January", "March", "Undated"]


def test_by_completion_date():
    content = "x 2024-02-01 Feb\nx 2024-01-01 Jan\nOpen"
    assert _sorted(content, sorts.by_completion_date()) == ["Jan", "Feb", "Open"]


def test_by_extension_typed_values():
    content = "A est:10\nB est:2.5\nC\nD est:3"
    assert _sorted(content, sorts.by_extension("est")) == ["B est:2.5", "D est:3", "A est:10", "C"]


def test_by_description_case_insensitive():
    assert _sorted("banana\nApple\ncherry", sorts.by_description()) == ["Apple", "banana", "cherry"]
    assert _sorted("banana\nApple\ncherry", sorts.by_description(SortDirection.DESC)) == [
        "cherry", "banana", "Apple",
    ]


def test_by_completion_status():
    assert _sorted("x Done\nOpen", sorts.by_completion_status()) == ["Open", "Done"]


def test_by_indent_level():
    assert _sorted("    deep\nflat\n  mid", sorts.by_indent_level()) == ["flat", "mid", "deep"]


def test_by_project_and_context():
    assert _sorted("b +zeta\na +alpha", sorts.by_project()) == ["a +alpha", "b +zeta"]
    assert _sorted("b @zeta\na @alpha", sorts.by_context()) == ["a @alpha", "b @zeta"]


def test_counts():
    tasks = parse_file("Parent\n  Child\nLeaf a:1 b:2")
    by_subtasks = sorted(tasks, key=functools.cmp_to_key(sorts.by_subtask_count(SortDirection.DESC)))
    assert by_subtasks[0].description == "Parent"
    by_ext = sorted(tasks, key=functools.cmp_to_key(sorts.by_extension_count()))
    assert by_ext[-1].description == "Leaf a:1 b:2"


def test_composite():
    content = "(B) 2024-02-01 b2\n(A) 2024-03-01 a3\n(B) 2024-01-01 b1"
    sorter = sorts.composite(sorts.by_priority(), sorts.by_creation_date())
    assert _sorted(content, sorter) == ["a3", "b1", "b2"]
