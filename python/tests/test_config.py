"""Tests for todotxt.config -- YAML configuration and registry building."""

from datetime import date
from pathlib import Path

import pytest

from todotxt.config import TodoConfig, load_config, parse_config
from todotxt.core.errors import ExtensionError, ParseError, ValidationError
from todotxt.core.parser import parse_file


def test_defaults():
    config = parse_config("")
    assert config.file_path == Path("todo.txt")
    assert config.auto_save is False
    assert config.handle_subtasks is True
    assert config.extensions == []


def test_full_config():
    config = parse_config(
        "file: lists/work.txt\n"
        "auto-save: true\n"
        "subtasks: false\n"
        "extensions:\n"
        "  - key: due\n"
        "    type: date\n"
        "  - key: tags\n"
        "    shadow: false\n"
        "  - key: secret\n"
        "    inherit: false\n"
        "  - estimate\n"
    )
    assert config.file_path == Path("lists/work.txt")
    assert config.auto_save is True
    assert config.handle_subtasks is False
    assert [d.key for d in config.extensions] == ["due", "tags", "secret", "estimate"]
    assert config.extensions[1].shadow is False
    assert config.extensions[2].inherit is False


def test_build_registry_applies_rules():
    config = parse_config(
        "extensions:\n"
        "  - key: tags\n"
        "    shadow: false\n"
        "  - key: due\n"
        "    type: date\n"
    )
    registry = config.build_registry()
    root = parse_file("Parent tags:a due:2024-01-01\n  Child tags:b", registry)[0]
    assert root.subtasks[0].extensions == {"tags": ["a", "b"], "due": date(2024, 1, 1)}


def test_typed_key_rejects_bad_value():
    registry = parse_config("extensions:\n  - key: due\n    type: date\n").build_registry()
    with pytest.raises(ParseError) as excinfo:
        parse_file("Task due:tomorrow", registry)
    assert isinstance(excinfo.value.__cause__, ExtensionError)


def test_registry_is_fresh_each_time():
    config = parse_config("extensions:\n  - key: due\n")
    assert config.build_registry() is not config.build_registry()


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "auto-save: maybe\n",
    "extensions: due\n",
    "extensions:\n  - key: due\n    type: timestamp\n",
    "extensions:\n  - key: ''\n",
    "extensions:\n  - 42\n",
    "file: [unclosed\n",
])
def test_invalid_config(text):
    with pytest.raises(ValidationError):
        parse_config(text)


def test_duplicate_keys_rejected_when_building():
    config = parse_config("extensions:\n  - due\n  - DUE\n")
    with pytest.raises(ExtensionError):
        config.build_registry()


def test_load_config(tmp_path):
    path = tmp_path / "todo.yaml"
    path.write_text("file: mine.txt\n", encoding="utf-8")
    config = load_config(path)
    assert isinstance(config, TodoConfig)
    assert config.file_path == Path("mine.txt")
