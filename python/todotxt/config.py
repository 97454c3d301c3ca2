"""YAML configuration for a task list.

Example::

    file: todo.txt
    auto-save: false
    subtasks: true
    extensions:
      - key: due
        type: date
      - key: tags
        shadow: false
      - key: secret
        inherit: false

``type`` names one of the built-in coercion strategies (``date``,
``bool``, ``int``, ``float``, ``list``, ``str``); without it a key uses
the default coercion chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .core.errors import ValidationError
from .core.extensions import ExtensionDefinition, ExtensionRegistry
from .core.values import STRATEGIES


@dataclass
class TodoConfig:
    file_path: Path = field(default_factory=lambda: Path("todo.txt"))
    auto_save: bool = False
    handle_subtasks: bool = True
    extensions: list[ExtensionDefinition] = field(default_factory=list)

    def build_registry(self) -> ExtensionRegistry:
        """Fresh registry holding the configured extension definitions."""
        return ExtensionRegistry(self.extensions)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_config(text: str) -> TodoConfig:
    """Parse configuration from a YAML string. Empty text yields defaults."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValidationError(f"Invalid configuration YAML: {exc}", "config", text) from exc

    if data is None:
        return TodoConfig()
    if not isinstance(data, dict):
        raise ValidationError("Configuration must be a mapping", "config", data)

    config = TodoConfig()
    if data.get("file") is not None:
        config.file_path = Path(str(data["file"]))
    config.auto_save = _bool_option(data, "auto-save", config.auto_save)
    config.handle_subtasks = _bool_option(data, "subtasks", config.handle_subtasks)

    raw_extensions = data.get("extensions") or []
    if not isinstance(raw_extensions, list):
        raise ValidationError("'extensions' must be a list", "extensions", raw_extensions)
    config.extensions = [_parse_extension(entry) for entry in raw_extensions]
    return config


def load_config(path: Path) -> TodoConfig:
    """Read configuration from a YAML file."""
    return parse_config(Path(path).read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _bool_option(data: dict, name: str, default: bool) -> bool:
    value = data.get(name)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"'{name}' must be true or false", name, value)
    return value


def _parse_extension(entry: object) -> ExtensionDefinition:
    if isinstance(entry, str):
        return ExtensionDefinition(key=entry)
    if not isinstance(entry, dict):
        raise ValidationError("Extension entry must be a key or a mapping", "extensions", entry)

    type_name = entry.get("type")
    parser = None
    if type_name is not None:
        parser = STRATEGIES.get(str(type_name))
        if parser is None:
            raise ValidationError(
                f"Unknown extension type '{type_name}' (expected one of {sorted(STRATEGIES)})",
                "extensions.type",
                type_name,
            )

    return ExtensionDefinition(
        key=entry.get("key"),
        parser=parser,
        inherit=_bool_option(entry, "inherit", True),
        shadow=_bool_option(entry, "shadow", True),
    )
