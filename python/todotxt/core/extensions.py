"""Extension registry and resolution of inline ``key:value`` metadata.

A task's description may carry any number of ``key:value`` tokens. Each
key resolves to a typed value (see :mod:`values`). Keys declared in an
:class:`ExtensionRegistry` can supply their own parse/serialize functions
and control how values flow from a parent task to its subtasks:

- ``inherit`` -- subtasks receive the parent's value when they don't set
  the key themselves (default True; undeclared keys always inherit).
- ``shadow`` -- when a subtask sets the key too, its value replaces the
  inherited one (True, default) or is merged with it into a list (False).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

from .errors import ExtensionError, ValidationError
from .values import TypedValue, coerce, render, unique_values

logger = logging.getLogger("todotxt.extensions")

# A token starts at the beginning of the text or after whitespace
_EXTENSION_RE = re.compile(r"(?<!\S)(\w+):(\S+)")


@dataclass(frozen=True)
class ExtensionDefinition:
    """A declared extension key with optional parse/serialize strategies."""

    key: str
    parser: Callable[[str], Any] | None = None
    serializer: Callable[[Any], str] | None = None
    inherit: bool = True
    shadow: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise ValidationError("Extension must have a valid key", "extension.key", self.key)
        if not self.key.strip():
            raise ValidationError("Extension key cannot be empty", "extension.key", self.key)
        if self.parser is not None and not callable(self.parser):
            raise ValidationError("Extension parser must be callable", "extension.parser", self.parser)
        if self.serializer is not None and not callable(self.serializer):
            raise ValidationError(
                "Extension serializer must be callable", "extension.serializer", self.serializer,
            )

    @property
    def name(self) -> str:
        """Normalized (lower-case) key."""
        return self.key.lower()


class ExtensionRegistry:
    """Case-insensitive table of extension definitions.

    Populate it before parsing; it is read-only for the duration of a
    parse or serialize pass. Registering while another thread parses
    with the same registry is undefined behavior.
    """

    def __init__(self, definitions: Iterable[ExtensionDefinition] = ()) -> None:
        self._definitions: dict[str, ExtensionDefinition] = {}
        for definition in definitions:
            self.add_extension(definition)

    def add_extension(self, definition: ExtensionDefinition) -> None:
        if not isinstance(definition, ExtensionDefinition):
            raise ValidationError(
                "Extension must be an ExtensionDefinition", "extension", definition,
            )
        if definition.name in self._definitions:
            raise ExtensionError(
                f"Extension with key '{definition.key}' already exists", definition.key,
            )
        self._definitions[definition.name] = definition
        logger.debug(
            "registered extension %r (inherit=%s, shadow=%s)",
            definition.name, definition.inherit, definition.shadow,
        )

    def remove_extension(self, key: str) -> ExtensionDefinition:
        """Unregister a key and return its definition."""
        if not isinstance(key, str) or not key:
            raise ValidationError("Key must be a non-empty string", "key", key)
        definition = self._definitions.pop(key.lower(), None)
        if definition is None:
            raise ExtensionError(f"Extension with key '{key}' does not exist", key)
        logger.debug("removed extension %r", definition.name)
        return definition

    def has_extension(self, key: str) -> bool:
        return key.lower() in self._definitions

    def lookup(self, key: str) -> ExtensionDefinition | None:
        return self._definitions.get(key.lower())

    def definitions(self) -> list[ExtensionDefinition]:
        return list(self._definitions.values())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has_extension(key)

    def __iter__(self) -> Iterator[ExtensionDefinition]:
        return iter(self.definitions())

    def __len__(self) -> int:
        return len(self._definitions)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def find_extension_tokens(text: str) -> list[tuple[str, str]]:
    """All ``(key, raw_value)`` pairs in text, left to right."""
    return _EXTENSION_RE.findall(text)


def strip_extension_tokens(text: str) -> str:
    """Remove inline ``key:value`` tokens and normalize spacing."""
    return " ".join(_EXTENSION_RE.sub("", text).split())


def parse_extension_value(
    key: str,
    raw_value: str,
    registry: ExtensionRegistry,
) -> TypedValue:
    """Coerce one raw value, preferring the key's registered parser."""
    definition = registry.lookup(key)
    if definition is None or definition.parser is None:
        return coerce(raw_value)
    try:
        return definition.parser(raw_value)
    except Exception as exc:
        raise ExtensionError(f"Failed to parse extension '{key}': {exc}", key) from exc


def render_extension_value(key: str, value: Any, registry: ExtensionRegistry) -> str:
    """Render one value, preferring the key's registered serializer."""
    definition = registry.lookup(key)
    if definition is None or definition.serializer is None:
        return render(value)
    try:
        return definition.serializer(value)
    except Exception as exc:
        raise ExtensionError(f"Failed to serialize extension '{key}': {exc}", key) from exc


def resolve_extensions(
    description: str,
    registry: ExtensionRegistry,
    parent_resolved: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Produce a task's resolved extension map.

    The map is seeded from the parent's (already resolved) map for every
    key that inherits, then each token in the description is applied in
    order. For a declared key with ``shadow=False`` the new value is
    merged with the value already in the map (inherited, or from an
    earlier token); every other key is simply overwritten.
    """
    resolved: dict[str, Any] = {}
    if parent_resolved:
        for key, value in parent_resolved.items():
            definition = registry.lookup(key)
            if definition is not None and not definition.inherit:
                continue
            resolved[key] = _copy_value(value)

    for raw_key, raw_value in find_extension_tokens(description):
        key = raw_key.lower()
        value = parse_extension_value(key, raw_value, registry)
        definition = registry.lookup(key)
        if definition is not None and not definition.shadow and key in resolved:
            resolved[key] = _merge_values(resolved[key], value)
        else:
            resolved[key] = value
    return resolved


def serialize_extensions(extensions: dict[str, Any], registry: ExtensionRegistry) -> list[str]:
    """Render a resolved map as ``key:value`` tokens in map order."""
    parts: list[str] = []
    for key, value in extensions.items():
        if value is None:
            logger.warning("dropping extension %r with no value", key)
            continue
        parts.append(f"{key}:{render_extension_value(key, value, registry)}")
    return parts


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _merge_values(inherited: Any, current: Any) -> Any:
    """Concatenate inherited then current, dedupe, collapse a single survivor."""
    merged = unique_values(_as_list(inherited) + _as_list(current))
    if len(merged) == 1:
        return merged[0]
    return merged


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _copy_value(value: Any) -> Any:
    # Subtasks get their own list so in-place edits stay local
    if isinstance(value, list):
        return list(value)
    return value
