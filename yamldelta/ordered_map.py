"""Order-preserving mapping used for decoded YAML mappings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator


class OrderedMap(Mapping):
    """
    Read-only mapping that remembers the source order of its keys.

    Keys and values live in a single insertion-ordered dict, so the key
    order and the lookup table can never disagree. The two mutators are
    construction-time only and are used by the document decoder.
    """

    __slots__ = ("_data",)

    def __init__(self, pairs=None):
        self._data: dict[str, Any] = {}
        if pairs is not None:
            items = pairs.items() if isinstance(pairs, Mapping) else pairs
            for key, value in items:
                self.assign(key, value)

    def assign(self, key: str, value: Any) -> None:
        """Set an explicit key. A repeated key keeps its first position."""
        self._data[key] = value

    def merge(self, key: str, value: Any) -> None:
        """Set a key coming from a merge key (<<); existing keys win."""
        self._data.setdefault(key, value)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        parts = [f"{key}: {format_node(value)}" for key, value in self._data.items()]
        return "{" + ", ".join(parts) + "}"


def format_node(value: Any) -> str:
    """Render a node as short inline YAML-ish text."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return "[" + ", ".join(format_node(v) for v in value) + "]"
    if isinstance(value, OrderedMap):
        return repr(value)
    return str(value)


def to_plain(value: Any) -> Any:
    """Convert a node tree into plain dicts and lists (for JSON output)."""
    if isinstance(value, OrderedMap):
        return {key: to_plain(child) for key, child in value.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    return value
