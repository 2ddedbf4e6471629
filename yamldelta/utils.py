"""Utility functions for the yamldelta engine."""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from .ordered_map import OrderedMap

_DOC_PREFIX = re.compile(r'^\[(\d+)\](?:\.|$)')


def get_input_size_mb(content: bytes | str) -> float:
    """Get the size of raw input content in megabytes."""
    if isinstance(content, str):
        content = content.encode('utf-8')
    return len(content) / (1024 * 1024)


def join_path(base: str, segment: Any) -> str:
    """Join a path and one segment with a dot."""
    if base == "":
        return str(segment)
    return f"{base}.{segment}"


def document_prefix(index: int) -> str:
    """Path prefix used for one document of a multi-document stream."""
    return f"[{index}]"


def split_document_prefix(path: str) -> tuple[Optional[int], str]:
    """
    Split a leading "[n]" document prefix off a difference path.

    Returns:
        Tuple of (document index or None, remaining path)
    """
    match = _DOC_PREFIX.match(path)
    if not match:
        return None, path
    return int(match.group(1)), path[match.end():]


def path_depth(path: str) -> int:
    """Number of dotted segments in a path (document prefix excluded)."""
    _, rest = split_document_prefix(path)
    if rest == "":
        return 0
    return rest.count(".") + 1


def format_identifier(value: Any) -> str:
    """Render an identifier value the way it appears in difference paths."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def is_scalar(value: Any) -> bool:
    """Check if a node is a scalar (not null, not a collection)."""
    return value is not None and not isinstance(value, (OrderedMap, list))


def get_type_name(value: Any) -> str:
    """Get a friendly type name for a node."""
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, int):
        return "integer"
    elif isinstance(value, float):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, list):
        return "list"
    elif isinstance(value, OrderedMap):
        return "map"
    else:
        return type(value).__name__
