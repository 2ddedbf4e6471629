"""Chroot support: re-rooting documents at a sub-path before comparing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from jsonpath_ng.jsonpath import Child, Fields, Index, JSONPath

from .exceptions import ChrootError
from .ordered_map import OrderedMap
from .utils import get_type_name


@dataclass(frozen=True)
class PathSegment:
    """One step of a chroot path: a map key or a list index."""
    key: Optional[str] = None
    index: Optional[int] = None

    @property
    def is_index(self) -> bool:
        return self.index is not None

    def __str__(self) -> str:
        return f"[{self.index}]" if self.is_index else str(self.key)


def _split_path(path: str) -> list[str]:
    """Split on dots that are outside of [n] accessors."""
    parts: list[str] = []
    current = ""
    in_bracket = False

    for ch in path:
        if ch == "." and not in_bracket:
            if current:
                parts.append(current)
                current = ""
            continue
        if ch == "[":
            if in_bracket:
                raise ChrootError(path, "invalid path syntax")
            in_bracket = True
        elif ch == "]":
            if not in_bracket:
                raise ChrootError(path, "invalid path syntax")
            in_bracket = False
        current += ch

    if in_bracket:
        raise ChrootError(path, "invalid path syntax")
    if current:
        parts.append(current)
    return parts


def build_chroot_expression(path: str) -> Optional[JSONPath]:
    """
    Build a jsonpath expression for a chroot path such as "spec.containers[0].env".

    Keys are taken literally, so any character except "." and "[" may
    appear in them ("data.where", "annotations.kubernetes.io/change-cause").
    Each part may end in one "[n]" list index.

    Raises:
        ChrootError: If a list index is malformed
    """
    expr: Optional[JSONPath] = None

    def append(step: JSONPath) -> None:
        nonlocal expr
        expr = step if expr is None else Child(expr, step)

    for part in _split_path(path):
        bracket = part.find("[")
        if bracket == -1:
            append(Fields(part))
            continue

        if part.count("[") != 1 or part.count("]") != 1 or not part.endswith("]"):
            raise ChrootError(path, f"invalid list index syntax {part!r}")
        key, index_text = part[:bracket], part[bracket + 1:-1]
        if not index_text:
            raise ChrootError(path, f"empty list index in {part!r}")
        try:
            index = int(index_text)
        except ValueError:
            raise ChrootError(path, f"invalid list index {index_text!r}") from None

        if key:
            append(Fields(key))
        append(Index(index))

    return expr


def parse_chroot_path(path: str) -> list[PathSegment]:
    """
    Parse a chroot path into key and index segments.

    Raises:
        ChrootError: If the path uses malformed index syntax
    """
    expr = build_chroot_expression(path)
    segments: list[PathSegment] = []
    if expr is not None:
        _flatten(expr, path, segments)
    return segments


def _flatten(expr: Any, path: str, segments: list[PathSegment]) -> None:
    if isinstance(expr, Child):
        _flatten(expr.left, path, segments)
        _flatten(expr.right, path, segments)
    elif isinstance(expr, Fields):
        segments.append(PathSegment(key=expr.fields[0]))
    elif isinstance(expr, Index):
        # jsonpath-ng >= 1.6 stores several indices
        indices = getattr(expr, "indices", None)
        if indices is None:
            indices = [expr.index]
        segments.append(PathSegment(index=int(indices[0])))
    else:
        raise ChrootError(path, f"unsupported path expression {expr}")


def navigate_to_path(doc: Any, path: str) -> Any:
    """
    Return the node found at a chroot path.

    Raises:
        ChrootError: If any segment does not resolve
    """
    current = doc
    for segment in parse_chroot_path(path):
        if segment.is_index:
            if not isinstance(current, list):
                raise ChrootError(
                    path, f"expected list at {str(segment)!r}, got {get_type_name(current)}"
                )
            if segment.index < 0 or segment.index >= len(current):
                raise ChrootError(
                    path,
                    f"index {segment.index} out of bounds (list has {len(current)} items)"
                )
            current = current[segment.index]
        else:
            if not isinstance(current, OrderedMap):
                raise ChrootError(
                    path, f"expected map at {segment.key!r}, got {get_type_name(current)}"
                )
            if segment.key not in current:
                raise ChrootError(path, f"key {segment.key!r} not found")
            current = current[segment.key]

    return current


def apply_chroot(docs: list, path: str, list_to_documents: bool = False) -> list:
    """
    Re-root every document at a path.

    With list_to_documents, a path that lands on a list expands into one
    document per list item.
    """
    if not path:
        return docs

    result = []
    for doc in docs:
        node = navigate_to_path(doc, path)
        if list_to_documents and isinstance(node, list):
            result.extend(node)
        else:
            result.append(node)
    return result
