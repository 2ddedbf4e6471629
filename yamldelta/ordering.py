"""Stage 4: Ordering of differences for presentation."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Optional

from .lists import DEFAULT_IDENTIFIERS, usable_identifier
from .models import DiffKind, Difference, Options
from .ordered_map import OrderedMap
from .utils import format_identifier, join_path, path_depth, split_document_prefix


def extract_path_order(old_docs: list, new_docs: list, options: Options) -> dict[str, int]:
    """
    Record the position at which each path first occurs in the documents.

    Old documents are walked before new ones, depth first, so a key only
    present in the new side orders after everything in the old side.
    List items are registered under their identifier when they have one.
    """
    order: dict[str, int] = {}
    identifiers = options.additional_identifiers

    def register(path: str) -> None:
        if path and path not in order:
            order[path] = len(order)

    def walk(prefix: str, value: Any) -> None:
        register(prefix)
        if isinstance(value, OrderedMap):
            for key, child in value.items():
                walk(join_path(prefix, key), child)
        elif isinstance(value, list):
            for i, item in enumerate(value):
                ident = usable_identifier(item, identifiers)
                segment = format_identifier(ident) if ident is not None else i
                walk(join_path(prefix, segment), item)

    for doc in (*old_docs, *new_docs):
        walk("", doc)

    return order


def is_list_entry(diff: Difference) -> bool:
    """Check if a difference describes a whole list entry."""
    _, path = split_document_prefix(diff.path)

    if path.endswith("]"):
        return True

    last_dot = path.rfind(".")
    if 0 <= last_dot < len(path) - 1 and path[last_dot + 1:].isdigit():
        return True

    value = diff.to_value if diff.to_value is not None else diff.from_value
    if isinstance(value, OrderedMap):
        return any(field in value for field in DEFAULT_IDENTIFIERS)

    return False


def _is_root_addition(diff: Difference, path: str) -> bool:
    return diff.kind == DiffKind.ADDED and "." not in path and not is_list_entry(diff)


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def _ancestor_order(path: str, order: dict[str, int]) -> Optional[int]:
    while True:
        if path in order:
            return order[path]
        last_dot = path.rfind(".")
        if last_dot == -1:
            return None
        path = path[:last_dot]


def _compare_diffs(a: Difference, b: Difference, order: dict[str, int]) -> int:
    if a.document_index != b.document_index:
        return _sign(a.document_index, b.document_index)

    _, path_a = split_document_prefix(a.path)
    _, path_b = split_document_prefix(b.path)

    depth_a, depth_b = path_depth(a.path), path_depth(b.path)
    if depth_a != depth_b:
        return _sign(depth_a, depth_b)

    # Root-level additions lead their depth
    root_add_a = _is_root_addition(a, path_a)
    root_add_b = _is_root_addition(b, path_b)
    if root_add_a != root_add_b:
        return -1 if root_add_a else 1

    root_a = path_a.split(".", 1)[0]
    root_b = path_b.split(".", 1)[0]
    if root_a != root_b:
        if root_a in order and root_b in order:
            return _sign(order[root_a], order[root_b])
        return _sign(root_a, root_b)

    if path_a in order and path_b in order:
        return _sign(order[path_a], order[path_b])
    if path_a in order:
        return -1
    if path_b in order:
        return 1

    parent_a = _ancestor_order(path_a, order)
    parent_b = _ancestor_order(path_b, order)
    if parent_a is not None and parent_b is not None and parent_a != parent_b:
        return _sign(parent_a, parent_b)

    return _sign(path_a, path_b)


def sort_differences(diffs: list[Difference], order: dict[str, int]) -> list[Difference]:
    """
    Sort differences into presentation order.

    Differences are grouped by document, then shallower paths come before
    deeper ones. At equal depth, root-level additions come first, then
    paths follow their position in the source documents, falling back to
    the nearest positioned ancestor and finally to alphabetical order.
    The sort is stable.
    """
    return sorted(diffs, key=cmp_to_key(lambda a, b: _compare_diffs(a, b, order)))
