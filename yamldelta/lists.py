"""List shape predicates used to pick a list matching strategy."""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Optional

from .models import ListStrategy, Options
from .ordered_map import OrderedMap
from .utils import is_scalar

DEFAULT_IDENTIFIERS = ("name", "id")


def get_identifier(item: Any, additional_identifiers: Iterable[str] = ()) -> Any:
    """
    Get the identifier value of a list item.

    Additional identifier fields are checked first, in configured order,
    then "name", then "id". The first field present wins even when its
    value turns out to be unusable.
    """
    if not isinstance(item, OrderedMap):
        return None

    for field in (*additional_identifiers, *DEFAULT_IDENTIFIERS):
        if field in item:
            return item[field]
    return None


def is_usable_identifier(value: Any) -> bool:
    """An identifier is usable when it is a non-null scalar."""
    return is_scalar(value)


def identifier_key(value: Any) -> Hashable:
    """Lookup key for an identifier; keeps True distinct from 1 and 1.0."""
    return (type(value), value)


def usable_identifier(item: Any, additional_identifiers: Iterable[str] = ()) -> Optional[Any]:
    """Return the item's identifier if usable, otherwise None."""
    value = get_identifier(item, additional_identifiers)
    return value if is_usable_identifier(value) else None


def can_match_by_identifier(items: list, additional_identifiers: Iterable[str] = ()) -> bool:
    """
    Check if list items can be matched by identifier.

    True only when every item is a map and at least one of them carries a
    usable identifier.
    """
    if not items:
        return False

    found = False
    for item in items:
        if not isinstance(item, OrderedMap):
            return False
        if usable_identifier(item, additional_identifiers) is not None:
            found = True
    return found


def are_items_heterogeneous(old: list, new: list) -> bool:
    """
    Check if two lists hold single-key maps of differing shapes.

    Items like {namespaceSelector: ...} and {ipBlock: ...} are alternative
    variants, so their position carries no meaning.
    """
    all_keys: set[str] = set()
    for item in (*old, *new):
        if not isinstance(item, OrderedMap) or len(item) != 1:
            return False
        all_keys.update(item.keys())

    return len(all_keys) > 1


def select_strategy(old: list, new: list, options: Options) -> ListStrategy:
    """Pick the matching strategy for a pair of lists."""
    identifiers = options.additional_identifiers
    if can_match_by_identifier(old, identifiers) and can_match_by_identifier(new, identifiers):
        return ListStrategy.IDENTIFIER

    if options.ignore_order_changes:
        return ListStrategy.UNORDERED

    if are_items_heterogeneous(old, new):
        return ListStrategy.HETEROGENEOUS

    return ListStrategy.POSITIONAL
