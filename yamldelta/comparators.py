"""Equality functions for decoded YAML values."""

from __future__ import annotations

import math
from typing import Any

from .models import Options
from .ordered_map import OrderedMap


def values_equal(old: Any, new: Any, options: Options) -> bool:
    """
    Compare two scalar values.

    With ignore_whitespace_changes, strings are compared after trimming
    leading and trailing whitespace; interior whitespace still counts.
    Values of different types (including bool vs int) are never equal.
    """
    if type(old) is not type(new):
        return False

    if options.ignore_whitespace_changes and isinstance(old, str):
        return old.strip() == new.strip()

    if isinstance(old, float) and math.isnan(old) and math.isnan(new):
        return True

    return old == new


def deep_equal(old: Any, new: Any, options: Options) -> bool:
    """
    Recursive structural equality.

    Maps are equal when they hold the same keys with deep-equal values
    (key order is ignored). Lists are equal when they have the same length
    and every positional pair is deep-equal.
    """
    if old is None and new is None:
        return True
    if old is None or new is None:
        return False

    if type(old) is not type(new):
        return False

    if isinstance(old, OrderedMap):
        if len(old) != len(new):
            return False
        for key, value in old.items():
            if key not in new or not deep_equal(value, new[key], options):
                return False
        return True

    if isinstance(old, list):
        if len(old) != len(new):
            return False
        return all(deep_equal(a, b, options) for a, b in zip(old, new))

    return values_equal(old, new, options)
