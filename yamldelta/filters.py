"""Path-based filtering of finished difference lists."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from .exceptions import ValidationError
from .models import Difference, FilterOptions


def path_matches(diff_path: str, filter_path: str) -> bool:
    """
    Check if a difference path matches a filter path.

    Matches exactly, or as a prefix ending at a "." or "[" boundary, so
    "spec" matches "spec.replicas" but not "specs".
    """
    if diff_path == filter_path:
        return True
    if diff_path.startswith(filter_path):
        remaining = diff_path[len(filter_path):]
        return remaining[:1] in (".", "[")
    return False


def _matches_any_path(diff_path: str, filter_paths: list[str]) -> bool:
    return any(path_matches(diff_path, p) for p in filter_paths)


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern:
    """Compile and cache a regex pattern."""
    return re.compile(pattern)


def _compile_patterns(patterns: list[str]) -> list[re.Pattern]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(_compile_pattern(pattern))
        except re.error as e:
            raise ValidationError(
                f"Invalid regex pattern '{pattern}': {e}",
                {"pattern": pattern}
            )
    return compiled


def filter_differences(
    diffs: list[Difference],
    options: Optional[FilterOptions] = None
) -> list[Difference]:
    """
    Keep or drop differences by path.

    Include filters (paths or regular expressions) are applied before
    exclude filters. Without any filter the list is returned unchanged.

    Raises:
        ValidationError: If a regular expression is invalid
    """
    if options is None:
        return diffs

    include_regex = _compile_patterns(options.include_regexp)
    exclude_regex = _compile_patterns(options.exclude_regexp)
    has_includes = bool(options.include_paths or include_regex)

    result = []
    for diff in diffs:
        if has_includes:
            included = (
                _matches_any_path(diff.path, options.include_paths)
                or any(r.search(diff.path) for r in include_regex)
            )
            if not included:
                continue

        if _matches_any_path(diff.path, options.exclude_paths):
            continue
        if any(r.search(diff.path) for r in exclude_regex):
            continue

        result.append(diff)

    return result
