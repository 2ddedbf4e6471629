"""Stage 3: Structural diffing for the yamldelta engine."""

from __future__ import annotations

import logging
from typing import Any

from .comparators import deep_equal, values_equal
from .kubernetes import has_kubernetes_documents, match_documents
from .lists import identifier_key, select_strategy, usable_identifier
from .models import DiffKind, Difference, ListStrategy, Options
from .ordered_map import OrderedMap
from .utils import document_prefix, format_identifier, join_path

logger = logging.getLogger("yamldelta.differ")


class Differ:
    """
    Performs structural comparison of decoded YAML documents.

    Handles:
    - Maps, walked in source key order (removals and changes first, then additions)
    - Lists, matched by identifier, as sets, or by position
    - Scalars, with optional whitespace-insensitive comparison
    - Multi-document streams, paired by index or by Kubernetes identity

    Input trees are never modified; differences accumulate in ``diffs``.
    """

    def __init__(self, options: Options):
        self.options = options
        self.diffs: list[Difference] = []

    def compare_documents(self, old_docs: list, new_docs: list) -> list[Difference]:
        """Compare two document streams and return all differences."""
        if self.options.detect_kubernetes and has_kubernetes_documents(old_docs, new_docs):
            logger.debug("Matching documents by Kubernetes identity")
            self._compare_kubernetes_documents(old_docs, new_docs)
            return self.diffs

        count = max(len(old_docs), len(new_docs))
        for i in range(count):
            old = old_docs[i] if i < len(old_docs) else None
            new = new_docs[i] if i < len(new_docs) else None
            prefix = document_prefix(i) if count > 1 else ""
            self._diff_document(i, prefix, old, new)

        return self.diffs

    def _compare_kubernetes_documents(self, old_docs: list, new_docs: list) -> None:
        match = match_documents(old_docs, new_docs)
        multi = len(old_docs) > 1 or len(new_docs) > 1

        for old_idx, new_idx in match.matched:
            prefix = document_prefix(old_idx) if multi else ""
            self._diff_document(old_idx, prefix, old_docs[old_idx], new_docs[new_idx])

        for old_idx in match.unmatched_old:
            if old_docs[old_idx] is None:
                continue
            self.diffs.append(Difference(
                path=document_prefix(old_idx),
                kind=DiffKind.REMOVED,
                from_value=old_docs[old_idx],
                document_index=old_idx
            ))

        for new_idx in match.unmatched_new:
            if new_docs[new_idx] is None:
                continue
            self.diffs.append(Difference(
                path=document_prefix(new_idx),
                kind=DiffKind.ADDED,
                to_value=new_docs[new_idx],
                document_index=new_idx
            ))

    def _diff_document(self, index: int, prefix: str, old: Any, new: Any) -> None:
        start = len(self.diffs)
        self.diff(old, new, prefix)
        for entry in self.diffs[start:]:
            entry.document_index = index

    def diff(self, old: Any, new: Any, path: str = "") -> None:
        """
        Compare two nodes and record their differences.

        Args:
            old: The original node (None when absent)
            new: The new node (None when absent)
            path: Dotted path of the nodes
        """
        if old is None and new is None:
            return

        if old is None:
            self._add_diff(path, DiffKind.ADDED, None, new)
            return

        if new is None:
            # A key that became null still exists; this is a value change
            self._add_value_change(path, old, None)
            return

        if type(old) is not type(new):
            self._add_value_change(path, old, new)
            return

        if isinstance(old, OrderedMap):
            self._diff_maps(old, new, path)
        elif isinstance(old, list):
            self._diff_lists(old, new, path)
        elif not values_equal(old, new, self.options):
            self._add_value_change(path, old, new)

    def _diff_maps(self, old: OrderedMap, new: OrderedMap, path: str) -> None:
        """Compare two maps in source key order."""
        for key, old_value in old.items():
            child_path = join_path(path, key)
            if key not in new:
                self._add_diff(child_path, DiffKind.REMOVED, old_value, None)
            else:
                self.diff(old_value, new[key], child_path)

        for key, new_value in new.items():
            if key not in old:
                self._add_diff(join_path(path, key), DiffKind.ADDED, None, new_value)

    def _diff_lists(self, old: list, new: list, path: str) -> None:
        """Compare two lists using the strategy their shape calls for."""
        strategy = select_strategy(old, new, self.options)

        if strategy == ListStrategy.IDENTIFIER:
            self._diff_identified_lists(old, new, path)
        elif strategy in (ListStrategy.UNORDERED, ListStrategy.HETEROGENEOUS):
            self._diff_unordered_lists(
                list(enumerate(old)), list(enumerate(new)), path
            )
        else:
            self._diff_positional_lists(old, new, path)

    def _diff_positional_lists(self, old: list, new: list, path: str) -> None:
        """Compare lists index-by-index (order matters)."""
        for i in range(max(len(old), len(new))):
            child_path = join_path(path, i)
            if i >= len(old):
                self._add_diff(child_path, DiffKind.ADDED, None, new[i])
            elif i >= len(new):
                self._add_diff(child_path, DiffKind.REMOVED, old[i], None)
            else:
                self.diff(old[i], new[i], child_path)

    def _diff_unordered_lists(
        self,
        old: list[tuple[int, Any]],
        new: list[tuple[int, Any]],
        path: str
    ) -> None:
        """
        Compare (index, item) pairs as multisets.

        Each old item claims the first unclaimed deep-equal new item.
        Unclaimed items are reported at their own original index.
        """
        new_matched = [False] * len(new)

        for old_idx, old_item in old:
            for j, (_, new_item) in enumerate(new):
                if new_matched[j]:
                    continue
                if deep_equal(old_item, new_item, self.options):
                    new_matched[j] = True
                    break
            else:
                self._add_diff(join_path(path, old_idx), DiffKind.REMOVED, old_item, None)

        for j, (new_idx, new_item) in enumerate(new):
            if not new_matched[j]:
                self._add_diff(join_path(path, new_idx), DiffKind.ADDED, None, new_item)

    def _diff_identified_lists(self, old: list, new: list, path: str) -> None:
        """
        Compare lists by matching items on their identifier field.

        Matched items recurse under the identifier, so their paths do not
        depend on list position. Unmatched identified items are reported
        whole at the list path; items without a usable identifier (or with
        a duplicate one) are compared as a multiset.
        """
        identifiers = self.options.additional_identifiers
        old_ids, old_rest = _partition_by_identifier(old, identifiers)
        new_ids, new_rest = _partition_by_identifier(new, identifiers)

        for key, (old_idx, ident) in old_ids.items():
            if key in new_ids:
                new_idx, _ = new_ids[key]
                child_path = join_path(path, format_identifier(ident))
                self.diff(old[old_idx], new[new_idx], child_path)
            else:
                self._add_diff(path, DiffKind.REMOVED, old[old_idx], None)

        for key, (new_idx, _) in new_ids.items():
            if key not in old_ids:
                self._add_diff(path, DiffKind.ADDED, None, new[new_idx])

        self._diff_unordered_lists(old_rest, new_rest, path)

    def _add_value_change(self, path: str, old: Any, new: Any) -> None:
        if self.options.ignore_value_changes:
            return
        self._add_diff(path, DiffKind.MODIFIED, old, new)

    def _add_diff(self, path: str, kind: DiffKind, old: Any, new: Any) -> None:
        """Add a difference entry."""
        self.diffs.append(Difference(
            path=path,
            kind=kind,
            from_value=old,
            to_value=new
        ))


def _partition_by_identifier(
    items: list,
    identifiers: tuple[str, ...]
) -> tuple[dict, list[tuple[int, Any]]]:
    """
    Split list items into identified and unidentified groups.

    Returns:
        Tuple of ({identifier key: (index, identifier)} in list order,
        [(index, item)] for items without a usable, unique identifier)
    """
    identified: dict = {}
    rest: list[tuple[int, Any]] = []

    for i, item in enumerate(items):
        ident = usable_identifier(item, identifiers)
        if ident is None:
            rest.append((i, item))
            continue
        key = identifier_key(ident)
        if key in identified:
            rest.append((i, item))
        else:
            identified[key] = (i, ident)

    return identified, rest


def compare_nodes(path: str, old: Any, new: Any, options: Options) -> list[Difference]:
    """Compare two nodes and return their differences (unsorted)."""
    differ = Differ(options)
    differ.diff(old, new, path)
    return differ.diffs
