"""Kubernetes resource detection and cross-document matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .ordered_map import OrderedMap
from .utils import format_identifier


def is_kubernetes_resource(doc: Any) -> bool:
    """
    Check if a document has the structure of a Kubernetes resource.

    It must be a map with string apiVersion and kind, and a metadata map
    carrying a non-null name (or, failing that, generateName).
    """
    if not isinstance(doc, OrderedMap):
        return False

    if not isinstance(doc.get("apiVersion"), str):
        return False
    if not isinstance(doc.get("kind"), str):
        return False

    metadata = doc.get("metadata")
    if not isinstance(metadata, OrderedMap):
        return False

    return metadata.get("name") is not None or metadata.get("generateName") is not None


def kubernetes_identifier(doc: Any) -> Optional[str]:
    """
    Build the identity of a Kubernetes resource.

    Format: "apiVersion:kind:namespace/name", or "apiVersion:kind:name"
    when no namespace is set. Returns None for non-Kubernetes documents.
    """
    if not is_kubernetes_resource(doc):
        return None

    metadata = doc["metadata"]
    name = metadata.get("name")
    if name is None:
        name = metadata.get("generateName")

    prefix = f"{doc['apiVersion']}:{doc['kind']}"
    namespace = metadata.get("namespace")
    if namespace is not None:
        return f"{prefix}:{format_identifier(namespace)}/{format_identifier(name)}"
    return f"{prefix}:{format_identifier(name)}"


def has_kubernetes_documents(old_docs: list, new_docs: list) -> bool:
    """Check if any document on either side is a Kubernetes resource."""
    return any(is_kubernetes_resource(doc) for doc in (*old_docs, *new_docs))


@dataclass
class DocumentMatch:
    """Result of matching two document streams by Kubernetes identity."""
    matched: list[tuple[int, int]] = field(default_factory=list)
    unmatched_old: list[int] = field(default_factory=list)
    unmatched_new: list[int] = field(default_factory=list)


def match_documents(old_docs: list, new_docs: list) -> DocumentMatch:
    """
    Pair documents across two streams by Kubernetes identity.

    Matched pairs are listed in old-stream order. A document without an
    identity, or whose identity has no partner, is left unmatched.
    """
    result = DocumentMatch()

    new_index: dict[str, int] = {}
    for i, doc in enumerate(new_docs):
        ident = kubernetes_identifier(doc)
        if ident is not None:
            new_index.setdefault(ident, i)

    new_matched = [False] * len(new_docs)
    for i, doc in enumerate(old_docs):
        ident = kubernetes_identifier(doc)
        j = new_index.get(ident) if ident is not None else None
        if j is not None and not new_matched[j]:
            result.matched.append((i, j))
            new_matched[j] = True
        else:
            result.unmatched_old.append(i)

    result.unmatched_new = [j for j, matched in enumerate(new_matched) if not matched]
    return result
