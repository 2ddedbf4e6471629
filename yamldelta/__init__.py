"""
yamldelta - Semantic YAML Comparison Engine

Compares two YAML streams structurally and reports what changed as typed
differences with logical paths, tolerating key reordering, whitespace-only
edits, named list entries and Kubernetes resource identity.
"""

from .engine import DiffEngine, compare
from .models import (
    Options,
    EngineConfig,
    FilterOptions,
    Difference,
    DiffKind,
    ListStrategy,
    LogLevel,
)
from .exceptions import (
    YamlDeltaError,
    ParseError,
    MaxDepthExceededError,
    ChrootError,
    ValidationError,
    PayloadSizeError,
)
from .ordered_map import OrderedMap, to_plain
from .document import parse, iter_documents
from .differ import Differ, compare_nodes
from .comparators import values_equal, deep_equal
from .kubernetes import (
    is_kubernetes_resource,
    kubernetes_identifier,
    match_documents,
)
from .lists import (
    get_identifier,
    can_match_by_identifier,
    are_items_heterogeneous,
    select_strategy,
)
from .ordering import extract_path_order, sort_differences
from .filters import filter_differences

__version__ = "1.0.0"
__all__ = [
    # Engine
    "DiffEngine",
    "compare",
    "Options",
    "EngineConfig",
    "LogLevel",
    # Results
    "Difference",
    "DiffKind",
    # Errors
    "YamlDeltaError",
    "ParseError",
    "MaxDepthExceededError",
    "ChrootError",
    "ValidationError",
    "PayloadSizeError",
    # Document model
    "OrderedMap",
    "to_plain",
    "parse",
    "iter_documents",
    # Comparison internals
    "Differ",
    "compare_nodes",
    "values_equal",
    "deep_equal",
    "ListStrategy",
    "get_identifier",
    "can_match_by_identifier",
    "are_items_heterogeneous",
    "select_strategy",
    # Kubernetes
    "is_kubernetes_resource",
    "kubernetes_identifier",
    "match_documents",
    # Ordering and filtering
    "extract_path_order",
    "sort_differences",
    "FilterOptions",
    "filter_differences",
]
