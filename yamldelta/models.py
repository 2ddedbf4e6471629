"""Data models for the yamldelta engine."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional

from .exceptions import ValidationError
from .ordered_map import to_plain


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class DiffKind(Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    ORDER_CHANGED = "order_changed"


class ListStrategy(Enum):
    IDENTIFIER = "identifier"
    UNORDERED = "unordered"
    HETEROGENEOUS = "heterogeneous"
    POSITIONAL = "positional"


@dataclass(frozen=True)
class Options:
    """Comparison options, fixed for the duration of one compare call."""
    ignore_order_changes: bool = False
    ignore_whitespace_changes: bool = False
    ignore_value_changes: bool = False
    detect_kubernetes: bool = False
    # Reserved, accepted and ignored
    detect_renames: bool = False
    additional_identifiers: tuple[str, ...] = ()
    swap: bool = False
    chroot: str = ""
    chroot_from: str = ""
    chroot_to: str = ""
    chroot_list_to_documents: bool = False

    def __post_init__(self):
        # Lists from config files are frozen into tuples
        if isinstance(self.additional_identifiers, str):
            object.__setattr__(self, "additional_identifiers", (self.additional_identifiers,))
        elif not isinstance(self.additional_identifiers, tuple):
            object.__setattr__(
                self, "additional_identifiers", tuple(self.additional_identifiers or ())
            )

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Options":
        """
        Build options from a plain mapping (e.g. a loaded config file).

        Raises:
            ValidationError: If the mapping contains unknown keys
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            raise ValidationError(
                f"Unknown option(s): {', '.join(unknown)}",
                {"unknown": unknown}
            )
        return cls(**data)


@dataclass
class EngineConfig:
    """Global configuration for the comparison engine."""
    max_depth: int = 200
    max_payload_size_mb: float = 50
    # Applied to the "yamldelta" logger only when set
    log_level: Optional[LogLevel] = None


@dataclass
class Difference:
    """A single difference found during comparison."""
    path: str
    kind: DiffKind
    from_value: Any = None
    to_value: Any = None
    document_index: int = 0

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "kind": self.kind.value,
            "from": to_plain(self.from_value),
            "to": to_plain(self.to_value),
            "document_index": self.document_index,
        }


@dataclass
class FilterOptions:
    """Path filters applied to a finished difference list."""
    include_paths: list[str] = field(default_factory=list)
    exclude_paths: list[str] = field(default_factory=list)
    include_regexp: list[str] = field(default_factory=list)
    exclude_regexp: list[str] = field(default_factory=list)
