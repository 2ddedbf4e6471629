"""Custom exceptions for the yamldelta comparison engine."""

from __future__ import annotations

from typing import Optional


class YamlDeltaError(Exception):
    """Base exception for yamldelta errors."""
    pass


class ValidationError(YamlDeltaError):
    """Raised when options or filter input validation fails."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParseError(YamlDeltaError):
    """Raised when YAML input cannot be parsed."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line:
            return f"yaml: line {self.line}: {self.message}"
        return f"yaml: {self.message}"


class ChrootError(YamlDeltaError):
    """Raised when a chroot path does not resolve in a document."""
    def __init__(self, path: str, message: str):
        super().__init__(f"chroot path {path!r}: {message}")
        self.path = path
        self.message = message


class PayloadSizeError(YamlDeltaError):
    """Raised when input size exceeds limit."""
    def __init__(self, size_mb: float, limit_mb: float):
        super().__init__(f"Payload size ({size_mb:.2f}MB) exceeds limit ({limit_mb}MB)")
        self.size_mb = size_mb
        self.limit_mb = limit_mb


class MaxDepthExceededError(YamlDeltaError):
    """Raised when a well-formed document nests deeper than the configured limit."""
    def __init__(self, depth: int, line: Optional[int] = None, column: Optional[int] = None):
        where = f" at line {line}" if line else ""
        super().__init__(f"Maximum depth ({depth}) exceeded{where}")
        self.depth = depth
        self.line = line
        self.column = column
