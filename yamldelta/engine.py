"""Main comparison engine for yamldelta."""

from __future__ import annotations

import logging
from typing import Optional

from .chroot import apply_chroot
from .differ import Differ
from .document import parse
from .exceptions import ChrootError, PayloadSizeError, ValidationError
from .models import Difference, EngineConfig, LogLevel, Options
from .ordering import extract_path_order, sort_differences
from .utils import get_input_size_mb

logger = logging.getLogger("yamldelta.engine")

_LOG_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class DiffEngine:
    """
    Main comparison engine that orchestrates the pipeline:

    1. Parsing: Decode both inputs into ordered document trees
    2. Re-rooting: Apply swap and chroot options
    3. Structural Diffing: Compare documents by index or Kubernetes identity
    4. Ordering: Sort differences into source-document order
    """

    VERSION = "1.0.0"

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Engine configuration (uses defaults if not provided)
        """
        self.config = config or EngineConfig()
        if self.config.log_level is not None:
            logging.getLogger("yamldelta").setLevel(_LOG_LEVELS[self.config.log_level])

    def compare(
        self,
        from_content: bytes | str,
        to_content: bytes | str,
        options: Optional[Options] = None
    ) -> list[Difference]:
        """
        Compare two YAML byte streams.

        Args:
            from_content: The original YAML content
            to_content: The new YAML content
            options: Comparison options (uses defaults if not provided)

        Returns:
            Ordered list of differences; empty when the documents match

        Raises:
            ParseError: If either input is malformed YAML
            MaxDepthExceededError: If a document nests deeper than max_depth
            ChrootError: If a chroot path does not resolve
            ValidationError: If an input is missing
            PayloadSizeError: If an input exceeds the configured size limit
        """
        options = options or Options()
        self._validate_inputs(from_content, to_content)

        from_docs = parse(from_content, self.config.max_depth)
        to_docs = parse(to_content, self.config.max_depth)
        logger.debug(
            "Comparing %d document(s) against %d document(s)", len(from_docs), len(to_docs)
        )

        if options.swap:
            from_docs, to_docs = to_docs, from_docs

        from_docs, to_docs = self._apply_chroot(from_docs, to_docs, options)

        path_order = extract_path_order(from_docs, to_docs, options)
        differ = Differ(options)
        diffs = differ.compare_documents(from_docs, to_docs)
        logger.debug("Found %d difference(s)", len(diffs))

        return sort_differences(diffs, path_order)

    def _validate_inputs(self, from_content: bytes | str, to_content: bytes | str):
        """Validate input parameters."""
        for name, content in (("from_content", from_content), ("to_content", to_content)):
            if content is None:
                raise ValidationError(f"{name} is required")
            if not isinstance(content, (bytes, str)):
                raise ValidationError(
                    f"{name} must be bytes or str",
                    {"type": type(content).__name__}
                )
            size = get_input_size_mb(content)
            if size > self.config.max_payload_size_mb:
                raise PayloadSizeError(size, self.config.max_payload_size_mb)

    def _apply_chroot(
        self,
        from_docs: list,
        to_docs: list,
        options: Options
    ) -> tuple[list, list]:
        """Re-root documents; chroot applies to both sides and wins over side paths."""
        from_path = options.chroot or options.chroot_from
        to_path = options.chroot or options.chroot_to
        as_docs = options.chroot_list_to_documents

        try:
            return (
                apply_chroot(from_docs, from_path, as_docs),
                apply_chroot(to_docs, to_path, as_docs),
            )
        except ChrootError as e:
            logger.warning("Chroot failed: %s", e)
            raise


def compare(
    from_content: bytes | str,
    to_content: bytes | str,
    options: Optional[Options] = None,
    config: Optional[EngineConfig] = None
) -> list[Difference]:
    """
    Convenience function to compare two YAML inputs.

    Args:
        from_content: The original YAML content
        to_content: The new YAML content
        options: Optional comparison options
        config: Optional engine configuration

    Returns:
        Ordered list of differences
    """
    engine = DiffEngine(config)
    return engine.compare(from_content, to_content, options)
