"""Stage 1: Document decoding for the yamldelta engine."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, Optional

import yaml
from yaml.composer import Composer
from yaml.constructor import SafeConstructor
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode
from yaml.parser import Parser
from yaml.reader import Reader
from yaml.resolver import BaseResolver
from yaml.scanner import Scanner

from .exceptions import MaxDepthExceededError, ParseError
from .ordered_map import OrderedMap, format_node

logger = logging.getLogger("yamldelta.document")

MERGE_KEY = "<<"
DEFAULT_MAX_DEPTH = 200

_LEGACY_OCTAL = re.compile(r'^[-+]?0[0-7]+$')


class CoreResolver(BaseResolver):
    """
    Implicit tag resolution following the YAML 1.2 core schema.

    Only true/false are booleans and there are no base-60 numbers, so
    values such as "yes", "on" or "22:22" stay strings.
    """


CoreResolver.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list("tTfF"))
CoreResolver.add_implicit_resolver(
    "tag:yaml.org,2002:int",
    re.compile(r'''^(?:[-+]?0b[01_]+
                    |[-+]?0o[0-7_]+
                    |[-+]?0x[0-9a-fA-F_]+
                    |[-+]?[0-9][0-9_]*)$''', re.X),
    list("-+0123456789"))
CoreResolver.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(r'''^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?
                    |[-+]?\.(?:inf|Inf|INF)
                    |\.(?:nan|NaN|NAN))$''', re.X),
    list("-+0123456789."))
CoreResolver.add_implicit_resolver(
    "tag:yaml.org,2002:null",
    re.compile(r'^(?:~|null|Null|NULL|)$'),
    ["~", "n", "N", ""])


class DocumentLoader(Reader, Scanner, Parser, Composer, SafeConstructor, CoreResolver):
    """SafeLoader with core-schema scalar resolution."""

    def __init__(self, stream):
        Reader.__init__(self, stream)
        Scanner.__init__(self)
        Parser.__init__(self)
        Composer.__init__(self)
        SafeConstructor.__init__(self)
        CoreResolver.__init__(self)


class ScalarConstructor(SafeConstructor):
    """Builds scalar values for the core schema tags."""

    def construct_yaml_int(self, node):
        value = self.construct_scalar(node).replace("_", "")
        if _LEGACY_OCTAL.match(value):
            return int(value, 8)
        return int(value, 0)


_SCALAR_TAGS = {
    "tag:yaml.org,2002:null": "construct_yaml_null",
    "tag:yaml.org,2002:bool": "construct_yaml_bool",
    "tag:yaml.org,2002:int": "construct_yaml_int",
    "tag:yaml.org,2002:float": "construct_yaml_float",
    "tag:yaml.org,2002:str": "construct_yaml_str",
}


class DocumentDecoder:
    """
    Converts PyYAML node graphs into yamldelta nodes.

    Mappings become OrderedMap (source key order kept), sequences become
    lists and scalars are resolved with the YAML 1.2 core schema. Aliases
    share the anchored node object, so a node met again while it is still being
    decoded is a cycle and decodes to None.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self._constructor = ScalarConstructor()

    def decode(self, node: Optional[Node]) -> Any:
        """Decode one document root."""
        return self._decode(node, set(), 0)

    def _decode(self, node: Optional[Node], resolving: set[int], depth: int) -> Any:
        if node is None:
            return None

        if isinstance(node, ScalarNode):
            return self._resolve_scalar(node)

        if not isinstance(node, (MappingNode, SequenceNode)):
            return None

        if id(node) in resolving:
            # Self-referencing alias
            return None

        if depth >= self.max_depth:
            mark = node.start_mark
            raise MaxDepthExceededError(
                self.max_depth,
                line=mark.line + 1 if mark else None,
                column=mark.column + 1 if mark else None,
            )

        resolving.add(id(node))
        try:
            if isinstance(node, MappingNode):
                return self._decode_mapping(node, resolving, depth)
            return [self._decode(child, resolving, depth + 1) for child in node.value]
        finally:
            resolving.discard(id(node))

    def _decode_mapping(self, node: MappingNode, resolving: set[int], depth: int) -> OrderedMap:
        result = OrderedMap()

        for key_node, value_node in node.value:
            if isinstance(key_node, ScalarNode) and key_node.value == MERGE_KEY:
                merged = self._decode(value_node, resolving, depth + 1)
                sources = merged if isinstance(merged, list) else [merged]
                for source in sources:
                    if isinstance(source, OrderedMap):
                        for key, value in source.items():
                            result.merge(key, value)
                continue

            key = self._key_text(key_node, resolving, depth)
            result.assign(key, self._decode(value_node, resolving, depth + 1))

        return result

    def _key_text(self, key_node: Node, resolving: set[int], depth: int) -> str:
        if isinstance(key_node, ScalarNode):
            return key_node.value
        # Complex keys are rare; use their inline rendering
        return format_node(self._decode(key_node, resolving, depth + 1))

    def _resolve_scalar(self, node: ScalarNode) -> Any:
        method = _SCALAR_TAGS.get(node.tag)
        if method is None:
            # Timestamps, binary and custom tags keep their literal text
            return node.value
        try:
            return getattr(self._constructor, method)(node)
        except (ValueError, TypeError, KeyError, yaml.YAMLError):
            return node.value


def _wrap_yaml_error(error: yaml.YAMLError) -> ParseError:
    """Convert a PyYAML error into a ParseError with 1-based position."""
    if isinstance(error, yaml.MarkedYAMLError):
        mark = error.problem_mark or error.context_mark
        message = error.problem or error.context or str(error)
        if mark is not None:
            return ParseError(message, line=mark.line + 1, column=mark.column + 1)
        return ParseError(message)
    return ParseError(str(error))


def iter_documents(content: bytes | str, max_depth: int = DEFAULT_MAX_DEPTH) -> Iterator[Any]:
    """
    Decode documents one at a time from a (possibly multi-document) stream.

    Raises:
        ParseError: On malformed YAML, when the failing document is reached
        MaxDepthExceededError: If a document nests deeper than max_depth
    """
    decoder = DocumentDecoder(max_depth)
    nodes = yaml.compose_all(content, Loader=DocumentLoader)
    while True:
        try:
            node = next(nodes)
        except StopIteration:
            return
        except yaml.YAMLError as e:
            raise _wrap_yaml_error(e) from e
        yield decoder.decode(node)


def parse(content: bytes | str, max_depth: int = DEFAULT_MAX_DEPTH) -> list[Any]:
    """
    Parse YAML content into a list of documents.

    Each document is None, a scalar, an OrderedMap or a list. An empty
    stream yields a single None document.

    Args:
        content: Raw YAML bytes or text
        max_depth: Maximum nesting depth accepted

    Returns:
        List of decoded documents

    Raises:
        ParseError: On malformed YAML
        MaxDepthExceededError: If a document nests deeper than max_depth
    """
    docs = list(iter_documents(content, max_depth))
    if not docs:
        docs.append(None)
    logger.debug("Parsed %d document(s)", len(docs))
    return docs
