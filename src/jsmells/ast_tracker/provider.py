"""SyntaxTreeProvider: build tagged syntax trees from JS/TS source with tree-sitter.

The provider hides the grammar-specific node zoo behind the closed set of
``NodeKind`` tags and explicit child slots. Everything downstream (nesting
analyzer, block extractor) only ever sees ``SyntaxNode``.

Usage::

    provider = SyntaxTreeProvider()
    tree = provider.build_tree(source, language="typescript")
"""

from __future__ import annotations

import logging
import textwrap
import threading
from pathlib import PurePath

import tree_sitter as ts
import tree_sitter_javascript as ts_js
import tree_sitter_typescript as ts_ts

from jsmells.ast_tracker.exceptions import ParseFailure, UnsupportedLanguageError
from jsmells.ast_tracker.types import BLOCK_KINDS, NESTING_KINDS, NodeKind, SyntaxNode

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

SUPPORTED_LANGUAGES: frozenset[str] = frozenset(LANGUAGE_BY_EXTENSION.values())

# ---------------------------------------------------------------------------
# Node classification
# ---------------------------------------------------------------------------

_KIND_BY_TYPE: dict[str, NodeKind] = {
    "function_declaration": NodeKind.FUNCTION_DECLARATION,
    "generator_function_declaration": NodeKind.FUNCTION_DECLARATION,
    "function_expression": NodeKind.FUNCTION_EXPRESSION,
    "function": NodeKind.FUNCTION_EXPRESSION,  # grammar releases before 0.21
    "generator_function": NodeKind.FUNCTION_EXPRESSION,
    "arrow_function": NodeKind.ARROW_FUNCTION,
    "call_expression": NodeKind.CALL_EXPRESSION,
}

# Containers whose named children form an ordered ``body`` sequence.
_SEQUENCE_TYPES: frozenset[str] = frozenset({"program", "statement_block", "class_body"})

_SKIPPED_TYPES: frozenset[str] = frozenset({"comment", "hash_bang_line"})

_TEXT_KINDS: frozenset[NodeKind] = NESTING_KINDS | BLOCK_KINDS


def language_for_path(path: str) -> str:
    """Map a file path to its grammar name by extension."""
    suffix = PurePath(path).suffix.lower()
    try:
        return LANGUAGE_BY_EXTENSION[suffix]
    except KeyError:
        raise UnsupportedLanguageError(
            f"Unsupported file type: {suffix or path!r}. "
            f"Supported: {', '.join(sorted(LANGUAGE_BY_EXTENSION))}"
        ) from None


def regenerate_text(raw: str) -> str:
    """Normalize a node's source slice into comparable block text.

    The first line starts at the node itself, so only continuation lines
    carry the enclosing scope's indentation; those are dedented.
    """
    first, sep, rest = raw.partition("\n")
    if not sep:
        return raw.rstrip()
    return f"{first.rstrip()}\n{textwrap.dedent(rest).rstrip()}"


class SyntaxTreeProvider:
    """Parse JS/TS source into ``SyntaxNode`` trees.

    Initialises tree-sitter ``Language`` objects lazily on first use and
    caches them, together with one ``Parser`` per language, for the lifetime
    of the provider. Parsers are not shared across threads; use
    ``get_provider()`` to obtain the calling thread's instance.
    """

    def __init__(self) -> None:
        self._languages: dict[str, ts.Language] = {}
        self._parsers: dict[str, ts.Parser] = {}

    def _get_language(self, language: str) -> ts.Language:
        if language not in SUPPORTED_LANGUAGES:
            raise UnsupportedLanguageError(
                f"Unsupported language: {language!r}. "
                f"Supported: {', '.join(sorted(SUPPORTED_LANGUAGES))}"
            )

        if language not in self._languages:
            if language == "javascript":
                self._languages[language] = ts.Language(ts_js.language())
            elif language == "typescript":
                self._languages[language] = ts.Language(ts_ts.language_typescript())
            else:  # tsx
                self._languages[language] = ts.Language(ts_ts.language_tsx())

        return self._languages[language]

    def _get_parser(self, language: str) -> ts.Parser:
        if language not in self._parsers:
            self._parsers[language] = ts.Parser(language=self._get_language(language))
        return self._parsers[language]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_tree(self, source: str, language: str = "javascript") -> SyntaxNode:
        """Parse *source* and convert it into a tagged ``SyntaxNode`` tree.

        Raises:
            ParseFailure: The source contains syntax errors, or the tree is
                too deep to convert.
            UnsupportedLanguageError: *language* has no grammar.
        """
        source_bytes = source.encode("utf-8")
        tree = self._get_parser(language).parse(source_bytes)
        root = tree.root_node

        if root.has_error:
            line = _first_error_line(root)
            raise ParseFailure(f"Syntax error near line {line}")

        try:
            return _Converter(source_bytes).convert(root)
        except RecursionError:
            raise ParseFailure("Syntax tree is nested too deeply to analyze") from None


# ---------------------------------------------------------------------------
# tree-sitter -> SyntaxNode conversion
# ---------------------------------------------------------------------------


def _first_error_line(node: ts.Node) -> int:
    """1-based line of the first ERROR or MISSING node under *node*."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current.start_point.row + 1
        # Reversed so the leftmost child is examined first.
        stack.extend(reversed([c for c in current.children if c.has_error or c.is_missing]))
    return node.start_point.row + 1


class _Converter:
    def __init__(self, source_bytes: bytes) -> None:
        self._source = source_bytes

    def convert(self, node: ts.Node) -> SyntaxNode:
        kind = self._kind_of(node)
        line = node.start_point.row + 1

        if node.type in _SEQUENCE_TYPES:
            return SyntaxNode(
                kind=kind,
                type=node.type,
                line=line,
                body=tuple(self._convert_all(node.named_children)),
            )

        body_node = node.child_by_field_name("body")
        args_node = None
        if kind is NodeKind.CALL_EXPRESSION:
            candidate = node.child_by_field_name("arguments")
            # Tagged templates put a template_string in the arguments field.
            if candidate is not None and candidate.type == "arguments":
                args_node = candidate

        slotted = [n for n in (body_node, args_node) if n is not None]
        others = [c for c in node.named_children if not any(c == s for s in slotted)]

        return SyntaxNode(
            kind=kind,
            type=node.type,
            line=line,
            name=self._name_of(node),
            text=self._text_of(node) if kind in _TEXT_KINDS else None,
            body=self.convert(body_node) if body_node is not None else None,
            arguments=tuple(self._convert_all(args_node.named_children)) if args_node else (),
            children=tuple(self._convert_all(others)),
        )

    def _convert_all(self, nodes: list[ts.Node]) -> list[SyntaxNode]:
        return [self.convert(n) for n in nodes if n.type not in _SKIPPED_TYPES]

    def _kind_of(self, node: ts.Node) -> NodeKind:
        if node.type == "method_definition":
            # Object literal methods are not class methods.
            parent = node.parent
            if parent is not None and parent.type == "class_body":
                return NodeKind.CLASS_METHOD
            return NodeKind.OTHER
        return _KIND_BY_TYPE.get(node.type, NodeKind.OTHER)

    def _name_of(self, node: ts.Node) -> str | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        return self._slice(name_node)

    def _text_of(self, node: ts.Node) -> str:
        return regenerate_text(self._slice(node))

    def _slice(self, node: ts.Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Per-thread providers
# ---------------------------------------------------------------------------

_local = threading.local()


def get_provider() -> SyntaxTreeProvider:
    """Return the calling thread's provider, creating it on first use."""
    provider = getattr(_local, "provider", None)
    if provider is None:
        provider = SyntaxTreeProvider()
        _local.provider = provider
        logger.debug("Created syntax tree provider for thread %s", threading.get_ident())
    return provider
