"""Internal data types for the AST tracker.

Frozen dataclasses for the tagged syntax tree, analyzed source units,
extracted code blocks and similarity matches. These map to the Pydantic
report models (Finding, DuplicateDetail) when findings are emitted.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum


class NodeKind(StrEnum):
    FUNCTION_DECLARATION = "function-declaration"
    FUNCTION_EXPRESSION = "function-expression"
    ARROW_FUNCTION = "arrow-function"
    CLASS_METHOD = "class-method"
    CALL_EXPRESSION = "call-expression"
    OTHER = "other"


# Kinds that open a new closure scope for nesting depth.
NESTING_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.FUNCTION_DECLARATION,
        NodeKind.FUNCTION_EXPRESSION,
        NodeKind.ARROW_FUNCTION,
    }
)

# Kinds collected as duplicate-detection candidates.
BLOCK_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.FUNCTION_DECLARATION,
        NodeKind.CLASS_METHOD,
        NodeKind.ARROW_FUNCTION,
    }
)


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    """A node of the tagged syntax tree.

    Children live in explicit slots: ``body`` is a single node or an ordered
    tuple, ``arguments`` is only populated for call expressions, and
    ``children`` holds every other child-bearing slot in source order.
    """

    kind: NodeKind
    type: str  # Grammar node type: "arrow_function", "statement_block", ...
    line: int | None  # 1-based; None when the node carries no location
    name: str | None = None
    text: str | None = None  # Regenerated source, function-like nodes only
    body: SyntaxNode | tuple[SyntaxNode, ...] | None = None
    arguments: tuple[SyntaxNode, ...] = ()
    children: tuple[SyntaxNode, ...] = ()

    def body_nodes(self) -> tuple[SyntaxNode, ...]:
        """Return ``body`` as a tuple regardless of its shape."""
        if self.body is None:
            return ()
        if isinstance(self.body, SyntaxNode):
            return (self.body,)
        return self.body

    def iter_children(self) -> Iterator[SyntaxNode]:
        """Yield every direct child in source order."""
        yield from self.children
        yield from self.arguments
        yield from self.body_nodes()


@dataclass(frozen=True, slots=True)
class SourceUnit:
    """A single analyzed file: text, line view and tree or parse failure."""

    path: str
    text: str
    language: str  # javascript | typescript | tsx
    tree: SyntaxNode | None
    parse_error: str | None = None
    lines: list[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", self.text.split("\n"))


@dataclass(frozen=True, slots=True)
class NestingViolation:
    """A point in the tree nested deeper than allowed."""

    line: int
    depth: int


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Source of one function-like construct, keyed by its start line."""

    line: int
    kind: NodeKind
    name: str  # "anonymous" when the construct has no name
    text: str


@dataclass(frozen=True, slots=True)
class LineCluster:
    """A run of >= 2 consecutive lines shared verbatim (after trimming)."""

    lines_a: tuple[int, ...]  # 1-based, relative to block A
    lines_b: tuple[int, ...]  # 1-based, relative to block B
    code: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SimilarityMatch:
    """An unordered pair of blocks scoring at or above the threshold."""

    block_a: CodeBlock
    block_b: CodeBlock
    similarity: float
    clusters: list[LineCluster] = field(default_factory=list)

    @property
    def line(self) -> int:
        return min(self.block_a.line, self.block_b.line)
