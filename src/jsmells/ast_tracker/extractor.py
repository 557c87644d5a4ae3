"""BlockExtractor: collect function-like code blocks as duplicate candidates."""

from __future__ import annotations

import logging

from jsmells.ast_tracker.types import BLOCK_KINDS, CodeBlock, SyntaxNode

logger = logging.getLogger(__name__)

MIN_BLOCK_LENGTH = 5
ANONYMOUS = "anonymous"


class BlockExtractor:
    """Extract function declarations, class methods and arrow functions.

    Blocks are keyed by start line. When two blocks start on the same line
    (``a => b => ...``, or a callback inside a one-line method header) the
    first one seen in pre-order wins, which is always the outermost.

    Usage:
        blocks = BlockExtractor().extract(tree)
    """

    def __init__(self, min_length: int = MIN_BLOCK_LENGTH) -> None:
        self.min_length = min_length
        self.blocks: dict[int, CodeBlock] = {}

    def extract(self, root: SyntaxNode) -> dict[int, CodeBlock]:
        """Visit every node in pre-order and return the collected blocks."""
        self.blocks = {}
        self._visit(root)
        return self.blocks

    def _visit(self, node: SyntaxNode) -> None:
        if node.kind in BLOCK_KINDS:
            self._collect(node)
        for child in node.iter_children():
            self._visit(child)

    def _collect(self, node: SyntaxNode) -> None:
        if node.line is None or node.text is None:
            logger.debug("Skipping %s without location or text", node.type)
            return
        # Short fragments are not useful similarity candidates.
        if len(node.text) < self.min_length:
            return
        if node.line in self.blocks:
            logger.debug("Line %d already holds a block; keeping the outer one", node.line)
            return
        self.blocks[node.line] = CodeBlock(
            line=node.line,
            kind=node.kind,
            name=node.name or ANONYMOUS,
            text=node.text,
        )


def extract_blocks(root: SyntaxNode, min_length: int = MIN_BLOCK_LENGTH) -> dict[int, CodeBlock]:
    """Return code blocks keyed by start line. Wrapper around BlockExtractor."""
    return BlockExtractor(min_length).extract(root)
