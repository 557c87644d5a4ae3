"""NestingAnalyzer: report closures nested deeper than a threshold."""

from __future__ import annotations

import logging

from jsmells.ast_tracker.types import NESTING_KINDS, NestingViolation, NodeKind, SyntaxNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3


class NestingAnalyzer:
    """Count structural nesting of closures, not of blocks.

    Only function declarations, function expressions and arrow functions
    raise the depth, so deeply nested ``if``/``for`` statements without new
    functions never trigger. Depth is passed by value down the recursion:
    sibling branches each start from their parent's depth.

    Usage:
        violations = NestingAnalyzer(max_depth=3).analyze(tree)
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def analyze(self, root: SyntaxNode) -> list[NestingViolation]:
        """Walk the whole tree once. Each line is reported at most once."""
        violations: list[NestingViolation] = []
        self._visit(root, 0, set(), violations)
        return violations

    def _visit(
        self,
        node: SyntaxNode,
        depth: int,
        reported_lines: set[int],
        violations: list[NestingViolation],
    ) -> None:
        if node.kind in NESTING_KINDS:
            depth += 1

        if depth > self.max_depth:
            if node.line is None:
                logger.debug("Skipping %s without location at depth %d", node.type, depth)
            elif node.line not in reported_lines:
                reported_lines.add(node.line)
                violations.append(NestingViolation(line=node.line, depth=depth))

        # Callbacks passed as arguments nest inside the caller's closure.
        if node.kind is NodeKind.CALL_EXPRESSION:
            for arg in node.arguments:
                self._visit(arg, depth, reported_lines, violations)

        for child in node.body_nodes():
            self._visit(child, depth, reported_lines, violations)

        for child in node.children:
            self._visit(child, depth, reported_lines, violations)


def analyze_nesting(root: SyntaxNode, max_depth: int = DEFAULT_MAX_DEPTH) -> list[NestingViolation]:
    """Return nesting violations for *root*. Wrapper around NestingAnalyzer."""
    return NestingAnalyzer(max_depth).analyze(root)
