"""Smells computed from the syntax tree: nested callbacks, duplicate code, long functions."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from jsmells.analysis.models import BlockRef, DuplicateDetail, LineMapping
from jsmells.ast_tracker import analyze_nesting, compare_blocks, extract_blocks
from jsmells.ast_tracker.types import NESTING_KINDS, NodeKind
from jsmells.smells.base import Occurrence, Smell

if TYPE_CHECKING:
    from collections.abc import Iterator

    from jsmells.ast_tracker.types import CodeBlock, SimilarityMatch, SourceUnit, SyntaxNode
    from jsmells.config import Config


def check_nested_callbacks(unit: SourceUnit, config: Config) -> list[Occurrence]:
    max_depth = config.max_nesting_depth
    return [
        Occurrence(
            line=v.line,
            description=(
                f"Function nesting exceeds the maximum allowed depth of {max_depth}. "
                f"Current depth: {v.depth}."
            ),
        )
        for v in analyze_nesting(unit.tree, max_depth)
    ]


def _block_ref(block: CodeBlock) -> BlockRef:
    return BlockRef(start_line=block.line, type=block.kind.value, name=block.name)


def duplicate_detail(match: SimilarityMatch) -> DuplicateDetail:
    """Build the structured, human-readable evidence for one match."""
    mappings = [
        LineMapping(
            block1_lines=list(c.lines_a),
            block2_lines=list(c.lines_b),
            code=list(c.code),
        )
        for c in match.clusters
    ]
    segments = [
        f"- Lines {','.join(map(str, m.block1_lines))} match lines "
        f"{','.join(map(str, m.block2_lines))}:\n  " + "\n  ".join(m.code)
        for m in mappings
    ]
    message = f"Found {len(mappings)} similar code segments:"
    if segments:
        message += "\n" + "\n".join(segments)

    return DuplicateDetail(
        block1=_block_ref(match.block_a),
        block2=_block_ref(match.block_b),
        similarity=match.similarity,
        similar_lines=mappings,
        message=message,
    )


def check_duplicate_code(unit: SourceUnit, config: Config) -> list[Occurrence]:
    min_length = config.min_duplicate_length
    blocks = extract_blocks(unit.tree, min_length)
    matches = compare_blocks(blocks, min_length, config.similarity_threshold)
    return [
        Occurrence(
            line=m.line,
            description=(
                f"Duplicate code detected with {math.floor(m.similarity * 100 + 0.5)}% similarity."
            ),
            details=duplicate_detail(m),
        )
        for m in matches
    ]


_FUNCTION_KINDS = NESTING_KINDS | {NodeKind.CLASS_METHOD}


def _function_nodes(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield function-like nodes in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.kind in _FUNCTION_KINDS:
            yield node
        stack.extend(reversed(list(node.iter_children())))


def check_long_function(unit: SourceUnit, config: Config) -> list[Occurrence]:
    """Flag functions whose body spans more than ``max_function_lines`` lines.

    Body lines are the lines between the header line and the closing line.
    """
    limit = config.max_function_lines
    issues: list[Occurrence] = []
    for node in _function_nodes(unit.tree):
        if node.line is None or node.text is None:
            continue
        body_lines = node.text.count("\n") - 1
        if body_lines > limit:
            name = node.name or "Anonymous Function"
            issues.append(
                Occurrence(
                    line=node.line,
                    description=(
                        f"Function '{name}' exceeds {limit} lines. "
                        "Consider refactoring it into smaller functions."
                    ),
                )
            )
    return issues


NESTED_CALLBACKS = Smell(
    name="Nested Callbacks (Callback Hell)",
    description="Functions and callbacks nested deeper than the allowed depth.",
    fix=(
        "Refactor the code to reduce the nesting depth of functions. Consider breaking "
        "down the logic into separate functions or using alternatives like Promises or "
        "async/await."
    ),
    check=check_nested_callbacks,
    uses_tree=True,
)

DUPLICATE_CODE = Smell(
    name="Duplicate Code",
    description="Functions, methods or arrow functions that are near-copies of each other.",
    fix=(
        "Consider extracting the duplicated code into a reusable function or component. "
        "If the duplicated code has slight variations, parameterize the differences. For "
        "class-based duplications, consider using inheritance or composition patterns."
    ),
    check=check_duplicate_code,
    uses_tree=True,
)

LONG_FUNCTION = Smell(
    name="Long Method/Function",
    description="Functions, methods and arrow functions with too many body lines.",
    fix=(
        "Refactor large functions by splitting them into smaller, more manageable "
        "functions. This improves readability, maintainability, and helps reduce "
        "security vulnerabilities."
    ),
    check=check_long_function,
    uses_tree=True,
)
