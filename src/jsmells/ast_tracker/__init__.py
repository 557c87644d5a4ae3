"""AST Tracker: syntax trees, closure nesting and near-duplicate blocks for JS/TS.

Public API:
    load_unit(file_path, source=None) -> SourceUnit
    analyze_nesting(root, max_depth=3) -> list[NestingViolation]
    extract_blocks(root, min_length=5) -> dict[int, CodeBlock]
    compare_blocks(blocks, min_length=5, threshold=0.8) -> list[SimilarityMatch]
"""

from __future__ import annotations

import logging
from pathlib import Path

from jsmells.ast_tracker.exceptions import ParseFailure, UnsupportedLanguageError
from jsmells.ast_tracker.extractor import extract_blocks
from jsmells.ast_tracker.nesting import analyze_nesting
from jsmells.ast_tracker.provider import get_provider, language_for_path
from jsmells.ast_tracker.similarity import compare_blocks, edit_distance, similarity
from jsmells.ast_tracker.types import (
    CodeBlock,
    LineCluster,
    NestingViolation,
    NodeKind,
    SimilarityMatch,
    SourceUnit,
    SyntaxNode,
)

logger = logging.getLogger(__name__)


def load_unit(file_path: str, source: str | None = None, *, parse: bool = True) -> SourceUnit:
    """Build the SourceUnit for one file. Reads from disk if source not provided.

    A parse failure does not raise; it is recorded on ``parse_error`` so the
    caller can still run checks that only need the text. With
    ``parse=False`` no tree is built at all.

    Raises:
        UnsupportedLanguageError: The file extension has no grammar.
        OSError: The file could not be read.
    """
    language = language_for_path(file_path)
    if source is None:
        with Path(file_path).open(encoding="utf-8", errors="replace") as f:
            source = f.read()
    source = source.replace("\r\n", "\n")

    if not parse:
        return SourceUnit(path=file_path, text=source, language=language, tree=None)

    try:
        tree = get_provider().build_tree(source, language)
    except ParseFailure as exc:
        logger.debug("Could not parse %s: %s", file_path, exc)
        return SourceUnit(
            path=file_path,
            text=source,
            language=language,
            tree=None,
            parse_error=str(exc),
        )

    return SourceUnit(path=file_path, text=source, language=language, tree=tree)


__all__ = [
    "CodeBlock",
    "LineCluster",
    "NestingViolation",
    "NodeKind",
    "ParseFailure",
    "SimilarityMatch",
    "SourceUnit",
    "SyntaxNode",
    "UnsupportedLanguageError",
    "analyze_nesting",
    "compare_blocks",
    "edit_distance",
    "extract_blocks",
    "load_unit",
    "similarity",
]
