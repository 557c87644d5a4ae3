"""SimilarityEngine: pairwise near-duplicate detection over extracted blocks.

The scalar score is normalized Levenshtein similarity over the full block
texts; line clusters are the human-readable evidence of what is duplicated.
Comparing every pair is quadratic in the number of blocks and each distance
is O(L*M) in block lengths. That is fine for a file at a time.
"""

from __future__ import annotations

import itertools
import logging

from jsmells.ast_tracker.types import CodeBlock, LineCluster, SimilarityMatch

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.8
MIN_DUPLICATE_LENGTH = 5
MIN_CLUSTER_LINES = 2


def edit_distance(a: str, b: str) -> int:
    """Unit-cost Levenshtein distance between two block texts.

    Only one row of the DP table is kept, sized by the shorter text, so
    memory stays linear in the smaller block while time is O(len(a) * len(b)).
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        diagonal, row[0] = row[0], i
        for j, char_b in enumerate(b, start=1):
            above = row[j]
            row[j] = min(
                above + 1,  # deletion
                row[j - 1] + 1,  # insertion
                diagonal + (char_a != char_b),  # substitution
            )
            diagonal = above
    return row[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]: ``(max_len - distance) / max_len``."""
    if a == b:
        return 1.0
    longer = max(len(a), len(b))
    return (longer - edit_distance(a, b)) / longer


def line_clusters(a: str, b: str) -> list[LineCluster]:
    """Find runs of consecutive lines shared by *a* and *b* after trimming.

    Every maximal diagonal run (i, j), (i+1, j+1), ... of identical trimmed
    lines that is at least two lines long becomes one cluster. Clusters are
    ordered by their first line in *a*, then in *b*.

    Identical texts yield exactly one cluster spanning every line; repeated
    sequences inside the text are not matched against each other.
    """
    lines_a = [line.strip() for line in a.split("\n")]
    if a == b:
        every = tuple(range(1, len(lines_a) + 1))
        return [LineCluster(lines_a=every, lines_b=every, code=tuple(lines_a))]
    lines_b = [line.strip() for line in b.split("\n")]

    clusters: list[LineCluster] = []
    for i, line_a in enumerate(lines_a):
        for j, line_b in enumerate(lines_b):
            if line_a != line_b:
                continue
            # Only start at the head of a run; its tail is covered below.
            if i > 0 and j > 0 and lines_a[i - 1] == lines_b[j - 1]:
                continue
            length = 0
            while (
                i + length < len(lines_a)
                and j + length < len(lines_b)
                and lines_a[i + length] == lines_b[j + length]
            ):
                length += 1
            if length >= MIN_CLUSTER_LINES:
                clusters.append(
                    LineCluster(
                        lines_a=tuple(range(i + 1, i + length + 1)),
                        lines_b=tuple(range(j + 1, j + length + 1)),
                        code=tuple(lines_a[i : i + length]),
                    )
                )
    return clusters


class SimilarityEngine:
    """Compare every unordered pair of blocks and keep the near-duplicates.

    Usage:
        matches = SimilarityEngine(threshold=0.8).compare(blocks)
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        min_length: int = MIN_DUPLICATE_LENGTH,
    ) -> None:
        self.threshold = threshold
        self.min_length = min_length

    def compare(self, blocks: dict[int, CodeBlock]) -> list[SimilarityMatch]:
        """Return matches at or above the threshold, ordered by line pair."""
        matches: list[SimilarityMatch] = []
        ordered = [blocks[line] for line in sorted(blocks)]

        for block_a, block_b in itertools.combinations(ordered, 2):
            match = self.compare_pair(block_a, block_b)
            if match is not None:
                matches.append(match)

        logger.debug(
            "Compared %d blocks, %d matches at threshold %.2f",
            len(ordered),
            len(matches),
            self.threshold,
        )
        return matches

    def compare_pair(self, block_a: CodeBlock, block_b: CodeBlock) -> SimilarityMatch | None:
        """Score a single pair; None when it falls below the threshold."""
        len_a, len_b = len(block_a.text), len(block_b.text)
        if len_a < self.min_length or len_b < self.min_length:
            return None

        # Distance is at least the length difference, so the shorter/longer
        # ratio bounds the score from above.
        longer = max(len_a, len_b)
        if longer and min(len_a, len_b) / longer < self.threshold:
            return None

        score = similarity(block_a.text, block_b.text)
        if score < self.threshold:
            return None

        return SimilarityMatch(
            block_a=block_a,
            block_b=block_b,
            similarity=score,
            clusters=line_clusters(block_a.text, block_b.text),
        )


def compare_blocks(
    blocks: dict[int, CodeBlock],
    min_length: int = MIN_DUPLICATE_LENGTH,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[SimilarityMatch]:
    """Pairwise near-duplicate matches. Wrapper around SimilarityEngine."""
    return SimilarityEngine(threshold=threshold, min_length=min_length).compare(blocks)
