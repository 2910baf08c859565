"""
Exact line alignment.

Bounded longest-common-subsequence diff producing a run-length edit
script. The O(n*m) table is only built when the input fits the
configured limits; otherwise the caller gets ``None`` and falls back
to the scalable aligner's heuristics.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from gutterdiff.core.models import AlignmentLimits, DiffRun, RunType


logger = logging.getLogger(__name__)


def _has_later_occurrence(
    lines: Sequence[str],
    start_index: int,
    line_text: str,
    max_lookahead: int
) -> bool:
    """Check whether ``line_text`` recurs shortly after ``start_index``."""
    limit = min(len(lines), start_index + 1 + max_lookahead)
    for index in range(start_index + 1, limit):
        if lines[index] == line_text:
            return True
    return False


def _build_lcs_table(a: Sequence[str], b: Sequence[str]) -> list[list[int]]:
    """
    Build the suffix LCS table.

    ``table[i][j]`` is the LCS length of ``a[i:]`` and ``b[j:]``.
    """
    n = len(a)
    m = len(b)
    table = [[0] * (m + 1) for _ in range(n + 1)]

    for i in range(n - 1, -1, -1):
        row = table[i]
        below = table[i + 1]
        line = a[i]
        for j in range(m - 1, -1, -1):
            if line == b[j]:
                row[j] = below[j + 1] + 1
            else:
                down = below[j]
                right = row[j + 1]
                row[j] = down if down >= right else right

    return table


class _RunBuilder:
    """Accumulates runs, merging adjacent runs of the same type."""

    def __init__(self):
        self.runs: list[DiffRun] = []

    def push(self, run_type: RunType, count: int = 1) -> None:
        if count <= 0:
            return
        if self.runs and self.runs[-1].type is run_type:
            self.runs[-1] = DiffRun(run_type, self.runs[-1].count + count)
            return
        self.runs.append(DiffRun(run_type, count))


def lcs_diff_runs(
    base_lines: Sequence[str],
    current_lines: Sequence[str],
    limits: Optional[AlignmentLimits] = None
) -> Optional[list[DiffRun]]:
    """
    Compute a compact edit script turning ``base_lines`` into ``current_lines``.

    Args:
        base_lines: Baseline lines
        current_lines: Current document lines
        limits: Capacity policy (defaults to ``AlignmentLimits()``)

    Returns:
        Ordered runs, or ``None`` when the input exceeds the limits
    """
    limits = limits or AlignmentLimits()
    n = len(base_lines)
    m = len(current_lines)
    if not n and not m:
        return []

    if limits.max_lines is not None and (n > limits.max_lines or m > limits.max_lines):
        logger.debug("Exact diff declined: %d x %d lines exceeds %d", n, m, limits.max_lines)
        return None
    if limits.max_cells is not None and n * m > limits.max_cells:
        logger.debug("Exact diff declined: %d cells exceeds %d", n * m, limits.max_cells)
        return None

    table = _build_lcs_table(base_lines, current_lines)
    lookahead = limits.ambiguity_lookahead
    builder = _RunBuilder()

    i = 0
    j = 0
    while i < n and j < m:
        delete_score = table[i + 1][j]
        insert_score = table[i][j + 1]

        if base_lines[i] == current_lines[j]:
            equal_score = table[i + 1][j + 1] + 1
            optional_equal = max(delete_score, insert_score) == equal_score
            # A repeated line (blank, brace, boilerplate) that could equally
            # match a later occurrence is not pinned here.
            ambiguous = optional_equal and (
                _has_later_occurrence(base_lines, i, base_lines[i], lookahead)
                or _has_later_occurrence(current_lines, j, current_lines[j], lookahead)
            )
            if not ambiguous:
                builder.push(RunType.EQUAL)
                i += 1
                j += 1
                continue

        if delete_score > insert_score:
            builder.push(RunType.DELETE)
            i += 1
            continue

        if insert_score > delete_score:
            builder.push(RunType.INSERT)
            j += 1
            continue

        # Tie: delete first only when the next baseline line lines up with
        # the current one, so single-line edits stay single-line.
        if i + 1 < n and base_lines[i + 1] == current_lines[j]:
            builder.push(RunType.DELETE)
            i += 1
        else:
            builder.push(RunType.INSERT)
            j += 1

    builder.push(RunType.DELETE, n - i)
    builder.push(RunType.INSERT, m - j)

    return builder.runs
