"""
Per-line change classification.

Turns either an edit script or a line mapping into per-line added /
modified flags, and applies the baseline policy (missing baseline,
untracked files, oversize text) around the aligner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from gutterdiff.core.baseline import BaselineSnapshot
from gutterdiff.core.buffer import LineBuffer, buffer_lines
from gutterdiff.core.diff.aligner import build_line_mapping
from gutterdiff.core.diff.exact import lcs_diff_runs
from gutterdiff.core.markers.eof import coalesce_trailing_eof_flags
from gutterdiff.core.models import (
    ADDED_FLAGS,
    MODIFIED_FLAGS,
    AlignmentLimits,
    DiffRun,
    LineFlags,
    LineMapping,
    RunType,
)


logger = logging.getLogger(__name__)

MAX_DIFF_TEXT_CHARS = 1024 * 1024
MAX_DIFF_LINES = 1200
MAX_DIFF_CELLS = 1_500_000


class DiffAlgorithm(Enum):
    """Which aligner produces the line flags."""
    SCALABLE = "scalable"   # Total mapping, heuristics past the exact budget
    EXACT = "exact"         # Exact edit script only, no markers past the budget


@dataclass(frozen=True)
class MarkerOptions:
    """Options for computing gutter flags."""
    algorithm: DiffAlgorithm = DiffAlgorithm.SCALABLE
    limits: AlignmentLimits = field(default_factory=lambda: AlignmentLimits(
        max_lines=MAX_DIFF_LINES,
        max_cells=MAX_DIFF_CELLS
    ))
    max_text_chars: int = MAX_DIFF_TEXT_CHARS


def line_flags_from_runs(runs: Optional[Sequence[DiffRun]], current_line_count: int) -> LineFlags:
    """
    Classify current lines from an edit script.

    In an adjacent insert/delete pair the first ``min(inserted, deleted)``
    current lines are modified and the rest added. Unpaired deletions
    have no current line and produce no flag.
    """
    line_flags: LineFlags = [None] * current_line_count
    if not runs:
        return line_flags

    def mark(start_index: int, count: int, flags) -> None:
        for index in range(start_index, start_index + count):
            if 0 <= index < current_line_count:
                line_flags[index] = flags

    current_index = 0
    i = 0
    while i < len(runs):
        run = runs[i]
        next_run = runs[i + 1] if i + 1 < len(runs) else None

        if run.type is RunType.EQUAL:
            current_index += run.count
        elif run.type is RunType.INSERT:
            if next_run is not None and next_run.type is RunType.DELETE:
                paired = min(run.count, next_run.count)
                i += 1
            else:
                paired = 0
            mark(current_index, paired, MODIFIED_FLAGS)
            mark(current_index + paired, run.count - paired, ADDED_FLAGS)
            current_index += run.count
        elif next_run is not None and next_run.type is RunType.INSERT:
            paired = min(run.count, next_run.count)
            mark(current_index, paired, MODIFIED_FLAGS)
            mark(current_index + paired, next_run.count - paired, ADDED_FLAGS)
            current_index += next_run.count
            i += 1

        i += 1

    return line_flags


def line_flags_from_mapping(
    base_lines: Sequence[str],
    current_lines: Sequence[str],
    mapping: Optional[LineMapping]
) -> LineFlags:
    """
    Classify current lines from a line mapping.

    Unmapped lines are added; mapped lines whose text differs from their
    baseline line are modified.
    """
    line_flags: LineFlags = [None] * len(current_lines)
    if mapping is None:
        return line_flags

    for line_no in range(1, len(current_lines) + 1):
        base_line_no = mapping[line_no] if line_no < len(mapping) else 0
        if base_line_no <= 0:
            line_flags[line_no - 1] = ADDED_FLAGS
        elif base_lines[base_line_no - 1] != current_lines[line_no - 1]:
            line_flags[line_no - 1] = MODIFIED_FLAGS

    return line_flags


def _flags_without_baseline_text(snapshot: BaselineSnapshot, buffer: LineBuffer) -> Optional[LineFlags]:
    """Flags for an available baseline that carries no text."""
    if snapshot.tracked and snapshot.head_oid is not None:
        return None

    # Untracked file, or no commits yet: everything is new content
    if buffer.length == 0 and buffer.line_count == 1:
        return [None]
    return [ADDED_FLAGS] * buffer.line_count


def build_diff_line_flags(
    snapshot: Optional[BaselineSnapshot],
    buffer: LineBuffer,
    options: Optional[MarkerOptions] = None
) -> Optional[LineFlags]:
    """
    Compute raw per-line flags for ``buffer`` against ``snapshot``.

    Returns:
        One entry per line, or ``None`` when no markers should be shown
    """
    options = options or MarkerOptions()
    if snapshot is None or not snapshot.available:
        return None

    if snapshot.base_text is None:
        return _flags_without_baseline_text(snapshot, buffer)

    if buffer.length > options.max_text_chars or len(snapshot.base_text) > options.max_text_chars:
        logger.debug(
            "Skipping markers: text exceeds %d characters", options.max_text_chars
        )
        return None

    base_lines = snapshot.lines
    current_lines = buffer_lines(buffer)

    if options.algorithm is DiffAlgorithm.EXACT:
        runs = lcs_diff_runs(base_lines, current_lines, options.limits)
        if runs is None:
            return None
        return line_flags_from_runs(runs, len(current_lines))

    mapping = build_line_mapping(base_lines, current_lines, options.limits)
    return line_flags_from_mapping(base_lines, current_lines, mapping)


def build_line_flags(
    snapshot: Optional[BaselineSnapshot],
    buffer: LineBuffer,
    options: Optional[MarkerOptions] = None
) -> Optional[LineFlags]:
    """Compute per-line flags with the trailing EOF row folded in."""
    return coalesce_trailing_eof_flags(buffer, build_diff_line_flags(snapshot, buffer, options))
