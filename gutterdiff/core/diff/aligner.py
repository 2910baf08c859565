"""
Scalable current-to-baseline line aligner.

Maps every current line to a baseline line (or to nothing) on any input.
Works through an explicit stack of segments; each segment is trimmed of
its common prefix and suffix, then resolved by the first strategy that
applies:

1. Exact LCS alignment, when the interior fits the limits
2. Patience anchors (lines unique on both sides), gaps pushed back
3. Windowed anchors (nearest repeat near the interpolated position)
4. Positional pairing, leaving the excess unmapped

Every step either shrinks the segment or resolves it, so the stack
always empties.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from gutterdiff.core.diff.anchors import find_patience_anchors, find_window_anchors
from gutterdiff.core.diff.exact import lcs_diff_runs
from gutterdiff.core.diff.lines import split_diff_lines
from gutterdiff.core.models import (
    AlignmentLimits,
    AlignmentSegment,
    AnchorPair,
    DiffRun,
    LineMapping,
    RunType,
)


logger = logging.getLogger(__name__)


def _map_equal_run(mapping: LineMapping, base_start: int, current_start: int, count: int) -> None:
    """Map ``count`` lines 1:1 starting at the given 0-based indices."""
    for offset in range(count):
        mapping[current_start + 1 + offset] = base_start + 1 + offset


def apply_runs_to_mapping(
    mapping: LineMapping,
    runs: Sequence[DiffRun],
    base_start: int = 0,
    current_start: int = 0
) -> None:
    """
    Write an edit script into a line mapping.

    Equal lines map 1:1. An adjacent insert/delete pair maps its first
    ``min(inserted, deleted)`` current lines onto the deleted baseline
    lines (they are modifications); remaining inserted lines stay 0.
    """
    base_line_no = base_start + 1
    current_line_no = current_start + 1

    index = 0
    while index < len(runs):
        run = runs[index]
        next_run = runs[index + 1] if index + 1 < len(runs) else None

        if run.type is RunType.EQUAL:
            for offset in range(run.count):
                mapping[current_line_no + offset] = base_line_no + offset
            base_line_no += run.count
            current_line_no += run.count
        elif run.type is RunType.INSERT:
            if next_run is not None and next_run.type is RunType.DELETE:
                inserted, deleted = run.count, next_run.count
                index += 1
            else:
                inserted, deleted = run.count, 0
            for offset in range(min(inserted, deleted)):
                mapping[current_line_no + offset] = base_line_no + offset
            current_line_no += inserted
            base_line_no += deleted
        else:
            if next_run is not None and next_run.type is RunType.INSERT:
                deleted, inserted = run.count, next_run.count
                index += 1
            else:
                deleted, inserted = run.count, 0
            for offset in range(min(inserted, deleted)):
                mapping[current_line_no + offset] = base_line_no + offset
            current_line_no += inserted
            base_line_no += deleted

        index += 1


class ScalableAligner:
    """
    Divide-and-conquer aligner that never declines.

    Limits bound only the exact step of each segment, not the whole
    document, so large files still get exact answers around their edits.
    """

    def __init__(self, limits: Optional[AlignmentLimits] = None):
        self.limits = limits or AlignmentLimits()

    def align(
        self,
        base_lines: Sequence[str],
        current_lines: Sequence[str]
    ) -> LineMapping:
        """
        Build the current-to-baseline line mapping.

        Args:
            base_lines: Normalized baseline lines
            current_lines: Normalized current lines

        Returns:
            Mapping of length ``len(current_lines) + 1``; entry ``k`` is the
            1-based baseline line of current line ``k``, or 0 if inserted
        """
        mapping: LineMapping = [0] * (len(current_lines) + 1)
        stack = [AlignmentSegment(0, len(base_lines), 0, len(current_lines))]

        while stack:
            segment = self._trim(mapping, base_lines, current_lines, stack.pop())
            if segment.base_len <= 0 or segment.current_len <= 0:
                continue

            if self._try_exact(mapping, base_lines, current_lines, segment):
                continue

            anchors = find_patience_anchors(base_lines, current_lines, segment)
            if anchors:
                logger.debug("Segment %s resolved by %d patience anchors", segment, len(anchors))
                self._push_anchored_gaps(stack, mapping, segment, anchors)
                continue

            anchors = find_window_anchors(base_lines, current_lines, segment, self.limits)
            if anchors:
                logger.debug("Segment %s resolved by %d window anchors", segment, len(anchors))
                self._push_anchored_gaps(stack, mapping, segment, anchors)
                continue

            logger.debug("Segment %s paired by position", segment)
            pair_count = min(segment.base_len, segment.current_len)
            _map_equal_run(mapping, segment.base_start, segment.current_start, pair_count)

        return mapping

    @staticmethod
    def _trim(
        mapping: LineMapping,
        base_lines: Sequence[str],
        current_lines: Sequence[str],
        segment: AlignmentSegment
    ) -> AlignmentSegment:
        """Map the common prefix and suffix 1:1 and return the interior."""
        base_start, base_end, current_start, current_end = segment

        while (
            base_start < base_end
            and current_start < current_end
            and base_lines[base_start] == current_lines[current_start]
        ):
            mapping[current_start + 1] = base_start + 1
            base_start += 1
            current_start += 1

        while (
            base_start < base_end
            and current_start < current_end
            and base_lines[base_end - 1] == current_lines[current_end - 1]
        ):
            mapping[current_end] = base_end
            base_end -= 1
            current_end -= 1

        return AlignmentSegment(base_start, base_end, current_start, current_end)

    def _try_exact(
        self,
        mapping: LineMapping,
        base_lines: Sequence[str],
        current_lines: Sequence[str],
        segment: AlignmentSegment
    ) -> bool:
        """Resolve a segment with the exact diff if it fits the limits."""
        if not self.limits.allows_exact(segment.base_len, segment.current_len):
            return False

        runs = lcs_diff_runs(
            base_lines[segment.base_start:segment.base_end],
            current_lines[segment.current_start:segment.current_end],
            self.limits
        )
        if runs is None:
            return False

        apply_runs_to_mapping(mapping, runs, segment.base_start, segment.current_start)
        return True

    @staticmethod
    def _push_anchored_gaps(
        stack: list[AlignmentSegment],
        mapping: LineMapping,
        segment: AlignmentSegment,
        anchors: Sequence[AnchorPair]
    ) -> None:
        """Map contiguous anchor runs and push the gaps between them."""
        gaps = []
        base_cursor = segment.base_start
        current_cursor = segment.current_start
        index = 0

        while index < len(anchors):
            run_start = anchors[index]
            run_end = index
            while (
                run_end + 1 < len(anchors)
                and anchors[run_end + 1].base_index == anchors[run_end].base_index + 1
                and anchors[run_end + 1].current_index == anchors[run_end].current_index + 1
            ):
                run_end += 1

            run_count = run_end - index + 1
            gaps.append(AlignmentSegment(
                base_cursor, run_start.base_index,
                current_cursor, run_start.current_index
            ))
            _map_equal_run(mapping, run_start.base_index, run_start.current_index, run_count)

            base_cursor = run_start.base_index + run_count
            current_cursor = run_start.current_index + run_count
            index = run_end + 1

        gaps.append(AlignmentSegment(
            base_cursor, segment.base_end,
            current_cursor, segment.current_end
        ))

        # Reversed so the leftmost gap is popped first
        for gap in reversed(gaps):
            if not gap.is_empty:
                stack.append(gap)


def build_line_mapping(
    base_lines: Sequence[str],
    current_lines: Sequence[str],
    limits: Optional[AlignmentLimits] = None
) -> LineMapping:
    """Align two line sequences with a ``ScalableAligner``."""
    return ScalableAligner(limits).align(base_lines, current_lines)


def build_line_mapping_from_text(
    base_text: Optional[str],
    current_text: Optional[str],
    limits: Optional[AlignmentLimits] = None
) -> LineMapping:
    """Split both texts into normalized lines and align them."""
    return build_line_mapping(
        split_diff_lines(base_text),
        split_diff_lines(current_text),
        limits
    )
