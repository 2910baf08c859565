"""
Anchor finders for large or repetitive alignment segments.

Provides two strategies that pick lines believed to be the same on both
sides of a segment:
- Patience anchors: lines unique within both sides
- Windowed anchors: nearest occurrence within a proximity window of the
  interpolated position, for content with no unique lines

Both reduce their candidates to a longest strictly increasing chain so
the anchors never cross.
"""

from __future__ import annotations

from typing import Optional, Sequence

from gutterdiff.core.models import AlignmentLimits, AlignmentSegment, AnchorPair


def longest_increasing_anchors(pairs: Sequence[AnchorPair]) -> list[AnchorPair]:
    """
    Longest chain of pairs with strictly increasing current index.

    ``pairs`` must already be ordered by base index. Runs in O(k log k)
    using patience sorting over the current indices.
    """
    if len(pairs) <= 1:
        return list(pairs)

    # tails[k] = index of the pair ending the best chain of length k+1
    tails: list[int] = []
    parent = [-1] * len(pairs)

    for i, pair in enumerate(pairs):
        value = pair.current_index
        lo, hi = 0, len(tails)
        while lo < hi:
            mid = (lo + hi) // 2
            if pairs[tails[mid]].current_index < value:
                lo = mid + 1
            else:
                hi = mid

        if lo > 0:
            parent[i] = tails[lo - 1]
        if lo == len(tails):
            tails.append(i)
        else:
            tails[lo] = i

    result = []
    idx = tails[-1]
    while idx >= 0:
        result.append(pairs[idx])
        idx = parent[idx]

    return list(reversed(result))


def _unique_line_positions(lines: Sequence[str], start: int, end: int) -> dict[str, int]:
    """Map each line value occurring exactly once in ``lines[start:end]`` to its index."""
    positions: dict[str, Optional[int]] = {}
    for index in range(start, end):
        line = lines[index]
        if line in positions:
            positions[line] = None  # Mark as non-unique
        else:
            positions[line] = index
    return {line: index for line, index in positions.items() if index is not None}


def find_patience_anchors(
    base_lines: Sequence[str],
    current_lines: Sequence[str],
    segment: AlignmentSegment
) -> list[AnchorPair]:
    """Anchor on lines that occur exactly once in both sides of the segment."""
    unique_base = _unique_line_positions(base_lines, segment.base_start, segment.base_end)
    unique_current = _unique_line_positions(
        current_lines, segment.current_start, segment.current_end
    )
    if not unique_base or not unique_current:
        return []

    pairs = []
    for base_index in range(segment.base_start, segment.base_end):
        line = base_lines[base_index]
        if unique_base.get(line) != base_index:
            continue
        current_index = unique_current.get(line)
        if current_index is not None:
            pairs.append(AnchorPair(base_index, current_index))

    return longest_increasing_anchors(pairs)


def _sparse_line_index(
    lines: Sequence[str],
    start: int,
    end: int,
    max_candidates_per_line: int
) -> dict[str, list[int]]:
    """
    Index line positions by value.

    Values occurring more than ``max_candidates_per_line`` times are
    dropped; they carry too little positional information to anchor on.
    """
    index_by_line: dict[str, Optional[list[int]]] = {}
    for line_index in range(start, end):
        line = lines[line_index]
        entry = index_by_line.get(line, [])
        if entry is None:
            continue
        entry.append(line_index)
        index_by_line[line] = entry if len(entry) <= max_candidates_per_line else None
    return {line: entry for line, entry in index_by_line.items() if entry is not None}


def window_radius(segment: AlignmentSegment, limits: AlignmentLimits) -> int:
    """Proximity radius for windowed anchors, scaled by segment size."""
    scaled = max(segment.base_len, segment.current_len) // 8
    return max(limits.window_radius_min, min(limits.window_radius_max, scaled))


def find_window_anchors(
    base_lines: Sequence[str],
    current_lines: Sequence[str],
    segment: AlignmentSegment,
    limits: Optional[AlignmentLimits] = None
) -> list[AnchorPair]:
    """
    Anchor each current line on the nearest matching baseline line.

    The search is centred on the baseline position predicted by linear
    interpolation of the line's relative offset in the segment, and only
    considers baseline lines after the previously chosen anchor.
    """
    limits = limits or AlignmentLimits()
    base_len = segment.base_len
    current_len = segment.current_len
    if not base_len or not current_len:
        return []

    expected_scale = base_len / current_len
    radius = window_radius(segment, limits)
    base_index_by_line = _sparse_line_index(
        base_lines,
        segment.base_start,
        segment.base_end,
        limits.max_candidates_per_line
    )
    if not base_index_by_line:
        return []

    anchors = []
    last_base_index = segment.base_start - 1
    for current_index in range(segment.current_start, segment.current_end):
        positions = base_index_by_line.get(current_lines[current_index])
        if not positions:
            continue

        offset = (current_index - segment.current_start) * expected_scale
        expected_base_index = segment.base_start + int(offset + 0.5)
        chosen_base_index = -1
        best_distance = radius + 1
        for base_index in positions:
            if base_index <= last_base_index:
                continue
            distance = abs(base_index - expected_base_index)
            if distance < best_distance:
                best_distance = distance
                chosen_base_index = base_index

        if chosen_base_index < 0:
            continue

        anchors.append(AnchorPair(chosen_base_index, current_index))
        last_base_index = chosen_base_index

    return longest_increasing_anchors(anchors)
