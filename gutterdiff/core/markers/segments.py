"""
Change segments for coarse renderers.

Merges consecutive identically-classified lines into segments and
projects them onto a fixed-height overview track.
"""

from __future__ import annotations

from typing import Optional, Sequence

from gutterdiff.core.models import DiffSegment, MarkerFlags, PixelSegment


MIN_MARKER_HEIGHT_PX = 2


def extract_segments(line_flags: Optional[Sequence[Optional[MarkerFlags]]]) -> list[DiffSegment]:
    """
    Group flagged lines into maximal segments.

    Trailing-newline-only lines count as modified. Unflagged lines end
    the current segment and are dropped.
    """
    if not line_flags:
        return []

    segments: list[DiffSegment] = []
    active: Optional[DiffSegment] = None

    for line_no, flags in enumerate(line_flags, start=1):
        added = bool(flags and flags.added)
        modified = bool(flags and (flags.modified or flags.trailing_eof_proxy_only))
        if not added and not modified:
            if active:
                segments.append(active)
                active = None
            continue

        if (
            active
            and active.to_line + 1 == line_no
            and active.added == added
            and active.modified == modified
        ):
            active = DiffSegment(active.from_line, line_no, added, modified)
            continue

        if active:
            segments.append(active)
        active = DiffSegment(line_no, line_no, added, modified)

    if active:
        segments.append(active)
    return segments


def layout_overview_segments(
    segments: Sequence[DiffSegment],
    total_lines: int,
    drawable_height: int,
    min_marker_height: int = MIN_MARKER_HEIGHT_PX
) -> list[PixelSegment]:
    """
    Project segments onto a track ``drawable_height`` pixels tall.

    Each band spans its lines proportionally, is at least
    ``min_marker_height`` tall, and is kept inside the track.
    """
    if drawable_height <= 0:
        return []

    total_lines = max(1, total_lines)
    result = []
    for segment in segments:
        top = (segment.from_line - 1) * drawable_height // total_lines
        bottom = -(-segment.to_line * drawable_height // total_lines)
        height = max(min_marker_height, bottom - top)

        top = min(max(top, 0), max(0, drawable_height - 1))
        if top + height > drawable_height:
            if height >= drawable_height:
                top = 0
                height = drawable_height
            else:
                top = max(0, drawable_height - height)

        bottom = min(top + height, drawable_height)
        if bottom <= top:
            continue

        result.append(PixelSegment(
            top=top,
            height=bottom - top,
            added=segment.added,
            modified=segment.modified
        ))

    return result
