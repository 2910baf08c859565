"""
Trailing EOF row coalescing.

A document ending in a line break has a synthetic empty last row. That
row only stands for the final newline, so its flag is folded into the
last real line instead of being reported as inserted content.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from gutterdiff.core.buffer import LineBuffer, is_trailing_eof_line
from gutterdiff.core.models import LineFlags, MarkerFlags


def coalesce_trailing_eof_flags(
    buffer: LineBuffer,
    line_flags: Optional[LineFlags]
) -> Optional[LineFlags]:
    """
    Fold the trailing EOF row's flag into the preceding line.

    If the preceding line was unchanged and the EOF row was purely added,
    the preceding line becomes trailing-newline-only; otherwise it becomes
    modified (an added preceding line stays added). The preceding line is
    tagged as the EOF proxy source and the EOF row's own flag is cleared.

    Returns:
        A new flag list, or ``line_flags`` itself when nothing applies
    """
    if line_flags is None or not is_trailing_eof_line(buffer, buffer.line_count):
        return line_flags
    if len(line_flags) != buffer.line_count:
        return line_flags

    trailing_index = buffer.line_count - 1
    previous_index = trailing_index - 1
    trailing = line_flags[trailing_index]
    if trailing is None:
        return line_flags

    previous = line_flags[previous_index] or MarkerFlags()
    modified = previous.modified or trailing.modified
    trailing_only = previous.trailing_eof_proxy_only
    if trailing.added and not previous.added:
        if not previous.is_changed and not trailing.modified:
            trailing_only = True
        else:
            modified = True

    result = list(line_flags)
    result[previous_index] = replace(
        previous,
        modified=modified,
        trailing_eof_proxy_only=trailing_only,
        trailing_eof_proxy_source=True,
    )
    result[trailing_index] = None
    return result
