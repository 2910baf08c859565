"""
Gutter marker placement.

Turns coalesced line flags into the markers a gutter renderer draws,
including the proxy marker on the synthetic trailing EOF row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gutterdiff.core.buffer import LineBuffer, is_trailing_eof_line
from gutterdiff.core.models import ChangeKind, LineFlags, MarkerFlags


@dataclass(frozen=True)
class GutterMarker:
    """
    A renderable gutter marker.

    Markers compare by their flags, so renderers can skip redrawing rows
    whose marker did not change.
    """
    flags: MarkerFlags

    @property
    def change_kind(self) -> Optional[ChangeKind]:
        return self.flags.change_kind

    @property
    def style_classes(self) -> tuple[str, ...]:
        """Style class names describing how the marker is drawn."""
        classes = []
        if self.flags.eof_proxy:
            classes.append('is-eof-proxy')
        if self.flags.added:
            classes.append('is-added')
        if self.flags.modified:
            classes.append('is-modified')
        if not self.flags.is_changed:
            classes.append('is-empty')
        return tuple(classes)


class MarkerCache:
    """
    De-duplicates ``GutterMarker`` objects by flag value.

    Owned by whoever renders markers and passed in explicitly. Clearing
    it at any time is safe: it only affects how many marker objects get
    allocated, never which markers are produced.
    """

    def __init__(self):
        self._markers: dict[MarkerFlags, GutterMarker] = {}

    def get(self, flags: MarkerFlags) -> GutterMarker:
        """Return the shared marker for ``flags``, creating it on first use."""
        marker = self._markers.get(flags)
        if marker is None:
            marker = GutterMarker(flags)
            self._markers[flags] = marker
        return marker

    def clear(self) -> None:
        self._markers.clear()

    def __len__(self) -> int:
        return len(self._markers)


def trailing_eof_proxy_flags(buffer: LineBuffer, line_flags: LineFlags) -> Optional[MarkerFlags]:
    """Flags for the marker drawn on the trailing EOF row, if any."""
    if not is_trailing_eof_line(buffer, buffer.line_count) or len(line_flags) < buffer.line_count:
        return None

    previous = line_flags[buffer.line_count - 2]
    if previous is None:
        return None
    if not previous.is_changed and not previous.trailing_eof_proxy_only:
        return None
    if not previous.trailing_eof_proxy_source and line_flags[buffer.line_count - 1] is not None:
        return None

    if previous.trailing_eof_proxy_only:
        return MarkerFlags(added=False, modified=True, eof_proxy=True)
    return MarkerFlags(added=previous.added, modified=previous.modified, eof_proxy=True)


def build_gutter_markers(
    buffer: LineBuffer,
    line_flags: Optional[LineFlags],
    cache: Optional[MarkerCache] = None
) -> dict[int, GutterMarker]:
    """
    Place markers for every flagged line.

    Args:
        buffer: Current document
        line_flags: Coalesced flags, one per line
        cache: Marker cache to share marker objects through

    Returns:
        Markers keyed by 1-based line number
    """
    cache = cache if cache is not None else MarkerCache()
    markers: dict[int, GutterMarker] = {}
    if not line_flags:
        return markers

    proxy_flags = trailing_eof_proxy_flags(buffer, line_flags)

    for line_no in range(1, min(buffer.line_count, len(line_flags)) + 1):
        if is_trailing_eof_line(buffer, line_no):
            if proxy_flags is not None:
                markers[line_no] = cache.get(proxy_flags)
            continue

        flags = line_flags[line_no - 1]
        if flags is None or flags.trailing_eof_proxy_only:
            continue
        markers[line_no] = cache.get(flags)

    return markers
