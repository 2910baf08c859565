"""
Per-document marker state.

Holds the baseline and the current buffer, and caches everything derived
from them: line flags, gutter markers and overview segments. Derived
state is recomputed once per document or baseline change and left
untouched by cursor and selection changes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from gutterdiff.core.baseline import BaselineSnapshot
from gutterdiff.core.buffer import LineBuffer, TextBuffer
from gutterdiff.core.markers.blame import GutterHit, resolve_gutter_hit
from gutterdiff.core.markers.classifier import MarkerOptions, build_line_flags
from gutterdiff.core.markers.gutter import GutterMarker, MarkerCache, build_gutter_markers
from gutterdiff.core.markers.segments import extract_segments
from gutterdiff.core.models import DiffSegment, LineFlags, MarkerFlags


logger = logging.getLogger(__name__)

BaselineInput = Union[BaselineSnapshot, Mapping[str, Any], None]


class DiffDocumentState:
    """
    Change-marker state for one open document.

    Example:
        state = DiffDocumentState()
        state.set_baseline(BaselineSnapshot.from_text("a\\nb\\n"))
        state.set_document(TextBuffer("a\\nX\\n"))
        state.segments  # [DiffSegment(2, 2, added=False, modified=True)]
    """

    def __init__(
        self,
        options: Optional[MarkerOptions] = None,
        cache: Optional[MarkerCache] = None,
        buffer: Optional[LineBuffer] = None,
        baseline: BaselineInput = None
    ):
        self.options = options or MarkerOptions()
        self.cache = cache if cache is not None else MarkerCache()
        self._buffer: LineBuffer = buffer if buffer is not None else TextBuffer()
        self._baseline = self._to_snapshot(baseline)
        self._cursor_line = 1
        self._line_flags: Optional[LineFlags] = None
        self._markers: dict[int, GutterMarker] = {}
        self._segments: list[DiffSegment] = []
        self.recompute_count = 0
        self._recompute()

    @staticmethod
    def _to_snapshot(baseline: BaselineInput) -> BaselineSnapshot:
        if isinstance(baseline, BaselineSnapshot):
            return baseline
        return BaselineSnapshot.from_payload(baseline)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def set_baseline(self, baseline: BaselineInput) -> None:
        """Replace the baseline (snapshot or raw payload) and recompute."""
        self._baseline = self._to_snapshot(baseline)
        self._recompute()

    def set_document(self, buffer: LineBuffer) -> None:
        """Replace the current document contents and recompute."""
        self._buffer = buffer
        self._recompute()

    def set_options(self, options: MarkerOptions) -> None:
        """Change the marker options and recompute."""
        self.options = options
        self._recompute()

    def move_cursor(self, line_no: int) -> None:
        """Record a cursor or selection move. Never recomputes."""
        self._cursor_line = line_no

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def baseline(self) -> BaselineSnapshot:
        return self._baseline

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def cursor_line(self) -> int:
        return self._cursor_line

    @property
    def line_flags(self) -> Optional[LineFlags]:
        return self._line_flags

    @property
    def markers(self) -> dict[int, GutterMarker]:
        return self._markers

    @property
    def segments(self) -> list[DiffSegment]:
        return self._segments

    def flags_for_line(self, line_no: int) -> Optional[MarkerFlags]:
        """Coalesced flags of a 1-based line, ``None`` if unflagged."""
        if not self._line_flags or not 1 <= line_no <= len(self._line_flags):
            return None
        return self._line_flags[line_no - 1]

    def marker_for_line(self, line_no: int) -> Optional[GutterMarker]:
        return self._markers.get(line_no)

    def gutter_hit(self, line_no: int) -> GutterHit:
        """Resolve a gutter interaction on ``line_no``."""
        return resolve_gutter_hit(self._buffer, line_no, self._markers)

    def _recompute(self) -> None:
        self.recompute_count += 1
        self._line_flags = build_line_flags(self._baseline, self._buffer, self.options)
        self._markers = build_gutter_markers(self._buffer, self._line_flags, self.cache)
        self._segments = extract_segments(self._line_flags)
        logger.debug(
            "Recomputed markers: %d lines, %d markers, %d segments",
            self._buffer.line_count, len(self._markers), len(self._segments)
        )
