"""
Marker derivation from alignments.

Provides:
- Per-line classification (from edit scripts or mappings)
- Trailing EOF row coalescing
- Gutter marker placement and de-duplication
- Overview segments and their pixel layout
- Blame / click targeting
"""

from gutterdiff.core.markers.blame import (
    ClickAction,
    GutterHit,
    HoverAction,
    click_action,
    hover_action,
    resolve_gutter_hit,
)
from gutterdiff.core.markers.classifier import (
    DiffAlgorithm,
    MarkerOptions,
    build_diff_line_flags,
    build_line_flags,
    line_flags_from_mapping,
    line_flags_from_runs,
)
from gutterdiff.core.markers.eof import coalesce_trailing_eof_flags
from gutterdiff.core.markers.gutter import GutterMarker, MarkerCache, build_gutter_markers
from gutterdiff.core.markers.segments import extract_segments, layout_overview_segments

__all__ = [
    # Blame
    'ClickAction',
    'GutterHit',
    'HoverAction',
    'click_action',
    'hover_action',
    'resolve_gutter_hit',
    # Classification
    'DiffAlgorithm',
    'MarkerOptions',
    'build_diff_line_flags',
    'build_line_flags',
    'line_flags_from_mapping',
    'line_flags_from_runs',
    # EOF
    'coalesce_trailing_eof_flags',
    # Gutter
    'GutterMarker',
    'MarkerCache',
    'build_gutter_markers',
    # Segments
    'extract_segments',
    'layout_overview_segments',
]
