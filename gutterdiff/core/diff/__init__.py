"""
Line alignment engines.

Provides:
- Line splitting and normalization
- Bounded exact LCS alignment (edit scripts)
- Patience and windowed anchor finders
- The scalable current-to-baseline aligner
"""

from gutterdiff.core.diff.aligner import (
    ScalableAligner,
    apply_runs_to_mapping,
    build_line_mapping,
    build_line_mapping_from_text,
)
from gutterdiff.core.diff.anchors import (
    find_patience_anchors,
    find_window_anchors,
    longest_increasing_anchors,
)
from gutterdiff.core.diff.exact import lcs_diff_runs
from gutterdiff.core.diff.lines import normalize_diff_line, split_diff_lines

__all__ = [
    # Aligner
    'ScalableAligner',
    'apply_runs_to_mapping',
    'build_line_mapping',
    'build_line_mapping_from_text',
    # Anchors
    'find_patience_anchors',
    'find_window_anchors',
    'longest_increasing_anchors',
    # Exact
    'lcs_diff_runs',
    # Lines
    'normalize_diff_line',
    'split_diff_lines',
]
