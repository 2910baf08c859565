"""
Core data models for the change-marker engine.

This module defines the value types shared by the aligner, the line
classifier and the renderers:
- Edit script runs
- Alignment limits
- Per-line marker flags
- Change segments and their pixel layout

All models are:
- UI-agnostic (can be used with any frontend)
- Immutable (frozen dataclasses, safe to share and to use as dict keys)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional


# =============================================================================
# Enumerations
# =============================================================================

class RunType(Enum):
    """Operation type of an edit script run."""
    EQUAL = "equal"     # Line present on both sides
    INSERT = "insert"   # Line present only in the current document
    DELETE = "delete"   # Line present only in the baseline


class ChangeKind(Enum):
    """Change classification shown for a gutter row."""
    ADDED = "added"
    MODIFIED = "modified"


# =============================================================================
# Alignment Models
# =============================================================================

DEFAULT_EXACT_DIFF_MAX_LINES = 1024
DEFAULT_EXACT_DIFF_MAX_CELLS = 1_000_000
DEFAULT_AMBIGUITY_LOOKAHEAD = 64
WINDOW_ANCHOR_RADIUS_MIN = 64
WINDOW_ANCHOR_RADIUS_MAX = 512
WINDOW_ANCHOR_MAX_CANDIDATES_PER_LINE = 8


@dataclass(frozen=True)
class DiffRun:
    """
    One run of an edit script.

    Runs are order-preserving; adjacent runs never share a type.
    """
    type: RunType
    count: int


@dataclass(frozen=True)
class AlignmentLimits:
    """
    Capacity policy for the aligner.

    ``max_lines`` and ``max_cells`` bound the exact O(n*m) table; ``None``
    disables the corresponding guard. The remaining fields tune the
    anchor heuristics used when the exact table is out of budget.
    """
    max_lines: Optional[int] = DEFAULT_EXACT_DIFF_MAX_LINES
    max_cells: Optional[int] = DEFAULT_EXACT_DIFF_MAX_CELLS
    ambiguity_lookahead: int = DEFAULT_AMBIGUITY_LOOKAHEAD
    window_radius_min: int = WINDOW_ANCHOR_RADIUS_MIN
    window_radius_max: int = WINDOW_ANCHOR_RADIUS_MAX
    max_candidates_per_line: int = WINDOW_ANCHOR_MAX_CANDIDATES_PER_LINE

    @classmethod
    def unbounded(cls) -> AlignmentLimits:
        """Limits that never make the exact algorithm decline."""
        return cls(max_lines=None, max_cells=None)

    def allows_exact(self, base_len: int, current_len: int) -> bool:
        """Whether an exact table of ``base_len`` x ``current_len`` fits."""
        if self.max_lines is not None:
            if base_len > self.max_lines or current_len > self.max_lines:
                return False
        if not base_len or not current_len:
            return True
        if self.max_cells is not None:
            return current_len <= self.max_cells // base_len
        return True


class AnchorPair(NamedTuple):
    """0-based indices of a line believed to be the same on both sides."""
    base_index: int
    current_index: int


class AlignmentSegment(NamedTuple):
    """Half-open index ranges of a pending alignment subproblem."""
    base_start: int
    base_end: int
    current_start: int
    current_end: int

    @property
    def base_len(self) -> int:
        return self.base_end - self.base_start

    @property
    def current_len(self) -> int:
        return self.current_end - self.current_start

    @property
    def is_empty(self) -> bool:
        return self.base_len == 0 and self.current_len == 0


# Indexed by 1-based current line number, entry 0 unused. Each entry is the
# 1-based baseline line number, or 0 for a pure insertion.
LineMapping = list[int]


# =============================================================================
# Marker Models
# =============================================================================

@dataclass(frozen=True)
class MarkerFlags:
    """
    Change flags for one current line.

    ``trailing_eof_proxy_only`` marks a line whose only change is the
    trailing newline after it; it is interactive but not inserted content.
    ``trailing_eof_proxy_source`` marks the line the synthetic EOF row was
    folded into. ``eof_proxy`` is set only on the marker drawn on the EOF row.
    """
    added: bool = False
    modified: bool = False
    eof_proxy: bool = False
    trailing_eof_proxy_only: bool = False
    trailing_eof_proxy_source: bool = False

    @property
    def is_changed(self) -> bool:
        return self.added or self.modified

    @property
    def change_kind(self) -> Optional[ChangeKind]:
        if self.added:
            return ChangeKind.ADDED
        if self.modified:
            return ChangeKind.MODIFIED
        return None


ADDED_FLAGS = MarkerFlags(added=True)
MODIFIED_FLAGS = MarkerFlags(modified=True)

# One entry per current line (index 0 is line 1); ``None`` means unflagged.
LineFlags = list[Optional[MarkerFlags]]


@dataclass(frozen=True)
class DiffSegment:
    """A maximal run of consecutive lines with identical classification."""
    from_line: int
    to_line: int
    added: bool
    modified: bool

    @property
    def line_count(self) -> int:
        return self.to_line - self.from_line + 1


@dataclass(frozen=True)
class PixelSegment:
    """A change segment projected onto an overview track."""
    top: int
    height: int
    added: bool
    modified: bool
