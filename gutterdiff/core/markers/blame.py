"""
Blame and click targeting for gutter rows.

Resolves which line a gutter interaction refers to and what the blame
controller should do with it. The synthetic trailing EOF row is a proxy:
it resolves to the previous real line, but requests are still issued for
the row itself so history lookups see the final newline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Mapping, Optional

from gutterdiff.core.buffer import LineBuffer, is_trailing_eof_line
from gutterdiff.core.markers.gutter import GutterMarker
from gutterdiff.core.models import ChangeKind


class HoverAction(Enum):
    """What hovering a gutter row shows."""
    SHOW_UNCOMMITTED = auto()   # Inserted line, no history to look up
    QUERY_BLAME = auto()        # Ask version control for the line's history


class ClickAction(Enum):
    """What clicking a gutter row opens."""
    NONE = auto()
    OPEN_WORKTREE = auto()      # Working-tree diff of a modified line
    OPEN_REVISION = auto()      # Committed revision of the line


@dataclass(frozen=True)
class GutterHit:
    """A resolved gutter interaction."""
    line_number: int
    request_line_number: int
    proxied_from_trailing_eof: bool
    change_kind: Optional[ChangeKind]


def _marker_kind(marker: Optional[GutterMarker]) -> Optional[ChangeKind]:
    return marker.change_kind if marker is not None else None


def resolve_gutter_hit(
    buffer: LineBuffer,
    line_no: int,
    markers: Mapping[int, GutterMarker]
) -> GutterHit:
    """
    Resolve an interaction on gutter row ``line_no``.

    Ordinary rows resolve to themselves. The EOF row resolves to the line
    above it and takes its change kind from its own marker or, failing
    that, from the marker of the line above.
    """
    if not is_trailing_eof_line(buffer, line_no):
        return GutterHit(
            line_number=line_no,
            request_line_number=line_no,
            proxied_from_trailing_eof=False,
            change_kind=_marker_kind(markers.get(line_no)),
        )

    change_kind = _marker_kind(markers.get(line_no)) or _marker_kind(markers.get(line_no - 1))
    return GutterHit(
        line_number=max(1, line_no - 1),
        request_line_number=line_no,
        proxied_from_trailing_eof=True,
        change_kind=change_kind,
    )


def hover_action(hit: GutterHit) -> HoverAction:
    """Inserted lines are always uncommitted; everything else asks blame."""
    if not hit.proxied_from_trailing_eof and hit.change_kind is ChangeKind.ADDED:
        return HoverAction.SHOW_UNCOMMITTED
    return HoverAction.QUERY_BLAME


def click_action(hit: GutterHit) -> ClickAction:
    """Map a resolved hit to the view a click should open."""
    # The EOF row stands in for the line above, so it opens history
    if hit.proxied_from_trailing_eof:
        return ClickAction.OPEN_REVISION
    if hit.change_kind is ChangeKind.ADDED:
        return ClickAction.NONE
    if hit.change_kind is ChangeKind.MODIFIED:
        return ClickAction.OPEN_WORKTREE
    return ClickAction.OPEN_REVISION
