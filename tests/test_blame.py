from __future__ import annotations

from gutterdiff.core.buffer import TextBuffer
from gutterdiff.core.markers.blame import (
    ClickAction,
    GutterHit,
    HoverAction,
    click_action,
    hover_action,
    resolve_gutter_hit,
)
from gutterdiff.core.markers.gutter import GutterMarker
from gutterdiff.core.models import ADDED_FLAGS, MODIFIED_FLAGS, ChangeKind, MarkerFlags


def test_eof_row_proxies_to_previous_line() -> None:
    buffer = TextBuffer("a\nb\n")
    markers = {3: GutterMarker(MarkerFlags(modified=True, eof_proxy=True))}

    hit = resolve_gutter_hit(buffer, 3, markers)

    assert hit == GutterHit(
        line_number=2,
        request_line_number=3,
        proxied_from_trailing_eof=True,
        change_kind=ChangeKind.MODIFIED,
    )
    assert hover_action(hit) is HoverAction.QUERY_BLAME
    assert click_action(hit) is ClickAction.OPEN_REVISION


def test_eof_row_falls_back_to_previous_marker() -> None:
    buffer = TextBuffer("a\nb\n")
    hit = resolve_gutter_hit(buffer, 3, {2: GutterMarker(ADDED_FLAGS)})
    assert hit.change_kind is ChangeKind.ADDED
    assert hover_action(hit) is HoverAction.QUERY_BLAME


def test_added_line_is_uncommitted() -> None:
    hit = resolve_gutter_hit(TextBuffer("a\nb"), 2, {2: GutterMarker(ADDED_FLAGS)})
    assert hit == GutterHit(2, 2, False, ChangeKind.ADDED)
    assert hover_action(hit) is HoverAction.SHOW_UNCOMMITTED
    assert click_action(hit) is ClickAction.NONE


def test_modified_line_opens_worktree_diff() -> None:
    hit = resolve_gutter_hit(TextBuffer("a\nb"), 1, {1: GutterMarker(MODIFIED_FLAGS)})
    assert hover_action(hit) is HoverAction.QUERY_BLAME
    assert click_action(hit) is ClickAction.OPEN_WORKTREE


def test_unchanged_line_opens_revision() -> None:
    hit = resolve_gutter_hit(TextBuffer("a\nb"), 1, {})
    assert hit.change_kind is None
    assert hover_action(hit) is HoverAction.QUERY_BLAME
    assert click_action(hit) is ClickAction.OPEN_REVISION
