from __future__ import annotations

from gutterdiff.core.baseline import BaselineSnapshot
from gutterdiff.core.buffer import TextBuffer
from gutterdiff.core.document import DiffDocumentState
from gutterdiff.core.markers.blame import ClickAction, click_action
from gutterdiff.core.markers.classifier import DiffAlgorithm, MarkerOptions
from gutterdiff.core.models import ADDED_FLAGS, AlignmentLimits, ChangeKind, DiffSegment


def test_initial_state_has_no_markers() -> None:
    state = DiffDocumentState()
    assert state.recompute_count == 1
    assert state.line_flags is None
    assert state.markers == {}
    assert state.segments == []


def test_each_event_recomputes_once() -> None:
    state = DiffDocumentState()
    state.set_baseline(BaselineSnapshot.from_text("a\nb\n"))
    assert state.recompute_count == 2

    state.set_document(TextBuffer("a\nX\n"))
    assert state.recompute_count == 3
    assert state.segments == [DiffSegment(2, 2, added=False, modified=True)]
    assert state.marker_for_line(2).change_kind is ChangeKind.MODIFIED


def test_cursor_moves_do_not_recompute() -> None:
    state = DiffDocumentState(
        baseline=BaselineSnapshot.from_text("a"),
        buffer=TextBuffer("a\nb"),
    )
    flags = state.line_flags
    count = state.recompute_count

    state.move_cursor(2)
    state.move_cursor(1)

    assert state.cursor_line == 1
    assert state.recompute_count == count
    assert state.line_flags is flags


def test_baseline_payload_is_accepted() -> None:
    state = DiffDocumentState(buffer=TextBuffer("x\ny"))
    state.set_baseline({"available": True, "tracked": False})
    assert state.line_flags == [ADDED_FLAGS, ADDED_FLAGS]
    assert state.flags_for_line(1) == ADDED_FLAGS
    assert state.flags_for_line(0) is None
    assert state.flags_for_line(3) is None


def test_same_inputs_give_same_output() -> None:
    baseline = BaselineSnapshot.from_text("one\ntwo\nthree\n")
    first = DiffDocumentState(baseline=baseline, buffer=TextBuffer("one\n2\nthree\nfour\n"))
    second = DiffDocumentState(baseline=baseline, buffer=TextBuffer("one\n2\nthree\nfour\n"))
    assert first.line_flags == second.line_flags
    assert first.segments == second.segments


def test_options_change_recomputes() -> None:
    state = DiffDocumentState(
        baseline=BaselineSnapshot.from_text("a\nb\n"),
        buffer=TextBuffer("a\nX\n"),
    )
    state.set_options(MarkerOptions(
        algorithm=DiffAlgorithm.EXACT,
        limits=AlignmentLimits(max_lines=1),
    ))
    assert state.line_flags is None
    assert state.markers == {}


def test_gutter_hit_uses_current_markers() -> None:
    state = DiffDocumentState(
        baseline=BaselineSnapshot.from_text("a"),
        buffer=TextBuffer("a\nb"),
    )
    assert click_action(state.gutter_hit(2)) is ClickAction.NONE
    assert click_action(state.gutter_hit(1)) is ClickAction.OPEN_REVISION
