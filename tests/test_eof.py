from __future__ import annotations

from gutterdiff.core.baseline import BaselineSnapshot
from gutterdiff.core.buffer import TextBuffer
from gutterdiff.core.markers.classifier import build_line_flags
from gutterdiff.core.markers.eof import coalesce_trailing_eof_flags
from gutterdiff.core.models import ADDED_FLAGS, MODIFIED_FLAGS, MarkerFlags


def test_added_trailing_newline_is_trailing_only() -> None:
    flags = build_line_flags(BaselineSnapshot.from_text("a\nb"), TextBuffer("a\nb\n"))
    assert flags == [
        None,
        MarkerFlags(trailing_eof_proxy_only=True, trailing_eof_proxy_source=True),
        None,
    ]


def test_changed_line_with_new_trailing_newline_is_modified() -> None:
    buffer = TextBuffer("x\ny\n")
    flags = coalesce_trailing_eof_flags(buffer, [None, MODIFIED_FLAGS, ADDED_FLAGS])
    assert flags == [
        None,
        MarkerFlags(modified=True, trailing_eof_proxy_source=True),
        None,
    ]


def test_added_line_stays_added() -> None:
    buffer = TextBuffer("x\ny\n")
    flags = coalesce_trailing_eof_flags(buffer, [None, ADDED_FLAGS, ADDED_FLAGS])
    assert flags == [None, MarkerFlags(added=True, trailing_eof_proxy_source=True), None]


def test_input_list_is_not_mutated() -> None:
    buffer = TextBuffer("x\n")
    original = [None, ADDED_FLAGS]
    result = coalesce_trailing_eof_flags(buffer, original)
    assert original == [None, ADDED_FLAGS]
    assert result is not original


def test_nothing_to_coalesce() -> None:
    no_newline = [None, ADDED_FLAGS]
    assert coalesce_trailing_eof_flags(TextBuffer("a\nb"), no_newline) is no_newline

    unflagged_eof = [ADDED_FLAGS, None]
    assert coalesce_trailing_eof_flags(TextBuffer("a\n"), unflagged_eof) is unflagged_eof

    wrong_length = [ADDED_FLAGS]
    assert coalesce_trailing_eof_flags(TextBuffer("a\n"), wrong_length) is wrong_length

    assert coalesce_trailing_eof_flags(TextBuffer("a\n"), None) is None
