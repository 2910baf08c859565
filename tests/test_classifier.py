from __future__ import annotations

import pytest

from gutterdiff.core.baseline import BaselineSnapshot
from gutterdiff.core.buffer import TextBuffer
from gutterdiff.core.diff.aligner import build_line_mapping
from gutterdiff.core.diff.exact import lcs_diff_runs
from gutterdiff.core.markers.classifier import (
    DiffAlgorithm,
    MarkerOptions,
    build_diff_line_flags,
    build_line_flags,
    line_flags_from_mapping,
    line_flags_from_runs,
)
from gutterdiff.core.models import (
    ADDED_FLAGS,
    MODIFIED_FLAGS,
    AlignmentLimits,
    DiffRun,
    MarkerFlags,
    RunType,
)


def test_runs_pair_deletions_with_insertions() -> None:
    runs = [DiffRun(RunType.DELETE, 2), DiffRun(RunType.INSERT, 3)]
    assert line_flags_from_runs(runs, 3) == [MODIFIED_FLAGS, MODIFIED_FLAGS, ADDED_FLAGS]


def test_unpaired_deletion_flags_nothing() -> None:
    runs = [DiffRun(RunType.EQUAL, 1), DiffRun(RunType.DELETE, 4), DiffRun(RunType.EQUAL, 1)]
    assert line_flags_from_runs(runs, 2) == [None, None]


def test_no_runs_flags_nothing() -> None:
    assert line_flags_from_runs(None, 2) == [None, None]
    assert line_flags_from_mapping(["a"], ["a"], None) == [None]


@pytest.mark.parametrize(
    "base,current",
    [
        (["a", "b", "c"], ["a", "X", "c"]),
        (["a", "c"], ["a", "b", "c"]),
        (["a", "b", "c"], ["a", "c"]),
        (["a", "b"], ["X", "Y", "Z"]),
        (["b", "a"], ["a", "b"]),
    ],
)
def test_runs_and_mapping_classify_alike(base: list[str], current: list[str]) -> None:
    limits = AlignmentLimits.unbounded()
    from_runs = line_flags_from_runs(lcs_diff_runs(base, current, limits), len(current))
    from_mapping = line_flags_from_mapping(base, current, build_line_mapping(base, current, limits))
    assert from_runs == from_mapping


def test_unavailable_baseline_shows_no_markers() -> None:
    assert build_line_flags(BaselineSnapshot.empty(), TextBuffer("a")) is None
    assert build_line_flags(None, TextBuffer("a")) is None


def test_untracked_file_is_all_added() -> None:
    snapshot = BaselineSnapshot.from_payload({"available": True, "tracked": False})
    assert build_line_flags(snapshot, TextBuffer("a\nb")) == [ADDED_FLAGS, ADDED_FLAGS]


def test_untracked_file_with_trailing_newline() -> None:
    snapshot = BaselineSnapshot.from_payload({"available": True, "tracked": False})
    assert build_line_flags(snapshot, TextBuffer("a\nb\n")) == [
        ADDED_FLAGS,
        MarkerFlags(added=True, trailing_eof_proxy_source=True),
        None,
    ]


def test_untracked_empty_document() -> None:
    snapshot = BaselineSnapshot.from_payload({"available": True, "tracked": False})
    assert build_line_flags(snapshot, TextBuffer("")) == [None]


def test_repository_without_commits_is_all_added() -> None:
    snapshot = BaselineSnapshot.from_payload({"available": True, "tracked": True})
    assert build_line_flags(snapshot, TextBuffer("x")) == [ADDED_FLAGS]


def test_tracked_file_without_text_shows_no_markers() -> None:
    snapshot = BaselineSnapshot.from_payload({
        "available": True,
        "tracked": True,
        "headOid": "abc123",
        "reason": "too-large",
    })
    assert build_line_flags(snapshot, TextBuffer("x")) is None


def test_oversize_text_shows_no_markers() -> None:
    options = MarkerOptions(max_text_chars=3)
    assert build_line_flags(BaselineSnapshot.from_text("abcd"), TextBuffer("ab"), options) is None
    assert build_line_flags(BaselineSnapshot.from_text("ab"), TextBuffer("abcd"), options) is None


def test_exact_strategy_declines_over_budget() -> None:
    snapshot = BaselineSnapshot.from_text("a\nb\nc")
    buffer = TextBuffer("a\nX\nc")
    limits = AlignmentLimits(max_lines=2)

    exact = MarkerOptions(algorithm=DiffAlgorithm.EXACT, limits=limits)
    assert build_diff_line_flags(snapshot, buffer, exact) is None

    scalable = MarkerOptions(algorithm=DiffAlgorithm.SCALABLE, limits=limits)
    assert build_diff_line_flags(snapshot, buffer, scalable) == [None, MODIFIED_FLAGS, None]


def test_crlf_baseline_matches_lf_document() -> None:
    snapshot = BaselineSnapshot.from_text("a\r\nb\r\n")
    assert build_line_flags(snapshot, TextBuffer("a\nb\n")) == [None, None, None]


def test_failed_read_without_commits_is_all_added() -> None:
    snapshot = BaselineSnapshot.from_payload({
        "available": True,
        "tracked": True,
        "headOid": None,
        "reason": "error",
    })
    assert build_line_flags(snapshot, TextBuffer("x")) == [ADDED_FLAGS]
