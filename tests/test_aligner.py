from __future__ import annotations

from collections.abc import Sequence

import pytest

from gutterdiff.core.diff.aligner import (
    ScalableAligner,
    apply_runs_to_mapping,
    build_line_mapping,
    build_line_mapping_from_text,
)
from gutterdiff.core.markers.classifier import line_flags_from_mapping
from gutterdiff.core.markers.segments import extract_segments
from gutterdiff.core.models import (
    ADDED_FLAGS,
    MODIFIED_FLAGS,
    AlignmentLimits,
    DiffRun,
    DiffSegment,
    RunType,
)


def assert_valid_mapping(base: Sequence[str], current: Sequence[str], mapping: list[int]) -> None:
    assert len(mapping) == len(current) + 1
    assert mapping[0] == 0
    mapped = [m for m in mapping[1:] if m]
    assert all(1 <= m <= len(base) for m in mapped)
    assert mapped == sorted(set(mapped))


def changed_lines(base: Sequence[str], current: Sequence[str], mapping: list[int]) -> dict[int, str]:
    flags = line_flags_from_mapping(base, current, mapping)
    return {
        line_no: 'added' if f.added else 'modified'
        for line_no, f in enumerate(flags, start=1) if f is not None
    }


def test_identical_inputs_map_one_to_one() -> None:
    lines = ["a", "b", "c"]
    assert build_line_mapping(lines, list(lines)) == [0, 1, 2, 3]


def test_empty_baseline_maps_nothing() -> None:
    assert build_line_mapping([], ["a", "b"]) == [0, 0, 0]


def test_empty_current() -> None:
    assert build_line_mapping(["a", "b"], []) == [0]


def test_common_prefix_and_suffix() -> None:
    base = ["a", "b", "c", "d"]
    current = ["a", "b", "X", "c", "d"]
    assert build_line_mapping(base, current) == [0, 1, 2, 0, 3, 4]


def test_repeated_blank_lines() -> None:
    assert build_line_mapping(["a", "", "b"], ["a", "", "", "b"]) == [0, 1, 2, 0, 3]


def test_from_text_normalizes_line_endings() -> None:
    assert build_line_mapping_from_text("a\r\nb\r\n", "a\nb\n") == [0, 1, 2, 3]


def test_apply_runs_pairs_insert_and_delete() -> None:
    mapping = [0] * 4
    runs = [DiffRun(RunType.DELETE, 2), DiffRun(RunType.INSERT, 3)]
    apply_runs_to_mapping(mapping, runs)
    assert mapping == [0, 1, 2, 0]


def test_apply_runs_honours_offsets() -> None:
    mapping = [0] * 6
    apply_runs_to_mapping(mapping, [DiffRun(RunType.EQUAL, 2)], base_start=4, current_start=3)
    assert mapping == [0, 0, 0, 0, 5, 6]


def test_patience_anchors_resolve_large_unique_segment() -> None:
    base = [f"u{i}" for i in range(100)]
    current = list(base)
    current[50] = "new"
    del current[10]

    mapping = ScalableAligner(AlignmentLimits(max_lines=8)).align(base, current)

    assert_valid_mapping(base, current, mapping)
    assert mapping[11] == 12
    assert changed_lines(base, current, mapping) == {50: 'modified'}


def test_window_anchors_resolve_repetitive_content() -> None:
    base = [f"v{i % 50}" for i in range(300)]
    current = list(base)
    current[20] = "edit-1"
    current.insert(150, "inserted")
    current[281] = "edit-2"

    mapping = build_line_mapping(base, current, AlignmentLimits(max_lines=64))

    assert_valid_mapping(base, current, mapping)
    assert changed_lines(base, current, mapping) == {
        21: 'modified',
        151: 'added',
        282: 'modified',
    }


def test_positional_pairing_when_nothing_anchors() -> None:
    base = ["a"] * 10
    current = ["b"] * 6
    mapping = build_line_mapping(base, current, AlignmentLimits(max_lines=4))
    assert mapping == [0, 1, 2, 3, 4, 5, 6]


@pytest.mark.parametrize("size", [1500, 3000])
def test_large_input_stays_total(size: int) -> None:
    base = [f"line {i % 13}" for i in range(size)]
    current = list(base)
    current[size // 3] = "changed"
    current.insert(size // 2, "extra")

    mapping = build_line_mapping(base, current)

    assert_valid_mapping(base, current, mapping)
    changes = changed_lines(base, current, mapping)
    assert changes[size // 3 + 1] == 'modified'
    assert changes[size // 2 + 1] == 'added'


def test_flags_match_expected_constants() -> None:
    flags = line_flags_from_mapping(["a"], ["a", "b"], [0, 1, 0])
    assert flags == [None, ADDED_FLAGS]
    flags = line_flags_from_mapping(["a"], ["z"], [0, 1])
    assert flags == [MODIFIED_FLAGS]


REPEATED_BLANKS = ["head"] + [""] * 300 + ["mid"] + [""] * 300 + ["tail"]


@pytest.mark.parametrize("limits", [AlignmentLimits(), AlignmentLimits(max_lines=4)])
def test_long_blank_runs_around_one_edit(limits: AlignmentLimits) -> None:
    current = list(REPEATED_BLANKS)
    current[301] = "MID"

    mapping = build_line_mapping(REPEATED_BLANKS, current, limits)

    assert_valid_mapping(REPEATED_BLANKS, current, mapping)
    flags = line_flags_from_mapping(REPEATED_BLANKS, current, mapping)
    assert extract_segments(flags) == [DiffSegment(302, 302, added=False, modified=True)]


@pytest.mark.parametrize("limits", [AlignmentLimits(), AlignmentLimits(max_lines=4)])
def test_long_blank_runs_between_two_edits(limits: AlignmentLimits) -> None:
    current = list(REPEATED_BLANKS)
    current[0] = "HEAD"
    current[301] = "MID"

    mapping = build_line_mapping(REPEATED_BLANKS, current, limits)

    flags = line_flags_from_mapping(REPEATED_BLANKS, current, mapping)
    assert extract_segments(flags) == [
        DiffSegment(1, 1, added=False, modified=True),
        DiffSegment(302, 302, added=False, modified=True),
    ]


def test_empty_baseline_is_one_added_segment() -> None:
    current = ["a", "b", "c", "d"]
    mapping = build_line_mapping([], current)

    flags = line_flags_from_mapping([], current, mapping)

    assert flags == [ADDED_FLAGS] * 4
    assert extract_segments(flags) == [DiffSegment(1, 4, added=True, modified=False)]


def test_empty_current_has_no_flags() -> None:
    base = ["a", "b", "c"]
    mapping = build_line_mapping(base, [])

    flags = line_flags_from_mapping(base, [], mapping)

    assert flags == []
    assert extract_segments(flags) == []


def test_prefix_and_suffix_map_one_to_one_around_positional_interior() -> None:
    prefix = [f"p{i}" for i in range(8)]
    suffix = [f"s{i}" for i in range(8)]
    base = prefix + ["a"] * 10 + suffix
    current = prefix + ["b"] * 8 + suffix

    mapping = build_line_mapping(base, current, AlignmentLimits(max_lines=4))

    assert mapping == [0] + list(range(1, 17)) + list(range(19, 27))
    assert mapping[1:9] == list(range(1, 9))
    assert mapping[17:25] == list(range(19, 27))
