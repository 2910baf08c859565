"""
Line-addressable document buffers.

The engine only needs a line count, the character length, and the text
of a line by its 1-based number. Editors adapt their own document
model to ``LineBuffer``; ``TextBuffer`` covers plain strings.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from gutterdiff.core.diff.lines import normalize_diff_line


@runtime_checkable
class LineBuffer(Protocol):
    """Read-only view of a document as numbered lines."""

    @property
    def line_count(self) -> int:
        ...

    @property
    def length(self) -> int:
        ...

    def line_text(self, line_no: int) -> str:
        """Raw text of 1-based line ``line_no``, without its line break."""
        ...


class TextBuffer:
    """
    ``LineBuffer`` over an immutable string.

    A document always has at least one line; a trailing line break adds
    a final empty line.
    """

    def __init__(self, text: str = ""):
        self._text = text
        self._lines = text.split('\n')

    @property
    def text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def length(self) -> int:
        return len(self._text)

    def line_text(self, line_no: int) -> str:
        return self._lines[line_no - 1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextBuffer):
            return NotImplemented
        return self._text == other._text

    def __hash__(self) -> int:
        return hash(self._text)

    def __repr__(self) -> str:
        return f"TextBuffer(lines={self.line_count}, length={self.length})"


def buffer_lines(buffer: LineBuffer) -> list[str]:
    """All lines of ``buffer``, normalized for comparison."""
    return [
        normalize_diff_line(buffer.line_text(line_no))
        for line_no in range(1, buffer.line_count + 1)
    ]


def is_trailing_eof_line(buffer: LineBuffer, line_no: int) -> bool:
    """
    Whether ``line_no`` is the synthetic empty row after a final line break.

    Only a non-empty document with more than one line has one.
    """
    if buffer.length <= 0 or buffer.line_count <= 1 or line_no != buffer.line_count:
        return False
    return buffer.line_text(line_no) == ''
