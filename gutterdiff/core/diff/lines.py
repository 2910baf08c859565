"""
Line splitting and normalization.

Lines are compared by value after dropping a single trailing carriage
return, so CRLF and LF documents align line for line.
"""

from __future__ import annotations

from typing import Optional


def normalize_diff_line(line_text: str) -> str:
    """Strip one trailing ``\\r`` from a line."""
    if line_text.endswith('\r'):
        return line_text[:-1]
    return line_text


def split_diff_lines(text: Optional[str]) -> list[str]:
    """
    Split text into normalized lines.

    A trailing line break produces a final empty line, matching how line
    buffers model it. ``None`` and ``''`` both give a single empty line.
    """
    return [normalize_diff_line(line) for line in (text or '').split('\n')]
