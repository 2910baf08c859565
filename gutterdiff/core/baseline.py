"""
Baseline snapshot model.

A snapshot is the version-control side of the comparison: the committed
text of the file (if any) plus enough state to decide what to show when
there is no text. It is immutable and replaced wholesale whenever the
version-control state changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from gutterdiff.core.diff.lines import split_diff_lines


class BaselineReason(Enum):
    """Why a baseline has no usable text."""
    NOT_FILE = "not-file"
    GIT_UNAVAILABLE = "git-unavailable"
    NOT_REPO = "not-repo"
    TOO_LARGE = "too-large"
    BINARY = "binary"
    ERROR = "error"

    @classmethod
    def from_string(cls, value: Any) -> Optional[BaselineReason]:
        """Create from a payload string, ``None`` if unknown."""
        if not isinstance(value, str):
            return None
        for reason in cls:
            if reason.value == value:
                return reason
        return None


def _payload_value(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


@dataclass(frozen=True)
class BaselineSnapshot:
    """
    Immutable baseline state for one document.

    Attributes:
        available: Whether version control could be consulted at all
        tracked: Whether the file is tracked
        base_text: Committed text, ``None`` when there is none
        base_lines: ``base_text`` split into normalized lines
        head_oid: Commit id of HEAD, ``None`` before the first commit
        reason: Why ``base_text`` is missing, when known
    """
    available: bool = False
    tracked: bool = False
    base_text: Optional[str] = None
    base_lines: Optional[tuple[str, ...]] = None
    head_oid: Optional[str] = None
    reason: Optional[BaselineReason] = None

    @classmethod
    def empty(cls) -> BaselineSnapshot:
        """The snapshot used before any baseline arrives."""
        return cls()

    @classmethod
    def from_text(
        cls,
        base_text: Optional[str],
        tracked: bool = True,
        head_oid: Optional[str] = "HEAD"
    ) -> BaselineSnapshot:
        """Build an available snapshot directly from baseline text."""
        return cls(
            available=True,
            tracked=tracked,
            base_text=base_text,
            base_lines=tuple(split_diff_lines(base_text)) if base_text is not None else None,
            head_oid=head_oid,
        )

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> BaselineSnapshot:
        """
        Normalize a loosely-typed payload from the version-control side.

        Accepts camelCase or snake_case keys. Anything that is not a
        mapping yields the empty snapshot.
        """
        if not isinstance(payload, Mapping):
            return cls.empty()

        base_text = _payload_value(payload, 'base_text', 'baseText')
        if not isinstance(base_text, str):
            base_text = None
        head_oid = _payload_value(payload, 'head_oid', 'headOid')

        return cls(
            available=payload.get('available') is True,
            tracked=payload.get('tracked') is True,
            base_text=base_text,
            base_lines=tuple(split_diff_lines(base_text)) if base_text is not None else None,
            head_oid=head_oid if isinstance(head_oid, str) else None,
            reason=BaselineReason.from_string(payload.get('reason')),
        )

    @property
    def lines(self) -> Optional[tuple[str, ...]]:
        """Baseline lines, splitting ``base_text`` if they were not provided."""
        if self.base_lines is not None:
            return self.base_lines
        if self.base_text is None:
            return None
        return tuple(split_diff_lines(self.base_text))
