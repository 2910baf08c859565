"""
UI-agnostic core: alignment, classification and per-document state.
"""

from gutterdiff.core.baseline import BaselineReason, BaselineSnapshot
from gutterdiff.core.buffer import LineBuffer, TextBuffer
from gutterdiff.core.document import DiffDocumentState

__all__ = [
    'BaselineReason',
    'BaselineSnapshot',
    'LineBuffer',
    'TextBuffer',
    'DiffDocumentState',
]
