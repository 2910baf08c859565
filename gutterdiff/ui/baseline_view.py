"""
Baseline comparison view.

An editable document with a change-marker gutter and an overview bar,
both driven by a ``DiffDocumentState``.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFont, QKeySequence, QShortcut, QTextCursor
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPlainTextEdit, QVBoxLayout, QWidget

from gutterdiff.core.baseline import BaselineSnapshot
from gutterdiff.core.buffer import TextBuffer
from gutterdiff.core.document import DiffDocumentState
from gutterdiff.core.markers.blame import ClickAction, GutterHit, HoverAction
from gutterdiff.services.settings import ApplicationSettings
from gutterdiff.ui.widgets.diff_overview import DiffOverviewBar
from gutterdiff.ui.widgets.line_number_widget import GutterMarkerWidget


logger = logging.getLogger(__name__)


class BaselineCompareView(QWidget):
    """
    View for editing a document against a fixed baseline.

    Supports:
    - Live added/modified markers while typing
    - Overview bar with click-to-scroll
    - Next/previous change navigation
    """

    # Signals
    position_changed = pyqtSignal(int)  # line
    hover_requested = pyqtSignal(object, object)  # GutterHit, HoverAction
    open_requested = pyqtSignal(object, object)  # GutterHit, ClickAction

    def __init__(
        self,
        settings: Optional[ApplicationSettings] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)
        self._settings = settings or ApplicationSettings()
        self._state = DiffDocumentState(options=self._settings.engine.to_marker_options())

        self._setup_ui()
        self._setup_connections()

    @property
    def state(self) -> DiffDocumentState:
        return self._state

    @property
    def editor(self) -> QPlainTextEdit:
        return self._editor

    def _setup_ui(self) -> None:
        """Set up the UI."""
        ui = self._settings.ui
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        content = QWidget()
        content_layout = QHBoxLayout(content)
        content_layout.setContentsMargins(0, 0, 0, 0)
        content_layout.setSpacing(0)

        self._editor = QPlainTextEdit()
        self._editor.setFont(QFont(ui.font_family, ui.font_size))
        self._editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

        # Gutter must be created after the editor
        self._gutter = GutterMarkerWidget(
            self._editor, parent=content,
            colors=self._settings.colors, width=ui.gutter_width
        )
        content_layout.addWidget(self._gutter)
        content_layout.addWidget(self._editor, 1)

        self._overview_bar = DiffOverviewBar(colors=self._settings.colors, width=ui.overview_width)
        self._overview_bar.setVisible(ui.show_overview)
        content_layout.addWidget(self._overview_bar)

        layout.addWidget(content, 1)

        self._status = QLabel()
        self._status.setContentsMargins(6, 2, 6, 2)
        layout.addWidget(self._status)

    def _setup_connections(self) -> None:
        """Set up signal connections."""
        self._editor.textChanged.connect(self._on_text_changed)
        self._editor.cursorPositionChanged.connect(self._on_cursor_changed)
        self._editor.verticalScrollBar().valueChanged.connect(self._update_overview_viewport)
        self._editor.verticalScrollBar().rangeChanged.connect(self._update_overview_viewport)

        self._overview_bar.position_clicked.connect(self._on_overview_clicked)
        self._gutter.marker_hovered.connect(self._on_marker_hovered)
        self._gutter.marker_clicked.connect(self._on_marker_clicked)

        QShortcut(QKeySequence("F7"), self).activated.connect(self.goto_next_change)
        QShortcut(QKeySequence("Shift+F7"), self).activated.connect(self.goto_prev_change)

    # === Content ===

    def set_baseline(self, baseline: BaselineSnapshot) -> None:
        """Replace the baseline markers are computed against."""
        self._state.set_baseline(baseline)
        self._refresh_markers()

    def set_text(self, text: str) -> None:
        """Replace the document text. Triggers a recompute via textChanged."""
        self._editor.setPlainText(text)

    def text(self) -> str:
        return self._editor.toPlainText()

    def apply_settings(self, settings: ApplicationSettings) -> None:
        """Settings observer: re-apply options and colors."""
        self._settings = settings
        self._gutter.set_colors(settings.colors)
        self._overview_bar.set_colors(settings.colors)
        self._overview_bar.setVisible(settings.ui.show_overview)
        self._state.set_options(settings.engine.to_marker_options())
        self._refresh_markers()

    def _on_text_changed(self) -> None:
        self._state.set_document(TextBuffer(self._editor.toPlainText()))
        self._refresh_markers()

    def _refresh_markers(self) -> None:
        state = self._state
        self._gutter.set_markers(state.markers, state.gutter_hit)
        self._overview_bar.set_segments(state.segments, state.buffer.line_count)
        self._update_overview_viewport()

        if state.line_flags is None:
            self._status.setText("No baseline markers")
        else:
            changed = sum(s.line_count for s in state.segments)
            self._status.setText(f"{len(state.segments)} changes, {changed} lines")

    # === Navigation ===

    def goto_line(self, line: int) -> None:
        """Move the cursor to a 1-based line and center it."""
        target = max(0, min(line - 1, self._editor.document().blockCount() - 1))
        block = self._editor.document().findBlockByNumber(target)
        self._editor.setTextCursor(QTextCursor(block))
        self._editor.centerCursor()

    def goto_next_change(self) -> None:
        current = self._state.cursor_line
        for segment in self._state.segments:
            if segment.from_line > current:
                self.goto_line(segment.from_line)
                return

    def goto_prev_change(self) -> None:
        current = self._state.cursor_line
        for segment in reversed(self._state.segments):
            if segment.to_line < current:
                self.goto_line(segment.from_line)
                return

    def _on_cursor_changed(self) -> None:
        line = self._editor.textCursor().blockNumber() + 1
        self._state.move_cursor(line)
        self.position_changed.emit(line)

    def _on_overview_clicked(self, pos: float) -> None:
        total = self._editor.document().blockCount()
        self.goto_line(int(pos * total) + 1)

    def _update_overview_viewport(self) -> None:
        scrollbar = self._editor.verticalScrollBar()
        self._overview_bar.set_viewport(scrollbar.value(), scrollbar.pageStep())

    # === Blame ===

    def _on_marker_hovered(self, hit: GutterHit, action: HoverAction) -> None:
        if action is HoverAction.SHOW_UNCOMMITTED:
            self._gutter.setToolTip("Uncommitted change")
        else:
            self._gutter.setToolTip(f"Line {hit.line_number}")
        self.hover_requested.emit(hit, action)

    def _on_marker_clicked(self, hit: GutterHit, action: ClickAction) -> None:
        logger.debug(f"Gutter click on line {hit.request_line_number}: {action.name}")
        if action is not ClickAction.NONE:
            self.open_requested.emit(hit, action)
