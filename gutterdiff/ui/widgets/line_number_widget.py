"""
Change marker gutter.

Paints the markers of a ``DiffDocumentState`` alongside a text editor and
reports hovers and clicks already resolved to blame targets.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QPoint, QRect, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QMouseEvent, QPainter, QPaintEvent
from PyQt6.QtWidgets import QPlainTextEdit, QWidget

from gutterdiff.core.markers.blame import GutterHit, click_action, hover_action
from gutterdiff.core.markers.gutter import GutterMarker
from gutterdiff.services.settings import ColorSettings


class GutterMarkerWidget(QWidget):
    """
    Widget showing change markers alongside an editor.

    Added lines get a solid green stripe, modified lines a yellow one.
    The trailing EOF row gets a short stripe at its top edge.
    """

    # (hit, HoverAction)
    marker_hovered = pyqtSignal(object, object)
    # (hit, ClickAction)
    marker_clicked = pyqtSignal(object, object)

    def __init__(
        self,
        editor: QPlainTextEdit,
        parent: Optional[QWidget] = None,
        colors: Optional[ColorSettings] = None,
        width: int = 8
    ):
        super().__init__(parent or editor)
        self.editor = editor
        self._markers: dict[int, GutterMarker] = {}
        self._resolve_hit = None
        self._last_hover_line = 0

        self.set_colors(colors or ColorSettings())
        self.setFixedWidth(width)
        self.setMouseTracking(True)

        self.editor.updateRequest.connect(self._on_update_request)

    def set_colors(self, colors: ColorSettings) -> None:
        self.added_color = QColor(colors.added_marker)
        self.modified_color = QColor(colors.modified_marker)
        self.background_color = QColor(colors.gutter_background)
        self.update()

    def set_markers(self, markers: dict[int, GutterMarker], resolve_hit=None) -> None:
        """
        Set change markers.

        Args:
            markers: Markers keyed by 1-based line number
            resolve_hit: Callable mapping a line number to a ``GutterHit``
        """
        self._markers = markers
        self._resolve_hit = resolve_hit
        self.update()

    def clear_markers(self) -> None:
        self._markers = {}
        self.update()

    def _on_update_request(self, rect: QRect, dy: int) -> None:
        if dy:
            self.scroll(0, dy)
        else:
            self.update(0, rect.y(), self.width(), rect.height())

    def _color_for(self, marker: GutterMarker) -> QColor:
        if marker.flags.added and not marker.flags.modified:
            return self.added_color
        return self.modified_color

    def paintEvent(self, event: QPaintEvent) -> None:
        """Paint change markers for the visible blocks."""
        painter = QPainter(self)
        painter.fillRect(event.rect(), self.background_color)

        if not self._markers:
            return

        block = self.editor.firstVisibleBlock()
        line_no = block.blockNumber() + 1

        top = int(self.editor.blockBoundingGeometry(block).translated(
            self.editor.contentOffset()).top())
        bottom = top + int(self.editor.blockBoundingRect(block).height())

        while block.isValid() and top <= event.rect().bottom():
            if block.isVisible() and bottom >= event.rect().top():
                marker = self._markers.get(line_no)
                if marker is not None and marker.flags.is_changed:
                    height = bottom - top
                    if marker.flags.eof_proxy:
                        painter.fillRect(2, top, 4, max(2, height // 4), self._color_for(marker))
                    else:
                        painter.fillRect(2, top + 2, 4, max(1, height - 4), self._color_for(marker))

            block = block.next()
            top = bottom
            bottom = top + int(self.editor.blockBoundingRect(block).height())
            line_no += 1

    def _line_at(self, y: float) -> int:
        cursor = self.editor.cursorForPosition(QPoint(0, int(y)))
        return cursor.blockNumber() + 1

    def _hit_at(self, y: float) -> Optional[GutterHit]:
        if self._resolve_hit is None:
            return None
        return self._resolve_hit(self._line_at(y))

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        line_no = self._line_at(event.position().y())
        if line_no == self._last_hover_line:
            return
        self._last_hover_line = line_no

        hit = self._hit_at(event.position().y())
        if hit is not None:
            self.marker_hovered.emit(hit, hover_action(hit))

    def leaveEvent(self, event) -> None:
        self._last_hover_line = 0
        super().leaveEvent(event)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        hit = self._hit_at(event.position().y())
        if hit is not None:
            self.marker_clicked.emit(hit, click_action(hit))
