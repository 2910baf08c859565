from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import pyqtSignal, QSize, Qt, QRect
from PyQt6.QtGui import QPainter, QColor, QPaintEvent, QMouseEvent

from gutterdiff.core.markers.segments import layout_overview_segments
from gutterdiff.core.models import DiffSegment, PixelSegment
from gutterdiff.services.settings import ColorSettings


class DiffOverviewBar(QWidget):
    """
    Vertical track summarizing where the document differs from its baseline.
    """
    position_clicked = pyqtSignal(float)

    def __init__(self, parent=None, colors: ColorSettings | None = None, width: int = 15):
        super().__init__(parent)
        self.setFixedWidth(width)
        self._bar_width = width
        self._viewport_start: int = 0
        self._viewport_count: int = 0
        self._total_lines: int = 0
        self._segments: list[DiffSegment] = []

        self.set_colors(colors or ColorSettings())

        self.setMouseTracking(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

    def set_colors(self, colors: ColorSettings) -> None:
        self.added_color = QColor(colors.added_marker)
        self.modified_color = QColor(colors.modified_marker)
        self.background_color = QColor(colors.overview_background)
        self.border_color = QColor(colors.overview_border)
        self.viewport_color = QColor(colors.viewport_overlay)
        self.update()

    def set_segments(self, segments: list[DiffSegment], total_lines: int) -> None:
        """
        Update the segments to display.

        Args:
            segments: Changed line ranges, 1-based and inclusive
            total_lines: Line count of the current document
        """
        self._segments = list(segments)
        self._total_lines = max(0, total_lines)
        self.update()

    def set_viewport(self, start_idx: int, count: int):
        """Update the currently visible viewport range."""
        if self._viewport_start != start_idx or self._viewport_count != count:
            self._viewport_start = start_idx
            self._viewport_count = count
            self.update()

    def pixel_segments(self) -> list[PixelSegment]:
        """Current segments laid out on the drawable track."""
        return layout_overview_segments(self._segments, self._total_lines, self.height())

    def _color_for(self, segment: PixelSegment) -> QColor:
        if segment.added and not segment.modified:
            return self.added_color
        return self.modified_color

    def paintEvent(self, event: QPaintEvent):
        """Paint the change bands and viewport."""
        painter = QPainter(self)

        painter.fillRect(event.rect(), self.background_color)

        painter.setPen(self.border_color)
        painter.drawRect(0, 0, self.width() - 1, self.height() - 1)

        if self._total_lines <= 0:
            return

        for segment in self.pixel_segments():
            painter.fillRect(
                QRect(1, segment.top, self.width() - 2, segment.height),
                self._color_for(segment)
            )

        if self._viewport_count > 0:
            available_h = float(self.height())
            vy = (self._viewport_start / self._total_lines) * available_h
            vh = (self._viewport_count / self._total_lines) * available_h

            overlay = QColor(self.viewport_color)
            overlay.setAlpha(40)
            painter.fillRect(QRect(0, int(vy), self.width(), int(vh)), overlay)

            border = QColor(self.viewport_color)
            border.setAlpha(120)
            painter.setPen(border)
            painter.drawRect(0, int(vy), self.width() - 1, int(vh))

    def mousePressEvent(self, event: QMouseEvent):
        """Emit the clicked position as a fraction of the track."""
        if event.button() == Qt.MouseButton.LeftButton and self.height() > 0:
            pos = max(0.0, min(1.0, event.position().y() / self.height()))
            self.position_clicked.emit(pos)

    def sizeHint(self):
        return QSize(self._bar_width, 0)
