"""Widget that presents the viewer's frame buffer."""

from __future__ import annotations

from PySide6.QtGui import QImage, QPainter
from PySide6.QtWidgets import QWidget

from wavewatchlib.raster import to_rgb32
from wavewatchlib.viewer import WaveformViewer

from .log import timed


class WaveformView(QWidget):
    """Paints ``viewer.on_redraw(width, height)`` on every paint event.

    Nothing is cached between frames: a resize or a reload simply
    triggers another paint.
    """

    def __init__(self, viewer: WaveformViewer, parent=None):
        super().__init__(parent)
        self._viewer = viewer
        self._frame_data = None   # keeps the QImage buffer alive
        self.setMinimumSize(64, 48)

    def frame_image(self, width: int, height: int) -> QImage:
        packed = to_rgb32(self._viewer.on_redraw(width, height))
        self._frame_data = packed
        h, w = packed.shape
        return QImage(packed.data, w, h, w * 4, QImage.Format.Format_RGB32)

    def paintEvent(self, event):
        w = self.width()
        h = self.height()
        if w <= 0 or h <= 0:
            return
        with timed(f"frame {w}x{h}"):
            image = self.frame_image(w, h)
            painter = QPainter(self)
            painter.drawImage(0, 0, image)
            painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.update()
