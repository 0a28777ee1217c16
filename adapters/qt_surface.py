from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QColor, QImage

from rendering.surface import DisplaySurface
from utils.image_helpers import ndarray_to_qimage


class QtImageSurface(QObject, DisplaySurface):
    """
    Display surface for Qt hosts.
    Every flush is converted to a QImage and emitted on frame_ready;
    signals emitted from render threads reach GUI slots as queued calls.
    """
    frame_ready = Signal(QImage)
    cleared = Signal()

    def __init__(self, width: int, height: int, parent=None):
        super().__init__(parent)
        self._width = int(width)
        self._height = int(height)
        self.image = self._blank()

    def _blank(self) -> QImage:
        img = QImage(self._width, self._height, QImage.Format.Format_RGBA8888)
        img.fill(0)
        return img

    def set_size(self, width: int, height: int) -> None:
        self._width, self._height = int(width), int(height)

    def get_width(self) -> int:
        return self._width

    def get_height(self) -> int:
        return self._height

    def clear(self) -> None:
        self.image = self._blank()
        self.cleared.emit()

    def write_pixel(self, x, y, rgba) -> None:
        r, g, b, a = (int(c) for c in rgba)
        self.image.setPixelColor(int(x), int(y), QColor(r, g, b, a))

    def flush(self, pixels) -> None:
        self.image = ndarray_to_qimage(pixels)
        self.frame_ready.emit(self.image.copy())
