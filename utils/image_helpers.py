import numpy as np
from PySide6.QtGui import QImage


def ndarray_to_qimage(rgba: np.ndarray) -> QImage:
    """
    Wraps an (H, W, 4) uint8 RGBA array as a QImage.
    The returned image is a deep copy and does not reference `rgba`.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {rgba.shape}")
    buf = np.ascontiguousarray(rgba, dtype=np.uint8)
    h, w, _ = buf.shape
    img = QImage(buf.data, w, h, 4 * w, QImage.Format.Format_RGBA8888)
    return img.copy()
