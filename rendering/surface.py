from __future__ import annotations

import threading
from typing import Callable, Optional, Tuple

import numpy as np


class DisplaySurface:
    """
    What the rendering core needs from a drawing surface.

    The compositor uses the buffered variant: pixels go into its own
    framebuffer and flush() hands over the whole (H, W, 4) uint8 RGBA buffer.
    write_pixel() is for hosts drawing single pixels outside a render.
    """

    def get_width(self) -> int:
        raise NotImplementedError

    def get_height(self) -> int:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def write_pixel(self, x: int, y: int, rgba: Tuple[int, int, int, int]) -> None:
        raise NotImplementedError

    def flush(self, pixels: np.ndarray) -> None:
        raise NotImplementedError


class ArraySurface(DisplaySurface):
    """
    In-memory surface. Keeps the last presented frame as a NumPy array
    and optionally forwards each flush to a callback.
    """

    def __init__(self, width: int, height: int,
                 on_flush: Optional[Callable[[np.ndarray], None]] = None):
        self.width = int(width)
        self.height = int(height)
        self.on_flush = on_flush
        self.frame = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self.flush_count = 0
        self.clear_count = 0
        self._lock = threading.Lock()

    def resize(self, width: int, height: int) -> None:
        with self._lock:
            self.width, self.height = int(width), int(height)
            self.frame = np.zeros((self.height, self.width, 4), dtype=np.uint8)

    def get_width(self) -> int:
        return self.width

    def get_height(self) -> int:
        return self.height

    def clear(self) -> None:
        with self._lock:
            self.frame = np.zeros((self.height, self.width, 4), dtype=np.uint8)
            self.clear_count += 1

    def write_pixel(self, x, y, rgba) -> None:
        with self._lock:
            self.frame[y, x] = rgba

    def flush(self, pixels: np.ndarray) -> None:
        with self._lock:
            self.frame = np.array(pixels, dtype=np.uint8, copy=True)
            self.flush_count += 1
        if self.on_flush is not None:
            self.on_flush(self.frame)
