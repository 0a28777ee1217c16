from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

import numpy as np

from coloring.shaders import shade_column
from fractals.base import RenderConfig
from rendering.events import ColumnResult
from rendering.surface import DisplaySurface

logger = logging.getLogger(__name__)

FlushFn = Callable[[int], bool]


# ---------- Framebuffer ----------
class Framebuffer:
    """RGBA pixels, shape (height, width, 4), uint8."""

    def __init__(self, width: int = 0, height: int = 0):
        self.pixels = np.zeros((int(height), int(width), 4), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def reset(self, width: int, height: int) -> None:
        if self.pixels.shape[:2] == (height, width):
            self.pixels.fill(0)
        else:
            self.pixels = np.zeros((int(height), int(width), 4), dtype=np.uint8)

    def write_column(self, x: int, rgba_column: np.ndarray) -> None:
        self.pixels[:, x] = rgba_column


# ---------- Flush policies ----------
class FlushPolicy:
    def after_write(self, generation: int, result: ColumnResult, flush: FlushFn) -> bool:
        """True when the caller should flush right away."""
        raise NotImplementedError

    def cancel(self) -> None:
        pass


class PositionFlushPolicy(FlushPolicy):
    """
    Flushes about every 1% of the image width and on every one of the
    last x_skip + 1 columns. Used with parallel strips.
    """

    def __init__(self, width: int, x_skip: int):
        self.width = int(width)
        self.x_skip = int(x_skip)
        self.period = self.width * self.x_skip / 100

    def should_flush(self, px: int) -> bool:
        return px % self.period <= 1 or px > self.width - self.x_skip - 1

    def after_write(self, generation, result, flush) -> bool:
        return self.should_flush(result.px)


class TimedFlushPolicy(FlushPolicy):
    """
    Flushes when more than `interval` seconds passed since the last flush
    request. The flush itself runs `delay` seconds later on a timer thread
    so the producer is not held up.
    """

    def __init__(self, interval: float = 0.05, delay: float = 0.05,
                 clock: Callable[[], float] = time.monotonic):
        self.interval = float(interval)
        self.delay = float(delay)
        self.clock = clock
        self._last = clock()
        self._timers: List[threading.Timer] = []

    def after_write(self, generation, result, flush) -> bool:
        now = self.clock()
        if now - self._last <= self.interval:
            return False
        self._last = now
        timer = threading.Timer(self.delay, flush, args=(generation,))
        timer.daemon = True
        self._timers = [t for t in self._timers if t.is_alive()]
        self._timers.append(timer)
        timer.start()
        return False

    def cancel(self) -> None:
        for t in self._timers:
            t.cancel()
        self._timers.clear()


# ---------- Compositor ----------
class Compositor:
    """
    Single writer of the framebuffer and the display surface.
    Colours incoming columns of the current generation and flushes the
    whole buffer when the flush policy says so. Output tagged with any
    other generation id is dropped.

    Surface calls (clear, flush) run outside the framebuffer lock: hosts
    may start a new render from inside them.
    """

    def __init__(self, surface: DisplaySurface):
        self.surface = surface
        self.framebuffer = Framebuffer()
        self.generation: Optional[int] = None
        self.config: Optional[RenderConfig] = None
        self.policy: Optional[FlushPolicy] = None
        self.height_scalar: Optional[float] = None

        self.columns_written = 0
        self.stale_discards = 0
        self._dirty = False
        self._lock = threading.RLock()
        # frames reach the surface in the order they were copied
        self._present_lock = threading.RLock()
        self._frame_seq = 0
        self._presented_seq = 0

    def begin(self, generation: int, config: RenderConfig, policy: FlushPolicy) -> None:
        with self._lock:
            if self.policy is not None:
                self.policy.cancel()
            self.generation = generation
            self.config = config
            self.policy = policy
            self.height_scalar = config.height_scalar
            self.columns_written = 0
            self._dirty = False
            self.framebuffer.reset(config.width, config.height)
        self.surface.clear()

    def consume(self, result: ColumnResult) -> bool:
        with self._lock:
            if result.generation != self.generation:
                self.stale_discards += 1
                logger.debug("Dropped column %d of stale generation %d (current %s)",
                             result.px, result.generation, self.generation)
                return False
            if result.height_scalar != self.height_scalar or len(result.line) != self.config.height:
                self.stale_discards += 1
                logger.warning("Dropped column %d: inconsistent with generation %d",
                               result.px, self.generation)
                return False

            self.framebuffer.write_column(result.px, shade_column(result.line, self.config.shader))
            self.columns_written += 1
            self._dirty = True
            flush_now = self.policy.after_write(self.generation, result, self.flush)
        if flush_now:
            self.flush(result.generation)
        return True

    def flush(self, generation: Optional[int] = None) -> bool:
        with self._lock:
            if self.config is None:
                return False
            if generation is not None and generation != self.generation:
                return False
            pixels = self.framebuffer.pixels.copy()
            self._dirty = False
            self._frame_seq += 1
            seq = self._frame_seq
        with self._present_lock:
            if seq < self._presented_seq:
                return False
            self._presented_seq = seq
            self.surface.flush(pixels)
        return True

    def finish(self, generation: int) -> None:
        """Final flush of a completed generation, if anything is unflushed."""
        with self._lock:
            if generation != self.generation:
                return
            if self.policy is not None:
                self.policy.cancel()
            dirty = self._dirty
        if dirty:
            self.flush(generation)

    def retire(self) -> None:
        """Stop accepting output; the framebuffer keeps what was drawn."""
        with self._lock:
            if self.policy is not None:
                self.policy.cancel()
            self.generation = None

    def snapshot(self) -> np.ndarray:
        with self._lock:
            return self.framebuffer.pixels.copy()
