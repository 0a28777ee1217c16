from __future__ import annotations
from typing import Callable, Optional

import numpy as np

from fractals.base import Fractal, ViewportState
from fractals.mandelbrot import MandelbrotFractal
from rendering.compositor import Compositor
from rendering.events import LogEvent
from rendering.scheduler import RenderGeneration, RenderScheduler
from rendering.surface import DisplaySurface


class Renderer:

    """
    Facade that binds together:
      - the display surface,
      - the fractal,
      - the compositor (framebuffer owner),
      - the render scheduler (generation lifecycle).
    """

    def __init__(
        self,
        surface: DisplaySurface,
        fractal: Optional[Fractal] = None,
        *,
        flush_interval: float = 0.05,
    ):
        self.surface = surface
        self.fractal = fractal or MandelbrotFractal()
        self.compositor = Compositor(surface)
        self.scheduler = RenderScheduler(surface, self.fractal,
                                         compositor=self.compositor,
                                         flush_interval=flush_interval)

    # ----------------------------
    # Callbacks
    # ----------------------------

    def on_log(self, cb: Optional[Callable[[LogEvent], None]]) -> None:
        self.scheduler.on_log = cb

    # ----------------------------
    # Render entry point
    # ----------------------------

    def render(self, viewport: ViewportState) -> RenderGeneration:
        """
        Start a new render generation for the given viewport state,
        superseding any render still in progress.
        """
        return self.scheduler.render(viewport)

    def stop(self) -> None:
        self.scheduler.stop()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self.scheduler.wait(timeout)

    def close(self) -> None:
        self.scheduler.shutdown()

    @property
    def height_scalar(self) -> Optional[float]:
        return self.compositor.height_scalar

    def snapshot(self) -> np.ndarray:
        return self.compositor.snapshot()
