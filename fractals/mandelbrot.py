from dataclasses import dataclass
from typing import Tuple
import numpy as np

import kernel_sources.cpu.mandelbrot  # noqa: F401  (registers the CPU kernels)
from kernel_sources.registry import load_kernel
from fractals.base import Fractal, RenderConfig


@dataclass
class MandelbrotFractal(Fractal):
    name: str = "mandelbrot"
    backend: str = "CPU"
    precision: str = "f64"

    def __post_init__(self):
        meta = load_kernel(self.backend, self.name, "column", self.precision)
        self._column_kernel = meta["func"]

    def compute_column(self, config: RenderConfig, px: int) -> Tuple[np.ndarray, float]:
        line = np.zeros(config.height, dtype=np.float64)
        height_scalar = self._column_kernel(int(px), int(config.width), int(config.height),
                                            float(config.scale),
                                            float(config.x_delta), float(config.y_delta),
                                            int(config.iterations), line)
        line.flags.writeable = False
        return line, float(height_scalar)
