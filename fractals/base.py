from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Tuple
import numpy as np
from abc import ABC, abstractmethod

from rendering.errors import ConfigurationError
from utils.coords import image_scalars
from utils.enums import ShaderMode


@dataclass
class ViewportState:
    """
    Mutable view parameters owned by the interaction controller.
    Scale is the zoom factor, x_delta/y_delta the pan offsets in pixels
    at scale 1.0. Parallelism is the number of column strips rendered
    concurrently; parallel=False forces the sequential strategy.
    """
    scale: float = 1.0
    x_delta: float = 0.0
    y_delta: float = 0.0
    shader: ShaderMode = ShaderMode.BLUE
    iterations: int = 256
    parallelism: int = 2
    parallel: bool = True


@dataclass(frozen=True)
class RenderConfig:
    """
    Immutable snapshot of one render generation.
    Width and height are the surface dimensions at creation time.
    """
    iterations: int
    scale: float
    x_delta: float
    y_delta: float
    width: int
    height: int
    parallelism: int = 1
    shader: ShaderMode = ShaderMode.BLUE

    def __post_init__(self):
        if not _is_positive_int(self.iterations):
            raise ConfigurationError(f"iterations must be a positive integer, got {self.iterations!r}")
        if not _is_positive_int(self.width) or not _is_positive_int(self.height):
            raise ConfigurationError(f"image size must be positive, got {self.width!r}x{self.height!r}")
        if not _is_positive_int(self.parallelism):
            raise ConfigurationError(f"parallelism must be a positive integer, got {self.parallelism!r}")
        if not (_is_real(self.scale) and math.isfinite(self.scale) and self.scale > 0):
            raise ConfigurationError(f"scale must be a positive real, got {self.scale!r}")
        for name in ("x_delta", "y_delta"):
            value = getattr(self, name)
            if not (_is_real(value) and math.isfinite(value)):
                raise ConfigurationError(f"{name} must be a finite real, got {value!r}")
        # stored as Python floats so numpy float32 input keeps float64 math
        for name in ("scale", "x_delta", "y_delta"):
            object.__setattr__(self, name, float(getattr(self, name)))

    @classmethod
    def from_state(cls, state: ViewportState, width: int, height: int,
                   shader: ShaderMode | None = None) -> "RenderConfig":
        return cls(iterations=state.iterations,
                   scale=state.scale,
                   x_delta=state.x_delta,
                   y_delta=state.y_delta,
                   width=width,
                   height=height,
                   parallelism=state.parallelism,
                   shader=shader if shader is not None else state.shader)

    @property
    def width_scalar(self) -> float:
        return image_scalars(self.width, self.height, self.scale)[0]

    @property
    def height_scalar(self) -> float:
        return image_scalars(self.width, self.height, self.scale)[1]


def _is_positive_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool) and value > 0


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


class Fractal(ABC):
    """
    An abstract base class for fractal types.
    """
    name: str

    @abstractmethod
    def compute_column(self, config: RenderConfig, px: int) -> Tuple[np.ndarray, float]:
        """Returns (per-row intensities, height_scalar) for image column px."""
        ...
