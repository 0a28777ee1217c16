import threading

import numpy as np
import pytest

from fractals.base import Fractal, RenderConfig, ViewportState
from rendering.surface import ArraySurface
from utils.enums import ShaderMode


class StubFractal(Fractal):
    """
    Returns a constant column per config: `values[config.iterations]`
    (default 0.5). Records every (generation config, px) it computes.
    """
    name = "stub"

    def __init__(self, values=None, gate_iterations=None):
        self.values = values or {}
        self.calls = []
        self.gate_iterations = gate_iterations
        self.entered = threading.Event()
        self.gate = threading.Event()
        self._lock = threading.Lock()

    def compute_column(self, config, px):
        with self._lock:
            self.calls.append((config.iterations, px))
        if config.iterations == self.gate_iterations:
            self.entered.set()
            self.gate.wait(5.0)
        line = np.full(config.height, self.values.get(config.iterations, 0.5), dtype=np.float64)
        line.flags.writeable = False
        return line, config.height_scalar


@pytest.fixture
def stub_fractal():
    return StubFractal


@pytest.fixture
def surface():
    return ArraySurface(8, 6)


@pytest.fixture
def small_config():
    return RenderConfig(iterations=50, scale=1.0, x_delta=0.0, y_delta=0.0,
                        width=8, height=6, parallelism=2, shader=ShaderMode.WHITE)


@pytest.fixture
def viewport():
    return ViewportState(iterations=50, shader=ShaderMode.WHITE, parallelism=2)
