from numba import njit

from kernel_sources.registry import register_kernel
from utils.coords import pixel_to_complex

BAILOUT = 4.0  # |z|^2 escape radius

ARG_SCALARS = [
    "px", "width", "height", "scale",
    "x_delta", "y_delta", "iterations",
]
ARG_BUFFERS_OUT = ["line"]

ARG_ORDER = ARG_SCALARS + ARG_BUFFERS_OUT

_pixel_to_complex = njit(cache=True)(pixel_to_complex)


@njit(cache=True, nogil=True)
def escape_intensity(x0, y0, iterations):
    """
    Escape-time of c = x0 + i*y0, normalised by the iteration cap.
    Points that never escape within `iterations` steps are in the set (0.0).
    """
    x = 0.0
    y = 0.0
    n = 0
    while x*x + y*y < BAILOUT and n < iterations:
        xtemp = x*x - y*y + x0
        y = 2.0*x*y + y0
        x = xtemp
        n += 1
    if n == iterations:
        return 0.0
    return n / iterations


@njit(cache=True, nogil=True)
def mandelbrot_column(px, width, height, scale, x_delta, y_delta,
                      iterations, line):
    height_scalar = 0.0
    for py in range(height):
        x0, y0, height_scalar = _pixel_to_complex(px, py, width, height, scale,
                                                  x_delta, y_delta)
        line[py] = escape_intensity(x0, y0, iterations)
    return height_scalar


register_kernel(
    fractal="mandelbrot",
    op_name="column",
    backend="CPU",
    precision="f64",
    func=mandelbrot_column,
    arg_order=ARG_ORDER,
    scalars=ARG_SCALARS,
    produces=ARG_BUFFERS_OUT,
)
