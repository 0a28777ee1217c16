import pytest

from kernel_sources.cpu.mandelbrot import _pixel_to_complex
from utils.coords import image_scalars, pixel_to_complex


def test_top_left_pixel_at_default_view():
    x0, y0, hs = pixel_to_complex(0, 0, 100, 100, 1.0, 0.0, 0.0)
    assert x0 == pytest.approx(-2.5)
    assert y0 == pytest.approx(-1.75)
    assert hs == pytest.approx(3.5)


def test_height_scalar_follows_aspect_and_scale():
    _, hs = image_scalars(200, 100, 2.0)
    assert hs == pytest.approx(0.875)
    assert pixel_to_complex(5, 5, 200, 100, 2.0, 0.0, 0.0)[2] == hs


def test_affine_in_pixel_column():
    args = dict(width=640, height=480, scale=3.0, x_delta=12.5, y_delta=-7.0)
    def x_at(px):
        return pixel_to_complex(px, 17, **args)[0]
    step_low = x_at(10) - x_at(5)
    step_high = x_at(410) - x_at(405)
    assert step_low == pytest.approx(step_high, rel=1e-12)
    # y0 does not depend on the column
    assert pixel_to_complex(10, 17, **args)[1] == pixel_to_complex(400, 17, **args)[1]


def test_pan_shifts_by_scaled_pixels():
    base = pixel_to_complex(50, 40, 100, 80, 2.0, 0.0, 0.0)
    panned = pixel_to_complex(50 + 2.0 * 3.0, 40 - 2.0 * 4.0, 100, 80, 2.0, 3.0, -4.0)
    assert panned[0] == pytest.approx(base[0])
    assert panned[1] == pytest.approx(base[1])


def test_compiled_transform_matches_python():
    args = (3, 4, 10, 8, 2.0, 1.0, -1.0)
    assert _pixel_to_complex(*args) == pytest.approx(pixel_to_complex(*args))
