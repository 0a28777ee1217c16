import logging
import math

import numpy as np
import pytest

from coloring.shaders import (BlueShader, get_shader, resolve_shader_mode,
                              shade, shade_column)
from rendering.errors import UnsupportedShaderModeError
from utils.enums import ShaderMode


def blue_expected(i):
    int1 = i * (-0.25 * math.log(-i / 11.112347 + 0.09) - 0.25)
    int2 = i * (1 - 2.4 * math.log(i + 1e-10))
    clamp = lambda v: int(min(255, max(0, round(v))))
    return clamp(255 * int1), clamp(255 * int1), clamp(255 * int2), 255


def test_white_is_linear_grey():
    assert shade(0.0, ShaderMode.WHITE) == (0, 0, 0, 255)
    assert shade(0.5, ShaderMode.WHITE) == (128, 128, 128, 255)
    assert shade(0.2, ShaderMode.WHITE) == (51, 51, 51, 255)


@pytest.mark.parametrize("i", [0.0, 0.01, 0.1, 0.35, 0.6])
def test_blue_formula(i):
    assert shade(i, ShaderMode.BLUE) == blue_expected(i)


def test_blue_is_default_and_clamped():
    assert shade(0.1) == shade(0.1, ShaderMode.BLUE)
    r, g, b, a = shade(0.99, ShaderMode.BLUE)
    assert (r, g, a) == (255, 255, 255)
    raw = BlueShader().channels(np.array([0.99]))
    assert raw[0, 0] > 255


def test_shade_column_shape_and_dtype():
    col = shade_column(np.linspace(0, 0.9, 7), ShaderMode.WHITE)
    assert col.shape == (7, 4)
    assert col.dtype == np.uint8
    assert (col[:, 3] == 255).all()


@pytest.mark.parametrize("value", [ShaderMode.WHITE, 1, "white", " WHITE "])
def test_resolve_known_modes(value):
    assert resolve_shader_mode(value) is ShaderMode.WHITE


@pytest.mark.parametrize("value", [42, -1, "purple", None, 2.5, True])
def test_unknown_mode_falls_back_to_blue(value, caplog):
    with caplog.at_level(logging.WARNING, logger="coloring.shaders"):
        assert shade(0.3, value) == shade(0.3, ShaderMode.BLUE)
    assert "falling back" in caplog.text


@pytest.mark.parametrize("value", [ShaderMode.HIST, ShaderMode.INTHIST, 2, 3, "hist"])
def test_histogram_modes_are_unsupported(value):
    with pytest.raises(UnsupportedShaderModeError):
        shade(0.3, value)
    with pytest.raises(UnsupportedShaderModeError):
        get_shader(value)
