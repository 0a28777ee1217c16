import logging
from typing import Dict, Tuple

import numpy as np

from coloring.base import ColoringStrategy
from rendering.errors import UnsupportedShaderModeError
from utils.enums import ShaderMode

logger = logging.getLogger(__name__)

DEFAULT_SHADER = ShaderMode.BLUE


class BlueShader(ColoringStrategy):
    """
    Empirically tuned blue/white gradient; deep escapes go bright blue,
    points close to the set fade towards white.
    """
    def channels(self, intensity: np.ndarray) -> np.ndarray:
        int1 = intensity * (-0.25 * np.log(-intensity / 11.112347 + 0.09) - 0.25)
        int2 = intensity * (1 - 2.4 * np.log(intensity + 1e-10))
        rgba = np.empty((intensity.shape[0], 4), dtype=np.float64)
        rgba[:, 0] = 255 * int1
        rgba[:, 1] = 255 * int1
        rgba[:, 2] = 255 * int2
        rgba[:, 3] = 255
        return rgba


class WhiteShader(ColoringStrategy):
    def channels(self, intensity: np.ndarray) -> np.ndarray:
        rgba = np.empty((intensity.shape[0], 4), dtype=np.float64)
        rgba[:, :3] = 255 * intensity[:, None]
        rgba[:, 3] = 255
        return rgba


SHADERS: Dict[ShaderMode, ColoringStrategy] = {
    ShaderMode.BLUE: BlueShader(),
    ShaderMode.WHITE: WhiteShader(),
}


def resolve_shader_mode(value) -> ShaderMode:
    """
    Accepts a ShaderMode, its integer value or its name (any case).
    Unrecognised values fall back to the default shader.
    """
    if isinstance(value, ShaderMode):
        return value
    mode = None
    if isinstance(value, str):
        mode = ShaderMode.__members__.get(value.strip().upper())
    elif isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        try:
            mode = ShaderMode(int(value))
        except ValueError:
            mode = None
    if mode is None:
        logger.warning("Unknown shader mode %r, falling back to %s", value, DEFAULT_SHADER.name)
        return DEFAULT_SHADER
    return mode


def get_shader(mode) -> ColoringStrategy:
    """
    Strategy for `mode`. Known modes without an implementation raise
    UnsupportedShaderModeError.
    """
    mode = resolve_shader_mode(mode)
    try:
        return SHADERS[mode]
    except KeyError:
        raise UnsupportedShaderModeError(mode) from None


def shade_column(intensities: np.ndarray, mode=DEFAULT_SHADER) -> np.ndarray:
    """Colours a column of intensities into an (n, 4) uint8 RGBA array."""
    return get_shader(mode).apply(intensities)


def shade(intensity: float, mode=DEFAULT_SHADER) -> Tuple[int, int, int, int]:
    r, g, b, a = shade_column(np.array([intensity]), mode)[0]
    return int(r), int(g), int(b), int(a)
