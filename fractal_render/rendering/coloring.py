"""
Coloring schemes for escape-time fractal rendering.

Iteration counts are normalized to t = i / max_iter and mapped to 8-bit RGB.
Channels are truncated, not rounded, when scaled to 0-255. Points that never
escaped (i == max_iter) are black in every scheme.
"""

import numpy as np
from enum import Enum
from typing import Tuple
import logging

from ..errors import ConfigurationError, ParseError

logger = logging.getLogger(__name__)

INSIDE_COLOR = (0, 0, 0)


class ColorScheme(Enum):
    """Available mappings from escape fraction to color."""

    RAINBOW = 'rainbow'
    GRAYSCALE = 'grayscale'
    BLACK_AND_WHITE = 'blackandwhite'

    @classmethod
    def from_name(cls, name: str) -> 'ColorScheme':
        """Look up a scheme by name, accepting common spellings."""
        key = name.strip().lower().replace('-', '_')
        scheme = _SCHEME_ALIASES.get(key)
        if scheme is None:
            available = ', '.join(s.value for s in cls)
            raise ParseError('color scheme', name, f"available: {available}")
        return scheme


_SCHEME_ALIASES = {
    'rainbow': ColorScheme.RAINBOW,
    'grayscale': ColorScheme.GRAYSCALE,
    'greyscale': ColorScheme.GRAYSCALE,
    'blackandwhite': ColorScheme.BLACK_AND_WHITE,
    'black_and_white': ColorScheme.BLACK_AND_WHITE,
    'bw': ColorScheme.BLACK_AND_WHITE,
}


def _rainbow(t: float) -> Tuple[int, int, int]:
    r = t ** 0.3
    g = t ** 0.5
    b = 1.0 - t ** 0.7
    return (int(r * 255.0), int(g * 255.0), int(b * 255.0))


def _grayscale(t: float) -> Tuple[int, int, int]:
    intensity = int(t * 255.0)
    return (intensity, intensity, intensity)


_SCHEME_FUNCTIONS = {
    ColorScheme.RAINBOW: _rainbow,
    ColorScheme.GRAYSCALE: _grayscale,
    ColorScheme.BLACK_AND_WHITE: _grayscale,
}


def map_color(iterations: int, max_iter: int,
              scheme: ColorScheme = ColorScheme.RAINBOW) -> Tuple[int, int, int]:
    """
    Map one iteration count to an RGB triple.

    Args:
        iterations: Escape count returned by the evaluator
        max_iter: Iteration bound used for the evaluation
        scheme: Color scheme

    Returns:
        (r, g, b) with each channel in 0-255
    """
    if max_iter <= 0:
        raise ConfigurationError("max_iter must be positive")

    if iterations >= max_iter:
        return INSIDE_COLOR

    t = iterations / max_iter
    return _SCHEME_FUNCTIONS[scheme](t)


def colorize(iterations: np.ndarray, max_iter: int,
             scheme: ColorScheme = ColorScheme.RAINBOW) -> np.ndarray:
    """
    Map an array of iteration counts to an RGB image.

    Each distinct count is colored once with map_color, so the result is
    identical to coloring every pixel individually.

    Args:
        iterations: 2D array of escape counts
        max_iter: Iteration bound
        scheme: Color scheme

    Returns:
        uint8 array shaped (rows, cols, 3)
    """
    if max_iter <= 0:
        raise ConfigurationError("max_iter must be positive")

    values, inverse = np.unique(iterations, return_inverse=True)
    palette = np.array([map_color(int(v), max_iter, scheme) for v in values],
                       dtype=np.uint8).reshape(-1, 3)

    return palette[inverse.reshape(iterations.shape)]
