"""
Core mathematical functions for fractal iteration.

This module provides the pixel-to-complex-plane mapping and the scalar
escape-time recurrence shared by Mandelbrot and Julia rendering.
"""

import numpy as np
from typing import Tuple
import logging
import math

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

ESCAPE_RADIUS_SQ = 4.0


class ComplexPlane:
    """Represents the complex plane window seen by a capture buffer."""

    def __init__(self, width: int, height: int, scale: float,
                 zoom: float = 1.0, pan: complex = 0j):
        """
        Initialize plane mapping for a capture buffer.

        Args:
            width, height: Capture resolution in pixels
            scale: Width of the plane covered at zoom 1
            zoom: Magnification factor around pan
            pan: Complex point shown at the buffer center
        """
        if width <= 0 or height <= 0:
            raise ConfigurationError("Capture width and height must be positive")
        if not (math.isfinite(scale) and scale > 0):
            raise ConfigurationError("scale must be a finite positive number")
        if not (math.isfinite(zoom) and zoom > 0):
            raise ConfigurationError("zoom must be a finite positive number")
        pan = complex(pan)
        if not (math.isfinite(pan.real) and math.isfinite(pan.imag)):
            raise ConfigurationError("pan must be a finite complex number")

        self.width = width
        self.height = height
        self.scale = scale
        self.zoom = zoom
        self.pan = pan

        # Size of the visible window on each axis
        self.view_size = scale / zoom
        if not (math.isfinite(self.view_size) and self.view_size > 0):
            raise ConfigurationError(f"scale / zoom must give a finite positive view size, got {self.view_size}")

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Get (xmin, xmax, ymin, ymax) of the visible window."""
        half = self.view_size / 2.0
        return (self.pan.real - half, self.pan.real + half,
                self.pan.imag - half, self.pan.imag + half)

    def pixel_to_complex(self, px: int, py: int) -> complex:
        """Convert pixel coordinates to complex number."""
        real = (px - 0.5 * self.width) * self.view_size / self.width + self.pan.real
        imag = (py - 0.5 * self.height) * self.view_size / self.height + self.pan.imag
        return complex(real, imag)

    def create_coordinate_arrays(self, x_start: int, x_end: int,
                                 y_start: int, y_end: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Create real and imaginary coordinate arrays for a pixel rectangle.

        Args:
            x_start, x_end: Column range (end exclusive)
            y_start, y_end: Row range (end exclusive)

        Returns:
            Tuple of (real_coords, imag_coords) arrays shaped (rows, cols)
        """
        px = np.arange(x_start, x_end, dtype=np.float64)
        py = np.arange(y_start, y_end, dtype=np.float64)

        # Same operation order as pixel_to_complex so results match bit for bit
        x = (px - 0.5 * self.width) * self.view_size / self.width + self.pan.real
        y = (py - 0.5 * self.height) * self.view_size / self.height + self.pan.imag
        return np.meshgrid(x, y)

    def create_complex_array(self, x_start: int = 0, x_end: int = None,
                             y_start: int = 0, y_end: int = None) -> np.ndarray:
        """
        Create a complex coordinate array, by default for the whole buffer.

        Returns:
            2D complex128 array indexed [row, col]
        """
        if x_end is None:
            x_end = self.width
        if y_end is None:
            y_end = self.height
        x, y = self.create_coordinate_arrays(x_start, x_end, y_start, y_end)
        return x + 1j * y


def escape_time(z0: complex, c: complex, max_iter: int) -> int:
    """
    Count iterations of z -> z^2 + c before |z| exceeds 2.

    Args:
        z0: Initial z value
        c: Recurrence parameter
        max_iter: Iteration bound

    Returns:
        Iteration count; max_iter means the orbit stayed bounded
    """
    zr, zi = z0.real, z0.imag
    cr, ci = c.real, c.imag
    n = 0

    while n < max_iter and zr * zr + zi * zi <= ESCAPE_RADIUS_SQ:
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        n += 1

    return n
