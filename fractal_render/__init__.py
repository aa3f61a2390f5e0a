"""
Escape-time fractal rendering library.

This library renders Mandelbrot and Julia sets into a capture-resolution
RGB buffer in parallel, then resamples it with a Lanczos filter to the
requested output resolution and writes a PNG.

Example usage:
    >>> from fractal_render import FractalRenderer, RenderParameters, FractalKind
    >>> params = RenderParameters(width=800, height=800, capture_width=1600,
    ...                           capture_height=1600, max_iterations=200, scale=4.0,
    ...                           fractal=FractalKind.julia(complex(-0.7, 0.27015)))
    >>> FractalRenderer(params).render_to_file("julia.png")
"""

__version__ = "1.0.0"

from fractal_render.core.fractal_types import FractalFamily, FractalKind, JULIA_PRESETS
from fractal_render.core.math_functions import ComplexPlane, escape_time
from fractal_render.rendering.coloring import ColorScheme, map_color, colorize
from fractal_render.rendering.image_output import ImageExporter
from fractal_render.errors import (
    FractalRenderError,
    UsageError,
    ParseError,
    ConfigurationError,
    OutputError,
)

# Main API classes
from fractal_render.api import FractalRenderer, RenderParameters

__all__ = [
    "FractalRenderer",
    "RenderParameters",
    "FractalFamily",
    "FractalKind",
    "JULIA_PRESETS",
    "ComplexPlane",
    "escape_time",
    "ColorScheme",
    "map_color",
    "colorize",
    "ImageExporter",
    "FractalRenderError",
    "UsageError",
    "ParseError",
    "ConfigurationError",
    "OutputError",
]
