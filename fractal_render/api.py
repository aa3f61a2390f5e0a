"""
Main API classes for fractal generation.

This module provides the high-level interface for fractal generation,
combining coordinate mapping, parallel evaluation, coloring and export.
"""

import numpy as np
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from pathlib import Path
import logging
import math
import time

from .core.fractal_types import FractalKind
from .core.math_functions import ComplexPlane
from .rendering.coloring import ColorScheme
from .rendering.image_output import ImageExporter, RenderMetadata
from .acceleration.parallel import ParallelRenderer, ProgressCallback
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderParameters:
    """Parameters for a single fractal render."""

    # Output and capture resolution
    width: int
    height: int
    capture_width: int
    capture_height: int

    # Fractal parameters
    max_iterations: int
    scale: float
    zoom: float = 1.0
    pan: complex = 0j
    fractal: FractalKind = field(default_factory=FractalKind.mandelbrot)

    # Coloring
    color_scheme: ColorScheme = ColorScheme.RAINBOW

    # Performance
    workers: Optional[int] = None
    tile_size: int = 64

    def validate(self):
        """Validate configuration parameters."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("Output width and height must be positive")

        if self.capture_width <= 0 or self.capture_height <= 0:
            raise ConfigurationError("Capture width and height must be positive")

        if self.max_iterations <= 0:
            raise ConfigurationError("max_iterations must be positive")

        if not (math.isfinite(self.scale) and self.scale > 0):
            raise ConfigurationError("scale must be a finite positive number")

        if not (math.isfinite(self.zoom) and self.zoom > 0):
            raise ConfigurationError("zoom must be a finite positive number")

        if not (math.isfinite(self.pan.real) and math.isfinite(self.pan.imag)):
            raise ConfigurationError("pan must be a finite complex number")

        if self.workers is not None and self.workers < 1:
            raise ConfigurationError("workers must be >= 1")

        if self.tile_size < 1:
            raise ConfigurationError("tile_size must be >= 1")

        # scale / zoom can still overflow to inf
        self.create_plane()

    def create_plane(self) -> ComplexPlane:
        """Get the coordinate mapping for the capture buffer."""
        return ComplexPlane(self.capture_width, self.capture_height, self.scale,
                            zoom=self.zoom, pan=self.pan)

    def to_metadata(self) -> RenderMetadata:
        return RenderMetadata(
            fractal_type=self.fractal.name,
            resolution=(self.width, self.height),
            capture_resolution=(self.capture_width, self.capture_height),
            max_iterations=self.max_iterations,
            scale=self.scale,
            zoom=self.zoom,
            pan=(self.pan.real, self.pan.imag),
            color_scheme=self.color_scheme.value,
            fractal_parameters=self.fractal.to_dict(),
        )


class FractalRenderer:
    """Main fractal rendering engine."""

    def __init__(self, params: RenderParameters, image_exporter: Optional[ImageExporter] = None):
        """
        Initialize fractal renderer.

        Args:
            params: Render parameters, validated here
            image_exporter: Exporter used by render_to_file
        """
        params.validate()
        self.params = params
        self.image_exporter = image_exporter or ImageExporter()
        self.parallel = ParallelRenderer(params.workers, params.tile_size)

        logger.debug(f"FractalRenderer initialized: capture {params.capture_width}x{params.capture_height}, "
                     f"output {params.width}x{params.height}")

    def render(self, progress_callback: Optional[ProgressCallback] = None) -> np.ndarray:
        """
        Render the capture-resolution buffer.

        Args:
            progress_callback: Optional (done_pixels, total_pixels) callback

        Returns:
            uint8 RGB array shaped (capture_height, capture_width, 3)
        """
        params = self.params
        logger.info(f"Starting render: {params.fractal.get_description()}")

        return self.parallel.render(
            params.fractal,
            params.create_plane(),
            params.max_iterations,
            params.color_scheme,
            progress_callback,
        )

    def render_to_file(self, output_path: Path,
                       progress_callback: Optional[ProgressCallback] = None) -> Path:
        """
        Render, resample to the output resolution and save as PNG.

        Args:
            output_path: Output file path
            progress_callback: Optional (done_pixels, total_pixels) callback

        Returns:
            Path of the written file
        """
        start_time = time.time()

        buffer = self.render(progress_callback)
        path = self.image_exporter.save_image(
            buffer, Path(output_path), self.params.width, self.params.height,
            metadata=self.params.to_metadata(),
        )

        logger.info(f"Render complete: {time.time() - start_time:.2f}s")
        return path

    def get_summary(self) -> Dict[str, Any]:
        """Summarize the render configuration."""
        params = self.params
        return {
            'fractal': params.fractal.to_dict(),
            'resolution': f"{params.width}x{params.height}",
            'capture_resolution': f"{params.capture_width}x{params.capture_height}",
            'max_iterations': params.max_iterations,
            'bounds': params.create_plane().bounds,
            'color_scheme': params.color_scheme.value,
            'workers': self.parallel.num_workers,
            'tile_size': self.parallel.tile_size,
        }
