"""
Parallel tile-based fractal computation.

The capture buffer is split into rectangular tiles; each tile is evaluated
and colored independently on a thread pool and written into its own slice
of the shared output buffer. The escape kernel releases the GIL, so threads
run concurrently without copying tiles between processes.
"""

import numpy as np
from typing import Callable, List, Optional
import logging
import os
import time
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..core.math_functions import ComplexPlane
from ..core.fractal_types import FractalFamily, FractalKind
from ..rendering.coloring import ColorScheme, colorize
from .numba_backend import julia_iterations, mandelbrot_iterations

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class TileSpec:
    """Specification for a single tile in parallel rendering."""
    tile_id: int
    x_start: int
    x_end: int
    y_start: int
    y_end: int

    @property
    def width(self) -> int:
        return self.x_end - self.x_start

    @property
    def height(self) -> int:
        return self.y_end - self.y_start

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def create_tile_grid(width: int, height: int, tile_size: int = 64) -> List[TileSpec]:
    """
    Create a grid of tiles covering every pixel exactly once.

    Args:
        width: Total image width
        height: Total image height
        tile_size: Target tile size (pixels)

    Returns:
        List of TileSpec objects in row-major order
    """
    tiles = []
    tile_id = 0

    for y in range(0, height, tile_size):
        for x in range(0, width, tile_size):
            tiles.append(TileSpec(
                tile_id=tile_id,
                x_start=x,
                x_end=min(x + tile_size, width),
                y_start=y,
                y_end=min(y + tile_size, height),
            ))
            tile_id += 1

    logger.debug(f"Created {len(tiles)} tiles of target size {tile_size}x{tile_size}")
    return tiles


def compute_tile_iterations(fractal: FractalKind, plane: ComplexPlane,
                            tile: TileSpec, max_iter: int) -> np.ndarray:
    """
    Evaluate escape counts for one tile.

    Returns:
        Iteration counts shaped (tile.height, tile.width)
    """
    x, y = plane.create_coordinate_arrays(tile.x_start, tile.x_end, tile.y_start, tile.y_end)

    if fractal.family is FractalFamily.JULIA:
        return julia_iterations(x, y, fractal.c, max_iter)
    return mandelbrot_iterations(x, y, max_iter)


def get_optimal_worker_count() -> int:
    """Get the number of worker threads to use by default."""
    return os.cpu_count() or 1


class ParallelRenderer:
    """Thread-pool renderer filling a capture buffer tile by tile."""

    def __init__(self, num_workers: Optional[int] = None, tile_size: int = 64):
        """
        Initialize parallel renderer.

        Args:
            num_workers: Number of worker threads (None for CPU count)
            tile_size: Size of tiles for parallel processing
        """
        if num_workers is None:
            self.num_workers = get_optimal_worker_count()
        else:
            self.num_workers = max(1, num_workers)

        self.tile_size = tile_size
        logger.debug(f"Parallel renderer: {self.num_workers} workers, {tile_size}x{tile_size} tiles")

    def _render_tile(self, buffer: np.ndarray, fractal: FractalKind, plane: ComplexPlane,
                     tile: TileSpec, max_iter: int, scheme: ColorScheme) -> TileSpec:
        iterations = compute_tile_iterations(fractal, plane, tile, max_iter)
        buffer[tile.y_start:tile.y_end, tile.x_start:tile.x_end] = colorize(iterations, max_iter, scheme)
        return tile

    def render(self, fractal: FractalKind, plane: ComplexPlane, max_iter: int,
               scheme: ColorScheme = ColorScheme.RAINBOW,
               progress_callback: Optional[ProgressCallback] = None) -> np.ndarray:
        """
        Render the full capture buffer.

        Args:
            fractal: Fractal kind to render
            plane: Coordinate mapping for the capture buffer
            max_iter: Iteration bound
            scheme: Color scheme
            progress_callback: Called as (done_pixels, total_pixels) after each tile

        Returns:
            uint8 RGB buffer shaped (plane.height, plane.width, 3)
        """
        start_time = time.time()

        tiles = create_tile_grid(plane.width, plane.height, self.tile_size)
        buffer = np.zeros((plane.height, plane.width, 3), dtype=np.uint8)
        total = plane.width * plane.height
        done = 0

        if self.num_workers == 1 or len(tiles) == 1:
            for tile in tiles:
                self._render_tile(buffer, fractal, plane, tile, max_iter, scheme)
                done += tile.pixel_count
                if progress_callback:
                    progress_callback(done, total)
        else:
            logger.debug(f"Processing {len(tiles)} tiles with {self.num_workers} workers")

            with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
                futures = [executor.submit(self._render_tile, buffer, fractal, plane,
                                           tile, max_iter, scheme)
                           for tile in tiles]

                try:
                    for future in as_completed(futures):
                        tile = future.result()
                        done += tile.pixel_count
                        if progress_callback:
                            progress_callback(done, total)
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise

        logger.info(f"Rendered {len(tiles)} tiles ({total:,} pixels) in {time.time() - start_time:.2f}s")
        return buffer
