"""
Numba JIT compilation backend for escape-time evaluation.

The tile kernel is compiled with nogil=True so worker threads evaluate
disjoint tiles truly in parallel while writing into a shared buffer.
"""

import numpy as np
import logging

import numba
from numba import njit

from ..core.math_functions import ESCAPE_RADIUS_SQ

logger = logging.getLogger(__name__)
logger.debug(f"Numba available: {numba.__version__}")


@njit(nogil=True, cache=True)
def escape_time_tile(seed_real, seed_imag, c_real, c_imag, max_iter, out):
    """
    JIT-compiled escape-time kernel for one tile.

    Seed and parameter arrays are broadcast per element: pass scalar-filled
    arrays for the component that is constant across the tile.

    Args:
        seed_real, seed_imag: Initial z components, shape (rows, cols)
        c_real, c_imag: Recurrence parameter components, shape (rows, cols)
        max_iter: Iteration bound
        out: Integer array receiving the iteration counts
    """
    rows, cols = out.shape

    for i in range(rows):
        for j in range(cols):
            zr = seed_real[i, j]
            zi = seed_imag[i, j]
            cr = c_real[i, j]
            ci = c_imag[i, j]

            n = 0
            while n < max_iter and zr * zr + zi * zi <= ESCAPE_RADIUS_SQ:
                # z = z^2 + c
                zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
                n += 1

            out[i, j] = n

    return out


def mandelbrot_iterations(c_real: np.ndarray, c_imag: np.ndarray, max_iter: int) -> np.ndarray:
    """
    Compute Mandelbrot iteration counts for a tile of mapped points.

    Args:
        c_real, c_imag: Mapped pixel components
        max_iter: Iteration bound

    Returns:
        int64 array of iteration counts
    """
    zeros = np.zeros_like(c_real)
    out = np.empty(c_real.shape, dtype=np.int64)
    return escape_time_tile(zeros, zeros, c_real, c_imag, max_iter, out)


def julia_iterations(z_real: np.ndarray, z_imag: np.ndarray, c: complex, max_iter: int) -> np.ndarray:
    """
    Compute Julia iteration counts for a tile of mapped points.

    Args:
        z_real, z_imag: Mapped pixel components used as seeds
        c: Julia constant
        max_iter: Iteration bound

    Returns:
        int64 array of iteration counts
    """
    c_real = np.full_like(z_real, c.real)
    c_imag = np.full_like(z_imag, c.imag)
    out = np.empty(z_real.shape, dtype=np.int64)
    return escape_time_tile(z_real, z_imag, c_real, c_imag, max_iter, out)
