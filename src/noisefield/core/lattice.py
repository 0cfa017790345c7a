"""Lattice noise primitives.

Implements the fade curve, gradient hashing and single-octave 2D gradient
noise using numpy, so every function accepts scalars or arrays.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .permutation import TABLE_PERIOD

# 16 gradient directions, 22.5 degrees apart
GRADIENT_COUNT = 16
_GRADIENT_ANGLES = np.arange(GRADIENT_COUNT, dtype=np.float64) * np.pi / 8
_GRADIENT_COS = np.cos(_GRADIENT_ANGLES)
_GRADIENT_SIN = np.sin(_GRADIENT_ANGLES)


def fade(t: ArrayLike) -> NDArray[np.floating]:
    """Quintic fade curve: 6t^5 - 15t^4 + 10t^3"""
    t = np.asarray(t)
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(a: ArrayLike, b: ArrayLike, t: ArrayLike) -> NDArray[np.floating]:
    """Linear interpolation."""
    a = np.asarray(a)
    return a + t * (b - a)


def gradient(hash_val: ArrayLike, x: ArrayLike, y: ArrayLike) -> NDArray[np.floating]:
    """Dot product of an offset with the unit direction selected by a hash.

    Only the low 4 bits of the hash pick the direction, at angle
    ``(hash & 15) * pi / 8``.

    Args:
        hash_val: Integer hash value(s)
        x: Offset X component(s)
        y: Offset Y component(s)

    Returns:
        ``cos(angle) * x + sin(angle) * y``
    """
    x = np.asarray(x)
    y = np.asarray(y)
    h = np.asarray(hash_val) & (GRADIENT_COUNT - 1)
    dtype = np.result_type(x, y, np.float32)
    cos = _GRADIENT_COS.astype(dtype, copy=False)[h]
    sin = _GRADIENT_SIN.astype(dtype, copy=False)[h]
    return cos * x + sin * y


def _wrap_cell(coord: NDArray[np.floating]) -> NDArray[np.intp]:
    """Map floored lattice coordinates onto the hash period [0, 255]."""
    return np.mod(coord, TABLE_PERIOD).astype(np.intp)


def single_octave(
    table: NDArray[np.integer],
    x: ArrayLike,
    y: ArrayLike,
    grid_size: int,
) -> NDArray[np.floating]:
    """Evaluate one octave of 2D gradient noise.

    Lattice points sit every ``grid_size`` units. Lattice coordinates are
    wrapped onto the 256 period before hashing, so negative and very large
    coordinates are valid.

    Args:
        table: Mirrored 512-entry permutation table
        x: X coordinate(s)
        y: Y coordinate(s)
        grid_size: Lattice spacing (positive)

    Returns:
        Noise value(s) in [0, 1], shaped like the broadcast of x and y
    """
    x = np.asarray(x)
    y = np.asarray(y)
    dtype = np.result_type(x, y, np.float32)

    # Scale into lattice space
    sx = x / dtype.type(grid_size)
    sy = y / dtype.type(grid_size)

    # Cell and offset within the cell
    cell_x = np.floor(sx)
    cell_y = np.floor(sy)
    local_x = sx - cell_x
    local_y = sy - cell_y

    x0 = _wrap_cell(cell_x)
    y0 = _wrap_cell(cell_y)
    x1 = (x0 + 1) & (TABLE_PERIOD - 1)
    y1 = (y0 + 1) & (TABLE_PERIOD - 1)

    # Hash cell corners
    top_left = table[table[x0] + y0]
    top_right = table[table[x1] + y0]
    bottom_left = table[table[x0] + y1]
    bottom_right = table[table[x1] + y1]

    # Gradient dot products against the offset from each corner
    one = dtype.type(1)
    dot_tl = gradient(top_left, local_x, local_y)
    dot_tr = gradient(top_right, local_x - one, local_y)
    dot_bl = gradient(bottom_left, local_x, local_y - one)
    dot_br = gradient(bottom_right, local_x - one, local_y - one)

    u = fade(local_x)
    v = fade(local_y)

    # Bilinear interpolation
    lerp_top = lerp(dot_tl, dot_tr, u)
    lerp_bottom = lerp(dot_bl, dot_br, u)
    result = lerp(lerp_top, lerp_bottom, v)

    half = dtype.type(0.5)
    return result * half + half
