"""Coordinate frames for the charge grid and its field subgrid.

Charge space: continuous (x, y), one unit per charge cell, origin at the
corner of cell (0, 0). Field space: integer subcell indices, ``ratio``
subcells per charge cell edge.
"""

import math

import numpy as np

from .errors import GridError
from .types import Cell, Vector2


def check_dimensions(width: int, height: int) -> None:
    """Raise GridError unless both grid dimensions are positive."""
    if width < 1 or height < 1:
        raise GridError(
            f"Grid dimensions must be positive, got {width}x{height}", width=width, height=height
        )


def ratio_for_resolution(resolution: int) -> int:
    """Subdivisions per cell edge for a resolution.

    Always odd so that one subcell is centered on each charge cell.

    Raises:
        GridError: If resolution is below 1
    """
    if resolution < 1:
        raise GridError(f"Resolution must be >= 1, got {resolution}", resolution=resolution)
    return 2 * resolution - 1


def resolution_for_ratio(ratio: int) -> int:
    return (ratio + 1) // 2


def cell_center(x: int, y: int) -> Vector2:
    """Charge-space position of the center of cell (x, y)."""
    return np.array([x + 0.5, y + 0.5], dtype=np.float64)


def cell_of(position: Vector2) -> Cell:
    """Integer cell containing a charge-space position (floor of each axis)."""
    return math.floor(position[0]), math.floor(position[1])


def subcell_index(position: Vector2, ratio: int) -> Cell:
    """Subcell (sx, sy) containing a charge-space position.

    The position is scaled by ``ratio`` and truncated.
    """
    return int(position[0] * ratio), int(position[1] * ratio)


def subcell_centers(width: int, height: int, ratio: int) -> tuple[np.ndarray, np.ndarray]:
    """Charge-space coordinates of every subcell center.

    Args:
        width: Charge grid width in cells
        height: Charge grid height in cells
        ratio: Subdivisions per cell edge

    Returns:
        (px, py) arrays of shape (height * ratio, width * ratio)
    """
    xs = (np.arange(width * ratio, dtype=np.float64) + 0.5) / ratio
    ys = (np.arange(height * ratio, dtype=np.float64) + 0.5) / ratio
    py, px = np.meshgrid(ys, xs, indexing="ij")
    return px, py


__all__ = [
    "check_dimensions",
    "ratio_for_resolution",
    "resolution_for_ratio",
    "cell_center",
    "cell_of",
    "subcell_index",
    "subcell_centers",
]
