"""Cached field samples on a subdivided grid.

Each charge cell is split into ``ratio x ratio`` subcells. Every subcell holds
the superposed force vector and potential of all charges, sampled at the
subcell center.
"""

from __future__ import annotations

import numpy as np

from ..core.errors import GridError
from ..core.frames import check_dimensions, subcell_centers, subcell_index
from ..core.types import FloatArray, Vector2


class FieldGrid:
    """Force and potential samples for a ``width x height`` charge grid.

    Attributes:
        width: Charge grid width in cells
        height: Charge grid height in cells
        ratio: Subdivisions per cell edge (odd, >= 1)
        force: Force vectors, shape (height * ratio, width * ratio, 2)
        potential: Potentials, shape (height * ratio, width * ratio)
    """

    def __init__(self, width: int, height: int, ratio: int):
        check_dimensions(width, height)
        if ratio < 1 or ratio % 2 == 0:
            raise GridError(f"Field ratio must be an odd number >= 1, got {ratio}", ratio=ratio)

        self.width = width
        self.height = height
        self.ratio = ratio

        shape = (height * ratio, width * ratio)
        self.force: FloatArray = np.zeros(shape + (2,), dtype=np.float64)
        self.potential: FloatArray = np.zeros(shape, dtype=np.float64)

    @property
    def shape(self) -> tuple[int, int]:
        """Field grid dimensions as (rows, columns)."""
        return self.potential.shape

    def positions(self) -> tuple[np.ndarray, np.ndarray]:
        """Charge-space coordinates of every subcell center."""
        return subcell_centers(self.width, self.height, self.ratio)

    def sample(self, position: Vector2) -> tuple[Vector2, float]:
        """Force and potential at a charge-space position.

        Args:
            position: (x, y) in charge-grid coordinates

        Returns:
            Tuple of (force vector, potential). The force is a view into the
            grid and must not be modified by the caller.

        Raises:
            IndexError: If the position lies outside the grid
        """
        x, y = position[0], position[1]
        if not (0.0 <= x < self.width and 0.0 <= y < self.height):
            raise IndexError(
                f"Position ({x}, {y}) is outside the {self.width}x{self.height} grid"
            )

        sx, sy = subcell_index(position, self.ratio)
        # x * ratio can round up to the edge for x just below width
        rows, cols = self.shape
        sx = min(sx, cols - 1)
        sy = min(sy, rows - 1)

        return self.force[sy, sx], float(self.potential[sy, sx])

    def is_zero(self) -> bool:
        return not (self.force.any() or self.potential.any())

    def copy(self) -> FieldGrid:
        field = FieldGrid.__new__(FieldGrid)
        field.width = self.width
        field.height = self.height
        field.ratio = self.ratio
        field.force = self.force.copy()
        field.potential = self.potential.copy()
        return field

    def __repr__(self) -> str:
        return f"FieldGrid(width={self.width}, height={self.height}, ratio={self.ratio})"


def point_field(
    charge: float, dx: np.ndarray, dy: np.ndarray
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Field and potential of a point charge at displacements (dx, dy).

    ``force = normalize(delta) * q / |delta|^2`` and ``potential = q / |delta|``.
    A zero displacement contributes nothing.

    Args:
        charge: Signed charge q
        dx, dy: Displacement arrays from the charge to the sample points

    Returns:
        Tuple of (force_x, force_y, potential) arrays shaped like dx
    """
    dist_sq = dx * dx + dy * dy
    dist = np.sqrt(dist_sq)
    nonzero = dist > 0.0

    # Divide only where the distance is nonzero; zeros elsewhere
    inv_dist = np.divide(1.0, dist, out=np.zeros_like(dist), where=nonzero)
    inv_dist_sq = np.divide(1.0, dist_sq, out=np.zeros_like(dist_sq), where=nonzero)

    strength = charge * inv_dist_sq
    force_x = dx * inv_dist * strength
    force_y = dy * inv_dist * strength
    potential = charge * inv_dist

    return force_x, force_y, potential


__all__ = [
    "FieldGrid",
    "point_field",
]
