"""The charge grid: tiles of signed charges plus a pending-change log.

Edits are cheap; the cached field is brought up to date in batches by
:meth:`ChargeGrid.solve`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..core.frames import check_dimensions, ratio_for_resolution, resolution_for_ratio
from ..core.logging import get_logger
from ..core.types import (
    CHARGE_MAX,
    CHARGE_MIN,
    BorderPoint,
    Cell,
    ChangeEntry,
    ChargeArray,
    Polyline,
    Vector2,
)
from .borders import find_borders
from .field_grid import FieldGrid
from .lines import MAX_LINE_STEPS, trace_lines
from .solver import solve

if TYPE_CHECKING:
    from ..core.config import Scene

logger = get_logger(__name__)


class ChargeGrid:
    """A ``width x height`` grid of charges owning its cached field.

    Attributes:
        width: Width in cells, fixed for the grid's lifetime
        height: Height in cells, fixed for the grid's lifetime
        tiles: Charges, int8 array of shape (height, width)
        changes: Pending (previous_charge, x, y) entries not yet solved
        field: Cached field samples
    """

    def __init__(self, width: int, height: int, resolution: int = 1):
        check_dimensions(width, height)

        self.width = width
        self.height = height
        self.tiles: ChargeArray = np.zeros((height, width), dtype=np.int8)
        self.changes: list[ChangeEntry] = []
        self.field = FieldGrid(width, height, ratio_for_resolution(resolution))

    @classmethod
    def from_scene(cls, scene: Scene) -> ChargeGrid:
        """Build a grid from a validated scene and place its charges."""
        grid = cls(scene.grid.width, scene.grid.height, scene.grid.resolution)
        for spec in scene.charges:
            grid.update_tile(spec.charge, spec.x, spec.y)
        return grid

    @property
    def resolution(self) -> int:
        return resolution_for_ratio(self.field.ratio)

    @property
    def pending_changes(self) -> int:
        """Number of change log entries awaiting a solve."""
        return len(self.changes)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def charge_at(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid")
        return int(self.tiles[y, x])

    def update_tile(self, charge: int, x: int, y: int) -> bool:
        """Set the charge of cell (x, y).

        Args:
            charge: New signed charge, -128..127
            x, y: Cell coordinates, must be in bounds

        Returns:
            True if the stored charge changed, False if it already equaled
            ``charge``

        Raises:
            IndexError: If (x, y) is out of bounds
            ValueError: If ``charge`` does not fit in a signed byte
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid")
        if not CHARGE_MIN <= charge <= CHARGE_MAX:
            raise ValueError(f"Charge must be between {CHARGE_MIN} and {CHARGE_MAX}, got {charge}")

        old_charge = int(self.tiles[y, x])
        if old_charge == charge:
            return False

        self.changes.append((old_charge, x, y))
        self.tiles[y, x] = charge
        return True

    def set_resolution(self, resolution: int) -> None:
        """Reallocate the field at a new resolution.

        The new field starts at zero, so every charged cell is logged as a
        change from 0 and the next solve rebuilds the whole field.
        """
        self.field = FieldGrid(self.width, self.height, ratio_for_resolution(resolution))
        self.changes = [(0, x, y) for x, y in self.charged_cells()]

        if logger.is_enabled_for(logging.DEBUG):
            logger.debug(
                "Field grid rebuilt",
                {
                    "resolution": resolution,
                    "ratio": self.field.ratio,
                    "field_shape": list(self.field.shape),
                    "reseeded_changes": len(self.changes),
                },
            )

    def resized(self, width: int, height: int) -> ChargeGrid:
        """A new grid of a different size at the same resolution.

        Charges inside the new bounds are carried over; the returned grid's
        field is unsolved.
        """
        grid = ChargeGrid(width, height, self.resolution)
        for x, y in self.charged_cells():
            if grid.in_bounds(x, y):
                grid.update_tile(int(self.tiles[y, x]), x, y)
        return grid

    def charged_cells(self) -> list[Cell]:
        """All charged cells, ordered by x then y."""
        # Transposed so nonzero() walks x in the outer loop
        xs, ys = np.nonzero(self.tiles.T)
        return list(zip(xs.tolist(), ys.tolist()))

    def sample(self, position: Vector2) -> tuple[Vector2, float]:
        """Cached force and potential at a charge-space position."""
        return self.field.sample(position)

    def solve(self) -> None:
        """Fold the change log into the cached field."""
        solve(self)

    def borders(self) -> list[BorderPoint]:
        return find_borders(self)

    def trace_lines(self, max_steps: int = MAX_LINE_STEPS) -> list[Polyline]:
        return trace_lines(self, max_steps=max_steps)

    def __repr__(self) -> str:
        return (
            f"ChargeGrid(width={self.width}, height={self.height}, "
            f"resolution={self.resolution}, pending_changes={self.pending_changes})"
        )


__all__ = [
    "ChargeGrid",
]
