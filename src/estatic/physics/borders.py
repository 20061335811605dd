"""Seed points for field lines: empty cells touching a charge."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.types import BorderPoint

if TYPE_CHECKING:
    from .charge_grid import ChargeGrid

# Moore neighborhood, in search order
MOORE_NEIGHBORHOOD = (
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)


def find_borders(grid: ChargeGrid) -> list[BorderPoint]:
    """Uncharged cells 8-adjacent to a charged cell.

    Each entry is (charge of the adjacent charged cell, x, y). An empty cell
    bordering charges of different values is listed once per value, in the
    order charged cells and neighbors are visited.
    """
    borders: list[BorderPoint] = []
    seen: set[BorderPoint] = set()

    for cx, cy in grid.charged_cells():
        charge = int(grid.tiles[cy, cx])
        for dx, dy in MOORE_NEIGHBORHOOD:
            nx, ny = cx + dx, cy + dy
            if not grid.in_bounds(nx, ny) or grid.tiles[ny, nx] != 0:
                continue

            border = (charge, nx, ny)
            if border not in seen:
                seen.add(border)
                borders.append(border)

    return borders


__all__ = [
    "MOORE_NEIGHBORHOOD",
    "find_borders",
]
