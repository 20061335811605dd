"""Incremental field solver.

The field grid caches the superposition of every charge's field. Instead of
recomputing it from all charges, each solve only removes the previous
contribution of every changed cell and adds its current one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.logging import get_logger
from ..core.types import Cell, ChangeEntry
from .field_grid import FieldGrid, point_field

if TYPE_CHECKING:
    from .charge_grid import ChargeGrid

logger = get_logger(__name__)


def apply_charge(field: FieldGrid, charge: float, x: int, y: int, px, py) -> None:
    """Add the field of ``charge`` at cell (x, y) to every subcell.

    A negative ``charge`` removes a previously added contribution exactly
    (up to rounding).

    Args:
        field: Field grid to update in place
        charge: Signed charge, negated to subtract
        x, y: Charge cell
        px, py: Subcell center coordinates from ``field.positions()``
    """
    force_x, force_y, potential = point_field(charge, px - (x + 0.5), py - (y + 0.5))
    field.force[..., 0] += force_x
    field.force[..., 1] += force_y
    field.potential += potential


def coalesce_changes(changes: list[ChangeEntry]) -> dict[Cell, int]:
    """Map each changed cell to the charge the field currently accounts for.

    A cell edited several times between solves keeps the previous charge of
    its first entry. Cells stay in first-seen order.
    """
    pending: dict[Cell, int] = {}
    for old_charge, x, y in changes:
        pending.setdefault((x, y), old_charge)
    return pending


def solve(grid: ChargeGrid) -> None:
    """Bring ``grid.field`` up to date with the pending change log.

    For every changed cell, in log order, the contribution of the charge the
    field last saw there is subtracted and the current charge's added. The
    log is cleared afterwards. Cost is proportional to the number of changed
    cells times the number of subcells.
    """
    if not grid.changes:
        return

    field = grid.field
    with logger.timed("Field solved", logging.DEBUG) as stats:
        px, py = field.positions()

        pending = coalesce_changes(grid.changes)
        for (x, y), old_charge in pending.items():
            charge = int(grid.tiles[y, x])
            if old_charge == charge:
                continue
            if old_charge != 0:
                apply_charge(field, -old_charge, x, y, px, py)
            if charge != 0:
                apply_charge(field, charge, x, y, px, py)

        stats.update(
            changes=len(grid.changes), cells=len(pending), subcells=int(field.potential.size)
        )
        grid.changes.clear()


def solve_full(grid: ChargeGrid) -> FieldGrid:
    """Compute a fresh field from every current charge.

    Reference for the incremental solver; does not touch ``grid``.
    """
    field = FieldGrid(grid.width, grid.height, grid.field.ratio)
    px, py = field.positions()
    for x, y in grid.charged_cells():
        apply_charge(field, int(grid.tiles[y, x]), x, y, px, py)
    return field


__all__ = [
    "apply_charge",
    "coalesce_changes",
    "solve",
    "solve_full",
]
