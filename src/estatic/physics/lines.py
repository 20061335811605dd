"""Field line tracing through the cached field.

A line starts at the center of every border cell and steps ``1 / ratio``
along the field (against it for negative charges). Only points where the
field direction changes are kept, so straight runs collapse to their ends.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from ..core.frames import cell_center, cell_of
from ..core.logging import get_logger
from ..core.types import Polyline, Vector2
from .borders import find_borders

if TYPE_CHECKING:
    from .charge_grid import ChargeGrid

logger = get_logger(__name__)

MAX_LINE_STEPS = 2000

# Direction buckets per radian
ANGLE_BUCKETS = 10.0


class LineEnd(str, Enum):
    """How a traced line finished."""

    CHARGE = "charge"
    BOUNDARY = "boundary"
    STEP_CAP = "step_cap"
    STALLED = "stalled"
    DISCARDED = "discarded"


def direction_bucket(force: Vector2) -> int:
    """Quantized direction of a force vector.

    ``atan2(fy, fx) * 10`` rounded half away from zero.
    """
    angle = math.atan2(force[1], force[0]) * ANGLE_BUCKETS
    return int(math.copysign(math.floor(abs(angle) + 0.5), angle))


def trace_line(
    grid: ChargeGrid, charge: int, x: int, y: int, max_steps: int = MAX_LINE_STEPS
) -> tuple[Polyline | None, LineEnd]:
    """Trace one field line from the border cell (x, y).

    Args:
        grid: Charge grid with a solved field
        charge: Charge of the cell the border belongs to; its sign picks the
            direction of travel
        x, y: Border cell
        max_steps: Step cap

    Returns:
        Tuple of (polyline or None if discarded, how the line ended)
    """
    sign = 1.0 if charge > 0 else -1.0
    step = sign / grid.field.ratio

    position = cell_center(x, y)
    cx, cy = x, y
    points: list[tuple[float, float]] = []
    last_bucket = None
    end = LineEnd.STEP_CAP

    for _ in range(max_steps):
        if not grid.in_bounds(cx, cy):
            end = LineEnd.BOUNDARY
            break
        if grid.tiles[cy, cx] != 0:
            # Negative lines are traced toward charges; landing on one drops them
            if sign < 0:
                return None, LineEnd.DISCARDED
            end = LineEnd.CHARGE
            break

        force, _ = grid.field.sample(position)

        bucket = direction_bucket(force)
        if bucket != last_bucket:
            points.append((position[0], position[1]))
            last_bucket = bucket

        norm = math.hypot(force[0], force[1])
        if norm == 0.0:
            end = LineEnd.STALLED
            break

        position = position + force * (step / norm)
        cx, cy = cell_of(position)

    points.append((position[0], position[1]))
    return np.array(points, dtype=np.float64), end


def trace_lines(grid: ChargeGrid, max_steps: int = MAX_LINE_STEPS) -> list[Polyline]:
    """Trace a field line from every border point of ``grid``.

    The field must be solved first. Lines of negative charges that run into
    a charge are discarded.

    Returns:
        List of polylines, each an (n, 2) array of charge-space points
    """
    with logger.timed("Field lines traced", logging.DEBUG) as stats:
        traced = [
            trace_line(grid, charge, x, y, max_steps=max_steps)
            for charge, x, y in find_borders(grid)
        ]
        lines: list[Polyline] = [line for line, _ in traced if line is not None]

        if logger.is_enabled_for(logging.DEBUG):
            tally = dict.fromkeys((end.value for end in LineEnd), 0)
            for _, end in traced:
                tally[end.value] += 1
            stats.update(lines=len(lines), ends=tally)
    return lines


__all__ = [
    "MAX_LINE_STEPS",
    "LineEnd",
    "direction_bucket",
    "trace_line",
    "trace_lines",
]
