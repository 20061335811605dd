"""Physics module: charge grid, cached field, solver, borders and field lines."""

from .borders import find_borders
from .charge_grid import ChargeGrid
from .field_grid import FieldGrid, point_field
from .lines import MAX_LINE_STEPS, LineEnd, trace_line, trace_lines
from .solver import solve, solve_full

__all__ = [
    "ChargeGrid",
    "FieldGrid",
    "point_field",
    "solve",
    "solve_full",
    "find_borders",
    "trace_line",
    "trace_lines",
    "LineEnd",
    "MAX_LINE_STEPS",
]
