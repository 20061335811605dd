"""Discrete 2D electrostatic field simulation.

Point charges live on a coarse grid; their superposed field and potential are
cached on a finer subgrid and updated incrementally as charges change. Field
lines are traced through the cached field for overlay drawing.
"""

from .physics.charge_grid import ChargeGrid
from .physics.field_grid import FieldGrid

__version__ = "0.1.0"

__all__ = [
    "ChargeGrid",
    "FieldGrid",
    "cli",
    "core",
    "physics",
    "io",
    "validation",
]
