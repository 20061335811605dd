"""Type definitions and aliases for the field simulation."""

import numpy as np
import numpy.typing as npt

# Dense arrays
ChargeArray = npt.NDArray[np.int8]
FloatArray = npt.NDArray[np.float64]

# A 2D point or vector in charge-space coordinates, shape (2,)
Vector2 = npt.NDArray[np.float64]

# A traced field line, shape (n, 2)
Polyline = npt.NDArray[np.float64]

# Integer cell coordinates (x, y)
Cell = tuple[int, int]

# (previous_charge, x, y)
ChangeEntry = tuple[int, int, int]

# (charge, x, y)
BorderPoint = tuple[int, int, int]

# Signed 8-bit charge range
CHARGE_MIN = -128
CHARGE_MAX = 127

__all__ = [
    "ChargeArray",
    "FloatArray",
    "Vector2",
    "Polyline",
    "Cell",
    "ChangeEntry",
    "BorderPoint",
    "CHARGE_MIN",
    "CHARGE_MAX",
]
