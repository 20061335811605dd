"""Field grid sizing heuristics.

Estimates the memory a field grid needs before it is allocated, so that
oversized ``width x height x ratio^2`` requests are rejected up front.
"""

import math
from typing import Any

from .errors import SizingError
from .frames import check_dimensions, ratio_for_resolution

# Two force components and one potential, float64 each
BYTES_PER_SUBCELL = 3 * 8
# One int8 charge per cell
BYTES_PER_CELL = 1

DEFAULT_MEMORY_GB = 2.0


def estimate_field_memory(width: int, height: int, resolution: int) -> dict[str, Any]:
    """Calculate field grid dimensions and memory footprint.

    Args:
        width: Charge grid width in cells
        height: Charge grid height in cells
        resolution: Field resolution (ratio = 2 * resolution - 1)

    Returns:
        Dictionary with sizing parameters:
            - ratio: Subdivisions per cell edge
            - field_width, field_height: Field grid dimensions in subcells
            - subcells: Total subcell count
            - memory_estimate_gb: Estimated memory for charges plus field

    Raises:
        GridError: If dimensions or resolution are not positive
    """
    check_dimensions(width, height)
    ratio = ratio_for_resolution(resolution)

    field_width = width * ratio
    field_height = height * ratio
    subcells = field_width * field_height

    total_bytes = subcells * BYTES_PER_SUBCELL + width * height * BYTES_PER_CELL

    return {
        "ratio": ratio,
        "field_width": field_width,
        "field_height": field_height,
        "subcells": subcells,
        "memory_estimate_gb": total_bytes / 1e9,
    }


def _check_budget(memory_gb: float) -> None:
    if not math.isfinite(memory_gb) or memory_gb <= 0:
        raise ValueError(f"Memory budget must be a positive finite number of GB, got {memory_gb}")


def check_field_budget(
    width: int, height: int, resolution: int, memory_gb: float = DEFAULT_MEMORY_GB
) -> dict[str, Any]:
    """Ensure a grid configuration fits in the memory budget.

    Returns:
        The sizing dictionary from :func:`estimate_field_memory`

    Raises:
        SizingError: If the estimate exceeds ``memory_gb``
        ValueError: If ``memory_gb`` is not a positive finite number
    """
    _check_budget(memory_gb)
    params = estimate_field_memory(width, height, resolution)
    if params["memory_estimate_gb"] > memory_gb:
        raise SizingError(width, height, resolution, params["memory_estimate_gb"], memory_gb)
    return params


def _fits(width: int, height: int, resolution: int, memory_gb: float) -> bool:
    try:
        check_field_budget(width, height, resolution, memory_gb)
    except SizingError:
        return False
    return True


def max_resolution(width: int, height: int, memory_gb: float = DEFAULT_MEMORY_GB) -> int:
    """Largest resolution whose field grid fits in the budget.

    Solves ``ratio^2 * cells * BYTES_PER_SUBCELL + cells * BYTES_PER_CELL <= budget``
    for the largest odd ratio, then corrects by one step either way for
    float rounding at the boundary. Returns 0 when even resolution 1 does not
    fit.

    Raises:
        GridError: If dimensions are not positive
        ValueError: If ``memory_gb`` is not a positive finite number
    """
    check_dimensions(width, height)
    _check_budget(memory_gb)

    cells = width * height
    field_bytes = memory_gb * 1e9 - cells * BYTES_PER_CELL
    ratio = math.isqrt(max(int(field_bytes // (cells * BYTES_PER_SUBCELL)), 0))
    if ratio % 2 == 0:
        ratio -= 1
    resolution = (ratio + 1) // 2

    while _fits(width, height, resolution + 1, memory_gb):
        resolution += 1
    while resolution > 0 and not _fits(width, height, resolution, memory_gb):
        resolution -= 1
    return resolution


__all__ = [
    "BYTES_PER_SUBCELL",
    "DEFAULT_MEMORY_GB",
    "estimate_field_memory",
    "check_field_budget",
    "max_resolution",
]
