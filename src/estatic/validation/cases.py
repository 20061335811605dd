"""Analytic cases for validating the field solver and tracer.

Each case builds a small grid with a known answer and reports the largest
deviation found.
"""

from __future__ import annotations

import math
from typing import Any, Callable

import numpy as np

from ..physics.charge_grid import ChargeGrid
from ..physics.lines import LineEnd, trace_line
from ..physics.solver import solve_full

FIELD_TOL = 1e-9


def _max_deviation(grid: ChargeGrid, force: np.ndarray, potential: np.ndarray) -> float:
    return float(
        max(
            np.max(np.abs(grid.field.force - force)),
            np.max(np.abs(grid.field.potential - potential)),
        )
    )


def _result(name: str, error: float, tol: float = FIELD_TOL) -> dict[str, Any]:
    return {"name": name, "error": error, "tol": tol, "passed": bool(error <= tol)}


def reversibility(width: int = 6, height: int = 6, resolution: int = 2) -> dict[str, Any]:
    """Adding then removing a charge returns the field to zero."""
    grid = ChargeGrid(width, height, resolution)
    grid.update_tile(100, width // 2, height // 2)
    grid.solve()
    grid.update_tile(0, width // 2, height // 2)
    grid.solve()

    error = float(max(np.max(np.abs(grid.field.force)), np.max(np.abs(grid.field.potential))))
    return _result("Add/remove reversibility", error)


def superposition(width: int = 6, height: int = 6, resolution: int = 2) -> dict[str, Any]:
    """The field of two charges is the sum of their separate fields."""
    charges = [(90, 1, 2), (-60, 4, 3)]

    both = ChargeGrid(width, height, resolution)
    force = np.zeros_like(both.field.force)
    potential = np.zeros_like(both.field.potential)

    for charge, x, y in charges:
        both.update_tile(charge, x, y)

        alone = ChargeGrid(width, height, resolution)
        alone.update_tile(charge, x, y)
        alone.solve()
        force += alone.field.force
        potential += alone.field.potential

    both.solve()
    return _result("Superposition", _max_deviation(both, force, potential))


def incremental_matches_full(
    width: int = 8, height: int = 8, resolution: int = 2, edits: int = 40, seed: int = 1337
) -> dict[str, Any]:
    """Batches of random edits solved incrementally match a full recompute."""
    rng = np.random.default_rng(seed)
    grid = ChargeGrid(width, height, resolution)

    for _batch in range(4):
        for _ in range(edits // 4):
            x = int(rng.integers(0, width))
            y = int(rng.integers(0, height))
            charge = int(rng.choice([-100, -20, 0, 0, 20, 100]))
            grid.update_tile(charge, x, y)
        grid.solve()

    reference = solve_full(grid)
    # Rounding accumulates across batches near the charges
    return _result(
        "Incremental vs full solve",
        _max_deviation(grid, reference.force, reference.potential),
        tol=1e-6,
    )


def radial_field(width: int = 9, height: int = 9, resolution: int = 2) -> dict[str, Any]:
    """An isolated charge gives an inverse-square radial field."""
    charge = 50
    cx, cy = width // 2, height // 2
    grid = ChargeGrid(width, height, resolution)
    grid.update_tile(charge, cx, cy)
    grid.solve()

    px, py = grid.field.positions()
    dx = px - (cx + 0.5)
    dy = py - (cy + 0.5)
    dist = np.hypot(dx, dy)
    mask = dist > 0

    expected_potential = np.zeros_like(dist)
    expected_potential[mask] = charge / dist[mask]
    expected_force = np.zeros_like(grid.field.force)
    expected_force[mask, 0] = charge * dx[mask] / dist[mask] ** 3
    expected_force[mask, 1] = charge * dy[mask] / dist[mask] ** 3

    return _result(
        "Radial point-charge field",
        _max_deviation(grid, expected_force, expected_potential),
    )


def lines_escape(
    charge: int = 100, width: int = 8, height: int = 8, resolution: int = 2
) -> dict[str, Any]:
    """Lines from a lone charge move steadily away from it to the boundary.

    Holds for either sign: positive lines follow the field outward, negative
    lines run against a field that points into the charge.
    """
    cx, cy = width // 2, height // 2
    grid = ChargeGrid(width, height, resolution)
    grid.update_tile(charge, cx, cy)
    grid.solve()

    lines = grid.trace_lines()
    center = np.array([cx + 0.5, cy + 0.5])
    worst = 0.0 if len(lines) == len(grid.borders()) else math.inf
    for line in lines:
        dist = np.hypot(*(line - center).T)
        # Largest step back toward the charge
        if len(dist) > 1:
            worst = max(worst, float(np.max(-np.diff(dist))))
    sign = "Positive" if charge > 0 else "Negative"
    return _result(f"{sign} lines escape", max(worst, 0.0), tol=0.0)


def negative_lines_discarded(width: int = 8, height: int = 8, resolution: int = 2) -> dict[str, Any]:
    """A negative line that runs into the positive charge of a dipole is dropped."""
    grid = ChargeGrid(width, height, resolution)
    grid.update_tile(100, 2, height // 2)
    grid.update_tile(-100, 5, height // 2)
    grid.solve()

    # The seed between the two charges leads straight back to the positive one
    line, end = trace_line(grid, -100, 4, height // 2)
    error = 0.0 if line is None and end is LineEnd.DISCARDED else 1.0
    return _result("Negative lines discarded", error, tol=0.0)


CASES: dict[str, Callable[[], dict[str, Any]]] = {
    "reversibility": reversibility,
    "superposition": superposition,
    "incremental": incremental_matches_full,
    "radial": radial_field,
    "positive_lines": lambda: lines_escape(100),
    "negative_lines_escape": lambda: lines_escape(-100),
    "negative_lines_discarded": negative_lines_discarded,
}


def run_all() -> list[dict[str, Any]]:
    """Run every validation case."""
    return [case() for case in CASES.values()]


__all__ = [
    "CASES",
    "reversibility",
    "superposition",
    "incremental_matches_full",
    "radial_field",
    "lines_escape",
    "negative_lines_discarded",
    "run_all",
]
