"""Tests for field line tracing."""

import math

import numpy as np
import pytest

from estatic.physics.charge_grid import ChargeGrid
from estatic.physics.lines import LineEnd, direction_bucket, trace_line, trace_lines


def _distances(line, center):
    return np.hypot(line[:, 0] - center[0], line[:, 1] - center[1])


def test_no_charges_no_lines(grid):
    grid.solve()
    assert trace_lines(grid) == []


def test_isolated_positive_charge_lines_move_away(grid):
    grid.update_tile(100, 3, 3)
    grid.solve()

    lines = grid.trace_lines()
    center = np.array([3.5, 3.5])

    assert len(lines) == 8
    for line in lines:
        assert line.ndim == 2 and line.shape[1] == 2
        assert len(line) >= 2
        # Starts on a cell next to the charge
        start_cell = np.floor(line[0]).astype(int)
        assert max(abs(start_cell[0] - 3), abs(start_cell[1] - 3)) == 1
        # Strictly moves outward
        assert np.all(np.diff(_distances(line, center)) > 0)
        # Ends outside the grid
        x, y = line[-1]
        assert not grid.in_bounds(math.floor(x), math.floor(y))


def test_axis_line_compresses_to_endpoints(grid):
    """A straight run keeps only its first and final positions."""
    grid.update_tile(100, 3, 3)
    grid.solve()

    line, end = trace_line(grid, 100, 4, 3)

    assert end is LineEnd.BOUNDARY
    assert len(line) == 2
    np.testing.assert_allclose(line[0], [4.5, 3.5])
    assert line[-1][0] >= 8.0
    assert line[-1][1] == pytest.approx(3.5)


def test_isolated_negative_charge_lines_run_outward(grid):
    """Negative lines travel against a field that points into the charge."""
    grid.update_tile(-100, 3, 3)
    grid.solve()

    lines = grid.trace_lines()
    center = np.array([3.5, 3.5])

    assert len(lines) == 8
    for line in lines:
        assert np.all(np.diff(_distances(line, center)) > 0)


def test_negative_line_into_charge_is_discarded():
    """The negative seed facing a positive charge leads back to it and is dropped."""
    grid = ChargeGrid(8, 8, 2)
    grid.update_tile(100, 2, 4)
    grid.update_tile(-100, 5, 4)
    grid.solve()

    line, end = trace_line(grid, -100, 4, 4)

    assert line is None
    assert end is LineEnd.DISCARDED


def test_positive_line_into_charge_terminates():
    """The positive seed facing a negative charge ends on it and is kept."""
    grid = ChargeGrid(8, 8, 2)
    grid.update_tile(100, 2, 4)
    grid.update_tile(-100, 5, 4)
    grid.solve()

    line, end = trace_line(grid, 100, 3, 4)

    assert end is LineEnd.CHARGE
    assert line is not None
    np.testing.assert_allclose(line[0], [3.5, 4.5])
    assert math.floor(line[-1][0]) == 5


def test_dipole_drops_some_negative_lines():
    grid = ChargeGrid(8, 8, 2)
    grid.update_tile(100, 2, 4)
    grid.update_tile(-100, 5, 4)
    grid.solve()

    borders = grid.borders()
    lines = grid.trace_lines()

    assert 0 < len(lines) < len(borders)


def test_step_cap_limits_line():
    grid = ChargeGrid(40, 40, 2)
    grid.update_tile(100, 20, 20)
    grid.solve()

    line, end = trace_line(grid, 100, 21, 20, max_steps=5)

    assert end is LineEnd.STEP_CAP
    # Five steps of 1/3 from the seed center
    assert line[-1][0] == pytest.approx(21.5 + 5 / 3)


def test_zero_field_stalls():
    """A seed with no field has nowhere to go."""
    grid = ChargeGrid(3, 3, 1)
    grid.update_tile(10, 0, 1)
    grid.update_tile(10, 2, 1)
    grid.solve()

    # (1, 1) sits midway between two equal charges
    line, end = trace_line(grid, 10, 1, 1)

    assert end is LineEnd.STALLED
    assert len(line) == 2
    np.testing.assert_allclose(line[0], line[-1])


def test_start_on_charge():
    """Seeding on a charged cell ends a positive line at once and drops a negative one."""
    grid = ChargeGrid(4, 4, 1)
    grid.update_tile(10, 1, 1)
    grid.solve()

    line, end = trace_line(grid, 5, 1, 1)
    assert end is LineEnd.CHARGE
    np.testing.assert_allclose(line, [[1.5, 1.5]])

    line, end = trace_line(grid, -5, 1, 1)
    assert line is None and end is LineEnd.DISCARDED


@pytest.mark.parametrize(
    "force, bucket",
    [
        ((1.0, 0.0), 0),
        ((0.0, 1.0), 16),
        ((0.0, -1.0), -16),
        ((-1.0, 0.0), 31),
        ((math.cos(0.06), math.sin(0.06)), 1),
        ((math.cos(-0.06), math.sin(-0.06)), -1),
    ],
)
def test_direction_bucket(force, bucket):
    assert direction_bucket(np.array(force)) == bucket
