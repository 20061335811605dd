"""Tests for the incremental field solver."""

import numpy as np
import pytest

from estatic.physics.charge_grid import ChargeGrid
from estatic.physics.solver import coalesce_changes, solve, solve_full

# Named tolerances
FIELD_ATOL = 1e-9
RESAMPLE_ATOL = 1e-9


def _assert_fields_close(a, b, atol=FIELD_ATOL):
    np.testing.assert_allclose(a.force, b.force, atol=atol, rtol=0)
    np.testing.assert_allclose(a.potential, b.potential, atol=atol, rtol=0)


def test_concrete_single_charge_sample():
    """+100 at (1, 1) on a 4x4 grid pushes a sample to its right further right."""
    grid = ChargeGrid(4, 4, 2)
    grid.update_tile(100, 1, 1)
    grid.solve()

    force, potential = grid.sample(np.array([2.0, 1.5]))

    assert force[0] > 0.0
    assert potential != 0.0
    assert potential > 0.0


def test_solve_clears_change_log(grid):
    grid.update_tile(10, 2, 2)
    grid.update_tile(-10, 5, 5)
    assert grid.pending_changes == 2

    grid.solve()

    assert grid.changes == []
    assert not grid.field.is_zero()


def test_empty_solve_is_noop(grid):
    """Solving with nothing pending leaves the field bit-for-bit unchanged."""
    grid.update_tile(42, 3, 4)
    grid.solve()
    before = grid.field.copy()

    grid.solve()

    np.testing.assert_array_equal(grid.field.force, before.force)
    np.testing.assert_array_equal(grid.field.potential, before.potential)


def test_add_then_remove_returns_to_zero(grid):
    grid.update_tile(100, 3, 3)
    grid.solve()
    assert not grid.field.is_zero()

    grid.update_tile(0, 3, 3)
    grid.solve()

    np.testing.assert_allclose(grid.field.force, 0.0, atol=FIELD_ATOL)
    np.testing.assert_allclose(grid.field.potential, 0.0, atol=FIELD_ATOL)


def test_superposition():
    """Two charges together give the sum of their separate fields."""
    both = ChargeGrid(7, 5, 2)
    both.update_tile(80, 1, 1)
    both.update_tile(-45, 5, 3)
    both.solve()

    first = ChargeGrid(7, 5, 2)
    first.update_tile(80, 1, 1)
    first.solve()

    second = ChargeGrid(7, 5, 2)
    second.update_tile(-45, 5, 3)
    second.solve()

    np.testing.assert_allclose(
        both.field.force, first.field.force + second.field.force, atol=FIELD_ATOL, rtol=0
    )
    np.testing.assert_allclose(
        both.field.potential,
        first.field.potential + second.field.potential,
        atol=FIELD_ATOL,
        rtol=0,
    )


def test_charge_change_replaces_contribution(grid):
    """Changing a charge's value swaps its old contribution for the new one."""
    grid.update_tile(100, 2, 2)
    grid.solve()
    grid.update_tile(-40, 2, 2)
    grid.solve()

    reference = ChargeGrid(8, 8, 2)
    reference.update_tile(-40, 2, 2)
    reference.solve()

    _assert_fields_close(grid.field, reference.field)


def test_repeated_edits_between_solves(grid):
    """A cell edited several times before one solve counts only its final charge."""
    grid.update_tile(5, 4, 4)
    grid.update_tile(7, 4, 4)
    grid.update_tile(-3, 1, 6)
    grid.update_tile(0, 1, 6)
    grid.solve()

    reference = ChargeGrid(8, 8, 2)
    reference.update_tile(7, 4, 4)
    reference.solve()

    _assert_fields_close(grid.field, reference.field)


def test_coalesce_changes_keeps_first_previous_charge():
    changes = [(0, 1, 1), (5, 2, 2), (9, 1, 1), (0, 3, 0), (-4, 2, 2)]

    assert coalesce_changes(changes) == {(1, 1): 0, (2, 2): 5, (3, 0): 0}
    assert list(coalesce_changes(changes)) == [(1, 1), (2, 2), (3, 0)]


def test_incremental_matches_full_recompute():
    rng = np.random.default_rng(3)
    grid = ChargeGrid(10, 7, 2)

    for _ in range(5):
        for _ in range(12):
            x = int(rng.integers(0, 10))
            y = int(rng.integers(0, 7))
            grid.update_tile(int(rng.choice([-90, -1, 0, 0, 25, 127])), x, y)
        solve(grid)

    reference = solve_full(grid)
    # Rounding from repeated add/subtract grows near the charges
    _assert_fields_close(grid.field, reference, atol=1e-6)


def test_solve_full_leaves_grid_untouched(grid):
    grid.update_tile(12, 0, 0)
    pending = list(grid.changes)

    field = solve_full(grid)

    assert grid.changes == pending
    assert grid.field.is_zero()
    assert not field.is_zero()


def test_set_resolution_then_solve_matches_fresh_grid(grid):
    grid.update_tile(60, 2, 5)
    grid.update_tile(-25, 6, 1)
    grid.solve()

    grid.set_resolution(3)
    grid.solve()

    fresh = ChargeGrid(8, 8, 3)
    fresh.update_tile(60, 2, 5)
    fresh.update_tile(-25, 6, 1)
    fresh.solve()

    assert grid.field.shape == (8 * 5, 8 * 5)
    _assert_fields_close(grid.field, fresh.field, atol=RESAMPLE_ATOL)


def test_self_sample_is_zero_at_resolution_one():
    """At ratio 1 every sample sits on a cell center; a charge ignores its own."""
    grid = ChargeGrid(3, 3, 1)
    grid.update_tile(50, 1, 1)
    grid.solve()

    force, potential = grid.sample(np.array([1.5, 1.5]))
    assert potential == 0.0
    np.testing.assert_array_equal(force, [0.0, 0.0])

    force, potential = grid.sample(np.array([2.5, 1.5]))
    assert force[0] == pytest.approx(50.0)
    assert potential == pytest.approx(50.0)
