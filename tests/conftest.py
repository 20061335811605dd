import os
import random

import numpy as np
import pytest

from estatic.physics.charge_grid import ChargeGrid


def pytest_configure(config: pytest.Config) -> None:  # noqa: ARG001
    config.addinivalue_line("markers", "slow: marks tests that solve large grids")


@pytest.fixture(autouse=True)
def seed_rng() -> None:
    random.seed(0)
    np.random.seed(0)
    os.environ["PYTHONHASHSEED"] = "0"


@pytest.fixture()
def grid() -> ChargeGrid:
    """An empty 8x8 grid at resolution 2 (ratio 3)."""
    return ChargeGrid(8, 8, 2)
