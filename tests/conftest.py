from __future__ import annotations

import random

import pytest

from snake_server.grid import Grid
from snake_server.world import World


@pytest.fixture()
def grid() -> Grid:
    return Grid(40, 30, rng=random.Random(1234))


@pytest.fixture()
def world(grid: Grid) -> World:
    """A 40x30 world without obstacles and with its starting food removed."""

    w = World(grid=grid, obstacle_count=0)
    w.food.clear()
    return w
