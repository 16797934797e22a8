"""Weighted food selection and rejection-sampled placement of food and obstacles.

Placement is best effort: every call samples a bounded number of random
cells and gives up quietly when none of them is free. Callers treat a
short fall as normal and try again on the next tick.
"""

from __future__ import annotations

import logging
from typing import Collection, List, Mapping, Optional

from . import constants
from .food import Food, Obstacle
from .grid import Grid, Point


def select_food_kind(
    grid: Grid,
    table: Mapping[str, tuple[int, float]] = constants.FOOD_TABLE,
) -> tuple[str, int]:
    """Draw a ``(kind, points)`` pair from ``table`` according to its weights."""

    draw = grid.rng.random()
    cumulative = 0.0
    for kind, (points, weight) in table.items():
        cumulative += weight
        if draw <= cumulative:
            return kind, points
    # Float drift can leave the running total a hair under 1.0.
    kind, (points, _) = next(iter(table.items()))
    return kind, points


def find_free_cell(grid: Grid, occupied: Collection[Point], attempts: int) -> Optional[Point]:
    """Return a random cell not in ``occupied`` or ``None`` after ``attempts`` misses."""

    for _ in range(attempts):
        candidate = grid.random_position()
        if candidate not in occupied:
            return candidate
    return None


def place_food(
    grid: Grid,
    occupied: Collection[Point],
    attempts: int = constants.FOOD_PLACEMENT_ATTEMPTS,
) -> Optional[Food]:
    """Create a food item on a free cell, or return ``None`` if none was found."""

    position = find_free_cell(grid, occupied, attempts)
    if position is None:
        logging.debug("Food placement exhausted %d attempts", attempts)
        return None
    kind, points = select_food_kind(grid)
    return Food(position=position, kind=kind, points=points)


def place_obstacles(
    grid: Grid,
    occupied: Collection[Point],
    count: int = constants.OBSTACLE_COUNT,
    safe_radius: int = constants.OBSTACLE_SAFE_RADIUS,
    attempts: int = constants.OBSTACLE_PLACEMENT_ATTEMPTS,
) -> List[Obstacle]:
    """Scatter up to ``count`` obstacles outside ``safe_radius`` of the centre.

    Slots that cannot be filled within ``attempts`` samples are skipped, so
    the result may hold fewer than ``count`` obstacles.
    """

    blocked = set(occupied)
    center = grid.center
    obstacles: List[Obstacle] = []
    for _ in range(count):
        for _ in range(attempts):
            candidate = grid.random_position()
            if grid.manhattan(candidate, center) <= safe_radius or candidate in blocked:
                continue
            kind = grid.rng.choice(constants.OBSTACLE_KINDS)
            obstacles.append(Obstacle(position=candidate, kind=kind))
            blocked.add(candidate)
            break
    if len(obstacles) < count:
        logging.info("Placed %d of %d requested obstacles", len(obstacles), count)
    return obstacles
