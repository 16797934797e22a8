"""Occupancy and collision helpers for the game server."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Set

from .food import Food, Obstacle
from .grid import Point
from .snake import Snake


def obstacle_cells(obstacles: Iterable[Obstacle]) -> Dict[Point, Obstacle]:
    """Return a lookup of obstacle positions."""

    return {obstacle.position: obstacle for obstacle in obstacles}


def occupied_cells(
    snakes: Iterable[Snake],
    obstacles: Iterable[Obstacle] = (),
    food: Iterable[Food] = (),
) -> Set[Point]:
    """Return every cell covered by a snake body, an obstacle or a food item."""

    cells: Set[Point] = set()
    for snake in snakes:
        cells.update(snake.body)
    cells.update(obstacle.position for obstacle in obstacles)
    cells.update(item.position for item in food)
    return cells


def food_at(food: Mapping[int, Food], position: Point) -> Optional[Food]:
    """Return the food item lying on ``position`` if there is one."""

    for item in food.values():
        if item.position == position:
            return item
    return None
