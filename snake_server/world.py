"""Authoritative game world simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading
from typing import Dict, List, Optional

from . import collision, constants, spawn
from .food import Food, Obstacle
from .grid import Grid, Point
from .snake import Snake


@dataclass
class TickSummary:
    """What happened during a single call to :meth:`World.update`."""

    tick: int
    player_count: int = 0
    eaten: List[tuple[int, int]] = field(default_factory=list)
    collisions: List[int] = field(default_factory=list)
    food_spawned: int = 0

    @property
    def changed(self) -> bool:
        """Whether clients should receive a fresh ``gameState``.

        Any connected player keeps the broadcast going so client render loops
        stay alive even when nothing moved.
        """

        return bool(self.eaten or self.collisions or self.food_spawned or self.player_count)


class World:
    """Holds all entities and advances the simulation on every tick.

    Every public mutator runs under a single re-entrant lock, so a command
    and a tick never interleave.
    """

    def __init__(self, grid: Optional[Grid] = None, obstacle_count: int = constants.OBSTACLE_COUNT) -> None:
        self.grid = grid or Grid()
        self.tick: int = 0
        self.snakes: Dict[int, Snake] = {}
        self.food: Dict[int, Food] = {}
        self.obstacles: Dict[int, Obstacle] = {}
        self._lock = threading.RLock()
        self._populate_obstacles(obstacle_count)
        self._replenish_food()

    def _occupied(self) -> set[Point]:
        return collision.occupied_cells(
            self.snakes.values(), self.obstacles.values(), self.food.values()
        )

    def _populate_obstacles(self, count: int) -> None:
        for obstacle in spawn.place_obstacles(self.grid, self._occupied(), count):
            self.obstacles[obstacle.id] = obstacle

    def _replenish_food(self) -> int:
        spawned = 0
        while len(self.food) < constants.TARGET_FOOD_COUNT:
            food = spawn.place_food(self.grid, self._occupied())
            if food is None:
                break
            self.food[food.id] = food
            spawned += 1
        return spawned

    def add_player(self, name: str, color: str) -> int:
        with self._lock:
            snake = Snake(name=name, color=color, body=[self.grid.random_position()])
            self.snakes[snake.id] = snake
            return snake.id

    def remove_player(self, player_id: int) -> Optional[Snake]:
        with self._lock:
            return self.snakes.pop(player_id, None)

    def set_direction(self, player_id: int, direction: Point) -> bool:
        with self._lock:
            snake = self.snakes.get(player_id)
            if snake is None:
                return False
            return snake.set_direction(direction)

    def _respawn_position(self) -> Point:
        position = spawn.find_free_cell(
            self.grid, self._occupied(), constants.RESPAWN_PLACEMENT_ATTEMPTS
        )
        return position if position is not None else self.grid.random_position()

    def update(self) -> TickSummary:
        """Advance every snake by one cell and resolve food and obstacle hits.

        Snakes are processed in join order; when two heads reach the same food
        in one tick the first one processed takes it.
        """

        with self._lock:
            self.tick += 1
            summary = TickSummary(tick=self.tick, player_count=len(self.snakes))
            blocked = collision.obstacle_cells(self.obstacles.values())

            for snake in list(self.snakes.values()):
                new_head = self.grid.normalize(snake.head + snake.direction)
                if new_head in blocked:
                    snake.penalise(self._respawn_position())
                    summary.collisions.append(snake.id)
                    logging.info("Snake %s hit an obstacle at %s", snake.id, new_head.to_tuple())
                    continue

                food = collision.food_at(self.food, new_head)
                body = snake.moved_body(new_head, food.points if food else 0)
                if food is not None:
                    del self.food[food.id]
                    snake.score += food.points
                    summary.eaten.append((snake.id, food.id))
                    logging.debug("Snake %s ate %s worth %d", snake.id, food.kind, food.points)
                snake.body = body

            if len(self.food) < constants.MIN_FOOD_COUNT:
                summary.food_spawned = self._replenish_food()
                logging.debug("Replenished %d food items", summary.food_spawned)
            return summary

    def snapshot(self) -> dict:
        """Return the full ``gameState`` payload."""

        with self._lock:
            return {
                "snakes": [snake.to_snapshot() for snake in self.snakes.values()],
                "food": [item.to_dict() for item in self.food.values()],
                "obstacles": [obstacle.to_dict() for obstacle in self.obstacles.values()],
            }

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "players": len(self.snakes),
                "food": len(self.food),
                "obstacles": len(self.obstacles),
                "tick": self.tick,
            }
