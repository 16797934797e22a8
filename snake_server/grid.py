"""Toroidal grid primitives used by the authoritative game server."""

from __future__ import annotations

from dataclasses import dataclass
import random
from typing import Optional

from . import constants


@dataclass(frozen=True)
class Point:
    """An integer cell coordinate, also used for unit direction vectors."""

    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def to_dict(self) -> dict[str, int]:
        """Return the point as a JSON friendly ``{"x": .., "y": ..}`` mapping."""

        return {"x": self.x, "y": self.y}

    def to_tuple(self) -> tuple[int, int]:
        return self.x, self.y


class Grid:
    """A ``width`` x ``height`` board whose edges wrap around.

    The grid carries no entity state; it only knows how to map arbitrary
    coordinates back onto the board and how to sample cells from it.
    """

    def __init__(
        self,
        width: int = constants.GRID_WIDTH,
        height: int = constants.GRID_HEIGHT,
        rng: Optional[random.Random] = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid dimensions must be positive")
        self.width = width
        self.height = height
        self.rng = rng or random.Random()

    @property
    def center(self) -> Point:
        return Point(self.width // 2, self.height // 2)

    def normalize(self, position: Point) -> Point:
        """Wrap ``position`` onto the board using modulo arithmetic."""

        return Point(position.x % self.width, position.y % self.height)

    def random_position(self) -> Point:
        """Return a uniformly random cell."""

        return Point(self.rng.randrange(self.width), self.rng.randrange(self.height))

    @staticmethod
    def manhattan(a: Point, b: Point) -> int:
        return abs(a.x - b.x) + abs(a.y - b.y)
