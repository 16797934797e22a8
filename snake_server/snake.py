"""Snake entity implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
import itertools
from typing import List

from . import constants
from .grid import Point

_id_counter = itertools.count(1)


@dataclass
class Snake:
    """Authoritative representation of a snake controlled by a player.

    ``body[0]`` is the head and ``body[-1]`` the tail. The body never becomes
    empty while the snake is part of the world.
    """

    name: str
    color: str
    body: List[Point]
    direction: Point = field(default_factory=lambda: Point(*constants.INITIAL_DIRECTION))
    score: int = 1
    id: int = field(default_factory=lambda: next(_id_counter))

    def __post_init__(self) -> None:
        if not self.body:
            raise ValueError("A snake needs at least one body cell")
        self.body = list(self.body)

    @property
    def head(self) -> Point:
        return self.body[0]

    @property
    def tail(self) -> Point:
        return self.body[-1]

    def __len__(self) -> int:
        return len(self.body)

    def set_direction(self, direction: Point) -> bool:
        """Update the heading unless it would reverse a multi-cell snake.

        Returns ``True`` when the new heading was accepted.
        """

        if len(self.body) > 1 and direction == -self.direction:
            return False
        self.direction = direction
        return True

    def moved_body(self, new_head: Point, growth: int) -> List[Point]:
        """Return the body after stepping onto ``new_head``.

        ``growth`` is the number of points eaten this step; zero means the
        tail advances and the length stays the same.
        """

        body = [new_head] + self.body
        if growth <= 0:
            body.pop()
        else:
            tail = body[-1]
            body.extend(tail for _ in range(growth - 1))
        return body

    def penalise(self, position: Point) -> None:
        """Reset the snake to a single cell at ``position`` and cut its score."""

        self.score = max(1, self.score * constants.COLLISION_SCORE_PERCENT // 100)
        self.body = [position]

    def to_snapshot(self) -> dict:
        """Return a snapshot representation for clients."""

        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "body": [point.to_dict() for point in self.body],
            "direction": self.direction.to_dict(),
            "score": self.score,
        }
