"""Food and obstacle entity definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
import itertools

from .grid import Point

_food_ids = itertools.count(1)
_obstacle_ids = itertools.count(1)


@dataclass
class Food:
    """A consumable item; eating it grows a snake by ``points`` cells."""

    position: Point
    kind: str
    points: int
    id: int = field(default_factory=lambda: next(_food_ids))

    def to_dict(self) -> dict[str, int | str]:
        """Serialise the food item to a JSON friendly dictionary."""

        return {
            "id": self.id,
            "x": self.position.x,
            "y": self.position.y,
            "kind": self.kind,
            "points": self.points,
        }


@dataclass
class Obstacle:
    """A static cell that penalises any snake whose head lands on it."""

    position: Point
    kind: str = "rock"
    id: int = field(default_factory=lambda: next(_obstacle_ids))

    def to_dict(self) -> dict[str, int | str]:
        return {"id": self.id, "x": self.position.x, "y": self.position.y, "kind": self.kind}
