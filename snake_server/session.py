"""Connection bookkeeping and command routing."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Hashable, List, Optional

from .colors import ColorAllocator
from .grid import Point
from .protocol import Command, DirectionCommand, JoinCommand, PingCommand
from .world import World


@dataclass
class OutboundEvent:
    """A message for the transport layer to serialise.

    ``broadcast`` events go to every connection, the rest only to the
    connection whose command produced them.
    """

    type: str
    payload: dict = field(default_factory=dict)
    broadcast: bool = False


class SessionRegistry:
    """Maps connections to players and applies their commands to the world."""

    def __init__(self, world: World, colors: Optional[ColorAllocator] = None) -> None:
        self.world = world
        self.colors = colors or ColorAllocator()
        self.players: Dict[Hashable, int] = {}
        self.player_colors: Dict[Hashable, str] = {}

    def player_for(self, conn_id: Hashable) -> Optional[int]:
        return self.players.get(conn_id)

    def on_join(self, conn_id: Hashable, name: str, requested_color: Optional[str] = None) -> int:
        """Create a player for ``conn_id`` and return its id.

        ``requested_color`` is accepted for compatibility but ignored; colours
        always come from the allocator so live players stay distinguishable.
        A second join on the same connection replaces the earlier player.
        """

        if conn_id in self.players:
            self.on_disconnect(conn_id)
        color = self.colors.acquire()
        player_id = self.world.add_player(name, color)
        self.players[conn_id] = player_id
        self.player_colors[conn_id] = color
        logging.info("Player %s joined as snake %s with colour %s", name, player_id, color)
        return player_id

    def on_direction(self, conn_id: Hashable, direction: Point) -> None:
        player_id = self.players.get(conn_id)
        if player_id is None:
            return
        if not self.world.set_direction(player_id, direction):
            logging.debug("Rejected direction %s for snake %s", direction.to_tuple(), player_id)

    def on_disconnect(self, conn_id: Hashable) -> Optional[int]:
        """Forget ``conn_id`` and remove its player; returns the removed id."""

        player_id = self.players.pop(conn_id, None)
        color = self.player_colors.pop(conn_id, None)
        if color is not None:
            self.colors.release(color)
        if player_id is None:
            return None
        self.world.remove_player(player_id)
        logging.info("Snake %s left", player_id)
        return player_id

    @staticmethod
    def on_ping(conn_id: Hashable) -> OutboundEvent:
        return OutboundEvent("pong")

    def player_count_event(self) -> OutboundEvent:
        return OutboundEvent("playerCount", {"count": len(self.world.snakes)}, broadcast=True)

    def dispatch(self, conn_id: Hashable, command: Command) -> List[OutboundEvent]:
        """Apply ``command`` and return the events it produced."""

        if isinstance(command, JoinCommand):
            player_id = self.on_join(conn_id, command.name, command.color)
            return [OutboundEvent("playerJoined", {"playerId": player_id}), self.player_count_event()]
        if isinstance(command, DirectionCommand):
            self.on_direction(conn_id, command.direction)
            return []
        if isinstance(command, PingCommand):
            return [self.on_ping(conn_id)]
        raise TypeError(f"Unsupported command: {command!r}")

    def leave(self, conn_id: Hashable) -> List[OutboundEvent]:
        """Handle a closed connection; only joined players announce a new count."""

        if self.on_disconnect(conn_id) is None:
            return []
        return [self.player_count_event()]
