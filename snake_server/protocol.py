"""JSON protocol helpers for the websocket transport."""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Optional, Union

from . import constants
from .grid import Point


@dataclass(frozen=True)
class JoinCommand:
    name: str = constants.DEFAULT_PLAYER_NAME
    color: Optional[str] = None


@dataclass(frozen=True)
class DirectionCommand:
    direction: Point


@dataclass(frozen=True)
class PingCommand:
    pass


Command = Union[JoinCommand, DirectionCommand, PingCommand]


def _clean_name(raw: object) -> str:
    if not isinstance(raw, str):
        return constants.DEFAULT_PLAYER_NAME
    name = raw.strip()[: constants.MAX_NAME_LENGTH]
    return name or constants.DEFAULT_PLAYER_NAME


def _parse_direction(raw: object) -> Point:
    if not isinstance(raw, dict):
        raise ValueError("Direction must be an object with x and y")
    x, y = raw.get("x"), raw.get("y")
    for value in (x, y):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError("Direction components must be integers")
    return Point(x, y)


def parse_client_message(message: Union[str, bytes]) -> Command:
    """Parse a raw client ``message`` into a typed command.

    Raises :class:`ValueError` for anything that is not a well formed
    ``join``, ``direction`` or ``ping`` message.
    """

    try:
        payload = json.loads(message)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise ValueError("Invalid client message") from exc
    if not isinstance(payload, dict):
        raise ValueError("Client message must be a JSON object")

    kind = payload.get("type")
    if kind == "join":
        color = payload.get("color")
        return JoinCommand(
            name=_clean_name(payload.get("name")),
            color=color if isinstance(color, str) else None,
        )
    if kind == "direction":
        return DirectionCommand(direction=_parse_direction(payload.get("direction")))
    if kind == "ping":
        return PingCommand()
    raise ValueError(f"Unknown message type: {kind!r}")


def encode_message(kind: str, payload: Optional[dict] = None) -> str:
    """Encode an outbound message of type ``kind``."""

    return json.dumps({"type": kind, **(payload or {})})
