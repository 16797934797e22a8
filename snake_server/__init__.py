"""Authoritative server for a multiplayer grid snake game."""

__all__ = [
    "collision",
    "colors",
    "constants",
    "food",
    "grid",
    "main",
    "protocol",
    "session",
    "snake",
    "spawn",
    "world",
]
