"""Player colour bookkeeping."""

from __future__ import annotations

import random
from typing import Iterable, Optional

from . import constants


class ColorAllocator:
    """Hands out distinct colours from a fixed palette.

    Colours return to the pool when released. Once every palette entry is in
    use, :meth:`acquire` falls back to a random hex colour which may collide
    with one already handed out.
    """

    def __init__(
        self,
        palette: Iterable[str] = constants.COLOR_PALETTE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.palette: tuple[str, ...] = tuple(palette)
        self.in_use: set[str] = set()
        self.rng = rng or random.Random()

    def acquire(self) -> str:
        for color in self.palette:
            if color not in self.in_use:
                self.in_use.add(color)
                return color
        return "#{:06x}".format(self.rng.randrange(0x1000000))

    def release(self, color: str) -> None:
        self.in_use.discard(color)

    @property
    def available(self) -> int:
        return len([color for color in self.palette if color not in self.in_use])
