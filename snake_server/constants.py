"""Gameplay constants shared across the server modules."""

GRID_WIDTH: int = 40
GRID_HEIGHT: int = 30
TICK_INTERVAL: float = 0.15

MIN_FOOD_COUNT: int = 5
TARGET_FOOD_COUNT: int = 8
FOOD_PLACEMENT_ATTEMPTS: int = 50

OBSTACLE_COUNT: int = 12
OBSTACLE_SAFE_RADIUS: int = 8
OBSTACLE_PLACEMENT_ATTEMPTS: int = 50
OBSTACLE_KINDS: tuple[str, ...] = ("rock", "tree", "crate")

RESPAWN_PLACEMENT_ATTEMPTS: int = 50
# Percentage of the score kept after hitting an obstacle.
COLLISION_SCORE_PERCENT: int = 70

DEFAULT_PLAYER_NAME: str = "Anonymous"
MAX_NAME_LENGTH: int = 16
INITIAL_DIRECTION: tuple[int, int] = (0, 1)

# kind -> (points, relative weight); declaration order is the draw order.
FOOD_TABLE: dict[str, tuple[int, float]] = {
    "apple": (1, 0.40),
    "banana": (2, 0.25),
    "cherry": (3, 0.18),
    "grape": (5, 0.12),
    "golden": (10, 0.05),
}

COLOR_PALETTE: tuple[str, ...] = (
    "#ff6b6b",
    "#4ecdc4",
    "#ffe66d",
    "#1a8fe3",
    "#c44dff",
    "#ff9f43",
    "#2ed573",
    "#ff4d94",
    "#70a1ff",
    "#eccc68",
    "#7bed9f",
    "#a4b0be",
)

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8080
HEARTBEAT_INTERVAL: float = 30.0
