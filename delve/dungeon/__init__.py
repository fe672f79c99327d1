"""Public dungeon package interface."""

from .cells import Cell, Grid, Rect  # noqa: F401
from .config import ConfigError, DungeonConfig, ShapeConfig  # noqa: F401
from .pipeline import Dungeon  # noqa: F401
from .shapes import RoomShape  # noqa: F401
from .tiles import CORRIDOR, DOOR, EMPTY, FLOOR, WALKABLE, WALL  # noqa: F401

__all__ = [
    "Dungeon",
    "DungeonConfig",
    "ShapeConfig",
    "ConfigError",
    "RoomShape",
    "Cell",
    "Grid",
    "Rect",
    "EMPTY",
    "FLOOR",
    "WALL",
    "CORRIDOR",
    "DOOR",
    "WALKABLE",
]
