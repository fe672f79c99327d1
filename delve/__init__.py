"""
project: Delve
module: __init__.py
License: MIT

Seeded binary-space-partition dungeon layouts.

Builds a 2D grid of partitioned rooms (optionally reshaped into L/T/U/cross,
circular or recessed footprints), connects sibling partitions with corridors
and classifies the finished grid into wall segments and corner vertices for a
downstream mesh builder. Everything is a pure in-memory transform driven by a
single seeded RNG, so the same seed and parameters always give the same grid.
"""

__version__ = "0.4.0"

from .dungeon import Dungeon, DungeonConfig, ShapeConfig  # noqa: E402,F401

__all__ = ["Dungeon", "DungeonConfig", "ShapeConfig", "__version__"]
