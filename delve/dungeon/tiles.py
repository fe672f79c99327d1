# Cell type constants centralized for modular imports.
# The single character doubles as the debug-dump glyph.
EMPTY = "."
FLOOR = "F"
WALL = "W"
CORRIDOR = "C"
DOOR = "D"  # reserved for door placement by decoration passes; never written by the core

CELL_TYPES = (EMPTY, FLOOR, WALL, CORRIDOR, DOOR)
WALKABLE = frozenset({FLOOR, CORRIDOR, DOOR})

__all__ = ["EMPTY", "FLOOR", "WALL", "CORRIDOR", "DOOR", "CELL_TYPES", "WALKABLE"]
