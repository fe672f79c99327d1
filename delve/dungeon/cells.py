from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, NamedTuple, Optional, Tuple

from .tiles import CORRIDOR, DOOR, EMPTY, FLOOR, WALL

if TYPE_CHECKING:
    from .rooms import Room

Coord2D = Tuple[int, int]

# Writes that may never land on a Floor cell.
_FLOOR_PROTECTED = frozenset({WALL, CORRIDOR, DOOR})


class Rect(NamedTuple):
    """Half-open integer rectangle ``[x0, x1) x [y0, y1)``."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def center(self) -> Coord2D:
        return ((self.x0 + self.x1) // 2, (self.y0 + self.y1) // 2)

    def cells(self) -> Iterator[Coord2D]:
        for ix in range(self.x0, self.x1):
            for iy in range(self.y0, self.y1):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

    def contains_rect(self, other: "Rect") -> bool:
        return self.x0 <= other.x0 and self.y0 <= other.y0 and other.x1 <= self.x1 and other.y1 <= self.y1


class Cell:
    """Lightweight container for a dungeon grid cell."""

    __slots__ = ("cell_type", "parent_room", "occupied")

    def __init__(self, cell_type: str = EMPTY, parent_room: Optional["Room"] = None, occupied: bool = False):
        self.cell_type = cell_type
        self.parent_room = parent_room
        self.occupied = occupied

    def __repr__(self) -> str:
        return f"Cell({self.cell_type!r}, room={getattr(self.parent_room, 'index', None)})"


class Grid:
    """Dense 2D cell store over ``[0, width) x [0, length)``.

    Column-major (``cells[x][y]``) like the rest of the generator code. Lookups
    outside the bounds return ``None`` which every pass treats as non-walkable.
    """

    def __init__(self, width: int, length: int):
        self.width = width
        self.length = length
        self._cells: List[List[Cell]] = [[Cell() for _ in range(length)] for _ in range(width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.length

    def get(self, x: int, y: int) -> Optional[Cell]:
        if not self.in_bounds(x, y):
            return None
        return self._cells[x][y]

    def type_at(self, x: int, y: int) -> Optional[str]:
        cell = self.get(x, y)
        return cell.cell_type if cell is not None else None

    def set(self, x: int, y: int, cell_type: str, room: Optional["Room"] = None) -> bool:
        """Write a cell type; returns True when the cell actually changed.

        Floor always wins: Wall/Corridor/Door writes over a Floor cell are
        silently dropped, as are writes outside the grid.
        """
        cell = self.get(x, y)
        if cell is None:
            return False
        if cell.cell_type == FLOOR and cell_type in _FLOOR_PROTECTED:
            return False
        owner = room if cell_type == FLOOR else None
        if cell.cell_type == cell_type and cell.parent_room is owner:
            return False
        cell.cell_type = cell_type
        cell.parent_room = owner
        if cell_type == EMPTY:
            cell.occupied = False
        return True

    def all_cells(self) -> Iterator[Tuple[Coord2D, Cell]]:
        for x in range(self.width):
            for y in range(self.length):
                yield (x, y), self._cells[x][y]

    def count(self, cell_type: str) -> int:
        return sum(1 for _pos, c in self.all_cells() if c.cell_type == cell_type)

    def floor_cells(self, room: "Room", area: Optional[Rect] = None) -> List[Coord2D]:
        """Floor cells owned by ``room`` inside ``area`` (whole grid when omitted)."""
        if area is None:
            area = Rect(0, 0, self.width, self.length)
        out = []
        for x, y in area.cells():
            cell = self.get(x, y)
            if cell is not None and cell.cell_type == FLOOR and cell.parent_room is room:
                out.append((x, y))
        return out

    def to_rows(self) -> List[str]:
        """Debug character dump, top row (highest y) first."""
        return [
            "".join(self._cells[x][y].cell_type for x in range(self.width))
            for y in range(self.length - 1, -1, -1)
        ]


__all__ = ["Coord2D", "Rect", "Cell", "Grid"]
