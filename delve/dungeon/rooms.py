from dataclasses import dataclass
from typing import List, Optional, Tuple

from .cells import Grid, Rect
from .config import DungeonConfig
from .partition import PartitionNode
from .shapes import RoomShape
from .tiles import FLOOR, WALL


@dataclass(eq=False)
class Room(PartitionNode):
    """A carved room; ``rect`` holds its current bounds.

    Rooms compare and hash by identity so they can key dicts and be stored as
    a cell's ``parent_room``.
    """

    leaf: Optional[PartitionNode] = None
    shape: RoomShape = RoomShape.RECTANGLE
    room_type: Optional[str] = None
    prefab: Optional[str] = None
    index: int = 0

    def cells(self):
        return self.rect.cells()

    @property
    def center(self) -> Tuple[int, int]:
        return self.rect.center

    def __repr__(self) -> str:
        return f"Room(index={self.index}, rect={tuple(self.rect)}, shape={self.shape.value})"


def _draw(rng, lo: int, hi: int) -> int:
    """``rng.randrange(lo, hi)`` that collapses to ``lo`` on an empty range."""
    if hi <= lo:
        return lo
    return rng.randrange(lo, hi)


def inset_rect(leaf: Rect, config: DungeonConfig, rng) -> Rect:
    """Draw the room rectangle for one leaf.

    Draw order is fixed: bottom-left x, bottom-left y, top-right x, top-right y.
    """
    offset = config.room_offset
    span_x = leaf.width - 2 * offset
    span_y = leaf.height - 2 * offset
    bl_x = _draw(rng, leaf.x0 + offset, int(leaf.x0 + offset + span_x * config.room_bottom_corner_modifier))
    bl_y = _draw(rng, leaf.y0 + offset, int(leaf.y0 + offset + span_y * config.room_bottom_corner_modifier))
    tr_lo_x = int(leaf.x0 + offset + span_x * config.room_top_corner_modifier)
    tr_lo_y = int(leaf.y0 + offset + span_y * config.room_top_corner_modifier)
    tr_x = _draw(rng, tr_lo_x, leaf.x1 - offset) if tr_lo_x < leaf.x1 - offset else leaf.x1 - offset
    tr_y = _draw(rng, tr_lo_y, leaf.y1 - offset) if tr_lo_y < leaf.y1 - offset else leaf.y1 - offset
    x0, x1 = _grow(leaf.x0, leaf.x1, bl_x, tr_x, config.room_width_min, offset)
    y0, y1 = _grow(leaf.y0, leaf.y1, bl_y, tr_y, config.room_length_min, offset)
    return Rect(x0, y0, x1, y1)


def _grow(lo: int, hi: int, first: int, last: int, room_min: int, offset: int) -> Tuple[int, int]:
    start, stop = lo + offset, hi - offset
    # full room minimum; only a leaf narrower than that caps it
    need = max(1, min(room_min, hi - lo))
    # top-right side first, then bottom-left
    if last - first < need:
        last = min(stop, first + need)
    if last - first < need:
        first = max(start, last - need)
    # leaves thinner than the offset margins spill into the margin, never out of the leaf
    if last - first < need:
        first = max(lo, last - need)
        last = min(hi, first + need)
    return first, last


def paint_room(grid: Grid, room: Room) -> int:
    painted = 0
    for x, y in room.cells():
        if grid.set(x, y, FLOOR, room):
            painted += 1
    return painted


def mark_room_walls(grid: Grid, room: Room) -> List[Tuple[int, int]]:
    """Ring the room with Wall one cell outside its bounds.

    The four diagonal corner cells are skipped; Floor cells are never touched.
    Returns the cells that changed.
    """
    r = room.rect
    ring = [(x, r.y0 - 1) for x in range(r.x0, r.x1)]
    ring += [(x, r.y1) for x in range(r.x0, r.x1)]
    ring += [(r.x0 - 1, y) for y in range(r.y0, r.y1)]
    ring += [(r.x1, y) for y in range(r.y0, r.y1)]
    return [(x, y) for x, y in ring if grid.set(x, y, WALL)]


def generate_rooms(root: PartitionNode, grid: Grid, config: DungeonConfig, rng) -> List[Room]:
    """One room per leaf, in left-to-right tree order."""
    rooms: List[Room] = []
    for index, leaf in enumerate(root.leaves()):
        room = Room(inset_rect(leaf.rect, config, rng), leaf.depth, leaf=leaf, index=index)
        paint_room(grid, room)
        mark_room_walls(grid, room)
        rooms.append(room)
    return rooms


def recompute_bounds(grid: Grid, rooms: List[Room]) -> List[Room]:
    """Shrink each room to the tight extent of its remaining Floor cells.

    Returns the degenerate rooms (no Floor left); those keep their stale bounds.
    """
    degenerate: List[Room] = []
    for room in rooms:
        cells = grid.floor_cells(room, room.rect)
        if not cells:
            degenerate.append(room)
            continue
        xs = [c[0] for c in cells]
        ys = [c[1] for c in cells]
        room.rect = Rect(min(xs), min(ys), max(xs) + 1, max(ys) + 1)
    return degenerate


__all__ = ["Room", "inset_rect", "paint_room", "mark_room_walls", "generate_rooms", "recompute_bounds"]
