"""Corridor routing between sibling partitions.

Two routers share the same output model. ``smart`` attaches corridors to
connection points on room edges (straight when the points face each other
closely enough, otherwise an L through a corner). ``bounding_box`` joins the
rooms' rectangles directly and always produces a corridor.

Both walk the partition tree bottom-up: every internal node links one room
under its first child with one room under its second.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from .cells import Coord2D, Grid, Rect
from .config import DungeonConfig
from .connections import ConnectionPoint, analyze_room, corner_of, find_best_pair, find_corner_pair
from .partition import PartitionNode, internal_nodes_bottom_up
from .tiles import CORRIDOR, FLOOR, WALL

if TYPE_CHECKING:
    from .rooms import Room

log = get_logger("delve.dungeon.corridors")


@dataclass(frozen=True)
class CorridorSegment:
    """Axis-aligned block of corridor cells; ``start``/``end`` are inclusive corners."""

    start: Coord2D
    end: Coord2D
    is_horizontal: bool

    @property
    def cross_section(self) -> int:
        if self.is_horizontal:
            return self.end[1] - self.start[1] + 1
        return self.end[0] - self.start[0] + 1

    @property
    def length(self) -> int:
        if self.is_horizontal:
            return self.end[0] - self.start[0] + 1
        return self.end[1] - self.start[1] + 1

    def cells(self):
        for x in range(self.start[0], self.end[0] + 1):
            for y in range(self.start[1], self.end[1] + 1):
                yield x, y

    def contains(self, x: int, y: int) -> bool:
        return self.start[0] <= x <= self.end[0] and self.start[1] <= y <= self.end[1]

    def flank_cells(self):
        """Cells just outside the two long edges."""
        if self.is_horizontal:
            for x in range(self.start[0], self.end[0] + 1):
                yield x, self.start[1] - 1
                yield x, self.end[1] + 1
        else:
            for y in range(self.start[1], self.end[1] + 1):
                yield self.start[0] - 1, y
                yield self.end[0] + 1, y


@dataclass
class CorridorPath:
    from_room: "Room"
    to_room: "Room"
    segments: List[CorridorSegment] = field(default_factory=list)
    is_bent: bool = False
    start_point: Optional[ConnectionPoint] = None
    end_point: Optional[ConnectionPoint] = None


def _band(center: int, width: int) -> Tuple[int, int]:
    """Inclusive range of exactly ``width`` cells around ``center``."""
    lo = center - width // 2
    return lo, lo + width - 1


def horizontal_segment(x_a: int, x_b: int, center_y: int, width: int) -> CorridorSegment:
    y0, y1 = _band(center_y, width)
    return CorridorSegment((min(x_a, x_b), y0), (max(x_a, x_b), y1), True)


def vertical_segment(y_a: int, y_b: int, center_x: int, width: int) -> CorridorSegment:
    x0, x1 = _band(center_x, width)
    return CorridorSegment((x0, min(y_a, y_b)), (x1, max(y_a, y_b)), False)


def bent_segments(start: Coord2D, corner: Coord2D, end: Coord2D, first_vertical: bool, width: int):
    """Two perpendicular segments ``start -> corner -> end``.

    Both run through the full ``width x width`` square centred on the corner
    so the turn has no notch.
    """
    sq_lo_x, sq_hi_x = _band(corner[0], width)
    sq_lo_y, sq_hi_y = _band(corner[1], width)
    if first_vertical:
        first = vertical_segment(min(start[1], sq_lo_y), max(start[1], sq_hi_y), start[0], width)
        second = horizontal_segment(min(end[0], sq_lo_x), max(end[0], sq_hi_x), corner[1], width)
    else:
        first = horizontal_segment(min(start[0], sq_lo_x), max(start[0], sq_hi_x), start[1], width)
        second = vertical_segment(min(end[1], sq_lo_y), max(end[1], sq_hi_y), corner[0], width)
    return [first, second]


def directly_aligned(p1: ConnectionPoint, p2: ConnectionPoint, width: int) -> bool:
    if p1.direction.opposite is not p2.direction:
        return False
    axis = 0 if p1.direction.is_vertical else 1
    return abs(p1.position[axis] - p2.position[axis]) <= width


def path_between(p1: ConnectionPoint, p2: ConnectionPoint, width: int) -> CorridorPath:
    (x1, y1), (x2, y2) = p1.position, p2.position
    if directly_aligned(p1, p2, width):
        if p1.direction.is_vertical:
            seg = vertical_segment(y1, y2, (x1 + x2) // 2, width)
        else:
            seg = horizontal_segment(x1, x2, (y1 + y2) // 2, width)
        return CorridorPath(p1.room, p2.room, [seg], False, p1, p2)
    corner = corner_of(p1, p2)
    segments = bent_segments(p1.position, corner, p2.position, p1.direction.is_vertical, width)
    return CorridorPath(p1.room, p2.room, segments, True, p1, p2)


def _rooms_under(node: PartitionNode, room_by_leaf: Dict[PartitionNode, "Room"]) -> List["Room"]:
    return [room_by_leaf[leaf] for leaf in node.leaves() if leaf in room_by_leaf]


def route_smart(root: PartitionNode, rooms: List["Room"], grid: Grid, width: int):
    """Connection-point router. Returns ``(paths, failed_nodes)``."""
    points = {room: analyze_room(grid, room) for room in rooms}
    room_by_leaf = {room.leaf: room for room in rooms}
    paths: List[CorridorPath] = []
    failures: List[PartitionNode] = []
    for node in internal_nodes_bottom_up(root):
        best = None
        best_distance = math.inf
        for r1 in _rooms_under(node.children[0], room_by_leaf):
            for r2 in _rooms_under(node.children[1], room_by_leaf):
                pair = find_best_pair(points[r1], points[r2]) or find_corner_pair(points[r1], points[r2])
                if pair is None:
                    continue
                distance = math.dist(pair[0].position, pair[1].position)
                if distance < best_distance:
                    best_distance = distance
                    best = pair
        if best is None:
            failures.append(node)
            log.warn(event="corridor_pairing_failed", depth=node.depth, rect=",".join(map(str, node.rect)))
            continue
        paths.append(path_between(best[0], best[1], width))
    return paths, failures


def _split_axis(node: PartitionNode) -> str:
    first, second = node.children
    return "x" if first.rect.x1 == second.rect.x0 and first.rect.y0 == second.rect.y0 else "y"


def _straight_between(r1: Rect, r2: Rect, axis: str, width: int) -> Optional[Tuple[int, CorridorSegment]]:
    # r1 sits below/left of r2 along the split axis
    if axis == "x":
        gap = r2.x0 - r1.x1
        lo, hi = max(r1.y0, r2.y0), min(r1.y1, r2.y1)
    else:
        gap = r2.y0 - r1.y1
        lo, hi = max(r1.x0, r2.x0), min(r1.x1, r2.x1)
    if hi - lo < width:
        return None
    center = (lo + hi) // 2
    if axis == "x":
        return gap, horizontal_segment(r1.x1 - 1, r2.x0, center, width)
    return gap, vertical_segment(r1.y1 - 1, r2.y0, center, width)


def route_bounding_box(root: PartitionNode, rooms: List["Room"], width: int):
    """Rectangle router: straight through a shared span, else an L between centres."""
    room_by_leaf = {room.leaf: room for room in rooms}
    paths: List[CorridorPath] = []
    for node in internal_nodes_bottom_up(root):
        axis = _split_axis(node)
        firsts = _rooms_under(node.children[0], room_by_leaf)
        seconds = _rooms_under(node.children[1], room_by_leaf)
        straight = None
        for r1 in firsts:
            for r2 in seconds:
                found = _straight_between(r1.rect, r2.rect, axis, width)
                if found is not None and (straight is None or found[0] < straight[0]):
                    straight = (found[0], found[1], r1, r2)
        if straight is not None:
            _gap, seg, r1, r2 = straight
            paths.append(CorridorPath(r1, r2, [seg], False))
            continue
        closest = None
        best_distance = math.inf
        for r1 in firsts:
            for r2 in seconds:
                distance = math.dist(r1.center, r2.center)
                if distance < best_distance:
                    best_distance = distance
                    closest = (r1, r2)
        if closest is None:
            continue
        r1, r2 = closest
        (x1, y1), (x2, y2) = r1.center, r2.center
        segments = bent_segments((x1, y1), (x2, y1), (x2, y2), False, width)
        paths.append(CorridorPath(r1, r2, segments, True))
    return paths, []


def rasterize(grid: Grid, paths: List[CorridorPath]) -> int:
    """Write corridor cells and their flanking walls; returns corridor cells written.

    Floor is never overwritten; flank walls also leave existing corridor alone.
    """
    written = 0
    for path in paths:
        for seg in path.segments:
            for x, y in seg.cells():
                if grid.type_at(x, y) != FLOOR and grid.set(x, y, CORRIDOR):
                    written += 1
            for x, y in seg.flank_cells():
                if grid.type_at(x, y) not in (FLOOR, CORRIDOR):
                    grid.set(x, y, WALL)
    return written


def connect_rooms(root: PartitionNode, rooms: List["Room"], grid: Grid, config: DungeonConfig):
    """Route with the configured strategy, then rasterize every path."""
    width = config.effective_corridor_width
    if config.corridor_mode == "bounding_box":
        paths, failures = route_bounding_box(root, rooms, width)
    else:
        paths, failures = route_smart(root, rooms, grid, width)
    rasterize(grid, paths)
    return paths, failures


__all__ = [
    "CorridorSegment",
    "CorridorPath",
    "horizontal_segment",
    "vertical_segment",
    "bent_segments",
    "directly_aligned",
    "path_between",
    "route_smart",
    "route_bounding_box",
    "rasterize",
    "connect_rooms",
]
