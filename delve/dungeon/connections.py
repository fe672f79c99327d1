"""Corridor attachment points along room edges.

A connection point is one maximal run of a room's own Floor cells along one
of its four edges, kept clear of the corners and at least
``MIN_CONNECTION_WIDTH`` cells long.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from .cells import Coord2D, Grid
from .tiles import FLOOR

if TYPE_CHECKING:
    from .rooms import Room

MIN_CONNECTION_WIDTH = 5
DISTANCE_FROM_CORNER = 2
MAX_QUALITY = 100
OVERLAP_BONUS = 5


class Direction(Enum):
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def is_vertical(self) -> bool:
        """True for N/S, whose edges run along x."""
        return self in (Direction.NORTH, Direction.SOUTH)

    @property
    def outward(self) -> Coord2D:
        return _OUTWARD[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]


_OUTWARD = {
    Direction.NORTH: (0, 1),
    Direction.SOUTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}
_OPPOSITE = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}


@dataclass(frozen=True)
class ConnectionPoint:
    position: Coord2D
    direction: Direction
    quality: int
    room: "Room"
    range_start: Coord2D
    range_end: Coord2D

    @property
    def span(self) -> Tuple[int, int]:
        """Inclusive range along the edge (x for N/S edges, y for E/W)."""
        axis = 0 if self.direction.is_vertical else 1
        return self.range_start[axis], self.range_end[axis]

    @property
    def length(self) -> int:
        lo, hi = self.span
        return hi - lo + 1

    def cells(self) -> List[Coord2D]:
        lo, hi = self.span
        if self.direction.is_vertical:
            return [(x, self.position[1]) for x in range(lo, hi + 1)]
        return [(self.position[0], y) for y in range(lo, hi + 1)]


def _edge_runs(grid: Grid, room: "Room", direction: Direction) -> List[ConnectionPoint]:
    r = room.rect
    if direction is Direction.NORTH:
        fixed, lo, hi = r.y1 - 1, r.x0, r.x1
    elif direction is Direction.SOUTH:
        fixed, lo, hi = r.y0, r.x0, r.x1
    elif direction is Direction.EAST:
        fixed, lo, hi = r.x1 - 1, r.y0, r.y1
    else:
        fixed, lo, hi = r.x0, r.y0, r.y1
    along_x = direction.is_vertical

    def owned(i):
        x, y = (i, fixed) if along_x else (fixed, i)
        cell = grid.get(x, y)
        return cell is not None and cell.cell_type == FLOOR and cell.parent_room is room

    points = []
    run_start, run_len = None, 0
    # one sentinel step past the end closes a trailing run
    for i in range(lo + DISTANCE_FROM_CORNER, hi - DISTANCE_FROM_CORNER + 1):
        if i < hi - DISTANCE_FROM_CORNER and owned(i):
            if run_start is None:
                run_start = i
            run_len += 1
            continue
        if run_start is not None and run_len >= MIN_CONNECTION_WIDTH:
            points.append(_make_point(room, direction, fixed, run_start, run_len))
        run_start, run_len = None, 0
    return points


def _make_point(room, direction: Direction, fixed: int, start: int, length: int) -> ConnectionPoint:
    centre = start + length // 2
    end = start + length - 1
    if direction.is_vertical:
        position, range_start, range_end = (centre, fixed), (start, fixed), (end, fixed)
    else:
        position, range_start, range_end = (fixed, centre), (fixed, start), (fixed, end)
    quality = min(MAX_QUALITY, length * 10)
    return ConnectionPoint(position, direction, quality, room, range_start, range_end)


def analyze_room(grid: Grid, room: "Room") -> List[ConnectionPoint]:
    """All connection points of ``room``, edges in N, S, E, W order."""
    points: List[ConnectionPoint] = []
    for direction in (Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST):
        points.extend(_edge_runs(grid, room, direction))
    return points


def overlap(a: ConnectionPoint, b: ConnectionPoint) -> int:
    a_lo, a_hi = a.span
    b_lo, b_hi = b.span
    return max(0, min(a_hi, b_hi) - max(a_lo, b_lo) + 1)


def can_align(a: ConnectionPoint, b: ConnectionPoint) -> bool:
    """Opposite-facing points whose edge ranges overlap."""
    return a.direction.opposite is b.direction and overlap(a, b) > 0


def find_best_pair(
    points1: List[ConnectionPoint], points2: List[ConnectionPoint]
) -> Optional[Tuple[ConnectionPoint, ConnectionPoint]]:
    """Highest ``q1 + q2 + 5 * overlap`` over alignable pairs; first maximum wins."""
    best = None
    best_score = -1
    for p1 in points1:
        for p2 in points2:
            if not can_align(p1, p2):
                continue
            score = p1.quality + p2.quality + OVERLAP_BONUS * overlap(p1, p2)
            if score > best_score:
                best_score = score
                best = (p1, p2)
    return best


def corner_of(p1: ConnectionPoint, p2: ConnectionPoint) -> Coord2D:
    """Where the fixed axis of ``p1`` meets the fixed axis of ``p2``."""
    if p1.direction.is_vertical:
        return (p1.position[0], p2.position[1])
    return (p2.position[0], p1.position[1])


def _ray_reaches(point: ConnectionPoint, target: Coord2D) -> bool:
    dx, dy = point.direction.outward
    px, py = point.position
    if dx:
        return (target[0] - px) * dx > 0
    return (target[1] - py) * dy > 0


def find_corner_pair(
    points1: List[ConnectionPoint], points2: List[ConnectionPoint]
) -> Optional[Tuple[ConnectionPoint, ConnectionPoint]]:
    """Perpendicular pair whose outward rays meet at a corner outside both rooms.

    Used when two rooms share no opposite-facing pair; scored ``q1 + q2``.
    """
    best = None
    best_score = -1
    for p1 in points1:
        for p2 in points2:
            if p1.direction.is_vertical == p2.direction.is_vertical:
                continue
            corner = corner_of(p1, p2)
            if not (_ray_reaches(p1, corner) and _ray_reaches(p2, corner)):
                continue
            if p1.room.rect.contains(*corner) or p2.room.rect.contains(*corner):
                continue
            score = p1.quality + p2.quality
            if score > best_score:
                best_score = score
                best = (p1, p2)
    return best


__all__ = [
    "Direction",
    "ConnectionPoint",
    "MIN_CONNECTION_WIDTH",
    "DISTANCE_FROM_CORNER",
    "analyze_room",
    "overlap",
    "can_align",
    "find_best_pair",
    "find_corner_pair",
    "corner_of",
]
