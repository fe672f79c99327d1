"""Room shape carving.

Shapes are a closed set: every non-rectangular footprint is produced by
turning some of a room's Floor cells back into Empty. ``apply_shape`` reports
exactly which cells it removed so callers (and tests) can reason about the
change without diffing the grid.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Set, Tuple

from ..logging_utils import get_logger
from .cells import Grid, Rect
from .config import ShapeConfig
from .tiles import EMPTY, FLOOR

if TYPE_CHECKING:
    from .rooms import Room

log = get_logger("delve.dungeon.shapes")

# Shapes that need more room than the base minimum.
LARGE_SHAPE_MIN = 8
CIRCULAR_MAX_ASPECT_DELTA = 4
CROSS_CUT_SCALE = 0.7


class RoomShape(Enum):
    RECTANGLE = "rectangle"
    L_SHAPE = "l_shape"
    T_SHAPE = "t_shape"
    U_SHAPE = "u_shape"
    CROSS = "cross"
    CIRCULAR = "circular"
    RECESSES = "recesses"


# Same order as ShapeConfig.weights(); cumulative sampling walks it in this order.
SHAPE_ORDER: Tuple[RoomShape, ...] = (
    RoomShape.RECTANGLE,
    RoomShape.L_SHAPE,
    RoomShape.T_SHAPE,
    RoomShape.U_SHAPE,
    RoomShape.CROSS,
    RoomShape.CIRCULAR,
    RoomShape.RECESSES,
)


def can_apply(shape: RoomShape, width: int, height: int, config: ShapeConfig) -> bool:
    base = config.min_size_for_shapes
    large = max(LARGE_SHAPE_MIN, base)
    if shape is RoomShape.RECTANGLE:
        return True
    elif shape in (RoomShape.L_SHAPE, RoomShape.T_SHAPE, RoomShape.RECESSES):
        return width >= base and height >= base
    elif shape in (RoomShape.U_SHAPE, RoomShape.CROSS):
        return width >= large and height >= large
    elif shape is RoomShape.CIRCULAR:
        return width >= large and height >= large and abs(width - height) <= CIRCULAR_MAX_ASPECT_DELTA
    raise ValueError(f"unknown room shape {shape!r}")


def select_shape(width: int, height: int, config: ShapeConfig, rng) -> RoomShape:
    """Weighted draw over the shapes compatible with a ``width x height`` room.

    No draw is consumed when nothing but the rectangle fits.
    """
    weights = dict(zip(SHAPE_ORDER, config.weights()))
    candidates = [s for s in SHAPE_ORDER if weights[s] > 0 and can_apply(s, width, height, config)]
    if not any(s is not RoomShape.RECTANGLE for s in candidates):
        return RoomShape.RECTANGLE
    total = sum(weights[s] for s in candidates)
    value = rng.uniform(0.0, total)
    cumulative = 0.0
    for shape in candidates:
        cumulative += weights[shape]
        if value < cumulative:
            return shape
    return candidates[-1]


def remove_cells(grid: Grid, room: "Room", x0: int, y0: int, x1: int, y1: int) -> Set[Tuple[int, int]]:
    """Floor -> Empty over ``[x0, x1) x [y0, y1)`` for cells owned by ``room``."""
    removed = set()
    for x in range(x0, x1):
        for y in range(y0, y1):
            cell = grid.get(x, y)
            if cell is None or cell.cell_type != FLOOR or cell.parent_room is not room:
                continue
            grid.set(x, y, EMPTY)
            removed.add((x, y))
    return removed


def _cutout(dimension: int, lo: float, hi: float, rng) -> int:
    return round(dimension * rng.uniform(lo, hi))


def _randrange(rng, lo: int, hi: int) -> int:
    if hi <= lo:
        return lo
    return rng.randrange(lo, hi)


def _corner_box(r: Rect, corner: int, cut_w: int, cut_h: int) -> Tuple[int, int, int, int]:
    # 0: bottom-left, 1: bottom-right, 2: top-left, 3: top-right
    left = corner in (0, 2)
    bottom = corner in (0, 1)
    x0, x1 = (r.x0, r.x0 + cut_w) if left else (r.x1 - cut_w, r.x1)
    y0, y1 = (r.y0, r.y0 + cut_h) if bottom else (r.y1 - cut_h, r.y1)
    return x0, y0, x1, y1


def _apply_l(room, grid, config, rng):
    r = room.rect
    corner = rng.randrange(4)
    cut_w = _cutout(r.width, config.cutout_min_size, config.cutout_max_size, rng)
    cut_h = _cutout(r.height, config.cutout_min_size, config.cutout_max_size, rng)
    return remove_cells(grid, room, *_corner_box(r, corner, cut_w, cut_h))


def _apply_t(room, grid, config, rng):
    r = room.rect
    horizontal = rng.random() > 0.5
    cut = _cutout(r.height if horizontal else r.width, config.cutout_min_size, config.cutout_max_size, rng)
    first_side = rng.random() > 0.5
    removed = set()
    if horizontal:
        third = r.width // 3
        # top side or bottom side; the stem stays in the middle third
        y0, y1 = (r.y1 - cut, r.y1) if first_side else (r.y0, r.y0 + cut)
        removed |= remove_cells(grid, room, r.x0, y0, r.x0 + third, y1)
        removed |= remove_cells(grid, room, r.x1 - third, y0, r.x1, y1)
    else:
        third = r.height // 3
        x0, x1 = (r.x0, r.x0 + cut) if first_side else (r.x1 - cut, r.x1)
        removed |= remove_cells(grid, room, x0, r.y0, x1, r.y0 + third)
        removed |= remove_cells(grid, room, x0, r.y1 - third, x1, r.y1)
    return removed


def _apply_u(room, grid, config, rng):
    r = room.rect
    side = rng.randrange(4)
    cut_w = _cutout(r.width, 0.3, 0.5, rng)
    cut_h = _cutout(r.height, 0.3, 0.5, rng)
    # 0: top, 1: bottom, 2: left, 3: right
    if side in (0, 1):
        x0, x1 = r.x0 + r.width // 4, r.x1 - r.width // 4
        y0, y1 = (r.y1 - cut_h, r.y1) if side == 0 else (r.y0, r.y0 + cut_h)
    else:
        y0, y1 = r.y0 + r.height // 4, r.y1 - r.height // 4
        x0, x1 = (r.x0, r.x0 + cut_w) if side == 2 else (r.x1 - cut_w, r.x1)
    return remove_cells(grid, room, x0, y0, x1, y1)


def _apply_cross(room, grid, config, rng):
    r = room.rect
    lo = config.cutout_min_size * CROSS_CUT_SCALE
    hi = config.cutout_max_size * CROSS_CUT_SCALE
    cut_w = _cutout(r.width, lo, hi, rng)
    cut_h = _cutout(r.height, lo, hi, rng)
    removed = set()
    for corner in range(4):
        removed |= remove_cells(grid, room, *_corner_box(r, corner, cut_w, cut_h))
    return removed


def _apply_circular(room, grid, config, rng):
    r = room.rect
    cx = (r.x0 + r.x1) / 2.0
    cy = (r.y0 + r.y1) / 2.0
    radius = min(r.width, r.height) / 2.0 * rng.uniform(0.85, 0.95)
    removed = set()
    for x, y in r.cells():
        if math.hypot(x + 0.5 - cx, y + 0.5 - cy) > radius:
            removed |= remove_cells(grid, room, x, y, x + 1, y + 1)
    return removed


def _apply_recesses(room, grid, config, rng):
    r = room.rect
    removed = set()
    for _ in range(config.recess_count):
        # 0: bottom, 1: top, 2: left, 3: right
        side = rng.randrange(4)
        depth = rng.randrange(2, 4)
        span = r.width if side < 2 else r.height
        # at most a third of the side
        longest = max(1, span // 3)
        length = rng.randrange(min(3, longest), longest + 1)
        if side < 2:
            start = _randrange(rng, r.x0 + 2, max(r.x0 + 3, r.x1 - length - 2))
            y0, y1 = (r.y0, r.y0 + depth) if side == 0 else (r.y1 - depth, r.y1)
            removed |= remove_cells(grid, room, start, y0, start + length, y1)
        else:
            start = _randrange(rng, r.y0 + 2, max(r.y0 + 3, r.y1 - length - 2))
            x0, x1 = (r.x0, r.x0 + depth) if side == 2 else (r.x1 - depth, r.x1)
            removed |= remove_cells(grid, room, x0, start, x1, start + length)
    return removed


def apply_shape(room: "Room", grid: Grid, shape: RoomShape, config: ShapeConfig, rng) -> Set[Tuple[int, int]]:
    """Carve ``shape`` into ``room`` and return the removed cells.

    A shape the room is too small for is refused: nothing is removed and the
    room stays a rectangle.
    """
    if not can_apply(shape, room.rect.width, room.rect.height, config):
        return set()
    if shape is RoomShape.RECTANGLE:
        removed = set()
    elif shape is RoomShape.L_SHAPE:
        removed = _apply_l(room, grid, config, rng)
    elif shape is RoomShape.T_SHAPE:
        removed = _apply_t(room, grid, config, rng)
    elif shape is RoomShape.U_SHAPE:
        removed = _apply_u(room, grid, config, rng)
    elif shape is RoomShape.CROSS:
        removed = _apply_cross(room, grid, config, rng)
    elif shape is RoomShape.CIRCULAR:
        removed = _apply_circular(room, grid, config, rng)
    elif shape is RoomShape.RECESSES:
        removed = _apply_recesses(room, grid, config, rng)
    else:
        raise ValueError(f"unknown room shape {shape!r}")
    room.shape = shape
    return removed


def apply_shapes(rooms: List["Room"], grid: Grid, config: ShapeConfig, rng) -> Dict["Room", Set[Tuple[int, int]]]:
    """Select and carve a shape for every room, in room order."""
    changes: Dict["Room", Set[Tuple[int, int]]] = {}
    for room in rooms:
        shape = select_shape(room.rect.width, room.rect.height, config, rng)
        if shape is RoomShape.RECTANGLE:
            continue
        changes[room] = apply_shape(room, grid, shape, config, rng)
        log.debug(event="room_shaped", room=room.index, shape=shape.value, removed=len(changes[room]))
    return changes


__all__ = [
    "RoomShape",
    "SHAPE_ORDER",
    "can_apply",
    "select_shape",
    "apply_shape",
    "apply_shapes",
    "remove_cells",
]
