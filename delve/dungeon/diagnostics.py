"""Structural checks over a generated dungeon.

Used by ``run.py diagnose`` and ``scripts/diagnose_seeds.py``. Hard issues
break a layout invariant; soft issues (pairing failures, unreachable rooms,
degenerate rooms) are legitimate outcomes that are still worth surfacing.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Set

from .cells import Coord2D
from .connections import MIN_CONNECTION_WIDTH, analyze_room
from .tiles import FLOOR, WALKABLE

HARD_ISSUES = ("rooms_outside_leaf", "overlapping_rooms", "corridor_width_violations", "invalid_connection_points")
SOFT_ISSUES = ("corridor_failures", "unreachable_rooms", "degenerate_rooms")


def reachable_from(grid, start: Coord2D) -> Set[Coord2D]:
    if grid.type_at(*start) not in WALKABLE:
        return set()
    q = deque([start])
    seen = {start}
    while q:
        x, y = q.popleft()
        for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if (nx, ny) not in seen and grid.type_at(nx, ny) in WALKABLE:
                seen.add((nx, ny))
                q.append((nx, ny))
    return seen


def unreachable_rooms(dungeon) -> List[int]:
    """Indices of rooms with no Floor reachable from the first non-empty room."""
    floors = {room: dungeon.grid.floor_cells(room, room.rect) for room in dungeon.rooms}
    live = [room for room in dungeon.rooms if floors[room]]
    if not live:
        return []
    seen = reachable_from(dungeon.grid, floors[live[0]][0])
    return [room.index for room in live if not any(c in seen for c in floors[room])]


def _connection_point_problems(dungeon) -> int:
    bad = 0
    for room in dungeon.rooms:
        for point in analyze_room(dungeon.grid, room):
            cells_ok = all(
                dungeon.grid.type_at(x, y) == FLOOR and dungeon.grid.get(x, y).parent_room is room
                for x, y in point.cells()
            )
            if not cells_ok or point.length < MIN_CONNECTION_WIDTH:
                bad += 1
    return bad


def analyze(dungeon) -> Dict[str, object]:
    rooms = dungeon.rooms
    width = dungeon.config.effective_corridor_width
    overlapping = 0
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            if a.rect.x0 < b.rect.x1 and b.rect.x0 < a.rect.x1 and a.rect.y0 < b.rect.y1 and b.rect.y0 < a.rect.y1:
                overlapping += 1
    issues = {
        "rooms_outside_leaf": sum(1 for r in rooms if not r.leaf.rect.contains_rect(r.rect)),
        "overlapping_rooms": overlapping,
        "corridor_width_violations": sum(
            1 for path in dungeon.corridors for seg in path.segments if seg.cross_section != width
        ),
        "invalid_connection_points": _connection_point_problems(dungeon),
        "corridor_failures": len(dungeon.failures),
        "unreachable_rooms": len(unreachable_rooms(dungeon)),
        "degenerate_rooms": len(dungeon.degenerate_rooms),
    }
    return {
        "seed": dungeon.seed,
        "rooms": len(rooms),
        "corridors": len(dungeon.corridors),
        "issues": issues,
        "ok": all(issues[k] == 0 for k in HARD_ISSUES),
    }


__all__ = ["analyze", "reachable_from", "unreachable_rooms", "HARD_ISSUES", "SOFT_ISSUES"]
