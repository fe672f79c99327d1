"""Wall topology of a finished grid.

Vertices are the integer lattice points between cells: vertex ``(vx, vy)``
touches the cells ``(vx-1, vy-1)``, ``(vx, vy-1)``, ``(vx-1, vy)`` and
``(vx, vy)``. Wall segments are unit cell edges; a horizontal segment ``(x, y)``
runs along the line ``y`` from ``x`` to ``x+1`` and a vertical segment ``(x, y)``
runs along the line ``x`` from ``y`` to ``y+1``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from .cells import Coord2D, Grid
from .tiles import WALKABLE


class VertexKind(Enum):
    NONE = "none"
    CONVEX = "convex"
    CONCAVE = "concave"
    SADDLE = "saddle"  # two walkable cells diagonally opposite


@dataclass
class WallTopology:
    horizontal: List[Coord2D] = field(default_factory=list)
    vertical: List[Coord2D] = field(default_factory=list)
    convex: List[Coord2D] = field(default_factory=list)
    concave: List[Coord2D] = field(default_factory=list)
    saddle: List[Coord2D] = field(default_factory=list)

    @property
    def corners(self) -> List[Coord2D]:
        return sorted(self.convex + self.concave + self.saddle)

    @property
    def segment_count(self) -> int:
        return len(self.horizontal) + len(self.vertical)


def is_walkable(grid: Grid, x: int, y: int) -> bool:
    return grid.type_at(x, y) in WALKABLE


def _neighbours(grid: Grid, vx: int, vy: int) -> Tuple[bool, bool, bool, bool]:
    return (
        is_walkable(grid, vx - 1, vy - 1),  # bottom-left
        is_walkable(grid, vx, vy - 1),  # bottom-right
        is_walkable(grid, vx - 1, vy),  # top-left
        is_walkable(grid, vx, vy),  # top-right
    )


def classify_vertex(grid: Grid, vx: int, vy: int) -> VertexKind:
    bl, br, tl, tr = _neighbours(grid, vx, vy)
    count = bl + br + tl + tr
    if count == 1:
        return VertexKind.CONVEX
    if count == 3:
        return VertexKind.CONCAVE
    if count == 2 and bl == tr:
        return VertexKind.SADDLE
    return VertexKind.NONE


def is_corner(kind: VertexKind) -> bool:
    return kind is not VertexKind.NONE


def extract_wall_segments(grid: Grid) -> Tuple[List[Coord2D], List[Coord2D]]:
    """Every edge between a walkable and a non-walkable cell, as (horizontal, vertical)."""
    horizontal = []
    vertical = []
    for (x, y), cell in grid.all_cells():
        if cell.cell_type not in WALKABLE:
            continue
        if not is_walkable(grid, x, y + 1):
            horizontal.append((x, y + 1))
        if not is_walkable(grid, x, y - 1):
            horizontal.append((x, y))
        if not is_walkable(grid, x + 1, y):
            vertical.append((x + 1, y))
        if not is_walkable(grid, x - 1, y):
            vertical.append((x, y))
    return sorted(horizontal), sorted(vertical)


def analyze_walls(grid: Grid) -> WallTopology:
    horizontal, vertical = extract_wall_segments(grid)
    topo = WallTopology(horizontal=horizontal, vertical=vertical)
    buckets = {VertexKind.CONVEX: topo.convex, VertexKind.CONCAVE: topo.concave, VertexKind.SADDLE: topo.saddle}
    for vx in range(grid.width + 1):
        for vy in range(grid.length + 1):
            kind = classify_vertex(grid, vx, vy)
            if kind is not VertexKind.NONE:
                buckets[kind].append((vx, vy))
    return topo


__all__ = [
    "VertexKind",
    "WallTopology",
    "is_walkable",
    "classify_vertex",
    "is_corner",
    "extract_wall_segments",
    "analyze_walls",
]
