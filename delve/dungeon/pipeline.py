"""Pipeline orchestration for dungeon generation.

``Dungeon`` runs the ordered generation phases over one grid with one seeded
RNG: partition, rooms, shapes, bounds recompute, corridors, wall topology.
Each phase finishes its write pass before the next one reads the grid.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .cells import Grid
from .config import DungeonConfig, env_flag
from .corridors import CorridorPath, connect_rooms
from .metrics import init_metrics
from .partition import PartitionNode, partition
from .rooms import Room, generate_rooms, recompute_bounds
from .shapes import apply_shapes
from .tiles import CELL_TYPES
from .walls import WallTopology, analyze_walls

log = get_logger("delve.dungeon.pipeline")


@dataclass
class Dungeon:
    config: DungeonConfig = field(default_factory=DungeonConfig)
    enable_metrics: bool = True

    def __post_init__(self):
        # tests and the CLI toggle metrics through the environment
        self.enable_metrics = env_flag('DUNGEON_ENABLE_GENERATION_METRICS', self.enable_metrics)
        self.config.validate()
        self.seed: int = self.config.resolve_seed()
        # keep the caller's config untouched; ours records the seed actually used
        self.config = replace(self.config, seed=self.seed)
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self.rng = random.Random(self.seed)
        self.grid = Grid(self.config.dungeon_width, self.config.dungeon_length)
        self.root: Optional[PartitionNode] = None
        self.rooms: List[Room] = []
        self.degenerate_rooms: List[Room] = []
        self.corridors: List[CorridorPath] = []
        self.failures: List[PartitionNode] = []
        self.walls: Optional[WallTopology] = None
        self._run_pipeline()

    @property
    def width(self) -> int:
        return self.config.dungeon_width

    @property
    def length(self) -> int:
        return self.config.dungeon_length

    def _run_pipeline(self):
        """Execute the generation phases with per-phase timing.

        With metrics enabled ``metrics['phase_ms']`` maps phase name to its
        duration in milliseconds.
        """
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = int((pe - ps) * 1000)
                log.debug(event="phase_done", phase=label, ms=phase_times[label], seed=self.seed)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)
        cfg = self.config
        self.root = _phase('partition', partition, cfg, self.rng)
        self.rooms = _phase('rooms', generate_rooms, self.root, self.grid, cfg, self.rng)
        carved = {}
        if cfg.shapes is not None:
            carved = _phase('shapes', apply_shapes, self.rooms, self.grid, cfg.shapes, self.rng)
        self.degenerate_rooms = _phase('bounds', recompute_bounds, self.grid, self.rooms)
        for room in self.degenerate_rooms:
            log.warn(event="degenerate_room", seed=self.seed, room=room.index, shape=room.shape.value)
        self.corridors, self.failures = _phase('corridors', connect_rooms, self.root, self.rooms, self.grid, cfg)
        self.walls = _phase('walls', analyze_walls, self.grid)

        if self.enable_metrics:
            self._collect_metrics(carved)
            self.metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
            self.metrics['phase_ms'] = phase_times
        log.info(
            event="dungeon_built",
            seed=self.seed,
            size=f"{self.width}x{self.length}",
            rooms=len(self.rooms),
            corridors=len(self.corridors),
            failures=len(self.failures),
            degenerate=len(self.degenerate_rooms),
        )

    def _collect_metrics(self, carved):
        m = self.metrics
        m['leaves'] = len(self.root.leaves())
        m['rooms'] = len(self.rooms)
        for room in carved:
            m['shapes_applied'][room.shape.value] += 1
        m['shapes_applied']['rectangle'] = sum(1 for r in self.rooms if r not in carved)
        m['cells_carved_by_shapes'] = sum(len(cells) for cells in carved.values())
        m['degenerate_rooms'] = len(self.degenerate_rooms)
        m['corridors'] = len(self.corridors)
        m['corridors_bent'] = sum(1 for c in self.corridors if c.is_bent)
        m['corridors_straight'] = m['corridors'] - m['corridors_bent']
        m['corridor_failures'] = len(self.failures)
        m['tiles'] = {t: self.grid.count(t) for t in CELL_TYPES}
        m['corners_convex'] = len(self.walls.convex)
        m['corners_concave'] = len(self.walls.concave)
        m['corners_saddle'] = len(self.walls.saddle)
        m['wall_segments'] = self.walls.segment_count

    def to_rows(self) -> List[str]:
        return self.grid.to_rows()

    def room_rects(self):
        return [tuple(room.rect) for room in self.rooms]


__all__ = ["Dungeon"]
