"""Binary space partitioning of the dungeon rectangle.

The tree is expanded breadth-first from the root so the order in which the
shared RNG is consumed depends only on the seed and the parameters.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .cells import Rect
from .config import DungeonConfig

# Longer axis wins outright when it exceeds the other by this factor.
_AXIS_BIAS = 1.25


@dataclass(eq=False)
class PartitionNode:
    rect: Rect
    depth: int = 0
    children: List["PartitionNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["PartitionNode"]:
        """Pre-order traversal (node, left subtree, right subtree)."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> List["PartitionNode"]:
        return [n for n in self.walk() if n.is_leaf]


def choose_split_axis(rect: Rect, config: DungeonConfig, rng) -> Optional[str]:
    """Return ``'x'`` (vertical cut), ``'y'`` (horizontal cut) or None.

    Legality is decided before any draw so an unsplittable rect never
    consumes randomness.
    """
    # both halves must keep at least 2x the room minimum along the cut axis
    can_x = rect.width >= 4 * config.room_width_min
    can_y = rect.height >= 4 * config.room_length_min
    if not can_x and not can_y:
        return None
    if can_x and not can_y:
        return "x"
    if can_y and not can_x:
        return "y"
    if rect.width > rect.height * _AXIS_BIAS:
        return "x"
    if rect.height > rect.width * _AXIS_BIAS:
        return "y"
    return "x" if rng.random() < 0.5 else "y"


def split_rect(rect: Rect, axis: str, config: DungeonConfig, rng):
    if axis == "x":
        cut = rng.randint(rect.x0 + 2 * config.room_width_min, rect.x1 - 2 * config.room_width_min)
        return Rect(rect.x0, rect.y0, cut, rect.y1), Rect(cut, rect.y0, rect.x1, rect.y1)
    cut = rng.randint(rect.y0 + 2 * config.room_length_min, rect.y1 - 2 * config.room_length_min)
    return Rect(rect.x0, rect.y0, rect.x1, cut), Rect(rect.x0, cut, rect.x1, rect.y1)


def partition(config: DungeonConfig, rng) -> PartitionNode:
    """Build the partition tree; recursion stops at the depth budget or when
    neither axis admits a legal split."""
    root = PartitionNode(Rect(0, 0, config.dungeon_width, config.dungeon_length), 0)
    queue = deque([root])
    while queue:
        node = queue.popleft()
        if node.depth >= config.max_iterations:
            continue
        axis = choose_split_axis(node.rect, config, rng)
        if axis is None:
            continue
        first, second = split_rect(node.rect, axis, config, rng)
        node.children = [PartitionNode(first, node.depth + 1), PartitionNode(second, node.depth + 1)]
        queue.extend(node.children)
    return root


def internal_nodes_bottom_up(root: PartitionNode) -> List[PartitionNode]:
    """Internal nodes deepest first; nodes of equal depth keep tree order."""
    internal = [n for n in root.walk() if not n.is_leaf]
    return sorted(internal, key=lambda n: -n.depth)


__all__ = ["PartitionNode", "choose_split_axis", "split_rect", "partition", "internal_nodes_bottom_up"]
