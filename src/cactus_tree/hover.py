"""Hover hit-testing: exact point-in-circle, then nearest-leaf proximity.

Small leaves are hard to hit exactly, so a KD-tree over leaf centres answers
"which leaf is closest" and the hit is accepted within radius + tolerance.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from cactus_tree.types import NodeId, RenderedNode


def is_point_in_node(x: float, y: float, node_x: float, node_y: float, radius: float) -> bool:
    """Inclusive point-in-circle test; circles under 1px are never hit."""
    if radius < 1:
        return False
    dx = x - node_x
    dy = y - node_y
    return dx * dx + dy * dy <= radius * radius


def find_hovered_node(x: float, y: float, nodes: Iterable[RenderedNode]) -> NodeId | None:
    """Id of the smallest circle containing (x, y), or None."""
    best: NodeId | None = None
    smallest = float("inf")
    for rn in nodes:
        if rn.radius < smallest and is_point_in_node(x, y, rn.x, rn.y, rn.radius):
            smallest = rn.radius
            best = rn.node.id
    return best


@dataclass
class LeafProximityIndex:
    """Nearest-leaf lookup over leaf centres."""

    tree: cKDTree
    radii: np.ndarray
    leaf_ids: list[NodeId]

    @classmethod
    def build(cls, rendered_nodes: Sequence[RenderedNode], leaf_ids: set[NodeId]) -> LeafProximityIndex | None:
        """Index the rendered leaves; None when fewer than two leaves are drawn."""
        if len(leaf_ids) < 2:
            return None
        leaves = [rn for rn in rendered_nodes if rn.node.id in leaf_ids]
        if len(leaves) < 2:
            return None

        centres = np.array([(rn.x, rn.y) for rn in leaves], dtype=float)
        radii = np.array([rn.radius for rn in leaves], dtype=float)
        return cls(tree=cKDTree(centres), radii=radii, leaf_ids=[rn.node.id for rn in leaves])

    def find(self, x: float, y: float, tolerance: float) -> NodeId | None:
        """Nearest leaf whose radius + ``tolerance`` reaches (x, y), else None."""
        distance, idx = self.tree.query((x, y))
        if not np.isfinite(distance) or idx >= len(self.leaf_ids):
            return None
        if distance <= self.radii[idx] + tolerance:
            return self.leaf_ids[int(idx)]
        return None
