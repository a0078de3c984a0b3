"""Hierarchy index — lookup structures built once per layout pass.

Phases (all linear in the node count):
  1. Parent-reference pass (resolve ``parent`` ids into ``parent_ref`` pointers)
  2. Index pass (id maps, parent → children lists, resolved hierarchy graph)
  3. Leaf detection
  4. Negative-depth levels (leaf-outward BFS over ``parent_ref``)
  5. Depth style cache
  6. Fresh hierarchical path cache

The index is an immutable snapshot from the caller's point of view: when the
node set changes, build a new one instead of patching the old one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from cactus_tree.styles import merge_depth_entries
from cactus_tree.types import HierarchicalPath, NodeId, RenderedNode, TreeNode

logger = logging.getLogger(__name__)

# Returned when there is nothing to derive limits from.
DEFAULT_MIN_ZOOM_LIMIT = 0.1
DEFAULT_MAX_ZOOM_LIMIT = 10.0

# ─── Parent References ────────────────────────────────────────────────────────


def update_parent_references(nodes: Iterable[TreeNode]) -> list[TreeNode]:
    """Resolve every node's ``parent`` id into a ``parent_ref`` pointer.

    A ``parent`` that is ``None`` or does not name a node in ``nodes`` leaves
    the node as an effective root (``parent_ref = None``). No error is raised
    for dangling ids.

    Returns the nodes as a list, in input order.
    """
    node_list = list(nodes)
    by_id: dict[NodeId, TreeNode] = {n.id: n for n in node_list}

    for node in node_list:
        if node.parent is not None and node.parent in by_id:
            node.parent_ref = by_id[node.parent]
        else:
            node.parent_ref = None

    return node_list


# ─── Index ────────────────────────────────────────────────────────────────────


@dataclass
class HierarchyIndex:
    """Lookup and caching structures derived from one set of rendered nodes.

    Attributes:
        node_id_to_rendered_node: id → RenderedNode (the objects used for drawing).
        node_id_to_node: id → TreeNode.
        leaf_nodes: ids of nodes nobody names as parent.
        parent_to_children: parent id → child RenderedNodes, in input order.
        negative_depth_levels: -1 → leaves, -2 → their distinct parents, ...
        depth_style_cache: depth (>= 0) → style entry.
        hierarchical_path_cache: memoised routing results keyed "<src>-<tgt>".
        hierarchy: resolved parent → child graph (dangling parents dropped).
    """

    node_id_to_rendered_node: dict[NodeId, RenderedNode] = field(default_factory=dict)
    node_id_to_node: dict[NodeId, TreeNode] = field(default_factory=dict)
    leaf_nodes: set[NodeId] = field(default_factory=set)
    parent_to_children: dict[NodeId, list[RenderedNode]] = field(default_factory=dict)
    negative_depth_levels: dict[int, set[NodeId]] = field(default_factory=dict)
    depth_style_cache: dict[int, dict[str, Any]] = field(default_factory=dict)
    hierarchical_path_cache: dict[str, HierarchicalPath] = field(default_factory=dict)
    hierarchy: nx.DiGraph = field(default_factory=nx.DiGraph)

    def __len__(self) -> int:
        return len(self.node_id_to_node)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.node_id_to_rendered_node

    def get(self, node_id: NodeId | None) -> RenderedNode | None:
        """Return the rendered node for ``node_id``, or None."""
        if node_id is None:
            return None
        return self.node_id_to_rendered_node.get(node_id)

    def is_leaf(self, node_id: NodeId) -> bool:
        return node_id in self.leaf_nodes

    def has_children(self, node_id: NodeId | None) -> bool:
        """True when ``node_id`` is a known node with at least one child."""
        if node_id is None or node_id not in self.hierarchy:
            return False
        return self.hierarchy.out_degree(node_id) > 0

    def children_of(self, node_id: NodeId) -> list[RenderedNode]:
        return self.parent_to_children.get(node_id, [])


def build_hierarchy_index(
    rendered_nodes: Sequence[RenderedNode],
    style: Mapping[str, Any] | None = None,
    path_cache: dict[str, HierarchicalPath] | None = None,
) -> HierarchyIndex:
    """Build every lookup structure for a freshly laid-out node set.

    Args:
        rendered_nodes: Output of the layout step. Referenced, never copied.
        style: Fully merged style mapping; only its ``depths`` list is read.
            Wildcard entries must already be expanded by the style merger.
        path_cache: Optional cache from the previous index. It is cleared and
            reused so holders of the old reference see it emptied.

    Never raises on malformed input; cyclic parent chains are bounded here and
    in the routing walk.
    """
    # Phase 1: parent references.
    update_parent_references(rn.node for rn in rendered_nodes)

    index = HierarchyIndex()

    # Phase 2: id maps, parent → children, resolved hierarchy graph.
    graph = index.hierarchy
    for rn in rendered_nodes:
        node_id = rn.node.id
        index.node_id_to_rendered_node[node_id] = rn
        index.node_id_to_node[node_id] = rn.node
        graph.add_node(node_id)

    for rn in rendered_nodes:
        parent_id = rn.node.parent
        if parent_id is None:
            continue
        index.parent_to_children.setdefault(parent_id, []).append(rn)
        if rn.node.parent_ref is not None:
            graph.add_edge(parent_id, rn.node.id)

    # Phase 3: leaves are nodes with no outgoing parent → child edge.
    index.leaf_nodes = {node_id for node_id in graph.nodes if graph.out_degree(node_id) == 0}

    # Phase 4: negative-depth levels.
    index.negative_depth_levels = compute_negative_depth_levels(index.leaf_nodes, index.node_id_to_node)

    # Phase 5: depth style cache.
    index.depth_style_cache = build_depth_style_cache(style)

    # Phase 6: path cache is invalid across layouts.
    if path_cache is not None:
        path_cache.clear()
        index.hierarchical_path_cache = path_cache

    logger.debug(
        "built hierarchy index: %d nodes, %d leaves, %d negative-depth levels",
        len(index.node_id_to_node),
        len(index.leaf_nodes),
        len(index.negative_depth_levels),
    )
    return index


def compute_negative_depth_levels(
    leaf_nodes: set[NodeId],
    node_id_to_node: Mapping[NodeId, TreeNode],
) -> dict[int, set[NodeId]]:
    """Group nodes by generation counted outward from the leaves.

    Level -1 is the leaf set; level -(k+1) is the set of distinct parents of
    level -k. No level is emitted once the frontier is empty. The number of
    levels is capped at the node count + 1 so cyclic parent chains terminate.
    """
    levels: dict[int, set[NodeId]] = {}
    if not leaf_nodes:
        return levels

    levels[-1] = set(leaf_nodes)
    frontier: set[NodeId] = set(leaf_nodes)
    level = -2
    max_levels = len(node_id_to_node) + 1

    while frontier:
        next_frontier: set[NodeId] = set()
        for node_id in frontier:
            node = node_id_to_node.get(node_id)
            if node is not None and node.parent_ref is not None:
                next_frontier.add(node.parent_ref.id)

        if not next_frontier:
            break

        if -level > max_levels:
            logger.warning("negative-depth walk exceeded %d levels; parent chain is cyclic", max_levels)
            break

        levels[level] = next_frontier
        frontier = next_frontier
        level -= 1

    return levels


def build_depth_style_cache(style: Mapping[str, Any] | None) -> dict[int, dict[str, Any]]:
    """Index concrete (depth >= 0) style entries by depth.

    Wildcard (``'*'``) and negative entries are skipped: wildcards are expanded
    upstream and negative depths are leaf-relative markers, matched through
    ``negative_depth_levels`` instead.
    """
    cache: dict[int, dict[str, Any]] = {}
    if not style:
        return cache

    for entry in style.get("depths") or []:
        depth = entry.get("depth")
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            continue
        existing = cache.get(depth)
        cache[depth] = merge_depth_entries(existing, entry) if existing else dict(entry)
    return cache


# ─── Zoom Limits ──────────────────────────────────────────────────────────────


def compute_zoom_limits(
    width: float,
    height: float,
    rendered_nodes: Sequence[RenderedNode],
    current_zoom: float = 1.0,
) -> tuple[float, float]:
    """Derive (min_zoom_limit, max_zoom_limit) from the laid-out radius range.

    The rendered radii include ``current_zoom``; it is divided out first.
    The max limit lets the smallest circle grow to a tenth of the short side;
    the min limit lets the largest circle shrink to an eighth of it, kept
    within [0.01, 0.5].
    """
    if not rendered_nodes:
        return DEFAULT_MIN_ZOOM_LIMIT, DEFAULT_MAX_ZOOM_LIMIT

    positive = [rn.radius for rn in rendered_nodes if rn.radius > 0]
    min_radius = min(positive, default=1.0)
    max_radius = max(positive, default=100.0)

    zoom = current_zoom if current_zoom > 0 else 1.0
    base_min_radius = min_radius / zoom
    base_max_radius = max_radius / zoom

    short_side = min(width, height)
    max_zoom_limit = (short_side / 10) / (2 * base_min_radius)
    min_zoom_limit = max(0.01, min(0.5, short_side / (base_max_radius * 8)))
    # Very large minimum circles would otherwise invert the range.
    max_zoom_limit = max(max_zoom_limit, min_zoom_limit)

    return min_zoom_limit, max_zoom_limit
