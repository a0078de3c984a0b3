"""Edge routing — hierarchical paths between nodes and their drawable geometry.

Edges are not drawn as straight chords: an edge a → b is routed up from a to
the nearest common ancestor (NCA) of a and b and back down to b, then smoothed
into a curve whose pull toward that route is set by the bundling strength.

Phases:
  1. Ancestor walk + NCA search (``build_hierarchical_path``, memoised)
  2. Path → coordinates with ancestor fallback (``path_to_coordinates``)
  3. Blend with the straight chord (``bundle_points``)

Hover filtering (``should_filter_edge``) lives here too because it decides
which routes get drawn at all.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol

from cactus_tree.index import HierarchyIndex
from cactus_tree.types import Edge, HierarchicalPath, NodeId, Point, RenderedNode, TreeNode

logger = logging.getLogger(__name__)

# Upper bound on ancestor-walk length when the caller gives none.
DEFAULT_MAX_GENERATIONS = 100_000


class HasXY(Protocol):
    x: float
    y: float


# ─── Ancestor Walk ────────────────────────────────────────────────────────────


def ancestor_chain(node: TreeNode, max_generations: int = DEFAULT_MAX_GENERATIONS) -> list[TreeNode] | None:
    """Return ``[node, parent, grandparent, …, root]`` via ``parent_ref``.

    Returns None when the walk revisits a node or runs longer than
    ``max_generations`` steps, i.e. the parent chain is cyclic.
    """
    chain: list[TreeNode] = []
    seen: set[int] = set()
    current: TreeNode | None = node

    while current is not None:
        if id(current) in seen or len(chain) > max_generations:
            return None
        seen.add(id(current))
        chain.append(current)
        current = current.parent_ref

    return chain


def path_cache_key(source_id: NodeId, target_id: NodeId) -> str:
    """Order-sensitive cache key for a (source, target) pair."""
    return f"{source_id}-{target_id}"


def build_hierarchical_path(
    source: RenderedNode,
    target: RenderedNode,
    path_cache: dict[str, HierarchicalPath],
    max_generations: int = DEFAULT_MAX_GENERATIONS,
) -> HierarchicalPath:
    """Route ``source`` → NCA → ``target`` through the hierarchy.

    The result starts with ``source.node`` and ends with ``target.node``; the
    NCA appears exactly once. When one endpoint is an ancestor of the other the
    route is the direct ancestor chain between them. When no common ancestor
    exists (separate roots, cyclic chains) the route is the endpoint pair.

    Results are memoised in ``path_cache`` under ``"<source id>-<target id>"``.
    """
    key = path_cache_key(source.node.id, target.node.id)
    cached = path_cache.get(key)
    if cached is not None:
        return cached

    result = _find_route(source.node, target.node, max_generations)
    path_cache[key] = result
    logger.debug("routed %s via %d hierarchy nodes", key, len(result.nodes))
    return result


def _find_route(source: TreeNode, target: TreeNode, max_generations: int) -> HierarchicalPath:
    source_chain = ancestor_chain(source, max_generations)
    target_chain = ancestor_chain(target, max_generations)

    if source_chain is None or target_chain is None:
        logger.warning(
            "cyclic parent chain while routing %s -> %s; drawing direct pair",
            source.id,
            target.id,
        )
        return HierarchicalPath(nodes=_endpoint_pair(source, target))

    # Position of each target-side ancestor; the first source-side ancestor
    # found here is the nearest common one.
    target_pos: dict[int, int] = {id(n): i for i, n in enumerate(target_chain)}

    for s_idx, ancestor in enumerate(source_chain):
        t_idx = target_pos.get(id(ancestor))
        if t_idx is None:
            continue
        # source … ancestor (inclusive), then target-side below it, reversed.
        nodes = source_chain[: s_idx + 1] + target_chain[:t_idx][::-1]
        return HierarchicalPath(nodes=nodes, common_ancestor=ancestor)

    return HierarchicalPath(nodes=_endpoint_pair(source, target))


def _endpoint_pair(source: TreeNode, target: TreeNode) -> list[TreeNode]:
    return [source] if source is target else [source, target]


# ─── Path → Coordinates ───────────────────────────────────────────────────────


def path_to_coordinates(
    path: Sequence[TreeNode],
    node_coordinates: Mapping[NodeId, RenderedNode],
    source_point: HasXY,
    target_point: HasXY,
    max_generations: int = DEFAULT_MAX_GENERATIONS,
) -> list[Point]:
    """Resolve a hierarchical path into drawable points.

    Each path element is looked up by id; a missing element falls back to its
    nearest ancestor that has coordinates. The source and target points are
    always the first and last entries, and consecutive identical points are
    collapsed so no zero-length segment is emitted.
    """
    start = Point(source_point.x, source_point.y)
    end = Point(target_point.x, target_point.y)
    if not path:
        return [start, end]

    coords: list[Point] = []
    for element in path:
        resolved = _resolve_coordinate(element, node_coordinates, max_generations)
        if resolved is not None:
            coords.append(resolved)

    if not coords:
        return [start, end]

    if coords[0] != start:
        coords.insert(0, start)
    if coords[-1] != end:
        coords.append(end)

    deduped = dedupe_consecutive(coords)
    if len(deduped) < 2:
        return [start, end]
    return deduped


def _resolve_coordinate(
    element: TreeNode,
    node_coordinates: Mapping[NodeId, RenderedNode],
    max_generations: int,
) -> Point | None:
    current: TreeNode | None = element
    steps = 0
    while current is not None and steps <= max_generations:
        rendered = node_coordinates.get(current.id)
        if rendered is not None:
            return Point(rendered.x, rendered.y)
        current = current.parent_ref
        steps += 1
    return None


def dedupe_consecutive(points: Iterable[Point]) -> list[Point]:
    """Drop points equal to their immediate predecessor; other repeats stay."""
    out: list[Point] = []
    for p in points:
        if out and out[-1] == p:
            continue
        out.append(p)
    return out


def bundle_points(
    coords: Sequence[Point],
    source_point: HasXY,
    target_point: HasXY,
    strength: float,
) -> list[Point]:
    """Pull route points toward the straight chord by ``1 - strength``.

    Point i of n is blended with the chord point at fraction i / (n - 1):
    strength 0 gives the chord, strength 1 gives the route unchanged.
    """
    n = len(coords)
    if n == 0:
        return [Point(source_point.x, source_point.y), Point(target_point.x, target_point.y)]
    if strength >= 1:
        return list(coords)

    s = max(0.0, strength)
    blended: list[Point] = []
    for i, p in enumerate(coords):
        frac = 0.0 if n == 1 else i / (n - 1)
        chord_x = source_point.x * (1 - frac) + target_point.x * frac
        chord_y = source_point.y * (1 - frac) + target_point.y * frac
        blended.append(Point(chord_x * (1 - s) + p.x * s, chord_y * (1 - s) + p.y * s))
    return blended


# ─── Hover Filtering ──────────────────────────────────────────────────────────


def should_filter_edge(
    edge: Edge,
    hovered_node_id: NodeId | None,
    index: HierarchyIndex | None = None,
) -> bool:
    """Whether ``edge`` is hidden by the current hover.

    Nothing is filtered without a hover, and edges touching the hovered node
    are always kept. Hovering an interior node (one with children, per
    ``index``) keeps everything; hovering a leaf isolates its own edges.
    """
    if hovered_node_id is None:
        return False
    if edge.source == hovered_node_id or edge.target == hovered_node_id:
        return False
    if index is not None and index.has_children(hovered_node_id):
        return False
    return True


def compute_visible_edge_node_ids(
    edges: Iterable[Edge],
    index: HierarchyIndex,
    hovered_node_id: NodeId | None,
) -> set[NodeId]:
    """Ids of endpoints of every edge that survives hover filtering.

    Edges with an endpoint the index does not know are ignored. The hovered
    id is included whenever one of its own edges survives.
    """
    visible: set[NodeId] = set()
    for edge in edges:
        if edge.source not in index or edge.target not in index:
            continue
        if should_filter_edge(edge, hovered_node_id, index):
            continue
        visible.add(edge.source)
        visible.add(edge.target)
    return visible
