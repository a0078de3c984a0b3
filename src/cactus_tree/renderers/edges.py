"""Edge rendering — styled, hierarchy-bundled strokes on a DrawingContext."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from cactus_tree.config import EdgeOptions
from cactus_tree.index import HierarchyIndex
from cactus_tree.renderers.base import DrawingContext, set_context_styles
from cactus_tree.routing import (
    bundle_points,
    build_hierarchical_path,
    path_to_coordinates,
    should_filter_edge,
)
from cactus_tree.styles import resolve_depth_style
from cactus_tree.types import Edge, NodeId, Point, RenderedNode

logger = logging.getLogger(__name__)

# ─── Constants ──────────────────────────────────────────────────────────────

DEFAULT_EDGE_COLOR = "#333333"
DEFAULT_EDGE_WIDTH = 1.0
DEFAULT_EDGE_OPACITY = 0.1

# ─── Style Resolution ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class EdgeStyle:
    """Final stroke settings for one edge."""

    color: str
    width: float
    opacity: float

    @property
    def visible(self) -> bool:
        return self.width > 0 and self.color != "none"


def _group(source: Mapping[str, Any] | None, *path: str) -> dict[str, Any]:
    current: Any = source
    for key in path:
        if not isinstance(current, Mapping):
            return {}
        current = current.get(key)
    return dict(current) if isinstance(current, Mapping) else {}


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def touches_highlight(
    edge: Edge,
    hovered_node_id: NodeId | None,
    highlighted_ids: Collection[NodeId] | None,
) -> bool:
    """Edge touches the hovered node or any highlighted node."""
    if hovered_node_id is not None and hovered_node_id in (edge.source, edge.target):
        return True
    if highlighted_ids:
        return edge.source in highlighted_ids or edge.target in highlighted_ids
    return False


def resolve_edge_style(
    edge: Edge,
    source: RenderedNode,
    target: RenderedNode,
    index: HierarchyIndex,
    style: Mapping[str, Any] | None,
    hovered_node_id: NodeId | None,
    highlighted_ids: Collection[NodeId] | None = None,
    is_muted: bool = False,
    mute_opacity: float = 1.0,
) -> EdgeStyle:
    """Resolve stroke settings in order: base < depth < highlight < mute.

    The depth override comes from the source endpoint, or the target when the
    source has none. While a node is hovered, edges without a highlight
    opacity are drawn fully opaque. Mute multiplies the final opacity.
    """
    levels = index.negative_depth_levels
    depth_style = resolve_depth_style(source.depth, source.id, style, levels) or resolve_depth_style(
        target.depth, target.id, style, levels
    )

    base = {**_group(style, "edge"), **_group(depth_style, "edge")}
    color = base.get("strokeColor") or DEFAULT_EDGE_COLOR
    width = _number(base.get("strokeWidth"), DEFAULT_EDGE_WIDTH)
    opacity = _number(base.get("strokeOpacity"), DEFAULT_EDGE_OPACITY)

    highlight_opacity: float | None = None
    if touches_highlight(edge, hovered_node_id, highlighted_ids):
        highlight = {**_group(style, "highlight", "edge"), **_group(depth_style, "highlight", "edge")}
        color = highlight.get("strokeColor") or color
        width = _number(highlight.get("strokeWidth"), width)
        if highlight.get("strokeOpacity") is not None:
            highlight_opacity = _number(highlight["strokeOpacity"], opacity)

    if highlight_opacity is not None:
        opacity = highlight_opacity
    elif hovered_node_id is not None:
        # Any hover emphasises the edges left on screen.
        opacity = 1.0

    if is_muted:
        opacity *= mute_opacity

    return EdgeStyle(color=color, width=width, opacity=opacity)


# ─── Single Edge ────────────────────────────────────────────────────────────


def routing_endpoints(source: RenderedNode, target: RenderedNode) -> tuple[RenderedNode, RenderedNode]:
    """Order endpoints so routing starts at the deeper (or equal) node."""
    if target.depth > source.depth:
        return target, source
    return source, target


def _trace_curve(context: DrawingContext, points: list[Point]) -> None:
    """Quadratic smoothing through ``points``: each interior point is the
    control point of a curve ending at the midpoint to its successor."""
    context.move_to(points[0].x, points[0].y)
    last = len(points) - 1
    for i in range(1, last + 1):
        p = points[i]
        if i == last:
            context.line_to(p.x, p.y)
            continue
        nxt = points[i + 1]
        context.quadratic_curve_to(p.x, p.y, (p.x + nxt.x) / 2, (p.y + nxt.y) / 2)


def draw_edge(
    context: DrawingContext | None,
    edge: Edge,
    source: RenderedNode,
    target: RenderedNode,
    index: HierarchyIndex,
    style: Mapping[str, Any] | None,
    hovered_node_id: NodeId | None,
    highlighted_ids: Collection[NodeId] | None = None,
    bundling_strength: float = 0.0,
    is_muted: bool = False,
    mute_opacity: float = 1.0,
) -> bool:
    """Stroke one edge. Returns True iff a stroke command was issued.

    ``bundling_strength`` 0 draws the straight chord; otherwise the edge is
    routed through the hierarchy and smoothed. Context stroke settings are
    restored afterwards.
    """
    if context is None:
        return False

    edge_style = resolve_edge_style(
        edge, source, target, index, style, hovered_node_id, highlighted_ids, is_muted, mute_opacity
    )
    if not edge_style.visible:
        return False

    prev_stroke = context.stroke_style
    prev_width = context.line_width
    prev_alpha = context.global_alpha

    set_context_styles(
        context,
        stroke_style=edge_style.color,
        line_width=edge_style.width,
        global_alpha=edge_style.opacity,
    )
    context.begin_path()

    if not bundling_strength or bundling_strength <= 0:
        context.move_to(source.x, source.y)
        context.line_to(target.x, target.y)
    else:
        origin, dest = routing_endpoints(source, target)
        route = build_hierarchical_path(
            origin, dest, index.hierarchical_path_cache, max_generations=max(len(index), 1)
        )
        coords = path_to_coordinates(
            route.nodes, index.node_id_to_rendered_node, origin, dest, max_generations=max(len(index), 1)
        )
        _trace_curve(context, bundle_points(coords, origin, dest, bundling_strength))

    context.stroke()

    set_context_styles(context, stroke_style=prev_stroke, line_width=prev_width, global_alpha=prev_alpha)
    return True


# ─── Batch ──────────────────────────────────────────────────────────────────


def _highlight_style(style: Mapping[str, Any] | None) -> dict[str, Any]:
    """Style whose base edge group already carries the highlight settings."""
    merged_edge = {**_group(style, "edge"), **_group(style, "highlight", "edge")}
    highlight = {**_group(style, "highlight"), "edge": merged_edge}
    return {**(style or {}), "edge": merged_edge, "highlight": highlight}


def draw_edges(
    context: DrawingContext | None,
    edges: Iterable[Edge],
    index: HierarchyIndex,
    style: Mapping[str, Any] | None,
    hovered_node_id: NodeId | None,
    highlighted_ids: Collection[NodeId] | None = None,
    options: EdgeOptions | None = None,
) -> list[NodeId]:
    """Draw all edges, highlighted ones last so they sit on top.

    Returns the ids of endpoints of every edge actually stroked, first-seen order.
    """
    if context is None:
        return []
    opts = options or EdgeOptions()

    background: list[tuple[Edge, RenderedNode, RenderedNode, bool]] = []
    highlighted: list[tuple[Edge, RenderedNode, RenderedNode]] = []

    for edge in edges:
        source = index.get(edge.source)
        target = index.get(edge.target)
        if source is None or target is None:
            logger.debug("skipping edge %s -> %s: endpoint not in index", edge.source, edge.target)
            continue

        is_filtered = should_filter_edge(edge, hovered_node_id, index)
        if touches_highlight(edge, hovered_node_id, highlighted_ids):
            highlighted.append((edge, source, target))
        elif is_filtered and opts.filter_mode == "hide":
            continue
        else:
            background.append((edge, source, target, is_filtered))

    visible: dict[NodeId, None] = {}

    for edge, source, target, is_filtered in background:
        drawn = draw_edge(
            context,
            edge,
            source,
            target,
            index,
            style,
            hovered_node_id,
            highlighted_ids,
            opts.bundling_strength,
            is_muted=is_filtered,
            mute_opacity=opts.mute_opacity,
        )
        if drawn:
            visible.setdefault(edge.source)
            visible.setdefault(edge.target)

    if highlighted:
        top_style = _highlight_style(style)
        for edge, source, target in highlighted:
            drawn = draw_edge(
                context,
                edge,
                source,
                target,
                index,
                top_style,
                hovered_node_id,
                highlighted_ids,
                opts.bundling_strength,
            )
            if drawn:
                visible.setdefault(edge.source)
                visible.setdefault(edge.target)

    return list(visible)
