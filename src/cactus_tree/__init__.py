"""cactus-tree — spatial index, edge routing and viewport interaction for
radial "cactus" hierarchy diagrams."""

from cactus_tree.config import EdgeOptions, InteractionConfig
from cactus_tree.hover import LeafProximityIndex, find_hovered_node, is_point_in_node
from cactus_tree.index import (
    HierarchyIndex,
    build_hierarchy_index,
    compute_zoom_limits,
    update_parent_references,
)
from cactus_tree.interaction import (
    InteractionMode,
    PointerEvent,
    TouchEvent,
    TouchPoint,
    ViewportController,
    ViewportState,
    WheelEvent,
)
from cactus_tree.renderers.edges import draw_edge, draw_edges, resolve_edge_style
from cactus_tree.renderers.svg import SvgContext, SvgRenderer, render_svg
from cactus_tree.routing import (
    build_hierarchical_path,
    bundle_points,
    compute_visible_edge_node_ids,
    path_to_coordinates,
    should_filter_edge,
)
from cactus_tree.styles import read_style_prop, resolve_depth_style
from cactus_tree.types import Edge, HierarchicalPath, Point, RenderedNode, TreeNode, to_rendered_nodes
from cactus_tree.viewport import (
    apply_view_transform,
    filter_visible_nodes,
    optimize_rendering_order,
    screen_to_world,
    zoom_to_point_pan,
)

__version__ = "0.1.0"

__all__ = [
    "Edge",
    "EdgeOptions",
    "HierarchicalPath",
    "HierarchyIndex",
    "InteractionConfig",
    "InteractionMode",
    "LeafProximityIndex",
    "Point",
    "PointerEvent",
    "RenderedNode",
    "SvgContext",
    "SvgRenderer",
    "TouchEvent",
    "TouchPoint",
    "TreeNode",
    "ViewportController",
    "ViewportState",
    "WheelEvent",
    "apply_view_transform",
    "build_hierarchical_path",
    "build_hierarchy_index",
    "bundle_points",
    "compute_visible_edge_node_ids",
    "compute_zoom_limits",
    "draw_edge",
    "draw_edges",
    "filter_visible_nodes",
    "find_hovered_node",
    "is_point_in_node",
    "optimize_rendering_order",
    "path_to_coordinates",
    "read_style_prop",
    "render_svg",
    "resolve_depth_style",
    "resolve_edge_style",
    "screen_to_world",
    "should_filter_edge",
    "to_rendered_nodes",
    "update_parent_references",
    "zoom_to_point_pan",
]
