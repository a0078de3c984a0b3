"""SVG renderer — a recording DrawingContext plus a headless scene renderer."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from cactus_tree.config import EdgeOptions
from cactus_tree.index import HierarchyIndex
from cactus_tree.interaction import ViewportState
from cactus_tree.renderers.edges import draw_edges
from cactus_tree.styles import read_style_prop, resolve_depth_style
from cactus_tree.types import Edge, NodeId, RenderedNode
from cactus_tree.viewport import (
    DEFAULT_CULL_MARGIN,
    apply_view_transform,
    filter_visible_nodes,
    optimize_rendering_order,
)

# ─── Constants ──────────────────────────────────────────────────────────────

DEFAULT_NODE_FILL = "#dddddd"
DEFAULT_NODE_STROKE = "#333333"
DEFAULT_NODE_STROKE_WIDTH = 1.0
BACKGROUND = "white"

TAU = 2 * math.pi


def _fmt(v: float) -> str:
    """Compact number formatting: two decimals, trailing zeros stripped."""
    s = f"{v:.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


# ─── Recording Context ──────────────────────────────────────────────────────


class SvgContext:
    """DrawingContext that turns stroke/fill commands into SVG ``<path>`` elements.

    Only translate and scale transforms are supported; points are mapped to
    output coordinates as they are recorded.
    """

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.stroke_style = "#000000"
        self.fill_style = "#000000"
        self.line_width = 1.0
        self.global_alpha = 1.0
        # (scale_x, scale_y, translate_x, translate_y)
        self._transform: tuple[float, float, float, float] = (1.0, 1.0, 0.0, 0.0)
        self._stack: list[tuple[Any, ...]] = []
        self._path: list[str] = []
        self.elements: list[str] = []

    # ── State ──

    def save(self) -> None:
        self._stack.append(
            (self._transform, self.stroke_style, self.fill_style, self.line_width, self.global_alpha)
        )

    def restore(self) -> None:
        if not self._stack:
            return
        self._transform, self.stroke_style, self.fill_style, self.line_width, self.global_alpha = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        sx, sy, tx, ty = self._transform
        self._transform = (sx, sy, tx + sx * x, ty + sy * y)

    def scale(self, x: float, y: float) -> None:
        sx, sy, tx, ty = self._transform
        self._transform = (sx * x, sy * y, tx, ty)

    def _pt(self, x: float, y: float) -> str:
        sx, sy, tx, ty = self._transform
        return f"{_fmt(sx * x + tx)} {_fmt(sy * y + ty)}"

    # ── Path ──

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append(f"M {self._pt(x, y)}")

    def line_to(self, x: float, y: float) -> None:
        self._path.append(f"L {self._pt(x, y)}")

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        self._path.append(f"Q {self._pt(cpx, cpy)} {self._pt(x, y)}")

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None:
        r = _fmt(abs(radius * self._transform[0]))
        sweep = end_angle - start_angle
        start = (x + radius * math.cos(start_angle), y + radius * math.sin(start_angle))
        self._path.append(f"M {self._pt(*start)}")

        if abs(sweep) >= TAU:
            # A full circle is two half arcs; SVG cannot draw a closed arc.
            opposite = (x - radius * math.cos(start_angle), y - radius * math.sin(start_angle))
            self._path.append(f"A {r} {r} 0 1 1 {self._pt(*opposite)}")
            self._path.append(f"A {r} {r} 0 1 1 {self._pt(*start)}")
            return

        end = (x + radius * math.cos(end_angle), y + radius * math.sin(end_angle))
        large = 1 if abs(sweep) > math.pi else 0
        positive = 1 if sweep > 0 else 0
        self._path.append(f"A {r} {r} 0 {large} {positive} {self._pt(*end)}")

    # ── Paint ──

    def stroke(self) -> None:
        if not self._path:
            return
        width = _fmt(self.line_width * abs(self._transform[0]))
        self.elements.append(
            f'<path d="{" ".join(self._path)}" fill="none" stroke="{_escape(self.stroke_style)}" '
            f'stroke-width="{width}" stroke-opacity="{_fmt(self.global_alpha)}"/>'
        )

    def fill(self) -> None:
        if not self._path:
            return
        self.elements.append(
            f'<path d="{" ".join(self._path)}" fill="{_escape(self.fill_style)}" '
            f'fill-opacity="{_fmt(self.global_alpha)}" stroke="none"/>'
        )

    def to_svg(self) -> str:
        w, h = _fmt(self.width), _fmt(self.height)
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">',
            f'<rect width="{w}" height="{h}" fill="{BACKGROUND}"/>',
            *self.elements,
            "</svg>",
        ]
        return "\n".join(parts)


# ─── Node Drawing ───────────────────────────────────────────────────────────


def _draw_node(
    context: SvgContext,
    rn: RenderedNode,
    style: Mapping[str, Any] | None,
    negative_depth_levels: Mapping[int, set[NodeId]],
    hovered_node_id: NodeId | None,
) -> None:
    depth_style = resolve_depth_style(rn.depth, rn.id, style, negative_depth_levels)
    group = "node"
    if hovered_node_id is not None and rn.id == hovered_node_id:
        group = "highlight"

    def prop(name: str, default: Any) -> Any:
        if group == "highlight":
            value = read_style_prop(
                (depth_style or {}).get("highlight"), (style or {}).get("highlight"), "node", name, None
            )
            if value is not None:
                return value
        return read_style_prop(depth_style, style, "node", name, default)

    context.begin_path()
    context.arc(rn.x, rn.y, rn.radius, 0, TAU)

    context.fill_style = prop("fillColor", DEFAULT_NODE_FILL)
    context.global_alpha = prop("fillOpacity", 1.0)
    context.fill()

    width = prop("strokeWidth", DEFAULT_NODE_STROKE_WIDTH)
    if width > 0:
        context.stroke_style = prop("strokeColor", DEFAULT_NODE_STROKE)
        context.line_width = width
        context.global_alpha = prop("strokeOpacity", 1.0)
        context.stroke()


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """Renders a laid-out cactus scene (nodes, then bundled edges) to SVG."""

    def __init__(
        self,
        style: Mapping[str, Any] | None = None,
        options: EdgeOptions | None = None,
        margin: float = DEFAULT_CULL_MARGIN,
    ) -> None:
        self.style = style
        self.options = options or EdgeOptions()
        self.margin = margin

    def render(
        self,
        index: HierarchyIndex,
        edges: Iterable[Edge],
        width: float,
        height: float,
        state: ViewportState | None = None,
        highlighted_ids: set[NodeId] | None = None,
    ) -> str:
        view = state or ViewportState()
        context = SvgContext(width, height)
        nodes: Sequence[RenderedNode] = list(index.node_id_to_rendered_node.values())

        visible = filter_visible_nodes(nodes, width, height, view.pan_x, view.pan_y, view.zoom, self.margin)
        ordered = optimize_rendering_order(visible)

        apply_view_transform(context, width, height, view.pan_x, view.pan_y, view.zoom)
        for rn in ordered:
            _draw_node(context, rn, self.style, index.negative_depth_levels, view.hovered_node_id)
        draw_edges(context, edges, index, self.style, view.hovered_node_id, highlighted_ids, self.options)
        context.restore()

        return context.to_svg()


def render_svg(
    index: HierarchyIndex,
    edges: Iterable[Edge],
    width: float,
    height: float,
    state: ViewportState | None = None,
    style: Mapping[str, Any] | None = None,
    options: EdgeOptions | None = None,
) -> str:
    """Convenience wrapper around ``SvgRenderer``."""
    return SvgRenderer(style, options).render(index, edges, width, height, state)
