"""Tests for renderers/svg.py — the SVG drawing context and the headless
scene renderer (cull → order → nodes → edges)."""

from __future__ import annotations

import math

from helpers import make_rendered_nodes

from cactus_tree.config import EdgeOptions
from cactus_tree.index import build_hierarchy_index
from cactus_tree.interaction import ViewportState
from cactus_tree.renderers.svg import SvgContext, SvgRenderer, _fmt, render_svg
from cactus_tree.types import Edge

# ─── Number Formatting ────────────────────────────────────────────────────────


class TestFmt:
    def test_strips_trailing_zeros(self):
        assert _fmt(1.5) == "1.5"
        assert _fmt(2.0) == "2"
        assert _fmt(0.125) == "0.12"

    def test_negative_zero(self):
        assert _fmt(-0.0) == "0"
        assert _fmt(-0.001) == "0"
        assert _fmt(0.0) == "0"


# ─── SvgContext ───────────────────────────────────────────────────────────────


class TestSvgContext:
    def test_transform_applied_to_points(self):
        ctx = SvgContext(100, 100)
        ctx.translate(10, 20)
        ctx.scale(2, 2)
        ctx.begin_path()
        ctx.move_to(1, 1)
        ctx.line_to(0, 0)
        ctx.stroke()
        assert len(ctx.elements) == 1
        assert 'd="M 12 22 L 10 20"' in ctx.elements[0]
        assert 'stroke-width="2"' in ctx.elements[0]

    def test_quadratic_curve(self):
        ctx = SvgContext(100, 100)
        ctx.begin_path()
        ctx.move_to(0, 0)
        ctx.quadratic_curve_to(5, 5, 10, 0)
        ctx.stroke()
        assert 'd="M 0 0 Q 5 5 10 0"' in ctx.elements[0]

    def test_full_circle_is_two_arcs(self):
        ctx = SvgContext(100, 100)
        ctx.begin_path()
        ctx.arc(0, 0, 5, 0, 2 * math.pi)
        ctx.fill()
        assert 'd="M 5 0 A 5 5 0 1 1 -5 0 A 5 5 0 1 1 5 0"' in ctx.elements[0]

    def test_stroke_carries_alpha(self):
        ctx = SvgContext(100, 100)
        ctx.stroke_style = "#123456"
        ctx.global_alpha = 0.25
        ctx.begin_path()
        ctx.move_to(0, 0)
        ctx.line_to(1, 1)
        ctx.stroke()
        assert 'stroke="#123456"' in ctx.elements[0]
        assert 'stroke-opacity="0.25"' in ctx.elements[0]
        assert 'fill="none"' in ctx.elements[0]

    def test_empty_path_emits_nothing(self):
        ctx = SvgContext(100, 100)
        ctx.begin_path()
        ctx.stroke()
        ctx.fill()
        assert ctx.elements == []

    def test_save_restore(self):
        ctx = SvgContext(100, 100)
        ctx.save()
        ctx.translate(50, 50)
        ctx.stroke_style = "#ff0000"
        ctx.restore()
        assert ctx.stroke_style == "#000000"
        ctx.begin_path()
        ctx.move_to(1, 1)
        ctx.line_to(2, 2)
        ctx.stroke()
        assert 'd="M 1 1 L 2 2"' in ctx.elements[0]

    def test_unbalanced_restore_is_ignored(self):
        ctx = SvgContext(100, 100)
        ctx.restore()
        assert ctx.line_width == 1.0

    def test_document_wrapper(self):
        svg = SvgContext(80, 60).to_svg()
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="80" height="60"')
        assert '<rect width="80" height="60" fill="white"/>' in svg
        assert svg.endswith("</svg>")


# ─── Scene Rendering ──────────────────────────────────────────────────────────


class TestRenderSvg:
    def test_nodes_and_edges(self, index):
        """Six nodes (fill + outline each) and one edge."""
        svg = render_svg(index, [Edge("c", "e")], 800, 600)
        assert svg.count("<path") == 13
        assert svg.count('fill="none"') == 7
        assert 'stroke-opacity="0.1"' in svg

    def test_culled_nodes_not_drawn(self, index):
        state = ViewportState(pan_x=5000.0)
        svg = render_svg(index, [Edge("c", "e")], 800, 600, state=state)
        assert svg.count("<path") == 1

    def test_zoomed_out_node_drawn(self):
        """A node far outside the unzoomed view is drawn once zoomed out."""
        nodes = make_rendered_nodes([("far", None, 1800.0, 200.0, 10.0, 0)])
        index = build_hierarchy_index(nodes)
        renderer = SvgRenderer(margin=0.0)
        assert renderer.render(index, [], 800, 400).count("<path") == 0
        assert renderer.render(index, [], 800, 400, state=ViewportState(zoom=0.25)).count("<path") == 2

    def test_hovered_node_uses_highlight_style(self, index):
        style = {"highlight": {"node": {"fillColor": "#ff0000"}}}
        state = ViewportState(hovered_node_id="c")
        svg = render_svg(index, [], 800, 600, state=state, style=style)
        assert svg.count('fill="#ff0000"') == 1

    def test_depth_node_style(self, index):
        style = {"depths": [{"depth": -1, "node": {"fillColor": "#00ff00"}}]}
        svg = render_svg(index, [], 800, 600, style=style)
        assert svg.count('fill="#00ff00"') == 3

    def test_hidden_edges_filtered_by_hover(self, index):
        """Hovering leaf d hides c → e in hide mode."""
        state = ViewportState(hovered_node_id="d")
        renderer = SvgRenderer(options=EdgeOptions(bundling_strength=0.0))
        svg = renderer.render(index, [Edge("c", "e")], 800, 600, state=state)
        assert svg.count('fill="none"') == 6

    def test_no_outline_when_stroke_width_zero(self, index):
        style = {"node": {"strokeWidth": 0}}
        svg = render_svg(index, [], 800, 600, style=style)
        assert svg.count("<path") == 6
