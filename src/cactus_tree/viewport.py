"""Viewport culling, draw ordering and screen ↔ world transforms.

The draw transform used by every renderer is::

    translate(cx, cy) · scale(zoom) · translate(pan / zoom) · translate(-cx, -cy)

with (cx, cy) the surface centre, so ``screen = (world - c) * zoom + c + pan``.
"""

from __future__ import annotations

from collections.abc import Sequence

from cactus_tree.renderers.base import DrawingContext
from cactus_tree.types import RenderedNode

DEFAULT_CULL_MARGIN = 100.0


def filter_visible_nodes(
    nodes: Sequence[RenderedNode],
    width: float,
    height: float,
    pan_x: float,
    pan_y: float,
    zoom: float,
    margin: float = DEFAULT_CULL_MARGIN,
) -> list[RenderedNode]:
    """Keep nodes whose zoom-scaled circle meets the margin-expanded viewport.

    Centres are mapped to screen space with the draw transform, so the test
    matches what ``apply_view_transform`` puts on the surface. Input order is
    preserved among kept nodes.
    """
    cx = width / 2
    cy = height / 2

    visible: list[RenderedNode] = []
    for rn in nodes:
        sx = (rn.x - cx) * zoom + cx + pan_x
        sy = (rn.y - cy) * zoom + cy + pan_y
        r = rn.radius * zoom
        if sx + r >= -margin and sx - r <= width + margin and sy + r >= -margin and sy - r <= height + margin:
            visible.append(rn)
    return visible


def optimize_rendering_order(nodes: Sequence[RenderedNode]) -> list[RenderedNode]:
    """Largest circles first (stable), so smaller ones are painted over them."""
    return sorted(nodes, key=lambda rn: rn.radius, reverse=True)


def screen_to_world(
    x: float,
    y: float,
    pan_x: float,
    pan_y: float,
    zoom: float,
    center_x: float,
    center_y: float,
) -> tuple[float, float]:
    """Map a surface point back into layout coordinates."""
    return (
        (x - center_x - pan_x) / zoom + center_x,
        (y - center_y - pan_y) / zoom + center_y,
    )


def zoom_to_point_pan(
    x: float,
    y: float,
    zoom: float,
    new_zoom: float,
    pan_x: float,
    pan_y: float,
    center_x: float,
    center_y: float,
) -> tuple[float, float]:
    """Pan that keeps the world point under (x, y) fixed across a zoom change."""
    world_x = (x - center_x - pan_x) / zoom
    world_y = (y - center_y - pan_y) / zoom
    return x - center_x - world_x * new_zoom, y - center_y - world_y * new_zoom


def apply_view_transform(
    context: DrawingContext | None,
    width: float,
    height: float,
    pan_x: float,
    pan_y: float,
    zoom: float = 1.0,
) -> None:
    """Save the context and push the pan/zoom transform. Pair with ``restore()``."""
    if context is None:
        return
    context.save()
    context.translate(width / 2, height / 2)
    context.scale(zoom, zoom)
    context.translate(pan_x / zoom, pan_y / zoom)
    context.translate(-width / 2, -height / 2)
