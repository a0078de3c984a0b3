"""Viewport interaction — pointer, wheel and touch input → pan/zoom/hover state.

States:
  IDLE      nothing captured; moves only update hover
  PANNING   one pointer or one touch is dragging the view
  PINCHING  two touches are zooming the view

Handlers never draw. Each handler calls the caller's ``schedule_redraw`` at
most once, and only when it changed something a redraw would show. Zoom is
clamped into ``[min_zoom_limit, max_zoom_limit]`` at the end of every handler.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from cactus_tree.config import InteractionConfig
from cactus_tree.hover import LeafProximityIndex, find_hovered_node
from cactus_tree.index import DEFAULT_MAX_ZOOM_LIMIT, DEFAULT_MIN_ZOOM_LIMIT
from cactus_tree.types import NodeId, RenderedNode
from cactus_tree.viewport import (
    filter_visible_nodes,
    optimize_rendering_order,
    screen_to_world,
    zoom_to_point_pan,
)

logger = logging.getLogger(__name__)

# ─── Events ───────────────────────────────────────────────────────────────────


class InteractionMode(str, Enum):
    IDLE = "idle"
    PANNING = "panning"
    PINCHING = "pinching"


@dataclass(frozen=True)
class TouchPoint:
    client_x: float
    client_y: float


@dataclass
class PointerEvent:
    """Mouse/pen event in client (page) coordinates."""

    client_x: float
    client_y: float


@dataclass
class WheelEvent:
    client_x: float
    client_y: float
    delta_y: float
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class TouchEvent:
    """Touch event; ``touches`` lists every touch still on the surface."""

    touches: list[TouchPoint] = field(default_factory=list)
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


# ─── State ────────────────────────────────────────────────────────────────────


@dataclass
class ViewportState:
    """Pan/zoom/hover state shared with the caller's render loop."""

    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = 1.0
    min_zoom_limit: float = DEFAULT_MIN_ZOOM_LIMIT
    max_zoom_limit: float = DEFAULT_MAX_ZOOM_LIMIT
    is_dragging: bool = False
    hovered_node_id: NodeId | None = None
    last_mouse_x: float = 0.0
    last_mouse_y: float = 0.0
    touches: list[TouchPoint] = field(default_factory=list)
    last_touch_distance: float = 0.0
    mode: InteractionMode = InteractionMode.IDLE

    def clamp_zoom(self, value: float) -> float:
        return max(self.min_zoom_limit, min(self.max_zoom_limit, value))


def touch_distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


# ─── Controller ───────────────────────────────────────────────────────────────


class ViewportController:
    """Drives a ``ViewportState`` from raw input events.

    Args:
        state: State to mutate; kept across layout changes.
        width: Drawing surface width in px.
        height: Drawing surface height in px.
        schedule_redraw: Idempotent callback; coalescing is the caller's job.
        config: Interaction settings.
        surface_origin: Client coordinates of the surface's top-left corner.
    """

    def __init__(
        self,
        state: ViewportState,
        width: float,
        height: float,
        schedule_redraw: Callable[[], None],
        config: InteractionConfig | None = None,
        surface_origin: tuple[float, float] = (0.0, 0.0),
    ) -> None:
        if state.min_zoom_limit > state.max_zoom_limit:
            raise ValueError(
                f"min_zoom_limit {state.min_zoom_limit} exceeds max_zoom_limit {state.max_zoom_limit}"
            )
        self.state = state
        self.width = width
        self.height = height
        self.schedule_redraw = schedule_redraw
        self.config = config or InteractionConfig()
        self.surface_origin = surface_origin
        self._nodes: Sequence[RenderedNode] = ()
        self._proximity: LeafProximityIndex | None = None

    # ── Setup ──

    def set_nodes(self, rendered_nodes: Sequence[RenderedNode], leaf_ids: set[NodeId] | None = None) -> None:
        """Install the node set used for hover detection (after each layout)."""
        self._nodes = rendered_nodes
        self._proximity = LeafProximityIndex.build(rendered_nodes, leaf_ids) if leaf_ids else None

    def set_zoom_limits(self, min_zoom_limit: float, max_zoom_limit: float) -> None:
        if min_zoom_limit > max_zoom_limit:
            raise ValueError(f"min_zoom_limit {min_zoom_limit} exceeds max_zoom_limit {max_zoom_limit}")
        self.state.min_zoom_limit = min_zoom_limit
        self.state.max_zoom_limit = max_zoom_limit
        self.state.zoom = self.state.clamp_zoom(self.state.zoom)

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def visible_nodes(self) -> list[RenderedNode]:
        """Nodes to draw for the current view: culled by ``cull_margin``, largest first."""
        s = self.state
        visible = filter_visible_nodes(
            self._nodes, self.width, self.height, s.pan_x, s.pan_y, s.zoom, self.config.cull_margin
        )
        return optimize_rendering_order(visible)

    # ── Helpers ──

    def _surface_xy(self, client_x: float, client_y: float) -> tuple[float, float]:
        return client_x - self.surface_origin[0], client_y - self.surface_origin[1]

    def _finish(self, changed: bool, reason: str) -> bool:
        self.state.zoom = self.state.clamp_zoom(self.state.zoom)
        if changed:
            logger.debug("scheduling redraw after %s", reason)
            self.schedule_redraw()
        return changed

    def _anchor(self, x: float, y: float) -> None:
        self.state.last_mouse_x = x
        self.state.last_mouse_y = y

    def _start_panning(self, x: float, y: float) -> None:
        self.state.mode = InteractionMode.PANNING
        self.state.is_dragging = True
        self._anchor(x, y)

    def _stop(self) -> None:
        self.state.mode = InteractionMode.IDLE
        self.state.is_dragging = False

    def _pan_to(self, x: float, y: float) -> bool:
        if not self.config.pannable:
            return False
        dx = x - self.state.last_mouse_x
        dy = y - self.state.last_mouse_y
        self.state.pan_x += dx
        self.state.pan_y += dy
        self._anchor(x, y)
        return dx != 0 or dy != 0

    def _zoom_at(self, factor: float, x: float, y: float) -> bool:
        """Multiply zoom by ``factor`` keeping the world point under (x, y) fixed."""
        s = self.state
        new_zoom = s.clamp_zoom(s.zoom * factor)
        if new_zoom == s.zoom:
            return False
        s.pan_x, s.pan_y = zoom_to_point_pan(x, y, s.zoom, new_zoom, s.pan_x, s.pan_y, self.width / 2, self.height / 2)
        s.zoom = new_zoom
        return True

    def _detect_hover(self, x: float, y: float) -> bool:
        """Update ``hovered_node_id`` for surface point (x, y); True if it changed."""
        if not self._nodes:
            return False
        s = self.state
        wx, wy = screen_to_world(x, y, s.pan_x, s.pan_y, s.zoom, self.width / 2, self.height / 2)
        hovered = find_hovered_node(wx, wy, self._nodes)
        if hovered is None and self._proximity is not None:
            hovered = self._proximity.find(wx, wy, self.config.leaf_hover_tolerance / s.zoom)
        if hovered == s.hovered_node_id:
            return False
        s.hovered_node_id = hovered
        return True

    def _touch_xy(self, touch: TouchPoint) -> tuple[float, float]:
        return self._surface_xy(touch.client_x, touch.client_y)

    # ── Pointer ──

    def on_pointer_down(self, event: PointerEvent) -> bool:
        if not self.config.pannable:
            return self._finish(False, "pointer down")
        self._start_panning(*self._surface_xy(event.client_x, event.client_y))
        return self._finish(False, "pointer down")

    def on_pointer_move(self, event: PointerEvent) -> bool:
        x, y = self._surface_xy(event.client_x, event.client_y)
        if self.state.mode is InteractionMode.PANNING:
            return self._finish(self._pan_to(x, y), "pan")
        self._anchor(x, y)
        return self._finish(self._detect_hover(x, y), "hover change")

    def on_pointer_up(self, event: PointerEvent | None = None) -> bool:
        if self.state.mode is InteractionMode.PANNING:
            self._stop()
        return self._finish(False, "pointer up")

    def on_pointer_leave(self, event: PointerEvent | None = None) -> bool:
        self._stop()
        cleared = self.state.hovered_node_id is not None
        self.state.hovered_node_id = None
        return self._finish(cleared, "pointer leave")

    def on_wheel(self, event: WheelEvent) -> bool:
        if not self.config.zoomable:
            return self._finish(False, "wheel")
        event.prevent_default()
        if event.delta_y == 0:
            return self._finish(False, "wheel")
        step = self.config.wheel_zoom_step
        factor = 1 - step if event.delta_y > 0 else 1 + step
        x, y = self._surface_xy(event.client_x, event.client_y)
        return self._finish(self._zoom_at(factor, x, y), "wheel zoom")

    # ── Touch ──

    def on_touch_start(self, event: TouchEvent) -> bool:
        event.prevent_default()
        s = self.state
        s.touches = list(event.touches)
        changed = False

        if len(s.touches) == 1:
            x, y = self._touch_xy(s.touches[0])
            if self.config.pannable:
                self._start_panning(x, y)
            changed = self._detect_hover(x, y)
        elif len(s.touches) >= 2:
            s.mode = InteractionMode.PINCHING
            s.is_dragging = False
            s.last_touch_distance = touch_distance(self._touch_xy(s.touches[0]), self._touch_xy(s.touches[1]))

        return self._finish(changed, "tap hover")

    def on_touch_move(self, event: TouchEvent) -> bool:
        event.prevent_default()
        s = self.state
        touches = list(event.touches)
        s.touches = touches
        changed = False

        if s.mode is InteractionMode.PINCHING and len(touches) >= 2:
            a = self._touch_xy(touches[0])
            b = self._touch_xy(touches[1])
            distance = touch_distance(a, b)
            if self.config.zoomable and s.last_touch_distance > 0:
                mid_x = (a[0] + b[0]) / 2
                mid_y = (a[1] + b[1]) / 2
                changed = self._zoom_at(distance / s.last_touch_distance, mid_x, mid_y)
            s.last_touch_distance = distance
        elif s.mode is InteractionMode.PANNING and len(touches) == 1:
            changed = self._pan_to(*self._touch_xy(touches[0]))

        return self._finish(changed, "touch move")

    def on_touch_end(self, event: TouchEvent) -> bool:
        event.prevent_default()
        s = self.state
        s.touches = list(event.touches)

        if not s.touches:
            self._stop()
            s.last_touch_distance = 0.0
        elif len(s.touches) == 1:
            s.last_touch_distance = 0.0
            if self.config.pannable:
                self._start_panning(*self._touch_xy(s.touches[0]))
            else:
                self._stop()
        else:
            s.last_touch_distance = touch_distance(self._touch_xy(s.touches[0]), self._touch_xy(s.touches[1]))

        return self._finish(False, "touch end")
