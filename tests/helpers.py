"""Test helpers: the six-node sample hierarchy and a recording drawing context.

Sample hierarchy (world coordinates)::

    root (0, 0, r=100)
    ├── a (-50, 0, r=40)
    │   ├── c (-60, 10, r=10)
    │   └── d (-40, 10, r=10)
    └── b (50, 0, r=40)
        └── e (50, 20, r=10)
"""

from __future__ import annotations

from typing import Any

from cactus_tree.types import RenderedNode, TreeNode

SAMPLE = [
    # id, parent, x, y, radius, depth
    ("root", None, 0.0, 0.0, 100.0, 0),
    ("a", "root", -50.0, 0.0, 40.0, 1),
    ("b", "root", 50.0, 0.0, 40.0, 1),
    ("c", "a", -60.0, 10.0, 10.0, 2),
    ("d", "a", -40.0, 10.0, 10.0, 2),
    ("e", "b", 50.0, 20.0, 10.0, 2),
]


def make_rendered_nodes(rows=SAMPLE) -> list[RenderedNode]:
    """Build RenderedNodes from (id, parent, x, y, radius, depth) rows."""
    nodes = []
    for node_id, parent, x, y, radius, depth in rows:
        tree_node = TreeNode(id=node_id, name=str(node_id).upper(), parent=parent)
        nodes.append(RenderedNode(id=node_id, x=x, y=y, depth=depth, radius=radius, node=tree_node, name=tree_node.name))
    return nodes


class RecordingContext:
    """DrawingContext fake that records every call in order."""

    def __init__(self) -> None:
        self.stroke_style = "#000000"
        self.fill_style = "#000000"
        self.line_width = 1.0
        self.global_alpha = 1.0
        self.calls: list[tuple[Any, ...]] = []

    def _record(self, *call: Any) -> None:
        self.calls.append(call)

    def save(self) -> None:
        self._record("save")

    def restore(self) -> None:
        self._record("restore")

    def translate(self, x: float, y: float) -> None:
        self._record("translate", x, y)

    def scale(self, x: float, y: float) -> None:
        self._record("scale", x, y)

    def begin_path(self) -> None:
        self._record("begin_path")

    def move_to(self, x: float, y: float) -> None:
        self._record("move_to", x, y)

    def line_to(self, x: float, y: float) -> None:
        self._record("line_to", x, y)

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        self._record("quadratic_curve_to", cpx, cpy, x, y)

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None:
        self._record("arc", x, y, radius, start_angle, end_angle)

    def stroke(self) -> None:
        self._record("stroke", self.stroke_style, self.line_width, self.global_alpha)

    def fill(self) -> None:
        self._record("fill", self.fill_style, self.global_alpha)

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def strokes(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == "stroke"]
