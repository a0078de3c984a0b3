"""Data model shared by the index, routing, interaction and rendering modules.

The layout step (external) turns ``TreeNode`` inputs into ``RenderedNode``
records. Everything downstream holds references into those same objects;
nothing here copies nodes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

NodeId = Union[str, int]


@dataclass
class TreeNode:
    """A node of the input hierarchy.

    ``parent`` is the parent's id; ``None`` (or an id that does not resolve)
    marks a root. ``parent_ref`` is a derived, non-owning lookup pointer set by
    ``update_parent_references`` and never compared or printed, so cyclic
    malformed input cannot recurse through ``__eq__`` / ``__repr__``.
    """

    id: NodeId
    name: str = ""
    parent: NodeId | None = None
    weight: float | None = None
    label: dict[str, Any] | None = None
    parent_ref: TreeNode | None = field(default=None, repr=False, compare=False)


@dataclass
class RenderedNode:
    """A positioned node produced by the layout step."""

    id: NodeId
    x: float
    y: float
    depth: int
    radius: float
    node: TreeNode
    name: str = ""


@dataclass(frozen=True)
class Edge:
    """A non-hierarchical link between two nodes, routed through the hierarchy."""

    source: NodeId
    target: NodeId


@dataclass(frozen=True)
class Point:
    """A 2D point in layout (world) coordinates."""

    x: float
    y: float


@dataclass
class HierarchicalPath:
    """Hierarchy route between two nodes: source → … → NCA → … → target.

    ``common_ancestor`` is None when the endpoints share no ancestor (separate
    roots, or a malformed cyclic chain), in which case ``nodes`` is just the
    endpoint pair.
    """

    nodes: list[TreeNode]
    common_ancestor: TreeNode | None = None


class LayoutFunction(Protocol):
    """Boundary of the external circle-packing layout."""

    def __call__(
        self,
        width: float,
        height: float,
        zoom: float,
        nodes: Sequence[TreeNode],
        options: Mapping[str, float],
    ) -> list[Mapping[str, Any]]:
        """Return one ``{x, y, radius, depth, node}`` mapping per laid-out node."""
        ...


def to_rendered_nodes(layout_output: Iterable[Mapping[str, Any]]) -> list[RenderedNode]:
    """Convert raw layout records into ``RenderedNode`` objects.

    The input ``TreeNode`` is kept by reference so parent references set
    later are visible through ``RenderedNode.node``.
    """
    rendered: list[RenderedNode] = []
    for record in layout_output:
        node = record.get("node")
        if node is None:
            continue
        rendered.append(
            RenderedNode(
                id=node.id,
                x=float(record["x"]),
                y=float(record["y"]),
                depth=int(record["depth"]),
                radius=float(record["radius"]),
                node=node,
                name=node.name or "",
            )
        )
    return rendered
