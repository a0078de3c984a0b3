"""Depth-specific style lookup over fully merged style mappings.

Style objects arrive from the external merge step as plain mappings::

    {
        "node": {...}, "edge": {...},
        "highlight": {"node": {...}, "edge": {...}},
        "depths": [{"depth": 2, "edge": {...}}, {"depth": -1, "node": {...}}],
    }

Values are treated as opaque leaves.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cactus_tree.types import NodeId


def merge_depth_entries(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Layer ``override`` over ``base``; nested group mappings merge one level deep."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key == "depth":
            continue
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def resolve_depth_style(
    depth: int | None,
    node_id: NodeId | None,
    style: Mapping[str, Any] | None,
    negative_depth_levels: Mapping[int, set[NodeId]] | None = None,
) -> dict[str, Any] | None:
    """Merge every ``depths`` entry that applies to a node, in declaration order.

    Entries with depth >= 0 match on equality with ``depth``; negative entries
    match when ``node_id`` belongs to that negative-depth level. Returns None
    when no entry matches.
    """
    if not style:
        return None
    entries = style.get("depths")
    if not entries:
        return None

    levels = negative_depth_levels or {}
    resolved: dict[str, Any] | None = None

    for entry in entries:
        entry_depth = entry.get("depth")
        if isinstance(entry_depth, bool) or not isinstance(entry_depth, int):
            continue
        if entry_depth >= 0:
            matches = entry_depth == depth
        else:
            members = levels.get(entry_depth)
            matches = members is not None and node_id in members
        if not matches:
            continue
        resolved = merge_depth_entries(resolved, entry) if resolved is not None else dict(entry)

    return resolved


def read_style_prop(
    depth_style: Mapping[str, Any] | None,
    style: Mapping[str, Any] | None,
    group: str,
    prop: str,
    default: Any = None,
) -> Any:
    """Read ``group.prop``: depth override, then global style, then ``default``."""
    for source in (depth_style, style):
        if not source:
            continue
        group_values = source.get(group)
        if isinstance(group_values, Mapping) and group_values.get(prop) is not None:
            return group_values[prop]
    return default
