"""Tunable options for edge drawing and viewport interaction.

Both option sets are frozen dataclasses with documented defaults. Callers that
receive options from the external merge step (camelCase mappings) use
``from_mapping``; unknown keys are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

FILTER_MODES = ("hide", "mute")


def _pick(mapping: Mapping[str, Any], aliases: Mapping[str, str]) -> dict[str, Any]:
    picked: dict[str, Any] = {}
    for key, value in mapping.items():
        name = aliases.get(key, key)
        if name in aliases.values() and value is not None:
            picked[name] = value
    return picked


@dataclass(frozen=True)
class EdgeOptions:
    """How non-hierarchical edges are drawn.

    Attributes:
        bundling_strength: 0 draws straight chords, 1 follows the hierarchy route.
        filter_mode: "hide" skips edges filtered by hover, "mute" fades them.
        mute_opacity: Opacity multiplier for muted edges.
    """

    bundling_strength: float = 0.97
    filter_mode: str = "hide"
    mute_opacity: float = 0.1

    ALIASES: ClassVar[dict[str, str]] = {
        "bundlingStrength": "bundling_strength",
        "filterMode": "filter_mode",
        "muteOpacity": "mute_opacity",
    }

    def __post_init__(self) -> None:
        if self.filter_mode not in FILTER_MODES:
            raise ValueError(f"filter_mode must be one of {FILTER_MODES}, got {self.filter_mode!r}")
        if self.mute_opacity < 0:
            raise ValueError(f"mute_opacity must be >= 0, got {self.mute_opacity}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> EdgeOptions:
        if not mapping:
            return cls()
        return cls(**_pick(mapping, cls.ALIASES))


@dataclass(frozen=True)
class InteractionConfig:
    """Viewport interaction settings.

    Attributes:
        pannable: Pointer/touch drags pan the view.
        zoomable: Wheel and pinch zoom the view.
        wheel_zoom_step: Wheel down multiplies zoom by ``1 - step``, up by ``1 + step``.
        leaf_hover_tolerance: Extra hover radius (px) around leaves.
        cull_margin: Screen-space margin (px) kept around the viewport when culling.
    """

    pannable: bool = True
    zoomable: bool = True
    wheel_zoom_step: float = 0.1
    leaf_hover_tolerance: float = 12.0
    cull_margin: float = 100.0

    ALIASES: ClassVar[dict[str, str]] = {
        "pannable": "pannable",
        "zoomable": "zoomable",
        "wheelZoomStep": "wheel_zoom_step",
        "leafHoverTolerance": "leaf_hover_tolerance",
        "cullMargin": "cull_margin",
    }

    def __post_init__(self) -> None:
        if not 0 < self.wheel_zoom_step < 1:
            raise ValueError(f"wheel_zoom_step must be in (0, 1), got {self.wheel_zoom_step}")
        if self.leaf_hover_tolerance < 0:
            raise ValueError(f"leaf_hover_tolerance must be >= 0, got {self.leaf_hover_tolerance}")
        if self.cull_margin < 0:
            raise ValueError(f"cull_margin must be >= 0, got {self.cull_margin}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> InteractionConfig:
        if not mapping:
            return cls()
        return cls(**_pick(mapping, cls.ALIASES))

