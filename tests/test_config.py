"""Tests for config.py — option defaults, validation and camelCase mapping."""

from __future__ import annotations

import dataclasses

import pytest

from cactus_tree.config import EdgeOptions, InteractionConfig


class TestEdgeOptions:
    def test_defaults(self):
        opts = EdgeOptions()
        assert opts.bundling_strength == 0.97
        assert opts.filter_mode == "hide"
        assert opts.mute_opacity == 0.1

    def test_from_mapping_camel_case(self):
        opts = EdgeOptions.from_mapping({"bundlingStrength": 0.5, "filterMode": "mute", "muteOpacity": 0.3})
        assert opts == EdgeOptions(bundling_strength=0.5, filter_mode="mute", mute_opacity=0.3)

    def test_from_mapping_ignores_unknown_and_none(self):
        opts = EdgeOptions.from_mapping({"colour": "red", "filterMode": None})
        assert opts == EdgeOptions()

    def test_from_empty_mapping(self):
        assert EdgeOptions.from_mapping(None) == EdgeOptions()

    def test_invalid_filter_mode(self):
        with pytest.raises(ValueError, match="filter_mode"):
            EdgeOptions(filter_mode="blur")

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            EdgeOptions().filter_mode = "mute"


class TestInteractionConfig:
    def test_defaults(self):
        cfg = InteractionConfig()
        assert cfg.pannable and cfg.zoomable
        assert cfg.wheel_zoom_step == 0.1

    def test_from_mapping(self):
        cfg = InteractionConfig.from_mapping({"zoomable": False, "wheelZoomStep": 0.2, "cull_margin": 10})
        assert cfg.zoomable is False
        assert cfg.wheel_zoom_step == 0.2
        assert cfg.cull_margin == 10

    @pytest.mark.parametrize("step", [0, 1, -0.1, 1.5])
    def test_wheel_step_range(self, step):
        with pytest.raises(ValueError, match="wheel_zoom_step"):
            InteractionConfig(wheel_zoom_step=step)

    def test_negative_tolerance(self):
        with pytest.raises(ValueError):
            InteractionConfig(leaf_hover_tolerance=-1)
