"""Tests for styles.py — depth entry merging and property lookup."""

from __future__ import annotations

from cactus_tree.styles import merge_depth_entries, read_style_prop, resolve_depth_style

LEVELS = {-1: {"c", "d", "e"}, -2: {"a", "b"}, -3: {"root"}}


class TestResolveDepthStyle:
    def test_positive_depth_match(self):
        style = {"depths": [{"depth": 2, "node": {"fillColor": "#111"}}]}
        assert resolve_depth_style(2, "c", style, LEVELS)["node"] == {"fillColor": "#111"}
        assert resolve_depth_style(1, "a", style, LEVELS) is None

    def test_negative_depth_match(self):
        style = {"depths": [{"depth": -2, "edge": {"strokeWidth": 4}}]}
        assert resolve_depth_style(1, "a", style, LEVELS)["edge"] == {"strokeWidth": 4}
        assert resolve_depth_style(2, "c", style, LEVELS) is None

    def test_negative_depth_without_levels(self):
        style = {"depths": [{"depth": -1, "node": {}}]}
        assert resolve_depth_style(2, "c", style) is None

    def test_matching_entries_merge_in_order(self):
        """Later entries win per property; groups merge rather than replace."""
        style = {
            "depths": [
                {"depth": 2, "node": {"fillColor": "#111", "strokeWidth": 1}},
                {"depth": -1, "node": {"fillColor": "#222"}},
            ]
        }
        resolved = resolve_depth_style(2, "c", style, LEVELS)
        assert resolved["node"] == {"fillColor": "#222", "strokeWidth": 1}

    def test_no_style(self):
        assert resolve_depth_style(0, "root", None) is None
        assert resolve_depth_style(0, "root", {"depths": []}) is None

    def test_wildcard_entries_ignored(self):
        style = {"depths": [{"depth": "*", "node": {"fillColor": "#abc"}}]}
        assert resolve_depth_style(0, "root", style, LEVELS) is None


def test_merge_depth_entries_skips_depth_key():
    merged = merge_depth_entries({"depth": 1, "edge": {"a": 1}}, {"depth": 2, "edge": {"b": 2}, "label": "x"})
    assert merged == {"depth": 1, "edge": {"a": 1, "b": 2}, "label": "x"}


class TestReadStyleProp:
    def test_depth_override_first(self):
        depth_style = {"node": {"fillColor": "#depth"}}
        style = {"node": {"fillColor": "#global"}}
        assert read_style_prop(depth_style, style, "node", "fillColor") == "#depth"

    def test_global_fallback(self):
        style = {"node": {"fillColor": "#global"}}
        assert read_style_prop({"node": {}}, style, "node", "fillColor") == "#global"

    def test_default(self):
        assert read_style_prop(None, None, "node", "fillColor", "#default") == "#default"

    def test_falsy_values_kept(self):
        assert read_style_prop({"edge": {"strokeWidth": 0}}, None, "edge", "strokeWidth", 1) == 0
