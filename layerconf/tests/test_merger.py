"""Tests for configuration merger.

Tests the deep-merge rule, left-to-right folding, precedence and merge
history.
"""

import pytest

from layerconf.loader.merger import ConfigurationMerger, MergeError, deep_merge


class TestDeepMerge:
    """Test cases for the deep_merge function."""

    def test_override_scalar_wins(self):
        """Test that the override's scalar replaces the base's."""
        result = deep_merge({"k": "base"}, {"k": "override"})
        assert result == {"k": "override"}

    def test_keys_unique_to_each_side(self):
        """Test that keys from both sides are kept."""
        result = deep_merge({"a": 1}, {"b": 2})
        assert result == {"a": 1, "b": 2}

    def test_nested_merge(self):
        """Test recursive merging of nested tables."""
        base = {
            "app": {"name": "base", "version": "1.0"},
            "database": {"host": "localhost"},
        }
        override = {
            "app": {"name": "override", "debug": True},
            "cache": {"type": "redis"},
        }

        result = deep_merge(base, override)

        assert result["app"]["name"] == "override"
        assert result["app"]["version"] == "1.0"
        assert result["app"]["debug"] is True
        assert result["database"]["host"] == "localhost"
        assert result["cache"]["type"] == "redis"

    def test_lists_are_replaced(self):
        """Test that lists are replaced rather than concatenated."""
        result = deep_merge({"items": [1, 2, 3]}, {"items": [4]})
        assert result == {"items": [4]}

    def test_type_mismatch_takes_override(self):
        """Test a table replaced by a scalar and vice versa."""
        assert deep_merge({"a": {"b": 1}}, {"a": "flat"}) == {"a": "flat"}
        assert deep_merge({"a": "flat"}, {"a": {"b": 1}}) == {"a": {"b": 1}}

    def test_inputs_not_modified(self):
        """Test that neither input is mutated."""
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}

        result = deep_merge(base, override)
        result["a"]["b"] = 100

        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}


class TestConfigurationMerger:
    """Test cases for ConfigurationMerger class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.merger = ConfigurationMerger()

    def test_merge_single_tree(self):
        """Test that a single tree merges to itself."""
        config = {"key": "value", "nested": {"inner": "value"}}
        result = self.merger.merge_trees([config])

        assert result == config
        assert result is not config

    def test_merge_order_later_wins(self):
        """Test that later trees override earlier ones."""
        result = self.merger.merge_trees(
            [{"a": "1", "b": "1"}, {"b": "2", "c": "2"}, {"c": "3"}]
        )
        assert result == {"a": "1", "b": "2", "c": "3"}

    def test_none_entries_skipped(self):
        """Test that absent sources contribute nothing."""
        result = self.merger.merge_trees([{"a": 1}, None, {"b": 2}, None])
        assert result == {"a": 1, "b": 2}

    def test_all_none_returns_none(self):
        """Test folding only absent sources."""
        assert self.merger.merge_trees([None, None]) is None
        assert self.merger.merge_trees([]) is None

    def test_empty_tree_still_counts(self):
        """Test that an empty parsed tree is a real contribution."""
        assert self.merger.merge_trees([{}]) == {}

    def test_non_string_key_raises(self):
        """Test that non-string keys fail with the source name."""
        with pytest.raises(MergeError) as exc_info:
            self.merger.merge_trees(
                [{"a": 1}, {"nested": {1: "x"}}], names=["base.toml", "bad.yaml"]
            )

        assert exc_info.value.source == "bad.yaml"
        assert exc_info.value.step == "merge"
        assert "bad.yaml" in str(exc_info.value)

    def test_merge_history(self):
        """Test that each merged source is recorded."""
        self.merger.merge_trees(
            [{"a": 1}, None, {"b": 2}], names=["base.toml", None, None]
        )

        history = self.merger.get_merge_history()
        assert [h["source"] for h in history] == ["base.toml", "reader#2"]
        assert history[1]["config_keys"] == ["b"]
        assert history[1]["merged_keys"] == ["a", "b"]

        self.merger.clear_history()
        assert self.merger.get_merge_history() == []

    def test_merge_two_with_none(self):
        """Test merge_two when one side is absent."""
        assert self.merger.merge_two(None, {"a": 1}) == {"a": 1}
        assert self.merger.merge_two({"a": 1}, None) == {"a": 1}
