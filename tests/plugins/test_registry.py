"""Tests for the plugin registry."""

import pytest
from pydantic import ValidationError

from skunk.plugins.registry import PluginEntry, PluginRegistry, parse_plugin_name


class TestParsePluginName:
    """Tests for parse_plugin_name."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("skunkcrm", ("skunkcrm", False)),
            ("skunkcrm-pro", ("skunkcrm", True)),
            ("SkunkForms-Pro", ("skunkforms", True)),
            ("-pro", ("-pro", False)),
        ],
    )
    def test_parse(self, raw: str, expected: tuple[str, bool]):
        assert parse_plugin_name(raw) == expected


class TestPluginRegistry:
    """Tests for PluginRegistry."""

    def test_builtins(self):
        registry = PluginRegistry.with_builtins()

        keys = [entry.key for entry in registry.list_all()]

        assert keys == ["skunkcrm", "skunkforms", "skunkpages"]

    def test_resolve_free(self):
        request = PluginRegistry.with_builtins().resolve("skunkforms")

        assert request is not None
        assert request.pro is False
        assert request.slug == "skunkforms"
        assert request.display_name == "SkunkForms"

    def test_resolve_pro_with_license(self):
        request = PluginRegistry.with_builtins().resolve("skunkcrm-pro", "KEY-1")

        assert request.pro is True
        assert request.slug == "skunkcrm-pro"
        assert request.license_key == "KEY-1"
        assert request.display_name == "SkunkCRM Pro"

    def test_resolve_blank_license_is_none(self):
        request = PluginRegistry.with_builtins().resolve("skunkcrm-pro", "")

        assert request.license_key is None

    def test_resolve_unknown(self):
        assert PluginRegistry.with_builtins().resolve("jetpack") is None
        assert PluginRegistry.with_builtins().resolve("jetpack-pro") is None

    def test_slugs(self):
        slugs = PluginRegistry.with_builtins().slugs()

        assert "skunkpages" in slugs
        assert "skunkpages-pro" in slugs
        assert len(slugs) == 6

    def test_entries_are_immutable(self):
        entry = PluginRegistry.with_builtins().get("skunkcrm")

        with pytest.raises(ValidationError):
            entry.free_slug = "other"

    def test_register_custom_entry(self):
        registry = PluginRegistry()
        registry.register(
            PluginEntry(key="demo", free_slug="demo", pro_slug="demo-premium", display_name="Demo")
        )

        assert registry.resolve("demo-pro").slug == "demo-premium"
