"""Unit tests for the component registry store."""

import threading

from form_engine.loader.registry import (
    ComponentRegistry,
    get_default_registry,
    get_registry_snapshot,
    reset_registry,
)
from form_engine.runtime.sandbox import EntryPoints


def entry(name: str) -> EntryPoints:
    return EntryPoints(name=name, render=lambda: name)


class TestComponentRegistry:
    def test_merge_adds_and_overwrites(self, registry):
        registry.merge({"A": entry("A")})
        replacement = entry("A")
        registry.merge({"A": replacement, "B": entry("B")})
        assert registry.get("A") is replacement
        assert sorted(registry) == ["A", "B"]
        assert len(registry) == 2
        assert "B" in registry

    def test_snapshot_is_a_copy(self, registry):
        registry.merge({"A": entry("A")})
        snapshot = registry.snapshot()
        snapshot["B"] = entry("B")
        assert "B" not in registry

    def test_render_units(self, registry):
        registry.merge({"A": entry("A")})
        assert registry.render_units()["A"]() == "A"

    def test_initial_data_slot(self, registry):
        assert registry.get_initial_data() == {}
        registry.set_initial_data({"x": 1})
        assert registry.get_initial_data() == {"x": 1}
        registry.set_initial_data(None)
        assert registry.get_initial_data() == {}

    def test_reset_clears_entries_and_initial_data(self, registry):
        registry.merge({"A": entry("A")})
        registry.set_initial_data({"x": 1})
        registry.reset()
        assert registry.snapshot() == {}
        assert registry.get_initial_data() == {}

    def test_concurrent_merges(self, registry):
        def worker(prefix):
            for i in range(50):
                registry.merge({f"{prefix}{i}": entry(f"{prefix}{i}")})

        threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(registry) == 200


class TestDefaultRegistry:
    def test_reset_then_snapshot_is_empty(self):
        get_default_registry().merge({"A": entry("A")})
        assert "A" in get_registry_snapshot()
        reset_registry()
        assert get_registry_snapshot() == {}

    def test_snapshot_is_read_only_copy(self):
        get_registry_snapshot()["X"] = entry("X")
        assert "X" not in get_default_registry()
