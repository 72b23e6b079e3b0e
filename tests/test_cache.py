"""Tests for the break cache registry."""

import pytest

from breakmark.cache import BreakCache, ContainerState
from fakes import FakeContainer


def test_unknown_container_is_uncomputed():
    cache = BreakCache()
    assert cache.state("missing") is ContainerState.UNCOMPUTED
    assert cache.breaks("missing") == []
    assert cache.get("missing") is None


def test_store_marks_computed():
    cache = BreakCache()
    container = FakeContainer("doc", 2000)
    entry = cache.store(container, [900, 1800], 2000, 900)
    assert entry.state is ContainerState.COMPUTED
    assert cache.breaks("doc") == [900, 1800]
    assert "doc" in cache
    assert len(cache) == 1


def test_breaks_returns_copy():
    cache = BreakCache()
    cache.store(FakeContainer("doc", 2000), [900, 1800], 2000, 900)
    cache.breaks("doc").append(1)
    assert cache.breaks("doc") == [900, 1800]


def test_extend_appends_and_marks_extended():
    cache = BreakCache()
    cache.store(FakeContainer("doc", 2000), [900, 1800], 2000, 900)
    entry = cache.extend("doc", [2700], 3000)
    assert entry.breaks == [900, 1800, 2700]
    assert entry.height == 3000
    assert entry.state is ContainerState.EXTENDED


def test_invalidate_all_keeps_subscriptions():
    cache = BreakCache()
    container = FakeContainer("doc", 2000)
    entry = cache.store(container, [900], 2000, 900)
    entry.subscription = container.observe_height(lambda: None)
    cache.store(FakeContainer("other", 500), [], 500, 900)
    cache.invalidate_all()
    assert cache.state("doc") is ContainerState.INVALIDATED
    assert cache.state("other") is ContainerState.INVALIDATED
    assert cache.breaks("doc") == []
    assert container.listeners


def test_cannot_extend_invalidated_entry():
    cache = BreakCache()
    cache.store(FakeContainer("doc", 2000), [900], 2000, 900)
    cache.invalidate_all()
    with pytest.raises(ValueError):
        cache.extend("doc", [1800], 3000)


def test_recompute_after_invalidation():
    cache = BreakCache()
    container = FakeContainer("doc", 2000)
    cache.store(container, [900], 2000, 900)
    cache.invalidate("doc")
    cache.store(container, [800, 1600], 2000, 800)
    assert cache.state("doc") is ContainerState.COMPUTED


def test_remove_disposes_subscription():
    cache = BreakCache()
    container = FakeContainer("doc", 2000)
    entry = cache.store(container, [900], 2000, 900)
    entry.subscription = container.observe_height(lambda: None)
    cache.remove("doc")
    assert container.listeners == []
    assert "doc" not in cache
    assert cache.remove("doc") is None


def test_prune_removes_dead_containers():
    cache = BreakCache()
    for handle in ("a", "b", "c"):
        cache.store(FakeContainer(handle, 100), [], 100, 900)
    assert sorted(cache.prune(["b"])) == ["a", "c"]
    assert cache.handles() == ["b"]


def test_clear():
    cache = BreakCache()
    container = FakeContainer("doc", 2000)
    entry = cache.store(container, [900], 2000, 900)
    entry.subscription = container.observe_height(lambda: None)
    cache.clear()
    assert len(cache) == 0
    assert container.listeners == []
