# api/tests/test_cache.py
from __future__ import annotations

import pytest

from erp_console.cache import NEVER_STALE, QueryCache, freeze


class Loader:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return {"n": self.calls}


def test_fresh_entry_is_served_from_cache(cache, clock):
    load = Loader()
    assert cache.fetch(("products", "list", ()), load) == {"n": 1}
    clock.advance(299)
    assert cache.fetch(("products", "list", ()), load) == {"n": 1}
    assert load.calls == 1


def test_stale_entry_is_reloaded(cache, clock):
    load = Loader()
    cache.fetch(("products", "list", ()), load)
    clock.advance(300)
    assert cache.fetch(("products", "list", ()), load) == {"n": 2}


def test_per_query_stale_time(cache, clock):
    load = Loader()
    cache.fetch(("notifications", "unread-count"), load, stale_time=15)
    clock.advance(16)
    cache.fetch(("notifications", "unread-count"), load, stale_time=15)
    assert load.calls == 2


def test_never_stale(cache, clock):
    load = Loader()
    cache.fetch(("auth", "me"), load, stale_time=NEVER_STALE)
    clock.advance(10 ** 9)
    cache.fetch(("auth", "me"), load, stale_time=NEVER_STALE)
    assert load.calls == 1


def test_invalidate_marks_prefix_stale(cache):
    lists, detail, wastage, other = Loader(), Loader(), Loader(), Loader()
    cache.fetch(("production-orders", "list", ()), lists)
    cache.fetch(("production-orders", "detail", 12), detail)
    cache.fetch(("production-orders", "detail", 12, "wastage"), wastage)
    cache.fetch(("production-orders", "detail", 13), other)

    assert cache.invalidate(("production-orders", "detail", 12)) == 2
    assert cache.stats() == {"entries": 4, "stale": 2}

    cache.fetch(("production-orders", "list", ()), lists)
    cache.fetch(("production-orders", "detail", 12), detail)
    cache.fetch(("production-orders", "detail", 12, "wastage"), wastage)
    cache.fetch(("production-orders", "detail", 13), other)
    assert (lists.calls, detail.calls, wastage.calls, other.calls) == (1, 2, 2, 1)


def test_invalidate_whole_namespace(cache):
    cache.set(("inventory", "list", ()), [])
    cache.set(("inventory", "stats"), {})
    cache.set(("products", "list", ()), [])
    assert cache.invalidate(("inventory",)) == 2


def test_loader_error_keeps_previous_entry(cache, clock):
    cache.set(("products", "detail", 1), {"id": 1})
    clock.advance(301)

    def boom():
        raise RuntimeError("backend down")

    with pytest.raises(RuntimeError):
        cache.fetch(("products", "detail", 1), boom)
    assert cache.peek(("products", "detail", 1)) == {"id": 1}


def test_gc_drops_unused_entries(cache, clock):
    cache.set(("a",), 1)
    clock.advance(400)
    cache.set(("b",), 2)
    clock.advance(300)
    assert cache.gc() == 1
    assert cache.peek(("a",)) is None
    assert cache.peek(("b",)) == 2


def test_clear(cache):
    cache.set(("a",), 1)
    cache.clear()
    assert len(cache) == 0


def test_freeze_is_order_independent_and_drops_none():
    assert freeze({"page": 1, "search": None, "status": "active"}) == freeze({"status": "active", "page": 1})
    assert freeze(None) == ()
    assert freeze({"ids": [3, 1]}) == (("ids", (3, 1)),)


def test_default_clock_is_monotonic():
    c = QueryCache()
    c.set(("x",), 1)
    assert c.fetch(("x",), lambda: 2) == 1


def test_invalidate_during_load_keeps_entry_stale(cache):
    key = ("products", "list", ())

    def load_then_mutate():
        cache.invalidate(("products",))
        return {"data": "before-update"}

    assert cache.fetch(key, load_then_mutate) == {"data": "before-update"}
    assert cache.fetch(key, lambda: {"data": "after-update"}) == {"data": "after-update"}


def test_clear_during_load_keeps_entry_stale(cache):
    key = ("auth", "me")

    def load_then_clear():
        cache.clear()
        return {"id": 1}

    cache.fetch(key, load_then_clear, stale_time=NEVER_STALE)
    assert cache.fetch(key, lambda: {"id": 2}, stale_time=NEVER_STALE) == {"id": 2}


def test_unrelated_invalidate_during_load_keeps_entry_fresh(cache):
    key = ("products", "list", ())

    def load():
        cache.invalidate(("customers",))
        return {"data": "products"}

    cache.fetch(key, load)
    assert cache.fetch(key, lambda: {"data": "reloaded"}) == {"data": "products"}
