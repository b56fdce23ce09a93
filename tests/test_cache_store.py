import pytest

from fintrack.cache import CacheStore


@pytest.mark.unit
def test_get_returns_none_on_miss(cache):
    assert cache.get("budgets") is None


@pytest.mark.unit
def test_set_then_get_returns_payload(cache):
    cache.set("budgets", ("b1", "b2"))
    assert cache.get("budgets") == ("b1", "b2")


@pytest.mark.unit
def test_entry_valid_until_exact_expiry_then_evicted(cache, clock):
    cache.set("budgets", ("b1",))

    clock.advance(300.0)
    assert cache.get("budgets") == ("b1",)

    clock.advance(0.001)
    assert cache.get("budgets") is None
    # Lazy eviction removed the expired entry on that read
    assert "budgets" not in cache.stats().keys


@pytest.mark.unit
def test_explicit_ttl_overrides_default(cache, clock):
    cache.set("dashboard-summary", {"total": 1}, ttl=10)
    clock.advance(11)
    assert cache.get("dashboard-summary") is None


@pytest.mark.unit
def test_overwrite_restarts_expiry(cache, clock):
    cache.set("categories", ("old",))
    clock.advance(200)
    cache.set("categories", ("new",))
    clock.advance(200)
    assert cache.get("categories") == ("new",)


@pytest.mark.unit
def test_none_is_never_stored(cache):
    with pytest.raises(ValueError):
        cache.set("budgets", None)


@pytest.mark.unit
def test_non_positive_default_ttl_rejected(logger):
    with pytest.raises(ValueError):
        CacheStore(logger=logger, default_ttl=0)


@pytest.mark.unit
def test_invalidate_is_idempotent(cache):
    cache.set("budgets", ("b1",))
    cache.invalidate("budgets")
    cache.invalidate("budgets")
    cache.invalidate("never-set")
    assert cache.get("budgets") is None
    assert cache.stats().size == 0


@pytest.mark.unit
def test_invalidate_prefix_uses_plain_string_prefix(cache):
    cache.set("budgets", ("b1",))
    cache.set('budgets-{"limit":5}', ("b1",))
    cache.set("budget-items", ("i1",))
    cache.set("transactions", ("t1",))

    removed = cache.invalidate_prefix("budget")

    assert removed == 3
    assert cache.stats().keys == ["transactions"]


@pytest.mark.unit
def test_invalidate_prefix_with_no_match_is_fine(cache):
    cache.set("transactions", ("t1",))
    assert cache.invalidate_prefix("goals") == 0
    assert cache.stats().size == 1


@pytest.mark.unit
def test_clear_drops_everything(cache):
    cache.set("a", 1)
    cache.set("b", 2)
    cache.clear()
    assert cache.stats().size == 0


@pytest.mark.unit
def test_get_as_returns_typed_payload(cache):
    cache.set("fund-sources", ("f1",))
    assert cache.get_as("fund-sources", tuple) == ("f1",)
    assert cache.get_as("missing", tuple) is None


@pytest.mark.unit
def test_get_as_raises_on_shape_mismatch(cache):
    cache.set("fund-sources", {"not": "a tuple"})
    with pytest.raises(TypeError):
        cache.get_as("fund-sources", tuple)


@pytest.mark.unit
def test_stats_counts_expired_entries_until_read(cache, clock):
    cache.set("budgets", ("b1",))
    clock.advance(301)
    assert cache.stats().size == 1
    cache.get("budgets")
    assert cache.stats().size == 0
