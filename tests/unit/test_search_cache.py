import time
from unittest.mock import patch

from agentcart.services.search_cache import SearchCache


def test_cache_hit_and_miss() -> None:
    cache: SearchCache[list[str]] = SearchCache()

    # Miss
    assert cache.get("usb hub") is None

    cache.set("usb hub", ["hub-1", "hub-2"])

    # Hit
    assert cache.get("usb hub") == ["hub-1", "hub-2"]
    assert cache.size == 1


def test_normalize_key_collapses_case_and_whitespace() -> None:
    assert SearchCache.normalize_key("  Foo   Bar ") == "foo bar"
    assert SearchCache.normalize_key("foo\t\nbar") == "foo bar"


def test_cache_lookup_ignores_case_and_whitespace() -> None:
    cache: SearchCache[str] = SearchCache()
    cache.set("foo bar", "value")

    assert cache.get("  Foo   Bar ") == "value"
    assert cache.has("FOO BAR")
    assert cache.size == 1


def test_cache_ttl_expiry_frees_slot() -> None:
    ttl = 300
    cache: SearchCache[str] = SearchCache(ttl_seconds=ttl)

    now = time.time()
    with patch("time.time") as mock_time:
        mock_time.return_value = now
        cache.set("q", "v")

        # Still valid
        mock_time.return_value = now + ttl - 1
        assert cache.get("q") == "v"

        # Expired: entry is purged on access
        mock_time.return_value = now + ttl + 1
        assert cache.size == 1
        assert cache.get("q") is None
        assert cache.size == 0


def test_cache_expires_exactly_at_ttl() -> None:
    cache: SearchCache[str] = SearchCache(ttl_seconds=10)

    with patch("time.time") as mock_time:
        mock_time.return_value = 1000.0
        cache.set("q", "v")

        mock_time.return_value = 1010.0
        assert cache.get("q") is None


def test_size_counts_expired_entries_until_accessed() -> None:
    cache: SearchCache[str] = SearchCache(ttl_seconds=10)

    with patch("time.time") as mock_time:
        mock_time.return_value = 1000.0
        cache.set("a", "1")
        cache.set("b", "2")

        mock_time.return_value = 2000.0
        assert cache.size == 2
        assert cache.has("a") is False
        assert cache.size == 1


def test_capacity_evicts_least_recently_used() -> None:
    cache: SearchCache[int] = SearchCache(max_size=3)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)

    # "a" becomes most recently used, so "b" is now the LRU entry
    assert cache.get("a") == 1

    cache.set("d", 4)

    assert cache.size == 3
    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.get("d") == 4


def test_inserting_max_size_plus_one_keeps_max_size() -> None:
    cache: SearchCache[int] = SearchCache(max_size=50)
    for i in range(51):
        cache.set(f"query {i}", i)

    assert cache.size == 50
    assert cache.get("query 0") is None
    assert cache.get("query 50") == 50


def test_overwrite_at_capacity_does_not_evict() -> None:
    cache: SearchCache[int] = SearchCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)

    cache.set("a", 10)

    assert cache.size == 2
    assert cache.get("a") == 10
    assert cache.get("b") == 2


def test_overwrite_bumps_key_to_most_recently_used() -> None:
    cache: SearchCache[int] = SearchCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 3)

    cache.set("c", 4)

    assert cache.has("a")
    assert not cache.has("b")


def test_has_does_not_affect_recency() -> None:
    cache: SearchCache[int] = SearchCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.has("a")
    cache.set("c", 3)

    assert not cache.has("a")
    assert cache.has("b")
    assert cache.has("c")


def test_frequent_queries_ordered_by_hit_count() -> None:
    cache: SearchCache[str] = SearchCache()
    cache.set("once", "x")
    cache.set("thrice", "y")
    cache.set("never", "z")

    cache.get("once")
    for _ in range(3):
        cache.get("thrice")

    assert cache.get_frequent_queries() == ["thrice", "once", "never"]
    assert cache.get_frequent_queries(limit=1) == ["thrice"]


def test_overwrite_resets_hit_count() -> None:
    cache: SearchCache[str] = SearchCache()
    cache.set("a", "1")
    cache.set("b", "2")
    for _ in range(3):
        cache.get("a")
    cache.get("b")

    cache.set("a", "fresh")

    assert cache.get_frequent_queries() == ["b", "a"]


def test_recent_queries_ordered_by_timestamp() -> None:
    cache: SearchCache[str] = SearchCache()

    with patch("time.time") as mock_time:
        mock_time.return_value = 100.0
        cache.set("first", "1")
        mock_time.return_value = 200.0
        cache.set("second", "2")
        mock_time.return_value = 300.0
        cache.set("third", "3")

        # get() refreshes recency order but not the write timestamp
        cache.get("first")

        assert cache.get_recent_queries() == ["third", "second", "first"]
        assert cache.get_recent_queries(limit=2) == ["third", "second"]


def test_listings_skip_expired_entries() -> None:
    cache: SearchCache[str] = SearchCache(ttl_seconds=50)

    with patch("time.time") as mock_time:
        mock_time.return_value = 0.0
        cache.set("old", "1")
        mock_time.return_value = 40.0
        cache.set("new", "2")

        mock_time.return_value = 60.0
        assert cache.get_frequent_queries() == ["new"]
        assert cache.get_recent_queries() == ["new"]


def test_clear_empties_cache() -> None:
    cache: SearchCache[str] = SearchCache()
    cache.set("a", "1")
    cache.set("b", "2")

    cache.clear()

    assert cache.size == 0
    assert len(cache) == 0
    assert cache.get("a") is None


def test_contains_uses_validity_check() -> None:
    cache: SearchCache[str] = SearchCache()
    cache.set("Desk Lamp", "x")

    assert "desk lamp" in cache
    assert "sofa" not in cache
    assert 42 not in cache


def test_stats_reports_configuration_and_queries() -> None:
    cache: SearchCache[str] = SearchCache(max_size=10, ttl_seconds=60)
    cache.set("a", "1")
    cache.get("a")

    stats = cache.stats()

    assert stats.size == 1
    assert stats.max_size == 10
    assert stats.ttl_seconds == 60
    assert stats.frequent_queries == ["a"]
    assert stats.recent_queries == ["a"]
