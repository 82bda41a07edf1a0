"""Tests for the TTL badge cache."""

from datetime import timedelta

from freezegun import freeze_time

from custom_components.custom_badges.badge_cache import BadgeRecordCache

RECORDS = [{"name": "Gaming", "emoji": "🎮", "url": ""}]


@freeze_time("2025-01-15 12:00:00", tz_offset=0)
def test_put_and_get_fresh() -> None:
    """A fresh entry is served and holds the identical list."""
    cache = BadgeRecordCache(ttl=timedelta(minutes=5))
    entry = cache.put("alice", RECORDS)

    assert cache.get_fresh("alice") is RECORDS
    assert cache.get("alice") is entry
    assert "alice" in cache
    assert len(cache) == 1


def test_entry_expires_at_ttl() -> None:
    """Fresh strictly before the TTL, stale from the TTL on."""
    cache = BadgeRecordCache(ttl=timedelta(minutes=5))
    with freeze_time("2025-01-15 12:00:00", tz_offset=0) as frozen:
        cache.put("alice", RECORDS)

        frozen.tick(timedelta(minutes=5) - timedelta(milliseconds=1))
        assert cache.get_fresh("alice") == RECORDS

        frozen.tick(timedelta(milliseconds=1))
        assert cache.get_fresh("alice") is None
        # Stale entries stay available for fallback.
        assert cache.get("alice").records == RECORDS


def test_empty_sets_are_cached() -> None:
    """An empty badge set is a real, cacheable answer."""
    cache = BadgeRecordCache()
    cache.put("bob", [])

    assert cache.get_fresh("bob") == []
    assert cache.get_fresh("carol") is None


def test_ttl_change_rejudges_entries() -> None:
    """Shortening the TTL can make existing entries stale."""
    cache = BadgeRecordCache(ttl=timedelta(minutes=5))
    with freeze_time("2025-01-15 12:00:00", tz_offset=0) as frozen:
        cache.put("alice", RECORDS)
        frozen.tick(timedelta(minutes=2))

        cache.ttl = timedelta(minutes=1)

        assert cache.ttl == timedelta(minutes=1)
        assert cache.get_fresh("alice") is None


def test_invalidate_one_and_all() -> None:
    """Invalidate drops one entity, or everything without an argument."""
    cache = BadgeRecordCache()
    cache.put("alice", RECORDS)
    cache.put("bob", [])

    cache.invalidate("alice")
    assert "alice" not in cache
    assert "bob" in cache

    cache.invalidate("unknown")
    cache.invalidate()
    assert len(cache) == 0


@freeze_time("2025-01-15 12:00:00", tz_offset=0)
def test_as_diagnostics() -> None:
    """Diagnostics summarize counts and timestamps, not the records."""
    cache = BadgeRecordCache(ttl=timedelta(minutes=5))
    cache.put("alice", RECORDS)

    assert cache.as_diagnostics() == {
        "ttl_seconds": 300.0,
        "entries": {
            "alice": {
                "records": 1,
                "fetched_at": "2025-01-15T12:00:00+00:00",
                "fresh": True,
            }
        },
    }
