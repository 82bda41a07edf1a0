"""Time-boxed in-memory cache of badge sets keyed by entity id.

The cache never suspends and never touches storage. It is owned by one
BadgeRecordStore for the lifetime of the config entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from homeassistant.util import dt as dt_util

from . import const
from .type_defs import EntityBadgeSet, EntityId


@dataclass(slots=True)
class CacheEntry:
    """Badge set as last read from (or written to) storage."""

    records: EntityBadgeSet
    fetched_at: datetime


class BadgeRecordCache:
    """Entity id -> (records, fetched_at) with a fixed freshness window.

    Empty badge sets are cached like any other so entities with nothing
    configured do not cost a storage round trip on every render.
    """

    def __init__(self, ttl: timedelta = const.DEFAULT_CACHE_TTL) -> None:
        """Initialize the cache."""
        self._ttl = ttl
        self._entries: dict[EntityId, CacheEntry] = {}

    @property
    def ttl(self) -> timedelta:
        """Return the freshness window."""
        return self._ttl

    @ttl.setter
    def ttl(self, value: timedelta) -> None:
        """Change the freshness window; existing entries are re-judged against it."""
        self._ttl = value

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entries

    def get(self, entity_id: EntityId) -> CacheEntry | None:
        """Return the entry for entity_id, fresh or stale."""
        return self._entries.get(entity_id)

    def put(self, entity_id: EntityId, records: EntityBadgeSet) -> CacheEntry:
        """Overwrite the entry for entity_id, stamped with the current time."""
        entry = CacheEntry(records=records, fetched_at=dt_util.utcnow())
        self._entries[entity_id] = entry
        return entry

    def is_fresh(self, entry: CacheEntry) -> bool:
        """Return True if the entry is younger than the TTL."""
        return dt_util.utcnow() - entry.fetched_at < self._ttl

    def get_fresh(self, entity_id: EntityId) -> EntityBadgeSet | None:
        """Return cached records only if the entry is still fresh."""
        entry = self._entries.get(entity_id)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry.records

    def invalidate(self, entity_id: EntityId | None = None) -> None:
        """Drop one entry, or every entry when entity_id is None."""
        if entity_id is None:
            self._entries.clear()
        else:
            self._entries.pop(entity_id, None)

    def as_diagnostics(self) -> dict[str, Any]:
        """Summarize cache contents for diagnostics."""
        return {
            "ttl_seconds": self._ttl.total_seconds(),
            "entries": {
                entity_id: {
                    "records": len(entry.records),
                    "fetched_at": entry.fetched_at.isoformat(),
                    "fresh": self.is_fresh(entry),
                }
                for entity_id, entry in self._entries.items()
            },
        }
