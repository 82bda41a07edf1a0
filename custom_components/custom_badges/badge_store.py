# File: badge_store.py
"""Badge Record Store: the read/write contract shared by the editor and the display path.

Composes the storage manager, the legacy migrator and the TTL cache.

Consistency model:
- Reads are served from the cache while it is fresh; a miss or stale entry
  re-reads storage (running migration) and refills the cache.
- Every read-merge-write of the consolidated mapping, for any entity,
  holds one lock. The mapping is a single document shared by all entities,
  so unserialized writers would silently drop each other's updates.
- Writes run shielded: a caller that stops waiting does not abort them.
- After a successful save the cache holds exactly what was written, so the
  store and cache never disagree for longer than one TTL.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.dispatcher import async_dispatcher_send

from . import const
from .badge_cache import BadgeRecordCache
from .badge_helpers import get_event_signal
from .data_builders import build_badge_set
from .migration import LegacyBadgeMigrator
from .storage_manager import BadgeStorageError, CustomBadgesStorageManager
from .type_defs import ConsolidatedMapping, EntityBadgeSet, EntityId


class BadgeRecordStore:
    """Per-entity badge sets backed by one consolidated storage document."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        storage_manager: CustomBadgesStorageManager,
        cache: BadgeRecordCache,
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            entry_id: Config entry id, scopes the change signal.
            storage_manager: Persisted key/value adapter.
            cache: Cache owned by this store for the life of the entry.

        """
        self.hass = hass
        self.entry_id = entry_id
        self._storage_manager = storage_manager
        self._cache = cache
        self._migrator = LegacyBadgeMigrator(storage_manager)
        self._write_lock = asyncio.Lock()

    @property
    def cache(self) -> BadgeRecordCache:
        """Return the cache owned by this store."""
        return self._cache

    @property
    def signal(self) -> str:
        """Dispatcher signal sent with the entity id whenever its records change."""
        return get_event_signal(self.entry_id, const.SIGNAL_SUFFIX_RECORDS_CHANGED)

    def _notify(self, entity_id: EntityId) -> None:
        async_dispatcher_send(self.hass, self.signal, entity_id)

    # -------------------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------------------

    def get_cached(self, entity_id: EntityId) -> EntityBadgeSet | None:
        """Return the last known records for entity_id without suspending.

        Stale entries are returned too; use is_fresh() to tell them apart.
        """
        entry = self._cache.get(entity_id)
        return entry.records if entry is not None else None

    def is_fresh(self, entity_id: EntityId) -> bool:
        """Return True if a fresh cache entry exists for entity_id."""
        return self._cache.get_fresh(entity_id) is not None

    async def async_load(self, entity_id: EntityId) -> EntityBadgeSet:
        """Return the badge set for entity_id. Never raises BadgeStorageError.

        On a storage failure the last cached value (even stale) is returned,
        or an empty set when nothing was ever cached.
        """
        cached = self._cache.get_fresh(entity_id)
        if cached is not None:
            return cached

        try:
            records = await self._migrator.async_migrate(entity_id, self._write_lock)
        except BadgeStorageError as err:
            entry = self._cache.get(entity_id)
            const.LOGGER.error(
                "ERROR: Failed to load badges for '%s', serving %s: %s",
                entity_id,
                "stale cache" if entry is not None else "empty set",
                err,
            )
            return entry.records if entry is not None else []

        self._cache.put(entity_id, records)
        const.LOGGER.debug(
            "DEBUG: Loaded %s badge(s) for '%s' from storage", len(records), entity_id
        )
        self._notify(entity_id)
        return records

    async def async_get_all(self) -> ConsolidatedMapping:
        """Read the whole consolidated mapping from storage.

        Raises:
            BadgeStorageError: Storage could not be read.
        """
        return await self._migrator.async_read_mapping()

    # -------------------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------------------

    async def async_save(
        self, entity_id: EntityId, records: Iterable[Mapping[str, Any]]
    ) -> EntityBadgeSet:
        """Persist the full badge set for entity_id.

        Saves queue behind each other in call order; the write itself is
        shielded from cancellation of the caller.

        Returns:
            The normalized badge set as persisted and cached.

        Raises:
            BadgeStorageError: The save did not take effect; the cache is untouched.
        """
        badge_set = build_badge_set(records)
        return await asyncio.shield(self._async_save_locked(entity_id, badge_set))

    async def _async_save_locked(
        self, entity_id: EntityId, badge_set: EntityBadgeSet
    ) -> EntityBadgeSet:
        async with self._write_lock:
            mapping = await self._migrator.async_read_mapping()
            mapping[entity_id] = badge_set
            await self._storage_manager.async_set(const.STORAGE_KEY, mapping)
            self._cache.put(entity_id, badge_set)
            await self._migrator.async_discard_legacy(entity_id)

        const.LOGGER.info(
            "INFO: Saved %s badge(s) for '%s'", len(badge_set), entity_id
        )
        self._notify(entity_id)
        return badge_set

    async def async_cleanup_legacy(self, entity_id: EntityId) -> bool:
        """Remove a leftover legacy document for entity_id.

        Raises:
            BadgeStorageError: The cleanup did not complete; safe to retry.
        """
        removed = await self._migrator.async_cleanup_legacy(
            entity_id, self._write_lock
        )
        if removed:
            # Cleanup may have merged records the cache has not seen.
            self._cache.invalidate(entity_id)
        return removed

    def invalidate(self, entity_id: EntityId | None = None) -> None:
        """Force the next load for entity_id (or everyone) to re-read storage."""
        self._cache.invalidate(entity_id)
