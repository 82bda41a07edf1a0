# File: migration.py
"""One-way migration from per-entity legacy storage keys to the consolidated key.

Early releases stored each entity's badges in its own document
(`custom_badges_records_<entity_id>`). Current releases keep every entity's
badges in one mapping under `custom_badges_records`. Migration runs lazily on
each cold load and is idempotent:

1. An entity already present in the consolidated mapping is never migrated again.
2. Legacy records are merged into the mapping (other entities untouched),
   the mapping is persisted, and only then is the legacy document deleted.
3. A failed delete leaves duplicated, never lost, data; it is logged and
   retried later through async_cleanup_legacy().
"""

from __future__ import annotations

import asyncio

from . import const
from .data_builders import build_badge_set
from .storage_manager import ABSENT, BadgeStorageError, CustomBadgesStorageManager
from .type_defs import ConsolidatedMapping, EntityBadgeSet, EntityId


def legacy_storage_key(entity_id: EntityId) -> str:
    """Return the pre-consolidation storage key for an entity."""
    return const.LEGACY_STORAGE_KEY_FMT.format(entity_id)


def _entity_records(
    mapping: ConsolidatedMapping, entity_id: EntityId
) -> EntityBadgeSet:
    """Return an entity's normalized records from the mapping.

    A value that is not a list is logged and read as an empty set.
    """
    raw = mapping[entity_id]
    if not isinstance(raw, list):
        const.LOGGER.warning(
            "WARNING: Stored badges for '%s' are not a list (%s), ignoring them",
            entity_id,
            type(raw).__name__,
        )
        return []
    return build_badge_set(raw)


class LegacyBadgeMigrator:
    """Moves legacy per-entity documents into the consolidated mapping.

    The caller owns the write lock; every read-merge-write of the consolidated
    mapping must hold it so concurrent writers never clobber each other.
    """

    def __init__(self, storage_manager: CustomBadgesStorageManager) -> None:
        """Initialize the migrator."""
        self._storage_manager = storage_manager

    async def async_read_mapping(self) -> ConsolidatedMapping:
        """Read the consolidated mapping; a missing document is an empty mapping.

        Raises:
            BadgeStorageError: Storage failed or the document is not a mapping.
        """
        raw = await self._storage_manager.async_get(const.STORAGE_KEY)
        if raw is ABSENT:
            return {}
        if not isinstance(raw, dict):
            const.LOGGER.error(
                "ERROR: Consolidated badge document has unexpected type %s",
                type(raw).__name__,
            )
            raise BadgeStorageError(
                f"Consolidated badge document '{const.STORAGE_KEY}' is corrupt"
            )
        return raw

    async def async_read_legacy(self, entity_id: EntityId) -> EntityBadgeSet | None:
        """Read an entity's legacy document.

        Returns:
            The normalized records, or None when no legacy document exists.
        """
        raw = await self._storage_manager.async_get(legacy_storage_key(entity_id))
        if raw is ABSENT:
            return None
        if not isinstance(raw, list):
            const.LOGGER.warning(
                "WARNING: Legacy badge document for '%s' is not a list, ignoring it",
                entity_id,
            )
            return []
        return build_badge_set(raw)

    async def async_migrate(
        self, entity_id: EntityId, write_lock: asyncio.Lock
    ) -> EntityBadgeSet:
        """Ensure the entity's records live under the consolidated key.

        Returns:
            The entity's badge set (empty when nothing is stored anywhere).

        Raises:
            BadgeStorageError: A read, or the consolidated write, failed.
        """
        mapping = await self.async_read_mapping()
        if entity_id in mapping:
            return _entity_records(mapping, entity_id)

        legacy_records = await self.async_read_legacy(entity_id)
        if not legacy_records:
            return []

        # Shielded so an abandoned load cannot stop the write half-way.
        return await asyncio.shield(
            self._async_merge_legacy(entity_id, legacy_records, write_lock)
        )

    async def _async_merge_legacy(
        self,
        entity_id: EntityId,
        legacy_records: EntityBadgeSet,
        write_lock: asyncio.Lock,
    ) -> EntityBadgeSet:
        """Merge legacy records into the mapping, persist, then drop the legacy key."""
        async with write_lock:
            # Re-read under the lock: a save may have landed since the first read.
            mapping = await self.async_read_mapping()
            if entity_id in mapping:
                return _entity_records(mapping, entity_id)

            mapping[entity_id] = legacy_records
            await self._storage_manager.async_set(const.STORAGE_KEY, mapping)
            const.LOGGER.info(
                "INFO: Migrated %s legacy badge(s) for '%s' to consolidated storage",
                len(legacy_records),
                entity_id,
            )
            await self.async_discard_legacy(entity_id)

        return legacy_records

    async def async_discard_legacy(self, entity_id: EntityId) -> bool:
        """Best-effort delete of the legacy document; failures are only logged.

        Returns:
            True if the delete succeeded (or there was nothing to delete).
        """
        try:
            await self._storage_manager.async_delete(legacy_storage_key(entity_id))
        except BadgeStorageError as err:
            const.LOGGER.warning(
                "WARNING: Badges for '%s' are migrated but the legacy document "
                "could not be removed: %s",
                entity_id,
                err,
            )
            return False
        return True

    async def async_cleanup_legacy(
        self, entity_id: EntityId, write_lock: asyncio.Lock
    ) -> bool:
        """Remove a leftover legacy document, migrating it first if needed.

        Safe to retry. Unlike migration, a failed delete is raised so a
        maintenance caller knows the cleanup did not happen.

        Returns:
            False when there was no legacy document, True once it is removed.

        Raises:
            BadgeStorageError: A read, write or delete failed.
        """
        legacy_records = await self.async_read_legacy(entity_id)
        if legacy_records is None:
            return False
        return await asyncio.shield(
            self._async_cleanup_locked(entity_id, legacy_records, write_lock)
        )

    async def _async_cleanup_locked(
        self,
        entity_id: EntityId,
        legacy_records: EntityBadgeSet,
        write_lock: asyncio.Lock,
    ) -> bool:
        async with write_lock:
            mapping = await self.async_read_mapping()
            if entity_id not in mapping and legacy_records:
                mapping[entity_id] = legacy_records
                await self._storage_manager.async_set(const.STORAGE_KEY, mapping)
                const.LOGGER.info(
                    "INFO: Migrated %s legacy badge(s) for '%s' during cleanup",
                    len(legacy_records),
                    entity_id,
                )
            await self._storage_manager.async_delete(legacy_storage_key(entity_id))

        const.LOGGER.info("INFO: Removed legacy badge document for '%s'", entity_id)
        return True
