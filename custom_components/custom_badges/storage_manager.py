# File: storage_manager.py
"""Handles persistent data storage for the Custom Badges integration.

Uses Home Assistant's Storage helper as a namespaced key -> value document
store. Each key maps to one versioned JSON document under `.storage/`.
Every get/set/delete is individually atomic; there is no cross-key transaction.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Final

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const


class BadgeStorageError(HomeAssistantError):
    """Reading, writing or deleting a storage document failed."""


class _Absent:
    """Marker for a key that has no stored document."""

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()


class CustomBadgesStorageManager:
    """Manages loading, saving and removing documents in Home Assistant's storage.

    The consolidated document's Store is created lazily and reused so Home
    Assistant's per-store write lock applies to every write of it. Legacy
    per-entity keys are short lived and get a fresh Store on every call, so
    the manager does not grow with the number of entities ever looked up.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        version: int = const.STORAGE_VERSION,
        cached_keys: Iterable[str] = (const.STORAGE_KEY,),
    ) -> None:
        """Initialize the storage manager.

        Args:
            hass: Home Assistant core object.
            version: Storage schema version stamped on every document.
            cached_keys: Keys whose Store is kept between calls.

        """
        self.hass = hass
        self._version = version
        self._stores: dict[str, Store] = {}
        self._cached_keys = frozenset(cached_keys)

    def _get_store(self, key: str) -> Store:
        """Return the Store for a key, creating it on first use."""
        store = self._stores.get(key)
        if store is None:
            store = Store(self.hass, self._version, key)
            if key in self._cached_keys:
                self._stores[key] = store
        return store

    @property
    def cached_store_count(self) -> int:
        """Return how many Store instances are held between calls."""
        return len(self._stores)

    def storage_path(self, key: str) -> str:
        """Get the storage file path for a key.

        Returns:
            str: The absolute path to the storage file.
        """
        return self._get_store(key).path

    async def async_get(self, key: str) -> Any:
        """Load the document stored under key.

        Returns:
            The stored value, or ABSENT when no document exists.

        Raises:
            BadgeStorageError: The document could not be read or decoded.
        """
        store = self._get_store(key)
        try:
            data = await store.async_load()
        except (OSError, ValueError, HomeAssistantError) as err:
            const.LOGGER.error(
                "ERROR: Failed to load storage key '%s' from %s: %s",
                key,
                store.path,
                err,
            )
            raise BadgeStorageError(f"Failed to load '{key}': {err}") from err

        if data is None:
            const.LOGGER.debug("DEBUG: No stored document for key '%s'", key)
            return ABSENT
        return data

    async def async_set(self, key: str, value: Any) -> None:
        """Save value as the document for key.

        Raises:
            BadgeStorageError: The document could not be written.
        """
        store = self._get_store(key)
        try:
            await store.async_save(value)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage key '%s' due to file system error: %s. "
                "Check disk space and file permissions for %s",
                key,
                err,
                store.path,
            )
            raise BadgeStorageError(f"Failed to save '{key}': {err}") from err
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage key '%s' due to non-serializable data: %s",
                key,
                err,
            )
            raise BadgeStorageError(f"Failed to save '{key}': {err}") from err
        except (ValueError, HomeAssistantError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage key '%s' due to invalid data format: %s",
                key,
                err,
            )
            raise BadgeStorageError(f"Failed to save '{key}': {err}") from err

        const.LOGGER.debug("DEBUG: Saved storage key '%s'", key)

    async def async_delete(self, key: str) -> None:
        """Remove the document for key. Removing a missing document succeeds.

        Raises:
            BadgeStorageError: The document exists but could not be removed.
        """
        store = self._get_store(key)
        try:
            await store.async_remove()
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                store.path,
                err,
            )
            raise BadgeStorageError(f"Failed to delete '{key}': {err}") from err

        # A removed document must not be served from the old Store's memory.
        self._stores.pop(key, None)
        const.LOGGER.debug("DEBUG: Removed storage key '%s'", key)
