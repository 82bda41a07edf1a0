# File: __init__.py
"""Initialization file for the Custom Badges integration.

Handles setting up the integration, including creating the storage adapter,
the badge record store with its cache, and the coordinator that keeps the
local entity's badges on display.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for data synchronization.
- Storage management for persistent badge records.
"""

from __future__ import annotations

from datetime import timedelta

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .badge_cache import BadgeRecordCache
from .badge_store import BadgeRecordStore
from .coordinator import CustomBadgesDataCoordinator
from .display import BadgeDisplayAdapter
from .services import async_setup_services, async_unload_services
from .storage_manager import BadgeStorageError, CustomBadgesStorageManager


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Custom Badges entry: %s", entry.entry_id)

    storage_manager = CustomBadgesStorageManager(hass)
    cache = BadgeRecordCache(
        ttl=timedelta(
            minutes=entry.options.get(
                const.CONF_CACHE_TTL, const.DEFAULT_CACHE_TTL_MINUTES
            )
        )
    )
    store = BadgeRecordStore(hass, entry.entry_id, storage_manager, cache)
    display = BadgeDisplayAdapter(
        hass,
        store,
        entry.data[const.CONF_LOCAL_ENTITY_ID],
        visibility=entry.options.get(const.CONF_VISIBILITY, const.DEFAULT_VISIBILITY),
    )

    # Create the data coordinator for managing updates and synchronization.
    coordinator = CustomBadgesDataCoordinator(hass, entry, store, display)
    coordinator.async_start_listening()

    try:
        # Perform the first refresh to load data.
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: storage_manager,
        const.BADGE_STORE: store,
        const.DISPLAY_ADAPTER: display,
    }

    # Set up services required by the integration.
    async_setup_services(hass)

    # Forward the setup to supported platforms.
    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_update_options))

    const.LOGGER.info(
        "INFO: Custom Badges setup complete for entry: %s", entry.entry_id
    )
    return True


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry so new visibility and cache settings take effect."""
    const.LOGGER.debug("DEBUG: Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Custom Badges entry: %s", entry.entry_id)

    # Unload platforms
    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        entry_data = hass.data[const.DOMAIN].pop(entry.entry_id)
        display: BadgeDisplayAdapter = entry_data[const.DISPLAY_ADAPTER]
        await display.async_shutdown()

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry by deleting the consolidated badge document."""
    const.LOGGER.info("INFO: Removing Custom Badges entry: %s", entry.entry_id)

    storage_manager = CustomBadgesStorageManager(hass)
    try:
        await storage_manager.async_delete(const.STORAGE_KEY)
    except BadgeStorageError as err:
        const.LOGGER.error(
            "ERROR: Failed to remove badge storage for entry %s: %s",
            entry.entry_id,
            err,
        )
        return

    const.LOGGER.info("INFO: Custom Badges entry data cleared: %s", entry.entry_id)
