"""Diagnostics support for Custom Badges integration.

Exports the consolidated badge document as stored, the entry options and a
summary of the in-memory cache.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .badge_store import BadgeRecordStore
from .coordinator import CustomBadgesDataCoordinator
from .storage_manager import BadgeStorageError


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    entry_data = hass.data[const.DOMAIN][entry.entry_id]
    store: BadgeRecordStore = entry_data[const.BADGE_STORE]
    coordinator: CustomBadgesDataCoordinator = entry_data[const.COORDINATOR]

    try:
        records: dict[str, Any] | str = await store.async_get_all()
    except BadgeStorageError as err:
        records = f"unreadable: {err}"

    return {
        const.CONF_LOCAL_ENTITY_ID: entry.data[const.CONF_LOCAL_ENTITY_ID],
        "options": dict(entry.options),
        "records": records,
        "cache": store.cache.as_diagnostics(),
        "editors": {
            entity_id: editor.state
            for entity_id, editor in coordinator.editors.items()
        },
    }
