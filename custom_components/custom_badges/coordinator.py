# File: coordinator.py
"""Coordinator for the Custom Badges integration.

Keeps the local entity's badge descriptors current for the sensor platform
and owns the per-entity editors driven by the editing services.
"""

from __future__ import annotations

from datetime import timedelta

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const
from .badge_store import BadgeRecordStore
from .display import BadgeDisplayAdapter
from .editor import BadgeEditor
from .type_defs import BadgeDescriptor, EntityId


class CustomBadgesDataCoordinator(DataUpdateCoordinator[list[BadgeDescriptor]]):
    """Coordinator for the local entity's badges.

    Polls through the badge store once per cache TTL and pushes immediately
    whenever the store signals a change for the local entity.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: BadgeRecordStore,
        display: BadgeDisplayAdapter,
    ) -> None:
        """Initialize the CustomBadgesDataCoordinator."""
        ttl_minutes = config_entry.options.get(
            const.CONF_CACHE_TTL, const.DEFAULT_CACHE_TTL_MINUTES
        )

        super().__init__(
            hass,
            const.LOGGER,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=ttl_minutes),
        )
        self.config_entry = config_entry
        self.store = store
        self.display = display
        self.local_entity_id: EntityId = config_entry.data[const.CONF_LOCAL_ENTITY_ID]
        self.editors: dict[EntityId, BadgeEditor] = {}

    @callback
    def async_start_listening(self) -> None:
        """Subscribe to store changes; unsubscribed when the entry unloads."""
        unsub = async_dispatcher_connect(
            self.hass, self.store.signal, self._async_handle_records_changed
        )
        self.config_entry.async_on_unload(unsub)

    @callback
    def _async_handle_records_changed(self, entity_id: EntityId) -> None:
        """Push fresh descriptors when the local entity's records change."""
        if entity_id != self.local_entity_id:
            return
        records = self.store.get_cached(entity_id) or []
        self.async_set_updated_data(
            self.display.build_descriptors(entity_id, records)
        )

    async def _async_update_data(self) -> list[BadgeDescriptor]:
        """Fetch the local entity's descriptors.

        The store degrades to cached or empty data on storage failures,
        so this never raises UpdateFailed.
        """
        return await self.display.async_get_badges(self.local_entity_id)

    # -------------------------------------------------------------------------------------
    # Editors
    # -------------------------------------------------------------------------------------

    async def async_get_editor(self, entity_id: EntityId) -> BadgeEditor:
        """Return the editor for entity_id, loading it on first use."""
        editor = self.editors.get(entity_id)
        if editor is None:
            seed_defaults = entity_id == self.local_entity_id and bool(
                self.config_entry.options.get(
                    const.CONF_SEED_DEFAULTS, const.DEFAULT_SEED_DEFAULTS
                )
            )
            editor = BadgeEditor(
                self.store,
                entity_id,
                seed_defaults=seed_defaults,
                on_change=self.async_update_listeners,
            )
            self.editors[entity_id] = editor
        if not editor.loaded:
            await editor.async_begin()
        return editor

    def editor_state(self, entity_id: EntityId) -> str:
        """Return the editor state for entity_id, clean when no editor is open."""
        editor = self.editors.get(entity_id)
        return editor.state if editor is not None else const.EDITOR_STATE_CLEAN
