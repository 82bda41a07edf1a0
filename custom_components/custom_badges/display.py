# File: display.py
"""Display adapter: turns stored badge records into renderable descriptors.

The display host may ask for badges on every render, so get_badges() never
suspends. It answers from whatever the cache holds and, when that is missing
or stale, schedules one background load per entity; the store's change
signal tells the host to render again once the load lands.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from homeassistant.core import HomeAssistant, callback

from . import const
from .badge_store import BadgeRecordStore
from .data_builders import is_displayable, resolve_icon_url
from .type_defs import BadgeDescriptor, EntityBadgeSet, EntityId


class BadgeDisplayAdapter:
    """Badge lookup callback and visibility predicate for the display host."""

    def __init__(
        self,
        hass: HomeAssistant,
        store: BadgeRecordStore,
        local_entity_id: EntityId,
        visibility: str = const.DEFAULT_VISIBILITY,
    ) -> None:
        """Initialize the display adapter."""
        self.hass = hass
        self._store = store
        self.local_entity_id = local_entity_id
        self.visibility = visibility
        self._pending_loads: dict[EntityId, asyncio.Task] = {}

    def should_show(self, entity_id: EntityId) -> bool:
        """Return True if badges should be queried for entity_id at all."""
        if self.visibility == const.VISIBILITY_EVERYONE:
            return True
        return entity_id == self.local_entity_id

    @callback
    def get_badges(self, entity_id: EntityId) -> list[BadgeDescriptor]:
        """Return descriptors for entity_id without suspending.

        An empty list is a normal answer, e.g. before the first load finished.
        """
        if not self._store.is_fresh(entity_id):
            self._async_schedule_load(entity_id)
        records = self._store.get_cached(entity_id) or []
        return self.build_descriptors(entity_id, records)

    async def async_get_badges(self, entity_id: EntityId) -> list[BadgeDescriptor]:
        """Load (through the cache) and return descriptors for entity_id."""
        records = await self._store.async_load(entity_id)
        return self.build_descriptors(entity_id, records)

    def build_descriptors(
        self, entity_id: EntityId, records: EntityBadgeSet
    ) -> list[BadgeDescriptor]:
        """Map displayable records to descriptors, keeping display order."""
        descriptors: list[BadgeDescriptor] = []
        for position, record in enumerate(records):
            if not is_displayable(record):
                continue
            descriptors.append(
                BadgeDescriptor(
                    tooltip_text=record[const.DATA_BADGE_NAME],
                    icon_url=resolve_icon_url(record),
                    on_activate=self._make_on_activate(
                        entity_id, record[const.DATA_BADGE_NAME], position
                    ),
                )
            )
        return descriptors

    def _make_on_activate(
        self, entity_id: EntityId, badge_name: str, position: int
    ) -> Callable[[], None]:
        @callback
        def _on_activate() -> None:
            const.LOGGER.debug(
                "DEBUG: Badge '%s' of '%s' activated", badge_name, entity_id
            )
            self.hass.bus.async_fire(
                const.EVENT_BADGE_ACTIVATED,
                {
                    const.ATTR_ENTITY_ID: entity_id,
                    const.ATTR_BADGE_NAME: badge_name,
                    const.ATTR_POSITION: position,
                },
            )

        return _on_activate

    @callback
    def _async_schedule_load(self, entity_id: EntityId) -> None:
        """Start a background load unless one is already running for entity_id."""
        if entity_id in self._pending_loads:
            return
        task = self.hass.async_create_task(
            self._store.async_load(entity_id),
            f"{const.DOMAIN} load badges {entity_id}",
        )
        self._pending_loads[entity_id] = task
        task.add_done_callback(lambda _task: self._pending_loads.pop(entity_id, None))

    async def async_shutdown(self) -> None:
        """Wait for background loads still in flight."""
        if self._pending_loads:
            await asyncio.gather(*self._pending_loads.values())
