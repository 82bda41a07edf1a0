# File: sensor.py
"""Sensors for the Custom Badges integration.

Sensors Defined in This File (1):
01. LocalBadgesSensor - displayable badges of the configured local entity
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util import slugify

from . import const
from .coordinator import CustomBadgesDataCoordinator
from .entity import CustomBadgesCoordinatorEntity, create_badge_owner_device_info


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Custom Badges integration."""
    coordinator: CustomBadgesDataCoordinator = hass.data[const.DOMAIN][
        entry.entry_id
    ][const.COORDINATOR]

    async_add_entities([LocalBadgesSensor(coordinator, entry)])


class LocalBadgesSensor(CustomBadgesCoordinatorEntity, SensorEntity):
    """Sensor representing the local entity's badges.

    State is the number of displayable badges; attributes carry the badges in
    display order together with the editor state.
    """

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_LOCAL_BADGES
    _attr_icon = const.SENSOR_ICON

    def __init__(
        self, coordinator: CustomBadgesDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor.

        Args:
            coordinator: CustomBadgesDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
        """
        super().__init__(coordinator)
        self._entry = entry
        self._local_entity_id = coordinator.local_entity_id
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_LOCAL_BADGES_SUFFIX}"
        self.entity_id = (
            f"sensor.{const.DOMAIN}_{slugify(self._local_entity_id)}"
            f"{const.SENSOR_LOCAL_BADGES_SUFFIX}"
        )
        self._attr_device_info = create_badge_owner_device_info(
            self._local_entity_id, entry
        )

    @property
    def native_value(self) -> int:
        """State: number of displayable badges."""
        return len(self.coordinator.data or [])

    @property
    def entity_picture(self) -> str | None:
        """Use the first badge icon as the entity picture."""
        descriptors = self.coordinator.data or []
        if not descriptors:
            return None
        return descriptors[0][const.DESCRIPTOR_ICON_URL]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Badges in display order, without the activation callbacks."""
        return {
            const.ATTR_BADGE_OWNER: self._local_entity_id,
            const.ATTR_BADGES: [
                {
                    const.DESCRIPTOR_TOOLTIP_TEXT: descriptor[
                        const.DESCRIPTOR_TOOLTIP_TEXT
                    ],
                    const.DESCRIPTOR_ICON_URL: descriptor[const.DESCRIPTOR_ICON_URL],
                }
                for descriptor in self.coordinator.data or []
            ],
            const.ATTR_EDITOR_STATE: self.coordinator.editor_state(
                self._local_entity_id
            ),
        }
