"""Base entity classes for Custom Badges integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import CustomBadgesDataCoordinator


class CustomBadgesCoordinatorEntity(CoordinatorEntity[CustomBadgesDataCoordinator]):
    """Base entity class for Custom Badges entities with typed coordinator access."""

    @property
    def coordinator(self) -> CustomBadgesDataCoordinator:
        """Return typed coordinator.

        Uses object.__getattribute__ to access the private _coordinator attribute
        set by the parent CoordinatorEntity class.
        """
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: CustomBadgesDataCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)


def create_badge_owner_device_info(
    entity_id: str, config_entry: ConfigEntry
) -> DeviceInfo:
    """Create device info for the entity whose badges are shown.

    Args:
        entity_id: Badge owner id.
        config_entry: Config entry for this integration instance.

    Returns:
        DeviceInfo dict for the badge owner.
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, entity_id)},
        name=f"{entity_id} ({config_entry.title})",
        manufacturer=const.CUSTOM_BADGES_TITLE,
        model="Badge Profile",
    )
