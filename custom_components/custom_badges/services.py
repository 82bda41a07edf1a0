# File: services.py
"""Defines custom services for the Custom Badges integration.

Editing services drive the per-entity editor (draft -> save). Every service
defaults to the local entity when no entity_id is given.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import badge_helpers as bh
from . import const
from .coordinator import CustomBadgesDataCoordinator
from .editor import BadgeEditor, BadgeEditorBusyError
from .storage_manager import BadgeStorageError

# --- Service Schemas ---
ENTITY_ID_VALIDATOR = vol.All(cv.string, cv.matches_regex(const.ENTITY_ID_PATTERN))

BADGE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_NAME, default=""): cv.string,
        vol.Optional(const.FIELD_EMOJI, default=""): cv.string,
        vol.Optional(const.FIELD_URL, default=""): vol.Any("", cv.url),
    }
)

SET_BADGES_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_ENTITY_ID): ENTITY_ID_VALIDATOR,
        vol.Required(const.FIELD_BADGES): vol.All(cv.ensure_list, [BADGE_SCHEMA]),
    }
)

ADD_BADGE_SCHEMA = BADGE_SCHEMA.extend(
    {
        vol.Optional(const.FIELD_ENTITY_ID): ENTITY_ID_VALIDATOR,
    }
)

UPDATE_BADGE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_ENTITY_ID): ENTITY_ID_VALIDATOR,
        vol.Required(const.FIELD_INDEX): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Required(const.FIELD_FIELD): vol.In(const.BADGE_FIELDS),
        vol.Required(const.FIELD_VALUE): vol.Any(None, cv.string),
    }
)

REMOVE_BADGE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_ENTITY_ID): ENTITY_ID_VALIDATOR,
        vol.Required(const.FIELD_INDEX): vol.All(vol.Coerce(int), vol.Range(min=0)),
    }
)

ENTITY_ONLY_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_ENTITY_ID): ENTITY_ID_VALIDATOR,
    }
)


def _get_coordinator(hass: HomeAssistant) -> CustomBadgesDataCoordinator:
    entry_data = bh.get_entry_data(hass)
    if not entry_data:
        const.LOGGER.warning("WARNING: %s", const.ERROR_NO_ENTRY_FOUND)
        raise HomeAssistantError(const.ERROR_NO_ENTRY_FOUND)
    return entry_data[const.COORDINATOR]


def _target_entity_id(
    coordinator: CustomBadgesDataCoordinator, call: ServiceCall
) -> str:
    return call.data.get(const.FIELD_ENTITY_ID, coordinator.local_entity_id)


async def _async_commit(editor: BadgeEditor) -> None:
    """Save an editor, translating failures for the caller."""
    try:
        await editor.async_save()
    except BadgeEditorBusyError as err:
        raise HomeAssistantError(
            const.ERROR_SAVE_IN_PROGRESS_FMT.format(editor.entity_id)
        ) from err
    except BadgeStorageError as err:
        raise HomeAssistantError(
            const.ERROR_SAVE_FAILED_FMT.format(editor.entity_id, err)
        ) from err


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Custom Badges services."""

    async def handle_set_badges(call: ServiceCall) -> None:
        """Replace and save an entity's badges in one step."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)
        editor = await coordinator.async_get_editor(entity_id)

        editor.set_badges(call.data[const.FIELD_BADGES])
        await _async_commit(editor)
        const.LOGGER.info(
            "INFO: Set %s badge(s) for '%s'",
            len(call.data[const.FIELD_BADGES]),
            entity_id,
        )

    async def handle_add_badge(call: ServiceCall) -> None:
        """Append a badge to the draft."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)
        editor = await coordinator.async_get_editor(entity_id)

        index = editor.add_badge(
            {
                const.DATA_BADGE_NAME: call.data[const.FIELD_NAME],
                const.DATA_BADGE_EMOJI: call.data[const.FIELD_EMOJI],
                const.DATA_BADGE_URL: call.data[const.FIELD_URL],
            }
        )
        const.LOGGER.debug("DEBUG: Added badge %s to draft of '%s'", index, entity_id)

    async def handle_update_badge(call: ServiceCall) -> None:
        """Change one field of a draft badge."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)
        editor = await coordinator.async_get_editor(entity_id)

        try:
            editor.update_badge(
                call.data[const.FIELD_INDEX],
                call.data[const.FIELD_FIELD],
                call.data[const.FIELD_VALUE],
            )
        except IndexError as err:
            raise HomeAssistantError(
                const.ERROR_INVALID_INDEX_FMT.format(
                    call.data[const.FIELD_INDEX], entity_id
                )
            ) from err

    async def handle_remove_badge(call: ServiceCall) -> None:
        """Remove a badge from the draft."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)
        editor = await coordinator.async_get_editor(entity_id)

        try:
            editor.remove_badge(call.data[const.FIELD_INDEX])
        except IndexError as err:
            raise HomeAssistantError(
                const.ERROR_INVALID_INDEX_FMT.format(
                    call.data[const.FIELD_INDEX], entity_id
                )
            ) from err

    async def handle_save_badges(call: ServiceCall) -> None:
        """Persist the draft."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)
        editor = await coordinator.async_get_editor(entity_id)
        await _async_commit(editor)

    async def handle_discard_changes(call: ServiceCall) -> None:
        """Drop unsaved draft edits."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)
        editor = await coordinator.async_get_editor(entity_id)

        try:
            editor.discard()
        except BadgeEditorBusyError as err:
            raise HomeAssistantError(
                const.ERROR_SAVE_IN_PROGRESS_FMT.format(entity_id)
            ) from err

    async def handle_get_badges(call: ServiceCall) -> ServiceResponse:
        """Return stored badges, the draft and what the display host would render."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)
        display = coordinator.display

        records = await coordinator.store.async_load(entity_id)
        visible = display.should_show(entity_id)
        descriptors = display.build_descriptors(entity_id, records) if visible else []
        editor = coordinator.editors.get(entity_id)

        response: dict[str, Any] = {
            const.FIELD_ENTITY_ID: entity_id,
            "visible": visible,
            const.FIELD_BADGES: [dict(record) for record in records],
            "display": [
                {
                    const.DESCRIPTOR_TOOLTIP_TEXT: descriptor[
                        const.DESCRIPTOR_TOOLTIP_TEXT
                    ],
                    const.DESCRIPTOR_ICON_URL: descriptor[const.DESCRIPTOR_ICON_URL],
                }
                for descriptor in descriptors
            ],
            const.ATTR_EDITOR_STATE: coordinator.editor_state(entity_id),
        }
        if editor is not None:
            response["draft"] = [dict(record) for record in editor.draft]
        return response

    async def handle_cleanup_legacy(call: ServiceCall) -> ServiceResponse:
        """Remove a leftover legacy storage document."""
        coordinator = _get_coordinator(hass)
        entity_id = _target_entity_id(coordinator, call)

        try:
            removed = await coordinator.store.async_cleanup_legacy(entity_id)
        except BadgeStorageError as err:
            raise HomeAssistantError(
                const.ERROR_CLEANUP_FAILED_FMT.format(entity_id, err)
            ) from err

        const.LOGGER.info(
            "INFO: Legacy cleanup for '%s': %s",
            entity_id,
            "removed" if removed else "nothing to remove",
        )
        return {const.FIELD_ENTITY_ID: entity_id, "removed": removed}

    async def handle_refresh_badges(call: ServiceCall) -> None:
        """Drop cached badges so the next lookup re-reads storage."""
        coordinator = _get_coordinator(hass)
        entity_id = call.data.get(const.FIELD_ENTITY_ID)

        coordinator.store.invalidate(entity_id)
        const.LOGGER.debug(
            "DEBUG: Invalidated badge cache for %s", entity_id or "all entities"
        )
        await coordinator.async_request_refresh()

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_BADGES,
        handle_set_badges,
        schema=SET_BADGES_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_BADGE,
        handle_add_badge,
        schema=ADD_BADGE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_BADGE,
        handle_update_badge,
        schema=UPDATE_BADGE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REMOVE_BADGE,
        handle_remove_badge,
        schema=REMOVE_BADGE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SAVE_BADGES,
        handle_save_badges,
        schema=ENTITY_ONLY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DISCARD_CHANGES,
        handle_discard_changes,
        schema=ENTITY_ONLY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_BADGES,
        handle_get_badges,
        schema=ENTITY_ONLY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CLEANUP_LEGACY,
        handle_cleanup_legacy,
        schema=ENTITY_ONLY_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REFRESH_BADGES,
        handle_refresh_badges,
        schema=ENTITY_ONLY_SCHEMA,
    )

    const.LOGGER.info("INFO: Custom Badges services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Custom Badges services when unloading the integration."""
    services = [
        const.SERVICE_SET_BADGES,
        const.SERVICE_ADD_BADGE,
        const.SERVICE_UPDATE_BADGE,
        const.SERVICE_REMOVE_BADGE,
        const.SERVICE_SAVE_BADGES,
        const.SERVICE_DISCARD_CHANGES,
        const.SERVICE_GET_BADGES,
        const.SERVICE_CLEANUP_LEGACY,
        const.SERVICE_REFRESH_BADGES,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Custom Badges services have been unregistered")
