# File: config_flow.py
"""Config flow for the Custom Badges integration.

A single step picks the local entity whose badges are edited and shown,
plus the display and cache settings that the options flow can change later.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import CustomBadgesOptionsFlowHandler


class CustomBadgesConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Custom Badges."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Collect the local entity id and initial options."""
        if self._async_current_entries():
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_user_inputs(user_input)
            if not errors:
                local_entity_id = user_input[const.CONF_LOCAL_ENTITY_ID].strip()
                const.LOGGER.debug(
                    "DEBUG: Creating Custom Badges entry for '%s'", local_entity_id
                )
                return self.async_create_entry(
                    title=const.CUSTOM_BADGES_TITLE,
                    data={const.CONF_LOCAL_ENTITY_ID: local_entity_id},
                    options=fh.build_options_data(user_input),
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=fh.build_user_schema(user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> CustomBadgesOptionsFlowHandler:
        """Return the options flow handler."""
        return CustomBadgesOptionsFlowHandler()
