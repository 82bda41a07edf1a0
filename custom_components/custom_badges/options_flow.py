# File: options_flow.py
"""Options Flow for the Custom Badges integration.

Edits visibility, cache lifetime and default seeding. The entry is reloaded
by the update listener registered in __init__.py.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class CustomBadgesOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for Custom Badges system settings."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Show and save the system settings."""
        if user_input is not None:
            const.LOGGER.debug("DEBUG: Updating Custom Badges options: %s", user_input)
            return self.async_create_entry(
                title="", data=fh.build_options_data(user_input)
            )

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=fh.build_options_schema(dict(self.config_entry.options)),
        )
