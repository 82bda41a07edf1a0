# File: flow_helpers.py
"""Helpers for the Custom Badges integration's Config and Options flow.

Provides schema builders, UI validation and data building for the
system settings stored on the config entry.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.helpers import selector

from . import const
from .badge_helpers import is_valid_entity_id


def _build_options_fields(default: dict[str, Any]) -> dict[Any, Any]:
    return {
        vol.Required(
            const.CONF_VISIBILITY,
            default=default.get(const.CONF_VISIBILITY, const.DEFAULT_VISIBILITY),
        ): selector.SelectSelector(
            selector.SelectSelectorConfig(
                options=const.VISIBILITY_OPTIONS,
                translation_key=const.CONF_VISIBILITY,
                mode=selector.SelectSelectorMode.DROPDOWN,
            )
        ),
        vol.Required(
            const.CONF_CACHE_TTL,
            default=default.get(const.CONF_CACHE_TTL, const.DEFAULT_CACHE_TTL_MINUTES),
        ): selector.NumberSelector(
            selector.NumberSelectorConfig(
                min=const.MIN_CACHE_TTL_MINUTES,
                max=const.MAX_CACHE_TTL_MINUTES,
                step=1,
                unit_of_measurement="min",
                mode=selector.NumberSelectorMode.BOX,
            )
        ),
        vol.Required(
            const.CONF_SEED_DEFAULTS,
            default=default.get(const.CONF_SEED_DEFAULTS, const.DEFAULT_SEED_DEFAULTS),
        ): selector.BooleanSelector(),
    }


def build_user_schema(default: dict[str, Any] | None = None) -> vol.Schema:
    """Build the schema for the initial config step."""
    default = default or {}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_LOCAL_ENTITY_ID,
                default=default.get(const.CONF_LOCAL_ENTITY_ID, ""),
            ): str,
            **_build_options_fields(default),
        }
    )


def build_options_schema(default: dict[str, Any] | None = None) -> vol.Schema:
    """Build the schema for the options step."""
    return vol.Schema(_build_options_fields(default or {}))


def validate_user_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate the initial config step.

    Returns:
        Error dict keyed by field (empty = no errors).
    """
    errors: dict[str, str] = {}
    if not is_valid_entity_id(user_input.get(const.CONF_LOCAL_ENTITY_ID, "").strip()):
        errors[const.CONF_LOCAL_ENTITY_ID] = const.TRANS_KEY_ERROR_INVALID_ENTITY_ID
    return errors


def build_options_data(user_input: dict[str, Any]) -> dict[str, Any]:
    """Build config entry options from form input.

    NumberSelector yields floats; the TTL is stored as whole minutes.
    """
    return {
        const.CONF_VISIBILITY: user_input.get(
            const.CONF_VISIBILITY, const.DEFAULT_VISIBILITY
        ),
        const.CONF_CACHE_TTL: int(
            user_input.get(const.CONF_CACHE_TTL, const.DEFAULT_CACHE_TTL_MINUTES)
        ),
        const.CONF_SEED_DEFAULTS: bool(
            user_input.get(const.CONF_SEED_DEFAULTS, const.DEFAULT_SEED_DEFAULTS)
        ),
    }
