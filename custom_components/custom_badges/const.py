# File: const.py
"""Constants for the Custom Badges integration.

This file centralizes configuration keys, defaults, storage keys, service names,
event names, and platform identifiers for consistency across the integration.
"""

import logging
from datetime import timedelta

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
CUSTOM_BADGES_TITLE = "Custom Badges"

# Integration Domain
DOMAIN = "custom_badges"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# hass.data keys
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"
STORAGE_MANAGER = "storage_manager"
BADGE_STORE = "badge_store"
DISPLAY_ADAPTER = "display_adapter"

# ------------------------------------------------------------------------------------------------
# Storage and Versioning
# ------------------------------------------------------------------------------------------------
STORAGE_VERSION = 1

# Consolidated mapping of entity_id -> list of badge records
STORAGE_KEY = "custom_badges_records"

# Pre-consolidation layout: one document per entity id
LEGACY_STORAGE_KEY_FMT = "custom_badges_records_{}"

# Entity ids are embedded in legacy storage file names
ENTITY_ID_PATTERN = r"^[A-Za-z0-9_.-]+$"

# ------------------------------------------------------------------------------------------------
# Badge Record Fields
# ------------------------------------------------------------------------------------------------
DATA_BADGE_NAME = "name"
DATA_BADGE_EMOJI = "emoji"
DATA_BADGE_URL = "url"

BADGE_FIELDS = (DATA_BADGE_NAME, DATA_BADGE_EMOJI, DATA_BADGE_URL)

# Display descriptor fields
DESCRIPTOR_TOOLTIP_TEXT = "tooltip_text"
DESCRIPTOR_ICON_URL = "icon_url"
DESCRIPTOR_ON_ACTIVATE = "on_activate"

# Seeded for the local entity the first time its editor opens
DEFAULT_BADGES = (
    {DATA_BADGE_NAME: "Gaming", DATA_BADGE_EMOJI: "🎮", DATA_BADGE_URL: ""},
    {DATA_BADGE_NAME: "Developer", DATA_BADGE_EMOJI: "💻", DATA_BADGE_URL: ""},
)

# ------------------------------------------------------------------------------------------------
# Icon Resolution
# ------------------------------------------------------------------------------------------------
TWEMOJI_URL_FMT = (
    "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/72x72/{}.png"
)

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_LOCAL_ENTITY_ID = "local_entity_id"
CONF_VISIBILITY = "visibility"
CONF_CACHE_TTL = "cache_ttl"
CONF_SEED_DEFAULTS = "seed_defaults"

VISIBILITY_LOCAL_ONLY = "local_only"
VISIBILITY_EVERYONE = "everyone"
VISIBILITY_OPTIONS = [VISIBILITY_LOCAL_ONLY, VISIBILITY_EVERYONE]

# Defaults
DEFAULT_VISIBILITY = VISIBILITY_LOCAL_ONLY
DEFAULT_CACHE_TTL_MINUTES = 5
DEFAULT_CACHE_TTL = timedelta(minutes=DEFAULT_CACHE_TTL_MINUTES)
DEFAULT_SEED_DEFAULTS = True

MIN_CACHE_TTL_MINUTES = 1
MAX_CACHE_TTL_MINUTES = 1440

# ConfigFlow / OptionsFlow steps
CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# ------------------------------------------------------------------------------------------------
# Editor States
# ------------------------------------------------------------------------------------------------
EDITOR_STATE_CLEAN = "clean"
EDITOR_STATE_DIRTY = "dirty"
EDITOR_STATE_SAVING = "saving"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_SET_BADGES = "set_badges"
SERVICE_ADD_BADGE = "add_badge"
SERVICE_UPDATE_BADGE = "update_badge"
SERVICE_REMOVE_BADGE = "remove_badge"
SERVICE_SAVE_BADGES = "save_badges"
SERVICE_DISCARD_CHANGES = "discard_changes"
SERVICE_GET_BADGES = "get_badges"
SERVICE_CLEANUP_LEGACY = "cleanup_legacy"
SERVICE_REFRESH_BADGES = "refresh_badges"

FIELD_ENTITY_ID = "entity_id"
FIELD_BADGES = "badges"
FIELD_INDEX = "index"
FIELD_FIELD = "field"
FIELD_VALUE = "value"
FIELD_NAME = "name"
FIELD_EMOJI = "emoji"
FIELD_URL = "url"

# ------------------------------------------------------------------------------------------------
# Events
# ------------------------------------------------------------------------------------------------
EVENT_BADGE_ACTIVATED = "custom_badges_badge_activated"
ATTR_ENTITY_ID = "entity_id"
ATTR_BADGE_NAME = "badge_name"
ATTR_POSITION = "position"

# ------------------------------------------------------------------------------------------------
# Sensor
# ------------------------------------------------------------------------------------------------
SENSOR_LOCAL_BADGES_SUFFIX = "_local_badges"
SENSOR_ICON = "mdi:certificate"
ATTR_BADGE_OWNER = "badge_owner"
ATTR_BADGES = "badges"
ATTR_EDITOR_STATE = "editor_state"

# ------------------------------------------------------------------------------------------------
# Translation Keys
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_INVALID_ENTITY_ID = "invalid_entity_id"
TRANS_KEY_SENSOR_LOCAL_BADGES = "local_badges"

# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
ERROR_NO_ENTRY_FOUND = "No Custom Badges config entry found"
ERROR_SAVE_FAILED_FMT = "Badges for '{}' were not saved: {}"
ERROR_SAVE_IN_PROGRESS_FMT = "A save for '{}' is already in progress"
ERROR_INVALID_INDEX_FMT = "No badge at position {} for '{}'"
ERROR_INVALID_FIELD_FMT = "Unknown badge field '{}'"
ERROR_CLEANUP_FAILED_FMT = "Legacy cleanup for '{}' failed: {}"

# ------------------------------------------------------------------------------------------------
# Dispatcher Signals
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_RECORDS_CHANGED = "records_changed"
