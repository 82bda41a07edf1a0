# File: badge_helpers.py
"""Custom Badges helper functions and shared logic."""

from __future__ import annotations

import re
from typing import Any

from homeassistant.core import HomeAssistant

from . import const

_ENTITY_ID_RE = re.compile(const.ENTITY_ID_PATTERN)


# -------- Signals --------
def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'custom_badges_{entry_id}_{suffix}'

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_RECORDS_CHANGED)
        'custom_badges_abc123_records_changed'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# -------- Entry Lookup --------
def get_first_entry_id(hass: HomeAssistant) -> str | None:
    """Retrieve the first loaded Custom Badges config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def get_entry_data(hass: HomeAssistant) -> dict[str, Any] | None:
    """Return the hass.data bucket of the first loaded entry."""
    entry_id = get_first_entry_id(hass)
    if entry_id is None:
        return None
    return hass.data[const.DOMAIN][entry_id]


# -------- Validation --------
def is_valid_entity_id(entity_id: Any) -> bool:
    """Return True if the id can be used as a badge owner and storage key suffix."""
    return isinstance(entity_id, str) and bool(_ENTITY_ID_RE.match(entity_id))
