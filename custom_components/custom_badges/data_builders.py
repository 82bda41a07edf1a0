"""Badge record building and validation helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Badge record field defaults and normalization
- The displayability rule
- Icon resolution priority

Consumers:
- migration.py / badge_store.py (normalize everything read from or written to storage)
- editor.py and services.py (build records from user input)
- display.py (filter and resolve icons)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from . import const
from .type_defs import BadgeRecordData, EntityBadgeSet
from .utils.emoji_utils import emoji_to_image_url, first_grapheme

# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _normalize_str_field(value: Any) -> str:
    """Normalize a field that should be a string.

    None becomes empty, other non-strings are converted with str().
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


# ==============================================================================
# BUILD FUNCTIONS
# ==============================================================================


def build_badge_record(data: Mapping[str, Any] | None = None) -> BadgeRecordData:
    """Build a complete badge record from partial or untrusted data.

    Missing fields default to empty strings. Name and URL are kept as given;
    the emoji is trimmed and truncated to its first grapheme.

    Args:
        data: Mapping with DATA_BADGE_* keys, or None for an empty record.

    Returns:
        BadgeRecordData ready for storage.
    """
    data = data or {}
    return BadgeRecordData(
        name=_normalize_str_field(data.get(const.DATA_BADGE_NAME)),
        emoji=first_grapheme(
            _normalize_str_field(data.get(const.DATA_BADGE_EMOJI)).strip()
        ),
        url=_normalize_str_field(data.get(const.DATA_BADGE_URL)),
    )


def build_badge_set(records: Iterable[Any] | None) -> EntityBadgeSet:
    """Build an ordered badge set, skipping entries that are not mappings.

    Order is preserved; it is the display order.
    """
    if not records:
        return []
    badge_set: EntityBadgeSet = []
    for record in records:
        if not isinstance(record, Mapping):
            const.LOGGER.warning(
                "WARNING: Skipping malformed badge record of type %s",
                type(record).__name__,
            )
            continue
        badge_set.append(build_badge_record(record))
    return badge_set


def build_default_badge_set() -> EntityBadgeSet:
    """Return fresh copies of the default badges."""
    return [build_badge_record(badge) for badge in const.DEFAULT_BADGES]


# ==============================================================================
# DISPLAY RULES
# ==============================================================================


def is_displayable(record: Mapping[str, Any]) -> bool:
    """Return True if the record has a name and at least one icon source."""
    return bool(record.get(const.DATA_BADGE_NAME)) and bool(
        record.get(const.DATA_BADGE_EMOJI) or record.get(const.DATA_BADGE_URL)
    )


def resolve_icon_url(record: Mapping[str, Any]) -> str:
    """Resolve the icon for a record: URL first, then the emoji image."""
    url = record.get(const.DATA_BADGE_URL)
    if url:
        return url
    return emoji_to_image_url(record.get(const.DATA_BADGE_EMOJI) or "")
