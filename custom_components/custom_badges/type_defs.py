"""Type definitions for Custom Badges data structures.

Persisted shapes use TypedDict so storage documents and service payloads
share one definition. Mappings keyed by runtime entity ids stay as plain
dict aliases.

IMPORTANT: This file must NOT import from badge_store.py or any module that
imports it, to avoid circular dependencies.
"""

from collections.abc import Callable
from typing import TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

EntityId = str  # Whose badge set is being read or written


class BadgeRecordData(TypedDict):
    """One user-defined badge as persisted in storage."""

    name: str  # Tooltip text, empty means not configured
    emoji: str  # Single grapheme or empty
    url: str  # Absolute image URL or empty


EntityBadgeSet = list[BadgeRecordData]  # Ordered, order is display order
ConsolidatedMapping = dict[EntityId, EntityBadgeSet]


class BadgeDescriptor(TypedDict):
    """Renderable badge handed to the display host."""

    tooltip_text: str
    icon_url: str
    on_activate: Callable[[], None]
