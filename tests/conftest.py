"""Shared fixtures for Custom Badges tests."""

from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.custom_badges import const
from custom_components.custom_badges.badge_cache import BadgeRecordCache
from custom_components.custom_badges.badge_store import BadgeRecordStore
from custom_components.custom_badges.storage_manager import (
    CustomBadgesStorageManager,
)

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

LOCAL_ENTITY_ID = "alice"


def storage_document(key: str, data: Any) -> dict[str, Any]:
    """Wrap data the way Home Assistant's Store persists it."""
    return {"version": const.STORAGE_VERSION, "minor_version": 1, "key": key, "data": data}


def stored_data(hass_storage: dict[str, Any], key: str) -> Any:
    """Return the payload stored under key, or None when the key is absent."""
    document = hass_storage.get(key)
    return None if document is None else document["data"]


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.CUSTOM_BADGES_TITLE,
        data={const.CONF_LOCAL_ENTITY_ID: LOCAL_ENTITY_ID},
        options={
            const.CONF_VISIBILITY: const.VISIBILITY_LOCAL_ONLY,
            const.CONF_CACHE_TTL: const.DEFAULT_CACHE_TTL_MINUTES,
            const.CONF_SEED_DEFAULTS: True,
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
def storage_manager(hass: HomeAssistant) -> CustomBadgesStorageManager:
    """Return a storage manager backed by the mocked hass storage."""
    return CustomBadgesStorageManager(hass)


@pytest.fixture
def badge_store(
    hass: HomeAssistant,
    storage_manager: CustomBadgesStorageManager,  # pylint: disable=redefined-outer-name
) -> BadgeRecordStore:
    """Return a badge record store with the default cache lifetime."""
    return BadgeRecordStore(
        hass, "test_entry_id", storage_manager, BadgeRecordCache()
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the Custom Badges integration with mocked storage."""
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()
    return mock_config_entry
