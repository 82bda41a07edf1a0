"""Tests for legacy per-entity storage migration."""

# pylint: disable=protected-access  # Accessing _get_store for testing
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

import asyncio
from typing import Any
from unittest.mock import patch

import pytest

from custom_components.custom_badges import const
from custom_components.custom_badges.migration import (
    LegacyBadgeMigrator,
    legacy_storage_key,
)
from custom_components.custom_badges.storage_manager import (
    BadgeStorageError,
    CustomBadgesStorageManager,
)
from tests.conftest import storage_document, stored_data

GAMING = {"name": "Gaming", "emoji": "🎮", "url": ""}
DEVELOPER = {"name": "Developer", "emoji": "💻", "url": ""}


@pytest.fixture
def migrator(storage_manager: CustomBadgesStorageManager) -> LegacyBadgeMigrator:
    """Return a migrator over the mocked storage."""
    return LegacyBadgeMigrator(storage_manager)


def _seed_legacy(hass_storage: dict[str, Any], entity_id: str, data: Any) -> str:
    key = legacy_storage_key(entity_id)
    hass_storage[key] = storage_document(key, data)
    return key


def _seed_mapping(hass_storage: dict[str, Any], mapping: Any) -> None:
    hass_storage[const.STORAGE_KEY] = storage_document(const.STORAGE_KEY, mapping)


def test_legacy_storage_key() -> None:
    """Legacy keys embed the entity id after the consolidated prefix."""
    assert legacy_storage_key("42") == "custom_badges_records_42"


async def test_migrates_legacy_records(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """Legacy records move under the consolidated key and the legacy key goes."""
    legacy_key = _seed_legacy(hass_storage, "42", [GAMING])

    records = await migrator.async_migrate("42", asyncio.Lock())

    assert records == [GAMING]
    assert stored_data(hass_storage, const.STORAGE_KEY) == {"42": [GAMING]}
    assert legacy_key not in hass_storage


async def test_migration_keeps_other_entities(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """Merging one entity never touches another entity's records."""
    _seed_mapping(hass_storage, {"7": [DEVELOPER]})
    _seed_legacy(hass_storage, "42", [GAMING])

    await migrator.async_migrate("42", asyncio.Lock())

    assert stored_data(hass_storage, const.STORAGE_KEY) == {
        "7": [DEVELOPER],
        "42": [GAMING],
    }


async def test_migration_is_idempotent(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """A second run finds the entity consolidated and writes nothing."""
    _seed_legacy(hass_storage, "42", [GAMING])
    lock = asyncio.Lock()
    await migrator.async_migrate("42", lock)

    with patch.object(
        migrator._storage_manager, "async_set", wraps=migrator._storage_manager.async_set
    ) as mock_set:
        assert await migrator.async_migrate("42", lock) == [GAMING]

    mock_set.assert_not_called()


async def test_consolidated_entry_wins_over_legacy(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """A present entity is authoritative, even when its set is empty."""
    _seed_mapping(hass_storage, {"42": []})
    legacy_key = _seed_legacy(hass_storage, "42", [GAMING])

    assert await migrator.async_migrate("42", asyncio.Lock()) == []
    assert stored_data(hass_storage, const.STORAGE_KEY) == {"42": []}
    assert legacy_key in hass_storage


async def test_nothing_stored_anywhere(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """No consolidated entry and no legacy key loads as empty without writing."""
    assert await migrator.async_migrate("42", asyncio.Lock()) == []
    assert const.STORAGE_KEY not in hass_storage


async def test_empty_legacy_is_not_migrated(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """An empty legacy list leaves storage alone."""
    legacy_key = _seed_legacy(hass_storage, "42", [])

    assert await migrator.async_migrate("42", asyncio.Lock()) == []
    assert const.STORAGE_KEY not in hass_storage
    assert legacy_key in hass_storage


async def test_non_list_legacy_is_ignored(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """A legacy document that is not a list is treated as empty."""
    _seed_legacy(hass_storage, "42", {"name": "oops"})

    assert await migrator.async_read_legacy("42") == []
    assert await migrator.async_migrate("42", asyncio.Lock()) == []



@pytest.mark.parametrize("value", [5, "Gaming", {"name": "Gaming"}, None])
async def test_non_list_entity_value_is_ignored(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator, value: Any
) -> None:
    """A consolidated entry that is not a list reads as empty and is not rewritten."""
    _seed_mapping(hass_storage, {"42": value, "7": [DEVELOPER]})

    assert await migrator.async_migrate("42", asyncio.Lock()) == []
    assert await migrator.async_migrate("7", asyncio.Lock()) == [DEVELOPER]
    assert stored_data(hass_storage, const.STORAGE_KEY) == {
        "42": value,
        "7": [DEVELOPER],
    }


async def test_corrupt_mapping_raises(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """A consolidated document that is not a mapping is a storage error."""
    _seed_mapping(hass_storage, ["not", "a", "mapping"])

    with pytest.raises(BadgeStorageError):
        await migrator.async_migrate("42", asyncio.Lock())


async def test_failed_delete_still_returns_records(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """Delete failure leaves duplicated, never lost, data."""
    legacy_key = _seed_legacy(hass_storage, "42", [GAMING])

    with patch.object(
        migrator._storage_manager,
        "async_delete",
        side_effect=BadgeStorageError("locked"),
    ):
        records = await migrator.async_migrate("42", asyncio.Lock())

    assert records == [GAMING]
    assert stored_data(hass_storage, const.STORAGE_KEY) == {"42": [GAMING]}
    assert legacy_key in hass_storage

    # Next run takes the consolidated path and leaves the legacy key for cleanup.
    assert await migrator.async_migrate("42", asyncio.Lock()) == [GAMING]


async def test_failed_write_keeps_legacy(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """If the consolidated write fails the legacy key is not deleted."""
    legacy_key = _seed_legacy(hass_storage, "42", [GAMING])

    with (
        patch.object(
            migrator._storage_manager,
            "async_set",
            side_effect=BadgeStorageError("disk full"),
        ),
        pytest.raises(BadgeStorageError),
    ):
        await migrator.async_migrate("42", asyncio.Lock())

    assert legacy_key in hass_storage
    assert const.STORAGE_KEY not in hass_storage


async def test_cleanup_without_legacy(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """Cleanup reports False when there is nothing to remove."""
    assert await migrator.async_cleanup_legacy("42", asyncio.Lock()) is False


async def test_cleanup_removes_leftover(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """A leftover legacy key next to a migrated entity is deleted as-is."""
    _seed_mapping(hass_storage, {"42": [DEVELOPER]})
    legacy_key = _seed_legacy(hass_storage, "42", [GAMING])

    assert await migrator.async_cleanup_legacy("42", asyncio.Lock()) is True
    assert legacy_key not in hass_storage
    assert stored_data(hass_storage, const.STORAGE_KEY) == {"42": [DEVELOPER]}


async def test_cleanup_migrates_first(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """Cleanup of a never-migrated entity merges before deleting."""
    legacy_key = _seed_legacy(hass_storage, "42", [GAMING])

    assert await migrator.async_cleanup_legacy("42", asyncio.Lock()) is True
    assert legacy_key not in hass_storage
    assert stored_data(hass_storage, const.STORAGE_KEY) == {"42": [GAMING]}


async def test_cleanup_raises_on_failed_delete(
    hass_storage: dict[str, Any], migrator: LegacyBadgeMigrator
) -> None:
    """Unlike migration, cleanup reports a failed delete."""
    _seed_mapping(hass_storage, {"42": []})
    _seed_legacy(hass_storage, "42", [GAMING])

    with (
        patch.object(
            migrator._storage_manager,
            "async_delete",
            side_effect=BadgeStorageError("locked"),
        ),
        pytest.raises(BadgeStorageError),
    ):
        await migrator.async_cleanup_legacy("42", asyncio.Lock())
