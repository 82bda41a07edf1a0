# File: editor.py
"""Draft editing of one entity's badge set.

State machine:

    clean --edit--> dirty --save--> saving --ok--> clean
                      ^                |
                      +----failure-----+

Edits only touch the in-memory draft. Nothing is persisted until
async_save(); a failed save keeps the draft so it can be retried.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from homeassistant.exceptions import HomeAssistantError

from . import const
from .badge_store import BadgeRecordStore
from .data_builders import build_badge_record, build_badge_set, build_default_badge_set
from .storage_manager import BadgeStorageError
from .type_defs import EntityBadgeSet, EntityId
from .utils.emoji_utils import first_grapheme


class BadgeEditorBusyError(HomeAssistantError):
    """A save was requested while another save is in flight."""


def _copy_set(records: EntityBadgeSet) -> EntityBadgeSet:
    return [build_badge_record(record) for record in records]


class BadgeEditor:
    """Clean/Dirty/Saving draft of one entity's badges."""

    def __init__(
        self,
        store: BadgeRecordStore,
        entity_id: EntityId,
        seed_defaults: bool = False,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the editor.

        Args:
            store: Badge record store the draft is loaded from and saved to.
            entity_id: Owner of the badge set.
            seed_defaults: Seed the default badges when nothing was ever saved.
            on_change: Called after every draft or state change.

        """
        self._store = store
        self.entity_id = entity_id
        self._seed_defaults = seed_defaults
        self._on_change = on_change
        self._state = const.EDITOR_STATE_CLEAN
        self._saved: EntityBadgeSet = []
        self._draft: EntityBadgeSet = []
        self._loaded = False

    @property
    def state(self) -> str:
        """Return clean, dirty or saving."""
        return self._state

    @property
    def loaded(self) -> bool:
        """Return True once async_begin() has run."""
        return self._loaded

    @property
    def draft(self) -> EntityBadgeSet:
        """Return a copy of the current draft, exactly as edited."""
        return [dict(record) for record in self._draft]

    @property
    def saved(self) -> EntityBadgeSet:
        """Return a copy of the last successfully saved badge set."""
        return _copy_set(self._saved)

    def _set_state(self, state: str) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change()

    def _mark_dirty(self) -> None:
        # Edits made while saving stay pending; the save result decides the state.
        if self._state != const.EDITOR_STATE_SAVING:
            self._set_state(const.EDITOR_STATE_DIRTY)
        elif self._on_change is not None:
            self._on_change()

    async def async_begin(self) -> EntityBadgeSet:
        """Load the stored badges into the draft.

        Unsaved edits are kept; only a clean editor reloads from the store.
        """
        if self._loaded and self._state != const.EDITOR_STATE_CLEAN:
            return self.draft

        records = await self._store.async_load(self.entity_id)
        self._saved = _copy_set(records)
        self._draft = _copy_set(records)
        self._loaded = True

        if not records and self._seed_defaults and await self._async_never_saved():
            await self._async_seed_defaults()
            return self.draft

        self._set_state(const.EDITOR_STATE_CLEAN)
        return self.draft

    async def _async_never_saved(self) -> bool:
        """Return True if the consolidated mapping has no entry for this entity."""
        try:
            mapping = await self._store.async_get_all()
        except BadgeStorageError as err:
            const.LOGGER.warning(
                "WARNING: Not seeding default badges for '%s', storage unreadable: %s",
                self.entity_id,
                err,
            )
            return False
        return self.entity_id not in mapping

    async def _async_seed_defaults(self) -> None:
        defaults = build_default_badge_set()
        self._draft = _copy_set(defaults)
        try:
            saved = await self._store.async_save(self.entity_id, defaults)
        except BadgeStorageError as err:
            const.LOGGER.warning(
                "WARNING: Default badges for '%s' could not be saved: %s",
                self.entity_id,
                err,
            )
            self._set_state(const.EDITOR_STATE_DIRTY)
            return
        const.LOGGER.info("INFO: Seeded default badges for '%s'", self.entity_id)
        self._saved = _copy_set(saved)
        self._draft = _copy_set(saved)
        self._set_state(const.EDITOR_STATE_CLEAN)

    # -------------------------------------------------------------------------------------
    # Draft edits
    # -------------------------------------------------------------------------------------

    def add_badge(self, data: Mapping[str, Any] | None = None) -> int:
        """Append a badge (empty by default) and return its index."""
        self._draft.append(build_badge_record(data))
        self._mark_dirty()
        return len(self._draft) - 1

    def update_badge(self, index: int, field: str, value: Any) -> None:
        """Set one field of the badge at index.

        Raises:
            KeyError: Unknown field.
            IndexError: No badge at index.
        """
        if field not in const.BADGE_FIELDS:
            raise KeyError(const.ERROR_INVALID_FIELD_FMT.format(field))
        self._check_index(index)
        text = "" if value is None else str(value)
        if field == const.DATA_BADGE_EMOJI:
            text = first_grapheme(text)
        self._draft[index][field] = text
        self._mark_dirty()

    def remove_badge(self, index: int) -> None:
        """Remove the badge at index.

        Raises:
            IndexError: No badge at index.
        """
        self._check_index(index)
        del self._draft[index]
        self._mark_dirty()

    def set_badges(self, records: Iterable[Mapping[str, Any]]) -> None:
        """Replace the whole draft."""
        self._draft = build_badge_set(records)
        self._mark_dirty()

    def discard(self) -> None:
        """Drop unsaved edits and return to the last saved badges.

        Raises:
            BadgeEditorBusyError: A save is in flight.
        """
        if self._state == const.EDITOR_STATE_SAVING:
            raise BadgeEditorBusyError(
                const.ERROR_SAVE_IN_PROGRESS_FMT.format(self.entity_id)
            )
        self._draft = _copy_set(self._saved)
        self._set_state(const.EDITOR_STATE_CLEAN)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._draft):
            raise IndexError(
                const.ERROR_INVALID_INDEX_FMT.format(index, self.entity_id)
            )

    # -------------------------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------------------------

    async def async_save(self) -> EntityBadgeSet:
        """Persist the draft.

        Returns:
            The badge set as saved.

        Raises:
            BadgeEditorBusyError: A save for this editor is already in flight.
            BadgeStorageError: The save did not take effect; the draft is kept.
        """
        if self._state == const.EDITOR_STATE_SAVING:
            raise BadgeEditorBusyError(
                const.ERROR_SAVE_IN_PROGRESS_FMT.format(self.entity_id)
            )

        snapshot = _copy_set(self._draft)
        self._set_state(const.EDITOR_STATE_SAVING)
        saved: EntityBadgeSet | None = None
        try:
            saved = await self._store.async_save(self.entity_id, snapshot)
        finally:
            if saved is None:
                self._set_state(const.EDITOR_STATE_DIRTY)

        self._saved = _copy_set(saved)
        if build_badge_set(self._draft) == saved:
            self._draft = _copy_set(saved)
            self._set_state(const.EDITOR_STATE_CLEAN)
        else:
            # Edited while the save was in flight.
            self._set_state(const.EDITOR_STATE_DIRTY)
        return self.saved
