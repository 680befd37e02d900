# File: store.py
"""Persistent storage for the Star Hunt household snapshot.

The whole household (children with their tasks, rewards and activity log,
plus household settings) is one JSON document in Home Assistant's storage
directory. Nothing here interprets the document; the coordinator sanitizes
whatever is loaded and hands back complete snapshots to save.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import AppData


class StarHuntStore:
    """Snapshot storage backed by Home Assistant's Store helper."""

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store for storage_key (one file per key)."""
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        # Last loaded or handed-over snapshot; None means nothing on disk yet.
        self._data: Any = None

    async def async_initialize(self) -> None:
        """Read the stored snapshot, if any.

        The raw document is kept as is, even when malformed, so a fresh
        installation (None) can be told apart from an empty household.
        """
        self._data = await self._store.async_load()

        if self._data is None:
            const.LOGGER.info("INFO: No stored Star Hunt household found")
            return
        children = (
            self._data.get(const.DATA_CHILDREN)
            if isinstance(self._data, dict)
            else None
        )
        const.LOGGER.debug(
            "DEBUG: Loaded stored household with %s children",
            len(children) if isinstance(children, list) else 0,
        )

    @property
    def data(self) -> Any:
        """Return the snapshot held in memory (raw until first set_data)."""
        return self._data

    def set_data(self, snapshot: AppData) -> None:
        """Hold snapshot as the next document to save."""
        self._data = snapshot

    async def async_save(self) -> None:
        """Write the held snapshot to disk.

        Failures are logged; the in-memory household stays authoritative and
        the next mutation tries again.
        """
        try:
            await self._store.async_save(self._data)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Could not write household snapshot to %s: %s",
                self._store.path,
                err,
            )
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Household snapshot is not JSON serializable: %s", err
            )
        else:
            const.LOGGER.debug("DEBUG: Household snapshot saved")

    async def async_delete_storage(self) -> None:
        """Remove the stored household (entry removal)."""
        self._data = None
        try:
            await self._store.async_remove()
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Could not remove household storage %s: %s",
                self._store.path,
                err,
            )
        else:
            const.LOGGER.info("INFO: Household storage removed")
