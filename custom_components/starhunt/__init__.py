# File: __init__.py
"""The Star Hunt integration.

Setup loads and sanitizes the stored household before the coordinator starts
its reset tick. Services and the per-child points sensors follow.
Changing options reloads the entry; removing it deletes the stored household.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import StarHuntDataCoordinator
from .services import async_setup_services, async_unload_services
from .store import StarHuntStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Star Hunt entry: %s", entry.entry_id)

    store = StarHuntStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = StarHuntDataCoordinator(hass, entry, store)

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as err:
        const.LOGGER.error("ERROR: Could not load the Star Hunt household: %s", err)
        raise

    # Services and platforms look the coordinator up here.
    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_update_options))

    const.LOGGER.info("INFO: Star Hunt setup complete for entry: %s", entry.entry_id)
    return True


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry so new options take effect."""
    const.LOGGER.debug("DEBUG: Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Star Hunt entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        entry_data = hass.data[const.DOMAIN].pop(entry.entry_id)
        # Flush pending changes before the coordinator goes away.
        await entry_data[const.STORE].async_save()

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing Star Hunt entry: %s", entry.entry_id)
    store = StarHuntStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()
    const.LOGGER.info("INFO: Star Hunt entry data cleared: %s", entry.entry_id)
