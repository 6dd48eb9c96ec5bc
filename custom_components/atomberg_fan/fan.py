"""Fan platform for Atomberg Fan."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.fan import FanEntity, FanEntityFeature
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers import device_registry as dr, entity_registry as er
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import AtombergFanData
from .api import AtombergFanController
from .const import DOMAIN, MANUFACTURER, MODEL, FanState

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Atomberg fans from a config entry."""
    data: AtombergFanData = hass.data[DOMAIN][entry.entry_id]
    registry = data.registry

    entity_registry = er.async_get(hass)
    device_registry = dr.async_get(hass)
    known = {
        entity.unique_id: entity.entity_id
        for entity in er.async_entries_for_config_entry(entity_registry, entry.entry_id)
        if entity.domain == Platform.FAN and entity.platform == DOMAIN
    }

    result = registry.reconcile(known)
    for device in result.restored:
        _LOGGER.info("Restoring existing fan: %s", device.display_name)
    for device in result.new:
        _LOGGER.info("Adding new fan: %s", device.display_name)
    for identity in result.orphaned:
        _LOGGER.info("Removing fan no longer configured: %s", known[identity])
        entity_registry.async_remove(known[identity])
        if device_entry := device_registry.async_get_device(
            identifiers={(DOMAIN, identity)}
        ):
            device_registry.async_update_device(
                device_entry.id, remove_config_entry_id=entry.entry_id
            )

    async_add_entities(
        AtombergFanEntity(data.controller(device.id), registry.derive_identity(device))
        for device in registry.list_devices()
    )


class AtombergFanEntity(FanEntity):
    """Representation of an Atomberg fan."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_supported_features = FanEntityFeature.TURN_ON | FanEntityFeature.TURN_OFF
    _attr_icon = "mdi:ceiling-fan"
    _attr_should_poll = False
    # Commands are one-way, so the state shown is what was last requested
    _attr_assumed_state = True

    def __init__(self, controller: AtombergFanController, unique_id: str) -> None:
        """Initialize the fan."""
        self._controller = controller
        device = controller.device
        self._attr_unique_id = unique_id
        self._attr_device_info = {
            "identifiers": {(DOMAIN, unique_id)},
            "name": device.display_name,
            "manufacturer": MANUFACTURER,
            "model": MODEL,
            "suggested_area": device.room or None,
        }
        self._attr_extra_state_attributes = {
            "room": device.room,
            "host": device.address,
        }

    async def async_added_to_hass(self) -> None:
        """Run when entity is added to hass."""
        self._controller.register_state_callback(self._handle_state_update)

    async def async_will_remove_from_hass(self) -> None:
        """Run when entity is removed from hass."""
        self._controller.unregister_state_callback(self._handle_state_update)

    @callback
    def _handle_state_update(self) -> None:
        """Handle state update from the controller."""
        self.async_write_ha_state()

    @property
    def is_on(self) -> bool:
        """Return true if fan is on."""
        return self._controller.get_active() is FanState.ON

    async def async_turn_on(
        self,
        percentage: int | None = None,
        preset_mode: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Turn on the fan."""
        self._controller.set_active(FanState.ON)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn off the fan."""
        self._controller.set_active(FanState.OFF)
