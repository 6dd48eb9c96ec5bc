"""The Atomberg Fan integration."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

import voluptuous as vol

from homeassistant.config_entries import SOURCE_IMPORT, ConfigEntry
from homeassistant.const import CONF_HOST, CONF_ID, CONF_NAME
from homeassistant.core import HomeAssistant
import homeassistant.helpers.config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .api import AtombergFanController
from .const import (
    CONF_DEFAULT_STATE,
    CONF_DEVICES,
    CONF_OFF_CODE,
    CONF_ON_CODE,
    CONF_ROOM,
    DOMAIN,
    PLATFORMS,
    VALUE_OFF,
    VALUE_ON,
    FanState,
)
from .registry import DeviceNotFound, DeviceRegistry, InvalidDeviceConfig

_LOGGER = logging.getLogger(__name__)

_NON_EMPTY = vol.All(cv.string, vol.Length(min=1))

DEVICE_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_ID): _NON_EMPTY,
        vol.Optional(CONF_NAME): cv.string,
        vol.Optional(CONF_ROOM, default=""): cv.string,
        vol.Required(CONF_HOST): _NON_EMPTY,
        vol.Required(CONF_ON_CODE): _NON_EMPTY,
        vol.Required(CONF_OFF_CODE): _NON_EMPTY,
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        DOMAIN: vol.Schema(
            {
                vol.Optional(CONF_DEFAULT_STATE, default=VALUE_OFF): vol.All(
                    vol.Lower, vol.In([VALUE_ON, VALUE_OFF])
                ),
                vol.Required(CONF_DEVICES): vol.All(
                    cv.ensure_list, [DEVICE_SCHEMA], vol.Length(min=1)
                ),
            }
        )
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass
class AtombergFanData:
    """Runtime data for a config entry."""

    registry: DeviceRegistry
    controllers: dict[str, AtombergFanController] = field(default_factory=dict)

    def controller(self, device_id: str) -> AtombergFanController:
        """Return the controller for a device id."""
        try:
            return self.controllers[device_id]
        except KeyError:
            raise DeviceNotFound(f"Unknown device: {device_id}") from None


def default_state_from_config(value: str | None) -> FanState:
    """Map the configured default state to a FanState."""
    return FanState.ON if value == VALUE_ON else FanState.OFF


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Import the YAML device list into a config entry."""
    if DOMAIN not in config:
        return True

    hass.async_create_task(
        hass.config_entries.flow.async_init(
            DOMAIN,
            context={"source": SOURCE_IMPORT},
            data=dict(config[DOMAIN]),
        )
    )
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Atomberg fans from a config entry."""
    try:
        registry = DeviceRegistry.from_config(entry.data.get(CONF_DEVICES, []))
    except InvalidDeviceConfig as err:
        _LOGGER.error("Invalid Atomberg fan configuration: %s", err)
        return False

    initial_state = default_state_from_config(entry.data.get(CONF_DEFAULT_STATE))
    data = AtombergFanData(registry=registry)
    for device in registry:
        data.controllers[device.id] = AtombergFanController(
            device, initial_state=initial_state
        )
        _LOGGER.debug("Created controller for %s at %s", device.id, device.address)

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = data

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        hass.data[DOMAIN].pop(entry.entry_id, None)

    return unload_ok
