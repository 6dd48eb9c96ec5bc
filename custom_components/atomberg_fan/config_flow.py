"""Config flow for Atomberg Fan integration."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult

from .const import CONF_DEFAULT_STATE, CONF_DEVICES, DEFAULT_NAME, DOMAIN, VALUE_OFF
from .registry import DeviceRegistry, InvalidDeviceConfig

_LOGGER = logging.getLogger(__name__)


def validate_devices(data: dict[str, Any]) -> DeviceRegistry:
    """Validate the device list.

    Raises InvalidDeviceConfig if any record is unusable.
    """
    return DeviceRegistry.from_config(data.get(CONF_DEVICES, []))


class AtombergFanConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Atomberg Fan."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Fans are provisioned in configuration.yaml only."""
        return self.async_abort(reason="yaml_only")

    async def async_step_import(
        self, import_data: dict[str, Any]
    ) -> ConfigFlowResult:
        """Create or update the entry from the YAML device list."""
        try:
            registry = validate_devices(import_data)
        except InvalidDeviceConfig as err:
            _LOGGER.error("Rejected Atomberg fan configuration: %s", err)
            return self.async_abort(reason="invalid_devices")

        data = {
            CONF_DEFAULT_STATE: import_data.get(CONF_DEFAULT_STATE, VALUE_OFF),
            CONF_DEVICES: [dict(device) for device in import_data[CONF_DEVICES]],
        }

        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured(updates=data)

        _LOGGER.info("Importing %s Atomberg fan(s) from YAML", len(registry))
        return self.async_create_entry(title=DEFAULT_NAME, data=data)
