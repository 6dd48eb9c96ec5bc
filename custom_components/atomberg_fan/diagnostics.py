"""Diagnostics support for the Atomberg Fan integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import CONF_OFF_CODE, CONF_ON_CODE, DOMAIN

REDACT_KEYS = {CONF_ON_CODE, CONF_OFF_CODE}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    devices: list[dict[str, Any]] = []

    if data is not None:
        for device in data.registry.list_devices():
            controller = data.controllers.get(device.id)
            devices.append(
                {
                    "id": device.id,
                    "name": device.display_name,
                    "room": device.room,
                    "host": device.address,
                    "identity": data.registry.derive_identity(device),
                    "active": controller.active.name if controller else None,
                    "port": controller.port if controller else None,
                }
            )

    diagnostics: dict[str, Any] = {
        "entry": {
            "data": dict(entry.data),
            "options": dict(entry.options),
        },
        "devices": devices,
    }

    return async_redact_data(diagnostics, REDACT_KEYS)
