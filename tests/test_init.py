"""Tests for integration setup."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import voluptuous as vol

from custom_components.atomberg_fan import (
    CONFIG_SCHEMA,
    async_setup,
    async_setup_entry,
    async_unload_entry,
)
from custom_components.atomberg_fan.const import DOMAIN, PLATFORMS, FanState
from custom_components.atomberg_fan.registry import DeviceNotFound

from tests.conftest import NONU_FAN, OFFICE_FAN


def _hass() -> MagicMock:
    hass = MagicMock()
    hass.data = {}
    hass.config_entries.async_forward_entry_setups = AsyncMock(return_value=True)
    hass.config_entries.async_unload_platforms = AsyncMock(return_value=True)
    return hass


def test_config_schema_applies_defaults():
    config = CONFIG_SCHEMA({DOMAIN: {"devices": [OFFICE_FAN]}})

    assert config[DOMAIN]["default_state"] == "off"
    assert config[DOMAIN]["devices"][0]["host"] == "192.168.0.130"


def test_config_schema_normalizes_default_state():
    config = CONFIG_SCHEMA(
        {DOMAIN: {"default_state": "ON", "devices": [OFFICE_FAN]}}
    )

    assert config[DOMAIN]["default_state"] == "on"


@pytest.mark.parametrize("missing", ["id", "host", "on_code", "off_code"])
def test_config_schema_requires_device_keys(missing: str):
    device = {key: value for key, value in OFFICE_FAN.items() if key != missing}

    with pytest.raises(vol.Invalid):
        CONFIG_SCHEMA({DOMAIN: {"devices": [device]}})


def test_config_schema_rejects_empty_device_list():
    with pytest.raises(vol.Invalid):
        CONFIG_SCHEMA({DOMAIN: {"devices": []}})


def test_setup_imports_yaml():
    hass = _hass()
    config = CONFIG_SCHEMA({DOMAIN: {"devices": [OFFICE_FAN]}})

    assert asyncio.run(async_setup(hass, config))

    hass.config_entries.flow.async_init.assert_called_once_with(
        DOMAIN, context={"source": "import"}, data=config[DOMAIN]
    )
    hass.async_create_task.assert_called_once()


def test_setup_without_yaml_does_nothing():
    hass = _hass()

    assert asyncio.run(async_setup(hass, {}))

    hass.config_entries.flow.async_init.assert_not_called()


def test_setup_entry_creates_controllers():
    hass = _hass()
    entry = MagicMock(
        entry_id="entry1",
        data={"default_state": "on", "devices": [OFFICE_FAN, NONU_FAN]},
    )

    assert asyncio.run(async_setup_entry(hass, entry))

    data = hass.data[DOMAIN]["entry1"]
    assert [device.id for device in data.registry] == ["office_fan", "nonu_fan"]
    assert data.controller("office_fan").active is FanState.ON
    assert data.controller("office_fan").device.address == "192.168.0.130"
    with pytest.raises(DeviceNotFound):
        data.controller("garage_fan")
    hass.config_entries.async_forward_entry_setups.assert_awaited_once_with(
        entry, PLATFORMS
    )


def test_setup_entry_rejects_duplicate_ids():
    hass = _hass()
    entry = MagicMock(
        entry_id="entry1",
        data={"devices": [{**OFFICE_FAN, "id": "dup"}, {**NONU_FAN, "id": "dup"}]},
    )

    assert asyncio.run(async_setup_entry(hass, entry)) is False

    assert DOMAIN not in hass.data
    hass.config_entries.async_forward_entry_setups.assert_not_awaited()


def test_unload_entry_drops_runtime_data():
    hass = _hass()
    entry = MagicMock(entry_id="entry1", data={"devices": [OFFICE_FAN]})
    asyncio.run(async_setup_entry(hass, entry))

    assert asyncio.run(async_unload_entry(hass, entry))

    assert "entry1" not in hass.data[DOMAIN]


def test_manifest_reports_assumed_state():
    manifest_path = (
        Path(__file__).parent.parent
        / "custom_components"
        / DOMAIN
        / "manifest.json"
    )
    manifest = json.loads(manifest_path.read_text(encoding="utf-8"))

    assert manifest["domain"] == DOMAIN
    assert manifest["iot_class"] == "assumed_state"
    assert manifest["config_flow"] is True
