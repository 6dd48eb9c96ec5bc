"""Constants for the Atomberg Fan integration."""

from enum import IntEnum

from homeassistant.const import Platform

DOMAIN = "atomberg_fan"

PLATFORMS: list[Platform] = [Platform.FAN]

# Device connection
CONTROL_PORT = 5600

# Config keys
CONF_DEVICES = "devices"
CONF_DEFAULT_STATE = "default_state"
CONF_ROOM = "room"
CONF_ON_CODE = "on_code"
CONF_OFF_CODE = "off_code"

# Values
VALUE_ON = "on"
VALUE_OFF = "off"

DEFAULT_NAME = "Atomberg Fan"

# Device information
MANUFACTURER = "Atomberg"
MODEL = "Aria"


class FanState(IntEnum):
    """Power state of a fan, matching the host's Active values."""

    OFF = 0
    ON = 1
