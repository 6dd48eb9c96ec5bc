from __future__ import annotations

import pytest

from custom_components.atomberg_fan.registry import DeviceRegistry, FanDevice

OFFICE_FAN = {
    "id": "office_fan",
    "name": "Office Fan",
    "room": "Office Room",
    "host": "192.168.0.130",
    "on_code": "ON_BYTES",
    "off_code": "OFF_BYTES",
}

NONU_FAN = {
    "id": "nonu_fan",
    "name": "Nonu Bedroom Fan",
    "room": "Nonu Bedroom",
    "host": "192.168.0.136",
    "on_code": "Jmlu57pzGTgX9X3xbpZt6n2bmyTDdV4dDq2vCBW3WNBm",
    "off_code": "fM3SJ3B1jWm8332Ww3btwQMituSX3x9EFWvesok4JYBS",
}


class RecordingSender:
    """Stands in for the UDP transmission routine."""

    def __init__(self, error: OSError | None = None) -> None:
        self.calls: list[tuple[str, int, bytes]] = []
        self.error = error

    async def __call__(self, host: str, port: int, payload: bytes) -> None:
        self.calls.append((host, port, payload))
        if self.error is not None:
            raise self.error


@pytest.fixture
def office_fan() -> FanDevice:
    return FanDevice(
        id="office_fan",
        display_name="Office Fan",
        room="Office Room",
        address="192.168.0.130",
        on_payload=b"ON_BYTES",
        off_payload=b"OFF_BYTES",
    )


@pytest.fixture
def registry() -> DeviceRegistry:
    return DeviceRegistry.from_config([OFFICE_FAN, NONU_FAN])


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()
