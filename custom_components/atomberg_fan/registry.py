"""Static device registry for Atomberg fans."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
import hashlib
import ipaddress
import logging
import re
from typing import Any
import uuid

from homeassistant.const import CONF_HOST, CONF_ID, CONF_NAME

from .const import CONF_OFF_CODE, CONF_ON_CODE, CONF_ROOM

_LOGGER = logging.getLogger(__name__)

_HOSTNAME_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


class AtombergFanError(Exception):
    """Base error for the Atomberg Fan integration."""


class InvalidDeviceConfig(AtombergFanError):
    """The provisioned device list violates a registry invariant."""


class DeviceNotFound(AtombergFanError):
    """No device with the requested id is registered."""


@dataclass(frozen=True)
class FanDevice:
    """A provisioned fan and its pre-recorded command codes."""

    id: str
    display_name: str
    room: str
    address: str
    on_payload: bytes = field(repr=False)
    off_payload: bytes = field(repr=False)

    def payload_for(self, on: bool) -> bytes:
        """Return the command payload for the requested power state."""
        return self.on_payload if on else self.off_payload


@dataclass
class Reconciliation:
    """Result of matching the registry against previously known identities."""

    new: list[FanDevice] = field(default_factory=list)
    restored: list[FanDevice] = field(default_factory=list)
    orphaned: list[str] = field(default_factory=list)


def generate_identity(device_id: str) -> str:
    """Derive a stable identity token from a device id.

    The token is the SHA-1 digest of the id laid out as a UUID string,
    so it only changes when the id itself changes.
    """
    digest = hashlib.sha1(device_id.encode("utf-8")).hexdigest()
    return str(uuid.UUID(digest[:32]))


def is_valid_address(address: str) -> bool:
    """Return True if address is an IP literal or an RFC 1123 host name."""
    if not address:
        return False
    try:
        ipaddress.ip_address(address)
        return True
    except ValueError:
        pass

    hostname = address[:-1] if address.endswith(".") else address
    if not hostname or len(hostname) > 253:
        return False
    labels = hostname.split(".")
    # A dotted all-numeric name is a malformed IPv4 address, not a host name
    if all(label.isdigit() for label in labels):
        return False
    return all(_HOSTNAME_LABEL.match(label) for label in labels)


class DeviceRegistry:
    """In-memory catalog of the provisioned fans."""

    def __init__(
        self,
        devices: Iterable[FanDevice],
        identity: Callable[[str], str] = generate_identity,
    ) -> None:
        """Validate and store the device list."""
        self._identity = identity
        self._devices: dict[str, FanDevice] = {}

        for device in devices:
            self._validate(device)
            self._devices[device.id] = device

        _LOGGER.debug("Registered %s fan(s)", len(self._devices))

    @classmethod
    def from_config(
        cls,
        entries: Iterable[Mapping[str, Any]],
        identity: Callable[[str], str] = generate_identity,
    ) -> DeviceRegistry:
        """Build a registry from configuration dictionaries."""
        devices = []
        for entry in entries:
            try:
                device_id = str(entry[CONF_ID])
                devices.append(
                    FanDevice(
                        id=device_id,
                        display_name=str(entry.get(CONF_NAME) or device_id),
                        room=str(entry.get(CONF_ROOM, "")),
                        address=str(entry[CONF_HOST]).strip(),
                        on_payload=str(entry[CONF_ON_CODE]).encode("utf-8"),
                        off_payload=str(entry[CONF_OFF_CODE]).encode("utf-8"),
                    )
                )
            except KeyError as err:
                raise InvalidDeviceConfig(
                    f"Device entry is missing required key {err}"
                ) from err

        return cls(devices, identity=identity)

    def _validate(self, device: FanDevice) -> None:
        """Raise InvalidDeviceConfig if the device breaks an invariant."""
        if not device.id:
            raise InvalidDeviceConfig("Device id must not be empty")
        if device.id in self._devices:
            raise InvalidDeviceConfig(f"Duplicate device id: {device.id}")
        if not device.on_payload:
            raise InvalidDeviceConfig(f"Device {device.id} has an empty on code")
        if not device.off_payload:
            raise InvalidDeviceConfig(f"Device {device.id} has an empty off code")
        if device.on_payload == device.off_payload:
            raise InvalidDeviceConfig(
                f"Device {device.id} uses the same code for on and off"
            )
        if not is_valid_address(device.address):
            raise InvalidDeviceConfig(
                f"Device {device.id} has an invalid address: {device.address!r}"
            )

    def __len__(self) -> int:
        return len(self._devices)

    def __iter__(self) -> Iterator[FanDevice]:
        return iter(self._devices.values())

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices

    def list_devices(self) -> list[FanDevice]:
        """Return all devices in declaration order."""
        return list(self._devices.values())

    def get_device(self, device_id: str) -> FanDevice:
        """Return the device with the given id."""
        try:
            return self._devices[device_id]
        except KeyError:
            raise DeviceNotFound(f"Unknown device: {device_id}") from None

    def derive_identity(self, device: FanDevice) -> str:
        """Return the identity token for a device, based on its id only."""
        return self._identity(device.id)

    def reconcile(self, known_identities: Iterable[str]) -> Reconciliation:
        """Split the registry into new and restored devices.

        Identities in known_identities that match no registered device
        are reported as orphaned so the host can drop them.
        """
        known = set(known_identities)
        result = Reconciliation()
        matched: set[str] = set()

        for device in self._devices.values():
            identity = self.derive_identity(device)
            if identity in known:
                result.restored.append(device)
                matched.add(identity)
            else:
                result.new.append(device)

        result.orphaned = sorted(known - matched)
        return result
