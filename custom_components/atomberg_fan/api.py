"""Datagram controller for Atomberg fans."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
import logging
import socket

from .const import CONTROL_PORT, FanState
from .registry import FanDevice

_LOGGER = logging.getLogger(__name__)

DatagramSender = Callable[[str, int, bytes], Awaitable[None]]


@dataclass(frozen=True)
class SendResult:
    """Outcome of a single command transmission."""

    device_id: str
    host: str
    port: int
    payload: bytes = field(repr=False)
    error: str | None = None

    @property
    def success(self) -> bool:
        """Return True if the datagram was handed to the OS."""
        return self.error is None


async def async_send_datagram(host: str, port: int, payload: bytes) -> None:
    """Send payload to host:port as one UDP datagram.

    A fresh socket is opened for every call and closed once the send
    returns or fails. Errors are raised as OSError.
    """
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    family, sock_type, proto, _, address = infos[0]

    with socket.socket(family, sock_type, proto) as sock:
        sock.setblocking(False)
        await loop.sock_sendto(sock, payload, address)


class AtombergFanController:
    """Tracks the commanded power state of one fan and actuates it."""

    def __init__(
        self,
        device: FanDevice,
        initial_state: FanState = FanState.OFF,
        port: int = CONTROL_PORT,
        sender: DatagramSender = async_send_datagram,
    ) -> None:
        """Initialize the controller.

        Nothing is sent to the fan here; the physical device keeps
        whatever state it is in until the first set_active call.
        """
        self._device = device
        self._port = port
        self._sender = sender
        self._active = FanState(initial_state)
        self._state_callbacks: list[Callable[[], None]] = []
        self._pending: set[asyncio.Task[SendResult]] = set()

    def register_state_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback to be called when state changes."""
        if callback not in self._state_callbacks:
            self._state_callbacks.append(callback)

    def unregister_state_callback(self, callback: Callable[[], None]) -> None:
        """Unregister a state callback."""
        if callback in self._state_callbacks:
            self._state_callbacks.remove(callback)

    def _notify_state_change(self) -> None:
        """Notify all registered callbacks of a state change."""
        for callback in self._state_callbacks:
            try:
                callback()
            except Exception as err:
                _LOGGER.debug("Error in state callback: %s", err)

    @property
    def device(self) -> FanDevice:
        """Return the controlled device."""
        return self._device

    @property
    def port(self) -> int:
        """Return the control port."""
        return self._port

    @property
    def active(self) -> FanState:
        """Return the last commanded power state."""
        return self._active

    def get_active(self) -> FanState:
        """Return the last commanded power state."""
        _LOGGER.debug("Get active for %s -> %s", self._device.id, self._active.name)
        return self._active

    def set_active(self, target: FanState | int | bool) -> asyncio.Task[SendResult]:
        """Command the fan into the target state.

        The state is updated right away and the datagram is sent in a
        background task, which is returned so callers can observe the
        outcome. The task never raises; failures end up in the result.
        Must be called from a running event loop.
        """
        state = FanState(int(target))
        payload = self._device.payload_for(state is FanState.ON)

        self._active = state
        _LOGGER.info(
            "Set active for %s (%s) to %s",
            self._device.display_name,
            self._device.address,
            state.name,
        )

        task = asyncio.create_task(self._async_send(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

        self._notify_state_change()
        return task

    async def async_set_active(self, target: FanState | int | bool) -> SendResult:
        """Command the fan and wait for the send attempt to finish."""
        return await self.set_active(target)

    async def _async_send(self, payload: bytes) -> SendResult:
        """Transmit a payload and report the outcome."""
        host = self._device.address
        try:
            await self._sender(host, self._port, payload)
        except OSError as err:
            _LOGGER.error(
                "Failed to send command to %s at %s:%s: %s",
                self._device.id,
                host,
                self._port,
                err,
            )
            return SendResult(
                device_id=self._device.id,
                host=host,
                port=self._port,
                payload=payload,
                error=str(err) or type(err).__name__,
            )

        _LOGGER.debug(
            "Sent %s byte command to %s:%s", len(payload), host, self._port
        )
        return SendResult(
            device_id=self._device.id, host=host, port=self._port, payload=payload
        )
