"""In-memory device manager used for local replay and tests."""

from __future__ import annotations

from collections import deque
from typing import Any, Iterable

from hassbridge.host.base import DeviceManager
from hassbridge.host.models import (
    HttpRequestData,
    HttpResponseData,
    RegisteredDevice,
    TransportError,
)

ScriptedReply = HttpResponseData | Exception


class MockDeviceManager(DeviceManager):
    """Serves a fixed directory and replies to sends from a scripted queue."""

    name = "mock"

    def __init__(
        self,
        devices: Iterable[RegisteredDevice | dict[str, Any]] = (),
        responses: Iterable[ScriptedReply] = (),
    ) -> None:
        self._devices = [
            d if isinstance(d, RegisteredDevice) else RegisteredDevice.from_dict(d)
            for d in devices
        ]
        self._replies: deque[ScriptedReply] = deque(responses)
        self.sent: list[HttpRequestData] = []
        self.timeouts: list[float | None] = []

    def get_registered_devices(self) -> list[RegisteredDevice]:
        return list(self._devices)

    async def send(
        self,
        command: HttpRequestData,
        *,
        timeout_seconds: float | None = None,
    ) -> HttpResponseData:
        self.sent.append(command)
        self.timeouts.append(timeout_seconds)
        if not self._replies:
            raise TransportError("no scripted response left")
        reply = self._replies.popleft()
        if isinstance(reply, Exception):
            raise reply
        return reply

    def script(self, *responses: ScriptedReply) -> None:
        """Queue more replies for upcoming sends."""
        self._replies.extend(responses)

    async def provide(self) -> "MockDeviceManager":
        """`DeviceManagerProvider` compatible accessor."""
        return self
