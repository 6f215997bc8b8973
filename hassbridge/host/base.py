"""Contract for the host platform's device registry and network facade."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from hassbridge.host.models import HttpRequestData, HttpResponseData, RegisteredDevice


class DeviceManager(ABC):
    """Host handle used by the bridge for one intent request."""

    name: str = "base"

    @abstractmethod
    def get_registered_devices(self) -> list[RegisteredDevice]:
        """Snapshot of devices currently registered with the host."""

    @abstractmethod
    async def send(
        self,
        command: HttpRequestData,
        *,
        timeout_seconds: float | None = None,
    ) -> HttpResponseData:
        """Deliver `command` to its device.

        The facade owns the deadline: it must raise `TransportTimeout` once
        `timeout_seconds` elapses and `TransportError` for any other delivery
        failure, including non-2xx statuses.
        """


DeviceManagerProvider = Callable[[], Awaitable[DeviceManager]]
