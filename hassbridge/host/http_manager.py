"""Standalone network facade that delivers webhook requests with httpx."""

from __future__ import annotations

from typing import Any, Iterable

import httpx
from loguru import logger

from hassbridge.host.base import DeviceManager
from hassbridge.host.models import (
    HttpRequestData,
    HttpResponseData,
    RegisteredDevice,
    TransportError,
    TransportTimeout,
)
from hassbridge.utils.redaction import redact_path


class HttpxDeviceManager(DeviceManager):
    """Delivers requests to peer hosts looked up by target device id.

    Used when running outside the host platform (replays, local debugging).
    Requests without a target device id (identify) go to `default_host`.
    """

    name = "httpx"

    def __init__(
        self,
        *,
        devices: Iterable[RegisteredDevice | dict[str, Any]] = (),
        hosts: dict[str, str] | None = None,
        default_host: str = "",
        verify_tls: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._devices = [
            d if isinstance(d, RegisteredDevice) else RegisteredDevice.from_dict(d)
            for d in devices
        ]
        self.hosts = {str(k): str(v).strip() for k, v in (hosts or {}).items()}
        self.default_host = str(default_host or "").strip()
        self.verify_tls = verify_tls
        self._transport = transport

    def get_registered_devices(self) -> list[RegisteredDevice]:
        return list(self._devices)

    async def send(
        self,
        command: HttpRequestData,
        *,
        timeout_seconds: float | None = None,
    ) -> HttpResponseData:
        url = self._url_for(command)
        headers = {"Content-Type": command.data_type, **command.additional_headers}
        try:
            async with httpx.AsyncClient(
                timeout=timeout_seconds,
                verify=self.verify_tls,
                transport=self._transport,
            ) as client:
                resp = await client.request(
                    command.method,
                    url,
                    content=command.data.encode("utf-8"),
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            raise TransportTimeout("Timeout") from e
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        if not resp.is_success:
            logger.debug(f"Peer answered {resp.status_code} for {redact_path(command.path)}")
            raise TransportError(
                f"HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        return HttpResponseData(status_code=resp.status_code, body=resp.text)

    def _url_for(self, command: HttpRequestData) -> str:
        host = self.hosts.get(command.device_id) or self.default_host
        if not host:
            raise TransportError(f"no peer host known for device {command.device_id!r}")
        scheme = "https" if command.is_secure else "http"
        return f"{scheme}://{host}:{command.port}{command.path}"
