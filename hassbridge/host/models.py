"""Records exchanged with the host platform's device registry and network facade."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


class TransportError(Exception):
    """Delivery failure reported by a network facade."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportTimeout(TransportError):
    """The facade gave up waiting for the peer within the requested deadline."""


def mdns_scan_data(container: dict[str, Any] | None) -> dict[str, Any] | None:
    """Return the `mdnsScanData` block of a discovery payload or scan-data record."""
    if not isinstance(container, dict):
        return None
    scan = container.get("mdnsScanData")
    return scan if isinstance(scan, dict) else None


def txt_records(scan: dict[str, Any] | None) -> list[str] | None:
    """TXT records of an mDNS scan as `key=value` strings, or None when absent."""
    if not isinstance(scan, dict):
        return None
    raw = scan.get("txt")
    if isinstance(raw, dict):
        return [f"{key}={value}" for key, value in raw.items()]
    if isinstance(raw, list):
        return [str(item) for item in raw]
    return None


@dataclass(slots=True)
class RegisteredDevice:
    """A device registered with the host; read-only to the bridge."""

    id: str
    custom_data: dict[str, Any] | None = None
    scan_data: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegisteredDevice":
        custom = data.get("customData")
        scan = data.get("scanData")
        return cls(
            id=str(data.get("id") or ""),
            custom_data=custom if isinstance(custom, dict) else None,
            scan_data=scan if isinstance(scan, dict) else None,
        )

    def discovery_records(self) -> list[str] | None:
        return txt_records(mdns_scan_data(self.scan_data))


@dataclass(slots=True)
class HttpRequestData:
    """Wire request handed to the network facade; built once per send."""

    request_id: str
    device_id: str
    port: int
    path: str
    data: str
    method: str = "POST"
    is_secure: bool = False
    data_type: str = "application/json"
    additional_headers: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class HttpResponseData:
    """Peer reply as reported by the network facade."""

    status_code: int
    body: str | None = None
