"""Host platform collaborators: device registry snapshot and network facade."""

from hassbridge.host.base import DeviceManager, DeviceManagerProvider
from hassbridge.host.http_manager import HttpxDeviceManager
from hassbridge.host.mock_manager import MockDeviceManager
from hassbridge.host.models import (
    HttpRequestData,
    HttpResponseData,
    RegisteredDevice,
    TransportError,
    TransportTimeout,
    mdns_scan_data,
    txt_records,
)

__all__ = [
    "DeviceManager",
    "DeviceManagerProvider",
    "HttpxDeviceManager",
    "MockDeviceManager",
    "HttpRequestData",
    "HttpResponseData",
    "RegisteredDevice",
    "TransportError",
    "TransportTimeout",
    "mdns_scan_data",
    "txt_records",
]
