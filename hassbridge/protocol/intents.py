"""Inbound intent requests and the minimal responses built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class IntentKind(StrEnum):
    """Intent tags delivered by the host runtime."""

    IDENTIFY = "action.devices.IDENTIFY"
    REACHABLE_DEVICES = "action.devices.REACHABLE_DEVICES"
    QUERY = "action.devices.QUERY"
    EXECUTE = "action.devices.EXECUTE"
    PROXY_SELECTED = "action.devices.PROXY_SELECTED"
    INDICATE = "action.devices.INDICATE"
    PARSE_NOTIFICATION = "action.devices.PARSE_NOTIFICATION"
    PROVISION = "action.devices.PROVISION"
    REGISTER = "action.devices.REGISTER"
    UNPROVISION = "action.devices.UNPROVISION"
    UPDATE = "action.devices.UPDATE"


@dataclass(slots=True)
class IntentRequest:
    """One intent request as delivered by the host, plus parsed accessors."""

    request_id: str
    intent: str
    payload: dict[str, Any] = field(default_factory=dict)
    devices: list[dict[str, Any]] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntentRequest":
        """Create a request from the host's raw dict; `raw` is kept verbatim for forwarding."""
        if not isinstance(data, dict):
            raise ValueError("intent request must be an object")
        request_id = str(data.get("requestId") or "").strip()
        if not request_id:
            raise ValueError("requestId is required")

        inputs = data.get("inputs")
        first = inputs[0] if isinstance(inputs, list) and inputs else None
        if not isinstance(first, dict):
            raise ValueError("inputs[0] is required")
        intent = str(first.get("intent") or "").strip()
        if not intent:
            raise ValueError("inputs[0].intent is required")

        payload = first.get("payload", {})
        if not isinstance(payload, dict):
            payload = {}
        devices = data.get("devices", [])
        if not isinstance(devices, list):
            devices = []

        return cls(
            request_id=request_id,
            intent=intent,
            payload=payload,
            devices=[d for d in devices if isinstance(d, dict)],
            raw=data,
        )

    @property
    def kind(self) -> IntentKind | None:
        try:
            return IntentKind(self.intent)
        except ValueError:
            return None

    @property
    def short_name(self) -> str:
        """`IDENTIFY` for `action.devices.IDENTIFY`; used in log prefixes."""
        return self.intent.rsplit(".", 1)[-1] or self.intent

    def payload_device(self) -> dict[str, Any]:
        device = self.payload.get("device")
        return device if isinstance(device, dict) else {}

    def payload_devices(self) -> list[dict[str, Any]]:
        """Devices named by a query payload or by the first execute command."""
        devices = self.payload.get("devices")
        if not isinstance(devices, list):
            commands = self.payload.get("commands")
            first = commands[0] if isinstance(commands, list) and commands else None
            devices = first.get("devices") if isinstance(first, dict) else None
        if not isinstance(devices, list):
            return []
        return [d for d in devices if isinstance(d, dict)]


def make_response(request: IntentRequest, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Minimal response carrying the request's identifying fields."""
    return {
        "intent": request.intent,
        "requestId": request.request_id,
        "payload": dict(payload or {}),
    }
