"""Peer connection descriptors and their schema revisions.

Home Assistant attaches a "custom data" bag to every device it syncs. The
bag grew fields over time; `classify_descriptor` turns whatever shape
arrives into one explicit revision so callers never probe keys themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping
from urllib.parse import urlparse

DEFAULT_PEER_PORT = 8123


class SchemaRevision(StrEnum):
    """Known custom-data shapes, oldest first."""

    LEGACY = "legacy"  # webhookId, httpPort, httpSSL
    PROXY = "proxy"  # + proxyDeviceId
    INSTANCE = "instance"  # + uuid
    BASE_URL = "base_url"  # + baseUrl


class CorrelationKey(StrEnum):
    """Descriptor field used to tell synced peer instances apart."""

    NONE = "none"
    UUID = "uuid"
    PROXY_DEVICE_ID = "proxy_device_id"
    BASE_URL = "base_url"


_REVISION_ORDER: tuple[SchemaRevision, ...] = (
    SchemaRevision.LEGACY,
    SchemaRevision.PROXY,
    SchemaRevision.INSTANCE,
    SchemaRevision.BASE_URL,
)

# Raw custom-data field behind each correlation key, and the revision that introduced it.
_KEY_FIELDS: dict[CorrelationKey, tuple[str, SchemaRevision]] = {
    CorrelationKey.PROXY_DEVICE_ID: ("proxyDeviceId", SchemaRevision.PROXY),
    CorrelationKey.UUID: ("uuid", SchemaRevision.INSTANCE),
    CorrelationKey.BASE_URL: ("baseUrl", SchemaRevision.BASE_URL),
}


@dataclass(frozen=True, slots=True)
class PeerConnectionDescriptor:
    """Connection details for one synced peer instance."""

    revision: SchemaRevision
    webhook_id: str
    port: int = DEFAULT_PEER_PORT
    secure: bool = False
    proxy_device_id: str | None = None
    uuid: str | None = None
    base_url: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def value_for(self, key: CorrelationKey) -> str | None:
        if key is CorrelationKey.UUID:
            return self.uuid
        if key is CorrelationKey.PROXY_DEVICE_ID:
            return self.proxy_device_id
        if key is CorrelationKey.BASE_URL:
            return self.base_url
        return None

    def supports(self, key: CorrelationKey) -> bool:
        """Whether this descriptor's revision carries the field behind `key`."""
        if key is CorrelationKey.NONE:
            return True
        introduced = _KEY_FIELDS[key][1]
        return _REVISION_ORDER.index(self.revision) >= _REVISION_ORDER.index(introduced)

    def predates(self, key: CorrelationKey) -> bool:
        """True when this descriptor's schema is older than the field behind `key`."""
        return not self.supports(key)

    @property
    def webhook_path(self) -> str:
        return f"/api/webhook/{self.webhook_id}"


def classify_descriptor(custom_data: Mapping[str, Any] | None) -> PeerConnectionDescriptor | None:
    """Classify a custom-data bag; None when it is not a peer descriptor at all."""
    if not isinstance(custom_data, Mapping) or "webhookId" not in custom_data:
        return None

    optional = {
        key: _text_or_none(custom_data.get(name))
        for key, (name, _revision) in _KEY_FIELDS.items()
    }
    revision = SchemaRevision.LEGACY
    for name, introduced in _KEY_FIELDS.values():
        if name in custom_data and _REVISION_ORDER.index(introduced) > _REVISION_ORDER.index(revision):
            revision = introduced

    base_url = optional[CorrelationKey.BASE_URL]
    parsed = urlparse(base_url) if base_url else None

    return PeerConnectionDescriptor(
        revision=revision,
        webhook_id=str(custom_data.get("webhookId") or ""),
        port=_port(custom_data.get("httpPort"), parsed),
        secure=_secure(custom_data.get("httpSSL"), parsed),
        proxy_device_id=optional[CorrelationKey.PROXY_DEVICE_ID],
        uuid=optional[CorrelationKey.UUID],
        base_url=base_url,
        raw=dict(custom_data),
    )


def _text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _port(value: Any, parsed: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    if parsed is not None:
        try:
            if parsed.port:
                return int(parsed.port)
        except ValueError:
            pass
    return DEFAULT_PEER_PORT


def _secure(value: Any, parsed: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is not None:
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    return bool(parsed is not None and parsed.scheme == "https")
