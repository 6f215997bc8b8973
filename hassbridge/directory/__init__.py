"""Device directory lookup for synced peer instances."""

from hassbridge.directory.descriptor import (
    CorrelationKey,
    PeerConnectionDescriptor,
    SchemaRevision,
    classify_descriptor,
)
from hassbridge.directory.resolver import (
    NotFoundReason,
    Resolution,
    directory_peer_version,
    find_proxy_device,
    resolve_descriptor,
)

__all__ = [
    "CorrelationKey",
    "PeerConnectionDescriptor",
    "SchemaRevision",
    "classify_descriptor",
    "NotFoundReason",
    "Resolution",
    "directory_peer_version",
    "find_proxy_device",
    "resolve_descriptor",
]
