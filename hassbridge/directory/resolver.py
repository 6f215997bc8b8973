"""Match an intent request to one registered peer instance."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from loguru import logger

from hassbridge.directory.descriptor import (
    CorrelationKey,
    PeerConnectionDescriptor,
    classify_descriptor,
)
from hassbridge.host.models import RegisteredDevice
from hassbridge.protocol.version import VERSION_RECORD_KEY, extract_version

_MISSING = object()


class NotFoundReason(StrEnum):
    NO_CANDIDATES = "no_candidates"
    NO_MATCH = "no_match"


@dataclass(slots=True)
class Resolution:
    """Outcome of a directory lookup; exactly one of `descriptor`/`reason` is set."""

    descriptor: PeerConnectionDescriptor | None = None
    device_id: str = ""
    reason: NotFoundReason | None = None
    candidates: list[str] = field(default_factory=list)
    legacy_fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.descriptor is not None


def resolve_descriptor(
    devices: Iterable[RegisteredDevice],
    key: CorrelationKey = CorrelationKey.NONE,
    expected: str | None = None,
    *,
    log_prefix: str = "",
) -> Resolution:
    """Find the descriptor whose `key` field equals `expected`.

    Devices without a webhook id never qualify. With `CorrelationKey.NONE`
    the first qualifying device wins. Otherwise the first descriptor seen for
    each observed value is kept; an absent field and an absent `expected`
    both map to the same sentinel so they match each other.
    """
    candidates: list[tuple[RegisteredDevice, PeerConnectionDescriptor]] = []
    grouped: dict[object, tuple[RegisteredDevice, PeerConnectionDescriptor]] = {}

    scanned: list[str] = []
    for device in devices:
        scanned.append(device.id)
        descriptor = classify_descriptor(device.custom_data)
        if descriptor is None:
            continue
        candidates.append((device, descriptor))
        if key is CorrelationKey.NONE:
            break
        value = descriptor.value_for(key)
        group = value if value is not None else _MISSING
        if group in grouped:
            logger.warning(
                f"{log_prefix} Ignoring duplicate descriptor on device {device.id} "
                f"for {key}={value!r}; keeping device {grouped[group][0].id}"
            )
            continue
        grouped[group] = (device, descriptor)

    candidate_ids = [device.id for device, _ in candidates]
    if not candidates:
        logger.warning(f"{log_prefix} No registered device carries peer connection info; devices={scanned}")
        return Resolution(reason=NotFoundReason.NO_CANDIDATES)

    if key is CorrelationKey.NONE:
        device, descriptor = candidates[0]
        return Resolution(descriptor=descriptor, device_id=device.id, candidates=candidate_ids)

    wanted = str(expected).strip() if expected is not None else ""
    match = grouped.get(wanted or _MISSING)
    if match is not None:
        device, descriptor = match
        return Resolution(descriptor=descriptor, device_id=device.id, candidates=candidate_ids)

    if len(candidates) == 1 and candidates[0][1].predates(key):
        device, descriptor = candidates[0]
        logger.warning(
            f"{log_prefix} Descriptor on device {device.id} predates {key} "
            f"({descriptor.revision}); using the only registered instance"
        )
        return Resolution(
            descriptor=descriptor,
            device_id=device.id,
            candidates=candidate_ids,
            legacy_fallback=True,
        )

    logger.warning(
        f"{log_prefix} No descriptor with {key}={expected!r}; candidates={candidate_ids}"
    )
    return Resolution(reason=NotFoundReason.NO_MATCH, candidates=candidate_ids)


def find_proxy_device(devices: Iterable[RegisteredDevice]) -> RegisteredDevice | None:
    """The registered device that carries discovery records, if any."""
    found: RegisteredDevice | None = None
    for device in devices:
        if device.discovery_records() is None:
            continue
        if found is None:
            found = device
        else:
            logger.debug(f"Extra device {device.id} carries discovery records; using {found.id}")
    return found


def directory_peer_version(
    devices: Iterable[RegisteredDevice],
    *,
    key: str = VERSION_RECORD_KEY,
) -> str | None:
    """Peer version advertised in the proxy device's discovery records."""
    proxy = find_proxy_device(devices)
    if proxy is None:
        return None
    return extract_version(proxy.discovery_records(), key=key)
