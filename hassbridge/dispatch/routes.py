"""Per-intent resolution strategies and the immutable dispatch table."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

from hassbridge.config.schema import DiscoveryConfig, GatesConfig
from hassbridge.directory.descriptor import CorrelationKey, PeerConnectionDescriptor
from hassbridge.directory.resolver import (
    NotFoundReason,
    Resolution,
    directory_peer_version,
    resolve_descriptor,
)
from hassbridge.forwarding.forwarder import ForwardTarget, log_prefix
from hassbridge.host.models import RegisteredDevice, mdns_scan_data, txt_records
from hassbridge.protocol.errors import BridgeFailure, ErrorCode
from hassbridge.protocol.intents import IntentKind, IntentRequest
from hassbridge.protocol.version import extract_record, parse_requirement


@dataclass(frozen=True, slots=True)
class RouteSettings:
    """Discovery conventions the strategies need."""

    service_suffix: str = "._home-assistant._tcp.local"
    version_key: str = "version"
    uuid_key: str = "uuid"

    @classmethod
    def from_config(cls, config: DiscoveryConfig) -> "RouteSettings":
        return cls(
            service_suffix=config.service_suffix,
            version_key=config.version_key,
            uuid_key=config.uuid_key,
        )


@dataclass(slots=True)
class ForwardPlan:
    """Where a request goes and which peer version it talks to, or why it cannot go."""

    target: ForwardTarget | None = None
    peer_version: str | None = None
    failure: BridgeFailure | None = None


Strategy = Callable[[IntentRequest, list[RegisteredDevice], RouteSettings], ForwardPlan]


@dataclass(frozen=True, slots=True)
class IntentRoute:
    kind: IntentKind
    strategy: Strategy | None = None
    required_version: tuple[int, int] | None = None

    @property
    def forwarded(self) -> bool:
        return self.strategy is not None


def _failure(code: ErrorCode, message: str, **details: object) -> ForwardPlan:
    return ForwardPlan(failure=BridgeFailure(code=code, message=message, details=dict(details)))


def _not_found(resolution: Resolution, *, no_match: ErrorCode, message: str) -> ForwardPlan:
    if resolution.reason is NotFoundReason.NO_CANDIDATES:
        return _failure(
            ErrorCode.DEVICE_NOT_IDENTIFIED,
            "Unable to find HASS connection info.",
            candidates=resolution.candidates,
        )
    return _failure(no_match, message, candidates=resolution.candidates)


def verify_instance(descriptor: PeerConnectionDescriptor, discovered_uuid: str | None) -> BridgeFailure | None:
    """A descriptor claiming a different instance than the one discovered is rejected."""
    if discovered_uuid and descriptor.uuid and descriptor.uuid != discovered_uuid:
        return BridgeFailure(
            code=ErrorCode.DEVICE_VERIFICATION_FAILED,
            message=f"Instance mismatch: discovered {discovered_uuid}, synced {descriptor.uuid}",
        )
    return None


def plan_identify(
    request: IntentRequest,
    devices: list[RegisteredDevice],
    settings: RouteSettings,
) -> ForwardPlan:
    scan = mdns_scan_data(request.payload_device())
    if scan is None:
        return _failure(ErrorCode.INVALID_REQUEST, "Missing mDNS scan data")
    additionals = scan.get("additionals")
    if not isinstance(additionals, list) or not additionals:
        return _failure(ErrorCode.INVALID_REQUEST, "No usable mDNS scan data")
    first = additionals[0] if isinstance(additionals[0], dict) else {}
    name = str(first.get("name") or "")
    if not name.endswith(settings.service_suffix):
        return _failure(ErrorCode.INVALID_REQUEST, f"Not a Home Assistant instance: {name!r}")

    records = txt_records(scan)
    version = extract_record(records, settings.version_key)
    instance = (extract_record(records, settings.uuid_key) or "").strip() or None
    resolution = resolve_descriptor(
        devices,
        CorrelationKey.UUID,
        instance,
        log_prefix=log_prefix(request, version),
    )
    if not resolution.ok:
        plan = _not_found(
            resolution,
            no_match=ErrorCode.DEVICE_VERIFICATION_FAILED,
            message=f"No synced instance with uuid {instance!r}",
        )
        plan.peer_version = version
        return plan

    mismatch = verify_instance(resolution.descriptor, instance)
    if mismatch is not None:
        return ForwardPlan(peer_version=version, failure=mismatch)
    # Not registered with the host yet, so there is no device id to target.
    return ForwardPlan(target=ForwardTarget("", resolution.descriptor), peer_version=version)


def _plan_by_proxy_id(
    request: IntentRequest,
    devices: list[RegisteredDevice],
    settings: RouteSettings,
    *,
    target_proxy: bool,
) -> ForwardPlan:
    device_id = str(request.payload_device().get("id") or "").strip() or None
    version = directory_peer_version(devices, key=settings.version_key)
    resolution = resolve_descriptor(
        devices,
        CorrelationKey.PROXY_DEVICE_ID,
        device_id,
        log_prefix=log_prefix(request, version),
    )
    if not resolution.ok:
        plan = _not_found(
            resolution,
            no_match=ErrorCode.DEVICE_NOT_IDENTIFIED,
            message=f"No synced instance for proxy device {device_id!r}",
        )
        plan.peer_version = version
        return plan
    descriptor = resolution.descriptor
    target_id = (descriptor.proxy_device_id if target_proxy else None) or device_id or ""
    return ForwardPlan(target=ForwardTarget(target_id, descriptor), peer_version=version)


def plan_reachable_devices(
    request: IntentRequest,
    devices: list[RegisteredDevice],
    settings: RouteSettings,
) -> ForwardPlan:
    return _plan_by_proxy_id(request, devices, settings, target_proxy=True)


def plan_proxy_selected(
    request: IntentRequest,
    devices: list[RegisteredDevice],
    settings: RouteSettings,
) -> ForwardPlan:
    return _plan_by_proxy_id(request, devices, settings, target_proxy=False)


def plan_payload_devices(
    request: IntentRequest,
    devices: list[RegisteredDevice],
    settings: RouteSettings,
) -> ForwardPlan:
    """Query/execute: the payload's own devices carry their instance's descriptor."""
    listed = [RegisteredDevice.from_dict(d) for d in request.payload_devices()]
    version = directory_peer_version(devices, key=settings.version_key)
    resolution = resolve_descriptor(listed, log_prefix=log_prefix(request, version))
    if not resolution.ok:
        plan = _not_found(
            resolution,
            no_match=ErrorCode.DEVICE_NOT_IDENTIFIED,
            message="Unable to find HASS connection info.",
        )
        plan.peer_version = version
        return plan
    target_id = listed[0].id
    return ForwardPlan(target=ForwardTarget(target_id, resolution.descriptor), peer_version=version)


ACKNOWLEDGED_ONLY: tuple[IntentKind, ...] = (
    IntentKind.INDICATE,
    IntentKind.PARSE_NOTIFICATION,
    IntentKind.PROVISION,
    IntentKind.REGISTER,
    IntentKind.UNPROVISION,
    IntentKind.UPDATE,
)


def build_dispatch_table(gates: GatesConfig | None = None) -> Mapping[IntentKind, IntentRoute]:
    """Read-only mapping from intent kind to its route."""
    gates = gates or GatesConfig()
    routes = [
        IntentRoute(IntentKind.IDENTIFY, plan_identify),
        IntentRoute(IntentKind.REACHABLE_DEVICES, plan_reachable_devices),
        IntentRoute(IntentKind.QUERY, plan_payload_devices),
        IntentRoute(IntentKind.EXECUTE, plan_payload_devices),
        IntentRoute(
            IntentKind.PROXY_SELECTED,
            plan_proxy_selected,
            required_version=parse_requirement(gates.proxy_selected_min_version),
        ),
        *(IntentRoute(kind) for kind in ACKNOWLEDGED_ONLY),
    ]
    return MappingProxyType({route.kind: route for route in routes})
