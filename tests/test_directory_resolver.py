from hassbridge.directory import (
    CorrelationKey,
    NotFoundReason,
    directory_peer_version,
    find_proxy_device,
    resolve_descriptor,
)
from hassbridge.host.models import RegisteredDevice


def _device(device_id: str, custom_data: dict | None = None, txt: list[str] | None = None) -> RegisteredDevice:
    scan = {"mdnsScanData": {"txt": txt}} if txt is not None else None
    return RegisteredDevice(id=device_id, custom_data=custom_data, scan_data=scan)


def test_resolve_without_key_returns_first_qualifying_device() -> None:
    devices = [
        _device("light-1", {"note": "no webhook here"}),
        _device("light-2", None),
        _device("hass-1", {"webhookId": "w1", "httpPort": 8123, "uuid": "u-9"}),
        _device("hass-2", {"webhookId": "w2", "httpPort": 8123}),
    ]
    result = resolve_descriptor(devices, CorrelationKey.NONE)

    assert result.ok is True
    assert result.device_id == "hass-1"
    assert result.descriptor.webhook_id == "w1"


def test_resolve_single_device_ignores_other_fields() -> None:
    devices = [_device("hass-1", {"webhookId": "w1", "anything": {"nested": 1}})]
    result = resolve_descriptor(devices)
    assert result.descriptor.webhook_id == "w1"


def test_resolve_picks_matching_value_never_the_other() -> None:
    devices = [
        _device("a", {"webhookId": "wa", "httpPort": 8123, "uuid": "uuid-a"}),
        _device("b", {"webhookId": "wb", "httpPort": 8123, "uuid": "uuid-b"}),
    ]
    first = resolve_descriptor(devices, CorrelationKey.UUID, "uuid-a")
    second = resolve_descriptor(devices, CorrelationKey.UUID, "uuid-b")

    assert first.descriptor.webhook_id == "wa"
    assert second.descriptor.webhook_id == "wb"
    assert first.candidates == ["a", "b"]


def test_resolve_matches_absent_field_with_absent_expected_value() -> None:
    devices = [
        _device("a", {"webhookId": "wa", "httpPort": 8123}),
        _device("b", {"webhookId": "wb", "httpPort": 8123}),
    ]
    first = resolve_descriptor(devices, CorrelationKey.UUID, None)
    again = resolve_descriptor(devices, CorrelationKey.UUID, None)

    assert first.ok and again.ok
    assert first.descriptor.webhook_id == "wa"
    assert again.descriptor == first.descriptor
    assert first.legacy_fallback is False


def test_resolve_keeps_first_registered_duplicate() -> None:
    devices = [
        _device("a", {"webhookId": "first", "proxyDeviceId": "p1"}),
        _device("b", {"webhookId": "second", "proxyDeviceId": "p1"}),
    ]
    result = resolve_descriptor(devices, CorrelationKey.PROXY_DEVICE_ID, "p1")
    assert result.device_id == "a"
    assert result.descriptor.webhook_id == "first"


def test_resolve_reports_no_candidates() -> None:
    result = resolve_descriptor([_device("light", {"foo": "bar"})], CorrelationKey.UUID, "u1")
    assert result.ok is False
    assert result.reason == NotFoundReason.NO_CANDIDATES
    assert resolve_descriptor([]).reason == NotFoundReason.NO_CANDIDATES


def test_resolve_reports_no_match_with_candidates() -> None:
    devices = [
        _device("a", {"webhookId": "wa", "uuid": "uuid-a"}),
        _device("b", {"webhookId": "wb", "uuid": "uuid-b"}),
    ]
    result = resolve_descriptor(devices, CorrelationKey.UUID, "uuid-c")
    assert result.ok is False
    assert result.reason == NotFoundReason.NO_MATCH
    assert result.candidates == ["a", "b"]


def test_resolve_legacy_single_device_fallback() -> None:
    devices = [_device("hass", {"webhookId": "w", "httpPort": 8123, "httpSSL": False})]
    result = resolve_descriptor(devices, CorrelationKey.UUID, "uuid-new")

    assert result.ok is True
    assert result.legacy_fallback is True
    assert result.descriptor.webhook_id == "w"


def test_resolve_no_fallback_when_single_device_carries_the_field() -> None:
    devices = [_device("hass", {"webhookId": "w", "uuid": "uuid-old"})]
    result = resolve_descriptor(devices, CorrelationKey.UUID, "uuid-new")
    assert result.ok is False
    assert result.reason == NotFoundReason.NO_MATCH


def test_resolve_no_fallback_with_several_legacy_devices() -> None:
    devices = [
        _device("a", {"webhookId": "wa"}),
        _device("b", {"webhookId": "wb"}),
    ]
    result = resolve_descriptor(devices, CorrelationKey.PROXY_DEVICE_ID, "p1")
    assert result.reason == NotFoundReason.NO_MATCH


def test_resolve_by_base_url() -> None:
    devices = [
        _device("a", {"webhookId": "wa", "baseUrl": "http://one.local:8123"}),
        _device("b", {"webhookId": "wb", "baseUrl": "http://two.local:8123"}),
    ]
    result = resolve_descriptor(devices, CorrelationKey.BASE_URL, "http://two.local:8123")
    assert result.descriptor.webhook_id == "wb"


def test_peer_version_comes_from_proxy_device_records() -> None:
    devices = [
        _device("light", {"webhookId": "w"}),
        _device("proxy", None, txt=["uuid=u1", "version=2022.3.0"]),
        _device("other", None, txt=["version=1.0"]),
    ]
    assert find_proxy_device(devices).id == "proxy"
    assert directory_peer_version(devices) == "2022.3.0"
    assert directory_peer_version([_device("light", {"webhookId": "w"})]) is None
