import pytest

from hassbridge.protocol import ErrorCode, HandlerError, IntentKind, IntentRequest, make_response
from hassbridge.utils.redaction import redact, redact_path


def test_intent_request_from_dict() -> None:
    raw = {
        "requestId": "abc-123",
        "inputs": [{"intent": "action.devices.EXECUTE", "payload": {"commands": [{"devices": [{"id": "d1"}]}]}}],
        "devices": [{"id": "d1"}, "junk"],
    }
    request = IntentRequest.from_dict(raw)

    assert request.kind is IntentKind.EXECUTE
    assert request.short_name == "EXECUTE"
    assert request.devices == [{"id": "d1"}]
    assert request.payload_devices() == [{"id": "d1"}]
    assert request.raw is raw


def test_intent_request_validation() -> None:
    with pytest.raises(ValueError, match="requestId"):
        IntentRequest.from_dict({"inputs": [{"intent": "action.devices.QUERY"}]})
    with pytest.raises(ValueError, match="intent"):
        IntentRequest.from_dict({"requestId": "r", "inputs": [{"payload": {}}]})
    unknown = IntentRequest.from_dict({"requestId": "r", "inputs": [{"intent": "custom.THING"}]})
    assert unknown.kind is None
    assert unknown.payload == {}


def test_make_response_keeps_identifying_fields() -> None:
    request = IntentRequest.from_dict({"requestId": "r-9", "inputs": [{"intent": "action.devices.UPDATE"}]})
    assert make_response(request) == {"intent": "action.devices.UPDATE", "requestId": "r-9", "payload": {}}


def test_handler_error_serializes_for_host() -> None:
    err = HandlerError("r-1", "deviceVerificationFailed", "uuid mismatch")
    assert err.error_code is ErrorCode.DEVICE_VERIFICATION_FAILED
    assert err.to_dict() == {
        "requestId": "r-1",
        "errorCode": "deviceVerificationFailed",
        "debugString": "uuid mismatch",
    }


def test_redaction_masks_webhook_ids() -> None:
    data = {"customData": {"webhookId": "abcdef123456", "httpPort": 8123}, "list": [{"webhookId": "xy"}]}
    masked = redact(data)

    assert masked["customData"]["webhookId"] == "ab********56"
    assert masked["customData"]["httpPort"] == 8123
    assert masked["list"][0]["webhookId"] == "**"
    assert data["customData"]["webhookId"] == "abcdef123456"
    assert redact_path("/api/webhook/abcdef123456") == "/api/webhook/ab********56"
    assert redact_path("/other") == "/other"
