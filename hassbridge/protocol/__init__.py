"""Intent request envelopes, error kinds and peer version rules."""

from hassbridge.protocol.errors import BridgeFailure, ErrorCode, HandlerError
from hassbridge.protocol.intents import IntentKind, IntentRequest, make_response
from hassbridge.protocol.version import (
    extract_record,
    extract_version,
    is_supported,
    parse_major_minor,
    parse_requirement,
)

__all__ = [
    "BridgeFailure",
    "ErrorCode",
    "HandlerError",
    "IntentKind",
    "IntentRequest",
    "make_response",
    "extract_record",
    "extract_version",
    "is_supported",
    "parse_major_minor",
    "parse_requirement",
]
