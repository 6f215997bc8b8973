"""Error kinds surfaced to the host platform."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Handler error codes understood by the host runtime."""

    INVALID_REQUEST = "invalidRequest"
    DEVICE_NOT_IDENTIFIED = "deviceNotIdentified"
    DEVICE_VERIFICATION_FAILED = "deviceVerificationFailed"
    GENERIC_ERROR = "genericError"


@dataclass(frozen=True, slots=True)
class BridgeFailure:
    """Failure value returned by resolution and forwarding steps."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)


class HandlerError(Exception):
    """Typed handler failure raised back to the host for one intent request."""

    def __init__(self, request_id: str, error_code: ErrorCode | str, message: str = "") -> None:
        super().__init__(message or str(error_code))
        self.request_id = str(request_id or "")
        self.error_code = ErrorCode(error_code)
        self.message = message

    @classmethod
    def from_failure(cls, request_id: str, failure: BridgeFailure) -> "HandlerError":
        return cls(request_id, failure.code, failure.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestId": self.request_id,
            "errorCode": str(self.error_code),
            "debugString": self.message,
        }

    def __repr__(self) -> str:
        return f"HandlerError({self.request_id!r}, {str(self.error_code)!r}, {self.message!r})"
