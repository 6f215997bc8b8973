"""Helpers to redact sensitive values from intent payloads before logging."""

from __future__ import annotations

from typing import Any

SENSITIVE_KEYS = {
    "webhookid",
    "webhook_id",
    "token",
    "authorization",
    "password",
    "secret",
}


def mask_value(value: Any, *, keep_prefix: int = 2, keep_suffix: int = 2) -> str:
    text = str(value or "")
    if not text:
        return ""
    if len(text) <= keep_prefix + keep_suffix:
        return "*" * len(text)
    return f"{text[:keep_prefix]}{'*' * (len(text) - keep_prefix - keep_suffix)}{text[-keep_suffix:]}"


def redact(value: Any) -> Any:
    """Return a copy of nested dict/list data with sensitive values masked."""
    if isinstance(value, dict):
        output: dict[str, Any] = {}
        for key, item in value.items():
            if str(key).strip().lower() in SENSITIVE_KEYS:
                output[key] = mask_value(item)
            else:
                output[key] = redact(item)
        return output
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def redact_path(path: str) -> str:
    """Mask the webhook id segment of `/api/webhook/<id>` paths."""
    prefix = "/api/webhook/"
    if not path.startswith(prefix):
        return path
    return prefix + mask_value(path[len(prefix):])
