"""Webhook forwarding with version gating and a single retry for unregistered webhooks."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Awaitable, Callable

from loguru import logger

from hassbridge import __version__
from hassbridge.config.schema import Config
from hassbridge.directory.descriptor import PeerConnectionDescriptor
from hassbridge.host.base import DeviceManager
from hassbridge.host.models import (
    HttpRequestData,
    HttpResponseData,
    TransportError,
    TransportTimeout,
)
from hassbridge.protocol.errors import BridgeFailure, ErrorCode
from hassbridge.protocol.intents import IntentRequest, make_response
from hassbridge.protocol.version import is_supported
from hassbridge.utils.helpers import short_id, truncate_string
from hassbridge.utils.redaction import redact, redact_path

Sleeper = Callable[[float], Awaitable[Any]]

MAX_SENDS = 2


class ForwardState(StrEnum):
    GATE_CHECK = "gate_check"
    SEND = "send"
    RETRY_WAIT = "retry_wait"
    PARSE = "parse"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ForwardTarget:
    """Resolved destination for one request; never reused across requests."""

    device_id: str
    descriptor: PeerConnectionDescriptor


@dataclass(slots=True)
class ForwardOutcome:
    state: ForwardState
    response: dict[str, Any] | None = None
    failure: BridgeFailure | None = None
    sends: int = 0
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.state is ForwardState.DONE


def log_prefix(request: IntentRequest, peer_version: str | None = None) -> str:
    """Correlation prefix that tells concurrent requests apart in shared logs."""
    parts = [request.short_name, short_id(request.request_id)]
    if peer_version:
        parts.append(f"v{peer_version}")
    return f"[{' '.join(parts)}]"


class Forwarder:
    """Sends intent requests to a peer webhook and normalizes the reply."""

    def __init__(
        self,
        *,
        bridge_version: str = __version__,
        version_header: str = "HA-Cloud-Version",
        retry_delay_seconds: float = 3.0,
        timeout_seconds: float | None = 10.0,
        content_type: str = "application/json",
        sleep: Sleeper | None = None,
    ) -> None:
        self.bridge_version = str(bridge_version or "")
        self.version_header = str(version_header or "").strip()
        self.retry_delay_seconds = max(0.0, float(retry_delay_seconds))
        self.timeout_seconds = float(timeout_seconds) if timeout_seconds else None
        self.content_type = content_type
        self._sleep = sleep or asyncio.sleep

    @classmethod
    def from_config(cls, config: Config, *, sleep: Sleeper | None = None) -> "Forwarder":
        return cls(
            bridge_version=config.bridge.version,
            version_header=config.bridge.version_header,
            retry_delay_seconds=config.forwarding.retry_delay_seconds,
            timeout_seconds=config.forwarding.timeout_seconds,
            content_type=config.forwarding.content_type,
            sleep=sleep,
        )

    def build_command(self, request: IntentRequest, target: ForwardTarget) -> HttpRequestData:
        headers: dict[str, str] = {}
        if self.version_header and self.bridge_version:
            headers[self.version_header] = self.bridge_version
        return HttpRequestData(
            request_id=request.request_id,
            device_id=target.device_id,
            port=target.descriptor.port,
            path=target.descriptor.webhook_path,
            data=json.dumps(request.raw),
            is_secure=target.descriptor.secure,
            data_type=self.content_type,
            additional_headers=headers,
        )

    def check_gate(
        self,
        request: IntentRequest,
        *,
        required_version: Sequence[int] | None,
        peer_version: str | None,
    ) -> ForwardOutcome | None:
        """Empty-payload outcome when the peer is below `required_version`, else None."""
        if required_version is None or is_supported(peer_version, required_version):
            return None
        prefix = log_prefix(request, peer_version)
        minimum = ".".join(str(p) for p in required_version)
        logger.info(
            f"{prefix} Peer version {peer_version or 'unknown'} is below {minimum}; "
            "answering without forwarding"
        )
        self._transition(prefix, ForwardState.GATE_CHECK, ForwardState.DONE)
        return ForwardOutcome(
            state=ForwardState.DONE,
            response=make_response(request),
            skipped=True,
        )

    async def forward(
        self,
        manager: DeviceManager,
        request: IntentRequest,
        target: ForwardTarget,
        *,
        required_version: Sequence[int] | None = None,
        peer_version: str | None = None,
    ) -> ForwardOutcome:
        prefix = log_prefix(request, peer_version)

        skipped = self.check_gate(request, required_version=required_version, peer_version=peer_version)
        if skipped is not None:
            return skipped

        state = ForwardState.SEND
        sends = 0
        resp: HttpResponseData | None = None
        while state is ForwardState.SEND:
            command = self.build_command(request, target)
            sends += 1
            logger.info(
                f"{prefix} Sending attempt {sends}/{MAX_SENDS} to device "
                f"{target.device_id or '-'} port={command.port} secure={command.is_secure} "
                f"path={redact_path(command.path)}"
            )
            try:
                resp = await manager.send(command, timeout_seconds=self.timeout_seconds)
            except TransportTimeout:
                return self._fail(prefix, state, ErrorCode.GENERIC_ERROR, "Timeout", sends)
            except TransportError as e:
                return self._fail(
                    prefix, state, ErrorCode.GENERIC_ERROR, str(e) or type(e).__name__, sends
                )

            logger.debug(
                f"{prefix} Raw response status={resp.status_code} "
                f"body={truncate_string(resp.body or '', 500)!r}"
            )
            if not 200 <= resp.status_code < 300:
                return self._fail(
                    prefix, state, ErrorCode.GENERIC_ERROR,
                    f"Unexpected HTTP status {resp.status_code}", sends,
                )
            if resp.status_code == 200 and not resp.body:
                if sends >= MAX_SENDS:
                    return self._fail(
                        prefix, state, ErrorCode.DEVICE_NOT_IDENTIFIED,
                        "Webhook did not answer; instance not registered", sends,
                    )
                logger.warning(
                    f"{prefix} Empty reply, webhook may not be registered yet; "
                    f"retrying in {self.retry_delay_seconds:g}s"
                )
                self._transition(prefix, state, ForwardState.RETRY_WAIT)
                await self._sleep(self.retry_delay_seconds)
                self._transition(prefix, ForwardState.RETRY_WAIT, ForwardState.SEND)
                continue
            self._transition(prefix, state, ForwardState.PARSE)
            state = ForwardState.PARSE

        body = resp.body if resp is not None else None
        try:
            parsed = json.loads(body or "")
        except json.JSONDecodeError as e:
            return self._fail(
                prefix, state, ErrorCode.GENERIC_ERROR,
                f"Unable to parse response body ({e.msg}): {body!r}", sends,
            )
        if not isinstance(parsed, dict):
            return self._fail(
                prefix, state, ErrorCode.GENERIC_ERROR,
                f"Response body is not an object: {body!r}", sends,
            )

        # The host routes replies by this field.
        parsed["intent"] = request.intent
        parsed.setdefault("requestId", request.request_id)

        self._transition(prefix, state, ForwardState.DONE)
        logger.info(f"{prefix} Forwarded after {sends} send(s)")
        logger.debug(f"{prefix} Response {json.dumps(redact(parsed))}")
        return ForwardOutcome(state=ForwardState.DONE, response=parsed, sends=sends)

    def _fail(
        self,
        prefix: str,
        state: ForwardState,
        code: ErrorCode,
        message: str,
        sends: int,
    ) -> ForwardOutcome:
        logger.error(f"{prefix} Forwarding failed in {state}: {code}: {message}")
        self._transition(prefix, state, ForwardState.FAILED)
        return ForwardOutcome(
            state=ForwardState.FAILED,
            failure=BridgeFailure(code=code, message=message, details={"sends": sends}),
            sends=sends,
        )

    @staticmethod
    def _transition(prefix: str, old: ForwardState, new: ForwardState) -> None:
        logger.debug(f"{prefix} {old} -> {new}")
