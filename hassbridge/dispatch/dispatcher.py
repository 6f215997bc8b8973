"""Single entry point the host calls for every intent request."""

from __future__ import annotations

import json
from typing import Any, Mapping

from loguru import logger

from hassbridge.config.schema import Config
from hassbridge.dispatch.routes import (
    IntentRoute,
    RouteSettings,
    build_dispatch_table,
)
from hassbridge.forwarding.forwarder import Forwarder, Sleeper, log_prefix
from hassbridge.host.base import DeviceManagerProvider
from hassbridge.protocol.errors import ErrorCode, HandlerError
from hassbridge.protocol.intents import IntentKind, IntentRequest, make_response
from hassbridge.utils.redaction import redact


class IntentDispatcher:
    """Routes intent requests through resolution, gating and forwarding.

    Holds no per-request state: the device directory is fetched from the host
    on every call, so concurrent requests never share mutable data.
    """

    def __init__(
        self,
        *,
        table: Mapping[IntentKind, IntentRoute],
        device_manager: DeviceManagerProvider,
        forwarder: Forwarder | None = None,
        settings: RouteSettings | None = None,
    ) -> None:
        self.table = table
        self._device_manager = device_manager
        self.forwarder = forwarder or Forwarder()
        self.settings = settings or RouteSettings()

    @classmethod
    def from_config(
        cls,
        config: Config,
        device_manager: DeviceManagerProvider,
        *,
        sleep: Sleeper | None = None,
    ) -> "IntentDispatcher":
        return cls(
            table=build_dispatch_table(config.gates),
            device_manager=device_manager,
            forwarder=Forwarder.from_config(config, sleep=sleep),
            settings=RouteSettings.from_config(config.discovery),
        )

    async def handle(self, data: dict[str, Any] | IntentRequest) -> dict[str, Any]:
        """Answer one intent request or raise `HandlerError` for the host."""
        request = data if isinstance(data, IntentRequest) else self._parse(data)
        prefix = log_prefix(request)
        logger.debug(f"{prefix} Request {json.dumps(redact(request.raw))}")

        route = self.table.get(request.kind) if request.kind else None
        if route is None:
            logger.error(f"{prefix} Unsupported intent {request.intent!r}")
            raise HandlerError(request.request_id, ErrorCode.INVALID_REQUEST, "Unsupported intent")

        if not route.forwarded:
            logger.info(f"{prefix} Acknowledged without forwarding")
            return make_response(request)

        manager = await self._device_manager()
        directory = manager.get_registered_devices()
        plan = route.strategy(request, directory, self.settings)
        prefix = log_prefix(request, plan.peer_version)

        # A peer below the gate is answered empty even when lookup failed.
        skipped = self.forwarder.check_gate(
            request,
            required_version=route.required_version,
            peer_version=plan.peer_version,
        )
        if skipped is not None:
            return skipped.response

        if plan.failure is not None:
            logger.error(f"{prefix} {plan.failure.code}: {plan.failure.message}")
            raise HandlerError.from_failure(request.request_id, plan.failure)

        outcome = await self.forwarder.forward(
            manager,
            request,
            plan.target,
            required_version=route.required_version,
            peer_version=plan.peer_version,
        )
        if not outcome.ok:
            raise HandlerError.from_failure(request.request_id, outcome.failure)
        return outcome.response

    @staticmethod
    def _parse(data: dict[str, Any]) -> IntentRequest:
        try:
            return IntentRequest.from_dict(data)
        except ValueError as e:
            request_id = str(data.get("requestId") or "") if isinstance(data, dict) else ""
            logger.error(f"[- {request_id[:8] or '-'}] Malformed intent request: {e}")
            raise HandlerError(request_id, ErrorCode.INVALID_REQUEST, str(e)) from e
