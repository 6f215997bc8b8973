"""Intent dispatch table and host entry point."""

from hassbridge.dispatch.dispatcher import IntentDispatcher
from hassbridge.dispatch.routes import (
    ACKNOWLEDGED_ONLY,
    ForwardPlan,
    IntentRoute,
    RouteSettings,
    build_dispatch_table,
    verify_instance,
)

__all__ = [
    "ACKNOWLEDGED_ONLY",
    "ForwardPlan",
    "IntentDispatcher",
    "IntentRoute",
    "RouteSettings",
    "build_dispatch_table",
    "verify_instance",
]
