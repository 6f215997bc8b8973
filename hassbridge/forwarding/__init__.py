"""Webhook forwarding protocol."""

from hassbridge.forwarding.forwarder import (
    ForwardOutcome,
    Forwarder,
    ForwardState,
    ForwardTarget,
    log_prefix,
)

__all__ = ["ForwardOutcome", "Forwarder", "ForwardState", "ForwardTarget", "log_prefix"]
