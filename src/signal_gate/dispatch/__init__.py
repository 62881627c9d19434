"""Notification delivery contracts and sinks."""

from signal_gate.dispatch.base import (
    DispatchSink,
    Notification,
    RecipientDirectory,
    StaticRecipientDirectory,
)
from signal_gate.dispatch.sinks import LoggingSink, WebhookSink

__all__ = [
    "DispatchSink",
    "LoggingSink",
    "Notification",
    "RecipientDirectory",
    "StaticRecipientDirectory",
    "WebhookSink",
]
