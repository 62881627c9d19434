"""Collaborator contracts for delivering notifications."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class Notification(BaseModel):
    """A rendered, transport-agnostic notification."""

    kind: str  # "alert", "digest"
    subject: str
    body: str
    created_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


@runtime_checkable
class RecipientDirectory(Protocol):
    def list_notification_recipients(self) -> list[str]: ...


@runtime_checkable
class DispatchSink(Protocol):
    def send(self, notification: Notification, recipients: list[str]) -> None:
        """Deliver *notification*. Raise on failure; callers log and swallow."""
        ...


class StaticRecipientDirectory:
    """Recipient list taken from config."""

    def __init__(self, recipients: list[str] | None = None) -> None:
        self._recipients = list(recipients or [])

    def list_notification_recipients(self) -> list[str]:
        return list(self._recipients)
