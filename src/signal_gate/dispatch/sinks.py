"""Concrete dispatch sinks — structured log output and JSON webhooks."""

from __future__ import annotations

import httpx
import structlog

from signal_gate.dispatch.base import Notification

log = structlog.get_logger("dispatch")


class LoggingSink:
    """Writes each notification as a log record. Used when no transport is configured."""

    def send(self, notification: Notification, recipients: list[str]) -> None:
        log.info(
            "notification_logged",
            kind=notification.kind,
            subject=notification.subject,
            recipients=recipients,
            body=notification.body,
        )


class WebhookSink:
    """POSTs notifications as JSON to a single webhook URL."""

    def __init__(
        self,
        url: str,
        timeout_s: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self._http = client or httpx.Client(timeout=timeout_s)

    def close(self) -> None:
        if not self._http.is_closed:
            self._http.close()

    @staticmethod
    def build_payload(notification: Notification, recipients: list[str]) -> dict:
        return {
            "kind": notification.kind,
            "subject": notification.subject,
            "body": notification.body,
            "created_at": notification.created_at.isoformat(),
            "recipients": recipients,
            "metadata": notification.metadata,
        }

    def send(self, notification: Notification, recipients: list[str]) -> None:
        resp = self._http.post(self.url, json=self.build_payload(notification, recipients))
        resp.raise_for_status()
        log.debug("webhook_sent", url=self.url, status=resp.status_code, kind=notification.kind)
