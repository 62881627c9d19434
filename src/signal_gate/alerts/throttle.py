"""Failure alert throttle — per-key failure counters with debounced alert dispatch."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Literal

import structlog

from signal_gate.clock import Clock, utc_now
from signal_gate.dispatch.base import DispatchSink, Notification, RecipientDirectory

log = structlog.get_logger("alerts")


class FailureCategory(str, Enum):
    API = "API"
    DB = "DB"
    SYSTEM = "SYS"

    @property
    def subject(self) -> str:
        return _SUBJECTS[self]

    def key_for(self, name: str) -> str:
        return f"{self.value}_{name}"


_SUBJECTS = {
    FailureCategory.API: "API call failure",
    FailureCategory.DB: "Database failure",
    FailureCategory.SYSTEM: "System exception",
}


class FailureAlertThrottle:
    """Counts consecutive failures per key and alerts once a threshold is crossed.

    Repeat alerts are suppressed for ``cooldown_minutes``. With
    ``cooldown_scope="key"`` each failing key has its own cooldown; with
    ``"subject"`` all keys rendering the same subject share one, e.g. every
    database operation shares "Database failure".

    Dispatch never raises: missing recipients and sink errors are logged.
    """

    def __init__(
        self,
        recipients: RecipientDirectory,
        sink: DispatchSink,
        api_failure_threshold: int = 3,
        db_failure_threshold: int = 2,
        cooldown_minutes: int = 30,
        cooldown_scope: Literal["key", "subject"] = "key",
        clock: Clock = utc_now,
    ) -> None:
        self.recipients = recipients
        self.sink = sink
        self.thresholds = {
            FailureCategory.API: api_failure_threshold,
            FailureCategory.DB: db_failure_threshold,
            FailureCategory.SYSTEM: 1,
        }
        self.cooldown = timedelta(minutes=cooldown_minutes)
        self.cooldown_scope = cooldown_scope
        self._clock = clock
        self._counters: dict[str, int] = {}
        self._last_alert: dict[str, datetime] = {}
        self._lock = threading.Lock()

    # ── Recording ─────────────────────────────────────────────

    def record_failure(
        self,
        category: FailureCategory,
        name: str,
        message: str,
        error: BaseException | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Count one failure for ``<category>_<name>``; True if an alert went out."""
        now = now or self._clock()
        key = category.key_for(name)
        with self._lock:
            count = self._counters.get(key, 0) + 1
            self._counters[key] = count

        log_method = log.warning if category is FailureCategory.API else log.error
        log_method(
            "failure_recorded",
            key=key,
            consecutive=count,
            message=message,
            error_type=type(error).__name__ if error is not None else None,
        )

        if count < self.thresholds[category]:
            return False

        cooldown_key = category.subject if self.cooldown_scope == "subject" else key
        with self._lock:
            previous = self._last_alert.get(cooldown_key)
            if previous is not None and now - previous <= self.cooldown:
                log.debug("alert_suppressed", key=key, cooldown_key=cooldown_key)
                return False
            # Reserved before dispatch, rolled back below if dispatch fails
            self._last_alert[cooldown_key] = now

        notification = self._render(category, name, count, message, error, now)
        if self._dispatch(notification):
            return True

        with self._lock:
            if self._last_alert.get(cooldown_key) == now:
                if previous is None:
                    del self._last_alert[cooldown_key]
                else:
                    self._last_alert[cooldown_key] = previous
        return False

    def record_api_failure(self, api_name: str, message: str, now: datetime | None = None) -> bool:
        return self.record_failure(FailureCategory.API, api_name, message, now=now)

    def record_database_failure(self, operation: str, message: str, now: datetime | None = None) -> bool:
        return self.record_failure(FailureCategory.DB, operation, message, now=now)

    def record_system_exception(
        self,
        component: str,
        message: str,
        error: BaseException | None = None,
        now: datetime | None = None,
    ) -> bool:
        return self.record_failure(FailureCategory.SYSTEM, component, message, error=error, now=now)

    def reset_counter(self, key: str) -> None:
        """Forget the failure count for *key* (e.g. ``"API_binance"``) after a success."""
        with self._lock:
            self._counters.pop(key, None)

    def error_statistics(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counters)

    # ── Dispatch ──────────────────────────────────────────────

    @staticmethod
    def _render(
        category: FailureCategory,
        name: str,
        count: int,
        message: str,
        error: BaseException | None,
        now: datetime,
    ) -> Notification:
        if category is FailureCategory.API:
            details = f"API [{name}] failed {count} times in a row\nLast error: {message}"
        elif category is FailureCategory.DB:
            details = f"Database operation [{name}] failed {count} times in a row\nLast error: {message}"
        else:
            error_type = type(error).__name__ if error is not None else "Unknown"
            details = (
                f"Component [{name}] raised an exception\n"
                f"Error: {message}\n"
                f"Exception type: {error_type}"
            )
        body = (
            "[signal_gate system alert]\n\n"
            f"Alert type: {category.subject}\n"
            f"Alert time: {now.isoformat()}\n"
            f"Details:\n{details}\n\n"
            "Please check the system status."
        )
        return Notification(
            kind="alert",
            subject=f"[ALERT] {category.subject}",
            body=body,
            created_at=now,
            metadata={"key": category.key_for(name), "count": count},
        )

    def _dispatch(self, notification: Notification) -> bool:
        try:
            recipients = self.recipients.list_notification_recipients()
            if not recipients:
                log.warning("alert_no_recipients", subject=notification.subject)
                return False
            self.sink.send(notification, recipients)
        except Exception:
            log.exception("alert_dispatch_failed", subject=notification.subject)
            return False
        log.info("alert_sent", subject=notification.subject, recipients=len(recipients))
        return True
