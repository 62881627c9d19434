"""Periodic digest of signals that were held back from immediate delivery."""

from __future__ import annotations

from datetime import datetime

import structlog

from signal_gate.clock import Clock, utc_now
from signal_gate.dispatch.base import DispatchSink, Notification, RecipientDirectory
from signal_gate.filters.admission import SignalAdmissionController
from signal_gate.filters.digest import DigestCache
from signal_gate.models import TradingSignal

log = structlog.get_logger("digest")


def render_digest(
    by_symbol: dict[str, list[TradingSignal]],
    statistics: dict,
    now: datetime,
) -> Notification:
    """Plain-text digest grouped by symbol."""
    total = sum(len(v) for v in by_symbol.values())
    lines = [f"Signal digest for {now.date().isoformat()}", ""]
    for symbol, signals in by_symbol.items():
        lines.append(f"{symbol} ({len(signals)})")
        for s in signals:
            ratio = s.risk_reward_ratio
            rr = f" rr={ratio:.2f}" if ratio is not None else ""
            lines.append(f"  - {s.level.value} {s.indicator} {s.signal_type} score={s.score}{rr}")
        lines.append("")
    lines.append(
        f"Sent today: {statistics['today_signal_count']}/{statistics['max_signals_per_day']}"
    )
    return Notification(
        kind="digest",
        subject=f"[Daily digest] {total} watch signals across {len(by_symbol)} symbols",
        body="\n".join(lines),
        created_at=now,
        metadata={"signals": total, "symbols": len(by_symbol)},
    )


class DigestDispatcher:
    """Sends the digest cache contents and drains what was sent."""

    def __init__(
        self,
        cache: DigestCache,
        controller: SignalAdmissionController,
        recipients: RecipientDirectory,
        sink: DispatchSink,
        clock: Clock = utc_now,
    ) -> None:
        self.cache = cache
        self.controller = controller
        self.recipients = recipients
        self.sink = sink
        self._clock = clock

    def send_digest(self, now: datetime | None = None) -> bool:
        """Send one digest. True if something was delivered and drained."""
        now = now or self._clock()
        pending = self.cache.snapshot()
        if not pending:
            log.info("digest_empty")
            return False

        by_symbol: dict[str, list[TradingSignal]] = {}
        for signal in pending:
            by_symbol.setdefault(signal.symbol, []).append(signal)

        try:
            recipients = self.recipients.list_notification_recipients()
            if not recipients:
                log.warning("digest_no_recipients", pending=len(pending))
                return False
            notification = render_digest(by_symbol, self.controller.statistics(now), now)
            self.sink.send(notification, recipients)
        except Exception:
            log.exception("digest_dispatch_failed", pending=len(pending))
            return False

        self.cache.drain(len(pending))
        log.info(
            "digest_sent",
            signals=len(pending),
            symbols=len(by_symbol),
            recipients=len(recipients),
        )
        return True
