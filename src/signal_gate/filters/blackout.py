"""Event blackout filter — pause notifications around high-impact macro events."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timedelta

import structlog

from signal_gate.clock import Clock, utc_now
from signal_gate.models import EconomicEvent, Impact

log = structlog.get_logger("blackout")

_QUOTE_SUFFIXES = ("USDT", "USD")


def base_asset(symbol: str) -> str:
    """Strip a trailing quote currency: BTCUSDT -> BTC, ETHUSD -> ETH."""
    for suffix in _QUOTE_SUFFIXES:
        if symbol.endswith(suffix):
            return symbol[: -len(suffix)]
    return symbol


class EventBlackoutFilter:
    """In-memory calendar of scheduled events keyed by base asset.

    Events are never expired automatically; call :meth:`prune_events`
    periodically to drop ones that are already in the past.
    """

    def __init__(
        self,
        block_window_minutes: int = 30,
        advisory_window_minutes: int = 60,
        clock: Clock = utc_now,
    ) -> None:
        self.block_window = timedelta(minutes=block_window_minutes)
        self.advisory_window = timedelta(minutes=advisory_window_minutes)
        self._clock = clock
        self._events: dict[str, list[EconomicEvent]] = defaultdict(list)
        self._lock = threading.Lock()

    def _events_for(self, symbol: str) -> list[EconomicEvent]:
        with self._lock:
            return list(self._events.get(base_asset(symbol), ()))

    def is_safe_to_trade(self, symbol: str, now: datetime | None = None) -> bool:
        """False only if a HIGH impact event falls strictly inside now ± block window."""
        now = now or self._clock()
        lower, upper = now - self.block_window, now + self.block_window
        for event in self._events_for(symbol):
            if event.impact is Impact.HIGH and lower < event.time < upper:
                log.warning(
                    "blackout_active",
                    symbol=symbol,
                    event_name=event.name,
                    event_time=event.time.isoformat(),
                )
                return False
        return True

    def upcoming_events(self, symbol: str, now: datetime | None = None) -> list[EconomicEvent]:
        """All events of any impact strictly inside now ± advisory window."""
        now = now or self._clock()
        lower, upper = now - self.advisory_window, now + self.advisory_window
        return [e for e in self._events_for(symbol) if lower < e.time < upper]

    def add_event(self, asset: str, event: EconomicEvent) -> None:
        with self._lock:
            self._events[asset].append(event)
        log.debug("event_added", asset=asset, event_name=event.name, event_time=event.time.isoformat())

    def add_events(self, asset: str, events: Iterable[EconomicEvent]) -> None:
        for event in events:
            self.add_event(asset, event)

    def clear_events(self, asset: str) -> None:
        with self._lock:
            self._events.pop(asset, None)
        log.debug("events_cleared", asset=asset)

    def prune_events(self, before: datetime) -> int:
        """Drop events scheduled before *before*; returns how many were removed."""
        removed = 0
        with self._lock:
            for asset in list(self._events):
                kept = [e for e in self._events[asset] if e.time >= before]
                removed += len(self._events[asset]) - len(kept)
                if kept:
                    self._events[asset] = kept
                else:
                    del self._events[asset]
        if removed:
            log.info("events_pruned", removed=removed, before=before.isoformat())
        return removed

    def assets(self) -> list[str]:
        with self._lock:
            return sorted(self._events)
