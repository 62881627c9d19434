"""Signal admission controller — per-key cooldowns plus a global daily quota."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

import structlog

from signal_gate.clock import Clock, utc_now
from signal_gate.filters.digest import DigestCache
from signal_gate.models import SignalLevel, TradingSignal

log = structlog.get_logger("admission")


@dataclass
class AdmissionReport:
    """Where each signal of a batch ended up."""

    admitted: list[TradingSignal] = field(default_factory=list)
    digested: list[TradingSignal] = field(default_factory=list)
    dropped: list[TradingSignal] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.admitted) + len(self.digested) + len(self.dropped)


class SignalAdmissionController:
    """Central gate for immediate notifications.

    State (cooldown map, daily counter and its reset date) lives behind a
    single lock so one ``admit_batch`` call is linearizable as a whole.
    """

    def __init__(
        self,
        digest: DigestCache,
        max_signals_per_day: int = 20,
        level_1_cooldown_minutes: int = 120,
        level_2_cooldown_minutes: int = 60,
        level_3_cooldown_minutes: int = 240,
        clock: Clock = utc_now,
    ) -> None:
        self.digest = digest
        self.max_signals_per_day = max_signals_per_day
        self._cooldowns = {
            SignalLevel.LEVEL_1: timedelta(minutes=level_1_cooldown_minutes),
            SignalLevel.LEVEL_2: timedelta(minutes=level_2_cooldown_minutes),
            SignalLevel.LEVEL_3: timedelta(minutes=level_3_cooldown_minutes),
        }
        self._clock = clock
        self._last_admitted: dict[str, datetime] = {}
        self._today_count = 0
        self._last_reset: date = clock().date()
        self._lock = threading.Lock()

    def cooldown_for(self, level: SignalLevel) -> timedelta:
        return self._cooldowns[level]

    @property
    def longest_cooldown(self) -> timedelta:
        return max(self._cooldowns.values())

    # ── Locked helpers (caller holds self._lock) ──────────────

    def _reset_if_new_day(self, now: datetime) -> None:
        if now.date() > self._last_reset:
            log.info("daily_count_reset", previous_count=self._today_count, date=now.date().isoformat())
            self._today_count = 0
            self._last_reset = now.date()

    def _in_cooldown(self, signal: TradingSignal, now: datetime) -> bool:
        last = self._last_admitted.get(signal.cooldown_key)
        if last is None:
            return False
        return now - last < self._cooldowns[signal.level]

    # ── Public API ────────────────────────────────────────────

    def screen_batch(
        self,
        signals: Sequence[TradingSignal],
        now: datetime | None = None,
    ) -> AdmissionReport:
        """Route every signal to admitted, digested or dropped, in input order."""
        now = now or self._clock()
        report = AdmissionReport()

        with self._lock:
            self._reset_if_new_day(now)

            for signal in signals:
                if self._today_count >= self.max_signals_per_day:
                    log.info(
                        "quota_exhausted",
                        symbol=signal.symbol,
                        max_signals_per_day=self.max_signals_per_day,
                    )
                    self.digest.append(signal)
                    report.digested.append(signal)
                    continue

                if signal.level not in (SignalLevel.LEVEL_1, SignalLevel.LEVEL_2):
                    log.debug("signal_digested", symbol=signal.symbol, indicator=signal.indicator)
                    self.digest.append(signal)
                    report.digested.append(signal)
                    continue

                if self._in_cooldown(signal, now):
                    log.debug("signal_cooling_down", symbol=signal.symbol, key=signal.cooldown_key)
                    report.dropped.append(signal)
                    continue

                report.admitted.append(signal)
                self._last_admitted[signal.cooldown_key] = now
                self._today_count += 1
                log.info(
                    "signal_admitted",
                    symbol=signal.symbol,
                    indicator=signal.indicator,
                    level=signal.level.value,
                    score=signal.score,
                )

        log.info(
            "batch_screened",
            received=len(signals),
            admitted=len(report.admitted),
            digested=len(report.digested),
            dropped=len(report.dropped),
            digest_size=self.digest.count,
        )
        return report

    def admit_batch(
        self,
        signals: Sequence[TradingSignal],
        now: datetime | None = None,
    ) -> list[TradingSignal]:
        """Signals to notify immediately; the rest are digested or dropped."""
        return self.screen_batch(signals, now).admitted

    def today_signal_count(self, now: datetime | None = None) -> int:
        now = now or self._clock()
        with self._lock:
            self._reset_if_new_day(now)
            return self._today_count

    def statistics(self, now: datetime | None = None) -> dict[str, Any]:
        now = now or self._clock()
        with self._lock:
            self._reset_if_new_day(now)
            count = self._today_count
            last_reset = self._last_reset
            tracked = len(self._last_admitted)
        return {
            "today_signal_count": count,
            "max_signals_per_day": self.max_signals_per_day,
            "remaining_quota": max(self.max_signals_per_day - count, 0),
            "digest_count": self.digest.count,
            "cooldown_keys": tracked,
            "last_reset_date": last_reset.isoformat(),
        }

    def prune_cooldowns(self, now: datetime | None = None) -> int:
        """Forget cooldown entries older than the longest window."""
        now = now or self._clock()
        horizon = now - self.longest_cooldown
        with self._lock:
            stale = [k for k, ts in self._last_admitted.items() if ts <= horizon]
            for key in stale:
                del self._last_admitted[key]
        if stale:
            log.info("cooldowns_pruned", removed=len(stale))
        return len(stale)
