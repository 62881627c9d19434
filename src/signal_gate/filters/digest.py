"""Digest cache — holds suppressed signals until the periodic digest goes out."""

from __future__ import annotations

import threading
from collections import deque

import structlog

from signal_gate.models import TradingSignal

log = structlog.get_logger("digest_cache")


class DigestCache:
    """Thread-safe arrival-ordered buffer of signals.

    Unbounded unless *max_size* is given, in which case the oldest entry is
    dropped to make room for a new one.
    """

    def __init__(self, max_size: int | None = None) -> None:
        self.max_size = max_size
        self._entries: deque[TradingSignal] = deque(maxlen=max_size)
        self._dropped = 0
        self._lock = threading.Lock()

    def append(self, signal: TradingSignal) -> None:
        with self._lock:
            if self.max_size is not None and len(self._entries) == self.max_size:
                self._dropped += 1
                log.warning("digest_overflow", max_size=self.max_size, dropped_symbol=self._entries[0].symbol)
            self._entries.append(signal)

    def snapshot(self) -> list[TradingSignal]:
        """Stable copy of the current contents, oldest first."""
        with self._lock:
            return list(self._entries)

    def drain(self, limit: int | None = None) -> list[TradingSignal]:
        """Remove and return the oldest *limit* entries (all when None).

        A consumer that sent a snapshot of n entries drains exactly n, so
        anything appended after the snapshot stays for the next digest.
        """
        with self._lock:
            if limit is None or limit >= len(self._entries):
                drained = list(self._entries)
                self._entries.clear()
            else:
                drained = [self._entries.popleft() for _ in range(limit)]
        if drained:
            log.info("digest_drained", count=len(drained))
        return drained

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def dropped(self) -> int:
        """Entries evicted by the size bound since construction."""
        with self._lock:
            return self._dropped

    def by_symbol(self) -> dict[str, list[TradingSignal]]:
        """Group the current contents by symbol, first-seen symbol order."""
        grouped: dict[str, list[TradingSignal]] = {}
        for signal in self.snapshot():
            grouped.setdefault(signal.symbol, []).append(signal)
        return grouped

    def __len__(self) -> int:
        return self.count
