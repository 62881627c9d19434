"""Priority classifier — decides whether a signal deserves an immediate notification."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

import structlog

from signal_gate.models import SignalLevel, TradingSignal

log = structlog.get_logger("priority")


class Priority(str, Enum):
    URGENT = "URGENT"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def display_name(self) -> str:
        return _DISPLAY[self][0]

    @property
    def delivery_schedule(self) -> str:
        return _DISPLAY[self][1]


_DISPLAY = {
    Priority.URGENT: ("Urgent", "immediate"),
    Priority.HIGH: ("Important", "within_5_min"),
    Priority.MEDIUM: ("Routine", "within_15_min"),
    Priority.LOW: ("Watch", "daily_summary"),
}


class PriorityClassifier:
    """Stateless admission rules and priority tiers for trading signals."""

    def __init__(
        self,
        min_risk_reward: float = 1.5,
        min_score: int = 6,
        urgent_risk_reward: float = 2.0,
    ) -> None:
        self.min_risk_reward = min_risk_reward
        self.min_score = min_score
        self.urgent_risk_reward = urgent_risk_reward

    def rejection_reason(self, signal: TradingSignal) -> str | None:
        """Return why *signal* must not be sent now, or None if it may be.

        Rules are checked in order and the first failure wins:
        LEVEL_3, risk/reward below minimum, score below minimum when no
        risk/reward is available, missing stop-loss or take-profit.
        """
        if signal.level is SignalLevel.LEVEL_3:
            return "level_3_digest_only"

        ratio = signal.risk_reward_ratio
        if ratio is not None:
            if ratio < self.min_risk_reward:
                return "risk_reward_too_low"
        elif signal.score < self.min_score:
            return "score_too_low"

        if not signal.has_trade_plan:
            return "incomplete_trade_plan"
        return None

    def should_admit(self, signal: TradingSignal) -> bool:
        reason = self.rejection_reason(signal)
        if reason is not None:
            log.debug(
                "signal_rejected",
                symbol=signal.symbol,
                indicator=signal.indicator,
                reason=reason,
                score=signal.score,
                risk_reward=signal.risk_reward_ratio,
            )
            return False
        return True

    def priority_of(self, signal: TradingSignal) -> Priority:
        if signal.level is SignalLevel.LEVEL_1:
            ratio = signal.risk_reward_ratio
            if ratio is not None and ratio > self.urgent_risk_reward:
                return Priority.URGENT
            return Priority.HIGH
        if signal.level is SignalLevel.LEVEL_2:
            return Priority.MEDIUM
        return Priority.LOW

    def filter_signals(self, signals: Iterable[TradingSignal]) -> list[TradingSignal]:
        """Keep only the signals that pass :meth:`should_admit`."""
        return [s for s in signals if self.should_admit(s)]
