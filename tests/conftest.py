"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from signal_gate.dispatch import Notification, StaticRecipientDirectory
from signal_gate.models import SignalLevel, TradingSignal

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingSink:
    """DispatchSink that keeps what it was given, or raises when told to."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[Notification, list[str]]] = []

    def send(self, notification: Notification, recipients: list[str]) -> None:
        if self.fail:
            raise RuntimeError("transport down")
        self.sent.append((notification, list(recipients)))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def failing_sink():
    return RecordingSink(fail=True)


@pytest.fixture
def recipients():
    return StaticRecipientDirectory(["ops@example.com", "desk@example.com"])


@pytest.fixture
def make_signal():
    """Factory for signals that pass every filter unless overridden.

    ``rr=None`` leaves ``risk_reward_ratio`` out of the explanation.
    """

    def _make(
        symbol: str = "BTCUSDT",
        signal_type: str = "BUY",
        level: SignalLevel = SignalLevel.LEVEL_1,
        score: int = 8,
        stop_loss: float = 58000.0,
        take_profit: float = 66000.0,
        rr: float | None = 2.5,
        indicator: str = "RSI",
    ) -> TradingSignal:
        explanation = {} if rr is None else {"risk_reward_ratio": rr}
        return TradingSignal(
            symbol=symbol,
            indicator=indicator,
            signal_type=signal_type,
            level=level,
            score=score,
            stop_loss=stop_loss,
            take_profit=take_profit,
            explanation=explanation,
        )

    return _make
