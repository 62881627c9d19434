"""Tests for the assembled notification gate."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from signal_gate.config import AppConfig
from signal_gate.dispatch import LoggingSink, WebhookSink
from signal_gate.filters import Priority
from signal_gate.gate import build_gate
from signal_gate.models import EconomicEvent, Impact, SignalLevel

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def gate(clock, sink, recipients):
    return build_gate(AppConfig(), clock=clock, sink=sink, recipients=recipients)


class TestEndToEnd:
    def test_btc_scenario(self, gate, clock, make_signal):
        first = make_signal(level=SignalLevel.LEVEL_1, rr=2.5)
        result = gate.process([first])
        assert result.admitted == [first]
        assert result.priorities == [Priority.URGENT]

        clock.advance(minutes=10)
        repeat = make_signal(level=SignalLevel.LEVEL_1, rr=2.5)
        watch = make_signal(level=SignalLevel.LEVEL_3, score=9)
        result = gate.process([repeat, watch])
        assert result.admitted == []
        assert result.dropped == [repeat]
        assert result.digested == [watch]
        assert gate.digest.snapshot() == [watch]

    def test_classifier_rejects_go_to_digest(self, gate, make_signal):
        weak = make_signal(rr=1.0)
        result = gate.process([weak])
        assert result.digested == [weak]
        assert gate.controller.today_signal_count() == 0

    def test_blackout_blocks(self, gate, make_signal):
        gate.blackout.add_event("BTC", EconomicEvent(time=NOW + timedelta(minutes=15), name="CPI"))
        btc, eth = make_signal(), make_signal(symbol="ETHUSDT")
        result = gate.process([btc, eth])
        assert result.blocked == [btc]
        assert result.admitted == [eth]
        assert gate.digest.count == 0

    def test_maintain_prunes(self, gate, clock, make_signal):
        gate.blackout.add_event("BTC", EconomicEvent(time=NOW - timedelta(hours=3), name="old"))
        gate.process([make_signal()])
        clock.advance(hours=5)
        gate.maintain()
        assert gate.blackout.assets() == []
        assert gate.controller.statistics()["cooldown_keys"] == 0


class TestBuildGate:
    def test_seeds_events_from_config(self, clock):
        config = AppConfig.model_validate({
            "blackout": {
                "events": {
                    "BTC": [{"time": NOW + timedelta(minutes=5), "name": "NFP", "impact": "HIGH"}],
                    "ETH": [{"time": NOW + timedelta(minutes=5), "name": "PMI", "impact": "LOW"}],
                },
            },
        })
        gate = build_gate(config, clock=clock)
        assert gate.blackout.is_safe_to_trade("BTCUSDT") is False
        assert gate.blackout.is_safe_to_trade("ETHUSDT") is True
        assert gate.blackout.upcoming_events("ETHUSDT")[0].impact is Impact.LOW

    def test_naive_seed_times_block_without_error(self, clock, make_signal):
        config = AppConfig.model_validate({
            "blackout": {"events": {"BTC": [{"time": "2025-06-15T12:10:00", "name": "CPI"}]}},
        })
        gate = build_gate(config, clock=clock)
        result = gate.process([make_signal()])
        assert len(result.blocked) == 1
        assert result.admitted == []

    def test_default_sink_is_logging(self):
        gate = build_gate(AppConfig())
        assert isinstance(gate.throttle.sink, LoggingSink)

    def test_webhook_sink_when_url_configured(self):
        config = AppConfig.model_validate({"notifications": {"webhook_url": "https://hooks.example.com/x"}})
        gate = build_gate(config)
        assert isinstance(gate.throttle.sink, WebhookSink)
        assert gate.dispatcher.sink is gate.throttle.sink

    def test_admission_limits_from_config(self, clock, make_signal):
        config = AppConfig.model_validate({"admission": {"max_signals_per_day": 2}})
        gate = build_gate(config, clock=clock)
        result = gate.process([make_signal(symbol=f"C{i}USDT") for i in range(3)])
        assert len(result.admitted) == 2
        assert len(result.digested) == 1


class TestClose:
    def test_closes_webhook_client(self):
        config = AppConfig.model_validate({"notifications": {"webhook_url": "https://hooks.example.com/x"}})
        gate = build_gate(config)
        gate.close()
        assert gate.dispatcher.sink._http.is_closed

    def test_logging_sink_needs_no_close(self):
        build_gate(AppConfig()).close()
