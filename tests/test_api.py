"""Tests for the FastAPI surface."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from signal_gate.api.app import create_app
from signal_gate.config import AppConfig
from signal_gate.gate import build_gate
from signal_gate.models import EconomicEvent, SignalLevel

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def _payload(symbol="BTCUSDT", level="LEVEL_1", rr=2.5, score=8):
    return {
        "symbol": symbol,
        "indicator": "RSI",
        "signal_type": "BUY",
        "level": level,
        "score": score,
        "stop_loss": 58000.0,
        "take_profit": 66000.0,
        "explanation": {"risk_reward_ratio": rr},
    }


@pytest.fixture
def gate(clock, sink, recipients):
    return build_gate(AppConfig(), clock=clock, sink=sink, recipients=recipients)


@pytest.fixture
def client(gate):
    return TestClient(create_app(gate))


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["statistics"]["max_signals_per_day"] == 20


class TestSignals:
    def test_submit_batch(self, client):
        resp = client.post("/api/signals", json=[
            _payload(),
            _payload(),
            _payload(symbol="ETHUSDT", level="LEVEL_3"),
        ])
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["admitted"]) == 1
        assert body["admitted"][0]["priority"] == "URGENT"
        assert body["admitted"][0]["riskReward"] == 2.5
        assert body["dropped"] == 1
        assert body["digested"] == 1
        assert body["blocked"] == 0

    def test_invalid_signal_rejected(self, client):
        resp = client.post("/api/signals", json=[_payload(level="LEVEL_9")])
        assert resp.status_code == 422

    def test_statistics(self, client):
        client.post("/api/signals", json=[_payload()])
        stats = client.get("/api/signal-filter/statistics").json()
        assert stats["today_signal_count"] == 1
        assert stats["remaining_quota"] == 19


class TestDigestRoutes:
    def test_digest_contents_and_clear(self, client, gate, make_signal):
        gate.digest.append(make_signal(level=SignalLevel.LEVEL_3))
        gate.digest.append(make_signal(symbol="ETHUSDT", level=SignalLevel.LEVEL_3))

        body = client.get("/api/signal-filter/digest").json()
        assert body["count"] == 2
        assert list(body["bySymbol"]) == ["BTCUSDT", "ETHUSDT"]

        resp = client.post("/api/signal-filter/clear-cache").json()
        assert resp == {"success": True, "cleared": 2}
        assert gate.digest.count == 0

    def test_send_summary(self, client, gate, sink, make_signal):
        gate.digest.append(make_signal(level=SignalLevel.LEVEL_3))
        resp = client.post("/api/signal-filter/send-summary").json()
        assert resp["success"] is True
        assert len(sink.sent) == 1

    def test_send_summary_empty(self, client):
        resp = client.post("/api/signal-filter/send-summary").json()
        assert resp["success"] is False


class TestBlackoutRoute:
    def test_blackout_status(self, client, gate):
        gate.blackout.add_event("BTC", EconomicEvent(time=NOW + timedelta(minutes=20), name="CPI"))
        body = client.get("/api/blackout/BTCUSDT").json()
        assert body["safeToTrade"] is False
        assert body["upcomingEvents"][0]["name"] == "CPI"


class TestSystemRoutes:
    def test_failures_and_errors(self, client, sink):
        for _ in range(2):
            resp = client.post("/api/system/failures", json={
                "category": "DB", "name": "SignalInsert", "message": "deadlock",
            })
        assert resp.json() == {"key": "DB_SignalInsert", "alerted": True}
        assert len(sink.sent) == 1

        errors = client.get("/api/system/errors").json()
        assert errors["errorCounters"] == {"DB_SignalInsert": 2}

        client.post("/api/system/errors/DB_SignalInsert/reset")
        assert client.get("/api/system/errors").json()["errorCounters"] == {}

    def test_unknown_category_rejected(self, client):
        resp = client.post("/api/system/failures", json={
            "category": "NET", "name": "x", "message": "y",
        })
        assert resp.status_code == 422
