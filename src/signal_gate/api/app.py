"""FastAPI application exposing the gate to signal sources and operators."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

import structlog
from fastapi import FastAPI
from pydantic import BaseModel

from signal_gate.alerts import FailureCategory
from signal_gate.gate import NotificationGate
from signal_gate.models import TradingSignal

logger = structlog.get_logger("api")


class FailureReport(BaseModel):
    category: Literal["API", "DB", "SYS"]
    name: str
    message: str


def _signal_summary(signal: TradingSignal) -> dict:
    return {
        "symbol": signal.symbol,
        "indicator": signal.indicator,
        "signalType": signal.signal_type,
        "level": signal.level.value,
        "score": signal.score,
        "riskReward": signal.risk_reward_ratio,
    }


def create_app(gate: NotificationGate) -> FastAPI:
    """Build the HTTP surface around an already-wired gate."""
    app = FastAPI(
        title="Signal Gate API",
        description="Signal admission, digest and alert throttling",
        version="0.1.0",
    )
    app.state.gate = gate

    @app.get("/api/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "statistics": gate.controller.statistics(),
        }

    # ── Signals ───────────────────────────────────────────────

    @app.post("/api/signals")
    async def submit_signals(signals: list[TradingSignal]):
        """Run a batch through the gate and report where each signal went."""
        result = gate.process(signals)
        return {
            "admitted": [
                {**_signal_summary(s), "priority": p.value}
                for s, p in zip(result.admitted, result.priorities)
            ],
            "digested": len(result.digested),
            "dropped": len(result.dropped),
            "blocked": len(result.blocked),
        }

    @app.get("/api/signal-filter/statistics")
    async def signal_filter_statistics():
        return gate.controller.statistics()

    @app.get("/api/signal-filter/digest")
    async def digest_contents():
        grouped = gate.digest.by_symbol()
        return {
            "count": sum(len(v) for v in grouped.values()),
            "bySymbol": {
                symbol: [_signal_summary(s) for s in signals]
                for symbol, signals in grouped.items()
            },
        }

    @app.post("/api/signal-filter/send-summary")
    async def send_summary():
        sent = gate.dispatcher.send_digest()
        return {
            "success": sent,
            "message": "Digest sent" if sent else "Nothing sent",
        }

    @app.post("/api/signal-filter/clear-cache")
    async def clear_cache():
        cleared = gate.digest.drain()
        logger.info("digest_cache_cleared", cleared=len(cleared))
        return {"success": True, "cleared": len(cleared)}

    # ── Blackout ──────────────────────────────────────────────

    @app.get("/api/blackout/{symbol}")
    async def blackout_status(symbol: str):
        return {
            "symbol": symbol,
            "safeToTrade": gate.blackout.is_safe_to_trade(symbol),
            "upcomingEvents": [
                {"time": e.time.isoformat(), "name": e.name, "impact": e.impact.value}
                for e in gate.blackout.upcoming_events(symbol)
            ],
        }

    # ── System alerts ─────────────────────────────────────────

    @app.get("/api/system/errors")
    async def error_statistics():
        return {
            "errorCounters": gate.throttle.error_statistics(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/api/system/failures")
    async def report_failure(report: FailureReport):
        alerted = gate.throttle.record_failure(
            FailureCategory(report.category), report.name, report.message,
        )
        return {"key": FailureCategory(report.category).key_for(report.name), "alerted": alerted}

    @app.post("/api/system/errors/{key}/reset")
    async def reset_error_counter(key: str):
        gate.throttle.reset_counter(key)
        return {"success": True, "key": key}

    return app
