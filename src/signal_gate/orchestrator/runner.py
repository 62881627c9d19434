"""Orchestrator runner — async maintenance loop and daily digest schedule."""

from __future__ import annotations

import asyncio
from datetime import date, datetime

import structlog

from signal_gate.config.loader import load_config
from signal_gate.gate import NotificationGate, build_gate
from signal_gate.logging.setup import setup_logging

log = structlog.get_logger("orchestrator")


def _digest_due(now: datetime, send_hour_utc: int, last_sent: date | None) -> bool:
    """True once per calendar day, at or after the configured hour."""
    if last_sent is not None and last_sent >= now.date():
        return False
    return now.hour >= send_hour_utc


def _initial_digest_date(now: datetime, send_hour_utc: int) -> date | None:
    """Starting after today's send hour counts today's digest as already sent."""
    if now.hour >= send_hour_utc:
        return now.date()
    return None


def run_tick(
    gate: NotificationGate,
    send_hour_utc: int,
    last_digest: date | None,
    now: datetime | None = None,
) -> date | None:
    """One maintenance pass. Returns the date the digest last went out."""
    now = now or gate.clock()
    try:
        gate.maintain(now)
        if _digest_due(now, send_hour_utc, last_digest):
            gate.dispatcher.send_digest(now)
            last_digest = now.date()
    except Exception as exc:
        log.exception("tick_error")
        gate.throttle.record_system_exception("orchestrator", str(exc), error=exc, now=now)
    return last_digest


async def run_loop(
    gate: NotificationGate,
    send_hour_utc: int = 0,
    tick_interval_s: float = 60.0,
    max_ticks: int | None = None,
) -> None:
    """Prune state and send the daily digest until cancelled."""
    log.info("orchestrator_started", send_hour_utc=send_hour_utc, tick_interval_s=tick_interval_s)

    last_digest = _initial_digest_date(gate.clock(), send_hour_utc)
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        last_digest = run_tick(gate, send_hour_utc, last_digest)
        ticks += 1
        await asyncio.sleep(tick_interval_s)


def main(config_path: str | None = None) -> None:
    """Entry point — load config, set up logging, run the async loop."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)
    gate = build_gate(config)
    try:
        asyncio.run(run_loop(gate, send_hour_utc=config.digest.send_hour_utc))
    finally:
        gate.close()
