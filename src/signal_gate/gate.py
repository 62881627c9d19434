"""Notification gate — wires the filters into one admission pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

import structlog

from signal_gate.alerts import FailureAlertThrottle
from signal_gate.clock import Clock, utc_now
from signal_gate.config.schema import AppConfig
from signal_gate.digest import DigestDispatcher
from signal_gate.dispatch import (
    DispatchSink,
    LoggingSink,
    RecipientDirectory,
    StaticRecipientDirectory,
    WebhookSink,
)
from signal_gate.filters import (
    DigestCache,
    EventBlackoutFilter,
    Priority,
    PriorityClassifier,
    SignalAdmissionController,
)
from signal_gate.models import EconomicEvent, Impact, TradingSignal

log = structlog.get_logger("gate")


@dataclass
class GateResult:
    admitted: list[TradingSignal] = field(default_factory=list)
    priorities: list[Priority] = field(default_factory=list)  # aligned with admitted
    digested: list[TradingSignal] = field(default_factory=list)
    dropped: list[TradingSignal] = field(default_factory=list)
    blocked: list[TradingSignal] = field(default_factory=list)


@dataclass
class NotificationGate:
    blackout: EventBlackoutFilter
    classifier: PriorityClassifier
    controller: SignalAdmissionController
    digest: DigestCache
    throttle: FailureAlertThrottle
    dispatcher: DigestDispatcher
    clock: Clock = utc_now

    def process(self, signals: Sequence[TradingSignal], now: datetime | None = None) -> GateResult:
        """Run a batch through blackout, classifier and admission, in that order.

        Blacked-out signals are dropped outright. Signals the classifier
        rejects go to the digest. The rest are screened by the controller.
        """
        now = now or self.clock()
        result = GateResult()
        candidates: list[TradingSignal] = []

        for signal in signals:
            if not self.blackout.is_safe_to_trade(signal.symbol, now):
                result.blocked.append(signal)
                continue
            if not self.classifier.should_admit(signal):
                self.digest.append(signal)
                result.digested.append(signal)
                continue
            candidates.append(signal)

        report = self.controller.screen_batch(candidates, now)
        result.admitted = report.admitted
        result.priorities = [self.classifier.priority_of(s) for s in report.admitted]
        result.digested.extend(report.digested)
        result.dropped = report.dropped

        log.info(
            "gate_processed",
            received=len(signals),
            admitted=len(result.admitted),
            digested=len(result.digested),
            dropped=len(result.dropped),
            blocked=len(result.blocked),
        )
        return result

    def maintain(self, now: datetime | None = None) -> None:
        """Prune stale cooldown entries and past events."""
        now = now or self.clock()
        self.controller.prune_cooldowns(now)
        self.blackout.prune_events(now - self.blackout.advisory_window)

    def close(self) -> None:
        """Release the dispatch sink's transport, if it holds one."""
        close = getattr(self.dispatcher.sink, "close", None)
        if close is not None:
            close()



def build_gate(
    config: AppConfig,
    clock: Clock = utc_now,
    sink: DispatchSink | None = None,
    recipients: RecipientDirectory | None = None,
) -> NotificationGate:
    """Construct every component from config, seeding blackout events."""
    if sink is None:
        url = config.notifications.webhook_url
        sink = WebhookSink(url) if url else LoggingSink()
    if recipients is None:
        recipients = StaticRecipientDirectory(config.notifications.recipients)

    blackout = EventBlackoutFilter(
        block_window_minutes=config.blackout.block_window_minutes,
        advisory_window_minutes=config.blackout.advisory_window_minutes,
        clock=clock,
    )
    for asset, seeds in config.blackout.events.items():
        blackout.add_events(
            asset,
            (EconomicEvent(time=s.time, name=s.name, impact=Impact(s.impact)) for s in seeds),
        )

    digest = DigestCache(max_size=config.digest.max_size)
    controller = SignalAdmissionController(
        digest,
        max_signals_per_day=config.admission.max_signals_per_day,
        level_1_cooldown_minutes=config.admission.level_1_cooldown_minutes,
        level_2_cooldown_minutes=config.admission.level_2_cooldown_minutes,
        level_3_cooldown_minutes=config.admission.level_3_cooldown_minutes,
        clock=clock,
    )
    classifier = PriorityClassifier(
        min_risk_reward=config.classifier.min_risk_reward,
        min_score=config.classifier.min_score,
        urgent_risk_reward=config.classifier.urgent_risk_reward,
    )
    throttle = FailureAlertThrottle(
        recipients,
        sink,
        api_failure_threshold=config.alerts.api_failure_threshold,
        db_failure_threshold=config.alerts.db_failure_threshold,
        cooldown_minutes=config.alerts.cooldown_minutes,
        cooldown_scope=config.alerts.cooldown_scope,
        clock=clock,
    )
    dispatcher = DigestDispatcher(digest, controller, recipients, sink, clock=clock)

    log.info(
        "gate_built",
        event_assets=blackout.assets(),
        recipients=len(recipients.list_notification_recipients()),
        sink=type(sink).__name__,
    )
    return NotificationGate(
        blackout=blackout,
        classifier=classifier,
        controller=controller,
        digest=digest,
        throttle=throttle,
        dispatcher=dispatcher,
        clock=clock,
    )
