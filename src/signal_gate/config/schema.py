"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from signal_gate.models.event import as_utc


class AdmissionConfig(BaseModel):
    max_signals_per_day: int = 20
    level_1_cooldown_minutes: int = 120
    level_2_cooldown_minutes: int = 60
    level_3_cooldown_minutes: int = 240


class ClassifierConfig(BaseModel):
    min_risk_reward: float = 1.5
    min_score: int = 6
    urgent_risk_reward: float = 2.0


class EventSeed(BaseModel):
    """A scheduled event as written in config.yaml. Times without an offset are UTC."""

    time: datetime
    name: str
    impact: Literal["LOW", "MEDIUM", "HIGH"] = "HIGH"

    @field_validator("time")
    @classmethod
    def _time_is_aware(cls, v: datetime) -> datetime:
        return as_utc(v)


class BlackoutConfig(BaseModel):
    block_window_minutes: int = 30
    advisory_window_minutes: int = 60
    # Base asset -> scheduled events
    events: dict[str, list[EventSeed]] = Field(default_factory=dict)


class DigestConfig(BaseModel):
    max_size: int | None = None
    send_hour_utc: int = Field(default=0, ge=0, le=23)


class AlertConfig(BaseModel):
    api_failure_threshold: int = 3
    db_failure_threshold: int = 2
    cooldown_minutes: int = 30
    cooldown_scope: Literal["key", "subject"] = "key"


class NotificationConfig(BaseModel):
    recipients: list[str] = Field(default_factory=list)
    webhook_url: str | None = None


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    admission: AdmissionConfig = Field(default_factory=AdmissionConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    blackout: BlackoutConfig = Field(default_factory=BlackoutConfig)
    digest: DigestConfig = Field(default_factory=DigestConfig)
    alerts: AlertConfig = Field(default_factory=AlertConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
