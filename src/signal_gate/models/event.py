"""Scheduled market events used by the blackout filter."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class Impact(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EconomicEvent(BaseModel):
    """A scheduled macro event (CPI, NFP, FOMC, ...)."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    name: str
    impact: Impact = Impact.HIGH

    @field_validator("time")
    @classmethod
    def _time_is_aware(cls, v: datetime) -> datetime:
        return as_utc(v)
