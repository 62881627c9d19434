"""Pydantic domain models."""

from signal_gate.models.event import EconomicEvent, Impact
from signal_gate.models.signal import SignalLevel, TradingSignal

__all__ = [
    "EconomicEvent",
    "Impact",
    "SignalLevel",
    "TradingSignal",
]
