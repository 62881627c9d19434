"""Operational failure alerting."""

from signal_gate.alerts.throttle import FailureAlertThrottle, FailureCategory

__all__ = ["FailureAlertThrottle", "FailureCategory"]
