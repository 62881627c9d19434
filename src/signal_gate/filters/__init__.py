"""Signal filters — blackout, priority, admission, digest."""

from signal_gate.filters.admission import AdmissionReport, SignalAdmissionController
from signal_gate.filters.blackout import EventBlackoutFilter, base_asset
from signal_gate.filters.digest import DigestCache
from signal_gate.filters.priority import Priority, PriorityClassifier

__all__ = [
    "AdmissionReport",
    "DigestCache",
    "EventBlackoutFilter",
    "Priority",
    "PriorityClassifier",
    "SignalAdmissionController",
    "base_asset",
]
