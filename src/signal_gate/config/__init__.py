"""Configuration system."""

from signal_gate.config.loader import load_config
from signal_gate.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
