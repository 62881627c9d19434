"""Config loader — reads YAML, applies SIGNAL_GATE_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from signal_gate.config.schema import AppConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        SIGNAL_GATE_LOG_LEVEL     -> logging.level
        SIGNAL_GATE_LOG_FORMAT    -> logging.format
        SIGNAL_GATE_WEBHOOK_URL   -> notifications.webhook_url
        SIGNAL_GATE_RECIPIENTS    -> notifications.recipients (comma separated)
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    log_level = os.environ.get("SIGNAL_GATE_LOG_LEVEL")
    if log_level:
        data.setdefault("logging", {})["level"] = log_level

    log_format = os.environ.get("SIGNAL_GATE_LOG_FORMAT")
    if log_format:
        data.setdefault("logging", {})["format"] = log_format

    webhook_url = os.environ.get("SIGNAL_GATE_WEBHOOK_URL")
    if webhook_url:
        data.setdefault("notifications", {})["webhook_url"] = webhook_url

    recipients = os.environ.get("SIGNAL_GATE_RECIPIENTS")
    if recipients:
        data.setdefault("notifications", {})["recipients"] = [
            r.strip() for r in recipients.split(",") if r.strip()
        ]

    return AppConfig.model_validate(data)
