"""Tests for configuration loading."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from signal_gate.config import AppConfig, load_config

EXAMPLE = Path(__file__).resolve().parent.parent / "config.yaml.example"


class TestAppConfig:
    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.admission.max_signals_per_day == 20
        assert cfg.admission.level_1_cooldown_minutes == 120
        assert cfg.admission.level_2_cooldown_minutes == 60
        assert cfg.admission.level_3_cooldown_minutes == 240
        assert cfg.classifier.min_risk_reward == 1.5
        assert cfg.classifier.min_score == 6
        assert cfg.blackout.block_window_minutes == 30
        assert cfg.alerts.api_failure_threshold == 3
        assert cfg.alerts.db_failure_threshold == 2
        assert cfg.alerts.cooldown_minutes == 30
        assert cfg.alerts.cooldown_scope == "key"
        assert cfg.digest.max_size is None
        assert cfg.notifications.recipients == []
        assert cfg.logging.level == "INFO"
        assert cfg.logging.format == "json"


class TestLoadConfig:
    def test_load_example_config(self):
        cfg = load_config(EXAMPLE)
        assert cfg.digest.max_size == 5000
        assert cfg.notifications.recipients == ["ops@example.com"]
        assert [e.name for e in cfg.blackout.events["BTC"]] == ["Non-Farm Payrolls", "CPI"]
        assert cfg.blackout.events["BTC"][0].time.tzinfo is not None

    def test_load_nonexistent_file_returns_defaults(self):
        cfg = load_config("/tmp/nonexistent_config_12345.yaml")
        assert cfg.admission.max_signals_per_day == 20

    def test_load_none_returns_defaults(self):
        cfg = load_config(None)
        assert cfg.blackout.events == {}

    def test_env_override_log_level(self, monkeypatch):
        monkeypatch.setenv("SIGNAL_GATE_LOG_LEVEL", "DEBUG")
        cfg = load_config(None)
        assert cfg.logging.level == "DEBUG"

    def test_env_override_log_format(self, monkeypatch):
        monkeypatch.setenv("SIGNAL_GATE_LOG_FORMAT", "console")
        cfg = load_config(None)
        assert cfg.logging.format == "console"

    def test_env_override_recipients(self, monkeypatch):
        monkeypatch.setenv("SIGNAL_GATE_RECIPIENTS", "a@example.com, b@example.com,")
        cfg = load_config(EXAMPLE)
        assert cfg.notifications.recipients == ["a@example.com", "b@example.com"]
        # Non-overridden values preserved
        assert cfg.digest.max_size == 5000

    def test_env_override_webhook(self, monkeypatch):
        monkeypatch.setenv("SIGNAL_GATE_WEBHOOK_URL", "https://hooks.example.com/y")
        cfg = load_config(None)
        assert cfg.notifications.webhook_url == "https://hooks.example.com/y"

    def test_load_minimal_yaml(self, tmp_path):
        p = tmp_path / "minimal.yaml"
        p.write_text("alerts:\n  cooldown_scope: subject\n")
        cfg = load_config(p)
        assert cfg.alerts.cooldown_scope == "subject"
        # Defaults still apply for unspecified sections
        assert cfg.admission.max_signals_per_day == 20

    def test_naive_event_time_is_utc(self, tmp_path):
        p = tmp_path / "naive.yaml"
        p.write_text(
            "blackout:\n"
            "  events:\n"
            "    BTC:\n"
            "      - time: \"2025-06-15T12:10:00\"\n"
            "        name: CPI\n"
        )
        cfg = load_config(p)
        seed = cfg.blackout.events["BTC"][0]
        assert seed.time == datetime(2025, 6, 15, 12, 10, tzinfo=timezone.utc)
