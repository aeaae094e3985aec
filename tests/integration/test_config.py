import logging
import os

import pytest

from core.config import ConfigManager, get_config, get_config_manager, reset_config
from core.env_loader import get_env_var, load_env_file


def test_defaults(reports_dir):
    """Test configuration defaults with a clean environment."""
    config = get_config()

    assert config.reporting.reports_path == reports_dir
    assert config.reporting.trend_history_limit == 90
    assert config.reporting.simulation_seed is None
    assert config.reporting.timezone == "UTC"
    assert config.alerts.critical_percent == 25.0
    assert config.alerts.warning_percent == 10.0
    assert config.ga4.enabled is False
    assert config.has_slack() is False
    assert config.tz.zone == "UTC"


def test_environment_overrides(monkeypatch):
    """Test values read from environment variables."""
    monkeypatch.setenv("TREND_HISTORY_LIMIT", "30")
    monkeypatch.setenv("SIMULATION_SEED", "42")
    monkeypatch.setenv("REPORT_TIMEZONE", "Asia/Jerusalem")
    monkeypatch.setenv("ALERT_CRITICAL_PERCENT", "20")
    monkeypatch.setenv("ALERT_WARNING_PERCENT", "5")
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.com/services/T/B/X")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = get_config()

    assert config.reporting.trend_history_limit == 30
    assert config.reporting.simulation_seed == 42
    assert config.tz.zone == "Asia/Jerusalem"
    assert (config.alerts.critical_percent, config.alerts.warning_percent) == (20.0, 5.0)
    assert config.has_slack() is True
    assert config.reporting.log_level == "DEBUG"


def test_config_is_cached_until_reload(monkeypatch):
    """Test the manager caches configuration."""
    manager = get_config_manager()
    first = manager.get_config()
    monkeypatch.setenv("TREND_HISTORY_LIMIT", "10")

    assert manager.get_config() is first
    assert manager.get_config(force_reload=True).reporting.trend_history_limit == 10


@pytest.mark.parametrize("key,value,message", [
    ("ALERT_WARNING_PERCENT", "30", "ALERT_WARNING_PERCENT"),
    ("ALERT_CRITICAL_PERCENT", "150", "ALERT_WARNING_PERCENT"),
    ("TREND_HISTORY_LIMIT", "0", "TREND_HISTORY_LIMIT"),
    ("REPORT_TIMEZONE", "Mars/Olympus", "REPORT_TIMEZONE"),
    ("LOG_LEVEL", "LOUD", "LOG_LEVEL"),
    ("TREND_HISTORY_LIMIT", "many", "Configuration validation failed"),
])
def test_invalid_configuration(monkeypatch, key, value, message):
    """Test validation errors are collected into a ValueError."""
    monkeypatch.setenv(key, value)

    with pytest.raises(ValueError, match=message):
        ConfigManager().get_config()


def test_reset_config_creates_new_manager():
    """Test resetting the global manager."""
    manager = get_config_manager()
    reset_config()
    assert get_config_manager() is not manager


def test_update_logging_applies_level(monkeypatch):
    """Test the configured log level reaches the root logger."""
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    root = logging.getLogger()
    previous = root.level
    try:
        get_config_manager().update_logging()
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)


def test_integration_status(monkeypatch, tmp_path):
    """Test the integration status summary."""
    credentials = tmp_path / "ga4.json"
    credentials.write_text("{}", encoding="utf-8")
    monkeypatch.setenv("GA4_ENABLED", "true")
    monkeypatch.setenv("GA4_PROPERTY_ID", "123456")
    monkeypatch.setenv("GA4_CREDENTIALS_PATH", str(credentials))

    status = get_config_manager().get_integration_status()

    assert status == {"ga4": True, "ga4_property": "123456", "ga4_credentials": True, "slack_webhook": False}


def test_load_env_file(tmp_path, monkeypatch):
    """Test .env parsing: quotes stripped, comments skipped, existing values kept."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "LI_TEST_QUOTED=\"hello world\"\n"
        "LI_TEST_PLAIN=value\n"
        "LI_TEST_EXISTING=from-file\n"
        "not a setting\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("LI_TEST_QUOTED", raising=False)
    monkeypatch.delenv("LI_TEST_PLAIN", raising=False)
    monkeypatch.setenv("LI_TEST_EXISTING", "from-env")

    loaded = load_env_file(".env", project_root=tmp_path)

    assert loaded == 2
    assert os.environ["LI_TEST_QUOTED"] == "hello world"
    assert os.environ["LI_TEST_PLAIN"] == "value"
    assert os.environ["LI_TEST_EXISTING"] == "from-env"


def test_load_env_file_missing(tmp_path):
    """Test a missing .env file loads nothing."""
    assert load_env_file(".env", project_root=tmp_path) == 0


def test_get_env_var(monkeypatch):
    """Test defaults and required variables."""
    monkeypatch.delenv("LI_TEST_MISSING", raising=False)
    assert get_env_var("LI_TEST_MISSING", "fallback") == "fallback"
    with pytest.raises(ValueError):
        get_env_var("LI_TEST_MISSING", required=True)
