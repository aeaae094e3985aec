#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for all application configuration,
including environment variables, defaults, and validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path

import pytz

from core import env_loader  # noqa: F401  loads .env on import

logger = logging.getLogger(__name__)


@dataclass
class GA4Config:
    """Google Analytics 4 settings. The live Data API pull is not wired up."""
    property_id: str = "NOT_CONFIGURED"
    credentials_path: str = "./ga4-credentials.json"
    enabled: bool = False


@dataclass
class IntegrationConfig:
    """External integration configuration."""
    slack_webhook_url: Optional[str] = None


@dataclass
class ReportingConfig:
    """Where reports go and how they are produced."""
    reports_dir: str = "reports"
    trend_history_limit: int = 90
    simulation_seed: Optional[int] = None
    timezone: str = "UTC"
    experiments_file: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False

    @property
    def reports_path(self) -> Path:
        return Path(self.reports_dir)


@dataclass
class AlertConfig:
    """Share of users with a poor experience that raises an alert, in percent."""
    critical_percent: float = 25.0
    warning_percent: float = 10.0


@dataclass
class Config:
    """Master configuration container."""
    ga4: GA4Config
    integrations: IntegrationConfig
    reporting: ReportingConfig
    alerts: AlertConfig

    # Environment info
    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

    def has_slack(self) -> bool:
        """Check if Slack integration is available."""
        return bool(self.integrations.slack_webhook_url)

    @property
    def tz(self):
        return pytz.timezone(self.reporting.timezone)


def _optional_int(key: str) -> Optional[int]:
    value = os.getenv(key)
    if value is None or value.strip() == '':
        return None
    return int(value)


class ConfigManager:
    """Manages application configuration with validation and environment loading."""

    def __init__(self):
        self._config: Optional[Config] = None

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force reloading configuration from environment

        Returns:
            Complete configuration object
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""
        ga4_config = GA4Config(
            property_id=os.getenv('GA4_PROPERTY_ID', 'NOT_CONFIGURED'),
            credentials_path=os.getenv('GA4_CREDENTIALS_PATH', './ga4-credentials.json'),
            enabled=os.getenv('GA4_ENABLED', 'false').lower() == 'true'
        )

        integration_config = IntegrationConfig(
            slack_webhook_url=os.getenv('SLACK_WEBHOOK_URL') or None
        )

        try:
            reporting_config = ReportingConfig(
                reports_dir=os.getenv('REPORTS_DIR', 'reports'),
                trend_history_limit=int(os.getenv('TREND_HISTORY_LIMIT', '90')),
                simulation_seed=_optional_int('SIMULATION_SEED'),
                timezone=os.getenv('REPORT_TIMEZONE', 'UTC'),
                experiments_file=os.getenv('EXPERIMENTS_FILE') or None,
                log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
                verbose_logging=os.getenv('VERBOSE_LOGGING', 'false').lower() == 'true'
            )

            alert_config = AlertConfig(
                critical_percent=float(os.getenv('ALERT_CRITICAL_PERCENT', '25')),
                warning_percent=float(os.getenv('ALERT_WARNING_PERCENT', '10'))
            )
        except ValueError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        config = Config(
            ga4=ga4_config,
            integrations=integration_config,
            reporting=reporting_config,
            alerts=alert_config
        )

        self._validate_config(config)
        return config

    def _validate_config(self, config: Config) -> None:
        """Validate configuration values."""
        errors = []

        if not 0 < config.alerts.warning_percent < config.alerts.critical_percent <= 100:
            errors.append("ALERT_WARNING_PERCENT must be positive and below ALERT_CRITICAL_PERCENT (max 100)")

        if config.reporting.trend_history_limit < 1:
            errors.append("TREND_HISTORY_LIMIT must be at least 1")

        if config.reporting.timezone not in pytz.all_timezones_set:
            errors.append(f"REPORT_TIMEZONE is not a known timezone: {config.reporting.timezone}")

        if not config.reporting.reports_dir:
            errors.append("REPORTS_DIR must not be empty")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.reporting.log_level not in valid_log_levels:
            errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        logger.debug("Configuration validation passed")

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        numeric_level = getattr(logging, config.reporting.log_level)
        logging.getLogger().setLevel(numeric_level)

        if config.reporting.verbose_logging:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            formatter = logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S')
            handler.setFormatter(formatter)

    def get_integration_status(self) -> Dict[str, Any]:
        """Get status of all integrations."""
        config = self.get_config()
        return {
            'ga4': config.ga4.enabled,
            'ga4_property': config.ga4.property_id,
            'ga4_credentials': Path(config.ga4.credentials_path).exists(),
            'slack_webhook': config.has_slack()
        }


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None
