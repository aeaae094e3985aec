#!/usr/bin/env python3
"""
Health check command for monitoring system status.

Checks configuration, the threshold/recommendation catalog, the metrics
source and the reports directory.
"""

import logging
import os
from argparse import Namespace

from .base import BaseCommand
from core.config import get_config_manager
from core.exceptions import ThresholdConfigError
from core.recommendations import validate_catalog
from core.sources import get_metrics_source, list_available_sources

logger = logging.getLogger(__name__)


class HealthCommand(BaseCommand):
    """Handle system health monitoring and diagnostics."""

    subcommands = ['check']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute health subcommand."""
        try:
            if subcommand == "check":
                return self.check(args)
            else:
                return self.unknown_subcommand(subcommand)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e, f"health {subcommand}")

    def check(self, args: Namespace) -> int:
        """Run comprehensive health check."""
        print("🏥 System Health Check")
        print("=" * 50)

        overall_healthy = True

        print("\n⚙️  Configuration:")
        try:
            config = get_config_manager().get_config(force_reload=True)
            print("  ✅ Configuration: OK")
            print(f"  📁 Reports directory: {config.reporting.reports_dir}")
            print(f"  🕐 Timezone: {config.reporting.timezone}")
            print(f"  🌍 Environment: {config.environment}")
            print(f"  🔔 Alert thresholds: critical >{config.alerts.critical_percent:g}%, "
                  f"warning >{config.alerts.warning_percent:g}%")
        except ValueError as e:
            print(f"  ❌ Configuration: {e}")
            print("\n" + "=" * 50)
            print("❌ Overall Status: UNHEALTHY")
            return 1

        print("\n📏 Threshold Catalog:")
        try:
            validate_catalog()
            print("  ✅ Thresholds and recommendations consistent")
        except ThresholdConfigError as e:
            print(f"  ❌ {e}")
            overall_healthy = False

        print("\n📡 Metrics Source:")
        print(f"  ℹ️  Available sources: {', '.join(list_available_sources())}")
        source = get_metrics_source(config)
        health = source.health_check()
        if health.get('available'):
            print(f"  ✅ {source.get_metadata().display_name}: OK")
        else:
            print(f"  ❌ {source.get_metadata().display_name}: unavailable")
            overall_healthy = False
        if config.ga4.enabled:
            print("  ⚠️  GA4 enabled but not implemented; simulated data is used")

        print("\n📁 Reports Directory:")
        reports_path = config.reporting.reports_path
        try:
            reports_path.mkdir(parents=True, exist_ok=True)
            if os.access(reports_path, os.W_OK):
                print(f"  ✅ {reports_path} is writable")
            else:
                print(f"  ❌ {reports_path} is not writable")
                overall_healthy = False
        except OSError as e:
            print(f"  ❌ Cannot create {reports_path}: {e}")
            overall_healthy = False

        print("\n🔌 Integration Status:")
        if config.has_slack():
            print("  ✅ Slack webhook: configured")
        else:
            print("  ℹ️  Slack webhook: not configured (optional)")

        print("\n" + "=" * 50)
        if overall_healthy:
            print("✅ Overall Status: HEALTHY")
            return 0
        else:
            print("❌ Overall Status: UNHEALTHY")
            return 1
