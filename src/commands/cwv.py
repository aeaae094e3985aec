#!/usr/bin/env python3
"""
Core Web Vitals monitoring command.

Pulls a metrics snapshot, analyzes it and writes the report, dashboard,
alerts file and trend history entry.
"""

import logging
from argparse import Namespace
from typing import Dict, Any, Optional, Tuple

from .base import BaseCommand
from core.analysis.cwv_analyzer import analyze_metrics, build_report, group_alerts, history_snapshot
from core.formatters import format_cwv_summary, format_alert_lines
from core.history import TrendHistory
from core.models.analysis import CWVAnalysis
from core.reporting import render_cwv_report, render_cwv_dashboard
from core.sources import get_metrics_source

logger = logging.getLogger(__name__)

CWV_HISTORY_FILE = "history/cwv-history.json"


class CWVCommand(BaseCommand):
    """Core Web Vitals monitoring: analyze, dashboard, alerts, report."""

    subcommands = ['analyze', 'dashboard', 'alerts', 'report']

    def execute(self, subcommand: Optional[str], args: Namespace) -> int:
        """Execute cwv mode; no mode or an unknown one runs the full report."""
        subcommand = subcommand or 'report'
        if subcommand not in self.subcommands:
            self.logger.warning(f"Unknown cwv mode '{subcommand}', running the full report")
            subcommand = 'report'

        try:
            return self.run_mode(subcommand, args)
        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e, f"cwv {subcommand}")

    @property
    def history(self) -> TrendHistory:
        config = self.config
        return TrendHistory(config.reporting.reports_path / CWV_HISTORY_FILE,
                            limit=config.reporting.trend_history_limit)

    def analyze(self, args: Namespace) -> Tuple[CWVAnalysis, Dict[str, Any]]:
        """Fetch a snapshot, analyze it and build the report dict."""
        config = self.config
        alerts_config = config.alerts

        with self.metrics.time_operation("fetch_snapshot"):
            source = get_metrics_source(
                config,
                source_name=getattr(args, 'source', 'simulated') or 'simulated',
                snapshot_path=getattr(args, 'snapshot', None),
                seed=getattr(args, 'seed', None)
            )
            snapshot = source.fetch_snapshot()

        with self.metrics.time_operation("cwv_analysis"):
            analysis = analyze_metrics(
                snapshot,
                critical_percent=alerts_config.critical_percent,
                warning_percent=alerts_config.warning_percent,
                history=self.history.values('aggregate_good')
            )

        generated_at = self.now().isoformat()
        report = build_report(
            snapshot, analysis, generated_at,
            critical_percent=alerts_config.critical_percent,
            warning_percent=alerts_config.warning_percent
        )

        self.metrics.record_stat("pages_analyzed", analysis.summary.total_pages)
        self.metrics.record_stat("alerts_raised", len(analysis.alerts))
        return analysis, report

    def run_mode(self, mode: str, args: Namespace) -> int:
        print("\n🚀 Core Web Vitals Production Monitoring System")
        print("═" * 59)

        self.start_run(f"cwv {mode}")
        analysis, report = self.analyze(args)

        if mode == 'analyze':
            print("\n✅ Analysis complete!")
            print(f"Total issues found: {len(report['issues'])}")
            print(f"Recommendations: {len(report['recommendations'])}")
        elif mode == 'dashboard':
            self.write_dashboard(report)
        elif mode == 'alerts':
            self.write_alerts(analysis)
        else:
            self.write_report(report)
            self.write_dashboard(report)
            self.write_alerts(analysis)
            size = self.history.append(history_snapshot(analysis, report['timestamp']))
            print(f"📈 Trend history: {size} snapshots")
            print()
            print(format_cwv_summary(report))

        if getattr(args, 'slack', False):
            self.send_slack(report)

        self.end_run(success=True)
        return 0

    def write_report(self, report: Dict[str, Any]) -> None:
        with self.metrics.time_operation("write_report"):
            json_path = self.writer.write_json('', 'cwv-monitoring-report', report)
            md_path = self.writer.write_markdown('', 'cwv-monitoring-report', render_cwv_report(report))
        self.metrics.increment_stat("reports_written", 2)
        print(f"✅ Report saved: {json_path}")
        print(f"✅ Markdown report: {md_path}")

    def write_dashboard(self, report: Dict[str, Any]) -> None:
        with self.metrics.time_operation("render_dashboard"):
            path = self.writer.write_html('dashboards', 'cwv-dashboard', render_cwv_dashboard(report), latest=True)
        self.metrics.increment_stat("reports_written")
        print(f"✅ Dashboard generated: {path}")
        print(f"✅ Latest dashboard: {path.parent / 'latest.html'}")

    def write_alerts(self, analysis: CWVAnalysis) -> None:
        grouped = group_alerts(analysis)
        print("\n🔔 Checking for performance alerts...\n")
        print(format_alert_lines(grouped))
        path = self.writer.write_json('alerts', 'alerts', grouped)
        self.metrics.increment_stat("reports_written")
        print(f"\n📄 Alerts saved to: {path}")

    def send_slack(self, report: Dict[str, Any]) -> bool:
        """Send the alert summary; failures are reported, not raised."""
        try:
            notifier = self.create_slack_notifier()
        except ValueError as e:
            self.logger.warning(f"Slack not sent: {e}")
            print(f"⚠️  Slack not configured: {e}")
            return False

        with self.metrics.time_operation("slack_notification"):
            sent = notifier.send_cwv_alerts(report)
        self.metrics.record_stat("slack_sent", sent)
        print("✅ Alerts sent to Slack" if sent else "❌ Failed to send alerts to Slack")
        return sent
