#!/usr/bin/env python3
"""
A/B experiment monitoring command.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.analysis.experiment_monitor import ExperimentMonitor, load_experiments
from core.formatters import format_experiment_summary
from core.reporting import render_experiment_report

logger = logging.getLogger(__name__)


class ExperimentsCommand(BaseCommand):
    """Monitor live A/B experiments and plan rollouts for winners."""

    subcommands = ['monitor']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute experiments subcommand."""
        try:
            if subcommand == "monitor":
                return self.monitor(args)
            else:
                return self.unknown_subcommand(subcommand)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e, f"experiments {subcommand}")

    def monitor(self, args: Namespace) -> int:
        config = self.config
        experiments_file = getattr(args, 'file', None) or config.reporting.experiments_file
        seed = getattr(args, 'seed', None)
        if seed is None:
            seed = config.reporting.simulation_seed

        print("🧪 Monitoring live experiments...")
        self.start_run("experiments monitor")

        now = self.now()
        with self.metrics.time_operation("load_experiments"):
            experiments = load_experiments(experiments_file, now=now)

        if not experiments:
            print("No live experiments to monitor.")
            self.end_run(success=True)
            return 0

        monitor = ExperimentMonitor(experiments, seed=seed, clock=lambda: now)
        with self.metrics.time_operation("experiment_analysis"):
            report = monitor.run()

        with self.metrics.time_operation("write_report"):
            json_path = self.writer.write_json('experiments', 'experiment-report', report, latest=True)
            md_path = self.writer.write_markdown('experiments', 'experiment-report', render_experiment_report(report))
        self.metrics.increment_stat("reports_written", 2)

        print(format_experiment_summary(report))
        print(f"\n✅ Report saved: {json_path}")
        print(f"✅ Markdown report: {md_path}")

        if getattr(args, 'slack', False):
            try:
                sent = self.create_slack_notifier().send_experiment_summary(report)
                self.metrics.record_stat("slack_sent", sent)
                print("✅ Summary sent to Slack" if sent else "❌ Failed to send summary to Slack")
            except ValueError as e:
                self.logger.warning(f"Slack not sent: {e}")
                print(f"⚠️  Slack not configured: {e}")

        self.end_run(success=True)
        return 0
