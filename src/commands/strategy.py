#!/usr/bin/env python3
"""
Iteration strategy optimization command.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.analysis.strategy_optimizer import StrategyOptimizer, load_strategy_input
from core.formatters import format_strategy_summary
from core.history import TrendHistory
from core.reporting import render_strategy_report
from core.sources import simulate_iterations

logger = logging.getLogger(__name__)

STRATEGY_HISTORY_FILE = "iterations/trend-data.json"


class StrategyCommand(BaseCommand):
    """Analyze iteration history and recommend the next iteration strategy."""

    subcommands = ['optimize']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute strategy subcommand."""
        try:
            if subcommand == "optimize":
                return self.optimize(args)
            else:
                return self.unknown_subcommand(subcommand)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e, f"strategy {subcommand}")

    def optimize(self, args: Namespace) -> int:
        config = self.config
        reports_path = config.reporting.reports_path
        simulate = getattr(args, 'simulate', None)

        print("🎯 Optimizing iteration strategy...")
        self.start_run("strategy optimize")

        with self.metrics.time_operation("load_iterations"):
            if simulate:
                seed = getattr(args, 'seed', None)
                if seed is None:
                    seed = config.reporting.simulation_seed
                data = simulate_iterations(simulate, seed=seed)
                print(f"   Simulated {simulate} iterations")
            else:
                data = load_strategy_input(reports_path)

        with self.metrics.time_operation("strategy_analysis"):
            report = StrategyOptimizer().build_report(data, self.now().isoformat())

        with self.metrics.time_operation("write_report"):
            json_path = self.writer.write_json('iterations', 'strategy-optimization', report, dated=False)
            md_path = self.writer.write_markdown('iterations', 'strategy-optimization',
                                                 render_strategy_report(report), dated=False)
        self.metrics.increment_stat("reports_written", 2)

        history = TrendHistory(reports_path / STRATEGY_HISTORY_FILE, limit=config.reporting.trend_history_limit)
        size = history.append(StrategyOptimizer.trend_snapshot(report))

        print(format_strategy_summary(report))
        print(f"\n✅ Report saved: {json_path}")
        print(f"✅ Markdown report: {md_path}")
        print(f"📈 Trend history: {size} snapshots")

        self.end_run(success=True)
        return 0
