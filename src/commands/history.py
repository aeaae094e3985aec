#!/usr/bin/env python3
"""
Trend history and run statistics command.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from .cwv import CWV_HISTORY_FILE
from .strategy import STRATEGY_HISTORY_FILE
from core.history import TrendHistory

logger = logging.getLogger(__name__)

HISTORY_FILES = {
    'cwv': CWV_HISTORY_FILE,
    'strategy': STRATEGY_HISTORY_FILE
}


class HistoryCommand(BaseCommand):
    """Inspect stored trend history and run statistics."""

    subcommands = ['show', 'stats']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute history subcommand."""
        try:
            if subcommand == "show":
                return self.show(args)
            elif subcommand == "stats":
                return self.stats(args)
            else:
                return self.unknown_subcommand(subcommand)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e, f"history {subcommand}")

    def _history(self, kind: str) -> TrendHistory:
        config = self.config
        return TrendHistory(config.reporting.reports_path / HISTORY_FILES[kind],
                            limit=config.reporting.trend_history_limit)

    def show(self, args: Namespace) -> int:
        kind = getattr(args, 'kind', 'cwv') or 'cwv'
        limit = getattr(args, 'limit', 10)
        if limit < 1:
            raise ValueError(f"--limit must be at least 1, got {limit}")
        snapshots = self._history(kind).load()

        print(f"\n=== {kind.upper()} Trend History ({len(snapshots)} snapshots) ===")
        if not snapshots:
            print("No history recorded yet.")
            return 0

        for snapshot in snapshots[-limit:]:
            if kind == 'cwv':
                good = ", ".join(f"{m.upper()} {v}%" for m, v in snapshot.get('aggregate_good', {}).items())
                print(
                    f"📅 {snapshot['date']} | 🚨 {snapshot.get('critical_alerts', 0)} critical "
                    f"| ⚠️  {snapshot.get('warning_alerts', 0)} warnings | {good}"
                )
            else:
                strategy = snapshot.get('strategy', {})
                print(
                    f"📅 {snapshot['date']} | velocity {snapshot.get('velocity')} "
                    f"| effectiveness {snapshot.get('effectiveness')} | roi {snapshot.get('roi')} "
                    f"| saturation {snapshot.get('saturation')}% "
                    f"| {strategy.get('frequency')}/{strategy.get('scope')}/{strategy.get('focus')}"
                )
        return 0

    def stats(self, args: Namespace) -> int:
        days = getattr(args, 'days', 7)
        if days < 1:
            raise ValueError(f"--days must be at least 1, got {days}")

        print(f"\n=== Run Statistics - Last {days} Days ===")
        for kind in HISTORY_FILES:
            print(f"📈 {kind} history: {len(self._history(kind))} snapshots")

        summary = self.metrics.get_summary_stats(days)
        if 'error' in summary:
            print(f"ℹ️  {summary['error']}")
            return 0

        totals = summary['totals']
        averages = summary['averages']
        print(f"📊 Total runs: {totals['runs']} ({totals['successful_runs']} ok, {totals['failed_runs']} failed)")
        print(f"✅ Success rate: {totals['success_rate']:.1f}%")
        print(f"📄 Pages analyzed: {totals['pages_analyzed']}")
        print(f"🚨 Alerts raised: {totals['alerts_raised']} ({averages['alerts_per_run']:.1f} per run)")
        print(f"⏱️  Average runtime: {averages['runtime_seconds']:.2f}s")
        return 0
