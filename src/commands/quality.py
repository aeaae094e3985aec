#!/usr/bin/env python3
"""
Landing page quality scoring command.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.analysis.quality_scorer import QualityScorer
from core.formatters import format_quality_summary
from core.reporting import render_quality_report

logger = logging.getLogger(__name__)


class QualityCommand(BaseCommand):
    """Score landing pages against the quality targets."""

    subcommands = ['score']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute quality subcommand."""
        try:
            if subcommand == "score":
                return self.score(args)
            else:
                return self.unknown_subcommand(subcommand)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e, f"quality {subcommand}")

    def score(self, args: Namespace) -> int:
        target = getattr(args, 'target', None)
        scorer = QualityScorer(targets={'overall': target} if target is not None else None)

        self.start_run("quality score")
        with self.metrics.time_operation("quality_analysis"):
            report = scorer.analyze(self.now().isoformat())
        self.metrics.record_stat("pages_analyzed", report['summary']['total_pages'])

        with self.metrics.time_operation("write_report"):
            json_path = self.writer.write_json('quality', 'quality-report', report, latest=True)
            md_path = self.writer.write_markdown('quality', 'quality-report', render_quality_report(report))
        self.metrics.increment_stat("reports_written", 2)

        print(format_quality_summary(report))
        print(f"\n✅ Report saved: {json_path}")
        print(f"✅ Markdown report: {md_path}")

        self.end_run(success=True)
        return 0
