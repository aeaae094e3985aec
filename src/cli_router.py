#!/usr/bin/env python3
"""
CLI Router for the Landing Insights toolkit.

Modular command architecture for landing-page performance monitoring.
"""

import argparse
import logging
import sys
from typing import Optional, List

# Load environment variables first
import core.env_loader  # noqa: F401  loads .env on import

from core.config import get_config_manager
from commands import get_command, COMMANDS

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for landing insights commands.

    Command structure:
    - python run.py cwv                      (full report)
    - python run.py cwv alerts --slack
    - python run.py experiments monitor
    - python run.py strategy optimize --simulate 8
    """

    def __init__(self):
        """Initialize CLI router."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Landing page performance monitoring and optimization insights",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )
        parser.add_argument('--verbose', action='store_true', help='Verbose (DEBUG) logging')

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_cwv_parser(subparsers)
        self._add_experiments_parser(subparsers)
        self._add_quality_parser(subparsers)
        self._add_strategy_parser(subparsers)
        self._add_history_parser(subparsers)
        self._add_integrations_parser(subparsers)
        self._add_health_parser(subparsers)
        self.command_parsers = subparsers.choices

        return parser

    def _add_cwv_parser(self, subparsers):
        """Add cwv command parser."""
        cwv_parser = subparsers.add_parser(
            'cwv',
            help='Core Web Vitals analysis, dashboard, alerts and reports'
        )
        cwv_parser.add_argument(
            'subcommand', nargs='?', default='report',
            help='Mode to run: analyze, dashboard, alerts or report (default: report, which runs everything)'
        )
        cwv_parser.add_argument('--slack', action='store_true', help='Send the alert summary to Slack')
        cwv_parser.add_argument('--source', choices=['simulated', 'file'], default='simulated',
                                help='Metrics source (default: simulated)')
        cwv_parser.add_argument('--snapshot', help='Snapshot JSON file for --source file')
        cwv_parser.add_argument('--seed', type=int, default=None, help='Seed for simulated measurements')

    def _add_experiments_parser(self, subparsers):
        """Add experiments command parser."""
        experiments_parser = subparsers.add_parser(
            'experiments',
            help='A/B experiment monitoring and rollout planning'
        )

        experiments_subparsers = experiments_parser.add_subparsers(
            dest='subcommand',
            help='Experiment operations',
            metavar='{monitor}'
        )

        monitor_parser = experiments_subparsers.add_parser('monitor', help='Check live experiments for significance')
        monitor_parser.add_argument('--file', help='Experiments JSON file (default: built-in experiments)')
        monitor_parser.add_argument('--seed', type=int, default=None, help='Seed for simulated experiment data')
        monitor_parser.add_argument('--slack', action='store_true', help='Send the summary to Slack')

    def _add_quality_parser(self, subparsers):
        """Add quality command parser."""
        quality_parser = subparsers.add_parser(
            'quality',
            help='Landing page quality scoring'
        )

        quality_subparsers = quality_parser.add_subparsers(
            dest='subcommand',
            help='Quality operations',
            metavar='{score}'
        )

        score_parser = quality_subparsers.add_parser('score', help='Score pages against quality targets')
        score_parser.add_argument('--target', type=float, default=None, help='Overall score target (default: 95)')

    def _add_strategy_parser(self, subparsers):
        """Add strategy command parser."""
        strategy_parser = subparsers.add_parser(
            'strategy',
            help='Iteration strategy optimization'
        )

        strategy_subparsers = strategy_parser.add_subparsers(
            dest='subcommand',
            help='Strategy operations',
            metavar='{optimize}'
        )

        optimize_parser = strategy_subparsers.add_parser('optimize', help='Recommend the next iteration strategy')
        optimize_parser.add_argument('--simulate', type=int, metavar='N', default=None,
                                     help='Use N simulated iterations instead of stored reports')
        optimize_parser.add_argument('--seed', type=int, default=None, help='Seed for simulated iterations')

    def _add_history_parser(self, subparsers):
        """Add history command parser."""
        history_parser = subparsers.add_parser(
            'history',
            help='Trend history and run statistics'
        )

        history_subparsers = history_parser.add_subparsers(
            dest='subcommand',
            help='History operations',
            metavar='{show,stats}'
        )

        show_parser = history_subparsers.add_parser('show', help='Show stored trend snapshots')
        show_parser.add_argument('--kind', choices=['cwv', 'strategy'], default='cwv', help='History to show')
        show_parser.add_argument('--limit', type=int, default=10, help='Snapshots to show (default: 10)')

        stats_parser = history_subparsers.add_parser('stats', help='Show run statistics')
        stats_parser.add_argument('--days', type=int, default=7, help='Days to include (default: 7)')

    def _add_integrations_parser(self, subparsers):
        """Add integrations command parser."""
        integrations_parser = subparsers.add_parser(
            'integrations',
            help='External integration management'
        )

        integrations_subparsers = integrations_parser.add_subparsers(
            dest='subcommand',
            help='Integration operations',
            metavar='{status,slack}'
        )

        integrations_subparsers.add_parser('status', help='Show integration status')

        slack_parser = integrations_subparsers.add_parser('slack', help='Slack integration management')
        slack_parser.add_argument('--action', choices=['test', 'send'], default='test', help='Action to perform')
        slack_parser.add_argument('--message', help='Message to send (for send action)')

    def _add_health_parser(self, subparsers):
        """Add health command parser."""
        health_parser = subparsers.add_parser(
            'health',
            help='System health monitoring and diagnostics'
        )

        health_subparsers = health_parser.add_subparsers(
            dest='subcommand',
            help='Health operations',
            metavar='{check}'
        )

        health_subparsers.add_parser('check', help='Run comprehensive health check')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  # Full Core Web Vitals run: report, dashboard, alerts, history
  python run.py cwv
  python run.py cwv --slack

  # Single modes
  python run.py cwv analyze --seed 42
  python run.py cwv dashboard
  python run.py cwv alerts --source file --snapshot snapshot.json

  # Experiments, quality and strategy
  python run.py experiments monitor
  python run.py quality score --target 90
  python run.py strategy optimize --simulate 8

  # Other commands
  python run.py history show --kind strategy
  python run.py integrations status
  python run.py health check

"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args, extra = self.parser.parse_known_args(args)
            if extra:
                if parsed_args.command != 'cwv':
                    self.parser.error(f"unrecognized arguments: {' '.join(extra)}")
                # cwv falls back to a full run on anything it does not recognize
                logger.warning(f"Ignoring unrecognized cwv arguments: {' '.join(extra)}")

            if parsed_args.verbose:
                logging.getLogger().setLevel(logging.DEBUG)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self.command_parsers[args.command].print_help()
            return 1

        try:
            command = get_command(args.command)
            return command.execute(subcommand, args)
        except Exception as e:
            logger.error(f"Error executing {args.command} {subcommand}: {e}", exc_info=True)
            return 1


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        get_config_manager().update_logging()
    except ValueError as e:
        # Commands report invalid configuration with their own exit codes
        logger.warning(f"Using default logging: {e}")

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
