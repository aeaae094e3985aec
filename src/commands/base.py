#!/usr/bin/env python3
"""
Base command class for the modular command architecture.

Provides common functionality and interface that all commands inherit.
Uses dependency injection for better testability and maintainability.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from argparse import Namespace
from core.container import get_container

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all command endpoints.

    Provides common infrastructure like configuration, report writing,
    metrics collection and error handling. Uses the dependency injection
    container for managing service instances.
    """

    subcommands: List[str] = []

    def __init__(self, container=None):
        """
        Initialize base command with dependency injection container.

        Args:
            container: Optional container instance. If None, uses global container.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._container = container or get_container()
        self._tracking = False

    @property
    def config(self):
        """Get configuration from container."""
        return self._container.get('config')

    @property
    def writer(self):
        """Get report writer from container."""
        return self._container.get('report_writer')

    @property
    def metrics(self):
        """Get metrics collector from container."""
        return self._container.get('metrics_collector')

    def create_slack_notifier(self):
        """Create new Slack notifier instance."""
        return self._container.get('slack_notifier')

    def now(self) -> datetime:
        """Current time in the configured report timezone."""
        return datetime.now(self.config.tz)

    def generate_run_id(self) -> str:
        return self.now().strftime('%Y%m%d_%H%M%S')

    def start_run(self, command: str) -> str:
        """Start run tracking; the record is stored by end_run."""
        run_id = self.generate_run_id()
        self.metrics.start_run(run_id, command)
        self._tracking = True
        return run_id

    def end_run(self, success: bool = True):
        self._tracking = False
        return self.metrics.end_run(success=success)

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def get_available_subcommands(self) -> List[str]:
        """Get list of available subcommands for this command."""
        return list(self.subcommands)

    def unknown_subcommand(self, subcommand: str) -> int:
        available = ", ".join(self.get_available_subcommands())
        self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
        return 1

    def handle_error(self, error: BaseException, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        if self._tracking:
            self.end_run(success=False)

        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130

        error_msg = f"{context}: {error}" if context else str(error)
        self.logger.error(error_msg, exc_info=True)

        # Map common exceptions to exit codes
        if isinstance(error, FileNotFoundError):
            return 2
        elif isinstance(error, PermissionError):
            return 13
        elif isinstance(error, ValueError):
            return 22
        else:
            return 1

